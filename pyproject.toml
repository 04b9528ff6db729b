[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quadruped_control"
version = "0.1.0"
description = "State estimation, terrain estimation, stand-up, target and gait management building blocks for quadruped robot controllers"
requires-python = ">=3.10"
keywords = [
    "quadruped",
    "legged robot",
    "kalman filter",
    "state estimation",
    "terrain estimation",
    "gait",
    "robotics",
    "control",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["quadruped_control"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
