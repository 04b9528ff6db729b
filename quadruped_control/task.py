"""Linear tasks for whole-body control: equalities A x = b and inequalities D x <= f."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike


def concatenate_matrices(m1: ArrayLike, m2: ArrayLike) -> np.ndarray:
    """Stack two matrices vertically; a matrix without columns is ignored."""
    first = np.asarray(m1, dtype=float)
    second = np.asarray(m2, dtype=float)
    if first.ndim != 2 or second.ndim != 2:
        raise ValueError("task matrices must be two-dimensional")
    if first.shape[1] == 0:
        return second
    if second.shape[1] == 0:
        return first
    if first.shape[1] != second.shape[1]:
        raise ValueError(
            f"cannot stack matrices with {first.shape[1]} and {second.shape[1]} columns"
        )
    return np.vstack((first, second))


def concatenate_vectors(v1: ArrayLike, v2: ArrayLike) -> np.ndarray:
    """Join two vectors end to end."""
    return np.concatenate(
        (np.asarray(v1, dtype=float).ravel(), np.asarray(v2, dtype=float).ravel())
    )


class Task:
    """A set of linear equality (a, b) and inequality (d, f) constraints."""

    def __init__(self, a: ArrayLike, b: ArrayLike, d: ArrayLike, f: ArrayLike) -> None:
        self.a = np.asarray(a, dtype=float)
        self.d = np.asarray(d, dtype=float)
        if self.a.ndim != 2 or self.d.ndim != 2:
            raise ValueError("task matrices a and d must be two-dimensional")
        self.b = np.asarray(b, dtype=float).ravel()
        self.f = np.asarray(f, dtype=float).ravel()

    @classmethod
    def empty(cls, num_decision_vars: int) -> "Task":
        """A task with no rows over ``num_decision_vars`` variables."""
        return cls(
            np.zeros((0, num_decision_vars)),
            np.zeros(0),
            np.zeros((0, num_decision_vars)),
            np.zeros(0),
        )

    def __add__(self, other: "Task") -> "Task":
        if not isinstance(other, Task):
            return NotImplemented
        return Task(
            concatenate_matrices(self.a, other.a),
            concatenate_vectors(self.b, other.b),
            concatenate_matrices(self.d, other.d),
            concatenate_vectors(self.f, other.f),
        )

    def __mul__(self, scale: float) -> "Task":
        if isinstance(scale, Task):
            return NotImplemented
        factor = float(scale)
        return Task(factor * self.a, factor * self.b, factor * self.d, factor * self.f)

    def __rmul__(self, scale: float) -> "Task":
        return self.__mul__(scale)

    def __repr__(self) -> str:
        return (
            f"Task(a={self.a.shape}, b={self.b.shape}, "
            f"d={self.d.shape}, f={self.f.shape})"
        )