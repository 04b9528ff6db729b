import numpy as np
import pytest

from quadruped_control.task import Task, concatenate_matrices, concatenate_vectors


def make_task(offset=0.0):
    return Task(
        np.array([[1.0, 2.0, 3.0]]) + offset,
        np.array([4.0]) + offset,
        np.array([[5.0, 6.0, 7.0], [8.0, 9.0, 10.0]]) + offset,
        np.array([11.0, 12.0]) + offset,
    )


def test_empty_task_shapes():
    task = Task.empty(5)
    assert task.a.shape == (0, 5)
    assert task.d.shape == (0, 5)
    assert task.b.shape == (0,)
    assert task.f.shape == (0,)


def test_addition_stacks_rows():
    first = make_task()
    second = make_task(100.0)
    total = first + second
    assert total.a.shape == (2, 3)
    assert total.d.shape == (4, 3)
    np.testing.assert_array_equal(total.a[1], second.a[0])
    np.testing.assert_array_equal(total.b, [4.0, 104.0])
    np.testing.assert_array_equal(total.f, [11.0, 12.0, 111.0, 112.0])


def test_adding_empty_task_keeps_contents():
    task = make_task()
    for total in (Task.empty(3) + task, task + Task.empty(3)):
        np.testing.assert_array_equal(total.a, task.a)
        np.testing.assert_array_equal(total.b, task.b)
        np.testing.assert_array_equal(total.d, task.d)
        np.testing.assert_array_equal(total.f, task.f)


def test_addition_with_column_mismatch_raises():
    with pytest.raises(ValueError):
        make_task() + Task(np.ones((1, 2)), [0.0], np.ones((1, 2)), [0.0])


def test_scaling_multiplies_everything():
    task = make_task()
    scaled = task * 2.0
    np.testing.assert_array_equal(scaled.a, 2.0 * task.a)
    np.testing.assert_array_equal(scaled.b, 2.0 * task.b)
    np.testing.assert_array_equal(scaled.d, 2.0 * task.d)
    np.testing.assert_array_equal(scaled.f, 2.0 * task.f)


def test_right_multiplication_matches_left():
    task = make_task()
    left = task * 0.5
    right = 0.5 * task
    np.testing.assert_array_equal(left.a, right.a)
    np.testing.assert_array_equal(left.f, right.f)


def test_scaling_empty_task_keeps_shape():
    scaled = Task.empty(4) * 3.0
    assert scaled.a.shape == (0, 4)
    assert scaled.b.shape == (0,)


def test_task_requires_two_dimensional_matrices():
    with pytest.raises(ValueError):
        Task([1.0, 2.0], [1.0], np.ones((1, 2)), [1.0])


def test_concatenate_matrices_ignores_columnless_matrix():
    other = np.arange(6.0).reshape(2, 3)
    np.testing.assert_array_equal(concatenate_matrices(np.zeros((0, 0)), other), other)
    np.testing.assert_array_equal(concatenate_matrices(other, np.zeros((3, 0))), other)


def test_concatenate_matrices_stacks():
    result = concatenate_matrices(np.ones((1, 2)), np.zeros((2, 2)))
    assert result.shape == (3, 2)
    np.testing.assert_array_equal(result[0], [1.0, 1.0])


def test_concatenate_vectors_joins():
    np.testing.assert_array_equal(concatenate_vectors([1.0, 2.0], [3.0]), [1.0, 2.0, 3.0])
    np.testing.assert_array_equal(concatenate_vectors([], [3.0]), [3.0])