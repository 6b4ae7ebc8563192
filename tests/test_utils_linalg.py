"""Tests for stencilkit.utils.linalg."""

from __future__ import annotations

from fractions import Fraction as F

import pytest

from stencilkit.utils.linalg import (
    as_rational_matrix,
    mat_vec,
    null_space,
    rref,
)


def test_rref_full_rank_gives_identity():
    """Tests that a nonsingular matrix reduces to the identity."""
    reduced, pivots = rref([[1, 2], [3, 4]])
    assert reduced == [[1, 0], [0, 1]]
    assert pivots == (0, 1)


def test_rref_is_exact_with_factorial_denominators():
    """Tests that elimination with 1/t! entries stays exact."""
    matrix = [[1, 1, 1], [F(1, 2), 0, F(1, 2)]]
    reduced, pivots = rref(matrix)
    assert reduced == [[1, 0, 1], [0, 1, 0]]
    assert pivots == (0, 1)
    assert all(isinstance(v, F) for row in reduced for v in row)


def test_rref_does_not_modify_input():
    """Tests that the input matrix is left untouched."""
    matrix = [[F(2), F(4)], [F(1), F(3)]]
    rref(matrix)
    assert matrix == [[2, 4], [1, 3]]


def test_null_space_basis_in_free_column_order():
    """Tests that one basis vector per free column is produced, in column order."""
    basis = null_space([[1, 1, 1]])
    assert basis == [(-1, 1, 0), (-1, 0, 1)]


def test_null_space_vectors_are_annihilated():
    """Tests that every basis vector lies in the null space."""
    matrix = [[1, 1, 1, 1], [-2, -1, 1, 2]]
    basis = null_space(matrix)
    assert len(basis) == 2
    for vec in basis:
        assert mat_vec(matrix, vec) == (0, 0)


def test_null_space_trivial_and_rowless():
    """Tests the trivial null space and the matrix with no rows."""
    assert null_space([[1, 0], [0, 1]]) == []
    assert null_space([], 2) == [(1, 0), (0, 1)]
    with pytest.raises(ValueError):
        null_space([])


def test_as_rational_matrix_rejects_ragged_rows():
    """Tests that ragged input raises ValueError."""
    with pytest.raises(ValueError):
        as_rational_matrix([[1, 2], [3]])
