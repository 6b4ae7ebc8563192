"""Exact linear algebra over the rationals.

Finite-difference systems are built from ``offset**t / t!`` entries whose
denominators grow factorially, so elimination is carried out on
:class:`fractions.Fraction` matrices only. Matrices are plain lists of rows.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Sequence

from stencilkit.utils.types import RationalMatrix, RationalVector

__all__ = [
    "as_rational_matrix",
    "rref",
    "null_space",
    "mat_vec",
]


def as_rational_matrix(matrix: Sequence[Sequence[object]]) -> RationalMatrix:
    """Copies a matrix into a list of ``Fraction`` rows.

    Raises:
        ValueError: If the rows do not all have the same length.
    """
    rows = [[Fraction(v) for v in row] for row in matrix]
    if rows and any(len(r) != len(rows[0]) for r in rows):
        raise ValueError("matrix rows must all have the same length.")
    return rows


def rref(matrix: Sequence[Sequence[object]]) -> tuple[RationalMatrix, tuple[int, ...]]:
    """Computes the reduced row-echelon form by Gauss-Jordan elimination.

    Pivots are chosen as the first nonzero entry of each column, scanning
    columns left to right, so the result only depends on the input.

    Args:
        matrix: Matrix with rational (or integer) entries.

    Returns:
        The reduced matrix and the indices of the pivot columns, ascending.
    """
    a = as_rational_matrix(matrix)
    n_rows = len(a)
    n_cols = len(a[0]) if a else 0

    pivots: list[int] = []
    r = 0
    for c in range(n_cols):
        if r == n_rows:
            break
        pivot = next((i for i in range(r, n_rows) if a[i][c] != 0), None)
        if pivot is None:
            continue
        a[r], a[pivot] = a[pivot], a[r]

        lead = a[r][c]
        a[r] = [v / lead for v in a[r]]
        for i in range(n_rows):
            if i != r and a[i][c] != 0:
                factor = a[i][c]
                a[i] = [vi - factor * vr for vi, vr in zip(a[i], a[r])]

        pivots.append(c)
        r += 1

    return a, tuple(pivots)


def null_space(
    matrix: Sequence[Sequence[object]],
    n_cols: int | None = None,
) -> list[RationalVector]:
    """Computes a basis of the null space of a rational matrix.

    One basis vector is produced per free column, in ascending column order:
    the free variable is set to 1, the other free variables to 0, and the
    pivot variables are read off the reduced row-echelon form.

    Args:
        matrix: Matrix with rational (or integer) entries.
        n_cols: Number of columns. Only needed when ``matrix`` has no rows.

    Returns:
        The basis vectors. An empty list means the null space is trivial.
    """
    reduced, pivots = rref(matrix)
    if n_cols is None:
        if not reduced:
            raise ValueError("n_cols is required for a matrix without rows.")
        n_cols = len(reduced[0])

    pivot_set = set(pivots)
    basis: list[RationalVector] = []
    for free in range(n_cols):
        if free in pivot_set:
            continue
        vec = [Fraction(0)] * n_cols
        vec[free] = Fraction(1)
        for row, p in enumerate(pivots):
            vec[p] = -reduced[row][free]
        basis.append(tuple(vec))
    return basis


def mat_vec(matrix: Sequence[Sequence[object]], vector: Sequence[object]) -> RationalVector:
    """Returns the exact product of a matrix and a vector."""
    x = [Fraction(v) for v in vector]
    return tuple(
        sum((Fraction(a) * b for a, b in zip(row, x)), Fraction(0)) for row in matrix
    )
