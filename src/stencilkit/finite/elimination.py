"""Exact elimination solver for finite-difference coefficients.

For a stencil ``s`` of length ``L`` and derivative order ``n`` the solver
looks for coefficients ``k`` with

    sum_p k_p * s_p**t / t! == 0      for t < n
    sum_p k_p * s_p**n / n! == m != 0

so that ``f^(n)(x) ~ sum_p k_p f(x + s_p h) / (m h**n)``. The constraints for
``t < n`` form the elimination matrix. Its null space is computed exactly and
the first basis vector (in column order) with a nonzero multiplier ``m`` is
taken.

When accuracy is maximized (the default) the higher-order rows
``t = n + 1, n + 2, ...`` are then appended one at a time as long as a basis
vector with nonzero multiplier survives, so the returned formula cancels as
many Taylor terms as the stencil allows.

Examples:
--------
>>> from stencilkit.finite.elimination import solve
>>> sol = solve(1, (-1, 0, 1))
>>> [int(k) for k in sol.coefficients], sol.multiplier
([-1, 0, 1], Fraction(2, 1))
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, Sequence

from stencilkit.exceptions import DegenerateStencil, NoSolutionAtThisStencil
from stencilkit.logger import stencilkit_logger
from stencilkit.taylor.series import taylor_term
from stencilkit.utils.linalg import mat_vec, null_space
from stencilkit.utils.types import RationalLike, RationalMatrix, RationalVector, Stencil

__all__ = [
    "EliminationSolution",
    "build_elimination_matrix",
    "multiplier",
    "select_basis_vector",
    "canonicalize",
    "elimination_residuals",
    "solve",
]


@dataclass(frozen=True)
class EliminationSolution:
    """Canonical coefficients and multiplier of a derived formula."""

    coefficients: RationalVector
    multiplier: Fraction


def validate_order(order: int) -> int:
    """Checks that a derivative order is a positive integer.

    Raises:
        ValueError: If ``order`` is not a positive integer.
    """
    if isinstance(order, bool) or not isinstance(order, numbers.Integral):
        raise ValueError(f"derivative order must be an integer; got {order!r}.")
    if order < 1:
        raise ValueError(f"derivative order must be positive; got {order}.")
    return int(order)


def build_elimination_matrix(
    order: int,
    stencil: Stencil,
    *,
    rows: Iterable[int] | None = None,
) -> RationalMatrix:
    """Builds the elimination matrix.

    Args:
        order: Derivative order ``n``.
        stencil: Normalized stencil.
        rows: Taylor orders to use as rows. Defaults to ``0, ..., n - 1``.

    Returns:
        One row per Taylor order ``t`` holding ``s_p**t / t!`` for every offset.
    """
    if rows is None:
        rows = range(order)
    return [[taylor_term(j, t) for j in stencil] for t in rows]


def multiplier(
    coefficients: Sequence[RationalLike],
    stencil: Stencil,
    order: int,
) -> Fraction:
    """Returns ``sum_p k_p * s_p**order / order!``."""
    return sum(
        (Fraction(k) * taylor_term(j, order) for k, j in zip(coefficients, stencil)),
        Fraction(0),
    )


def select_basis_vector(
    matrix: RationalMatrix,
    stencil: Stencil,
    order: int,
) -> tuple[RationalVector, Fraction]:
    """Picks the first null-space basis vector with a nonzero multiplier.

    Args:
        matrix: Elimination matrix with one column per stencil offset.
        stencil: Normalized stencil.
        order: Derivative order the multiplier is taken at.

    Returns:
        The chosen basis vector and its multiplier.

    Raises:
        NoSolutionAtThisStencil: If the null space is trivial.
        DegenerateStencil: If every basis vector has a zero multiplier.
    """
    basis = null_space(matrix, len(stencil))
    if not basis:
        raise NoSolutionAtThisStencil(
            f"[Elimination] no nonzero coefficients satisfy the {len(matrix)} "
            f"elimination constraints for derivative order {order} on stencil "
            f"{list(stencil)}.",
            order=order,
            stencil=stencil,
        )

    for vec in basis:
        m = multiplier(vec, stencil, order)
        if m != 0:
            return vec, m

    raise DegenerateStencil(
        f"[Elimination] the derivative of order {order} cannot be formed from "
        f"stencil {list(stencil)}: every null-space direction has a zero multiplier.",
        order=order,
        stencil=stencil,
    )


def canonicalize(
    coefficients: Sequence[RationalLike],
    stencil: Stencil,
    order: int,
) -> EliminationSolution:
    """Brings coefficients to canonical form.

    The coefficients are scaled to coprime integers (common-denominator
    normalization) and the multiplier is recomputed; if it comes out
    negative, both are negated.

    Raises:
        ValueError: If all coefficients are zero or the multiplier vanishes.
    """
    fracs = [Fraction(k) for k in coefficients]
    if not any(fracs):
        raise ValueError("cannot canonicalize an all-zero coefficient vector.")

    scale = math.lcm(*(k.denominator for k in fracs))
    ints = [int(k * scale) for k in fracs]
    ints = [k // math.gcd(*ints) for k in ints]

    m = multiplier(ints, stencil, order)
    if m == 0:
        raise ValueError("cannot canonicalize a formula with zero multiplier.")
    if m < 0:
        ints = [-k for k in ints]
        m = -m

    return EliminationSolution(tuple(Fraction(k) for k in ints), m)


def elimination_residuals(
    order: int,
    stencil: Stencil,
    coefficients: Sequence[RationalLike],
    multiplier_: RationalLike,
) -> dict[int, Fraction]:
    """Evaluates the elimination equations for a candidate formula.

    Returns:
        Mapping from Taylor order ``t`` (``0 <= t <= order``) to the residual
        of that equation; only the violated equations are included. An empty
        mapping means the candidate satisfies every equation.
    """
    m = Fraction(multiplier_)
    rows = build_elimination_matrix(order, stencil, rows=range(order + 1))
    out: dict[int, Fraction] = {}
    for t, value in enumerate(mat_vec(rows, coefficients)):
        residual = value - (m if t == order else 0)
        if residual != 0:
            out[t] = residual
    return out


def solve(
    order: int,
    stencil: Stencil,
    *,
    maximize_accuracy: bool = True,
) -> EliminationSolution:
    """Derives the canonical finite-difference formula for a stencil.

    Args:
        order: Derivative order ``n`` (positive).
        stencil: Normalized stencil.
        maximize_accuracy: Keep eliminating higher-order Taylor terms after
            the derivative constraints are met.

    Returns:
        The canonical coefficients and positive multiplier.

    Raises:
        ValueError: If ``order`` is not a positive integer.
        NoSolutionAtThisStencil: If the elimination matrix has full column rank.
        DegenerateStencil: If no null-space direction produces the derivative.
    """
    order = validate_order(order)
    stencil = tuple(stencil)

    rows = list(range(order))
    vec, _ = select_basis_vector(build_elimination_matrix(order, stencil, rows=rows), stencil, order)

    if maximize_accuracy:
        for t in range(order + 1, len(stencil)):
            matrix = build_elimination_matrix(order, stencil, rows=rows + [t])
            try:
                vec, _ = select_basis_vector(matrix, stencil, order)
            except (NoSolutionAtThisStencil, DegenerateStencil):
                stencilkit_logger.debug(
                    "Stopped eliminating at Taylor order %d for stencil %s.", t, list(stencil)
                )
                break
            rows.append(t)

    return canonicalize(vec, stencil, order)
