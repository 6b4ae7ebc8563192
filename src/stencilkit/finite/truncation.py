"""Formal truncation error of a finite-difference formula.

Combining the Taylor series of every stencil point with the formula's
coefficients leaves ``m * h**n * f^(n)`` plus higher-order remainders. The
first nonzero remainder, at Taylor order ``q > n``, sets the formal error
``O(h**(q - n))``.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Sequence

from stencilkit.config import DEFAULT_MAX_TERMS
from stencilkit.exceptions import InsufficientTerms
from stencilkit.taylor.series import combine_series
from stencilkit.utils.types import RationalLike, Stencil

__all__ = [
    "leading_error_coefficient",
    "truncation_order",
]


def leading_error_coefficient(
    order: int,
    stencil: Stencil,
    coefficients: Sequence[RationalLike],
    *,
    max_terms: int = DEFAULT_MAX_TERMS,
) -> tuple[int, Fraction]:
    """Finds the first nonzero Taylor term beyond the derivative order.

    The combined series is generated with a growing number of terms, starting
    just past the stencil length and doubling, but never past ``max_terms``.

    Args:
        order: Derivative order ``n``.
        stencil: Normalized stencil.
        coefficients: Formula coefficients aligned with ``stencil``.
        max_terms: Term ceiling in force.

    Returns:
        The Taylor order ``q`` of the leading error term and its coefficient
        in the combined series.

    Raises:
        InsufficientTerms: If every term up to the ceiling vanishes.
    """
    pairs = list(zip(coefficients, stencil))
    num_terms = min(max(order + 2, len(stencil) + 1), max_terms)

    while True:
        if num_terms > order + 1:
            series = combine_series(pairs, num_terms, max_terms=max_terms)
            for q in range(order + 1, num_terms):
                if series[q] != 0:
                    return q, series[q]
        if num_terms >= max_terms:
            break
        num_terms = min(2 * num_terms, max_terms)

    raise InsufficientTerms(
        f"[Truncation] no nonzero error term within max_terms={max_terms} Taylor terms "
        f"for derivative order {order} on stencil {list(stencil)}; raise the term ceiling.",
        max_terms=max_terms,
    )


def truncation_order(
    order: int,
    stencil: Stencil,
    coefficients: Sequence[RationalLike],
    *,
    max_terms: int = DEFAULT_MAX_TERMS,
) -> int:
    """Returns ``p`` such that the formula's error is ``O(h**p)``.

    Raises:
        InsufficientTerms: If every term up to the ceiling vanishes.
    """
    q, _ = leading_error_coefficient(order, stencil, coefficients, max_terms=max_terms)
    return q - order
