"""Exact Taylor coefficients of ``f(x + j*h)`` about ``x``.

The series of ``f`` at the grid point ``j`` steps away is

    f(x + j*h) = sum_t  j**t / t!  *  h**t * f^(t)(x)

and this module produces the rational coefficients ``j**t / t!``, either for a
single offset or for a linear combination of offsets. All arithmetic is done
in :class:`fractions.Fraction`.

Examples:
--------
>>> from stencilkit.taylor.series import taylor_coefficients, combine_series
>>> taylor_coefficients(2, 4)
(Fraction(1, 1), Fraction(2, 1), Fraction(2, 1), Fraction(4, 3))
>>> combine_series([(-1, -1), (1, 1)], 4)
(Fraction(0, 1), Fraction(2, 1), Fraction(0, 1), Fraction(1, 3))
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Iterable, Sequence

from stencilkit.config import DEFAULT_MAX_TERMS
from stencilkit.exceptions import ConfigError
from stencilkit.utils.types import RationalLike, RationalVector

__all__ = [
    "taylor_term",
    "taylor_coefficients",
    "combine_series",
    "truncate_series",
]


def taylor_term(offset: int, order: int) -> Fraction:
    """Returns the coefficient ``offset**order / order!`` with ``0**0 == 1``."""
    return Fraction(offset**order, math.factorial(order))


def _check_num_terms(num_terms: int, max_terms: int) -> None:
    """Raises ``ConfigError`` unless ``1 <= num_terms <= max_terms``."""
    if isinstance(num_terms, bool) or not isinstance(num_terms, int):
        raise ConfigError(f"[Taylor] num_terms must be an integer; got {num_terms!r}.")
    if num_terms <= 0:
        raise ConfigError(f"[Taylor] num_terms must be positive; got {num_terms}.")
    if num_terms > max_terms:
        raise ConfigError(
            f"[Taylor] num_terms={num_terms} exceeds the term ceiling max_terms={max_terms}."
        )


def taylor_coefficients(
    offset: int,
    num_terms: int,
    *,
    max_terms: int = DEFAULT_MAX_TERMS,
) -> RationalVector:
    """Creates the first ``num_terms`` Taylor coefficients at an offset.

    Args:
        offset: Integer grid offset ``j`` relative to the expansion point.
        num_terms: Number of coefficients to generate.
        max_terms: Term ceiling in force.

    Returns:
        The coefficients ``j**t / t!`` for ``t = 0, ..., num_terms - 1``.

    Raises:
        ConfigError: If ``num_terms`` is not positive or exceeds ``max_terms``.
    """
    _check_num_terms(num_terms, max_terms)

    coeffs = [Fraction(1)]
    # c_t = c_{t-1} * j / t avoids recomputing powers and factorials
    for t in range(1, num_terms):
        coeffs.append(coeffs[-1] * offset / t)
    return tuple(coeffs)


def combine_series(
    pairs: Iterable[tuple[RationalLike, int]],
    num_terms: int,
    *,
    max_terms: int = DEFAULT_MAX_TERMS,
) -> RationalVector:
    """Linearly combines the Taylor series of several offsets.

    Args:
        pairs: ``(scalar, offset)`` pairs. The series at ``offset`` is scaled
            by ``scalar`` and all scaled series are summed termwise.
        num_terms: Number of terms of the combined series.
        max_terms: Term ceiling in force.

    Returns:
        The termwise sum as exact fractions.

    Raises:
        ConfigError: If ``num_terms`` is not positive or exceeds ``max_terms``.
    """
    _check_num_terms(num_terms, max_terms)

    total = [Fraction(0)] * num_terms
    for scalar, offset in pairs:
        scalar = Fraction(scalar)
        if scalar == 0:
            continue
        series = taylor_coefficients(offset, num_terms, max_terms=max_terms)
        for t, c in enumerate(series):
            total[t] += scalar * c
    return tuple(total)


def truncate_series(
    coefficients: Sequence[RationalLike],
    num_terms: int,
    *,
    max_terms: int = DEFAULT_MAX_TERMS,
) -> RationalVector:
    """Returns the first ``num_terms`` entries of a precomputed series.

    Missing trailing entries are treated as zero.

    Args:
        coefficients: Precomputed Taylor coefficients.
        num_terms: Number of terms to keep.
        max_terms: Term ceiling in force.

    Returns:
        The coefficients as exact fractions.

    Raises:
        ConfigError: If ``num_terms`` is not positive or exceeds ``max_terms``.
    """
    _check_num_terms(num_terms, max_terms)

    kept = [Fraction(c) for c in list(coefficients)[:num_terms]]
    kept.extend(Fraction(0) for _ in range(num_terms - len(kept)))
    return tuple(kept)
