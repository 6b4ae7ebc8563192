"""Checking externally supplied finite-difference formulas.

A supplied formula ``(order, stencil, coefficients, multiplier)`` is valid if
it satisfies the same elimination equations the solver imposes:

    sum_p k_p * s_p**t / t! == 0   for t < order,   == multiplier for t == order

Valid formulas are confirmed as given (after canonicalization). Invalid ones
are reported together with the residuals, and a formula derived from scratch
on the same stencil is offered instead when one exists.
"""

from __future__ import annotations

import numbers
from fractions import Fraction
from functools import partial
from typing import Sequence

from stencilkit.config import DEFAULT_MAX_TERMS
from stencilkit.exceptions import FormulaNotFound, InsufficientTerms, InvalidStencil
from stencilkit.finite.core import derive_formula
from stencilkit.finite.elimination import canonicalize, elimination_residuals, validate_order
from stencilkit.finite.stencil import as_offset
from stencilkit.finite.truncation import truncation_order
from stencilkit.logger import stencilkit_logger
from stencilkit.results import FormulaResult, VerificationReport
from stencilkit.utils.types import RationalLike, RationalVector, Stencil, StencilLike

__all__ = [
    "as_fraction",
    "pair_with_stencil",
    "verify_formula",
]


def as_fraction(value: RationalLike) -> Fraction:
    """Converts a coefficient to an exact fraction.

    Floats are read as the simplest fraction that rounds to them, so that
    ``0.5`` becomes ``1/2`` and ``1/3`` typed as ``0.3333333333333333``
    becomes ``1/3``.
    """
    if isinstance(value, float):
        return Fraction(value).limit_denominator()
    if isinstance(value, (numbers.Rational, str)):
        return Fraction(value)
    if isinstance(value, numbers.Real):
        return Fraction(float(value)).limit_denominator()
    raise TypeError(f"coefficient must be a real number; got {value!r}.")


def _is_approximated(value: RationalLike) -> bool:
    if isinstance(value, (numbers.Rational, str)):
        return False
    return Fraction(float(value)) != as_fraction(value)


def pair_with_stencil(
    stencil: StencilLike,
    coefficients: Sequence[RationalLike],
) -> tuple[Stencil, RationalVector]:
    """Sorts a supplied stencil together with its coefficients.

    Raises:
        InvalidStencil: If offsets repeat or the lengths differ.
    """
    flat = [as_offset(o) for o in stencil]
    if not flat:
        raise InvalidStencil("[Verify] a stencil needs at least one offset.")
    if len(set(flat)) != len(flat):
        raise InvalidStencil(f"[Verify] stencil {flat} repeats an offset.")
    if len(flat) != len(coefficients):
        raise InvalidStencil(
            f"[Verify] {len(coefficients)} coefficients given for a stencil of "
            f"{len(flat)} points."
        )

    pairs = sorted(zip(flat, (as_fraction(k) for k in coefficients)))
    return tuple(j for j, _ in pairs), tuple(k for _, k in pairs)


def verify_formula(
    order: int,
    stencil: StencilLike,
    coefficients: Sequence[RationalLike],
    multiplier: RationalLike,
    *,
    max_terms: int = DEFAULT_MAX_TERMS,
    maximize_accuracy: bool = True,
) -> VerificationReport:
    """Checks a supplied formula against the elimination equations.

    Args:
        order: Derivative order the formula claims to approximate.
        stencil: Offsets, in the same order as ``coefficients``.
        coefficients: Coefficients of the function values.
        multiplier: Claimed multiplier of the target derivative.
        max_terms: Term ceiling for the truncation analysis.
        maximize_accuracy: Passed to the solver if an alternative is derived.

    Returns:
        The verification report.

    Raises:
        ValueError: If ``order`` is not a positive integer.
        InvalidStencil: If the stencil is malformed or does not match the
            coefficients.
        InsufficientTerms: If a valid formula's error term lies beyond
            ``max_terms``.
    """
    order = validate_order(order)
    offsets, ks = pair_with_stencil(stencil, coefficients)
    m = as_fraction(multiplier)
    supplied = (order, offsets, ks, m)
    approximated = any(
        _is_approximated(value)
        for value in (*coefficients, multiplier)
    )

    residuals = elimination_residuals(order, offsets, ks, m)
    if not residuals and m != 0:
        solution = canonicalize(ks, offsets, order)
        result = FormulaResult(
            order=order,
            stencil=offsets,
            coefficients=solution.coefficients,
            multiplier=solution.multiplier,
            truncation_order=truncation_order(
                order, offsets, solution.coefficients, max_terms=max_terms
            ),
        )
        return VerificationReport(
            valid=True,
            supplied=supplied,
            result=result,
            approximated_input=approximated,
        )

    problems = []
    if residuals:
        problems.append(f"elimination equations violated at Taylor orders {sorted(residuals)}")
    if m == 0:
        problems.append("the multiplier is zero")
    reason = "; ".join(problems)

    stencilkit_logger.warning(
        "Supplied formula for derivative order %d on stencil %s is invalid: %s.",
        order,
        list(offsets),
        reason,
    )
    invalid = partial(
        VerificationReport,
        valid=False,
        supplied=supplied,
        residuals=residuals,
        reason=reason,
        approximated_input=approximated,
    )
    try:
        alternative = derive_formula(
            order, offsets, max_terms=max_terms, maximize_accuracy=maximize_accuracy
        )
    except (FormulaNotFound, InsufficientTerms) as exc:
        return invalid(alternative_error=str(exc))
    return invalid(result=alternative)
