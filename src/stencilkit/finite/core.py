"""Single-attempt derivation of a finite-difference formula."""

from __future__ import annotations

from stencilkit.config import DEFAULT_MAX_TERMS
from stencilkit.finite.elimination import solve
from stencilkit.finite.truncation import truncation_order
from stencilkit.results import FormulaResult
from stencilkit.utils.types import Stencil

__all__ = [
    "derive_formula",
]


def derive_formula(
    order: int,
    stencil: Stencil,
    *,
    max_terms: int = DEFAULT_MAX_TERMS,
    maximize_accuracy: bool = True,
) -> FormulaResult:
    """Solves for the formula on exactly this stencil and finds its error order.

    Args:
        order: Derivative order.
        stencil: Normalized stencil.
        max_terms: Term ceiling for the truncation analysis.
        maximize_accuracy: Passed to :func:`~stencilkit.finite.elimination.solve`.

    Returns:
        The complete formula.

    Raises:
        NoSolutionAtThisStencil: If the elimination system is trivial.
        DegenerateStencil: If no null-space direction produces the derivative.
        InsufficientTerms: If the error term lies beyond ``max_terms``.
    """
    solution = solve(order, stencil, maximize_accuracy=maximize_accuracy)
    p = truncation_order(order, stencil, solution.coefficients, max_terms=max_terms)
    return FormulaResult(
        order=order,
        stencil=tuple(stencil),
        coefficients=solution.coefficients,
        multiplier=solution.multiplier,
        truncation_order=p,
    )
