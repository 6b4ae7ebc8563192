"""Presentation helpers layered on top of exact formulas.

Nothing in this subpackage feeds back into the solver: it only formats
results and turns them into numeric evaluators.
"""

from stencilkit.presentation.evaluators import FormulaEvaluator, round_coefficients
from stencilkit.presentation.formatting import (
    format_formula,
    format_taylor_series,
    format_truncation_error,
)

__all__ = [
    "FormulaEvaluator",
    "round_coefficients",
    "format_formula",
    "format_taylor_series",
    "format_truncation_error",
]
