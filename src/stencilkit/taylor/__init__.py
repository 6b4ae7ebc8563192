"""Exact Taylor series of a function at offset grid points."""

from stencilkit.taylor.series import (
    combine_series,
    taylor_coefficients,
    taylor_term,
    truncate_series,
)

__all__ = [
    "combine_series",
    "taylor_coefficients",
    "taylor_term",
    "truncate_series",
]
