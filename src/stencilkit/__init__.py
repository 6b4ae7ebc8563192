"""Provides the StencilKit formula engine."""

from importlib.metadata import PackageNotFoundError, version

from stencilkit.config import EngineConfig
from stencilkit.exceptions import (
    ConfigError,
    DegenerateStencil,
    FormulaNotFound,
    InsufficientTerms,
    InvalidStencil,
    NoFormulaExists,
    NoFormulaYet,
    NoSolutionAtThisStencil,
    StencilKitError,
)
from stencilkit.formula_kit import FormulaKit
from stencilkit.presentation.evaluators import FormulaEvaluator
from stencilkit.results import FormulaResult, SearchResult, VerificationReport

try:
    __version__ = version("stencilkit")
except PackageNotFoundError:
    pass

__all__ = [
    "ConfigError",
    "DegenerateStencil",
    "EngineConfig",
    "FormulaEvaluator",
    "FormulaKit",
    "FormulaNotFound",
    "FormulaResult",
    "InsufficientTerms",
    "InvalidStencil",
    "NoFormulaExists",
    "NoFormulaYet",
    "NoSolutionAtThisStencil",
    "SearchResult",
    "StencilKitError",
    "VerificationReport",
]
