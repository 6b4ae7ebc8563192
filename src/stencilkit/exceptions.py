"""Exceptions raised by StencilKit.

Every failure of the formula engine is a subclass of :class:`StencilKitError`.
Configuration and input problems additionally derive from ``ValueError`` and
state problems from ``RuntimeError``, so callers that only know the built-in
exceptions still catch them.
"""

from __future__ import annotations

__all__ = [
    "StencilKitError",
    "ConfigError",
    "InvalidStencil",
    "FormulaNotFound",
    "NoSolutionAtThisStencil",
    "DegenerateStencil",
    "NoFormulaExists",
    "InsufficientTerms",
    "NoFormulaYet",
]


class StencilKitError(Exception):
    """Base exception for all StencilKit errors."""


class ConfigError(StencilKitError, ValueError):
    """Invalid term ceiling, term count or decimal precision."""


class InvalidStencil(StencilKitError, ValueError):
    """The offsets given cannot form a stencil."""


class FormulaNotFound(StencilKitError):
    """No formula for the requested derivative on the given stencil.

    Attributes:
        order: The requested derivative order.
        stencil: The stencil the failing attempt was made on.
    """

    def __init__(self, message: str, *, order: int, stencil: tuple[int, ...]):
        super().__init__(message)
        self.order = order
        self.stencil = tuple(stencil)


class NoSolutionAtThisStencil(FormulaNotFound):
    """The elimination system has only the trivial solution."""


class DegenerateStencil(FormulaNotFound):
    """Every null-space direction has a zero multiplier."""


class NoFormulaExists(FormulaNotFound):
    """A stencil search exhausted every candidate.

    Attributes:
        requested: The stencil originally requested.
        attempts: Number of shrunk stencils the search tried.
    """

    def __init__(
        self,
        message: str,
        *,
        order: int,
        stencil: tuple[int, ...],
        attempts: int = 0,
    ):
        super().__init__(message, order=order, stencil=stencil)
        self.requested = self.stencil
        self.attempts = attempts


class InsufficientTerms(StencilKitError, RuntimeError):
    """No nonzero error term was found within the Taylor term ceiling.

    Attributes:
        max_terms: The ceiling that was in force.
    """

    def __init__(self, message: str, *, max_terms: int):
        super().__init__(message)
        self.max_terms = max_terms


class NoFormulaYet(StencilKitError, RuntimeError):
    """The engine has not produced a formula yet."""
