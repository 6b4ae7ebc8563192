"""Result containers returned by the formula engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction

from stencilkit.utils.types import RationalVector, Stencil

__all__ = [
    "FormulaResult",
    "SearchResult",
    "VerificationReport",
]


@dataclass(frozen=True)
class FormulaResult:
    """A derived finite-difference formula.

    The formula reads

        f^(order)(x) ~ sum_p coefficients[p] * f(x + stencil[p] * h) / (multiplier * h**order)

    with error ``O(h**truncation_order)``.

    Attributes:
        order: Derivative order.
        stencil: Offsets actually used, ascending.
        coefficients: Canonical (integer-valued) coefficients aligned with ``stencil``.
        multiplier: Positive multiplier of the target derivative.
        truncation_order: Exponent ``p`` of the formal error ``O(h**p)``.
    """

    order: int
    stencil: Stencil
    coefficients: RationalVector
    multiplier: Fraction
    truncation_order: int

    @property
    def weights(self) -> RationalVector:
        """Per-point weights ``coefficients / multiplier`` (for unit step size)."""
        return tuple(k / self.multiplier for k in self.coefficients)

    def as_tuple(self) -> tuple[int, Stencil, RationalVector, Fraction]:
        """Returns ``(order, stencil, coefficients, multiplier)``."""
        return self.order, self.stencil, self.coefficients, self.multiplier


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a stencil search.

    Attributes:
        result: The formula found.
        requested: The stencil originally requested.
        dropped: Offsets of ``requested`` the formula does not use.
        strategy: ``"full"``, ``"forward"``, ``"backward"`` or ``"bidirectional"``.
            ``"full"`` means the requested stencil worked without shrinking.
        attempts: Number of shrink steps taken; ``bidirectional`` tries one
            forward and one backward stencil per step.
    """

    result: FormulaResult
    requested: Stencil
    dropped: Stencil = ()
    strategy: str = "full"
    attempts: int = 0

    @property
    def stencil(self) -> Stencil:
        """The effective stencil."""
        return self.result.stencil

    @property
    def reduced(self) -> bool:
        """``True`` if any requested offset was dropped."""
        return bool(self.dropped)


@dataclass(frozen=True)
class VerificationReport:
    """Outcome of checking an externally supplied formula.

    Attributes:
        valid: ``True`` if the supplied formula satisfies the elimination
            equations.
        supplied: The supplied ``(order, stencil, coefficients, multiplier)``,
            sorted by offset and converted to fractions.
        residuals: Violated equations, Taylor order -> residual. Empty when valid.
        result: The confirmed formula in canonical form when ``valid``, else a
            freshly derived alternative, or ``None`` if none exists.
        alternative_error: Why no alternative could be derived, if so.
        reason: Why the supplied formula is invalid, ``None`` when valid.
        approximated_input: ``True`` if a float input was read as a nearby
            simpler fraction (``0.1`` as ``1/10``). A confirmation then holds
            for those fractions, not for the exact binary values of the floats.
    """

    valid: bool
    supplied: tuple[int, Stencil, RationalVector, Fraction]
    residuals: dict[int, Fraction] = field(default_factory=dict)
    result: FormulaResult | None = None
    alternative_error: str | None = None
    reason: str | None = None
    approximated_input: bool = False
