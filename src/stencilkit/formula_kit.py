"""Provides the FormulaKit engine.

A :class:`FormulaKit` derives finite-difference formulas for arbitrary
integer stencils in exact rational arithmetic and remembers the last formula
it produced, so presentation and evaluator helpers can be called without
passing it around.

Examples:
    Central and one-sided formulas:

        >>> from stencilkit.formula_kit import FormulaKit
        >>> kit = FormulaKit()
        >>> r = kit.compute(2, [-1, 0, 1])
        >>> [int(k) for k in r.coefficients], int(r.multiplier), r.truncation_order
        ([1, -2, 1], 1, 2)
        >>> kit.compute(1, range(0, 3)).truncation_order
        2

    Searching a smaller stencil when the requested one needs more Taylor
    terms than the ceiling allows (opt-in):

        >>> from stencilkit.config import EngineConfig
        >>> kit = FormulaKit(EngineConfig(max_terms=6, recover_truncation=True))
        >>> found = kit.find(1, range(-3, 4))
        >>> found.stencil, found.dropped
        ((-3, -2, -1, 0, 1), (2, 3))

Notes:
    - A kit is not safe to share between threads; use one kit per session or
      wrap it with :func:`stencilkit.utils.thread_safety.serialize_calls`.
    - ``max_terms`` only bounds the Taylor series helpers and the truncation
      analysis; the elimination itself is always exact.
"""

from __future__ import annotations

import numbers
from typing import Sequence

from stencilkit.config import EngineConfig
from stencilkit.exceptions import InsufficientTerms, NoFormulaYet
from stencilkit.finite.core import derive_formula
from stencilkit.finite.search import find_formula
from stencilkit.finite.stencil import normalize_stencil
from stencilkit.finite.truncation import leading_error_coefficient
from stencilkit.finite.verification import verify_formula
from stencilkit.logger import stencilkit_logger
from stencilkit.presentation.evaluators import FormulaEvaluator
from stencilkit.presentation.formatting import (
    format_formula,
    format_taylor_series,
    format_truncation_error,
)
from stencilkit.results import FormulaResult, SearchResult, VerificationReport
from stencilkit.taylor.series import taylor_coefficients, truncate_series
from stencilkit.utils.types import RationalLike, RationalVector, StencilLike


class FormulaKit:
    """Finite-difference formula engine with a last-result slot.

    Attributes:
        config: The engine settings (term ceiling, decimal places, accuracy
            policy).
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        max_terms: int | None = None,
        decimal_places: int | None = None,
    ) -> None:
        """Initialises the engine.

        Args:
            config: Settings to start from. A fresh :class:`EngineConfig`
                with default values is used when omitted.
            max_terms: Overrides ``config.max_terms``.
            decimal_places: Overrides ``config.decimal_places``.

        Raises:
            ConfigError: If an override is invalid.
        """
        self.config = config if config is not None else EngineConfig()
        if max_terms is not None:
            self.config.max_terms = max_terms
        if decimal_places is not None:
            self.config.decimal_places = decimal_places
        self._last: FormulaResult | None = None

    @property
    def max_terms(self) -> int:
        """Ceiling on the number of Taylor terms (default 30)."""
        return self.config.max_terms

    @max_terms.setter
    def max_terms(self, value: int) -> None:
        self.config.max_terms = value

    @property
    def decimal_places(self) -> int:
        """Decimal places for rounded coefficients (default 16)."""
        return self.config.decimal_places

    @decimal_places.setter
    def decimal_places(self, value: int) -> None:
        self.config.decimal_places = value

    @property
    def last_result(self) -> FormulaResult:
        """The most recent successfully derived formula.

        Raises:
            NoFormulaYet: If no formula has been derived by this engine.
        """
        if self._last is None:
            raise NoFormulaYet("[FormulaKit] no formula has been derived yet.")
        return self._last

    def formula(self) -> FormulaResult:
        """Returns :attr:`last_result`."""
        return self.last_result

    def _store(self, result: FormulaResult, verbose: bool) -> FormulaResult:
        self._last = result
        if verbose:
            stencilkit_logger.info(self._describe(result))
        return result

    def _describe(self, result: FormulaResult) -> str:
        lines = [
            format_formula(result),
            format_formula(result, decimal_places=self.decimal_places),
        ]
        try:
            leading = leading_error_coefficient(
                result.order, result.stencil, result.coefficients, max_terms=self.max_terms
            )
        except InsufficientTerms:
            pass
        else:
            lines.append(format_truncation_error(result, leading))
        return "\n".join(lines)

    def compute(
        self,
        order: int,
        stencil: StencilLike,
        *,
        verbose: bool = False,
    ) -> FormulaResult:
        """Derives the formula for exactly the given stencil.

        Args:
            order: Derivative order (positive integer).
            stencil: Offsets in any order, possibly with duplicates or ranges.
            verbose: Log the formula and its error term at ``INFO``.

        Returns:
            The formula; it also becomes :attr:`last_result`.

        Raises:
            ValueError: If ``order`` is not a positive integer.
            InvalidStencil: If the stencil is malformed.
            NoSolutionAtThisStencil: If the stencil has too few points.
            DegenerateStencil: If the stencil cannot produce the derivative.
            InsufficientTerms: If the error term lies beyond :attr:`max_terms`.
        """
        result = derive_formula(
            order,
            normalize_stencil(stencil),
            max_terms=self.max_terms,
            maximize_accuracy=self.config.maximize_accuracy,
        )
        return self._store(result, verbose)

    def _find(
        self,
        order: int,
        stencil: StencilLike,
        strategy: str,
        verbose: bool,
    ) -> SearchResult:
        found = find_formula(
            order,
            normalize_stencil(stencil),
            strategy=strategy,
            max_terms=self.max_terms,
            maximize_accuracy=self.config.maximize_accuracy,
            recover_truncation=self.config.recover_truncation,
        )
        if found.reduced:
            stencilkit_logger.warning(
                "Stencil %s reduced to %s (%s search dropped %s).",
                list(found.requested),
                list(found.stencil),
                found.strategy,
                list(found.dropped),
            )
        self._store(found.result, verbose)
        return found

    def find(self, order: int, stencil: StencilLike, *, verbose: bool = False) -> SearchResult:
        """Derives a formula, shrinking the stencil from either end on failure.

        Args:
            order: Derivative order (positive integer).
            stencil: Offsets in any order, possibly with duplicates or ranges.
            verbose: Log the formula and its error term at ``INFO``.

        Returns:
            The formula together with the effective stencil and the dropped
            offsets. The formula also becomes :attr:`last_result`.

        Raises:
            ValueError: If ``order`` is not a positive integer.
            InvalidStencil: If the stencil is malformed.
            NoFormulaExists: If no reduction of the stencil works.
            InsufficientTerms: If an error term lies beyond :attr:`max_terms`
                and ``config.recover_truncation`` is off.
        """
        return self._find(order, stencil, "bidirectional", verbose)

    def find_forward(self, order: int, stencil: StencilLike, *, verbose: bool = False) -> SearchResult:
        """Like :meth:`find`, but only drops the largest offsets."""
        return self._find(order, stencil, "forward", verbose)

    def find_backward(self, order: int, stencil: StencilLike, *, verbose: bool = False) -> SearchResult:
        """Like :meth:`find`, but only drops the smallest offsets."""
        return self._find(order, stencil, "backward", verbose)

    def verify(
        self,
        order: int,
        stencil: Sequence[int],
        coefficients: Sequence[RationalLike],
        multiplier: RationalLike,
        *,
        verbose: bool = False,
    ) -> VerificationReport:
        """Checks an externally supplied formula.

        A valid formula is confirmed without re-deriving anything. For an
        invalid one the report lists the violated equations and carries a
        formula derived from scratch on the same stencil when one exists.
        Either formula becomes :attr:`last_result`.

        Args:
            order: Derivative order the formula claims to approximate.
            stencil: Offsets in the same order as ``coefficients``.
            coefficients: Coefficients of the function values.
            multiplier: Claimed multiplier of the target derivative.
            verbose: Log the resulting formula at ``INFO``.

        Returns:
            The verification report.
        """
        report = verify_formula(
            order,
            stencil,
            coefficients,
            multiplier,
            max_terms=self.max_terms,
            maximize_accuracy=self.config.maximize_accuracy,
        )
        if report.result is not None:
            self._store(report.result, verbose)
        return report

    def taylor(
        self,
        source: int | Sequence[RationalLike],
        num_terms: int,
        *,
        verbose: bool = False,
    ) -> RationalVector:
        """Returns Taylor coefficients for inspection.

        Args:
            source: An offset ``j`` (the series of ``f(x + j*h)``) or a
                precomputed coefficient sequence.
            num_terms: Number of terms, at most :attr:`max_terms`.
            verbose: Log the formatted series at ``INFO``.

        Returns:
            The coefficients as exact fractions.

        Raises:
            ConfigError: If ``num_terms`` is not positive or exceeds :attr:`max_terms`.
        """
        if isinstance(source, numbers.Integral):
            coeffs = taylor_coefficients(int(source), num_terms, max_terms=self.max_terms)
            offset = int(source)
        else:
            coeffs = truncate_series(source, num_terms, max_terms=self.max_terms)
            offset = None
        if verbose:
            stencilkit_logger.info(format_taylor_series(coeffs, offset=offset))
        return coeffs

    def truncation_error(self) -> str:
        """Formats the last formula with its leading error term.

        Raises:
            NoFormulaYet: If no formula has been derived yet.
            InsufficientTerms: If the error term lies beyond :attr:`max_terms`.
        """
        result = self.last_result
        leading = leading_error_coefficient(
            result.order, result.stencil, result.coefficients, max_terms=self.max_terms
        )
        return format_truncation_error(result, leading)

    def evaluator(self, *, rounded: bool = False) -> FormulaEvaluator:
        """Creates a numeric evaluator for the last formula.

        Args:
            rounded: Use weights rounded to :attr:`decimal_places`.

        Raises:
            NoFormulaYet: If no formula has been derived yet.
        """
        return FormulaEvaluator(
            self.last_result,
            rounded=rounded,
            decimal_places=self.decimal_places,
        )
