"""Configuration of a :class:`~stencilkit.formula_kit.FormulaKit` engine.

The config holds the two knobs an engine exposes: the ceiling on the number
of Taylor terms ever generated, and the decimal precision used when
coefficients are rounded for display or for the rounded evaluator.
Neither setting touches the exact elimination step.
"""

from __future__ import annotations

from stencilkit.exceptions import ConfigError

__all__ = [
    "DEFAULT_MAX_TERMS",
    "DEFAULT_DECIMAL_PLACES",
    "EngineConfig",
    "validate_max_terms",
    "validate_decimal_places",
]

#: Default ceiling on the number of Taylor terms.
DEFAULT_MAX_TERMS = 30
#: Default number of decimal places for rounded coefficients.
DEFAULT_DECIMAL_PLACES = 16


def validate_max_terms(max_terms: int) -> int:
    """Checks a Taylor term ceiling.

    Args:
        max_terms: Proposed ceiling.

    Returns:
        The ceiling as an ``int``.

    Raises:
        ConfigError: If ``max_terms`` is not a positive integer.
    """
    if isinstance(max_terms, bool) or not isinstance(max_terms, int):
        raise ConfigError(
            f"[EngineConfig] max_terms must be an integer; got {max_terms!r}."
        )
    if max_terms < 1:
        raise ConfigError(
            f"[EngineConfig] max_terms must be at least 1; got {max_terms}."
        )
    return int(max_terms)


def validate_decimal_places(decimal_places: int) -> int:
    """Checks a decimal precision.

    Args:
        decimal_places: Proposed number of decimal places.

    Returns:
        The precision as an ``int``.

    Raises:
        ConfigError: If ``decimal_places`` is not a non-negative integer.
    """
    if isinstance(decimal_places, bool) or not isinstance(decimal_places, int):
        raise ConfigError(
            f"[EngineConfig] decimal_places must be an integer; got {decimal_places!r}."
        )
    if decimal_places < 0:
        raise ConfigError(
            f"[EngineConfig] decimal_places must be non-negative; got {decimal_places}."
        )
    return int(decimal_places)


class EngineConfig:
    """Settings of a formula engine.

    Both attributes are validated on assignment, so an engine can never hold
    an invalid setting.
    """

    def __init__(
        self,
        max_terms: int = DEFAULT_MAX_TERMS,
        decimal_places: int = DEFAULT_DECIMAL_PLACES,
        maximize_accuracy: bool = True,
        recover_truncation: bool = False,
    ):
        """Initialize configuration.

        Args:
            max_terms:
                Maximum number of Taylor terms generated by the series helpers
                and the truncation analysis. Raising it lets the truncation
                order of larger stencils be found; lowering it below what a
                stencil needs makes the analysis raise ``InsufficientTerms``.

            decimal_places:
                Number of decimal places kept when coefficients are rounded
                for presentation or for the rounded evaluator. The exact
                solver never rounds.

            maximize_accuracy:
                If ``True``, the solver keeps eliminating higher-order Taylor
                terms after the derivative constraints are met, which gives
                the most accurate formula the stencil allows. If ``False``,
                the first null-space basis vector with a nonzero multiplier
                is returned as is.

            recover_truncation:
                If ``True``, a stencil search also treats ``InsufficientTerms``
                as a failure it can recover from by dropping points, which
                trades accuracy for an error order that fits under
                ``max_terms``. If ``False``, that error reaches the caller.
        """
        self.max_terms = max_terms
        self.decimal_places = decimal_places
        self.maximize_accuracy = bool(maximize_accuracy)
        self.recover_truncation = bool(recover_truncation)

    @property
    def max_terms(self) -> int:
        """Ceiling on the number of Taylor terms."""
        return self._max_terms

    @max_terms.setter
    def max_terms(self, value: int) -> None:
        self._max_terms = validate_max_terms(value)

    @property
    def decimal_places(self) -> int:
        """Decimal places used for rounded coefficients."""
        return self._decimal_places

    @decimal_places.setter
    def decimal_places(self, value: int) -> None:
        self._decimal_places = validate_decimal_places(value)

    def __repr__(self) -> str:
        return (
            f"EngineConfig(max_terms={self.max_terms}, "
            f"decimal_places={self.decimal_places}, "
            f"maximize_accuracy={self.maximize_accuracy}, "
            f"recover_truncation={self.recover_truncation})"
        )
