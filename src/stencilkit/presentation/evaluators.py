"""Numeric evaluators generated from exact formulas.

A :class:`FormulaEvaluator` turns a :class:`~stencilkit.results.FormulaResult`
into a callable that approximates the derivative of a function, or of
tabulated samples, on a uniform grid. Two variants exist:

* the exact variant sums ``k_p * f_p`` with the integer coefficients and
  divides by ``m * h**n`` at the end,
* the rounded variant uses per-point weights ``k_p / m`` rounded to a fixed
  number of decimal places.

Examples:
--------
>>> import numpy as np
>>> from stencilkit.formula_kit import FormulaKit
>>> kit = FormulaKit()
>>> _ = kit.compute(1, [-1, 0, 1])
>>> fd = kit.evaluator()
>>> bool(np.isclose(fd(np.sin, 0.5, stepsize=1e-3), np.cos(0.5), rtol=1e-6))
True
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from stencilkit.config import DEFAULT_DECIMAL_PLACES, validate_decimal_places
from stencilkit.results import FormulaResult
from stencilkit.utils.types import RationalVector

__all__ = [
    "round_coefficients",
    "FormulaEvaluator",
]


def round_coefficients(
    weights: RationalVector,
    decimal_places: int = DEFAULT_DECIMAL_PLACES,
) -> NDArray[np.float64]:
    """Rounds exact weights to a number of decimal places.

    Args:
        weights: Exact per-point weights.
        decimal_places: Number of decimal places to keep.

    Returns:
        The rounded weights as a float array.

    Raises:
        ConfigError: If ``decimal_places`` is negative.
    """
    decimal_places = validate_decimal_places(decimal_places)
    return np.round(np.array([float(w) for w in weights], dtype=np.float64), decimal_places)


class FormulaEvaluator:
    """Evaluates a finite-difference formula numerically.

    Attributes:
        result: The formula being evaluated.
        rounded: Whether rounded per-point weights are used.
        decimal_places: Precision of the rounded weights.
    """

    def __init__(
        self,
        result: FormulaResult,
        *,
        rounded: bool = False,
        decimal_places: int = DEFAULT_DECIMAL_PLACES,
    ) -> None:
        """Initialises the evaluator.

        Args:
            result: The formula to evaluate.
            rounded: Use weights rounded to ``decimal_places`` instead of the
                exact coefficients.
            decimal_places: Number of decimal places of the rounded weights.
        """
        self.result = result
        self.rounded = rounded
        self.decimal_places = validate_decimal_places(decimal_places)
        self.offsets = np.asarray(result.stencil, dtype=np.int64)

        if rounded:
            self._coeffs = round_coefficients(result.weights, self.decimal_places)
            self._scale = 1.0
        else:
            self._coeffs = np.asarray([float(k) for k in result.coefficients], dtype=np.float64)
            self._scale = float(result.multiplier)

    @property
    def weights(self) -> NDArray[np.float64]:
        """Per-point weights for unit step size."""
        return self._coeffs / self._scale

    def _combine(self, values: np.ndarray, stepsize: float) -> NDArray | float:
        # values shape: (n_stencil,) for scalar outputs, (n_stencil, *out_shape) otherwise
        denom = self._scale * stepsize**self.result.order
        if values.ndim == 1:
            return float(np.dot(self._coeffs, values) / denom)
        deriv = np.tensordot(self._coeffs, values, axes=(0, 0)) / denom
        if np.ndim(deriv) == 0:
            return float(deriv)
        return deriv

    def __call__(
        self,
        function: Callable[[float], Any],
        x0: float,
        stepsize: float = 0.01,
    ) -> NDArray | float:
        """Approximates the derivative of ``function`` at ``x0``.

        Args:
            function: Function of a single float returning a float or an
                array-like.
            x0: Point at which the derivative is evaluated.
            stepsize: Grid spacing ``h``.

        Returns:
            A float for scalar-valued functions, otherwise an array with the
            function's output shape.

        Raises:
            ValueError: If ``stepsize`` is not positive.
        """
        if stepsize <= 0:
            raise ValueError("stepsize must be positive.")
        points = x0 + self.offsets * stepsize
        values = np.asarray([function(float(x)) for x in points], dtype=float)
        return self._combine(values, stepsize)

    def on_grid(
        self,
        samples: ArrayLike,
        index: int,
        stepsize: float,
    ) -> NDArray | float:
        """Approximates the derivative from tabulated samples.

        Args:
            samples: Function values on a uniform grid along axis 0.
            index: Grid index of the point of interest.
            stepsize: Grid spacing ``h``.

        Returns:
            The derivative at ``samples[index]``.

        Raises:
            ValueError: If ``stepsize`` is not positive.
            IndexError: If the stencil reaches outside the samples.
        """
        if stepsize <= 0:
            raise ValueError("stepsize must be positive.")
        y = np.asarray(samples, dtype=float)
        idx = index + self.offsets
        if idx.min() < 0 or idx.max() >= y.shape[0]:
            raise IndexError(
                f"stencil {list(self.result.stencil)} around index {index} "
                f"leaves the {y.shape[0]} samples."
            )
        return self._combine(y[idx], stepsize)
