"""Tests for the numeric formula evaluators."""

from fractions import Fraction as F

import numpy as np
import pytest
from numpy.testing import assert_allclose

from stencilkit.exceptions import ConfigError, NoFormulaYet
from stencilkit.formula_kit import FormulaKit
from stencilkit.presentation.evaluators import FormulaEvaluator, round_coefficients
from stencilkit.results import FormulaResult

CENTRAL_FIRST = FormulaResult(1, (-1, 0, 1), (F(-1), F(0), F(1)), F(2), 2)
FIVE_POINT_FIRST = FormulaResult(
    1, (-2, -1, 0, 1, 2), (F(1), F(-8), F(0), F(8), F(-1)), F(12), 4
)


def test_exact_evaluator_on_sin():
    """Tests the central formula against the analytic derivative."""
    fd = FormulaEvaluator(CENTRAL_FIRST)
    assert_allclose(fd(np.sin, 0.5, stepsize=1e-3), np.cos(0.5), rtol=1e-6)


def test_higher_order_is_more_accurate():
    """Tests that the five-point formula beats the three-point one."""
    h = 0.05
    err3 = abs(FormulaEvaluator(CENTRAL_FIRST)(np.exp, 0.0, h) - 1.0)
    err5 = abs(FormulaEvaluator(FIVE_POINT_FIRST)(np.exp, 0.0, h) - 1.0)
    assert err5 < err3


def test_rounded_weights():
    """Tests that rounded weights match numpy rounding of k/m."""
    fd = FormulaEvaluator(FIVE_POINT_FIRST, rounded=True, decimal_places=1)
    assert_allclose(fd.weights, [0.1, -0.7, 0.0, 0.7, -0.1])
    assert_allclose(round_coefficients(FIVE_POINT_FIRST.weights, 1), fd.weights)


def test_exact_weights():
    """Tests the unrounded per-point weights."""
    fd = FormulaEvaluator(FIVE_POINT_FIRST)
    assert_allclose(fd.weights, [1 / 12, -2 / 3, 0.0, 2 / 3, -1 / 12])


def test_vector_valued_function():
    """Tests that array outputs keep their shape."""
    fd = FormulaEvaluator(CENTRAL_FIRST)
    out = fd(lambda x: np.array([np.sin(x), x**2]), 1.0, stepsize=1e-3)
    assert out.shape == (2,)
    assert_allclose(out, [np.cos(1.0), 2.0], rtol=1e-6)


def test_on_grid():
    """Tests derivatives from tabulated samples."""
    h = 0.5
    x = np.arange(10) * h
    fd = FormulaEvaluator(CENTRAL_FIRST)
    assert_allclose(fd.on_grid(x**2, 4, h), 2 * x[4])

    kit = FormulaKit()
    kit.compute(2, [-1, 0, 1])
    assert_allclose(kit.evaluator().on_grid(x**2, 5, h), 2.0)


def test_on_grid_out_of_range():
    """Tests that a stencil leaving the samples raises IndexError."""
    fd = FormulaEvaluator(CENTRAL_FIRST)
    with pytest.raises(IndexError):
        fd.on_grid(np.zeros(5), 0, 0.1)
    with pytest.raises(IndexError):
        fd.on_grid(np.zeros(5), 4, 0.1)


def test_invalid_stepsize():
    """Tests that non-positive step sizes are rejected."""
    fd = FormulaEvaluator(CENTRAL_FIRST)
    with pytest.raises(ValueError):
        fd(np.sin, 0.0, stepsize=0.0)
    with pytest.raises(ValueError):
        fd.on_grid(np.zeros(5), 2, -1.0)


def test_invalid_precision():
    """Tests that negative precisions raise ConfigError."""
    with pytest.raises(ConfigError):
        round_coefficients(CENTRAL_FIRST.weights, -1)


def test_kit_evaluator_needs_a_formula():
    """Tests that the engine cannot build an evaluator before deriving."""
    kit = FormulaKit(decimal_places=3)
    with pytest.raises(NoFormulaYet):
        kit.evaluator()
    kit.compute(1, [-2, -1, 0, 1, 2])
    fd = kit.evaluator(rounded=True)
    assert fd.decimal_places == 3
    assert_allclose(fd.weights, [0.083, -0.667, 0.0, 0.667, -0.083])
