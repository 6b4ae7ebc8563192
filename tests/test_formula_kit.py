"""Tests for the FormulaKit engine."""

from __future__ import annotations

import logging
from fractions import Fraction as F

import pytest

from stencilkit.config import EngineConfig
from stencilkit.exceptions import (
    ConfigError,
    InsufficientTerms,
    InvalidStencil,
    NoFormulaExists,
    NoFormulaYet,
    NoSolutionAtThisStencil,
)
from stencilkit.formula_kit import FormulaKit
from stencilkit.results import FormulaResult


def test_central_first_derivative(kit):
    """Tests the central first-derivative formula and its error order."""
    r = kit.compute(1, {-1, 0, 1})
    assert r.coefficients == (-1, 0, 1)
    assert r.multiplier == 2
    assert r.truncation_order == 2
    assert r.stencil == (-1, 0, 1)


def test_central_second_derivative(kit):
    """Tests the central second-derivative formula."""
    r = kit.compute(2, [1, 0, -1])
    assert r.coefficients == (1, -2, 1)
    assert r.multiplier == 1


def test_three_point_forward_formula(kit):
    """Tests that the three-point forward formula is second order."""
    r = kit.compute(1, range(3))
    assert r.truncation_order == 2
    assert r.weights == (F(-3, 2), F(2), F(-1, 2))


def test_compute_is_deterministic(kit):
    """Tests that identical requests give identical results."""
    first = kit.compute(3, [-3, -1, 0, 2, 4])
    second = FormulaKit().compute(3, [4, 2, 0, -1, -3])
    assert first == second


def test_result_is_immutable(kit):
    """Tests that a FormulaResult cannot be modified."""
    r = kit.compute(1, [-1, 0, 1])
    with pytest.raises(AttributeError):
        r.multiplier = F(3)


def test_reading_before_any_success_raises(kit):
    """Tests NoFormulaYet before the first successful derivation."""
    with pytest.raises(NoFormulaYet):
        kit.formula()
    with pytest.raises(NoSolutionAtThisStencil):
        kit.compute(3, [0, 1])
    with pytest.raises(NoFormulaYet):
        _ = kit.last_result


def test_failures_do_not_overwrite_last_formula(kit):
    """Tests that only successful derivations replace the stored formula."""
    good = kit.compute(1, [-1, 0, 1])
    with pytest.raises(NoSolutionAtThisStencil):
        kit.compute(2, [0, 1])
    with pytest.raises(NoFormulaExists):
        kit.find(2, [0, 1])
    assert kit.formula() is good


def test_engines_do_not_share_state():
    """Tests that each engine keeps its own last formula."""
    a, b = FormulaKit(), FormulaKit()
    a.compute(1, [-1, 0, 1])
    with pytest.raises(NoFormulaYet):
        b.formula()


def test_invalid_stencil_propagates(kit):
    """Tests that malformed stencils raise InvalidStencil."""
    with pytest.raises(InvalidStencil):
        kit.compute(1, [])
    with pytest.raises(InvalidStencil):
        kit.compute(1, [0, 0.5])


def test_find_reports_effective_stencil(caplog):
    """Tests that a reduced stencil is reported and logged."""
    kit = FormulaKit(EngineConfig(max_terms=6, recover_truncation=True))
    with caplog.at_level(logging.WARNING, logger="stencilkit"):
        found = kit.find(1, range(-3, 3))
    assert found.requested == (-3, -2, -1, 0, 1, 2)
    assert found.stencil == (-2, -1, 0, 1, 2)
    assert found.dropped == (-3,)
    assert kit.formula() is found.result
    assert any("reduced" in r.getMessage() for r in caplog.records)


def test_find_forward_and_backward():
    """Tests the one-sided searches through the engine."""
    kit = FormulaKit(EngineConfig(max_terms=6, recover_truncation=True))
    assert kit.find_forward(1, range(-3, 4)).dropped == (2, 3)
    assert kit.find_backward(1, range(-3, 4)).dropped == (-3, -2)
    assert kit.formula().stencil == (-1, 0, 1, 2, 3)


def test_find_does_not_hide_insufficient_terms():
    """Tests that find reports a too low ceiling instead of shrinking."""
    kit = FormulaKit(max_terms=3)
    with pytest.raises(InsufficientTerms):
        kit.find(1, [-1, 0, 1])
    with pytest.raises(NoFormulaYet):
        kit.formula()


def test_find_without_reduction(kit):
    """Tests that find leaves a working stencil untouched."""
    found = kit.find(2, [-2, -1, 0, 1, 2])
    assert found.strategy == "full"
    assert found.stencil == found.requested


def test_term_ceiling_controls_truncation_analysis():
    """Tests that lowering the ceiling reproduces InsufficientTerms."""
    kit = FormulaKit()
    assert kit.max_terms == 30
    assert kit.compute(1, [-1, 0, 1]).truncation_order == 2
    kit.max_terms = 3
    with pytest.raises(InsufficientTerms):
        kit.compute(1, [-1, 0, 1])
    kit.max_terms = 4
    assert kit.compute(1, [-1, 0, 1]).truncation_order == 2


@pytest.mark.parametrize("bad", [0, -5, 2.5, "30", True])
def test_invalid_term_ceiling(kit, bad):
    """Tests that invalid ceilings raise ConfigError and keep the old value."""
    with pytest.raises(ConfigError):
        kit.max_terms = bad
    assert kit.max_terms == 30


def test_decimal_places_setting(kit):
    """Tests the decimal precision getter and setter."""
    assert kit.decimal_places == 16
    kit.decimal_places = 4
    assert kit.decimal_places == 4
    with pytest.raises(ConfigError):
        kit.decimal_places = -1
    with pytest.raises(ConfigError):
        FormulaKit(decimal_places=1.5)


def test_config_policy_knob():
    """Tests that the accuracy policy can be switched off."""
    kit = FormulaKit(EngineConfig(maximize_accuracy=False))
    r = kit.compute(1, [-1, 0, 1])
    assert r.coefficients == (-1, 1, 0)
    assert r.truncation_order == 1


def test_taylor_inspection(kit, caplog):
    """Tests both forms of Taylor inspection."""
    assert kit.taylor(1, 3) == (1, 1, F(1, 2))
    assert kit.taylor([1, 2], 3) == (1, 2, 0)
    with caplog.at_level(logging.INFO, logger="stencilkit"):
        kit.taylor(1, 3, verbose=True)
    assert "f(x[i+1]) = f(x[i]) + 1*h*f'(x[i]) + 1/2*h^2*f''(x[i]) + ..." in caplog.text
    with pytest.raises(ConfigError):
        kit.taylor(1, 31)


def test_verbose_compute_logs_formula(kit, caplog):
    """Tests that verbose derivation logs the formula and error term."""
    with caplog.at_level(logging.INFO, logger="stencilkit"):
        kit.compute(1, [-1, 0, 1], verbose=True)
    assert "f'(x[i]) = ( -1*f(x[i-1]) + 1*f(x[i+1]) ) / (2*h)" in caplog.text
    assert "O(h^3)" in caplog.text


def test_quiet_compute_logs_nothing(kit, caplog):
    """Tests that non-verbose derivation is silent."""
    with caplog.at_level(logging.INFO, logger="stencilkit"):
        kit.compute(1, [-1, 0, 1])
    assert caplog.records == []


def test_verify_updates_last_formula(kit):
    """Tests that verification results become the last formula."""
    report = kit.verify(2, [-1, 0, 1], [1, -2, 1], 1)
    assert report.valid
    assert kit.formula() == report.result

    report = kit.verify(1, [-1, 0, 1], [1, 1, 1], 1)
    assert not report.valid
    assert kit.formula().coefficients == (-1, 0, 1)


def test_truncation_error_string(kit):
    """Tests the formatted leading error term."""
    with pytest.raises(NoFormulaYet):
        kit.truncation_error()
    kit.compute(1, [-1, 0, 1])
    assert kit.truncation_error() == (
        "f'(x[i]) = ( -1*f(x[i-1]) + 1*f(x[i+1]) ) / (2*h) - 1/6*h^2*f'''(x[i]) + O(h^3)"
    )


def test_as_tuple_exposes_codegen_inputs(kit):
    """Tests that (order, stencil, k, m) are exposed unchanged."""
    r = kit.compute(2, [-1, 0, 1])
    assert r.as_tuple() == (2, (-1, 0, 1), (1, -2, 1), 1)
    assert isinstance(r, FormulaResult)
