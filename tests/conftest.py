"""Pytest configuration with a fixture providing a fresh formula engine."""

import pytest

from stencilkit.formula_kit import FormulaKit

__all__ = ["kit"]


@pytest.fixture
def kit():
    """Return a fresh engine with default settings."""
    return FormulaKit()
