"""Utility functions for StencilKit package."""

from .linalg import (
    null_space,
    rref,
)

__all__ = [
    "null_space",
    "rref",
]
