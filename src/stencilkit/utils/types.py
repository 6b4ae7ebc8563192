"""Shared typing aliases for StencilKit."""

from __future__ import annotations

from fractions import Fraction
from numbers import Rational
from typing import Iterable, TypeAlias

Stencil: TypeAlias = tuple[int, ...]
RationalVector: TypeAlias = tuple[Fraction, ...]
RationalMatrix: TypeAlias = list[list[Fraction]]

RationalLike: TypeAlias = Rational | int | float | str
StencilLike: TypeAlias = int | range | Iterable[int | range]
