"""Stencil construction and normalization.

A stencil is a strictly ascending tuple of distinct integer offsets. User
input may be unordered, contain duplicates and mix plain integers with
``range`` objects; :func:`normalize_stencil` turns all of these into the
canonical tuple or raises :class:`~stencilkit.exceptions.InvalidStencil`.
"""

from __future__ import annotations

import numbers
from collections.abc import Iterable

import numpy as np

from stencilkit.exceptions import InvalidStencil
from stencilkit.utils.types import Stencil, StencilLike

__all__ = [
    "as_offset",
    "normalize_stencil",
    "central_stencil",
    "forward_stencil",
    "backward_stencil",
    "is_symmetric",
    "dropped_offsets",
    "minimum_points",
]


def as_offset(value: object) -> int:
    """Converts one offset to ``int``, rejecting anything non-integral."""
    if isinstance(value, (bool, np.bool_)):
        raise InvalidStencil(f"[Stencil] offsets must be integers; got {value!r}.")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        if not np.isfinite(float(value)) or value != int(value):
            raise InvalidStencil(
                f"[Stencil] offsets must be integers; got {value!r}."
            )
        return int(value)
    raise InvalidStencil(
        f"[Stencil] offsets must be integers; got {type(value).__name__} {value!r}."
    )


def _flatten(stencil: StencilLike) -> list[int]:
    """Expands ranges and nested iterables into a flat list of offsets."""
    if isinstance(stencil, range):
        return list(stencil)
    if isinstance(stencil, (str, bytes)):
        raise InvalidStencil(f"[Stencil] cannot build a stencil from {stencil!r}.")
    if isinstance(stencil, np.ndarray):
        return [as_offset(v) for v in stencil.ravel().tolist()]
    if not isinstance(stencil, Iterable):
        return [as_offset(stencil)]

    out: list[int] = []
    for item in stencil:
        if isinstance(item, range):
            out.extend(item)
        elif isinstance(item, (str, bytes)):
            raise InvalidStencil(f"[Stencil] offsets must be integers; got {item!r}.")
        elif isinstance(item, Iterable):
            out.extend(_flatten(item))
        else:
            out.append(as_offset(item))
    return out


def normalize_stencil(stencil: StencilLike) -> Stencil:
    """Builds the canonical stencil from user input.

    Args:
        stencil: An integer, a ``range``, a NumPy integer array, or an
            iterable mixing integers and ranges. Order and duplicates do
            not matter.

    Returns:
        The offsets sorted ascending with duplicates removed.

    Raises:
        InvalidStencil: If an offset is not an integer or no offset is given.

    Examples:
        >>> normalize_stencil([1, -1, 0, 1])
        (-1, 0, 1)
        >>> normalize_stencil([range(-2, 0), 3])
        (-2, -1, 3)
    """
    offsets = sorted(set(_flatten(stencil)))
    if not offsets:
        raise InvalidStencil("[Stencil] a stencil needs at least one offset.")
    return tuple(offsets)


def central_stencil(num_points: int) -> Stencil:
    """Creates a central stencil, e.g. ``(-2, -1, 0, 1, 2)`` for five points.

    Args:
        num_points: Odd number of points.

    Returns:
        Offsets symmetric around zero.

    Raises:
        InvalidStencil: If ``num_points`` is not a positive odd integer.
    """
    if num_points < 1 or num_points % 2 == 0:
        raise InvalidStencil(
            f"[Stencil] a central stencil needs a positive odd number of points; got {num_points}."
        )
    half = num_points // 2
    return tuple(range(-half, half + 1))


def forward_stencil(num_points: int) -> Stencil:
    """Creates the one-sided stencil ``(0, 1, ..., num_points - 1)``."""
    if num_points < 1:
        raise InvalidStencil(f"[Stencil] num_points must be positive; got {num_points}.")
    return tuple(range(num_points))


def backward_stencil(num_points: int) -> Stencil:
    """Creates the one-sided stencil ``(-(num_points - 1), ..., -1, 0)``."""
    if num_points < 1:
        raise InvalidStencil(f"[Stencil] num_points must be positive; got {num_points}.")
    return tuple(range(-(num_points - 1), 1))


def is_symmetric(stencil: Stencil) -> bool:
    """Returns ``True`` if the stencil is its own mirror image about zero."""
    return tuple(stencil) == tuple(-j for j in reversed(stencil))


def dropped_offsets(requested: Stencil, effective: Stencil) -> Stencil:
    """Returns the offsets of ``requested`` that ``effective`` no longer uses."""
    kept = set(effective)
    return tuple(j for j in requested if j not in kept)


def minimum_points(order: int) -> int:
    """Returns the smallest stencil length that can carry a derivative of ``order``."""
    return order + 1
