"""Recovery strategies for stencils that admit no formula.

When the solver fails on the requested stencil, the search retries on
strictly smaller stencils obtained by dropping points from the ends:

* ``forward`` keeps the smallest offset and drops the current largest one,
* ``backward`` keeps the largest offset and drops the current smallest one,
* ``bidirectional`` runs both shrinks in lockstep and keeps the one that
  succeeds after fewer removals.

A search never goes below ``order + 1`` points and never revisits a stencil,
so it finishes after at most ``len(stencil) - order - 1`` shrink steps.

Tie-break for ``bidirectional``: when both directions succeed after the same
number of removals, a stencil symmetric around zero wins; otherwise the
forward result wins.

Only solver failures are recovered from by default. ``InsufficientTerms``
from the truncation analysis reaches the caller unless
``recover_truncation=True`` is passed.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from functools import lru_cache, partial

from stencilkit.config import DEFAULT_MAX_TERMS
from stencilkit.exceptions import (
    DegenerateStencil,
    InsufficientTerms,
    NoFormulaExists,
    NoSolutionAtThisStencil,
)
from stencilkit.finite.core import derive_formula
from stencilkit.finite.stencil import dropped_offsets, is_symmetric, minimum_points
from stencilkit.logger import stencilkit_logger
from stencilkit.results import FormulaResult, SearchResult
from stencilkit.utils.types import Stencil

__all__ = [
    "RECOVERABLE_ERRORS",
    "recoverable_errors",
    "search_forward",
    "search_backward",
    "search_bidirectional",
    "find_formula",
    "available_strategies",
]

#: Solver failures on a single stencil that a search recovers from.
RECOVERABLE_ERRORS = (NoSolutionAtThisStencil, DegenerateStencil)

Deriver = Callable[[int, Stencil], FormulaResult]


def recoverable_errors(recover_truncation: bool = False) -> tuple[type[Exception], ...]:
    """Returns the failures a search retries on."""
    if recover_truncation:
        return RECOVERABLE_ERRORS + (InsufficientTerms,)
    return RECOVERABLE_ERRORS


def _attempt(
    derive: Deriver,
    order: int,
    stencil: Stencil,
    recover: tuple[type[Exception], ...],
) -> FormulaResult | None:
    """Runs one derivation, returning ``None`` on a recoverable failure."""
    try:
        return derive(order, stencil)
    except recover as exc:
        stencilkit_logger.debug("Stencil %s failed: %s", list(stencil), exc)
        return None


def _exhausted(order: int, stencil: Stencil, strategy: str, attempts: int) -> NoFormulaExists:
    return NoFormulaExists(
        f"[Search] no formula for derivative order {order} on stencil {list(stencil)} "
        f"or any {strategy} reduction of it ({attempts} shrink steps tried).",
        order=order,
        stencil=stencil,
        attempts=attempts,
    )


def _deriver(max_terms: int, maximize_accuracy: bool) -> Deriver:
    return partial(
        derive_formula,
        max_terms=max_terms,
        maximize_accuracy=maximize_accuracy,
    )


def _shrunk(stencil: Stencil, removed: int, strategy: str) -> Stencil:
    if strategy == "forward":
        return stencil[:len(stencil) - removed]
    return stencil[removed:]


def _max_removals(order: int, stencil: Stencil) -> int:
    return max(len(stencil) - minimum_points(order), 0)


def _found(stencil: Stencil, result: FormulaResult, strategy: str, attempts: int) -> SearchResult:
    return SearchResult(
        result=result,
        requested=stencil,
        dropped=dropped_offsets(stencil, result.stencil),
        strategy=strategy,
        attempts=attempts,
    )


def _search_one_side(
    order: int,
    stencil: Stencil,
    *,
    strategy: str,
    derive: Deriver,
    recover: tuple[type[Exception], ...],
) -> SearchResult:
    """Shrinks the stencil from one end until a formula is found."""
    stencil = tuple(stencil)
    for removed in range(1, _max_removals(order, stencil) + 1):
        result = _attempt(derive, order, _shrunk(stencil, removed, strategy), recover)
        if result is not None:
            return _found(stencil, result, strategy, removed)
    raise _exhausted(order, stencil, strategy, _max_removals(order, stencil))


def search_forward(
    order: int,
    stencil: Stencil,
    *,
    max_terms: int = DEFAULT_MAX_TERMS,
    maximize_accuracy: bool = True,
    recover_truncation: bool = False,
) -> SearchResult:
    """Keeps the smallest offset and drops the largest until a formula exists.

    Args:
        order: Derivative order.
        stencil: Normalized stencil the full derivation failed on.
        max_terms: Term ceiling for the truncation analysis.
        maximize_accuracy: Passed to the solver.
        recover_truncation: Also shrink on ``InsufficientTerms``.

    Returns:
        The first formula found with the dropped offsets.

    Raises:
        NoFormulaExists: If fewer than ``order + 1`` points would remain.
        InsufficientTerms: If a shrunk stencil's error term lies beyond
            ``max_terms`` and ``recover_truncation`` is off.
    """
    return _search_one_side(
        order,
        stencil,
        strategy="forward",
        derive=_deriver(max_terms, maximize_accuracy),
        recover=recoverable_errors(recover_truncation),
    )


def search_backward(
    order: int,
    stencil: Stencil,
    *,
    max_terms: int = DEFAULT_MAX_TERMS,
    maximize_accuracy: bool = True,
    recover_truncation: bool = False,
) -> SearchResult:
    """Keeps the largest offset and drops the smallest until a formula exists.

    Same arguments, return value and errors as :func:`search_forward`.
    """
    return _search_one_side(
        order,
        stencil,
        strategy="backward",
        derive=_deriver(max_terms, maximize_accuracy),
        recover=recoverable_errors(recover_truncation),
    )


def search_bidirectional(
    order: int,
    stencil: Stencil,
    *,
    max_terms: int = DEFAULT_MAX_TERMS,
    maximize_accuracy: bool = True,
    recover_truncation: bool = False,
) -> SearchResult:
    """Runs the forward and backward shrinks in lockstep.

    Each step drops one more point in both directions; the first step where
    either direction succeeds decides. See the module docstring for the
    tie-break. Same arguments, return value and errors as
    :func:`search_forward`.
    """
    stencil = tuple(stencil)
    derive = _deriver(max_terms, maximize_accuracy)
    recover = recoverable_errors(recover_truncation)

    for removed in range(1, _max_removals(order, stencil) + 1):
        forward = _attempt(derive, order, _shrunk(stencil, removed, "forward"), recover)
        backward = _attempt(derive, order, _shrunk(stencil, removed, "backward"), recover)
        if forward is None and backward is None:
            continue
        if forward is None or (
            backward is not None
            and is_symmetric(backward.stencil)
            and not is_symmetric(forward.stencil)
        ):
            return _found(stencil, backward, "bidirectional", removed)
        return _found(stencil, forward, "bidirectional", removed)

    raise _exhausted(order, stencil, "bidirectional", _max_removals(order, stencil))


_STRATEGY_SPECS: list[tuple[str, Callable[..., SearchResult], list[str]]] = [
    ("forward", search_forward, ["fwd", "right"]),
    ("backward", search_backward, ["bwd", "left"]),
    ("bidirectional", search_bidirectional, ["both", "general", "bidi"]),
]


def _norm(s: str) -> str:
    """Normalize a strategy string (case/spacing/punct insensitive)."""
    return re.sub(r"[^a-z0-9]+", "", s.lower())


@lru_cache(maxsize=1)
def _strategy_map() -> tuple[dict[str, Callable[..., SearchResult]], tuple[str, ...]]:
    strategies: dict[str, Callable[..., SearchResult]] = {}
    for name, fn, aliases in _STRATEGY_SPECS:
        strategies[_norm(name)] = fn
        for a in aliases:
            strategies[_norm(a)] = fn
    return strategies, tuple(name for name, _, _ in _STRATEGY_SPECS)


def available_strategies() -> list[str]:
    """Lists the canonical search strategy names."""
    return list(_strategy_map()[1])


def _resolve(strategy: str) -> Callable[..., SearchResult]:
    strategies, canon = _strategy_map()
    try:
        return strategies[_norm(strategy)]
    except KeyError:
        opts = ", ".join(canon)
        raise ValueError(f"Unknown search strategy '{strategy}'. Choose one of {{{opts}}}.") from None


def find_formula(
    order: int,
    stencil: Stencil,
    *,
    strategy: str = "bidirectional",
    max_terms: int = DEFAULT_MAX_TERMS,
    maximize_accuracy: bool = True,
    recover_truncation: bool = False,
) -> SearchResult:
    """Derives a formula on the full stencil, searching smaller ones on failure.

    Args:
        order: Derivative order.
        stencil: Normalized stencil.
        strategy: ``"forward"``, ``"backward"`` or ``"bidirectional"``.
        max_terms: Term ceiling for the truncation analysis.
        maximize_accuracy: Passed to the solver.
        recover_truncation: Also search when the truncation analysis runs out
            of Taylor terms.

    Returns:
        The formula with the stencil actually used; ``strategy`` is
        ``"full"`` when no point had to be dropped.

    Raises:
        ValueError: If ``strategy`` is unknown.
        NoFormulaExists: If neither the full stencil nor any reduction works.
        InsufficientTerms: If an error term lies beyond ``max_terms`` and
            ``recover_truncation`` is off.
    """
    search = _resolve(strategy)
    stencil = tuple(stencil)
    try:
        result = derive_formula(
            order, stencil, max_terms=max_terms, maximize_accuracy=maximize_accuracy
        )
    except recoverable_errors(recover_truncation) as exc:
        stencilkit_logger.info(
            "No formula on the full stencil %s (%s); searching smaller stencils.",
            list(stencil),
            type(exc).__name__,
        )
        return search(
            order,
            stencil,
            max_terms=max_terms,
            maximize_accuracy=maximize_accuracy,
            recover_truncation=recover_truncation,
        )
    return SearchResult(result=result, requested=stencil)
