"""Unit tests for `utils.thread_safety`."""

from __future__ import annotations

import threading
import time

import pytest

from stencilkit.exceptions import NoFormulaYet
from stencilkit.formula_kit import FormulaKit
from stencilkit.utils.thread_safety import SerializedEngine, serialize_calls, wrap_with_lock


def test_wrap_with_lock_returns_none_when_fn_is_none() -> None:
    """Tests that wrap_with_lock returns None when fn is None."""
    assert wrap_with_lock(None) is None


def test_wrap_with_lock_holds_the_given_lock() -> None:
    """Tests that the wrapped call runs while the supplied lock is held."""
    lock = threading.Lock()
    seen: dict[str, bool] = {}

    def f(x: int, y: int = 2) -> int:
        seen["free"] = lock.acquire(blocking=False)
        if seen["free"]:
            lock.release()
        return x + y

    wrapped = wrap_with_lock(f, lock=lock)
    assert wrapped is not None
    assert wrapped(3, y=10) == 13
    assert seen["free"] is False


def test_serialize_calls_forwards_methods_and_settings() -> None:
    """Tests that the proxy behaves like the wrapped engine."""
    kit = FormulaKit()
    shared = serialize_calls(kit)
    assert isinstance(shared, SerializedEngine)

    with pytest.raises(NoFormulaYet):
        shared.formula()

    r = shared.compute(1, [-1, 0, 1])
    assert shared.last_result is r
    assert kit.last_result is r

    shared.max_terms = 12
    assert kit.max_terms == 12


def test_serialize_calls_hides_private_state() -> None:
    """Tests that private engine attributes are not reachable through the proxy."""
    shared = serialize_calls(FormulaKit())
    with pytest.raises(AttributeError):
        _ = shared._last


def test_serialize_calls_runs_one_call_at_a_time() -> None:
    """Tests that concurrent calls through the proxy never overlap."""
    in_region = 0
    max_in_region = 0
    mu = threading.Lock()

    class SlowEngine:
        def work(self, delay_s: float) -> None:
            nonlocal in_region, max_in_region
            with mu:
                in_region += 1
                max_in_region = max(max_in_region, in_region)
            time.sleep(delay_s)
            with mu:
                in_region -= 1

    shared = serialize_calls(SlowEngine())
    n = 6
    barrier = threading.Barrier(n)

    def worker() -> None:
        barrier.wait()
        shared.work(0.02)

    threads = [threading.Thread(target=worker) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert max_in_region == 1


def test_shared_engine_keeps_a_consistent_last_formula() -> None:
    """Tests that threads deriving through one proxy leave a complete result."""
    shared = serialize_calls(FormulaKit())
    stencils = [[-1, 0, 1], [0, 1, 2], [-2, -1, 0], [-2, -1, 0, 1, 2]]
    results = []

    def worker(stencil: list[int]) -> None:
        results.append(shared.compute(1, stencil))

    threads = [threading.Thread(target=worker, args=(s,)) for s in stencils]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert shared.last_result in results
