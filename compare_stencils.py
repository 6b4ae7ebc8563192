"""Quick comparison of derived stencils on a few test functions.

Run with:
    python compare_stencils.py
"""

from __future__ import annotations

from typing import Any

import numpy as np

from stencilkit.finite.stencil import backward_stencil, central_stencil, forward_stencil
from stencilkit.formula_kit import FormulaKit


def rel_err(a: float, b: float) -> float:
    """Relative error with a safe denominator."""
    d = max(1.0, abs(a), abs(b))
    return abs(a - b) / d


def main() -> None:
    """Main comparison routine."""
    cases: list[dict[str, Any]] = [
        {"name": "sin", "order": 1, "f": np.sin, "df": np.cos, "x0_grid": [0.1, 0.7]},
        {"name": "exp", "order": 2, "f": np.exp, "df": np.exp, "x0_grid": [-0.5, 1.0]},
        {
            "name": "poly x^5",
            "order": 3,
            "f": lambda x: x**5,
            "df": lambda x: 60 * x**2,
            "x0_grid": [0.2, 0.7],
        },
        {
            "name": "high-freq sin(30x)",
            "order": 1,
            "f": lambda x: np.sin(30.0 * x),
            "df": lambda x: 30.0 * np.cos(30.0 * x),
            "x0_grid": [0.03, 0.21],
        },
    ]

    stencils: list[tuple[str, tuple[int, ...]]] = [
        ("central 5", central_stencil(5)),
        ("central 7", central_stencil(7)),
        ("forward 6", forward_stencil(6)),
        ("backward 6", backward_stencil(6)),
        ("skewed 5", (-1, 0, 1, 2, 3)),
    ]

    kit = FormulaKit()
    stepsize = 0.05
    line = "-" * 80

    for case in cases:
        order = case["order"]
        print(line)
        print(f"Function: {case['name']!r}, derivative order: {order}")
        print(line)

        evaluators = []
        for label, stencil in stencils:
            result = kit.compute(order, stencil)
            evaluators.append((label, result.truncation_order, kit.evaluator()))

        for x0 in case["x0_grid"]:
            truth = float(case["df"](x0))
            print(f"\nx0 = {x0:.6g}, analytic = {truth:.12g}")
            print("  {:>12s}  {:>4s}  {:>18s}  {:>18s}".format("stencil", "p", "estimate", "rel_err"))
            print("  " + "-" * 60)
            for label, p, fd in evaluators:
                est = float(fd(case["f"], float(x0), stepsize=stepsize))
                print(f"  {label:>12s}  {p:>4d}  {est:18.10e}  {rel_err(est, truth):18.10e}")

        print()


if __name__ == "__main__":
    main()
