"""Human-readable rendering of formulas and Taylor series.

Formulas are written with grid notation, ``x[i+j]`` standing for
``x + j*h``, e.g.::

    f'(x[i]) = ( -1*f(x[i-1]) + 1*f(x[i+1]) ) / (2*h)
"""

from __future__ import annotations

from fractions import Fraction
from typing import Sequence

from stencilkit.results import FormulaResult
from stencilkit.utils.types import RationalLike

__all__ = [
    "derivative_symbol",
    "format_rational",
    "format_formula",
    "format_taylor_series",
    "format_truncation_error",
]


def derivative_symbol(order: int) -> str:
    """Returns ``f``, ``f'``, ``f''``, ``f'''`` or ``f^(n)``."""
    if order <= 3:
        return "f" + "'" * order
    return f"f^({order})"


def _grid_point(offset: int) -> str:
    if offset == 0:
        return "x[i]"
    return f"x[i{offset:+d}]"


def format_rational(value: RationalLike) -> str:
    """Formats a fraction as ``3`` or ``-1/12``."""
    value = Fraction(value)
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"


def _format_decimal(value: float, decimal_places: int) -> str:
    text = f"{value:.{decimal_places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _step_power(power: int) -> str:
    if power == 0:
        return ""
    if power == 1:
        return "h"
    return f"h^{power}"


def format_formula(
    result: FormulaResult,
    *,
    decimal_places: int | None = None,
) -> str:
    """Formats a formula.

    Args:
        result: The formula to format.
        decimal_places: If given, print the per-point weights ``k/m`` as
            decimals rounded to this many places instead of the exact
            integer coefficients and multiplier.

    Returns:
        One line such as ``f''(x[i]) = ( 1*f(x[i-1]) - 2*f(x[i]) + 1*f(x[i+1]) ) / (1*h^2)``.
    """
    lhs = f"{derivative_symbol(result.order)}(x[i])"
    h = _step_power(result.order)

    if decimal_places is None:
        values = result.coefficients
        render = format_rational
        denom = f"({format_rational(result.multiplier)}*{h})"
    else:
        values = result.weights
        def render(v):
            return _format_decimal(float(v), decimal_places)
        denom = h

    terms: list[str] = []
    for k, j in zip(values, result.stencil):
        if k == 0:
            continue
        body = f"{render(abs(k))}*f({_grid_point(j)})"
        if not terms:
            terms.append(body if k > 0 else f"-{body}")
        else:
            terms.append(f"{'+' if k > 0 else '-'} {body}")

    return f"{lhs} = ( {' '.join(terms)} ) / {denom}"


def format_taylor_series(
    coefficients: Sequence[RationalLike],
    *,
    offset: int | None = None,
) -> str:
    """Formats a Taylor series in powers of ``h``.

    Args:
        coefficients: Series coefficients, term ``t`` multiplying
            ``h**t * f^(t)(x[i])``.
        offset: If given, the series is labelled as the expansion of
            ``f(x[i+offset])``.

    Returns:
        The series, e.g. ``f(x[i+1]) = f(x[i]) + 1*h*f'(x[i]) + 1/2*h^2*f''(x[i]) + ...``.
    """
    terms: list[str] = []
    for t, c in enumerate(coefficients):
        c = Fraction(c)
        if c == 0:
            continue
        factor = "*".join(p for p in (_step_power(t), f"{derivative_symbol(t)}(x[i])") if p)
        if t == 0 and abs(c) == 1:
            body = factor
        else:
            body = f"{format_rational(abs(c))}*{factor}"
        if not terms:
            terms.append(body if c > 0 else f"-{body}")
        else:
            terms.append(f"{'+' if c > 0 else '-'} {body}")

    series = " ".join(terms) if terms else "0"
    if offset is None:
        return f"{series} + ..."
    return f"f({_grid_point(offset)}) = {series} + ..."


def format_truncation_error(result: FormulaResult, leading: tuple[int, Fraction]) -> str:
    """Formats the formula with its leading error term.

    Args:
        result: The formula.
        leading: ``(q, c_q)`` from
            :func:`~stencilkit.finite.truncation.leading_error_coefficient`.

    Returns:
        E.g. ``f'(x[i]) = ( ... ) / (2*h) - 1/6*h^2*f'''(x[i]) + O(h^3)``.
    """
    q, c = leading
    p = q - result.order
    err = -Fraction(c) / result.multiplier
    sign = "+" if err > 0 else "-"
    term = f"{format_rational(abs(err))}*{_step_power(p)}*{derivative_symbol(q)}(x[i])"
    return f"{format_formula(result)} {sign} {term} + O(h^{p + 1})"
