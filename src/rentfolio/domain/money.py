import math
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal, localcontext

_CENT = Decimal("0.01")


def round_money(value: float) -> float:
    """
    Round to 2 decimal places, ties toward +infinity (2.345 -> 2.35,
    -2.345 -> -2.34), the way a dashboard's Math.round(x * 100) / 100 does.

    Goes through repr() so 1.005 rounds to 1.01 (what the user typed),
    not to the binary neighbour 1.00499999...
    Non-finite values collapse to 0.0. Any finite magnitude is accepted.
    """
    value = float(value)
    if not math.isfinite(value):
        return 0.0
    exact = Decimal(repr(value))
    mode = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    with localcontext() as ctx:
        # enough digits for the integer part plus cents
        ctx.prec = max(ctx.prec, exact.adjusted() + 4)
        rounded = exact.quantize(_CENT, rounding=mode)
    # normalise -0.0
    return float(rounded) + 0.0


# Percentages follow the same 2-decimal rule as currency.
round_pct = round_money


def safe_pct(numerator: float, denominator: float) -> float:
    """numerator / denominator * 100, or 0.0 when the denominator is not positive."""
    if denominator > 0:
        return numerator / denominator * 100.0
    return 0.0
