from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP


def round_to_step(amount: int, step: int = 5) -> int:
    """Round minor units to the nearest multiple of ``step``, halves going up."""
    if step <= 0:
        raise ValueError("step must be greater than zero")
    ratio = Decimal(amount) / Decimal(step)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP)) * step


def round_to_nearest5(amount: int) -> int:
    """
    Cash rounding to the 5c coin: last digit 1-2 goes down to 0, 3-4 up to 5,
    6-7 down to 5 and 8-9 up to the next 10.
    """
    return round_to_step(amount, 5)
