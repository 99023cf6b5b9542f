from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def format_denom(amount: int) -> str:
    """Render minor units for display: 150 -> "$1.50", 50 -> "50c"."""
    if amount >= 100:
        major = (Decimal(amount) / Decimal(100)).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
        return f"${major}"
    return f"{amount}c"
