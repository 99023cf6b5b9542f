"""
Cash purchase of a single product.

The change due is rounded to the nearest 5c before the register is asked for
it, since the machine holds no 1c or 2c coins. Nothing is persisted: the
caller receives the updated register and product and decides what to keep.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping

import structlog

from modules.cashround.core.rounding import round_to_nearest5
from modules.change_maker.core.debug import DebugLimits
from modules.change_maker.core.models import ChangeResult, CoinSlot, as_register, total_value
from modules.change_maker.core.solver import compute_change
from modules.vending_catalog.core.catalog import Product

logger = structlog.get_logger(__name__)

MSG_OUT_OF_STOCK = "Product is out of stock."
MSG_UNDERPAID = "Payment must exceed product price."
MSG_LOW_BALANCE = "Machine does not have enough balance to give change."


@dataclass
class PurchaseResult:
    success: bool
    message: str
    product: Product
    payment: int
    change_due: int = 0
    rounded_change: int = 0
    change: ChangeResult | None = None

    def as_payload(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "product": self.product.as_dict(),
            "paymentAmount": self.payment,
            "changeDue": self.change_due,
            "roundedChange": self.rounded_change,
            "result": self.change.as_payload() if self.change is not None else None,
        }


def purchase(
    product: Product,
    payment: int,
    register: Iterable[CoinSlot | Mapping[str, int]],
    *,
    debug: bool = False,
    limits: DebugLimits | None = None,
) -> PurchaseResult:
    slots = as_register(register)

    if product.stock <= 0:
        return PurchaseResult(False, MSG_OUT_OF_STOCK, product, payment)
    if payment <= product.price:
        return PurchaseResult(False, MSG_UNDERPAID, product, payment)

    change_due = payment - product.price
    rounded = round_to_nearest5(change_due)
    if total_value(slots) < rounded:
        return PurchaseResult(
            False,
            MSG_LOW_BALANCE,
            product,
            payment,
            change_due=change_due,
            rounded_change=rounded,
        )

    result = compute_change(slots, rounded, debug=debug, limits=limits)
    if not result.success:
        return PurchaseResult(
            False,
            result.message,
            product,
            payment,
            change_due=change_due,
            rounded_change=rounded,
            change=result,
        )

    logger.info(
        "purchase.completed",
        product=product.id,
        payment=payment,
        change_due=change_due,
        rounded_change=rounded,
        coins=result.coin_count,
    )
    return PurchaseResult(
        True,
        f"Purchased {product.name}.",
        product.take_one(),
        payment,
        change_due=change_due,
        rounded_change=rounded,
        change=result,
    )
