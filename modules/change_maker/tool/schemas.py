from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from modules.change_maker.core.models import CoinSlot
from vendbox.settings import get_settings


class CoinIn(BaseModel):
    denom: int = Field(ge=0)
    count: int = Field(ge=0)

    def to_slot(self) -> CoinSlot:
        return CoinSlot(denom=self.denom, count=self.count)


def check_register(value: List[CoinIn]) -> List[CoinIn]:
    limit = get_settings().max_register_slots
    if not value:
        raise PydanticCustomError(
            "register_empty", "At least one denomination is required"
        )
    if len(value) > limit:
        raise PydanticCustomError(
            "register_too_large",
            "Too many denominations (max {limit})",
            {"limit": limit},
        )
    seen: set[int] = set()
    for coin in value:
        if coin.denom in seen:
            raise PydanticCustomError(
                "register_duplicate",
                "Duplicate denomination {denom}",
                {"denom": coin.denom},
            )
        seen.add(coin.denom)
    return value


def check_amount(value: int) -> int:
    if value > get_settings().max_payment_amount:
        raise PydanticCustomError("amount_too_large", "Payment amount too large")
    return value


class ChangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cash_register: List[CoinIn] = Field(alias="cashRegister")
    payment_amount: int = Field(alias="paymentAmount", ge=0)
    debug: bool = False

    @field_validator("cash_register")
    @classmethod
    def _register(cls, v):
        return check_register(v)

    @field_validator("payment_amount")
    @classmethod
    def _amount(cls, v):
        return check_amount(v)

    def register(self) -> List[CoinSlot]:
        return [coin.to_slot() for coin in self.cash_register]
