from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.change_maker.tool.schemas import CoinIn, check_amount, check_register
from modules.vending_catalog.core.catalog import Product


class ProductIn(BaseModel):
    id: str = Field(min_length=1, pattern=r"^[^,\r\n]+$")
    name: str = Field(min_length=1, pattern=r"^[^\r\n]+$")
    price: int = Field(ge=0)
    stock: int = Field(ge=0)
    description: str = ""

    def to_product(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            price=self.price,
            stock=self.stock,
            description=self.description,
        )


class PurchaseRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId", min_length=1)
    payment_amount: int = Field(alias="paymentAmount", ge=0)
    cash_register: List[CoinIn] = Field(alias="cashRegister")
    products: List[ProductIn] | None = None
    debug: bool = False

    @field_validator("cash_register")
    @classmethod
    def _register(cls, v):
        return check_register(v)

    @field_validator("payment_amount")
    @classmethod
    def _amount(cls, v):
        return check_amount(v)
