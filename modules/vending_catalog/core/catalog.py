from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping

from modules.change_maker.core.format import format_denom


@dataclass(frozen=True)
class Product:
    """
    A product on sale in the machine.

    Attributes
    ----------
    id : str
        Unique identifier.
    name : str
        Display name.
    price : int
        Price in minor units (cents).
    stock : int
        Units left in the machine.
    description : str
        Short blurb shown next to the product.
    """
    id: str
    name: str
    price: int
    stock: int
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Product.id must be non-empty.")
        if self.price < 0:
            raise ValueError(f"Product[{self.id}] price must be >= 0.")
        if self.stock < 0:
            raise ValueError(f"Product[{self.id}] stock must be >= 0.")

    @property
    def price_label(self) -> str:
        return format_denom(self.price)

    def take_one(self) -> "Product":
        if self.stock <= 0:
            raise ValueError(f"Product[{self.id}] is out of stock.")
        return replace(self, stock=self.stock - 1)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Product":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            price=int(data["price"]),
            stock=int(data["stock"]),
            description=str(data.get("description") or ""),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "stock": self.stock,
            "description": self.description,
        }


DEFAULT_PRODUCTS: List[Product] = [
    Product("vitC", "Vitamin C 1000mg", 1299, 12, "Immune support supplement."),
    Product("paracetamol", "Paracetamol 500mg", 399, 20, "General-purpose mild pain relief."),
    Product("ibuprofen", "Ibuprofen 200mg", 699, 15, "Anti-inflammatory analgesic."),
    Product("antihistamine", "Non-Drowsy Antihistamine", 1299, 10, "Seasonal allergy relief."),
    Product("coldflu", "Cold & Flu Day/Night Pack", 1499, 6, "Symptom management combo pack."),
    Product("magnesium", "Magnesium Tablets 300mg", 899, 18, "General supplement."),
]


def find_product(product_id: str, products: Iterable[Product] = DEFAULT_PRODUCTS) -> Product | None:
    for product in products:
        if product.id == product_id:
            return product
    return None
