"""
Plain-text snapshot of the coin register and the product list.

    # Coin Register (denom,count)
    5,20
    10,15

    # Products (id,name,price,stock)
    vitC,Vitamin C 1000mg,1299,12

    # Metadata
    rounding=nearest5
    version=1

Import is forgiving: blank lines and ``//`` comments are ignored, and rows
that do not parse are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from modules.change_maker.core.models import CoinSlot
from modules.vending_catalog.core.catalog import Product

REGISTER_HEADER = "# Coin Register (denom,count)"
PRODUCTS_HEADER = "# Products (id,name,price,stock)"
METADATA_HEADER = "# Metadata"

DEFAULT_METADATA = {"rounding": "nearest5", "version": "1"}


@dataclass
class ImportedData:
    register: List[CoinSlot] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)


def export_data(
    register: Iterable[CoinSlot],
    products: Iterable[Product],
    metadata: Dict[str, str] | None = None,
) -> str:
    meta = {**DEFAULT_METADATA, **(metadata or {})}
    lines: List[str] = [REGISTER_HEADER]
    lines.extend(f"{slot.denom},{slot.count}" for slot in register)
    lines.append("")
    lines.append(PRODUCTS_HEADER)
    lines.extend(f"{p.id},{p.name},{p.price},{p.stock}" for p in products)
    lines.append("")
    lines.append(METADATA_HEADER)
    lines.extend(f"{key}={value}" for key, value in meta.items())
    return "\n".join(lines) + "\n"


def _parse_slot(line: str) -> CoinSlot | None:
    parts = [part.strip() for part in line.split(",")]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    try:
        return CoinSlot(denom=int(parts[0]), count=int(parts[1]))
    except ValueError:
        return None


def _parse_product(line: str) -> Product | None:
    # names may contain commas; id is the first field, price and stock the last two
    head = line.rsplit(",", 2)
    if len(head) < 3 or "," not in head[0]:
        return None
    product_id, name = (part.strip() for part in head[0].split(",", 1))
    price, stock = head[1].strip(), head[2].strip()
    if not (product_id and name and price and stock):
        return None
    try:
        return Product(id=product_id, name=name, price=int(price), stock=int(stock))
    except ValueError:
        return None


def import_data(text: str) -> ImportedData:
    data = ImportedData()
    mode: str | None = None

    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("//"):
            continue

        if line.startswith("# Coin Register"):
            mode = "register"
            continue
        if line.startswith("# Products"):
            mode = "products"
            continue
        if line.startswith(METADATA_HEADER):
            mode = "meta"
            continue

        if mode == "register":
            slot = _parse_slot(line)
            if slot is not None:
                data.register.append(slot)
        elif mode == "products":
            product = _parse_product(line)
            if product is not None:
                data.products.append(product)
        elif mode == "meta" and "=" in line:
            key, value = line.split("=", 1)
            if key.strip():
                data.metadata[key.strip()] = value.strip()

    return data
