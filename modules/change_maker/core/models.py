from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping

if TYPE_CHECKING:
    from modules.change_maker.core.debug import DebugSnapshot


@dataclass(frozen=True)
class CoinSlot:
    """One denomination in the register and how many units of it are available."""

    denom: int
    count: int

    def __post_init__(self) -> None:
        if self.denom < 0:
            raise ValueError(f"CoinSlot denom must be >= 0, got {self.denom}.")
        if self.count < 0:
            raise ValueError(f"CoinSlot[{self.denom}] count must be >= 0.")

    @property
    def value(self) -> int:
        return self.denom * self.count

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CoinSlot":
        return cls(denom=int(data["denom"]), count=int(data["count"]))

    def as_dict(self) -> Dict[str, int]:
        return {"denom": self.denom, "count": self.count}


def as_register(slots: Iterable[CoinSlot | Mapping[str, Any]]) -> List[CoinSlot]:
    return [
        slot if isinstance(slot, CoinSlot) else CoinSlot.from_mapping(slot)
        for slot in slots
    ]


def total_value(register: Iterable[CoinSlot]) -> int:
    return sum(slot.value for slot in register)


class FailureKind(str, Enum):
    EMPTY_REGISTER = "empty_register"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    NO_EXACT_SOLUTION = "no_exact_solution"
    INTERNAL_INCONSISTENCY = "internal_inconsistency"


@dataclass
class ChangeResult:
    """
    Outcome of one change computation.

    On success ``change`` lists the dispensed denominations in ascending order,
    ``coin_usage`` maps denom to units used and ``updated_register`` is a new
    register with those units removed. On failure ``failure`` names the reason
    and the three solution fields stay empty.
    """

    success: bool
    message: str
    failure: FailureKind | None = None
    change: List[int] = field(default_factory=list)
    coin_usage: Dict[int, int] = field(default_factory=dict)
    updated_register: List[CoinSlot] = field(default_factory=list)
    debug: "DebugSnapshot | None" = None

    @property
    def coin_count(self) -> int:
        return len(self.change)

    def as_payload(self) -> Dict[str, Any]:
        debug = self.debug.as_payload() if self.debug is not None else None
        if not self.success:
            return {
                "success": False,
                "message": self.message,
                "reason": self.failure.value if self.failure else None,
                "debug": debug,
            }
        return {
            "success": True,
            "message": self.message,
            "change": list(self.change),
            "coinUsage": {str(denom): used for denom, used in self.coin_usage.items()},
            "updatedRegister": [slot.as_dict() for slot in self.updated_register],
            "debug": debug,
        }
