from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

from modules.change_maker.core.format import format_denom
from modules.change_maker.core.models import CoinSlot
from modules.change_maker.core.naive import (
    MAX_NAIVE_AMOUNT,
    MAX_NAIVE_CALLS,
    NaiveSummary,
    run_naive,
)

if TYPE_CHECKING:
    from modules.change_maker.core.solver import DPTable

MAX_DEBUG_AMOUNT = 500
MAX_TRACE_LINES = 120

TRUNCATION_MARKER = "... trace truncated for brevity / performance."
ZERO_TARGET_LINE = "Target amount is 0, no DP needed."


@dataclass(frozen=True)
class DebugLimits:
    """
    Caps that keep debug output bounded.

    Attributes
    ----------
    preview_amount : int
        Highest amount included in the DP table preview.
    trace_lines : int
        Trace lines kept before the truncation marker.
    naive_amount : int
        Targets above this skip the naive solver entirely.
    naive_calls : int
        Call budget of the naive solver.
    """

    preview_amount: int = MAX_DEBUG_AMOUNT
    trace_lines: int = MAX_TRACE_LINES
    naive_amount: int = MAX_NAIVE_AMOUNT
    naive_calls: int = MAX_NAIVE_CALLS


class TraceRecorder:
    """Ordered, capped log of DP decisions."""

    def __init__(self, max_lines: int = MAX_TRACE_LINES) -> None:
        self.max_lines = max_lines
        self.lines: List[str] = []

    @property
    def full(self) -> bool:
        return len(self.lines) > self.max_lines

    def add(self, line: str) -> None:
        if len(self.lines) < self.max_lines:
            self.lines.append(line)
        elif len(self.lines) == self.max_lines:
            self.lines.append(TRUNCATION_MARKER)

    def coin(self, denom: int, count: int) -> None:
        if not self.full:
            self.add(f"Processing coin {format_denom(denom)} (count={count})")

    def improvement(self, amount: int, units: int, denom: int, prev: int, best: int) -> None:
        if not self.full:
            self.add(
                f"amount {amount}: using {units} x {format_denom(denom)} "
                f"(prev={prev}) -> best={best}"
            )


@dataclass(frozen=True)
class PreviewRow:
    amount: int
    reachable: bool
    min_coins: int | None
    last_coin: int | None = None

    def as_payload(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "reachable": self.reachable,
            "minCoins": self.min_coins,
            "lastCoin": self.last_coin,
        }


@dataclass
class DebugSnapshot:
    target_amount: int
    coin_set: List[int]
    register_snapshot: List[CoinSlot]
    dp_table_preview: List[PreviewRow] = field(default_factory=list)
    trace: List[str] = field(default_factory=list)
    naive: NaiveSummary | None = None

    def as_payload(self) -> Dict[str, Any]:
        return {
            "targetAmount": self.target_amount,
            "coinSet": list(self.coin_set),
            "registerSnapshot": [slot.as_dict() for slot in self.register_snapshot],
            "dpTablePreview": [row.as_payload() for row in self.dp_table_preview],
            "trace": list(self.trace),
            "naive": self.naive.as_payload() if self.naive is not None else None,
        }


def build_table_preview(table: "DPTable", max_amount: int = MAX_DEBUG_AMOUNT) -> List[PreviewRow]:
    """One row per amount of the final DP row, from 0 up to the cap."""
    rows: List[PreviewRow] = []
    last = table.rows - 1
    for amount in range(min(table.target, max_amount) + 1):
        reachable = table.reachable(last, amount)
        rows.append(
            PreviewRow(
                amount=amount,
                reachable=reachable,
                min_coins=table.value(last, amount) if reachable else None,
            )
        )
    return rows


def build_snapshot(
    *,
    target: int,
    slots: Sequence[CoinSlot],
    limits: DebugLimits,
    table: "DPTable | None" = None,
    trace: TraceRecorder | None = None,
) -> DebugSnapshot:
    denoms = [slot.denom for slot in slots if slot.denom > 0]
    return DebugSnapshot(
        target_amount=target,
        coin_set=denoms,
        register_snapshot=list(slots),
        dp_table_preview=(
            build_table_preview(table, limits.preview_amount) if table is not None else []
        ),
        trace=list(trace.lines) if trace is not None else [],
        naive=run_naive(
            denoms,
            target,
            amount_cap=limits.naive_amount,
            call_budget=limits.naive_calls,
        ),
    )


def zero_target_snapshot(slots: Sequence[CoinSlot]) -> DebugSnapshot:
    return DebugSnapshot(
        target_amount=0,
        coin_set=[slot.denom for slot in slots if slot.denom > 0],
        register_snapshot=list(slots),
        trace=[ZERO_TARGET_LINE],
        naive=NaiveSummary(
            enabled=False,
            amount_tried=0,
            result_coins=0,
            calls=0,
            truncated=False,
        ),
    )
