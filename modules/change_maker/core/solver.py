"""
Bounded coin change: the fewest coins that add up to an amount exactly,
never using more units of a denomination than the register holds.

    dp[i][a] = fewest coins making ``a`` from the first ``i`` coin types
               (ascending by denomination), each limited to its count.

Every reachable cell keeps the number of units of coin ``i`` that produced it,
which is enough to walk back from ``(n, target)`` to ``(0, 0)`` and recover the
coins actually dispensed.
"""

from __future__ import annotations

from array import array
from decimal import Decimal
from typing import Iterable, List, Mapping, NamedTuple, Sequence

import structlog

from modules.change_maker.core.debug import (
    DebugLimits,
    TraceRecorder,
    build_snapshot,
    zero_target_snapshot,
)
from modules.change_maker.core.models import (
    ChangeResult,
    CoinSlot,
    FailureKind,
    as_register,
    total_value,
)

logger = structlog.get_logger(__name__)

NO_LINK = -1

MSG_NO_CHANGE = "No change required."
MSG_SUCCESS = "Change computed successfully."
MSG_EMPTY = "Cash register is empty."
MSG_NO_EXACT = "Exact change not possible with current coin counts."


class ParentLink(NamedTuple):
    prefix: int
    amount: int
    units_used: int


class DPTable:
    """
    Dense (prefix length x amount) table owned by a single solve.

    ``values`` holds the fewest coins per cell, ``unreachable`` where no
    combination exists. ``units`` holds how many units of the row's coin
    were applied, ``NO_LINK`` for cells without a parent.
    """

    def __init__(self, denoms: Sequence[int], target: int) -> None:
        self.denoms = list(denoms)
        self.target = target
        self.rows = len(self.denoms) + 1
        self.unreachable = target + 1
        self.values = [array("q", [self.unreachable]) * (target + 1) for _ in range(self.rows)]
        self.units = [array("q", [NO_LINK]) * (target + 1) for _ in range(self.rows)]
        self.values[0][0] = 0
        self.units[0][0] = 0

    def value(self, prefix: int, amount: int) -> int:
        return self.values[prefix][amount]

    def reachable(self, prefix: int, amount: int) -> bool:
        return self.values[prefix][amount] < self.unreachable

    def parent(self, prefix: int, amount: int) -> ParentLink | None:
        if prefix == 0:
            return None
        used = self.units[prefix][amount]
        if used == NO_LINK:
            return None
        return ParentLink(prefix - 1, amount - used * self.denoms[prefix - 1], used)

    def fill(self, counts: Sequence[int], trace: TraceRecorder | None = None) -> None:
        for i in range(1, self.rows):
            coin = self.denoms[i - 1]
            max_count = counts[i - 1]
            prev_values = self.values[i - 1]
            row_values = self.values[i]
            row_units = self.units[i]
            if trace is not None:
                trace.coin(coin, max_count)

            for amount in range(self.target + 1):
                best = prev_values[amount]
                row_values[amount] = best
                if best < self.unreachable:
                    row_units[amount] = 0

                for k in range(1, max_count + 1):
                    prev_amount = amount - k * coin
                    if prev_amount < 0:
                        break
                    if prev_values[prev_amount] >= self.unreachable:
                        continue
                    candidate = prev_values[prev_amount] + k
                    if candidate < best:
                        best = candidate
                        row_values[amount] = candidate
                        row_units[amount] = k
                        if trace is not None:
                            trace.improvement(amount, k, coin, prev_amount, candidate)

    def backtrack(self) -> List[int]:
        """Units used per coin type along the parent links from (n, target)."""
        usage = [0] * (self.rows - 1)
        prefix, amount = self.rows - 1, self.target
        while prefix > 0:
            link = self.parent(prefix, amount)
            if link is None:
                break
            usage[prefix - 1] += link.units_used
            prefix, amount = link.prefix, link.amount
        return usage


def _insufficient_message(available: int) -> str:
    dollars = (Decimal(available) / Decimal(100)).quantize(Decimal("0.01"))
    return (
        "Machine cannot provide change, insufficient total balance. "
        f"Available: ${dollars}"
    )


def compute_change(
    register: Iterable[CoinSlot | Mapping[str, int]],
    amount: int,
    *,
    debug: bool = False,
    limits: DebugLimits | None = None,
) -> ChangeResult:
    """
    Find the fewest-coin exact change for ``amount`` from ``register``.

    Failures come back as a ``ChangeResult`` with ``success=False`` and a
    ``FailureKind``; nothing is raised for an unpayable amount, only
    ``ValueError`` for a negative one. With
    ``debug=True`` a ``DebugSnapshot`` is attached to every outcome.
    """
    if amount < 0:
        raise ValueError(f"Change amount must be >= 0, got {amount}.")
    limits = limits or DebugLimits()
    slots = as_register(register)

    if amount == 0:
        return ChangeResult(
            success=True,
            message=MSG_NO_CHANGE,
            updated_register=list(slots),
            debug=zero_target_snapshot(slots) if debug else None,
        )

    if not slots:
        logger.info("change.failed", amount=amount, slots=0, reason=FailureKind.EMPTY_REGISTER.value)
        return ChangeResult(
            success=False,
            message=MSG_EMPTY,
            failure=FailureKind.EMPTY_REGISTER,
            debug=build_snapshot(target=amount, slots=slots, limits=limits) if debug else None,
        )

    available = total_value(slots)
    if available < amount:
        logger.info(
            "change.failed",
            amount=amount,
            slots=len(slots),
            available=available,
            reason=FailureKind.INSUFFICIENT_BALANCE.value,
        )
        return ChangeResult(
            success=False,
            message=_insufficient_message(available),
            failure=FailureKind.INSUFFICIENT_BALANCE,
            debug=build_snapshot(target=amount, slots=slots, limits=limits) if debug else None,
        )

    coins = sorted(slots, key=lambda slot: slot.denom)
    active = [slot for slot in coins if slot.denom > 0]

    trace = TraceRecorder(limits.trace_lines) if debug else None
    table = DPTable([slot.denom for slot in active], amount)
    table.fill([slot.count for slot in active], trace)

    def snapshot():
        if not debug:
            return None
        return build_snapshot(target=amount, slots=coins, limits=limits, table=table, trace=trace)

    if not table.reachable(table.rows - 1, amount):
        logger.info(
            "change.failed",
            amount=amount,
            slots=len(slots),
            reason=FailureKind.NO_EXACT_SOLUTION.value,
        )
        return ChangeResult(
            success=False,
            message=MSG_NO_EXACT,
            failure=FailureKind.NO_EXACT_SOLUTION,
            debug=snapshot(),
        )

    # zero-denomination slots never enter the table and keep their count
    usage_iter = iter(table.backtrack())
    per_slot = [next(usage_iter) if slot.denom > 0 else 0 for slot in coins]

    change: List[int] = []
    used_by_denom: dict[int, int] = {}
    updated: List[CoinSlot] = []
    overdrawn: List[int] = []
    for slot, used in zip(coins, per_slot):
        if used > slot.count:
            overdrawn.append(slot.denom)
            continue
        if used > 0:
            used_by_denom[slot.denom] = used_by_denom.get(slot.denom, 0) + used
            change.extend([slot.denom] * used)
        updated.append(CoinSlot(denom=slot.denom, count=slot.count - used))

    if overdrawn or sum(change) != amount:
        logger.error(
            "change.inconsistent",
            amount=amount,
            usage=used_by_denom,
            overdrawn=overdrawn,
        )
        return ChangeResult(
            success=False,
            message=(
                "Internal error: reconstructed change does not match the register "
                f"(denominations {overdrawn or 'n/a'})."
            ),
            failure=FailureKind.INTERNAL_INCONSISTENCY,
            debug=snapshot(),
        )

    logger.info(
        "change.solved",
        amount=amount,
        slots=len(slots),
        coins=len(change),
    )
    return ChangeResult(
        success=True,
        message=MSG_SUCCESS,
        change=change,
        coin_usage=used_by_denom,
        updated_register=updated,
        debug=snapshot(),
    )
