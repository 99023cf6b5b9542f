"""
Unbounded reference solver shown next to the bounded DP in debug output.

Every denomination may be reused without limit, so the answer can legitimately
differ from what the register can actually pay out. The result is for display
only and is never used to check or override the DP solution.

The search is the memoized top-down recurrence

    solve(0) = 0, solve(a < 0) = inf, solve(a) = 1 + min(solve(a - d) for d)

driven by an explicit frame stack instead of Python recursion. Calls are
counted exactly as the recursive version would count them, memo hits included.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

MAX_NAIVE_AMOUNT = 8000
MAX_NAIVE_CALLS = 5000

DISABLED_NOTE = "disabled for this amount"


@dataclass
class NaiveSummary:
    enabled: bool
    amount_tried: int
    result_coins: int | None
    calls: int
    truncated: bool
    used_coins: List[int] = field(default_factory=list)
    usage_map: Dict[int, int] = field(default_factory=dict)
    note: str | None = None

    def as_payload(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "amountTried": self.amount_tried,
            "resultCoins": self.result_coins,
            "calls": self.calls,
            "truncated": self.truncated,
            "usedCoins": list(self.used_coins),
            "usageMap": {str(denom): used for denom, used in self.usage_map.items()},
            "note": self.note,
        }


@dataclass
class _Frame:
    amount: int
    next_index: int = 0
    best: float = math.inf
    best_coin: int | None = None

    def consider(self, coin: int, sub_result: float) -> None:
        candidate = 1 + sub_result
        if candidate < self.best:
            self.best = candidate
            self.best_coin = coin


class _NaiveRun:
    def __init__(self, denoms: Sequence[int], call_budget: int) -> None:
        self.denoms = list(denoms)
        self.call_budget = call_budget
        self.calls = 0
        self.truncated = False
        self.memo: Dict[int, float] = {}
        self.parent: Dict[int, int | None] = {}

    def _enter(self, amount: int) -> float | None:
        """Count one call; return its value, or None when it must be expanded."""
        self.calls += 1
        if self.calls > self.call_budget:
            self.truncated = True
            return math.inf
        if amount == 0:
            return 0
        if amount < 0:
            return math.inf
        if amount in self.memo:
            return self.memo[amount]
        return None

    def solve(self, amount: int) -> float:
        value = self._enter(amount)
        if value is not None:
            return value

        stack = [_Frame(amount)]
        result = math.inf
        while stack:
            frame = stack[-1]
            if frame.next_index < len(self.denoms):
                coin = self.denoms[frame.next_index]
                frame.next_index += 1
                sub_value = self._enter(frame.amount - coin)
                if sub_value is None:
                    stack.append(_Frame(frame.amount - coin))
                else:
                    frame.consider(coin, sub_value)
                continue

            self.memo[frame.amount] = frame.best
            self.parent[frame.amount] = frame.best_coin
            stack.pop()
            if stack:
                caller = stack[-1]
                caller.consider(self.denoms[caller.next_index - 1], frame.best)
            else:
                result = frame.best
        return result

    def reconstruct(self, amount: int) -> List[int]:
        used: List[int] = []
        remaining = amount
        while remaining > 0:
            coin = self.parent.get(remaining)
            if not coin:
                break
            used.append(coin)
            remaining -= coin
        return used


def run_naive(
    denoms: Sequence[int],
    amount: int,
    *,
    amount_cap: int = MAX_NAIVE_AMOUNT,
    call_budget: int = MAX_NAIVE_CALLS,
) -> NaiveSummary:
    if amount > amount_cap:
        return NaiveSummary(
            enabled=False,
            amount_tried=amount,
            result_coins=None,
            calls=0,
            truncated=True,
            note=DISABLED_NOTE,
        )

    run = _NaiveRun([denom for denom in denoms if denom > 0], call_budget)
    best = run.solve(amount)
    result_coins = None if math.isinf(best) else int(best)

    used_coins: List[int] = []
    usage_map: Dict[int, int] = {}
    if result_coins is not None:
        used_coins = run.reconstruct(amount)
        for coin in used_coins:
            usage_map[coin] = usage_map.get(coin, 0) + 1

    return NaiveSummary(
        enabled=True,
        amount_tried=amount,
        result_coins=result_coins,
        calls=run.calls,
        truncated=run.truncated,
        used_coins=used_coins,
        usage_map=usage_map,
    )
