"""
Tier Resolver - Resolves a shipping cost for a cart quantity.

Resolution order:
1. Free threshold (when enabled) short-circuits to zero cost
2. First tier whose inclusive range contains the quantity wins
3. No match falls back to zero cost
"""
from decimal import Decimal
from typing import Optional, Sequence

from .models import Tier, TraceStep

ZERO_COST = Decimal(0)


def is_free(quantity: int, free_threshold: int) -> bool:
    """A threshold of 0 disables free shipping; the comparison is inclusive."""
    return free_threshold > 0 and quantity >= free_threshold


def find_tier(quantity: int, rules: Sequence[Tier]) -> Optional[Tier]:
    """Return the first tier containing the quantity, in declaration order."""
    for tier in rules:
        if tier.contains(quantity):
            return tier
    return None


def resolve_cost(quantity: int, rules: Sequence[Tier], free_threshold: int = 0) -> Decimal:
    """Resolve the shipping cost for a quantity against validated tiers."""
    if is_free(quantity, free_threshold):
        return ZERO_COST

    tier = find_tier(quantity, rules)
    return tier.cost if tier is not None else ZERO_COST


def resolve_with_trace(
    quantity: int,
    rules: Sequence[Tier],
    free_threshold: int = 0
) -> tuple[Decimal, Optional[Tier], list[TraceStep]]:
    """
    Resolve cost with trace of resolution steps.

    Returns (cost, matched_tier, trace_steps).
    """
    trace = [TraceStep("Quantity", "Resolving shipping for cart quantity", str(quantity))]

    if is_free(quantity, free_threshold):
        trace.append(TraceStep("Free Threshold", f"Quantity reached threshold {free_threshold}", "0"))
        return ZERO_COST, None, trace

    if free_threshold > 0:
        trace.append(TraceStep("Free Threshold", f"Below threshold {free_threshold}"))
    else:
        trace.append(TraceStep("Free Threshold", "Disabled"))

    tier = find_tier(quantity, rules)
    if tier is None:
        trace.append(TraceStep("Fallback", f"No tier matched among {len(rules)} rules", "0"))
        return ZERO_COST, None, trace

    trace.append(TraceStep("Tier Match", f"qty in [{tier.min}, {tier.max}]", str(tier.cost)))
    return tier.cost, tier, trace
