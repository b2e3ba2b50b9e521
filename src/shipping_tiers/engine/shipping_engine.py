"""
Shipping Engine - Evaluation entry point with traceability.

Combines request overrides with stored configuration and delegates cost
resolution to the tier resolver:
1. Rules, threshold and label come from the request when given
2. Otherwise they are read from the settings service
3. A disabled shipping method yields no rate
4. The label is passed through untouched alongside the computed cost
"""
from typing import Optional

from ..services.settings_service import SettingsService
from .models import ShippingRate, ShippingRequest
from .rule_parser import coerce_int, parse_rules
from .tier_resolver import is_free, resolve_with_trace


class ShippingEngine:
    """Computes quantity based shipping rates."""

    def __init__(self, settings_service: Optional[SettingsService] = None):
        self.settings_service = settings_service or SettingsService()
        self.rate_id = self.settings_service.settings.rate_id

    def calculate(self, request: ShippingRequest) -> Optional[ShippingRate]:
        """
        Calculate a shipping rate with full traceability.

        Args:
            request: ShippingRequest with quantity and optional overrides

        Returns:
            ShippingRate with cost, label and trace, or None when the
            shipping method is disabled
        """
        stored = self.settings_service.load()
        if not stored.enabled:
            return None

        raw_rules = request.rules if request.rules is not None else stored.rules
        free_threshold = (
            coerce_int(request.free_threshold)
            if request.free_threshold is not None
            else stored.free_threshold
        )
        label = request.label if request.label is not None else stored.label

        # Rule set is rebuilt from raw configuration on every evaluation
        rules = parse_rules(raw_rules)
        quantity = max(int(request.quantity), 0)
        cost, tier, trace = resolve_with_trace(quantity, rules, free_threshold)

        rate = ShippingRate(
            id=self.rate_id,
            label=label,
            cost=cost,
            quantity=quantity,
            free_shipping=is_free(quantity, free_threshold),
            matched_tier=tier,
        )
        source = "Request" if request.rules is not None else "Stored settings"
        rate.add_trace("Rules", f"{source} provided {len(rules)} valid tiers", None)
        rate.trace.extend(trace)

        return rate

    def quote(self, quantity: int) -> Optional[dict]:
        """Calculate a rate from stored settings (bare id/label/cost dict)."""
        rate = self.calculate(ShippingRequest(quantity=quantity))
        return rate.to_legacy_dict() if rate is not None else None
