"""Engine subpackage - tier parsing and shipping cost resolution."""
from .models import Tier, RuleRows, RuleText, ShippingRequest, ShippingRate
from .rule_parser import parse_rules, format_rules
from .tier_resolver import resolve_cost

__all__ = [
    'Tier', 'RuleRows', 'RuleText', 'ShippingRequest', 'ShippingRate',
    'parse_rules', 'format_rules', 'resolve_cost',
]
