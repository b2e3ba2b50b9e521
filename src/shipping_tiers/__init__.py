"""
Quantity Tier Shipping

Resolves a shipping cost from total cart quantity using ordered, inclusive
quantity tiers with an optional free shipping threshold.
"""
from .engine.shipping_engine import ShippingEngine

__version__ = "1.0.0"

__all__ = ['ShippingEngine']
