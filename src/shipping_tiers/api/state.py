"""
Shared service instances for the API routers.

Routes receive these through FastAPI dependencies so tests can swap them
with `app.dependency_overrides`.
"""
from ..engine.shipping_engine import ShippingEngine
from ..services.settings_service import SettingsService

settings_service = SettingsService()
engine = ShippingEngine(settings_service)


def get_settings_service() -> SettingsService:
    return settings_service


def get_engine() -> ShippingEngine:
    return engine
