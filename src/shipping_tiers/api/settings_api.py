"""
Settings API - FastAPI router for shipping configuration.
"""
from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..services.settings_service import SettingsService, ShippingSettings
from .state import get_settings_service

router = APIRouter(prefix="/api/settings", tags=["settings"])


# Pydantic models for API
class TierResponse(BaseModel):
    """A validated tier."""
    min: int
    max: int
    cost: float


class SettingsUpdate(BaseModel):
    """Request model for updating settings. Omitted fields are left unchanged."""
    rules: Optional[Union[str, list[dict[str, Any]]]] = None
    free_threshold: Optional[Union[int, str]] = None
    label: Optional[str] = None
    enabled: Optional[Union[bool, str]] = None


class SettingsResponse(BaseModel):
    """Response model for stored settings."""
    rules: list[TierResponse]
    rules_text: str
    free_threshold: int
    label: str
    enabled: bool
    updated_at: Optional[str]


def to_response(shipping: ShippingSettings) -> SettingsResponse:
    return SettingsResponse(
        rules=[TierResponse(min=t.min, max=t.max, cost=float(t.cost)) for t in shipping.tiers],
        rules_text=shipping.rules_text,
        free_threshold=shipping.free_threshold,
        label=shipping.label,
        enabled=shipping.enabled,
        updated_at=shipping.updated_at,
    )


# Endpoints

@router.get("", response_model=SettingsResponse)
async def get_settings(service: SettingsService = Depends(get_settings_service)):
    """Get the stored shipping settings."""
    return to_response(service.load())


@router.put("", response_model=SettingsResponse)
async def update_settings(
    updates: SettingsUpdate,
    service: SettingsService = Depends(get_settings_service)
):
    """Update settings. Values are sanitized before they are stored."""
    update_dict = updates.model_dump(exclude_unset=True)
    # An explicit null means "not provided"
    update_dict = {k: v for k, v in update_dict.items() if v is not None}

    try:
        return to_response(service.update(update_dict))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/reset", response_model=SettingsResponse)
async def reset_settings(service: SettingsService = Depends(get_settings_service)):
    """Restore default settings."""
    return to_response(service.reset())


@router.get("/stats")
async def get_stats(service: SettingsService = Depends(get_settings_service)):
    """Get statistics about the stored configuration."""
    return service.get_stats()
