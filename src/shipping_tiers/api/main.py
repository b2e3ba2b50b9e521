from dataclasses import asdict
from typing import Any, Optional, Union

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from shipping_tiers import __version__
from shipping_tiers.engine import ShippingRequest
from shipping_tiers.engine.shipping_engine import ShippingEngine
from shipping_tiers.api.settings_api import router as settings_router, TierResponse
from shipping_tiers.api.state import get_engine

app = FastAPI(
    title="Quantity Tier Shipping API",
    description="Shipping cost lookup by total cart quantity",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include settings management API
app.include_router(settings_router)


class QuoteRequest(BaseModel):
    quantity: int = Field(ge=0)
    rules: Optional[Union[str, list[dict[str, Any]]]] = None
    free_threshold: Optional[int] = Field(default=None, ge=0)
    label: Optional[str] = None


class QuoteResponse(BaseModel):
    id: str
    label: str
    cost: float
    quantity: int
    free_shipping: bool
    matched_tier: Optional[TierResponse]
    trace: list[dict]


@app.get("/")
async def root():
    return {"status": "online", "message": "Quantity Tier Shipping API Active"}


@app.post("/shipping/quote", response_model=QuoteResponse)
async def quote_shipping(req: QuoteRequest, engine: ShippingEngine = Depends(get_engine)):
    try:
        rate = engine.calculate(ShippingRequest(
            quantity=req.quantity,
            rules=req.rules,
            free_threshold=req.free_threshold,
            label=req.label,
        ))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    if rate is None:
        raise HTTPException(status_code=404, detail="Quantity based shipping is disabled")

    tier = rate.matched_tier
    return QuoteResponse(
        id=rate.id,
        label=rate.label,
        cost=float(rate.cost),
        quantity=rate.quantity,
        free_shipping=rate.free_shipping,
        matched_tier=TierResponse(min=tier.min, max=tier.max, cost=float(tier.cost)) if tier else None,
        trace=[asdict(step) for step in rate.trace],
    )
