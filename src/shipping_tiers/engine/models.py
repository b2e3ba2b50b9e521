"""
Data models for the shipping engine.

Uses dataclasses for structured, type-safe data representation.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional, Sequence, Union


@dataclass(frozen=True)
class Tier:
    """An inclusive quantity range mapped to a fixed shipping cost."""
    min: int
    max: int
    cost: Decimal

    def contains(self, quantity: int) -> bool:
        return self.min <= quantity <= self.max

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max, "cost": self.cost}

    def to_line(self) -> str:
        """Canonical `min,max,cost` text line."""
        return f"{self.min},{self.max},{self.cost}"


@dataclass(frozen=True)
class RuleRows:
    """Raw rules supplied as row-like records with min/max/cost fields."""
    rows: Sequence[Any]


@dataclass(frozen=True)
class RuleText:
    """Raw rules supplied as newline separated `min,max,cost` text."""
    text: str


RawRules = Union[RuleRows, RuleText]


@dataclass
class TraceStep:
    """A single step in the shipping resolution trace."""
    step: str
    description: str
    value: Optional[str] = None

    def __str__(self) -> str:
        text = f"{self.step}: {self.description}"
        return f"{text} = {self.value}" if self.value else text


@dataclass
class ShippingRequest:
    """A shipping request. Unset configuration falls back to stored settings."""
    quantity: int
    rules: Any = None
    free_threshold: Optional[int] = None
    label: Optional[str] = None


@dataclass
class ShippingRate:
    """Complete result of a shipping calculation."""
    id: str
    label: str
    cost: Decimal
    quantity: int
    free_shipping: bool = False
    matched_tier: Optional[Tier] = None
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: Optional[str] = None) -> TraceStep:
        trace_step = TraceStep(step, description, value)
        self.trace.append(trace_step)
        return trace_step

    def get_trace_text(self, bullet: str = "→") -> str:
        """One line per resolution step, in order."""
        return "\n".join(f"{bullet} {trace_step}" for trace_step in self.trace)

    def to_legacy_dict(self) -> dict:
        """Convert to the bare rate shape (id, label, cost)."""
        return {
            "id": self.id,
            "label": self.label,
            "cost": self.cost,
        }
