"""
Settings Service - Persistence for shipping configuration.
Handles reading/writing the settings JSON and importing tier tables.
"""
import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from ..config.settings import Settings, get_settings
from ..engine.models import Tier
from ..engine.rule_parser import RULE_FIELDS, format_rules, parse_rules
from ..engine.sanitizer import (
    sanitize_enabled,
    sanitize_label,
    sanitize_rules,
    sanitize_threshold,
)


@dataclass
class ShippingSettings:
    """Stored shipping configuration, always in sanitized form."""
    rules: list[dict] = field(default_factory=list)
    free_threshold: int = 0
    label: str = "Shipping"
    enabled: bool = True
    updated_at: Optional[str] = None

    @property
    def tiers(self) -> list[Tier]:
        return parse_rules(self.rules)

    @property
    def rules_text(self) -> str:
        return format_rules(self.tiers)

    def to_json_dict(self) -> dict:
        """Convert to JSON-safe dict. Costs are strings to keep Decimal precision."""
        return {
            'rules': [
                {'min': r['min'], 'max': r['max'], 'cost': str(r['cost'])}
                for r in self.rules
            ],
            'free_threshold': self.free_threshold,
            'label': self.label,
            'enabled': self.enabled,
            'updated_at': self.updated_at,
        }

    @classmethod
    def from_json_dict(
        cls,
        data: dict,
        default_label: str = "Shipping",
        default_enabled: bool = True
    ) -> 'ShippingSettings':
        """Create from stored JSON. Values are re-sanitized on the way in."""
        return cls(
            rules=sanitize_rules(data.get('rules', [])),
            free_threshold=sanitize_threshold(data.get('free_threshold', 0)),
            label=sanitize_label(data.get('label'), default=default_label),
            enabled=sanitize_enabled(data.get('enabled'), default=default_enabled),
            updated_at=data.get('updated_at'),
        )


def find_overlaps(tiers: list[Tier]) -> list[str]:
    """Describe tiers shadowed (fully or partly) by an earlier tier."""
    warnings = []
    for i, tier in enumerate(tiers):
        for earlier in tiers[:i]:
            if tier.min <= earlier.max and earlier.min <= tier.max:
                warnings.append(
                    f"Tier {tier.min}-{tier.max} overlaps earlier tier "
                    f"{earlier.min}-{earlier.max} (earlier tier wins)"
                )
    return warnings


class SettingsService:
    """Service for loading and storing shipping configuration."""

    TABLE_SUFFIXES = {'.csv', '.xlsx'}

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.settings_path = self.settings.settings_file

    def defaults(self) -> ShippingSettings:
        """Configuration used before anything has been stored."""
        return ShippingSettings(
            rules=[tier.to_dict() for tier in parse_rules(self.settings.default_rules_text)],
            free_threshold=self.settings.default_free_threshold,
            label=self.settings.default_label,
            enabled=self.settings.default_enabled,
        )

    def load(self) -> ShippingSettings:
        """Load stored settings, falling back to defaults if missing or unreadable."""
        if not self.settings_path.exists():
            return self.defaults()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            return self.defaults()

        if not isinstance(data, dict):
            return self.defaults()

        return ShippingSettings.from_json_dict(
            data,
            default_label=self.settings.default_label,
            default_enabled=self.settings.default_enabled,
        )

    def save(self, shipping: ShippingSettings) -> ShippingSettings:
        """Write settings to disk atomically."""
        shipping.updated_at = datetime.now().isoformat()

        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.settings_path.with_suffix(self.settings_path.suffix + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(shipping.to_json_dict(), f, indent=2)
        tmp_path.replace(self.settings_path)

        return shipping

    def update(self, updates: dict[str, Any]) -> ShippingSettings:
        """
        Apply a partial update and persist it.

        `rules` may be structured rows or `min,max,cost` text; every value is
        sanitized before it is stored.
        """
        shipping = self.load()

        if 'rules' in updates:
            rules = updates['rules']
            if isinstance(rules, str):
                shipping.rules = [tier.to_dict() for tier in parse_rules(rules)]
            else:
                shipping.rules = sanitize_rules(rules)

        if 'free_threshold' in updates:
            shipping.free_threshold = sanitize_threshold(updates['free_threshold'])

        if 'label' in updates:
            shipping.label = sanitize_label(updates['label'], default=self.settings.default_label)

        if 'enabled' in updates:
            shipping.enabled = sanitize_enabled(updates['enabled'], default=shipping.enabled)

        return self.save(shipping)

    def reset(self) -> ShippingSettings:
        """Restore default configuration."""
        return self.save(self.defaults())

    def read_table(self, path: Path) -> list[dict]:
        """Read a CSV/Excel tier table into raw rows (strings, in file order)."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Tier table not found at {path}")

        suffix = path.suffix.lower()
        if suffix not in self.TABLE_SUFFIXES:
            raise ValueError(f"Unsupported tier table format '{suffix}', expected one of {sorted(self.TABLE_SUFFIXES)}")

        if suffix == '.csv':
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
        else:
            df = pd.read_excel(path, dtype=str, keep_default_na=False)

        df.columns = [str(col).strip().lower() for col in df.columns]
        missing = [col for col in RULE_FIELDS if col not in df.columns]
        if missing:
            raise ValueError(f"Tier table is missing columns: {', '.join(missing)}")

        for col in RULE_FIELDS:
            df[col] = df[col].astype(str).str.strip()

        return df[list(RULE_FIELDS)].to_dict(orient='records')

    def import_table(
        self,
        path: Path,
        free_threshold: Optional[int] = None,
        label: Optional[str] = None,
        verbose: bool = True
    ) -> dict:
        """
        Replace stored rules with the contents of a tier table.

        Args:
            path: CSV or Excel file with min, max, cost columns
            free_threshold: Optional threshold to store alongside
            label: Optional label to store alongside
            verbose: Print progress messages

        Returns:
            Import report dictionary
        """
        rows = self.read_table(path)
        updates: dict[str, Any] = {'rules': rows}
        if free_threshold is not None:
            updates['free_threshold'] = free_threshold
        if label is not None:
            updates['label'] = label

        shipping = self.update(updates)
        tiers = shipping.tiers

        report = {
            "timestamp": shipping.updated_at,
            "source_file": str(path),
            "rows_read": len(rows),
            "rows_imported": len(tiers),
            "rows_dropped": len(rows) - len(tiers),
            "warnings": find_overlaps(tiers),
            "output_file": str(self.settings_path),
        }

        if verbose:
            print(f"Imported {report['rows_imported']} tiers from {path} ({report['rows_dropped']} dropped)")
            for warning in report["warnings"]:
                print(f"  WARNING: {warning}")
            print(f"Settings saved to: {self.settings_path}")

        return report

    def get_stats(self) -> dict:
        """Get statistics about the stored configuration."""
        shipping = self.load()
        tiers = shipping.tiers
        return {
            'enabled': shipping.enabled,
            'tiers': len(tiers),
            'free_threshold': shipping.free_threshold,
            'free_shipping_enabled': shipping.free_threshold > 0,
            'max_covered_quantity': max((t.max for t in tiers), default=0),
            'overlaps': find_overlaps(tiers),
        }
