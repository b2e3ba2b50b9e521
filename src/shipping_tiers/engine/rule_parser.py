"""
Rule Parser - Normalizes raw tier configuration into validated tiers.

Raw rules arrive either as row-like records (`min`, `max`, `cost` fields) or
as legacy text with one `min,max,cost` rule per line. Parsing never raises:
rows that fail validation are dropped and order is preserved.
"""
import math
import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from .models import RawRules, RuleRows, RuleText, Tier


# Leading numeric prefix, e.g. " 12abc" -> "12", "3.5 kg" -> "3.5"
_NUMERIC_PREFIX = re.compile(r'\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)')
_LINE_BREAK = re.compile(r'\r\n|\r|\n')

RULE_FIELDS = ('min', 'max', 'cost')

INT_MAX = 2 ** 63 - 1
INT_MIN = -(2 ** 63)


def _numeric_prefix(value: str) -> Optional[str]:
    match = _NUMERIC_PREFIX.match(value)
    return match.group(1) if match else None


def _clamp_int(number: Decimal) -> int:
    """Truncate toward zero, saturating at the signed 64-bit range."""
    if not number.is_finite():
        return 0
    if number >= INT_MAX:
        return INT_MAX
    if number <= INT_MIN:
        return INT_MIN
    return int(number)


def coerce_int(value: Any) -> int:
    """
    Coerce a raw field to an integer. Anything non-numeric becomes 0.

    Out-of-range values saturate at INT_MAX / INT_MIN, so arbitrarily long
    digit strings never reach `int(str)`.
    """
    if value is None:
        return 0
    if isinstance(value, (bool, int)):
        return _clamp_int(Decimal(int(value)))
    if isinstance(value, float):
        return _clamp_int(Decimal(value)) if math.isfinite(value) else 0
    if isinstance(value, Decimal):
        return _clamp_int(value)
    if isinstance(value, str):
        text = _numeric_prefix(value)
        if text is None:
            return 0
        try:
            return _clamp_int(Decimal(text))
        except InvalidOperation:
            return 0
    return 0


def coerce_decimal(value: Any) -> Decimal:
    """Coerce a raw field to a Decimal. Anything non-numeric becomes 0."""
    if value is None:
        return Decimal(0)
    if isinstance(value, (bool, int)):
        return Decimal(int(value))
    if isinstance(value, float):
        return Decimal(repr(value)) if math.isfinite(value) else Decimal(0)
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)
    if isinstance(value, str):
        text = _numeric_prefix(value)
        if text is None:
            return Decimal(0)
        try:
            return Decimal(text)
        except InvalidOperation:
            return Decimal(0)
    return Decimal(0)


def _field(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def validate_row(row: Any) -> Optional[Tier]:
    """
    Validate and normalize a single raw row.

    Returns None when min or max is not positive, or max < min.
    """
    min_qty = coerce_int(_field(row, 'min'))
    max_qty = coerce_int(_field(row, 'max'))
    cost = coerce_decimal(_field(row, 'cost'))

    if min_qty <= 0 or max_qty <= 0 or max_qty < min_qty:
        return None

    return Tier(min=min_qty, max=max_qty, cost=cost)


def split_rule_lines(text: str) -> list[dict]:
    """Split legacy rule text into raw rows. Short and blank lines are skipped."""
    rows = []
    for line in _LINE_BREAK.split(text.strip()):
        line = line.strip()
        if not line:
            continue

        parts = [part.strip() for part in line.split(',')]
        if len(parts) < 3:
            continue

        rows.append(dict(zip(RULE_FIELDS, parts)))
    return rows


def as_raw_rules(raw: Any) -> Optional[RawRules]:
    """
    Tag loosely typed configuration as RuleRows or RuleText.

    Form posts arrive as `{index: row}` mappings, so a mapping contributes
    its values as rows. Unrecognised input yields None.
    """
    if isinstance(raw, (RuleRows, RuleText)):
        return raw
    if isinstance(raw, str):
        return RuleText(raw)
    if isinstance(raw, Mapping):
        return RuleRows(list(raw.values()))
    if isinstance(raw, (list, tuple)):
        return RuleRows(raw)
    return None


def _raw_rows(raw: Optional[RawRules]) -> Iterable[Any]:
    if isinstance(raw, RuleText):
        return split_rule_lines(raw.text) if isinstance(raw.text, str) else []
    if isinstance(raw, RuleRows):
        rows = raw.rows
        if isinstance(rows, Mapping):
            return list(rows.values())
        if isinstance(rows, (list, tuple)):
            return rows
    return []


def parse_rules(raw: Any) -> list[Tier]:
    """
    Parse raw rules into an ordered list of validated tiers.

    Args:
        raw: RuleRows, RuleText, or an untagged str / sequence / mapping

    Returns:
        Tiers in source order; invalid rows are dropped
    """
    tiers = []
    for row in _raw_rows(as_raw_rules(raw)):
        tier = validate_row(row)
        if tier is not None:
            tiers.append(tier)
    return tiers


def format_rules(tiers: Iterable[Tier]) -> str:
    """Serialize tiers as canonical `min,max,cost` lines."""
    return "\n".join(tier.to_line() for tier in tiers)
