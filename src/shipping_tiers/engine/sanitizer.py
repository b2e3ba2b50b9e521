"""
Sanitizer - Normalizes configuration before it is stored.

Shares the parser's row validation so persisted rules are always in the
same shape the resolver expects.
"""
import re
from collections.abc import Mapping
from typing import Any

from .rule_parser import coerce_int, format_rules, parse_rules, validate_row


_TAGS = re.compile(r'<[^>]*>')
_CONTROL_WHITESPACE = re.compile(r'[\r\n\t\0]+')
_SPACES = re.compile(r' {2,}')

_TRUTHY = {'yes', 'true', '1', 'on'}
_FALSY = {'no', 'false', '0', 'off', ''}


def sanitize_rules(value: Any) -> list[dict]:
    """Validate structured rows for storage. Text input is not accepted here."""
    if isinstance(value, Mapping):
        rows = list(value.values())
    elif isinstance(value, (list, tuple)):
        rows = value
    else:
        rows = []

    clean = []
    for row in rows:
        tier = validate_row(row)
        if tier is not None:
            clean.append(tier.to_dict())
    return clean


def sanitize_rules_text(value: Any) -> str:
    """Round-trip rule text through validation into canonical lines."""
    if not isinstance(value, str):
        return ""
    return format_rules(parse_rules(value))


def sanitize_threshold(value: Any) -> int:
    """Non-negative integer threshold; negative input is taken as its magnitude."""
    return abs(coerce_int(value))


def sanitize_label(value: Any, default: str = "Shipping") -> str:
    """Plain single-line label with markup stripped."""
    if not isinstance(value, str):
        return default
    text = _TAGS.sub('', value)
    text = _CONTROL_WHITESPACE.sub(' ', text)
    text = _SPACES.sub(' ', text).strip()
    return text or default


def sanitize_enabled(value: Any, default: bool = True) -> bool:
    """Checkbox-style toggle: bools pass through, 'yes'/'no' style strings are parsed."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUTHY:
            return True
        if text in _FALSY:
            return False
    return default
