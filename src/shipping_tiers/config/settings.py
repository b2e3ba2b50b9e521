"""
Centralized settings and path configuration for quantity tier shipping.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


DEFAULT_RULES_TEXT = "1,10,5\n11,30,8\n31,50,12"


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Persisted shipping configuration (rules, threshold, label)
    settings_file: Path

    # Defaults used when nothing has been stored yet
    default_rules_text: str = DEFAULT_RULES_TEXT
    default_free_threshold: int = 0
    default_label: str = "Shipping"
    default_enabled: bool = True

    rate_id: str = "quantity_based_shipping"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()

        settings_file = os.environ.get('SHIPPING_TIERS_SETTINGS_FILE')
        if settings_file:
            settings_path = Path(settings_file)
        else:
            settings_path = root / 'data' / 'shipping_settings.json'

        return cls(
            project_root=root,
            settings_file=settings_path,
            default_label=os.environ.get('SHIPPING_TIERS_DEFAULT_LABEL', 'Shipping'),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
