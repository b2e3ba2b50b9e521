import sys
import os

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from shipping_tiers.config.settings import Settings
from shipping_tiers.services.settings_service import SettingsService


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway settings file."""
    return Settings(project_root=tmp_path, settings_file=tmp_path / 'shipping_settings.json')


@pytest.fixture
def settings_service(settings):
    return SettingsService(settings)
