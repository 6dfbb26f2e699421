import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]

# Prefer the workspace copy over any installed distribution
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from cost_insights.config.settings import Settings, clear_settings_cache  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Each test sees settings built from its own environment"""
    for field in Settings.model_fields:
        monkeypatch.delenv(field.upper(), raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()
