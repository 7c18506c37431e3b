"""Shared fixtures for the vendor status test suite."""

from pathlib import Path

import pytest

from vendor_status.core.config import EngineSettings, get_settings
from vendor_status.services.normalization_service import StatusNormalizationService

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def read_fixture():
    """Return a loader for text fixtures by file name."""

    def _read(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _read


@pytest.fixture
def engine_settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def service(engine_settings) -> StatusNormalizationService:
    return StatusNormalizationService(engine_settings)


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Keep environment overrides from leaking between tests."""
    for name in ("VENDOR_STATUS_LOGGING__LEVEL", "VENDOR_STATUS_SOURCES_FILE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
