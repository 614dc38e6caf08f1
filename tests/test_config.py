import pytest

from cmdb.config import get_settings
from cmdb.core import ConfigurationException


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_defaults(fresh_settings, monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")
    loaded = get_settings()
    assert loaded.log_level == "DEBUG"
    assert loaded.dashboard_recent_limit == 10
    assert (loaded.topology_center_x, loaded.topology_center_y, loaded.topology_radius) == (300.0, 200.0, 120.0)


def test_invalid_environment_is_a_configuration_error(fresh_settings, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "qa")
    with pytest.raises(ConfigurationException):
        get_settings()
