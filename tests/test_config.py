import pytest

from ynab_mcp.config import DEFAULT_BASE_URL, Settings
from ynab_mcp.errors import ConfigurationError


def test_token_is_required():
    with pytest.raises(ConfigurationError):
        Settings.from_env({})


def test_defaults():
    settings = Settings.from_env({"YNAB_API_TOKEN": "secret"})
    assert settings.token == "secret"
    assert settings.budget_id is None
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timezone is None
    assert settings.timeout == 30.0
    assert settings.log_level == "INFO"


def test_overrides():
    settings = Settings.from_env({
        "YNAB_API_TOKEN": "secret",
        "YNAB_BUDGET_ID": "budget-42",
        "YNAB_API_BASE_URL": "http://localhost:8080/v1/",
        "YNAB_TIMEZONE": "UTC",
        "YNAB_HTTP_TIMEOUT": "5",
        "YNAB_LOG_LEVEL": "debug",
    })
    assert settings.budget_id == "budget-42"
    assert settings.base_url == "http://localhost:8080/v1"
    assert settings.timezone.key == "UTC"
    assert settings.timeout == 5.0
    assert settings.log_level == "DEBUG"


def test_bad_timezone_and_timeout():
    with pytest.raises(ConfigurationError):
        Settings.from_env({"YNAB_API_TOKEN": "secret", "YNAB_TIMEZONE": "Mars/Olympus_Mons"})
    with pytest.raises(ConfigurationError):
        Settings.from_env({"YNAB_API_TOKEN": "secret", "YNAB_HTTP_TIMEOUT": "soon"})
