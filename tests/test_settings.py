"""
Unit tests for environment-driven settings.
"""
import pytest
from pydantic import ValidationError

from apps.cashback.utils.settings import Settings

ENV_KEYS = (
    "PORT",
    "RECENT_TRANSACTIONS_LIMIT",
    "CASHBACK_CURRENCY",
    "CORS_MODE",
    "CORS_ALLOW_ORIGINS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestSettings:
    @pytest.mark.unit
    def test_defaults(self) -> None:
        s = Settings(_env_file=None)
        assert s.PORT == 3001
        assert s.RECENT_TRANSACTIONS_LIMIT == 10
        assert s.CASHBACK_CURRENCY == "usd"
        assert s.CORS_MODE == "open"
        assert s.cors_allow_origins_list == []

    @pytest.mark.unit
    def test_reads_and_normalizes_env(self, monkeypatch) -> None:
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("RECENT_TRANSACTIONS_LIMIT", "25")
        monkeypatch.setenv("CASHBACK_CURRENCY", "EUR")
        monkeypatch.setenv("CORS_MODE", "AllowList")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.test, https://b.test,")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        s = Settings(_env_file=None)
        assert s.PORT == 8080
        assert s.RECENT_TRANSACTIONS_LIMIT == 25
        assert s.CASHBACK_CURRENCY == "eur"
        assert s.CORS_MODE == "allowlist"
        assert s.cors_allow_origins_list == ["https://a.test", "https://b.test"]
        assert s.LOG_LEVEL == "DEBUG"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "key,value",
        [
            ("PORT", "80a"),
            ("PORT", "0"),
            ("PORT", "70000"),
            ("RECENT_TRANSACTIONS_LIMIT", "-3"),
            ("RECENT_TRANSACTIONS_LIMIT", "0"),
            ("RECENT_TRANSACTIONS_LIMIT", "ten"),
            ("CASHBACK_CURRENCY", "dollars"),
            ("CORS_MODE", "closed"),
            ("LOG_LEVEL", "LOUD"),
        ],
    )
    def test_rejects_invalid_values(self, monkeypatch, key, value) -> None:
        monkeypatch.setenv(key, value)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
