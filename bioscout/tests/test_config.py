"""Tests for bioscout.config."""

from __future__ import annotations

import pytest

from bioscout.config import Config

_ENV_KEYS = (
    "YOUTUBE_API_KEY",
    "BIOSCOUT_TIMEOUT",
    "BIOSCOUT_HTTP_TIMEOUT",
    "BIOSCOUT_MAX_ITEMS",
    "BIOSCOUT_RUN_DEADLINE",
    "BIOSCOUT_EXPAND_LINKS",
    "BIOSCOUT_EXPAND_CONCURRENCY",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestFromEnv:
    def test_defaults(self) -> None:
        config = Config.from_env()
        assert config == Config()
        assert config.run_deadline is None
        assert config.expand_links is True

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("YOUTUBE_API_KEY", "abc")
        monkeypatch.setenv("BIOSCOUT_TIMEOUT", "7.5")
        monkeypatch.setenv("BIOSCOUT_MAX_ITEMS", "3")
        monkeypatch.setenv("BIOSCOUT_RUN_DEADLINE", "30")
        config = Config.from_env()
        assert config.youtube_api_key == "abc"
        assert config.platform_timeout == 7.5
        assert config.max_items_per_platform == 3
        assert config.run_deadline == 30.0

    @pytest.mark.parametrize("value", ["0", "false", "No", "off"])
    def test_expand_links_disabled(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("BIOSCOUT_EXPAND_LINKS", value)
        assert Config.from_env().expand_links is False

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Config().platform_timeout = 1.0  # type: ignore[misc]
