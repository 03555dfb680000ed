"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from stakemate.config import Settings
from stakemate.shared.errors import ConfigurationError


@pytest.mark.unit
class TestDefaults:
    def test_empty_environment(self) -> None:
        settings = Settings.from_env({})
        assert settings == Settings()
        assert settings.cors_origins == ["http://localhost:3000"]
        assert settings.max_sessions == 1000
        assert settings.evict_when_full is True
        assert settings.max_message_length == 2000
        assert settings.random_seed is None
        assert settings.name_probability == 0.3
        assert settings.log_level == "INFO"

    def test_blank_values_use_defaults(self) -> None:
        settings = Settings.from_env(
            {"STAKEMATE_MAX_SESSIONS": "  ", "STAKEMATE_RANDOM_SEED": "", "LOG_LEVEL": ""}
        )
        assert settings.max_sessions == 1000
        assert settings.random_seed is None
        assert settings.log_level == "INFO"


@pytest.mark.unit
class TestParsing:
    def test_all_values(self) -> None:
        settings = Settings.from_env(
            {
                "STAKEMATE_CORS_ORIGINS": "http://a.test, http://b.test,",
                "STAKEMATE_MAX_SESSIONS": "0",
                "STAKEMATE_EVICT_WHEN_FULL": "no",
                "STAKEMATE_MAX_MESSAGE_LENGTH": "500",
                "STAKEMATE_RANDOM_SEED": "42",
                "STAKEMATE_NAME_PROBABILITY": "1",
                "LOG_LEVEL": "debug",
            }
        )
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
        assert settings.max_sessions == 0
        assert settings.evict_when_full is False
        assert settings.max_message_length == 500
        assert settings.random_seed == 42
        assert settings.name_probability == 1.0
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("raw", ["1", "TRUE", "yes", "On"])
    def test_truthy_flags(self, raw: str) -> None:
        assert Settings.from_env({"STAKEMATE_EVICT_WHEN_FULL": raw}).evict_when_full is True

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STAKEMATE_MAX_SESSIONS", "7")
        assert Settings.from_env().max_sessions == 7


@pytest.mark.unit
class TestInvalidValues:
    @pytest.mark.parametrize(
        ("key", "raw"),
        [
            ("STAKEMATE_MAX_SESSIONS", "many"),
            ("STAKEMATE_MAX_SESSIONS", "-1"),
            ("STAKEMATE_MAX_MESSAGE_LENGTH", "0"),
            ("STAKEMATE_EVICT_WHEN_FULL", "maybe"),
            ("STAKEMATE_RANDOM_SEED", "abc"),
            ("STAKEMATE_NAME_PROBABILITY", "often"),
            ("STAKEMATE_NAME_PROBABILITY", "1.5"),
        ],
    )
    def test_raises_configuration_error(self, key: str, raw: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            Settings.from_env({key: raw})
        assert exc_info.value.setting == key
        assert exc_info.value.code == "CONFIG"
