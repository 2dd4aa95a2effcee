from __future__ import annotations

import pytest

from minuteflow.config import APIConfig, AudioConfig, PollingConfig, Settings
from minuteflow.exceptions import ConfigurationError


def test_defaults_match_backend_contract(settings) -> None:
    assert settings.endpoint("staging") == "https://staging.test/.netlify/functions/gemini"
    assert settings.endpoint("start") == "https://staging.test/.netlify/functions/gemini-background"
    assert AudioConfig().segment_seconds == 1800.0
    assert AudioConfig().target_sample_rate == 16000


def test_polling_env_override(monkeypatch) -> None:
    monkeypatch.setenv("POLL_INTERVAL_S", "2.5")
    monkeypatch.setenv("POLL_MAX_ATTEMPTS", "10")
    poll = PollingConfig()
    assert poll.interval_s == 2.5
    assert poll.max_attempts == 10
    assert poll.max_wait_s == 25.0


def test_api_paths_must_be_absolute() -> None:
    with pytest.raises(ConfigurationError):
        APIConfig(start_path="gemini-background")


def test_unknown_endpoint_rejected(settings) -> None:
    with pytest.raises(ConfigurationError):
        settings.endpoint("upload")


def test_log_dir_resolved_and_summary_has_no_secrets(tmp_path) -> None:
    s = Settings(log_dir=str(tmp_path / "logs"), api=APIConfig(access_token="secret"))
    assert s.log_dir == str(tmp_path / "logs")
    assert "secret" not in str(s.summary())


def test_empty_default_model_rejected() -> None:
    with pytest.raises(ConfigurationError):
        Settings(default_model=" ")
