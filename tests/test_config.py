# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from rice_planner.config import Settings

_VARS = [
    "RICE_APP_NAME",
    "RICE_LOG_LEVEL",
    "RICE_DATA_DIR",
    "RICE_BACKEND_URL",
    "RICE_REQUEST_TIMEOUT_SECONDS",
    "RICE_LOCAL_FALLBACK",
    "RICE_USERNAME",
    "RICE_SPRINT_CAPACITY",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()

    assert s.app_name == "rice-planner"
    assert s.backend_base_url == "http://localhost:8080"
    assert s.request_timeout_seconds == 30.0
    assert s.local_fallback is False
    assert s.default_username is None
    assert s.sprint_capacity == 40.0
    assert s.data_dir == Path(".local/rice_planner")
    assert s.offline_mode is False


def test_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RICE_BACKEND_URL", "http://scorer:9000/")
    monkeypatch.setenv("RICE_REQUEST_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("RICE_LOCAL_FALLBACK", "yes")
    monkeypatch.setenv("RICE_USERNAME", " alice ")
    monkeypatch.setenv("RICE_SPRINT_CAPACITY", "12")

    s = Settings.from_env()

    assert s.backend_base_url == "http://scorer:9000"
    assert s.request_timeout_seconds == 2.5
    assert s.local_fallback is True
    assert s.default_username == "alice"
    assert s.sprint_capacity == 12.0


def test_empty_backend_url_means_offline(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RICE_BACKEND_URL", "")
    assert Settings.from_env().offline_mode is True


def test_bad_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RICE_REQUEST_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("RICE_SPRINT_CAPACITY", "-3")

    s = Settings.from_env()

    assert s.request_timeout_seconds == 30.0
    assert s.sprint_capacity == 40.0
