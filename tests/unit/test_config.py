"""Tests for settings validation and Firebase key loading."""

import pytest
from pydantic import ValidationError

from taskmaster.core.config import Settings, get_settings
from taskmaster.domain.exceptions import ConfigurationException
from taskmaster.infrastructure.firebase.client import _load_key_dict
from taskmaster.middleware.request_id import sanitize_request_id


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_use_memory_store() -> None:
    settings = Settings(_env_file=None)
    assert settings.document_store_backend == "memory"
    assert settings.legacy_rules_enabled is True
    assert settings.max_lookups_per_decision == 20


def test_firestore_backend_requires_credentials() -> None:
    with pytest.raises(ValidationError, match="FIREBASE_SERVICE_ACCOUNT_KEY"):
        Settings(_env_file=None, document_store_backend="firestore")


def test_firestore_backend_accepts_key_path() -> None:
    settings = Settings(
        _env_file=None,
        document_store_backend="firestore",
        firebase_service_account_path="/secrets/sa.json",
    )
    assert settings.firebase_service_account_path == "/secrets/sa.json"


@pytest.mark.parametrize(
    "overrides",
    [
        {"document_store_backend": "postgres"},
        {"max_lookups_per_decision": 0},
        {"telemetry_exporter": "jaeger"},
        {"telemetry_sample_rate": 1.5},
    ],
)
def test_invalid_settings_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)


def test_cors_origins_split_and_trimmed() -> None:
    settings = Settings(_env_file=None, allowed_origins=" https://a.test, ,https://b.test ")
    assert settings.cors_origins == ["https://a.test", "https://b.test"]


def test_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEGACY_RULES_ENABLED", "false")
    monkeypatch.setenv("MAX_LOOKUPS_PER_DECISION", "5")
    settings = get_settings()
    assert settings.legacy_rules_enabled is False
    assert settings.max_lookups_per_decision == 5


def test_invalid_service_account_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIREBASE_SERVICE_ACCOUNT_KEY", "{not json")
    with pytest.raises(ConfigurationException, match="not valid JSON"):
        _load_key_dict()


def test_service_account_file_must_exist(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.delenv("FIREBASE_SERVICE_ACCOUNT_KEY", raising=False)
    monkeypatch.setenv("FIREBASE_SERVICE_ACCOUNT_PATH", str(tmp_path / "missing.json"))
    with pytest.raises(ConfigurationException, match="not found"):
        _load_key_dict()


def test_service_account_file_loaded(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    key_file = tmp_path / "sa.json"
    key_file.write_text('{"project_id": "demo"}', encoding="utf-8")
    monkeypatch.delenv("FIREBASE_SERVICE_ACCOUNT_KEY", raising=False)
    monkeypatch.setenv("FIREBASE_SERVICE_ACCOUNT_PATH", str(key_file))
    assert _load_key_dict() == {"project_id": "demo"}


@pytest.mark.parametrize("raw", ["abc-123_XYZ", "  padded  "])
def test_request_id_kept_when_safe(raw: str) -> None:
    assert sanitize_request_id(raw) == raw.strip()


@pytest.mark.parametrize("raw", [None, "", "bad id", "x" * 65, "line\nbreak"])
def test_request_id_replaced_when_unsafe(raw: str | None) -> None:
    replaced = sanitize_request_id(raw)
    assert replaced != raw
    assert len(replaced) == 36
