"""Tests for environment-driven settings."""

import dataclasses

import pytest

from chat_relay.llm.provider_config import (
    PROVIDERS,
    AuthMode,
    RelaySettings,
    RequestShape,
    load_key,
    load_settings,
)

ENV_VARS = (
    "GEMINI_API_KEY",
    "MISTRAL_API_KEY",
    "GROQ_API_KEY",
    "RELAY_HOST",
    "PORT",
    "RELAY_STATIC_DIR",
    "LOG_LEVEL",
    "RELAY_REQUEST_TIMEOUT",
    "RELAY_LOG_MAX_ENTRIES",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Empty relay environment, run from an empty working directory."""
    for name in ENV_VARS:
        # setenv first so values written by load_dotenv are undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_provider_table():
    assert PROVIDERS["gemini"].auth_mode == AuthMode.QUERY_PARAM
    assert PROVIDERS["gemini"].request_shape == RequestShape.GEMINI
    for name in ("mistral", "groq"):
        assert PROVIDERS[name].auth_mode == AuthMode.BEARER_HEADER
        assert PROVIDERS[name].request_shape == RequestShape.OPENAI_COMPATIBLE


def test_defaults_without_environment(clean_env):
    settings = load_settings(env_file=str(clean_env / "missing.env"))

    assert settings.port == 3000
    assert settings.host == "0.0.0.0"
    assert settings.static_dir == str(clean_env)
    assert settings.request_timeout is None
    assert settings.log_max_entries is None
    assert settings.missing_keys() == ["gemini", "mistral", "groq"]


def test_keys_and_options_from_environment(clean_env, monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "gsk-123")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("RELAY_REQUEST_TIMEOUT", "30")
    monkeypatch.setenv("RELAY_LOG_MAX_ENTRIES", "100")

    settings = load_settings(env_file=str(clean_env / "missing.env"))

    assert settings.api_key("groq") == "gsk-123"
    assert settings.api_key("gemini") is None
    assert settings.port == 8080
    assert settings.request_timeout == 30.0
    assert settings.log_max_entries == 100


def test_dotenv_file_is_loaded(clean_env):
    env_file = clean_env / ".env"
    env_file.write_text("MISTRAL_API_KEY=from-dotenv\n")

    settings = load_settings(env_file=str(env_file))

    assert settings.api_key("mistral") == "from-dotenv"


def test_key_file_fallback(clean_env):
    (clean_env / "config").mkdir()
    (clean_env / "config" / "gemini.key").write_text("file-key\n")

    assert load_key("GEMINI_API_KEY", "config/gemini.key") == "file-key"
    assert load_key("GEMINI_API_KEY", "config/absent.key") is None


def test_environment_wins_over_key_file(clean_env, monkeypatch):
    (clean_env / "config").mkdir()
    (clean_env / "config" / "groq.key").write_text("file-key")
    monkeypatch.setenv("GROQ_API_KEY", "env-key")

    assert load_key("GROQ_API_KEY", "config/groq.key") == "env-key"


def test_invalid_port_fails_at_startup(clean_env, monkeypatch):
    monkeypatch.setenv("PORT", "not-a-port")

    with pytest.raises(ValueError):
        load_settings(env_file=str(clean_env / "missing.env"))


def test_provider_configs_are_hashable_and_frozen():
    mistral = PROVIDERS["mistral"]

    assert hash(mistral) == hash(mistral)
    assert dict(mistral.extra_headers) == {"Accept": "application/json"}
    with pytest.raises(dataclasses.FrozenInstanceError):
        mistral.model_id = "other"


def test_settings_mappings_are_read_only():
    source_keys = {"gemini": "g"}
    settings = RelaySettings(providers=dict(PROVIDERS), api_keys=source_keys)

    with pytest.raises(TypeError):
        settings.api_keys["groq"] = "injected"
    with pytest.raises(TypeError):
        settings.providers["other"] = PROVIDERS["groq"]

    source_keys["groq"] = "late"
    assert settings.api_key("groq") is None
