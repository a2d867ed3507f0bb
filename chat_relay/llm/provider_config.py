"""Provider/runtime configuration for the relay.

Architectural role:
    Centralizes the provider table (endpoint, auth mode, request shape, model and
    generation defaults) and the process settings consumed by `chat_relay.core.relay`,
    `chat_relay.llm.client` and `chat_relay.api`.

Model call flow integration:
    - `adapters` reads `request_shape`, `model_id`, `system_prompt`, `temperature`
      and `max_tokens` to build payloads.
    - `client` reads `endpoint_template`, `auth_mode` and `extra_headers`.
    - `relay` looks up credentials in `RelaySettings.api_keys`.

Determinism:
    `load_settings` is deterministic for a fixed process environment and key files.
    It is called once at startup; the returned settings are immutable.

Failure behavior:
    Missing key material is represented as `None` and turned into a `ConfigError`
    only when the corresponding route is called.
"""

import os
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional

from dotenv import load_dotenv

# Directory holding `<provider>.key` credential files, relative to the working
# directory.
KEY_FILE_DIR = "config"


class AuthMode(str, Enum):
    """Where the provider credential travels on the outbound request."""

    QUERY_PARAM = "query-param"
    BEARER_HEADER = "bearer-header"


class RequestShape(str, Enum):
    """Wire format family of the provider's request and response bodies."""

    GEMINI = "gemini"
    OPENAI_COMPATIBLE = "openai-compatible"


@dataclass(frozen=True)
class ProviderConfig:
    """Static description of one upstream provider.

    Attributes:
        name: Route key (`gemini`, `mistral`, `groq`).
        display_name: Human label used in log lines and error replies.
        endpoint_template: Endpoint URL; `{model}` is substituted with `model_id`.
        auth_mode: Credential placement.
        request_shape: Payload/response family.
        model_id: Upstream model identifier.
        api_key_env: Environment variable holding the credential.
        system_prompt: Optional system message (OpenAI-compatible shape only).
        temperature: Sampling temperature (OpenAI-compatible shape only).
        max_tokens: Completion token cap (OpenAI-compatible shape only).
        extra_headers: Static `(name, value)` header pairs added to every request.
    """

    name: str
    display_name: str
    endpoint_template: str
    auth_mode: AuthMode
    request_shape: RequestShape
    model_id: str
    api_key_env: str
    system_prompt: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 150
    extra_headers: tuple = ()

    @property
    def endpoint(self) -> str:
        return self.endpoint_template.format(model=self.model_id)

    @property
    def key_file(self) -> str:
        return os.path.join(KEY_FILE_DIR, f"{self.name}.key")


# Upstream endpoint map, keyed by provider name.
PROVIDERS = {

    "gemini": ProviderConfig(
        name="gemini",
        display_name="Gemini",
        endpoint_template=(
            "https://generativelanguage.googleapis.com/v1beta/models/"
            "{model}:generateContent"
        ),
        auth_mode=AuthMode.QUERY_PARAM,
        request_shape=RequestShape.GEMINI,
        model_id="gemini-2.0-flash",
        api_key_env="GEMINI_API_KEY",
    ),

    "mistral": ProviderConfig(
        name="mistral",
        display_name="Mistral AI",
        endpoint_template="https://api.mistral.ai/v1/chat/completions",
        auth_mode=AuthMode.BEARER_HEADER,
        request_shape=RequestShape.OPENAI_COMPATIBLE,
        model_id="mistral-tiny",
        api_key_env="MISTRAL_API_KEY",
        system_prompt="You are a helpful and concise AI assistant powered by Mistral AI.",
        extra_headers=(("Accept", "application/json"),),
    ),

    "groq": ProviderConfig(
        name="groq",
        display_name="Groq",
        endpoint_template="https://api.groq.com/openai/v1/chat/completions",
        auth_mode=AuthMode.BEARER_HEADER,
        request_shape=RequestShape.OPENAI_COMPATIBLE,
        model_id="llama3-8b-8192",
        api_key_env="GROQ_API_KEY",
        system_prompt="You are a blazing fast and efficient AI assistant powered by Groq.",
    ),

}


DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


@dataclass(frozen=True)
class RelaySettings:
    """Process-wide settings snapshot taken once at startup.

    `providers` and `api_keys` are copied into read-only mappings.
    """

    providers: MappingProxyType
    api_keys: MappingProxyType
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    static_dir: Optional[str] = None
    log_level: str = "INFO"
    request_timeout: Optional[float] = None
    log_max_entries: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "providers", MappingProxyType(dict(self.providers)))
        object.__setattr__(self, "api_keys", MappingProxyType(dict(self.api_keys)))

    def provider(self, name: str) -> ProviderConfig:
        return self.providers[name]

    def api_key(self, name: str) -> Optional[str]:
        return self.api_keys.get(name)

    def missing_keys(self) -> list:
        """Return providers whose credential could not be resolved."""
        return [name for name in self.providers if not self.api_keys.get(name)]


def load_key(env_name: str, path: Optional[str] = None) -> Optional[str]:
    """Load an API key from the environment or a key file.

    Resolution order:
        1. Environment variable `env_name`.
        2. Raw file contents at `path` (for example `config/groq.key`).

    Returns:
        Key string, or `None` when neither source provides a non-empty value.
    """
    env_value = os.getenv(env_name)
    if env_value:
        return env_value
    if not path or not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if not value:
        return None
    return float(value)


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if not value:
        return None
    return int(value)


def load_settings(providers: Optional[dict] = None, env_file: Optional[str] = None) -> RelaySettings:
    """Read `.env` and the process environment into a `RelaySettings` snapshot.

    Args:
        providers: Provider table override; defaults to `PROVIDERS`.
        env_file: Explicit dotenv path; defaults to dotenv's own lookup.

    Environment:
        - `GEMINI_API_KEY`, `MISTRAL_API_KEY`, `GROQ_API_KEY` (or key files).
        - `RELAY_HOST`, `PORT`, `RELAY_STATIC_DIR`, `LOG_LEVEL`.
        - `RELAY_REQUEST_TIMEOUT`: seconds; unset means no timeout.
        - `RELAY_LOG_MAX_ENTRIES`: message log bound; unset means unbounded.

    Failure scenarios:
        Non-numeric `PORT`, `RELAY_REQUEST_TIMEOUT` or `RELAY_LOG_MAX_ENTRIES`
        raise `ValueError` at startup.
    """
    load_dotenv(env_file)

    providers = dict(providers or PROVIDERS)
    api_keys = {
        name: load_key(config.api_key_env, config.key_file)
        for name, config in providers.items()
    }

    return RelaySettings(
        providers=providers,
        api_keys=api_keys,
        host=os.getenv("RELAY_HOST", DEFAULT_HOST),
        port=int(os.getenv("PORT", str(DEFAULT_PORT))),
        static_dir=os.getenv("RELAY_STATIC_DIR") or os.getcwd(),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        request_timeout=_optional_float("RELAY_REQUEST_TIMEOUT"),
        log_max_entries=_optional_int("RELAY_LOG_MAX_ENTRIES"),
    )
