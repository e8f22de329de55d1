"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ProviderConfig: Completion service settings
- FeedConfig: Feed source settings
- SummaryConfig: Summarization prompt settings
- TranslateConfig: Optional translation stage settings
- NotifyConfig: Optional webhook delivery settings
- HttpConfig: Shared HTTP client settings
- LoggingConfig: Logging behavior
- LangfuseConfig: Langfuse tracing settings
- AppConfig: Root configuration container

Secrets are never required in the YAML file; each section names the
environment variable that holds its credential.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
import os
from typing import Any

import yaml

from .llm.prompts import SYSTEM_PROMPT


@dataclass
class ProviderConfig:
    """Configuration for the completion provider.

    Attributes:
        name: Provider name ("openai", "openai_compatible" or "gemini")
        model: Model identifier
        api_key_env: Environment variable containing the API key
        base_url: Base URL for the provider API
        api_key: Optional inline API key (overrides env var)
        temperature: Sampling temperature, None to use the service default
    """

    name: str = "openai"
    model: str = "gpt-4-1106-preview"
    api_key_env: str = "OPEN_AI_API_KEY"
    base_url: str = "https://api.openai.com/v1"
    api_key: str | None = None
    temperature: float | None = None


_OPENAI_DEFAULTS = {
    "model": "gpt-4-1106-preview",
    "api_key_env": "OPEN_AI_API_KEY",
    "base_url": "https://api.openai.com/v1",
}

_PROVIDER_DEFAULTS: dict[str, dict[str, str]] = {
    "openai": _OPENAI_DEFAULTS,
    "openai_compatible": _OPENAI_DEFAULTS,
    "openai-compatible": _OPENAI_DEFAULTS,
    "gemini": {
        "model": "gemini-2.0-flash",
        "api_key_env": "GOOGLE_API_KEY",
        "base_url": "https://generativelanguage.googleapis.com",
    },
}


def provider_defaults(name: str) -> dict[str, str]:
    """Return the default model, key variable and base URL for a provider."""
    return dict(_PROVIDER_DEFAULTS.get(name.lower().strip(), {}))


def select_provider(cfg: ProviderConfig, name: str) -> ProviderConfig:
    """Switch to another provider.

    Settings still at the previous provider's defaults take the new
    provider's defaults; explicitly customized settings are kept.
    """
    previous = provider_defaults(cfg.name)
    updates: dict[str, Any] = {"name": name}
    for key, value in provider_defaults(name).items():
        if getattr(cfg, key) == previous.get(key):
            updates[key] = value
    return replace(cfg, **updates)


@dataclass
class FeedConfig:
    """Configuration for the feed source.

    Attributes:
        url: RSS or Atom feed URL
        window_hours: Only entries newer than this many hours are summarized
    """

    url: str = "https://techcrunch.com/feed/"
    window_hours: float = 24.0


@dataclass
class SummaryConfig:
    """Configuration for summarization.

    Attributes:
        system_prompt: Fixed system instruction sent with every article link
    """

    system_prompt: str = SYSTEM_PROMPT


@dataclass
class TranslateConfig:
    """Configuration for the optional translation stage.

    Attributes:
        target_lang: DeepL target language code (e.g. "JA"); None disables translation
        source_lang: Optional source language code, auto-detected when None
        api_key_env: Environment variable containing the DeepL key
        api_key: Optional inline DeepL key (overrides env var)
        base_url: DeepL API base URL (free or pro endpoint)
    """

    target_lang: str | None = None
    source_lang: str | None = None
    api_key_env: str = "DEEPL_API_KEY"
    api_key: str | None = None
    base_url: str = "https://api-free.deepl.com"


@dataclass
class NotifyConfig:
    """Configuration for webhook delivery.

    Attributes:
        webhook_url: Inline Discord webhook URL (overrides env var)
        webhook_url_env: Environment variable containing the webhook URL
        timezone: IANA zone used for "Posted at" timestamps
        strict: Exit nonzero when any delivery fails
    """

    webhook_url: str | None = None
    webhook_url_env: str = "DISCORD_WEBHOOK_URL"
    timezone: str = "Asia/Tokyo"
    strict: bool = True


@dataclass
class HttpConfig:
    """Configuration for the shared HTTP client.

    Attributes:
        timeout_seconds: Per-request timeout
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 60.0
    trust_env: bool = True
    user_agent: str = "news-digest/0.1"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Path of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "news_digest.jsonl"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse tracing.

    Attributes:
        enabled: Whether to enable Langfuse tracing
        public_key: Langfuse public key (optional)
        secret_key: Langfuse secret key (optional)
        host: Langfuse host URL (optional)
        environment: Langfuse environment label (optional)
        release: Langfuse release identifier (optional)
        redaction: Redaction mode for prompt/response payloads
        max_text_chars: Maximum characters for prompt/response payloads
    """

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None
    environment: str | None = None
    release: str | None = None
    redaction: str = "none"
    max_text_chars: int = 20000


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    translate: TranslateConfig = field(default_factory=TranslateConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)


_SECTIONS = {
    "provider": ProviderConfig,
    "feed": FeedConfig,
    "summary": SummaryConfig,
    "translate": TranslateConfig,
    "notify": NotifyConfig,
    "http": HttpConfig,
    "logging": LoggingConfig,
    "langfuse": LangfuseConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    Always returns a fresh AppConfig so CLI overrides never leak
    between runs.
    """
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Unknown sections and unknown keys are ignored so older config files
    keep loading.
    """
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)

    # A provider named in YAML brings its own defaults for unset keys
    provider_raw = raw.get("provider")
    if isinstance(provider_raw, dict) and provider_raw.get("name"):
        for key, value in provider_defaults(str(provider_raw["name"])).items():
            if key not in provider_raw:
                data["provider"][key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    sections = {}
    for name, section_cls in _SECTIONS.items():
        known = section_cls.__dataclass_fields__
        values = {k: v for k, v in data.get(name, {}).items() if k in known}
        sections[name] = section_cls(**values)
    return AppConfig(**sections)


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Get completion API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(api_key_env_name(cfg))


def api_key_env_name(cfg: ProviderConfig) -> str:
    """Name of the environment variable holding the completion key."""
    if cfg.api_key_env:
        return cfg.api_key_env
    return provider_defaults(cfg.name).get("api_key_env", _OPENAI_DEFAULTS["api_key_env"])


def get_translate_key(cfg: TranslateConfig) -> str | None:
    """Get DeepL API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env) if cfg.api_key_env else None


def get_webhook_url(cfg: NotifyConfig) -> str | None:
    """Get webhook URL from inline config or environment variable."""
    if cfg.webhook_url:
        return cfg.webhook_url
    value = os.getenv(cfg.webhook_url_env) if cfg.webhook_url_env else None
    return value or None
