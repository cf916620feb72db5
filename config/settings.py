"""Pydantic settings: config/config.yml (defaults) and .env (override)."""

import os
from pathlib import Path

import yaml
from pydantic import field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from pydantic_settings.sources import InitSettingsSource


def _strip_quotes(v: str) -> str:
    if not isinstance(v, str):
        return v
    return v.strip().strip('"').strip("'").strip()


def _load_yaml_config() -> dict:
    """Load config/config.yml and flatten to Settings field names. Missing file -> {}."""
    base = Path(__file__).resolve().parent.parent
    path = base / os.environ.get("CONFIG_FILE", "config/config.yml")
    if not path.is_file():
        return {}
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    app = data.get("app") or {}
    server = data.get("server") or {}
    providers = data.get("providers") or {}
    telemetry = data.get("telemetry") or {}
    flat: dict = {}
    if app.get("multi_user_mode") is not None:
        flat["multi_user_mode"] = app["multi_user_mode"]
    if app.get("openai_model") is not None:
        flat["openai_model"] = app["openai_model"]
    if app.get("history_limit") is not None:
        flat["history_limit"] = app["history_limit"]
    if app.get("engine_temperature") is not None:
        flat["engine_temperature"] = app["engine_temperature"]
    if server.get("cors_origins") is not None:
        flat["cors_origins"] = server["cors_origins"]
    for key in ("llm_provider", "embedding_engine", "vector_db", "tts_provider"):
        if providers.get(key) is not None:
            flat[key] = providers[key]
    if telemetry.get("endpoint") is not None:
        flat["telemetry_endpoint"] = telemetry["endpoint"]
    if telemetry.get("disabled") is not None:
        flat["disable_telemetry"] = telemetry["disabled"]
    return flat


class Settings(BaseSettings):
    multi_user_mode: bool = False
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    generic_model_pref: str = ""
    engine_temperature: float = 0.7
    history_limit: int = 20
    llm_provider: str = "openai"
    embedding_engine: str = "inherit"
    vector_db: str = "lancedb"
    tts_provider: str = "native"
    redis_url: str = ""
    telemetry_endpoint: str = ""
    telemetry_timeout: float = 5.0
    disable_telemetry: bool = False
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @field_validator(
        "llm_provider",
        "embedding_engine",
        "vector_db",
        "tts_provider",
        "telemetry_endpoint",
        mode="before",
    )
    @classmethod
    def strip_label_strings(cls, v: str | None) -> str:
        if v is None:
            return ""
        if isinstance(v, str):
            return _strip_quotes(v) or ""
        return ""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Priority: env > dotenv > init > config.yml (so .env overrides config.yml)
        yaml_source = InitSettingsSource(settings_cls, _load_yaml_config())
        return (env_settings, dotenv_settings, init_settings, yaml_source)


def get_model_tag(cfg: "Settings | None" = None) -> str:
    """Model label reported with chat telemetry for the configured LLM provider."""
    cfg = cfg or settings
    if cfg.llm_provider in ("", "openai"):
        return cfg.openai_model
    return cfg.generic_model_pref or cfg.llm_provider


settings = Settings()
