from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_BASE_URL = "https://api.rooguys.com/v1"


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or validated."""


class ClientConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_url: str = Field(default=DEFAULT_BASE_URL)
    timeout_s: float = Field(default=10, gt=0)
    auto_retry: bool = Field(default=False)
    max_retries: int = Field(default=3, ge=0)
    # Kept for parity with older client options; retries wait for Retry-After.
    retry_delay_s: float = Field(default=1.0, ge=0)


class ObsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    log_jsonl: bool = Field(default=True)
    log_level: str = Field(default="INFO")


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    client: ClientConfig = Field(default_factory=ClientConfig)
    obs: ObsConfig = Field(default_factory=ObsConfig)


@dataclass(frozen=True)
class LoadedConfig:
    config: AppConfig
    raw: dict[str, Any]


def load_config(path: Path) -> LoadedConfig:
    if not path.exists():
        raise ConfigError(f"Config not found: {path}")

    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError("Config root must be a mapping")

    try:
        config = AppConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    return LoadedConfig(config=config, raw=payload)
