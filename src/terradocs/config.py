"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (TERRADOCS__REGISTRY__CHANNEL=prerelease)
  2. terradocs.yaml         (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CACHE_DIR = platformdirs.user_cache_dir("terradocs")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_CACHE_DIR) / "docs.db")

BUILTIN_PROVIDERS: tuple[str, ...] = (
    "aws",
    "azurerm",
    "google",
    "kubernetes",
    "vault",
    "consul",
    "nomad",
)


def _find_config_file() -> str | None:
    """Return the path of the first terradocs.yaml found, or None."""
    candidates = [
        Path("terradocs.yaml"),
        Path(platformdirs.user_config_dir("terradocs")) / "terradocs.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class RegistrySettings(BaseModel):
    base_url: str = "https://registry.terraform.io"
    channel: Literal["stable", "prerelease"] = "stable"
    version_ttl_hours: float = 24
    # provider name → exact version, bypasses the registry lookup
    pinned_versions: dict[str, str] = {}


class DocsSettings(BaseModel):
    base_url: str = "https://raw.githubusercontent.com"


class TransportSettings(BaseModel):
    timeout_seconds: float = 30.0
    max_redirects: int = 3
    extra_allowed_domains: list[str] = []


class CacheSettings(BaseModel):
    # In-memory by default: documents live for the lifetime of the process.
    persist: bool = False
    db_path: str = _DEFAULT_DB_PATH
    # Warm the most used AWS documents in the background at startup
    preload_popular: bool = False

    @property
    def database(self) -> str:
        return self.db_path if self.persist else ":memory:"


class SearchSettings(BaseModel):
    fuzzy_score_cutoff: int = 70
    max_results: int = 50


class ProviderSettings(BaseModel):
    enabled: list[str] = list(BUILTIN_PROVIDERS)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: TERRADOCS__CACHE__PERSIST=true
        env_prefix="TERRADOCS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    registry: RegistrySettings = RegistrySettings()
    docs: DocsSettings = DocsSettings()
    transport: TransportSettings = TransportSettings()
    cache: CacheSettings = CacheSettings()
    search: SearchSettings = SearchSettings()
    providers: ProviderSettings = ProviderSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
