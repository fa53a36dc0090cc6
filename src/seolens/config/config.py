"""
Configuration management for seolens using Pydantic.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, ClassVar, List, Literal, Optional, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class CMSConfig(BaseModel):
    """ButterCMS client configuration."""

    auth_token: Optional[str] = Field(
        default=None,
        description="Read token appended as the auth_token query parameter when the URL has none.",
    )
    timeout: float = Field(default=15.0, gt=0, description="HTTP request timeout in seconds.")
    user_agent: str = Field(default="seolens/0.1.0", description="User-Agent string for CMS requests.")
    allowed_hosts: List[str] = Field(
        default_factory=list,
        description="Hosts the fetcher may contact. Empty allows any host.",
    )

    @field_validator("allowed_hosts")
    @classmethod
    def normalize_hosts(cls, v: List[str]) -> List[str]:
        return [host.strip().lower() for host in v if host.strip()]


class OracleConfig(BaseModel):
    """Language-model oracle configuration."""

    api_key: Optional[str] = Field(default=None, description="API key. Falls back to OPENAI_API_KEY.")
    base_url: Optional[str] = Field(default=None, description="Override for OpenAI-compatible endpoints.")
    model: str = Field(default="gpt-3.5-turbo", description="Chat completion model.")
    timeout: float = Field(default=30.0, gt=0, description="Completion request timeout in seconds.")
    headline_temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    narrative_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_content_chars: int = Field(
        default=6000, gt=0, description="Maximum characters of body text sent with the narrative prompt."
    )
    narrative_enabled: bool = Field(default=True, description="Request the free-form narrative analysis.")


class AnalyzerConfig(BaseModel):
    """Lexical analysis configuration."""

    language: Literal["english"] = Field(default="english", description="Stopword list to apply.")
    words_per_minute: int = Field(default=200, gt=0, description="Reading speed used for read time.")
    top_terms: int = Field(default=15, gt=0, description="Number of terms kept in the frequency table.")
    density_terms: int = Field(default=5, gt=0, description="Number of top terms given a keyword density.")

    @field_validator("density_terms")
    @classmethod
    def density_within_top_terms(cls, v: int, info: ValidationInfo) -> int:
        top_terms = info.data.get("top_terms")
        if top_terms is not None and v > top_terms:
            raise ValueError("density_terms cannot exceed top_terms")
        return v


class ScoringConfig(BaseModel):
    """Content scoring configuration."""

    clamp_total: bool = Field(default=True, description="Clamp the summed content score to [0, 100].")


class WebUIConfig(BaseModel):
    """Configuration for the HTTP API."""

    host: str = Field(default="127.0.0.1", description="Host for the web server.")
    port: int = Field(default=8000, description="Port for the web server.")


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics.")

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "seolens"
    version: str = "0.1.0"
    cms: CMSConfig = Field(default_factory=CMSConfig)
    oracle: OracleConfig = Field(default_factory=OracleConfig)
    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    web: WebUIConfig = Field(default_factory=WebUIConfig)

    model_config = SettingsConfigDict(env_prefix="SEOLENS_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "seolens.yaml",
        current_dir / "seolens.yml",
        current_dir / "config.yaml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None


# --- Lazy Configuration Loader ---


class LazyConfig:
    """
    A proxy for the Config object that delays its loading and validation
    until an attribute is first accessed. The loaded Config is shared
    process-wide and never reloaded.
    """

    _config: ClassVar[Config | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __getattr__(self, name: str) -> Any:
        return getattr(self.resolve(), name)

    def resolve(self) -> Config:
        """Return the shared Config, loading it on first use."""
        if self.__class__._config is None:
            with self.__class__._lock:
                if self.__class__._config is None:
                    self.__class__._config = self._load_config_with_fallback()
        return self.__class__._config

    def _load_config_with_fallback(self) -> Config:
        """Load configuration from file or fall back to defaults."""
        config_path = find_config_file()
        if config_path:
            try:
                log.info("Lazy loading configuration from: %s", config_path)
                return Config.from_yaml(config_path)
            except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
                log.error(
                    "Failed to load or validate configuration from '%s': %s. "
                    "Falling back to default settings. Please check your config file.",
                    config_path,
                    e,
                    exc_info=log.getEffectiveLevel() <= logging.DEBUG,
                )
        else:
            log.info("No config file found. Using default settings for lazy load.")

        try:
            return Config()
        except ValidationError as e:
            log.critical("FATAL: Default configuration is invalid: %s", e, exc_info=True)
            raise RuntimeError(f"Default configuration is invalid, cannot start: {e}") from e


# --- Global Settings Instance ---
settings: "Config" = cast("Config", LazyConfig())


def load_config(config_path: Path | None = None) -> Config:
    """
    Load the configuration at ``config_path``, or return the shared
    process-wide settings when no path is given.
    """
    if config_path is not None:
        return Config.from_yaml(config_path)
    return cast(LazyConfig, settings).resolve()
