# src/beacon/core/config.py
"""
Configuration schema and loading for Beacon runs.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from collections import Counter
from pathlib import Path
from typing import Any, Literal
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, model_validator

from beacon.contracts.artifacts import DEVTOOLS_LOG, INSPECTOR_ISSUES, LINK_ELEMENTS, META_ELEMENTS
from beacon.contracts.enums import CollectionProtocol, GatherMode

DEFAULT_COLLECTORS: tuple[str, ...] = (DEVTOOLS_LOG, INSPECTOR_ISSUES, META_ELEMENTS, LINK_ELEMENTS)


class LoggingSettings(BaseModel):
    """Logging output configuration.

    Example YAML:
        logging:
          level: DEBUG
          json_output: true
    """

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level",
    )
    json_output: bool = Field(
        default=False,
        description="Emit JSON lines instead of console output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v


class GatherSettings(BaseModel):
    """Top-level settings for one collection run.

    Example YAML:
        url: https://example.com/
        gather_mode: navigation
        protocol: instrumentation
        collectors: [DevtoolsLog, InspectorIssues]
    """

    model_config = {"frozen": True, "extra": "forbid"}

    url: str = Field(description="Target URL the run inspects (main resource is matched against it)")
    gather_mode: GatherMode = Field(
        default=GatherMode.NAVIGATION,
        description="navigation (full page load) or timespan (user-driven interval)",
    )
    protocol: CollectionProtocol = Field(
        default=CollectionProtocol.INSTRUMENTATION,
        description="Collector lifecycle the orchestrator drives",
    )
    collectors: tuple[str, ...] = Field(
        default=DEFAULT_COLLECTORS,
        min_length=1,
        description="Collector names to enable for the run",
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"url must be an absolute http(s) URL, got {v!r}")
        return v

    @field_validator("collectors")
    @classmethod
    def validate_unique_collectors(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        duplicates = sorted(name for name, count in Counter(v).items() if count > 1)
        if duplicates:
            raise ValueError(f"collector names must be unique, duplicates: {duplicates}")
        return v

    @model_validator(mode="after")
    def validate_protocol_mode(self) -> "GatherSettings":
        """The legacy lifecycle only knows how to observe a navigation."""
        if self.protocol == CollectionProtocol.LEGACY and self.gather_mode != GatherMode.NAVIGATION:
            raise ValueError("legacy protocol only supports gather_mode 'navigation'")
        return self


def load_settings(config_path: Path) -> GatherSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (BEACON_*) - highest priority
    2. Config file (settings.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: BEACON_LOGGING__LEVEL for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated GatherSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="BEACON",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; convert to lowercase for Pydantic
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    if isinstance(raw_config.get("logging"), dict):
        raw_config["logging"] = {k.lower(): v for k, v in raw_config["logging"].items()}

    return GatherSettings(**raw_config)
