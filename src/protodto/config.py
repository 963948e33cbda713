import os
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from protodto import log
from protodto.exceptions import ConfigError

ALL_PUBLIC_ENV = "ALL_PUBLIC"
DEFAULT_OUTPUT_SUFFIX = ".dto.go"


class EngineConfig(BaseModel):
    """Settings for one transformation run."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    all_public: bool = Field(False, alias="allPublic")
    initialisms: list[str] = Field(default_factory=list)
    output_suffix: str = Field(DEFAULT_OUTPUT_SUFFIX, alias="outputSuffix")

    @field_validator("initialisms")
    @classmethod
    def upper_initialisms(cls, initialisms: list[str]) -> list[str]:
        return [initialism.upper() for initialism in initialisms]

    @field_validator("output_suffix")
    @classmethod
    def check_suffix(cls, suffix: str) -> str:
        if not suffix.startswith("."):
            raise ValueError("output suffix must start with '.'")
        return suffix


def load_config(config_path: Path | None) -> EngineConfig:
    """
    Load and validate an engine configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file, or None for defaults.

    Returns:
        A validated EngineConfig.

    Raises:
        ConfigError: If the file is not valid YAML, not a mapping or fails validation.
    """
    if config_path is None:
        log.debug("No engine config provided")
        return EngineConfig()

    raw: Any
    with config_path.open("r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid engine config {config_path}: {e}") from e

    log.debug("Loaded engine config from %s", config_path)

    # Treat empty file or explicit YAML null as "defaults"
    if raw is None or raw == {}:
        return EngineConfig()

    if not isinstance(raw, dict):
        raise ConfigError(f"Engine config root must be a mapping (YAML object), got {type(raw).__name__}")

    try:
        return EngineConfig.model_validate(cast(dict[str, Any], raw))
    except ValidationError as e:
        raise ConfigError(f"Invalid engine config {config_path}: {e}") from e


def resolve_config(config_path: Path | None = None, all_public: bool = False) -> EngineConfig:
    """Load the config file and apply the command line and environment overrides.

    A non-empty ``ALL_PUBLIC`` environment variable forces every field public.
    """
    config = load_config(config_path)
    if all_public or os.environ.get(ALL_PUBLIC_ENV):
        log.info("All fields are treated as public")
        config = config.model_copy(update={"all_public": True})
    return config
