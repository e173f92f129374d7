"""Pydantic configuration for rfm_analysis."""

from __future__ import annotations

import logging
import numbers
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from rfm_analysis.exceptions import ConfigError, ParameterValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.yaml")
DEFAULT_SEGMENTS = ["Autarquia", "Privado"]
MAX_LOOKBACK_MONTHS = 120

# Run parameters whose rejection is reported as ParameterValidationError.
PARAMETER_FIELDS = ("lookback_months", "segments")

TieMethod = Literal["inclusive", "first"]


class OutputConfig(BaseModel):
    """Output format toggles."""

    excel: bool = True
    json_blob: bool = False


class Settings(BaseModel):
    """Application configuration -- immutable after creation."""

    model_config = {"frozen": True, "extra": "forbid"}

    data_file: Path | None = None
    output_dir: Path = Path("output/")
    store_dir: Path = Path("saved_analyses/")
    analysis_name: str | None = None
    lookback_months: int = 12
    segments: list[str] = Field(default_factory=lambda: DEFAULT_SEGMENTS.copy())
    tie_method: TieMethod = "inclusive"
    outputs: OutputConfig = OutputConfig()

    @field_validator("data_file", mode="before")
    @classmethod
    def expand_and_validate_data_file(cls, v: str | Path | None) -> Path | None:
        if v is None:
            return None
        p = Path(v).expanduser().resolve()
        if not p.exists():
            raise ValueError(f"Data file not found: {p}")
        if p.suffix.lower() not in (".csv", ".xlsx", ".xls"):
            raise ValueError(f"Unsupported file type: {p.suffix}")
        return p

    @field_validator("output_dir", "store_dir", mode="before")
    @classmethod
    def expand_dir(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("lookback_months")
    @classmethod
    def validate_lookback(cls, v: int) -> int:
        if not 1 <= v <= MAX_LOOKBACK_MONTHS:
            raise ValueError(f"lookback_months={v} outside valid range (1-{MAX_LOOKBACK_MONTHS})")
        return v

    @field_validator("segments", mode="before")
    @classmethod
    def clean_segments(cls, v: list[str] | str) -> list[str]:
        if isinstance(v, str):
            v = [v]
        cleaned = [str(s).strip() for s in v if str(s).strip()]
        if not cleaned:
            raise ValueError("At least one segment tag is required")
        return cleaned

    @classmethod
    def from_yaml(cls, config_path: Path = DEFAULT_CONFIG_PATH, **cli_overrides) -> Settings:
        """Load from YAML, merge CLI overrides (highest priority)."""
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.debug("No config file at %s, using defaults", config_path)
            data = {}
        data.update({k: v for k, v in cli_overrides.items() if v is not None})
        return cls._build(data)

    @classmethod
    def from_args(cls, data_file: Path, **kwargs) -> Settings:
        """Create settings directly from arguments (no YAML needed)."""
        return cls._build({"data_file": data_file, **kwargs})

    @classmethod
    def _build(cls, data: dict) -> Settings:
        try:
            return cls(**data)
        except ValidationError as e:
            bad = {err["loc"][0] for err in e.errors() if err["loc"]}
            if bad & set(PARAMETER_FIELDS):
                raise ParameterValidationError(f"Invalid run parameters: {e}") from e
            raise ConfigError(f"Configuration error: {e}") from e
        except Exception as e:
            raise ConfigError(f"Configuration error: {e}") from e


def validate_parameters(months: int, segments) -> list[str]:
    """Check run parameters; return the segment tags as a list.

    Raises ParameterValidationError for an empty tag set or a non-positive
    lookback window.
    """
    if isinstance(segments, str):
        segments = [segments]
    tags = [s for s in (segments or []) if isinstance(s, str) and s != ""]
    if not tags:
        raise ParameterValidationError("Select at least one segment tag.")
    if isinstance(months, bool) or not isinstance(months, numbers.Integral) or months <= 0:
        raise ParameterValidationError(
            f"Lookback window must be a whole number of months >= 1, got {months!r}"
        )
    return tags
