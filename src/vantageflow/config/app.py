"""
Configuration management for VantageFlow.

Provides YAML-based configuration with CLI overrides,
configuration hierarchy (CLI > YAML > Defaults), and validation.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_FILE = "~/.vantageflow/config.yaml"


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["debug", "info", "warning", "error"] = Field(
        default="warning",
        description="Log level",
    )


class IngestionConfig(BaseModel):
    """Tunables for the free-text project ingestion engine."""

    primary_currency: Literal["NGN", "USD", "EUR", "GBP"] = Field(
        default="NGN",
        description="Currency assumed when no currency symbol or code appears in the text",
    )
    default_project_name: str = Field(
        default="New Project",
        description="Project name used when no title line is found",
    )
    default_phase_name: str = Field(
        default="Implementation",
        description="Name of the phase synthesized for list items with no phase header",
    )
    task_offset_days: int = Field(
        default=14,
        description="Days added to the start date for a task without a due date",
    )
    subtask_offset_days: int = Field(
        default=7,
        description="Days added to the start date for a subtask without a due date",
    )
    budget_warning_min_length: int = Field(
        default=500,
        description="Input length (chars) above which a missing budget lowers confidence",
    )
    missing_budget_penalty: float = Field(
        default=0.1,
        description="Confidence penalty when no budget is found in long input",
    )
    missing_phases_penalty: float = Field(
        default=0.2,
        description="Confidence penalty when no phases are detected",
    )
    min_duration_weeks: int = Field(
        default=4,
        description="Lower bound of the estimated duration in weeks",
    )
    weeks_per_task: float = Field(
        default=0.5,
        description="Weeks of estimated duration contributed by each task or subtask",
    )
    description_phase_count: int = Field(
        default=5,
        description="Maximum phase names joined into a synthesized description",
    )
    max_description_length: int = Field(
        default=500,
        description="Maximum length of a description built from leading text lines",
    )
    title_scan_lines: int = Field(
        default=5,
        description="Number of leading lines searched for the project title",
    )

    @field_validator(
        "task_offset_days",
        "subtask_offset_days",
        "budget_warning_min_length",
        "min_duration_weeks",
    )
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Validate value is not negative."""
        if v < 0:
            raise ValueError("Value must not be negative")
        return v

    @field_validator("description_phase_count", "max_description_length", "title_scan_lines")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    @field_validator("missing_budget_penalty", "missing_phases_penalty")
    @classmethod
    def validate_penalty(cls, v: float) -> float:
        """Validate penalty lies within the confidence range."""
        if not (0.0 <= v <= 1.0):
            raise ValueError("Penalty must be between 0 and 1")
        return v

    @field_validator("weeks_per_task")
    @classmethod
    def validate_weeks_per_task(cls, v: float) -> float:
        if v < 0:
            raise ValueError("weeks_per_task must not be negative")
        return v


class AppConfig(BaseModel):
    """
    Main configuration for VantageFlow.

    Configuration is loaded with the following priority:
    1. CLI arguments (highest)
    2. YAML file (~/.vantageflow/config.yaml)
    3. Defaults (lowest)
    """

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )
    ingestion: IngestionConfig = Field(
        default_factory=IngestionConfig,
        description="Text ingestion engine configuration",
    )


def load_yaml(config_file: str) -> dict[str, Any]:
    """
    Load YAML or JSON configuration file.

    Args:
        config_file: Path to YAML or JSON configuration file

    Returns:
        Dictionary with parsed YAML/JSON content

    Raises:
        ValueError: If YAML/JSON is invalid or file format is wrong
    """
    config_path = Path(config_file).expanduser()

    if not config_path.exists():
        return {}

    file_ext = config_path.suffix.lower()
    if file_ext not in [".yaml", ".yml", ".json"]:
        raise ValueError(
            f"Config file must have .yaml, .yml, or .json extension, got: {file_ext}\n"
            f"File: {config_path}"
        )

    try:
        content = config_path.read_text()

        if file_ext == ".json":
            return json.loads(content) if content.strip() else {}

        data = yaml.safe_load(content)
        return data if data is not None else {}

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}") from e


def apply_cli_overrides(
    config_dict: dict[str, Any],
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Apply CLI argument overrides to config dictionary.

    Nested keys use dots, e.g. "ingestion.primary_currency".

    Args:
        config_dict: Configuration dictionary
        cli_overrides: Dictionary of CLI overrides

    Returns:
        Configuration dictionary with CLI overrides applied
    """
    if cli_overrides is None:
        return config_dict

    for key, value in cli_overrides.items():
        if "." in key:
            parts = key.split(".")
            current = config_dict
            for part in parts[:-1]:
                if part not in current:
                    current[part] = {}
                current = current[part]
            current[parts[-1]] = value
        else:
            config_dict[key] = value

    return config_dict


def generate_default_config(config_file: str) -> None:
    """
    Generate default configuration file from Pydantic model defaults.

    Args:
        config_file: Path where to create the config file
    """
    save_config(AppConfig(), config_file)


def load_config(
    config_file: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with hierarchy: CLI > YAML > Defaults.

    Args:
        config_file: Path to YAML config file (default: ~/.vantageflow/config.yaml)
        cli_overrides: Dictionary of CLI argument overrides

    Returns:
        Validated AppConfig instance

    Raises:
        ValueError: If configuration is invalid
    """
    if config_file is None:
        config_file = DEFAULT_CONFIG_FILE

    config_dict = load_yaml(config_file)
    config_dict = apply_cli_overrides(config_dict, cli_overrides)

    try:
        return AppConfig(**config_dict)
    except Exception as e:
        raise ValueError(
            f"Configuration validation failed: {e}\n"
            f"Please check your configuration file at {config_file}"
        ) from e


def save_config(config: AppConfig, config_file: str | None = None) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: AppConfig instance to save
        config_file: Path to YAML config file (default: ~/.vantageflow/config.yaml)

    Raises:
        OSError: If file operations fail
    """
    if config_file is None:
        config_file = DEFAULT_CONFIG_FILE

    config_path = Path(config_file).expanduser()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump(mode="json", exclude_none=True)

    with open(config_path, "w") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

    # Owner read/write only
    config_path.chmod(0o600)
