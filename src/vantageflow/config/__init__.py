"""
Configuration package for VantageFlow.

- AppConfig: root model (logging + ingestion)
- IngestionConfig: parser tunables
- load_config/save_config: YAML persistence with CLI overrides
"""

from vantageflow.config.app import (
    AppConfig,
    IngestionConfig,
    LoggingSettings,
    apply_cli_overrides,
    generate_default_config,
    load_config,
    load_yaml,
    save_config,
)

__all__ = [
    "AppConfig",
    "IngestionConfig",
    "LoggingSettings",
    "apply_cli_overrides",
    "generate_default_config",
    "load_config",
    "load_yaml",
    "save_config",
]
