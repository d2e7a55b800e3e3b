"""
Configuration for jsontools.

Every setting can be passed explicitly or picked up from the environment.
"""

import os
from typing import Optional

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUE_VALUES


class JsonToolsConfig:
    """Runtime settings for patch application"""

    def __init__(
        self,
        enable_predicates: Optional[bool] = None,
        log_operations: Optional[bool] = None,
        log_level: Optional[str] = None,
        validate_schema: Optional[bool] = None,
    ):
        self.enable_predicates = (
            enable_predicates if enable_predicates is not None else _env_flag("JSONTOOLS_PREDICATES", "false")
        )
        self.log_operations = (
            log_operations if log_operations is not None else _env_flag("JSONTOOLS_LOG_OPERATIONS", "false")
        )
        self.log_level = (log_level or os.getenv("JSONTOOLS_LOG_LEVEL", "INFO")).upper()
        self.validate_schema = (
            validate_schema if validate_schema is not None else _env_flag("JSONTOOLS_VALIDATE_SCHEMA", "true")
        )

    def __repr__(self) -> str:
        return (
            f"JsonToolsConfig(enable_predicates={self.enable_predicates}, "
            f"log_operations={self.log_operations}, log_level={self.log_level!r}, "
            f"validate_schema={self.validate_schema})"
        )


_config: Optional[JsonToolsConfig] = None


def get_config() -> JsonToolsConfig:
    """Get global configuration, loading it from the environment on first use"""
    global _config
    if _config is None:
        _config = JsonToolsConfig()
    return _config


def set_config(config: Optional[JsonToolsConfig]) -> None:
    """Replace the global configuration; ``None`` reloads from the environment on next use"""
    global _config
    _config = config
