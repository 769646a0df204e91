"""Core foundation layer: coded entities, configuration, errors."""

from ksigrid.core.config import KsiGridConfig, load_config, save_config, resolve_config
from ksigrid.core.errors import (
    KsiGridError,
    ConfigError,
    RecordSourceError,
    UnknownMetricError,
    SessionNotReadyError,
)

__all__ = [
    "KsiGridConfig",
    "load_config",
    "save_config",
    "resolve_config",
    "KsiGridError",
    "ConfigError",
    "RecordSourceError",
    "UnknownMetricError",
    "SessionNotReadyError",
]
