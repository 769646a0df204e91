"""Pipeline configuration.

Allows the grid to be pointed at a different casualty extract or a
different coding scheme without code changes:
- Input file and column names
- Missing/allowed category codes
- Which severities count as "flagged" (KSI)
- Default metric and color scale

Configuration can be loaded from:
1. YAML/JSON files in a config directory
2. Environment variables (for deployment)
3. Built-in defaults (DfT STATS19 casualty table)

Example usage:
    from ksigrid.core.config import load_config

    config = load_config(Path("config/ksigrid.yaml"))
    session = GridSession(config)
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Tuple

from ksigrid.core.entities import (
    AGE_BAND_LABELS,
    CASUALTY_CLASS_LABELS,
    KSI_SEVERITIES,
    MISSING_CODE,
    CasualtyClass,
)
from ksigrid.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "ksigrid.yaml"
DEFAULT_DATA_PATH = "data/dft-road-casualty-statistics-casualty-2024.csv"


@dataclass
class KsiGridConfig:
    """Settings for the filter -> aggregate -> color pipeline.

    Attributes:
        data_path: CSV file with one row per casualty.
        row_column: Column holding the age band code.
        col_column: Column holding the casualty class code.
        severity_column: Column holding the casualty severity code.
        missing_row_code: Age band code meaning "missing"; such rows are dropped.
        allowed_col_codes: Casualty class codes kept by the filter.
        flagged_severity_codes: Severity codes counted as flagged (fatal/serious).
        exclude_missing_severity: Drop rows with a missing severity before
            aggregation. Off by default, so those rows count towards totals.
        missing_severity_code: Severity code meaning "missing".
        default_metric: Metric selected before the first user selection.
        default_domain_max: Upper color bound used when the metric has no
            positive maximum (e.g. empty table).
        colorscale: Plotly named sequential colorscale.
        row_labels: Age band code -> display label.
        col_labels: Casualty class code -> display label.
        title: Chart title.
    """

    data_path: str = DEFAULT_DATA_PATH
    row_column: str = "age_band_of_casualty"
    col_column: str = "casualty_class"
    severity_column: str = "casualty_severity"
    missing_row_code: int = MISSING_CODE
    allowed_col_codes: Tuple[int, ...] = tuple(int(c) for c in CasualtyClass)
    flagged_severity_codes: Tuple[int, ...] = tuple(sorted(int(s) for s in KSI_SEVERITIES))
    exclude_missing_severity: bool = False
    missing_severity_code: int = MISSING_CODE
    default_metric: str = "rate"
    default_domain_max: float = 1.0
    colorscale: str = "YlOrRd"
    row_labels: Dict[int, str] = field(default_factory=lambda: {int(k): v for k, v in AGE_BAND_LABELS.items()})
    col_labels: Dict[int, str] = field(default_factory=lambda: {int(k): v for k, v in CASUALTY_CLASS_LABELS.items()})
    title: str = "UK road casualties 2024 – injury severity by age and role"

    def __post_init__(self) -> None:
        """Normalise collection types and validate."""
        self.allowed_col_codes = tuple(int(c) for c in self.allowed_col_codes)
        self.flagged_severity_codes = tuple(int(c) for c in self.flagged_severity_codes)
        # JSON object keys arrive as strings
        self.row_labels = {int(k): str(v) for k, v in self.row_labels.items()}
        self.col_labels = {int(k): str(v) for k, v in self.col_labels.items()}
        self._validate()

    def _validate(self) -> None:
        if not self.allowed_col_codes:
            raise ValueError("allowed_col_codes must not be empty")
        if not self.flagged_severity_codes:
            raise ValueError("flagged_severity_codes must not be empty")
        if self.missing_row_code in self.row_labels:
            raise ValueError(
                f"missing_row_code {self.missing_row_code} also has a row label"
            )
        if self.default_domain_max <= 0:
            raise ValueError("default_domain_max must be positive")

    def to_dict(self) -> Dict[str, Any]:
        """Plain-type representation suitable for YAML/JSON."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["allowed_col_codes"] = list(self.allowed_col_codes)
        data["flagged_severity_codes"] = list(self.flagged_severity_codes)
        data["row_labels"] = dict(self.row_labels)
        data["col_labels"] = dict(self.col_labels)
        return data


def load_config(config_path: Path) -> KsiGridConfig:
    """Load configuration from YAML or JSON file.

    Unknown keys are rejected so typos do not silently fall back to
    defaults.

    Args:
        config_path: Path to configuration file (.yaml, .yml, or .json)

    Returns:
        KsiGridConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
        ConfigError: If the file content is not a valid configuration
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        if config_path.suffix in (".yaml", ".yml"):
            try:
                import yaml

                data = yaml.safe_load(f)
            except ImportError:
                raise ImportError(
                    "PyYAML is required to load YAML config files. "
                    "Install with: pip install pyyaml"
                )
        elif config_path.suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(
                f"Unsupported config format: {config_path.suffix}. "
                "Use .yaml, .yml, or .json"
            )

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: expected a mapping at top level")

    known = {f.name for f in fields(KsiGridConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"{config_path}: unknown config keys {unknown}")

    try:
        config = KsiGridConfig(**data)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{config_path}: {e}") from e

    logger.info(f"Loaded config from {config_path}")
    return config


def save_config(config: KsiGridConfig, config_path: Path) -> None:
    """Save configuration to YAML or JSON file.

    Args:
        config: Configuration to save
        config_path: Path to save to (.yaml, .yml, or .json)

    Raises:
        ValueError: If file format is not supported
    """
    data = config.to_dict()

    # Ensure parent directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        if config_path.suffix in (".yaml", ".yml"):
            try:
                import yaml

                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            except ImportError:
                raise ImportError(
                    "PyYAML is required to save YAML config files. "
                    "Install with: pip install pyyaml"
                )
        elif config_path.suffix == ".json":
            json.dump(data, f, indent=2)
        else:
            raise ValueError(
                f"Unsupported config format: {config_path.suffix}. "
                "Use .yaml, .yml, or .json"
            )


def get_default_config_dir() -> Path:
    """Get default configuration directory.

    Checks in order:
    1. KSIGRID_CONFIG_DIR environment variable
    2. ./config directory

    Returns:
        Path to configuration directory
    """
    if env_dir := os.environ.get("KSIGRID_CONFIG_DIR"):
        return Path(env_dir)

    return Path.cwd() / "config"


def resolve_config(config_dir: Path | None = None) -> KsiGridConfig:
    """Load the active configuration.

    Uses ``ksigrid.yaml`` from the config directory when present,
    otherwise built-in defaults. ``KSIGRID_DATA_PATH`` overrides the
    data path in either case.

    Args:
        config_dir: Directory to search. Uses default if None.

    Returns:
        KsiGridConfig instance
    """
    if config_dir is None:
        config_dir = get_default_config_dir()

    config_path = config_dir / DEFAULT_CONFIG_FILENAME
    if config_path.exists():
        config = load_config(config_path)
    else:
        logger.debug(f"No config at {config_path}, using defaults")
        config = KsiGridConfig()

    if data_path := os.environ.get("KSIGRID_DATA_PATH"):
        config.data_path = data_path

    return config
