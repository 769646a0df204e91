"""Casualty records and CSV loading."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from ksigrid.core.config import KsiGridConfig
from ksigrid.core.entities import MISSING_CODE
from ksigrid.core.errors import RecordSourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Record:
    """A single casualty observation.

    Attributes:
        row_category: Age band code.
        col_category: Casualty class (role) code.
        severity_code: Casualty severity code.
    """
    row_category: int
    col_category: int
    severity_code: int


def frame_to_records(df: pd.DataFrame, config: KsiGridConfig) -> List[Record]:
    """Convert a casualty DataFrame to typed records.

    Non-numeric, blank, non-finite or fractional codes become
    ``MISSING_CODE`` so they are handled by the filter's exclusion
    policy rather than truncated to a valid code or failing here.

    Args:
        df: DataFrame containing the configured code columns.
        config: Pipeline configuration (column names).

    Returns:
        List of Record, one per row.

    Raises:
        RecordSourceError: If a required column is absent.
    """
    columns = [config.row_column, config.col_column, config.severity_column]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise RecordSourceError(f"Casualty data missing required columns: {missing}")

    numeric = pd.DataFrame(
        {c: pd.to_numeric(df[c], errors="coerce").astype(float) for c in columns}
    )
    valid = np.isfinite(numeric) & (numeric % 1 == 0)
    codes = numeric.where(valid, MISSING_CODE).astype(int)

    return [
        Record(row_category=row, col_category=col, severity_code=sev)
        for row, col, sev in codes.itertuples(index=False, name=None)
    ]


def load_records(config: KsiGridConfig, path: Path | None = None) -> List[Record]:
    """Load casualty records from CSV.

    Args:
        config: Pipeline configuration (column names, default path).
        path: Override for ``config.data_path``.

    Returns:
        List of Record, in file order.

    Raises:
        RecordSourceError: If the file cannot be read or lacks columns.
    """
    path = Path(path) if path is not None else Path(config.data_path)
    columns = [config.row_column, config.col_column, config.severity_column]

    try:
        df = pd.read_csv(path, usecols=lambda c: c in columns)
    except FileNotFoundError as e:
        raise RecordSourceError(f"Casualty data not found: {path}") from e
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise RecordSourceError(f"Could not read casualty data {path}: {e}") from e

    records = frame_to_records(df, config)
    logger.info(f"Loaded {len(records)} casualty records from {path}")
    return records
