"""Record filter: drop rows outside the grid's domain."""

import logging
from typing import List, Sequence

from ksigrid.core.config import KsiGridConfig
from ksigrid.data.records import Record

logger = logging.getLogger(__name__)


def is_retained(record: Record, config: KsiGridConfig) -> bool:
    """Check a single record against the exclusion policy.

    A record is kept when its age band is not the missing code, its
    casualty class is one of the allowed codes and, if configured,
    its severity is not missing.
    """
    if record.row_category == config.missing_row_code:
        return False
    if record.col_category not in config.allowed_col_codes:
        return False
    if config.exclude_missing_severity and record.severity_code == config.missing_severity_code:
        return False
    return True


def filter_records(records: Sequence[Record], config: KsiGridConfig) -> List[Record]:
    """Return the records that belong in the grid.

    Excluded records are not an error; the count is logged at DEBUG.
    The input sequence is not modified.

    Args:
        records: Decoded casualty records.
        config: Pipeline configuration (exclusion codes).

    Returns:
        New list of retained records (empty if none).
    """
    kept = [r for r in records if is_retained(r, config)]

    dropped = len(records) - len(kept)
    if dropped:
        logger.debug(f"Filter excluded {dropped} of {len(records)} records")
    return kept
