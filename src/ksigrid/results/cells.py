"""Cell aggregation: group filtered records into (age band, role) cells."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import pandas as pd

from ksigrid.core.config import KsiGridConfig
from ksigrid.core.entities import label_for
from ksigrid.data.records import Record

logger = logging.getLogger(__name__)

CellKey = Tuple[int, int]

GROUP_COLUMNS = ["row_category", "col_category"]


@dataclass(frozen=True)
class Cell:
    """Summary statistics for one observed (age band, role) pair.

    Attributes:
        row_category: Age band code.
        col_category: Casualty class code.
        total: Number of casualties in the group (always > 0).
        flagged_count: Number that were fatal or serious.
        flagged_rate: flagged_count / total.
    """
    row_category: int
    col_category: int
    total: int
    flagged_count: int
    flagged_rate: float

    def __post_init__(self) -> None:
        if self.total <= 0:
            raise ValueError(f"Cell {self.key} must have a positive total, got {self.total}")
        if not 0 <= self.flagged_count <= self.total:
            raise ValueError(
                f"Cell {self.key} flagged_count {self.flagged_count} outside [0, {self.total}]"
            )

    @property
    def key(self) -> CellKey:
        """Grouping key (row_category, col_category)."""
        return (self.row_category, self.col_category)


def aggregate(records: Sequence[Record], config: KsiGridConfig) -> List[Cell]:
    """Group records by (row, col) code pair and reduce each group.

    Only observed pairs are emitted. Output is sorted by key, so the
    result does not depend on input order.

    Args:
        records: Filtered casualty records.
        config: Pipeline configuration (flagged severity codes).

    Returns:
        List of Cell sorted by (row_category, col_category).
    """
    if not records:
        logger.info("No records to aggregate; cell table is empty")
        return []

    df = pd.DataFrame(
        [(r.row_category, r.col_category, r.severity_code) for r in records],
        columns=GROUP_COLUMNS + ["severity_code"],
    )
    df["flagged"] = df["severity_code"].isin(config.flagged_severity_codes)

    grouped = df.groupby(GROUP_COLUMNS, sort=True).agg(
        total=("flagged", "size"),
        flagged_count=("flagged", "sum"),
    )

    cells = []
    for (row, col), total, flagged in grouped.itertuples(name=None):
        total = int(total)
        if total <= 0:
            continue
        flagged = int(flagged)
        cells.append(
            Cell(
                row_category=int(row),
                col_category=int(col),
                total=total,
                flagged_count=flagged,
                flagged_rate=flagged / total,
            )
        )

    logger.info(f"Aggregated {len(records)} records into {len(cells)} cells")
    return cells


def cells_to_frame(
    cells: Sequence[Cell],
    row_labels: Dict[int, str] | None = None,
    col_labels: Dict[int, str] | None = None,
) -> pd.DataFrame:
    """Flatten cells to a DataFrame for display or export.

    Args:
        cells: Aggregated cells.
        row_labels: Optional age band labels.
        col_labels: Optional casualty class labels.

    Returns:
        DataFrame with one row per cell, including label columns.
    """
    row_labels = row_labels or {}
    col_labels = col_labels or {}
    return pd.DataFrame(
        [
            {
                "row_category": c.row_category,
                "row_label": label_for(c.row_category, row_labels),
                "col_category": c.col_category,
                "col_label": label_for(c.col_category, col_labels),
                "total": c.total,
                "flagged_count": c.flagged_count,
                "flagged_rate": c.flagged_rate,
            }
            for c in cells
        ],
        columns=[
            "row_category", "row_label", "col_category", "col_label",
            "total", "flagged_count", "flagged_rate",
        ],
    )
