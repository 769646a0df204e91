"""Metric registry - the selectable scalars that drive cell color.

Each metric pairs a pure extractor (Cell -> number) with its
domain maximum over the current cell table. Adding a metric means
registering one more Metric; nothing else changes.

Example usage:
    registry = default_registry()
    rate = registry.get("rate")
    upper = rate.domain_max(cells)  # None for an empty table
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from ksigrid.core.errors import UnknownMetricError
from ksigrid.results.cells import Cell

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Metric:
    """A named scalar derived from each cell.

    Attributes:
        name: Selection key (e.g. "count").
        label: Short display label.
        extract: Pure function Cell -> number.
        description: Sentence describing what the color encodes.
        value_format: Format spec for display (e.g. ",.0f", ".0%").
        tick_format: d3 format for chart axes and colorbars.
    """
    name: str
    label: str
    extract: Callable[[Cell], float]
    description: str
    value_format: str = ",.0f"
    tick_format: str = ","

    def domain_max(self, cells: Sequence[Cell]) -> Optional[float]:
        """Maximum of the extractor over the table, or None if empty."""
        if not cells:
            return None
        return max(float(self.extract(c)) for c in cells)

    def format_value(self, value: float) -> str:
        """Format a metric value for display."""
        return format(value, self.value_format)


COUNT_METRIC = Metric(
    name="count",
    label="Total casualties",
    extract=lambda cell: cell.total,
    description="Color encodes the number of casualties in each age/role group.",
    value_format=",.0f",
)

RATE_METRIC = Metric(
    name="rate",
    label="Fatal or serious share",
    extract=lambda cell: cell.flagged_rate,
    description=(
        "Color encodes the share of casualties that are fatal or serious "
        "(KSI) in each age/role group."
    ),
    value_format=".0%",
    tick_format=".0%",
)


class MetricRegistry:
    """Fixed set of selectable metrics, keyed by name."""

    def __init__(self, metrics: Sequence[Metric] = ()):
        self._metrics: Dict[str, Metric] = {}
        for metric in metrics:
            self.register(metric)

    def register(self, metric: Metric) -> None:
        """Register a metric.

        Raises:
            ValueError: If a metric with the same name is registered.
        """
        if metric.name in self._metrics:
            raise ValueError(f"Metric '{metric.name}' already registered")
        self._metrics[metric.name] = metric
        logger.debug(f"Registered metric: {metric.name}")

    def get(self, name: str) -> Metric:
        """Look up a metric by name.

        Raises:
            UnknownMetricError: If no metric has this name.
        """
        try:
            return self._metrics[name]
        except KeyError:
            raise UnknownMetricError(name, self.names) from None

    def __contains__(self, name: object) -> bool:
        return name in self._metrics

    def __len__(self) -> int:
        return len(self._metrics)

    @property
    def names(self) -> List[str]:
        """Registered metric names in registration order."""
        return list(self._metrics.keys())


def default_registry() -> MetricRegistry:
    """Registry with the two grid metrics: count and rate."""
    return MetricRegistry([COUNT_METRIC, RATE_METRIC])
