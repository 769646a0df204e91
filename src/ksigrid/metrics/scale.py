"""Color scale management for the active metric.

The manager owns the selection state (which metric is active) and a
sequential color mapping over [0, domain_max]. Every selection
rebuilds the mapping from the current cell table; nothing is patched
incrementally, so switching away and back yields identical colors.

The manager never repaints. After each successful set_metric() the
caller must re-query color_for() for every cell.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np
from plotly.colors import get_colorscale, sample_colorscale
from plotly.exceptions import PlotlyError

from ksigrid.core.errors import ConfigError
from ksigrid.metrics.registry import Metric, MetricRegistry
from ksigrid.results.cells import Cell

logger = logging.getLogger(__name__)

Colorscale = List[Tuple[float, str]]


def resolve_colorscale(name: str) -> Colorscale:
    """Resolve a named Plotly colorscale to (position, color) stops.

    Raises:
        ConfigError: If Plotly does not know the name.
    """
    try:
        return [(float(pos), color) for pos, color in get_colorscale(name)]
    except PlotlyError as e:
        raise ConfigError(f"Unknown colorscale '{name}'") from e


@dataclass(frozen=True)
class ColorScale:
    """Monotonic mapping [0, domain_max] -> color.

    Values outside the domain are clamped to the end colors.

    Attributes:
        domain_max: Upper domain bound (> 0). Lower bound is fixed at 0.
        colorscale: Plotly colorscale stops.
    """
    domain_max: float
    colorscale: Tuple[Tuple[float, str], ...]

    def __post_init__(self) -> None:
        if not self.domain_max > 0:
            raise ValueError(f"domain_max must be positive, got {self.domain_max}")

    def normalise(self, value: float) -> float:
        """Position of value within the domain, in [0, 1]."""
        return float(np.clip(value / self.domain_max, 0.0, 1.0))

    def color_for_value(self, value: float) -> str:
        """Color for a raw metric value."""
        stops = [[pos, color] for pos, color in self.colorscale]
        return sample_colorscale(stops, [self.normalise(value)])[0]


class ColorScaleManager:
    """Selection state plus the color mapping derived from it.

    Two states, one per metric, with a single transition set_metric()
    that updates the active metric, recomputes the domain maximum over
    the cell table and rebuilds the color scale.

    Attributes:
        cells: The (read-only) aggregated cell table.
        registry: Available metrics.
        default_domain_max: Upper bound used when the active metric has
            no positive maximum (empty table, all-zero rates).
    """

    def __init__(
        self,
        cells: Sequence[Cell],
        registry: MetricRegistry,
        initial_metric: str,
        colorscale: str = "YlOrRd",
        default_domain_max: float = 1.0,
    ):
        """Initialize and select the initial metric.

        Raises:
            UnknownMetricError: If initial_metric is not registered.
            ConfigError: If the colorscale name is unknown.
        """
        if default_domain_max <= 0:
            raise ValueError("default_domain_max must be positive")
        self.cells = tuple(cells)
        self.registry = registry
        self.default_domain_max = default_domain_max
        self._colorscale = tuple(resolve_colorscale(colorscale))
        self._metric: Metric | None = None
        self._scale: ColorScale | None = None
        self.set_metric(initial_metric)

    def set_metric(self, name: str) -> None:
        """Select a metric and rebuild the color mapping.

        On an unknown name the previous selection stays in place.

        Raises:
            UnknownMetricError: If name is not registered.
        """
        metric = self.registry.get(name)

        domain_max = metric.domain_max(self.cells)
        if domain_max is None or not domain_max > 0:
            logger.debug(
                f"Metric {name} has no positive maximum ({domain_max}); "
                f"using default {self.default_domain_max}"
            )
            domain_max = self.default_domain_max

        self._metric = metric
        self._scale = ColorScale(domain_max=domain_max, colorscale=self._colorscale)
        logger.info(f"Active metric: {name} (domain 0-{domain_max:g})")

    def current_metric(self) -> str:
        """Name of the active metric."""
        return self._metric.name

    @property
    def metric(self) -> Metric:
        """The active Metric."""
        return self._metric

    @property
    def scale(self) -> ColorScale:
        """Color scale for the active metric."""
        return self._scale

    @property
    def domain_max(self) -> float:
        """Upper domain bound of the active metric's scale."""
        return self._scale.domain_max

    @property
    def colorscale(self) -> Colorscale:
        """Colorscale stops, for drawing a colorbar."""
        return list(self._colorscale)

    def value_for(self, cell: Cell) -> float:
        """Active metric value for a cell."""
        return float(self._metric.extract(cell))

    def color_for(self, cell: Cell) -> str:
        """Color for a cell under the active metric."""
        return self._scale.color_for_value(self.value_for(cell))
