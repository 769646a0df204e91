"""Grid session - the command interface a renderer drives.

Wires the pipeline together (load -> filter -> aggregate -> color) and
exposes the interaction commands as plain methods so they can be
tested without any UI:

    session = GridSession(config)
    session.load()                  # once the record source is available
    view = session.on_select("count")
    colors = session.repaint_all()  # explicit repaint after every select
    session.on_hover((4, 3))
    session.on_unhover()

A session is either uninitialized or ready. It becomes ready only
when the whole pipeline has run; a failed load leaves it
uninitialized with no cell table exposed.
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, List, Optional, Sequence

from ksigrid.core.config import KsiGridConfig
from ksigrid.core.errors import RecordSourceError, SessionNotReadyError
from ksigrid.data.filter import filter_records
from ksigrid.data.records import Record, load_records
from ksigrid.metrics.registry import MetricRegistry, default_registry
from ksigrid.metrics.scale import ColorScaleManager
from ksigrid.results.cells import Cell, CellKey, aggregate

logger = logging.getLogger(__name__)

RecordSource = Callable[[], Sequence[Record]]


@dataclass(frozen=True)
class MetricView:
    """What the renderer needs after a metric switch.

    Attributes:
        name: Active metric name.
        label: Short display label.
        description: Sentence describing what the color encodes.
        domain_max: Upper bound of the color domain.
        tick_format: d3 format for the colorbar.
        color_for: Cell -> color under this metric.
    """
    name: str
    label: str
    description: str
    domain_max: float
    tick_format: str
    color_for: Callable[[Cell], str]


class GridSession:
    """Pipeline state for one interactive grid.

    Attributes:
        config: Pipeline configuration.
        registry: Selectable metrics.
    """

    def __init__(
        self,
        config: KsiGridConfig | None = None,
        registry: MetricRegistry | None = None,
    ):
        self.config = config or KsiGridConfig()
        self.registry = registry or default_registry()
        self._cells: tuple[Cell, ...] | None = None
        self._index: Dict[CellKey, Cell] = {}
        self._scales: ColorScaleManager | None = None
        self._highlighted: CellKey | None = None
        self.records_loaded = 0
        self.records_retained = 0

    # ---- lifecycle ----

    def load(self, source: RecordSource | None = None) -> MetricView:
        """Fetch records and build the cell table.

        Args:
            source: Callable returning decoded records. Defaults to reading
                ``config.data_path``.

        Returns:
            MetricView for the configured default metric.

        Raises:
            RecordSourceError: If the source fails. The session is left
                uninitialized.
            UnknownMetricError: If the default metric is not registered.
        """
        self._reset()

        if source is None:
            source = partial(load_records, self.config)

        try:
            records = source()
        except RecordSourceError as e:
            logger.error(f"Record source failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Record source failed: {e}")
            raise RecordSourceError(f"Record source failed: {e}") from e

        filtered = filter_records(records, self.config)
        cells = aggregate(filtered, self.config)
        scales = ColorScaleManager(
            cells,
            self.registry,
            initial_metric=self.config.default_metric,
            colorscale=self.config.colorscale,
            default_domain_max=self.config.default_domain_max,
        )

        # Publish only once every stage has succeeded
        self._cells = tuple(cells)
        self._index = {c.key: c for c in cells}
        self._scales = scales
        self.records_loaded = len(records)
        self.records_retained = len(filtered)

        logger.info(
            f"Grid ready: {self.records_retained}/{self.records_loaded} records "
            f"in {len(self._cells)} cells"
        )
        return self.view()

    def _reset(self) -> None:
        self._cells = None
        self._index = {}
        self._scales = None
        self._highlighted = None
        self.records_loaded = 0
        self.records_retained = 0

    @property
    def is_ready(self) -> bool:
        """True once load() has completed successfully."""
        return self._cells is not None

    def _require_ready(self) -> None:
        if not self.is_ready:
            raise SessionNotReadyError("Grid has no data; call load() first")

    # ---- table access ----

    @property
    def cells(self) -> tuple[Cell, ...]:
        """Aggregated cells, sorted by key."""
        self._require_ready()
        return self._cells

    def cell(self, key: CellKey) -> Optional[Cell]:
        """Cell for a key, or None if that combination was never observed."""
        self._require_ready()
        return self._index.get(tuple(key))

    @property
    def row_order(self) -> List[int]:
        """Observed age band codes, ascending."""
        self._require_ready()
        return sorted({c.row_category for c in self._cells})

    @property
    def col_order(self) -> List[int]:
        """Casualty class codes in configured display order."""
        return list(self.config.allowed_col_codes)

    # ---- selection ----

    def current_metric(self) -> str:
        """Name of the active metric."""
        self._require_ready()
        return self._scales.current_metric()

    @property
    def scales(self) -> ColorScaleManager:
        """Color/scale manager for the active metric."""
        self._require_ready()
        return self._scales

    def on_select(self, metric_name: str) -> MetricView:
        """Switch the active metric.

        The caller must follow a successful call with repaint_all().

        Raises:
            UnknownMetricError: If metric_name is not registered; the
                previous selection is kept.
            SessionNotReadyError: If load() has not succeeded.
        """
        self._require_ready()
        self._scales.set_metric(metric_name)
        return self.view()

    def view(self) -> MetricView:
        """MetricView for the active metric.

        The view's color_for is bound to the metric and scale current at
        call time, so it never mixes values from another metric.
        """
        self._require_ready()
        metric = self._scales.metric
        scale = self._scales.scale

        def color_for(cell: Cell) -> str:
            return scale.color_for_value(float(metric.extract(cell)))

        return MetricView(
            name=metric.name,
            label=metric.label,
            description=metric.description,
            domain_max=scale.domain_max,
            tick_format=metric.tick_format,
            color_for=color_for,
        )

    def repaint_all(self) -> Dict[CellKey, str]:
        """Color for every cell under the active metric."""
        self._require_ready()
        return {c.key: self._scales.color_for(c) for c in self._cells}

    # ---- hover ----

    def on_hover(self, key: CellKey) -> Optional[Cell]:
        """Highlight a cell; most recent hover wins.

        Hovering a grid position with no observed cell clears the
        highlight.

        Returns:
            The highlighted Cell, or None.
        """
        self._require_ready()
        cell = self._index.get(tuple(key))
        self._highlighted = cell.key if cell else None
        return cell

    def on_unhover(self) -> None:
        """Clear any highlight."""
        self._highlighted = None

    @property
    def highlighted(self) -> CellKey | None:
        """Key of the highlighted cell, if any."""
        return self._highlighted
