"""Grid layer: session state and interaction commands for the renderer."""

from ksigrid.grid.session import GridSession, MetricView

__all__ = ["GridSession", "MetricView"]
