"""Results layer: cell aggregation."""

from ksigrid.results.cells import Cell, CellKey, aggregate, cells_to_frame

__all__ = ["Cell", "CellKey", "aggregate", "cells_to_frame"]
