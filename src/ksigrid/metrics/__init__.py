"""Metric layer: metric registry and color scale management."""

from ksigrid.metrics.registry import (
    Metric,
    MetricRegistry,
    COUNT_METRIC,
    RATE_METRIC,
    default_registry,
)
from ksigrid.metrics.scale import ColorScale, ColorScaleManager

__all__ = [
    "Metric",
    "MetricRegistry",
    "COUNT_METRIC",
    "RATE_METRIC",
    "default_registry",
    "ColorScale",
    "ColorScaleManager",
]
