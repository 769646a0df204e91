"""Data layer: casualty records, CSV loading, record filter."""

from ksigrid.data.records import Record, load_records, frame_to_records
from ksigrid.data.filter import filter_records

__all__ = ["Record", "load_records", "frame_to_records", "filter_records"]
