"""Pytest fixtures for KSI Grid tests."""

from typing import Callable, List

import pytest

from ksigrid.core.config import KsiGridConfig
from ksigrid.data.records import Record


def _records_at(row: int, col: int, severities: List[int]) -> List[Record]:
    """Records sharing one (row, col) pair, one per severity code."""
    return [Record(row_category=row, col_category=col, severity_code=s) for s in severities]


@pytest.fixture
def make_records() -> Callable[[int, int, List[int]], List[Record]]:
    """Factory for records sharing one (row, col) pair."""
    return _records_at


@pytest.fixture
def config() -> KsiGridConfig:
    """Default STATS19 configuration."""
    return KsiGridConfig()


@pytest.fixture
def scenario_a_records() -> List[Record]:
    """10 records: 6 at (1, 1) with 2 fatal/serious, 4 at (2, 2) all slight."""
    return (
        _records_at(1, 1, [1, 2, 3, 3, 3, 3])
        + _records_at(2, 2, [3, 3, 3, 3])
    )


@pytest.fixture
def three_cell_records() -> List[Record]:
    """Records producing three cells with distinct counts and rates."""
    return (
        _records_at(4, 1, [1, 3, 3, 3])       # total 4, rate 0.25
        + _records_at(6, 2, [2, 2, 3])        # total 3, rate 2/3
        + _records_at(9, 3, [3] * 8 + [1])    # total 9, rate 1/9
    )
