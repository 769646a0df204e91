"""Core entity definitions for casualty records.

This module contains the coded enums and label tables used across
the codebase, placed here to avoid circular imports. Codes follow the
DfT STATS19 casualty table.
"""

from enum import IntEnum
from typing import Dict


# STATS19 uses -1 for "data missing or out of range"
MISSING_CODE = -1


class AgeBand(IntEnum):
    """Age band of casualty (row dimension of the grid)."""
    AGE_0_5 = 1
    AGE_6_10 = 2
    AGE_11_15 = 3
    AGE_16_20 = 4
    AGE_21_25 = 5
    AGE_26_35 = 6
    AGE_36_45 = 7
    AGE_46_55 = 8
    AGE_56_65 = 9
    AGE_66_75 = 10
    OVER_75 = 11


class CasualtyClass(IntEnum):
    """Role of the casualty (column dimension of the grid)."""
    DRIVER_OR_RIDER = 1
    PASSENGER = 2
    PEDESTRIAN = 3


class CasualtySeverity(IntEnum):
    """Casualty injury severity. Lower value = more severe."""
    FATAL = 1
    SERIOUS = 2
    SLIGHT = 3


# Killed or seriously injured
KSI_SEVERITIES = frozenset({CasualtySeverity.FATAL, CasualtySeverity.SERIOUS})


AGE_BAND_LABELS: Dict[int, str] = {
    AgeBand.AGE_0_5: "0 - 5",
    AgeBand.AGE_6_10: "6 - 10",
    AgeBand.AGE_11_15: "11 - 15",
    AgeBand.AGE_16_20: "16 - 20",
    AgeBand.AGE_21_25: "21 - 25",
    AgeBand.AGE_26_35: "26 - 35",
    AgeBand.AGE_36_45: "36 - 45",
    AgeBand.AGE_46_55: "46 - 55",
    AgeBand.AGE_56_65: "56 - 65",
    AgeBand.AGE_66_75: "66 - 75",
    AgeBand.OVER_75: "Over 75",
}

CASUALTY_CLASS_LABELS: Dict[int, str] = {
    CasualtyClass.DRIVER_OR_RIDER: "Driver or rider",
    CasualtyClass.PASSENGER: "Passenger",
    CasualtyClass.PEDESTRIAN: "Pedestrian",
}


def label_for(code: int, labels: Dict[int, str]) -> str:
    """Look up a display label, falling back to the raw code."""
    return labels.get(code, str(code))
