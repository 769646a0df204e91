"""Cached casualty record loading for the Streamlit page."""

from typing import Any, Dict, List

import streamlit as st

from ksigrid.core.config import KsiGridConfig
from ksigrid.data.records import Record, load_records


@st.cache_data(show_spinner="Loading casualty records...")
def cached_records(settings: Dict[str, Any]) -> List[Record]:
    """Read the casualty CSV once per configuration.

    Args:
        settings: ``KsiGridConfig.to_dict()`` output. Every field is
            part of the cache key and is used to rebuild the config.

    Returns:
        List of Record, in file order.
    """
    return load_records(KsiGridConfig(**settings))
