"""KSI Grid - casualty severity heatmap page."""

import logging
import sys
from pathlib import Path

import streamlit as st

# Add app directory to path
app_dir = Path(__file__).parent
if str(app_dir) not in sys.path:
    sys.path.insert(0, str(app_dir))

from components.heatmap import build_heatmap_figure
from components.loading import cached_records
from ksigrid.core.config import resolve_config
from ksigrid.core.errors import ConfigError, KsiGridError, RecordSourceError
from ksigrid.grid.session import GridSession
from ksigrid.results.cells import cells_to_frame

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

st.set_page_config(page_title="KSI Grid", page_icon="", layout="wide")

try:
    config = resolve_config()
except ConfigError as e:
    st.error(f"Invalid configuration: {e}")
    st.caption("Fix config/ksigrid.yaml or point KSIGRID_CONFIG_DIR at a valid one.")
    st.stop()

st.title(config.title)

# Build the session once per browser session
if "grid_session" not in st.session_state:
    session = GridSession(config)
    try:
        session.load(lambda: cached_records(config.to_dict()))
    except RecordSourceError as e:
        st.error(f"Could not load casualty data: {e}")
        st.caption("Set KSIGRID_DATA_PATH or data_path in config/ksigrid.yaml.")
        st.stop()
    except KsiGridError as e:
        st.error(f"Invalid configuration: {e}")
        st.stop()
    st.session_state.grid_session = session

session: GridSession = st.session_state.grid_session

# ===== METRIC SELECTION =====
metric_names = session.registry.names
metric = st.radio(
    "Color by",
    metric_names,
    index=metric_names.index(session.current_metric()),
    format_func=lambda name: session.registry.get(name).label,
    horizontal=True,
)

if metric != session.current_metric():
    session.on_select(metric)

view = session.view()
st.caption(view.description)

# ===== HOVER / SELECTION =====
# Selection from the previous interaction drives the highlight
chart_state = st.session_state.get("grid_chart")
points = []
if chart_state:
    points = chart_state.get("selection", {}).get("points", [])

if points and points[0].get("customdata"):
    selected = session.on_hover(tuple(points[0]["customdata"]))
else:
    session.on_unhover()
    selected = None

# ===== GRID =====
if not session.cells:
    st.warning("No casualty records with a valid age band and role were found.")

fig = build_heatmap_figure(session)
st.plotly_chart(
    fig,
    use_container_width=True,
    on_select="rerun",
    selection_mode="points",
    key="grid_chart",
)

st.caption(
    f"{session.records_retained:,} of {session.records_loaded:,} casualty records "
    f"in {len(session.cells)} age/role groups"
)

if selected is not None:
    detail_cols = st.columns(3)
    with detail_cols[0]:
        st.metric("Total casualties", f"{selected.total:,}")
    with detail_cols[1]:
        st.metric("Fatal or serious", f"{selected.flagged_count:,}")
    with detail_cols[2]:
        st.metric("KSI share", f"{selected.flagged_rate:.1%}")

with st.expander("View cell table"):
    df = cells_to_frame(session.cells, config.row_labels, config.col_labels)
    st.dataframe(df, use_container_width=True)
