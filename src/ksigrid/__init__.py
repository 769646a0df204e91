"""
KSI Grid - road casualty severity by age and role.

Aggregates STATS19 casualty records into an age band x casualty role
grid and colors it by casualty count or fatal/serious share,
built with pandas, Plotly and Streamlit.
"""

__version__ = "0.1.0"

from ksigrid.core.config import KsiGridConfig
from ksigrid.grid.session import GridSession

__all__ = ["KsiGridConfig", "GridSession", "__version__"]
