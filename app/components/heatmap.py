"""Casualty grid heatmap figure.

Paints one rectangle per observed (age band, role) cell using the
colors from GridSession.repaint_all(). Unobserved combinations are
left blank. An invisible marker trace at the cell centres carries
the hover text, and a second empty trace draws the colorbar.
"""

from typing import Dict

import plotly.graph_objects as go

from ksigrid.core.entities import label_for
from ksigrid.grid.session import GridSession
from ksigrid.results.cells import Cell

# Fraction of each band left as gap between cells
CELL_PADDING = 0.05

HIGHLIGHT_COLOR = "#111827"


def format_hover_text(
    cell: Cell,
    row_labels: Dict[int, str],
    col_labels: Dict[int, str],
) -> str:
    """Hover text for a cell.

    Args:
        cell: Cell to describe.
        row_labels: Age band code -> label.
        col_labels: Casualty class code -> label.

    Returns:
        HTML string for Plotly hovertext.
    """
    return (
        f"<b>{label_for(cell.row_category, row_labels)}</b><br>"
        f"Role: {label_for(cell.col_category, col_labels)}<br>"
        f"Total casualties: {cell.total:,}<br>"
        f"Fatal or serious: {cell.flagged_count:,} ({cell.flagged_rate:.0%})"
    )


def build_heatmap_figure(session: GridSession, height: int = 600) -> go.Figure:
    """Build the grid figure for the session's active metric.

    Args:
        session: A loaded GridSession.
        height: Figure height in pixels.

    Returns:
        Plotly Figure.
    """
    config = session.config
    view = session.view()
    colors = session.repaint_all()

    cols = session.col_order
    rows = session.row_order
    x_index = {code: i for i, code in enumerate(cols)}
    y_index = {code: j for j, code in enumerate(rows)}
    half = (1.0 - CELL_PADDING) / 2

    fig = go.Figure()

    centres_x, centres_y, hover, keys = [], [], [], []
    for cell in session.cells:
        if cell.col_category not in x_index:
            continue
        x = x_index[cell.col_category]
        y = y_index[cell.row_category]
        highlighted = session.highlighted == cell.key
        fig.add_shape(
            type="rect",
            x0=x - half, x1=x + half,
            y0=y - half, y1=y + half,
            fillcolor=colors[cell.key],
            line=dict(color=HIGHLIGHT_COLOR, width=2 if highlighted else 0),
            layer="below",
        )
        centres_x.append(x)
        centres_y.append(y)
        hover.append(format_hover_text(cell, config.row_labels, config.col_labels))
        keys.append(list(cell.key))

    fig.add_trace(go.Scatter(
        x=centres_x,
        y=centres_y,
        mode="markers",
        marker=dict(size=40, symbol="square", opacity=0),
        hovertext=hover,
        hoverinfo="text",
        customdata=keys,
        showlegend=False,
        name="cells",
    ))

    # Colorbar for the active metric domain
    fig.add_trace(go.Scatter(
        x=[None],
        y=[None],
        mode="markers",
        marker=dict(
            color=[0.0],
            colorscale=[[pos, color] for pos, color in session.scales.colorscale],
            cmin=0.0,
            cmax=view.domain_max,
            showscale=True,
            colorbar=dict(
                title=view.label,
                tickformat=view.tick_format,
            ),
        ),
        hoverinfo="skip",
        showlegend=False,
        name="scale",
    ))

    fig.update_xaxes(
        title_text="Casualty role",
        tickmode="array",
        tickvals=list(range(len(cols))),
        ticktext=[label_for(c, config.col_labels) for c in cols],
        range=[-0.5, len(cols) - 0.5],
        showgrid=False,
        zeroline=False,
    )
    fig.update_yaxes(
        title_text="Age band",
        tickmode="array",
        tickvals=list(range(len(rows))),
        ticktext=[label_for(r, config.row_labels) for r in rows],
        # First band at the top
        range=[len(rows) - 0.5, -0.5],
        showgrid=False,
        zeroline=False,
    )
    fig.update_layout(
        title=dict(text=config.title, x=0.5, xanchor="center"),
        height=height,
        plot_bgcolor="white",
        margin=dict(t=80, r=40, b=80, l=140),
    )
    return fig
