"""Plotly rendering of the hill chart and its item table.

The figure uses logical pixel coordinates: x in [0, width], y in [0, height]
growing downward (the y axis is reversed), so plotly selection events come
back in the same space the drag controller hit-tests in.
"""

from __future__ import annotations

import html
from datetime import datetime
from typing import List, Optional, Sequence, Set

import pandas as pd
import plotly.graph_objects as go

from src.hill.curve import ChartGeometry
from src.hill.models import PALETTE_NAMES, Item, color_hex
from src.hill.staleness import business_days_between

CURVE_HILL = 0
CURVE_TARGETS = 1
CURVE_ITEMS = 2

TARGET_STEPS = 100
MARKER_SIZE = 20
PAD = 16

PHASE_LEFT = "Figuring it out"
PHASE_RIGHT = "Making it happen"


def format_last_updated(ts: datetime) -> str:
    return f"{ts.day}/{ts.month}/{ts.year} {ts.hour:02d}:{ts.minute:02d}"


def build_figure(
    items: Sequence[Item],
    geometry: ChartGeometry,
    stale_ids: Optional[Set[str]] = None,
    dragging_id: Optional[str] = None,
) -> go.Figure:
    stale_ids = stale_ids or set()
    width, height = geometry.width, geometry.height

    fig = go.Figure()

    curve = geometry.curve_points(201)
    fig.add_trace(go.Scatter(
        x=[p[0] for p in curve],
        y=[p[1] for p in curve],
        mode="lines",
        line=dict(color="#e0e0e0", width=2),
        hoverinfo="skip",
        name="hill",
    ))

    targets = geometry.curve_points(TARGET_STEPS + 1)
    fig.add_trace(go.Scatter(
        x=[p[0] for p in targets],
        y=[p[1] for p in targets],
        mode="markers",
        marker=dict(size=10, color="#0b63d6", opacity=0.35 if dragging_id else 0.06),
        customdata=[i / TARGET_STEPS for i in range(TARGET_STEPS + 1)],
        hovertemplate="Move here (%{customdata:.0%})<extra></extra>",
        name="targets",
    ))

    xs: List[float] = []
    ys: List[float] = []
    colors: List[str] = []
    opacities: List[float] = []
    outlines: List[str] = []
    outline_widths: List[float] = []
    sizes: List[float] = []
    hover: List[str] = []
    for item in items:
        x, y = geometry.point_for(item.progress)
        xs.append(x)
        ys.append(y)
        colors.append(color_hex(item.color))
        stale = item.id in stale_ids
        opacities.append(0.45 if stale else 1.0)
        if item.id == dragging_id:
            outlines.append("#0b2140")
            outline_widths.append(3)
            sizes.append(MARKER_SIZE + 6)
        else:
            outlines.append("#b71c1c" if stale else "rgba(0,0,0,0.25)")
            outline_widths.append(2 if stale else 1)
            sizes.append(MARKER_SIZE)
        label = f"<b>{html.escape(item.title)}</b><br>Last updated: {format_last_updated(item.last_updated)}"
        if stale:
            label += "<br>Stale"
        hover.append(label)

    fig.add_trace(go.Scatter(
        x=xs,
        y=ys,
        mode="markers",
        marker=dict(
            size=sizes,
            color=colors,
            opacity=opacities,
            line=dict(color=outlines, width=outline_widths),
        ),
        customdata=[item.id for item in items],
        hovertext=hover,
        hoverinfo="text",
        name="items",
    ))

    fig.add_shape(
        type="line", x0=width / 2, x1=width / 2, y0=0, y1=height,
        line=dict(color="#bdbdbd", width=1, dash="dot"),
    )
    for x, text in ((width / 4, PHASE_LEFT), (width * 3 / 4, PHASE_RIGHT)):
        fig.add_annotation(
            x=x, y=10, text=text, showarrow=False, yanchor="top",
            font=dict(color="#757575", size=15),
        )

    fig.update_layout(
        template="plotly_white",
        height=int(height + 2 * PAD),
        margin=dict(l=6, r=6, t=6, b=6),
        showlegend=False,
        clickmode="event+select",
        dragmode=False,
        xaxis=dict(range=[-PAD, width + PAD], visible=False, fixedrange=True),
        yaxis=dict(range=[height + PAD, -PAD], visible=False, fixedrange=True),
    )
    return fig


def items_frame(items: Sequence[Item], now: datetime, stale_after_days: int) -> pd.DataFrame:
    rows = []
    for item in items:
        idle_days = business_days_between(item.last_updated, now)
        rows.append({
            "Title": item.title,
            "Progress": round(item.progress * 100),
            "Color": PALETTE_NAMES.get(item.color, color_hex(item.color)),
            "Last updated": format_last_updated(item.last_updated),
            "Idle business days": idle_days,
            "Stale": idle_days >= stale_after_days,
        })
    return pd.DataFrame(rows, columns=["Title", "Progress", "Color", "Last updated", "Idle business days", "Stale"])
