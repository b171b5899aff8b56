"""
Chart builders for the dashboard.

Each function returns a plotly Figure so pages only have to render it.
"""

from typing import Sequence

import plotly.graph_objects as go

from core.advisor import BenchmarkRow, ProjectionPoint, SentimentSlice
from core.models import FinancialResults
from core.theme import AI_CHART_COLORS, COLORS, COST_COLORS, YIELD_COLORS, format_compact

_LAYOUT = dict(
    margin=dict(l=10, r=10, t=30, b=10),
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    legend=dict(orientation="h", yanchor="bottom", y=-0.2, xanchor="center", x=0.5),
)


def _donut(labels, values, colors, hole: float, title: str = None) -> go.Figure:
    fig = go.Figure(go.Pie(
        labels=labels,
        values=values,
        hole=hole,
        marker=dict(colors=colors, line=dict(width=0)),
        sort=False,
        textinfo="percent",
        hovertemplate="%{label}: %{value:,.0f}<extra></extra>",
    ))
    fig.update_layout(title=title, **_LAYOUT)
    return fig


def cost_composition_chart(results: FinancialResults) -> go.Figure:
    """Land, construction and soft costs as a donut."""
    labels, values = zip(*results.cost_breakdown())
    return _donut(labels, values, COST_COLORS, hole=0.6)


def yield_structure_chart(results: FinancialResults, currency: str = "AED") -> go.Figure:
    """Total investment against net profit, with total revenue in the centre."""
    labels, values = zip(*results.yield_structure())
    # Pie slices cannot be negative; a loss shows as an empty profit slice.
    values = [max(0.0, v) for v in values]
    fig = _donut(labels, values, YIELD_COLORS, hole=0.7)
    fig.add_annotation(
        text=f"TOTAL REVENUE<br><b>{format_compact(results.total_revenue, currency)}</b>",
        showarrow=False,
        font=dict(size=16, color=COLORS['text']),
    )
    return fig


def score_gauge(score: int) -> go.Figure:
    """Feasibility score, 0-100."""
    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=score,
        gauge=dict(
            axis=dict(range=[0, 100], visible=False),
            bar=dict(color=COLORS['success']),
            bgcolor=COLORS['grid'],
            borderwidth=0,
        ),
    ))
    fig.update_layout(height=220, **_LAYOUT)
    return fig


def projection_chart(points: Sequence[ProjectionPoint]) -> go.Figure:
    """Five-year capital appreciation index."""
    fig = go.Figure(go.Scatter(
        x=[p.year for p in points],
        y=[p.value for p in points],
        mode="lines",
        line=dict(color=AI_CHART_COLORS[0], width=3, shape="spline"),
        fill="tozeroy",
        fillcolor="rgba(245, 158, 11, 0.15)",
    ))
    values = [p.value for p in points]
    if values:
        fig.update_yaxes(range=[min(values) - 10, max(values) * 1.05])
    fig.update_layout(height=240, yaxis=dict(gridcolor=COLORS['grid']), **_LAYOUT)
    return fig


def sentiment_chart(slices: Sequence[SentimentSlice]) -> go.Figure:
    """Market drivers ratio."""
    colors = [AI_CHART_COLORS[i % len(AI_CHART_COLORS)] for i in range(len(slices))]
    fig = _donut([s.name for s in slices], [s.value for s in slices], colors, hole=0.65)
    fig.add_annotation(text="RATIO", showarrow=False, font=dict(size=12, color=COLORS['muted']))
    return fig


def benchmark_chart(rows: Sequence[BenchmarkRow]) -> go.Figure:
    """
    Project against market per metric.

    Each row is scaled on its own so metrics in different units share one axis.
    """
    metrics = [r.metric for r in rows]
    widths = [r.relative_widths() for r in rows]
    fig = go.Figure()
    fig.add_trace(go.Bar(
        y=metrics,
        x=[w[1] for w in widths],
        name="Market Avg",
        orientation="h",
        marker_color=COLORS['secondary'],
        customdata=[r.market for r in rows],
        hovertemplate="%{y}: %{customdata:,}<extra>Market</extra>",
    ))
    fig.add_trace(go.Bar(
        y=metrics,
        x=[w[0] for w in widths],
        name="Project",
        orientation="h",
        marker_color=COLORS['success'],
        customdata=[r.project for r in rows],
        hovertemplate="%{y}: %{customdata:,}<extra>Project</extra>",
    ))
    fig.update_layout(barmode="group", height=220, xaxis=dict(range=[0, 100], visible=False), **_LAYOUT)
    return fig
