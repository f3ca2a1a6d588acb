"""Static HTML rendering for the staking yield calculator."""

from __future__ import annotations

import html
from datetime import UTC, datetime
from pathlib import Path
from typing import Sequence

import pandas as pd
import plotly.graph_objects as go
import plotly.io as pio

from . import formatting as fmt
from .params import ParameterSet
from .yields import DerivedMetrics, YieldProjection

PAGE_TITLE = "ZEC Staking Yield Calculator"

PARAMETER_LABELS: dict[str, tuple[str, str]] = {
    "pct_shielded_staked": ("Shielded pool staked", "ps"),
    "commission_pct": ("Operator commission", "c"),
    "delegator_zec": ("Delegated amount", "dz"),
    "finalizer_weight": ("Finalizer selection weight", "p"),
    "pool_growth_pct": ("Monthly pool growth", "pg"),
    "scale_mode": ("Display scale", "scale"),
}

PAGE_STYLE = "\n".join(
    [
        '  <style type="text/css">',
        "    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Arial, sans-serif; margin: 0 auto; padding: 2rem; max-width: 1100px; background: #101522; color: #f5f6fa; }",
        "    h1, h2 { color: #f4b728; }",
        "    a { color: #f4b728; }",
        "    .last-updated { font-size: 0.85rem; color: #7681a1; margin-bottom: 1.5rem; }",
        "    table { border-collapse: collapse; width: 100%; margin: 1.5rem 0; }",
        "    th, td { border: 1px solid #2f354a; padding: 0.5rem 0.75rem; text-align: left; }",
        "    th { background: #1f2840; }",
        "    tr:nth-child(even) { background: #161b2e; }",
        "    .section { margin-bottom: 3rem; }",
        "    .note { font-size: 0.9rem; color: #b5bfd9; margin-top: -1rem; margin-bottom: 1.5rem; }",
        "    .kpi-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 1rem; }",
        "    .kpi-card { background: #161b2e; padding: 1rem; border-radius: 8px; border: 1px solid #2f354a; }",
        "    .kpi-label { text-transform: uppercase; font-size: 0.75rem; color: #7f8bb3; letter-spacing: 0.05em; }",
        "    .kpi-badge { font-size: 0.65rem; color: #9fb0d9; background: rgba(244,183,40,0.12); border: 1px solid #2f354a; border-radius: 999px; padding: 0.1rem 0.45rem; margin-left: 0.5rem; }",
        "    .kpi-value { font-size: 1.5rem; margin-top: 0.25rem; color: #f5f6fa; }",
        "    .kpi-subtext { font-size: 0.85rem; color: #7f8bb3; margin-top: 0.25rem; }",
        "    .share-link { word-break: break-all; background: #161b2e; border: 1px solid #2f354a; border-radius: 6px; padding: 0.75rem; }",
        "  </style>",
    ]
)


def render_kpi_cards(cards: Sequence[dict[str, str]]) -> str:
    if not cards:
        return "<p>No KPI data.</p>"
    rows = ["<div class='section'>", "<h2>Your yield</h2>", "<div class='kpi-grid'>"]
    for card in cards:
        label = html.escape(card.get("label", ""))
        badge = card.get("badge")
        badge_html = (
            f"<span class='kpi-badge'>{html.escape(str(badge))}</span>" if badge else ""
        )
        value = html.escape(card.get("value", "—"))
        subtext = html.escape(card.get("subtext", ""))
        rows.append(
            "\n".join(
                [
                    "<div class='kpi-card'>",
                    f"  <div><span class='kpi-label'>{label}</span>{badge_html}</div>",
                    f"  <div class='kpi-value'>{value}</div>",
                    f"  <div class='kpi-subtext'>{subtext}</div>",
                    "</div>",
                ]
            )
        )
    rows.append("</div></div>")
    return "\n".join(rows)


def build_kpi_cards(params: ParameterSet, metrics: DerivedMetrics) -> list[dict[str, str]]:
    scale_label, headline = fmt.headline_reward(params, metrics)
    share_card = {
        "label": "Share of pool",
        "value": fmt.format_pct(metrics.delegator_share * 100, decimals=4),
        "subtext": f"of {fmt.format_zec(metrics.reference_pool_zec, decimals=0)}",
    }
    if metrics.saturated:
        share_card["badge"] = "covers pool"
    return [
        {
            "label": f"Reward {scale_label}",
            "value": fmt.format_zec(headline, decimals=8),
            "subtext": f"after {fmt.format_pct(params.commission_pct)} commission",
        },
        {
            "label": "Reward per year",
            "value": fmt.format_zec(metrics.per_year_zec),
            "subtext": f"on {fmt.format_zec(params.delegator_zec)} delegated",
        },
        {
            "label": "Annualized yield",
            "value": fmt.format_pct(metrics.annualized_pct),
            "subtext": "simple, no compounding",
        },
        share_card,
    ]


def render_parameter_table(params: ParameterSet) -> str:
    rows = [
        "<table>",
        "<thead><tr><th>Parameter</th><th>Query key</th><th>Value</th></tr></thead>",
        "<tbody>",
    ]
    values = {
        "pct_shielded_staked": fmt.format_pct(params.pct_shielded_staked),
        "commission_pct": fmt.format_pct(params.commission_pct),
        "delegator_zec": fmt.format_zec(params.delegator_zec, decimals=8),
        "finalizer_weight": fmt.format_number(params.finalizer_weight, decimals=4),
        "pool_growth_pct": fmt.format_pct(params.pool_growth_pct),
        "scale_mode": fmt.SCALE_LABELS[params.scale_mode],
    }
    for name, (label, key) in PARAMETER_LABELS.items():
        rows.append(
            f"<tr><td>{html.escape(label)}</td><td><code>{key}</code></td>"
            f"<td>{html.escape(values[name])}</td></tr>"
        )
    rows.append("</tbody></table>")
    return "\n".join(rows)


def render_projection_chart(projection: YieldProjection) -> str:
    frame = projection.to_frame()
    if frame.empty:
        return "<p class='note'>No projection months requested.</p>"

    fig = go.Figure()
    fig.add_bar(
        x=frame["month"],
        y=frame["monthly_reward_zec"],
        name="Monthly reward (ZEC)",
        marker=dict(color="#f4b728"),
        hovertemplate="<b>Month %{x}</b><br>Reward %{y:.6f} ZEC<extra></extra>",
    )
    fig.add_scatter(
        x=frame["month"],
        y=frame["annualized_pct"],
        name="Annualized yield (%)",
        mode="lines+markers",
        yaxis="y2",
        line=dict(color="#70e1ff", width=3),
        hovertemplate="<b>Month %{x}</b><br>APY %{y:.3f}%<extra></extra>",
    )
    fig.update_layout(
        template="plotly_dark",
        height=420,
        xaxis_title="Month",
        yaxis=dict(title="Monthly reward (ZEC)"),
        yaxis2=dict(title="Annualized yield (%)", overlaying="y", side="right", ticksuffix="%"),
        legend=dict(orientation="h", y=-0.2),
        margin=dict(t=30, r=60, l=60, b=60),
    )
    table = frame.to_html(
        index=False,
        classes="projection-table",
        float_format=lambda x: f"{x:,.6f}",
    )
    return "\n".join(
        [
            "<div class='section'>",
            f"<h2>{len(projection)}-month projection</h2>",
            "<p class='note'>Rewards auto-compound monthly; the rest of the pool grows by the "
            f"assumed {fmt.format_pct(projection.params.pool_growth_pct)} per month.</p>",
            pio.to_html(fig, include_plotlyjs="cdn", full_html=False),
            table,
            "</div>",
        ]
    )


def render_sensitivity_table(sensitivity: pd.DataFrame) -> str:
    if sensitivity.empty:
        return "<p class='note'>No sensitivity scenarios.</p>"
    pivot = sensitivity.pivot_table(
        index="pct_shielded_staked",
        columns="commission_pct",
        values="annualized_pct",
        aggfunc="first",
    )
    pivot.index = [fmt.format_pct(value, decimals=0) for value in pivot.index]
    pivot.columns = [f"{fmt.format_pct(value, decimals=0)} commission" for value in pivot.columns]
    table = pivot.to_html(classes="sensitivity-table", float_format=lambda x: f"{x:.3f}%")
    return "\n".join(
        [
            "<div class='section'>",
            "<h2>APY sensitivity</h2>",
            "<p class='note'>Rows: share of the shielded pool staked. Other inputs held fixed.</p>",
            table,
            "</div>",
        ]
    )


def render_share_section(share_url: str) -> str:
    safe = html.escape(share_url, quote=True)
    return "\n".join(
        [
            "<div class='section'>",
            "<h2>Share</h2>",
            f"<p class='share-link'><a href='{safe}'>{safe}</a></p>",
            "</div>",
        ]
    )


def render_page(
    params: ParameterSet,
    metrics: DerivedMetrics,
    projection: YieldProjection,
    share_url: str,
    *,
    sensitivity: pd.DataFrame | None = None,
    last_updated: datetime | None = None,
) -> str:
    sections: list[str] = [
        render_kpi_cards(build_kpi_cards(params, metrics)),
        "<div class='section'>",
        "<h2>Parameters</h2>",
        render_parameter_table(params),
        "</div>",
        render_projection_chart(projection),
        render_share_section(share_url),
    ]
    if sensitivity is not None:
        sections.insert(-1, render_sensitivity_table(sensitivity))
    stamp = (last_updated or datetime.now(UTC)).strftime("%Y-%m-%d %H:%M %Z")
    return "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '  <meta charset="utf-8" />',
            '  <meta name="viewport" content="width=device-width, initial-scale=1" />',
            f"  <title>{PAGE_TITLE}</title>",
            PAGE_STYLE,
            "</head>",
            "<body>",
            f"<h1>{PAGE_TITLE}</h1>",
            f"<div class='last-updated'>Last updated {stamp}</div>",
            *sections,
            "</body>",
            "</html>",
        ]
    )


def write_page(output_path: Path, document: str) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(document, encoding="utf-8")
    return output_path
