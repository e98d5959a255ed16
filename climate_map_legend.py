# -*- coding: utf-8 -*-
"""
Climate Map Legend
==================
climate_map_legend.py

Legend description for the active colour scale, derived from the same
domain logic as climate_map_colors.  Rendering to Streamlit is a separate,
display-only step.
"""

from typing import List, NamedTuple, Tuple

from climate_map_colors import ColorDomain, domain_for, gradient_stops
from climate_map_constants import LEGEND_STOPS, MODE_TITLES, MODE_UNITS


class LegendDescription(NamedTuple):
    title: str
    domain: ColorDomain
    min_label: str
    max_label: str
    gradient_stops: List[Tuple[float, str]]


def format_legend_value(value: float, unit: str) -> str:
    return f"{value:.1f} {unit}"


def describe_legend(mode: str, series=None, stops: int = LEGEND_STOPS) -> LegendDescription:
    """
    Describe the legend for a mode.

    Temperature uses the fixed -2..+3 domain; sea level recomputes its domain
    from the full yearly series on every call.

    Args:
        mode: MODE_TEMPERATURE or MODE_SEA_LEVEL
        series: YearlyAverageSeries (sea level only)
        stops: Number of gradient stops

    Returns:
        LegendDescription
    """
    domain = domain_for(mode, series)
    unit = MODE_UNITS[mode]
    return LegendDescription(
        title=MODE_TITLES[mode],
        domain=domain,
        min_label=format_legend_value(domain.min, unit),
        max_label=format_legend_value(domain.max, unit),
        gradient_stops=gradient_stops(mode, stops),
    )


def legend_html(legend: LegendDescription) -> str:
    """Format a legend as an HTML gradient bar."""
    stops = ", ".join(f"{colour} {offset * 100:.0f}%" for offset, colour in legend.gradient_stops)
    return f"""
    <div style="background:#f8f9fa;border-radius:8px;padding:8px 10px;margin:2px 0;">
        <div style="font-size:12px;font-weight:bold;color:#333;margin-bottom:4px;">{legend.title}</div>
        <div style="height:12px;border-radius:3px;background:linear-gradient(to right, {stops});"></div>
        <div style="display:flex;justify-content:space-between;font-size:11px;color:#666;margin-top:2px;">
            <span>{legend.min_label}</span><span>{legend.max_label}</span>
        </div>
    </div>
    """


def render_legend(st, legend: LegendDescription) -> None:
    """Write the legend to a Streamlit container."""
    st.markdown(legend_html(legend), unsafe_allow_html=True)
