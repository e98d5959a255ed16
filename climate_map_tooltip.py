# -*- coding: utf-8 -*-
"""
Climate Map Tooltip
===================
climate_map_tooltip.py

Hover summary for a country: display name, selected year and the value
computed by the last choropleth update.  Temperature mode only; sea level
is painted on the ocean and has no per-country value.
"""

from typing import NamedTuple, Optional

from climate_map_constants import MODE_LABELS, MODE_TEMPERATURE, NAME_FIELDS, NO_DATA_TEXT
from climate_map_helpers import first_present, to_float
from climate_map_keys import resolve_key


class TooltipContent(NamedTuple):
    name: str
    year: int
    label: str
    value_text: str


def display_name(properties: dict) -> str:
    """First available name field, then the join key, then 'Unknown'."""
    name = first_present(properties, NAME_FIELDS)
    if name is not None:
        return str(name).strip()
    return resolve_key(properties) or "Unknown"


def format_value(value) -> str:
    number = to_float(value)
    return f"{number:.2f}" if number is not None else NO_DATA_TEXT


def describe_tooltip(properties: Optional[dict], state) -> Optional[TooltipContent]:
    """
    Build the tooltip for the hovered feature.

    Args:
        properties: Properties of the hovered feature (as last published), or None
        state: Current RenderState

    Returns:
        TooltipContent, or None when nothing is hovered or the mode has no tooltip
    """
    if properties is None or state.mode != MODE_TEMPERATURE:
        return None
    return TooltipContent(
        name=display_name(properties),
        year=state.year,
        label=MODE_LABELS[state.mode],
        value_text=format_value(properties.get("value")),
    )


def tooltip_text(content: Optional[TooltipContent]) -> str:
    """Single-line form used for map hover tooltips."""
    if content is None:
        return ""
    return f"{content.name} | Year: {content.year} | {content.label}: {content.value_text}"


def tooltip_html(content: TooltipContent) -> str:
    return f"""
    <div style="background:#f8f9fa;border-radius:8px;padding:8px 10px;margin:2px 0;">
        <div style="font-size:13px;font-weight:bold;color:#333;">{content.name}</div>
        <div style="font-size:11px;color:#666;">Year: {content.year}</div>
        <div style="font-size:12px;color:#333;">{content.label}: <b>{content.value_text}</b></div>
    </div>
    """


def render_tooltip(st, content: Optional[TooltipContent]) -> None:
    """Write the hover summary to a Streamlit container (nothing when absent)."""
    if content is None:
        return
    st.markdown(tooltip_html(content), unsafe_allow_html=True)
