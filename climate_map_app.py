#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Global Climate Map
==================
climate_map_app.py

Architecture:
- ALL datasets loaded ONCE per session (parallel), indices built once
- One RenderController per session owns the RenderState (year + mode)
- Year slider and mode buttons call set_year / set_mode; each call recomputes
  the choropleth and the legend before the page is drawn
- Map, legend and tooltip are DISPLAY ONLY - they read what the last update
  published

Run: streamlit run climate_map_app.py
"""

import logging
from typing import Dict, Optional, Tuple

import altair as alt
import streamlit as st

from climate_map_config import DEFAULT_YEAR, FOLIUM_AVAILABLE, MAP_HEIGHT, configure_logging, dataset_sources
from climate_map_constants import CLIMATE_LAYER_ID, EMOJI, MODE_SEA_LEVEL, MODE_TEMPERATURE, MODE_TITLES
from climate_map_data_operations import load_climate_data
from climate_map_keys import feature_key, resolve_key
from climate_map_legend import render_legend
from climate_map_state import RenderController, RenderState
from climate_map_surface import MapSurface, build_folium_map
from climate_map_tooltip import describe_tooltip, render_tooltip, tooltip_text
from climate_map_updater import ChoroplethUpdater, install_layers

logger = logging.getLogger(__name__)


# ============================================================================
# SESSION SETUP
# ============================================================================

def year_range(data: Dict) -> Tuple[int, int]:
    """Slider bounds: every year seen in the indicator table or the series."""
    years = set(data["temperature_index"].years()) | set(data["sea_level_series"].years)
    if not years:
        return DEFAULT_YEAR, DEFAULT_YEAR
    return min(years), max(years)


def create_controller(data: Dict, year: int) -> Tuple[RenderController, MapSurface]:
    """
    Wire surface, updater and controller for one session.

    Layers are installed from the surface load callback, then the first
    update runs, so nothing touches paint properties before the surface is
    ready.
    """
    surface = MapSurface()
    updater = ChoroplethUpdater(surface, data["land"], data["temperature_index"], data["sea_level_series"])
    controller = RenderController(RenderState(year, MODE_TEMPERATURE), updater, data["sea_level_series"])

    surface.on_load(lambda: install_layers(surface, data["land"], data["ocean"]))
    surface.on_load(controller.refresh)
    surface.fire_load()

    return controller, surface


def hovered_properties(drawing: Optional[dict], collection: Optional[dict]) -> Optional[dict]:
    """Properties of the hovered country as computed by the latest update."""
    props = (drawing or {}).get("properties")
    if not props:
        return None
    key = resolve_key(props)
    if key and collection:
        for feature in collection.get("features") or []:
            if feature_key(feature) == key:
                return feature.get("properties") or {}
    return props


# ============================================================================
# DISPLAY
# ============================================================================

def render_sea_level_chart(container, series, year: int) -> None:
    """Yearly sea level averages with the selected year marked."""
    frame = series.to_frame()
    if frame.empty:
        container.info("No sea level records available.")
        return

    line = alt.Chart(frame).mark_line(color="#2171b5").encode(
        x=alt.X("Year:Q", axis=alt.Axis(title="Year", format="d")),
        y=alt.Y("Value:Q", title=MODE_TITLES[MODE_SEA_LEVEL]),
        tooltip=["Year", alt.Tooltip("Value:Q", format=".2f")],
    )
    rule = alt.Chart(frame[frame["Year"] == year]).mark_rule(color="#E74C3C").encode(x="Year:Q")

    container.altair_chart(alt.layer(line, rule).properties(height=220), use_container_width=True)


def run_climate_map():
    """Main application entry point."""
    configure_logging()
    st.set_page_config(page_title="Global Climate Map", layout="wide")

    # ========================================================================
    # INITIAL DATA LOADING (once per session)
    # ========================================================================

    if "controller" not in st.session_state:
        loading_msg = st.empty()
        loading_msg.info(f"{EMOJI['globe']} Loading climate data...")

        try:
            data = load_climate_data(dataset_sources())
        except RuntimeError as e:
            loading_msg.empty()
            logger.error("%s", e)
            st.error(f"{EMOJI['warning']} Could not load climate data.\n\n{e}")
            st.stop()

        y0, y1 = year_range(data)
        controller, surface = create_controller(data, min(max(DEFAULT_YEAR, y0), y1))

        st.session_state["data"] = data
        st.session_state["year_bounds"] = (y0, y1)
        st.session_state["controller"] = controller
        st.session_state["surface"] = surface

        loading_msg.empty()

    data = st.session_state["data"]
    y0, y1 = st.session_state["year_bounds"]
    controller: RenderController = st.session_state["controller"]
    surface: MapSurface = st.session_state["surface"]

    # ========================================================================
    # CONTROLS
    # ========================================================================

    def on_year_change():
        controller.set_year(st.session_state["year_slider"])

    st.sidebar.title(f"{EMOJI['calendar']} Year")
    st.sidebar.slider(
        "Year", min_value=y0, max_value=max(y1, y0 + 1),
        value=controller.state.year, step=1, key="year_slider",
        on_change=on_year_change, label_visibility="collapsed",
    )

    st.sidebar.markdown("**Mode**")
    col_a, col_b = st.sidebar.columns(2)
    col_a.button(
        f"{EMOJI['thermometer']} Temperature", key="mode_temperature",
        type="primary" if controller.state.mode == MODE_TEMPERATURE else "secondary",
        on_click=controller.set_mode, args=(MODE_TEMPERATURE,), use_container_width=True,
    )
    col_b.button(
        f"{EMOJI['wave']} Sea Level", key="mode_sea_level",
        type="primary" if controller.state.mode == MODE_SEA_LEVEL else "secondary",
        on_click=controller.set_mode, args=(MODE_SEA_LEVEL,), use_container_width=True,
    )

    st.sidebar.markdown("---")
    render_legend(st.sidebar, controller.legend)

    # ========================================================================
    # MAP
    # ========================================================================

    state = controller.state
    st.title(f"{EMOJI['map']} {MODE_TITLES[state.mode]} - {state.year}")

    if not FOLIUM_AVAILABLE:
        st.info(f"{EMOJI['map']} Map view requires folium and streamlit-folium packages.")
        st.code("pip install folium streamlit-folium")
        return

    from streamlit_folium import st_folium

    tooltip_fn = None
    if state.mode == MODE_TEMPERATURE:
        tooltip_fn = lambda props: tooltip_text(describe_tooltip(props, state))

    m = build_folium_map(surface, tooltip_layer=CLIMATE_LAYER_ID, tooltip_fn=tooltip_fn)
    if m is None:
        st.warning(f"{EMOJI['warning']} Map surface is not ready yet.")
        return

    result = st_folium(m, width=None, height=MAP_HEIGHT, key="climate_map",
                       returned_objects=["last_active_drawing"])

    hovered = hovered_properties((result or {}).get("last_active_drawing"), controller.updater.last_collection)
    content = describe_tooltip(hovered, state)
    if content is not None:
        st.sidebar.markdown("---")
        st.sidebar.markdown(f"**{EMOJI['pin']} Selected country**")
        render_tooltip(st.sidebar, content)

    if state.mode == MODE_SEA_LEVEL:
        st.markdown(f"#### {EMOJI['chart']} Average sea level change by year")
        render_sea_level_chart(st, data["sea_level_series"], state.year)


if __name__ == "__main__":
    run_climate_map()
