#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Climate Map Constants
=====================

Display modes, colour domains, palettes, field-name candidates and layer ids
shared by the choropleth pipeline and the Streamlit page.
"""

# ============================================================================
# EMOJI CONSTANTS (Unicode escapes - won't corrupt during file edits)
# ============================================================================

EMOJI = {
    "thermometer": "\U0001F321\uFE0F",  # Thermometer
    "globe": "\U0001F30D",               # Globe/Earth
    "wave": "\U0001F30A",                # Wave
    "calendar": "\U0001F4C5",            # Calendar
    "map": "\U0001F5FA\uFE0F",           # World map
    "pin": "\U0001F4CD",                 # Pin/location
    "chart": "\U0001F4C8",               # Chart increasing
    "warning": "\u26A0\uFE0F",           # Warning sign
    "info": "\u2139\uFE0F",              # Info
}

# ============================================================================
# DISPLAY MODES
# ============================================================================

MODE_TEMPERATURE = "temperature"
MODE_SEA_LEVEL = "sea_level"
MODES = (MODE_TEMPERATURE, MODE_SEA_LEVEL)

MODE_LABELS = {
    MODE_TEMPERATURE: "Temp Anomaly",
    MODE_SEA_LEVEL: "Sea Level",
}

MODE_TITLES = {
    MODE_TEMPERATURE: "Temperature Anomaly (°C)",
    MODE_SEA_LEVEL: "Sea Level Change (mm)",
}

MODE_UNITS = {
    MODE_TEMPERATURE: "°C",
    MODE_SEA_LEVEL: "mm",
}

# ============================================================================
# COLOUR SCALES
# ============================================================================

# Temperature anomaly scale is fixed; sea level is recomputed from the series
TEMPERATURE_DOMAIN = (-2.0, 3.0)
DEFAULT_SEA_LEVEL_DOMAIN = (0.0, 200.0)

# branca.colormap.linear scheme names
PALETTES = {
    MODE_TEMPERATURE: "YlOrRd_09",
    MODE_SEA_LEVEL: "Blues_09",
}

FALLBACK_COLOR = "#cccccc"
OCEAN_NEUTRAL_COLOR = "#dfe9f3"
OUTLINE_COLOR = "#555555"
FILL_OPACITY = 0.8

LEGEND_STOPS = 9

# ============================================================================
# JOIN KEYS AND FIELD NAMES
# ============================================================================

# Priority order - first non-empty value wins
JOIN_KEY_FIELDS = (
    "ISO3",
    "iso3",
    "ISO_A3",
    "iso_a3",
    "ADM0_A3",
    "adm0_a3",
    "ISO_A3_EH",
    "iso_a3_eh",
)

# Natural Earth uses -99 where no ISO code is assigned
PLACEHOLDER_KEYS = {"-99"}

# Year column formats, tried in order
YEAR_COLUMN_FORMATS = (
    "{year}",
    "F{year}",
    "Y{year}",
    "y{year}",
    "_{year}",
)

NAME_FIELDS = (
    "ADMIN",
    "NAME",
    "name",
    "NAME_LONG",
    "Country",
    "COUNTRY",
)

DATE_FIELDS = ("date", "Date", "DATE")
VALUE_FIELDS = ("value", "Value", "VALUE")

NO_DATA_TEXT = "N/A"

# ============================================================================
# SURFACE IDS
# ============================================================================

CLIMATE_SOURCE_ID = "climate"
CLIMATE_LAYER_ID = "climate-fill"
OCEAN_SOURCE_ID = "ocean"
OCEAN_LAYER_ID = "ocean-fill"
FILL_COLOR_PROPERTY = "fill-color"
