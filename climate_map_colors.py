# -*- coding: utf-8 -*-
"""
Climate Map Colour Scales
=========================
climate_map_colors.py

Continuous colour scales per display mode:
- Temperature anomaly: branca YlOrRd, fixed domain -2..+3 degC
- Sea level change: branca Blues, domain from the WHOLE yearly series

Values are normalised linearly against the domain and clamped to [0, 1].
A degenerate domain (min == max) maps to the palette midpoint.
Missing values map to FALLBACK_COLOR.
"""

from typing import List, NamedTuple, Optional, Tuple

from branca.colormap import LinearColormap, linear

from climate_map_constants import (
    DEFAULT_SEA_LEVEL_DOMAIN,
    FALLBACK_COLOR,
    MODE_SEA_LEVEL,
    MODE_TEMPERATURE,
    MODES,
    PALETTES,
    TEMPERATURE_DOMAIN,
)
from climate_map_helpers import to_float


class ColorDomain(NamedTuple):
    min: float
    max: float


def _palette(mode: str) -> LinearColormap:
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode!r}")
    return getattr(linear, PALETTES[mode]).scale(0.0, 1.0)


# Built once; scaled to the unit interval
COLORMAPS = {mode: _palette(mode) for mode in MODES}


def palette_color(mode: str, position: float) -> str:
    """Hex colour at a position in [0, 1] of the mode's palette."""
    if mode not in COLORMAPS:
        raise ValueError(f"Unknown mode: {mode!r}")
    position = min(max(float(position), 0.0), 1.0)
    return COLORMAPS[mode].rgb_hex_str(position)


MIDPOINT_COLORS = {mode: palette_color(mode, 0.5) for mode in MODES}


def normalize(value: float, domain: ColorDomain) -> Optional[float]:
    """
    Linear position of value within domain, clamped to [0, 1].

    Returns None for a degenerate domain (min == max).
    """
    lo, hi = domain
    if hi == lo:
        return None
    position = (value - lo) / (hi - lo)
    return min(max(position, 0.0), 1.0)


def color_for(mode: str, value, domain: ColorDomain) -> str:
    """
    Map a value to a colour for the given mode.

    Args:
        mode: MODE_TEMPERATURE or MODE_SEA_LEVEL
        value: Scalar (None / non-numeric gives the fallback colour)
        domain: ColorDomain to normalise against

    Returns:
        '#rrggbb' hex string
    """
    if mode not in COLORMAPS:
        raise ValueError(f"Unknown mode: {mode!r}")

    number = to_float(value)
    if number is None:
        return FALLBACK_COLOR

    position = normalize(number, domain)
    if position is None:
        return MIDPOINT_COLORS[mode]

    return palette_color(mode, position)


def series_domain(series) -> ColorDomain:
    """Domain spanning the entire yearly series (default when empty)."""
    if series is None or len(series) == 0:
        return ColorDomain(*DEFAULT_SEA_LEVEL_DOMAIN)
    return ColorDomain(series.min_value(), series.max_value())


def domain_for(mode: str, series=None) -> ColorDomain:
    """ColorDomain for a mode; sea level is recomputed from the full series."""
    if mode == MODE_TEMPERATURE:
        return ColorDomain(*TEMPERATURE_DOMAIN)
    if mode == MODE_SEA_LEVEL:
        return series_domain(series)
    raise ValueError(f"Unknown mode: {mode!r}")


def gradient_stops(mode: str, count: int) -> List[Tuple[float, str]]:
    """Evenly spaced (offset, colour) stops across the palette."""
    if count < 2:
        return [(0.0, palette_color(mode, 0.0)), (1.0, palette_color(mode, 1.0))]
    return [(i / (count - 1), palette_color(mode, i / (count - 1))) for i in range(count)]
