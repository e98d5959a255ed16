# -*- coding: utf-8 -*-
"""
Climate Map Render State
========================
climate_map_state.py

RenderState is the single source of truth for what the map shows (year and
display mode).  RenderController owns the one instance and is the only
writer; every transition recomputes the choropleth and refreshes the legend.

Transitions:
- set_year(year)  -> full recompute + legend refresh
- set_mode(mode)  -> full recompute + legend refresh
"""

import logging
from typing import Callable, List, Literal, Optional

from climate_map_constants import MODE_TEMPERATURE, MODES
from climate_map_legend import describe_legend

logger = logging.getLogger(__name__)

Mode = Literal["temperature", "sea_level"]


def validate_mode(mode: str) -> str:
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode!r} (expected one of {MODES})")
    return mode


class RenderState:
    """Current year and display mode."""

    def __init__(self, year: int, mode: Mode = MODE_TEMPERATURE):
        self.year = int(year)
        self.mode = validate_mode(mode)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RenderState):
            return NotImplemented
        return (self.year, self.mode) == (other.year, other.mode)

    def __repr__(self) -> str:
        return f"RenderState(year={self.year}, mode={self.mode!r})"


class RenderController:
    """
    Owns the RenderState and drives recomputation.

    Args:
        state: Initial RenderState
        updater: ChoroplethUpdater publishing to the map surface
        series: YearlyAverageSeries used for the sea level legend domain
    """

    def __init__(self, state: RenderState, updater, series):
        self.state = state
        self.updater = updater
        self.series = series
        self.legend = describe_legend(state.mode, series)
        self._legend_listeners: List[Callable] = []

    def on_legend(self, callback: Callable) -> None:
        """Register a callback receiving every refreshed LegendDescription."""
        self._legend_listeners.append(callback)

    def set_year(self, year: int) -> Optional[dict]:
        self.state.year = int(year)
        return self.refresh()

    def set_mode(self, mode: Mode) -> Optional[dict]:
        self.state.mode = validate_mode(mode)
        return self.refresh()

    def refresh(self) -> Optional[dict]:
        """Recompute the map and the legend for the current state."""
        collection = self.updater.update(self.state)
        logger.debug("Refreshed %r", self.state)
        self.legend = describe_legend(self.state.mode, self.series)
        for callback in self._legend_listeners:
            callback(self.legend)
        return collection
