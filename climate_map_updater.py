# -*- coding: utf-8 -*-
"""
Climate Map Choropleth Updater
==============================
climate_map_updater.py

Recomputes the choropleth for a RenderState and publishes it to the map
surface.

Every update rebuilds the whole land FeatureCollection and replaces the
source data in one call (no per-feature patching).  This assumes datasets of
hundreds of country features; past a few thousand features an incremental
strategy would be needed.

Per update:
- Land: value + value_color merged into a copy of each feature's properties
  (temperature mode only; sea level is not a per-feature metric)
- Ocean: one uniform fill-color from the yearly sea level average

Both channels are readiness-gated: nothing is published until the surface has
loaded and the target source/layer exists.
"""

import logging
from typing import Optional, Sequence, Tuple

from climate_map_colors import color_for, domain_for
from climate_map_constants import (
    CLIMATE_LAYER_ID,
    CLIMATE_SOURCE_ID,
    FALLBACK_COLOR,
    FILL_COLOR_PROPERTY,
    FILL_OPACITY,
    MODE_SEA_LEVEL,
    MODE_TEMPERATURE,
    OCEAN_LAYER_ID,
    OCEAN_NEUTRAL_COLOR,
    OCEAN_SOURCE_ID,
    OUTLINE_COLOR,
)
from climate_map_keys import DEFAULT_STRATEGIES, KeyStrategy, resolve_key

logger = logging.getLogger(__name__)


def install_layers(surface, land: dict, ocean: dict) -> None:
    """Add the ocean and country sources/layers.  Call from the surface load callback."""
    surface.add_source(OCEAN_SOURCE_ID, ocean)
    surface.add_layer({
        "id": OCEAN_LAYER_ID,
        "type": "fill",
        "source": OCEAN_SOURCE_ID,
        "paint": {
            "fill-color": OCEAN_NEUTRAL_COLOR,
            "fill-opacity": 1.0,
            "fill-outline-color": OCEAN_NEUTRAL_COLOR,
        },
    })

    surface.add_source(CLIMATE_SOURCE_ID, land)
    surface.add_layer({
        "id": CLIMATE_LAYER_ID,
        "type": "fill",
        "source": CLIMATE_SOURCE_ID,
        "paint": {
            "fill-color": ["get", "value_color"],
            "fill-opacity": FILL_OPACITY,
            "fill-outline-color": OUTLINE_COLOR,
        },
    })


class ChoroplethUpdater:
    """
    Recompute and publish the choropleth.

    Args:
        surface: MapSurface to publish to
        land: Base country FeatureCollection (never mutated)
        temperature_index: TimeSeriesIndex of temperature anomalies
        sea_level_series: YearlyAverageSeries of sea level change
        strategies: Join key strategies, highest priority first
    """

    def __init__(self, surface, land: dict, temperature_index, sea_level_series,
                 strategies: Sequence[KeyStrategy] = DEFAULT_STRATEGIES):
        self.surface = surface
        self.land = land
        self.temperature_index = temperature_index
        self.sea_level_series = sea_level_series
        self.strategies = strategies
        self.last_collection: Optional[dict] = None
        self.last_ocean_color: Optional[str] = None

    def feature_value(self, properties: dict, state) -> Optional[float]:
        if state.mode != MODE_TEMPERATURE:
            return None
        key = resolve_key(properties, self.strategies)
        return self.temperature_index.lookup(key, state.year)

    def ocean_color(self, state) -> str:
        """Sea level colour for the year, whatever the mode."""
        value = self.sea_level_series.get(state.year)
        return color_for(MODE_SEA_LEVEL, value, domain_for(MODE_SEA_LEVEL, self.sea_level_series))

    def compute(self, state) -> Tuple[dict, str]:
        """
        Build the updated land collection and the ocean colour for a state.

        Returns:
            Tuple of (new FeatureCollection, ocean fill colour)
        """
        domain = domain_for(state.mode, self.sea_level_series)
        features = []

        for feature in self.land.get("features") or []:
            if not feature:
                continue
            props = feature.get("properties") or {}
            value = self.feature_value(props, state)
            colour = color_for(state.mode, value, domain) if value is not None else FALLBACK_COLOR
            features.append({
                **feature,
                "properties": {**props, "value": value, "value_color": colour},
            })

        collection = {**self.land, "features": features}
        return collection, self.ocean_color(state)

    def update(self, state) -> Optional[dict]:
        """
        Recompute and publish.  A no-op while the surface is not ready.

        Returns:
            The published FeatureCollection, or None when skipped
        """
        if not self.surface.is_style_loaded():
            logger.info("Map surface not loaded, skipping update for %r", state)
            return None

        collection, ocean = self.compute(state)
        published = None

        if self.surface.has_source(CLIMATE_SOURCE_ID) and self.surface.has_layer(CLIMATE_LAYER_ID):
            self.surface.set_data(CLIMATE_SOURCE_ID, collection)
            self.last_collection = collection
            published = collection
        else:
            logger.info("Layer '%s' not on the surface yet, skipping choropleth update", CLIMATE_LAYER_ID)

        if self.surface.has_layer(OCEAN_LAYER_ID):
            self.surface.set_paint_property(OCEAN_LAYER_ID, FILL_COLOR_PROPERTY, ocean)
            self.last_ocean_color = ocean
        else:
            logger.info("Layer '%s' not on the surface yet, skipping ocean paint", OCEAN_LAYER_ID)

        return published
