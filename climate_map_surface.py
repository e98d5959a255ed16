# -*- coding: utf-8 -*-
"""
Climate Map Surface
===================
climate_map_surface.py

The rendering surface the choropleth pipeline publishes to.

MapSurface keeps GeoJSON sources, fill layers and their paint properties in
process, with a mapbox-style contract:
- add_source / add_layer are only valid after the load signal has fired
- set_data / set_paint_property replace data on existing sources/layers
- is_style_loaded / has_source / has_layer report readiness

build_folium_map() draws the current surface contents as a folium map for
display with streamlit-folium.  Layers are drawn in the order they were
added (ocean first, countries on top).
"""

import copy
import logging
from typing import Callable, Dict, List, Optional

from climate_map_config import FOLIUM_AVAILABLE, MAP_CENTER, MAP_TILES, MAP_ZOOM
from climate_map_constants import FALLBACK_COLOR, FILL_OPACITY, OUTLINE_COLOR

if FOLIUM_AVAILABLE:
    import folium

logger = logging.getLogger(__name__)


class SurfaceNotReadyError(RuntimeError):
    """Raised when sources/layers are added before the load signal."""


class LayerNotFoundError(RuntimeError):
    """Raised when a source or layer id does not exist on the surface."""


class MapSurface:
    """In-process map surface: sources, layers and paint properties."""

    def __init__(self):
        self.loaded = False
        self.sources: Dict[str, dict] = {}
        self.layers: Dict[str, dict] = {}
        self._load_callbacks: List[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Readiness
    # ------------------------------------------------------------------

    def on_load(self, callback: Callable[[], None]) -> None:
        """Run callback once the surface has loaded (immediately if it has)."""
        if self.loaded:
            callback()
        else:
            self._load_callbacks.append(callback)

    def fire_load(self) -> None:
        if self.loaded:
            return
        self.loaded = True
        callbacks, self._load_callbacks = self._load_callbacks, []
        for callback in callbacks:
            callback()

    def is_style_loaded(self) -> bool:
        return self.loaded

    def has_source(self, source_id: str) -> bool:
        return source_id in self.sources

    def has_layer(self, layer_id: str) -> bool:
        return layer_id in self.layers

    # ------------------------------------------------------------------
    # Sources and layers
    # ------------------------------------------------------------------

    def add_source(self, source_id: str, data: dict) -> None:
        if not self.loaded:
            raise SurfaceNotReadyError(f"Cannot add source '{source_id}' before the surface has loaded")
        if source_id in self.sources:
            raise ValueError(f"Source '{source_id}' already exists")
        self.sources[source_id] = data

    def add_layer(self, layer: dict) -> None:
        """
        Add a fill layer.

        Args:
            layer: {"id", "source", "paint": {"fill-color", "fill-opacity", "fill-outline-color"}}
        """
        if not self.loaded:
            raise SurfaceNotReadyError(f"Cannot add layer '{layer.get('id')}' before the surface has loaded")
        if layer.get("source") not in self.sources:
            raise LayerNotFoundError(f"Layer '{layer.get('id')}' references unknown source '{layer.get('source')}'")
        if layer["id"] in self.layers:
            raise ValueError(f"Layer '{layer['id']}' already exists")
        self.layers[layer["id"]] = {
            "id": layer["id"],
            "type": layer.get("type", "fill"),
            "source": layer["source"],
            "paint": dict(layer.get("paint") or {}),
        }

    def get_source(self, source_id: str) -> Optional[dict]:
        return self.sources.get(source_id)

    def get_layer(self, layer_id: str) -> Optional[dict]:
        return self.layers.get(layer_id)

    def set_data(self, source_id: str, data: dict) -> None:
        """Replace a source's FeatureCollection wholesale."""
        if source_id not in self.sources:
            raise LayerNotFoundError(f"Source '{source_id}' does not exist")
        self.sources[source_id] = data

    def set_paint_property(self, layer_id: str, name: str, value) -> None:
        if layer_id not in self.layers:
            raise LayerNotFoundError(f"Layer '{layer_id}' does not exist")
        self.layers[layer_id]["paint"][name] = value

    def get_paint_property(self, layer_id: str, name: str):
        layer = self.layers.get(layer_id)
        if layer is None:
            raise LayerNotFoundError(f"Layer '{layer_id}' does not exist")
        return layer["paint"].get(name)


# ============================================================================
# FOLIUM RENDERING
# ============================================================================

def resolve_paint(value, properties: dict):
    """Evaluate a paint value: a literal, or a ["get", field] expression."""
    if isinstance(value, (list, tuple)) and len(value) == 2 and value[0] == "get":
        return (properties or {}).get(value[1])
    return value


def _style_function(paint: dict):
    fill = paint.get("fill-color", FALLBACK_COLOR)
    opacity = paint.get("fill-opacity", FILL_OPACITY)
    outline = paint.get("fill-outline-color", OUTLINE_COLOR)

    def style(feature):
        props = feature.get("properties") or {}
        return {
            "fillColor": resolve_paint(fill, props) or FALLBACK_COLOR,
            "fillOpacity": resolve_paint(opacity, props),
            "color": resolve_paint(outline, props),
            "weight": 0.5,
        }

    return style


def _with_tooltips(data: dict, tooltip_fn: Callable[[dict], str]) -> dict:
    """Copy of a FeatureCollection with a 'tooltip' property on every feature."""
    annotated = copy.copy(data)
    annotated["features"] = [
        {**f, "properties": {**(f.get("properties") or {}), "tooltip": tooltip_fn(f.get("properties") or {}) or ""}}
        for f in data.get("features") or []
    ]
    return annotated


def build_folium_map(surface: MapSurface, tooltip_layer: str = None,
                     tooltip_fn: Callable[[dict], str] = None,
                     center: tuple = MAP_CENTER, zoom: int = MAP_ZOOM):
    """
    Draw the surface as a folium map.

    Args:
        surface: Loaded MapSurface
        tooltip_layer: Layer id receiving hover tooltips
        tooltip_fn: Feature properties -> tooltip text

    Returns:
        folium.Map, or None when folium is unavailable or the surface has not loaded
    """
    if not FOLIUM_AVAILABLE:
        return None

    if not surface.is_style_loaded():
        logger.info("Surface not loaded yet, map not drawn")
        return None

    m = folium.Map(
        location=center,
        zoom_start=zoom,
        tiles=MAP_TILES,
        control_scale=True,
        world_copy_jump=True,
    )

    for layer_id, layer in surface.layers.items():
        data = surface.sources[layer["source"]]
        tooltip = None

        if layer_id == tooltip_layer and tooltip_fn is not None and data.get("features"):
            data = _with_tooltips(data, tooltip_fn)
            tooltip = folium.GeoJsonTooltip(fields=["tooltip"], labels=False, sticky=True)

        folium.GeoJson(
            data,
            name=layer_id,
            style_function=_style_function(layer["paint"]),
            tooltip=tooltip,
        ).add_to(m)

    return m
