# -*- coding: utf-8 -*-
"""
Climate Map Join Keys
=====================
climate_map_keys.py

Resolves the country join key of a feature from its properties.

Geometry files and indicator tables disagree on the name of the ISO3 column
(ISO3, ISO_A3, adm0_a3, ...).  Each candidate property is a separate strategy
and the strategies are tried in a fixed, declared order:

    ISO3 > iso3 > ISO_A3 > iso_a3 > ADM0_A3 > adm0_a3 > ISO_A3_EH > iso_a3_eh

The first strategy returning a non-empty, trimmed key wins.  A feature with no
resolvable key is simply unjoinable; nothing is raised.
"""

from typing import Callable, Optional, Sequence

from climate_map_constants import JOIN_KEY_FIELDS, PLACEHOLDER_KEYS
from climate_map_helpers import is_blank

KeyStrategy = Callable[[dict], Optional[str]]


def property_strategy(field: str) -> KeyStrategy:
    """Build a strategy reading a single property as a join key."""

    def resolve(properties: dict) -> Optional[str]:
        value = (properties or {}).get(field)
        if is_blank(value):
            return None
        key = str(value).strip()
        if key in PLACEHOLDER_KEYS:
            return None
        return key

    resolve.field = field
    resolve.__name__ = f"resolve_{field}"
    return resolve


DEFAULT_STRATEGIES = tuple(property_strategy(field) for field in JOIN_KEY_FIELDS)


def resolve_key(properties: dict, strategies: Sequence[KeyStrategy] = DEFAULT_STRATEGIES) -> Optional[str]:
    """
    Resolve the join key of a feature.

    Args:
        properties: Feature property mapping
        strategies: Ordered strategies, highest priority first

    Returns:
        Trimmed key string, or None when no strategy resolves
    """
    for strategy in strategies:
        key = strategy(properties)
        if key:
            return key
    return None


def feature_key(feature: dict, strategies: Sequence[KeyStrategy] = DEFAULT_STRATEGIES) -> Optional[str]:
    """Resolve the join key of a GeoJSON feature (properties may be null)."""
    return resolve_key((feature or {}).get("properties") or {}, strategies)
