#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Climate Map Data Operations
===========================

Data loading, the indicator lookup index and the yearly aggregation.

All datasets are loaded ONCE at startup.  The lookup index and the yearly
series are built from them once and are read-only afterwards; nothing in this
module runs per frame.

Sections:
  1. Data Loading
  2. Time Series Index (join key -> indicator row)
  3. Temporal Aggregation (dated records -> yearly means)
"""

import json
import logging
import re
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import Dict, List, Optional, Sequence

import pandas as pd
import requests

from climate_map_config import MAX_CONCURRENT_LOADS, REQUEST_TIMEOUT
from climate_map_constants import DATE_FIELDS, VALUE_FIELDS, YEAR_COLUMN_FORMATS
from climate_map_helpers import first_present, to_float, trailing_year
from climate_map_keys import DEFAULT_STRATEGIES, KeyStrategy, resolve_key

logger = logging.getLogger(__name__)

REQUIRED_DATASETS = ("land", "temperature", "sea_level", "ocean")


# ============================================================================
# SECTION 1: DATA LOADING
# ============================================================================

def load_feature_collection(source: str) -> dict:
    """
    Load a GeoJSON FeatureCollection from a file path or http(s) URL.

    Args:
        source: Local path or URL

    Returns:
        FeatureCollection dict

    Raises:
        RuntimeError: If the source cannot be read or is not a FeatureCollection
    """
    try:
        if source.startswith(("http://", "https://")):
            resp = requests.get(source, timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
            data = resp.json()
        else:
            with open(source, "r", encoding="utf-8") as f:
                data = json.load(f)
    except (OSError, ValueError, requests.RequestException) as e:
        raise RuntimeError(f"Error loading {source}: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("features"), list):
        raise RuntimeError(
            f"{source} is not a GeoJSON FeatureCollection "
            f"(top-level keys: {sorted(data) if isinstance(data, dict) else type(data).__name__})"
        )

    logger.info("Loaded %d features from %s", len(data["features"]), source)
    return data


def load_all_datasets(sources: Dict[str, str], max_workers: int = MAX_CONCURRENT_LOADS) -> Dict[str, dict]:
    """
    Load independent datasets in parallel and wait for ALL of them.

    Partial readiness is not supported: the first failure is raised once
    every load has finished.

    Args:
        sources: Dataset name -> path or URL

    Returns:
        Dataset name -> FeatureCollection
    """
    results = {}
    errors = []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {name: executor.submit(load_feature_collection, src) for name, src in sources.items()}
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except RuntimeError as e:
                errors.append(f"{name}: {e}")

    if errors:
        raise RuntimeError("Dataset loading failed:\n  " + "\n  ".join(errors))

    return results


def build_climate_data(datasets: Dict[str, dict]) -> Dict:
    """
    Build the read-only lookup structures from loaded datasets.

    Returns:
        - land: base country FeatureCollection
        - ocean: ocean mask FeatureCollection
        - temperature_index: TimeSeriesIndex over the indicator table
        - sea_level_series: YearlyAverageSeries over the dated records
    """
    missing = [name for name in REQUIRED_DATASETS if name not in datasets]
    if missing:
        raise RuntimeError(f"Missing datasets: {missing}")

    return {
        "land": datasets["land"],
        "ocean": datasets["ocean"],
        "temperature_index": TimeSeriesIndex.build(datasets["temperature"]),
        "sea_level_series": aggregate_yearly_average(datasets["sea_level"]),
    }


def load_climate_data(sources: Dict[str, str]) -> Dict:
    """Load every dataset, then build indices once."""
    return build_climate_data(load_all_datasets(sources))


# ============================================================================
# SECTION 2: TIME SERIES INDEX
# ============================================================================

def _year_column_pattern(formats: Sequence[str]) -> re.Pattern:
    alternatives = [re.escape(fmt).replace(re.escape("{year}"), r"(\d{4})") for fmt in formats]
    return re.compile("^(?:" + "|".join(alternatives) + ")$")


class TimeSeriesIndex:
    """Read-only join key -> indicator row lookup."""

    def __init__(self, rows: Dict[str, dict], duplicates: int = 0,
                 year_formats: Sequence[str] = YEAR_COLUMN_FORMATS):
        self._rows = MappingProxyType({key: MappingProxyType(dict(row)) for key, row in rows.items()})
        self.duplicates = duplicates
        self.year_formats = tuple(year_formats)

    @classmethod
    def build(cls, collection: dict, strategies: Sequence[KeyStrategy] = DEFAULT_STRATEGIES,
              year_formats: Sequence[str] = YEAR_COLUMN_FORMATS) -> "TimeSeriesIndex":
        """
        Index tabular rows by join key.

        Duplicate keys: last write wins.  Overwrites are counted and logged,
        rows without any resolvable key are dropped.
        """
        rows = {}
        duplicates = 0
        unkeyed = 0

        for feature in collection.get("features") or []:
            props = (feature or {}).get("properties") or {}
            key = resolve_key(props, strategies)
            if key is None:
                unkeyed += 1
                continue
            if key in rows:
                duplicates += 1
                logger.debug("Duplicate indicator row for %s, keeping the later row", key)
            rows[key] = dict(props)

        if duplicates:
            logger.warning("%d duplicate indicator keys overwritten (last write wins)", duplicates)
        if unkeyed:
            logger.info("%d indicator rows skipped without a join key", unkeyed)

        return cls(rows, duplicates=duplicates, year_formats=year_formats)

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, key) -> bool:
        return key in self._rows

    def keys(self) -> List[str]:
        return list(self._rows.keys())

    def get_row(self, key: Optional[str]) -> Optional[Mapping]:
        if key is None:
            return None
        return self._rows.get(key)

    def get_value(self, row: Optional[Mapping], year: int) -> Optional[float]:
        """
        Extract the scalar for a year from an indicator row.

        Year columns are tried in the configured format order; the first
        present, non-empty, numeric value wins.

        Returns:
            Float value or None (never raises for unknown years)
        """
        if not row:
            return None
        for fmt in self.year_formats:
            value = to_float(row.get(fmt.format(year=year)))
            if value is not None:
                return value
        return None

    def lookup(self, key: Optional[str], year: int) -> Optional[float]:
        return self.get_value(self.get_row(key), year)

    def years(self) -> List[int]:
        """Sorted years appearing as a column in any row."""
        pattern = _year_column_pattern(self.year_formats)
        found = set()
        for row in self._rows.values():
            for column in row:
                match = pattern.match(str(column))
                if match:
                    found.add(int(next(g for g in match.groups() if g)))
        return sorted(found)


# ============================================================================
# SECTION 3: TEMPORAL AGGREGATION
# ============================================================================

class YearlyAverageSeries(Mapping):
    """Read-only year -> averaged value mapping."""

    def __init__(self, averages: Dict[int, float]):
        self._averages = MappingProxyType({int(y): float(v) for y, v in sorted(averages.items())})

    def __getitem__(self, year) -> float:
        return self._averages[year]

    def __iter__(self):
        return iter(self._averages)

    def __len__(self) -> int:
        return len(self._averages)

    @property
    def years(self) -> List[int]:
        return list(self._averages.keys())

    def min_value(self) -> Optional[float]:
        return min(self._averages.values()) if self._averages else None

    def max_value(self) -> Optional[float]:
        return max(self._averages.values()) if self._averages else None

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"Year": self.years, "Value": list(self._averages.values())})


def aggregate_yearly_average(collection: dict) -> YearlyAverageSeries:
    """
    Average dated point records per calendar year.

    Each record needs a date with a trailing 4-digit year and a numeric value.
    Records missing either are skipped, not counted as zero.

    Args:
        collection: FeatureCollection-shaped dated records

    Returns:
        YearlyAverageSeries
    """
    records = []
    for feature in collection.get("features") or []:
        props = (feature or {}).get("properties") or {}
        records.append({
            "Date": first_present(props, DATE_FIELDS),
            "Raw": first_present(props, VALUE_FIELDS),
        })

    df = pd.DataFrame(records, columns=["Date", "Raw"])
    df["Year"] = pd.to_numeric(df["Date"].map(trailing_year), errors="coerce")
    df["Value"] = pd.to_numeric(df["Raw"].map(to_float), errors="coerce")

    valid = df.dropna(subset=["Year", "Value"])
    skipped = len(df) - len(valid)
    if skipped:
        logger.debug("Skipped %d dated records without a usable date or value", skipped)

    averages = valid.groupby(valid["Year"].astype(int))["Value"].mean()
    series = YearlyAverageSeries({int(y): float(v) for y, v in averages.items()})

    logger.info("Aggregated %d records into %d yearly averages", len(valid), len(series))
    return series
