"""
Climate Map Configuration
Technical settings, file paths and logging setup.
"""

import logging
import os

# ============================================================================
# APPLICATION SETTINGS
# ============================================================================

PORT = 8501
LOG_LEVEL = os.environ.get("CLIMATE_MAP_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# ============================================================================
# FILE PATHS
# ============================================================================

BASE_DIR = os.path.dirname(os.path.abspath(__file__)) if "__file__" in globals() else os.getcwd()
DATA_DIR = os.environ.get("CLIMATE_MAP_DATA_DIR", os.path.join(BASE_DIR, "data"))

# Dataset name -> file name (relative to DATA_DIR) or absolute http(s) URL
DATASET_FILES = {
    "land": "countries.geojson",
    "temperature": "Indicator_3_1_Climate_Indicators_Annual_Mean_Global_Surface_Temperature.geojson",
    "sea_level": "Indicator_3_3_melted_new.geojson",
    "ocean": "ocean.geojson",
}

# Parallel loads of the independent datasets
MAX_CONCURRENT_LOADS = 4
REQUEST_TIMEOUT = 60

# ============================================================================
# MAP SETTINGS
# ============================================================================

DEFAULT_YEAR = 1990
MAP_CENTER = (20.0, 0.0)
MAP_ZOOM = 2
MAP_HEIGHT = 600
MAP_TILES = "OpenStreetMap"

# ============================================================================
# FEATURE FLAGS
# ============================================================================

try:
    import folium
    from streamlit_folium import st_folium
    FOLIUM_AVAILABLE = True
except ImportError:
    FOLIUM_AVAILABLE = False


def dataset_sources(data_dir: str = None) -> dict:
    """Resolve DATASET_FILES against the data folder (URLs pass through)."""
    data_dir = data_dir or DATA_DIR
    sources = {}
    for name, location in DATASET_FILES.items():
        if location.startswith(("http://", "https://")) or os.path.isabs(location):
            sources[name] = location
        else:
            sources[name] = os.path.join(data_dir, location)
    return sources


def configure_logging(level: str = None) -> None:
    """Configure root logging once for the app entry point."""
    logging.basicConfig(level=(level or LOG_LEVEL), format=LOG_FORMAT)
