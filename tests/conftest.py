import pytest

from climate_map_data_operations import TimeSeriesIndex, aggregate_yearly_average
from climate_map_surface import MapSurface
from climate_map_updater import ChoroplethUpdater, install_layers


def square(x, y, size=1.0):
    return {
        "type": "Polygon",
        "coordinates": [[[x, y], [x + size, y], [x + size, y + size], [x, y + size], [x, y]]],
    }


def feature(properties, geometry=None):
    return {"type": "Feature", "geometry": geometry, "properties": properties}


def collection(features, **metadata):
    return {"type": "FeatureCollection", "features": list(features), **metadata}


@pytest.fixture
def land():
    return collection([
        feature({"ADMIN": "France", "ISO_A3": "-99", "ADM0_A3": "FRA"}, square(2, 46)),
        feature({"ADMIN": "Germany", "ISO_A3": "DEU"}, square(10, 51)),
        feature({"NAME": "Italy", "iso_a3": " ITA "}, square(12, 42)),
        feature({"ADMIN": "Atlantis"}, square(-30, 30)),
    ], name="countries")


@pytest.fixture
def temperature_rows():
    return collection([
        feature({"ISO3": "FRA", "Country": "France", "F1990": 0.5, "F1991": "0.75"}),
        feature({"ISO3": "DEU", "Country": "Germany", "1990": "1.25", "F1990": 9.9, "F1991": ""}),
        feature({"ISO3": "ITA", "Country": "Italy", "F1990": "n/a", "F1995": 4.0}),
        feature({"Country": "No code", "F1990": 1.0}),
    ])


@pytest.fixture
def sea_records():
    return collection([
        feature({"Date": "D12/17/1992", "Value": 10.0}),
        feature({"Date": "D06/01/1992", "Value": "30"}),
        feature({"Date": "D01/05/1993", "Value": 40.0}),
        feature({"Date": "D03/05/1994", "Value": 60.0}),
        feature({"Date": None, "Value": 1000.0}),
        feature({"Date": "D03/05/1994", "Value": None}),
    ])


@pytest.fixture
def ocean():
    return collection([feature({"name": "World Ocean"}, square(-180, -80, 160))])


@pytest.fixture
def temperature_index(temperature_rows):
    return TimeSeriesIndex.build(temperature_rows)


@pytest.fixture
def sea_series(sea_records):
    return aggregate_yearly_average(sea_records)


@pytest.fixture
def surface(land, ocean):
    surface = MapSurface()
    surface.on_load(lambda: install_layers(surface, land, ocean))
    surface.fire_load()
    return surface


@pytest.fixture
def updater(surface, land, temperature_index, sea_series):
    return ChoroplethUpdater(surface, land, temperature_index, sea_series)


@pytest.fixture
def climate_data(land, ocean, temperature_index, sea_series):
    return {
        "land": land,
        "ocean": ocean,
        "temperature_index": temperature_index,
        "sea_level_series": sea_series,
    }
