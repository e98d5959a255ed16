import json

import pytest

from climate_map_data_operations import (
    TimeSeriesIndex,
    YearlyAverageSeries,
    aggregate_yearly_average,
    build_climate_data,
    load_all_datasets,
    load_feature_collection,
)

from conftest import collection, feature


# ----------------------------------------------------------------------------
# TimeSeriesIndex
# ----------------------------------------------------------------------------

def test_index_rows_by_key(temperature_index):
    assert len(temperature_index) == 3
    assert "FRA" in temperature_index
    assert temperature_index.get_row("FRA")["Country"] == "France"
    assert temperature_index.get_row("XXX") is None
    assert temperature_index.get_row(None) is None


def test_rows_are_read_only(temperature_index):
    row = temperature_index.get_row("FRA")
    with pytest.raises(TypeError):
        row["F1990"] = 99.0
    assert temperature_index.lookup("FRA", 1990) == 0.5


def test_build_copies_source_rows(temperature_rows):
    index = TimeSeriesIndex.build(temperature_rows)
    temperature_rows["features"][0]["properties"]["F1990"] = 99.0
    assert index.lookup("FRA", 1990) == 0.5


def test_prefixed_year_column(temperature_index):
    assert temperature_index.lookup("FRA", 1990) == 0.5
    assert temperature_index.lookup("FRA", 1991) == 0.75


def test_plain_year_column_has_priority(temperature_index):
    assert temperature_index.lookup("DEU", 1990) == 1.25


def test_empty_value_is_none(temperature_index):
    assert temperature_index.lookup("DEU", 1991) is None


def test_non_numeric_value_is_none(temperature_index):
    assert temperature_index.lookup("ITA", 1990) is None
    assert temperature_index.lookup("ITA", 1995) == 4.0


def test_blank_plain_column_falls_through_to_prefixed():
    index = TimeSeriesIndex.build(collection([feature({"ISO3": "FRA", "2000": "", "F2000": "1.5"})]))
    assert index.lookup("FRA", 2000) == 1.5


@pytest.mark.parametrize("year", [1800, 1989, 2100, 99999])
def test_years_outside_range_return_none(temperature_index, year):
    assert temperature_index.lookup("FRA", year) is None


def test_get_value_without_row(temperature_index):
    assert temperature_index.get_value(None, 1990) is None
    assert temperature_index.get_value({}, 1990) is None


def test_duplicate_key_last_write_wins():
    rows = collection([
        feature({"ISO3": "FRA", "F1990": 1.0}),
        feature({"ISO3": "FRA", "F1990": 2.0}),
    ])
    index = TimeSeriesIndex.build(rows)
    assert len(index) == 1
    assert index.duplicates == 1
    assert index.lookup("FRA", 1990) == 2.0


def test_index_is_read_only(temperature_index):
    with pytest.raises(TypeError):
        temperature_index._rows["NEW"] = {}


def test_years_from_columns(temperature_index):
    assert temperature_index.years() == [1990, 1991, 1995]


# ----------------------------------------------------------------------------
# Temporal aggregation
# ----------------------------------------------------------------------------

def test_mean_per_year():
    records = collection([
        feature({"date": "01/01/2000", "value": 10}),
        feature({"date": "12/31/2000", "value": 20}),
    ])
    series = aggregate_yearly_average(records)
    assert series[2000] == 15


def test_aggregation_skips_incomplete_records(sea_series):
    assert dict(sea_series) == {1992: 20.0, 1993: 40.0, 1994: 60.0}


def test_non_numeric_and_undated_records_not_counted_as_zero():
    records = collection([
        feature({"Date": "D01/01/2001", "Value": 8.0}),
        feature({"Date": "D01/02/2001", "Value": "abc"}),
        feature({"Date": "no year here", "Value": 0.0}),
        feature({"Value": 0.0}),
        feature({"Date": "D01/03/2001"}),
    ])
    assert dict(aggregate_yearly_average(records)) == {2001: 8.0}


def test_empty_collection_gives_empty_series():
    series = aggregate_yearly_average(collection([]))
    assert len(series) == 0
    assert series.min_value() is None
    assert series.max_value() is None
    assert series.to_frame().empty


def test_series_range_and_frame(sea_series):
    assert sea_series.years == [1992, 1993, 1994]
    assert sea_series.min_value() == 20.0
    assert sea_series.max_value() == 60.0
    assert sea_series.get(1980) is None
    frame = sea_series.to_frame()
    assert list(frame.columns) == ["Year", "Value"]
    assert frame["Value"].tolist() == [20.0, 40.0, 60.0]


def test_series_keys_are_sorted_ints():
    series = YearlyAverageSeries({2001.0: 2, 1999: 1})
    assert list(series) == [1999, 2001]


# ----------------------------------------------------------------------------
# Loading
# ----------------------------------------------------------------------------

def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_load_feature_collection(tmp_path):
    src = write_json(tmp_path / "land.geojson", collection([feature({"ISO3": "FRA"})]))
    data = load_feature_collection(src)
    assert len(data["features"]) == 1


def test_load_rejects_non_collection(tmp_path):
    src = write_json(tmp_path / "bad.geojson", {"type": "Feature"})
    with pytest.raises(RuntimeError):
        load_feature_collection(src)


def test_load_missing_file(tmp_path):
    with pytest.raises(RuntimeError, match="Error loading"):
        load_feature_collection(str(tmp_path / "missing.geojson"))


def test_load_all_waits_for_every_dataset(tmp_path, land, ocean, temperature_rows, sea_records):
    sources = {
        "land": write_json(tmp_path / "land.geojson", land),
        "ocean": write_json(tmp_path / "ocean.geojson", ocean),
        "temperature": write_json(tmp_path / "temp.geojson", temperature_rows),
        "sea_level": write_json(tmp_path / "sea.geojson", sea_records),
    }
    datasets = load_all_datasets(sources)
    assert set(datasets) == set(sources)

    data = build_climate_data(datasets)
    assert data["temperature_index"].lookup("FRA", 1990) == 0.5
    assert data["sea_level_series"][1993] == 40.0


def test_load_all_fails_without_partial_result(tmp_path, land):
    sources = {
        "land": write_json(tmp_path / "land.geojson", land),
        "ocean": str(tmp_path / "missing.geojson"),
    }
    with pytest.raises(RuntimeError, match="ocean"):
        load_all_datasets(sources)


def test_build_requires_all_datasets(land):
    with pytest.raises(RuntimeError, match="Missing datasets"):
        build_climate_data({"land": land})
