from __future__ import annotations

import json

import pytest

from trends.aggregate import build_place_series
from trends.config import Settings
from trends.countries import COUNTRIES_DISPLAY_SETS
from trends.filters import QueryParameters, SortBy
from trends.models import Cases, StatsDataPoint
from trends.national import daily_series, smoothed_series
from trends.views import compute_countries, compute_municipalities, compute_national, compute_regions, places_frame
from tests.helpers import day, points


def test_compute_municipalities_payload(three_day_snapshots):
    places = build_place_series(three_day_snapshots, today=day(2), names={"a": "Ajdovščina"})
    payload = compute_municipalities(QueryParameters(sort_by=SortBy.BY_TOTAL), places, settings=Settings(display_cap=1))
    assert payload["total"] == 2
    assert payload["truncated"] is True
    assert [p["key"] for p in payload["places"]] == ["b"]
    assert payload["places"][0]["date_of_max"] == day(2).isoformat()
    assert payload["filters"]["sort_by"] == "total-positive-tests"
    json.dumps(payload)


def test_compute_regions_payload(three_day_snapshots):
    payload = compute_regions(three_day_snapshots, day(2), names={"lj": "Osrednjeslovenska"})
    assert [r["key"] for r in payload["regions"]] == ["lj", "mb"]
    lj = next(s for s in payload["series"] if s["key"] == "lj")
    assert [p["value"] for p in lj["points"]] == [1, 1, 2]
    json.dumps(payload)


def test_compute_countries_skips_empty_series():
    nordic = COUNTRIES_DISPLAY_SETS[0]
    raw = {"SVN": points([0, 1, 2, 4, 8, 16, 32]), "DNK": points([0, 0, 1])}
    payload = compute_countries(raw, nordic, names={"SVN": "Slovenija"})
    assert [s["country_code"] for s in payload["series"]] == ["SVN"]
    svn = payload["series"][0]
    assert svn["country_name"] == "Slovenija"
    assert svn["data"][0] == [4, pytest.approx((1 + 2 + 4 + 8 + 16) / 5)]
    json.dumps(payload)


def _stats(values):
    return [
        StatsDataPoint(day_from_start=i, date=day(i), cases=Cases(confirmed_today=v))
        for i, v in enumerate(values)
    ]


def test_national_series_and_smoothing():
    stats = _stats([1, None, 3, 5, 7, 9])
    assert [p.value for p in daily_series(stats, lambda dp: dp.cases.confirmed_today)] == [1, None, 3, 5, 7, 9]
    smoothed = smoothed_series(stats, lambda dp: dp.cases.confirmed_today, 3)
    assert [r.target for r in smoothed] == [day(2), day(3), day(4)]
    assert [r.average for r in smoothed] == pytest.approx([3.0, 5.0, 7.0])


def test_compute_national_payload():
    payload = compute_national(_stats([2, 4, 6, 8, 10, 12]))
    assert [p["value"] for p in payload["confirmed_today"]] == pytest.approx([6.0, 8.0])
    assert payload["deceased"] == []


def test_places_frame(three_day_snapshots):
    df = places_frame(build_place_series(three_day_snapshots, today=day(2)))
    assert list(df["key"]) == ["a", "b"]
    assert df["max_value"].tolist() == [2, 5]
