from __future__ import annotations

import pytest

from trends.countries import (
    COUNTRIES_DISPLAY_SETS,
    assign_colors,
    reference_event,
    relative_points,
    requested_countries,
    synthesize,
)
from trends.errors import InvalidConfiguration
from tests.helpers import day, points


def test_svn_doubling_scenario():
    raw = {"SVN": points([1, 2, 4, 8, 16])}
    (svn,) = synthesize(raw, {"SVN": day(0)}, 3, colors={"SVN": "#ffa600"}, names={"SVN": "Slovenia"})
    assert svn.country_name == "Slovenia"
    assert svn.color == "#ffa600"
    assert [d for d, _ in svn.data] == [2, 3, 4]
    assert [v for _, v in svn.data] == pytest.approx([(1 + 2 + 4) / 3, (2 + 4 + 8) / 3, (4 + 8 + 16) / 3])


def test_points_before_reference_are_dropped():
    assert relative_points(points([9, 9, 1, 2]), day(2)) == [(0, 1), (1, 2)]


def test_short_series_yield_empty_data_and_order_is_kept():
    raw = {"AUT": points([1, 2, 3, 4]), "ITA": points([5]), "SVN": points([1, 1, 1])}
    colors = assign_colors(["SVN", "AUT", "ITA"])
    out = synthesize(raw, lambda code: day(0), 3, colors=colors, order=["SVN", "AUT", "ITA"])
    assert [s.country_code for s in out] == ["SVN", "AUT", "ITA"]
    assert [len(s.data) for s in out] == [1, 2, 0]


def test_country_without_reference_event_is_empty():
    out = synthesize({"ISL": points([0, 0, 0])}, {"ISL": None}, 1, colors={"ISL": "#000"})
    assert out[0].data == ()


def test_missing_color_is_a_configuration_error():
    with pytest.raises(InvalidConfiguration):
        synthesize({"SVN": points([1])}, {"SVN": day(0)}, 1, colors={})


def test_reference_event_is_first_date_reaching_threshold():
    series = points([0, None, 0, 1, 3])
    assert reference_event(series) == day(3)
    assert reference_event(series, threshold=2) == day(4)
    assert reference_event(points([0, 0])) is None


def test_requested_countries_put_home_first():
    neighbours = COUNTRIES_DISPLAY_SETS[2]
    assert requested_countries(neighbours) == ["SVN", "AUT", "HRV", "HUN", "ITA"]


def test_colors_are_one_to_one_and_stable():
    codes = requested_countries(COUNTRIES_DISPLAY_SETS[0])
    first = assign_colors(codes)
    assert list(first) == codes
    assert len(set(first.values())) == len(codes)
    assert assign_colors(codes) == first
