from __future__ import annotations

import pytest

from trends.filters import DEFAULT_SORT, QueryParameters, SortBy, normalize_query, parse_sort
from trends.models import Place


REGIONS = [Place(key="lj", name="Osrednjeslovenska"), Place(key="mb", name="Podravska")]


def test_defaults():
    q = normalize_query({}, regions=REGIONS)
    assert q == QueryParameters(search_text="", region=None, sort_by=DEFAULT_SORT, show_all=False)
    assert q.sort_by is SortBy.BY_RECENCY


def test_known_region_is_lowercased():
    assert normalize_query({"region": "LJ"}, regions=REGIONS).region == "lj"


@pytest.mark.parametrize("region", ["xx", "all", "", None])
def test_unknown_or_all_region_means_no_filter(region):
    assert normalize_query({"region": region}, regions=REGIONS).region is None


def test_region_accepted_without_known_set():
    assert normalize_query({"region": "kp"}).region == "kp"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("total-positive-tests", SortBy.BY_TOTAL),
        ("Last-Positive-Test", SortBy.BY_RECENCY),
        ("time-to-double", SortBy.BY_DOUBLING_TIME),
        ("nonsense", DEFAULT_SORT),
    ],
)
def test_sort_aliases(raw, expected):
    assert normalize_query({"sort": raw}).sort_by is expected


def test_doubling_sort_can_be_disabled():
    assert parse_sort("time-to-double", show_exp_growth_features=False) is None
    q = normalize_query({"sort": "time-to-double"}, show_exp_growth_features=False)
    assert q.sort_by is DEFAULT_SORT


def test_search_and_show_all():
    q = normalize_query({"search": "  Novo  ", "show_all": "true"})
    assert q.search_text == "Novo"
    assert q.show_all is True
