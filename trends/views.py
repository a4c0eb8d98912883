from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence

import pandas as pd

from trends.aggregate import build_region_series, list_regions, place_bars
from trends.config import DEFAULT_SETTINGS, Settings
from trends.countries import CountriesDisplaySet, assign_colors, reference_event, requested_countries, synthesize
from trends.filters import QueryParameters
from trends.models import PlaceSeries, RegionsSnapshot, StatsDataPoint, TimePoint
from trends.national import smoothed_series
from trends.select import select_places


logger = logging.getLogger(__name__)


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def place_record(place: PlaceSeries, *, settings: Optional[Settings] = None) -> Dict[str, Any]:
    return {
        "key": place.key,
        "name": place.display_name,
        "region": place.place.parent_key,
        "max_value": place.max_value,
        "date_of_max": _iso(place.date_of_max),
        "days_since_max": place.days_since_max,
        "doubling_time": place.doubling_time,
        "bars": place_bars(place, settings=settings),
    }


def places_frame(places: Sequence[PlaceSeries]) -> pd.DataFrame:
    """Flat table of place summaries (one row per place), e.g. for CSV export."""
    columns = ["key", "name", "region", "max_value", "date_of_max", "days_since_max", "doubling_time"]
    rows = [
        {
            "key": p.key,
            "name": p.display_name,
            "region": p.place.parent_key,
            "max_value": p.max_value,
            "date_of_max": p.date_of_max,
            "days_since_max": p.days_since_max,
            "doubling_time": p.doubling_time,
        }
        for p in places
    ]
    df = pd.DataFrame(rows, columns=columns)
    df["max_value"] = df["max_value"].astype("Int64")
    return df


def compute_municipalities(
    query: QueryParameters,
    places: Sequence[PlaceSeries],
    *,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    settings = settings or DEFAULT_SETTINGS
    selected, truncated = select_places(places, query, cap=settings.display_cap)
    return {
        "filters": {**asdict(query), "sort_by": query.sort_by.value},
        "total": len(places),
        "places": [place_record(p, settings=settings) for p in selected],
        "truncated": truncated,
    }


def compute_regions(
    snapshots: Sequence[RegionsSnapshot],
    today: date,
    *,
    names: Optional[Mapping[str, str]] = None,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    settings = settings or DEFAULT_SETTINGS
    regions = build_region_series(snapshots, today, names=names, settings=settings)
    return {
        "regions": [{"key": r.key, "name": r.display_name} for r in list_regions(snapshots, names=names, settings=settings)],
        "series": [
            {
                **place_record(r, settings=settings),
                "points": [{"date": p.date.isoformat(), "value": p.value} for p in r.series],
            }
            for r in regions
        ],
    }


def compute_countries(
    country_series_raw: Mapping[str, Sequence[TimePoint]],
    display_set: CountriesDisplaySet,
    *,
    names: Optional[Mapping[str, str]] = None,
    threshold: float = 1,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """Comparison chart series for a display set, aligned on the first day reaching ``threshold``."""
    settings = settings or DEFAULT_SETTINGS
    codes = requested_countries(display_set)
    missing = [c for c in codes if c not in country_series_raw]
    if missing:
        logger.info("no comparison data for %s", ", ".join(missing))
    references = {code: reference_event(country_series_raw.get(code, ()), threshold) for code in codes}
    series = synthesize(
        country_series_raw,
        references,
        settings.smoothing_window,
        colors=assign_colors(codes),
        names=names,
        order=codes,
    )
    return {
        "display_set": display_set.label,
        "series": [
            {
                "country_code": s.country_code,
                "country_name": s.country_name,
                "color": s.color,
                "data": [[day, value] for day, value in s.data],
            }
            for s in series
            if s.data
        ],
    }


def compute_national(stats: Sequence[StatsDataPoint], *, settings: Optional[Settings] = None) -> Dict[str, Any]:
    settings = settings or DEFAULT_SETTINGS
    metrics = {
        "confirmed_today": lambda dp: dp.cases.confirmed_today,
        "performed_tests": lambda dp: dp.performed_tests,
        "positive_tests": lambda dp: dp.positive_tests,
        "in_hospital": lambda dp: dp.treatment.in_hospital,
        "deceased": lambda dp: dp.treatment.deceased,
    }
    return {
        name: [
            {"date": r.target.isoformat(), "value": r.average}
            for r in smoothed_series(stats, value_of, settings.smoothing_window)
        ]
        for name, value_of in metrics.items()
    }
