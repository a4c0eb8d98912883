"""Municipality and region roll-up of daily regions snapshots."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from trends.config import DEFAULT_SETTINGS, Settings
from trends.doubling_time import estimate_doubling_time
from trends.errors import MalformedUpstreamData
from trends.models import Place, PlaceSeries, RegionsSnapshot, TimePoint


logger = logging.getLogger(__name__)


def _check_chronological(snapshots: Sequence[RegionsSnapshot]) -> List[RegionsSnapshot]:
    ordered = sorted(snapshots, key=lambda s: s.date)
    for prev, cur in zip(ordered, ordered[1:]):
        if prev.date == cur.date:
            raise MalformedUpstreamData(f"duplicate regions snapshot for {cur.date.isoformat()}")
    return ordered


def summarize(
    place: Place,
    series: Sequence[TimePoint],
    today: date,
    *,
    settings: Optional[Settings] = None,
) -> PlaceSeries:
    """Attach max value, date of max, days since max and doubling time to a place series."""
    settings = settings or DEFAULT_SETTINGS
    points = tuple(series)
    if not points:
        raise MalformedUpstreamData(f"place {place.key} has no observations")

    reported = [p.value for p in points if p.value is not None]
    max_value = max(reported) if reported else None

    date_of_max = points[-1].date
    if max_value is not None:
        # last date reaching the max, so a plateau reports its most recent day
        date_of_max = next(p.date for p in reversed(points) if p.value == max_value)

    return PlaceSeries(
        place=place,
        series=points,
        max_value=max_value,
        date_of_max=date_of_max,
        days_since_max=max(0, (today - date_of_max).days),
        doubling_time=estimate_doubling_time(points, settings.doubling_window),
    )


def build_place_series(
    snapshots: Sequence[RegionsSnapshot],
    today: date,
    *,
    names: Optional[Mapping[str, str]] = None,
    settings: Optional[Settings] = None,
) -> Tuple[PlaceSeries, ...]:
    """One ``PlaceSeries`` per municipality across all snapshots.

    Municipality keys are global; the parent region is the one the
    municipality was listed under in its most recent snapshot.
    """
    settings = settings or DEFAULT_SETTINGS
    names = names or {}

    series_by_key: Dict[str, List[TimePoint]] = {}
    region_by_key: Dict[str, str] = {}
    dropped = 0
    for snapshot in _check_chronological(snapshots):
        seen_today = set()
        for region in snapshot.regions:
            for municipality in region.municipalities:
                key = municipality.key
                if key in settings.excluded_municipalities:
                    dropped += 1
                    continue
                if key in seen_today:
                    raise MalformedUpstreamData(
                        f"municipality {key} listed more than once on {snapshot.date.isoformat()}"
                    )
                seen_today.add(key)
                series_by_key.setdefault(key, []).append(TimePoint(date=snapshot.date, value=municipality.confirmed_to_date))
                region_by_key[key] = region.key

    if dropped:
        logger.debug("dropped %d placeholder municipality observations", dropped)

    return tuple(
        summarize(
            Place(key=key, name=names.get(key), parent_key=region_by_key[key]),
            series_by_key[key],
            today,
            settings=settings,
        )
        for key in sorted(series_by_key)
    )


def regions_frame(snapshots: Sequence[RegionsSnapshot], *, settings: Optional[Settings] = None) -> pd.DataFrame:
    """Long frame of (date, region, municipality, confirmed) rows, placeholders removed.

    A municipality may appear under one region per date only; otherwise its
    count would be added to more than one region total.
    """
    settings = settings or DEFAULT_SETTINGS
    rows = [
        {
            "date": snapshot.date,
            "region": region.key,
            "municipality": municipality.key,
            "confirmed": municipality.confirmed_to_date,
        }
        for snapshot in _check_chronological(snapshots)
        for region in snapshot.regions
        for municipality in region.municipalities
        if municipality.key not in settings.excluded_municipalities
    ]
    df = pd.DataFrame(rows, columns=["date", "region", "municipality", "confirmed"])

    dupes = df[df.duplicated(["date", "municipality"], keep=False)]
    if not dupes.empty:
        first = dupes.iloc[0]
        raise MalformedUpstreamData(
            f"municipality {first['municipality']} listed more than once on {first['date'].isoformat()}"
        )

    df = df[~df["region"].isin(list(settings.excluded_regions))].copy()
    df["confirmed"] = pd.to_numeric(df["confirmed"], errors="coerce")
    return df


def build_region_series(
    snapshots: Sequence[RegionsSnapshot],
    today: date,
    *,
    names: Optional[Mapping[str, str]] = None,
    settings: Optional[Settings] = None,
) -> Tuple[PlaceSeries, ...]:
    """Per-region totals: municipality counts summed per date.

    A date on which none of a region's municipalities reported a count is
    missing (``None``), not zero.
    """
    settings = settings or DEFAULT_SETTINGS
    names = names or {}
    ordered = _check_chronological(snapshots)
    df = regions_frame(ordered, settings=settings)

    # every region listed on a date gets a row for that date, even with no municipalities
    listed = pd.DataFrame(
        [
            {"date": s.date, "region": r.key}
            for s in ordered
            for r in s.regions
            if r.key not in settings.excluded_regions
        ],
        columns=["date", "region"],
    )
    if listed.empty:
        return ()

    totals = df.groupby(["region", "date"])["confirmed"].sum(min_count=1).reset_index()
    totals = listed.drop_duplicates().merge(totals, on=["region", "date"], how="left")
    totals = totals.sort_values(["region", "date"], kind="mergesort")

    out: List[PlaceSeries] = []
    for region_key, group in totals.groupby("region", sort=True):
        series = [
            TimePoint(date=d, value=(int(v) if pd.notna(v) else None))
            for d, v in zip(group["date"], group["confirmed"])
        ]
        out.append(summarize(Place(key=str(region_key), name=names.get(str(region_key))), series, today, settings=settings))
    return tuple(out)


def list_regions(
    snapshots: Sequence[RegionsSnapshot],
    *,
    names: Optional[Mapping[str, str]] = None,
    settings: Optional[Settings] = None,
) -> List[Place]:
    """Regions of the latest snapshot, placeholders removed, sorted by display name."""
    settings = settings or DEFAULT_SETTINGS
    names = names or {}
    if not snapshots:
        return []
    latest = max(snapshots, key=lambda s: s.date)
    regions = [
        Place(key=r.key, name=names.get(r.key))
        for r in latest.regions
        if r.key not in settings.excluded_regions
    ]
    return sorted(regions, key=lambda p: (p.display_name, p.key))


def place_bars(place: PlaceSeries, *, settings: Optional[Settings] = None) -> List[Dict[str, object]]:
    """Most recent bars of a place, heights scaled so the max reaches ``bar_max_height``."""
    settings = settings or DEFAULT_SETTINGS
    if place.max_value is None:
        return []
    recent = place.series[-settings.show_max_bars:] if settings.show_max_bars > 0 else ()
    bars: List[Dict[str, object]] = []
    for point in recent:
        height = None
        if point.value is not None and place.max_value > 0:
            height = point.value * settings.bar_max_height // place.max_value
        elif point.value is not None:
            height = 0
        bars.append({"date": point.date.isoformat(), "value": point.value, "height": height})
    return bars
