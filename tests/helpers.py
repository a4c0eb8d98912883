from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Optional

from trends.models import MunicipalitySnapshot, Place, PlaceSeries, RegionSnapshot, RegionsSnapshot, TimePoint


START = date(2020, 3, 10)


def day(n: int) -> date:
    return START + timedelta(days=n)


def snapshot(n: int, regions: Dict[str, Dict[str, Optional[int]]]) -> RegionsSnapshot:
    return RegionsSnapshot(
        date=day(n),
        regions=tuple(
            RegionSnapshot(
                key=region_key,
                municipalities=tuple(MunicipalitySnapshot(key=k, confirmed_to_date=v) for k, v in cities.items()),
            )
            for region_key, cities in regions.items()
        ),
    )


def points(values: List[Optional[int]], start: int = 0) -> List[TimePoint]:
    return [TimePoint(date=day(start + i), value=v) for i, v in enumerate(values)]


def place(
    key: str,
    *,
    name: Optional[str] = None,
    region: Optional[str] = "lj",
    max_value: Optional[int] = None,
    date_of_max: Optional[date] = None,
    doubling_time: Optional[float] = None,
) -> PlaceSeries:
    return PlaceSeries(
        place=Place(key=key, name=name, parent_key=region),
        series=(),
        max_value=max_value,
        date_of_max=date_of_max or START,
        days_since_max=0,
        doubling_time=doubling_time,
    )
