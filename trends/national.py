from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from trends.models import MovingAverageResult, StatsDataPoint, TimePoint
from trends.moving_average import Variant, moving_averages


StatsValueFunc = Callable[[StatsDataPoint], Optional[float]]


def daily_series(stats: Sequence[StatsDataPoint], value_of: StatsValueFunc) -> List[TimePoint]:
    return [TimePoint(date=dp.date, value=value_of(dp)) for dp in sorted(stats, key=lambda dp: dp.date)]


def smoothed_series(
    stats: Sequence[StatsDataPoint],
    value_of: StatsValueFunc,
    window: int,
    variant: Variant = Variant.CENTERED,
) -> List[MovingAverageResult]:
    """Moving average of one national statistic; windows with nothing reported are skipped."""
    points = [p for p in daily_series(stats, value_of) if p.value is not None]
    return moving_averages(variant, window, lambda p: p.date, lambda p: p.value, points)
