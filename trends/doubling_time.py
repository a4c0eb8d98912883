from __future__ import annotations

import math
from typing import List, Optional, Sequence

import numpy as np

from trends.config import DEFAULT_SETTINGS
from trends.models import TimePoint


def usable_points(series: Sequence[TimePoint], window: int) -> List[TimePoint]:
    """Most recent ``window`` reported points, minus counts a log cannot take."""
    # sorted() is stable, so equal dates keep their ingestion order
    reported = sorted((p for p in series if p.value is not None), key=lambda p: p.date)
    recent = reported[-window:] if window > 0 else []
    return [p for p in recent if p.value > 0]


def estimate_doubling_time(series: Sequence[TimePoint], window: Optional[int] = None) -> Optional[float]:
    """Days until the count doubles at the recent exponential growth rate.

    Fits ``ln(count)`` against elapsed days by least squares over the most
    recent points and returns ``ln(2) / slope``. Returns ``None`` when there
    are fewer than two usable points or the series is not growing.
    """
    window = DEFAULT_SETTINGS.doubling_window if window is None else window
    points = usable_points(series, window)
    if len(points) < 2:
        return None

    origin = points[0].date
    x = np.array([(p.date - origin).days for p in points], dtype=float)
    y = np.log(np.array([p.value for p in points], dtype=float))

    dx = x - x.mean()
    spread = float(np.dot(dx, dx))
    if spread == 0.0:
        return None
    slope = float(np.dot(dx, y - y[0])) / spread
    if slope <= 0.0:
        return None
    return math.log(2) / slope
