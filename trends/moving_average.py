"""Windowed averaging over any keyed series.

The engine knows nothing about dates or counts: callers pass ``key_of`` and
``value_of`` to pull the target key and the numeric value out of each item,
so the same code smooths national statistics, place series and the
re-indexed country series.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, TypeVar

import numpy as np

from trends.errors import InsufficientData, InvalidConfiguration
from trends.models import MovingAverageResult


T = TypeVar("T")

KeyFunc = Callable[[T], Any]
ValueFunc = Callable[[T], Optional[float]]
AverageFunc = Callable[[KeyFunc, ValueFunc, Sequence[T]], MovingAverageResult]


class Variant(str, Enum):
    CENTERED = "centered"
    TRAILING = "trailing"


def _window_mean(value_of: ValueFunc, window: Sequence[T]) -> float:
    values = [v for v in (value_of(item) for item in window) if v is not None]
    if not values:
        raise InsufficientData("moving average window contains only missing values")
    return float(np.mean(np.asarray(values, dtype=float)))


def moving_average_centered(key_of: KeyFunc, value_of: ValueFunc, window: Sequence[T]) -> MovingAverageResult:
    """Average of ``window`` reported at its middle element.

    The window length must be odd, otherwise there is no middle element.
    """
    if len(window) % 2 != 1:
        raise InvalidConfiguration("values array length needs to be an odd number")
    target = key_of(window[len(window) // 2])
    return MovingAverageResult(target=target, average=_window_mean(value_of, window))


def moving_average_trailing(key_of: KeyFunc, value_of: ValueFunc, window: Sequence[T]) -> MovingAverageResult:
    """Average of ``window`` reported at its last element."""
    if not window:
        raise InsufficientData("moving average window is empty")
    target = key_of(window[-1])
    return MovingAverageResult(target=target, average=_window_mean(value_of, window))


AVERAGE_FUNCS = {
    Variant.CENTERED: moving_average_centered,
    Variant.TRAILING: moving_average_trailing,
}


def moving_averages(
    variant: Variant,
    window_size: int,
    key_of: KeyFunc,
    value_of: ValueFunc,
    series: Sequence[T],
) -> List[MovingAverageResult]:
    """Slide a window of ``window_size`` over ``series`` one element at a time.

    Returns ``len(series) - window_size + 1`` results, or an empty list when
    the series is shorter than the window.
    """
    try:
        variant = Variant(variant)
    except ValueError as exc:
        raise InvalidConfiguration(f"unknown moving average variant {variant!r}") from exc
    if window_size < 1:
        raise InvalidConfiguration(f"window size must be positive, got {window_size}")
    if variant is Variant.CENTERED and window_size % 2 == 0:
        raise InvalidConfiguration(f"centered moving average needs an odd window size, got {window_size}")

    average_func: AverageFunc = AVERAGE_FUNCS[variant]
    items = list(series)
    return [
        average_func(key_of, value_of, items[start:start + window_size])
        for start in range(len(items) - window_size + 1)
    ]
