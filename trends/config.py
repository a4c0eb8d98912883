from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet


EXCLUDED_MUNICIPALITIES: FrozenSet[str] = frozenset({"kraj", "tujina"})
EXCLUDED_REGIONS: FrozenSet[str] = frozenset({"t", "n"})


@dataclass(frozen=True)
class Settings:
    display_cap: int = 24
    doubling_window: int = 7
    smoothing_window: int = 5
    bar_max_height: int = 50
    show_max_bars: int = 30
    show_exp_growth_features: bool = True
    excluded_municipalities: FrozenSet[str] = EXCLUDED_MUNICIPALITIES
    excluded_regions: FrozenSet[str] = EXCLUDED_REGIONS


DEFAULT_SETTINGS = Settings()
