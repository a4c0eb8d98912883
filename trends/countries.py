"""Country comparison: per-country series aligned on days since a reference event."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from trends.config import DEFAULT_SETTINGS
from trends.errors import InvalidConfiguration
from trends.models import CountrySeries, TimePoint
from trends.moving_average import Variant, moving_averages


logger = logging.getLogger(__name__)

HOME_COUNTRY = "SVN"

# cycled in request order, so the home country always gets the first color
DEFAULT_PALETTE: Tuple[str, ...] = (
    "#ffa600",
    "#dba51d",
    "#afa53f",
    "#70a471",
    "#10a6a9",
    "#0d98ba",
    "#2a7fb4",
    "#4c5d9a",
)


@dataclass(frozen=True)
class CountriesDisplaySet:
    label: str
    country_codes: Tuple[str, ...]


# country codes: https://unstats.un.org/unsd/tradekb/knowledgebase/country-code
COUNTRIES_DISPLAY_SETS: Tuple[CountriesDisplaySet, ...] = (
    CountriesDisplaySet(label="Nordic countries", country_codes=("DNK", "FIN", "ISL", "NOR", "SWE")),
    CountriesDisplaySet(label="Ex-Yugoslavia", country_codes=("BIH", "HRV", "MKD", "MNE", "RKS", "SRB")),
    CountriesDisplaySet(label="Neighbours", country_codes=("AUT", "HRV", "HUN", "ITA")),
)


def requested_countries(display_set: CountriesDisplaySet, *, home: str = HOME_COUNTRY) -> List[str]:
    """Country codes to fetch and plot: home country first, then the set in its own order."""
    return [home] + [c for c in display_set.country_codes if c != home]


def assign_colors(codes: Iterable[str], palette: Sequence[str] = DEFAULT_PALETTE) -> Dict[str, str]:
    if not palette:
        raise InvalidConfiguration("color palette is empty")
    out: Dict[str, str] = {}
    for code in codes:
        if code not in out:
            out[code] = palette[len(out) % len(palette)]
    return out


def reference_event(series: Sequence[TimePoint], threshold: float = 1) -> Optional[date]:
    """First date whose value reaches ``threshold`` (e.g. the first reported death)."""
    for point in sorted(series, key=lambda p: p.date):
        if point.value is not None and point.value >= threshold:
            return point.date
    return None


def relative_points(series: Sequence[TimePoint], reference: date) -> List[Tuple[int, Optional[float]]]:
    """(days since ``reference``, value) pairs; points before the reference are dropped."""
    out = []
    for point in sorted(series, key=lambda p: p.date):
        day_index = (point.date - reference).days
        if day_index >= 0:
            out.append((day_index, point.value))
    return out


def synthesize(
    country_series_raw: Mapping[str, Sequence[TimePoint]],
    reference_event_of: Union[Callable[[str], Optional[date]], Mapping[str, Optional[date]]],
    smoothing_window: Optional[int] = None,
    *,
    colors: Mapping[str, str],
    names: Optional[Mapping[str, str]] = None,
    order: Optional[Sequence[str]] = None,
) -> List[CountrySeries]:
    """Smoothed, aligned series per country in display order.

    Countries without a reference event, or with fewer points than the
    smoothing window, get an empty ``data`` tuple.
    """
    smoothing_window = DEFAULT_SETTINGS.smoothing_window if smoothing_window is None else smoothing_window
    if smoothing_window < 1:
        raise InvalidConfiguration(f"smoothing window must be positive, got {smoothing_window}")
    names = names or {}
    if isinstance(reference_event_of, Mapping):
        references = reference_event_of
        reference_event_of = references.get

    out: List[CountrySeries] = []
    for code in (order if order is not None else list(country_series_raw)):
        if code not in colors:
            raise InvalidConfiguration(f"no color assigned to country {code}")
        reference = reference_event_of(code)
        points = relative_points(country_series_raw.get(code, ()), reference) if reference is not None else []
        reported = [(day, value) for day, value in points if value is not None]

        data: Tuple[Tuple[int, float], ...] = ()
        if len(reported) >= smoothing_window:
            smoothed = moving_averages(
                Variant.TRAILING,
                smoothing_window,
                lambda item: item[0],
                lambda item: item[1],
                reported,
            )
            data = tuple((int(r.target), r.average) for r in smoothed)
        else:
            logger.debug("country %s has %d points, fewer than window %d", code, len(reported), smoothing_window)

        out.append(CountrySeries(country_code=code, country_name=names.get(code, code), color=colors[code], data=data))
    return out
