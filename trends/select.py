"""Search, region filter, ordering and truncation of place series."""

from __future__ import annotations

import unicodedata
from functools import cmp_to_key
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from trends.config import DEFAULT_SETTINGS
from trends.filters import ALL_REGIONS, QueryParameters, SortBy
from trends.models import PlaceSeries


def fold_diacritics(text: str) -> str:
    """Lower-case ``text`` and strip combining marks (``Škofja Loka`` -> ``skofja loka``)."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def matches_search(place: PlaceSeries, search_text: str) -> bool:
    needle = fold_diacritics(search_text.strip())
    if not needle:
        return True
    return needle in fold_diacritics(place.display_name)


def matches_region(place: PlaceSeries, region: Optional[str]) -> bool:
    if not region or region == ALL_REGIONS:
        return True
    return place.place.parent_key == region


# ---------------- Comparators ----------------
def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _cmp_names(p1: PlaceSeries, p2: PlaceSeries) -> int:
    n1, n2 = p1.place.name, p2.place.name
    if n1 is not None and n2 is not None:
        c = _cmp(n1, n2)
    elif n1 is None and n2 is None:
        c = 0
    else:
        c = -1 if n2 is None else 1
    return c or _cmp(p1.key, p2.key)


def compare_by_total(p1: PlaceSeries, p2: PlaceSeries) -> int:
    m1, m2 = p1.max_value, p2.max_value
    if m1 is not None and m2 is not None and m1 != m2:
        return -1 if m1 > m2 else 1
    if (m1 is None) != (m2 is None):
        return 1 if m1 is None else -1
    return _cmp_names(p1, p2)


def compare_by_doubling_time(p1: PlaceSeries, p2: PlaceSeries) -> int:
    d1, d2 = p1.doubling_time, p2.doubling_time
    if d1 is not None and d2 is not None and d1 != d2:
        return -1 if d1 < d2 else 1
    if (d1 is None) != (d2 is None):
        return 1 if d1 is None else -1
    return compare_by_total(p1, p2)


def compare_by_recency(p1: PlaceSeries, p2: PlaceSeries) -> int:
    if p1.date_of_max != p2.date_of_max:
        return -1 if p1.date_of_max > p2.date_of_max else 1
    return compare_by_total(p1, p2)


COMPARATORS: Dict[SortBy, Callable[[PlaceSeries, PlaceSeries], int]] = {
    SortBy.BY_TOTAL: compare_by_total,
    SortBy.BY_DOUBLING_TIME: compare_by_doubling_time,
    SortBy.BY_RECENCY: compare_by_recency,
}


def sort_places(places: Iterable[PlaceSeries], sort_by: SortBy) -> List[PlaceSeries]:
    return sorted(places, key=cmp_to_key(COMPARATORS[SortBy(sort_by)]))


def select_places(
    places: Iterable[PlaceSeries],
    query: QueryParameters,
    *,
    cap: Optional[int] = None,
) -> Tuple[Tuple[PlaceSeries, ...], bool]:
    """Filter, order and truncate ``places`` for display.

    The flag is ``True`` whenever more places match than ``cap``, also when
    ``query.show_all`` means all of them are returned.
    """
    cap = DEFAULT_SETTINGS.display_cap if cap is None else cap
    matched = [p for p in places if matches_search(p, query.search_text) and matches_region(p, query.region)]
    ordered = sort_places(matched, query.sort_by)

    more_than_cap = len(ordered) > cap
    if more_than_cap and not query.show_all:
        ordered = ordered[:cap]
    return tuple(ordered), more_than_cap
