from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from trends.config import DEFAULT_SETTINGS
from trends.models import Place


ALL_REGIONS = "all"


class SortBy(str, Enum):
    BY_TOTAL = "total-positive-tests"
    BY_DOUBLING_TIME = "time-to-double"
    BY_RECENCY = "last-positive-test"


DEFAULT_SORT = SortBy.BY_RECENCY


@dataclass(frozen=True)
class QueryParameters:
    search_text: str = ""
    region: Optional[str] = None
    sort_by: SortBy = DEFAULT_SORT
    show_all: bool = False


def _as_str(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _region_keys(regions: Optional[Iterable[object]]) -> Optional[set]:
    if regions is None:
        return None
    return {(r.key if isinstance(r, Place) else str(r)).lower() for r in regions}


def parse_sort(value: object, *, show_exp_growth_features: bool = True) -> Optional[SortBy]:
    if isinstance(value, SortBy):
        sort_by = value
    else:
        try:
            sort_by = SortBy(_as_str(value).lower())
        except ValueError:
            return None
    if sort_by is SortBy.BY_DOUBLING_TIME and not show_exp_growth_features:
        return None
    return sort_by


def normalize_query(
    raw: dict,
    *,
    regions: Optional[Iterable[object]] = None,
    show_exp_growth_features: Optional[bool] = None,
) -> QueryParameters:
    """Build typed query parameters from an untyped request dict.

    Unknown regions fall back to all regions and unknown sort orders to the
    default; the region is resolved against ``regions`` once, here.
    """
    if show_exp_growth_features is None:
        show_exp_growth_features = DEFAULT_SETTINGS.show_exp_growth_features
    search_text = _as_str(raw.get("search") or raw.get("search_text"))

    region = _as_str(raw.get("region")).lower() or None
    if region == ALL_REGIONS:
        region = None
    known = _region_keys(regions)
    if region is not None and known is not None and region not in known:
        region = None

    sort_by = parse_sort(raw.get("sort") or raw.get("sort_by"), show_exp_growth_features=show_exp_growth_features)

    return QueryParameters(
        search_text=search_text,
        region=region,
        sort_by=sort_by or DEFAULT_SORT,
        show_all=_as_bool(raw.get("show_all", False)),
    )
