"""Typed records shared by the aggregation, selection and synthesis steps.

Every record is frozen: a data refresh or a query change produces new values,
nothing is edited in place. Counts are ``Optional`` throughout; ``None`` means
"not reported" and is never folded into ``0``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Generic, Optional, Tuple, TypeVar, Union


V = TypeVar("V")


@dataclass(frozen=True)
class TimePoint(Generic[V]):
    date: date
    value: V


@dataclass(frozen=True)
class MovingAverageResult:
    target: Union[date, int]
    average: float


@dataclass(frozen=True)
class Place:
    key: str
    name: Optional[str] = None
    parent_key: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name if self.name is not None else self.key


@dataclass(frozen=True)
class PlaceSeries:
    place: Place
    series: Tuple[TimePoint, ...]
    max_value: Optional[int]
    date_of_max: date
    days_since_max: int
    doubling_time: Optional[float]

    @property
    def key(self) -> str:
        return self.place.key

    @property
    def display_name(self) -> str:
        return self.place.display_name


@dataclass(frozen=True)
class CountrySeries:
    country_code: str
    country_name: str
    color: str
    data: Tuple[Tuple[int, float], ...] = ()


# ---------------- Upstream snapshots ----------------
@dataclass(frozen=True)
class MunicipalitySnapshot:
    key: str
    confirmed_to_date: Optional[int]


@dataclass(frozen=True)
class RegionSnapshot:
    key: str
    municipalities: Tuple[MunicipalitySnapshot, ...] = ()


@dataclass(frozen=True)
class RegionsSnapshot:
    date: date
    regions: Tuple[RegionSnapshot, ...] = ()


# ---------------- National statistics ----------------
@dataclass(frozen=True)
class AgeGroup:
    age_from: Optional[int] = None
    age_to: Optional[int] = None
    all: Optional[int] = None
    male: Optional[int] = None
    female: Optional[int] = None


@dataclass(frozen=True)
class Cases:
    confirmed_today: Optional[int] = None
    confirmed_to_date: Optional[int] = None
    closed_to_date: Optional[int] = None
    active_to_date: Optional[int] = None


@dataclass(frozen=True)
class TreatmentState:
    in_hospital: Optional[int] = None
    in_hospital_to_date: Optional[int] = None
    in_icu: Optional[int] = None
    critical: Optional[int] = None
    deceased_to_date: Optional[int] = None
    deceased: Optional[int] = None
    out_of_hospital_to_date: Optional[int] = None
    out_of_hospital: Optional[int] = None
    recovered_to_date: Optional[int] = None


@dataclass(frozen=True)
class StatsDataPoint:
    day_from_start: int
    date: date
    phase: str = ""
    performed_tests: Optional[int] = None
    performed_tests_to_date: Optional[int] = None
    positive_tests: Optional[int] = None
    positive_tests_to_date: Optional[int] = None
    cases: Cases = field(default_factory=Cases)
    treatment: TreatmentState = field(default_factory=TreatmentState)
    age_groups: Tuple[AgeGroup, ...] = ()
