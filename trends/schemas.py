from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from trends.errors import MalformedUpstreamData
from trends.models import (
    AgeGroup,
    Cases,
    MunicipalitySnapshot,
    RegionSnapshot,
    RegionsSnapshot,
    StatsDataPoint,
    TimePoint,
    TreatmentState,
)


# ---------------- Regions ----------------
class RegionsDataPointModel(BaseModel):
    # strict: a string or a nested object where a count belongs is a shape error, not a coercion
    model_config = ConfigDict(strict=True)

    year: int
    month: int
    day: int
    regions: Dict[str, Dict[str, Optional[float]]]

    @field_validator("regions")
    @classmethod
    def _whole_counts(cls, regions: Dict[str, Dict[str, Optional[float]]]) -> Dict[str, Dict[str, Optional[float]]]:
        for region_key, cities in regions.items():
            for city_key, value in cities.items():
                if value is not None and not float(value).is_integer():
                    raise ValueError(f"{region_key}.{city_key}: count must be a whole number, got {value}")
        return regions

    def to_domain(self) -> RegionsSnapshot:
        regions = tuple(
            RegionSnapshot(
                key=region_key,
                municipalities=tuple(
                    MunicipalitySnapshot(key=city_key, confirmed_to_date=(int(value) if value is not None else None))
                    for city_key, value in cities.items()
                ),
            )
            for region_key, cities in self.regions.items()
        )
        return RegionsSnapshot(date=date(self.year, self.month, self.day), regions=regions)


# ---------------- National stats ----------------
class AgeGroupModel(BaseModel):
    ageFrom: Optional[int] = None
    ageTo: Optional[int] = None
    allToDate: Optional[int] = None
    femaleToDate: Optional[int] = None
    maleToDate: Optional[int] = None

    def to_domain(self) -> AgeGroup:
        return AgeGroup(
            age_from=self.ageFrom,
            age_to=self.ageTo,
            all=self.allToDate,
            male=self.maleToDate,
            female=self.femaleToDate,
        )


class CasesModel(BaseModel):
    confirmedToday: Optional[int] = None
    confirmedToDate: Optional[int] = None
    closedToDate: Optional[int] = None
    activeToDate: Optional[int] = None


class TreatmentModel(BaseModel):
    inHospital: Optional[int] = None
    inHospitalToDate: Optional[int] = None
    inICU: Optional[int] = None
    critical: Optional[int] = None
    deceasedToDate: Optional[int] = None
    deceased: Optional[int] = None
    outOfHospitalToDate: Optional[int] = None
    outOfHospital: Optional[int] = None
    recoveredToDate: Optional[int] = None


class StatsDataPointModel(BaseModel):
    dayFromStart: int
    year: int
    month: int
    day: int
    phase: str = ""
    performedTestsToDate: Optional[int] = None
    performedTests: Optional[int] = None
    positiveTestsToDate: Optional[int] = None
    positiveTests: Optional[int] = None
    cases: CasesModel = Field(default_factory=CasesModel)
    statePerTreatment: TreatmentModel = Field(default_factory=TreatmentModel)
    statePerAgeToDate: List[AgeGroupModel] = Field(default_factory=list)

    def to_domain(self) -> StatsDataPoint:
        c = self.cases
        t = self.statePerTreatment
        return StatsDataPoint(
            day_from_start=self.dayFromStart,
            date=date(self.year, self.month, self.day),
            phase=self.phase,
            performed_tests=self.performedTests,
            performed_tests_to_date=self.performedTestsToDate,
            positive_tests=self.positiveTests,
            positive_tests_to_date=self.positiveTestsToDate,
            cases=Cases(
                confirmed_today=c.confirmedToday,
                confirmed_to_date=c.confirmedToDate,
                closed_to_date=c.closedToDate,
                active_to_date=c.activeToDate,
            ),
            treatment=TreatmentState(
                in_hospital=t.inHospital,
                in_hospital_to_date=t.inHospitalToDate,
                in_icu=t.inICU,
                critical=t.critical,
                deceased_to_date=t.deceasedToDate,
                deceased=t.deceased,
                out_of_hospital_to_date=t.outOfHospitalToDate,
                out_of_hospital=t.outOfHospital,
                recovered_to_date=t.recoveredToDate,
            ),
            age_groups=tuple(g.to_domain() for g in self.statePerAgeToDate),
        )


# ---------------- Country comparison ----------------
class CountryPointModel(BaseModel):
    day: date = Field(alias="date")
    value: Optional[float] = None


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def _expect_list(payload: Any, what: str) -> List[Any]:
    if not isinstance(payload, list):
        raise MalformedUpstreamData(f"unexpected {what} format: expected a list, got {type(payload).__name__}")
    return payload


def parse_regions_data(payload: Any) -> List[RegionsSnapshot]:
    """Validate decoded regions JSON and convert it into snapshots ordered by date."""
    out: List[RegionsSnapshot] = []
    for idx, item in enumerate(_expect_list(payload, "regions data")):
        try:
            model = RegionsDataPointModel.model_validate(item)
        except ValidationError as exc:
            raise MalformedUpstreamData(f"unexpected regions data format at item {idx}: {_describe(exc)}") from exc
        try:
            out.append(model.to_domain())
        except ValueError as exc:
            raise MalformedUpstreamData(f"invalid date in regions data at item {idx}: {exc}") from exc
    return sorted(out, key=lambda s: s.date)


def parse_stats_data(payload: Any) -> List[StatsDataPoint]:
    out: List[StatsDataPoint] = []
    for idx, item in enumerate(_expect_list(payload, "stats data")):
        try:
            model = StatsDataPointModel.model_validate(item)
        except ValidationError as exc:
            raise MalformedUpstreamData(f"unexpected stats data format at item {idx}: {_describe(exc)}") from exc
        try:
            out.append(model.to_domain())
        except ValueError as exc:
            raise MalformedUpstreamData(f"invalid date in stats data at item {idx}: {exc}") from exc
    return out


def parse_country_series(payload: Any) -> Dict[str, List[TimePoint]]:
    """``{"SVN": [{"date": "2020-03-01", "value": 1}, ...], ...}`` -> time points per country code."""
    if not isinstance(payload, dict):
        raise MalformedUpstreamData(f"unexpected country data format: expected an object, got {type(payload).__name__}")
    out: Dict[str, List[TimePoint]] = {}
    for code, points in payload.items():
        series: List[TimePoint] = []
        for idx, item in enumerate(_expect_list(points, f"series for {code}")):
            try:
                model = CountryPointModel.model_validate(item)
            except ValidationError as exc:
                raise MalformedUpstreamData(f"unexpected data for country {code} at item {idx}: {_describe(exc)}") from exc
            series.append(TimePoint(date=model.day, value=model.value))
        out[str(code)] = sorted(series, key=lambda p: p.date)
    return out
