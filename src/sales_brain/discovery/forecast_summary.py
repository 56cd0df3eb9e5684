"""Forecast summary — read-only shape of the external forecasting output.

The forecast itself is computed elsewhere; these models only validate the
payload so it can be passed through to the presentation layer alongside the
correlation results.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class _CamelModel(BaseModel):
    model_config = {"populate_by_name": True, "frozen": True}


class MeetingsToCloseForecast(_CamelModel):
    average_meetings: Optional[float] = Field(None, alias="averageMeetings")
    p25: Optional[float] = None
    p75: Optional[float] = None
    sample_size: int = Field(0, alias="sampleSize")
    confidence: Optional[str] = None
    insufficient_sample: bool = Field(False, alias="insufficientSample")


class PostponementFactor(_CamelModel):
    label: str
    lift: Optional[float] = None
    probability: Optional[float] = None
    sample_size: Optional[int] = Field(None, alias="sampleSize")


class PostponementForecast(_CamelModel):
    global_probability: Optional[float] = Field(None, alias="globalProbability")
    rescheduled_meetings: int = Field(0, alias="rescheduledMeetings")
    sample_size: int = Field(0, alias="sampleSize")
    confidence: Optional[str] = None
    top_factors: list[PostponementFactor] = Field(default_factory=list, alias="topFactors")
    insufficient_sample: bool = Field(False, alias="insufficientSample")


class ProjectsDistribution(_CamelModel):
    p0: float = 0.0
    p1: float = 0.0
    p2plus: float = 0.0


class ProjectsForecast(_CamelModel):
    avg_projects_per_new_company: Optional[float] = Field(None, alias="avgProjectsPerNewCompany")
    distribution: ProjectsDistribution = Field(default_factory=ProjectsDistribution)
    by_size: list[dict[str, Any]] = Field(default_factory=list, alias="bySize")
    by_industry: list[dict[str, Any]] = Field(default_factory=list, alias="byIndustry")
    sample_size_companies: int = Field(0, alias="sampleSizeCompanies")
    confidence: Optional[str] = None
    insufficient_sample: bool = Field(False, alias="insufficientSample")


class ForecastOptions(_CamelModel):
    sizes: list[Any] = Field(default_factory=list)
    industries: list[Any] = Field(default_factory=list)
    locations: list[Any] = Field(default_factory=list)


class ForecastSummary(_CamelModel):
    meetings_to_close_forecast: MeetingsToCloseForecast = Field(alias="meetingsToCloseForecast")
    postponement_forecast: PostponementForecast = Field(alias="postponementForecast")
    projects_forecast: ProjectsForecast = Field(alias="projectsForecast")
    options: ForecastOptions = Field(default_factory=ForecastOptions)

    @property
    def any_insufficient(self) -> bool:
        """True when any forecast section was computed on too small a sample."""
        return (
            self.meetings_to_close_forecast.insufficient_sample
            or self.postponement_forecast.insufficient_sample
            or self.projects_forecast.insufficient_sample
        )


def parse_forecast_summary(payload: dict) -> ForecastSummary:
    """Validate a forecast payload; raises pydantic.ValidationError when malformed."""
    return ForecastSummary.model_validate(payload)
