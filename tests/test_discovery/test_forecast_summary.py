"""Tests for forecast summary payload validation."""

import pytest
from pydantic import ValidationError

from sales_brain.discovery.forecast_summary import parse_forecast_summary


def _payload(**overrides):
    payload = {
        "meetingsToCloseForecast": {
            "averageMeetings": 3.4, "p25": 2, "p75": 5,
            "sampleSize": 42, "confidence": "medium", "insufficientSample": False,
        },
        "postponementForecast": {
            "globalProbability": 0.18, "rescheduledMeetings": 9, "sampleSize": 50,
            "confidence": "low",
            "topFactors": [{"label": "Size 5", "lift": 1.4, "probability": 0.25, "sampleSize": 12}],
            "insufficientSample": False,
        },
        "projectsForecast": {
            "avgProjectsPerNewCompany": 1.2,
            "distribution": {"p0": 0.3, "p1": 0.5, "p2plus": 0.2},
            "bySize": [{"size": 3, "avg": 1.1}],
            "byIndustry": [],
            "sampleSizeCompanies": 18,
            "confidence": "low",
            "insufficientSample": True,
        },
        "options": {"sizes": [1, 2, 3, 4, 5], "industries": ["Retail"], "locations": []},
    }
    payload.update(overrides)
    return payload


class TestParseForecastSummary:
    def test_parses_camel_case(self):
        summary = parse_forecast_summary(_payload())
        assert summary.meetings_to_close_forecast.average_meetings == 3.4
        assert summary.postponement_forecast.top_factors[0].lift == 1.4
        assert summary.projects_forecast.distribution.p2plus == 0.2
        assert summary.options.sizes == [1, 2, 3, 4, 5]

    def test_any_insufficient(self):
        assert parse_forecast_summary(_payload()).any_insufficient is True

    def test_round_trip_aliases(self):
        dumped = parse_forecast_summary(_payload()).model_dump(by_alias=True)
        assert dumped["projectsForecast"]["sampleSizeCompanies"] == 18

    def test_missing_section(self):
        payload = _payload()
        del payload["postponementForecast"]
        with pytest.raises(ValidationError):
            parse_forecast_summary(payload)

    def test_options_optional(self):
        payload = _payload()
        del payload["options"]
        assert parse_forecast_summary(payload).options.industries == []
