"""Tests for team row assembly, master-table search and demographic insights."""

from datetime import date

import pytest

from sales_brain.discovery.correlation_engine import pearson
from sales_brain.discovery.team_rows import (
    age_on,
    build_team_rows,
    demographic_insights,
    search_rows,
    tenure_months,
)

TODAY = date(2025, 6, 15)

PROFILES = [
    {"id": "u1", "full_name": "Ana Torres"},
    {"id": "u2", "full_name": "Luis Pena"},
]
GENDERS = [{"id": 1, "name": "Femenino"}, {"id": 2, "name": "Masculino"}]
EMPLOYEES = [
    {"user_id": "u1", "gender_id": 1, "birth_date": "1998-06-16", "start_date": "2024-01-10", "meetingsPerClose": 3.5},
    {"user_id": "u2", "gender_id": 2, "birth_date": "1985-02-01", "start_date": "2022-06-01"},
    {"user_id": "u3", "gender_id": 9},
]
RACES = [
    {"user_id": "u1", "period": "2025-05", "total_sales": 1200, "medal": "gold"},
    {"user_id": "u1", "period": "2025-04", "total_sales": 1000, "medal": "silver"},
    {"user_id": "u2", "period": "2025-05", "total_sales": "800", "medal": None},
]


def _rows():
    return build_team_rows(PROFILES, EMPLOYEES, GENDERS, RACES, today=TODAY)


class TestDates:
    def test_age_before_birthday(self):
        assert age_on("1998-06-16", TODAY) == 26

    def test_age_on_birthday(self):
        assert age_on("1998-06-15", TODAY) == 27

    def test_age_unknown(self):
        assert age_on(None, TODAY) is None
        assert age_on("not a date", TODAY) is None

    def test_tenure(self):
        assert tenure_months("2024-01-10", TODAY) == 17
        assert tenure_months(None, TODAY) == 0


class TestBuildTeamRows:
    def test_one_row_per_employee(self):
        rows = _rows()
        assert [r["userId"] for r in rows] == ["u1", "u2", "u3"]

    def test_aggregates(self):
        ana = _rows()[0]
        assert ana["name"] == "Ana Torres"
        assert ana["gender"] == "Femenino"
        assert ana["totalSales"] == 2200
        assert ana["medals"] == {"gold": 1, "silver": 1, "bronze": 0}
        assert ana["medalRatio"] == 1.0
        assert ana["lastRaceAmount"] == 1200
        assert ana["growth"] == pytest.approx(20.0)
        assert ana["meetingsPerClose"] == 3.5

    def test_single_period_has_no_growth(self):
        luis = _rows()[1]
        assert luis["growth"] == 0.0
        assert luis["totalSales"] == 800
        assert luis["medalRatio"] == 0.0

    def test_unknown_employee_defaults(self):
        ghost = _rows()[2]
        assert ghost["name"] == "Unknown"
        assert ghost["gender"] == "N/A"
        assert ghost["age"] is None
        assert ghost["tenureMonths"] == 0
        assert ghost["medalRatio"] is None
        assert ghost["lastRaceAmount"] == 0.0

    def test_reliability_merge(self):
        rows = build_team_rows(PROFILES, EMPLOYEES, GENDERS, RACES, today=TODAY, reliability={"u2": 61.5})
        assert "forecastAccuracy" not in rows[0]
        assert rows[1]["forecastAccuracy"] == 61.5

    def test_rows_feed_the_engine(self):
        pair = pearson(_rows(), "goldMedals", "totalSales")
        assert pair.n == 3

    def test_unusable_amount_counts_as_zero(self):
        races = [
            {"user_id": "u1", "period": "2025-05", "total_sales": 10 ** 400, "medal": None},
            {"user_id": "u1", "period": "2025-04", "total_sales": "n/a", "medal": None},
        ]
        ana = build_team_rows(PROFILES, EMPLOYEES, GENDERS, races, today=TODAY)[0]
        assert ana["totalSales"] == 0.0


class TestSearchRows:
    def test_by_name(self):
        assert [r["userId"] for r in search_rows(_rows(), "ana")] == ["u1"]

    def test_by_gender(self):
        assert [r["userId"] for r in search_rows(_rows(), "MASC")] == ["u2"]

    def test_empty_term(self):
        assert len(search_rows(_rows(), "")) == 3


class TestDemographicInsights:
    def test_values(self):
        rows = [
            {"gender": "Masculino", "tenureMonths": 10, "age": 25, "growth": 8.0},
            {"gender": "Masculino", "tenureMonths": 20, "age": 40, "growth": 2.0},
            {"gender": "Femenino", "tenureMonths": 30, "age": 28, "growth": 4.0},
            {"gender": "N/A", "tenureMonths": 6, "age": None, "growth": 50.0},
        ]
        tenure, growth = demographic_insights(rows)
        assert tenure.values == {"male": 15.0, "female": 30.0, "other": 6.0}
        assert growth.values == {"young": 6.0, "senior": 2.0}
        assert "15.0 months" in tenure.description

    def test_empty(self):
        assert demographic_insights([]) == []
