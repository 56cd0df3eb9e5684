"""Tests for settings defaults and environment overrides."""

from config.settings import Settings
from sales_brain.discovery.correlation_engine import MIN_RANK_SAMPLE
from sales_brain.discovery.forecast_reliability import DEFAULT_WIN_RATE, MIN_RELIABLE_LEADS
from sales_brain.discovery.recommendation_engine import IMPORTANT_LIMIT, IMPORTANT_MIN_ABS_R
from sales_brain.discovery.team_rows import YOUNG_SELLER_AGE


class TestDefaults:
    def test_match_library_constants(self):
        s = Settings(_env_file=None)
        assert s.team_min_sample == MIN_RANK_SAMPLE["team"]
        assert s.individual_min_sample == MIN_RANK_SAMPLE["individual"]
        assert s.important_limit == IMPORTANT_LIMIT
        assert s.important_min_abs_r == IMPORTANT_MIN_ABS_R
        assert s.reliability_min_leads == MIN_RELIABLE_LEADS
        assert s.reliability_default_win_rate == DEFAULT_WIN_RATE
        assert s.young_seller_age == YOUNG_SELLER_AGE

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("TEAM_MIN_SAMPLE", "6")
        monkeypatch.setenv("RELIABILITY_MIN_LEADS", "5")
        s = Settings(_env_file=None)
        assert s.team_min_sample == 6
        assert s.reliability_min_leads == 5
        assert s.individual_min_sample == MIN_RANK_SAMPLE["individual"]
