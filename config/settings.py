"""Application settings loaded from environment variables.

Defaults come from the analytics modules' own constants, so the library
and the API agree unless the environment overrides a value.
"""

from pydantic_settings import BaseSettings

from sales_brain.discovery.correlation_engine import MIN_RANK_SAMPLE
from sales_brain.discovery.forecast_reliability import DEFAULT_WIN_RATE, MIN_RELIABLE_LEADS
from sales_brain.discovery.metric_registry import INDIVIDUAL, TEAM
from sales_brain.discovery.recommendation_engine import IMPORTANT_LIMIT, IMPORTANT_MIN_ABS_R
from sales_brain.discovery.team_rows import YOUNG_SELLER_AGE


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Ranking — minimum paired sample per scope
    team_min_sample: int = MIN_RANK_SAMPLE[TEAM]
    individual_min_sample: int = MIN_RANK_SAMPLE[INDIVIDUAL]  # lead rows are noisier per row

    # Important correlations summary
    important_limit: int = IMPORTANT_LIMIT
    important_min_abs_r: float = IMPORTANT_MIN_ABS_R

    # Forecast reliability
    reliability_min_leads: int = MIN_RELIABLE_LEADS
    reliability_default_win_rate: float = DEFAULT_WIN_RATE  # used when no lead is closed yet

    # Demographic insights
    young_seller_age: int = YOUNG_SELLER_AGE

    # API
    cors_origins: str = "*"  # comma-separated; lock down in production

    # Logging
    log_level: str = "INFO"


settings = Settings()
