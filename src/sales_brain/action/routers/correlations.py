"""Correlations router — HTTP surface over the correlation insights engine.

Rows are supplied by the caller in the request body; nothing is fetched or
stored here.

- GET  /correlations/metrics — metric catalog grouped by category
- GET  /correlations/presets — quick presets
- POST /correlations/rank — ranked pairs (+ explorer filter) for one row set
- POST /correlations/view — full view for a selection
- POST /correlations/scatter — scatter points for one pair
- POST /correlations/team-rows — build team rows from raw records (optional search)
- POST /correlations/reliability — per-seller forecast reliability
- POST /correlations/forecast-summary — validate a forecast payload
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from config.settings import settings
from sales_brain.discovery.correlation_engine import (
    correlation_summary,
    filter_pairs,
    rank_all,
)
from sales_brain.discovery.forecast_reliability import (
    reliability_by_seller,
    seller_reliability,
)
from sales_brain.discovery.forecast_summary import ForecastSummary
from sales_brain.discovery.insights_view import build_insights_view
from sales_brain.discovery.metric_registry import (
    QUICK_PRESETS,
    TEAM,
    MetricDefinition,
    catalog_by_group,
)
from sales_brain.discovery.scatter_projector import project
from sales_brain.discovery.scope_router import (
    MetricSelection,
    apply_preset,
    change_scope,
)
from sales_brain.discovery.team_rows import build_team_rows, demographic_insights, search_rows

logger = logging.getLogger(__name__)

router = APIRouter(tags=["correlations"])


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RankRequest(BaseModel):
    scope: str = TEAM
    rows: list[dict[str, Any]]
    min_sample: Optional[int] = None
    strength: str = "all"
    direction: str = "all"


class ViewRequest(BaseModel):
    team_rows: list[dict[str, Any]] = []
    lead_rows: list[dict[str, Any]] = []
    scope: str = TEAM
    metric_x: str = "tenureMonths"
    metric_y: str = "totalSales"
    owner_id: Optional[str] = None
    preset_id: Optional[str] = None
    strength: str = "all"
    direction: str = "all"


class ScatterRequest(BaseModel):
    rows: list[dict[str, Any]]
    metric_x: str
    metric_y: str
    category_key: str = "gender"


class TeamRowsRequest(BaseModel):
    profiles: list[dict[str, Any]] = []
    employee_profiles: list[dict[str, Any]] = []
    genders: list[dict[str, Any]] = []
    race_results: list[dict[str, Any]] = []
    leads: Optional[list[dict[str, Any]]] = None  # for forecastAccuracy
    today: Optional[date] = None
    search: Optional[str] = None  # master-table filter on name or gender


class ReliabilityRequest(BaseModel):
    leads: list[dict[str, Any]]
    owner: Optional[str] = None
    days: Optional[int] = None


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _metric_dict(m: MetricDefinition) -> dict:
    return {
        "key": m.key,
        "label": m.label,
        "group": m.group,
        "scopes": sorted(m.scopes),
        "higher_is_better": m.higher_is_better,
    }


def _catalog(scope: Optional[str] = None) -> dict[str, list[dict]]:
    return {
        group: [_metric_dict(m) for m in metrics]
        for group, metrics in catalog_by_group(scope).items()
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/correlations/metrics")
async def list_metrics(scope: Optional[str] = None) -> dict:
    """Metric catalog grouped by category, optionally narrowed to a scope."""
    return {"scope": scope, "groups": _catalog(scope)}


@router.get("/correlations/presets")
async def list_presets() -> list[dict]:
    return [asdict(p) for p in QUICK_PRESETS]


@router.post("/correlations/rank")
async def rank(body: RankRequest) -> dict:
    """Rank every metric pair valid for the scope over the supplied rows."""
    min_sample = body.min_sample
    if min_sample is None:
        min_sample = settings.team_min_sample if body.scope == TEAM else settings.individual_min_sample
    ranked = rank_all(body.rows, body.scope, min_sample=min_sample)
    explorer = filter_pairs(ranked, strength=body.strength, direction=body.direction)
    return {
        "scope": body.scope,
        "row_count": len(body.rows),
        "min_sample": min_sample,
        "pairs": [asdict(p) for p in explorer],
        "summary": correlation_summary(ranked),
    }


@router.post("/correlations/view")
async def view(body: ViewRequest) -> dict:
    """Full correlation view: ranked, important, explorer and scatter data."""
    if body.preset_id:
        selection = apply_preset(body.preset_id, owner_id=body.owner_id)
    else:
        selection = change_scope(
            MetricSelection(
                scope=body.scope,
                metric_x=body.metric_x,
                metric_y=body.metric_y,
                owner_id=body.owner_id,
            ),
            body.scope,
        )

    result = build_insights_view(
        body.team_rows,
        body.lead_rows,
        selection,
        strength=body.strength,
        direction=body.direction,
    )
    logger.info(
        "Correlation view %s %s/%s: %d rows, %d ranked pairs",
        result.selection.scope, result.selection.metric_x, result.selection.metric_y,
        result.row_count, len(result.ranked),
    )
    return {
        "selection": asdict(result.selection),
        "row_count": result.row_count,
        "active_pair": asdict(result.active_pair),
        "ranked": [asdict(p) for p in result.ranked],
        "important": [asdict(p) for p in result.important],
        "explorer": [asdict(p) for p in result.explorer],
        "scatter": [asdict(p) for p in result.scatter],
        "catalog": _catalog(),
        "summary": result.summary,
    }


@router.post("/correlations/scatter")
async def scatter(body: ScatterRequest) -> dict:
    points = project(body.rows, body.metric_x, body.metric_y, category_key=body.category_key)
    return {"count": len(points), "points": [asdict(p) for p in points]}


@router.post("/correlations/team-rows")
async def team_rows(body: TeamRowsRequest) -> dict:
    """Assemble per-seller team rows and their demographic summaries."""
    reliability = None
    if body.leads is not None:
        reliability = reliability_by_seller(
            body.leads,
            owner_field="owner_id",
            min_leads=settings.reliability_min_leads,
            default_win_rate=settings.reliability_default_win_rate,
        )
    rows = build_team_rows(
        body.profiles,
        body.employee_profiles,
        body.genders,
        body.race_results,
        today=body.today,
        reliability=reliability,
    )
    # Insights describe the whole team; the search only narrows the table
    insights = demographic_insights(rows, settings.young_seller_age)
    return {
        "rows": search_rows(rows, body.search) if body.search else rows,
        "insights": [asdict(i) for i in insights],
    }


@router.post("/correlations/reliability")
async def reliability(body: ReliabilityRequest) -> dict:
    sellers = seller_reliability(
        body.leads,
        owner=body.owner,
        days=body.days,
        min_leads=settings.reliability_min_leads,
        default_win_rate=settings.reliability_default_win_rate,
    )
    return {
        "sellers": [asdict(s) for s in sellers],
        "low_sample_warning": any(s.low_sample for s in sellers),
    }


@router.post("/correlations/forecast-summary")
async def forecast_summary(body: ForecastSummary) -> dict:
    """Validate an externally computed forecast summary and pass it through."""
    return {
        "summary": body.model_dump(by_alias=True),
        "any_insufficient": body.any_insufficient,
    }
