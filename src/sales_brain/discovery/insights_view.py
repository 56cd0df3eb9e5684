"""Insights view — runs the full correlation flow for one set of inputs.

scope routing -> ranking -> curated summary + explorer filter -> scatter
projection of the selected pair. Stateless: callers that recompute on every
input change own any memoization.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from config.settings import settings
from sales_brain.discovery.correlation_engine import (
    CorrelationPair,
    correlation_summary,
    filter_pairs,
    pearson,
    rank_all,
)
from sales_brain.discovery.metric_registry import (
    INDIVIDUAL,
    TEAM,
    MetricDefinition,
    catalog_by_group,
)
from sales_brain.discovery.recommendation_engine import (
    ImportantCorrelation,
    important_correlations,
)
from sales_brain.discovery.scatter_projector import ScatterPoint, project
from sales_brain.discovery.scope_router import (
    MetricSelection,
    select_dataset,
    validate_selection,
)

logger = logging.getLogger(__name__)

_CATEGORY_KEYS = {TEAM: "gender", INDIVIDUAL: "ownerName"}


@dataclass
class CorrelationView:
    """Everything the presentation layer needs for one render."""

    selection: MetricSelection
    row_count: int
    active_pair: CorrelationPair
    ranked: list[CorrelationPair] = field(default_factory=list)
    important: list[ImportantCorrelation] = field(default_factory=list)
    explorer: list[CorrelationPair] = field(default_factory=list)
    scatter: list[ScatterPoint] = field(default_factory=list)
    catalog: dict[str, list[MetricDefinition]] = field(default_factory=dict)
    summary: dict = field(default_factory=dict)


def _min_sample(scope: str) -> int:
    return settings.team_min_sample if scope == TEAM else settings.individual_min_sample


def build_insights_view(
    team_rows: list[dict],
    lead_rows: list[dict],
    selection: MetricSelection,
    strength: str = "all",
    direction: str = "all",
) -> CorrelationView:
    """Compute ranked, curated, explorer and scatter artifacts for a selection."""
    selection = validate_selection(selection)
    rows = select_dataset(selection.scope, team_rows, lead_rows, selection.owner_id)

    ranked = rank_all(rows, selection.scope, min_sample=_min_sample(selection.scope))
    important = important_correlations(
        ranked,
        limit=settings.important_limit,
        min_abs_r=settings.important_min_abs_r,
    )
    explorer = filter_pairs(ranked, strength=strength, direction=direction)

    view = CorrelationView(
        selection=selection,
        row_count=len(rows),
        active_pair=pearson(rows, selection.metric_x, selection.metric_y),
        ranked=ranked,
        important=important,
        explorer=explorer,
        scatter=project(
            rows,
            selection.metric_x,
            selection.metric_y,
            category_key=_CATEGORY_KEYS[selection.scope],
        ),
        catalog=catalog_by_group(),
        summary=correlation_summary(ranked),
    )
    logger.debug(
        "Built %s view: %d rows, %d ranked, %d important, %d points",
        selection.scope, len(rows), len(ranked), len(important), len(view.scatter),
    )
    return view
