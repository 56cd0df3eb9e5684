"""Scope router — picks the active dataset and keeps metric selections valid.

The team scope analyzes per-seller aggregates; the individual scope analyzes
per-lead rows, optionally narrowed to one owner. A selection never holds a
metric that is invalid for its scope.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from sales_brain.discovery.metric_registry import (
    INDIVIDUAL,
    SCOPES,
    TEAM,
    MetricDefinition,
    get_preset,
    metrics_for_scope,
)

logger = logging.getLogger(__name__)

ALL_OWNERS = "all"


@dataclass(frozen=True)
class MetricSelection:
    """The engine inputs a caller currently has selected."""

    scope: str = TEAM
    metric_x: str = "tenureMonths"
    metric_y: str = "totalSales"
    owner_id: str | None = None


def valid_metrics(scope: str) -> list[MetricDefinition]:
    return metrics_for_scope(scope)


def select_dataset(
    scope: str,
    team_rows: list[dict],
    lead_rows: list[dict],
    owner_id: str | None = None,
) -> list[dict]:
    """Rows for *scope*; individual scope may be narrowed to one owner."""
    if scope == TEAM:
        return team_rows
    if scope != INDIVIDUAL:
        raise ValueError(f"Unknown scope: {scope!r}")
    if owner_id is None or owner_id == ALL_OWNERS:
        return lead_rows
    return [row for row in lead_rows if str(row.get("ownerId")) == str(owner_id)]


def validate_selection(selection: MetricSelection) -> MetricSelection:
    """Replace out-of-scope X/Y with the first two metrics valid for the scope."""
    keys = [m.key for m in valid_metrics(selection.scope)]
    if selection.metric_x in keys and selection.metric_y in keys:
        return selection

    logger.debug(
        "Selection %s/%s invalid for %s scope, falling back",
        selection.metric_x, selection.metric_y, selection.scope,
    )
    if not keys:
        return selection
    return replace(
        selection,
        metric_x=keys[0],
        metric_y=keys[1] if len(keys) > 1 else keys[0],
    )


def change_scope(selection: MetricSelection, scope: str) -> MetricSelection:
    """Switch scope, re-validating the metric selection."""
    if scope not in SCOPES:
        raise ValueError(f"Unknown scope: {scope!r}")
    owner_id = selection.owner_id if scope == INDIVIDUAL else None
    return validate_selection(replace(selection, scope=scope, owner_id=owner_id))


def apply_preset(preset_id: str, owner_id: str | None = None) -> MetricSelection:
    """Set scope and both metrics from a quick preset in one step."""
    preset = get_preset(preset_id)
    if preset is None:
        raise ValueError(f"Unknown preset: {preset_id!r}")
    return MetricSelection(
        scope=preset.scope,
        metric_x=preset.metric_x,
        metric_y=preset.metric_y,
        owner_id=owner_id if preset.scope == INDIVIDUAL else None,
    )
