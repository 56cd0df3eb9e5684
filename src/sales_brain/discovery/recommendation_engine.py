"""Recommendation engine — turns a correlation into guidance text.

Guidance is a lookup, not free text: the polarity of both metrics, whether
the observed relationship is favorable, and the sign of r select a template
id from ``_DECISION_TABLE``; the template text lives in ``TEMPLATES`` so a
caller can swap it for another locale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sales_brain.discovery.correlation_engine import (
    CorrelationPair,
    classify_direction,
    classify_strength,
)
from sales_brain.discovery.metric_registry import get_metric, metric_label

logger = logging.getLogger(__name__)

IMPORTANT_LIMIT = 8
IMPORTANT_MIN_ABS_R = 0.5


@dataclass
class ImportantCorrelation:
    """A ranked pair decorated for the curated summary."""

    metric_x: str
    metric_y: str
    r: float
    n: int
    strength_label: str
    recommendation: str


TEMPLATES: dict[str, str] = {
    "playbook": (
        "{strength} {direction} correlation between {x} and {y} moves in the "
        "favorable direction: standardize the practices behind it as part of "
        "the sales playbook."
    ),
    "friction": (
        "{strength} {direction} correlation between {x} and {y} looks like "
        "friction: review the process and lead segmentation behind it."
    ),
    "reinforce": (
        "{strength} positive correlation: reinforce the process driving {x} "
        "and monitor {y} to confirm causality."
    ),
    "bottleneck": (
        "{strength} negative correlation: identify the bottlenecks where {x} "
        "goes with a decline in {y} and design a controlled experiment to "
        "address it."
    ),
}

# (polarity_known, favorable, sign) -> template id. Favorable is only
# meaningful when polarity is known.
_DECISION_TABLE: dict[tuple[bool, bool | None, str], str] = {
    (True, True, "positive"): "playbook",
    (True, True, "negative"): "playbook",
    (True, False, "positive"): "friction",
    (True, False, "negative"): "friction",
    (False, None, "positive"): "reinforce",
    (False, None, "negative"): "bottleneck",
}


def _polarity(metric_key: str) -> bool | None:
    metric = get_metric(metric_key)
    if metric is None:
        logger.warning("Unknown metric key %r treated as unknown polarity", metric_key)
        return None
    return metric.higher_is_better


def decide(metric_x: str, metric_y: str, r: float) -> str:
    """Template id for a correlation between two metrics."""
    px = _polarity(metric_x)
    py = _polarity(metric_y)
    sign = "positive" if r > 0 else "negative"

    if px is None or py is None:
        return _DECISION_TABLE[(False, None, sign)]

    same_polarity = px == py
    favorable = (same_polarity and r > 0) or (not same_polarity and r < 0)
    return _DECISION_TABLE[(True, favorable, sign)]


def recommend(
    metric_x: str,
    metric_y: str,
    r: float,
    templates: dict[str, str] | None = None,
) -> str:
    """Guidance text for a correlation between two metrics."""
    template = (templates or TEMPLATES)[decide(metric_x, metric_y, r)]
    direction = classify_direction(r)
    return template.format(
        strength=classify_strength(r).capitalize(),
        direction=direction if direction != "none" else "flat",
        x=metric_label(metric_x),
        y=metric_label(metric_y),
    )


def important_correlations(
    pairs: list[CorrelationPair],
    limit: int = IMPORTANT_LIMIT,
    min_abs_r: float = IMPORTANT_MIN_ABS_R,
) -> list[ImportantCorrelation]:
    """Top ranked pairs with |r| >= *min_abs_r*, decorated with guidance."""
    qualifying = [p for p in pairs if p.r is not None and abs(p.r) >= min_abs_r]
    qualifying.sort(key=lambda p: p.abs_r, reverse=True)

    return [
        ImportantCorrelation(
            metric_x=p.metric_x,
            metric_y=p.metric_y,
            r=p.r,
            n=p.n,
            strength_label=classify_strength(p.r),
            recommendation=recommend(p.metric_x, p.metric_y, p.r),
        )
        for p in qualifying[:limit]
    ]
