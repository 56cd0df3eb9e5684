"""Correlation engine — computes pairwise correlations between sales metrics.

Pure functions over performance rows: Pearson per metric pair, strength and
direction classification, and ranking of every metric combination valid for
a scope.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from sales_brain.discovery.metric_registry import INDIVIDUAL, TEAM, metrics_for_scope
from sales_brain.discovery.value_extractor import extract

logger = logging.getLogger(__name__)

MIN_PEARSON_SAMPLE = 3
MIN_RANK_SAMPLE = {TEAM: 4, INDIVIDUAL: 8}

# (label, lower bound on |r|), checked strongest first.
STRENGTH_THRESHOLDS: tuple[tuple[str, float], ...] = (
    ("very strong", 0.7),
    ("strong", 0.5),
    ("moderate", 0.3),
    ("weak", 0.0),
)
STRENGTH_ORDER = ("none", "weak", "moderate", "strong", "very strong")
DIRECTIONS = ("all", "positive", "negative")


@dataclass
class CorrelationPair:
    """A single pairwise correlation result."""

    metric_x: str
    metric_y: str
    r: float | None  # -1.0 to 1.0, None when not computable
    n: int  # rows where both metrics are available

    @property
    def abs_r(self) -> float:
        return abs(self.r) if self.r is not None else 0.0


def compute_pearson(x: list[float], y: list[float]) -> float | None:
    """Compute Pearson correlation coefficient between two aligned series.

    Returns None if correlation cannot be computed (fewer than three points,
    mismatched lengths, a constant series, or values too large to represent
    once centred).
    """
    n = len(x)
    if n != len(y) or n < MIN_PEARSON_SAMPLE:
        return None

    x_mean = sum(x) / n
    y_mean = sum(y) / n
    dxs = [xi - x_mean for xi in x]
    dys = [yi - y_mean for yi in y]
    if not all(math.isfinite(d) for d in dxs + dys):
        return None

    # r is scale-invariant; scaling deviations to at most 1 keeps squares finite
    scale_x = max(abs(d) for d in dxs)
    scale_y = max(abs(d) for d in dys)
    if scale_x == 0 or scale_y == 0:
        return None

    numerator = 0.0
    denom_x = 0.0
    denom_y = 0.0
    for dx, dy in zip(dxs, dys):
        dx /= scale_x
        dy /= scale_y
        numerator += dx * dy
        denom_x += dx * dx
        denom_y += dy * dy

    denom = math.sqrt(denom_x * denom_y)
    if denom == 0 or not math.isfinite(denom) or not math.isfinite(numerator):
        return None

    # Float drift can push a perfect fit a hair past ±1
    return max(-1.0, min(1.0, numerator / denom))


def paired_values(rows: list[dict], key_x: str, key_y: str) -> tuple[list[float], list[float]]:
    """Values of both metrics for rows where both are available."""
    xs: list[float] = []
    ys: list[float] = []
    for row in rows:
        x = extract(row, key_x)
        if x is None:
            continue
        y = extract(row, key_y)
        if y is None:
            continue
        xs.append(x)
        ys.append(y)
    return xs, ys


def pearson(rows: list[dict], key_x: str, key_y: str) -> CorrelationPair:
    """Pearson r and sample size for one metric pair over a row set."""
    xs, ys = paired_values(rows, key_x, key_y)
    return CorrelationPair(
        metric_x=key_x,
        metric_y=key_y,
        r=compute_pearson(xs, ys),
        n=len(xs),
    )


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify_strength(r: float | None) -> str:
    """Qualitative strength bucket for a correlation coefficient."""
    if r is None:
        return "none"
    abs_r = abs(r)
    for label, bound in STRENGTH_THRESHOLDS:
        if abs_r >= bound:
            return label
    return "weak"


def classify_direction(r: float | None) -> str:
    if r is None or r == 0:
        return "none"
    return "positive" if r > 0 else "negative"


def strength_rank(label: str) -> int:
    """Position of a strength label, 0 = none."""
    return STRENGTH_ORDER.index(label)


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


def min_sample_for_scope(scope: str) -> int:
    if scope not in MIN_RANK_SAMPLE:
        raise ValueError(f"Unknown scope: {scope!r}")
    return MIN_RANK_SAMPLE[scope]


def rank_all(
    rows: list[dict],
    scope: str,
    min_sample: int | None = None,
) -> list[CorrelationPair]:
    """Correlate every unordered metric pair valid for *scope*.

    Pairs with no computable r or fewer than *min_sample* paired rows are
    dropped; the rest are sorted by |r| descending.
    """
    keys = [m.key for m in metrics_for_scope(scope)]
    floor = min_sample if min_sample is not None else min_sample_for_scope(scope)

    pairs: list[CorrelationPair] = []
    dropped = 0
    for i in range(len(keys)):
        for j in range(i + 1, len(keys)):
            pair = pearson(rows, keys[i], keys[j])
            if pair.r is None or pair.n < floor:
                dropped += 1
                continue
            pairs.append(pair)

    pairs.sort(key=lambda p: p.abs_r, reverse=True)
    logger.debug(
        "Ranked %d %s pairs over %d rows (%d dropped, min sample %d)",
        len(pairs), scope, len(rows), dropped, floor,
    )
    return pairs


def filter_pairs(
    pairs: list[CorrelationPair],
    strength: str = "all",
    direction: str = "all",
) -> list[CorrelationPair]:
    """Explorer view: filter ranked pairs by strength bucket and direction."""
    strength = strength.replace("_", " ").lower()
    if strength != "all" and strength not in STRENGTH_ORDER:
        raise ValueError(f"Unknown strength filter: {strength!r}")
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown direction filter: {direction!r}")

    result = []
    for p in pairs:
        if strength != "all" and classify_strength(p.r) != strength:
            continue
        if direction != "all" and classify_direction(p.r) != direction:
            continue
        result.append(p)
    return result


def correlation_summary(pairs: list[CorrelationPair]) -> dict:
    """Summarize ranked pairs: count by strength bucket and top correlations."""
    by_strength = {label: 0 for label in STRENGTH_ORDER if label != "none"}
    if not pairs:
        return {
            "total_pairs": 0,
            **by_strength,
            "top_positive": None,
            "top_negative": None,
        }

    for p in pairs:
        label = classify_strength(p.r)
        if label in by_strength:
            by_strength[label] += 1

    positives = [p for p in pairs if p.r is not None and p.r > 0]
    negatives = [p for p in pairs if p.r is not None and p.r < 0]
    top_positive = max(positives, key=lambda p: p.r) if positives else None
    top_negative = min(negatives, key=lambda p: p.r) if negatives else None

    return {
        "total_pairs": len(pairs),
        **by_strength,
        "top_positive": {
            "metrics": [top_positive.metric_x, top_positive.metric_y],
            "r": round(top_positive.r, 4),
        } if top_positive else None,
        "top_negative": {
            "metrics": [top_negative.metric_x, top_negative.metric_y],
            "r": round(top_negative.r, 4),
        } if top_negative else None,
    }
