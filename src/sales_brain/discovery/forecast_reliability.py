"""Forecast reliability — how well each seller's lead probabilities held up.

Each closed lead carries the probability the seller forecast and the
log-loss of that forecast against the outcome. A seller's score compares
their average log-loss with the entropy of the team-wide win rate: 100 is a
perfect forecaster, 0 is no better than always guessing the base rate.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)

DEFAULT_WIN_RATE = 0.3
MIN_RELIABLE_LEADS = 20
UNKNOWN_OWNER = "Unknown"


@dataclass
class SellerReliability:
    owner: str
    lead_count: int
    avg_log_loss: float
    win_rate: float  # % of evaluated leads won
    avg_probability: float
    score: float  # 0-100
    low_sample: bool


def _parse_ts(val) -> datetime | None:
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.replace(tzinfo=None)
    try:
        return datetime.fromisoformat(str(val).replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        return None


def _scored_since(lead: dict, cutoff: datetime) -> bool:
    ts = _parse_ts(lead.get("forecast_scored_at"))
    return ts is not None and ts >= cutoff


def baseline_log_loss(leads: list[dict], default_win_rate: float = DEFAULT_WIN_RATE) -> float:
    """Entropy of the global win rate over all closed leads."""
    closed = [l for l in leads if l.get("forecast_outcome") is not None]
    if closed:
        win_rate = sum(1 for l in closed if l.get("forecast_outcome") == 1) / len(closed)
    else:
        win_rate = default_win_rate
    r = max(0.01, min(0.99, win_rate))
    return -(r * math.log(r) + (1 - r) * math.log(1 - r))


def seller_reliability(
    leads: list[dict],
    owner: str | None = None,
    days: int | None = None,
    now: datetime | None = None,
    min_leads: int = MIN_RELIABLE_LEADS,
    default_win_rate: float = DEFAULT_WIN_RATE,
    owner_field: str = "owner_username",
) -> list[SellerReliability]:
    """Reliability score per seller, best first.

    The baseline always uses every lead; *owner* and *days* only narrow the
    leads that are scored. Leads with no ``forecast_logloss`` are skipped.
    """
    l_base = baseline_log_loss(leads, default_win_rate)

    # Leads without a log-loss were never evaluated and are not scored
    scored = [l for l in leads if l.get("forecast_logloss") is not None]
    if days is not None:
        cutoff = (now or datetime.now()) - timedelta(days=days)
        scored = [l for l in scored if _scored_since(l, cutoff)]
    if owner is not None:
        scored = [l for l in scored if l.get(owner_field) == owner]

    by_owner: dict[str, list[dict]] = {}
    for lead in scored:
        by_owner.setdefault(lead.get(owner_field) or UNKNOWN_OWNER, []).append(lead)

    results: list[SellerReliability] = []
    for name, owned in by_owner.items():
        n = len(owned)
        avg_log_loss = sum(l["forecast_logloss"] for l in owned) / n
        wins = sum(1 for l in owned if l.get("forecast_outcome") == 1)
        avg_prob = sum(l.get("forecast_evaluated_probability") or 0 for l in owned) / n
        results.append(SellerReliability(
            owner=name,
            lead_count=n,
            avg_log_loss=avg_log_loss,
            win_rate=wins / n * 100,
            avg_probability=avg_prob,
            score=max(0.0, 1 - avg_log_loss / l_base) * 100,
            low_sample=n < min_leads,
        ))

    results.sort(key=lambda s: s.score, reverse=True)
    low = [s.owner for s in results if s.low_sample]
    if low:
        logger.warning(
            "%d seller(s) have fewer than %d evaluated leads; scores are unstable: %s",
            len(low), min_leads, ", ".join(low),
        )
    return results


def reliability_by_seller(leads: list[dict], **kwargs) -> dict[str, float]:
    """Owner -> score mapping, for the team row forecastAccuracy field."""
    return {s.owner: s.score for s in seller_reliability(leads, **kwargs)}
