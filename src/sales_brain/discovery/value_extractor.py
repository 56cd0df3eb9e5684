"""Value extractor — resolves a metric key against a performance row.

Rows are heterogeneous dicts: team rows carry per-seller aggregates with a
few nested sub-objects (medal counts, 90-day activity counters), lead rows
carry flat per-lead fields. Each metric key resolves through an accessor
registered in ``_ACCESSORS``; keys without an override use a plain top-level
field lookup.
"""

from __future__ import annotations

import math
from typing import Any, Callable

Accessor = Callable[[dict], Any]


def _safe_float(val) -> float | None:
    """Convert a value to a finite float, returning None on failure."""
    if val is None:
        return None
    if isinstance(val, bool):
        return 1.0 if val else 0.0
    try:
        result = float(val)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(result):
        return None
    return result


def _field(name: str) -> Accessor:
    def accessor(row: dict) -> Any:
        return row.get(name)
    return accessor


def _nested(parent: str, child: str) -> Accessor:
    def accessor(row: dict) -> Any:
        sub = row.get(parent)
        if not isinstance(sub, dict):
            return None
        return sub.get(child)
    return accessor


# Overrides for keys that do not map 1:1 to a top-level field.
_ACCESSORS: dict[str, Accessor] = {
    "goldMedals": _nested("medals", "gold"),
    "silverMedals": _nested("medals", "silver"),
    "bronzeMedals": _nested("medals", "bronze"),
    "events90dCalls": _nested("events90d", "call"),
    "events90dEmails": _nested("events90d", "email"),
    "events90dMeetings": _nested("events90d", "meeting"),
    "events90dWhatsapp": _nested("events90d", "whatsapp"),
    "events90dTasks": _nested("events90d", "task"),
}


def accessor_for(metric_key: str) -> Accessor:
    """Return the registered accessor for a key (generic field lookup by default)."""
    return _ACCESSORS.get(metric_key) or _field(metric_key)


def extract(row: Any, metric_key: str) -> float | None:
    """Numeric value of *metric_key* in *row*, or None when unavailable.

    Never raises: a non-dict row, a missing field, or a non-finite value all
    resolve to None.
    """
    if not isinstance(row, dict):
        return None
    return _safe_float(accessor_for(metric_key)(row))
