"""Metric registry — the catalog of correlatable sales metrics.

Every metric the engine can correlate is declared here once, with the scopes
it applies to and, where the business has one, its polarity (whether a
higher value is commercially favorable). Quick presets are named
(scope, X, Y) triples that are validated against this catalog.
"""

from __future__ import annotations

from dataclasses import dataclass

TEAM = "team"
INDIVIDUAL = "individual"
SCOPES = (TEAM, INDIVIDUAL)

_T = frozenset({TEAM})
_I = frozenset({INDIVIDUAL})


@dataclass(frozen=True)
class MetricDefinition:
    """A correlatable metric."""

    key: str
    label: str
    group: str
    scopes: frozenset[str]
    higher_is_better: bool | None = None  # None = no defined business direction


@dataclass(frozen=True)
class QuickPreset:
    """A named, pre-validated scope + metric pair."""

    id: str
    label: str
    scope: str
    metric_x: str
    metric_y: str


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

METRICS: tuple[MetricDefinition, ...] = (
    # Team — commercial results
    MetricDefinition("totalSales", "Total sales", "Commercial results", _T, True),
    MetricDefinition("lastRaceAmount", "Last period sales", "Commercial results", _T, True),
    MetricDefinition("goldMedals", "Gold medals", "Commercial results", _T, True),
    MetricDefinition("silverMedals", "Silver medals", "Commercial results", _T, True),
    MetricDefinition("bronzeMedals", "Bronze medals", "Commercial results", _T, True),
    MetricDefinition("medalRatio", "Medal ratio", "Commercial results", _T, True),
    MetricDefinition("growth", "Growth (%)", "Commercial results", _T, True),
    MetricDefinition("forecastAccuracy", "Forecast accuracy (%)", "Commercial results", _T, True),
    # Team — prospecting & conversion
    MetricDefinition("preLeadsCount", "Pre-leads captured", "Prospecting & conversion", _T),
    MetricDefinition("preLeadConversionRate", "Pre-lead conversion rate (%)", "Prospecting & conversion", _T, True),
    MetricDefinition("companyCreationRate", "Company creation rate (%)", "Prospecting & conversion", _T, True),
    # Team — operating cadence
    MetricDefinition("meetingsPerClose", "Meetings per close", "Operating cadence", _T, False),
    MetricDefinition("responseTimeHours", "Response time (h)", "Operating cadence", _T, False),
    MetricDefinition("tenureMonths", "Tenure (months)", "Operating cadence", _T),
    MetricDefinition("age", "Age (years)", "Operating cadence", _T),
    # Team — activity in the last 90 days
    MetricDefinition("events90dCalls", "Calls (90d)", "Activity (90d)", _T),
    MetricDefinition("events90dEmails", "Emails (90d)", "Activity (90d)", _T),
    MetricDefinition("events90dMeetings", "Meetings (90d)", "Activity (90d)", _T),
    MetricDefinition("events90dWhatsapp", "WhatsApp messages (90d)", "Activity (90d)", _T),
    MetricDefinition("events90dTasks", "Tasks completed (90d)", "Activity (90d)", _T),
    # Individual — lead quality
    MetricDefinition("forecastProbability", "Forecast probability (%)", "Lead quality", _I, True),
    MetricDefinition("estimatedValue", "Estimated value", "Lead quality", _I, True),
    MetricDefinition("rating", "Lead rating", "Lead quality", _I, True),
    # Individual — process
    MetricDefinition("meetingCount", "Meetings held", "Lead process", _I),
    MetricDefinition("daysToFirstMeeting", "Days to first meeting", "Lead process", _I, False),
    MetricDefinition("hadPhysicalMeeting", "Physical meeting (0/1)", "Lead process", _I),
    MetricDefinition("fromPreLead", "Came from pre-lead (0/1)", "Lead process", _I),
    MetricDefinition("conversionDays", "Days to conversion", "Lead process", _I, False),
    # Individual — outcome
    MetricDefinition("closedWon", "Closed won (1/0)", "Outcome", _I, True),
)

_BY_KEY: dict[str, MetricDefinition] = {m.key: m for m in METRICS}


def get_metric(key: str) -> MetricDefinition | None:
    """Look up a metric definition by key."""
    return _BY_KEY.get(key)


def metric_label(key: str) -> str:
    """Display label for a key, falling back to the key itself."""
    metric = _BY_KEY.get(key)
    return metric.label if metric else key


def metrics_for_scope(scope: str) -> list[MetricDefinition]:
    """Registry definitions applicable to *scope*, in catalog order."""
    if scope not in SCOPES:
        raise ValueError(f"Unknown scope: {scope!r}")
    return [m for m in METRICS if scope in m.scopes]


def catalog_by_group(scope: str | None = None) -> dict[str, list[MetricDefinition]]:
    """Group definitions by category for building selection controls."""
    source = METRICS if scope is None else metrics_for_scope(scope)
    grouped: dict[str, list[MetricDefinition]] = {}
    for metric in source:
        grouped.setdefault(metric.group, []).append(metric)
    return grouped


# ---------------------------------------------------------------------------
# Quick presets
# ---------------------------------------------------------------------------

QUICK_PRESETS: tuple[QuickPreset, ...] = (
    QuickPreset("tenure_vs_sales", "Tenure vs sales", TEAM, "tenureMonths", "totalSales"),
    QuickPreset("cadence_vs_accuracy", "Meetings per close vs forecast accuracy", TEAM, "meetingsPerClose", "forecastAccuracy"),
    QuickPreset("response_vs_conversion", "Response time vs pre-lead conversion", TEAM, "responseTimeHours", "preLeadConversionRate"),
    QuickPreset("activity_vs_growth", "Meetings (90d) vs growth", TEAM, "events90dMeetings", "growth"),
    QuickPreset("meetings_vs_close", "Meetings held vs closed won", INDIVIDUAL, "meetingCount", "closedWon"),
    QuickPreset("probability_vs_close", "Forecast probability vs closed won", INDIVIDUAL, "forecastProbability", "closedWon"),
    QuickPreset("physical_vs_close", "Physical meeting vs closed won", INDIVIDUAL, "hadPhysicalMeeting", "closedWon"),
    QuickPreset("first_meeting_vs_conversion", "Days to first meeting vs days to conversion", INDIVIDUAL, "daysToFirstMeeting", "conversionDays"),
)

_PRESETS_BY_ID: dict[str, QuickPreset] = {p.id: p for p in QUICK_PRESETS}


def get_preset(preset_id: str) -> QuickPreset | None:
    return _PRESETS_BY_ID.get(preset_id)
