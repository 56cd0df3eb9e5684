"""Team rows — per-seller performance rows assembled from raw records.

Joins seller profiles, employee profiles and gender catalog entries with the
per-period race results, producing one row per employee for the team scope.
Also provides the master-table search and the demographic summaries shown
next to it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

MALE = "Masculino"
FEMALE = "Femenino"
MEDALS = ("gold", "silver", "bronze")
YOUNG_SELLER_AGE = 30


def _amount(val) -> float:
    if val is None:
        return 0.0
    try:
        return float(val)
    except (TypeError, ValueError, OverflowError):
        return 0.0


def _parse_date(val) -> date | None:
    """Attempt to parse a date from string, date or datetime."""
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    for fmt in ("%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y/%m/%d"):
        try:
            return datetime.strptime(str(val)[:19], fmt).date()
        except ValueError:
            continue
    return None


def age_on(birth_date, today: date) -> int | None:
    """Completed years between *birth_date* and *today*."""
    birth = _parse_date(birth_date)
    if birth is None:
        return None
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def tenure_months(start_date, today: date) -> int:
    """Calendar months since *start_date*; 0 when unknown."""
    start = _parse_date(start_date)
    if start is None:
        return 0
    return (today.year - start.year) * 12 + (today.month - start.month)


def _growth(history: list[float]) -> float:
    """Percent change of the last period against the previous one."""
    if len(history) < 2:
        return 0.0
    last, prev = history[-1], history[-2]
    if prev <= 0:
        return 0.0
    return (last - prev) / prev * 100


def build_team_rows(
    profiles: list[dict],
    employee_profiles: list[dict],
    genders: list[dict],
    race_results: list[dict],
    today: date | None = None,
    reliability: dict[str, float] | None = None,
) -> list[dict]:
    """One performance row per employee profile.

    Args:
        profiles: ``{id, full_name}`` records.
        employee_profiles: ``{user_id, gender_id, birth_date, start_date, ...}``.
            Extra numeric fields (e.g. ``meetingsPerClose``) are copied through.
        genders: ``{id, name}`` catalog entries.
        race_results: ``{user_id, period, total_sales, medal}`` per period.
        today: reference date for age and tenure.
        reliability: optional owner id -> forecast reliability score.
    """
    today = today or date.today()
    names = {p.get("id"): p.get("full_name") for p in profiles}
    gender_names = {g.get("id"): g.get("name") for g in genders}

    performance: dict[str, dict] = {}
    for res in sorted(race_results, key=lambda r: str(r.get("period") or "")):
        perf = performance.setdefault(res.get("user_id"), {
            "totalSales": 0.0,
            "medals": {m: 0 for m in MEDALS},
            "history": [],
        })
        amount = _amount(res.get("total_sales"))
        perf["totalSales"] += amount
        perf["history"].append(amount)
        if res.get("medal") in MEDALS:
            perf["medals"][res["medal"]] += 1

    rows: list[dict] = []
    for emp in employee_profiles:
        user_id = emp.get("user_id")
        perf = performance.get(user_id, {
            "totalSales": 0.0,
            "medals": {m: 0 for m in MEDALS},
            "history": [],
        })
        history = perf["history"]
        medal_total = sum(perf["medals"].values())

        row = {
            k: v for k, v in emp.items()
            if k not in ("user_id", "gender_id", "birth_date", "start_date")
        }
        row.update({
            "userId": user_id,
            "name": names.get(user_id) or "Unknown",
            "gender": gender_names.get(emp.get("gender_id")) or "N/A",
            "age": age_on(emp.get("birth_date"), today),
            "tenureMonths": tenure_months(emp.get("start_date"), today),
            "totalSales": perf["totalSales"],
            "medals": dict(perf["medals"]),
            "medalRatio": medal_total / len(history) if history else None,
            "growth": _growth(history),
            "lastRaceAmount": history[-1] if history else 0.0,
        })
        if reliability is not None and user_id in reliability:
            row["forecastAccuracy"] = reliability[user_id]
        rows.append(row)

    return rows


def search_rows(rows: list[dict], term: str) -> list[dict]:
    """Rows whose name or gender contains *term* (case-insensitive)."""
    needle = (term or "").lower()
    if not needle:
        return list(rows)
    return [
        row for row in rows
        if needle in str(row.get("name") or "").lower()
        or needle in str(row.get("gender") or "").lower()
    ]


# ---------------------------------------------------------------------------
# Demographic insights
# ---------------------------------------------------------------------------


@dataclass
class DemographicInsight:
    title: str
    description: str
    values: dict[str, float]


def _avg(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def demographic_insights(rows: list[dict], young_age: int = YOUNG_SELLER_AGE) -> list[DemographicInsight]:
    """Tenure by gender and growth of younger vs older sellers."""
    if not rows:
        return []

    male = [_amount(r.get("tenureMonths")) for r in rows if r.get("gender") == MALE]
    female = [_amount(r.get("tenureMonths")) for r in rows if r.get("gender") == FEMALE]
    other = [
        _amount(r.get("tenureMonths")) for r in rows
        if r.get("gender") not in (MALE, FEMALE)
    ]

    # Sellers with unknown age are left out of both groups
    young = [_amount(r.get("growth")) for r in rows if r.get("age") and r["age"] < young_age]
    senior = [_amount(r.get("growth")) for r in rows if r.get("age") and r["age"] >= young_age]

    avg_male, avg_female = _avg(male), _avg(female)
    avg_young, avg_senior = _avg(young), _avg(senior)

    return [
        DemographicInsight(
            title="Gender vs tenure",
            description=(
                f"Male sellers average {avg_male:.1f} months of tenure, "
                f"female sellers average {avg_female:.1f} months."
            ),
            values={"male": avg_male, "female": avg_female, "other": _avg(other)},
        ),
        DemographicInsight(
            title="Learning curve: younger sellers",
            description=(
                f"Sellers under {young_age} grow {avg_young:.1f}% per period "
                f"vs {avg_senior:.1f}% for sellers {young_age} and over."
            ),
            values={"young": avg_young, "senior": avg_senior},
        ),
    ]
