"""Scatter projector — point data for the selected metric pair."""

from __future__ import annotations

from dataclasses import dataclass

from sales_brain.discovery.value_extractor import extract


@dataclass
class ScatterPoint:
    id: str
    label: str
    category: str | None
    x: float
    y: float


def _identity(row: dict, index: int) -> str:
    for key in ("userId", "leadId"):
        value = row.get(key)
        if value is not None:
            return str(value)
    return str(index)


def project(
    rows: list[dict],
    key_x: str,
    key_y: str,
    category_key: str = "gender",
) -> list[ScatterPoint]:
    """Map rows to points, skipping rows missing either coordinate."""
    points: list[ScatterPoint] = []
    for index, row in enumerate(rows):
        x = extract(row, key_x)
        y = extract(row, key_y)
        if x is None or y is None:
            continue
        ident = _identity(row, index)
        category = row.get(category_key)
        points.append(ScatterPoint(
            id=ident,
            label=str(row.get("name") or ident),
            category=str(category) if category is not None else None,
            x=x,
            y=y,
        ))
    return points
