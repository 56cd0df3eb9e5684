"""Tests for the end-to-end correlation view."""

from sales_brain.discovery.insights_view import build_insights_view
from sales_brain.discovery.scope_router import MetricSelection, valid_metrics


def _team_rows():
    return [
        {
            "userId": f"u{i}",
            "name": f"Seller {i}",
            "gender": "Femenino" if i % 2 else "Masculino",
            "totalSales": 500 + i * 300,
            "tenureMonths": 2 + i * 3,
            "growth": 5 - i,
            "age": 25 + (i * 7) % 11,
        }
        for i in range(6)
    ]


def _lead_rows():
    rows = []
    for i in range(20):
        rows.append({
            "leadId": f"l{i}",
            "ownerId": "u1" if i < 12 else "u2",
            "ownerName": "Ana" if i < 12 else "Luis",
            "name": f"Lead {i}",
            "meetingCount": i % 5,
            "forecastProbability": 20 + (i % 5) * 15,
            "closedWon": 1 if i % 5 >= 3 else 0,
        })
    return rows


class TestBuildInsightsView:
    def test_team_view(self):
        view = build_insights_view(_team_rows(), _lead_rows(), MetricSelection("team", "tenureMonths", "totalSales"))
        assert view.row_count == 6
        assert view.active_pair.n == 6
        assert view.active_pair.r is not None
        assert len(view.scatter) == 6
        assert {p.category for p in view.scatter} == {"Femenino", "Masculino"}
        assert view.ranked
        assert view.explorer == view.ranked
        assert len(view.important) <= 8
        assert view.catalog

    def test_invalid_selection_is_corrected(self):
        view = build_insights_view(_team_rows(), _lead_rows(), MetricSelection("team", "closedWon", "rating"))
        keys = [m.key for m in valid_metrics("team")]
        assert view.selection.metric_x == keys[0]
        assert view.selection.metric_y == keys[1]

    def test_individual_owner_filter(self):
        sel = MetricSelection("individual", "meetingCount", "closedWon", owner_id="u1")
        view = build_insights_view(_team_rows(), _lead_rows(), sel)
        assert view.row_count == 12
        assert all(p.category == "Ana" for p in view.scatter)
        for pair in view.ranked:
            assert pair.n >= 8

    def test_explorer_filters(self):
        view = build_insights_view(
            _team_rows(), _lead_rows(),
            MetricSelection("team", "tenureMonths", "totalSales"),
            direction="negative",
        )
        assert all(p.r < 0 for p in view.explorer)
        assert len(view.explorer) <= len(view.ranked)

    def test_empty_rows(self):
        view = build_insights_view([], [], MetricSelection())
        assert view.ranked == []
        assert view.important == []
        assert view.scatter == []
        assert view.active_pair.r is None
        assert view.summary["total_pairs"] == 0
