"""Unit tests for unlinked-entry suggestions."""

import pytest
from conftest import at, make_entry

from timelens.analysis.matcher import find_unlinked_event_suggestions
from timelens.analysis.models import GoalCluster


@pytest.fixture
def clusters() -> list[GoalCluster]:
    """Thesis and gym clusters."""
    return [
        GoalCluster("auto_0", "写论文", ["写论", "论文", "写论文"], ["g1"], []),
        GoalCluster("auto_1", "gym", ["gym", "session"], ["g2"], []),
    ]


class TestFindUnlinkedEventSuggestions:
    """Tests for find_unlinked_event_suggestions."""

    def test_suggests_orphans_only(self, clusters: list[GoalCluster]) -> None:
        """Test entries already linked to a goal are skipped."""
        entries = [
            make_entry("linked", at(1), 60, activity="写论文", goal_id="g1"),
            make_entry("orphan", at(2), 45, activity="写论文"),
        ]

        suggestions = find_unlinked_event_suggestions(entries, clusters)

        assert len(suggestions) == 1
        suggestion = suggestions[0]
        assert suggestion.entry_id == "orphan"
        assert suggestion.suggested_cluster_id == "auto_0"
        assert suggestion.suggested_cluster_name == "写论文"
        assert suggestion.date == "2024-03-02"
        assert suggestion.duration == 45
        assert suggestion.keywords == ["写论文", "写论", "论文"]

    def test_ineligible_entries_skipped(self, clusters: list[GoalCluster]) -> None:
        """Test deleted and running entries are never suggested."""
        entries = [
            make_entry("deleted", at(1), 60, activity="gym", deleted=True),
            make_entry("running", at(1), 60, activity="gym", finished=False),
        ]
        assert find_unlinked_event_suggestions(entries, clusters) == []

    def test_sorted_by_confidence(self, clusters: list[GoalCluster]) -> None:
        """Test stronger matches come first."""
        entries = [
            make_entry("weak", at(1), 30, activity="gym with friends"),
            make_entry("strong", at(2), 30, activity="gym session"),
        ]

        suggestions = find_unlinked_event_suggestions(entries, clusters)

        assert [s.entry_id for s in suggestions] == ["strong", "weak"]
        assert suggestions[0].confidence == pytest.approx(1.0)

    def test_limit(self, clusters: list[GoalCluster]) -> None:
        """Test the suggestion count is capped."""
        entries = [make_entry(f"e{i}", at(1), 30, activity="gym session") for i in range(5)]
        suggestions = find_unlinked_event_suggestions(entries, clusters, limit=3)
        assert [s.entry_id for s in suggestions] == ["e0", "e1", "e2"]

    def test_min_confidence(self, clusters: list[GoalCluster]) -> None:
        """Test an explicit confidence floor filters weak matches."""
        entries = [
            make_entry("weak", at(1), 30, activity="gym with friends"),
            make_entry("strong", at(2), 30, activity="gym session"),
        ]
        suggestions = find_unlinked_event_suggestions(entries, clusters, min_confidence=0.5)
        assert [s.entry_id for s in suggestions] == ["strong"]

    def test_no_clusters(self) -> None:
        """Test nothing is suggested without clusters."""
        entries = [make_entry("e1", at(1), 30, activity="gym")]
        assert find_unlinked_event_suggestions(entries, []) == []

    def test_to_dict(self, clusters: list[GoalCluster]) -> None:
        """Test suggestion serialization."""
        entries = [make_entry("e1", at(1), 30, activity="gym session")]
        data = find_unlinked_event_suggestions(entries, clusters)[0].to_dict()
        assert data["suggested_cluster_id"] == "auto_1"
        assert data["keywords"] == ["gym", "session"]
