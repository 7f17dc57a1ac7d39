"""Goal clustering.

Groups goals that describe the same underlying intent. User rules are
applied first (keyword containment, in priority order); the remaining goals
are merged automatically by pairwise name similarity with a union-find.
"""

import logging
from collections import Counter
from dataclasses import dataclass

from timelens.records.models import Goal

from .models import DEFAULT_CLUSTER_SETTINGS, ClusterRule, ClusterSettings, GoalCluster
from .tokenizer import jaccard_similarity, text_similarity_with_containment, tokenize_ordered

logger = logging.getLogger(__name__)

MAX_CLUSTER_KEYWORDS = 10
MATCH_THRESHOLD = 0.2
UNNAMED_CLUSTER = "Untitled"

CLUSTER_COLORS = [
    "#3b82f6",  # blue
    "#10b981",  # emerald
    "#f59e0b",  # amber
    "#ef4444",  # red
    "#8b5cf6",  # violet
    "#ec4899",  # pink
    "#06b6d4",  # cyan
    "#84cc16",  # lime
    "#f97316",  # orange
    "#6366f1",  # indigo
]


class UnionFind:
    """Disjoint sets over the indices 0..size-1.

    Parent and rank live in flat lists; path compression on find,
    union by rank.
    """

    def __init__(self, size: int) -> None:
        self.parent = list(range(size))
        self.rank = [0] * size

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: int, y: int) -> None:
        root_x = self.find(x)
        root_y = self.find(y)
        if root_x == root_y:
            return
        if self.rank[root_x] < self.rank[root_y]:
            self.parent[root_x] = root_y
        elif self.rank[root_x] > self.rank[root_y]:
            self.parent[root_y] = root_x
        else:
            self.parent[root_y] = root_x
            self.rank[root_x] += 1

    def groups(self) -> list[list[int]]:
        """Members of each set, ordered by their smallest index."""
        by_root: dict[int, list[int]] = {}
        for index in range(len(self.parent)):
            by_root.setdefault(self.find(index), []).append(index)
        return list(by_root.values())


def _token_frequencies(goals: list[Goal]) -> Counter[str]:
    """Number of goals each token appears in, in first-seen order."""
    frequencies: Counter[str] = Counter()
    for goal in goals:
        frequencies.update(tokenize_ordered(goal.name))
    return frequencies


def _shortest_name(goals: list[Goal]) -> str:
    return min(goals, key=lambda g: len(g.name)).name


def select_representative_name(goals: list[Goal]) -> str:
    """Pick a display name for a group of goals.

    Prefers the shortest name among goals that contain one of the most
    frequent tokens, then the shortest name overall.
    """
    if not goals:
        return UNNAMED_CLUSTER
    if len(goals) == 1:
        return goals[0].name

    frequencies = _token_frequencies(goals)
    if frequencies:
        max_freq = max(frequencies.values())
        top_tokens = {token for token, freq in frequencies.items() if freq == max_freq}
        candidates = [
            g for g in goals if top_tokens.intersection(tokenize_ordered(g.name))
        ]
        if candidates:
            return _shortest_name(candidates)

    return _shortest_name(goals)


def extract_cluster_keywords(goals: list[Goal], limit: int = MAX_CLUSTER_KEYWORDS) -> list[str]:
    """Most frequent tokens across the goals, ties in first-seen order."""
    ranked = sorted(_token_frequencies(goals).items(), key=lambda item: -item[1])
    return [token for token, _ in ranked[:limit]]


def apply_custom_rules(goals: list[Goal], rules: list[ClusterRule]) -> list[GoalCluster]:
    """Build one manual cluster per rule that matches at least one goal.

    Rules run in ascending priority. A goal claimed by an earlier rule is
    not offered to later ones.
    """
    clusters: list[GoalCluster] = []
    assigned: set[str] = set()

    for rule in sorted(rules, key=lambda r: r.priority):
        keywords = [kw.lower() for kw in rule.keywords if kw]
        matched: list[Goal] = []
        for goal in goals:
            if goal.id in assigned:
                continue
            name = goal.name.lower()
            if any(keyword in name for keyword in keywords):
                matched.append(goal)
                assigned.add(goal.id)

        if matched:
            clusters.append(
                GoalCluster(
                    id=rule.id,
                    name=rule.name,
                    keywords=list(rule.keywords),
                    goal_ids=[g.id for g in matched],
                    goals=matched,
                    is_manual=True,
                )
            )
        else:
            logger.debug("Cluster rule %r matched no goals", rule.name)

    return clusters


def auto_cluster(goals: list[Goal], threshold: float) -> list[GoalCluster]:
    """Merge goals whose names are at least ``threshold`` similar.

    Every pair is compared once, so this is quadratic in the number of goals.
    """
    if not goals:
        return []

    names = [goal.name for goal in goals]
    union_find = UnionFind(len(goals))
    for i in range(len(goals)):
        for j in range(i + 1, len(goals)):
            if text_similarity_with_containment(names[i], names[j]) >= threshold:
                union_find.union(i, j)

    clusters: list[GoalCluster] = []
    for index, members in enumerate(union_find.groups()):
        member_goals = [goals[i] for i in members]
        clusters.append(
            GoalCluster(
                id=f"auto_{index}",
                name=select_representative_name(member_goals),
                keywords=extract_cluster_keywords(member_goals),
                goal_ids=[g.id for g in member_goals],
                goals=member_goals,
                is_manual=False,
            )
        )
    return clusters


def cluster_goals(
    goals: list[Goal],
    settings: ClusterSettings = DEFAULT_CLUSTER_SETTINGS,
) -> list[GoalCluster]:
    """Partition goals into clusters.

    Args:
        goals: All goals to group
        settings: Sensitivity and user rules

    Returns:
        Manual and automatic clusters, largest first
    """
    if not goals:
        return []

    manual = apply_custom_rules(goals, settings.rules)
    assigned = {goal_id for cluster in manual for goal_id in cluster.goal_ids}
    remaining = [goal for goal in goals if goal.id not in assigned]
    automatic = auto_cluster(remaining, settings.threshold)

    clusters = manual + automatic
    clusters.sort(key=lambda c: len(c.goals), reverse=True)

    logger.debug(
        "Clustered %d goals into %d clusters (%d manual, threshold %.2f)",
        len(goals),
        len(clusters),
        len(manual),
        settings.threshold,
    )
    return clusters


@dataclass
class ClusterMatch:
    """Best cluster for a piece of activity text."""

    cluster_id: str
    cluster_name: str
    confidence: float
    keywords: list[str]


def match_event_to_cluster(activity: str, clusters: list[GoalCluster]) -> ClusterMatch | None:
    """Find the cluster whose keywords best match an activity description.

    A cluster qualifies only if the token similarity exceeds 0.2 and at
    least one activity token is one of its keywords. The first cluster wins
    ties.
    """
    if not activity or not clusters:
        return None

    activity_tokens = tokenize_ordered(activity)
    if not activity_tokens:
        return None

    best: ClusterMatch | None = None
    for cluster in clusters:
        score = jaccard_similarity(activity_tokens, cluster.keywords)
        matched = [token for token in activity_tokens if token in cluster.keywords]
        if score > MATCH_THRESHOLD and matched:
            if best is None or score > best.confidence:
                best = ClusterMatch(
                    cluster_id=cluster.id,
                    cluster_name=cluster.name,
                    confidence=score,
                    keywords=matched,
                )
    return best


def cluster_color(index: int) -> str:
    """Stable display color for the cluster at ``index``."""
    return CLUSTER_COLORS[index % len(CLUSTER_COLORS)]


__all__ = [
    "CLUSTER_COLORS",
    "MATCH_THRESHOLD",
    "ClusterMatch",
    "UnionFind",
    "apply_custom_rules",
    "auto_cluster",
    "cluster_color",
    "cluster_goals",
    "extract_cluster_keywords",
    "match_event_to_cluster",
    "select_representative_name",
]
