import logging
from collections import deque
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

import networkx as nx

from domain.entities.relationship import Relationship, RelationshipTimeline
from shared.shared import RECENT_ACTIVITY_DAYS, STRONG_RELATIONSHIP_THRESHOLD
from shared.util import mean

logger = logging.getLogger(__name__)


class RelationshipGraph:
    """Undirected graph over stored relationships; neighbours keep relationship-list order"""

    def __init__(self, relationships: Sequence[Relationship]):
        self.relationships = list(relationships)
        self.graph = nx.Graph()

        for rel in self.relationships:
            if rel.person1_id == rel.person2_id:
                self.graph.add_node(rel.person1_id)
                continue
            if self.graph.has_edge(rel.person1_id, rel.person2_id):
                logger.warning(
                    f"Duplicate relationship {rel.id} for pair "
                    f"({rel.person1_id}, {rel.person2_id}); keeping the first"
                )
                continue
            self.graph.add_edge(
                rel.person1_id,
                rel.person2_id,
                relationship_id=rel.id,
                strength=rel.relationship_strength,
                trust=rel.trust_score,
                meetings=rel.total_meetings,
            )

    def __contains__(self, person_id: str) -> bool:
        return person_id in self.graph

    def neighbors(self, person_id: str) -> List[str]:
        if person_id not in self.graph:
            return []
        return list(self.graph.neighbors(person_id))

    def influence_map(self) -> Dict[str, float]:
        """Sum of relationship strengths per endpoint (reach, not normalized by count)"""
        influence: Dict[str, float] = {}
        for rel in self.relationships:
            influence[rel.person1_id] = (
                influence.get(rel.person1_id, 0.0) + rel.relationship_strength
            )
            influence[rel.person2_id] = (
                influence.get(rel.person2_id, 0.0) + rel.relationship_strength
            )
        return influence

    def influence_for(self, person_id: str) -> float:
        return self.influence_map().get(person_id, 0.0)

    def shortest_path(self, start_id: str, end_id: str) -> List[str]:
        """
        Breadth-first search from ``start_id``. Neighbours are explored in the order
        their relationships appear, so ties between equal-length paths resolve the
        same way on every run. Returns [] when either endpoint is absent or unreachable.
        """
        if start_id not in self.graph or end_id not in self.graph:
            return []
        if start_id == end_id:
            return [start_id]

        parents: Dict[str, Optional[str]] = {start_id: None}
        queue = deque([start_id])
        while queue:
            current = queue.popleft()
            for neighbor in self.graph.neighbors(current):
                if neighbor in parents:
                    continue
                parents[neighbor] = current
                if neighbor == end_id:
                    return self._unwind(parents, end_id)
                queue.append(neighbor)
        return []

    def _unwind(self, parents: Dict[str, Optional[str]], end_id: str) -> List[str]:
        path = []
        node = end_id
        while node is not None:
            path.append(node)
            node = parents[node]
        return list(reversed(path))

    def relationship_between(self, person_a: str, person_b: str) -> Optional[Relationship]:
        return next((rel for rel in self.relationships if rel.connects(person_a, person_b)), None)

    def person_relationships(self, person_id: str) -> List[Relationship]:
        return [rel for rel in self.relationships if rel.involves(person_id)]

    @staticmethod
    def person_timeline(
        person_id: str, timeline: Sequence[RelationshipTimeline]
    ) -> List[RelationshipTimeline]:
        return [entry for entry in timeline if entry.involves(person_id)]

    def network_stats(
        self,
        timeline: Sequence[RelationshipTimeline] = (),
        now: Optional[datetime] = None,
    ) -> Dict:
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=RECENT_ACTIVITY_DAYS)
        return {
            "total_relationships": len(self.relationships),
            "avg_trust_score": mean(rel.trust_score for rel in self.relationships),
            "strong_relationships": sum(
                1
                for rel in self.relationships
                if rel.relationship_strength > STRONG_RELATIONSHIP_THRESHOLD
            ),
            "recent_activity": sum(1 for entry in timeline if entry.event_date >= cutoff),
        }
