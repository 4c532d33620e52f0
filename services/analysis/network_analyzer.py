import logging
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

import settings
from domain.entities.analysis import (
    ConnectionRecommendation,
    NetworkAnalysisResult,
    NetworkNode,
    SuggestedConnection,
)
from domain.entities.relationship import Relationship
from services.analysis.community_detection import (
    CommunityDetector,
    get_community_detector,
)
from shared.shared import (
    BRIDGE_SLOTS,
    HIGH_INFLUENCE_SLOTS,
    INFLUENCE_WEIGHTS,
    MEETING_SATURATION,
    SAME_COMMUNITY_SLOTS,
    SuggestionReason,
)

logger = logging.getLogger(__name__)

CORE = "core"
PERIPHERAL = "peripheral"


class NetworkAnalyzer:
    """Centrality, influence, bridge, community and recommendation scoring over relationships"""

    def __init__(
        self,
        community_detector: CommunityDetector = None,
        top_k: int = None,
        max_suggestions: int = None,
    ):
        self.community_detector = community_detector or get_community_detector()
        self.top_k = top_k or settings.INFLUENCE_TOP_K
        self.max_suggestions = max_suggestions or settings.MAX_SUGGESTIONS_PER_PERSON

    def build_nodes(
        self, people: Sequence, relationships: Sequence[Relationship]
    ) -> Dict[str, NetworkNode]:
        """One node per person; relationships to unknown people are skipped"""
        nodes: Dict[str, NetworkNode] = OrderedDict()
        for person in people:
            if person.id not in nodes:
                nodes[person.id] = NetworkNode(id=person.id, name=getattr(person, "name", ""))

        skipped = 0
        for rel in relationships:
            node1 = nodes.get(rel.person1_id)
            node2 = nodes.get(rel.person2_id)
            if node1 is None or node2 is None:
                skipped += 1
                continue
            if node1 is node2 or node1.is_connected_to(node2.id):
                continue
            node1.add_connection(node2.id)
            node2.add_connection(node1.id)
            node1.trust_score_total += rel.trust_score
            node2.trust_score_total += rel.trust_score
            node1.meeting_count_total += rel.total_meetings
            node2.meeting_count_total += rel.total_meetings

        if skipped:
            logger.warning(f"Skipped {skipped} relationships with unknown endpoints")
        return nodes

    def analyze(
        self,
        people: Sequence,
        relationships: Sequence[Relationship],
        now: Optional[datetime] = None,
    ) -> NetworkAnalysisResult:
        nodes = self.build_nodes(people, relationships)

        centrality = self.degree_centrality(nodes)
        influence = self.influence_scores(nodes)
        bridges = self.bridge_scores(nodes)
        communities = self.community_detector.detect(nodes)
        recommendations = self.recommend(nodes, communities, influence, bridges)

        result = NetworkAnalysisResult(
            centrality=centrality,
            influence=influence,
            bridges=bridges,
            communities=communities,
            network_reach={node_id: node.degree for node_id, node in nodes.items()},
            recommendations=recommendations,
            total_edges=sum(node.degree for node in nodes.values()) // 2,
            analyzed_at=now or datetime.now(timezone.utc),
        )
        logger.info(
            f"Analyzed network: {result.summary['total_nodes']} nodes, "
            f"{result.summary['communities']} communities, "
            f"{result.summary['recommendations']} recommendations"
        )
        return result

    def degree_centrality(self, nodes: Dict[str, NetworkNode]) -> Dict[str, float]:
        denominator = max(len(nodes) - 1, 1)
        return {node_id: node.degree / denominator for node_id, node in nodes.items()}

    def influence_score(self, node: NetworkNode) -> float:
        meeting_factor = min(node.meeting_count_total / MEETING_SATURATION, 1.0)
        return (
            node.degree * INFLUENCE_WEIGHTS["degree"]
            + node.average_trust * INFLUENCE_WEIGHTS["trust"]
            + meeting_factor * INFLUENCE_WEIGHTS["meetings"]
        )

    def influence_scores(self, nodes: Dict[str, NetworkNode]) -> Dict[str, float]:
        return {node_id: self.influence_score(node) for node_id, node in nodes.items()}

    def bridge_scores(self, nodes: Dict[str, NetworkNode]) -> Dict[str, int]:
        """1 when a node's neighbours fall in both the core (overlapping) and peripheral groups"""
        bridges = {}
        for node_id, node in nodes.items():
            clusters = set()
            for neighbor_id in node.connections:
                neighbor = nodes.get(neighbor_id)
                if neighbor is None:
                    continue
                clusters.add(CORE if node.shared_connections(neighbor) > 0 else PERIPHERAL)
            bridges[node_id] = 1 if len(clusters) > 1 else 0
        return bridges

    def recommend(
        self,
        nodes: Dict[str, NetworkNode],
        communities: Dict[str, str],
        influence: Dict[str, float],
        bridges: Dict[str, int],
    ) -> List[ConnectionRecommendation]:
        top_influencers = [
            node_id
            for node_id, _ in sorted(influence.items(), key=lambda item: item[1], reverse=True)[
                : self.top_k
            ]
        ]
        bridge_people = [node_id for node_id, score in bridges.items() if score > 0]

        recommendations = []
        for node_id, node in nodes.items():

            def is_candidate(candidate_id: str) -> bool:
                return candidate_id != node_id and not node.is_connected_to(candidate_id)

            same_community = [
                other_id
                for other_id, label in communities.items()
                if label == communities.get(node_id) and is_candidate(other_id)
            ]
            high_influence = [c for c in top_influencers if is_candidate(c)]
            bridge_candidates = [c for c in bridge_people if is_candidate(c)]

            suggested: "OrderedDict[str, List[str]]" = OrderedDict()
            for candidates, slots, reason in (
                (same_community, SAME_COMMUNITY_SLOTS, SuggestionReason.SAME_COMMUNITY),
                (high_influence, HIGH_INFLUENCE_SLOTS, SuggestionReason.HIGH_INFLUENCE),
                (bridge_candidates, BRIDGE_SLOTS, SuggestionReason.NETWORK_BRIDGE),
            ):
                for candidate_id in candidates[:slots]:
                    suggested.setdefault(candidate_id, []).append(reason.value)

            if suggested:
                recommendations.append(
                    ConnectionRecommendation(
                        person_id=node_id,
                        suggestions=[
                            SuggestedConnection(person_id=candidate_id, reasons=reasons)
                            for candidate_id, reasons in list(suggested.items())[
                                : self.max_suggestions
                            ]
                        ],
                    )
                )
        return recommendations
