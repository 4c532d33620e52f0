#!/usr/bin/env python3

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from shared.shared import ISOLATED_CLUSTER


@dataclass
class NetworkNode:
    """Per-run working node; built from people and relationships, discarded after scoring"""

    id: str
    name: str = ""
    connections: List[str] = field(default_factory=list)
    trust_score_total: float = 0.0
    meeting_count_total: int = 0

    def add_connection(self, other_id: str) -> None:
        if other_id not in self.connections:
            self.connections.append(other_id)

    def is_connected_to(self, other_id: str) -> bool:
        return other_id in self.connections

    @property
    def degree(self) -> int:
        return len(self.connections)

    @property
    def average_trust(self) -> float:
        if not self.connections:
            return 0.0
        return self.trust_score_total / len(self.connections)

    def shared_connections(self, other: "NetworkNode") -> int:
        other_connections = set(other.connections)
        return sum(1 for conn_id in self.connections if conn_id in other_connections)


@dataclass
class SuggestedConnection:
    person_id: str
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {"person_id": self.person_id, "reasons": list(self.reasons)}


@dataclass
class ConnectionRecommendation:
    """Suggested new connections for one person with the heuristics behind them"""

    person_id: str
    suggestions: List[SuggestedConnection] = field(default_factory=list)

    @property
    def suggested_ids(self) -> List[str]:
        return [s.person_id for s in self.suggestions]

    @property
    def reason(self) -> str:
        ordered = []
        for suggestion in self.suggestions:
            for reason in suggestion.reasons:
                if reason not in ordered:
                    ordered.append(reason)
        return ", ".join(ordered)

    def to_dict(self) -> Dict:
        return {
            "person_id": self.person_id,
            "suggested_connections": self.suggested_ids,
            "suggestions": [s.to_dict() for s in self.suggestions],
            "reason": self.reason,
        }


@dataclass
class PersonNetworkMetrics:
    """Flattened per-person analysis row, as persisted by the analysis store"""

    person_id: str
    centrality_score: float = 0.0
    influence_score: float = 0.0
    community_cluster: str = ISOLATED_CLUSTER
    network_reach: int = 0
    bridge_score: int = 0
    analyzed_at: Optional[datetime] = None

    def to_dict(self) -> Dict:
        return {
            "person_id": self.person_id,
            "centrality_score": self.centrality_score,
            "influence_score": self.influence_score,
            "community_cluster": self.community_cluster,
            "network_reach": self.network_reach,
            "bridge_score": self.bridge_score,
            "analyzed_at": self.analyzed_at.isoformat() if self.analyzed_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "PersonNetworkMetrics":
        analyzed_at = data.get("analyzed_at")
        return cls(
            person_id=data["person_id"],
            centrality_score=float(data.get("centrality_score") or 0.0),
            influence_score=float(data.get("influence_score") or 0.0),
            community_cluster=data.get("community_cluster") or ISOLATED_CLUSTER,
            network_reach=int(data.get("network_reach") or 0),
            bridge_score=int(data.get("bridge_score") or 0),
            analyzed_at=datetime.fromisoformat(analyzed_at) if analyzed_at else None,
        )


@dataclass
class NetworkAnalysisResult:
    centrality: Dict[str, float] = field(default_factory=dict)
    influence: Dict[str, float] = field(default_factory=dict)
    bridges: Dict[str, int] = field(default_factory=dict)
    communities: Dict[str, str] = field(default_factory=dict)
    network_reach: Dict[str, int] = field(default_factory=dict)
    recommendations: List[ConnectionRecommendation] = field(default_factory=list)
    total_edges: int = 0
    analyzed_at: Optional[datetime] = None

    def centrality_for(self, person_id: str) -> float:
        return self.centrality.get(person_id, 0.0)

    def influence_for(self, person_id: str) -> float:
        return self.influence.get(person_id, 0.0)

    def bridge_for(self, person_id: str) -> int:
        return self.bridges.get(person_id, 0)

    def community_for(self, person_id: str) -> str:
        return self.communities.get(person_id, ISOLATED_CLUSTER)

    def recommendation_for(self, person_id: str) -> Optional[ConnectionRecommendation]:
        return next(
            (r for r in self.recommendations if r.person_id == person_id), None
        )

    def metrics_for(self, person_id: str) -> PersonNetworkMetrics:
        return PersonNetworkMetrics(
            person_id=person_id,
            centrality_score=self.centrality_for(person_id),
            influence_score=self.influence_for(person_id),
            community_cluster=self.community_for(person_id),
            network_reach=self.network_reach.get(person_id, 0),
            bridge_score=self.bridge_for(person_id),
            analyzed_at=self.analyzed_at,
        )

    def person_metrics(self) -> List[PersonNetworkMetrics]:
        return [self.metrics_for(person_id) for person_id in self.centrality]

    @property
    def summary(self) -> Dict:
        return {
            "total_nodes": len(self.centrality),
            "total_edges": self.total_edges,
            "communities": len(set(self.communities.values())),
            "recommendations": len(self.recommendations),
        }

    def to_dict(self) -> Dict:
        return {
            "centrality": dict(self.centrality),
            "influence": dict(self.influence),
            "bridges": dict(self.bridges),
            "communities": dict(self.communities),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "summary": self.summary,
            "analyzed_at": self.analyzed_at.isoformat() if self.analyzed_at else None,
        }
