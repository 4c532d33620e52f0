#!/usr/bin/env python3

import logging
from datetime import datetime
from typing import IO, Dict, List, Optional, Union

from domain.entities.analysis import NetworkAnalysisResult
from domain.entities.community import ProfileScores
from domain.entities.meeting import Meeting
from domain.exceptions import InvalidInputError
from domain.repositories.analysis_repository import NetworkAnalysisRepository
from domain.repositories.community_repository import CommunityRepository
from domain.repositories.meeting_repository import MeetingRepository, PersonRepository
from domain.repositories.relationship_repository import RelationshipRepository
from services.aggregation.event_aggregator import EventAggregator
from services.aggregation.graph_filters import (
    available_locations,
    connections_within,
    filter_people,
    focus_people,
)
from services.analysis.network_analyzer import NetworkAnalyzer
from services.graph.relationship_graph import RelationshipGraph
from services.layout.force_layout import LayoutConfig
from services.layout.layout_service import LayoutService
from services.preprocessing.meeting_csv_loader import MeetingCSVLoader
from services.scoring.community_scorer import (
    SCORING_PROFILES,
    CommunityScorer,
    auto_join_candidate,
)
from shared.shared import LayoutMode
from shared.util import mean, sanitize_metrics

logger = logging.getLogger(__name__)


class NetworkService:
    """Application service wiring the stores to aggregation, layout, analytics and scoring"""

    def __init__(
        self,
        meeting_repository: MeetingRepository,
        person_repository: PersonRepository,
        relationship_repository: RelationshipRepository,
        community_repository: CommunityRepository,
        analysis_repository: NetworkAnalysisRepository,
        aggregator: EventAggregator = None,
        layout_service: LayoutService = None,
        analyzer: NetworkAnalyzer = None,
        scorer: CommunityScorer = None,
    ):
        self.meeting_repository = meeting_repository
        self.person_repository = person_repository
        self.relationship_repository = relationship_repository
        self.community_repository = community_repository
        self.analysis_repository = analysis_repository
        self.aggregator = aggregator or EventAggregator()
        self.layout_service = layout_service or LayoutService()
        self.analyzer = analyzer or NetworkAnalyzer()
        self.scorer = scorer or CommunityScorer()

    def build_network_view(
        self,
        user_id: Optional[str] = None,
        community_id: Optional[str] = None,
        search_term: str = "",
        location: Optional[str] = None,
        focus_person_id: Optional[str] = None,
        mode: Union[str, LayoutMode] = LayoutMode.FORCE,
        config: Optional[LayoutConfig] = None,
    ) -> Dict:
        """People, connections and positions for one view of the meeting network"""
        meetings = self.meeting_repository.list_meetings(user_id=user_id)
        aggregated = self.aggregator.aggregate(
            meetings, self.person_repository.list_people(), community_id=community_id
        )

        people = filter_people(aggregated.people, search_term, location)
        if focus_person_id:
            relationships = self.relationship_repository.list_relationships(user_id)
            people = focus_people(people, aggregated.connections, relationships, focus_person_id)

        connections = connections_within(people, aggregated.connections)
        positions = self.layout_service.compute(mode, people, connections, config)

        return {
            "people": people,
            "connections": connections,
            "positions": positions,
            "locations": available_locations(aggregated.people),
            "stats": {
                "total_people": len(aggregated.people),
                "total_connections": len(aggregated.connections),
                "average_trust": mean(p.trust_score for p in aggregated.people),
                "total_meetings": len(meetings),
            },
        }

    def analyze_network_structure(self, now: Optional[datetime] = None) -> NetworkAnalysisResult:
        """Run the network analytics over stored people and relationships and persist per-person rows"""
        people = self.person_repository.list_people()
        relationships = self.relationship_repository.list_relationships()
        result = self.analyzer.analyze(people, relationships, now=now)

        stored = self.analysis_repository.save_analysis(result.person_metrics())
        logger.info(f"Stored network metrics for {stored} people")
        return result

    def _relationship_graph(self, user_id: Optional[str] = None) -> RelationshipGraph:
        return RelationshipGraph(self.relationship_repository.list_relationships(user_id))

    def find_path(self, start_id: str, end_id: str, user_id: Optional[str] = None) -> List[str]:
        return self._relationship_graph(user_id).shortest_path(start_id, end_id)

    def influence_map(self, user_id: Optional[str] = None) -> Dict[str, float]:
        return sanitize_metrics(self._relationship_graph(user_id).influence_map())

    def network_stats(self, user_id: Optional[str] = None, now: Optional[datetime] = None) -> Dict:
        timeline = self.relationship_repository.list_timeline(user_id)
        return self._relationship_graph(user_id).network_stats(timeline, now=now)

    def suggest_communities(
        self,
        user_id: str,
        profile: ProfileScores,
        profile_name: str = "service",
        auto_join: bool = False,
    ) -> Dict:
        scoring = SCORING_PROFILES.get(profile_name)
        if scoring is None:
            raise InvalidInputError(
                f"Unknown scoring profile: {profile_name!r}", field="profile_name"
            )

        recommendations = self.scorer.score(
            profile,
            self.community_repository.list_communities(),
            exclude_ids=self.community_repository.list_member_community_ids(user_id),
            scoring=scoring,
        )

        joined = None
        candidate = auto_join_candidate(recommendations) if auto_join else None
        if candidate and self.community_repository.add_member(user_id, candidate.community.id):
            joined = candidate.community
            logger.info(f"User {user_id} auto-joined community {joined.id}")

        return {"recommendations": recommendations, "auto_joined": joined}

    def record_meeting(self, meeting: Meeting) -> Meeting:
        self.meeting_repository.add_meeting(meeting)
        logger.info(f"Recorded meeting {meeting.id}")
        return meeting

    def import_meetings(
        self,
        source: Union[str, IO],
        user_id: Optional[str] = None,
        community_id: Optional[str] = None,
    ) -> Dict:
        loader = MeetingCSVLoader(source)
        meetings = loader.load_meetings(user_id=user_id, community_id=community_id)
        imported = self.meeting_repository.add_meetings(meetings)
        return {"imported": imported, "skipped": loader.skipped_rows}
