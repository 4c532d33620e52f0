#!/usr/bin/env python3

import logging
from dataclasses import replace
from typing import List, Optional

from domain.entities.relationship import Relationship, RelationshipTimeline
from domain.exceptions import InvalidInputError
from domain.repositories.relationship_repository import RelationshipRepository
from services.events.change_notifier import ChangeNotifier
from services.redis.redis_cache import RedisCache
from shared.shared import ChangeChannel

logger = logging.getLogger(__name__)


class RedisRelationshipRepository(RelationshipRepository):
    """Redis implementation of the relationship and timeline store"""

    def __init__(self, cache: RedisCache, notifier: ChangeNotifier = None):
        self.cache = cache
        self.notifier = notifier

    def _get_relationships_key(self) -> str:
        return "network:relationships"

    def _get_timeline_key(self) -> str:
        return "network:relationship_timeline"

    def _load_relationships(self) -> List[Relationship]:
        relationships = []
        for data in self.cache.get_json_list(self._get_relationships_key()):
            try:
                relationships.append(Relationship.from_dict(data))
            except InvalidInputError as e:
                logger.warning(f"Skipping stored relationship {data.get('id')}: {e}")
        return relationships

    def list_relationships(self, user_id: Optional[str] = None) -> List[Relationship]:
        return [
            rel
            for rel in self._load_relationships()
            if user_id is None or rel.user_id == user_id
        ]

    def save_relationship(self, relationship: Relationship) -> Relationship:
        relationships = self._load_relationships()
        existing = next(
            (
                i
                for i, rel in enumerate(relationships)
                if rel.connects(relationship.person1_id, relationship.person2_id)
            ),
            None,
        )
        if existing is None:
            relationships.append(relationship)
        else:
            # the pair keeps its existing record id
            relationship = replace(relationship, id=relationships[existing].id)
            relationships[existing] = relationship

        if not self.cache.set_json_list(
            self._get_relationships_key(), [rel.to_dict() for rel in relationships]
        ):
            logger.error(f"Failed to store relationship {relationship.id}")
            return relationship

        if self.notifier:
            self.notifier.publish(ChangeChannel.RELATIONSHIPS, relationship.to_dict())
        return relationship

    def list_timeline(
        self, user_id: Optional[str] = None, limit: int = 50
    ) -> List[RelationshipTimeline]:
        events = []
        for data in self.cache.get_json_list(self._get_timeline_key()):
            try:
                event = RelationshipTimeline.from_dict(data)
            except InvalidInputError as e:
                logger.warning(f"Skipping stored timeline event {data.get('id')}: {e}")
                continue
            if user_id is None or event.user_id == user_id:
                events.append(event)
        events.sort(key=lambda e: e.event_date, reverse=True)
        return events[:limit]

    def add_timeline_event(self, event: RelationshipTimeline) -> None:
        stored = self.cache.get_json_list(self._get_timeline_key())
        stored.append(event.to_dict())
        if not self.cache.set_json_list(self._get_timeline_key(), stored):
            logger.error(f"Failed to store timeline event {event.id}")
            return

        if self.notifier:
            self.notifier.publish(ChangeChannel.RELATIONSHIP_TIMELINE, event.to_dict())
