#!/usr/bin/env python3

from abc import ABC, abstractmethod
from typing import List, Optional

from domain.entities.relationship import Relationship, RelationshipTimeline


class RelationshipRepository(ABC):
    """Relationship and timeline store interface"""

    @abstractmethod
    def list_relationships(self, user_id: Optional[str] = None) -> List[Relationship]:
        pass

    @abstractmethod
    def save_relationship(self, relationship: Relationship) -> Relationship:
        """Upsert; one record per unordered person pair"""
        pass

    @abstractmethod
    def list_timeline(
        self, user_id: Optional[str] = None, limit: int = 50
    ) -> List[RelationshipTimeline]:
        """Timeline events, newest first"""
        pass

    @abstractmethod
    def add_timeline_event(self, event: RelationshipTimeline) -> None:
        pass
