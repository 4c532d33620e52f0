#!/usr/bin/env python3

from abc import ABC, abstractmethod
from typing import List

from domain.entities.community import Community


class CommunityRepository(ABC):
    """Community catalog interface"""

    @abstractmethod
    def list_communities(self) -> List[Community]:
        pass

    @abstractmethod
    def save_community(self, community: Community) -> None:
        pass

    @abstractmethod
    def list_member_community_ids(self, user_id: str) -> List[str]:
        """Ids of the communities the user already belongs to"""
        pass

    @abstractmethod
    def add_member(self, user_id: str, community_id: str) -> bool:
        pass
