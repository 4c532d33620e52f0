#!/usr/bin/env python3

import logging
from typing import List

from domain.entities.community import Community
from domain.exceptions import InvalidInputError
from domain.repositories.community_repository import CommunityRepository
from services.redis.redis_cache import RedisCache

logger = logging.getLogger(__name__)


class RedisCommunityRepository(CommunityRepository):
    """Redis implementation of the community catalog"""

    def __init__(self, cache: RedisCache):
        self.cache = cache

    def _get_communities_key(self) -> str:
        return "network:communities"

    def _get_members_key(self, user_id: str) -> str:
        return f"network:user:{user_id}:communities"

    def list_communities(self) -> List[Community]:
        communities = []
        for data in self.cache.get_json_list(self._get_communities_key()):
            try:
                communities.append(Community.from_dict(data))
            except InvalidInputError as e:
                logger.warning(f"Skipping stored community {data.get('id')}: {e}")
        return communities

    def save_community(self, community: Community) -> None:
        stored = [
            c
            for c in self.cache.get_json_list(self._get_communities_key())
            if c.get("id") != community.id
        ]
        stored.append(community.to_dict())
        self.cache.set_json_list(self._get_communities_key(), stored)

    def list_member_community_ids(self, user_id: str) -> List[str]:
        return [str(c) for c in self.cache.get_json_list(self._get_members_key(user_id))]

    def add_member(self, user_id: str, community_id: str) -> bool:
        member_ids = self.list_member_community_ids(user_id)
        if community_id in member_ids:
            return False
        member_ids.append(community_id)
        return self.cache.set_json_list(self._get_members_key(user_id), member_ids)
