#!/usr/bin/env python3

import logging
from typing import List, Optional, Sequence

from domain.entities.meeting import Meeting, PersonDetail
from domain.exceptions import InvalidInputError
from domain.repositories.meeting_repository import MeetingRepository, PersonRepository
from services.events.change_notifier import ChangeNotifier
from services.redis.redis_cache import RedisCache
from shared.shared import ChangeChannel

logger = logging.getLogger(__name__)


class RedisMeetingRepository(MeetingRepository):
    """Redis implementation of the meeting store"""

    def __init__(self, cache: RedisCache, notifier: ChangeNotifier = None):
        self.cache = cache
        self.notifier = notifier

    def _get_meetings_key(self) -> str:
        return "network:meetings"

    def _load(self) -> List[Meeting]:
        meetings = []
        for data in self.cache.get_json_list(self._get_meetings_key()):
            try:
                meetings.append(Meeting.from_dict(data))
            except InvalidInputError as e:
                logger.warning(f"Skipping stored meeting {data.get('id')}: {e}")
        return meetings

    def list_meetings(
        self, user_id: Optional[str] = None, community_id: Optional[str] = None
    ) -> List[Meeting]:
        meetings = [
            m
            for m in self._load()
            if (user_id is None or m.user_id == user_id)
            and (community_id is None or m.community_id == community_id)
        ]
        meetings.sort(key=lambda m: m.created_at, reverse=True)
        return meetings

    def add_meeting(self, meeting: Meeting) -> None:
        self.add_meetings([meeting])

    def add_meetings(self, meetings: Sequence[Meeting]) -> int:
        if not meetings:
            return 0
        stored = self.cache.get_json_list(self._get_meetings_key())
        stored.extend(m.to_dict() for m in meetings)
        if not self.cache.set_json_list(self._get_meetings_key(), stored):
            logger.error(f"Failed to store {len(meetings)} meetings")
            return 0

        if self.notifier:
            for meeting in meetings:
                self.notifier.publish(ChangeChannel.MEETINGS, meeting.to_dict())
        return len(meetings)


class RedisPersonRepository(PersonRepository):
    """Redis implementation of the person detail store"""

    def __init__(self, cache: RedisCache):
        self.cache = cache

    def _get_people_key(self) -> str:
        return "network:people"

    def list_people(self) -> List[PersonDetail]:
        people = []
        for data in self.cache.get_json_list(self._get_people_key()):
            try:
                people.append(PersonDetail.from_dict(data))
            except InvalidInputError as e:
                logger.warning(f"Skipping stored person {data.get('id')}: {e}")
        return people

    def save_person(self, detail: PersonDetail) -> None:
        stored = [
            p for p in self.cache.get_json_list(self._get_people_key()) if p.get("id") != detail.id
        ]
        stored.append(detail.to_dict())
        self.cache.set_json_list(self._get_people_key(), stored)

    def find_by_name(self, name: str) -> Optional[PersonDetail]:
        return next((p for p in self.list_people() if p.name == name), None)
