#!/usr/bin/env python3

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from domain.entities.meeting import Meeting, PersonDetail


class MeetingRepository(ABC):
    """Meeting store interface"""

    @abstractmethod
    def list_meetings(
        self, user_id: Optional[str] = None, community_id: Optional[str] = None
    ) -> List[Meeting]:
        """List meetings, newest first"""
        pass

    @abstractmethod
    def add_meeting(self, meeting: Meeting) -> None:
        pass

    @abstractmethod
    def add_meetings(self, meetings: Sequence[Meeting]) -> int:
        """Bulk insert, returns the number stored"""
        pass


class PersonRepository(ABC):
    """Person detail store interface"""

    @abstractmethod
    def list_people(self) -> List[PersonDetail]:
        pass

    @abstractmethod
    def save_person(self, detail: PersonDetail) -> None:
        """Save or replace a person detail by id"""
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[PersonDetail]:
        """First detail whose name matches exactly"""
        pass
