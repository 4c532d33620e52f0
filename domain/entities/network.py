#!/usr/bin/env python3

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from domain.entities.meeting import Meeting


@dataclass
class Person:
    """Meeting-derived person, materialized fresh on every aggregation pass"""

    id: str
    name: str
    company: Optional[str] = None
    position: Optional[str] = None
    location: Optional[str] = None
    avatar_url: Optional[str] = None
    average_rating: float = 0.0
    trust_score: float = 0.0
    meeting_count: int = 0
    connection_count: int = 0
    meetings: List[Meeting] = field(default_factory=list)

    def to_dict(self, include_meetings: bool = False) -> Dict:
        data = {
            "id": self.id,
            "name": self.name,
            "company": self.company,
            "position": self.position,
            "location": self.location,
            "avatar_url": self.avatar_url,
            "average_rating": self.average_rating,
            "trust_score": self.trust_score,
            "meeting_count": self.meeting_count,
            "connection_count": self.connection_count,
        }
        if include_meetings:
            data["meetings"] = [meeting.to_dict() for meeting in self.meetings]
        return data


@dataclass
class Connection:
    """Undirected aggregate of every meeting between one pair of names"""

    pair_key: str
    person1_name: str
    person2_name: str
    person1_id: str
    person2_id: str
    meeting_count: int = 0
    average_rating: float = 0.0
    last_meeting_at: Optional[datetime] = None

    @property
    def endpoints(self) -> Tuple[str, str]:
        return self.person1_id, self.person2_id

    def other(self, person_id: str) -> Optional[str]:
        if person_id == self.person1_id:
            return self.person2_id
        if person_id == self.person2_id:
            return self.person1_id
        return None

    def to_dict(self) -> Dict:
        return {
            "pair_key": self.pair_key,
            "person1_id": self.person1_id,
            "person2_id": self.person2_id,
            "person1_name": self.person1_name,
            "person2_name": self.person2_name,
            "meeting_count": self.meeting_count,
            "average_rating": self.average_rating,
            "last_meeting_at": (
                self.last_meeting_at.isoformat() if self.last_meeting_at else None
            ),
        }


@dataclass
class AggregationResult:
    people: List[Person]
    connections: List[Connection]

    def person_by_id(self, person_id: str) -> Optional[Person]:
        return next((p for p in self.people if p.id == person_id), None)

    def connection_for(self, name_a: str, name_b: str) -> Optional[Connection]:
        pair = sorted((name_a, name_b))
        return next(
            (
                c
                for c in self.connections
                if sorted((c.person1_name, c.person2_name)) == pair
            ),
            None,
        )


def make_pair_key(name_a: str, name_b: str) -> str:
    """Order-independent key for a pair of names"""
    return "-".join(sorted((name_a, name_b)))
