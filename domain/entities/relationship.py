#!/usr/bin/env python3

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional
from uuid import uuid4

from domain.entities.meeting import parse_timestamp, require_name
from domain.exceptions import InvalidInputError


class RelationshipStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"


class TimelineEventType(Enum):
    MET = "met"
    COLLABORATED = "collaborated"
    MENTORED = "mentored"
    FRIEND = "friend"
    COLLEAGUE = "colleague"


def _parse_enum(enum_cls, value, default, field_name: str):
    if value is None or value == "":
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as e:
        raise InvalidInputError(
            f"Invalid {field_name}: {value!r}", field=field_name
        ) from e


@dataclass(frozen=True)
class Relationship:
    """Persisted symmetric link between two people; one record per unordered pair"""

    id: str
    person1_id: str
    person2_id: str
    relationship_strength: float = 0.0
    trust_score: float = 0.0
    total_meetings: int = 0
    last_interaction_at: Optional[datetime] = None
    status: RelationshipStatus = RelationshipStatus.ACTIVE
    is_mutual: bool = False
    user_id: Optional[str] = None

    def __post_init__(self):
        require_name(self.person1_id, "person1_id")
        require_name(self.person2_id, "person2_id")
        object.__setattr__(
            self, "last_interaction_at", parse_timestamp(self.last_interaction_at)
        )
        object.__setattr__(
            self,
            "status",
            _parse_enum(RelationshipStatus, self.status, RelationshipStatus.ACTIVE, "status"),
        )

    def connects(self, person_a: str, person_b: str) -> bool:
        return {self.person1_id, self.person2_id} == {person_a, person_b}

    def involves(self, person_id: str) -> bool:
        return person_id in (self.person1_id, self.person2_id)

    def other(self, person_id: str) -> str:
        return self.person2_id if self.person1_id == person_id else self.person1_id

    @classmethod
    def from_dict(cls, data: Dict) -> "Relationship":
        return cls(
            id=str(data.get("id") or uuid4()),
            person1_id=require_name(data.get("person1_id"), "person1_id"),
            person2_id=require_name(data.get("person2_id"), "person2_id"),
            relationship_strength=float(data.get("relationship_strength") or 0.0),
            trust_score=float(data.get("trust_score") or 0.0),
            total_meetings=int(data.get("total_meetings") or 0),
            last_interaction_at=parse_timestamp(
                data.get("last_interaction_at", data.get("last_interaction"))
            ),
            status=_parse_enum(
                RelationshipStatus,
                data.get("status", data.get("relationship_status")),
                RelationshipStatus.ACTIVE,
                "status",
            ),
            is_mutual=bool(data.get("is_mutual") or False),
            user_id=data.get("user_id"),
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "person1_id": self.person1_id,
            "person2_id": self.person2_id,
            "relationship_strength": self.relationship_strength,
            "trust_score": self.trust_score,
            "total_meetings": self.total_meetings,
            "last_interaction_at": (
                self.last_interaction_at.isoformat() if self.last_interaction_at else None
            ),
            "status": self.status.value,
            "is_mutual": self.is_mutual,
            "user_id": self.user_id,
        }


@dataclass(frozen=True)
class RelationshipTimeline:
    """One dated event in the history of a relationship"""

    id: str
    person1_id: str
    person2_id: str
    relationship_type: TimelineEventType
    event_date: datetime
    trust_change: float = 0.0
    description: str = ""
    meeting_id: Optional[str] = None
    user_id: Optional[str] = None

    def __post_init__(self):
        require_name(self.person1_id, "person1_id")
        require_name(self.person2_id, "person2_id")
        object.__setattr__(self, "event_date", parse_timestamp(self.event_date))
        object.__setattr__(
            self,
            "relationship_type",
            _parse_enum(
                TimelineEventType,
                self.relationship_type,
                TimelineEventType.MET,
                "relationship_type",
            ),
        )

    def involves(self, person_id: str) -> bool:
        return person_id in (self.person1_id, self.person2_id)

    @classmethod
    def from_dict(cls, data: Dict) -> "RelationshipTimeline":
        event_date = parse_timestamp(data.get("event_date"))
        if event_date is None:
            raise InvalidInputError("Missing required field 'event_date'", field="event_date")
        return cls(
            id=str(data.get("id") or uuid4()),
            person1_id=require_name(data.get("person1_id"), "person1_id"),
            person2_id=require_name(data.get("person2_id"), "person2_id"),
            relationship_type=_parse_enum(
                TimelineEventType,
                data.get("relationship_type"),
                TimelineEventType.MET,
                "relationship_type",
            ),
            event_date=event_date,
            trust_change=float(data.get("trust_change") or 0.0),
            description=data.get("description") or "",
            meeting_id=data.get("meeting_id"),
            user_id=data.get("user_id"),
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "person1_id": self.person1_id,
            "person2_id": self.person2_id,
            "relationship_type": self.relationship_type.value,
            "event_date": self.event_date.isoformat(),
            "trust_change": self.trust_change,
            "description": self.description,
            "meeting_id": self.meeting_id,
            "user_id": self.user_id,
        }
