#!/usr/bin/env python3

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional
from uuid import uuid4

import settings
from domain.exceptions import InvalidInputError
from shared.shared import TRUST_DIMENSIONS


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 string (or pass through a datetime) as UTC-aware; None stays None"""
    if value is None or value == "":
        return None
    if not isinstance(value, datetime):
        try:
            value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidInputError(
                f"Invalid timestamp: {value!r}", field="timestamp"
            ) from e
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def require_name(value, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidInputError(f"Missing required field '{field_name}'", field=field_name)
    return str(value)


def validate_rating(value, field_name: str = "rating", required: bool = True) -> Optional[int]:
    if value is None:
        if required:
            raise InvalidInputError(f"Missing required field '{field_name}'", field=field_name)
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidInputError(
            f"'{field_name}' must be an integer, got {value!r}", field=field_name
        )
    try:
        rating = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(
            f"'{field_name}' must be an integer, got {value!r}", field=field_name
        ) from e
    if not 1 <= rating <= settings.RATING_SCALE_MAX:
        raise InvalidInputError(
            f"'{field_name}' must be between 1 and {settings.RATING_SCALE_MAX}, got {rating}",
            field=field_name,
        )
    return rating


@dataclass(frozen=True)
class Meeting:
    """One directed encounter: the initiator rates the subject"""

    id: str
    initiator_name: str
    subject_name: str
    rating: int
    created_at: datetime
    location: str = ""
    user_id: Optional[str] = None
    community_id: Optional[str] = None
    trustworthiness: Optional[int] = None
    expertise: Optional[int] = None
    communication: Optional[int] = None
    collaboration: Optional[int] = None
    leadership: Optional[int] = None
    innovation: Optional[int] = None
    integrity: Optional[int] = None
    detailed_feedback: Optional[str] = None

    def __post_init__(self):
        require_name(self.initiator_name, "initiator_name")
        require_name(self.subject_name, "subject_name")
        object.__setattr__(self, "rating", validate_rating(self.rating))
        object.__setattr__(self, "created_at", parse_timestamp(self.created_at))
        for dimension in TRUST_DIMENSIONS:
            object.__setattr__(
                self,
                dimension,
                validate_rating(getattr(self, dimension), dimension, required=False),
            )

    @classmethod
    def create(
        cls,
        initiator_name: str,
        subject_name: str,
        rating: int,
        location: str = "",
        **kwargs,
    ) -> "Meeting":
        """Create a new meeting stamped with the current time"""
        return cls(
            id=str(uuid4()),
            initiator_name=initiator_name,
            subject_name=subject_name,
            rating=rating,
            location=location or "",
            created_at=datetime.now(timezone.utc),
            **kwargs,
        )

    @property
    def has_dimension_scores(self) -> bool:
        return bool(self.trustworthiness)

    def involves(self, name: str) -> bool:
        return self.initiator_name == name or self.subject_name == name

    def counterpart_of(self, name: str) -> str:
        return self.subject_name if self.initiator_name == name else self.initiator_name

    @classmethod
    def from_dict(cls, data: Dict) -> "Meeting":
        """Build from a stored row; accepts both the store's my_name/other_name and our field names"""
        initiator = data.get("initiator_name", data.get("my_name"))
        subject = data.get("subject_name", data.get("other_name"))
        kwargs = {
            dimension: validate_rating(data.get(dimension), dimension, required=False)
            for dimension in TRUST_DIMENSIONS
        }
        return cls(
            id=str(data.get("id") or uuid4()),
            initiator_name=require_name(initiator, "initiator_name"),
            subject_name=require_name(subject, "subject_name"),
            rating=validate_rating(data.get("rating")),
            created_at=parse_timestamp(data.get("created_at"))
            or datetime.now(timezone.utc),
            location=data.get("location") or "",
            user_id=data.get("user_id"),
            community_id=data.get("community_id"),
            detailed_feedback=data.get("detailed_feedback"),
            **kwargs,
        )

    def to_dict(self) -> Dict:
        data = {
            "id": self.id,
            "initiator_name": self.initiator_name,
            "subject_name": self.subject_name,
            "rating": self.rating,
            "created_at": self.created_at.isoformat(),
            "location": self.location,
            "user_id": self.user_id,
            "community_id": self.community_id,
            "detailed_feedback": self.detailed_feedback,
        }
        for dimension in TRUST_DIMENSIONS:
            data[dimension] = getattr(self, dimension)
        return data


@dataclass(frozen=True)
class PersonDetail:
    """Richer person record sourced from the person store, joined to meetings by name"""

    id: str
    name: str
    company: Optional[str] = None
    position: Optional[str] = None
    location: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_username: Optional[str] = None
    skills: tuple = field(default_factory=tuple)

    def __post_init__(self):
        require_name(self.id, "id")
        require_name(self.name, "name")

    @classmethod
    def from_dict(cls, data: Dict) -> "PersonDetail":
        return cls(
            id=require_name(data.get("id"), "id"),
            name=require_name(data.get("name"), "name"),
            company=data.get("company"),
            position=data.get("position"),
            location=data.get("location"),
            avatar_url=data.get("avatar_url"),
            bio=data.get("bio"),
            linkedin_url=data.get("linkedin_url"),
            github_username=data.get("github_username"),
            skills=tuple(data.get("skills") or ()),
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "company": self.company,
            "position": self.position,
            "location": self.location,
            "avatar_url": self.avatar_url,
            "bio": self.bio,
            "linkedin_url": self.linkedin_url,
            "github_username": self.github_username,
            "skills": list(self.skills),
        }
