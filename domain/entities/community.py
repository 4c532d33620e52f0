#!/usr/bin/env python3

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from domain.entities.meeting import require_name
from domain.exceptions import InvalidInputError


class FraudRiskLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Community:
    """Catalog entry for a product community (not a graph cluster)"""

    id: str
    name: str
    description: str = ""
    member_count: int = 0
    is_public: bool = True

    def __post_init__(self):
        require_name(self.id, "id")
        require_name(self.name, "name")

    @classmethod
    def from_dict(cls, data: Dict) -> "Community":
        return cls(
            id=require_name(data.get("id"), "id"),
            name=require_name(data.get("name"), "name"),
            description=data.get("description") or "",
            member_count=int(data.get("member_count") or 0),
            is_public=bool(data.get("is_public", True)),
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "member_count": self.member_count,
            "is_public": self.is_public,
        }


@dataclass(frozen=True)
class ProfileScores:
    """Already-computed 0-100 profile scores from the external scoring oracle"""

    github_score: Optional[float] = None
    linkedin_score: Optional[float] = None
    portfolio_score: Optional[float] = None
    fraud_risk_level: Optional[FraudRiskLevel] = None

    def __post_init__(self):
        for name in ("github_score", "linkedin_score", "portfolio_score"):
            value = getattr(self, name)
            if value is not None and not 0 <= value <= 100:
                raise InvalidInputError(
                    f"'{name}' must be between 0 and 100, got {value}", field=name
                )

    @property
    def has_any_score(self) -> bool:
        return any(
            score is not None
            for score in (self.github_score, self.linkedin_score, self.portfolio_score)
        )

    @classmethod
    def from_dict(cls, data: Dict) -> "ProfileScores":
        risk = data.get("fraud_risk_level")
        try:
            fraud_risk = FraudRiskLevel(risk) if risk else None
        except ValueError as e:
            raise InvalidInputError(
                f"Invalid fraud_risk_level: {risk!r}", field="fraud_risk_level"
            ) from e
        return cls(
            github_score=data.get("github_score"),
            linkedin_score=data.get("linkedin_score"),
            portfolio_score=data.get("portfolio_score"),
            fraud_risk_level=fraud_risk,
        )


@dataclass
class CommunityRecommendation:
    community: Community
    match_score: int
    reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "community": self.community.to_dict(),
            "match_score": self.match_score,
            "reasons": list(self.reasons),
        }
