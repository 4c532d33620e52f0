import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import settings
from domain.entities.community import (
    Community,
    CommunityRecommendation,
    FraudRiskLevel,
    ProfileScores,
)
from shared.shared import (
    BUSINESS_KEYWORDS,
    CREATIVE_KEYWORDS,
    FINTECH_KEYWORDS,
    TECH_KEYWORDS,
)

logger = logging.getLogger(__name__)

MAX_MATCH_SCORE = 100


@dataclass(frozen=True)
class ScoringRule:
    """Awards ``points`` when the community name contains a keyword and the profile score clears ``threshold``"""

    keywords: Tuple[str, ...]
    score_attr: str
    threshold: float
    points: int
    reason: str

    def matches(self, community: Community, profile: ProfileScores) -> bool:
        value = getattr(profile, self.score_attr)
        if value is None or value <= self.threshold:
            return False
        return any(keyword in community.name for keyword in self.keywords)


@dataclass(frozen=True)
class ScoringProfile:
    rules: Tuple[ScoringRule, ...]
    activity_bonus: int
    activity_reason: str
    low_fraud_bonus: int = 0
    low_fraud_reason: str = ""
    min_score: int = field(default_factory=lambda: settings.COMMUNITY_MATCH_THRESHOLD)
    limit: int = field(default_factory=lambda: settings.COMMUNITY_MATCH_LIMIT)
    max_score: Optional[int] = MAX_MATCH_SCORE


SERVICE_PROFILE = ScoringProfile(
    rules=(
        ScoringRule(
            tuple(TECH_KEYWORDS), "github_score", 70, 30,
            "High GitHub score fits technical communities",
        ),
        ScoringRule(
            tuple(BUSINESS_KEYWORDS), "linkedin_score", 70, 25,
            "LinkedIn profile fits business communities",
        ),
        ScoringRule(
            tuple(CREATIVE_KEYWORDS), "portfolio_score", 60, 20,
            "Portfolio score fits creative communities",
        ),
        ScoringRule(
            tuple(FINTECH_KEYWORDS), "github_score", 50, 15,
            "Technical skills apply to fintech",
        ),
        ScoringRule(
            tuple(FINTECH_KEYWORDS), "linkedin_score", 60, 10,
            "Business experience is valuable in finance",
        ),
    ),
    activity_bonus=5,
    activity_reason="Active online presence",
    low_fraud_bonus=10,
    low_fraud_reason="Trustworthy profile",
    min_score=15,
    limit=5,
)

PANEL_PROFILE = ScoringProfile(
    rules=(
        ScoringRule(
            ("技術", "開発", "AI", "ML", "Tech", "Engineering"), "github_score", 70, 30,
            "High GitHub score suggests technical communities",
        ),
        ScoringRule(
            ("ビジネス", "起業", "Founders", "Business", "Startup"), "linkedin_score", 70, 25,
            "LinkedIn profile matches business communities",
        ),
        ScoringRule(
            ("プロダクト", "デザイン", "Product", "Design"), "portfolio_score", 60, 20,
            "Portfolio score suggests product communities",
        ),
        ScoringRule(
            ("フィンテック", "クリプト", "Fintech", "FinTech", "Crypto"), "github_score", 50, 15,
            "Technical skills could apply to fintech",
        ),
    ),
    activity_bonus=10,
    activity_reason="Active profile",
    min_score=20,
    limit=3,
    max_score=None,
)

SCORING_PROFILES = {"service": SERVICE_PROFILE, "panel": PANEL_PROFILE}


class CommunityScorer:
    """Additive rule-based matching of a scored profile against the community catalog"""

    def score(
        self,
        profile: ProfileScores,
        candidates: Sequence[Community],
        exclude_ids: Iterable[str] = (),
        scoring: ScoringProfile = SERVICE_PROFILE,
    ) -> List[CommunityRecommendation]:
        excluded = set(exclude_ids)
        recommendations = []
        for community in candidates:
            if community.id in excluded:
                continue
            recommendation = self.score_community(profile, community, scoring)
            if recommendation.match_score > scoring.min_score:
                recommendations.append(recommendation)

        recommendations.sort(key=lambda rec: rec.match_score, reverse=True)
        logger.info(
            f"Scored {len(candidates)} communities, {len(recommendations)} above {scoring.min_score}"
        )
        return recommendations[: scoring.limit]

    def score_community(
        self, profile: ProfileScores, community: Community, scoring: ScoringProfile
    ) -> CommunityRecommendation:
        score = 0
        reasons = []
        for rule in scoring.rules:
            if rule.matches(community, profile):
                score += rule.points
                reasons.append(rule.reason)

        if profile.has_any_score:
            score += scoring.activity_bonus
            reasons.append(scoring.activity_reason)

        if scoring.low_fraud_bonus and profile.fraud_risk_level == FraudRiskLevel.LOW:
            score += scoring.low_fraud_bonus
            reasons.append(scoring.low_fraud_reason)

        capped = min(score, scoring.max_score) if scoring.max_score is not None else score
        return CommunityRecommendation(community=community, match_score=capped, reasons=reasons)


def auto_join_candidate(
    recommendations: Sequence[CommunityRecommendation], threshold: int = None
) -> Optional[CommunityRecommendation]:
    threshold = settings.COMMUNITY_AUTO_JOIN_THRESHOLD if threshold is None else threshold
    if recommendations and recommendations[0].match_score > threshold:
        return recommendations[0]
    return None
