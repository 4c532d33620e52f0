from enum import Enum, unique

TRUST_DIMENSIONS = [
    "trustworthiness",
    "expertise",
    "communication",
    "collaboration",
    "leadership",
    "innovation",
    "integrity",
]


@unique
class TrustDimension(Enum):
    TRUSTWORTHINESS = "trustworthiness"
    EXPERTISE = "expertise"
    COMMUNICATION = "communication"
    COLLABORATION = "collaboration"
    LEADERSHIP = "leadership"
    INNOVATION = "innovation"
    INTEGRITY = "integrity"


# Innovation is recorded on meetings but does not contribute to the composite.
TRUST_DIMENSION_WEIGHTS = {
    TrustDimension.TRUSTWORTHINESS.value: 0.25,
    TrustDimension.INTEGRITY.value: 0.20,
    TrustDimension.EXPERTISE.value: 0.15,
    TrustDimension.COMMUNICATION.value: 0.15,
    TrustDimension.COLLABORATION.value: 0.15,
    TrustDimension.LEADERSHIP.value: 0.10,
}

NEUTRAL_DIMENSION_SCORE = 3


@unique
class LayoutMode(Enum):
    FORCE = "force"
    CIRCULAR = "circular"
    HIERARCHICAL = "hierarchical"
    COMMUNITY = "community"


@unique
class SuggestionReason(Enum):
    SAME_COMMUNITY = "same community"
    HIGH_INFLUENCE = "high influence"
    NETWORK_BRIDGE = "network bridges"


@unique
class ChangeChannel(Enum):
    MEETINGS = "meetings"
    RELATIONSHIPS = "relationships"
    RELATIONSHIP_TIMELINE = "relationship_timeline"
    NETWORK_ANALYSIS = "network_analysis"


INFLUENCE_WEIGHTS = {
    "degree": 0.4,
    "trust": 0.3,
    "meetings": 0.3,
}

MEETING_SATURATION = 10

SAME_COMMUNITY_SLOTS = 3
HIGH_INFLUENCE_SLOTS = 2
BRIDGE_SLOTS = 2

STRONG_RELATIONSHIP_THRESHOLD = 2
RECENT_ACTIVITY_DAYS = 30

ISOLATED_CLUSTER = "isolated"
DEFAULT_COMMUNITY_GROUP = "other"

TECH_KEYWORDS = ["技術", "開発", "AI", "ML", "プロダクト", "Tech", "Engineering", "Developer"]
BUSINESS_KEYWORDS = ["ビジネス", "起業", "Founders", "経営", "Business", "Startup", "Management"]
CREATIVE_KEYWORDS = ["プロダクト", "デザイン", "クリエイティブ", "Product", "Design", "Creative"]
FINTECH_KEYWORDS = ["フィンテック", "クリプト", "金融", "Fintech", "FinTech", "Crypto", "Finance"]
