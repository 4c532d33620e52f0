#!/usr/bin/env python3

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class MeetingRequest(BaseModel):
    """Request model for recording a meeting"""

    initiator_name: str
    subject_name: str
    rating: int = Field(..., description="Rating from 1 to the configured scale maximum")
    location: str = ""
    community_id: Optional[str] = None
    trustworthiness: Optional[int] = None
    expertise: Optional[int] = None
    communication: Optional[int] = None
    collaboration: Optional[int] = None
    leadership: Optional[int] = None
    innovation: Optional[int] = None
    integrity: Optional[int] = None
    detailed_feedback: Optional[str] = None


class MeetingResponse(BaseModel):
    id: str
    initiator_name: str
    subject_name: str
    rating: int
    created_at: str
    location: str = ""
    community_id: Optional[str] = None


class LayoutOptions(BaseModel):
    """Optional overrides of the force simulation parameters"""

    link_distance: Optional[float] = None
    charge_strength: Optional[float] = None
    collide_radius: Optional[float] = None
    iterations: Optional[int] = None
    seed: Optional[int] = None
    convergence_threshold: Optional[float] = None


class NetworkStats(BaseModel):
    total_people: int
    total_connections: int
    average_trust: float
    total_meetings: int


class NetworkViewResponse(BaseModel):
    """Response model for the aggregated and laid out meeting network"""

    people: List[Dict]
    connections: List[Dict]
    positions: Dict[str, Dict[str, float]]
    locations: List[str]
    stats: NetworkStats


class NetworkAnalysisResponse(BaseModel):
    summary: Dict[str, int]
    metrics: List[Dict]
    recommendations: List[Dict]


class PathResponse(BaseModel):
    start_id: str
    end_id: str
    path: List[str]
    length: int = Field(..., description="Number of hops, -1 when unreachable")


class RelationshipStatsResponse(BaseModel):
    total_relationships: int
    avg_trust_score: float
    strong_relationships: int
    recent_activity: int


class ImportResponse(BaseModel):
    imported: int
    skipped: int


class ProfileScoresRequest(BaseModel):
    """Already-computed 0-100 profile scores"""

    github_score: Optional[float] = None
    linkedin_score: Optional[float] = None
    portfolio_score: Optional[float] = None
    fraud_risk_level: Optional[str] = None
    profile_name: str = "service"
    auto_join: bool = False


class CommunitySuggestionsResponse(BaseModel):
    user_id: str
    recommendations: List[Dict]
    auto_joined: Optional[Dict] = None
