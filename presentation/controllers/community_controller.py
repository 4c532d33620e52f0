#!/usr/bin/env python3

from fastapi import APIRouter, Header, HTTPException

from domain.entities.community import ProfileScores
from domain.exceptions import InvalidInputError
from presentation.models.network_models import (
    CommunitySuggestionsResponse,
    ProfileScoresRequest,
)
from services.application.network_service import NetworkService


class CommunityController:
    """Community recommendation controller"""

    def __init__(self, network_service: NetworkService):
        self.network_service = network_service
        self.router = APIRouter(prefix="/communities", tags=["communities"])
        self._register_routes()

    def _register_routes(self):
        @self.router.post("/suggestions", response_model=CommunitySuggestionsResponse)
        async def suggest_communities(
            request: ProfileScoresRequest,
            user_id: str = Header(..., alias="X-User-ID"),
        ):
            """Score the community catalog against already-computed profile scores"""
            if not user_id:
                raise HTTPException(status_code=400, detail="X-User-ID header required")

            try:
                profile = ProfileScores.from_dict(request.model_dump())
                result = self.network_service.suggest_communities(
                    user_id,
                    profile,
                    profile_name=request.profile_name,
                    auto_join=request.auto_join,
                )
            except InvalidInputError as e:
                raise HTTPException(status_code=400, detail=str(e))

            joined = result["auto_joined"]
            return CommunitySuggestionsResponse(
                user_id=user_id,
                recommendations=[r.to_dict() for r in result["recommendations"]],
                auto_joined=joined.to_dict() if joined else None,
            )
