#!/usr/bin/env python3

import io
import logging
from typing import Optional

from fastapi import APIRouter, File, Header, HTTPException, Query, UploadFile

from domain.entities.meeting import Meeting
from domain.exceptions import InvalidInputError
from presentation.models.network_models import (
    ImportResponse,
    LayoutOptions,
    MeetingRequest,
    MeetingResponse,
    NetworkAnalysisResponse,
    NetworkViewResponse,
    PathResponse,
    RelationshipStatsResponse,
)
from services.application.network_service import NetworkService
from services.layout.force_layout import LayoutConfig

logger = logging.getLogger(__name__)


class NetworkController:
    """Meeting network controller"""

    def __init__(self, network_service: NetworkService):
        self.network_service = network_service
        self.router = APIRouter(prefix="/network", tags=["network"])
        self._register_routes()

    def _register_routes(self):
        """Register all network routes"""

        @self.router.post("/view", response_model=NetworkViewResponse)
        async def get_network_view(
            options: Optional[LayoutOptions] = None,
            mode: str = Query("force"),
            search: str = Query(""),
            location: Optional[str] = Query(None),
            community_id: Optional[str] = Query(None),
            focus: Optional[str] = Query(None),
            user_id: Optional[str] = Header(None, alias="X-User-ID"),
        ):
            """Aggregate meetings into people and connections and lay them out"""
            try:
                config = self._layout_config(options)
                view = self.network_service.build_network_view(
                    user_id=user_id,
                    community_id=community_id,
                    search_term=search,
                    location=location,
                    focus_person_id=focus,
                    mode=mode,
                    config=config,
                )
            except InvalidInputError as e:
                raise HTTPException(status_code=400, detail=str(e))

            return NetworkViewResponse(
                people=[p.to_dict() for p in view["people"]],
                connections=[c.to_dict() for c in view["connections"]],
                positions=view["positions"],
                locations=view["locations"],
                stats=view["stats"],
            )

        @self.router.post("/meetings", response_model=MeetingResponse)
        async def record_meeting(
            request: MeetingRequest,
            user_id: Optional[str] = Header(None, alias="X-User-ID"),
        ):
            """Record a single meeting"""
            try:
                meeting = Meeting.create(user_id=user_id, **request.model_dump())
            except InvalidInputError as e:
                raise HTTPException(status_code=400, detail=str(e))

            self.network_service.record_meeting(meeting)
            return MeetingResponse(**meeting.to_dict())

        @self.router.post("/meetings/import", response_model=ImportResponse)
        async def import_meetings(
            file: UploadFile = File(...),
            community_id: Optional[str] = Query(None),
            user_id: Optional[str] = Header(None, alias="X-User-ID"),
        ):
            """Bulk import meetings from a CSV upload"""
            if not file.filename or not file.filename.endswith(".csv"):
                raise HTTPException(status_code=400, detail="Only CSV files are allowed")

            content = await file.read()
            try:
                result = self.network_service.import_meetings(
                    io.BytesIO(content), user_id=user_id, community_id=community_id
                )
            except InvalidInputError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return ImportResponse(**result)

        @self.router.post("/analysis", response_model=NetworkAnalysisResponse)
        async def analyze_network():
            """Run centrality, influence, bridge and community analysis"""
            result = self.network_service.analyze_network_structure()
            return NetworkAnalysisResponse(
                summary=result.summary,
                metrics=[m.to_dict() for m in result.person_metrics()],
                recommendations=[r.to_dict() for r in result.recommendations],
            )

        @self.router.get("/path", response_model=PathResponse)
        async def find_path(
            start: str = Query(...),
            end: str = Query(...),
            user_id: Optional[str] = Header(None, alias="X-User-ID"),
        ):
            """Shortest relationship path between two people"""
            path = self.network_service.find_path(start, end, user_id=user_id)
            return PathResponse(start_id=start, end_id=end, path=path, length=len(path) - 1)

        @self.router.get("/influence")
        async def get_influence(user_id: Optional[str] = Header(None, alias="X-User-ID")):
            """Summed relationship strength per person"""
            return {"influence": self.network_service.influence_map(user_id=user_id)}

        @self.router.get("/stats", response_model=RelationshipStatsResponse)
        async def get_stats(user_id: Optional[str] = Header(None, alias="X-User-ID")):
            return RelationshipStatsResponse(**self.network_service.network_stats(user_id=user_id))

    @staticmethod
    def _layout_config(options: Optional[LayoutOptions]) -> Optional[LayoutConfig]:
        if options is None:
            return None
        overrides = {k: v for k, v in options.model_dump().items() if v is not None}
        return LayoutConfig(**overrides) if overrides else None
