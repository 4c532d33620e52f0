#!/usr/bin/env python3

from infrastructure.repositories.redis_analysis_repository import (
    RedisNetworkAnalysisRepository,
)
from infrastructure.repositories.redis_community_repository import RedisCommunityRepository
from infrastructure.repositories.redis_meeting_repository import (
    RedisMeetingRepository,
    RedisPersonRepository,
)
from infrastructure.repositories.redis_relationship_repository import (
    RedisRelationshipRepository,
)
from presentation.controllers.community_controller import CommunityController
from presentation.controllers.network_controller import NetworkController
from services.application.network_service import NetworkService
from services.events.change_notifier import ChangeNotifier
from services.redis.redis_cache import RedisCache


class Container:
    """Dependency injection container"""

    def __init__(self, cache: RedisCache = None):
        self.cache = cache or RedisCache()
        self.notifier = ChangeNotifier()
        self._repositories = {}
        self._services = {}
        self._controllers = {}
        self._setup_dependencies()

    def _setup_dependencies(self):
        """Setup all dependencies with proper injection"""

        # Repositories
        self._repositories["meeting"] = RedisMeetingRepository(self.cache, self.notifier)
        self._repositories["person"] = RedisPersonRepository(self.cache)
        self._repositories["relationship"] = RedisRelationshipRepository(
            self.cache, self.notifier
        )
        self._repositories["community"] = RedisCommunityRepository(self.cache)
        self._repositories["analysis"] = RedisNetworkAnalysisRepository(
            self.cache, self.notifier
        )

        # Application Services
        self._services["network"] = NetworkService(
            meeting_repository=self._repositories["meeting"],
            person_repository=self._repositories["person"],
            relationship_repository=self._repositories["relationship"],
            community_repository=self._repositories["community"],
            analysis_repository=self._repositories["analysis"],
        )

        # Controllers
        self._controllers["network"] = NetworkController(self._services["network"])
        self._controllers["community"] = CommunityController(self._services["network"])

    def get_repository(self, name: str):
        """Get repository by name"""
        return self._repositories.get(name)

    def get_all_routers(self):
        """Get all FastAPI routers from controllers"""
        routers = []
        for controller in self._controllers.values():
            if hasattr(controller, "router"):
                routers.append(controller.router)
        return routers


# Global container instance
container = Container()
