import os
import sys
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from domain.entities.community import Community  # noqa: E402
from domain.entities.meeting import Meeting, PersonDetail  # noqa: E402
from domain.entities.relationship import Relationship  # noqa: E402
from services.redis.redis_cache import RedisCache  # noqa: E402

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryRedisCache(RedisCache):
    """RedisCache backed by a dict, for repository and API tests"""

    def __init__(self):
        self.redis_url = "memory://"
        self.redis_client = None
        self.store = {}

    def ping(self) -> bool:
        return True

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value, ttl=None):
        self.store[key] = value
        return True

    def delete(self, *keys):
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    def get_info(self):
        return {"status": "connected", "keys": len(self.store)}


@pytest.fixture(autouse=True)
def mock_settings():
    """Pin tunables so tests do not depend on the environment"""
    with patch("settings.REDIS_URL", "redis://localhost:6379/0"), \
         patch("settings.RATING_SCALE_MAX", 5), \
         patch("settings.LAYOUT_ITERATIONS", 200), \
         patch("settings.LAYOUT_SEED", 42), \
         patch("settings.COMMUNITY_DETECTOR", "shared_neighbors"):
        yield


@pytest.fixture
def mock_redis_cache():
    """Provides a mock Redis cache for tests"""
    cache = MagicMock()
    cache.get.return_value = None
    cache.set.return_value = True
    cache.delete.return_value = 1
    cache.get_json_list.return_value = []
    cache.set_json_list.return_value = True
    return cache


@pytest.fixture
def memory_cache():
    return InMemoryRedisCache()


def make_meeting(initiator, subject, rating, minutes=0, **kwargs):
    return Meeting(
        id=kwargs.pop("id", f"{initiator}-{subject}-{minutes}"),
        initiator_name=initiator,
        subject_name=subject,
        rating=rating,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        **kwargs,
    )


def make_relationship(person1, person2, strength=1.0, trust=3.0, meetings=1, **kwargs):
    return Relationship(
        id=kwargs.pop("id", f"rel-{person1}-{person2}"),
        person1_id=person1,
        person2_id=person2,
        relationship_strength=strength,
        trust_score=trust,
        total_meetings=meetings,
        **kwargs,
    )


@pytest.fixture
def alice_bob_meetings():
    return [
        make_meeting("Alice", "Bob", 5, minutes=0),
        make_meeting("Bob", "Alice", 4, minutes=10),
    ]


@pytest.fixture
def sample_meetings():
    return [
        make_meeting("Alice", "Bob", 5, minutes=0, location="Tokyo"),
        make_meeting("Bob", "Carol", 3, minutes=5, location="Osaka"),
        make_meeting("Carol", "Alice", 4, minutes=10),
        make_meeting("Dave", "Alice", 2, minutes=15, location="Kyoto"),
    ]


@pytest.fixture
def sample_people():
    return [
        PersonDetail(id="p-alice", name="Alice", company="Acme", location="Tokyo"),
        PersonDetail(id="p-bob", name="Bob", company="Initech"),
        PersonDetail(id="p-carol", name="Carol", position="CTO"),
        PersonDetail(id="p-dave", name="Dave"),
    ]


@pytest.fixture
def chain_relationships():
    """A-B-C-D path plus an isolated pair Y-Z"""
    return [
        make_relationship("A", "B", strength=2.0),
        make_relationship("B", "C", strength=1.5),
        make_relationship("C", "D", strength=3.0),
        make_relationship("Y", "Z", strength=1.0),
    ]


@pytest.fixture
def sample_communities():
    return [
        Community(id="c-tech", name="AI技術コミュニティ", member_count=120),
        Community(id="c-biz", name="Startup Founders", member_count=80),
        Community(id="c-fin", name="フィンテック研究会", member_count=40),
        Community(id="c-misc", name="Book Club", member_count=10),
    ]


@pytest.fixture
def meeting_factory():
    return make_meeting


@pytest.fixture
def relationship_factory():
    return make_relationship
