import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from domain.entities.analysis import PersonNetworkMetrics
from domain.entities.community import Community
from domain.entities.meeting import PersonDetail
from domain.entities.relationship import RelationshipTimeline
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
from services.events.change_notifier import ChangeNotifier
from shared.shared import ChangeChannel


@pytest.fixture
def notifier():
    return ChangeNotifier()


class TestRedisMeetingRepository:

    @pytest.fixture
    def repository(self, memory_cache, notifier):
        return RedisMeetingRepository(memory_cache, notifier)

    def test_list_is_newest_first_and_filtered(self, repository, meeting_factory):
        repository.add_meetings(
            [
                meeting_factory("A", "B", 3, minutes=0, user_id="u1", community_id="c1"),
                meeting_factory("B", "C", 4, minutes=5, user_id="u1"),
                meeting_factory("C", "D", 5, minutes=10, user_id="u2", community_id="c1"),
            ]
        )

        assert [m.subject_name for m in repository.list_meetings()] == ["D", "C", "B"]
        assert [m.subject_name for m in repository.list_meetings(user_id="u1")] == ["C", "B"]
        assert [m.subject_name for m in repository.list_meetings(community_id="c1")] == [
            "D",
            "B",
        ]

    def test_add_publishes_change(self, repository, notifier, meeting_factory):
        received = []
        notifier.subscribe(ChangeChannel.MEETINGS, lambda channel, payload: received.append(payload))

        repository.add_meeting(meeting_factory("A", "B", 3))

        assert [p["subject_name"] for p in received] == ["B"]

    def test_corrupt_rows_are_skipped(self, memory_cache, repository, meeting_factory):
        repository.add_meeting(meeting_factory("A", "B", 3))
        rows = json.loads(memory_cache.store["network:meetings"])
        rows.append({"id": "broken", "initiator_name": "", "subject_name": "B", "rating": 3})
        memory_cache.store["network:meetings"] = json.dumps(rows)

        assert len(repository.list_meetings()) == 1

    def test_unavailable_redis_reads_empty(self, mock_redis_cache, meeting_factory):
        mock_redis_cache.set_json_list.return_value = False
        repository = RedisMeetingRepository(mock_redis_cache)

        assert repository.list_meetings() == []
        assert repository.add_meetings([meeting_factory("A", "B", 3)]) == 0


class TestRedisPersonRepository:

    def test_save_replaces_by_id(self, memory_cache):
        repository = RedisPersonRepository(memory_cache)
        repository.save_person(PersonDetail(id="p1", name="Alice", company="Old"))
        repository.save_person(PersonDetail(id="p1", name="Alice", company="New"))
        repository.save_person(PersonDetail(id="p2", name="Bob"))

        assert [p.company for p in repository.list_people()] == ["New", None]
        assert repository.find_by_name("Bob").id == "p2"
        assert repository.find_by_name("Nobody") is None


class TestRedisRelationshipRepository:

    @pytest.fixture
    def repository(self, memory_cache, notifier):
        return RedisRelationshipRepository(memory_cache, notifier)

    def test_one_record_per_pair(self, repository, relationship_factory):
        first = repository.save_relationship(relationship_factory("a", "b", strength=1.0, id="r1"))
        second = repository.save_relationship(
            relationship_factory("b", "a", strength=3.0, id="r2")
        )

        stored = repository.list_relationships()
        assert len(stored) == 1
        assert stored[0].id == first.id == second.id
        assert stored[0].relationship_strength == 3.0

    def test_filter_by_user(self, repository, relationship_factory):
        repository.save_relationship(relationship_factory("a", "b", user_id="u1"))
        repository.save_relationship(relationship_factory("c", "d", user_id="u2"))

        assert [r.person1_id for r in repository.list_relationships("u2")] == ["c"]

    def test_timeline_newest_first_with_limit(self, repository, notifier):
        received = []
        notifier.subscribe(
            ChangeChannel.RELATIONSHIP_TIMELINE, lambda channel, payload: received.append(payload)
        )
        base = datetime(2024, 5, 1, tzinfo=timezone.utc)
        for day in range(3):
            repository.add_timeline_event(
                RelationshipTimeline(
                    id=f"e{day}",
                    person1_id="a",
                    person2_id="b",
                    relationship_type="met",
                    event_date=base + timedelta(days=day),
                )
            )

        assert [e.id for e in repository.list_timeline(limit=2)] == ["e2", "e1"]
        assert len(received) == 3

    def test_save_publishes_change(self, repository, notifier, relationship_factory):
        callback = MagicMock()
        notifier.subscribe(ChangeChannel.RELATIONSHIPS, callback)

        repository.save_relationship(relationship_factory("a", "b"))

        callback.assert_called_once()

    def test_failed_writes_are_not_published(
        self, mock_redis_cache, notifier, relationship_factory
    ):
        mock_redis_cache.set_json_list.return_value = False
        repository = RedisRelationshipRepository(mock_redis_cache, notifier)
        relationships_callback = MagicMock()
        timeline_callback = MagicMock()
        notifier.subscribe(ChangeChannel.RELATIONSHIPS, relationships_callback)
        notifier.subscribe(ChangeChannel.RELATIONSHIP_TIMELINE, timeline_callback)

        repository.save_relationship(relationship_factory("a", "b", id="r1"))
        repository.add_timeline_event(
            RelationshipTimeline(
                id="e1",
                person1_id="a",
                person2_id="b",
                relationship_type="met",
                event_date=datetime(2024, 5, 1, tzinfo=timezone.utc),
            )
        )

        relationships_callback.assert_not_called()
        timeline_callback.assert_not_called()


class TestRedisCommunityRepository:

    def test_catalog_and_membership(self, memory_cache):
        repository = RedisCommunityRepository(memory_cache)
        repository.save_community(Community(id="c1", name="AI技術"))
        repository.save_community(Community(id="c2", name="Founders"))

        assert [c.id for c in repository.list_communities()] == ["c1", "c2"]
        assert repository.add_member("u1", "c1") is True
        assert repository.add_member("u1", "c1") is False
        assert repository.list_member_community_ids("u1") == ["c1"]
        assert repository.list_member_community_ids("u2") == []


class TestRedisNetworkAnalysisRepository:

    def test_upserts_rows_per_person(self, memory_cache, notifier):
        repository = RedisNetworkAnalysisRepository(memory_cache, notifier)
        callback = MagicMock()
        notifier.subscribe(ChangeChannel.NETWORK_ANALYSIS, callback)
        earlier = datetime(2024, 5, 1, tzinfo=timezone.utc)
        later = earlier + timedelta(days=1)

        repository.save_analysis(
            [
                PersonNetworkMetrics(person_id="a", influence_score=1.0, analyzed_at=earlier),
                PersonNetworkMetrics(person_id="b", influence_score=2.0, analyzed_at=earlier),
            ]
        )
        written = repository.save_analysis(
            [PersonNetworkMetrics(person_id="a", influence_score=5.0, analyzed_at=later)]
        )

        rows = repository.list_analysis()
        assert written == 1
        assert [r.person_id for r in rows] == ["a", "b"]
        assert rows[0].influence_score == 5.0
        assert callback.call_count == 2
