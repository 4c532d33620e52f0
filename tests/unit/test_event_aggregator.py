from types import SimpleNamespace

import pytest

from domain.entities.meeting import PersonDetail
from domain.exceptions import InvalidInputError
from services.aggregation.event_aggregator import EventAggregator


class TestEventAggregator:

    @pytest.fixture
    def aggregator(self):
        return EventAggregator()

    def test_empty_input_returns_empty_result(self, aggregator):
        result = aggregator.aggregate([])
        assert result.people == []
        assert result.connections == []

    def test_alice_bob_end_to_end(self, aggregator, alice_bob_meetings):
        result = aggregator.aggregate(alice_bob_meetings)

        assert [p.name for p in result.people] == ["Alice", "Bob"]
        alice, bob = result.people
        # Alice initiated a 5 (counts as 1) and received a 4
        assert alice.average_rating == pytest.approx(2.5)
        # Bob received a 5 and initiated a 4 (counts as 2)
        assert bob.average_rating == pytest.approx(3.5)
        assert alice.meeting_count == 2
        assert bob.meeting_count == 2

        assert len(result.connections) == 1
        connection = result.connections[0]
        assert connection.pair_key == "Alice-Bob"
        assert connection.meeting_count == 2
        assert connection.average_rating == pytest.approx(4.5)
        assert connection.last_meeting_at == alice_bob_meetings[1].created_at

    @pytest.mark.parametrize("rating", [1, 2, 3, 4, 5])
    def test_rating_inversion_law(self, aggregator, meeting_factory, rating):
        result = aggregator.aggregate([meeting_factory("Ivan", "Sara", rating)])
        ivan, sara = result.people

        assert sara.average_rating == rating
        assert ivan.average_rating == 6 - rating

    def test_connection_symmetry(self, aggregator, meeting_factory):
        meetings = [
            meeting_factory("A", "B", 2, minutes=0),
            meeting_factory("B", "A", 5, minutes=1),
        ]
        result = aggregator.aggregate(meetings)

        assert len(result.connections) == 1
        assert result.connections[0].meeting_count == 2
        assert result.connections[0].average_rating == pytest.approx(3.5)
        assert result.connection_for("B", "A") is result.connections[0]

    def test_aggregation_is_idempotent(self, aggregator, sample_meetings, sample_people):
        first = aggregator.aggregate(sample_meetings, sample_people)
        second = aggregator.aggregate(sample_meetings, sample_people)

        assert [p.to_dict() for p in first.people] == [p.to_dict() for p in second.people]
        assert [c.to_dict() for c in first.connections] == [
            c.to_dict() for c in second.connections
        ]

    def test_people_keep_first_seen_order_and_stats(self, aggregator, sample_meetings):
        result = aggregator.aggregate(sample_meetings)

        assert [p.name for p in result.people] == ["Alice", "Bob", "Carol", "Dave"]
        stats = {p.name: p for p in result.people}
        assert stats["Alice"].average_rating == pytest.approx(7 / 3)
        assert stats["Bob"].average_rating == pytest.approx(4.0)
        assert stats["Carol"].average_rating == pytest.approx(2.5)
        assert stats["Dave"].average_rating == pytest.approx(4.0)
        assert stats["Alice"].connection_count == 3
        assert stats["Dave"].connection_count == 1

    def test_location_first_non_empty_wins(self, aggregator, sample_meetings):
        people = {p.name: p for p in aggregator.aggregate(sample_meetings).people}

        assert people["Alice"].location == "Tokyo"
        assert people["Bob"].location == "Tokyo"
        assert people["Carol"].location == "Osaka"
        assert people["Dave"].location == "Kyoto"

    def test_detail_records_backfill_people(self, aggregator, sample_meetings):
        details = [
            PersonDetail(id="p-bob", name="Bob", company="Initech", location="Nagoya"),
            PersonDetail(id="p-bob-2", name="Bob", company="Ignored"),
        ]
        result = aggregator.aggregate(sample_meetings, details)
        bob = result.person_by_id("p-bob")

        assert bob is not None
        assert bob.company == "Initech"
        assert bob.location == "Nagoya"
        assert result.person_by_id("Alice").company is None

    def test_connections_carry_resolved_ids(self, aggregator, sample_meetings, sample_people):
        result = aggregator.aggregate(sample_meetings, sample_people)
        connection = result.connection_for("Alice", "Bob")

        assert {connection.person1_id, connection.person2_id} == {"p-alice", "p-bob"}

    def test_connection_keeps_first_meeting_orientation(self, aggregator, sample_meetings):
        connection = aggregator.aggregate(sample_meetings).connection_for("Alice", "Carol")

        assert connection.pair_key == "Alice-Carol"
        assert connection.person1_name == "Carol"
        assert connection.person2_name == "Alice"

    def test_self_meeting_counts_once_and_builds_no_connection(
        self, aggregator, meeting_factory
    ):
        result = aggregator.aggregate([meeting_factory("Solo", "Solo", 4)])

        assert len(result.people) == 1
        assert result.people[0].meeting_count == 1
        assert result.people[0].connection_count == 0
        assert result.connections == []

    def test_composite_trust_with_all_dimensions(self, aggregator, meeting_factory):
        dimensions = dict(
            trustworthiness=4,
            expertise=4,
            communication=4,
            collaboration=4,
            leadership=4,
            innovation=4,
            integrity=4,
        )
        result = aggregator.aggregate([meeting_factory("A", "B", 2, **dimensions)])

        assert result.person_by_id("B").trust_score == pytest.approx(4.0)

    def test_composite_trust_defaults_missing_dimensions(self, aggregator, meeting_factory):
        result = aggregator.aggregate([meeting_factory("A", "B", 2, trustworthiness=5)])

        assert result.person_by_id("B").trust_score == pytest.approx(0.25 * 5 + 0.75 * 3)

    def test_trust_falls_back_to_average_rating(self, aggregator, alice_bob_meetings):
        for person in aggregator.aggregate(alice_bob_meetings).people:
            assert person.trust_score == person.average_rating

    def test_community_scope(self, aggregator, meeting_factory):
        meetings = [
            meeting_factory("Alice", "Bob", 5, minutes=0, community_id="c1"),
            meeting_factory("Bob", "Carol", 3, minutes=1, community_id="c2"),
        ]
        result = aggregator.aggregate(meetings, community_id="c1")

        assert [p.name for p in result.people] == ["Alice", "Bob"]
        assert [c.pair_key for c in result.connections] == ["Alice-Bob"]
        assert result.person_by_id("Bob").meeting_count == 2

    def test_missing_name_raises(self, aggregator):
        broken = SimpleNamespace(id="m1", initiator_name="  ", subject_name="Bob", rating=3)

        with pytest.raises(InvalidInputError) as exc_info:
            aggregator.aggregate([broken])
        assert exc_info.value.field == "initiator_name"

    def test_detail_id_clashing_with_bare_name_raises(self, aggregator, meeting_factory):
        people = [PersonDetail(id="Bob", name="Robert")]

        with pytest.raises(InvalidInputError) as exc_info:
            aggregator.aggregate([meeting_factory("Bob", "Robert", 4)], people)
        assert exc_info.value.field == "id"

    def test_custom_rating_scale(self, meeting_factory):
        result = EventAggregator(rating_scale_max=10).aggregate(
            [meeting_factory("I", "S", 3)]
        )

        assert result.person_by_id("I").average_rating == 8
