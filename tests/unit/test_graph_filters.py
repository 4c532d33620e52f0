import pytest

from domain.entities.network import Connection, Person
from services.aggregation.graph_filters import (
    available_locations,
    connections_within,
    filter_people,
    focus_people,
)


@pytest.fixture
def people():
    return [
        Person(id="alice", name="Alice", location="Tokyo"),
        Person(id="bob", name="Bob", location="Osaka"),
        Person(id="carol", name="Carol"),
        Person(id="dave", name="Dave", location="Tokyo Bay"),
    ]


@pytest.fixture
def connections():
    return [
        Connection(pair_key="Alice|Bob", person1_name="Alice", person2_name="Bob",
                   person1_id="alice", person2_id="bob"),
        Connection(pair_key="Bob|Carol", person1_name="Bob", person2_name="Carol",
                   person1_id="bob", person2_id="carol"),
    ]


class TestGraphFilters:

    def test_search_is_case_insensitive(self, people):
        assert [p.id for p in filter_people(people, "AL")] == ["alice"]

    def test_location_is_substring(self, people):
        assert [p.id for p in filter_people(people, location="tokyo")] == ["alice", "dave"]

    def test_empty_filters_keep_everyone(self, people):
        assert len(filter_people(people)) == 4

    def test_locations_in_first_seen_order(self, people):
        assert available_locations(people) == ["Tokyo", "Osaka", "Tokyo Bay"]

    def test_focus_includes_connections_and_relationships(
        self, people, connections, relationship_factory
    ):
        focused = focus_people(
            people, connections, [relationship_factory("dave", "alice")], "alice"
        )

        assert [p.id for p in focused] == ["alice", "bob", "dave"]

    def test_focus_on_unknown_person_is_a_no_op(self, people, connections):
        assert focus_people(people, connections, [], "zed") == people

    def test_connections_within_drops_hidden_endpoints(self, people, connections):
        visible = connections_within(people[:2], connections)

        assert [c.pair_key for c in visible] == ["Alice|Bob"]
