#!/usr/bin/env python3

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from domain.entities.community import Community
from domain.entities.meeting import PersonDetail
from infrastructure.container import Container

HEADERS = {"X-User-ID": "u1"}


@pytest.fixture
def container(memory_cache):
    return Container(cache=memory_cache)


@pytest.fixture
def client(container):
    app = FastAPI()
    for router in container.get_all_routers():
        app.include_router(router)
    return TestClient(app)


class TestNetworkApi:

    def test_record_meetings_and_view_network(self, client):
        for payload in (
            {"initiator_name": "Alice", "subject_name": "Bob", "rating": 5, "location": "Tokyo"},
            {"initiator_name": "Bob", "subject_name": "Alice", "rating": 4},
        ):
            response = client.post("/network/meetings", json=payload, headers=HEADERS)
            assert response.status_code == 200

        response = client.post("/network/view?mode=circular", headers=HEADERS)
        assert response.status_code == 200
        body = response.json()

        ratings = {p["name"]: p["average_rating"] for p in body["people"]}
        assert ratings == {"Alice": 2.5, "Bob": 3.5}
        assert body["connections"][0]["average_rating"] == 4.5
        assert body["locations"] == ["Tokyo"]
        assert body["stats"]["total_meetings"] == 2
        assert set(body["positions"]) == {"Alice", "Bob"}

    def test_force_view_with_layout_overrides(self, client):
        client.post(
            "/network/meetings",
            json={"initiator_name": "A", "subject_name": "B", "rating": 3},
            headers=HEADERS,
        )

        response = client.post(
            "/network/view", json={"iterations": 10, "seed": 3}, headers=HEADERS
        )

        assert response.status_code == 200
        assert set(response.json()["positions"]) == {"A", "B"}

    def test_invalid_meeting_is_rejected(self, client):
        response = client.post(
            "/network/meetings",
            json={"initiator_name": "Alice", "subject_name": "Bob", "rating": 9},
            headers=HEADERS,
        )

        assert response.status_code == 400

    def test_unknown_layout_mode_is_rejected(self, client):
        response = client.post("/network/view?mode=spiral", headers=HEADERS)

        assert response.status_code == 400

    def test_csv_import(self, client):
        content = b"initiator_name,subject_name,rating\nAlice,Bob,4\nCarol,,2\n"

        response = client.post(
            "/network/meetings/import",
            files={"file": ("meetings.csv", content, "text/csv")},
            headers=HEADERS,
        )

        assert response.status_code == 200
        assert response.json() == {"imported": 1, "skipped": 1}

    def test_csv_import_rejects_other_files(self, client):
        response = client.post(
            "/network/meetings/import",
            files={"file": ("meetings.txt", b"x", "text/plain")},
            headers=HEADERS,
        )

        assert response.status_code == 400

    def test_relationship_endpoints(self, client, container, relationship_factory):
        repository = container.get_repository("relationship")
        for relationship in (
            relationship_factory("A", "B", strength=2.0),
            relationship_factory("B", "C", strength=3.0),
        ):
            repository.save_relationship(relationship)

        path = client.get("/network/path", params={"start": "A", "end": "C"}).json()
        assert path["path"] == ["A", "B", "C"]
        assert path["length"] == 2

        missing = client.get("/network/path", params={"start": "A", "end": "Z"}).json()
        assert missing["path"] == []
        assert missing["length"] == -1

        influence = client.get("/network/influence").json()["influence"]
        assert influence == {"A": 2.0, "B": 5.0, "C": 3.0}

        stats = client.get("/network/stats").json()
        assert stats["total_relationships"] == 2
        assert stats["strong_relationships"] == 1

    def test_analysis_is_persisted(self, client, container, relationship_factory):
        people = container.get_repository("person")
        for person_id in ("a", "b", "c"):
            people.save_person(PersonDetail(id=person_id, name=person_id.upper()))
        relationships = container.get_repository("relationship")
        relationships.save_relationship(relationship_factory("a", "b"))
        relationships.save_relationship(relationship_factory("b", "c"))

        response = client.post("/network/analysis")

        assert response.status_code == 200
        body = response.json()
        assert body["summary"]["total_nodes"] == 3
        assert body["summary"]["total_edges"] == 2
        stored = container.get_repository("analysis").list_analysis()
        assert {row.person_id for row in stored} == {"a", "b", "c"}


class TestCommunityApi:

    def test_suggestions_and_auto_join(self, client, container):
        communities = container.get_repository("community")
        communities.save_community(Community(id="c1", name="AI Startup Founders"))
        communities.save_community(Community(id="c2", name="Book Club"))

        response = client.post(
            "/communities/suggestions",
            json={
                "github_score": 90,
                "linkedin_score": 90,
                "fraud_risk_level": "low",
                "auto_join": True,
            },
            headers=HEADERS,
        )

        assert response.status_code == 200
        body = response.json()
        assert [r["community"]["id"] for r in body["recommendations"]] == ["c1"]
        assert body["auto_joined"]["id"] == "c1"
        assert communities.list_member_community_ids("u1") == ["c1"]

    def test_invalid_scores_are_rejected(self, client):
        response = client.post(
            "/communities/suggestions", json={"github_score": 150}, headers=HEADERS
        )

        assert response.status_code == 400

    def test_user_header_required(self, client):
        response = client.post("/communities/suggestions", json={})

        assert response.status_code == 422


class TestContainer:

    def test_routers_and_repositories_are_wired(self, container):
        prefixes = [router.prefix for router in container.get_all_routers()]

        assert prefixes == ["/network", "/communities"]
        assert container.get_repository("meeting").cache is container.cache
        assert container.get_repository("unknown") is None


class TestHealth:

    def test_health_reports_redis(self, container):
        import main

        with patch.object(main, "container", container):
            response = TestClient(main.app).get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
