#!/usr/bin/env python3
"""
test the JSON API.

run with: pytest test_web.py -v
"""

import time

import pytest
from fastapi.testclient import TestClient

from facnet.providers import InMemoryProvider
from facnet.session import ExplorerSession
from web.app import create_app
from test_providers import FailingProvider


@pytest.fixture
def client(abc_roster):
    session = ExplorerSession(InMemoryProvider(abc_roster))
    session.load()
    return TestClient(create_app(session))


# =============================================================================
# Status
# =============================================================================

class TestStatus:
    """test health reporting and unavailable states."""

    def test_health_ready(self, client):
        body = client.get("/api/health").json()

        assert body["status"] == "ready"
        assert body["faculty_count"] == 3
        assert body["topic_count"] == 21

    def test_loading_is_503(self, abc_roster):
        # no startup event without a context manager, so the session stays loading
        client = TestClient(create_app(ExplorerSession(InMemoryProvider(abc_roster))))

        assert client.get("/api/health").json()["status"] == "loading"
        response = client.get("/api/topics")
        assert response.status_code == 503
        assert response.json()["detail"] == "roster is loading"

    def test_collaborator_error_is_503(self):
        session = ExplorerSession(FailingProvider())
        session.load()
        client = TestClient(create_app(session))

        response = client.post("/api/search", json={"topics": ["climate"]})
        assert response.status_code == 503
        assert "store unreachable" in response.json()["detail"]
        assert client.get("/api/health").json()["status"] == "error"

    def test_startup_loads_session(self, abc_roster):
        session = ExplorerSession(InMemoryProvider(abc_roster))
        with TestClient(create_app(session)):
            pass
        # loading runs in the background; it finishes quickly for in-memory rows
        for _ in range(100):
            if session.is_ready:
                break
            time.sleep(0.01)
        assert session.is_ready


# =============================================================================
# Queries
# =============================================================================

class TestQueries:
    """test the read endpoints."""

    def test_topics(self, client):
        topics = {t["topic_key"]: t for t in client.get("/api/topics").json()}

        assert len(topics) == 21
        assert topics["climate"]["faculty_count"] == 2
        assert topics["climate"]["category"] == "environmental"
        assert topics["climate"]["coverage"] == "sparse"

    def test_search(self, client):
        body = client.post("/api/search", json={"topics": ["climate", "energy"]}).json()

        assert [r["first_name"] for r in body["results"]] == ["Alice", "Carol", "Bob"]
        assert body["summary"]["total"] == 3
        assert body["summary"]["average_match_percent"] == 57

    def test_search_min_relevance(self, client):
        body = client.post(
            "/api/search", json={"topics": ["climate", "energy"], "min_relevance": 3}
        ).json()
        assert [r["first_name"] for r in body["results"]] == ["Alice"]

    def test_search_too_many_topics(self, client):
        response = client.post(
            "/api/search", json={"topics": ["climate", "energy", "water", "food"]}
        )
        assert response.status_code == 422

    def test_search_duplicate_topics(self, client):
        response = client.post(
            "/api/search", json={"topics": ["climate", "climate", "energy", "energy"]}
        )
        assert response.status_code == 200

        body = response.json()
        assert body["topics"] == ["climate", "energy"]
        assert [r["first_name"] for r in body["results"]] == ["Alice", "Carol", "Bob"]

    def test_search_empty_selection(self, client):
        body = client.post("/api/search", json={"topics": []}).json()
        assert body["results"] == []

    def test_relationships(self, client):
        rels = client.get("/api/relationships").json()

        pair = next(r for r in rels if {r["source"], r["target"]} == {"climate", "energy"})
        assert pair["type"] == "weak"
        assert 0 <= pair["strength"] <= 1


# =============================================================================
# Networks
# =============================================================================

class TestNetworkEndpoints:
    """test the three network views."""

    def test_topic_network(self, client):
        body = client.get("/api/network/topics").json()

        assert body["metadata"]["node_count"] == 21
        sizes = {n["id"]: n["size"] for n in body["nodes"]}
        assert sizes["climate"] == 2

    def test_topic_network_threshold(self, client):
        body = client.get("/api/network/topics", params={"threshold": 5}).json()
        sizes = {n["id"]: n["size"] for n in body["nodes"]}
        assert sizes["climate"] == 1

    def test_threshold_out_of_range(self, client):
        assert client.get("/api/network/topics", params={"threshold": 9}).status_code == 422

    def test_cluster(self, client):
        body = client.get("/api/network/clusters/energy").json()
        assert {n["id"] for n in body["nodes"]} == {"alice@example.edu", "carol@example.edu"}

    def test_empty_cluster(self, client):
        body = client.get("/api/network/clusters/food").json()
        assert body["nodes"] == [] and body["edges"] == []

    def test_ego(self, client):
        body = client.get("/api/network/ego/alice@example.edu").json()

        assert body["nodes"][0]["id"] == "alice@example.edu"
        assert body["nodes"][0]["color"] == "#1f2937"
        for edge in body["edges"]:
            assert edge["source"] == "alice@example.edu"

    def test_ego_unknown(self, client):
        response = client.get("/api/network/ego/nobody@example.edu")

        assert response.status_code == 200
        body = response.json()
        assert body["nodes"] == [] and body["edges"] == []
        assert body["metadata"] == {"node_count": 0, "edge_count": 0}
