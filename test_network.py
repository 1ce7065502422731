#!/usr/bin/env python3
"""
test network data processor and graph export.

run with: pytest test_network.py -v
"""

import json

import pytest

from facnet.core.config import NetworkConfig
from facnet.core.models import NodeType, EdgeType
from facnet.visualization import (
    NetworkDataProcessor, NetworkData, GraphExporter,
    topic_color, school_color
)
from facnet.visualization.network import CENTRAL_NODE_COLOR, SCHOOL_COLORS
from conftest import build_faculty


@pytest.fixture
def processor(topics):
    roster = [
        build_faculty("alice@example.edu", first="Alice", school="School of Environment", climate=5, energy=2),
        build_faculty("bob@example.edu", first="Bob", school="School of Engineering and Applied Science", climate=3, energy=2),
        build_faculty("carol@example.edu", first="Carol", school="School of Law", climate=2, law_policy=4),
        build_faculty("dan@example.edu", first="Dan", school="School of Law", water=1, law_policy=5),
    ]
    return NetworkDataProcessor(roster, topics)


# =============================================================================
# Collaboration Score
# =============================================================================

class TestCollaborationScore:
    """test the pairwise collaboration score."""

    def test_min_plus_half_difference(self, processor):
        alice, bob = processor.faculty[0], processor.faculty[1]
        result = processor.collaboration_score(alice, bob)

        # climate: 3 + 0.5 * 2, energy: 2 + 0
        assert result.score == 6.0
        assert result.shared_topics == ["climate", "energy"]

    def test_commutative(self, processor):
        for a in processor.faculty:
            for b in processor.faculty:
                ab = processor.collaboration_score(a, b)
                ba = processor.collaboration_score(b, a)
                assert ab.score == ba.score
                assert set(ab.shared_topics) == set(ba.shared_topics)

    def test_threshold_gates_topics(self, processor):
        carol, dan = processor.faculty[2], processor.faculty[3]

        assert processor.collaboration_score(carol, dan).score == 4.5
        assert processor.collaboration_score(carol, dan, threshold=5).score == 0

    def test_all_scores_sorted(self, processor):
        scores = processor.all_collaboration_scores(min_score=1)
        values = [s.score for s in scores]

        assert values == sorted(values, reverse=True)
        assert all(v >= 1 for v in values)
        assert values[0] == 6.0


# =============================================================================
# Topic Network
# =============================================================================

class TestTopicNetwork:
    """test the level 1 topic network."""

    def test_single_shared_faculty_edge(self, topics):
        roster = [build_faculty("x@example.edu", climate=3, energy=3)]
        data = NetworkDataProcessor(roster, topics).generate_topic_network()

        assert len(data.nodes) == 21
        assert len(data.edges) == 1
        edge = data.edges[0]
        assert {edge.source, edge.target} == {"climate", "energy"}
        assert edge.weight == 3
        assert edge.type == EdgeType.TOPIC_TOPIC

    def test_node_size_and_color(self, processor):
        data = processor.generate_topic_network()

        climate = data.get_node("climate")
        law = data.get_node("law_policy")
        health = data.get_node("health_wellbeing")

        # dan has water=1, below the default threshold
        assert climate.size == 3
        assert data.get_node("water").size == 0
        assert climate.color == "#10b981"
        assert law.color == "#8b5cf6"
        assert health.color == "#f59e0b"
        assert climate.type == NodeType.TOPIC

    def test_threshold_override_does_not_mutate(self, processor):
        strict = processor.generate_topic_network(threshold=5)

        assert strict.get_node("climate").size == 1
        assert processor.expertise_threshold == 2
        assert processor.generate_topic_network().get_node("climate").size == 3

    def test_set_threshold(self, processor):
        processor.set_expertise_threshold(4)
        assert processor.generate_topic_network().get_node("law_policy").size == 2

        other = processor.with_threshold(1)
        assert other.generate_topic_network().get_node("water").size == 1
        assert processor.expertise_threshold == 4

    def test_empty_roster(self, topics):
        data = NetworkDataProcessor([], topics).generate_topic_network()

        assert len(data.nodes) == 21
        assert all(n.size == 0 for n in data.nodes)
        assert data.edges == []

    def test_no_topics(self, processor):
        data = NetworkDataProcessor(processor.faculty, []).generate_topic_network()
        assert data.is_empty

    def test_no_dangling_edges(self, processor):
        data = processor.generate_topic_network()
        assert data.dangling_edges() == []

    def test_topic_connections(self, processor):
        connections = processor.topic_connections()
        top = connections[0]

        assert {top.topic1, top.topic2} == {"climate", "energy"}
        assert top.shared_faculty == 2
        assert top.strength == 4


# =============================================================================
# Faculty Cluster Network
# =============================================================================

class TestClusterNetwork:
    """test the level 2 faculty cluster network."""

    def test_cluster_for_topic(self, processor):
        data = processor.generate_faculty_cluster_network("climate")

        assert [n.id for n in data.nodes] == [
            "alice@example.edu", "bob@example.edu", "carol@example.edu"
        ]
        assert data.get_node("alice@example.edu").size == 5
        assert data.get_node("carol@example.edu").color == SCHOOL_COLORS["School of Law"]

        # alice-bob 6.0, alice-carol climate only 3.5, bob-carol 2.5
        weights = {e.key: e.weight for e in data.edges}
        assert weights[("alice@example.edu", "bob@example.edu")] == 6.0
        assert weights[("alice@example.edu", "carol@example.edu")] == 3.5
        assert weights[("bob@example.edu", "carol@example.edu")] == 2.5
        assert all(e.type == EdgeType.FACULTY_FACULTY for e in data.edges)

    def test_edges_need_min_score(self, topics):
        roster = [
            build_faculty("a@example.edu", climate=2),
            build_faculty("b@example.edu", climate=2),
        ]
        default = NetworkDataProcessor(roster, topics).generate_faculty_cluster_network("climate")
        assert [e.weight for e in default.edges] == [2.0]

        strict = NetworkDataProcessor(roster, topics, NetworkConfig(min_collaboration_score=2.5))
        data = strict.generate_faculty_cluster_network("climate")

        assert len(data.nodes) == 2
        assert data.edges == []

    def test_empty_cluster(self, processor):
        data = processor.generate_faculty_cluster_network("food")

        assert data.is_empty
        assert data.to_dict() == {"nodes": [], "edges": []}

    def test_unknown_topic_at_zero_threshold(self, processor):
        data = processor.generate_faculty_cluster_network("astrology", threshold=0)
        assert data.is_empty

        # every member qualifies for a real topic at threshold 0
        assert len(processor.generate_faculty_cluster_network("food", threshold=0).nodes) == 4

    def test_duplicate_emails_collapse(self, topics):
        roster = [
            build_faculty("a@example.edu", first="First", climate=3),
            build_faculty("a@example.edu", first="Second", climate=4),
        ]
        data = NetworkDataProcessor(roster, topics).generate_faculty_cluster_network("climate")

        assert len(data.nodes) == 1
        assert data.nodes[0].name.startswith("First")


# =============================================================================
# Ego Network
# =============================================================================

class TestEgoNetwork:
    """test the level 3 ego network."""

    def test_unknown_email(self, processor):
        data = processor.generate_faculty_ego_network("nobody@example.edu")
        assert data.to_dict() == {"nodes": [], "edges": []}

    def test_star_graph(self, processor):
        data = processor.generate_faculty_ego_network("alice@example.edu")
        central = "alice@example.edu"

        centrals = [n for n in data.nodes if n.id == central]
        assert len(centrals) == 1
        assert centrals[0].size == 10
        assert centrals[0].color == CENTRAL_NODE_COLOR

        for edge in data.edges:
            assert central in (edge.source, edge.target)
        assert data.dangling_edges() == []

    def test_topic_and_collaborator_nodes(self, processor):
        data = processor.generate_faculty_ego_network("alice@example.edu")

        topic_edges = [e for e in data.edges if e.type == EdgeType.FACULTY_TOPIC]
        faculty_edges = [e for e in data.edges if e.type == EdgeType.FACULTY_FACULTY]

        assert {e.target: e.weight for e in topic_edges} == {"climate": 5, "energy": 2}
        assert [e.target for e in faculty_edges] == ["bob@example.edu", "carol@example.edu"]
        assert data.get_node("bob@example.edu").size == 6.0

    def test_top_ten_collaborators(self, topics):
        roster = [build_faculty("hub@example.edu", climate=5)]
        roster += [build_faculty(f"peer{i:02d}@example.edu", climate=3) for i in range(12)]
        data = NetworkDataProcessor(roster, topics).generate_faculty_ego_network("hub@example.edu")

        faculty_nodes = [n for n in data.nodes if n.type == NodeType.FACULTY]
        assert len(faculty_nodes) == 11
        assert len(data.nodes) == 12


# =============================================================================
# Colors and Export
# =============================================================================

class TestExport:
    """test color rules and the graph exporter."""

    def test_colors(self):
        assert topic_color("social") == "#f59e0b"
        assert topic_color("Environmental Issues") == "#6b7280"
        assert topic_color(None) == "#6b7280"
        assert school_color("Nowhere") == school_color(None)

    def test_to_json(self, processor, tmp_path):
        data = processor.generate_faculty_cluster_network("climate")
        path = tmp_path / "cluster.json"
        result = GraphExporter().to_json(data, str(path))

        assert result["metadata"] == {"node_count": 3, "edge_count": 3}
        assert json.loads(path.read_text()) == result
        assert result["nodes"][0]["data"]["email"] == "alice@example.edu"

    def test_to_graphml(self, processor, tmp_path):
        path = tmp_path / "topics.graphml"
        GraphExporter().to_graphml(processor.generate_topic_network(), str(path))

        content = path.read_text()
        assert "<graphml" in content
        assert "climate" in content

    def test_summarize(self, processor):
        data = processor.generate_faculty_cluster_network("climate")
        summary = GraphExporter().summarize(data)

        assert summary.node_count == 3
        assert summary.edge_count == 3
        assert summary.total_weight == 12.0
        assert summary.most_connected[0] == "alice@example.edu"
        for community in summary.communities:
            assert len(community) > 1

    def test_summarize_empty(self):
        summary = GraphExporter().summarize(NetworkData())
        assert summary.node_count == 0
        assert summary.most_connected == []
        assert summary.communities == []
