"""
network data processor - derives the three graph views from the roster.

levels:
1. topic network: all topics, edges where faculty share qualifying expertise
2. faculty clusters: faculty qualifying in one topic, linked by collaboration
3. ego network: one faculty member, their topics and top collaborators

"qualifying" means expertise >= the processor's threshold (default 2). this
is stricter than the search's > 0 predicate.

usage:
    processor = NetworkDataProcessor(roster, topics)
    level1 = processor.generate_topic_network()
    level2 = processor.generate_faculty_cluster_network("climate")
    level3 = processor.generate_faculty_ego_network("alice@example.edu")
"""

import logging
from dataclasses import dataclass, field, replace
from itertools import combinations
from typing import Dict, List, Optional, Sequence

from .network import (
    NetworkData, NetworkNode, NetworkEdge,
    CENTRAL_NODE_COLOR, topic_color, school_color
)
from ..analysis.topic_counts import TopicFacultyCounts
from ..core.config import NetworkConfig
from ..core.models import Faculty, ResearchTopic, NodeType, EdgeType, is_topic_key

logger = logging.getLogger("facnet.network")


@dataclass
class CollaborationScore:
    """
    collaboration potential between two faculty members.
    rewards deep mutual expertise (min term) and complementary depth
    (half the gap).
    """
    faculty1: Faculty
    faculty2: Faculty
    score: float = 0.0
    shared_topics: List[str] = field(default_factory=list)


@dataclass
class TopicConnection:
    """raw topic pair statistics at the processor threshold."""
    topic1: str
    topic2: str
    shared_faculty: int
    strength: float      # bottleneck-weighted sum


class NetworkDataProcessor:
    """
    builds network views from a faculty roster and topic catalogue.

    the only mutable state is expertise_threshold. requests with their own
    threshold should pass it per call or use with_threshold(), so a shared
    processor is never reconfigured mid-request.
    """

    def __init__(
        self,
        faculty: Sequence[Faculty],
        topics: Sequence[ResearchTopic],
        config: Optional[NetworkConfig] = None
    ):
        self.faculty = list(faculty)
        self.topics = list(topics)
        self.config = config or NetworkConfig()
        self.expertise_threshold = self.config.expertise_threshold

        self._topics_by_key: Dict[str, ResearchTopic] = {}
        for topic in self.topics:
            self._topics_by_key.setdefault(topic.topic_key, topic)

    def set_expertise_threshold(self, threshold: int):
        self.expertise_threshold = threshold

    def with_threshold(self, threshold: int) -> "NetworkDataProcessor":
        """independent processor over the same data at another threshold."""
        return NetworkDataProcessor(
            self.faculty,
            self.topics,
            replace(self.config, expertise_threshold=threshold)
        )

    def topic_keys(self) -> List[str]:
        return list(self._topics_by_key)

    def _threshold(self, threshold: Optional[int]) -> int:
        return self.expertise_threshold if threshold is None else threshold

    # collaboration

    def collaboration_score(
        self,
        faculty1: Faculty,
        faculty2: Faculty,
        threshold: Optional[int] = None
    ) -> CollaborationScore:
        """score over topics where both meet the threshold, rounded to 2 places."""
        threshold = self._threshold(threshold)
        total = 0.0
        shared = []

        for topic_key in self.topic_keys():
            e1 = faculty1.expertise_in(topic_key)
            e2 = faculty2.expertise_in(topic_key)
            if e1 >= threshold and e2 >= threshold:
                total += min(e1, e2) + abs(e1 - e2) * 0.5
                shared.append(topic_key)

        return CollaborationScore(
            faculty1=faculty1,
            faculty2=faculty2,
            score=round(total, 2),
            shared_topics=shared
        )

    def all_collaboration_scores(
        self,
        min_score: float = 1.0,
        threshold: Optional[int] = None
    ) -> List[CollaborationScore]:
        """every faculty pair scoring at least min_score, best first."""
        threshold = self._threshold(threshold)
        scores = [
            score for score in (
                self.collaboration_score(a, b, threshold)
                for a, b in combinations(self.faculty, 2)
            )
            if score.score >= min_score
        ]
        scores.sort(key=lambda s: s.score, reverse=True)
        return scores

    # topic statistics

    def topic_connections(self, threshold: Optional[int] = None) -> List[TopicConnection]:
        """topic pairs with at least one shared qualifying faculty member."""
        threshold = self._threshold(threshold)
        connections = []

        for topic1, topic2 in combinations(self.topic_keys(), 2):
            shared = 0
            strength = 0
            for member in self.faculty:
                e1 = member.expertise_in(topic1)
                e2 = member.expertise_in(topic2)
                if e1 >= threshold and e2 >= threshold:
                    shared += 1
                    strength += min(e1, e2)

            if shared > 0:
                connections.append(TopicConnection(
                    topic1=topic1,
                    topic2=topic2,
                    shared_faculty=shared,
                    strength=round(strength, 2)
                ))

        connections.sort(key=lambda c: c.strength, reverse=True)
        return connections

    def topic_faculty_counts(self, threshold: Optional[int] = None) -> TopicFacultyCounts:
        return TopicFacultyCounts.from_roster(
            self.faculty,
            topic_keys=self.topic_keys(),
            min_score=self._threshold(threshold)
        )

    # level 1

    def generate_topic_network(self, threshold: Optional[int] = None) -> NetworkData:
        """all topics as nodes; edges for any shared qualifying faculty."""
        threshold = self._threshold(threshold)
        counts = self.topic_faculty_counts(threshold)
        connections = self.topic_connections(threshold)

        nodes = [
            NetworkNode(
                id=topic.topic_key,
                type=NodeType.TOPIC,
                name=topic.display_name,
                size=counts.get(topic.topic_key),
                color=topic_color(topic.category.value),
                data=topic
            )
            for topic in self._topics_by_key.values()
        ]

        edges = [
            NetworkEdge(
                source=c.topic1,
                target=c.topic2,
                weight=c.strength,
                type=EdgeType.TOPIC_TOPIC
            )
            for c in connections
            if c.shared_faculty >= 1
        ]

        logger.info(
            f"[network] topic network: {len(nodes)} nodes, {len(edges)} edges "
            f"(threshold={threshold}, faculty={len(self.faculty)})"
        )
        return NetworkData(nodes=nodes, edges=edges)

    # level 2

    def generate_faculty_cluster_network(
        self,
        topic_key: str,
        threshold: Optional[int] = None
    ) -> NetworkData:
        """faculty qualifying in one topic, linked by collaboration score."""
        threshold = self._threshold(threshold)
        if not is_topic_key(topic_key):
            logger.debug(f"[network] unknown topic {topic_key!r}, empty cluster")
            return NetworkData()

        relevant = self._unique_by_email(
            f for f in self.faculty if f.expertise_in(topic_key) >= threshold
        )
        if not relevant:
            logger.debug(f"[network] no faculty qualify for {topic_key!r} at threshold {threshold}")
            return NetworkData()

        nodes = [
            NetworkNode(
                id=member.email,
                type=NodeType.FACULTY,
                name=member.full_name,
                size=member.expertise_in(topic_key),
                color=school_color(member.school),
                data=member
            )
            for member in relevant
        ]

        edges = []
        for a, b in combinations(relevant, 2):
            collaboration = self.collaboration_score(a, b, threshold)
            if collaboration.score >= self.config.min_collaboration_score:
                edges.append(NetworkEdge(
                    source=a.email,
                    target=b.email,
                    weight=collaboration.score,
                    type=EdgeType.FACULTY_FACULTY
                ))

        logger.info(
            f"[network] cluster network for {topic_key}: {len(nodes)} nodes, {len(edges)} edges"
        )
        return NetworkData(nodes=nodes, edges=edges)

    # level 3

    def generate_faculty_ego_network(
        self,
        faculty_email: str,
        threshold: Optional[int] = None
    ) -> NetworkData:
        """star graph: the faculty member, their topics, their top collaborators."""
        threshold = self._threshold(threshold)

        central = self.find_faculty(faculty_email)
        if central is None:
            logger.debug(f"[network] no faculty with email {faculty_email!r}")
            return NetworkData()

        nodes = [NetworkNode(
            id=central.email,
            type=NodeType.FACULTY,
            name=central.full_name,
            size=self.config.central_node_size,
            color=CENTRAL_NODE_COLOR,
            data=central
        )]
        edges = []

        for topic_key, topic in self._topics_by_key.items():
            expertise = central.expertise_in(topic_key)
            if expertise < threshold:
                continue
            nodes.append(NetworkNode(
                id=topic_key,
                type=NodeType.TOPIC,
                name=topic.display_name,
                size=expertise,
                color=topic_color(topic.category.value),
                data=topic
            ))
            edges.append(NetworkEdge(
                source=central.email,
                target=topic_key,
                weight=expertise,
                type=EdgeType.FACULTY_TOPIC
            ))

        others = self._unique_by_email(
            f for f in self.faculty if f.email != central.email
        )
        collaborations = [
            c for c in (self.collaboration_score(central, other, threshold) for other in others)
            if c.score >= self.config.min_collaboration_score
        ]
        collaborations.sort(key=lambda c: c.score, reverse=True)

        for collaboration in collaborations[:self.config.max_collaborators]:
            other = collaboration.faculty2
            nodes.append(NetworkNode(
                id=other.email,
                type=NodeType.FACULTY,
                name=other.full_name,
                size=collaboration.score,
                color=school_color(other.school),
                data=other
            ))
            edges.append(NetworkEdge(
                source=central.email,
                target=other.email,
                weight=collaboration.score,
                type=EdgeType.FACULTY_FACULTY
            ))

        logger.info(
            f"[network] ego network for {central.email}: {len(nodes)} nodes, {len(edges)} edges"
        )
        return NetworkData(nodes=nodes, edges=edges)

    # helpers

    def find_faculty(self, email: str) -> Optional[Faculty]:
        if not email:
            return None
        for member in self.faculty:
            if member.email == email:
                return member
        return None

    @staticmethod
    def _unique_by_email(faculty) -> List[Faculty]:
        """first record wins; node ids must be unique."""
        seen = set()
        unique = []
        for member in faculty:
            if member.email in seen:
                continue
            seen.add(member.email)
            unique.append(member)
        return unique
