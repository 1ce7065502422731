"""
explorer session - one loaded roster and the queries over it.

the session owns the load lifecycle (LOADING -> READY | ERROR). every
query works on the in-memory roster; until it is READY they return
empty results instead of raising.

usage:
    session = ExplorerSession(SnapshotProvider("roster.json"))
    session.load()
    if session.is_ready:
        results = session.search(["climate", "energy"])
"""

import logging
import threading
from enum import Enum
from typing import Iterable, List, Optional

from .agents.roster_loader import LoadResult, Roster, RosterLoader
from .analysis.topic_counts import TopicFacultyCounts, TopicScoreStats, topic_score_stats
from .analysis.topic_relationships import TopicRelationship, TopicRelationshipCalculator
from .core.config import FacnetConfig
from .core.models import Faculty, FacultyWithRelevance, ResearchTopic
from .providers.base import FacultyProvider
from .scoring.search import FacultySearch, SearchFilters
from .visualization.processor import NetworkDataProcessor

logger = logging.getLogger("facnet.session")


class SessionStatus(Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ExplorerSession:
    """roster state shared by the CLI and the web app."""

    def __init__(self, provider: FacultyProvider, config: Optional[FacnetConfig] = None):
        self.provider = provider
        self.config = config or FacnetConfig.default()

        self.status = SessionStatus.LOADING
        self.error: Optional[str] = None
        self.roster = Roster()

        self._lock = threading.Lock()
        self._search = FacultySearch(self.config.search)
        self._relationships: Optional[List[TopicRelationship]] = None
        self._processor: Optional[NetworkDataProcessor] = None

    @property
    def is_ready(self) -> bool:
        return self.status == SessionStatus.READY

    @property
    def faculty(self) -> List[Faculty]:
        return self.roster.faculty if self.is_ready else []

    @property
    def topics(self) -> List[ResearchTopic]:
        return self.roster.topics if self.is_ready else []

    def load(self) -> LoadResult:
        """fetch the roster; on failure the previous data is discarded."""
        with self._lock:
            self.status = SessionStatus.LOADING
            self.error = None

            result = RosterLoader(self.provider).run()

            self._relationships = None
            self._processor = None
            if result.ok:
                self.roster = result.roster
                self.status = SessionStatus.READY
                logger.info(
                    f"[session] ready: {len(self.roster.faculty)} faculty, "
                    f"{len(self.roster.topics)} topics"
                )
            else:
                self.roster = Roster()
                self.status = SessionStatus.ERROR
                self.error = result.error_message or "failed to load roster"
                logger.error(f"[session] load failed: {self.error}")

            return result

    # queries

    def search(
        self,
        selected_topics: Iterable[str],
        filters: Optional[SearchFilters] = None,
        min_relevance: Optional[float] = None
    ) -> List[FacultyWithRelevance]:
        if not self.is_ready:
            return []
        return self._search.search(self.roster.faculty, selected_topics, filters, min_relevance)

    def relationships(self) -> List[TopicRelationship]:
        if not self.is_ready:
            return []
        if self._relationships is None:
            calculator = TopicRelationshipCalculator(
                self.config.relationships,
                self._topic_keys()
            )
            self._relationships = calculator.compute(
                self.roster.faculty, self.roster.topic_categories
            )
        return self._relationships

    def topic_counts(self, min_score: int = 1) -> TopicFacultyCounts:
        if not self.is_ready:
            return TopicFacultyCounts({}, min_score)
        return TopicFacultyCounts.from_roster(self.roster.faculty, self._topic_keys(), min_score)

    def topic_stats(self) -> List[TopicScoreStats]:
        if not self.is_ready:
            return []
        return topic_score_stats(self.roster.faculty, self._topic_keys())

    def processor(self, threshold: Optional[int] = None) -> NetworkDataProcessor:
        """network processor over the roster; empty while not ready."""
        if not self.is_ready:
            return NetworkDataProcessor([], [], self.config.network)

        if self._processor is None:
            self._processor = NetworkDataProcessor(
                self.roster.faculty, self.roster.topics, self.config.network
            )
        if threshold is None or threshold == self._processor.expertise_threshold:
            return self._processor
        return self._processor.with_threshold(threshold)

    def _topic_keys(self) -> List[str]:
        keys = []
        for topic in self.roster.topics:
            if topic.topic_key not in keys:
                keys.append(topic.topic_key)
        return keys

    def close(self):
        self.provider.close()
