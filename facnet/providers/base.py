"""
base provider interface for faculty/topic data sources.
all providers must implement this interface.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Mapping

from ..core.models import Faculty, ResearchTopic, validate_faculty_row
from ..core.resilience import CollaboratorUnavailable

logger = logging.getLogger("facnet.providers")


class FacultyProvider(ABC):
    """
    abstract base class for roster providers.
    providers read rows from a store (hosted, file, memory) and type them.
    either call returns complete data or raises CollaboratorUnavailable.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """provider name for logging."""
        pass

    @abstractmethod
    def fetch_all_faculty(self) -> List[Faculty]:
        """every faculty record, scores defaulted and clamped."""
        pass

    @abstractmethod
    def fetch_all_research_topics(self) -> List[ResearchTopic]:
        """the topic catalogue, any order."""
        pass

    def close(self):
        """release any held resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # row typing shared by all providers

    def _build_faculty(self, rows: Iterable[Mapping]) -> List[Faculty]:
        """type faculty rows; any corrupt row fails the whole fetch."""
        faculty = []
        for index, row in enumerate(rows):
            if not isinstance(row, Mapping):
                raise CollaboratorUnavailable(
                    f"faculty row {index} is not an object", source=self.name
                )
            ok, issues = validate_faculty_row(row)
            if not ok:
                raise CollaboratorUnavailable(
                    f"corrupt faculty row {index} ({row.get('id')!r}): {'; '.join(issues)}",
                    source=self.name
                )
            try:
                faculty.append(Faculty.from_row(row))
            except (AttributeError, TypeError, ValueError) as e:
                raise CollaboratorUnavailable(
                    f"corrupt faculty row {index}: {e}", source=self.name, cause=e
                ) from e

        logger.debug(f"[{self.name}] typed {len(faculty)} faculty rows")
        return faculty

    def _build_topics(self, rows: Iterable[Mapping]) -> List[ResearchTopic]:
        topics = []
        seen = set()
        for index, row in enumerate(rows):
            try:
                topic = ResearchTopic.from_row(row)
            except (ValueError, AttributeError) as e:
                raise CollaboratorUnavailable(
                    f"corrupt topic row {index}: {e}", source=self.name, cause=e
                ) from e
            if not topic.topic_key:
                raise CollaboratorUnavailable(f"topic row {index} has no topic_key", source=self.name)
            if topic.topic_key in seen:
                raise CollaboratorUnavailable(
                    f"duplicate topic_key {topic.topic_key!r}", source=self.name
                )
            seen.add(topic.topic_key)
            topics.append(topic)
        return topics
