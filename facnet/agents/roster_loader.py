"""
roster loader agent - fetch faculty and topics together.

the two fetches are independent and run concurrently. the roster is only
handed out when both succeed; a failure on either side fails the load
and is reported as COLLABORATOR_UNAVAILABLE.

input: FacultyProvider
output: LoadResult carrying a Roster (faculty + topics)
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..core.models import Faculty, ResearchTopic, category_map
from ..core.resilience import CollaboratorUnavailable
from ..providers.base import FacultyProvider

logger = logging.getLogger("facnet.agents.RosterLoader")


class ErrorCode(str, Enum):
    """why a load failed."""
    COLLABORATOR_UNAVAILABLE = "COLLABORATOR_UNAVAILABLE"
    UNCAUGHT_EXCEPTION = "UNCAUGHT_EXCEPTION"


@dataclass
class LoadError:
    code: ErrorCode
    message: str
    source: str = "store"

    def __str__(self):
        return f"[{self.code.value}] {self.message}"


@dataclass
class Roster:
    """complete snapshot of the two collaborator reads."""
    faculty: List[Faculty] = field(default_factory=list)
    topics: List[ResearchTopic] = field(default_factory=list)

    @property
    def topic_categories(self) -> Dict[str, str]:
        return category_map(self.topics)

    @property
    def is_empty(self) -> bool:
        return not self.faculty and not self.topics


@dataclass
class LoadResult:
    """
    outcome of one load. never raised, always returned.
    roster is set only when there are no errors.
    """
    roster: Optional[Roster] = None
    errors: List[LoadError] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.roster is not None and not self.errors

    @property
    def failed(self) -> bool:
        return not self.ok

    @property
    def error_message(self) -> Optional[str]:
        return self.errors[0].message if self.errors else None


class RosterLoader:
    """
    load the roster from a provider.

    usage:
        result = RosterLoader(provider).run()
        if result.ok:
            roster = result.roster
        else:
            print(result.error_message)
    """

    name = "RosterLoader"

    def __init__(self, provider: FacultyProvider):
        self.provider = provider

    def run(self) -> LoadResult:
        """load with timing; any exception becomes a failed result."""
        start = time.time()
        try:
            result = self.execute()
        except Exception as e:
            logger.exception(f"[{self.name}] uncaught exception")
            result = LoadResult(errors=[
                LoadError(ErrorCode.UNCAUGHT_EXCEPTION, str(e), source=self.provider.name)
            ])
        result.duration_ms = (time.time() - start) * 1000

        if result.ok:
            logger.info(f"[{self.name}] completed in {result.duration_ms:.1f}ms")
        else:
            logger.error(f"[{self.name}] failed in {result.duration_ms:.1f}ms: {result.errors}")
        return result

    def execute(self) -> LoadResult:
        logger.debug(f"[{self.name}] loading roster from {self.provider.name}")
        errors: List[LoadError] = []

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="facnet-fetch") as pool:
            faculty_future = pool.submit(self.provider.fetch_all_faculty)
            topics_future = pool.submit(self.provider.fetch_all_research_topics)

            faculty = self._collect(faculty_future, "faculty", errors)
            topics = self._collect(topics_future, "topics", errors)

        if errors:
            return LoadResult(errors=errors)

        if not faculty:
            logger.warning(f"[{self.name}] faculty store returned no rows")
        if not topics:
            logger.warning(f"[{self.name}] topic store returned no rows")

        return LoadResult(roster=Roster(faculty=faculty, topics=topics))

    @staticmethod
    def _collect(future: Future, label: str, errors: List[LoadError]):
        """future result, or None with an error recorded."""
        try:
            return future.result()
        except CollaboratorUnavailable as e:
            errors.append(LoadError(
                ErrorCode.COLLABORATOR_UNAVAILABLE,
                f"failed to fetch {label}: {e}",
                source=e.source
            ))
            return None
