"""
faculty search - rank the roster against a topic selection.

pipeline:
1. order roster by expertise breadth (stable)
2. keep faculty with any expertise in any selected topic (OR filter)
3. cap at max_results
4. score relevance, drop zero / below-floor scores
5. stable sort by relevance, descending

usage:
    search = FacultySearch()
    results = search.search(roster, ["climate", "energy"])
    summary = SearchSummary.from_results(results)
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .relevance import normalize_selection, score_relevance
from ..core.config import SearchConfig
from ..core.models import Faculty, FacultyWithRelevance, MAX_EXPERTISE

logger = logging.getLogger("facnet.search")


@dataclass
class SearchFilters:
    """optional narrowing applied after ranking."""
    school: Optional[str] = None
    rank: Optional[str] = None
    min_expertise_breadth: Optional[int] = None
    search_term: Optional[str] = None

    def matches(self, faculty: Faculty) -> bool:
        if self.school and (faculty.school or "").lower() != self.school.lower():
            return False
        if self.rank and (faculty.academic_rank or "").lower() != self.rank.lower():
            return False
        if self.min_expertise_breadth is not None:
            if faculty.expertise_breadth < self.min_expertise_breadth:
                return False
        if self.search_term and self.search_term.strip():
            term = self.search_term.strip().lower()
            haystack = " ".join(
                part for part in (faculty.full_name, faculty.department, faculty.email) if part
            ).lower()
            if term not in haystack:
                return False
        return True


@dataclass
class SearchSummary:
    """headline numbers for a result list."""
    total: int = 0
    interdisciplinary: int = 0
    average_match_percent: int = 0

    @classmethod
    def from_results(cls, results: List[FacultyWithRelevance]) -> "SearchSummary":
        if not results:
            return cls()
        mean = sum(r.relevance_score for r in results) / len(results)
        return cls(
            total=len(results),
            interdisciplinary=sum(1 for r in results if r.is_bridge_connector),
            # 5-point scale shown as a percentage
            average_match_percent=round(mean * (100 / MAX_EXPERTISE)),
        )


class FacultySearch:
    """
    topic search over an in-memory roster.
    stateless; the caller re-runs it whenever roster or selection change.
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        self.config = config or SearchConfig()

    def search(
        self,
        all_faculty: Iterable[Faculty],
        selected_topics: Iterable[str],
        filters: Optional[SearchFilters] = None,
        min_relevance: Optional[float] = None
    ) -> List[FacultyWithRelevance]:
        """
        rank faculty by relevance to the selected topics.

        returns an empty list when nothing is selected.
        """
        topics = normalize_selection(selected_topics, self.config.max_selected_topics)
        if not topics:
            return []

        floor = self.config.min_relevance if min_relevance is None else min_relevance

        # candidate order: broadest expertise first
        roster = sorted(all_faculty, key=lambda f: f.expertise_breadth, reverse=True)

        candidates = [
            f for f in roster
            if any(f.expertise_in(topic) > 0 for topic in topics)
        ][:self.config.max_results]

        results = []
        for faculty in candidates:
            relevance = score_relevance(faculty, topics)
            if relevance.score <= 0 or relevance.score < floor:
                continue
            results.append(FacultyWithRelevance.from_faculty(
                faculty, relevance.score, relevance.matches
            ))

        # stable on ties, so breadth order survives
        results.sort(key=lambda r: r.relevance_score, reverse=True)

        if filters:
            results = [r for r in results if filters.matches(r)]

        logger.debug(
            f"[search] topics={topics} candidates={len(candidates)} results={len(results)}"
        )
        return results


def search_faculty(
    all_faculty: Iterable[Faculty],
    selected_topics: Iterable[str],
    config: Optional[SearchConfig] = None
) -> List[FacultyWithRelevance]:
    """one-shot search with default settings."""
    return FacultySearch(config).search(all_faculty, selected_topics)
