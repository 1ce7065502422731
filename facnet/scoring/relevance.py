"""
relevance scorer - how well a faculty member matches a topic selection.

the score is the mean expertise over exactly the selected topics, zeros
included. a faculty member strong in one of three topics is penalized by
the mean, not excluded; exclusion is the search's job.

usage:
    result = score_relevance(faculty, ["climate", "energy"])
    print(result.score, [m.topic for m in result.matches])
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..core.models import Faculty, TopicMatch, is_topic_key

logger = logging.getLogger("facnet.scoring")


@dataclass
class RelevanceResult:
    """relevance of one faculty member to one selection."""
    score: float = 0.0
    matches: List[TopicMatch] = field(default_factory=list)

    @property
    def matched_topics(self) -> List[str]:
        return [m.topic for m in self.matches]


def normalize_selection(
    selected_topics: Iterable[str],
    max_topics: Optional[int] = None
) -> List[str]:
    """
    de-duplicate a topic selection, keeping first-occurrence order.
    optionally truncate to max_topics distinct keys.
    """
    seen = []
    for topic in selected_topics:
        if topic not in seen:
            seen.append(topic)

    if max_topics is not None and len(seen) > max_topics:
        logger.warning(
            f"[scoring] {len(seen)} topics selected, keeping first {max_topics}: {seen[:max_topics]}"
        )
        seen = seen[:max_topics]

    return seen


def score_relevance(faculty: Faculty, selected_topics: Iterable[str]) -> RelevanceResult:
    """
    score a faculty member against selected topic keys.

    empty selection -> score 0, no matches.
    unknown keys contribute 0 and still count in the denominator.
    """
    topics = normalize_selection(selected_topics)
    if not topics:
        return RelevanceResult()

    total = 0
    matches = []
    for topic in topics:
        if not is_topic_key(topic):
            logger.debug(f"[scoring] unknown topic key {topic!r}, reads as 0")
        score = faculty.expertise_in(topic)
        total += score
        if score > 0:
            matches.append(TopicMatch(topic=topic, score=score))

    # stable: equal scores keep selection order
    matches.sort(key=lambda m: m.score, reverse=True)

    return RelevanceResult(score=total / len(topics), matches=matches)
