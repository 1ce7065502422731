"""
topic faculty counts - how many faculty cover each topic.

one index serves two consumers with different floors:
- search summaries / topic landscape count any expertise (score >= 1)
- network node sizing counts qualifying expertise (score >= threshold)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.models import Faculty, TOPIC_KEYS

# thresholds for the topic landscape view
HIGH_SCORE = 5


class CoverageLevel(Enum):
    """how well a topic is staffed."""
    HIGH = "high"        # 20+ faculty
    MEDIUM = "medium"    # 10+
    LOW = "low"          # 5+
    SPARSE = "sparse"

    @classmethod
    def for_count(cls, count: int) -> "CoverageLevel":
        if count >= 20:
            return cls.HIGH
        if count >= 10:
            return cls.MEDIUM
        if count >= 5:
            return cls.LOW
        return cls.SPARSE


class TopicFacultyCounts:
    """
    precomputed topic_key -> faculty count.

    usage:
        counts = TopicFacultyCounts.from_roster(roster)          # any expertise
        sizing = TopicFacultyCounts.from_roster(roster, min_score=2)
        counts.get("climate")
    """

    def __init__(self, counts: Dict[str, int], min_score: int = 1):
        self._counts = dict(counts)
        self.min_score = min_score

    @classmethod
    def from_roster(
        cls,
        faculty: Iterable[Faculty],
        topic_keys: Optional[Sequence[str]] = None,
        min_score: int = 1
    ) -> "TopicFacultyCounts":
        keys = list(TOPIC_KEYS if topic_keys is None else topic_keys)
        counts = {key: 0 for key in keys}
        for member in faculty:
            for key in keys:
                if member.expertise_in(key) >= min_score:
                    counts[key] += 1
        return cls(counts, min_score=min_score)

    def get(self, topic_key: str) -> int:
        """count for a topic; unknown keys read as 0."""
        return self._counts.get(topic_key, 0)

    def coverage(self, topic_key: str) -> CoverageLevel:
        return CoverageLevel.for_count(self.get(topic_key))

    def as_dict(self) -> Dict[str, int]:
        return dict(self._counts)

    def total(self) -> int:
        """sum over topics (a faculty member counts once per topic)."""
        return sum(self._counts.values())

    def __len__(self) -> int:
        return len(self._counts)


@dataclass
class TopicScoreStats:
    """score distribution for one topic."""
    topic_key: str
    faculty_count: int = 0     # score > 0
    high_count: int = 0        # score >= 5
    mean_score: float = 0.0    # over non-zero scores
    max_score: int = 0

    def to_dict(self) -> dict:
        return {
            "topic_key": self.topic_key,
            "faculty_count": self.faculty_count,
            "high_count": self.high_count,
            "mean_score": self.mean_score,
            "max_score": self.max_score,
        }


def topic_score_stats(
    faculty: Iterable[Faculty],
    topic_keys: Optional[Sequence[str]] = None
) -> List[TopicScoreStats]:
    """per-topic distribution, sorted by faculty count descending."""
    roster = list(faculty)
    keys = list(TOPIC_KEYS if topic_keys is None else topic_keys)

    stats = []
    for key in keys:
        scores = [f.expertise_in(key) for f in roster]
        nonzero = [s for s in scores if s > 0]
        stats.append(TopicScoreStats(
            topic_key=key,
            faculty_count=len(nonzero),
            high_count=sum(1 for s in scores if s >= HIGH_SCORE),
            mean_score=round(sum(nonzero) / len(nonzero), 2) if nonzero else 0.0,
            max_score=max(scores) if scores else 0,
        ))

    stats.sort(key=lambda s: s.faculty_count, reverse=True)
    return stats
