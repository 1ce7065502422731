"""
topic relationship calculator - which topics share expertise.

for each unordered topic pair:
- shared faculty: expertise > 0 in both topics
- weighted connection: sum of min(a, b) over shared faculty (bottleneck)
- tier (weak / medium / strong) from shared faculty, with lower cut-ins
  for same-category pairs
- strength: tier base + depth boost, same-category bonus, capped at 1.0

pairs below the weak cut-in are not part of the result at all.

this is independent from the topic network's own edge rule (any shared
qualifying faculty); the two measures are tuned separately.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.config import RelationshipConfig
from ..core.models import Faculty, TOPIC_KEYS

logger = logging.getLogger("facnet.relationships")


class ConnectionTier(Enum):
    """strength class of a topic relationship."""
    STRONG = "strong"
    MEDIUM = "medium"
    WEAK = "weak"


@dataclass
class TopicRelationship:
    """a topic pair that clears its weak threshold."""
    source: str
    target: str
    shared_faculty: int
    weighted_connection: int
    strength: float
    tier: ConnectionTier
    same_category: bool = False

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "shared_faculty": self.shared_faculty,
            "weighted_connection": self.weighted_connection,
            "strength": self.strength,
            "type": self.tier.value,
            "same_category": self.same_category,
        }


@dataclass
class RelationshipDistribution:
    """tier counts over a result."""
    strong: int = 0
    medium: int = 0
    weak: int = 0

    @classmethod
    def of(cls, relationships: Iterable[TopicRelationship]) -> "RelationshipDistribution":
        dist = cls()
        for rel in relationships:
            setattr(dist, rel.tier.value, getattr(dist, rel.tier.value) + 1)
        return dist


class TopicRelationshipCalculator:
    """
    computes tiered topic relationships from the whole roster.

    usage:
        calc = TopicRelationshipCalculator()
        rels = calc.compute(roster, DEFAULT_TOPIC_CATEGORIES)
    """

    def __init__(
        self,
        config: Optional[RelationshipConfig] = None,
        topic_keys: Optional[Sequence[str]] = None
    ):
        self.config = config or RelationshipConfig()
        self.topic_keys = list(TOPIC_KEYS if topic_keys is None else topic_keys)

    def compute(
        self,
        all_faculty: Iterable[Faculty],
        topic_categories: Dict[str, str]
    ) -> List[TopicRelationship]:
        """one entry per pair that clears its weak threshold, by shared faculty desc."""
        roster = list(all_faculty)
        relationships = []

        for topic_a, topic_b in combinations(self.topic_keys, 2):
            shared = 0
            weighted = 0
            for member in roster:
                score_a = member.expertise_in(topic_a)
                score_b = member.expertise_in(topic_b)
                if score_a > 0 and score_b > 0:
                    shared += 1
                    weighted += min(score_a, score_b)

            category_a = topic_categories.get(topic_a)
            same_category = category_a is not None and category_a == topic_categories.get(topic_b)

            rel = self.classify(topic_a, topic_b, shared, weighted, same_category)
            if rel is not None:
                relationships.append(rel)

        # stable: ties stay in pair-enumeration order
        relationships.sort(key=lambda r: r.shared_faculty, reverse=True)

        dist = RelationshipDistribution.of(relationships)
        logger.info(
            f"[relationships] {len(relationships)} connections "
            f"(strong={dist.strong}, medium={dist.medium}, weak={dist.weak}) "
            f"from {len(roster)} faculty"
        )
        return relationships

    def classify(
        self,
        topic_a: str,
        topic_b: str,
        shared_faculty: int,
        weighted_connection: int,
        same_category: bool
    ) -> Optional[TopicRelationship]:
        """tier and strength for one pair, or None below the weak cut-in."""
        cfg = self.config
        weak, medium, strong = cfg.thresholds(same_category)

        if shared_faculty < weak:
            return None

        if shared_faculty >= strong:
            tier, strength = ConnectionTier.STRONG, cfg.strong_strength
        elif shared_faculty >= medium:
            tier, strength = ConnectionTier.MEDIUM, cfg.medium_strength
        else:
            tier, strength = ConnectionTier.WEAK, cfg.weak_strength

        strength += min(weighted_connection / cfg.depth_divisor, cfg.depth_cap)
        if same_category:
            strength *= cfg.same_category_multiplier
        strength = min(strength, cfg.max_strength)

        return TopicRelationship(
            source=topic_a,
            target=topic_b,
            shared_faculty=shared_faculty,
            weighted_connection=weighted_connection,
            strength=strength,
            tier=tier,
            same_category=same_category,
        )


def compute_relationships(
    all_faculty: Iterable[Faculty],
    topic_categories: Dict[str, str],
    config: Optional[RelationshipConfig] = None
) -> List[TopicRelationship]:
    """one-shot calculation over the canonical topic keys."""
    return TopicRelationshipCalculator(config).compute(all_faculty, topic_categories)
