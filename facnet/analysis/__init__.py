# analysis - roster-wide topic statistics and relationships
from .topic_counts import TopicFacultyCounts, TopicScoreStats, CoverageLevel, topic_score_stats
from .topic_relationships import (
    TopicRelationship, TopicRelationshipCalculator, ConnectionTier,
    RelationshipDistribution, compute_relationships
)
