from .models import (
    Faculty, ResearchTopic, FacultyWithRelevance, TopicMatch, ExpertiseScores,
    TopicCategory, NodeType, EdgeType,
    TOPIC_KEYS, CANONICAL_TOPICS, DEFAULT_TOPIC_CATEGORIES, CATEGORY_COLORS,
    default_research_topics, category_map, validate_faculty_row, is_topic_key
)
from .config import (
    FacnetConfig, StoreConfig, SearchConfig, NetworkConfig, RelationshipConfig,
    ConfigurationError
)
from .resilience import (
    RetryConfig, CircuitBreakerConfig, CircuitBreaker,
    ResilientAPIClient, CollaboratorUnavailable, setup_logging
)
