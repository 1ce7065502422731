"""
facnet - faculty expertise explorer.
"""

from .core.config import FacnetConfig
from .core.models import Faculty, ResearchTopic, FacultyWithRelevance, TopicCategory
from .scoring.search import FacultySearch, SearchFilters, SearchSummary
from .analysis.topic_relationships import TopicRelationshipCalculator
from .visualization.processor import NetworkDataProcessor
from .visualization.exporter import GraphExporter
from .providers.rest import RestStoreProvider
from .providers.snapshot import SnapshotProvider, InMemoryProvider
from .session import ExplorerSession, SessionStatus

__version__ = "0.1.0"

__all__ = [
    "FacnetConfig",
    "Faculty",
    "ResearchTopic",
    "FacultyWithRelevance",
    "TopicCategory",
    "FacultySearch",
    "SearchFilters",
    "SearchSummary",
    "TopicRelationshipCalculator",
    "NetworkDataProcessor",
    "GraphExporter",
    "RestStoreProvider",
    "SnapshotProvider",
    "InMemoryProvider",
    "ExplorerSession",
    "SessionStatus"
]
