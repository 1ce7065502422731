"""
configuration for facnet.
all settings in one place, easily tunable.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


class ConfigurationError(ValueError):
    """required configuration is missing or invalid."""


ENDPOINT_ENV = "FACNET_DB_ENDPOINT"
CREDENTIAL_ENV = "FACNET_API_TOKEN"


@dataclass
class StoreConfig:
    """
    connection settings for the hosted faculty store.
    fails at construction if endpoint or credential is absent.
    """
    endpoint: str = ""
    credential: str = ""

    # table names
    faculty_table: str = "faculty"
    topics_table: str = "research_topics"

    # http
    timeout: float = 30.0

    def __post_init__(self):
        self.endpoint = (self.endpoint or "").strip().rstrip("/")
        self.credential = (self.credential or "").strip()
        missing = [
            name for name, value in (("endpoint", self.endpoint), ("credential", self.credential))
            if not value
        ]
        if missing:
            raise ConfigurationError(f"missing database configuration: {', '.join(missing)}")

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "StoreConfig":
        """read endpoint and credential from the process environment."""
        environ = os.environ if environ is None else environ
        return cls(
            endpoint=environ.get(ENDPOINT_ENV, ""),
            credential=environ.get(CREDENTIAL_ENV, ""),
        )


@dataclass
class SearchConfig:
    """faculty search settings."""
    max_results: int = 100          # bounds rendering cost
    max_selected_topics: int = 3
    min_relevance: float = 0.0      # extra floor on top of the > 0 rule


@dataclass
class NetworkConfig:
    """network view settings."""
    expertise_threshold: int = 2    # expertise >= this counts as qualifying
    min_collaboration_score: float = 2.0
    max_collaborators: int = 10     # ego view
    central_node_size: float = 10.0


@dataclass
class RelationshipConfig:
    """
    topic relationship tiers.
    cross-category pairs need more shared faculty to register.
    """
    # shared-faculty cut-ins, same category
    same_weak: int = 1
    same_medium: int = 2
    same_strong: int = 3

    # shared-faculty cut-ins, cross category
    cross_weak: int = 2
    cross_medium: int = 3
    cross_strong: int = 6

    # base strength per tier
    weak_strength: float = 0.2
    medium_strength: float = 0.5
    strong_strength: float = 0.8

    # depth boost from bottleneck-weighted connection
    depth_divisor: float = 50.0
    depth_cap: float = 0.3

    same_category_multiplier: float = 1.2
    max_strength: float = 1.0

    def thresholds(self, same_category: bool):
        """(weak, medium, strong) cut-ins for a pair."""
        if same_category:
            return self.same_weak, self.same_medium, self.same_strong
        return self.cross_weak, self.cross_medium, self.cross_strong


@dataclass
class FacnetConfig:
    """master configuration for facnet."""
    search: SearchConfig = field(default_factory=SearchConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    relationships: RelationshipConfig = field(default_factory=RelationshipConfig)

    # store is optional: offline snapshots need no credentials
    store: Optional[StoreConfig] = None

    verbose: bool = False

    @classmethod
    def default(cls) -> "FacnetConfig":
        """return default configuration."""
        return cls()

    @classmethod
    def from_env(cls) -> "FacnetConfig":
        """default configuration with store settings from the environment."""
        return cls(store=StoreConfig.from_env())
