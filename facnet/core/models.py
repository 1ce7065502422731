"""
core data models for facnet.
faculty expertise records, research topics, and search results.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


# expertise scores are integers on a 0-5 scale (0 = none)
MIN_EXPERTISE = 0
MAX_EXPERTISE = 5

# breadth at which a faculty member counts as interdisciplinary
BRIDGE_BREADTH_THRESHOLD = 4


class TopicCategory(Enum):
    """top-level grouping of research topics."""
    ENVIRONMENTAL = "environmental"
    SOCIAL = "social"
    SOLUTIONS = "solutions"


class NodeType(Enum):
    """types of nodes in a network view."""
    FACULTY = "faculty"
    TOPIC = "topic"


class EdgeType(Enum):
    """types of edges in a network view."""
    FACULTY_TOPIC = "faculty-topic"
    FACULTY_FACULTY = "faculty-faculty"
    TOPIC_TOPIC = "topic-topic"


# (topic_key, display_name, category)
CANONICAL_TOPICS: Tuple[Tuple[str, str, TopicCategory], ...] = (
    ("air_pollution", "Air Pollution, Chemicals & Waste", TopicCategory.ENVIRONMENTAL),
    ("biodiversity_loss", "Biodiversity Loss", TopicCategory.ENVIRONMENTAL),
    ("climate", "Climate", TopicCategory.ENVIRONMENTAL),
    ("governance_conflict_migration", "Governance, Conflict & Migration", TopicCategory.ENVIRONMENTAL),
    ("energy", "Energy", TopicCategory.ENVIRONMENTAL),
    ("food", "Food", TopicCategory.ENVIRONMENTAL),
    ("health_wellbeing", "Health & Wellbeing", TopicCategory.SOCIAL),
    ("infrastructure", "Infrastructure", TopicCategory.SOCIAL),
    ("land", "Land", TopicCategory.ENVIRONMENTAL),
    ("poverty_disparity_injustice", "Poverty, Disparity & Injustice", TopicCategory.SOCIAL),
    ("urban_built_environment", "Urban Built Environment", TopicCategory.SOCIAL),
    ("water", "Water", TopicCategory.ENVIRONMENTAL),
    ("activism", "Activism", TopicCategory.SOLUTIONS),
    ("arts_humanities", "Arts & Humanities", TopicCategory.SOLUTIONS),
    ("business_management", "Business & Management", TopicCategory.SOLUTIONS),
    ("communication_behavior_awareness", "Communication, Behavior & Awareness", TopicCategory.SOLUTIONS),
    ("design", "Design", TopicCategory.SOLUTIONS),
    ("faith_morality_ethics", "Faith, Morality & Ethics", TopicCategory.SOLUTIONS),
    ("international_relations", "International Relations", TopicCategory.SOLUTIONS),
    ("law_policy", "Law & Policy", TopicCategory.SOLUTIONS),
    ("tech_innovation_entrepreneurship", "Tech, Innovation & Entrepreneurship", TopicCategory.SOLUTIONS),
)

TOPIC_KEYS: Tuple[str, ...] = tuple(key for key, _, _ in CANONICAL_TOPICS)

DEFAULT_TOPIC_CATEGORIES: Dict[str, str] = {
    key: category.value for key, _, category in CANONICAL_TOPICS
}

CATEGORY_COLORS: Dict[str, str] = {
    TopicCategory.ENVIRONMENTAL.value: "#10b981",
    TopicCategory.SOCIAL.value: "#f59e0b",
    TopicCategory.SOLUTIONS.value: "#8b5cf6",
}

DEFAULT_COLOR = "#6b7280"


def clamp_expertise(value: Any) -> int:
    """coerce a raw value to an integer score in [0, 5]. unparseable -> 0."""
    if value is None or isinstance(value, bool):
        return MIN_EXPERTISE
    try:
        score = float(value)
    except (TypeError, ValueError, OverflowError):
        return MIN_EXPERTISE
    if math.isnan(score):
        return MIN_EXPERTISE
    # infinities clamp to the scale ends before truncation
    return int(min(max(score, MIN_EXPERTISE), MAX_EXPERTISE))


def is_topic_key(topic_key: str) -> bool:
    """check whether a key is one of the 21 canonical topic keys."""
    return topic_key in DEFAULT_TOPIC_CATEGORIES


class ExpertiseScores(Mapping):
    """
    read-only mapping of topic key -> expertise score.

    always holds all 21 canonical keys. indexing with an unknown key
    raises KeyError; get() reads unknown keys as 0.
    """

    __slots__ = ("_scores",)

    def __init__(self, scores: Optional[Mapping] = None):
        scores = scores or {}
        self._scores: Dict[str, int] = {
            key: clamp_expertise(scores.get(key)) for key in TOPIC_KEYS
        }

    def __getitem__(self, topic_key: str) -> int:
        return self._scores[topic_key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._scores)

    def __len__(self) -> int:
        return len(self._scores)

    def __repr__(self) -> str:
        nonzero = {k: v for k, v in self._scores.items() if v > 0}
        return f"ExpertiseScores({nonzero})"

    def get(self, topic_key: str, default: int = 0) -> int:
        return self._scores.get(topic_key, default)

    def is_known(self, topic_key: str) -> bool:
        return topic_key in self._scores

    def nonzero(self) -> Dict[str, int]:
        """topics with any expertise, in canonical order."""
        return {k: v for k, v in self._scores.items() if v > 0}


@dataclass
class Faculty:
    """
    faculty member with a fixed 21-topic expertise vector.
    email is the natural key for graph nodes and joins.
    """
    # identity
    id: str
    first_name: str
    last_name: str
    email: str

    # professional metadata
    job_title: Optional[str] = None
    academic_rank: Optional[str] = None
    school: Optional[str] = None
    department: Optional[str] = None
    track_type: Optional[str] = None
    track_type_category: Optional[str] = None
    tenure_status: Optional[str] = None
    hire_date: Optional[str] = None
    website: Optional[str] = None
    net_id: Optional[str] = None

    # expertise vector
    expertise: ExpertiseScores = field(default_factory=ExpertiseScores)

    def __post_init__(self):
        if not isinstance(self.expertise, ExpertiseScores):
            self.expertise = ExpertiseScores(self.expertise)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def expertise_breadth(self) -> int:
        """number of topics with any expertise."""
        return sum(1 for score in self.expertise.values() if score > 0)

    @property
    def is_bridge_connector(self) -> bool:
        return self.expertise_breadth >= BRIDGE_BREADTH_THRESHOLD

    def expertise_in(self, topic_key: str) -> int:
        """score for a topic; unknown keys read as 0."""
        return self.expertise.get(topic_key, 0)

    @classmethod
    def from_row(cls, row: Mapping) -> "Faculty":
        """
        build from a raw store row.
        topic columns are read by key; missing or junk values become 0.
        """
        return cls(
            id=str(row.get("id") or ""),
            first_name=_text(row.get("first_name")),
            last_name=_text(row.get("last_name")),
            email=_text(row.get("email")).lower(),
            job_title=_optional_str(row.get("job_title")),
            academic_rank=_optional_str(row.get("academic_rank")),
            school=_optional_str(row.get("school")),
            department=_optional_str(row.get("department")),
            track_type=_optional_str(row.get("track_type")),
            track_type_category=_optional_str(row.get("track_type_category")),
            tenure_status=_optional_str(row.get("tenure_status")),
            hire_date=_optional_str(row.get("hire_date")),
            website=_optional_str(row.get("website")),
            net_id=_optional_str(row.get("net_id")),
            expertise=ExpertiseScores(row),
        )

    def to_dict(self) -> Dict[str, Any]:
        """flat row shape, topic scores inline."""
        data = {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "job_title": self.job_title,
            "academic_rank": self.academic_rank,
            "school": self.school,
            "department": self.department,
            "track_type": self.track_type,
            "track_type_category": self.track_type_category,
            "tenure_status": self.tenure_status,
            "hire_date": self.hire_date,
            "website": self.website,
            "net_id": self.net_id,
        }
        data.update(self.expertise)
        data["expertise_breadth"] = self.expertise_breadth
        data["is_bridge_connector"] = self.is_bridge_connector
        return data


@dataclass
class ResearchTopic:
    """research topic reference data."""
    id: str
    topic_key: str
    display_name: str
    category: TopicCategory
    color_hex: str = DEFAULT_COLOR
    description: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.category, TopicCategory):
            self.category = TopicCategory(self.category)

    @classmethod
    def from_row(cls, row: Mapping) -> "ResearchTopic":
        """build from a raw store row. unknown category raises ValueError."""
        category = TopicCategory(str(row.get("category") or "").strip().lower())
        return cls(
            id=str(row.get("id") or row.get("topic_key") or ""),
            topic_key=_text(row.get("topic_key")),
            display_name=_text(row.get("display_name") or row.get("topic_key")),
            category=category,
            color_hex=row.get("color_hex") or CATEGORY_COLORS[category.value],
            description=_optional_str(row.get("description")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "topic_key": self.topic_key,
            "display_name": self.display_name,
            "description": self.description,
            "category": self.category.value,
            "color_hex": self.color_hex,
        }


@dataclass
class TopicMatch:
    """one selected topic where a faculty member has expertise."""
    topic: str
    score: int

    def to_dict(self) -> Dict[str, Any]:
        return {"topic": self.topic, "score": self.score}


@dataclass
class FacultyWithRelevance(Faculty):
    """faculty record annotated for one search. never persisted."""
    relevance_score: float = 0.0
    topic_matches: List[TopicMatch] = field(default_factory=list)

    @classmethod
    def from_faculty(
        cls,
        faculty: Faculty,
        relevance_score: float,
        topic_matches: List[TopicMatch]
    ) -> "FacultyWithRelevance":
        values = {f.name: getattr(faculty, f.name) for f in fields(Faculty)}
        return cls(**values, relevance_score=relevance_score, topic_matches=list(topic_matches))

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["relevance_score"] = self.relevance_score
        data["topic_matches"] = [m.to_dict() for m in self.topic_matches]
        return data


def default_research_topics() -> List[ResearchTopic]:
    """the canonical catalogue as ResearchTopic rows."""
    return [
        ResearchTopic(
            id=key,
            topic_key=key,
            display_name=display_name,
            category=category,
            color_hex=CATEGORY_COLORS[category.value],
        )
        for key, display_name, category in CANONICAL_TOPICS
    ]


def category_map(topics: List[ResearchTopic]) -> Dict[str, str]:
    """topic_key -> category value for a set of topic rows."""
    return {t.topic_key: t.category.value for t in topics}


def validate_faculty_row(row: Mapping) -> Tuple[bool, List[str]]:
    """
    validate a faculty row from a store response.
    returns (is_valid, list of issues).
    """
    issues = []

    if not row.get("id"):
        issues.append("no identifier found")

    email = _text(row.get("email"))
    if not email:
        issues.append("missing email")
    elif "@" not in email:
        issues.append(f"malformed email: {email}")

    if not row.get("first_name") and not row.get("last_name"):
        issues.append("missing name")

    return len(issues) == 0, issues


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None
