"""
network view data - nodes, edges and their presentation hints.

positions are not part of the contract; membership, sizes, weights and
colors are.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from ..core.models import (
    Faculty, ResearchTopic, NodeType, EdgeType, CATEGORY_COLORS, DEFAULT_COLOR
)

CENTRAL_NODE_COLOR = "#1f2937"

SCHOOL_COLORS: Dict[str, str] = {
    "School of Medicine": "#dc2626",
    "School of Law": "#2563eb",
    "School of Engineering and Applied Science": "#059669",
    "School of Management": "#7c3aed",
    "School of Public Health": "#ea580c",
    "School of Art": "#db2777",
    "School of Music": "#0891b2",
    "School of Nursing": "#65a30d",
    "School of Environment": "#16a34a",
}


def topic_color(category: Optional[str]) -> str:
    """color for a topic category value."""
    return CATEGORY_COLORS.get(category or "", DEFAULT_COLOR)


def school_color(school: Optional[str]) -> str:
    """color for a faculty member's school."""
    if not school:
        return DEFAULT_COLOR
    return SCHOOL_COLORS.get(school, DEFAULT_COLOR)


@dataclass
class NetworkNode:
    """a faculty or topic node."""
    id: str                       # email for faculty, topic_key for topics
    type: NodeType
    name: str
    size: float
    color: str
    data: Union[Faculty, ResearchTopic, None] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "size": self.size,
            "color": self.color,
            "data": self.data.to_dict() if self.data is not None else None,
        }


@dataclass
class NetworkEdge:
    """undirected weighted edge, stored as a source/target pair."""
    source: str
    target: str
    weight: float
    type: EdgeType

    @property
    def key(self) -> Tuple[str, str]:
        """orientation-free identity."""
        return tuple(sorted((self.source, self.target)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
            "type": self.type.value,
        }


@dataclass
class NetworkData:
    """one network view."""
    nodes: List[NetworkNode] = field(default_factory=list)
    edges: List[NetworkEdge] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def node_ids(self) -> Set[str]:
        return {n.id for n in self.nodes}

    def get_node(self, node_id: str) -> Optional[NetworkNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def dangling_edges(self) -> List[NetworkEdge]:
        """edges whose endpoints are not both nodes of this view."""
        ids = self.node_ids()
        return [e for e in self.edges if e.source not in ids or e.target not in ids]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
