"""
graph exporter - network views to NetworkX, JSON and GraphML.

supports:
- JSON (for web visualization)
- GraphML (for Gephi, Cytoscape)
- summary stats (weighted degree, Louvain communities)

usage:
    exporter = GraphExporter()
    exporter.to_json(processor.generate_topic_network(), "topics.json")
    summary = exporter.summarize(processor.generate_faculty_cluster_network("water"))
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import networkx as nx
from networkx.algorithms.community import louvain_communities

from .network import NetworkData

logger = logging.getLogger("facnet.visualization")


@dataclass
class GraphSummary:
    """structural summary of one network view."""
    node_count: int = 0
    edge_count: int = 0
    total_weight: float = 0.0
    most_connected: List[str] = field(default_factory=list)   # by weighted degree
    communities: List[List[str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "total_weight": self.total_weight,
            "most_connected": self.most_connected,
            "communities": self.communities,
        }


class GraphExporter:
    """exports NetworkData views to various formats."""

    def __init__(self, community_seed: int = 42, top_n: int = 10):
        self.community_seed = community_seed
        self.top_n = top_n

    def to_networkx(self, data: NetworkData) -> nx.Graph:
        """undirected graph with node and edge attributes."""
        G = nx.Graph()
        for node in data.nodes:
            G.add_node(
                node.id,
                type=node.type.value,
                name=node.name,
                size=node.size,
                color=node.color
            )
        for edge in data.edges:
            G.add_edge(edge.source, edge.target, weight=edge.weight, type=edge.type.value)
        return G

    def to_json(self, data: NetworkData, filepath: Optional[str] = None) -> Dict[str, Any]:
        """
        export to JSON suitable for a force-directed view.

        format:
        {
            "nodes": [{"id": "...", "type": "topic", "size": 3, ...}],
            "edges": [{"source": "...", "target": "...", "weight": 1, ...}],
            "metadata": {"node_count": N, "edge_count": M}
        }
        """
        result = data.to_dict()
        result["metadata"] = {
            "node_count": len(data.nodes),
            "edge_count": len(data.edges),
        }

        if filepath:
            with open(filepath, "w") as f:
                json.dump(result, f, indent=2)
            logger.info(f"exported JSON to {filepath}")

        return result

    def to_graphml(self, data: NetworkData, filepath: str):
        """export to GraphML (scalar attributes only)."""
        nx.write_graphml(self.to_networkx(data), filepath)
        logger.info(f"exported GraphML to {filepath}")

    def summarize(self, data: NetworkData) -> GraphSummary:
        G = self.to_networkx(data)
        summary = GraphSummary(
            node_count=G.number_of_nodes(),
            edge_count=G.number_of_edges(),
            total_weight=round(G.size(weight="weight"), 2),
        )
        if G.number_of_nodes() == 0:
            return summary

        degrees = dict(G.degree(weight="weight"))
        ranked = sorted(degrees, key=lambda n: (-degrees[n], str(n)))
        summary.most_connected = [n for n in ranked if degrees[n] > 0][:self.top_n]

        if G.number_of_edges() > 0:
            communities = louvain_communities(G, weight="weight", seed=self.community_seed)
            summary.communities = sorted(
                (sorted(c) for c in communities if len(c) > 1),
                key=lambda c: (-len(c), c[0])
            )

        return summary
