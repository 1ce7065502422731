# visualization - network views and export
from .network import NetworkData, NetworkNode, NetworkEdge, topic_color, school_color
from .processor import NetworkDataProcessor, CollaborationScore, TopicConnection
from .exporter import GraphExporter, GraphSummary
