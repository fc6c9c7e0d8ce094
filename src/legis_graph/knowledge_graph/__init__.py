"""Knowledge graph subsystem.

This module provides:
- An in-memory typed multigraph with traversal and influence scoring
- An ingestion pipeline that builds it from relational records
- A registry that publishes rebuilt graphs atomically
- A query facade for the HTTP layer and CLI
"""

from .engine import GraphEngine
from .models import Edge, EdgeType, Node, NodeType
from .pipeline import GraphIngestor, IngestionError, IngestStats
from .query_engine import GraphQueryEngine
from .registry import GraphRegistry
from .source import RecordSource

__all__ = [
    "Edge",
    "EdgeType",
    "GraphEngine",
    "GraphIngestor",
    "GraphQueryEngine",
    "GraphRegistry",
    "IngestStats",
    "IngestionError",
    "Node",
    "NodeType",
    "RecordSource",
]
