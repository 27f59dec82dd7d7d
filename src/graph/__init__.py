"""Graph module for undirected graph storage and path search.

This module provides a sorted adjacency-list graph with breadth-first and
depth-first path search, plus validation and rendering helpers.
"""

from src.graph.undirected_graph import (
    Found,
    Graph,
    GraphConsistencyError,
    InsertAt,
    NodePosition,
    Vertex,
)
from src.graph.validator import GraphValidator, ValidationReport

__all__ = [
    "Found",
    "Graph",
    "GraphConsistencyError",
    "GraphValidator",
    "InsertAt",
    "NodePosition",
    "ValidationReport",
    "Vertex",
]
