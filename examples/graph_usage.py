"""Demonstration of the graph API with structured logging.

This example builds a small graph, compares breadth-first and depth-first
paths, removes a node and validates what is left.
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.graph import Graph, GraphValidator
from src.log_config import bind_context, clear_context, configure_logging, get_logger


def build_sample_graph() -> Graph[str, int]:
    """Build the sample graph used throughout the example."""
    graph: Graph[str, int] = Graph()
    graph.add_nodes(["A", "B", "C"], [30, 5, 25])
    graph.add_edges("A", ["C", "D", "E"])
    graph.add_edges("B", ["D", "A", "F"])
    graph.add_edges("C", ["E", "D", "B", "F"])
    return graph


def compare_searches(graph: Graph[str, int], from_name: str, to_name: str) -> None:
    """Log the BFS and DFS paths between two nodes."""
    logger = get_logger(__name__)

    bind_context(from_name=from_name, to_name=to_name)
    bfs_path = graph.bfs(from_name, to_name)
    dfs_path = graph.dfs(from_name, to_name)
    logger.info(
        "paths_compared",
        bfs=bfs_path,
        dfs=dfs_path,
        bfs_edges=max(len(bfs_path) - 1, 0),
        dfs_edges=max(len(dfs_path) - 1, 0),
    )
    clear_context()


def main() -> None:
    """Main demonstration function."""
    configure_logging(level="INFO", json_logs=False)
    logger = get_logger(__name__)

    graph = build_sample_graph()
    logger.info("graph_built", **graph.get_stats())

    validator = GraphValidator()
    print(validator.generate_visualization(graph, "adjacency"))

    compare_searches(graph, "A", "F")
    compare_searches(graph, "D", "F")

    graph.remove_node("B")
    compare_searches(graph, "A", "F")

    report = validator.validate(graph)
    print(report.summary())

    print(validator.generate_visualization(graph, "mermaid"))


if __name__ == "__main__":
    main()
