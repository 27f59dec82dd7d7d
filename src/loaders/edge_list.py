"""Edge-list loader for undirected graphs.

Each line of the file is a node key followed by the keys of its
neighbors, separated by whitespace:

    P S R Q
    Q Z

Every neighbor token produces an undirected edge; nodes are created as
they are first mentioned. A line holding a single key creates an isolated
node. There is no header and no escaping.
"""

from collections.abc import Iterable
from pathlib import Path

import structlog

from src.graph.undirected_graph import Graph

logger = structlog.get_logger(__name__)


def parse_graph_lines(lines: Iterable[str]) -> Graph[str, None]:
    """Build a graph from edge-list lines.

    Args:
        lines: Lines in the edge-list format (trailing newlines allowed)

    Returns:
        Graph keyed by the string tokens, with no node data

    Example:
        >>> graph = parse_graph_lines(["A B C", "C D"])
        >>> graph.bfs("A", "D")
        ['A', 'C', 'D']
    """
    graph: Graph[str, None] = Graph()
    lines_with_duplicates = 0

    for line in lines:
        tokens = line.split()
        if not tokens:
            continue

        node, *neighbors = tokens
        graph.add_node(node)
        if not graph.add_edges(node, neighbors):
            lines_with_duplicates += 1

    if lines_with_duplicates:
        logger.debug("duplicate_edges_ignored", lines=lines_with_duplicates)

    return graph


def read_graph(path: str | Path, encoding: str = "utf-8") -> Graph[str, None]:
    """Read an edge-list file into a graph.

    Args:
        path: Path to the edge-list file
        encoding: Text encoding of the file

    Returns:
        The loaded graph

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If the file cannot be read
    """
    graph_path = Path(path)

    logger.info("loading_edge_list", path=str(graph_path))

    try:
        with graph_path.open(encoding=encoding) as f:
            graph = parse_graph_lines(f)
    except OSError as e:
        logger.exception("edge_list_read_failed", path=str(graph_path), error=str(e))
        raise

    logger.info(
        "edge_list_loaded",
        path=str(graph_path),
        node_count=len(graph),
        edge_count=graph.edge_count,
    )

    return graph
