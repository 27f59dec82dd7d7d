"""Word graph loader for word ladder puzzles.

Each line describes one word node by integer id:

    <id> [<word> [<neighbor id> ...]]

The word becomes the node's data. Neighbor ids produce undirected edges,
creating the neighbor nodes without data until their own line is read.
"""

from collections.abc import Iterable
from pathlib import Path

import structlog

from src.graph.undirected_graph import Graph

logger = structlog.get_logger(__name__)


class GraphFormatError(ValueError):
    """Exception raised when a word graph line cannot be parsed.

    Attributes:
        message: Description of the problem
        line_number: 1-based number of the offending line
    """

    def __init__(self, message: str, line_number: int):
        """Initialize the exception.

        Args:
            message: Description of the problem
            line_number: 1-based number of the offending line
        """
        super().__init__(f"line {line_number}: {message}")
        self.message = message
        self.line_number = line_number


def _parse_id(token: str, line_number: int) -> int:
    try:
        return int(token)
    except ValueError as e:
        msg = f"expected an integer node id, got {token!r}"
        raise GraphFormatError(msg, line_number) from e


def parse_word_graph_lines(lines: Iterable[str]) -> Graph[int, str]:
    """Build a word graph from lines in the word graph format.

    Args:
        lines: Lines of the word graph file

    Returns:
        Graph keyed by integer id with words as node data

    Raises:
        GraphFormatError: If an id token is not an integer
    """
    graph: Graph[int, str] = Graph()

    for line_number, line in enumerate(lines, 1):
        tokens = line.split()
        if not tokens:
            continue

        node = _parse_id(tokens[0], line_number)
        word = tokens[1] if len(tokens) > 1 else None
        graph.add_node(node, word)

        neighbors = [_parse_id(token, line_number) for token in tokens[2:]]
        graph.add_edges(node, neighbors)

    return graph


def read_word_graph(path: str | Path, encoding: str = "utf-8") -> Graph[int, str]:
    """Read a word graph file.

    Args:
        path: Path to the word graph file
        encoding: Text encoding of the file

    Returns:
        The loaded word graph

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If the file cannot be read
        GraphFormatError: If a line is malformed
    """
    graph_path = Path(path)

    logger.info("loading_word_graph", path=str(graph_path))

    try:
        with graph_path.open(encoding=encoding) as f:
            graph = parse_word_graph_lines(f)
    except OSError as e:
        logger.exception("word_graph_read_failed", path=str(graph_path), error=str(e))
        raise
    except GraphFormatError as e:
        logger.exception(
            "word_graph_format_error",
            path=str(graph_path),
            line_number=e.line_number,
            error=e.message,
        )
        raise

    logger.info(
        "word_graph_loaded",
        path=str(graph_path),
        node_count=len(graph),
        edge_count=graph.edge_count,
    )

    return graph


def build_word_index(graph: Graph[int, str]) -> dict[str, int]:
    """Map each word to the id of the node that carries it.

    Nodes without a word are skipped. If two nodes carry the same word the
    one with the larger id wins.
    """
    return {vertex.data: vertex.name for vertex in graph.get_vertices() if vertex.data is not None}
