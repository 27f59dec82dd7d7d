"""Text loaders that build graphs from whitespace-separated files."""

from .edge_list import parse_graph_lines, read_graph
from .word_graph import GraphFormatError, build_word_index, parse_word_graph_lines, read_word_graph

__all__ = [
    "GraphFormatError",
    "build_word_index",
    "parse_graph_lines",
    "parse_word_graph_lines",
    "read_graph",
    "read_word_graph",
]
