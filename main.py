#!/usr/bin/env python3
"""Main Entry Point and CLI Integration.

This module provides the command line interface of the graph toolkit. It
loads configuration, configures logging and dispatches to subcommands that
build graphs from text files and print search results.
"""

import argparse
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from src.config import GraphkitConfig, load_config
from src.graph import Graph, GraphValidator
from src.loaders import build_word_index, read_graph, read_word_graph
from src.log_config import bind_context, clear_context, configure_logging

logger = structlog.get_logger(__name__)

DEMO_FILE_NAME = "my_demo_graph.txt"
DEMO_FILE_LINES = [
    "P S R Q",
    "Q Z",
    "Z X Y",
    "R N",
    "N Y O",
    "O M N K",
]


def format_path(path: Sequence[object]) -> str:
    """Format a search result for display."""
    if not path:
        return "(no path)"
    return " ".join(str(node) for node in path)


def build_demo_graph() -> Graph[str, int]:
    """Build the demo graph: two components joined by nothing.

    A-F with G and H form one component, I-L form the other.
    """
    graph: Graph[str, int] = Graph()
    graph.add_node("A", 1)
    graph.add_node("B", 2)
    graph.add_edge("D", "A")
    graph.add_edge("A", "B")
    graph.add_edge("B", "C")
    graph.add_edge("D", "C")
    graph.add_edge("C", "E")
    graph.add_edge("D", "E")
    graph.add_edge("E", "F")
    graph.add_edges("H", ["F", "G"])
    graph.add_edge("F", "G")
    graph.add_edge("I", "J")
    graph.add_edge("J", "L")
    graph.add_edge("K", "L")
    graph.add_edge("J", "K")
    return graph


def _print_searches(graph: Graph, pairs: Sequence[tuple[object, object]]) -> None:
    for from_name, to_name in pairs:
        print(f"BFS path from {from_name} to {to_name}")
        print(format_path(graph.bfs(from_name, to_name)))
        print(f"DFS path from {from_name} to {to_name}")
        print(format_path(graph.dfs(from_name, to_name)))


def run_demo(config: GraphkitConfig, workdir: Path) -> int:
    """Walk through building, printing, searching and loading graphs."""
    validator = GraphValidator()

    print("Illustration of graph functionality!")
    print("Creating the graph by adding nodes and edges")
    graph = build_demo_graph()

    print("Printing the graph")
    print(validator.generate_visualization(graph, "adjacency"))
    _print_searches(graph, [("B", "H"), ("K", "D")])

    graph_file = workdir / DEMO_FILE_NAME
    print(f"Creating a graph file ({graph_file}) for demo")
    workdir.mkdir(parents=True, exist_ok=True)
    graph_file.write_text("\n".join(DEMO_FILE_LINES) + "\n", encoding=config.loader.encoding)

    print("Reading the graph from file we created")
    file_graph = read_graph(graph_file, encoding=config.loader.encoding)

    print("Printing the graph we read from file")
    print(validator.generate_visualization(file_graph, "adjacency"))
    _print_searches(file_graph, [("Q", "K"), ("X", "N")])

    return 0


def run_search(
    config: GraphkitConfig,
    graph_file: Path,
    from_name: str,
    to_name: str,
    algorithm: str | None,
) -> int:
    """Load an edge-list file and print the path(s) between two nodes."""
    algorithm = algorithm or config.search.default_algorithm
    graph = read_graph(graph_file, encoding=config.loader.encoding)

    if algorithm in ("bfs", "both"):
        print(f"BFS: {format_path(graph.bfs(from_name, to_name))}")
    if algorithm in ("dfs", "both"):
        print(f"DFS: {format_path(graph.dfs(from_name, to_name))}")

    return 0


def _read_two_words(input_fn: Callable[[str], str]) -> list[str]:
    """Collect a start and an end word, which may span several input lines."""
    words: list[str] = []
    prompt = "Please give a start word and an end word\n"
    while len(words) < 2:
        words.extend(input_fn(prompt).split())
        prompt = ""
    return words[:2]


def run_ladder(
    config: GraphkitConfig,
    graph_file: Path,
    input_fn: Callable[[str], str] = input,
) -> int:
    """Interactive word ladder over a word graph file."""
    print(f"Reading word graph from file {graph_file}")
    graph = read_word_graph(graph_file, encoding=config.loader.encoding)
    word_index = build_word_index(graph)
    run_dfs = len(word_index) < config.search.dfs_max_nodes

    def to_words(path: list[int]) -> str:
        words = []
        for node in path:
            vertex = graph.find_vertex(node)
            words.append(str(vertex.data) if vertex is not None else str(node))
        return format_path(words)

    try:
        while True:
            start_word, end_word = _read_two_words(input_fn)
            start_node = word_index.get(start_word)
            end_node = word_index.get(end_word)

            if start_node is None:
                print("Start node not found in the graph")
            elif end_node is None:
                print("End node not found in the graph")
            else:
                print("BFS path:")
                print(to_words(graph.bfs(start_node, end_node)))
                if run_dfs:
                    print("DFS path:")
                    print(to_words(graph.dfs(start_node, end_node)))

            answer = input_fn("Continue to next word set (y/n)?\n").strip()
            if answer != "y":
                break
    except EOFError:
        logger.info("ladder_input_closed")

    return 0


def run_render(config: GraphkitConfig, graph_file: Path, output_format: str) -> int:
    """Print an edge-list file in the requested format."""
    graph = read_graph(graph_file, encoding=config.loader.encoding)
    print(GraphValidator().generate_visualization(graph, output_format))
    return 0


def run_validate(config: GraphkitConfig, graph_file: Path) -> int:
    """Validate the graph built from an edge-list file."""
    graph = read_graph(graph_file, encoding=config.loader.encoding)
    report = GraphValidator().validate(graph)
    print(report.summary())
    return 0 if report.is_valid else 1


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Arguments to parse, defaults to sys.argv[1:]

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Graph toolkit - build undirected graphs from text and search paths",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Walk through the demo graphs
  python main.py demo

  # Shortest and depth-first paths in an edge-list file
  python main.py search graph.txt A F

  # Interactive word ladder
  python main.py ladder words.txt

  # Render as Graphviz DOT
  python main.py render graph.txt --format dot
        """,
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to configuration YAML file (default: built-in defaults)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override the configured logging level",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Render log events as JSON",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    demo_parser = subparsers.add_parser("demo", help="Run the graph demo")
    demo_parser.add_argument(
        "--workdir",
        type=Path,
        default=Path(),
        help="Directory for the demo graph file (default: current directory)",
    )

    search_parser = subparsers.add_parser("search", help="Find paths between two nodes")
    search_parser.add_argument("graph_file", type=Path, help="Edge-list graph file")
    search_parser.add_argument("from_name", help="Start node")
    search_parser.add_argument("to_name", help="Destination node")
    search_parser.add_argument(
        "-a",
        "--algorithm",
        choices=["bfs", "dfs", "both"],
        default=None,
        help="Search algorithm (default: from configuration)",
    )

    ladder_parser = subparsers.add_parser("ladder", help="Interactive word ladder")
    ladder_parser.add_argument("graph_file", type=Path, help="Word graph file")

    render_parser = subparsers.add_parser("render", help="Print a graph file")
    render_parser.add_argument("graph_file", type=Path, help="Edge-list graph file")
    render_parser.add_argument(
        "-f",
        "--format",
        dest="output_format",
        choices=["adjacency", "mermaid", "dot"],
        default="adjacency",
        help="Output format (default: adjacency)",
    )

    validate_parser = subparsers.add_parser("validate", help="Check graph invariants")
    validate_parser.add_argument("graph_file", type=Path, help="Edge-list graph file")

    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> GraphkitConfig:
    """Load configuration and apply command-line overrides."""
    config = load_config(args.config) if args.config else GraphkitConfig.from_env()

    if args.log_level:
        config.logging.level = args.log_level
    if args.json_logs:
        config.logging.json_logs = True

    return config


def run(argv: Sequence[str] | None = None, input_fn: Callable[[str], str] = input) -> int:
    """Run the CLI and return the exit code.

    Args:
        argv: Command-line arguments, defaults to sys.argv[1:]
        input_fn: Prompt reader used by the interactive ladder

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)

    try:
        config = resolve_config(args)
        configure_logging(config.logging.level, json_logs=config.logging.json_logs)

        for warning in config.validate_config():
            logger.warning("configuration_warning", message=warning)

        bind_context(command=args.command)
        if getattr(args, "graph_file", None) is not None:
            bind_context(graph_file=str(args.graph_file))

        if args.command == "demo":
            return run_demo(config, args.workdir)
        if args.command == "search":
            return run_search(config, args.graph_file, args.from_name, args.to_name, args.algorithm)
        if args.command == "ladder":
            return run_ladder(config, args.graph_file, input_fn)
        if args.command == "render":
            return run_render(config, args.graph_file, args.output_format)
        return run_validate(config, args.graph_file)

    except KeyboardInterrupt:
        logger.warning("command_interrupted")
        return 1

    except FileNotFoundError as e:
        logger.exception("file_not_found", error=str(e))
        return 1

    except OSError as e:
        logger.exception("file_read_error", error=str(e))
        return 1

    except ValueError as e:
        logger.exception("invalid_input", error=str(e))
        return 1

    finally:
        clear_context()


def main() -> None:
    """Main entry point for the graph toolkit."""
    sys.exit(run())


if __name__ == "__main__":
    main()
