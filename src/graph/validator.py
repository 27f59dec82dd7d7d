"""Graph validation with detailed invariant reporting.

This module re-checks the invariants of an undirected graph from its
adjacency snapshot: sorted unique keys, symmetric and duplicate-free
neighbor lists, no self-loops and no dangling references. It also renders
graphs as adjacency listings, Mermaid flowcharts or Graphviz DOT.
"""

from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from src.graph.undirected_graph import Graph

logger = structlog.get_logger(__name__)

SUPPORTED_FORMATS = ("adjacency", "mermaid", "dot")


@dataclass
class ValidationReport:
    """Report containing validation results for an undirected graph.

    Attributes:
        is_valid: Whether the graph passed all validation checks
        errors: List of error messages (broken invariants)
        warnings: List of warning messages (legal but notable structure)
        asymmetric_edges: Pairs (a, b) where a lists b but b does not list a
        self_loops: Nodes that list themselves as a neighbor
        dangling_refs: Neighbor names that are not nodes of the graph
        isolated_nodes: Nodes without any neighbor
    """

    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    asymmetric_edges: list[tuple[Any, Any]] = field(default_factory=list)
    self_loops: list[Any] = field(default_factory=list)
    dangling_refs: set[Any] = field(default_factory=set)
    isolated_nodes: list[Any] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message and mark validation as failed."""
        self.errors.append(message)
        self.is_valid = False
        logger.error("validation_error", message=message)

    def add_warning(self, message: str) -> None:
        """Add a warning message without failing validation."""
        self.warnings.append(message)
        logger.warning("validation_warning", message=message)

    def summary(self) -> str:
        """Generate a human-readable summary of the validation report."""
        lines = []
        lines.append(f"Validation Status: {'PASS' if self.is_valid else 'FAIL'}")
        lines.append(f"Errors: {len(self.errors)}")
        lines.append(f"Warnings: {len(self.warnings)}")
        lines.append(f"Asymmetric Edges: {len(self.asymmetric_edges)}")
        lines.append(f"Self Loops: {len(self.self_loops)}")
        lines.append(f"Dangling References: {len(self.dangling_refs)}")
        lines.append(f"Isolated Nodes: {len(self.isolated_nodes)}")

        if self.errors:
            lines.append("\nErrors:")
            lines.extend(f"  - {error}" for error in self.errors)

        if self.warnings:
            lines.append("\nWarnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)

        if self.asymmetric_edges:
            lines.append("\nAsymmetric Edges:")
            for i, (a, b) in enumerate(self.asymmetric_edges, 1):
                lines.append(f"  {i}. {a} -> {b}")

        if self.dangling_refs:
            refs = ", ".join(sorted(str(ref) for ref in self.dangling_refs))
            lines.append(f"\nDangling References: {refs}")

        return "\n".join(lines)


class GraphValidator:
    """Validator for undirected graphs with detailed error reporting.

    This class provides:
    - Key ordering and uniqueness checks
    - Neighbor list ordering and duplicate checks
    - Self-loop, dangling reference and symmetry checks
    - Isolated node detection
    - Graph visualization generation
    """

    def validate(self, graph: "Graph | Mapping[Any, Sequence[Any]]") -> ValidationReport:
        """Validate a graph and generate a detailed report.

        Args:
            graph: The Graph to validate, or an ordered adjacency mapping
                of node names to neighbor name sequences

        Returns:
            ValidationReport containing all validation results
        """
        adjacency = self._adjacency_of(graph)

        logger.info("starting_graph_validation", node_count=len(adjacency))

        report = ValidationReport()

        self._check_key_order(list(adjacency), report)

        for name, neighbors in adjacency.items():
            self._check_neighbor_list(name, neighbors, adjacency, report)

        self._check_symmetry(adjacency, report)

        isolated = [name for name, neighbors in adjacency.items() if not neighbors]
        if isolated:
            report.isolated_nodes = isolated
            isolated_str = ", ".join(str(name) for name in isolated)
            report.add_warning(f"Nodes without neighbors: {isolated_str}")

        logger.info(
            "graph_validation_complete",
            is_valid=report.is_valid,
            error_count=len(report.errors),
            warning_count=len(report.warnings),
        )

        return report

    @staticmethod
    def _adjacency_of(graph: "Graph | Mapping[Any, Sequence[Any]]") -> dict[Any, list[Any]]:
        if isinstance(graph, Mapping):
            return {name: list(neighbors) for name, neighbors in graph.items()}
        return graph.adjacency()

    def _check_key_order(self, names: list[Any], report: ValidationReport) -> None:
        """Check that node keys are strictly ascending."""
        for previous, current in zip(names, names[1:]):
            if not previous < current:
                report.add_error(f"Node keys out of order: {previous} before {current}")

    def _check_neighbor_list(
        self,
        name: Any,
        neighbors: list[Any],
        adjacency: dict[Any, list[Any]],
        report: ValidationReport,
    ) -> None:
        """Check one node's neighbor list for loops, dangling refs and ordering."""
        if name in neighbors:
            report.self_loops.append(name)
            report.add_error(f"Self-loop on node {name}")

        for neighbor in neighbors:
            if neighbor not in adjacency:
                report.dangling_refs.add(neighbor)
                report.add_error(f"Node {name} references unknown neighbor {neighbor}")

        for previous, current in zip(neighbors, neighbors[1:]):
            if previous == current:
                report.add_error(f"Duplicate neighbor {current} on node {name}")
            elif not previous < current:
                report.add_error(f"Neighbors of {name} out of order: {previous} before {current}")

    def _check_symmetry(self, adjacency: dict[Any, list[Any]], report: ValidationReport) -> None:
        """Check that every neighbor relation is listed in both directions."""
        neighbor_sets: dict[Hashable, set[Any]] = {
            name: set(neighbors) for name, neighbors in adjacency.items()
        }
        for name, neighbors in adjacency.items():
            for neighbor in neighbors:
                if neighbor == name or neighbor not in neighbor_sets:
                    continue
                if name not in neighbor_sets[neighbor]:
                    report.asymmetric_edges.append((name, neighbor))
                    report.add_error(f"Edge {name} -> {neighbor} has no reverse {neighbor} -> {name}")

    def generate_visualization(
        self,
        graph: "Graph | Mapping[Any, Sequence[Any]]",
        output_format: str = "adjacency",
    ) -> str:
        """Generate a textual representation of the graph.

        Args:
            graph: The Graph (or adjacency mapping) to render
            output_format: 'adjacency', 'mermaid' or 'dot'

        Returns:
            String representation of the graph in the requested format

        Raises:
            ValueError: If an unsupported format is requested
        """
        output_format = output_format.lower().strip()
        adjacency = self._adjacency_of(graph)

        if output_format == "adjacency":
            return self._generate_adjacency(adjacency)
        if output_format == "mermaid":
            return self._generate_mermaid(adjacency)
        if output_format == "dot":
            return self._generate_graphviz(adjacency)
        error_msg = f"Unsupported format: {output_format}. Use one of: {', '.join(SUPPORTED_FORMATS)}."
        raise ValueError(error_msg)

    @staticmethod
    def _undirected_edges(adjacency: dict[Any, list[Any]]) -> list[tuple[Any, Any]]:
        """List every edge once, lower key first, in adjacency order."""
        return [
            (name, neighbor)
            for name, neighbors in adjacency.items()
            for neighbor in neighbors
            if name < neighbor
        ]

    def _generate_adjacency(self, adjacency: dict[Any, list[Any]]) -> str:
        """Generate the adjacency listing: each node followed by its neighbors.

        The output is accepted back by the edge-list loader.
        """
        return "\n".join(
            " ".join(str(token) for token in (name, *neighbors))
            for name, neighbors in adjacency.items()
        )

    def _generate_mermaid(self, adjacency: dict[Any, list[Any]]) -> str:
        """Generate a Mermaid flowchart with undirected links."""
        lines = ["graph LR"]

        if not adjacency:
            lines.append("    Empty[Empty Graph]")
            return "\n".join(lines)

        # One positional id per distinct name, dangling neighbors included
        node_ids: dict[Any, str] = {}
        for name, neighbors in adjacency.items():
            for node in (name, *neighbors):
                node_ids.setdefault(node, f"n{len(node_ids)}")

        for name, node_id in node_ids.items():
            label = str(name).replace('"', "#quot;")
            lines.append(f'    {node_id}["{label}"]')

        for a, b in self._undirected_edges(adjacency):
            lines.append(f"    {node_ids[a]} --- {node_ids[b]}")

        return "\n".join(lines)

    def _generate_graphviz(self, adjacency: dict[Any, list[Any]]) -> str:
        """Generate a Graphviz DOT representation of an undirected graph."""

        def escape_dot_string(s: Any) -> str:
            """Escape double quotes for DOT format."""
            return str(s).replace('"', '\\"')

        lines = ["graph UndirectedGraph {"]
        lines.append("    node [shape=circle];")

        if not adjacency:
            lines.append('    Empty [label="Empty Graph", shape=box];')
        else:
            lines.extend(f'    "{escape_dot_string(name)}";' for name in adjacency)
            lines.extend(
                f'    "{escape_dot_string(a)}" -- "{escape_dot_string(b)}";'
                for a, b in self._undirected_edges(adjacency)
            )

        lines.append("}")
        return "\n".join(lines)
