"""Undirected, unweighted graph kept as a sorted adjacency list.

This module provides the Graph class which stores nodes in ascending key
order, keeps neighbor lists sorted and symmetric, and finds paths between
nodes with breadth-first and depth-first search.
"""

import bisect
import itertools
from collections import deque
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class GraphConsistencyError(Exception):
    """Exception raised when the undirected adjacency invariant is broken.

    An edge that is present in one direction but not the other, or a
    neighbor that lost its back-reference, means the graph was corrupted.
    """

    def __init__(self, message: str):
        """Initialize the exception with a descriptive message.

        Args:
            message: Description of the inconsistency
        """
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Vertex(Generic[K, V]):
    """Read-only snapshot of a graph node.

    Attributes:
        name: Unique key of the node
        data: Value stored with the node, None when absent
    """

    name: K
    data: V | None = None


@dataclass(frozen=True)
class Found:
    """Key is present at ``index`` of the sorted key sequence."""

    index: int


@dataclass(frozen=True)
class InsertAt:
    """Key is absent; inserting it at ``index`` keeps the sequence sorted."""

    index: int


NodePosition = Found | InsertAt


@dataclass
class _GraphNode(Generic[K, V]):
    name: K
    data: V | None = None
    # Slots of neighboring nodes, ordered by neighbor name
    neighbors: list[int] = field(default_factory=list)


@dataclass
class _SearchState:
    visited: set[int] = field(default_factory=set)
    parent: dict[int, int] = field(default_factory=dict)


class Graph(Generic[K, V]):
    """Undirected, unweighted graph with sorted node and neighbor order.

    Nodes live in an arena addressed by stable integer slots. A sorted list
    of keys with a parallel list of slots backs binary-search lookup and
    ordered iteration. Neighbor lists hold slots, never node objects.

    Thread-safety:
        This class is NOT thread-safe. Mutations and searches must be
        serialized by the caller if the graph is shared between threads.

    Example:
        >>> graph = Graph()
        >>> graph.add_edges("A", ["B", "C"])
        True
        >>> graph.add_edge("B", "D")
        True
        >>> graph.bfs("A", "D")
        ['A', 'B', 'D']
        >>> graph.dfs("C", "Z")
        []
    """

    def __init__(self) -> None:
        """Initialize an empty graph."""
        self._nodes: dict[int, _GraphNode[K, V]] = {}
        self._keys: list[K] = []
        self._slots: list[int] = []
        self._slot_counter = itertools.count()

        logger.debug("graph_initialized")

    # ---- lookup ---------------------------------------------------------

    def find_node_position(self, name: K) -> NodePosition:
        """Locate ``name`` in the sorted key sequence with binary search.

        Args:
            name: Key to look up

        Returns:
            Found with the key's index, or InsertAt with the index at which
            the key would have to be inserted to keep the order
        """
        index = bisect.bisect_left(self._keys, name)
        if index < len(self._keys) and self._keys[index] == name:
            return Found(index)
        return InsertAt(index)

    def _find_slot(self, name: K) -> int | None:
        position = self.find_node_position(name)
        if isinstance(position, Found):
            return self._slots[position.index]
        return None

    def _vertex(self, slot: int) -> Vertex[K, V]:
        node = self._nodes[slot]
        return Vertex(node.name, node.data)

    def find_vertex(self, name: K) -> Vertex[K, V] | None:
        """Find a vertex by name.

        Args:
            name: Key of the node

        Returns:
            Snapshot of the node, or None if it is not in the graph
        """
        slot = self._find_slot(name)
        if slot is None:
            return None
        return self._vertex(slot)

    def get_vertices(self) -> list[Vertex[K, V]]:
        """Return a snapshot of all vertices in ascending key order."""
        return [self._vertex(slot) for slot in self._slots]

    def get_neighbors_for_node(self, name: K) -> list[Vertex[K, V]]:
        """Return the neighbors of ``name`` in ascending key order.

        An unknown node has no neighbors; this is not an error.
        """
        slot = self._find_slot(name)
        if slot is None:
            return []
        return [self._vertex(neighbor) for neighbor in self._nodes[slot].neighbors]

    def has_edge(self, from_name: K, to_name: K) -> bool:
        """Check whether an edge connects the two named nodes."""
        from_slot = self._find_slot(from_name)
        to_slot = self._find_slot(to_name)
        if from_slot is None or to_slot is None:
            return False
        return self._neighbor_position(from_slot, to_slot)[1]

    def adjacency(self) -> dict[K, list[K]]:
        """Return an ordered mapping of every node name to its neighbor names."""
        return {
            self._nodes[slot].name: [self._nodes[n].name for n in self._nodes[slot].neighbors]
            for slot in self._slots
        }

    @property
    def edge_count(self) -> int:
        """Number of undirected edges in the graph."""
        return sum(len(node.neighbors) for node in self._nodes.values()) // 2

    def get_stats(self) -> dict[str, int]:
        """Get statistics about the current graph state.

        Returns:
            Dictionary with graph statistics including:
                - total_nodes: Number of nodes
                - total_edges: Number of undirected edges
                - isolated_nodes: Nodes without any neighbor
                - max_degree: Largest neighbor count of any node
        """
        degrees = [len(node.neighbors) for node in self._nodes.values()]
        stats = {
            "total_nodes": len(self._nodes),
            "total_edges": sum(degrees) // 2,
            "isolated_nodes": degrees.count(0),
            "max_degree": max(degrees, default=0),
        }

        logger.debug("graph_stats_retrieved", **stats)

        return stats

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, name: object) -> bool:
        try:
            return isinstance(self.find_node_position(name), Found)  # type: ignore[arg-type]
        except TypeError:
            # Key not comparable with the stored keys
            return False

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._keys))

    # ---- node mutation --------------------------------------------------

    def _add_node_internal(self, name: K, data: V | None) -> tuple[int, bool]:
        """Add a node or fill in missing data on an existing one.

        Returns:
            The node's slot and whether a new node was created
        """
        position = self.find_node_position(name)
        if isinstance(position, Found):
            slot = self._slots[position.index]
            node = self._nodes[slot]
            if node.data is None and data is not None:
                node.data = data
                logger.debug("node_data_filled", name=name)
            return slot, False

        slot = next(self._slot_counter)
        self._nodes[slot] = _GraphNode(name, data)
        self._keys.insert(position.index, name)
        self._slots.insert(position.index, slot)

        logger.debug("node_added", name=name, has_data=data is not None, node_count=len(self._keys))

        return slot, True

    def add_node(self, name: K, data: V | None = None) -> bool:
        """Add a node with optional data.

        A duplicate name is not inserted again, but if the existing node has
        no data yet it takes ``data``. Existing data is never overwritten.

        Args:
            name: Unique key of the node
            data: Value to store with the node

        Returns:
            True if a new node was created, False for a duplicate
        """
        return self._add_node_internal(name, data)[1]

    def add_nodes(self, names: Sequence[K], data: Sequence[V | None]) -> bool:
        """Add every (name, data) pair, continuing past duplicates.

        Args:
            names: Node keys
            data: Values, one per key

        Returns:
            True if no duplicate was encountered

        Raises:
            ValueError: If ``names`` and ``data`` differ in length
        """
        if len(names) != len(data):
            error_msg = "Name and data sequences should be of equal length"
            logger.error("add_nodes_length_mismatch", names=len(names), data=len(data))
            raise ValueError(error_msg)

        no_duplicates = True
        for name, value in zip(names, data, strict=True):
            if not self.add_node(name, value):
                no_duplicates = False
        return no_duplicates

    def remove_node(self, name: K) -> bool:
        """Remove a node and every edge touching it.

        Args:
            name: Key of the node to remove

        Returns:
            True if the node was removed, False if it was not in the graph

        Raises:
            GraphConsistencyError: If a neighbor does not list the node back
        """
        position = self.find_node_position(name)
        if not isinstance(position, Found):
            logger.debug("remove_node_not_found", name=name)
            return False

        slot = self._slots[position.index]
        node = self._nodes[slot]

        # Nothing is mutated unless every neighbor lists the node back
        for neighbor_slot in node.neighbors:
            neighbor = self._nodes[neighbor_slot]
            if slot not in neighbor.neighbors:
                error_msg = f"Node {neighbor.name!r} does not list removed neighbor {name!r}"
                logger.error("missing_back_reference", name=name, neighbor=neighbor.name)
                raise GraphConsistencyError(error_msg)

        for neighbor_slot in node.neighbors:
            self._nodes[neighbor_slot].neighbors.remove(slot)
        del self._slots[position.index]
        del self._keys[position.index]
        del self._nodes[slot]

        logger.debug("node_removed", name=name, degree=len(node.neighbors))

        return True

    def remove_nodes(self, names: Iterable[K]) -> bool:
        """Remove every named node, continuing past missing ones.

        Returns:
            True only if every node was found and removed
        """
        all_removed = True
        for name in names:
            if not self.remove_node(name):
                all_removed = False
        return all_removed

    # ---- edge mutation --------------------------------------------------

    def _neighbor_position(self, slot: int, neighbor_slot: int) -> tuple[int, bool]:
        neighbors = self._nodes[slot].neighbors
        target = self._nodes[neighbor_slot].name
        index = bisect.bisect_left(neighbors, target, key=lambda s: self._nodes[s].name)
        present = index < len(neighbors) and neighbors[index] == neighbor_slot
        return index, present

    def _add_directed_edge(self, from_slot: int, to_slot: int) -> bool:
        if from_slot == to_slot:
            return False
        index, present = self._neighbor_position(from_slot, to_slot)
        if present:
            return False
        self._nodes[from_slot].neighbors.insert(index, to_slot)
        return True

    def add_edge(self, from_name: K, to_name: K) -> bool:
        """Add an undirected edge, creating missing endpoints without data.

        Args:
            from_name: Key of one endpoint
            to_name: Key of the other endpoint

        Returns:
            True if the edge was added, False for a self-loop or a duplicate

        Raises:
            GraphConsistencyError: If only one direction of the edge existed
        """
        from_slot, _ = self._add_node_internal(from_name, None)
        to_slot, _ = self._add_node_internal(to_name, None)

        if from_slot == to_slot:
            logger.debug("self_loop_rejected", name=from_name)
            return False

        forward = self._add_directed_edge(from_slot, to_slot)
        backward = self._add_directed_edge(to_slot, from_slot)
        if forward != backward:
            error_msg = f"Edge {from_name!r} - {to_name!r} existed in only one direction"
            logger.error("asymmetric_edge_detected", from_name=from_name, to_name=to_name)
            raise GraphConsistencyError(error_msg)

        if forward:
            logger.debug("edge_added", from_name=from_name, to_name=to_name)
        else:
            logger.debug("duplicate_edge_skipped", from_name=from_name, to_name=to_name)

        return forward

    def add_edges(self, from_name: K, to_names: Iterable[K]) -> bool:
        """Add an edge from ``from_name`` to every node in ``to_names``.

        Returns:
            True only if no edge was a duplicate or a self-loop
        """
        result = True
        for to_name in to_names:
            if not self.add_edge(from_name, to_name):
                result = False
        return result

    # ---- search ---------------------------------------------------------

    def _resolve_endpoints(self, from_name: K, to_name: K) -> tuple[int, int] | None:
        from_slot = self._find_slot(from_name)
        to_slot = self._find_slot(to_name)
        if from_slot is None or to_slot is None:
            return None
        return from_slot, to_slot

    def _construct_path(self, state: _SearchState, from_slot: int, to_slot: int) -> list[K]:
        path = [self._nodes[to_slot].name]
        current = to_slot
        while current != from_slot:
            current = state.parent[current]
            path.append(self._nodes[current].name)
        path.reverse()
        return path

    def dfs(self, from_name: K, to_name: K) -> list[K]:
        """Find a path with depth-first search.

        Neighbors are explored in ascending key order and the search stops
        as soon as ``to_name`` is seen among a node's neighbors.

        Args:
            from_name: Key of the start node
            to_name: Key of the destination node

        Returns:
            Node keys from start to destination inclusive, ``[from_name]``
            when both are the same node, or an empty list if there is no path
        """
        endpoints = self._resolve_endpoints(from_name, to_name)
        if endpoints is None:
            logger.info("dfs_endpoint_missing", from_name=from_name, to_name=to_name)
            return []
        from_slot, to_slot = endpoints
        if from_slot == to_slot:
            return [from_name]

        state = _SearchState()
        state.visited.add(from_slot)
        stack: list[tuple[int, Iterator[int]]] = [(from_slot, iter(self._nodes[from_slot].neighbors))]
        found = False

        while stack and not found:
            current, neighbors = stack[-1]
            for neighbor in neighbors:
                if neighbor == to_slot:
                    state.parent[neighbor] = current
                    found = True
                    break
                if neighbor not in state.visited:
                    state.visited.add(neighbor)
                    state.parent[neighbor] = current
                    stack.append((neighbor, iter(self._nodes[neighbor].neighbors)))
                    break
            else:
                # Every neighbor explored, backtrack
                stack.pop()

        if not found:
            logger.info("dfs_no_path", from_name=from_name, to_name=to_name, visited=len(state.visited))
            return []

        path = self._construct_path(state, from_slot, to_slot)
        logger.info("dfs_completed", from_name=from_name, to_name=to_name, path_length=len(path))
        return path

    def bfs(self, from_name: K, to_name: K) -> list[K]:
        """Find a path with the fewest edges using breadth-first search.

        Args:
            from_name: Key of the start node
            to_name: Key of the destination node

        Returns:
            Node keys from start to destination inclusive, ``[from_name]``
            when both are the same node, or an empty list if there is no path
        """
        endpoints = self._resolve_endpoints(from_name, to_name)
        if endpoints is None:
            logger.info("bfs_endpoint_missing", from_name=from_name, to_name=to_name)
            return []
        from_slot, to_slot = endpoints
        if from_slot == to_slot:
            return [from_name]

        state = _SearchState()
        state.visited.add(from_slot)
        queue = deque([from_slot])
        found = False

        while queue and not found:
            current = queue.popleft()
            for neighbor in self._nodes[current].neighbors:
                if neighbor == to_slot:
                    state.parent[neighbor] = current
                    found = True
                    break
                if neighbor not in state.visited:
                    state.visited.add(neighbor)
                    state.parent[neighbor] = current
                    queue.append(neighbor)

        if not found:
            logger.info("bfs_no_path", from_name=from_name, to_name=to_name, visited=len(state.visited))
            return []

        path = self._construct_path(state, from_slot, to_slot)
        logger.info("bfs_completed", from_name=from_name, to_name=to_name, path_length=len(path))
        return path

    # ---- copying --------------------------------------------------------

    def copy(self) -> "Graph[K, V]":
        """Create a structural copy of the graph.

        Node data values are shared with the original, the adjacency
        structure is not.
        """
        new_graph: Graph[K, V] = Graph()
        for slot in self._slots:
            node = self._nodes[slot]
            new_graph._nodes[slot] = _GraphNode(node.name, node.data, list(node.neighbors))
        new_graph._keys = list(self._keys)
        new_graph._slots = list(self._slots)
        new_graph._slot_counter = itertools.count(max(self._slots, default=-1) + 1)

        logger.debug("graph_copied", node_count=len(self._keys))

        return new_graph

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self._keys)}, edges={self.edge_count})"
