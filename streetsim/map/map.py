"""Map module: defines Node, GraphLine and the NavigationGraph used for path queries."""

import heapq
import itertools
import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from streetsim.dataclass import Bounds, Orientation
from streetsim.utils.logger import Logger
from streetsim.utils.vector import Vector


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def as_vector(point) -> Vector:
    """Coerce a Vector, (x, y) pair or {'x', 'y'} dict into a Vector."""
    if isinstance(point, Vector):
        return point
    return Vector(point)


class Node:
    """Graph node with a canonical rounded-coordinate id.

    Edges are undirected and stored as two-way ``neighbors`` membership; their
    weight is the Euclidean distance between the endpoints, computed on demand.
    """

    def __init__(self, node_id: str, position: Vector, type: str = 'sidewalk'):
        """Initialize a Node.

        Args:
            node_id: Canonical key, see ``NavigationGraph.node_key``.
            position: Exact position of the node.
            type: Node type; 'sidewalk', 'intersection' or 'centerline'.
        """
        self.id = node_id
        self.position = position
        self.type = type
        self.neighbors: List[str] = []

    @property
    def x(self) -> float:
        """X coordinate of the node."""
        return self.position.x

    @property
    def y(self) -> float:
        """Y coordinate of the node."""
        return self.position.y

    def __str__(self) -> str:
        """Return a readable string representation of the node."""
        return f'Node(id={self.id}, position={self.position}, type={self.type})'

    def __repr__(self) -> str:
        """Alias for __str__."""
        return self.__str__()


@dataclass(frozen=True)
class GraphLine:
    """A straight axis-aligned line that nodes are discretized along.

    Vertical lines sit at ``x`` and span y in [y, y + length]; horizontal lines sit
    at ``y`` and span x in [x, x + length].
    """
    id: str
    orientation: Orientation
    x: float
    y: float
    length: float

    @property
    def is_vertical(self) -> bool:
        """True for lines running along y."""
        return self.orientation == Orientation.VERTICAL

    def contains(self, point: Vector, tolerance: float) -> bool:
        """Return True if the point lies on the line within ``tolerance`` across it."""
        if self.is_vertical:
            return abs(point.x - self.x) < tolerance and self.y <= point.y <= self.y + self.length
        return abs(point.y - self.y) < tolerance and self.x <= point.x <= self.x + self.length


class NavigationGraph:
    """Undirected graph of nodes supporting nearest-node and shortest-path queries.

    Subclasses build the graph once in their constructor; afterwards no public
    method mutates it, so concurrent reads are safe.
    """

    def __init__(self):
        """Initialize an empty graph."""
        self.nodes: Dict[str, Node] = {}
        self._ids: Optional[List[str]] = None
        self._coords: Optional[np.ndarray] = None
        self.logger = Logger.get_logger(type(self).__name__)

    @classmethod
    def from_points(cls, points: Sequence[Tuple[float, float]],
                    edges: Sequence[Tuple[int, int]]) -> 'NavigationGraph':
        """Build a graph directly from coordinates and index pairs.

        Args:
            points: Node coordinates.
            edges: Pairs of indices into ``points``.

        Returns:
            The graph.
        """
        graph = NavigationGraph()
        ids = [graph._add_node(Vector(p)).id for p in points]
        for a, b in edges:
            graph._add_edge(ids[a], ids[b])
        return graph

    def __len__(self) -> int:
        """Number of nodes."""
        return len(self.nodes)

    def __contains__(self, node_id: str) -> bool:
        """Whether a node with the given key exists."""
        return node_id in self.nodes

    def __str__(self) -> str:
        """Return a summary of nodes and edges."""
        return f'{type(self).__name__}(nodes={len(self.nodes)}, edges={self.edge_count()})'

    @staticmethod
    def node_key(x: float, y: float) -> str:
        """Canonical id: coordinates rounded to the nearest integer."""
        return f'{_round_half_up(x)},{_round_half_up(y)}'

    def _add_node(self, position: Vector, type: str = 'sidewalk') -> Node:
        """Add a node, or return the existing node with the same key."""
        node_id = self.node_key(position.x, position.y)
        node = self.nodes.get(node_id)
        if node is None:
            node = Node(node_id, position, type)
            self.nodes[node_id] = node
            self._ids = None
            self._coords = None
        return node

    def _add_edge(self, id1: str, id2: str) -> None:
        """Connect two nodes both ways; repeated or self edges have no effect."""
        if id1 == id2:
            return
        n1 = self.nodes.get(id1)
        n2 = self.nodes.get(id2)
        if n1 is None or n2 is None:
            return
        if id2 not in n1.neighbors:
            n1.neighbors.append(id2)
        if id1 not in n2.neighbors:
            n2.neighbors.append(id1)

    def has_edge(self, id1: str, id2: str) -> bool:
        """Check whether two nodes are connected."""
        node = self.nodes.get(id1)
        return node is not None and id2 in node.neighbors

    def edges(self) -> Iterator[Tuple[Node, Node]]:
        """Yield every undirected edge once."""
        for node in self.nodes.values():
            for neighbor_id in node.neighbors:
                if node.id < neighbor_id:
                    yield node, self.nodes[neighbor_id]

    def edge_count(self) -> int:
        """Number of undirected edges."""
        return sum(len(node.neighbors) for node in self.nodes.values()) // 2

    def get_adjacent_points(self, node_id: str) -> List[Vector]:
        """Get neighboring node positions for a given node.

        Args:
            node_id: Node to get neighbors for.

        Returns:
            List of neighboring node positions.
        """
        return [self.nodes[nbr].position for nbr in self.nodes[node_id].neighbors]

    def _coordinate_array(self) -> np.ndarray:
        if self._coords is None:
            self._ids = list(self.nodes)
            self._coords = np.array([[n.x, n.y] for n in self.nodes.values()], dtype=float).reshape(-1, 2)
        return self._coords

    def get_closest_node(self, point) -> Optional[Node]:
        """Find the node nearest to a given position.

        Ties resolve to the node inserted first; callers should not rely on it.

        Args:
            point: Position to find the nearest node to.

        Returns:
            Nearest node, or None if the graph is empty.
        """
        if not self.nodes:
            return None
        p = as_vector(point)
        coords = self._coordinate_array()
        dist2 = (coords[:, 0] - p.x) ** 2 + (coords[:, 1] - p.y) ** 2
        return self.nodes[self._ids[int(np.argmin(dist2))]]

    def get_bounds(self) -> Optional[Bounds]:
        """Bounding box over all node coordinates, or None if the graph is empty."""
        if not self.nodes:
            return None
        coords = self._coordinate_array()
        min_x, min_y = coords.min(axis=0)
        max_x, max_y = coords.max(axis=0)
        return Bounds(float(min_x), float(max_x), float(min_y), float(max_y))

    def find_path(self, start, end) -> List[Vector]:
        """Shortest path between the nodes closest to two points.

        Runs A* with Euclidean edge costs and a Euclidean heuristic, which is
        consistent, so the first time the goal is popped its cost is optimal.

        Args:
            start: Start position.
            end: End position.

        Returns:
            Waypoints from the node nearest ``start`` to the node nearest ``end``,
            or an empty list if the graph is empty or the two are disconnected.
        """
        start_node = self.get_closest_node(start)
        end_node = self.get_closest_node(end)
        if start_node is None or end_node is None:
            return []
        node_ids = self.get_shortest_path(start_node.id, end_node.id)
        return [Vector(self.nodes[node_id].position) for node_id in node_ids]

    def get_shortest_path(self, start_id: str, end_id: str) -> List[str]:
        """A* over node ids. Includes the start node and end node in the path.

        Args:
            start_id: Start node id.
            end_id: End node id.

        Returns:
            List of node ids in the shortest path, empty if there is none.
        """
        goal = self.nodes[end_id].position
        counter = itertools.count()
        open_heap = [(self.nodes[start_id].position.distance(goal), next(counter), start_id)]
        came_from: Dict[str, str] = {}
        g_score = {start_id: 0.0}
        closed_set = set()

        while open_heap:
            _, _, current_id = heapq.heappop(open_heap)
            if current_id == end_id:
                return self._reconstruct_path(came_from, current_id)
            if current_id in closed_set:
                continue
            closed_set.add(current_id)

            current = self.nodes[current_id]
            for neighbor_id in current.neighbors:
                if neighbor_id in closed_set:
                    continue
                neighbor = self.nodes[neighbor_id]
                tentative_g = g_score[current_id] + current.position.distance(neighbor.position)
                if tentative_g < g_score.get(neighbor_id, math.inf):
                    came_from[neighbor_id] = current_id
                    g_score[neighbor_id] = tentative_g
                    f_score = tentative_g + neighbor.position.distance(goal)
                    heapq.heappush(open_heap, (f_score, next(counter), neighbor_id))
        return []

    @staticmethod
    def _reconstruct_path(came_from: Dict[str, str], current_id: str) -> List[str]:
        path = [current_id]
        while current_id in came_from:
            current_id = came_from[current_id]
            path.append(current_id)
        return path[::-1]

    @staticmethod
    def path_length(path: Sequence[Vector]) -> float:
        """Total Euclidean length of a waypoint sequence."""
        return sum(a.distance(b) for a, b in zip(path, path[1:]))

    # Construction helpers shared by the concrete graphs.

    def _add_line(self, line: GraphLine, spacing: float, type: str) -> List[Node]:
        """Discretize a line into evenly spaced nodes joined in sequence.

        ``max(1, ceil(length / spacing))`` segments are used so both endpoints are
        always present and degenerate lines still terminate.
        """
        num_segments = max(1, math.ceil(line.length / spacing))
        nodes = []
        for i in range(num_segments + 1):
            offset = line.length * i / num_segments
            if line.is_vertical:
                position = Vector(line.x, line.y + offset)
            else:
                position = Vector(line.x + offset, line.y)
            nodes.append(self._add_node(position, type))
        for a, b in zip(nodes, nodes[1:]):
            self._add_edge(a.id, b.id)
        return nodes

    def _connect_line_crossings(self, vertical: Sequence[GraphLine], horizontal: Sequence[GraphLine],
                                tolerance: float) -> int:
        """Insert a node wherever a vertical and a horizontal line cross.

        Each crossing node is linked to the two nearest nodes on each of the two lines.

        Returns:
            Number of crossings found.
        """
        crossings = 0
        for v_line in vertical:
            for h_line in horizontal:
                ix, iy = v_line.x, h_line.y
                v_in_range = v_line.y <= iy <= v_line.y + v_line.length
                h_in_range = h_line.x <= ix <= h_line.x + h_line.length
                if v_in_range and h_in_range:
                    node = self._add_node(Vector(ix, iy), 'intersection')
                    self._connect_to_nearest_on_line(node, v_line, tolerance)
                    self._connect_to_nearest_on_line(node, h_line, tolerance)
                    crossings += 1
        return crossings

    def _connect_to_nearest_on_line(self, node: Node, line: GraphLine, tolerance: float) -> None:
        closest = []
        for other in self.nodes.values():
            if other.id == node.id or not line.contains(other.position, tolerance):
                continue
            closest.append((other.position.distance(node.position), other.id))
        # stable: equal distances keep insertion order
        closest.sort(key=lambda item: item[0])
        for _, other_id in closest[:2]:
            self._add_edge(node.id, other_id)

    def _snap_close_nodes(self, snap_distance: float) -> int:
        """Connect every pair of distinct nodes closer than ``snap_distance``.

        Returns:
            Number of pairs snapped.
        """
        ids = list(self.nodes)
        coords = self._coordinate_array()
        snapped = 0
        for i in range(len(ids) - 1):
            delta = coords[i + 1:] - coords[i]
            dist = np.sqrt((delta ** 2).sum(axis=1))
            for j in np.nonzero((dist < snap_distance) & (dist > 0))[0]:
                self._add_edge(ids[i], ids[i + 1 + int(j)])
                snapped += 1
        return snapped
