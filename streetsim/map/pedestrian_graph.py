"""Sidewalk navigation graph built from road rectangles."""
from typing import List, Sequence

from streetsim.config import Config
from streetsim.dataclass import Orientation, RoadSegment
from streetsim.map.map import GraphLine, NavigationGraph


class PedestrianGraph(NavigationGraph):
    """Walkable graph of sidewalk, intersection and crosswalk connections.

    Construction runs in five passes: sidewalk lines on both sides of every road,
    discretization into evenly spaced nodes, intersection nodes where vertical and
    horizontal sidewalks cross, crosswalk edges across each road, and a final snap
    pass that joins nodes closer than ``snap_distance``.
    """

    def __init__(self, roads: Sequence[RoadSegment], config: Config = None, offset: float = None,
                 node_spacing: float = None, snap_distance: float = None):
        """Build the graph.

        Args:
            roads: Road segments of the layout.
            config: Configuration; the packaged defaults are used when omitted.
            offset: Distance of each sidewalk line from the road edge.
            node_spacing: Maximum spacing between consecutive sidewalk nodes.
            snap_distance: Nodes closer than this are joined directly.
        """
        super().__init__()
        self.config = config or Config()
        self.offset = offset if offset is not None else self.config['navigation.pedestrian.offset']
        self.node_spacing = node_spacing if node_spacing is not None else self.config['navigation.pedestrian.node_spacing']
        self.snap_distance = snap_distance if snap_distance is not None else self.config['navigation.pedestrian.snap_distance']
        self.crosswalk_tolerance = self.config['navigation.pedestrian.crosswalk_tolerance']
        self.line_tolerance = self.config['navigation.pedestrian.line_tolerance']

        self.roads = list(roads)
        self.sidewalk_lines = self._create_sidewalk_lines(self.roads)
        self._build()

    def _create_sidewalk_lines(self, roads: Sequence[RoadSegment]) -> List[GraphLine]:
        lines = []
        for road in roads:
            if road.is_vertical:
                lines.append(GraphLine(f'{road.id}_left', Orientation.VERTICAL, road.x - self.offset, road.y, road.height))
                lines.append(GraphLine(f'{road.id}_right', Orientation.VERTICAL, road.right + self.offset, road.y, road.height))
            else:
                lines.append(GraphLine(f'{road.id}_top', Orientation.HORIZONTAL, road.x, road.y - self.offset, road.width))
                lines.append(GraphLine(f'{road.id}_bottom', Orientation.HORIZONTAL, road.x, road.bottom + self.offset, road.width))
        return lines

    def _build(self):
        for line in self.sidewalk_lines:
            self._add_line(line, self.node_spacing, 'sidewalk')

        vertical = [line for line in self.sidewalk_lines if line.is_vertical]
        horizontal = [line for line in self.sidewalk_lines if not line.is_vertical]
        crossings = self._connect_line_crossings(vertical, horizontal, self.line_tolerance)

        crosswalks = sum(self._add_crosswalks(road) for road in self.roads)
        snapped = self._snap_close_nodes(self.snap_distance)

        self.logger.info(
            f'Pedestrian graph built: {len(self.nodes)} nodes, {self.edge_count()} edges '
            f'({crossings} intersections, {crosswalks} crosswalks, {snapped} snapped pairs)'
        )

    def _add_crosswalks(self, road: RoadSegment) -> int:
        """Join aligned nodes on the two sidewalks of a road.

        Returns:
            Number of crosswalk edges requested.
        """
        nodes = list(self.nodes.values())
        if road.is_vertical:
            near_x, far_x = road.x - self.offset, road.right + self.offset
            near = [n for n in nodes if abs(n.x - near_x) < 1 and road.y <= n.y <= road.bottom]
            far = [n for n in nodes if abs(n.x - far_x) < 1]
            pairs = [(a, b) for a in near for b in far if abs(a.y - b.y) < self.crosswalk_tolerance]
        else:
            near_y, far_y = road.y - self.offset, road.bottom + self.offset
            near = [n for n in nodes if abs(n.y - near_y) < 1 and road.x <= n.x <= road.right]
            far = [n for n in nodes if abs(n.y - far_y) < 1]
            pairs = [(a, b) for a in near for b in far if abs(a.x - b.x) < self.crosswalk_tolerance]

        for a, b in pairs:
            self._add_edge(a.id, b.id)
        return len(pairs)
