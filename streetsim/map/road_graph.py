"""Vehicle navigation graph along road centrelines."""
from typing import List, Sequence

from streetsim.config import Config
from streetsim.dataclass import Orientation, RoadSegment
from streetsim.map.map import GraphLine, NavigationGraph


class RoadGraph(NavigationGraph):
    """Drivable graph with nodes along each road's centreline.

    Centreline crossings of vertical and horizontal roads become intersection nodes
    linked to the two nearest centreline nodes of each road.
    """

    def __init__(self, roads: Sequence[RoadSegment], config: Config = None):
        """Build the graph.

        Args:
            roads: Road segments of the layout.
            config: Configuration; the packaged defaults are used when omitted.
        """
        super().__init__()
        self.config = config or Config()
        self.node_spacing = self.config['navigation.road.node_spacing']
        self.snap_distance = self.config['navigation.road.snap_distance']
        self.line_tolerance = self.config['navigation.road.line_tolerance']

        self.roads = list(roads)
        self.centerlines = self._create_centerlines(self.roads)

        for line in self.centerlines:
            self._add_line(line, self.node_spacing, 'centerline')
        vertical = [line for line in self.centerlines if line.is_vertical]
        horizontal = [line for line in self.centerlines if not line.is_vertical]
        crossings = self._connect_line_crossings(vertical, horizontal, self.line_tolerance)
        self._snap_close_nodes(self.snap_distance)

        self.logger.info(f'Road graph built: {len(self.nodes)} nodes, {self.edge_count()} edges, {crossings} intersections')

    @staticmethod
    def _create_centerlines(roads: Sequence[RoadSegment]) -> List[GraphLine]:
        lines = []
        for road in roads:
            if road.is_vertical:
                lines.append(GraphLine(road.id, Orientation.VERTICAL, road.x + road.width / 2, road.y, road.height))
            else:
                lines.append(GraphLine(road.id, Orientation.HORIZONTAL, road.x, road.y + road.height / 2, road.width))
        return lines
