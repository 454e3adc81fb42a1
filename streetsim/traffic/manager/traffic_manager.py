"""Traffic management module for route assignment and vehicle yielding.

This module hands fresh routes to agents that have run out of path, computes where
each lot meets the road network, and slows vehicles down near pedestrians.
"""
import math
import random
from typing import Iterable, List, Optional, Sequence

from streetsim.agent.base_agent import AgentType, dispatch
from streetsim.agent.resident import ResidentState
from streetsim.config import Config
from streetsim.dataclass import Lot, RoadSegment
from streetsim.map.map import NavigationGraph
from streetsim.map.pedestrian_graph import PedestrianGraph
from streetsim.map.road_graph import RoadGraph
from streetsim.utils.logger import Logger
from streetsim.utils.math_utils import MathUtils
from streetsim.utils.spatial_index import SpatialIndex
from streetsim.utils.vector import Vector

STATE_MACHINE_STATES = (ResidentState.IDLE_HOME, ResidentState.WALKING_TO_CAR, ResidentState.WALKING_HOME)


class TrafficManager:
    """Assigns wandering routes to agents and keeps vehicles clear of pedestrians.

    Pedestrians route on the sidewalk graph and vehicles on the road centreline graph.
    """
    def __init__(self, roads: Sequence[RoadSegment], config: Config = None, rng: random.Random = None,
                 pedestrian_graph: NavigationGraph = None, road_graph: NavigationGraph = None):
        """Initialize the traffic manager and build both navigation graphs.

        Args:
            roads: Road segments of the layout.
            config: Configuration; the packaged defaults are used when omitted.
            rng: Random source for destination picking.
            pedestrian_graph: Prebuilt sidewalk graph; built from ``roads`` when omitted.
            road_graph: Prebuilt centreline graph; built from ``roads`` when omitted.
        """
        self.config = config or Config()
        self.roads = list(roads)
        self.rng = rng or random.Random()
        self.logger = Logger.get_logger('TrafficManager')

        self.pedestrian_graph = pedestrian_graph if pedestrian_graph is not None else PedestrianGraph(self.roads, self.config)
        self.road_graph = road_graph if road_graph is not None else RoadGraph(self.roads, self.config)

        self.road_padding = self.config['lots.road_padding']
        self.yield_distance = self.config['vehicle.yield_distance']
        self.yield_speed_factor = self.config['vehicle.yield_speed_factor']

        self._graph_for = {
            AgentType.RESIDENT: lambda agent: self.pedestrian_graph,
            AgentType.TOURIST: lambda agent: self.pedestrian_graph,
            AgentType.COP: lambda agent: self.pedestrian_graph,
            AgentType.DOG: lambda agent: self.pedestrian_graph,
            AgentType.CAT: lambda agent: self.pedestrian_graph,
            AgentType.VEHICLE: lambda agent: self.road_graph,
        }

        self.logger.info(f'TrafficManager initialized with {len(self.roads)} roads')

    # Road queries

    def is_on_road(self, x: float, y: float) -> bool:
        """Check whether a point lies on any road, allowing a small padding."""
        return any(road.contains(x, y, self.road_padding) for road in self.roads)

    def get_nearest_road_point(self, x: float, y: float) -> Vector:
        """Closest point on any road centreline; the point itself when there are no roads."""
        nearest = Vector(x, y)
        min_dist = math.inf
        for road in self.roads:
            if road.is_vertical:
                px = road.x + road.width / 2
                py = max(road.y, min(y, road.bottom))
            else:
                px = max(road.x, min(x, road.right))
                py = road.y + road.height / 2
            dist = math.hypot(px - x, py - y)
            if dist < min_dist:
                min_dist = dist
                nearest = Vector(px, py)
        return nearest

    def get_random_point_on_road(self) -> Vector:
        """Uniform point inside a randomly chosen road; the origin when there are no roads."""
        if not self.roads:
            return Vector(0, 0)
        road = self.rng.choice(self.roads)
        return Vector(road.x + self.rng.random() * road.width, road.y + self.rng.random() * road.height)

    # Lot access

    def compute_access_points(self, lots: Iterable[Lot]):
        """Attach road access point, entry point, parking spot and gates to every lot.

        The road access point is the closest point of any road rectangle to the lot
        centroid; the entry point is the closest point of the lot boundary to it.
        Lots without a parking spot in the map data park at their road access point.
        """
        lots = list(lots)
        for lot in lots:
            center = MathUtils.centroid(lot.points)
            if center is None or not self.roads:
                continue

            access_point = min((road.clamp(center.x, center.y) for road in self.roads),
                               key=lambda p: p.distance(center))
            lot.road_access_point = access_point

            entry_point = center
            min_dist = math.inf
            for p1, p2 in MathUtils.polygon_edges(lot.points):
                candidate = MathUtils.closest_point_on_segment(p1, p2, access_point)
                dist = candidate.distance(access_point)
                if dist < min_dist:
                    min_dist = dist
                    entry_point = candidate
            lot.entry_point = entry_point

            if lot.parking_spot is None:
                lot.parking_spot = access_point

        self.compute_fence_gates(lots)

    def compute_fence_gates(self, lots: Iterable[Lot]):
        """Place gates at the midpoints of short lot edges that face a road.

        An edge faces a road when its midpoint lies within ``lots.gate_road_distance``
        of a road rectangle. It is short when it is below ``gate_short_side_ratio`` of
        the longest edge, or the lot is nearly square.
        """
        max_distance = self.config['lots.gate_road_distance']
        ratio = self.config['lots.gate_short_side_ratio']
        tolerance = self.config['lots.gate_square_tolerance']

        for lot in lots:
            lot.gate_positions = []
            if len(lot.points) < 3:
                continue

            edges = [(p1, p2, p1.distance(p2)) for p1, p2 in MathUtils.polygon_edges(lot.points)]
            max_length = max(length for _, _, length in edges)
            for p1, p2, length in edges:
                midpoint = Vector((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)
                facing_road = any(road.clamp(midpoint.x, midpoint.y).distance(midpoint) < max_distance
                                  for road in self.roads)
                if facing_road and (length < max_length * ratio or abs(length - max_length) < tolerance):
                    lot.gate_positions.append(midpoint)

    # Routing

    def _needs_route(self, agent) -> bool:
        if agent.has_route:
            return False
        if agent.type == AgentType.VEHICLE:
            return not agent.is_parked()
        if agent.type == AgentType.RESIDENT:
            return not agent.is_in_car and agent.state not in STATE_MACHINE_STATES
        return True

    def _lot_exit(self, agent) -> Optional[Vector]:
        home_lot = getattr(agent, 'home_lot', None)
        if home_lot is None:
            return None
        if home_lot.gate_positions:
            return min(home_lot.gate_positions, key=lambda gate: gate.distance(agent.position))
        return home_lot.entry_point

    def plan_route(self, agent) -> List[Vector]:
        """Route from the agent's position to a random point on the road network.

        An agent off the road first heads for its home lot's nearest gate, or the lot's
        entry point when it has no gates, else for the nearest road centreline point,
        and routes on from there.

        Args:
            agent: Agent to route.

        Returns:
            Waypoints to follow; never empty.
        """
        graph = dispatch(agent, self._graph_for)
        start = agent.position
        pre_path = []
        if not self.is_on_road(start.x, start.y):
            exit_point = self._lot_exit(agent)
            start = exit_point if exit_point is not None else self.get_nearest_road_point(start.x, start.y)
            pre_path.append(start)

        destination = self.get_random_point_on_road()
        path_points = graph.find_path(start, destination)

        if len(path_points) > 1:
            return pre_path + path_points[1:]
        if pre_path:
            return pre_path
        self.logger.debug(f'No path found for agent {agent.id}, using fallback')
        return [self.get_random_point_on_road()]

    def update_traffic(self, agents: Iterable):
        """Give every agent that has run out of route a new one.

        Parked vehicles, residents in a car and residents whose own state machine owns
        their movement (idle at home, walking to the car, walking home) are left alone.

        Args:
            agents: Agents to consider.
        """
        for agent in agents:
            if self._needs_route(agent):
                agent.set_path(self.plan_route(agent))

    def apply_yielding(self, index: SpatialIndex):
        """Slow driven vehicles down when a pedestrian stands ahead of them.

        Must run after the tick's ``index.populate``.

        Args:
            index: Spatial index holding this tick's visible agents.
        """
        for vehicle in list(self._indexed_vehicles(index)):
            heading_target = vehicle.target or (vehicle.path[0] if vehicle.path else None)
            if heading_target is None:
                continue
            heading = heading_target - vehicle.position
            for other in index.get_nearby(vehicle.position.x, vehicle.position.y, self.yield_distance):
                if other.type == AgentType.VEHICLE:
                    continue
                offset = other.position - vehicle.position
                if offset.length() <= self.yield_distance and heading.dot(offset) > 0:
                    vehicle.speed_modifier = min(vehicle.speed_modifier, self.yield_speed_factor)
                    self.logger.debug(f'Vehicle {vehicle.id} yielding to agent {other.id}')
                    break

    @staticmethod
    def _indexed_vehicles(index: SpatialIndex):
        for cell in index.cells.values():
            for entity in cell:
                if entity.type == AgentType.VEHICLE and not entity.is_parked():
                    yield entity
