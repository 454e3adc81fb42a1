"""Navigation graphs over the street layout."""
from streetsim.map.map import GraphLine, NavigationGraph, Node
from streetsim.map.pedestrian_graph import PedestrianGraph
from streetsim.map.road_graph import RoadGraph

__all__ = ['GraphLine', 'NavigationGraph', 'Node', 'PedestrianGraph', 'RoadGraph']
