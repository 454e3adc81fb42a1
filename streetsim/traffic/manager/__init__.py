from streetsim.traffic.manager.population_manager import PopulationManager
from streetsim.traffic.manager.traffic_manager import TrafficManager

__all__ = ['PopulationManager', 'TrafficManager']
