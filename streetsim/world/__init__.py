"""World package: the loaded street layout and the simulation driver."""
from streetsim.world.simulation import Simulation
from streetsim.world.world import World

__all__ = ['Simulation', 'World']
