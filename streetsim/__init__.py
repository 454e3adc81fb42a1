"""StreetSim: pedestrians and vehicles moving through a street layout of roads and lots."""
from streetsim.config import Config
from streetsim.world import Simulation, World

__version__ = '0.1.0'

__all__ = ['Config', 'Simulation', 'World']
