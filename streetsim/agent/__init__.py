"""Agents moving through the street layout."""
from streetsim.agent.base_agent import (AgentType, BaseAgent, Drivable,
                                        Pathable, Positionable, dispatch)
from streetsim.agent.resident import Resident, ResidentState
from streetsim.agent.vehicle import Vehicle

__all__ = ['AgentType', 'BaseAgent', 'Drivable', 'Pathable', 'Positionable', 'dispatch',
           'Resident', 'ResidentState', 'Vehicle']
