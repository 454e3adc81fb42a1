"""Simulation driver that steps every subsystem in a fixed order each tick."""
import random
from collections import Counter
from typing import Dict, List

from streetsim.agent.base_agent import AgentType, dispatch
from streetsim.agent.resident import Resident
from streetsim.config import Config
from streetsim.traffic.base.vehicle_registry import VehicleRegistry
from streetsim.traffic.manager.population_manager import PopulationManager
from streetsim.traffic.manager.traffic_manager import TrafficManager
from streetsim.utils.logger import Logger
from streetsim.utils.spatial_index import SpatialIndex
from streetsim.utils.timer import TimeSystem
from streetsim.world.world import World


def _move_resident(resident, delta):
    if not resident.is_in_car:
        resident.move(delta)


def _move_vehicle(vehicle, delta):
    vehicle.move(delta)


def _resident_state(resident):
    return resident.state.value


def _vehicle_state(vehicle):
    return 'parked' if vehicle.is_parked() else 'driving'


class Simulation:
    """Owns the world, its agents and every per-tick system.

    A tick runs, in order: the clock, each resident's behaviour, route assignment,
    the spatial index rebuild, vehicle yielding and finally agent movement. The
    index is fully rebuilt before anything queries it.
    """

    _movement = {
        AgentType.RESIDENT: _move_resident,
        AgentType.VEHICLE: _move_vehicle,
    }
    _state_label = {
        AgentType.RESIDENT: _resident_state,
        AgentType.VEHICLE: _vehicle_state,
    }

    def __init__(self, world: World, config: Config = None, seed: int = None, resident_count: int = None):
        """Wire up the systems and spawn the population.

        Args:
            world: Loaded world.
            config: Configuration; defaults to the world's.
            seed: Seed of the run's random source; defaults to ``simulation.seed``.
            resident_count: Residents to spawn; defaults to ``simulation.resident_count``.
        """
        self.world = world
        self.config = config or world.config
        self.seed = seed if seed is not None else self.config['simulation.seed']
        self.rng = random.Random(self.seed)
        self.logger = Logger.get_logger('Simulation')

        self.registry = VehicleRegistry()
        self.traffic = TrafficManager(world.roads, self.config, rng=random.Random(self.rng.getrandbits(32)))
        self.traffic.compute_access_points(world.lots)
        self.population = PopulationManager(world.lots, self.registry, self.config,
                                            rng=random.Random(self.rng.getrandbits(32)),
                                            navigation=self.traffic.pedestrian_graph)
        self.spatial_index = SpatialIndex(self.config['spatial_index.cell_size'])
        self.clock = TimeSystem.from_config(self.config)

        count = resident_count if resident_count is not None else self.config['simulation.resident_count']
        self.residents: List[Resident] = self.population.populate(count)
        self.tick_count = 0

        self.logger.info(f'Simulation ready: seed {self.seed}, {len(self.residents)} residents, '
                         f'{len(self.vehicles)} vehicles')

    @classmethod
    def from_config(cls, config: Config = None, map_path: str = None) -> 'Simulation':
        """Load the configured map and build a simulation over it."""
        config = config or Config()
        seed = config['simulation.seed']
        world = World.from_file(map_path or config['map.input_map'], config, rng=random.Random(seed))
        return cls(world, config, seed=seed)

    @property
    def vehicles(self):
        """Every registered vehicle."""
        return self.registry.all_vehicles()

    @property
    def agents(self):
        """Residents followed by vehicles."""
        return list(self.residents) + self.vehicles

    def visible_agents(self):
        """Agents physically present on the map: residents outside cars and every vehicle."""
        return [r for r in self.residents if not r.is_in_car] + self.vehicles

    def tick(self, delta: float):
        """Advance the simulation by ``delta`` real seconds.

        Args:
            delta: Elapsed real seconds; scaled by the clock's time scale for movement.
        """
        self.clock.update(delta)
        scaled_delta = delta * self.clock.time_scale

        for resident in self.residents:
            resident.update(scaled_delta)

        agents = self.agents
        self.traffic.update_traffic(agents)
        self.spatial_index.populate(self.visible_agents())
        self.traffic.apply_yielding(self.spatial_index)

        for agent in agents:
            dispatch(agent, self._movement, scaled_delta)
        self.tick_count += 1

    def run(self, ticks: int, delta: float = 1 / 30):
        """Run a fixed number of ticks."""
        for _ in range(ticks):
            self.tick(delta)

    def remove_resident(self, resident: Resident):
        """Take a resident out of the run, leaving its car parked and unowned."""
        resident.exit_car()
        self.registry.remove_agent(resident.id)
        self.residents.remove(resident)

    def snapshot(self) -> List[Dict]:
        """Per-agent records for an external renderer.

        Returns:
            One ``{id, type, x, y, state, path}`` dict per agent; ``path`` starts at
            the current target.
        """
        records = []
        for agent in self.agents:
            path = ([agent.target] if agent.target is not None else []) + list(agent.path)
            records.append({
                'id': agent.id,
                'type': agent.type.value,
                'x': agent.position.x,
                'y': agent.position.y,
                'state': dispatch(agent, self._state_label),
                'path': [p.to_dict() for p in path],
            })
        return records

    def state_histogram(self) -> Dict[str, int]:
        """Number of residents per behaviour state."""
        return dict(Counter(resident.state.value for resident in self.residents))
