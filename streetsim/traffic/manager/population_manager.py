"""Population management module.

This module places residents into habitable lots, gives some of them cars parked
at their lot and records ownership in the vehicle registry.
"""
import random
from typing import Dict, List, Optional, Sequence

from streetsim.agent.resident import Resident
from streetsim.agent.vehicle import Vehicle
from streetsim.config import Config
from streetsim.dataclass import Lot, LotState
from streetsim.traffic.base.vehicle_registry import VehicleRegistry
from streetsim.utils.logger import Logger
from streetsim.utils.math_utils import MathUtils
from streetsim.utils.vector import Vector

HABITABLE_STATES = (LotState.OCCUPIED, LotState.AWAY, LotState.ABANDONED)


class PopulationManager:
    """Spawns residents and their vehicles.

    Households are mostly singles and couples; lots hold at most
    ``population.max_occupants_per_lot`` residents and abandoned lots are usually skipped.
    """
    def __init__(self, lots: Sequence[Lot], registry: VehicleRegistry, config: Config = None,
                 rng: random.Random = None, navigation=None):
        """Initialize the population manager.

        Args:
            lots: Lots of the world.
            registry: Registry recording car ownership.
            config: Configuration; the packaged defaults are used when omitted.
            rng: Random source for placement and for the spawned agents.
            navigation: Pedestrian graph handed to every resident.
        """
        self.lots = list(lots)
        self.registry = registry
        self.config = config or Config()
        self.rng = rng or random.Random()
        self.navigation = navigation

        self.residents: List[Resident] = []
        self.vehicles: List[Vehicle] = []
        self.logger = Logger.get_logger('PopulationManager')

    def _pick_household_size(self, remaining: int) -> int:
        roll = self.rng.random()
        cumulative = 0.0
        weights = self.config['population.household_size_weights']
        size = len(weights)
        for i, weight in enumerate(weights):
            cumulative += weight
            if roll < cumulative:
                size = i + 1
                break
        return min(remaining, size)

    def populate(self, resident_count: int) -> List[Resident]:
        """Place up to ``resident_count`` residents into habitable lots.

        Lots are picked at random; full lots leave the pool and abandoned lots are
        skipped with probability ``population.abandoned_skip_chance``. Placement stops
        after ``population.max_failed_attempts`` consecutive misses.

        Args:
            resident_count: Number of residents to place.

        Returns:
            The residents placed.
        """
        self.residents = []
        self.vehicles = []

        available = [lot for lot in self.lots if lot.state in HABITABLE_STATES]
        if not available:
            self.logger.warning('No habitable lots found')
            return self.residents

        max_occupants = self.config['population.max_occupants_per_lot']
        skip_chance = self.config['population.abandoned_skip_chance']
        max_failed_attempts = self.config['population.max_failed_attempts']
        occupancy: Dict[int, int] = {}
        remaining = resident_count
        failed_attempts = 0

        while remaining > 0 and available and failed_attempts < max_failed_attempts:
            index = self.rng.randrange(len(available))
            lot = available[index]
            current = occupancy.get(lot.id, 0)

            if current >= max_occupants:
                available.pop(index)
                failed_attempts += 1
                continue

            if lot.state == LotState.ABANDONED and self.rng.random() < skip_chance:
                failed_attempts += 1
                continue

            failed_attempts = 0
            household_size = min(self._pick_household_size(remaining), max_occupants - current)
            for _ in range(household_size):
                self._spawn_resident(lot)
            remaining -= household_size

            occupancy[lot.id] = current + household_size
            if occupancy[lot.id] >= max_occupants:
                available.remove(lot)

        self.logger.info(f'Population: {len(self.residents)} residents, {len(self.vehicles)} vehicles')
        return self.residents

    def _spawn_resident(self, lot: Lot) -> Resident:
        center = MathUtils.centroid(lot.points) or Vector(0, 0)
        jitter = self.config['population.spawn_jitter']
        position = Vector(center.x + (self.rng.random() - 0.5) * jitter,
                          center.y + (self.rng.random() - 0.5) * jitter)

        resident = Resident.generate_random(position, lot, rng=random.Random(self.rng.getrandbits(32)),
                                            config=self.config, registry=self.registry,
                                            navigation=self.navigation)
        self.residents.append(resident)

        wants_car = self.rng.random() < self.config['population.car_ownership']
        if wants_car and lot.parking_spot is not None:
            speed = self.config['vehicle.speed.min'] + self.rng.random() * self.config['vehicle.speed.range']
            car = Vehicle(lot.parking_spot, speed, config=self.config, rng=random.Random(self.rng.getrandbits(32)))
            self.registry.register(car)
            self.registry.assign_owner(resident.id, car.id)
            self.vehicles.append(car)
        return resident

    def residents_of_lot(self, lot: Lot) -> List[Resident]:
        """Residents whose home is the given lot."""
        return [r for r in self.residents if r.home_lot is not None and r.home_lot.id == lot.id]

    def vehicle_of(self, resident: Resident) -> Optional[Vehicle]:
        """The resident's car, or None."""
        return self.registry.get_vehicle(self.registry.car_of(resident.id))
