"""Ownership and occupancy registry linking residents to vehicles by id."""
from typing import Dict, List, Optional

from streetsim.utils.logger import Logger


class VehicleRegistry:
    """Single source of truth for who owns and who drives which vehicle.

    Two relations are kept, each stored in both directions so every lookup is a
    dictionary access:

    * ownership: resident id <-> car id (at most one car per resident)
    * occupancy: car id <-> driver id (at most one driver per car and one car per driver)

    Removing an agent drops every relation it takes part in, so neither side can be
    left pointing at a removed agent.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self.vehicles: Dict[int, object] = {}
        self._car_by_owner: Dict[int, int] = {}
        self._owner_by_car: Dict[int, int] = {}
        self._driver_by_car: Dict[int, int] = {}
        self._car_by_driver: Dict[int, int] = {}
        self.logger = Logger.get_logger('VehicleRegistry')

    def __len__(self):
        """Number of registered vehicles."""
        return len(self.vehicles)

    def register(self, vehicle):
        """Make a vehicle resolvable by id and point it at this registry."""
        self.vehicles[vehicle.id] = vehicle
        vehicle.registry = self

    def get_vehicle(self, car_id: Optional[int]):
        """Vehicle object for an id, or None."""
        if car_id is None:
            return None
        return self.vehicles.get(car_id)

    def all_vehicles(self) -> List:
        """Registered vehicles in registration order."""
        return list(self.vehicles.values())

    # Ownership

    def assign_owner(self, resident_id: int, car_id: int):
        """Record that a resident owns a car, replacing earlier ownership on either side."""
        old_car = self._car_by_owner.pop(resident_id, None)
        if old_car is not None:
            self._owner_by_car.pop(old_car, None)
        old_owner = self._owner_by_car.pop(car_id, None)
        if old_owner is not None:
            self._car_by_owner.pop(old_owner, None)
        self._car_by_owner[resident_id] = car_id
        self._owner_by_car[car_id] = resident_id

    def owner_of(self, car_id: int) -> Optional[int]:
        """Owner of a car, or None."""
        return self._owner_by_car.get(car_id)

    def car_of(self, resident_id: int) -> Optional[int]:
        """Car owned by a resident, or None."""
        return self._car_by_owner.get(resident_id)

    # Occupancy

    def set_driver(self, car_id: int, driver_id: int):
        """Seat a driver, unseating whoever drove the car and the driver's previous car."""
        self.clear_driver(car_id)
        previous_car = self._car_by_driver.pop(driver_id, None)
        if previous_car is not None:
            self._driver_by_car.pop(previous_car, None)
        self._driver_by_car[car_id] = driver_id
        self._car_by_driver[driver_id] = car_id
        self.logger.debug(f'Agent {driver_id} is driving vehicle {car_id}')

    def clear_driver(self, car_id: int):
        """Leave a car without a driver."""
        driver_id = self._driver_by_car.pop(car_id, None)
        if driver_id is not None:
            self._car_by_driver.pop(driver_id, None)
            self.logger.debug(f'Agent {driver_id} left vehicle {car_id}')

    def driver_of(self, car_id: int) -> Optional[int]:
        """Driver of a car, or None when parked."""
        return self._driver_by_car.get(car_id)

    def vehicle_driven_by(self, driver_id: int) -> Optional[int]:
        """Car a driver is in, or None."""
        return self._car_by_driver.get(driver_id)

    def remove_agent(self, agent_id: int):
        """Drop every relation involving the id, as a resident or as a vehicle."""
        car_id = self._car_by_owner.pop(agent_id, None)
        if car_id is not None:
            self._owner_by_car.pop(car_id, None)
        owner_id = self._owner_by_car.pop(agent_id, None)
        if owner_id is not None:
            self._car_by_owner.pop(owner_id, None)

        driven = self._car_by_driver.pop(agent_id, None)
        if driven is not None:
            self._driver_by_car.pop(driven, None)
        self.clear_driver(agent_id)
        self.vehicles.pop(agent_id, None)
