"""Vehicle agent module for simulating cars on the road graph."""
import random
from typing import Optional

from streetsim.agent.base_agent import AgentType, BaseAgent
from streetsim.config import Config
from streetsim.utils.vector import Vector


class Vehicle(BaseAgent):
    """Car that accelerates toward its cruising speed and brakes near targets.

    Who drives the car is recorded in a VehicleRegistry, not on the vehicle; a
    vehicle without a registry or without a registered driver is parked.
    """

    def __init__(self, position: Vector, speed: float, config: Config = None,
                 rng: random.Random = None, registry=None):
        """Initialize a vehicle.

        Args:
            position: Initial position vector.
            speed: Base speed; the cruising speed is this times ``vehicle.speed_multiplier``.
            config: Configuration; the packaged defaults are used when omitted.
            rng: Random source.
            registry: VehicleRegistry that records the driver.
        """
        config = config or Config()
        super().__init__(AgentType.VEHICLE, position, speed * config['vehicle.speed_multiplier'],
                         config=config, rng=rng, elevation=config['vehicle.elevation'])
        self.registry = registry
        self.arrival_distance = self.config['vehicle.arrival_distance']

        self.current_speed = 0.0
        self.speed_modifier = 1.0
        self.is_braking = False

    @property
    def driver_id(self) -> Optional[int]:
        """Id of the agent driving this vehicle, or None."""
        if self.registry is None:
            return None
        return self.registry.driver_of(self.id)

    def is_parked(self) -> bool:
        """True when nobody is driving."""
        return self.driver_id is None

    def move(self, delta: float):
        """Advance one tick of vehicle dynamics.

        Accelerates at twice the cruising speed per second toward
        ``speed * speed_modifier``, brakes at the same rate on arrival and at three
        times the rate without a target. ``speed_modifier`` is reset to 1 afterwards
        and must be reapplied every tick.

        Args:
            delta: Elapsed simulated seconds.
        """
        previous_speed = self.current_speed

        if self.is_parked():
            self.current_speed = 0.0
        else:
            self._next_target()
            if self.target is not None:
                self._record_position()
                to_target = self.target - self.position
                dist = self.position.distance(self.target)

                if dist < self.arrival_distance:
                    self.position = self.target
                    self.target = None
                    self.current_speed = max(0.0, self.current_speed - self.speed * 2 * delta)
                else:
                    self._face(to_target)
                    desired_speed = self.speed * max(0.0, min(1.0, self.speed_modifier))
                    self.current_speed = min(desired_speed, self.current_speed + self.speed * 2 * delta)
                    step = min(dist, self.current_speed * delta)
                    self.position = self.position + to_target.normalize() * step
            else:
                self.current_speed = max(0.0, self.current_speed - self.speed * 3 * delta)

        self.is_braking = self.current_speed < previous_speed - 0.01
        self.speed_modifier = 1.0
