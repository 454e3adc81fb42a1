"""Resident agent module: a pedestrian with a home lot, an optional car and a daily routine."""
import random
from enum import Enum
from typing import Callable, List, Optional

from streetsim.agent.base_agent import AgentType, BaseAgent
from streetsim.config import Config
from streetsim.dataclass import Lot
from streetsim.utils.logger import Logger
from streetsim.utils.math_utils import MathUtils
from streetsim.utils.vector import Vector

FIRST_NAMES = [
    'James', 'Mary', 'John', 'Patricia', 'Robert', 'Jennifer', 'Michael', 'Linda',
    'William', 'Barbara', 'David', 'Elizabeth', 'Richard', 'Susan', 'Joseph', 'Jessica',
    'Thomas', 'Sarah', 'Charles', 'Karen', 'Daniel', 'Nancy', 'Matthew', 'Lisa',
    'Carlos', 'Maria', 'Jose', 'Rosa', 'Luis', 'Carmen', 'Miguel', 'Sofia',
]
LAST_NAMES = [
    'Smith', 'Johnson', 'Williams', 'Brown', 'Jones', 'Garcia', 'Miller', 'Davis',
    'Rodriguez', 'Martinez', 'Hernandez', 'Lopez', 'Gonzalez', 'Wilson', 'Anderson',
    'Taylor', 'Moore', 'Jackson', 'Martin', 'Lee', 'Perez', 'Thompson', 'Nguyen', 'Flores',
]
OCCUPATIONS = [
    'Retired', 'Artist', 'Writer', 'Musician', 'Fisherman', 'Mechanic', 'Cook',
    'Bartender', 'Store Owner', 'Handyman', 'Photographer', 'Tour Guide', 'Unemployed',
    'Remote Worker', 'Caretaker',
]


class ResidentState(str, Enum):
    """Enumeration of possible resident behaviour states.

    Only IDLE_HOME, WALKING_TO_CAR, DRIVING, WALKING_HOME and WALKING_AROUND are
    entered by the resident's own state machine; the others are assigned from
    outside through ``Resident.apply_schedule``.
    """
    SLEEPING = 'sleeping'
    WAKING_UP = 'waking_up'
    IDLE_HOME = 'idle_home'
    EATING = 'eating'
    WALKING_TO_CAR = 'walking_to_car'
    DRIVING = 'driving'
    WALKING_HOME = 'walking_home'
    WALKING_AROUND = 'walking_around'
    WORKING = 'working'
    SHOPPING = 'shopping'
    AT_BAR = 'at_bar'
    SOCIALIZING = 'socializing'
    AT_CHURCH = 'at_church'


StateListener = Callable[['Resident', ResidentState, ResidentState], None]


class Resident(BaseAgent):
    """Resident of a lot, driven by a small trip state machine.

    Each tick ``update`` re-tests home presence and, unless an external schedule
    holds the resident, advances the machine:

    * IDLE_HOME: when the idle timer runs out, start a trip with probability
      ``sociability * trip_chance_factor``, otherwise draw a new idle timer.
    * WALKING_TO_CAR: once the route is done and the car is in reach, drive.
    * DRIVING / WALKING_AROUND: when the trip time is used up, head home.
    * WALKING_HOME: once the route is done and the resident is inside the home lot, idle.
    """

    def __init__(self, position: Vector, home_lot: Optional[Lot], speed: float,
                 sociability: float = None, adventurous: float = None, config: Config = None,
                 rng: random.Random = None, registry=None, navigation=None,
                 first_name: str = '', last_name: str = '', age: int = None, occupation: str = ''):
        """Initialize a resident.

        Args:
            position: Initial position vector.
            home_lot: Lot the resident lives in.
            speed: Walking speed in units per second.
            sociability: How often the resident goes out, in [0, 1]; drawn from ``rng`` when omitted.
            adventurous: How long trips last, in [0, 1]; drawn from ``rng`` when omitted.
            config: Configuration; the packaged defaults are used when omitted.
            rng: Random source for every decision the resident makes.
            registry: VehicleRegistry recording car ownership and occupancy.
            navigation: Pedestrian NavigationGraph used to route home; without it
                the resident heads straight for its destination.
            first_name: Given name.
            last_name: Family name.
            age: Age in years.
            occupation: What the resident does for a living.
        """
        super().__init__(AgentType.RESIDENT, position, speed, config=config, rng=rng)
        self.home_lot = home_lot
        self.sociability = sociability if sociability is not None else self.rng.random()
        self.adventurous = adventurous if adventurous is not None else self.rng.random()
        self.registry = registry
        self.navigation = navigation
        self.first_name = first_name
        self.last_name = last_name
        self.age = age
        self.occupation = occupation

        self.state = ResidentState.IDLE_HOME
        self.is_home = True
        self.is_in_car = False
        self.schedule_override = False
        self.idle_timer = self._draw_window('resident.idle_reset.min', 'resident.idle_reset.range')
        self.trip_elapsed = 0.0
        self.max_trip_duration = 0.0

        self._listeners: List[StateListener] = []
        self.logger = Logger.get_logger('Resident')

    @classmethod
    def generate_random(cls, position: Vector, home_lot: Lot, rng: random.Random, config: Config = None,
                        registry=None, navigation=None) -> 'Resident':
        """Create a resident with a random identity, walking speed and personality."""
        config = config or Config()
        first_name = rng.choice(FIRST_NAMES)
        last_name = rng.choice(LAST_NAMES)
        age = config['resident.age.min'] + rng.randrange(config['resident.age.range'])
        occupation = rng.choice(OCCUPATIONS)
        speed = config['resident.walk_speed.min'] + rng.random() * config['resident.walk_speed.range']
        return cls(position, home_lot, speed, sociability=rng.random(), adventurous=rng.random(),
                   config=config, rng=rng, registry=registry, navigation=navigation,
                   first_name=first_name, last_name=last_name, age=age, occupation=occupation)

    @property
    def full_name(self) -> str:
        return f'{self.first_name} {self.last_name}'.strip()

    def _draw_window(self, min_key: str, range_key: str, scale: float = 1.0) -> float:
        return self.config[min_key] + self.rng.random() * self.config[range_key] * scale

    # State bookkeeping

    def add_listener(self, callback: StateListener):
        """Register a callback invoked as ``callback(resident, old_state, new_state)`` on every change."""
        self._listeners.append(callback)

    def remove_listener(self, callback: StateListener):
        """Unregister a callback added with ``add_listener``."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _set_state(self, new_state: ResidentState):
        old_state = self.state
        if old_state == new_state:
            return
        self.state = new_state
        self.logger.debug(f'Resident {self.id}: {old_state.value} -> {new_state.value}')
        for callback in list(self._listeners):
            callback(self, old_state, new_state)

    # Car handling

    @property
    def car(self):
        """The resident's vehicle, or None."""
        if self.registry is None:
            return None
        return self.registry.get_vehicle(self.registry.car_of(self.id))

    @property
    def has_car(self) -> bool:
        """Whether the resident owns a car."""
        return self.car is not None

    def enter_car(self) -> bool:
        """Take the driver's seat of the resident's car.

        Returns:
            True if the resident is now driving.
        """
        car = self.car
        if car is None or self.is_in_car:
            return False
        self.clear_route()
        self.position = car.position
        self.is_in_car = True
        self.registry.set_driver(car.id, self.id)
        return True

    def exit_car(self) -> bool:
        """Leave the car and stand next to it; the car stays parked where it is.

        Returns:
            True if the resident was driving.
        """
        car = self.car
        if car is None or not self.is_in_car:
            return False
        self.is_in_car = False
        self.position = car.position + Vector(self.config['resident.exit_car_offset'], 0)
        self.registry.clear_driver(car.id)
        car.clear_route()
        return True

    # Home presence

    def check_home(self) -> bool:
        """Recompute ``is_home`` with a point-in-polygon test against the home lot."""
        if self.home_lot is None:
            self.is_home = False
        else:
            self.is_home = MathUtils.point_in_polygon(self.position.x, self.position.y, self.home_lot.points)
        return self.is_home

    def home_point(self) -> Optional[Vector]:
        """A point inside the home lot to walk back to.

        The centroid when it lies inside the lot, otherwise a random interior point
        (concave lots can have their centroid outside the polygon).
        """
        if self.home_lot is None:
            return None
        points = self.home_lot.points
        center = MathUtils.centroid(points)
        if center is None or MathUtils.point_in_polygon(center.x, center.y, points):
            return center
        return MathUtils.random_point_in_polygon(points, self.rng,
                                                 margin=self.config['lots.interior_margin'],
                                                 samples=self.config['lots.interior_samples'])

    # Trips

    def start_trip(self):
        """Leave home, by car when the resident has one, on foot otherwise."""
        car = self.car
        self.trip_elapsed = 0.0
        if car is not None:
            self.set_target_position(car.position)
            self._set_state(ResidentState.WALKING_TO_CAR)
        else:
            self.clear_route()
            self.max_trip_duration = self._draw_window(
                'resident.walk_trip.min', 'resident.walk_trip.adventurous_range', self.adventurous)
            self._set_state(ResidentState.WALKING_AROUND)

    def start_return_home(self):
        """End the current trip and walk back to the home lot."""
        self.exit_car()
        self._route_home()
        self._set_state(ResidentState.WALKING_HOME)

    def _route_home(self):
        home = self.home_point()
        if home is None:
            self.clear_route()
            return
        if self.navigation is None:
            self.set_target_position(home)
            return
        self.set_path(self.navigation.find_path(self.position, home) + [home])

    # External schedule seam

    def apply_schedule(self, state: ResidentState):
        """Hand the resident to an external scheduler and put it in ``state``.

        The local state machine stays suspended until ``release_schedule``.
        """
        self.schedule_override = True
        self._set_state(state)

    def release_schedule(self):
        """Return control to the local state machine.

        The resident resumes idling when already home and walks home otherwise.
        """
        if not self.schedule_override:
            return
        self.schedule_override = False
        self.idle_timer = self._draw_window('resident.idle_reset.min', 'resident.idle_reset.range')
        if self.check_home() and not self.is_in_car:
            self.clear_route()
            self._set_state(ResidentState.IDLE_HOME)
        else:
            self.start_return_home()

    # Tick

    def update(self, delta: float):
        """Advance the behaviour state machine by one tick and re-test home presence.

        Movement is separate, see ``move``.

        Args:
            delta: Elapsed simulated seconds.
        """
        car = self.car
        if self.is_in_car and car is not None:
            self.position = car.position
        self.check_home()

        if self.schedule_override:
            return

        if self.state == ResidentState.IDLE_HOME:
            self.idle_timer -= delta
            if self.idle_timer <= 0:
                if self.rng.random() < self.sociability * self.config['resident.trip_chance_factor']:
                    self.start_trip()
                else:
                    self.idle_timer = self._draw_window('resident.idle_reset.min', 'resident.idle_reset.range')

        elif self.state == ResidentState.WALKING_TO_CAR:
            if car is None:
                self.start_return_home()
            elif not self.has_route:
                if self.position.distance(car.position) < self.config['resident.car_reach_distance']:
                    self.enter_car()
                    self.trip_elapsed = 0.0
                    self.max_trip_duration = self._draw_window(
                        'resident.drive_trip.min', 'resident.drive_trip.adventurous_range', self.adventurous)
                    self._set_state(ResidentState.DRIVING)
                else:
                    self.set_target_position(car.position)

        elif self.state in (ResidentState.DRIVING, ResidentState.WALKING_AROUND):
            self.trip_elapsed += delta
            if self.trip_elapsed >= self.max_trip_duration:
                self.start_return_home()

        elif self.state == ResidentState.WALKING_HOME:
            if not self.has_route:
                if self.is_home:
                    self.idle_timer = self._draw_window('resident.home_idle.min', 'resident.home_idle.range')
                    self._set_state(ResidentState.IDLE_HOME)
                else:
                    self._route_home()
