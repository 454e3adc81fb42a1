"""Base agent class for all agents in the simulation."""
import math
import random
from collections import deque
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable

from streetsim.config import Config
from streetsim.utils.vector import Vector


class AgentType(str, Enum):
    """Closed set of agent kinds."""
    RESIDENT = 'resident'
    TOURIST = 'tourist'
    COP = 'cop'
    DOG = 'dog'
    CAT = 'cat'
    VEHICLE = 'vehicle'


@runtime_checkable
class Positionable(Protocol):
    """Anything with a planar position and an elevation."""
    position: Vector
    elevation: float


@runtime_checkable
class Pathable(Protocol):
    """Anything that follows a queue of waypoints."""
    position: Vector
    path: List[Vector]
    target: Optional[Vector]

    def set_path(self, path: List[Vector]) -> None:
        """Replace the waypoint queue."""

    def move(self, delta: float) -> None:
        """Advance along the current route."""


@runtime_checkable
class Drivable(Protocol):
    """A vehicle that can be driven and slowed down by traffic."""
    speed_modifier: float
    is_braking: bool

    def is_parked(self) -> bool:
        """True when nobody is driving."""


def dispatch(agent, table: Dict[AgentType, Callable[..., Any]], *args):
    """Call the handler registered for the agent's kind.

    Args:
        agent: Agent to dispatch on.
        table: Handlers keyed on AgentType, called as ``handler(agent, *args)``.
        *args: Extra arguments for the handler.

    Returns:
        Whatever the handler returns.

    Raises:
        TypeError: If the table has no handler for the agent's kind.
    """
    handler = table.get(agent.type)
    if handler is None:
        raise TypeError(f'No handler for agent type {agent.type!r}')
    return handler(agent, *args)


class BaseAgent:
    """Base class for all agents in the simulation.

    Movement is planar: ``position`` is (x, y) on the map and ``elevation`` is the
    terrain height the agent stands on.
    """

    _id_counter = 0

    def __init__(self, type: AgentType, position: Vector, speed: float, config: Config = None,
                 rng: random.Random = None, elevation: float = None):
        """Initialize the base agent.

        Args:
            type: Agent kind.
            position: Initial position vector.
            speed: Movement speed in units per second.
            config: Configuration; the packaged defaults are used when omitted.
            rng: Random source for any stochastic behaviour of the agent.
            elevation: Terrain height; defaults to ``agent.elevation``.
        """
        self.id = BaseAgent._id_counter
        BaseAgent._id_counter += 1

        self.config = config or Config()
        self.type = type
        self._position = Vector(position)
        self._direction = Vector(1, 0)
        self._yaw = 0
        self.elevation = elevation if elevation is not None else self.config['agent.elevation']
        self.speed = speed
        self.rng = rng or random.Random()

        self.path: List[Vector] = []
        self.target: Optional[Vector] = None
        self.arrival_distance = self.config['agent.arrival_distance']
        self.recent_path = deque(maxlen=self.config['agent.recent_path_length'])
        self.recent_path_spacing = self.config['agent.recent_path_spacing']

    @classmethod
    def reset_id_counter(cls):
        """Reset the agent ID counter to zero."""
        BaseAgent._id_counter = 0

    def __str__(self):
        """Return a string representation of the agent."""
        return f'{type(self).__name__}(id={self.id}, type={self.type.value}, position={self.position})'

    def __repr__(self):
        """Return a detailed string representation of the agent."""
        return (f'{type(self).__name__}(id={self.id}, type={self.type.value}, position={self.position}, '
                f'target={self.target}, path={self.path})')

    @property
    def position(self):
        """Get the position of the agent.

        Returns:
            Vector: The position of the agent.
        """
        return self._position

    @position.setter
    def position(self, position: Vector):
        """Set the position of the agent.

        Args:
            position: The new position vector.
        """
        self._position = Vector(position)

    @property
    def direction(self):
        """Get the heading of the agent.

        Returns:
            Vector: Unit heading vector.
        """
        return self._direction

    @direction.setter
    def direction(self, yaw: float):
        """Set the heading of the agent.

        Args:
            yaw: The new yaw of the agent in degrees.
        """
        self._yaw = yaw
        self._direction = Vector(math.cos(math.radians(yaw)), math.sin(math.radians(yaw))).normalize()

    @property
    def yaw(self):
        """Get the yaw of the agent in degrees."""
        return self._yaw

    @property
    def has_route(self) -> bool:
        """True while the agent has a target or queued waypoints."""
        return self.target is not None or len(self.path) > 0

    def set_target_position(self, target: Optional[Vector]):
        """Head straight for a point, dropping any queued waypoints."""
        self.path = []
        self.target = Vector(target) if target is not None else None

    def set_path(self, path: List[Vector]):
        """Replace the waypoint queue; the first waypoint becomes the next target."""
        self.path = [Vector(p) for p in path]
        self.target = None

    def clear_route(self):
        """Drop the target and all queued waypoints."""
        self.path = []
        self.target = None

    def _next_target(self):
        if self.target is None and self.path:
            self.target = self.path.pop(0)

    def _record_position(self):
        if not self.recent_path or self.position.distance(self.recent_path[-1]) > self.recent_path_spacing:
            self.recent_path.append(Vector(self.position))

    def _face(self, heading: Vector):
        self.direction = math.degrees(math.atan2(heading.y, heading.x))

    def move(self, delta: float):
        """Advance toward the current target, taking the next waypoint when idle.

        The agent never overshoots its target and snaps onto it once within the
        arrival distance.

        Args:
            delta: Elapsed simulated seconds.
        """
        self._next_target()
        if self.target is None:
            return

        self._record_position()
        to_target = self.target - self.position
        dist = self.position.distance(self.target)
        if dist < self.arrival_distance:
            self.position = self.target
            self.target = None
            return

        self._face(to_target)
        step = min(dist, self.speed * delta)
        self.position = self.position + to_target.normalize() * step

    def update(self, delta: float):
        """Advance the agent by one tick."""
        self.move(delta)
