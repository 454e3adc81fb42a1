"""Module for data classes describing the static street layout."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from streetsim.utils.vector import Vector


class Orientation(str, Enum):
    """Axis a road segment runs along."""
    VERTICAL = 'vertical'
    HORIZONTAL = 'horizontal'


class LotUsage(str, Enum):
    """What a lot is used for."""
    VACANT = 'vacant'
    RESIDENTIAL = 'residential'
    COMMERCIAL = 'commercial'
    PUBLIC = 'public'
    LODGING = 'lodging'
    BAR = 'bar'
    CHURCH = 'church'
    PARKING = 'parking'


class LotState(str, Enum):
    """Occupancy state of a lot."""
    EMPTY = 'empty'
    OCCUPIED = 'occupied'
    AWAY = 'away'
    ABANDONED = 'abandoned'
    FOR_SALE = 'for_sale'


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box given by its extremes."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        """Extent along x."""
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Extent along y."""
        return self.max_y - self.min_y

    def contains(self, x: float, y: float) -> bool:
        """Return True if the point lies inside or on the box."""
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def to_dict(self):
        """Convert the bounds to dictionary representation."""
        return {
            'minX': self.min_x,
            'maxX': self.max_x,
            'minY': self.min_y,
            'maxY': self.max_y,
        }


@dataclass(frozen=True)
class RoadSegment:
    """Axis-aligned rectangular road segment.

    (x, y) is the top-left corner; the rectangle spans ``width`` along x and
    ``height`` along y.
    """
    id: str
    orientation: Orientation
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_dict(cls, data: dict, index: int = 0) -> 'RoadSegment':
        """Build a road segment from map data.

        Args:
            data: Dictionary with ``type``, ``x``, ``y``, ``width``, ``height`` and optional ``id``.
            index: Position in the source list, used when ``id`` is missing.

        Returns:
            The road segment.

        Raises:
            ValueError: If the orientation is unknown or a field is missing.
        """
        try:
            orientation = Orientation(data['type'])
            return cls(
                id=str(data.get('id', f'road_{index}')),
                orientation=orientation,
                x=float(data['x']),
                y=float(data['y']),
                width=float(data['width']),
                height=float(data['height']),
            )
        except KeyError as e:
            raise ValueError(f'Road segment {index} is missing field {e}') from e
        except ValueError as e:
            raise ValueError(f'Road segment {index} is invalid: {e}') from e

    @property
    def is_vertical(self) -> bool:
        """True for segments running along y."""
        return self.orientation == Orientation.VERTICAL

    @property
    def right(self) -> float:
        """X coordinate of the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Y coordinate of the bottom edge."""
        return self.y + self.height

    @property
    def center(self) -> Vector:
        """Centre of the rectangle."""
        return Vector(self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, x: float, y: float, padding: float = 0.0) -> bool:
        """Return True if the point lies within the rectangle grown by ``padding``."""
        return (self.x - padding <= x <= self.right + padding and
                self.y - padding <= y <= self.bottom + padding)

    def clamp(self, x: float, y: float) -> Vector:
        """Closest point of the rectangle to (x, y)."""
        return Vector(max(self.x, min(x, self.right)), max(self.y, min(y, self.bottom)))

    def to_dict(self):
        """Convert the segment to its map-data representation."""
        return {
            'id': self.id,
            'type': self.orientation.value,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
        }


@dataclass
class Lot:
    """A land parcel: an ordered polygon plus simulation tags.

    Lots are owned by the world; residents only reference them as their home.
    """
    id: int
    points: List[Vector]
    usage: LotUsage = LotUsage.RESIDENTIAL
    state: LotState = LotState.OCCUPIED
    address: Optional[str] = None
    entry_point: Optional[Vector] = None
    road_access_point: Optional[Vector] = None
    parking_spot: Optional[Vector] = None
    gate_positions: List[Vector] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> 'Lot':
        """Build a lot from map data; ``usage`` and ``state`` are optional."""
        lot = cls(
            id=int(data['id']),
            points=[Vector(p) for p in data.get('points', [])],
            address=data.get('address'),
        )
        if data.get('parking_spot') is not None:
            lot.parking_spot = Vector(data['parking_spot'])
        return lot

    def __hash__(self):
        """Lots are identified by id."""
        return hash(self.id)

    def __eq__(self, other) -> bool:
        """Compare lots by id."""
        if not isinstance(other, Lot):
            return False
        return self.id == other.id


@dataclass
class MapMetadata:
    """Descriptive header of a map file."""
    total_lots: int = 0
    total_roads: int = 0
    description: str = ''
    view_box: Optional[Bounds] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'MapMetadata':
        """Build metadata from map data; ``viewBox`` is ``{x, y, width, height}``."""
        data = data or {}
        view_box = None
        vb = data.get('viewBox')
        if vb:
            view_box = Bounds(vb['x'], vb['x'] + vb['width'], vb['y'], vb['y'] + vb['height'])
        return cls(
            total_lots=int(data.get('total_lots', 0)),
            total_roads=int(data.get('total_roads', 0)),
            description=data.get('description', ''),
            view_box=view_box,
        )
