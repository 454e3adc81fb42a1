"""Two-dimensional vector utilities module, providing Vector class and related operations."""
from dataclasses import dataclass


@dataclass
class Vector:
    """Two-dimensional planar vector.

    Map coordinates are planar: ``x`` is the horizontal axis and ``y`` the depth
    axis of the street layout (the axis a 3D renderer calls ``z``).

    Attributes:
        x: X coordinate.
        y: Y coordinate.
    """

    x: float
    y: float

    def __init__(self, x, y=None):
        """Initialize the vector.

        Accepts ``Vector(x, y)``, a two-element list/tuple, or a ``{'x': .., 'y': ..}`` dict.

        Args:
            x: X coordinate, or a list/tuple/dict holding both coordinates.
            y: Y coordinate.
        """
        if y is None and isinstance(x, (list, tuple)):
            self.x = float(x[0])
            self.y = float(x[1])
        elif y is None and isinstance(x, dict):
            self.x = float(x.get('x', 0))
            self.y = float(x.get('y', 0))
        elif y is None and isinstance(x, Vector):
            self.x = x.x
            self.y = x.y
        else:
            self.x = float(x)
            self.y = float(y) if y is not None else 0.0

        self.x = round(self.x, 4)
        self.y = round(self.y, 4)

    def normalize(self) -> 'Vector':
        """Normalize the vector.

        Returns:
            Normalized vector, or the zero vector if the magnitude is zero.
        """
        magnitude = (self.x ** 2 + self.y ** 2) ** 0.5
        if magnitude == 0:
            return Vector(0, 0)
        return Vector(self.x / magnitude, self.y / magnitude)

    def __add__(self, other: 'Vector') -> 'Vector':
        """Vector addition."""
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vector') -> 'Vector':
        """Vector subtraction."""
        return Vector(self.x - other.x, self.y - other.y)

    def __mul__(self, other: float) -> 'Vector':
        """Vector multiplication by a scalar."""
        return Vector(self.x * other, self.y * other)

    def __truediv__(self, other: float) -> 'Vector':
        """Vector division by a scalar."""
        return Vector(self.x / other, self.y / other)

    def distance(self, other: 'Vector') -> float:
        """Calculate distance to another vector.

        Args:
            other: Another vector.

        Returns:
            Euclidean distance between the two vectors.
        """
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    def distance_squared(self, other: 'Vector') -> float:
        """Squared Euclidean distance, for comparisons that do not need the root."""
        return (self.x - other.x) ** 2 + (self.y - other.y) ** 2

    def __eq__(self, other: 'Vector') -> bool:
        """Check if two vectors are equal within a 1e-3 tolerance.

        Vectors are unhashable: tolerant equality admits no consistent hash.
        """
        if not isinstance(other, Vector):
            return False
        return abs(self.x - other.x) < 1e-3 and abs(self.y - other.y) < 1e-3

    def dot(self, other: 'Vector') -> float:
        """Calculate dot product with another vector."""
        return round(self.x * other.x + self.y * other.y, 4)

    def cross(self, other: 'Vector') -> float:
        """Calculate the z component of the cross product with another vector."""
        return round(self.x * other.y - self.y * other.x, 4)

    def length(self) -> float:
        """Calculate length of the vector."""
        return round(((self.x ** 2 + self.y ** 2) ** 0.5), 4)

    def to_dict(self) -> dict:
        """Convert the vector to dictionary representation."""
        return {'x': self.x, 'y': self.y}
