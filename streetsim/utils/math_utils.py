"""Mathematical utility functions for planar geometry on lots and roads."""

import random
from typing import Iterable, List, Optional, Sequence

from streetsim.dataclass import Bounds
from streetsim.utils.vector import Vector


class MathUtils:
    """Collection of geometric helpers shared by the world, traffic and agents."""

    @staticmethod
    def centroid(points: Sequence[Vector]) -> Optional[Vector]:
        """Vertex average of a polygon.

        Args:
            points: Polygon vertices.

        Returns:
            The average point, or None for an empty polygon.
        """
        if not points:
            return None
        return Vector(
            sum(p.x for p in points) / len(points),
            sum(p.y for p in points) / len(points),
        )

    @staticmethod
    def bounds_of(points: Iterable[Vector]) -> Optional[Bounds]:
        """Axis-aligned bounding box of a point set, or None if it is empty."""
        points = list(points)
        if not points:
            return None
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return Bounds(min(xs), max(xs), min(ys), max(ys))

    @staticmethod
    def point_in_polygon(x: float, y: float, points: Sequence[Vector]) -> bool:
        """Ray-casting point-in-polygon test.

        A horizontal ray from (x, y) is tested against every edge and an inside flag
        toggles on each crossing. Polygons with fewer than 3 vertices contain nothing.

        Args:
            x: Query x.
            y: Query y.
            points: Polygon vertices in order.

        Returns:
            True if the point is inside the polygon.
        """
        if len(points) < 3:
            return False
        inside = False
        j = len(points) - 1
        for i in range(len(points)):
            xi, yi = points[i].x, points[i].y
            xj, yj = points[j].x, points[j].y
            if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
                inside = not inside
            j = i
        return inside

    @staticmethod
    def closest_point_on_segment(p1: Vector, p2: Vector, p: Vector) -> Vector:
        """Project p onto the segment p1-p2, clamped to its endpoints."""
        dx = p2.x - p1.x
        dy = p2.y - p1.y
        if dx == 0 and dy == 0:
            return p1
        t = ((p.x - p1.x) * dx + (p.y - p1.y) * dy) / (dx * dx + dy * dy)
        t = max(0.0, min(1.0, t))
        return Vector(p1.x + t * dx, p1.y + t * dy)

    @staticmethod
    def polygon_edges(points: Sequence[Vector]) -> List[tuple]:
        """Closed list of (start, end) edges of a polygon."""
        return [(points[i], points[(i + 1) % len(points)]) for i in range(len(points))]

    @staticmethod
    def random_point_in_polygon(points: Sequence[Vector], rng: random.Random,
                                margin: float = 8, samples: int = 24) -> Optional[Vector]:
        """Rejection-sample a point inside a polygon.

        Samples are drawn from the bounding box inset by ``margin`` when the inset box is
        non-empty. After ``samples`` misses the bounding-box centre is returned.

        Args:
            points: Polygon vertices.
            rng: Random source.
            margin: Inset applied to the bounding box.
            samples: Number of attempts.

        Returns:
            A point, or None for an empty polygon.
        """
        bounds = MathUtils.bounds_of(points)
        if bounds is None:
            return None
        min_x, max_x, min_y, max_y = bounds.min_x, bounds.max_x, bounds.min_y, bounds.max_y
        if min_x + margin < max_x - margin and min_y + margin < max_y - margin:
            min_x, max_x, min_y, max_y = min_x + margin, max_x - margin, min_y + margin, max_y - margin

        for _ in range(samples):
            x = min_x + rng.random() * (max_x - min_x)
            y = min_y + rng.random() * (max_y - min_y)
            if MathUtils.point_in_polygon(x, y, points):
                return Vector(x, y)
        return Vector((bounds.min_x + bounds.max_x) / 2, (bounds.min_y + bounds.max_y) / 2)
