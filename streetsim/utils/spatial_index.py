"""Uniform-grid spatial hash for proximity queries among moving agents."""
import math
from collections import defaultdict
from typing import Callable, Dict, Generic, Iterable, List, Tuple, TypeVar

T = TypeVar('T')


def planar_position(entity) -> Tuple[float, float]:
    """Default key: the entity's planar (x, depth) coordinates."""
    return entity.position.x, entity.position.y


class SpatialIndex(Generic[T]):
    """Uniform grid that buckets entities by cell for cheap "who is near" queries.

    The index holds no state between ticks: callers ``populate`` it once per tick,
    before any query, and read it afterwards. Query results over-approximate the
    radius (whole cells are returned), so callers needing exact distances must
    re-check them.

    Attributes:
        cell_size: Side length of a grid cell.
        cells: Mapping of (cell_x, cell_z) to the entities in that cell.
    """

    def __init__(self, cell_size: float = 50, key: Callable[[T], Tuple[float, float]] = planar_position):
        """Create an empty index.

        Args:
            cell_size: Side length of a grid cell.
            key: Function returning the planar (x, z) coordinates of an entity.
        """
        if cell_size <= 0:
            raise ValueError(f'cell_size must be positive, got {cell_size}')
        self.cell_size = cell_size
        self.key = key
        self.cells: Dict[Tuple[int, int], List[T]] = defaultdict(list)

    def __len__(self):
        """Number of indexed entities."""
        return sum(len(cell) for cell in self.cells.values())

    def _cell_of(self, x: float, z: float) -> Tuple[int, int]:
        return math.floor(x / self.cell_size), math.floor(z / self.cell_size)

    def clear(self):
        """Empty all cells."""
        self.cells.clear()

    def insert(self, entity: T):
        """Place an entity into the cell containing its position."""
        x, z = self.key(entity)
        self.cells[self._cell_of(x, z)].append(entity)

    def populate(self, entities: Iterable[T]):
        """Clear the grid and insert every entity; call once per tick."""
        self.clear()
        for entity in entities:
            self.insert(entity)

    def get_nearby(self, x: float, z: float, radius: float) -> List[T]:
        """Entities in the cell containing (x, z) and every cell within the radius span.

        Args:
            x: Query x.
            z: Query depth coordinate.
            radius: Search radius; spans ``ceil(radius / cell_size)`` cells per axis.

        Returns:
            A superset of the entities within ``radius``; empty if there are none.
        """
        cells_to_check = math.ceil(max(0.0, radius) / self.cell_size)
        center_x, center_z = self._cell_of(x, z)

        result = []
        for dx in range(-cells_to_check, cells_to_check + 1):
            for dz in range(-cells_to_check, cells_to_check + 1):
                cell = self.cells.get((center_x + dx, center_z + dz))
                if cell:
                    result.extend(cell)
        return result

    def get_same_cell(self, x: float, z: float) -> List[T]:
        """Entities sharing the cell of (x, z); coarser and cheaper than ``get_nearby``."""
        return list(self.cells.get(self._cell_of(x, z), ()))
