"""World module: the static street layout of roads and lots."""
import random
from typing import Dict, List, Optional, Tuple

from streetsim.config import Config
from streetsim.dataclass import (Bounds, Lot, LotState, LotUsage, MapMetadata,
                                 RoadSegment)
from streetsim.utils.load_json import load_json
from streetsim.utils.logger import Logger
from streetsim.utils.math_utils import MathUtils
from streetsim.utils.vector import Vector
from streetsim.world.address import AddressSystem


class World:
    """Roads, lots and bounds of a loaded map.

    The layout is read once. Lots the map leaves untagged supply the bar and its
    parking; the remaining missing usages and states are drawn from the world's
    random source. Every lot is addressed against the named streets.
    """

    def __init__(self, config: Config = None, rng: random.Random = None):
        """Initialize an empty world.

        Args:
            config: Configuration; the packaged defaults are used when omitted.
            rng: Random source for lot hydration.
        """
        self.config = config or Config()
        self.rng = rng or random.Random()
        self.roads: List[RoadSegment] = []
        self.lots: List[Lot] = []
        self.metadata = MapMetadata()
        self.bounds = Bounds(0, 0, 0, 0)
        self.addresses: Optional[AddressSystem] = None
        self.logger = Logger.get_logger('World')

    @classmethod
    def from_file(cls, path: str, config: Config = None, rng: random.Random = None) -> 'World':
        """Load a world from a map JSON file.

        Falls back to the bundled map of the same name when ``path`` does not exist.

        Raises:
            FileNotFoundError: If neither the file nor a bundled map exists.
            ValueError: If the map data is malformed.
        """
        world = cls(config, rng)
        world.load(load_json(path))
        return world

    @property
    def width(self) -> float:
        """Extent of the world along x."""
        return self.bounds.width

    @property
    def height(self) -> float:
        """Extent of the world along y."""
        return self.bounds.height

    def load(self, data: dict) -> 'World':
        """Load roads, lots and metadata from a map description.

        Args:
            data: Dict with ``road_segments``, optional ``lots`` and optional ``metadata``.

        Returns:
            The world itself.

        Raises:
            ValueError: If ``road_segments`` is missing or a road or lot is malformed.
        """
        if not isinstance(data, dict) or not isinstance(data.get('road_segments'), list):
            raise ValueError('Map data must contain a road_segments list')

        self.roads = [RoadSegment.from_dict(road, i) for i, road in enumerate(data['road_segments'])]
        raw_lots = data.get('lots') or []
        try:
            special = self._pick_special_lots(raw_lots)
            self.lots = [self._hydrate_lot(raw, special.get(int(raw['id']))) for raw in raw_lots]
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f'Malformed lot in map data: {e}') from e
        self.metadata = MapMetadata.from_dict(data.get('metadata'))
        self.bounds = self.metadata.view_box or self._compute_bounds()
        self.addresses = AddressSystem(self.roads)
        self.addresses.assign_addresses(self.lots)

        self.logger.info(f'World loaded: {len(self.roads)} roads, {len(self.lots)} lots, bounds {self.bounds.to_dict()}')
        return self

    def _hydrate_lot(self, raw: dict, special: Optional[Tuple[LotUsage, LotState]] = None) -> Lot:
        lot = Lot.from_dict(raw)
        if special is not None:
            lot.usage, lot.state = special
            return lot

        usage_roll = self.rng.random()
        if usage_roll > 0.96:
            usage = LotUsage.LODGING
        elif usage_roll > 0.9:
            usage = LotUsage.COMMERCIAL
        elif usage_roll > 0.85:
            usage = LotUsage.PUBLIC
        else:
            usage = LotUsage.RESIDENTIAL
        lot.usage = LotUsage(raw['usage']) if raw.get('usage') else usage

        state_roll = self.rng.random()
        if lot.usage in (LotUsage.LODGING, LotUsage.COMMERCIAL):
            state = LotState.OCCUPIED
        elif state_roll < 0.4:
            state = LotState.ABANDONED
        elif state_roll < 0.7:
            state = LotState.OCCUPIED
        elif state_roll < 0.9:
            state = LotState.AWAY
        else:
            state = LotState.FOR_SALE
        lot.state = LotState(raw['state']) if raw.get('state') else state
        return lot

    def _pick_special_lots(self, raw_lots: List[dict]) -> Dict[int, Tuple[LotUsage, LotState]]:
        """Choose the bar and its parking lots among lots the map leaves untagged.

        The bar is the untagged lot whose bounding-box centre is furthest north, then
        furthest west; the ``lots.bar_parking_lots`` untagged lots nearest to it become
        empty parking lots.
        """
        centers = []
        for raw in raw_lots:
            if raw.get('usage') or raw.get('state'):
                continue
            bounds = MathUtils.bounds_of(Vector(p) for p in raw.get('points', []))
            if bounds is None:
                continue
            centers.append((int(raw['id']), Vector((bounds.min_x + bounds.max_x) / 2,
                                                   (bounds.min_y + bounds.max_y) / 2)))

        special: Dict[int, Tuple[LotUsage, LotState]] = {}
        if not centers:
            return special

        bar_id, bar_center = min(centers, key=lambda item: (item[1].y, item[1].x))
        special[bar_id] = (LotUsage.BAR, LotState.OCCUPIED)

        others = sorted((item for item in centers if item[0] != bar_id),
                        key=lambda item: item[1].distance(bar_center))
        for lot_id, _ in others[:self.config['lots.bar_parking_lots']]:
            special[lot_id] = (LotUsage.PARKING, LotState.EMPTY)

        self.logger.debug(f'Special lots: {special}')
        return special

    def _compute_bounds(self) -> Bounds:
        xs, ys = [], []
        for road in self.roads:
            xs.extend((road.x, road.right))
            ys.extend((road.y, road.bottom))
        for lot in self.lots:
            xs.extend(p.x for p in lot.points)
            ys.extend(p.y for p in lot.points)
        if not xs:
            return Bounds(0, 0, 0, 0)

        padding = self.config['map.bounds_padding']
        return Bounds(min(xs) - padding, max(xs) + padding, min(ys) - padding, max(ys) + padding)

    def get_lot(self, lot_id: int) -> Optional[Lot]:
        """Look a lot up by id."""
        for lot in self.lots:
            if lot.id == lot_id:
                return lot
        return None
