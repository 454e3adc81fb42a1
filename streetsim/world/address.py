"""Street naming and lot addressing.

Vertical roads are avenues named west to east, horizontal roads are streets named
north to south, and every lot is addressed by its nearest street and avenue.
"""
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence

from streetsim.dataclass import Lot, RoadSegment
from streetsim.utils.logger import Logger
from streetsim.utils.math_utils import MathUtils
from streetsim.utils.vector import Vector

AVENUE_NAMES = [
    'Avenue A', 'Avenue B', 'Avenue C', 'Avenue D', 'Avenue E',
    'Avenue F', 'Avenue G', 'Avenue H', 'Aisle of Palms',
]
STREET_NAMES = ['1st St', '2nd St', '3rd St', '4th St', '5th St', '6th St']

BLOCK_LENGTH = 500
NUMBER_SPACING = 50


@dataclass(frozen=True)
class StreetInfo:
    """A named road."""
    id: str
    name: str
    kind: str
    segment: RoadSegment
    label_position: Vector


@dataclass(frozen=True)
class Address:
    """Postal address of a lot."""
    street_number: int
    street_name: str
    cross_street: str
    full_address: str

    def to_dict(self):
        """Convert the address to dictionary representation."""
        return {
            'streetNumber': self.street_number,
            'streetName': self.street_name,
            'crossStreet': self.cross_street,
            'fullAddress': self.full_address,
        }


def short_avenue_name(name: str) -> str:
    """'Avenue A' -> 'Ave A', 'Aisle of Palms' -> 'Aisle'."""
    return name.replace('Avenue ', 'Ave ').replace('Aisle of Palms', 'Aisle')


class AddressSystem:
    """Names the roads of a layout and addresses lots against them."""

    def __init__(self, roads: Sequence[RoadSegment]):
        self.streets: Dict[str, StreetInfo] = {}
        self.lot_addresses: Dict[int, Address] = {}
        self.logger = Logger.get_logger('AddressSystem')
        self._assign_street_names(roads)

    def _assign_street_names(self, roads: Sequence[RoadSegment]):
        avenues = sorted((r for r in roads if r.is_vertical), key=lambda r: r.x)
        streets = sorted((r for r in roads if not r.is_vertical), key=lambda r: r.y)

        for i, road in enumerate(avenues):
            name = AVENUE_NAMES[i] if i < len(AVENUE_NAMES) else f'Avenue {i + 1}'
            label = Vector(road.x + road.width / 2, road.y + road.height / 2)
            self.streets[road.id] = StreetInfo(road.id, name, 'avenue', road, label)

        for i, road in enumerate(streets):
            name = STREET_NAMES[i] if i < len(STREET_NAMES) else f'{i + 1}th St'
            label = Vector(road.x + road.width / 2, road.y + road.height / 2)
            self.streets[road.id] = StreetInfo(road.id, name, 'street', road, label)

        self.logger.info(f'Named {len(avenues)} avenues and {len(streets)} streets')

    def compute_lot_address(self, lot: Lot) -> Optional[Address]:
        """Address a lot by the street and avenue closest to its centroid.

        Numbers grow by 100 per block along the street's position and by 2 per
        50 units within a block; lots west of the avenue's centre get odd numbers.

        Returns:
            The address, or None for an empty lot or a layout missing streets or avenues.
        """
        center = MathUtils.centroid(lot.points)
        if center is None:
            return None

        street = min((s for s in self.streets.values() if s.kind == 'street'),
                     key=lambda s: abs(center.y - s.label_position.y), default=None)
        avenue = min((s for s in self.streets.values() if s.kind == 'avenue'),
                     key=lambda s: abs(center.x - s.label_position.x), default=None)
        if street is None or avenue is None:
            return None

        is_west_side = center.x - avenue.segment.x < avenue.segment.width / 2
        base_number = (math.floor(street.segment.y / BLOCK_LENGTH) + 1) * 100
        position_in_block = math.floor(math.fmod(center.y, BLOCK_LENGTH) / NUMBER_SPACING) + 1
        number = base_number + position_in_block * 2
        if is_west_side:
            number -= 1

        cross_street = short_avenue_name(avenue.name)
        return Address(number, street.name, cross_street, f'{street.name} / {cross_street}')

    def assign_addresses(self, lots: Iterable[Lot]):
        """Address every lot; lots that already carry an address keep it."""
        for lot in lots:
            address = self.compute_lot_address(lot)
            if address is None:
                continue
            self.lot_addresses[lot.id] = address
            if not lot.address:
                lot.address = address.full_address
        self.logger.info(f'Assigned addresses to {len(self.lot_addresses)} lots')

    def get_address(self, lot_id: int) -> Optional[Address]:
        """Structured address of a lot, or None."""
        return self.lot_addresses.get(lot_id)

    def get_street_name(self, road_id: str) -> Optional[str]:
        """Name given to a road, or None."""
        street = self.streets.get(road_id)
        return street.name if street else None
