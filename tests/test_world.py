import random

import pytest

from streetsim.dataclass import Bounds, Lot, LotState, LotUsage, Orientation, RoadSegment
from streetsim.utils.vector import Vector
from streetsim.world import World
from streetsim.world.address import AddressSystem


@pytest.fixture
def sample_world():
    return World.from_file('sample_map.json', rng=random.Random(7))


def test_sample_map_loads(sample_world):
    assert len(sample_world.roads) == 4
    assert len(sample_world.lots) == 10
    assert sample_world.bounds == Bounds(0, 600, 0, 600)
    assert sample_world.width == 600
    assert sample_world.height == 600
    assert sample_world.roads[0].orientation == Orientation.VERTICAL


def test_explicit_lot_tags_kept(sample_world):
    assert sample_world.get_lot(1).usage == LotUsage.RESIDENTIAL
    assert sample_world.get_lot(1).state == LotState.OCCUPIED
    assert sample_world.get_lot(5).usage == LotUsage.COMMERCIAL
    assert sample_world.get_lot(5).state == LotState.OCCUPIED
    assert sample_world.get_lot(7).state == LotState.AWAY
    assert sample_world.get_lot(10).state == LotState.ABANDONED


def test_commercial_and_lodging_lots_are_occupied(sample_world):
    for lot in sample_world.lots:
        if lot.usage in (LotUsage.COMMERCIAL, LotUsage.LODGING) and lot.id not in (7, 10):
            assert lot.state == LotState.OCCUPIED


def test_parking_spot_read_from_map(sample_world):
    assert sample_world.get_lot(2).parking_spot.x == 330
    assert sample_world.get_lot(1).parking_spot is None


def test_get_unknown_lot(sample_world):
    assert sample_world.get_lot(999) is None


def test_bounds_padded_without_view_box():
    world = World(rng=random.Random(1)).load({
        'road_segments': [{'type': 'vertical', 'x': 100, 'y': 0, 'width': 20, 'height': 1000}],
    })
    assert world.bounds == Bounds(0, 220, -100, 1100)
    assert world.roads[0].id == 'road_0'
    assert world.lots == []


def test_empty_map_has_zero_bounds():
    world = World().load({'road_segments': []})
    assert world.bounds == Bounds(0, 0, 0, 0)


@pytest.mark.parametrize('data', [
    {},
    {'road_segments': 'nope'},
    {'road_segments': [{'type': 'diagonal', 'x': 0, 'y': 0, 'width': 1, 'height': 1}]},
    {'road_segments': [{'type': 'vertical', 'x': 0, 'y': 0}]},
    {'road_segments': [], 'lots': [{'points': []}]},
])
def test_malformed_map_raises(data):
    with pytest.raises(ValueError):
        World().load(data)


def test_missing_file_falls_back_to_bundled_map():
    world = World.from_file('/does/not/exist/sample_map.json')
    assert len(world.lots) == 10


def test_unknown_map_raises():
    with pytest.raises(FileNotFoundError):
        World.from_file('/does/not/exist/no_such_map.json')


def test_hydration_reproducible_per_seed():
    first = World.from_file('sample_map.json', rng=random.Random(3))
    second = World.from_file('sample_map.json', rng=random.Random(3))
    assert [(lot.usage, lot.state) for lot in first.lots] == [(lot.usage, lot.state) for lot in second.lots]


def square(lot_id, x, y, size=100):
    return {'id': lot_id, 'points': [{'x': x, 'y': y}, {'x': x + size, 'y': y},
                                     {'x': x + size, 'y': y + size}, {'x': x, 'y': y + size}]}


class TestSpecialLots:
    def test_sample_map_bar_and_parking(self, sample_world):
        assert sample_world.get_lot(6).usage == LotUsage.BAR
        assert sample_world.get_lot(6).state == LotState.OCCUPIED
        for lot_id in (4, 8, 9):
            assert sample_world.get_lot(lot_id).usage == LotUsage.PARKING
            assert sample_world.get_lot(lot_id).state == LotState.EMPTY
        assert sample_world.get_lot(3).usage not in (LotUsage.BAR, LotUsage.PARKING)

    def test_bar_is_northernmost_untagged_lot(self):
        world = World(rng=random.Random(2)).load({
            'road_segments': [],
            'lots': [
                dict(square(1, 0, 0), usage='residential'),
                square(2, 500, 200),
                square(3, 200, 200),
                square(4, 200, 400),
                square(5, 900, 900),
                square(6, 0, 900),
                square(7, 2000, 2000),
            ],
        })
        assert world.get_lot(1).usage == LotUsage.RESIDENTIAL
        assert world.get_lot(3).usage == LotUsage.BAR
        assert {lot.id for lot in world.lots if lot.usage == LotUsage.PARKING} == {2, 4, 6}

    def test_no_untagged_lots(self):
        world = World().load({'road_segments': [], 'lots': [dict(square(1, 0, 0), state='away')]})
        assert world.get_lot(1).usage != LotUsage.BAR

    def test_explicit_church_usage(self):
        world = World().load({'road_segments': [], 'lots': [dict(square(1, 0, 0), usage='church', state='occupied')]})
        assert world.get_lot(1).usage == LotUsage.CHURCH


class TestAddresses:
    def test_street_names(self, sample_world):
        addresses = sample_world.addresses
        assert addresses.get_street_name('avenue_west') == 'Avenue A'
        assert addresses.get_street_name('avenue_east') == 'Avenue B'
        assert addresses.get_street_name('street_north') == '1st St'
        assert addresses.get_street_name('street_south') == '2nd St'
        assert addresses.get_street_name('nope') is None

    def test_every_lot_addressed(self, sample_world):
        assert all(lot.address for lot in sample_world.lots)
        assert len(sample_world.addresses.lot_addresses) == 10

    def test_derived_address(self, sample_world):
        address = sample_world.addresses.get_address(3)
        assert address.street_name == '2nd St'
        assert address.cross_street == 'Ave A'
        assert address.street_number == 116
        assert sample_world.get_lot(3).address == '2nd St / Ave A'

    def test_west_side_numbers_are_odd(self, sample_world):
        address = sample_world.addresses.get_address(10)
        assert address.street_number == 111
        assert address.full_address == '1st St / Ave A'

    def test_map_address_kept(self, sample_world):
        assert sample_world.get_lot(1).address == '1 North St'
        assert sample_world.addresses.get_address(1).street_number == 108

    def test_names_beyond_the_lists(self):
        roads = [RoadSegment(f'v{i}', Orientation.VERTICAL, 100 * i, 0, 10, 100) for i in range(10)]
        roads += [RoadSegment(f'h{i}', Orientation.HORIZONTAL, 0, 100 * i, 1000, 10) for i in range(7)]
        addresses = AddressSystem(roads)
        assert addresses.get_street_name('v8') == 'Aisle of Palms'
        assert addresses.get_street_name('v9') == 'Avenue 10'
        assert addresses.get_street_name('h6') == '7th St'

    def test_aisle_of_palms_short_name(self):
        roads = [RoadSegment(f'v{i}', Orientation.VERTICAL, 100 * i, 0, 10, 2000) for i in range(9)]
        roads.append(RoadSegment('h0', Orientation.HORIZONTAL, 0, 600, 1000, 10))
        lot = Lot(id=1, points=[Vector(820, 620), Vector(860, 620), Vector(860, 660), Vector(820, 660)])
        address = AddressSystem(roads).compute_lot_address(lot)
        assert address.cross_street == 'Aisle'
        assert address.street_number == 206

    def test_layout_without_streets(self):
        roads = [RoadSegment('v0', Orientation.VERTICAL, 0, 0, 10, 100)]
        lot = Lot(id=1, points=[Vector(20, 20), Vector(40, 20), Vector(40, 40)])
        addresses = AddressSystem(roads)
        addresses.assign_addresses([lot])
        assert lot.address is None
        assert addresses.get_address(1) is None


def test_invalid_json_raises(tmp_path):
    path = tmp_path / 'broken.json'
    path.write_text('{"road_segments": [')
    with pytest.raises(ValueError):
        World.from_file(str(path))
