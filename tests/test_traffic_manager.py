import random

import pytest

from streetsim.agent import Resident, ResidentState, Vehicle
from streetsim.dataclass import Lot
from streetsim.traffic.manager import TrafficManager
from streetsim.utils.spatial_index import SpatialIndex
from streetsim.utils.vector import Vector


@pytest.fixture
def traffic(single_road):
    return TrafficManager(single_road, rng=random.Random(5))


@pytest.fixture
def roadside_lot():
    return Lot(id=7, points=[Vector(130, 100), Vector(230, 100), Vector(230, 200), Vector(130, 200)])


class TestRoadQueries:
    def test_is_on_road_with_padding(self, traffic):
        assert traffic.is_on_road(110, 500)
        assert traffic.is_on_road(96, 500)
        assert not traffic.is_on_road(94, 500)
        assert not traffic.is_on_road(110, 1006)

    def test_nearest_road_point_is_on_centreline(self, traffic):
        assert traffic.get_nearest_road_point(300, 420) == Vector(110, 420)
        assert traffic.get_nearest_road_point(50, 1500) == Vector(110, 1000)

    def test_nearest_road_point_horizontal(self, cross_roads):
        traffic = TrafficManager(cross_roads)
        assert traffic.get_nearest_road_point(300, 260) == Vector(300, 210)

    def test_random_point_on_road(self, traffic):
        for _ in range(50):
            point = traffic.get_random_point_on_road()
            assert 100 <= point.x <= 120
            assert 0 <= point.y <= 1000

    def test_no_roads(self):
        traffic = TrafficManager([])
        assert traffic.get_random_point_on_road() == Vector(0, 0)
        assert traffic.get_nearest_road_point(5, 5) == Vector(5, 5)
        assert not traffic.is_on_road(0, 0)


class TestLotAccess:
    def test_access_and_entry_points(self, traffic, roadside_lot):
        traffic.compute_access_points([roadside_lot])
        assert roadside_lot.road_access_point == Vector(120, 150)
        assert roadside_lot.entry_point == Vector(130, 150)
        assert roadside_lot.parking_spot == Vector(120, 150)

    def test_gate_on_road_facing_edge(self, traffic, roadside_lot):
        traffic.compute_access_points([roadside_lot])
        assert roadside_lot.gate_positions == [Vector(130, 150)]

    def test_short_road_facing_edge_gets_gate(self, traffic):
        lot = Lot(id=8, points=[Vector(130, 100), Vector(430, 100), Vector(430, 150), Vector(130, 150)])
        traffic.compute_fence_gates([lot])
        assert lot.gate_positions == [Vector(130, 125)]

    def test_lot_away_from_roads_gets_no_gate(self, traffic):
        lot = Lot(id=8, points=[Vector(300, 100), Vector(400, 100), Vector(400, 200), Vector(300, 200)])
        traffic.compute_fence_gates([lot])
        assert lot.gate_positions == []

    def test_existing_parking_spot_kept(self, traffic, roadside_lot):
        roadside_lot.parking_spot = Vector(125, 190)
        traffic.compute_access_points([roadside_lot])
        assert roadside_lot.parking_spot == Vector(125, 190)

    def test_degenerate_lot_has_no_gates(self, traffic):
        lot = Lot(id=9, points=[Vector(130, 100), Vector(130, 200)])
        traffic.compute_access_points([lot])
        assert lot.gate_positions == []


class TestRouting:
    def test_wandering_resident_gets_route_through_gate(self, traffic, roadside_lot):
        traffic.compute_access_points([roadside_lot])
        resident = Resident(Vector(180, 150), roadside_lot, speed=10, rng=random.Random(1))
        resident.state = ResidentState.WALKING_AROUND
        traffic.update_traffic([resident])
        assert resident.path
        assert resident.path[0] == Vector(130, 150)

    def test_lot_without_gates_exits_through_entry_point(self, traffic):
        lot = Lot(id=8, points=[Vector(300, 100), Vector(400, 100), Vector(400, 200), Vector(300, 200)])
        traffic.compute_access_points([lot])
        assert lot.gate_positions == []
        assert lot.entry_point == Vector(300, 150)

        resident = Resident(Vector(350, 150), lot, speed=10, rng=random.Random(1))
        resident.state = ResidentState.WALKING_AROUND
        assert traffic.plan_route(resident)[0] == Vector(300, 150)

    def test_state_machine_residents_left_alone(self, traffic, square_lot):
        for state in (ResidentState.IDLE_HOME, ResidentState.WALKING_TO_CAR, ResidentState.WALKING_HOME):
            resident = Resident(Vector(50, 50), square_lot, speed=10)
            resident.state = state
            traffic.update_traffic([resident])
            assert not resident.has_route

    def test_resident_in_car_left_alone(self, traffic, square_lot, registry):
        resident = Resident(Vector(50, 50), square_lot, speed=10, registry=registry)
        resident.state = ResidentState.DRIVING
        resident.is_in_car = True
        traffic.update_traffic([resident])
        assert not resident.has_route

    def test_parked_vehicle_skipped(self, traffic, registry):
        car = Vehicle(Vector(110, 500), speed=40)
        registry.register(car)
        traffic.update_traffic([car])
        assert not car.has_route

    def test_driven_vehicle_routed_on_road_graph(self, traffic, registry):
        car = Vehicle(Vector(110, 500), speed=40)
        registry.register(car)
        registry.set_driver(car.id, 99)
        traffic.update_traffic([car])
        assert car.path
        assert all(traffic.is_on_road(point.x, point.y) for point in car.path)

    def test_agent_with_route_keeps_it(self, traffic, registry):
        car = Vehicle(Vector(110, 500), speed=40)
        registry.register(car)
        registry.set_driver(car.id, 99)
        car.set_target_position(Vector(110, 900))
        traffic.update_traffic([car])
        assert car.target == Vector(110, 900)
        assert car.path == []

    def test_off_road_agent_without_gate_heads_to_road(self, traffic):
        resident = Resident(Vector(500, 500), None, speed=10)
        resident.state = ResidentState.WALKING_AROUND
        route = traffic.plan_route(resident)
        assert route[0] == Vector(110, 500)


class TestYielding:
    @pytest.fixture
    def moving_car(self, registry):
        car = Vehicle(Vector(110, 500), speed=40)
        registry.register(car)
        registry.set_driver(car.id, 99)
        car.set_target_position(Vector(110, 900))
        return car

    def test_yields_to_pedestrian_ahead(self, traffic, moving_car):
        pedestrian = Resident(Vector(112, 515), None, speed=10)
        index = SpatialIndex(50)
        index.populate([moving_car, pedestrian])
        traffic.apply_yielding(index)
        assert moving_car.speed_modifier == pytest.approx(0.3)

    def test_ignores_pedestrian_behind(self, traffic, moving_car):
        pedestrian = Resident(Vector(110, 485), None, speed=10)
        index = SpatialIndex(50)
        index.populate([moving_car, pedestrian])
        traffic.apply_yielding(index)
        assert moving_car.speed_modifier == 1.0

    def test_ignores_far_pedestrian_in_nearby_cell(self, traffic, moving_car):
        pedestrian = Resident(Vector(110, 545), None, speed=10)
        index = SpatialIndex(50)
        index.populate([moving_car, pedestrian])
        traffic.apply_yielding(index)
        assert moving_car.speed_modifier == 1.0
