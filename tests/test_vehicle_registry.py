from streetsim.agent import Vehicle
from streetsim.utils.vector import Vector


def test_register_resolves_vehicle(registry):
    car = Vehicle(Vector(0, 0), speed=40)
    registry.register(car)
    assert registry.get_vehicle(car.id) is car
    assert car.registry is registry
    assert registry.get_vehicle(None) is None
    assert len(registry) == 1


def test_ownership_is_bidirectional(registry):
    registry.assign_owner(1, 10)
    assert registry.car_of(1) == 10
    assert registry.owner_of(10) == 1


def test_reassigning_owner_drops_stale_links(registry):
    registry.assign_owner(1, 10)
    registry.assign_owner(1, 11)
    assert registry.owner_of(10) is None
    assert registry.car_of(1) == 11

    registry.assign_owner(2, 11)
    assert registry.car_of(1) is None
    assert registry.owner_of(11) == 2


def test_driver_relation(registry):
    registry.set_driver(10, 1)
    assert registry.driver_of(10) == 1
    assert registry.vehicle_driven_by(1) == 10
    registry.clear_driver(10)
    assert registry.driver_of(10) is None
    assert registry.vehicle_driven_by(1) is None


def test_new_driver_replaces_old(registry):
    registry.set_driver(10, 1)
    registry.set_driver(10, 2)
    assert registry.driver_of(10) == 2
    assert registry.vehicle_driven_by(1) is None


def test_driver_switching_cars(registry):
    registry.set_driver(10, 1)
    registry.set_driver(11, 1)
    assert registry.driver_of(10) is None
    assert registry.driver_of(11) == 1


def test_remove_resident(registry):
    registry.assign_owner(1, 10)
    registry.set_driver(10, 1)
    registry.remove_agent(1)
    assert registry.car_of(1) is None
    assert registry.owner_of(10) is None
    assert registry.driver_of(10) is None
    assert registry.vehicle_driven_by(1) is None


def test_remove_vehicle(registry):
    car = Vehicle(Vector(0, 0), speed=40)
    registry.register(car)
    registry.assign_owner(100, car.id)
    registry.set_driver(car.id, 100)
    registry.remove_agent(car.id)
    assert registry.get_vehicle(car.id) is None
    assert registry.car_of(100) is None
    assert registry.vehicle_driven_by(100) is None
