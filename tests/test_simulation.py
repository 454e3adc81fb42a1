import random

import pytest

from streetsim.agent import BaseAgent, ResidentState
from streetsim.config import Config
from streetsim.world import Simulation, World

LOCAL_STATES = {
    ResidentState.IDLE_HOME,
    ResidentState.WALKING_TO_CAR,
    ResidentState.DRIVING,
    ResidentState.WALKING_HOME,
    ResidentState.WALKING_AROUND,
}


def build(seed=42, residents=20, config=None):
    config = config or Config.from_dict({'resident': {'trip_chance_factor': 1.0}})
    world = World.from_file('sample_map.json', config, rng=random.Random(seed))
    return Simulation(world, config, seed=seed, resident_count=residents)


@pytest.fixture
def sim():
    return build()


def test_population_spawned(sim):
    assert 0 < len(sim.residents) <= 20
    assert all(r.state == ResidentState.IDLE_HOME for r in sim.residents)
    assert len(sim.agents) == len(sim.residents) + len(sim.vehicles)


def test_snapshot_records(sim):
    sim.run(30, delta=0.5)
    records = sim.snapshot()
    assert len(records) == len(sim.agents)
    for record in records:
        assert set(record) == {'id', 'type', 'x', 'y', 'state', 'path'}
        assert record['type'] in ('resident', 'vehicle')
        for point in record['path']:
            assert set(point) == {'x', 'y'}
    vehicle_states = {r['state'] for r in records if r['type'] == 'vehicle'}
    assert vehicle_states <= {'parked', 'driving'}


def test_same_seed_same_run():
    first = build(seed=9)
    first.run(120, delta=0.5)
    first_snapshot = first.snapshot()

    BaseAgent.reset_id_counter()
    second = build(seed=9)
    second.run(120, delta=0.5)
    assert second.snapshot() == first_snapshot


def test_invariants_hold_every_tick(sim):
    for _ in range(200):
        sim.tick(0.5)
        assert len(sim.spatial_index) == len(sim.visible_agents())
        for resident in sim.residents:
            assert resident.state in LOCAL_STATES
            if resident.is_in_car:
                car_id = sim.registry.car_of(resident.id)
                assert sim.registry.driver_of(car_id) == resident.id
                assert sim.registry.vehicle_driven_by(resident.id) == car_id
        for car in sim.vehicles:
            driver = sim.registry.driver_of(car.id)
            if driver is not None:
                assert sim.registry.car_of(driver) == car.id


def test_clock_advances(sim):
    sim.run(60, delta=1.0)
    assert sim.clock.time_string() == 'Day 1 - 09:00'
    assert sim.tick_count == 60


def test_state_histogram_counts_everyone(sim):
    sim.run(100, delta=0.5)
    histogram = sim.state_histogram()
    assert sum(histogram.values()) == len(sim.residents)
    assert set(histogram) <= {state.value for state in LOCAL_STATES}


def test_remove_resident(sim):
    resident = sim.residents[0]
    car_id = sim.registry.car_of(resident.id)
    sim.remove_resident(resident)
    assert resident not in sim.residents
    assert sim.registry.car_of(resident.id) is None
    if car_id is not None:
        assert sim.registry.owner_of(car_id) is None
        assert sim.registry.driver_of(car_id) is None
    sim.run(10)


def test_from_config_uses_bundled_map():
    sim = Simulation.from_config(Config.from_dict({'simulation': {'resident_count': 5}}))
    assert len(sim.world.lots) == 10
    assert len(sim.residents) <= 5
