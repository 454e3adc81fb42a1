import random

import pytest

from streetsim.agent.base_agent import BaseAgent
from streetsim.config import Config
from streetsim.dataclass import Lot, Orientation, RoadSegment
from streetsim.traffic.base.vehicle_registry import VehicleRegistry
from streetsim.utils.logger import Logger
from streetsim.utils.vector import Vector

Logger.configure(logging_enabled=True, log_to_console=False, log_to_file=False)


@pytest.fixture(autouse=True)
def reset_agent_ids():
    BaseAgent.reset_id_counter()
    yield
    BaseAgent.reset_id_counter()


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def registry():
    return VehicleRegistry()


@pytest.fixture
def single_road():
    return [RoadSegment('r0', Orientation.VERTICAL, 100, 0, 20, 1000)]


@pytest.fixture
def cross_roads():
    return [
        RoadSegment('avenue', Orientation.VERTICAL, 100, 0, 20, 400),
        RoadSegment('street', Orientation.HORIZONTAL, 0, 200, 400, 20),
    ]


@pytest.fixture
def grid_roads():
    return [
        RoadSegment('v0', Orientation.VERTICAL, 100, 0, 20, 600),
        RoadSegment('v1', Orientation.VERTICAL, 400, 0, 20, 600),
        RoadSegment('h0', Orientation.HORIZONTAL, 0, 100, 600, 20),
        RoadSegment('h1', Orientation.HORIZONTAL, 0, 400, 600, 20),
    ]


@pytest.fixture
def square_lot():
    return Lot(id=1, points=[Vector(0, 0), Vector(100, 0), Vector(100, 100), Vector(0, 100)])
