"""
Pytest configuration and shared fixtures for vehicle controller tests.

This module provides:
- Test markers configuration
- A settable input source and a manual clock
- Simulated body and controller factories
"""

from typing import Optional

import numpy as np
import pytest

from wheelcube.controller.config import ArbiterConfig, VehicleConfig
from wheelcube.controller.input_sample import RawInput
from wheelcube.controller.rigid_body import RigidBodyParams, SimulatedRigidBody
from wheelcube.controller.vehicle_controller import VehicleController


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers",
        "integration: mark test as running the full simulation loop"
    )


class ManualClock:
    """Clock advanced explicitly by the test."""

    def __init__(self, start: float = 0.0):
        self.time = start

    def __call__(self) -> float:
        return self.time

    def advance(self, dt: float) -> float:
        self.time += dt
        return self.time


class SettableInput:
    """Input source whose readings are set by the test."""

    def __init__(self, raw: Optional[RawInput] = None):
        self.raw = raw if raw is not None else RawInput.idle()
        self.reads = 0

    def read(self) -> Optional[RawInput]:
        self.reads += 1
        return self.raw

    def idle(self) -> None:
        self.raw = RawInput.idle()

    def full_throttle(self) -> None:
        self.raw = RawInput(steering=0.0, throttle=-1.0, brake=-1.0)

    def unplug(self) -> None:
        self.raw = None


SQUARE_PATH = [
    [0.0, 0.0, 0.0],
    [0.0, 0.0, 10.0],
    [10.0, 0.0, 10.0],
    [10.0, 0.0, 0.0],
]


@pytest.fixture
def clock():
    """Manual clock starting at t=0."""
    return ManualClock()


@pytest.fixture
def input_source():
    """Connected input device reading idle."""
    return SettableInput()


@pytest.fixture
def square_path():
    """Four-corner square path in the ground plane."""
    return [list(p) for p in SQUARE_PATH]


@pytest.fixture
def body():
    """Simulated body at the origin, facing +Z, with no damping."""
    return SimulatedRigidBody(RigidBodyParams(mass=1.0, inertia=1.0, angular_drag=0.0))


@pytest.fixture
def make_controller(clock, input_source, square_path):
    """
    Factory building a controller with short idle timeout.

    Returns:
        Callable: make(position=..., waypoints=..., source=..., idle=...)
    """

    def make(
        position=(0.0, 0.0, -2.0),
        waypoints=square_path,
        source=input_source,
        idle: float = 1.0,
        use_clock: bool = True,
    ) -> VehicleController:
        body = SimulatedRigidBody(
            RigidBodyParams(mass=1.0, inertia=1.0, angular_drag=0.0),
            position=np.array(position, dtype=float),
        )
        config = VehicleConfig(arbiter=ArbiterConfig(idle_time_before_auto=idle))
        return VehicleController(
            body,
            waypoints=waypoints,
            input_source=source,
            config=config,
            clock=clock if use_clock else None,
        )

    return make
