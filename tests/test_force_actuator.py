#!/usr/bin/env python3
"""
test_force_actuator.py - Tests for Manual Force Actuation

Tests for:
- Throttle force along the body heading
- Brake force opposing velocity
- Steering torque about the vertical axis
- Activation threshold

Run with:
    pytest tests/test_force_actuator.py -v
"""

import numpy as np
import pytest

from wheelcube.controller.config import ActuatorConfig
from wheelcube.controller.force_actuator import ActuationCommand, ForceActuator
from wheelcube.controller.geometry import quat_from_yaw_deg
from wheelcube.controller.input_sample import ControlSample
from wheelcube.controller.rigid_body import SimulatedRigidBody

DT = 0.02


@pytest.fixture
def actuator():
    return ForceActuator(ActuatorConfig(
        acceleration_force=50.0,
        brake_force=100.0,
        turn_torque=10.0,
    ))


class TestActuationCommand:
    """Tests for ActuationCommand dataclass."""

    def test_default_is_zero(self):
        command = ActuationCommand()
        assert command.is_zero
        assert np.allclose(command.total_force, 0.0)

    def test_total_force(self):
        command = ActuationCommand(
            drive_force=np.array([0.0, 0.0, 1.0]),
            brake_force=np.array([0.0, 0.0, -0.25]),
        )
        assert command.total_force == pytest.approx([0.0, 0.0, 0.75])
        assert not command.is_zero


class TestThrottle:
    """Tests for forward drive force."""

    def test_full_throttle_along_forward(self, actuator, body):
        """Full throttle pushes along +Z at identity orientation."""
        command = actuator.apply(ControlSample(accel=1.0), body, DT)

        expected = np.array([0.0, 0.0, 50.0 * DT])
        assert command.drive_force == pytest.approx(expected)
        assert body.pending_force == pytest.approx(expected)

    def test_throttle_follows_heading(self, actuator):
        """Force follows the body heading, not the world axis."""
        body = SimulatedRigidBody(orientation=quat_from_yaw_deg(90.0))
        command = actuator.apply(ControlSample(accel=0.5), body, DT)

        assert command.drive_force == pytest.approx([0.5 * 50.0 * DT, 0.0, 0.0], abs=1e-9)

    def test_throttle_below_threshold_ignored(self, actuator, body):
        command = actuator.apply(ControlSample(accel=0.005), body, DT)
        assert command.is_zero
        assert np.allclose(body.pending_force, 0.0)


class TestBrake:
    """Tests for brake force."""

    def test_brake_opposes_velocity(self, actuator, body):
        """Brake force points against the direction of travel."""
        body.set_velocity(np.array([3.0, 0.0, 4.0]))
        command = actuator.apply(ControlSample(brake=1.0), body, DT)

        expected = -np.array([0.6, 0.0, 0.8]) * 100.0 * DT
        assert command.brake_force == pytest.approx(expected)

    def test_brake_at_rest_applies_nothing(self, actuator, body):
        """Braking a stationary body produces no force and no NaN."""
        command = actuator.apply(ControlSample(brake=1.0), body, DT)

        assert command.is_zero
        assert not np.any(np.isnan(body.pending_force))
        assert np.allclose(body.pending_force, 0.0)

    def test_throttle_and_brake_combine(self, actuator, body):
        """Both pedals pressed apply both forces in the same tick."""
        body.set_velocity(np.array([0.0, 0.0, 2.0]))
        command = actuator.apply(ControlSample(accel=1.0, brake=1.0), body, DT)

        assert command.total_force == pytest.approx([0.0, 0.0, (50.0 - 100.0) * DT])
        assert body.pending_force == pytest.approx(command.total_force)


class TestSteering:
    """Tests for yaw torque."""

    def test_right_steer_positive_yaw_torque(self, actuator, body):
        command = actuator.apply(ControlSample(steer=1.0), body, DT)
        assert command.torque == pytest.approx([0.0, 10.0 * DT, 0.0])
        assert body.pending_torque == pytest.approx(command.torque)

    def test_left_steer_negative_yaw_torque(self, actuator, body):
        command = actuator.apply(ControlSample(steer=-0.5), body, DT)
        assert command.torque[1] == pytest.approx(-0.5 * 10.0 * DT)

    def test_right_steer_turns_toward_plus_x(self, actuator, body):
        """Integrating right steering swings the heading toward +X."""
        for _ in range(25):
            actuator.apply(ControlSample(steer=1.0, accel=1.0), body, DT)
            body.step(DT)

        assert body.get_velocity()[0] > 0.0
