#!/usr/bin/env python3
"""
test_rigid_body.py - Tests for the Simulated Rigid Body

Run with:
    pytest tests/test_rigid_body.py -v
"""

import numpy as np
import pytest

from wheelcube.controller.rigid_body import Pose, RigidBodyParams, SimulatedRigidBody


class TestSimulatedRigidBody:
    """Tests for SimulatedRigidBody integration."""

    def test_starts_at_rest(self, body):
        assert body.get_velocity() == pytest.approx([0.0, 0.0, 0.0])
        assert body.get_angular_velocity() == pytest.approx([0.0, 0.0, 0.0])
        assert body.get_pose().orientation == pytest.approx([1.0, 0.0, 0.0, 0.0])

    def test_force_accumulates_until_step(self, body):
        body.apply_force(np.array([0.0, 0.0, 1.0]))
        body.apply_force(np.array([1.0, 0.0, 0.0]))
        assert body.pending_force == pytest.approx([1.0, 0.0, 1.0])

        body.step(0.1)
        assert body.pending_force == pytest.approx([0.0, 0.0, 0.0])

    def test_force_integrates_velocity(self):
        body = SimulatedRigidBody(RigidBodyParams(mass=2.0))
        body.apply_force(np.array([0.0, 0.0, 4.0]))
        body.step(0.5)

        # v = F/m * dt, then p += v * dt
        assert body.get_velocity() == pytest.approx([0.0, 0.0, 1.0])
        assert body.get_pose().position == pytest.approx([0.0, 0.0, 0.5])

    def test_drag_slows_body(self):
        body = SimulatedRigidBody(RigidBodyParams(drag=1.0))
        body.set_velocity(np.array([0.0, 0.0, 2.0]))
        body.step(0.1)
        assert body.get_velocity()[2] == pytest.approx(1.8)

    def test_set_drag(self, body):
        body.set_drag(0.7)
        assert body.params.drag == 0.7

    def test_torque_spins_body(self, body):
        body.apply_torque(np.array([0.0, 1.0, 0.0]))
        body.step(0.1)
        assert body.get_angular_velocity()[1] == pytest.approx(0.1)
        # Positive yaw rate: orientation y component grows
        assert body.get_pose().orientation[2] > 0.0

    def test_non_positive_dt_only_clears(self, body):
        body.apply_force(np.array([0.0, 0.0, 10.0]))
        body.step(0.0)
        assert body.get_velocity() == pytest.approx([0.0, 0.0, 0.0])
        assert body.pending_force == pytest.approx([0.0, 0.0, 0.0])

    def test_set_pose_normalizes(self, body):
        body.set_pose(np.array([1.0, 2.0, 3.0]), np.array([2.0, 0.0, 0.0, 0.0]))
        pose = body.get_pose()
        assert pose.position == pytest.approx([1.0, 2.0, 3.0])
        assert pose.orientation == pytest.approx([1.0, 0.0, 0.0, 0.0])

    def test_pose_is_a_copy(self, body):
        """Mutating a returned pose does not move the body."""
        pose = body.get_pose()
        pose.position[0] = 50.0
        assert body.get_pose().position[0] == 0.0

    def test_pose_copy(self):
        pose = Pose(np.zeros(3), np.array([1.0, 0.0, 0.0, 0.0]))
        clone = pose.copy()
        clone.position[1] = 3.0
        assert pose.position[1] == 0.0

    def test_bad_position_raises(self):
        with pytest.raises(ValueError):
            SimulatedRigidBody(position=(1.0, 2.0))

    def test_params_are_copied(self):
        """Changing the body's drag leaves the caller's parameters alone."""
        params = RigidBodyParams(drag=0.2)
        body = SimulatedRigidBody(params)

        body.set_drag(1.0)

        assert body.params.drag == 1.0
        assert params.drag == 0.2


class TestRigidBodyParams:
    """Tests for RigidBodyParams.from_dict."""

    def test_empty_is_default(self):
        assert RigidBodyParams.from_dict(None) == RigidBodyParams()

    def test_numeric_strings_coerced(self):
        params = RigidBodyParams.from_dict({"mass": "2", "drag": 1})
        assert params.mass == 2.0
        assert isinstance(params.mass, float)
        assert isinstance(params.drag, float)

    @pytest.mark.parametrize("data", [
        {"mass": "heavy"},
        {"mass": [1.0]},
        {"wheels": 4},
        [1.0, 2.0],
    ])
    def test_bad_values_rejected(self, data):
        with pytest.raises(ValueError):
            RigidBodyParams.from_dict(data)
