#!/usr/bin/env python3
"""
test_vehicle_controller.py - Tests for the Dual-Mode Vehicle Controller

Tests for:
- Startup state and navigation seeding
- Manual force actuation on fixed ticks
- Idle takeover, velocity reset and reseeding
- Transition frame handling
- Telemetry snapshot and status

Run with:
    pytest tests/test_vehicle_controller.py -v
"""

import numpy as np
import pytest

from wheelcube.controller.input_sample import RawInput
from wheelcube.controller.mode_arbiter import AutoWaypointMode, ControlMode, ManualMode

FRAME_DT = 1.0 / 60.0
FIXED_DT = 0.02


def go_idle(controller, clock, seconds=1.5):
    """Advance past the idle timeout and run one frame."""
    clock.advance(seconds)
    return controller.on_frame_tick(FRAME_DT)


# =============================================================================
# Startup Tests
# =============================================================================


class TestStartup:
    """Tests for controller construction."""

    def test_starts_manual(self, make_controller):
        controller = make_controller()
        assert controller.mode == ControlMode.MANUAL
        assert isinstance(controller.mode_state, ManualMode)
        assert not controller.is_transitioning

    def test_seeds_navigation(self, make_controller):
        controller = make_controller(position=(10.0, 0.0, -1.0))
        assert controller.current_waypoint == 3
        assert controller.direction == -1

    def test_assigns_drag(self, make_controller):
        controller = make_controller()
        assert controller.body.params.drag == controller.config.actuator.drag

    def test_no_input_source_reads_zero(self, make_controller):
        controller = make_controller(source=None)
        controller.on_frame_tick(FRAME_DT)
        assert controller.steering == 0.0
        assert controller.throttle == 0.0
        assert controller.brake == 0.0

    def test_no_waypoints(self, make_controller):
        controller = make_controller(waypoints=None)
        assert controller.current_waypoint == 0
        assert not controller.navigator.has_path


# =============================================================================
# Manual Mode Tests
# =============================================================================


class TestManualMode:
    """Tests for manual force actuation."""

    def test_throttle_applies_force(self, make_controller, input_source):
        controller = make_controller()
        input_source.full_throttle()

        command = controller.on_fixed_tick(FIXED_DT)

        assert command.drive_force[2] > 0.0
        assert controller.body.pending_force == pytest.approx(command.total_force)
        assert controller.last_command is command

    def test_driving_moves_body(self, make_controller, input_source, clock):
        controller = make_controller()
        input_source.full_throttle()

        for _ in range(50):
            clock.advance(FIXED_DT)
            controller.on_frame_tick(FIXED_DT)
            controller.on_fixed_tick(FIXED_DT)
            controller.body.step(FIXED_DT)

        assert controller.mode == ControlMode.MANUAL
        assert controller.velocity[2] > 0.0
        assert controller.position[2] > -2.0

    def test_unplugged_device_applies_nothing(self, make_controller, input_source):
        controller = make_controller()
        input_source.unplug()

        command = controller.on_fixed_tick(FIXED_DT)

        assert command.is_zero

    def test_acceleration_tracked(self, make_controller):
        controller = make_controller()
        controller.on_fixed_tick(FIXED_DT)

        controller.body.set_velocity(np.array([0.0, 0.0, 0.2]))
        controller.on_fixed_tick(FIXED_DT)

        assert controller.acceleration == pytest.approx([0.0, 0.0, 10.0])


# =============================================================================
# Mode Switching Tests
# =============================================================================


class TestModeSwitching:
    """Tests for idle takeover and driver return."""

    def test_idle_switches_to_auto(self, make_controller, clock):
        controller = make_controller()

        transition = go_idle(controller, clock)

        assert transition is not None
        assert controller.mode == ControlMode.AUTO_WAYPOINT
        assert isinstance(controller.mode_state, AutoWaypointMode)

    def test_no_input_source_switches_to_auto(self, make_controller, clock):
        controller = make_controller(source=None)
        go_idle(controller, clock)
        assert controller.mode == ControlMode.AUTO_WAYPOINT

    def test_entering_auto_zeroes_velocity(self, make_controller, clock):
        controller = make_controller()
        controller.body.set_velocity(np.array([1.0, 0.0, 5.0]))
        controller.body.set_angular_velocity(np.array([0.0, 2.0, 0.0]))

        go_idle(controller, clock)

        assert controller.velocity == pytest.approx([0.0, 0.0, 0.0])
        assert controller.angular_velocity == pytest.approx([0.0, 0.0, 0.0])

    def test_entering_auto_reseeds(self, make_controller, clock):
        """Auto mode resumes from the waypoint nearest the current position."""
        controller = make_controller()
        assert controller.current_waypoint == 0

        pose = controller.body.get_pose()
        controller.body.set_pose(np.array([10.5, 0.0, 9.0]), pose.orientation)
        go_idle(controller, clock)

        assert controller.current_waypoint == 2
        assert controller.direction == 1

    def test_input_returns_to_manual(self, make_controller, clock, input_source):
        controller = make_controller()
        go_idle(controller, clock)

        input_source.full_throttle()
        clock.advance(FRAME_DT)
        transition = controller.on_frame_tick(FRAME_DT)

        assert transition is not None
        assert controller.mode == ControlMode.MANUAL
        assert controller.mode_state.reason == "Input detected"

    def test_internal_clock(self, make_controller):
        """Without a clock the controller counts frame time itself."""
        controller = make_controller(use_clock=False)
        for _ in range(70):
            controller.on_frame_tick(FRAME_DT)

        assert controller.now == pytest.approx(70 * FRAME_DT)
        assert controller.mode == ControlMode.AUTO_WAYPOINT


# =============================================================================
# Auto Mode Tests
# =============================================================================


class TestAutoMode:
    """Tests for waypoint following under the controller."""

    def test_transition_frame_skips_navigation(self, make_controller, clock):
        controller = make_controller()
        before = controller.position

        seen = []
        controller.arbiter.on_manual_to_auto(lambda t: seen.append(controller.is_transitioning))

        go_idle(controller, clock)

        assert seen == [True]
        assert controller.position == pytest.approx(before)

    def test_transition_flag_cleared_after_frame(self, make_controller, clock):
        """The flag only lives inside the frame tick that fired the switch."""
        controller = make_controller()

        go_idle(controller, clock)

        assert controller.mode == ControlMode.AUTO_WAYPOINT
        assert not controller.is_transitioning

    def test_auto_frames_move_body(self, make_controller, clock):
        controller = make_controller()
        go_idle(controller, clock)

        for _ in range(10):
            clock.advance(FRAME_DT)
            controller.on_frame_tick(FRAME_DT)

        assert not controller.is_transitioning
        assert controller.position[2] > -2.0
        assert controller.velocity == pytest.approx([0.0, 0.0, 0.0])

    def test_fixed_tick_applies_nothing_in_auto(self, make_controller, clock):
        controller = make_controller()
        go_idle(controller, clock)
        clock.advance(FRAME_DT)
        controller.on_frame_tick(FRAME_DT)

        command = controller.on_fixed_tick(FIXED_DT)

        assert command.is_zero
        assert controller.body.pending_force == pytest.approx([0.0, 0.0, 0.0])

    def test_fixed_tick_after_takeover_applies_nothing(self, make_controller, clock, input_source):
        """Light input under the activity threshold cannot push the stopped body."""
        controller = make_controller()
        # Below the activity threshold, above the actuation threshold
        input_source.raw = RawInput(steering=0.05, throttle=0.9, brake=-1.0)

        go_idle(controller, clock)
        assert controller.mode == ControlMode.AUTO_WAYPOINT

        command = controller.on_fixed_tick(FIXED_DT)
        controller.body.step(FIXED_DT)

        assert command.is_zero
        assert controller.velocity == pytest.approx([0.0, 0.0, 0.0])
        assert controller.angular_velocity == pytest.approx([0.0, 0.0, 0.0])

    def test_auto_without_waypoints_holds_position(self, make_controller, clock):
        controller = make_controller(waypoints=[])
        go_idle(controller, clock)

        for _ in range(5):
            clock.advance(FRAME_DT)
            controller.on_frame_tick(FRAME_DT)

        assert controller.mode == ControlMode.AUTO_WAYPOINT
        assert controller.position == pytest.approx([0.0, 0.0, -2.0])


# =============================================================================
# Telemetry Tests
# =============================================================================


class TestTelemetry:
    """Tests for snapshot and status."""

    def test_snapshot_manual(self, make_controller):
        controller = make_controller()
        snapshot = controller.snapshot()

        assert snapshot.mode == "manual"
        assert snapshot.waypoint_index == 0
        assert snapshot.direction == 1
        assert snapshot.position == pytest.approx((0.0, 0.0, -2.0))
        assert snapshot.auto_mode_entered_at is None
        assert snapshot.mode_reason == "Startup"

    def test_snapshot_auto(self, make_controller, clock):
        controller = make_controller()
        go_idle(controller, clock)

        snapshot = controller.snapshot()

        assert snapshot.mode == "auto_waypoint"
        assert snapshot.auto_mode_entered_at == pytest.approx(1.5)
        assert snapshot.time_since_input == pytest.approx(1.5)

    def test_status(self, make_controller):
        controller = make_controller()
        status = controller.get_status()

        assert set(status) == {"arbiter", "navigator", "vehicle", "input_bound"}
        assert status["arbiter"]["mode"] == "manual"
        assert status["navigator"]["waypoint_count"] == 4
        assert status["vehicle"]["position"] == pytest.approx([0.0, 0.0, -2.0])
        assert status["input_bound"] is True
