#!/usr/bin/env python3
"""
vehicle_controller.py - Dual-Mode Vehicle Controller

Composes input sampling, mode arbitration, manual force actuation and
waypoint following around a single rigid body.

Architecture:
    Input Source -> ControlSample -> ModeArbiter
        Manual                     -> ForceActuator     (fixed tick)
        AutoWaypoint               -> WaypointNavigator (frame tick)

The controller owns no loop. An external scheduler calls:
    on_fixed_tick(dt)   at the physics rate, before the body is stepped
    on_frame_tick(dt)   at the frame rate

Usage:
    from wheelcube.controller.vehicle_controller import VehicleController

    controller = VehicleController(body, waypoints=path, input_source=wheel)

    # Scheduler:
    controller.on_frame_tick(frame_dt)
    controller.on_fixed_tick(fixed_dt)
    body.step(fixed_dt)

    print(controller.snapshot())
"""

import logging
from typing import Any, Callable, Dict, Optional, Sequence

import numpy as np

from wheelcube.common.telemetry import TelemetrySnapshot
from wheelcube.controller.config import VehicleConfig
from wheelcube.controller.force_actuator import ActuationCommand, ForceActuator
from wheelcube.controller.geometry import euler_degrees
from wheelcube.controller.input_sample import ControlSample, InputSource, sample_input
from wheelcube.controller.mode_arbiter import (
    ControlMode,
    ModeArbiter,
    ModeState,
    ModeTransition,
)
from wheelcube.controller.rigid_body import RigidBody
from wheelcube.controller.waypoint_navigator import WaypointNavigator

logger = logging.getLogger(__name__)


def _as_tuple(v: np.ndarray) -> tuple:
    return tuple(float(x) for x in v)


class VehicleController:
    """
    Dual-mode (manual / auto-waypoint) controller for one vehicle.

    Attributes:
        config: Controller configuration.
        body: Rigid body being controlled.
        input_source: Raw input source, None if unbound.
        actuator: Manual mode force actuator.
        navigator: Waypoint navigator.
        arbiter: Mode state machine.
    """

    def __init__(
        self,
        body: RigidBody,
        waypoints: Optional[Sequence[Sequence[float]]] = None,
        input_source: Optional[InputSource] = None,
        config: Optional[VehicleConfig] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize the controller and seed navigation.

        Args:
            body: Rigid body to control.
            waypoints: Ordered waypoint positions; None disables auto mode
                navigation.
            input_source: Raw input source; None reads as zero input.
            config: Controller configuration. Uses defaults if None.
            clock: Time source in seconds. If None, the controller keeps
                its own clock advanced by on_frame_tick.
        """
        self.config = config or VehicleConfig()
        self.body = body
        self.input_source = input_source

        self._clock = clock
        self._time = 0.0

        self.actuator = ForceActuator(self.config.actuator)
        self.navigator = WaypointNavigator(waypoints, self.config.navigator)
        self.arbiter = ModeArbiter(self.config.arbiter, start_time=self.now)

        self.arbiter.on_manual_to_auto(self._enter_auto)
        self.arbiter.on_auto_to_manual(self._enter_manual)

        self._sample = ControlSample.zero()
        self._last_command = ActuationCommand()
        self._prev_velocity = np.zeros(3)
        self._acceleration = np.zeros(3)
        self._fixed_tick_count = 0

        self.body.set_drag(self.config.actuator.drag)

        if input_source is None:
            logger.warning("No input source bound, reading zero input")

        if self.navigator.has_path:
            self.navigator.seed_from_position(self.body.get_pose().position)
        else:
            logger.warning("No waypoints configured, auto mode will hold position")

        logger.debug("VehicleController initialized")

    # -------------------------------------------------------------------------
    # Tick entry points
    # -------------------------------------------------------------------------

    def on_frame_tick(self, dt: float) -> Optional[ModeTransition]:
        """
        Frame update: sample input, arbitrate mode, follow waypoints.

        Args:
            dt: Frame timestep in seconds.

        Returns:
            Optional[ModeTransition]: The transition fired this frame, if any.
        """
        if self._clock is None:
            self._time += dt

        self._sample = sample_input(self.input_source)
        transition = self.arbiter.update(self._sample, self.now)

        if self.arbiter.is_auto and not self.arbiter.is_transitioning:
            self.navigator.step(self.body, dt)

        self.arbiter.end_tick()

        return transition

    def on_fixed_tick(self, dt: float) -> ActuationCommand:
        """
        Physics update: apply manual forces and track acceleration.

        Call before the physics integrator resolves the step.

        Args:
            dt: Fixed physics timestep in seconds.

        Returns:
            ActuationCommand: Forces applied this tick (zero in auto mode).
        """
        velocity = self.body.get_velocity()
        if dt > 0.0:
            self._acceleration = (velocity - self._prev_velocity) / dt
        else:
            self._acceleration = np.zeros(3)

        self._fixed_tick_count += 1
        interval = self.config.status_log_interval
        if interval > 0 and self._fixed_tick_count % interval == 0:
            logger.debug("%s", self.snapshot())

        self._sample = sample_input(self.input_source)

        if self.arbiter.is_manual:
            command = self.actuator.apply(self._sample, self.body, dt)
        else:
            command = ActuationCommand()

        self._last_command = command
        self._prev_velocity = velocity
        return command

    # -------------------------------------------------------------------------
    # Transition hooks
    # -------------------------------------------------------------------------

    def _enter_auto(self, transition: ModeTransition) -> None:
        logger.info("Switching to auto waypoint mode...")
        self.navigator.seed_from_position(self.body.get_pose().position)
        self.body.set_velocity(np.zeros(3))
        self.body.set_angular_velocity(np.zeros(3))

    def _enter_manual(self, transition: ModeTransition) -> None:
        logger.info("Switching to manual control...")

    # -------------------------------------------------------------------------
    # Read accessors
    # -------------------------------------------------------------------------

    @property
    def now(self) -> float:
        """Current controller clock time in seconds."""
        if self._clock is not None:
            return self._clock()
        return self._time

    @property
    def mode(self) -> ControlMode:
        return self.arbiter.mode

    @property
    def mode_state(self) -> ModeState:
        return self.arbiter.state

    @property
    def is_transitioning(self) -> bool:
        return self.arbiter.is_transitioning

    @property
    def current_waypoint(self) -> int:
        return self.navigator.current_index

    @property
    def direction(self) -> int:
        return self.navigator.direction

    @property
    def time_since_input(self) -> float:
        return self.arbiter.time_since_input(self.now)

    @property
    def position(self) -> np.ndarray:
        return self.body.get_pose().position

    @property
    def orientation(self) -> np.ndarray:
        return self.body.get_pose().orientation

    @property
    def velocity(self) -> np.ndarray:
        return self.body.get_velocity()

    @property
    def angular_velocity(self) -> np.ndarray:
        return self.body.get_angular_velocity()

    @property
    def acceleration(self) -> np.ndarray:
        return self._acceleration.copy()

    @property
    def steering(self) -> float:
        return self._sample.steer

    @property
    def throttle(self) -> float:
        return self._sample.accel

    @property
    def brake(self) -> float:
        return self._sample.brake

    @property
    def last_command(self) -> ActuationCommand:
        return self._last_command

    def snapshot(self) -> TelemetrySnapshot:
        """
        Capture the current controller state.

        Returns:
            TelemetrySnapshot: Immutable state for loggers and consumers.
        """
        pose = self.body.get_pose()
        velocity = self.body.get_velocity()
        state = self.arbiter.state

        return TelemetrySnapshot(
            time=self.now,
            mode=state.mode.value,
            waypoint_index=self.navigator.current_index,
            direction=self.navigator.direction,
            time_since_input=self.time_since_input,
            position=_as_tuple(pose.position),
            orientation=_as_tuple(pose.orientation),
            rotation_deg=_as_tuple(euler_degrees(pose.orientation)),
            velocity=_as_tuple(velocity),
            speed=float(np.linalg.norm(velocity)),
            angular_velocity=_as_tuple(self.body.get_angular_velocity()),
            acceleration=_as_tuple(self._acceleration),
            steer=self._sample.steer,
            accel=self._sample.accel,
            brake=self._sample.brake,
            auto_mode_entered_at=state.entered_at if self.arbiter.is_auto else None,
            mode_reason=state.reason,
        )

    def get_status(self) -> Dict[str, Any]:
        """
        Get current controller status.

        Returns:
            dict: Mode, navigation and vehicle state.
        """
        return {
            "arbiter": self.arbiter.get_status(self.now),
            "navigator": self.navigator.get_status(),
            "vehicle": self.snapshot().to_dict(),
            "input_bound": self.input_source is not None,
        }
