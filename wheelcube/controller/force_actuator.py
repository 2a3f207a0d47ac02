#!/usr/bin/env python3
"""
force_actuator.py - Manual Mode Force and Torque Actuation

Turns a normalized ControlSample into forces and torques on the rigid
body. The physics integrator resolves them; velocities are never written
directly here.

Per fixed tick, independently:
    accel > threshold       -> forward force  accel * acceleration_force * dt
    brake > threshold       -> force opposing velocity  brake * brake_force * dt
                               (skipped while the body is exactly at rest)
    |steer| > threshold     -> yaw torque  steer * turn_torque * dt

Usage:
    from wheelcube.controller.force_actuator import ForceActuator

    actuator = ForceActuator()
    command = actuator.apply(sample, body, dt)
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from wheelcube.controller.config import ACTUATOR_CONFIG, ActuatorConfig
from wheelcube.controller.geometry import UP, forward_axis
from wheelcube.controller.input_sample import ControlSample
from wheelcube.controller.rigid_body import RigidBody

logger = logging.getLogger(__name__)


@dataclass
class ActuationCommand:
    """
    Forces and torque issued during one fixed tick.

    Attributes:
        drive_force: Forward force from the throttle.
        brake_force: Decelerating force from the brake.
        torque: Yaw torque from the steering.
    """

    drive_force: np.ndarray = field(default_factory=lambda: np.zeros(3))
    brake_force: np.ndarray = field(default_factory=lambda: np.zeros(3))
    torque: np.ndarray = field(default_factory=lambda: np.zeros(3))

    @property
    def total_force(self) -> np.ndarray:
        return self.drive_force + self.brake_force

    @property
    def is_zero(self) -> bool:
        """Check if nothing was applied this tick."""
        return (
            not np.any(self.drive_force)
            and not np.any(self.brake_force)
            and not np.any(self.torque)
        )

    def __str__(self) -> str:
        f = self.total_force
        return (
            f"Actuation(force=({f[0]:+.2f}, {f[1]:+.2f}, {f[2]:+.2f}), "
            f"yaw_torque={self.torque[1]:+.3f})"
        )


class ForceActuator:
    """
    Applies throttle, brake and steering to a rigid body.

    Attributes:
        config: Actuator configuration.
    """

    def __init__(self, config: Optional[ActuatorConfig] = None):
        """
        Initialize the actuator.

        Args:
            config: Actuator configuration. Uses defaults if None.
        """
        self.config = config or ACTUATOR_CONFIG
        logger.debug(
            "ForceActuator initialized (accel=%.1f, brake=%.1f, torque=%.1f)",
            self.config.acceleration_force,
            self.config.brake_force,
            self.config.turn_torque,
        )

    def apply(self, sample: ControlSample, body: RigidBody, dt: float) -> ActuationCommand:
        """
        Issue force/torque commands for one fixed tick.

        Args:
            sample: Normalized controls for this tick.
            body: Rigid body receiving the commands.
            dt: Fixed timestep in seconds.

        Returns:
            ActuationCommand: What was applied.
        """
        cfg = self.config
        threshold = cfg.activation_threshold
        command = ActuationCommand()

        if sample.accel > threshold:
            forward = forward_axis(body.get_pose().orientation)
            command.drive_force = forward * (sample.accel * cfg.acceleration_force * dt)
            body.apply_force(command.drive_force)

        if sample.brake > threshold:
            velocity = body.get_velocity()
            speed = float(np.linalg.norm(velocity))
            # At rest there is no direction to brake against
            if speed > 0.0:
                brake_dir = -velocity / speed
                command.brake_force = brake_dir * (sample.brake * cfg.brake_force * dt)
                body.apply_force(command.brake_force)

        if abs(sample.steer) > threshold:
            command.torque = UP * (sample.steer * cfg.turn_torque * dt)
            body.apply_torque(command.torque)

        return command
