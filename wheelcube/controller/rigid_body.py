#!/usr/bin/env python3
"""
rigid_body.py - Rigid Body Capability and Simulated Integrator

The controller never integrates motion itself. It talks to a physics
body through the ``RigidBody`` protocol: accumulate forces and torques,
read and reset velocities, read and (for kinematic waypoint following)
write the pose.

``SimulatedRigidBody`` is a small point-mass integrator satisfying the
protocol. It is used by the simulation runner and the tests; a real
physics engine binding only needs to provide the same methods.

Usage:
    from wheelcube.controller.rigid_body import SimulatedRigidBody, RigidBodyParams

    body = SimulatedRigidBody(RigidBodyParams(mass=1.0))
    body.apply_force(np.array([0.0, 0.0, 10.0]))
    body.step(0.02)
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Protocol, Sequence

import numpy as np

from wheelcube.controller.geometry import (
    IDENTITY_QUAT,
    integrate_angular_velocity,
    quat_normalize,
    vec3,
)

logger = logging.getLogger(__name__)


@dataclass
class Pose:
    """
    Body pose in world frame.

    Attributes:
        position: World position (x, y, z).
        orientation: Unit quaternion (w, x, y, z).
    """

    position: np.ndarray
    orientation: np.ndarray

    def copy(self) -> "Pose":
        return Pose(self.position.copy(), self.orientation.copy())


class RigidBody(Protocol):
    """Capabilities the controller needs from a physics body."""

    def apply_force(self, force: np.ndarray) -> None:
        ...

    def apply_torque(self, torque: np.ndarray) -> None:
        ...

    def get_velocity(self) -> np.ndarray:
        ...

    def set_velocity(self, velocity: np.ndarray) -> None:
        ...

    def get_angular_velocity(self) -> np.ndarray:
        ...

    def set_angular_velocity(self, angular_velocity: np.ndarray) -> None:
        ...

    def get_pose(self) -> Pose:
        ...

    def set_pose(self, position: np.ndarray, orientation: np.ndarray) -> None:
        ...

    def set_drag(self, drag: float) -> None:
        ...


@dataclass
class RigidBodyParams:
    """
    Physical parameters of the simulated body.

    Attributes:
        mass: Body mass (kg).
        inertia: Scalar moment of inertia about every axis (kg m^2).
        drag: Linear velocity damping (1/s). The controller overrides it
            with its actuator drag at startup.
        angular_drag: Angular velocity damping (1/s).
    """

    mass: float = 1.0
    inertia: float = 1.0
    drag: float = 0.0
    angular_drag: float = 0.05

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RigidBodyParams":
        """
        Build parameters from a mapping of numbers or numeric strings.

        Raises:
            ValueError: If a key is unknown or a value is not numeric.
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("Body parameters must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown body parameter(s): {', '.join(unknown)}")

        values = {}
        for name, value in data.items():
            try:
                values[name] = float(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Body parameter '{name}' must be a number, got {value!r}") from e
        return cls(**values)


class SimulatedRigidBody:
    """
    Semi-implicit Euler rigid body with linear and angular damping.

    Forces and torques accumulate between ``step`` calls and are cleared
    once resolved.

    Attributes:
        params: Physical parameters.
    """

    def __init__(
        self,
        params: Optional[RigidBodyParams] = None,
        position: Sequence[float] = (0.0, 0.0, 0.0),
        orientation: Optional[Sequence[float]] = None,
    ):
        """
        Initialize the body at rest.

        Args:
            params: Physical parameters. Copied, so set_drag never edits
                the caller's instance. Uses defaults if None.
            position: Initial world position.
            orientation: Initial orientation quaternion (w, x, y, z).
        """
        self.params = replace(params) if params is not None else RigidBodyParams()
        self._position = vec3(position)
        self._orientation = (
            quat_normalize(np.asarray(orientation, dtype=float))
            if orientation is not None
            else IDENTITY_QUAT.copy()
        )
        self._velocity = np.zeros(3)
        self._angular_velocity = np.zeros(3)
        self._force = np.zeros(3)
        self._torque = np.zeros(3)

    # -------------------------------------------------------------------------
    # RigidBody protocol
    # -------------------------------------------------------------------------

    def apply_force(self, force: np.ndarray) -> None:
        self._force = self._force + np.asarray(force, dtype=float)

    def apply_torque(self, torque: np.ndarray) -> None:
        self._torque = self._torque + np.asarray(torque, dtype=float)

    def get_velocity(self) -> np.ndarray:
        return self._velocity.copy()

    def set_velocity(self, velocity: np.ndarray) -> None:
        self._velocity = vec3(velocity)

    def get_angular_velocity(self) -> np.ndarray:
        return self._angular_velocity.copy()

    def set_angular_velocity(self, angular_velocity: np.ndarray) -> None:
        self._angular_velocity = vec3(angular_velocity)

    def get_pose(self) -> Pose:
        return Pose(self._position.copy(), self._orientation.copy())

    def set_pose(self, position: np.ndarray, orientation: np.ndarray) -> None:
        self._position = vec3(position)
        self._orientation = quat_normalize(np.asarray(orientation, dtype=float))

    def set_drag(self, drag: float) -> None:
        self.params.drag = drag
        logger.debug("Rigid body drag set to %.2f", drag)

    # -------------------------------------------------------------------------
    # Integration
    # -------------------------------------------------------------------------

    @property
    def pending_force(self) -> np.ndarray:
        """Force accumulated since the last step."""
        return self._force.copy()

    @property
    def pending_torque(self) -> np.ndarray:
        """Torque accumulated since the last step."""
        return self._torque.copy()

    def step(self, dt: float) -> None:
        """
        Resolve accumulated forces and advance the body by ``dt``.

        Args:
            dt: Timestep in seconds. Non-positive values only clear the
                accumulators.
        """
        if dt <= 0.0:
            self._clear_accumulators()
            return

        p = self.params
        self._velocity = self._velocity + (self._force / p.mass) * dt
        self._velocity = self._velocity * max(0.0, 1.0 - p.drag * dt)

        self._angular_velocity = self._angular_velocity + (self._torque / p.inertia) * dt
        self._angular_velocity = self._angular_velocity * max(0.0, 1.0 - p.angular_drag * dt)

        self._position = self._position + self._velocity * dt
        self._orientation = integrate_angular_velocity(
            self._orientation, self._angular_velocity, dt
        )

        self._clear_accumulators()

    def _clear_accumulators(self) -> None:
        self._force = np.zeros(3)
        self._torque = np.zeros(3)
