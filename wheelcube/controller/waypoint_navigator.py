#!/usr/bin/env python3
"""
waypoint_navigator.py - Back-and-Forth Waypoint Following

Drives the vehicle kinematically along an ordered waypoint path. The
navigator sweeps the path forward to the last point, reverses, sweeps back
to the first point, reverses again, and so on forever.

Per frame tick:
    1. Measure distance to the current target waypoint.
    2. Inside the reach radius: step the index in the current direction,
       reversing at either end (index N -> N-2, index -1 -> 1).
    3. Slerp the heading toward the target at a fixed rate.
    4. Move forward along the body heading at the waypoint speed.

Whenever autonomous mode is (re-)entered the navigator re-anchors on the
nearest waypoint and picks the direction toward the nearer neighbour.

Usage:
    from wheelcube.controller.waypoint_navigator import WaypointNavigator

    navigator = WaypointNavigator(waypoints)
    navigator.seed_from_position(body.get_pose().position)
    navigator.step(body, dt)
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from wheelcube.controller.config import NAVIGATOR_CONFIG, NavigatorConfig
from wheelcube.controller.geometry import (
    clamp01,
    forward_axis,
    is_zero,
    look_rotation,
    normalize,
    slerp,
)
from wheelcube.controller.rigid_body import RigidBody

logger = logging.getLogger(__name__)


@dataclass
class NavigationState:
    """
    Mutable navigation cursor.

    Attributes:
        current_index: Index of the waypoint being approached.
        direction: +1 sweeping toward the end, -1 toward the start.
    """

    current_index: int = 0
    direction: int = 1


def as_waypoint_array(waypoints: Optional[Sequence[Sequence[float]]]) -> np.ndarray:
    """
    Convert waypoints to a read-only (N, 3) float array.

    Args:
        waypoints: Sequence of 3-component positions, or None.

    Returns:
        np.ndarray: Array of shape (N, 3); (0, 3) when empty or None.

    Raises:
        ValueError: If any waypoint does not have 3 components.
    """
    if waypoints is None or len(waypoints) == 0:
        path = np.zeros((0, 3))
    else:
        path = np.array(waypoints, dtype=float)
        if path.ndim != 2 or path.shape[1] != 3:
            raise ValueError(f"Waypoints must have shape (N, 3), got {path.shape}")
    path.flags.writeable = False
    return path


class WaypointNavigator:
    """
    Waypoint sweep with endpoint reversal and nearest-point re-entry.

    Attributes:
        config: Navigator configuration.
        waypoints: Read-only (N, 3) array of waypoint positions.
        state: Current navigation cursor.
    """

    def __init__(
        self,
        waypoints: Optional[Sequence[Sequence[float]]] = None,
        config: Optional[NavigatorConfig] = None,
    ):
        """
        Initialize the navigator.

        Args:
            waypoints: Ordered waypoint positions. None or empty disables
                navigation.
            config: Navigator configuration. Uses defaults if None.
        """
        self.config = config or NAVIGATOR_CONFIG
        self.waypoints = as_waypoint_array(waypoints)
        self.state = NavigationState()
        self._warned_no_path = False

        logger.debug("WaypointNavigator initialized (%d waypoints)", len(self.waypoints))

    @property
    def has_path(self) -> bool:
        return len(self.waypoints) > 0

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def direction(self) -> int:
        return self.state.direction

    @property
    def target(self) -> Optional[np.ndarray]:
        """Position of the current target waypoint, None without a path."""
        if not self.has_path:
            return None
        return self.waypoints[self.state.current_index].copy()

    def seed_from_position(self, position: np.ndarray) -> NavigationState:
        """
        Anchor navigation on the waypoint nearest to ``position``.

        Direction is +1 at the first waypoint, -1 at the last, otherwise
        toward whichever neighbour is strictly nearer; an exact tie picks -1.

        Args:
            position: Current body position.

        Returns:
            NavigationState: The new navigation state.
        """
        if not self.has_path:
            return self.state

        distances = np.linalg.norm(self.waypoints - position, axis=1)
        # argmin returns the first minimum, matching a strict-less linear scan
        nearest = int(np.argmin(distances))
        last = len(self.waypoints) - 1

        if nearest == 0:
            direction = 1
        elif nearest == last:
            direction = -1
        else:
            distance_to_next = distances[nearest + 1]
            distance_to_prev = distances[nearest - 1]
            direction = 1 if distance_to_next < distance_to_prev else -1

        self.state = NavigationState(current_index=nearest, direction=direction)
        logger.info("Nearest waypoint: %d, direction: %+d", nearest, direction)
        return self.state

    def update_target(self, position: np.ndarray) -> int:
        """
        Advance the target index if the current waypoint has been reached.

        Args:
            position: Current body position.

        Returns:
            int: Target index after the update.
        """
        if not self.has_path:
            return self.state.current_index

        distance = float(np.linalg.norm(self.waypoints[self.state.current_index] - position))
        if distance < self.config.reach_distance:
            self._advance()
        return self.state.current_index

    def _advance(self) -> None:
        count = len(self.waypoints)
        if count < 2:
            # Single waypoint: nothing to advance to
            return

        state = self.state
        previous = state.current_index
        state.current_index += state.direction

        if state.current_index >= count:
            state.current_index = count - 2
            state.direction = -1
            logger.debug("Reached end of path, reversing (-> %d)", state.current_index)
        elif state.current_index < 0:
            state.current_index = 1
            state.direction = 1
            logger.debug("Reached start of path, reversing (-> %d)", state.current_index)
        else:
            logger.debug("Waypoint %d reached, next %d", previous, state.current_index)

    def heading_toward(
        self,
        position: np.ndarray,
        orientation: np.ndarray,
        dt: float,
    ) -> np.ndarray:
        """
        Turn ``orientation`` toward the current target.

        Args:
            position: Current body position.
            orientation: Current body orientation.
            dt: Frame timestep in seconds.

        Returns:
            np.ndarray: New orientation; unchanged when the target
            direction has no length.
        """
        target_direction = normalize(self.waypoints[self.state.current_index] - position)
        if is_zero(target_direction):
            return orientation

        target_rotation = look_rotation(target_direction)
        return slerp(orientation, target_rotation, clamp01(self.config.heading_rate * dt))

    def step(self, body: RigidBody, dt: float) -> None:
        """
        Run one frame of waypoint following on ``body``.

        Args:
            body: Rigid body to move.
            dt: Frame timestep in seconds.
        """
        if not self.has_path:
            if not self._warned_no_path:
                logger.warning("No waypoints configured, skipping navigation")
                self._warned_no_path = True
            return

        pose = body.get_pose()
        self.update_target(pose.position)

        orientation = self.heading_toward(pose.position, pose.orientation, dt)
        position = pose.position + forward_axis(orientation) * (self.config.waypoint_speed * dt)

        body.set_pose(position, orientation)

    def get_status(self) -> dict:
        """
        Get current navigator status.

        Returns:
            dict: Navigator status information.
        """
        target = self.target
        return {
            "waypoint_count": len(self.waypoints),
            "current_index": self.state.current_index,
            "direction": self.state.direction,
            "target": target.tolist() if target is not None else None,
        }
