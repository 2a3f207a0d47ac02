#!/usr/bin/env python3
"""
mode_arbiter.py - Manual / Auto-Waypoint Mode Arbitration

Decides each frame whether the driver or the waypoint navigator is in
control.

Switching is deliberately asymmetric:
    AutoWaypoint -> Manual   immediately on the first tick with input
    Manual -> AutoWaypoint   only after idle_time_before_auto seconds
                             without input

Transition hooks fire exactly once per actual mode change. The mode is a
tagged variant (ManualMode | AutoWaypointMode) carrying when and why it
was entered.

Usage:
    from wheelcube.controller.mode_arbiter import ModeArbiter

    arbiter = ModeArbiter(start_time=0.0)
    arbiter.on_manual_to_auto(lambda transition: reseed())
    arbiter.on_auto_to_manual(lambda transition: None)

    # Every frame:
    transition = arbiter.update(sample, now)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from wheelcube.controller.config import ARBITER_CONFIG, ArbiterConfig
from wheelcube.controller.input_sample import ControlSample

logger = logging.getLogger(__name__)


class ControlMode(Enum):
    """Who is driving."""

    MANUAL = "manual"
    AUTO_WAYPOINT = "auto_waypoint"


@dataclass(frozen=True)
class ManualMode:
    """
    Driver in control.

    Attributes:
        entered_at: Clock time the mode was entered.
        reason: Why the mode was entered.
    """

    entered_at: float = 0.0
    reason: str = "Startup"

    @property
    def mode(self) -> ControlMode:
        return ControlMode.MANUAL


@dataclass(frozen=True)
class AutoWaypointMode:
    """
    Waypoint navigator in control.

    Attributes:
        entered_at: Clock time the mode was entered.
        reason: Why the mode was entered.
    """

    entered_at: float
    reason: str

    @property
    def mode(self) -> ControlMode:
        return ControlMode.AUTO_WAYPOINT


ModeState = Union[ManualMode, AutoWaypointMode]


@dataclass(frozen=True)
class ModeTransition:
    """
    A single mode change.

    Attributes:
        previous: Mode state before the change.
        current: Mode state after the change.
    """

    previous: ModeState
    current: ModeState

    @property
    def at(self) -> float:
        return self.current.entered_at

    def __str__(self) -> str:
        return (
            f"{self.previous.mode.name} -> {self.current.mode.name} "
            f"at {self.at:.2f} ({self.current.reason})"
        )


TransitionCallback = Callable[[ModeTransition], Any]


class ModeArbiter:
    """
    Input-idleness state machine between Manual and AutoWaypoint.

    Attributes:
        config: Arbiter configuration.
        state: Current mode state (ManualMode or AutoWaypointMode).
        last_input_time: Clock time of the last tick with activity.
        is_transitioning: True only within the tick a transition fires;
            cleared by end_tick().
    """

    def __init__(self, config: Optional[ArbiterConfig] = None, start_time: float = 0.0):
        """
        Initialize the arbiter in Manual mode.

        Args:
            config: Arbiter configuration. Uses defaults if None.
            start_time: Clock time at startup; the idle timer starts here.
        """
        self.config = config or ARBITER_CONFIG
        self.state: ModeState = ManualMode(entered_at=start_time)
        self.last_input_time: float = start_time
        self.is_transitioning: bool = False
        self.transition_count: int = 0

        self._on_manual_to_auto_callbacks: List[TransitionCallback] = []
        self._on_auto_to_manual_callbacks: List[TransitionCallback] = []

        logger.debug(
            "ModeArbiter initialized (idle_time=%.1fs, threshold=%.2f)",
            self.config.idle_time_before_auto,
            self.config.input_threshold,
        )

    @property
    def mode(self) -> ControlMode:
        return self.state.mode

    @property
    def is_manual(self) -> bool:
        return self.state.mode is ControlMode.MANUAL

    @property
    def is_auto(self) -> bool:
        return self.state.mode is ControlMode.AUTO_WAYPOINT

    def time_since_input(self, now: float) -> float:
        """Seconds elapsed since the last tick with activity."""
        return now - self.last_input_time

    def on_manual_to_auto(self, callback: TransitionCallback) -> None:
        """Register callback for Manual -> AutoWaypoint."""
        self._on_manual_to_auto_callbacks.append(callback)

    def on_auto_to_manual(self, callback: TransitionCallback) -> None:
        """Register callback for AutoWaypoint -> Manual."""
        self._on_auto_to_manual_callbacks.append(callback)

    def update(self, sample: ControlSample, now: float) -> Optional[ModeTransition]:
        """
        Evaluate the transition rule for one frame.

        Args:
            sample: Normalized controls for this frame.
            now: Current clock time in seconds.

        Returns:
            Optional[ModeTransition]: The transition that fired, if any.
        """
        self.is_transitioning = False

        if sample.has_activity(self.config.input_threshold):
            self.last_input_time = now
            if self.is_auto:
                return self._transition(
                    ManualMode(entered_at=now, reason="Input detected"),
                    self._on_auto_to_manual_callbacks,
                )
            return None

        idle = now - self.last_input_time
        if idle > self.config.idle_time_before_auto and self.is_manual:
            return self._transition(
                AutoWaypointMode(
                    entered_at=now,
                    reason=f"No input for {self.config.idle_time_before_auto:g}s",
                ),
                self._on_manual_to_auto_callbacks,
            )

        return None

    def _transition(
        self,
        new_state: ModeState,
        callbacks: List[TransitionCallback],
    ) -> ModeTransition:
        transition = ModeTransition(previous=self.state, current=new_state)
        self.is_transitioning = True

        logger.info(
            "[Mode Change] -> %s (%s) at %.2f",
            new_state.mode.name,
            new_state.reason,
            new_state.entered_at,
        )

        for callback in callbacks:
            try:
                callback(transition)
            except Exception as e:
                logger.error("Mode transition callback error: %s", e)

        self.state = new_state
        self.transition_count += 1
        return transition

    def end_tick(self) -> None:
        """Close the current tick; a fired transition is no longer in progress."""
        self.is_transitioning = False

    def get_status(self, now: float) -> Dict[str, Any]:
        """
        Get current arbiter status.

        Args:
            now: Current clock time in seconds.

        Returns:
            dict: Status information.
        """
        status = {
            "mode": self.state.mode.value,
            "entered_at": self.state.entered_at,
            "reason": self.state.reason,
            "time_since_input": self.time_since_input(now),
            "idle_time_before_auto": self.config.idle_time_before_auto,
            "is_transitioning": self.is_transitioning,
            "transition_count": self.transition_count,
        }
        if self.is_auto:
            status["auto_mode_entered_at"] = self.state.entered_at
        return status
