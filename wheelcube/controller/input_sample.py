#!/usr/bin/env python3
"""
input_sample.py - Raw Input Normalization

Converts the three raw driving channels into the normalized values the
controller works with.

Raw channel ranges (wheel + pedal style device):
    Steering        [-1, 1]   -1 = full left, +1 = full right
    Throttle slider [-1, 1]   +1 = released, -1 = full throttle
    Brake stick     [-1, 1]   -1 = released, +1 = full brake

Normalized ranges:
    steer  [-1, 1]  passed through unchanged
    accel  [0, 1]   clamp01((1 - throttle) / 2)
    brake  [0, 1]   clamp01((brake + 1) / 2)

Usage:
    from wheelcube.controller.input_sample import RawInput, sample_input

    sample = sample_input(source)   # source may be None
    if sample.has_activity(threshold=0.1):
        ...
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from wheelcube.controller.geometry import clamp01


@dataclass(frozen=True)
class RawInput:
    """
    Raw device readings, one value per channel.

    Attributes:
        steering: Steering axis value.
        throttle: Throttle slider value (1 = no throttle).
        brake: Brake stick value (-1 = no brake).
    """

    steering: float = 0.0
    throttle: float = 1.0
    brake: float = -1.0

    @classmethod
    def idle(cls) -> "RawInput":
        """Readings of a connected device nobody is touching."""
        return cls(steering=0.0, throttle=1.0, brake=-1.0)


class InputSource(Protocol):
    """Anything that can report the current raw readings."""

    def read(self) -> Optional[RawInput]:
        """Return current readings, or None if the device is unavailable."""
        ...


@dataclass(frozen=True)
class ControlSample:
    """
    Normalized control values for a single tick.

    Attributes:
        steer: Steering command in [-1, 1].
        accel: Acceleration command in [0, 1].
        brake: Brake command in [0, 1].
    """

    steer: float = 0.0
    accel: float = 0.0
    brake: float = 0.0

    @classmethod
    def zero(cls) -> "ControlSample":
        """Sample used when no input source is bound."""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_raw(cls, raw: RawInput) -> "ControlSample":
        return cls(
            steer=raw.steering,
            accel=normalize_throttle(raw.throttle),
            brake=normalize_brake(raw.brake),
        )

    def has_activity(self, threshold: float) -> bool:
        """True if any channel is above the activity threshold."""
        return (
            abs(self.steer) > threshold
            or self.accel > threshold
            or self.brake > threshold
        )

    def __str__(self) -> str:
        return (
            f"Sample(steer={self.steer:+.2f}, "
            f"accel={self.accel:.2f}, brake={self.brake:.2f})"
        )


def normalize_throttle(raw_throttle: float) -> float:
    """Map throttle slider (1 released, -1 full) to [0, 1]."""
    return clamp01((1.0 - raw_throttle) / 2.0)


def normalize_brake(raw_brake: float) -> float:
    """Map brake stick (-1 released, 1 full) to [0, 1]."""
    return clamp01((raw_brake + 1.0) / 2.0)


def sample_input(source: Optional[InputSource]) -> ControlSample:
    """
    Read and normalize the current input.

    A missing source, or a source that reports no readings, yields an
    all-zero sample.

    Args:
        source: Input source, may be None.

    Returns:
        ControlSample: Normalized values for this tick.
    """
    if source is None:
        return ControlSample.zero()

    raw = source.read()
    if raw is None:
        return ControlSample.zero()

    return ControlSample.from_raw(raw)
