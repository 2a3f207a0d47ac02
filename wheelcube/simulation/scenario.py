#!/usr/bin/env python3
"""
scenario.py - Simulation Scenario Loading and Scripted Input

A scenario bundles everything needed for a reproducible run: the waypoint
path, the start pose, controller and body parameters, tick rates and a
scripted timeline of raw input readings.

Scenario YAML:
    name: oval
    duration: 20.0
    rates:
      physics_hz: 50
      frame_hz: 60
    start:
      position: [0.0, 0.0, -2.0]
      yaw_deg: 0.0
    body:
      mass: 1.0
    vehicle:
      arbiter:
        idle_time_before_auto: 3.0
    waypoints:
      - [0.0, 0.0, 0.0]
      - [0.0, 0.0, 10.0]
    inputs:
      - {until: 2.0, throttle: -1.0}          # full throttle
      - {until: 3.0, steer: 0.5, throttle: 0.0}
      - {until: 4.0, connected: false}        # device unplugged

Segments are piecewise constant and apply while ``time < until``.
Omitted channels read as released; after the last segment the device
reads idle.

Usage:
    from wheelcube.simulation.scenario import load_scenario

    scenario = load_scenario("scenarios/oval.yaml")
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import yaml

from wheelcube.controller.config import VehicleConfig
from wheelcube.controller.input_sample import RawInput
from wheelcube.controller.rigid_body import RigidBodyParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputSegment:
    """
    Constant raw readings until a point in time.

    Attributes:
        until: Segment end time (exclusive) in seconds.
        raw: Readings during the segment; None models an unplugged device.
    """

    until: float
    raw: Optional[RawInput]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InputSegment":
        if not isinstance(data, dict) or "until" not in data:
            raise ValueError(f"Input segment needs an 'until' time: {data!r}")

        allowed = {"until", "steer", "throttle", "brake", "connected"}
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ValueError(f"Unknown input segment key(s): {', '.join(unknown)}")

        if not data.get("connected", True):
            return cls(until=_number(data["until"], "segment until"), raw=None)

        idle = RawInput.idle()
        return cls(
            until=_number(data["until"], "segment until"),
            raw=RawInput(
                steering=_number(data.get("steer", idle.steering), "segment steer"),
                throttle=_number(data.get("throttle", idle.throttle), "segment throttle"),
                brake=_number(data.get("brake", idle.brake), "segment brake"),
            ),
        )


class ScriptedInputSource:
    """
    Replays a raw-input timeline against a clock.

    Attributes:
        segments: Segments ordered by end time.
    """

    def __init__(self, segments: Sequence[InputSegment], clock: Callable[[], float]):
        """
        Initialize the scripted source.

        Args:
            segments: Input segments, ordered by ``until``.
            clock: Time source in seconds.
        """
        self.segments = sorted(segments, key=lambda s: s.until)
        self._clock = clock

    def read(self) -> Optional[RawInput]:
        now = self._clock()
        for segment in self.segments:
            if now < segment.until:
                return segment.raw
        return RawInput.idle()


@dataclass
class Scenario:
    """
    Reproducible simulation setup.

    Attributes:
        name: Scenario name.
        waypoints: Ordered waypoint positions.
        start_position: Initial body position.
        start_yaw_deg: Initial heading about the vertical axis.
        vehicle: Controller configuration.
        body: Simulated body parameters.
        physics_hz: Fixed physics tick rate.
        frame_hz: Frame tick rate.
        duration: Simulated seconds to run.
        inputs: Raw input timeline; None runs with no input device bound.
    """

    name: str = "default"
    waypoints: List[List[float]] = field(default_factory=list)
    start_position: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    start_yaw_deg: float = 0.0
    vehicle: VehicleConfig = field(default_factory=VehicleConfig)
    body: RigidBodyParams = field(default_factory=RigidBodyParams)
    physics_hz: float = 50.0
    frame_hz: float = 60.0
    duration: float = 20.0
    inputs: Optional[List[InputSegment]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Scenario":
        """
        Build a scenario from a parsed YAML mapping.

        Args:
            data: Scenario mapping.

        Returns:
            Scenario: Parsed scenario.

        Raises:
            ValueError: If the mapping is malformed.
        """
        if not isinstance(data, dict):
            raise ValueError("Scenario must be a mapping")

        allowed = {"name", "duration", "rates", "start", "body", "vehicle",
                   "waypoints", "inputs"}
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ValueError(f"Unknown scenario key(s): {', '.join(unknown)}")

        waypoint_data = data.get("waypoints") or []
        if not isinstance(waypoint_data, list):
            raise ValueError("Scenario 'waypoints' must be a list")
        waypoints = [_as_point(p, "waypoint") for p in waypoint_data]

        start = _section(data, "start")
        start_position = _as_point(start.get("position", [0.0, 0.0, 0.0]), "start position")

        rates = _section(data, "rates")
        physics_hz = _number(rates.get("physics_hz", 50.0), "physics_hz")
        frame_hz = _number(rates.get("frame_hz", 60.0), "frame_hz")
        if physics_hz <= 0 or frame_hz <= 0:
            raise ValueError("Tick rates must be positive")

        body = RigidBodyParams.from_dict(_section(data, "body"))

        if "inputs" in data and data["inputs"] is None:
            inputs = None
        else:
            segments = data.get("inputs") or []
            if not isinstance(segments, list):
                raise ValueError("Scenario 'inputs' must be a list of segments")
            inputs = [InputSegment.from_dict(s) for s in segments]

        return cls(
            name=str(data.get("name", "default")),
            waypoints=waypoints,
            start_position=start_position,
            start_yaw_deg=_number(start.get("yaw_deg", 0.0), "yaw_deg"),
            vehicle=VehicleConfig.from_dict(data.get("vehicle")),
            body=body,
            physics_hz=physics_hz,
            frame_hz=frame_hz,
            duration=_number(data.get("duration", 20.0), "duration"),
            inputs=inputs,
        )


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Scenario '{key}' must be a mapping, got {value!r}")
    return value


def _as_point(value: Any, what: str) -> List[float]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"Each {what} must have 3 components, got {value!r}")
    return [_number(v, what) for v in value]


def _number(value: Any, what: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Scenario {what} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Scenario {what} must be a number, got {value!r}") from e


def load_scenario(path: Union[str, Path]) -> Scenario:
    """
    Load a scenario from a YAML file.

    Args:
        path: Scenario file path.

    Returns:
        Scenario: Parsed scenario.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file content is malformed.
    """
    path = Path(path)
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    scenario = Scenario.from_dict(data)
    logger.info(
        "Loaded scenario '%s' (%d waypoints, %d input segments)",
        scenario.name,
        len(scenario.waypoints),
        len(scenario.inputs or []),
    )
    return scenario


def default_scenario() -> Scenario:
    """
    Built-in demo: drive a little, let go, watch auto mode take over.

    Returns:
        Scenario: Rectangular track with a short manual drive.
    """
    return Scenario(
        name="demo",
        waypoints=[
            [0.0, 0.0, 0.0],
            [0.0, 0.0, 10.0],
            [10.0, 0.0, 10.0],
            [10.0, 0.0, 0.0],
        ],
        start_position=[-2.0, 0.0, -2.0],
        duration=20.0,
        inputs=[
            InputSegment(until=2.0, raw=RawInput(steering=0.0, throttle=-1.0, brake=-1.0)),
            InputSegment(until=3.0, raw=RawInput(steering=0.6, throttle=0.0, brake=-1.0)),
            InputSegment(until=4.0, raw=RawInput(steering=0.0, throttle=1.0, brake=1.0)),
        ],
    )
