#!/usr/bin/env python3
"""
telemetry.py - Vehicle Telemetry Snapshot and CSV Recorder

The controller exposes its state as an immutable TelemetrySnapshot. The
TelemetryRecorder writes snapshots to a CSV file, one row per call, for
offline plotting of driving sessions.

CSV columns:
    Time,PosX,PosY,PosZ,RotY,Velocity,Steering,Throttle,Brake,Mode,Waypoint,Direction

Time is relative to the first recorded snapshot.

Usage:
    from wheelcube.common.telemetry import TelemetryRecorder

    with TelemetryRecorder("run.csv") as recorder:
        for _ in range(steps):
            ...
            recorder.record(controller.snapshot())
"""

import csv
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

Vector3 = Tuple[float, float, float]
Quaternion = Tuple[float, float, float, float]

CSV_HEADER = [
    "Time",
    "PosX",
    "PosY",
    "PosZ",
    "RotY",
    "Velocity",
    "Steering",
    "Throttle",
    "Brake",
    "Mode",
    "Waypoint",
    "Direction",
]


@dataclass(frozen=True)
class TelemetrySnapshot:
    """
    Controller state at one instant.

    Attributes:
        time: Controller clock time (s).
        mode: Control mode name ("manual" or "auto_waypoint").
        waypoint_index: Current target waypoint index.
        direction: Waypoint sweep direction (+1 / -1).
        time_since_input: Seconds since last driver activity.
        position: World position.
        orientation: Orientation quaternion (w, x, y, z).
        rotation_deg: Euler angles (pitch, yaw, roll) in degrees.
        velocity: Linear velocity.
        speed: Linear speed (m/s).
        angular_velocity: Angular velocity (rad/s).
        acceleration: Linear acceleration over the last fixed tick.
        steer: Normalized steering.
        accel: Normalized throttle.
        brake: Normalized brake.
        auto_mode_entered_at: When auto mode was entered, None in manual.
        mode_reason: Why the current mode was entered.
    """

    time: float
    mode: str
    waypoint_index: int
    direction: int
    time_since_input: float
    position: Vector3
    orientation: Quaternion
    rotation_deg: Vector3
    velocity: Vector3
    speed: float
    angular_velocity: Vector3
    acceleration: Vector3
    steer: float
    accel: float
    brake: float
    auto_mode_entered_at: Optional[float] = None
    mode_reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to a JSON-friendly dictionary."""
        data = asdict(self)
        for key in ("position", "orientation", "rotation_deg", "velocity",
                    "angular_velocity", "acceleration"):
            data[key] = list(data[key])
        return data

    def __str__(self) -> str:
        p = self.position
        v = self.velocity
        w = self.angular_velocity
        a = self.acceleration
        return (
            f"[Vehicle] Pos:({p[0]:.2f},{p[1]:.2f},{p[2]:.2f}) "
            f"RotY:{self.rotation_deg[1]:.1f} "
            f"Vel:({v[0]:.2f},{v[1]:.2f},{v[2]:.2f}) "
            f"AngVel:({w[0]:.2f},{w[1]:.2f},{w[2]:.2f}) "
            f"Accel:({a[0]:.2f},{a[1]:.2f},{a[2]:.2f}) "
            f"Mode:{self.mode} Waypoint:{self.waypoint_index} "
            f"LastInput:{self.time_since_input:.2f}s ago"
        )


class TelemetryRecorder:
    """
    Writes telemetry snapshots to CSV.

    Attributes:
        path: Output file path.
        rows_written: Number of data rows written so far.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize the recorder. The file is opened by start().

        Args:
            path: Output CSV path. Parent directories are created.
        """
        self.path = Path(path)
        self.rows_written = 0
        self._file = None
        self._writer = None
        self._start_time: Optional[float] = None
        self._callbacks: List[Callable[[TelemetrySnapshot], None]] = []

    @property
    def is_recording(self) -> bool:
        return self._file is not None

    def add_callback(self, callback: Callable[[TelemetrySnapshot], None]) -> None:
        """
        Add a callback invoked with every recorded snapshot.

        Args:
            callback: Function called with the snapshot after it is written.
        """
        self._callbacks.append(callback)

    def start(self) -> None:
        """Open the output file and write the header."""
        if self.is_recording:
            logger.warning("TelemetryRecorder already recording to %s", self.path)
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "w", newline="")
        self._writer = csv.writer(self._file)
        self._writer.writerow(CSV_HEADER)
        self._start_time = None
        self.rows_written = 0
        logger.info("Recording telemetry to %s", self.path)

    def record(self, snapshot: TelemetrySnapshot) -> None:
        """
        Append one snapshot.

        Args:
            snapshot: Snapshot to write.
        """
        if not self.is_recording:
            return

        if self._start_time is None:
            self._start_time = snapshot.time

        p = snapshot.position
        self._writer.writerow([
            f"{snapshot.time - self._start_time:.2f}",
            f"{p[0]:.2f}",
            f"{p[1]:.2f}",
            f"{p[2]:.2f}",
            f"{snapshot.rotation_deg[1]:.2f}",
            f"{snapshot.speed:.2f}",
            f"{snapshot.steer:.2f}",
            f"{snapshot.accel:.2f}",
            f"{snapshot.brake:.2f}",
            snapshot.mode,
            snapshot.waypoint_index,
            snapshot.direction,
        ])
        self.rows_written += 1

        for callback in self._callbacks:
            try:
                callback(snapshot)
            except Exception as e:
                logger.warning(f"Telemetry callback error: {e}")

    def stop(self) -> None:
        """Flush and close the output file."""
        if not self.is_recording:
            return

        self._file.flush()
        self._file.close()
        self._file = None
        self._writer = None
        logger.info("Telemetry recording stopped (%d rows)", self.rows_written)

    def __enter__(self) -> "TelemetryRecorder":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
