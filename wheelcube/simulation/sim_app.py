#!/usr/bin/env python3
"""
sim_app.py - Vehicle Controller Simulation Runner

Drives the VehicleController against the simulated rigid body. Acts as the
external scheduler: fixed-rate physics ticks and frame ticks on a shared
simulation clock.

Architecture:
    Scenario -> ScriptedInputSource -> VehicleController -> SimulatedRigidBody
                                              |
                                              +-> TelemetryRecorder (CSV)
                                              +-> StatusServer (HTTP, read only)

Per frame, physics ticks due by the new frame time run first, then the
frame tick, matching a game engine's fixed-before-frame update order.

Usage:
    # Built-in demo scenario, as fast as possible
    python -m wheelcube.simulation.sim_app --no-http

    # Scenario file, real time, with CSV and status page
    python -m wheelcube.simulation.sim_app --scenario scenarios/oval.yaml \\
        --realtime --csv-out artifacts/run.csv

    # Watch it
    curl http://localhost:8080/status
"""

import asyncio
import logging
import sys
from typing import List, Optional

from wheelcube.common.helpers import (
    create_argument_parser,
    is_shutdown_requested,
    setup_logging,
    setup_signal_handlers,
)
from wheelcube.common.telemetry import TelemetryRecorder
from wheelcube.controller.config import StatusServerConfig, get_config_summary
from wheelcube.controller.geometry import quat_from_yaw_deg
from wheelcube.controller.mode_arbiter import ModeTransition
from wheelcube.controller.rigid_body import SimulatedRigidBody
from wheelcube.controller.status_server import StatusServer
from wheelcube.controller.vehicle_controller import VehicleController
from wheelcube.simulation.scenario import (
    Scenario,
    ScriptedInputSource,
    default_scenario,
    load_scenario,
)

# Module logger
logger = logging.getLogger(__name__)


class SimulationApp:
    """
    Fixed/frame tick scheduler around one controller.

    Attributes:
        scenario: Scenario being run.
        body: Simulated rigid body.
        controller: Vehicle controller under test.
        recorder: Optional CSV recorder.
        status_server: Optional HTTP status server.
        transitions: Mode transitions observed so far.
    """

    def __init__(
        self,
        scenario: Scenario,
        csv_path: Optional[str] = None,
        status_config: Optional[StatusServerConfig] = None,
        realtime: bool = False,
    ):
        """
        Initialize the simulation.

        Args:
            scenario: Scenario to run.
            csv_path: CSV output path, or None to skip recording.
            status_config: HTTP server configuration, or None to skip it.
            realtime: Sleep between frames to match wall-clock time.
        """
        self.scenario = scenario
        self.realtime = realtime

        self.frame_count = 0
        self.fixed_count = 0
        self.transitions: List[ModeTransition] = []

        self.body = SimulatedRigidBody(
            scenario.body,
            position=scenario.start_position,
            orientation=quat_from_yaw_deg(scenario.start_yaw_deg),
        )

        input_source = None
        if scenario.inputs is not None:
            input_source = ScriptedInputSource(scenario.inputs, clock=lambda: self.sim_time)

        self.controller = VehicleController(
            self.body,
            waypoints=scenario.waypoints,
            input_source=input_source,
            config=scenario.vehicle,
            clock=lambda: self.sim_time,
        )

        self.recorder = TelemetryRecorder(csv_path) if csv_path else None
        self.status_server = (
            StatusServer(self.controller, status_config)
            if status_config is not None
            else None
        )

        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def frame_dt(self) -> float:
        return 1.0 / self.scenario.frame_hz

    @property
    def fixed_dt(self) -> float:
        return 1.0 / self.scenario.physics_hz

    @property
    def sim_time(self) -> float:
        """Simulation clock, derived from the frame count to avoid drift."""
        return self.frame_count / self.scenario.frame_hz

    def step_frame(self) -> Optional[ModeTransition]:
        """
        Advance the simulation by one frame.

        Returns:
            Optional[ModeTransition]: Transition fired this frame, if any.
        """
        self.frame_count += 1

        # Physics ticks due by this frame time
        fixed_due = int(self.sim_time * self.scenario.physics_hz + 1e-9)
        while self.fixed_count < fixed_due:
            self.controller.on_fixed_tick(self.fixed_dt)
            self.body.step(self.fixed_dt)
            self.fixed_count += 1

        transition = self.controller.on_frame_tick(self.frame_dt)
        if transition is not None:
            self.transitions.append(transition)

        if self.recorder is not None:
            self.recorder.record(self.controller.snapshot())

        return transition

    async def run(self, duration: Optional[float] = None) -> bool:
        """
        Run the simulation loop.

        Args:
            duration: Simulated seconds to run. Uses the scenario duration
                if None.

        Returns:
            bool: True if the run completed, False if interrupted.
        """
        duration = self.scenario.duration if duration is None else duration
        completed = False

        if self.recorder is not None:
            self.recorder.start()
        if self.status_server is not None:
            await self.status_server.start()

        self._running = True
        logger.info(
            "Simulation '%s' started (%.1fs, physics %.0f Hz, frame %.0f Hz)",
            self.scenario.name,
            duration,
            self.scenario.physics_hz,
            self.scenario.frame_hz,
        )

        try:
            while self._running and self.sim_time < duration:
                if is_shutdown_requested():
                    logger.warning("Shutdown requested, stopping simulation")
                    break

                self.step_frame()

                if self.realtime:
                    await asyncio.sleep(self.frame_dt)
                else:
                    # Yield so the status server can answer requests
                    await asyncio.sleep(0)
            else:
                completed = self.sim_time >= duration

        except asyncio.CancelledError:
            logger.info("Simulation cancelled")
        finally:
            self._running = False
            if self.recorder is not None:
                self.recorder.stop()
            if self.status_server is not None:
                await self.status_server.stop()
            logger.info(
                "Simulation stopped at %.2fs (%d frames, %d transitions)",
                self.sim_time,
                self.frame_count,
                len(self.transitions),
            )

        return completed

    def stop(self) -> None:
        """Stop the simulation loop."""
        self._running = False


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    # Set up signal handlers
    setup_signal_handlers()

    parser = create_argument_parser(
        description="Dual-mode vehicle controller simulation",
    )
    parser.add_argument(
        "--scenario",
        default=None,
        help="Scenario YAML file (default: built-in demo)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Simulated seconds to run (default: scenario duration)",
    )
    parser.add_argument(
        "--csv-out",
        default=None,
        help="Write telemetry CSV to this path",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Run at wall-clock speed instead of as fast as possible",
    )

    args = parser.parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(level=log_level)

    try:
        scenario = load_scenario(args.scenario) if args.scenario else default_scenario()
    except (OSError, ValueError) as e:
        logger.error("Could not load scenario: %s", e)
        return 1

    status_config = None
    if not args.no_http:
        status_config = StatusServerConfig(http_port=args.http_port)

    print("\n" + "=" * 60)
    print(f"VEHICLE SIMULATION: {scenario.name}")
    print("=" * 60)
    print(get_config_summary(scenario.vehicle))
    print(f"  Waypoints: {len(scenario.waypoints)}")
    print(f"  CSV: {args.csv_out or 'disabled'}")
    print(f"  HTTP: {'disabled' if args.no_http else args.http_port}")
    print("=" * 60 + "\n")

    app = SimulationApp(
        scenario,
        csv_path=args.csv_out,
        status_config=status_config,
        realtime=args.realtime,
    )

    try:
        success = asyncio.run(app.run(args.duration))
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 0

    snapshot = app.controller.snapshot()
    print(f"\nFinished in {snapshot.mode} mode at waypoint {snapshot.waypoint_index}")
    for transition in app.transitions:
        print(f"  {transition}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
