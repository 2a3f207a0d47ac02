"""
controller - Dual-Mode Vehicle Controller

Arbitrates between driver input and autonomous waypoint following for a
single rigid-body vehicle. Manual control applies forces and torques;
auto mode sweeps a waypoint path back and forth. Auto mode takes over
after a period of input idleness and hands back on the first input.

Main components:
- config: Tunable controller parameters
- input_sample: Raw channel normalization
- force_actuator: Manual throttle/brake/steer forces
- waypoint_navigator: Back-and-forth waypoint sweep
- mode_arbiter: Manual / auto state machine
- vehicle_controller: Composes everything per tick
- rigid_body: Physics body capability and simulated integrator
- status_server: Read-only HTTP status endpoint

Usage:
    python -m wheelcube.simulation.sim_app --scenario scenarios/oval.yaml
"""

from wheelcube.controller.config import (
    ACTUATOR_CONFIG,
    NAVIGATOR_CONFIG,
    ARBITER_CONFIG,
    STATUS_SERVER_CONFIG,
    ActuatorConfig,
    NavigatorConfig,
    ArbiterConfig,
    StatusServerConfig,
    VehicleConfig,
    get_config_summary,
)

from wheelcube.controller.input_sample import (
    RawInput,
    InputSource,
    ControlSample,
    normalize_throttle,
    normalize_brake,
    sample_input,
)

from wheelcube.controller.rigid_body import (
    Pose,
    RigidBody,
    RigidBodyParams,
    SimulatedRigidBody,
)

from wheelcube.controller.force_actuator import (
    ActuationCommand,
    ForceActuator,
)

from wheelcube.controller.waypoint_navigator import (
    NavigationState,
    WaypointNavigator,
)

from wheelcube.controller.mode_arbiter import (
    ControlMode,
    ManualMode,
    AutoWaypointMode,
    ModeTransition,
    ModeArbiter,
)

from wheelcube.controller.vehicle_controller import VehicleController

__all__ = [
    # Config
    "ACTUATOR_CONFIG",
    "NAVIGATOR_CONFIG",
    "ARBITER_CONFIG",
    "STATUS_SERVER_CONFIG",
    "ActuatorConfig",
    "NavigatorConfig",
    "ArbiterConfig",
    "StatusServerConfig",
    "VehicleConfig",
    "get_config_summary",
    # Input
    "RawInput",
    "InputSource",
    "ControlSample",
    "normalize_throttle",
    "normalize_brake",
    "sample_input",
    # Rigid body
    "Pose",
    "RigidBody",
    "RigidBodyParams",
    "SimulatedRigidBody",
    # Actuation
    "ActuationCommand",
    "ForceActuator",
    # Navigation
    "NavigationState",
    "WaypointNavigator",
    # Mode arbitration
    "ControlMode",
    "ManualMode",
    "AutoWaypointMode",
    "ModeTransition",
    "ModeArbiter",
    # Controller
    "VehicleController",
]
