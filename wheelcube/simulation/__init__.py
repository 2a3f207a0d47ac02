"""
Simulation Module

Runs the vehicle controller against a simulated rigid body with scripted
driver input.

Key Components:
    - Scenario: Waypoints, start pose, parameters and input timeline
    - ScriptedInputSource: Replays raw input readings
    - SimulationApp: Fixed/frame tick scheduler

Usage:
    from wheelcube.simulation import SimulationApp, load_scenario

    # Or run directly:
    # python -m wheelcube.simulation.sim_app --scenario scenarios/oval.yaml
"""

from wheelcube.simulation.scenario import (
    InputSegment,
    Scenario,
    ScriptedInputSource,
    default_scenario,
    load_scenario,
)
from wheelcube.simulation.sim_app import SimulationApp

__all__ = [
    "InputSegment",
    "Scenario",
    "ScriptedInputSource",
    "default_scenario",
    "load_scenario",
    "SimulationApp",
]
