"""
Wheel-Cube Vehicle Controller

Dual-mode controller for a single physics-driven vehicle: a driver steers
with wheel and pedals, and when the driver lets go for long enough the
vehicle starts patrolling a waypoint path on its own.

Packages:
    controller/   - Input normalization, force actuation, waypoint
                    navigation, mode arbitration and the controller itself
    common/       - Logging/CLI helpers and telemetry recording
    simulation/   - Scenario files and the simulation runner

Usage:
    # Run the built-in demo scenario
    python -m wheelcube.simulation.sim_app --no-http

    # Run a scenario in real time with a status page on :8080
    python -m wheelcube.simulation.sim_app --scenario scenarios/oval.yaml --realtime
"""
