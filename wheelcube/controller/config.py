#!/usr/bin/env python3
"""
config.py - Vehicle Controller Configuration Parameters

Centralized configuration for the dual-mode vehicle controller.
Defaults are tuned for a small wheel-cube vehicle:
modest forces, a 3 second idle timeout before autonomous takeover
and a 0.5 m waypoint reach radius.

Usage:
    from wheelcube.controller.config import VehicleConfig, get_config_summary

    config = VehicleConfig.from_dict({"arbiter": {"idle_time_before_auto": 5.0}})
    print(get_config_summary(config))
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


def _coerce(value: Any, kind: type, name: str) -> Any:
    """Convert a loaded value to a field's numeric type."""
    if kind is bool:
        if not isinstance(value, bool):
            raise ValueError(f"'{name}' must be true or false, got {value!r}")
        return value
    if kind in (int, float):
        if isinstance(value, bool):
            raise ValueError(f"'{name}' must be a number, got {value!r}")
        try:
            return kind(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"'{name}' must be a number, got {value!r}") from e
    return value


def _build(cls, data: Optional[Dict[str, Any]], section: str):
    """Build a config dataclass from a dict, rejecting unknown keys and non-numeric values."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"Config section '{section}' must be a mapping")

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(
            f"Unknown key(s) in '{section}': {', '.join(unknown)}. "
            f"Valid keys: {', '.join(sorted(known))}"
        )
    kinds = {f.name: f.type for f in fields(cls)}
    return cls(**{
        name: _coerce(value, kinds[name], f"{section}.{name}")
        for name, value in data.items()
    })


@dataclass
class ActuatorConfig:
    """
    Configuration for manual-mode force actuation.

    Forces and torques are scaled by the fixed timestep before being
    applied, so these are per-second magnitudes.

    Attributes:
        acceleration_force: Forward force at full throttle.
        brake_force: Decelerating force at full brake.
        drag: Linear drag assigned to the body at startup.
        turn_torque: Yaw torque at full steering lock.
        activation_threshold: Channels at or below this are ignored.
    """

    acceleration_force: float = 50.0
    brake_force: float = 100.0
    drag: float = 1.0
    turn_torque: float = 10.0
    activation_threshold: float = 0.01

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "acceleration_force": self.acceleration_force,
            "brake_force": self.brake_force,
            "drag": self.drag,
            "turn_torque": self.turn_torque,
            "activation_threshold": self.activation_threshold,
        }


@dataclass
class NavigatorConfig:
    """
    Configuration for autonomous waypoint following.

    Attributes:
        waypoint_speed: Forward speed along the heading axis (m/s).
        reach_distance: Radius in which a waypoint counts as reached (m).
        heading_rate: Slerp rate toward the target heading (1/s).
    """

    waypoint_speed: float = 3.0
    reach_distance: float = 0.5
    heading_rate: float = 2.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "waypoint_speed": self.waypoint_speed,
            "reach_distance": self.reach_distance,
            "heading_rate": self.heading_rate,
        }


@dataclass
class ArbiterConfig:
    """
    Configuration for manual/auto mode arbitration.

    Attributes:
        idle_time_before_auto: Seconds without input before auto takeover.
        input_threshold: Channel level counted as driver activity.
    """

    idle_time_before_auto: float = 3.0
    input_threshold: float = 0.1

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "idle_time_before_auto": self.idle_time_before_auto,
            "input_threshold": self.input_threshold,
        }


@dataclass
class StatusServerConfig:
    """
    Configuration for the read-only HTTP status endpoint.

    Attributes:
        http_host: Host to bind HTTP server.
        http_port: Port for HTTP status API.
        enable_http: Whether to start the HTTP server.
    """

    http_host: str = "0.0.0.0"
    http_port: int = 8080
    enable_http: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "http_host": self.http_host,
            "http_port": self.http_port,
            "enable_http": self.enable_http,
        }


@dataclass
class VehicleConfig:
    """
    Complete controller configuration.

    Attributes:
        actuator: Manual force actuation settings.
        navigator: Waypoint following settings.
        arbiter: Mode switch settings.
        status_log_interval: Fixed ticks between DEBUG status lines
            (0 disables the periodic line).
    """

    actuator: ActuatorConfig = field(default_factory=ActuatorConfig)
    navigator: NavigatorConfig = field(default_factory=NavigatorConfig)
    arbiter: ArbiterConfig = field(default_factory=ArbiterConfig)
    status_log_interval: int = 50

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "VehicleConfig":
        """
        Build a configuration from nested dictionaries.

        Missing sections and keys keep their defaults.

        Args:
            data: Mapping with optional "actuator", "navigator", "arbiter"
                and "status_log_interval" entries.

        Returns:
            VehicleConfig: Parsed configuration.

        Raises:
            ValueError: If a section or key is unknown, or a value is not
                of the field's numeric type.
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("Vehicle config must be a mapping")

        allowed = {"actuator", "navigator", "arbiter", "status_log_interval"}
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ValueError(f"Unknown vehicle config section(s): {', '.join(unknown)}")

        return cls(
            actuator=_build(ActuatorConfig, data.get("actuator"), "actuator"),
            navigator=_build(NavigatorConfig, data.get("navigator"), "navigator"),
            arbiter=_build(ArbiterConfig, data.get("arbiter"), "arbiter"),
            status_log_interval=_coerce(
                data.get("status_log_interval", 50), int, "status_log_interval"
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "actuator": self.actuator.to_dict(),
            "navigator": self.navigator.to_dict(),
            "arbiter": self.arbiter.to_dict(),
            "status_log_interval": self.status_log_interval,
        }


# Default configuration instances
ACTUATOR_CONFIG = ActuatorConfig()
NAVIGATOR_CONFIG = NavigatorConfig()
ARBITER_CONFIG = ArbiterConfig()
STATUS_SERVER_CONFIG = StatusServerConfig()


def get_config_summary(config: Optional[VehicleConfig] = None) -> str:
    """
    Get a human-readable summary of a configuration.

    Args:
        config: Configuration to describe. Uses defaults if None.

    Returns:
        str: Formatted configuration summary.
    """
    config = config or VehicleConfig()
    act = config.actuator
    nav = config.navigator
    arb = config.arbiter

    lines = [
        "=" * 50,
        "Vehicle Controller Configuration",
        "=" * 50,
        "",
        "Manual Control:",
        f"  Acceleration force: {act.acceleration_force:.1f}",
        f"  Brake force: {act.brake_force:.1f}",
        f"  Turn torque: {act.turn_torque:.1f}",
        f"  Drag: {act.drag:.2f}",
        "",
        "Waypoint Auto Control:",
        f"  Speed: {nav.waypoint_speed:.1f} m/s",
        f"  Reach distance: {nav.reach_distance:.2f} m",
        f"  Heading rate: {nav.heading_rate:.1f} /s",
        "",
        "Mode Switch:",
        f"  Idle time before auto: {arb.idle_time_before_auto:.1f} s",
        f"  Input threshold: {arb.input_threshold:.2f}",
        "=" * 50,
    ]
    return "\n".join(lines)


if __name__ == "__main__":
    # Print configuration when run directly
    print(get_config_summary())
