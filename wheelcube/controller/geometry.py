#!/usr/bin/env python3
"""
geometry.py - Vector and Quaternion Helpers

Small numpy helpers for the vehicle controller. Frame convention:

    +Y  up (vertical axis, steering torque axis)
    +Z  forward (body heading axis)
    +X  right

Quaternions are numpy arrays ordered (w, x, y, z).
"""

import math
from typing import Sequence

import numpy as np

UP = np.array([0.0, 1.0, 0.0])
FORWARD = np.array([0.0, 0.0, 1.0])
RIGHT = np.array([1.0, 0.0, 0.0])

IDENTITY_QUAT = np.array([1.0, 0.0, 0.0, 0.0])

# Below this length a vector is treated as zero
EPSILON = 1e-9


def clamp01(value: float) -> float:
    """Clamp a scalar into [0, 1]."""
    return max(0.0, min(1.0, value))


def vec3(values: Sequence[float] = (0.0, 0.0, 0.0)) -> np.ndarray:
    """Build a float64 3-vector, raising ValueError on bad shape."""
    arr = np.asarray(values, dtype=float).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected 3 components, got {arr.shape[0]}")
    return arr


def normalize(v: np.ndarray) -> np.ndarray:
    """Return unit vector, or zero vector when ``v`` has no length."""
    n = float(np.linalg.norm(v))
    if n < EPSILON:
        return np.zeros_like(v, dtype=float)
    return v / n


def is_zero(v: np.ndarray) -> bool:
    return float(np.linalg.norm(v)) < EPSILON


def quat_normalize(q: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(q))
    if n < EPSILON:
        return IDENTITY_QUAT.copy()
    return q / n


def quat_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product a * b."""
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return np.array([
        aw * bw - ax * bx - ay * by - az * bz,
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
    ])


def quat_rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector ``v`` by unit quaternion ``q``."""
    w = q[0]
    u = q[1:]
    t = 2.0 * np.cross(u, v)
    return v + w * t + np.cross(u, t)


def forward_axis(q: np.ndarray) -> np.ndarray:
    """Body forward (+Z) axis expressed in world frame."""
    return quat_rotate(q, FORWARD)


def quat_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    axis = normalize(np.asarray(axis, dtype=float))
    if is_zero(axis):
        return IDENTITY_QUAT.copy()
    half = 0.5 * angle
    return np.concatenate(([math.cos(half)], axis * math.sin(half)))


def quat_from_yaw_deg(yaw_deg: float) -> np.ndarray:
    """Rotation about the vertical axis (positive yaw turns +Z toward +X)."""
    return quat_from_axis_angle(UP, math.radians(yaw_deg))


def _quat_from_matrix(m: np.ndarray) -> np.ndarray:
    trace = m[0, 0] + m[1, 1] + m[2, 2]
    if trace > 0.0:
        s = 2.0 * math.sqrt(trace + 1.0)
        q = [
            0.25 * s,
            (m[2, 1] - m[1, 2]) / s,
            (m[0, 2] - m[2, 0]) / s,
            (m[1, 0] - m[0, 1]) / s,
        ]
    elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2])
        q = [
            (m[2, 1] - m[1, 2]) / s,
            0.25 * s,
            (m[0, 1] + m[1, 0]) / s,
            (m[0, 2] + m[2, 0]) / s,
        ]
    elif m[1, 1] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2])
        q = [
            (m[0, 2] - m[2, 0]) / s,
            (m[0, 1] + m[1, 0]) / s,
            0.25 * s,
            (m[1, 2] + m[2, 1]) / s,
        ]
    else:
        s = 2.0 * math.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1])
        q = [
            (m[1, 0] - m[0, 1]) / s,
            (m[0, 2] + m[2, 0]) / s,
            (m[1, 2] + m[2, 1]) / s,
            0.25 * s,
        ]
    return quat_normalize(np.array(q))


def look_rotation(direction: np.ndarray, up: np.ndarray = UP) -> np.ndarray:
    """
    Orientation whose forward axis points along ``direction``.

    Keeps the body upright with respect to ``up``. When ``direction`` is
    parallel to ``up`` the world right axis is used to complete the basis.

    Args:
        direction: Desired forward direction (need not be unit length).
        up: Reference up vector.

    Returns:
        np.ndarray: Unit quaternion (w, x, y, z).
    """
    fwd = normalize(np.asarray(direction, dtype=float))
    if is_zero(fwd):
        return IDENTITY_QUAT.copy()

    right = np.cross(up, fwd)
    if is_zero(right):
        right = RIGHT.copy()
    right = normalize(right)
    true_up = np.cross(fwd, right)

    m = np.column_stack((right, true_up, fwd))
    return _quat_from_matrix(m)


def slerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    """
    Spherical linear interpolation along the shortest arc.

    ``t`` is clamped to [0, 1].
    """
    t = clamp01(t)
    a = quat_normalize(a)
    b = quat_normalize(b)

    dot = float(np.dot(a, b))
    if dot < 0.0:
        b = -b
        dot = -dot

    if dot > 0.9995:
        # Nearly identical: lerp is accurate and avoids sin(0)
        return quat_normalize(a + t * (b - a))

    theta_0 = math.acos(dot)
    theta = theta_0 * t
    sin_0 = math.sin(theta_0)
    s_a = math.sin(theta_0 - theta) / sin_0
    s_b = math.sin(theta) / sin_0
    return quat_normalize(s_a * a + s_b * b)


def integrate_angular_velocity(q: np.ndarray, omega: np.ndarray, dt: float) -> np.ndarray:
    """Advance orientation ``q`` by world-frame angular velocity ``omega`` over ``dt``."""
    omega_quat = np.concatenate(([0.0], omega))
    dq = 0.5 * dt * quat_multiply(omega_quat, q)
    return quat_normalize(q + dq)


def euler_degrees(q: np.ndarray) -> np.ndarray:
    """
    Euler angles (pitch about X, yaw about Y, roll about Z) in degrees.

    Yaw is reported in [0, 360) so it reads like a compass heading.
    """
    w, x, y, z = quat_normalize(q)

    sin_pitch = 2.0 * (w * x - y * z)
    sin_pitch = max(-1.0, min(1.0, sin_pitch))
    pitch = math.asin(sin_pitch)
    yaw = math.atan2(2.0 * (w * y + x * z), 1.0 - 2.0 * (x * x + y * y))
    roll = math.atan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (x * x + z * z))

    return np.array([
        math.degrees(pitch),
        math.degrees(yaw) % 360.0,
        math.degrees(roll),
    ])
