"""
Core Mathematical Functions for Speaker Placement

This module provides the quaternion operations used to place speakers on
rings around the listener, the decay-to-rolloff conversion used by the
panning law, and the mirror transform behind the reflection table.

Quaternions are stored as numpy arrays of shape (4,) in scalar-first order
(w, x, y, z). Rotations follow the right-hand rule and angles are in radians.

See Also:
    - utils: For type definitions
    - layouts: For the placement routines built on these functions
"""

import math
import numpy as np

from .utils import Quaternion, PositionLike, vector_length
from .exceptions import MathError


def quaternion_from_axis_angle(angle: float, axis: PositionLike) -> Quaternion:
    """
    Build the unit quaternion that rotates by ``angle`` about ``axis``.

    Args:
        angle: Rotation angle in radians
        axis: Rotation axis (x, y, z), need not be normalized

    Returns:
        Unit quaternion (w, x, y, z)

    Raises:
        MathError.DomainError: If the axis has zero length
    """
    length = vector_length(axis)
    if length < 1e-12:
        raise MathError.DomainError("Rotation axis must have non-zero length")

    half = 0.5 * angle
    s = math.sin(half) / length
    return np.array([math.cos(half), axis[0] * s, axis[1] * s, axis[2] * s], dtype=np.float64)


def quaternion_multiply(a: Quaternion, b: Quaternion) -> Quaternion:
    """
    Hamilton product ``a * b``.

    Args:
        a: Left quaternion (w, x, y, z)
        b: Right quaternion (w, x, y, z)

    Returns:
        The product quaternion
    """
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return np.array([
        aw*bw - ax*bx - ay*by - az*bz,
        aw*bx + ax*bw + ay*bz - az*by,
        aw*by - ax*bz + ay*bw + az*bx,
        aw*bz + ax*by - ay*bx + az*bw,
    ], dtype=np.float64)


def quaternion_inverse(q: Quaternion) -> Quaternion:
    """
    Multiplicative inverse of a quaternion.

    Raises:
        MathError.DomainError: If q is the zero quaternion
    """
    norm_sq = float(np.dot(q, q))
    if norm_sq < 1e-24:
        raise MathError.DomainError("Zero quaternion has no inverse")

    w, x, y, z = q
    return np.array([w, -x, -y, -z], dtype=np.float64) / norm_sq


def spin(v: PositionLike, q: Quaternion) -> np.ndarray:
    """
    Rotate a 3D vector by conjugation, ``q v q^-1``.

    The vector is embedded as the pure quaternion (0, x, y, z) and the vector
    part of the result is returned.

    Args:
        v: Vector (x, y, z)
        q: Rotation quaternion (w, x, y, z)

    Returns:
        Rotated vector of shape (3,)
    """
    pure = np.array([0.0, v[0], v[1], v[2]], dtype=np.float64)
    rotated = quaternion_multiply(quaternion_multiply(q, pure), quaternion_inverse(q))
    return rotated[1:]


def decay_to_rolloff(decay_db: float) -> float:
    """
    Convert a decay in dB to the linear rolloff constant ``10^(-decay/20)``.

    Args:
        decay_db: Decay in decibels; larger values give a quieter mix

    Returns:
        The rolloff scalar (positive)

    Raises:
        MathError.DomainError: If the decay is not finite

    Examples:
        >>> decay_to_rolloff(0.0)
        1.0
        >>> round(decay_to_rolloff(20.0), 6)
        0.1
    """
    if not math.isfinite(decay_db):
        raise MathError.DomainError(f"Decay must be finite, got {decay_db}")
    return math.pow(10.0, -decay_db / 20.0)


def mirror_points(points: np.ndarray, normal: PositionLike) -> np.ndarray:
    """
    Reflect points across the plane through the origin with the given normal.

    Args:
        points: Array of shape (n_points, 3)
        normal: Plane normal (x, y, z), need not be normalized

    Returns:
        Mirrored points, shape (n_points, 3)

    Raises:
        MathError.DomainError: If the normal has zero length
    """
    length = vector_length(normal)
    if length < 1e-12:
        raise MathError.DomainError("Mirror plane normal must have non-zero length")

    n = np.asarray(normal, dtype=np.float64) / length
    points = np.asarray(points, dtype=np.float64)
    return points - 2.0 * np.outer(points @ n, n)
