################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""
Quaternion and rotation helpers for the declination pipeline

Conventions:
    * Quaternions are stored in xyzw order
    * Composition uses the Hamilton product, q_AC = q_AB ⊗ q_BC, so the
      left operand is applied last
    * R(q) rotates a vector expressed in the source frame into the target
      frame: v_T = R(q_TS) * v_S
    * Roll, pitch and yaw are fixed-axis rotations about X, Y and Z applied
      in that order, matching tf2 setRPY()
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from imu_declination.declination.declination_types import Covariance3
from imu_declination.declination.declination_types import Quaternion
from imu_declination.declination.declination_types import Vector3
from imu_declination.declination.declination_types import is_unknown_covariance


_FLOAT_ARRAY = NDArray[np.float64]

# Units: unitless. Meaning: smallest quaternion norm treated as non-degenerate
_EPS_NORM: float = 1.0e-12


class InvalidQuaternionError(Exception):
    """Raised when an orientation is not a finite unit quaternion."""


def quat_norm(q: Sequence[float]) -> float:
    return math.sqrt(sum(float(value) * float(value) for value in q))


def quat_normalize(q: Sequence[float]) -> Quaternion:
    """
    Normalize a quaternion to unit length
    """

    if len(q) != 4:
        raise ValueError("Quaternion must have length 4")
    norm: float = quat_norm(q)
    if not math.isfinite(norm) or norm < _EPS_NORM:
        raise ValueError("Quaternion norm must be positive and finite")
    inv_norm: float = 1.0 / norm
    return (
        float(q[0]) * inv_norm,
        float(q[1]) * inv_norm,
        float(q[2]) * inv_norm,
        float(q[3]) * inv_norm,
    )


def quat_multiply(left: Sequence[float], right: Sequence[float]) -> Quaternion:
    """
    Return the Hamilton product left ⊗ right in xyzw order

    The result is not re-normalized so that non-unit inputs show up as norm
    drift instead of being silently repaired.
    """

    lx, ly, lz, lw = (float(value) for value in left)
    rx, ry, rz, rw = (float(value) for value in right)

    return (
        lw * rx + lx * rw + ly * rz - lz * ry,
        lw * ry - lx * rz + ly * rw + lz * rx,
        lw * rz + lx * ry - ly * rx + lz * rw,
        lw * rw - lx * rx - ly * ry - lz * rz,
    )


def quat_inverse(q: Sequence[float]) -> Quaternion:
    """
    Compute the inverse of a quaternion
    """

    x, y, z, w = (float(value) for value in q)
    norm_sq: float = x * x + y * y + z * z + w * w
    if norm_sq < _EPS_NORM * _EPS_NORM:
        raise ValueError("Cannot invert a zero quaternion")
    inv_norm_sq: float = 1.0 / norm_sq
    return (-x * inv_norm_sq, -y * inv_norm_sq, -z * inv_norm_sq, w * inv_norm_sq)


def quat_from_axis_angle(axis: Sequence[float], angle_rad: float) -> Quaternion:
    """
    Build a unit quaternion rotating by angle_rad about axis
    """

    axis_array: _FLOAT_ARRAY = np.asarray(axis, dtype=np.float64)
    if axis_array.shape != (3,):
        raise ValueError("Axis must have length 3")
    axis_norm: float = float(np.linalg.norm(axis_array))
    if axis_norm < _EPS_NORM:
        raise ValueError("Axis must be non-zero")
    if not math.isfinite(angle_rad):
        raise ValueError("Angle must be finite")

    unit_axis: _FLOAT_ARRAY = axis_array / axis_norm
    half_angle: float = 0.5 * angle_rad
    sin_half: float = math.sin(half_angle)
    return (
        float(unit_axis[0]) * sin_half,
        float(unit_axis[1]) * sin_half,
        float(unit_axis[2]) * sin_half,
        math.cos(half_angle),
    )


def quat_from_rpy(roll: float, pitch: float, yaw: float) -> Quaternion:
    """
    Build a quaternion from fixed-axis roll, pitch and yaw in radians
    """

    half_roll: float = 0.5 * roll
    half_pitch: float = 0.5 * pitch
    half_yaw: float = 0.5 * yaw

    cr: float = math.cos(half_roll)
    sr: float = math.sin(half_roll)
    cp: float = math.cos(half_pitch)
    sp: float = math.sin(half_pitch)
    cy: float = math.cos(half_yaw)
    sy: float = math.sin(half_yaw)

    return (
        sr * cp * cy - cr * sp * sy,
        cr * sp * cy + sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
        cr * cp * cy + sr * sp * sy,
    )


def quat_to_rpy(q: Sequence[float]) -> Vector3:
    """
    Extract fixed-axis roll, pitch and yaw in radians
    """

    x, y, z, w = quat_normalize(q)

    roll: float = math.atan2(2.0 * (w * x + y * z), 1.0 - 2.0 * (x * x + y * y))
    # Clamp guards asin() against rounding just outside [-1, 1]
    sin_pitch: float = max(-1.0, min(1.0, 2.0 * (w * y - z * x)))
    pitch: float = math.asin(sin_pitch)
    yaw: float = math.atan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z))

    return (roll, pitch, yaw)


def quat_to_matrix(q: Sequence[float]) -> _FLOAT_ARRAY:
    """
    Convert a unit quaternion to a 3x3 rotation matrix
    """

    x, y, z, w = (float(value) for value in q)
    xx: float = x * x
    yy: float = y * y
    zz: float = z * z
    wx: float = w * x
    wy: float = w * y
    wz: float = w * z
    xy: float = x * y
    xz: float = x * z
    yz: float = y * z
    # The factors of 2 follow the standard quaternion rotation formula
    return np.array(
        [
            [1.0 - 2.0 * (yy + zz), 2.0 * (xy - wz), 2.0 * (xz + wy)],
            [2.0 * (xy + wz), 1.0 - 2.0 * (xx + zz), 2.0 * (yz - wx)],
            [2.0 * (xz - wy), 2.0 * (yz + wx), 1.0 - 2.0 * (xx + yy)],
        ],
        dtype=np.float64,
    )


def quat_rotate_vector(q: Sequence[float], v: Sequence[float]) -> Vector3:
    """
    Rotate a free vector by q, ignoring any translation
    """

    rotated: _FLOAT_ARRAY = quat_to_matrix(q) @ np.asarray(v, dtype=np.float64)
    return (float(rotated[0]), float(rotated[1]), float(rotated[2]))


def rotate_covariance(q: Sequence[float], cov: Sequence[float]) -> Covariance3:
    """
    Rotate a row-major 3x3 covariance, C' = R C R^T

    Unknown covariances are returned unchanged.
    """

    if len(cov) != 9:
        raise ValueError("Expected 9 covariance entries")
    if is_unknown_covariance(cov):
        return tuple(float(value) for value in cov)  # type: ignore[return-value]

    rot: _FLOAT_ARRAY = quat_to_matrix(q)
    cov_mat: _FLOAT_ARRAY = np.asarray(cov, dtype=np.float64).reshape((3, 3))
    rotated: _FLOAT_ARRAY = rot @ cov_mat @ rot.T
    return tuple(float(value) for value in rotated.reshape(9))  # type: ignore


def quat_angle_between(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Return the rotation angle in radians separating a and b

    Treats q and -q as the same rotation.
    """

    qa: Quaternion = quat_normalize(a)
    qb: Quaternion = quat_normalize(b)
    dot: float = abs(sum(qa[i] * qb[i] for i in range(4)))
    return 2.0 * math.acos(min(1.0, dot))


def validate_unit_quaternion(q: Sequence[float], tolerance: float) -> None:
    """
    Raise InvalidQuaternionError unless q is finite with |q| within tolerance of 1
    """

    if len(q) != 4:
        raise InvalidQuaternionError("Quaternion must have length 4")
    if not all(math.isfinite(float(value)) for value in q):
        raise InvalidQuaternionError("Quaternion contains NaN or Inf")
    norm: float = quat_norm(q)
    if abs(norm - 1.0) > tolerance:
        raise InvalidQuaternionError(
            f"Quaternion norm {norm:.6f} deviates from 1 by more than {tolerance}"
        )
