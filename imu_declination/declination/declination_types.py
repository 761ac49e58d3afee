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
Value types for the declination pipeline

Conventions:
    * Quaternions are stored in xyzw order to match geometry_msgs
    * Covariances are row-major 3x3 arrays flattened to 9 entries
    * A covariance whose first entry is -1 is unknown and is never rotated
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace
from typing import Sequence


# Nanoseconds per second for time conversions
_NS_PER_S: int = 1_000_000_000

# Sentinel used by sensor_msgs/Imu to flag an unknown covariance
UNKNOWN_COVARIANCE_FLAG: float = -1.0

Quaternion = tuple[float, float, float, float]
Vector3 = tuple[float, float, float]
Covariance3 = tuple[float, float, float, float, float, float, float, float, float]

IDENTITY_QUATERNION: Quaternion = (0.0, 0.0, 0.0, 1.0)
ZERO_VECTOR: Vector3 = (0.0, 0.0, 0.0)
ZERO_COVARIANCE: Covariance3 = (0.0,) * 9  # type: ignore[assignment]


@dataclass(frozen=True)
class SampleTime:
    """
    Sample timestamp stored as seconds and nanoseconds

    Fields:
        sec: Whole seconds since the time reference
        nanosec: Sub-second remainder in nanoseconds [0, 1e9)
    """

    sec: int
    nanosec: int

    def __post_init__(self) -> None:
        sec: int = int(self.sec)
        nanosec: int = int(self.nanosec)
        carry_sec: int = nanosec // _NS_PER_S
        object.__setattr__(self, "sec", sec + carry_sec)
        object.__setattr__(self, "nanosec", nanosec % _NS_PER_S)

    @classmethod
    def from_seconds(cls, t_sec: float) -> SampleTime:
        if not math.isfinite(t_sec):
            raise ValueError("timestamp must be finite")
        return cls.from_ns(int(round(t_sec * _NS_PER_S)))

    @classmethod
    def from_ns(cls, t_ns: int) -> SampleTime:
        return cls(sec=t_ns // _NS_PER_S, nanosec=t_ns % _NS_PER_S)

    def to_ns(self) -> int:
        return self.sec * _NS_PER_S + self.nanosec

    def to_seconds(self) -> float:
        return float(self.sec) + float(self.nanosec) * 1.0e-9


@dataclass(frozen=True)
class Pose:
    """
    Rigid transform returned by a pose lookup

    Fields:
        rotation: Unit quaternion in xyzw order rotating source-frame
            quantities into the target frame
        translation: Offset between the frame origins in meters. Carried for
            completeness, never applied to IMU quantities
    """

    rotation: Quaternion = IDENTITY_QUATERNION
    translation: Vector3 = ZERO_VECTOR

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotation", _as_tuple("rotation", self.rotation, 4))
        object.__setattr__(
            self, "translation", _as_tuple("translation", self.translation, 3)
        )


@dataclass(frozen=True)
class StampedQuaternion:
    """Quaternion tagged with the frame and time it is expressed in."""

    stamp: SampleTime
    frame_id: str
    quaternion: Quaternion


@dataclass(frozen=True)
class StampedVector3:
    """Free vector tagged with the frame and time it is expressed in."""

    stamp: SampleTime
    frame_id: str
    vector: Vector3


@dataclass(frozen=True)
class MotionSample:
    """
    Inertial sample carried through the declination pipeline

    Data contract:
        timestamp:
            Measurement time, preserved end to end
        frame_id:
            Frame the three quantities are expressed in, non-empty
        orientation:
            Orientation quaternion in xyzw order, expected unit length. Not
            checked here so the pipeline can reject it with a specific error
        angular_velocity:
            Body rate in rad/s
        linear_acceleration:
            Specific force in m/s^2
        orientation_covariance, angular_velocity_covariance,
        linear_acceleration_covariance:
            Row-major 3x3 covariances as in sensor_msgs/Imu
    """

    timestamp: SampleTime
    frame_id: str
    orientation: Quaternion
    angular_velocity: Vector3
    linear_acceleration: Vector3
    orientation_covariance: Covariance3 = field(default=ZERO_COVARIANCE)
    angular_velocity_covariance: Covariance3 = field(default=ZERO_COVARIANCE)
    linear_acceleration_covariance: Covariance3 = field(default=ZERO_COVARIANCE)

    def __post_init__(self) -> None:
        if not self.frame_id:
            raise ValueError("frame_id must be a non-empty string")
        object.__setattr__(
            self,
            "orientation",
            _as_tuple("orientation", self.orientation, 4, finite=False),
        )
        object.__setattr__(
            self,
            "angular_velocity",
            _as_tuple("angular_velocity", self.angular_velocity, 3, finite=False),
        )
        object.__setattr__(
            self,
            "linear_acceleration",
            _as_tuple(
                "linear_acceleration", self.linear_acceleration, 3, finite=False
            ),
        )
        for name in (
            "orientation_covariance",
            "angular_velocity_covariance",
            "linear_acceleration_covariance",
        ):
            object.__setattr__(
                self, name, _as_tuple(name, getattr(self, name), 9, finite=False)
            )

    def with_frame(self, frame_id: str, **changes: object) -> MotionSample:
        """Return a copy re-labelled to frame_id with the given fields replaced."""
        return replace(self, frame_id=frame_id, **changes)  # type: ignore[arg-type]


def is_unknown_covariance(cov: Sequence[float]) -> bool:
    return len(cov) > 0 and cov[0] == UNKNOWN_COVARIANCE_FLAG


def _as_tuple(
    name: str, values: Sequence[float], length: int, finite: bool = True
) -> tuple:
    if len(values) != length:
        raise ValueError(f"{name} must have length {length}")
    result: tuple = tuple(float(value) for value in values)
    if finite and not all(math.isfinite(value) for value in result):
        raise ValueError(f"{name} must contain finite values")
    return result
