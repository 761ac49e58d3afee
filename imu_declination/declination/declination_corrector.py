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
Declination offset and the corrector that applies it to orientations
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Sequence

from imu_declination.declination.declination_types import Covariance3
from imu_declination.declination.declination_types import Quaternion
from imu_declination.declination.declination_types import Vector3
from imu_declination.declination.quaternion_math import quat_from_axis_angle
from imu_declination.declination.quaternion_math import quat_multiply
from imu_declination.declination.quaternion_math import rotate_covariance


class DeclinationAxis(enum.Enum):
    """
    Axis the declination angle rotates about

    Z is the vertical axis of an ENU or FLU frame. Y reproduces the legacy tf
    setEuler(declination, 0, 0) construction, whose first Euler slot rotates
    about Y.
    """

    X = "x"
    Y = "y"
    Z = "z"

    @property
    def unit_vector(self) -> Vector3:
        return _AXIS_VECTORS[self]

    @classmethod
    def parse(cls, value: str | DeclinationAxis) -> DeclinationAxis:
        if isinstance(value, DeclinationAxis):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f'Unknown declination axis "{value}", expected one of x, y, z'
            ) from None


_AXIS_VECTORS: dict[DeclinationAxis, Vector3] = {
    DeclinationAxis.X: (1.0, 0.0, 0.0),
    DeclinationAxis.Y: (0.0, 1.0, 0.0),
    DeclinationAxis.Z: (0.0, 0.0, 1.0),
}


@dataclass(frozen=True)
class DeclinationOffset:
    """
    Immutable rotation by angle_rad about a single axis

    Fields:
        angle_rad: Declination angle in radians, not wrapped
        axis: Axis the angle rotates about
        rotation: Unit quaternion in xyzw order
    """

    angle_rad: float
    axis: DeclinationAxis
    rotation: Quaternion

    @classmethod
    def from_angle(
        cls, angle_rad: float, axis: DeclinationAxis = DeclinationAxis.Z
    ) -> DeclinationOffset:
        angle: float = float(angle_rad)
        if not math.isfinite(angle):
            raise ValueError("Declination angle must be finite")
        return cls(
            angle_rad=angle,
            axis=axis,
            rotation=quat_from_axis_angle(axis.unit_vector, angle),
        )

    def compose_with(self, orientation: Sequence[float]) -> Quaternion:
        """Return rotation ⊗ orientation, the offset applied in the world frame."""
        return quat_multiply(self.rotation, orientation)

    def rotate_covariance(self, cov: Sequence[float]) -> Covariance3:
        return rotate_covariance(self.rotation, cov)


class DeclinationCorrector:
    """
    Holds the current declination offset and applies it to orientations.

    The offset is an immutable value replaced by a single attribute
    assignment, so a reader on another thread observes either the previous or
    the new offset in full. apply() reads the attribute once per call.
    """

    def __init__(
        self,
        initial_angle_rad: float = 0.0,
        axis: DeclinationAxis = DeclinationAxis.Z,
    ) -> None:
        self._axis: DeclinationAxis = axis
        self._offset: DeclinationOffset = DeclinationOffset.from_angle(
            initial_angle_rad, axis
        )

    @property
    def axis(self) -> DeclinationAxis:
        return self._axis

    @property
    def offset(self) -> DeclinationOffset:
        return self._offset

    def set_offset(self, angle_rad: float) -> DeclinationOffset:
        offset: DeclinationOffset = DeclinationOffset.from_angle(angle_rad, self._axis)
        self._offset = offset
        return offset

    def apply(self, orientation: Sequence[float]) -> Quaternion:
        return self._offset.compose_with(orientation)

    def apply_covariance(self, cov: Sequence[float]) -> Covariance3:
        """Rotate a world-frame orientation covariance by the current offset."""
        return self._offset.rotate_covariance(cov)

    def apply_sample(
        self, orientation: Sequence[float], cov: Sequence[float]
    ) -> tuple[Quaternion, Covariance3]:
        """
        Apply the offset to an orientation and its covariance together

        Both results come from the same offset snapshot, even if set_offset()
        runs on another thread during the call.
        """
        offset: DeclinationOffset = self._offset
        return offset.compose_with(orientation), offset.rotate_covariance(cov)
