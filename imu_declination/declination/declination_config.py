################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Startup configuration for the declination pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass
from dataclasses import fields
from typing import Mapping

from imu_declination.declination.declination_corrector import DeclinationAxis


DEFAULT_TARGET_FRAME: str = "base_link"
DEFAULT_DECLINATION_RAD: float = 0.0
DEFAULT_DECLINATION_AXIS: DeclinationAxis = DeclinationAxis.Z
DEFAULT_NORM_TOLERANCE: float = 1.0e-3
DEFAULT_TF_TIMEOUT_S: float = 0.0


class DeclinationConfigError(Exception):
    """Raised when declination configuration validation fails."""


@dataclass(frozen=True)
class DeclinationConfig:
    """Immutable settings consumed once at startup."""

    # Frame every published sample is expressed in
    target_frame: str = DEFAULT_TARGET_FRAME

    # Declination applied until the first update arrives, radians
    initial_declination_rad: float = DEFAULT_DECLINATION_RAD

    # Axis the declination angle rotates about
    declination_axis: DeclinationAxis = DEFAULT_DECLINATION_AXIS

    # Reject samples whose orientation is not a finite unit quaternion
    validate_orientation: bool = True

    # Allowed deviation of |q| from 1 when validating, unitless
    orientation_norm_tolerance: float = DEFAULT_NORM_TOLERANCE

    # Longest time a tf lookup may wait for the transform, seconds
    tf_timeout_s: float = DEFAULT_TF_TIMEOUT_S

    def __post_init__(self) -> None:
        try:
            axis: DeclinationAxis = DeclinationAxis.parse(self.declination_axis)
        except ValueError as exc:
            raise DeclinationConfigError(str(exc)) from exc
        object.__setattr__(self, "declination_axis", axis)
        self.validate()

    @classmethod
    def from_params(cls, params: Mapping[str, object]) -> DeclinationConfig:
        """Construct a configuration from a mapping, rejecting unknown keys."""
        known: set[str] = {item.name for item in fields(cls)}
        unknown: list[str] = sorted(set(params) - known)
        if unknown:
            raise DeclinationConfigError(
                "Unknown configuration keys: " + ", ".join(unknown)
            )
        try:
            return cls(**params)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise DeclinationConfigError(str(exc)) from exc

    def validate(self) -> None:
        """Validate configuration and raise DeclinationConfigError on failure."""
        if not isinstance(self.target_frame, str) or not self.target_frame.strip():
            raise DeclinationConfigError("target_frame must be a non-empty string")
        if self.target_frame != self.target_frame.strip():
            raise DeclinationConfigError("target_frame must not contain whitespace")
        if self.target_frame.startswith("/"):
            raise DeclinationConfigError("target_frame must not start with '/'")
        if not _is_finite_number(self.initial_declination_rad):
            raise DeclinationConfigError("initial_declination_rad must be finite")
        if not _is_finite_number(self.orientation_norm_tolerance):
            raise DeclinationConfigError("orientation_norm_tolerance must be finite")
        if not 0.0 < float(self.orientation_norm_tolerance) < 1.0:
            raise DeclinationConfigError(
                "orientation_norm_tolerance must be in (0, 1)"
            )
        if not _is_finite_number(self.tf_timeout_s) or float(self.tf_timeout_s) < 0.0:
            raise DeclinationConfigError("tf_timeout_s must be finite and >= 0")

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serializable dict representation."""
        return {
            "target_frame": self.target_frame,
            "initial_declination_rad": float(self.initial_declination_rad),
            "declination_axis": self.declination_axis.value,
            "validate_orientation": bool(self.validate_orientation),
            "orientation_norm_tolerance": float(self.orientation_norm_tolerance),
            "tf_timeout_s": float(self.tf_timeout_s),
        }


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(float(value))
