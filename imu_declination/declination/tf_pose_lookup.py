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
Pose lookup backed by a tf2 buffer
"""

from __future__ import annotations

import rclpy.duration
import rclpy.time
import tf2_ros
from geometry_msgs.msg import TransformStamped

from imu_declination.declination.declination_ros_conversions import (
    pose_from_transform_msg,
)
from imu_declination.declination.declination_types import Pose
from imu_declination.declination.declination_types import SampleTime
from imu_declination.declination.pose_lookup import PoseLookup
from imu_declination.declination.pose_lookup import TransformUnavailableError


class TfPoseLookup(PoseLookup):
    """
    Resolves poses from the tf2 tree at the sample's stamp

    A zero stamp asks tf2 for the latest available transform. Any
    tf2_ros.TransformException (lookup, connectivity, extrapolation) is
    reported as TransformUnavailableError.
    """

    def __init__(self, buffer: tf2_ros.Buffer, timeout_s: float = 0.0) -> None:
        self._buffer: tf2_ros.Buffer = buffer
        self._timeout: rclpy.duration.Duration = rclpy.duration.Duration(
            seconds=timeout_s
        )

    def lookup_transform(
        self, target_frame: str, source_frame: str, time: SampleTime
    ) -> Pose:
        try:
            stamp: rclpy.time.Time = rclpy.time.Time(
                seconds=time.sec, nanoseconds=time.nanosec
            )
        except ValueError as exc:
            # rclpy.time.Time rejects stamps before the epoch
            raise TransformUnavailableError(
                f"Invalid stamp {time.sec}.{time.nanosec:09d}: {exc}"
            ) from exc

        try:
            transform: TransformStamped = self._buffer.lookup_transform(
                target_frame, source_frame, stamp, timeout=self._timeout
            )
        except tf2_ros.TransformException as exc:
            raise TransformUnavailableError(str(exc)) from exc

        return pose_from_transform_msg(transform.transform)
