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
Re-expresses IMU samples in a target frame
"""

from __future__ import annotations

from imu_declination.declination.declination_types import Covariance3
from imu_declination.declination.declination_types import MotionSample
from imu_declination.declination.declination_types import Pose
from imu_declination.declination.declination_types import Quaternion
from imu_declination.declination.declination_types import StampedQuaternion
from imu_declination.declination.declination_types import StampedVector3
from imu_declination.declination.declination_types import Vector3
from imu_declination.declination.pose_lookup import PoseLookup
from imu_declination.declination.quaternion_math import rotate_covariance


class FrameTransformer:
    """
    Moves the orientation, angular velocity and linear acceleration of a
    MotionSample into a target frame.

    Each quantity is stamped with the sample's frame and time and transformed
    on its own, so each one performs its own pose lookup. Orientation is
    composed with the frame rotation; the two vectors are rotated as free
    vectors and the offset between frame origins is not applied.

    TransformUnavailableError from the lookup propagates to the caller.
    """

    def __init__(self, pose_lookup: PoseLookup) -> None:
        self._pose_lookup: PoseLookup = pose_lookup

    @property
    def pose_lookup(self) -> PoseLookup:
        return self._pose_lookup

    def transform(self, sample: MotionSample, target_frame: str) -> MotionSample:
        if not target_frame:
            raise ValueError("target_frame must be a non-empty string")

        orientation_in: StampedQuaternion = StampedQuaternion(
            stamp=sample.timestamp,
            frame_id=sample.frame_id,
            quaternion=sample.orientation,
        )
        angular_velocity_in: StampedVector3 = StampedVector3(
            stamp=sample.timestamp,
            frame_id=sample.frame_id,
            vector=sample.angular_velocity,
        )
        linear_acceleration_in: StampedVector3 = StampedVector3(
            stamp=sample.timestamp,
            frame_id=sample.frame_id,
            vector=sample.linear_acceleration,
        )

        orientation_out, orientation_pose = self.transform_quaternion(
            target_frame, orientation_in
        )
        angular_velocity_out, angular_velocity_pose = self.transform_vector(
            target_frame, angular_velocity_in
        )
        linear_acceleration_out, linear_acceleration_pose = self.transform_vector(
            target_frame, linear_acceleration_in
        )

        orientation_cov: Covariance3 = rotate_covariance(
            orientation_pose.rotation, sample.orientation_covariance
        )
        angular_velocity_cov: Covariance3 = rotate_covariance(
            angular_velocity_pose.rotation, sample.angular_velocity_covariance
        )
        linear_acceleration_cov: Covariance3 = rotate_covariance(
            linear_acceleration_pose.rotation, sample.linear_acceleration_covariance
        )

        return MotionSample(
            timestamp=sample.timestamp,
            frame_id=target_frame,
            orientation=orientation_out.quaternion,
            angular_velocity=angular_velocity_out.vector,
            linear_acceleration=linear_acceleration_out.vector,
            orientation_covariance=orientation_cov,
            angular_velocity_covariance=angular_velocity_cov,
            linear_acceleration_covariance=linear_acceleration_cov,
        )

    def transform_quaternion(
        self, target_frame: str, stamped: StampedQuaternion
    ) -> tuple[StampedQuaternion, Pose]:
        pose: Pose = self._pose_lookup.lookup_transform(
            target_frame, stamped.frame_id, stamped.stamp
        )
        quaternion: Quaternion = self._pose_lookup.transform_orientation(
            pose, stamped.quaternion
        )
        return (
            StampedQuaternion(
                stamp=stamped.stamp, frame_id=target_frame, quaternion=quaternion
            ),
            pose,
        )

    def transform_vector(
        self, target_frame: str, stamped: StampedVector3
    ) -> tuple[StampedVector3, Pose]:
        pose: Pose = self._pose_lookup.lookup_transform(
            target_frame, stamped.frame_id, stamped.stamp
        )
        vector: Vector3 = self._pose_lookup.transform_vector(pose, stamped.vector)
        return (
            StampedVector3(stamp=stamped.stamp, frame_id=target_frame, vector=vector),
            pose,
        )
