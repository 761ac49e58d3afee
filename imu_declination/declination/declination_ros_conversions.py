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
Conversion helpers between ROS messages and declination types
"""

from __future__ import annotations

from builtin_interfaces.msg import Time as TimeMsg
from geometry_msgs.msg import Transform as TransformMsg
from sensor_msgs.msg import Imu as ImuMsg

from imu_declination.declination.declination_types import MotionSample
from imu_declination.declination.declination_types import Pose
from imu_declination.declination.declination_types import SampleTime


def sample_time_from_ros(stamp: TimeMsg) -> SampleTime:
    """
    Convert a ROS time stamp into a sample time
    """

    return SampleTime(sec=int(stamp.sec), nanosec=int(stamp.nanosec))


def ros_time_from_sample_time(t: SampleTime) -> TimeMsg:
    """
    Convert a sample time into a ROS time stamp
    """

    stamp: TimeMsg = TimeMsg()
    stamp.sec = t.sec
    stamp.nanosec = t.nanosec

    return stamp


def motion_sample_from_imu_msg(message: ImuMsg) -> MotionSample:
    """
    Convert a sensor_msgs/Imu message into a MotionSample

    Raises ValueError for an empty frame_id or malformed covariances.
    """

    return MotionSample(
        timestamp=sample_time_from_ros(message.header.stamp),
        frame_id=str(message.header.frame_id),
        orientation=(
            message.orientation.x,
            message.orientation.y,
            message.orientation.z,
            message.orientation.w,
        ),
        angular_velocity=(
            message.angular_velocity.x,
            message.angular_velocity.y,
            message.angular_velocity.z,
        ),
        linear_acceleration=(
            message.linear_acceleration.x,
            message.linear_acceleration.y,
            message.linear_acceleration.z,
        ),
        orientation_covariance=tuple(message.orientation_covariance),
        angular_velocity_covariance=tuple(message.angular_velocity_covariance),
        linear_acceleration_covariance=tuple(message.linear_acceleration_covariance),
    )


def imu_msg_from_motion_sample(sample: MotionSample) -> ImuMsg:
    """
    Convert a MotionSample into a sensor_msgs/Imu message
    """

    message: ImuMsg = ImuMsg()
    message.header.stamp = ros_time_from_sample_time(sample.timestamp)
    message.header.frame_id = sample.frame_id

    message.orientation.x = sample.orientation[0]
    message.orientation.y = sample.orientation[1]
    message.orientation.z = sample.orientation[2]
    message.orientation.w = sample.orientation[3]

    message.angular_velocity.x = sample.angular_velocity[0]
    message.angular_velocity.y = sample.angular_velocity[1]
    message.angular_velocity.z = sample.angular_velocity[2]

    message.linear_acceleration.x = sample.linear_acceleration[0]
    message.linear_acceleration.y = sample.linear_acceleration[1]
    message.linear_acceleration.z = sample.linear_acceleration[2]

    message.orientation_covariance = list(sample.orientation_covariance)
    message.angular_velocity_covariance = list(sample.angular_velocity_covariance)
    message.linear_acceleration_covariance = list(
        sample.linear_acceleration_covariance
    )

    return message


def pose_from_transform_msg(transform: TransformMsg) -> Pose:
    """
    Convert a geometry_msgs/Transform into a Pose
    """

    return Pose(
        rotation=(
            transform.rotation.x,
            transform.rotation.y,
            transform.rotation.z,
            transform.rotation.w,
        ),
        translation=(
            transform.translation.x,
            transform.translation.y,
            transform.translation.z,
        ),
    )
