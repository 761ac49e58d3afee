################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

from __future__ import annotations

import rclpy.callback_groups
import rclpy.node
import rclpy.publisher
import rclpy.qos
import rclpy.subscription
import tf2_ros
from rclpy.qos import DurabilityPolicy
from rclpy.qos import HistoryPolicy
from rclpy.qos import ReliabilityPolicy
from sensor_msgs.msg import Imu as ImuMsg
from std_msgs.msg import Float32 as Float32Msg

from imu_declination.declination.declination_config import DeclinationConfig
from imu_declination.declination.declination_config import DeclinationConfigError
from imu_declination.declination.declination_config import DEFAULT_DECLINATION_AXIS
from imu_declination.declination.declination_config import DEFAULT_DECLINATION_RAD
from imu_declination.declination.declination_config import DEFAULT_NORM_TOLERANCE
from imu_declination.declination.declination_config import DEFAULT_TARGET_FRAME
from imu_declination.declination.declination_config import DEFAULT_TF_TIMEOUT_S
from imu_declination.declination.declination_pipeline import DeclinationPipeline
from imu_declination.declination.declination_pipeline import PipelineStats
from imu_declination.declination.declination_ros_conversions import (
    imu_msg_from_motion_sample,
)
from imu_declination.declination.declination_ros_conversions import (
    motion_sample_from_imu_msg,
)
from imu_declination.declination.declination_types import MotionSample
from imu_declination.declination.tf_pose_lookup import TfPoseLookup


################################################################################
# ROS parameters
################################################################################


NODE_NAME: str = "apply_declination_to_imu"

# ROS topics
IMU_TOPIC: str = "data"
DECLINATION_TOPIC: str = "declination"
IMU_DECL_TOPIC: str = "data_decl"

# ROS parameters
PARAM_TF_LINK: str = "tf_link"
PARAM_DEFAULT_DECLINATION: str = "default"
PARAM_DECLINATION_AXIS: str = "declination_axis"
PARAM_VALIDATE_ORIENTATION: str = "validate_orientation"
PARAM_NORM_TOLERANCE: str = "orientation_norm_tolerance"
PARAM_TF_TIMEOUT: str = "tf_timeout_s"

# Queue depth for declination updates
DECLINATION_QUEUE_DEPTH: int = 5

# Drop warning throttle in seconds
DROP_LOG_THROTTLE_SEC: float = 1.0


################################################################################
# ROS node
################################################################################


class DeclinationNode(rclpy.node.Node):
    def __init__(self) -> None:
        """
        Initialize resources
        """

        super().__init__(NODE_NAME)

        self.declare_parameter(PARAM_TF_LINK, DEFAULT_TARGET_FRAME)
        self.declare_parameter(PARAM_DEFAULT_DECLINATION, DEFAULT_DECLINATION_RAD)
        self.declare_parameter(PARAM_DECLINATION_AXIS, DEFAULT_DECLINATION_AXIS.value)
        self.declare_parameter(PARAM_VALIDATE_ORIENTATION, True)
        self.declare_parameter(PARAM_NORM_TOLERANCE, DEFAULT_NORM_TOLERANCE)
        self.declare_parameter(PARAM_TF_TIMEOUT, DEFAULT_TF_TIMEOUT_S)

        try:
            config: DeclinationConfig = DeclinationConfig.from_params(
                {
                    "target_frame": str(self.get_parameter(PARAM_TF_LINK).value),
                    "initial_declination_rad": float(
                        self.get_parameter(PARAM_DEFAULT_DECLINATION).value
                    ),
                    "declination_axis": str(
                        self.get_parameter(PARAM_DECLINATION_AXIS).value
                    ),
                    "validate_orientation": bool(
                        self.get_parameter(PARAM_VALIDATE_ORIENTATION).value
                    ),
                    "orientation_norm_tolerance": float(
                        self.get_parameter(PARAM_NORM_TOLERANCE).value
                    ),
                    "tf_timeout_s": float(self.get_parameter(PARAM_TF_TIMEOUT).value),
                }
            )
        except DeclinationConfigError as exc:
            self.get_logger().error(f"Invalid configuration: {exc}")
            raise RuntimeError("Invalid declination configuration") from exc

        self._config: DeclinationConfig = config

        # tf2
        self._tf_buffer: tf2_ros.Buffer = tf2_ros.Buffer()
        self._tf_listener: tf2_ros.TransformListener = tf2_ros.TransformListener(
            self._tf_buffer, self
        )

        # QoS profiles
        sensor_qos_profile: rclpy.qos.QoSProfile = (
            rclpy.qos.QoSPresetProfiles.SENSOR_DATA.value
        )
        declination_qos_profile: rclpy.qos.QoSProfile = rclpy.qos.QoSProfile(
            reliability=ReliabilityPolicy.RELIABLE,
            durability=DurabilityPolicy.VOLATILE,
            history=HistoryPolicy.KEEP_LAST,
            depth=DECLINATION_QUEUE_DEPTH,
        )

        # ROS Publishers
        self._imu_decl_pub: rclpy.publisher.Publisher = self.create_publisher(
            msg_type=ImuMsg,
            topic=IMU_DECL_TOPIC,
            qos_profile=sensor_qos_profile,
        )

        self._pipeline: DeclinationPipeline = DeclinationPipeline.create(
            config,
            TfPoseLookup(self._tf_buffer, timeout_s=config.tf_timeout_s),
            self._publish_sample,
        )

        # Samples and declination updates run in separate groups so that an
        # update can land while a sample is being transformed
        self._imu_group: rclpy.callback_groups.CallbackGroup = (
            rclpy.callback_groups.MutuallyExclusiveCallbackGroup()
        )
        self._declination_group: rclpy.callback_groups.CallbackGroup = (
            rclpy.callback_groups.MutuallyExclusiveCallbackGroup()
        )

        # ROS Subscribers
        self._declination_sub: rclpy.subscription.Subscription = (
            self.create_subscription(
                msg_type=Float32Msg,
                topic=DECLINATION_TOPIC,
                callback=self._handle_declination,
                qos_profile=declination_qos_profile,
                callback_group=self._declination_group,
            )
        )
        self._imu_sub: rclpy.subscription.Subscription = self.create_subscription(
            msg_type=ImuMsg,
            topic=IMU_TOPIC,
            callback=self._handle_imu,
            qos_profile=sensor_qos_profile,
            callback_group=self._imu_group,
        )

        self.get_logger().info(
            f"Declination node initialized: target frame {config.target_frame}, "
            f"declination {config.initial_declination_rad:.6f} rad about "
            f"{config.declination_axis.value}"
        )

    def stop(self) -> None:
        stats: PipelineStats = self._pipeline.stats
        self.get_logger().info(f"Declination node deinitialized: {stats.as_dict()}")

        self.destroy_node()

    def _handle_declination(self, message: Float32Msg) -> None:
        if not self._pipeline.on_declination_update(float(message.data)):
            self.get_logger().warn(f"Ignoring invalid declination {message.data}")

    def _handle_imu(self, message: ImuMsg) -> None:
        try:
            sample: MotionSample = motion_sample_from_imu_msg(message)
        except ValueError as exc:
            self.get_logger().warn(
                f"Dropping IMU message: {exc}",
                throttle_duration_sec=DROP_LOG_THROTTLE_SEC,
            )
            return

        before: PipelineStats = self._pipeline.stats
        if self._pipeline.on_sample(sample) is not None:
            return

        after: PipelineStats = self._pipeline.stats
        if after.dropped_invalid_orientation > before.dropped_invalid_orientation:
            reason: str = "orientation is not a unit quaternion"
        else:
            reason = f"no transform to {self._config.target_frame} yet"
        self.get_logger().warn(
            f"Dropping IMU sample from {sample.frame_id}: {reason}",
            throttle_duration_sec=DROP_LOG_THROTTLE_SEC,
        )

    def _publish_sample(self, sample: MotionSample) -> None:
        self._imu_decl_pub.publish(imu_msg_from_motion_sample(sample))
