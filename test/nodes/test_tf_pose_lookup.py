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

import importlib.util
import unittest


def _module_available(module: str) -> bool:
    root: str = module.split(".", maxsplit=1)[0]
    if importlib.util.find_spec(root) is None:
        return False
    return importlib.util.find_spec(module) is not None


REQUIRED_MODULES: list[str] = [
    "geometry_msgs.msg",
    "rclpy.time",
    "tf2_ros",
]
missing: list[str] = [
    module for module in REQUIRED_MODULES if not _module_available(module)
]
if missing:
    raise unittest.SkipTest("ROS dependencies are unavailable: " + ", ".join(missing))

import rclpy.time
import tf2_ros
from geometry_msgs.msg import TransformStamped

from imu_declination.declination.declination_config import DeclinationConfig
from imu_declination.declination.declination_pipeline import DeclinationPipeline
from imu_declination.declination.declination_types import MotionSample
from imu_declination.declination.declination_types import Pose
from imu_declination.declination.declination_types import SampleTime
from imu_declination.declination.pose_lookup import TransformUnavailableError
from imu_declination.declination.tf_pose_lookup import TfPoseLookup


class _FakeBuffer:
    """Stands in for tf2_ros.Buffer, recording the stamps it is asked for"""

    def __init__(self, error: Exception | None = None) -> None:
        self.error: Exception | None = error
        self.stamps: list[rclpy.time.Time] = []

    def lookup_transform(self, target_frame, source_frame, time, timeout=None):
        self.stamps.append(time)
        if self.error is not None:
            raise self.error

        transform: TransformStamped = TransformStamped()
        transform.header.frame_id = target_frame
        transform.child_frame_id = source_frame
        transform.transform.rotation.z = 0.6
        transform.transform.rotation.w = 0.8
        return transform


class TestTfPoseLookup(unittest.TestCase):
    """Tests for the tf2-backed pose lookup"""

    def test_lookup_uses_sample_stamp(self) -> None:
        """lookup_transform queries tf2 at the sample's stamp"""
        buffer: _FakeBuffer = _FakeBuffer()
        lookup: TfPoseLookup = TfPoseLookup(buffer)  # type: ignore[arg-type]

        pose: Pose = lookup.lookup_transform(
            "base_link", "imu_link", SampleTime(sec=12, nanosec=34)
        )

        self.assertEqual(pose.rotation, (0.0, 0.0, 0.6, 0.8))
        self.assertEqual(buffer.stamps[0].nanoseconds, 12_000_000_034)

    def test_transform_exception_is_mapped(self) -> None:
        """tf2 errors surface as TransformUnavailableError"""
        buffer: _FakeBuffer = _FakeBuffer(tf2_ros.LookupException("no frame"))
        lookup: TfPoseLookup = TfPoseLookup(buffer)  # type: ignore[arg-type]

        with self.assertRaises(TransformUnavailableError):
            lookup.lookup_transform("base_link", "imu_link", SampleTime(1, 0))

    def test_pre_epoch_stamp_is_unavailable(self) -> None:
        """A negative stamp is reported as unavailable without querying tf2"""
        buffer: _FakeBuffer = _FakeBuffer()
        lookup: TfPoseLookup = TfPoseLookup(buffer)  # type: ignore[arg-type]

        with self.assertRaises(TransformUnavailableError):
            lookup.lookup_transform("base_link", "imu_link", SampleTime(-5, 0))

        self.assertEqual(buffer.stamps, [])

    def test_pipeline_drops_pre_epoch_sample(self) -> None:
        """The pipeline drops a pre-epoch sample instead of raising"""
        emitted: list[MotionSample] = []
        pipeline: DeclinationPipeline = DeclinationPipeline.create(
            DeclinationConfig(),
            TfPoseLookup(_FakeBuffer()),  # type: ignore[arg-type]
            emitted.append,
        )
        sample: MotionSample = MotionSample(
            timestamp=SampleTime(sec=-1, nanosec=0),
            frame_id="imu_link",
            orientation=(0.0, 0.0, 0.0, 1.0),
            angular_velocity=(0.0, 0.0, 0.0),
            linear_acceleration=(0.0, 0.0, 9.81),
        )

        self.assertIsNone(pipeline.on_sample(sample))
        self.assertEqual(emitted, [])
        self.assertEqual(pipeline.stats.dropped_transform_unavailable, 1)
