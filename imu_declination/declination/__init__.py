################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Frame transform and declination correction for IMU samples."""

from __future__ import annotations

from imu_declination.declination.declination_config import DeclinationConfig
from imu_declination.declination.declination_config import DeclinationConfigError
from imu_declination.declination.declination_corrector import DeclinationAxis
from imu_declination.declination.declination_corrector import DeclinationCorrector
from imu_declination.declination.declination_corrector import DeclinationOffset
from imu_declination.declination.declination_pipeline import DeclinationPipeline
from imu_declination.declination.declination_pipeline import PipelineStats
from imu_declination.declination.declination_types import MotionSample
from imu_declination.declination.declination_types import Pose
from imu_declination.declination.declination_types import SampleTime
from imu_declination.declination.frame_transformer import FrameTransformer
from imu_declination.declination.pose_lookup import PoseLookup
from imu_declination.declination.pose_lookup import StaticPoseLookup
from imu_declination.declination.pose_lookup import TransformUnavailableError
from imu_declination.declination.quaternion_math import InvalidQuaternionError


__all__ = [
    "DeclinationAxis",
    "DeclinationConfig",
    "DeclinationConfigError",
    "DeclinationCorrector",
    "DeclinationOffset",
    "DeclinationPipeline",
    "FrameTransformer",
    "InvalidQuaternionError",
    "MotionSample",
    "PipelineStats",
    "Pose",
    "PoseLookup",
    "SampleTime",
    "StaticPoseLookup",
    "TransformUnavailableError",
]
