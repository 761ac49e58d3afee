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
Per-sample coordinator: frame transform, then declination, then output
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable
from typing import Optional

from imu_declination.declination.declination_config import DeclinationConfig
from imu_declination.declination.declination_corrector import DeclinationCorrector
from imu_declination.declination.declination_corrector import DeclinationOffset
from imu_declination.declination.declination_types import Covariance3
from imu_declination.declination.declination_types import MotionSample
from imu_declination.declination.declination_types import Quaternion
from imu_declination.declination.frame_transformer import FrameTransformer
from imu_declination.declination.pose_lookup import PoseLookup
from imu_declination.declination.pose_lookup import TransformUnavailableError
from imu_declination.declination.quaternion_math import InvalidQuaternionError
from imu_declination.declination.quaternion_math import validate_unit_quaternion


_LOG: logging.Logger = logging.getLogger(__name__)


SampleSink = Callable[[MotionSample], None]


@dataclass(frozen=True)
class PipelineStats:
    """Counters describing what the pipeline has done with its inputs."""

    samples_received: int = 0
    samples_published: int = 0
    dropped_transform_unavailable: int = 0
    dropped_invalid_orientation: int = 0
    declination_updates: int = 0
    declination_rejected: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "samples_received": self.samples_received,
            "samples_published": self.samples_published,
            "dropped_transform_unavailable": self.dropped_transform_unavailable,
            "dropped_invalid_orientation": self.dropped_invalid_orientation,
            "declination_updates": self.declination_updates,
            "declination_rejected": self.declination_rejected,
        }


class DeclinationPipeline:
    """
    Moves each inbound sample into the target frame, rotates its orientation
    by the current declination and hands the result to the sink.

    on_sample() and on_declination_update() may be called from different
    threads. The only state they share is the corrector's offset, which is
    swapped whole. Each counter is written by only one of the two paths, and
    neither path may run concurrently with itself.
    """

    def __init__(
        self,
        *,
        config: DeclinationConfig,
        transformer: FrameTransformer,
        corrector: DeclinationCorrector,
        sink: SampleSink,
    ) -> None:
        self._config: DeclinationConfig = config
        self._target_frame: str = config.target_frame
        self._transformer: FrameTransformer = transformer
        self._corrector: DeclinationCorrector = corrector
        self._sink: SampleSink = sink

        self._samples_received: int = 0
        self._samples_published: int = 0
        self._dropped_transform_unavailable: int = 0
        self._dropped_invalid_orientation: int = 0
        self._declination_updates: int = 0
        self._declination_rejected: int = 0

    @classmethod
    def create(
        cls, config: DeclinationConfig, pose_lookup: PoseLookup, sink: SampleSink
    ) -> DeclinationPipeline:
        """Build a pipeline and its collaborators from configuration."""
        return cls(
            config=config,
            transformer=FrameTransformer(pose_lookup),
            corrector=DeclinationCorrector(
                initial_angle_rad=config.initial_declination_rad,
                axis=config.declination_axis,
            ),
            sink=sink,
        )

    @property
    def target_frame(self) -> str:
        return self._target_frame

    @property
    def corrector(self) -> DeclinationCorrector:
        return self._corrector

    @property
    def stats(self) -> PipelineStats:
        return PipelineStats(
            samples_received=self._samples_received,
            samples_published=self._samples_published,
            dropped_transform_unavailable=self._dropped_transform_unavailable,
            dropped_invalid_orientation=self._dropped_invalid_orientation,
            declination_updates=self._declination_updates,
            declination_rejected=self._declination_rejected,
        )

    def on_sample(self, sample: MotionSample) -> Optional[MotionSample]:
        """Process one sample, returning what was emitted or None if dropped."""
        self._samples_received += 1

        if self._config.validate_orientation:
            try:
                validate_unit_quaternion(
                    sample.orientation, self._config.orientation_norm_tolerance
                )
            except InvalidQuaternionError as exc:
                self._dropped_invalid_orientation += 1
                _LOG.debug(
                    'Dropping sample from "%s" at %d.%09d: %s',
                    sample.frame_id,
                    sample.timestamp.sec,
                    sample.timestamp.nanosec,
                    exc,
                )
                return None

        try:
            transformed: MotionSample = self._transformer.transform(
                sample, self._target_frame
            )
        except TransformUnavailableError as exc:
            self._dropped_transform_unavailable += 1
            _LOG.debug(
                'Dropping sample, no transform "%s" -> "%s": %s',
                sample.frame_id,
                self._target_frame,
                exc,
            )
            return None

        orientation: Quaternion
        orientation_covariance: Covariance3
        orientation, orientation_covariance = self._corrector.apply_sample(
            transformed.orientation, transformed.orientation_covariance
        )

        corrected: MotionSample = transformed.with_frame(
            self._target_frame,
            orientation=orientation,
            orientation_covariance=orientation_covariance,
        )

        self._sink(corrected)
        self._samples_published += 1

        return corrected

    def on_declination_update(self, angle_rad: float) -> bool:
        """Replace the declination offset, returning False if angle is rejected."""
        angle: float = float(angle_rad)
        if not math.isfinite(angle):
            self._declination_rejected += 1
            _LOG.warning("Ignoring non-finite declination %s", angle)
            return False

        offset: DeclinationOffset = self._corrector.set_offset(angle)
        self._declination_updates += 1
        _LOG.debug(
            "Declination set to %.6f rad about %s", offset.angle_rad, offset.axis.value
        )

        return True
