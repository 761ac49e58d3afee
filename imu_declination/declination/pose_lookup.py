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
Pose lookup capability used to move IMU quantities between frames
"""

from __future__ import annotations

import abc
from collections import deque
from typing import Deque
from typing import Optional
from typing import Sequence

from imu_declination.declination.declination_types import Pose
from imu_declination.declination.declination_types import Quaternion
from imu_declination.declination.declination_types import SampleTime
from imu_declination.declination.declination_types import Vector3
from imu_declination.declination.quaternion_math import quat_inverse
from imu_declination.declination.quaternion_math import quat_multiply
from imu_declination.declination.quaternion_math import quat_normalize
from imu_declination.declination.quaternion_math import quat_rotate_vector


class TransformUnavailableError(Exception):
    """Raised when no transform between two frames is known at a given time."""


class PoseLookup(abc.ABC):
    """
    Resolves the pose between two named frames at a given time

    lookup_transform(target, source, time) returns T_target_source, the pose
    that maps quantities expressed in the source frame into the target frame.
    The transform_* helpers apply only the rotation of that pose.
    """

    @abc.abstractmethod
    def lookup_transform(
        self, target_frame: str, source_frame: str, time: SampleTime
    ) -> Pose:
        """Return T_target_source or raise TransformUnavailableError."""

    def transform_orientation(self, pose: Pose, q: Sequence[float]) -> Quaternion:
        """Re-express an orientation: q_target = q_TS ⊗ q_source."""
        return quat_multiply(pose.rotation, q)

    def transform_vector(self, pose: Pose, v: Sequence[float]) -> Vector3:
        """Rotate a free vector into the target frame, translation ignored."""
        return quat_rotate_vector(pose.rotation, v)


def compose_poses(a_b: Pose, b_c: Pose) -> Pose:
    """Chain T_ab and T_bc into T_ac."""
    rotation: Quaternion = quat_normalize(quat_multiply(a_b.rotation, b_c.rotation))
    offset: Vector3 = quat_rotate_vector(a_b.rotation, b_c.translation)
    translation: Vector3 = (
        a_b.translation[0] + offset[0],
        a_b.translation[1] + offset[1],
        a_b.translation[2] + offset[2],
    )
    return Pose(rotation=rotation, translation=translation)


def invert_pose(pose: Pose) -> Pose:
    """Return T_ba given T_ab."""
    rotation: Quaternion = quat_normalize(quat_inverse(pose.rotation))
    back: Vector3 = quat_rotate_vector(rotation, pose.translation)
    return Pose(rotation=rotation, translation=(-back[0], -back[1], -back[2]))


class StaticPoseLookup(PoseLookup):
    """
    In-memory transform tree of fixed mounts

    Edges are registered as parent -> child poses (T_parent_child) and may be
    traversed in either direction. Lookups ignore time, so every registered
    transform is valid at all times. Unrelated frames raise
    TransformUnavailableError.
    """

    def __init__(self) -> None:
        self._edges: dict[str, dict[str, Pose]] = {}

    def set_transform(self, parent_frame: str, child_frame: str, pose: Pose) -> None:
        if not parent_frame or not child_frame:
            raise ValueError("Frame identifiers must be non-empty")
        if parent_frame == child_frame:
            raise ValueError("A frame cannot be its own parent")
        self._edges.setdefault(parent_frame, {})[child_frame] = pose
        self._edges.setdefault(child_frame, {})[parent_frame] = invert_pose(pose)

    def frames(self) -> list[str]:
        return sorted(self._edges)

    def lookup_transform(
        self, target_frame: str, source_frame: str, time: SampleTime
    ) -> Pose:
        if not target_frame or not source_frame:
            raise TransformUnavailableError("Frame identifiers must be non-empty")
        if target_frame == source_frame:
            return Pose()

        path: Optional[list[str]] = self._find_path(target_frame, source_frame)
        if path is None:
            raise TransformUnavailableError(
                f'No transform from "{source_frame}" to "{target_frame}"'
            )

        pose: Pose = Pose()
        for parent, child in zip(path, path[1:]):
            pose = compose_poses(pose, self._edges[parent][child])
        return pose

    def _find_path(self, start: str, goal: str) -> Optional[list[str]]:
        if start not in self._edges or goal not in self._edges:
            return None

        previous: dict[str, str] = {start: start}
        queue: Deque[str] = deque([start])
        while queue:
            frame: str = queue.popleft()
            if frame == goal:
                break
            for neighbor in self._edges[frame]:
                if neighbor not in previous:
                    previous[neighbor] = frame
                    queue.append(neighbor)

        if goal not in previous:
            return None

        path: list[str] = [goal]
        while path[-1] != start:
            path.append(previous[path[-1]])
        path.reverse()
        return path
