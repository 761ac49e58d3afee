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


if not _module_available("launch.launch_description"):
    raise unittest.SkipTest("ROS launch is unavailable")
if not _module_available("launch_ros.actions"):
    raise unittest.SkipTest("ROS launch_ros is unavailable")

from launch.launch_description import LaunchDescription
from launch_ros.actions import Node

from imu_declination.launch.declination_descriptions import DeclinationDescriptions


class TestDeclinationDescriptions(unittest.TestCase):
    """Tests for declination launch descriptions"""

    def test_add_apply_declination_adds_one_node(self) -> None:
        """add_apply_declination adds a single declination node"""
        ld: LaunchDescription = LaunchDescription()
        DeclinationDescriptions.add_apply_declination(ld, "falcon")

        nodes: list[Node] = [
            entity for entity in ld.entities if isinstance(entity, Node)
        ]
        self.assertEqual(len(nodes), 1)
        self.assertEqual(nodes[0].node_package, "imu_declination")
        self.assertEqual(nodes[0].node_executable, "apply_declination_to_imu")
