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
ROS entry point for applying magnetic declination to an IMU stream.
"""

import rclpy
from rclpy.executors import MultiThreadedExecutor

from imu_declination.nodes.declination_node import DeclinationNode


################################################################################
# ROS entry point
################################################################################


def main(args=None) -> None:
    rclpy.init(args=args)

    node = DeclinationNode()

    # Declination updates may arrive while a sample is in flight
    executor = MultiThreadedExecutor()
    executor.add_node(node)

    try:
        executor.spin()
    except KeyboardInterrupt:
        pass
    finally:
        node.stop()
        rclpy.shutdown()
