################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

from launch.launch_description import LaunchDescription
from launch_ros.actions import Node


################################################################################
# ROS parameters
################################################################################


ROS_NAMESPACE: str = "oasis"

DECLINATION_PACKAGE_NAME: str = "imu_declination"


################################################################################
# Node descriptions
################################################################################


class DeclinationDescriptions:
    #
    # Declination
    #

    @staticmethod
    def add_apply_declination(
        ld: LaunchDescription,
        host_id: str,
        tf_link: str = "base_link",
        declination_rad: float = 0.0,
        declination_axis: str = "z",
    ) -> None:
        declination_node: Node = Node(
            namespace=ROS_NAMESPACE,
            package=DECLINATION_PACKAGE_NAME,
            executable="apply_declination_to_imu",
            name=f"apply_declination_to_imu_{host_id}",
            output="screen",
            parameters=[
                {
                    "tf_link": tf_link,
                    "default": declination_rad,
                    "declination_axis": declination_axis,
                }
            ],
            remappings=[
                ("data", f"{host_id}/imu"),
                ("data_decl", f"{host_id}/imu_decl"),
                ("declination", f"{host_id}/declination"),
            ],
        )
        ld.add_action(declination_node)
