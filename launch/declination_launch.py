################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

import socket

from launch import LaunchDescription

from imu_declination.launch.declination_descriptions import DeclinationDescriptions


################################################################################
# Launch parameters
################################################################################


# Get the hostname
HOSTNAME: str = socket.gethostname()

# Host alias used to namespace the IMU topics
HOST_ID: str = HOSTNAME.replace("-", "_")

print(f"Launching declination on {HOSTNAME}")


################################################################################
# Launch description
################################################################################


def generate_launch_description() -> LaunchDescription:
    ld: LaunchDescription = LaunchDescription()

    DeclinationDescriptions.add_apply_declination(ld, HOST_ID)

    return ld
