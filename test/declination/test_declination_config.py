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

import math

import pytest

from imu_declination.declination.declination_config import DeclinationConfig
from imu_declination.declination.declination_config import DeclinationConfigError
from imu_declination.declination.declination_corrector import DeclinationAxis


def test_defaults() -> None:
    config: DeclinationConfig = DeclinationConfig()

    assert config.target_frame == "base_link"
    assert config.initial_declination_rad == 0.0
    assert config.declination_axis is DeclinationAxis.Z
    assert config.validate_orientation is True
    assert config.tf_timeout_s == 0.0


def test_from_params_parses_axis() -> None:
    config: DeclinationConfig = DeclinationConfig.from_params(
        {
            "target_frame": "imu_base",
            "initial_declination_rad": -0.25,
            "declination_axis": "Y",
        }
    )

    assert config.target_frame == "imu_base"
    assert config.initial_declination_rad == -0.25
    assert config.declination_axis is DeclinationAxis.Y


def test_as_dict_round_trip() -> None:
    config: DeclinationConfig = DeclinationConfig(
        target_frame="base_footprint",
        initial_declination_rad=0.1,
        declination_axis=DeclinationAxis.X,
        validate_orientation=False,
        orientation_norm_tolerance=0.01,
        tf_timeout_s=0.05,
    )

    restored: DeclinationConfig = DeclinationConfig.from_params(config.as_dict())

    assert restored == config


@pytest.mark.parametrize(
    "params",
    [
        {"target_frame": ""},
        {"target_frame": "   "},
        {"target_frame": "/base_link"},
        {"target_frame": " base_link"},
        {"initial_declination_rad": math.nan},
        {"initial_declination_rad": "north"},
        {"declination_axis": "up"},
        {"orientation_norm_tolerance": 0.0},
        {"orientation_norm_tolerance": 2.0},
        {"tf_timeout_s": -1.0},
        {"unknown_key": 1},
    ],
)
def test_invalid_params_raise(params: dict[str, object]) -> None:
    with pytest.raises(DeclinationConfigError):
        DeclinationConfig.from_params(params)


def test_direct_construction_validates() -> None:
    with pytest.raises(DeclinationConfigError):
        DeclinationConfig(target_frame="")
