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

import numpy as np
import pytest

from imu_declination.declination.quaternion_math import InvalidQuaternionError
from imu_declination.declination.quaternion_math import quat_angle_between
from imu_declination.declination.quaternion_math import quat_from_axis_angle
from imu_declination.declination.quaternion_math import quat_from_rpy
from imu_declination.declination.quaternion_math import quat_inverse
from imu_declination.declination.quaternion_math import quat_multiply
from imu_declination.declination.quaternion_math import quat_norm
from imu_declination.declination.quaternion_math import quat_normalize
from imu_declination.declination.quaternion_math import quat_rotate_vector
from imu_declination.declination.quaternion_math import quat_to_matrix
from imu_declination.declination.quaternion_math import quat_to_rpy
from imu_declination.declination.quaternion_math import rotate_covariance
from imu_declination.declination.quaternion_math import validate_unit_quaternion


IDENTITY: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)


def test_multiply_identity_is_noop() -> None:
    q: tuple[float, float, float, float] = quat_from_rpy(0.1, -0.2, 0.3)

    assert np.allclose(quat_multiply(IDENTITY, q), q)
    assert np.allclose(quat_multiply(q, IDENTITY), q)


def test_multiply_matches_matrix_order() -> None:
    q_a: tuple[float, float, float, float] = quat_from_rpy(0.4, 0.1, -0.7)
    q_b: tuple[float, float, float, float] = quat_from_rpy(-0.2, 0.5, 1.1)

    product: np.ndarray = quat_to_matrix(quat_multiply(q_a, q_b))
    expected: np.ndarray = quat_to_matrix(q_a) @ quat_to_matrix(q_b)

    assert np.allclose(product, expected, atol=1.0e-12)


def test_inverse_cancels() -> None:
    q: tuple[float, float, float, float] = quat_from_rpy(1.0, -0.5, 2.0)

    result: tuple[float, float, float, float] = quat_multiply(q, quat_inverse(q))

    assert np.allclose(result, IDENTITY, atol=1.0e-12)


def test_rpy_round_trip() -> None:
    rpy: tuple[float, float, float] = (0.3, -0.4, 2.5)

    recovered: tuple[float, float, float] = quat_to_rpy(quat_from_rpy(*rpy))

    assert np.allclose(recovered, rpy, atol=1.0e-12)


def test_yaw_from_rpy_matches_axis_angle() -> None:
    yaw: float = math.pi / 3.0

    assert quat_angle_between(
        quat_from_rpy(0.0, 0.0, yaw), quat_from_axis_angle((0.0, 0.0, 1.0), yaw)
    ) < 1.0e-6


def test_rotate_vector_quarter_turn_about_z() -> None:
    q: tuple[float, float, float, float] = quat_from_axis_angle(
        (0.0, 0.0, 1.0), math.pi / 2.0
    )

    rotated: tuple[float, float, float] = quat_rotate_vector(q, (1.0, 0.0, 0.0))

    assert np.allclose(rotated, (0.0, 1.0, 0.0), atol=1.0e-12)


def test_axis_angle_normalizes_axis() -> None:
    q: tuple[float, float, float, float] = quat_from_axis_angle((0.0, 0.0, 5.0), 1.0)

    assert math.isclose(quat_norm(q), 1.0, rel_tol=0.0, abs_tol=1.0e-12)
    assert math.isclose(q[2], math.sin(0.5), rel_tol=0.0, abs_tol=1.0e-12)


def test_axis_angle_rejects_zero_axis() -> None:
    with pytest.raises(ValueError):
        quat_from_axis_angle((0.0, 0.0, 0.0), 1.0)


def test_normalize_rejects_zero() -> None:
    with pytest.raises(ValueError):
        quat_normalize((0.0, 0.0, 0.0, 0.0))


def test_angle_between_ignores_sign() -> None:
    q: tuple[float, float, float, float] = quat_from_rpy(0.1, 0.2, 0.3)
    neg_q: tuple[float, float, float, float] = (-q[0], -q[1], -q[2], -q[3])

    assert quat_angle_between(q, neg_q) < 1.0e-6


def test_rotate_covariance_swaps_axes() -> None:
    q: tuple[float, float, float, float] = quat_from_axis_angle(
        (0.0, 0.0, 1.0), math.pi / 2.0
    )
    cov: list[float] = [1.0, 0.0, 0.0, 0.0, 4.0, 0.0, 0.0, 0.0, 9.0]

    rotated: np.ndarray = np.array(rotate_covariance(q, cov)).reshape((3, 3))

    assert np.allclose(np.diag(rotated), [4.0, 1.0, 9.0], atol=1.0e-12)
    assert np.allclose(rotated, rotated.T, atol=1.0e-12)


def test_rotate_covariance_keeps_unknown() -> None:
    q: tuple[float, float, float, float] = quat_from_rpy(0.5, 0.5, 0.5)
    cov: list[float] = [-1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0]

    assert rotate_covariance(q, cov) == tuple(cov)


def test_validate_unit_quaternion() -> None:
    validate_unit_quaternion(IDENTITY, 1.0e-3)
    validate_unit_quaternion((0.0, 0.0, 0.0, 1.0005), 1.0e-3)

    with pytest.raises(InvalidQuaternionError):
        validate_unit_quaternion((0.0, 0.0, 0.0, 0.0), 1.0e-3)
    with pytest.raises(InvalidQuaternionError):
        validate_unit_quaternion((0.0, 0.0, 0.0, 1.1), 1.0e-3)
    with pytest.raises(InvalidQuaternionError):
        validate_unit_quaternion((math.nan, 0.0, 0.0, 1.0), 1.0e-3)
