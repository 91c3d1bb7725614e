"""
Tests for the colour utility constants and transfer functions.
"""

from __future__ import annotations

import numpy as np
import pytest

from iris_colorutils import (
    CAM16_RGB_TO_XYZ,
    CAM16_RGB_TO_XYZ_T,
    WHITE_POINT_D65,
    XYZ_TO_CAM16_RGB,
    cam16_rgb_to_xyz,
    lerp,
    lstar_from_y,
    xyz_to_cam16_rgb,
    y_from_lstar,
)


def test_y_from_lstar_anchor_points() -> None:
    assert y_from_lstar(0.0) == pytest.approx(0.0, abs=1e-12)
    assert y_from_lstar(100.0) == pytest.approx(100.0, rel=1e-12)
    assert y_from_lstar(50.0) == pytest.approx(18.4187, rel=1e-4)


def test_y_from_lstar_scalar_returns_float() -> None:
    assert isinstance(y_from_lstar(50.0), float)
    assert isinstance(lstar_from_y(18.0), float)


def test_y_from_lstar_preserves_array_shape() -> None:
    lstar = np.array([[10.0, 20.0], [30.0, 40.0]])
    y = y_from_lstar(lstar)
    assert y.shape == (2, 2)
    assert y[0, 1] == pytest.approx(y_from_lstar(20.0))


def test_y_from_lstar_is_monotonic() -> None:
    lstar = np.linspace(0.0, 100.0, 201)
    y = y_from_lstar(lstar)
    assert np.all(np.diff(y) > 0.0)


def test_y_from_lstar_continuous_at_linear_segment_joint() -> None:
    # L* = 8 is where (L* + 16) / 116 == 6/29
    below = y_from_lstar(8.0 - 1e-9)
    above = y_from_lstar(8.0 + 1e-9)
    assert below == pytest.approx(above, abs=1e-8)


def test_lstar_from_y_inverts_y_from_lstar() -> None:
    lstar = np.array([0.0, 5.0, 8.0, 25.0, 50.0, 75.0, 100.0])
    np.testing.assert_allclose(lstar_from_y(y_from_lstar(lstar)), lstar, atol=1e-9)


def test_lerp_is_unclamped() -> None:
    assert lerp(0.0, 10.0, 0.25) == pytest.approx(2.5)
    assert lerp(0.0, 10.0, 1.5) == pytest.approx(15.0)
    assert lerp(0.59, 0.69, 0.0) == 0.59


def test_cam16_matrices_are_inverse() -> None:
    np.testing.assert_allclose(XYZ_TO_CAM16_RGB @ CAM16_RGB_TO_XYZ, np.eye(3), atol=1e-12)


def test_xyz_to_cam16_rgb_matches_matrix_product() -> None:
    expected = XYZ_TO_CAM16_RGB @ WHITE_POINT_D65
    np.testing.assert_allclose(xyz_to_cam16_rgb(WHITE_POINT_D65), expected, rtol=1e-12)

    batch = np.stack([WHITE_POINT_D65, WHITE_POINT_D65 * 0.5])
    out = xyz_to_cam16_rgb(batch)
    assert out.shape == (2, 3)
    np.testing.assert_allclose(out[1], expected * 0.5, rtol=1e-12)


def test_xyz_to_cam16_rgb_rejects_bad_shape() -> None:
    with pytest.raises(ValueError):
        xyz_to_cam16_rgb([1.0, 2.0])


def test_constants_are_read_only() -> None:
    with pytest.raises(ValueError):
        WHITE_POINT_D65[0] = 1.0
    with pytest.raises(ValueError):
        XYZ_TO_CAM16_RGB[0, 0] = 1.0


def test_cam16_rgb_to_xyz_inverts_projection() -> None:
    np.testing.assert_array_equal(CAM16_RGB_TO_XYZ_T, CAM16_RGB_TO_XYZ.T)
    batch = np.stack([WHITE_POINT_D65, np.array([20.0, 30.0, 10.0])])
    np.testing.assert_allclose(cam16_rgb_to_xyz(xyz_to_cam16_rgb(batch)), batch, rtol=1e-12)
    with pytest.raises(ValueError):
        cam16_rgb_to_xyz(np.zeros((2, 4)))


@pytest.mark.parametrize("value", [np.nan, np.inf, -np.inf, [50.0, np.nan]])
def test_lightness_conversions_reject_non_finite(value: object) -> None:
    with pytest.raises(ValueError):
        y_from_lstar(value)
    with pytest.raises(ValueError):
        lstar_from_y(value)
