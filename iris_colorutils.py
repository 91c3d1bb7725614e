# -*- coding: utf-8 -*-
"""
Iris: Viewing conditions for the CAM16 colour appearance model
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Colour Utilities
================
Constants and small transfer functions consumed by the CAM16 viewing
conditions: the D65 reference white, the CAT16 cone-response matrix, the
CIE L* <-> relative luminance pair and a linear interpolation helper.

Conventions:
    - Tristimulus values are on the 0..100 reference scale (Y of the
      reference white = 100), not the 0..1 scale used by sRGB pipelines.
    - Matrices are provided both in their textbook (column-vector) form and
      pre-transposed for row-vector ``np.dot(xyz, M_T)`` products.

References:
    - CIE 15:2004 "Colorimetry"
    - Li, C. et al. (2017). "Comprehensive color solutions: CAM16, CAT16,
      and CAM16-UCS". Color Research & Application 42(6).
"""

from typing import Callable, Final, TypeAlias, Union

import numpy as np
from numba import njit
from numpy.typing import NDArray

__all__ = [
    # --- Type Aliases ---
    "ArrayFloat",

    # --- Constants ---
    "WHITE_POINT_D65",
    "LAB_EPSILON",
    "LAB_KAPPA",

    # --- Matrices ---
    "XYZ_TO_CAM16_RGB",
    "CAM16_RGB_TO_XYZ",
    "XYZ_TO_CAM16_RGB_T",
    "CAM16_RGB_TO_XYZ_T",

    # --- Functions ---
    "y_from_lstar",
    "lstar_from_y",
    "lerp",
    "xyz_to_cam16_rgb",
    "cam16_rgb_to_xyz",
]

# --- Type Aliases ---
ArrayFloat: TypeAlias = NDArray[np.floating]
ScalarOrArray: TypeAlias = Union[float, ArrayFloat]


def _frozen(arr: ArrayFloat) -> ArrayFloat:
    """Marks a module-level constant array read-only."""
    arr.setflags(write=False)
    return arr


# --- Constants ---

# D65: Average daylight (approx 6500K), Y = 100 scale.
WHITE_POINT_D65: Final[ArrayFloat] = _frozen(
    np.array([95.047, 100.0, 108.883], dtype=np.float64)
)

# CAT16 cone-response matrix (Li et al. 2017).
XYZ_TO_CAM16_RGB: Final[ArrayFloat] = _frozen(np.array([
    [ 0.401288,  0.650173, -0.051461],
    [-0.250268,  1.204414,  0.045854],
    [-0.002079,  0.048952,  0.953127]
], dtype=np.float64))
CAM16_RGB_TO_XYZ: Final[ArrayFloat] = _frozen(np.linalg.inv(XYZ_TO_CAM16_RGB))

# Row-vector forms: rgb = xyz @ XYZ_TO_CAM16_RGB_T
XYZ_TO_CAM16_RGB_T: Final[ArrayFloat] = _frozen(XYZ_TO_CAM16_RGB.T.copy())
CAM16_RGB_TO_XYZ_T: Final[ArrayFloat] = _frozen(CAM16_RGB_TO_XYZ.T.copy())

# --- Exact Rational Math Constants ---
# CIE 1976: delta = 6/29 is where the lightness curve switches from cubic
# to linear.
_LAB_DELTA: Final[float] = 6.0 / 29.0
LAB_EPSILON: Final[float] = _LAB_DELTA * _LAB_DELTA * _LAB_DELTA  # 216/24389
LAB_KAPPA: Final[float]   = (116.0 * 29.0 * 29.0) / (3.0 * 6.0 * 6.0) # 24389/27


# =============================================================================
# 1. LOW-LEVEL KERNELS (Numba Optimized)
# =============================================================================
# Kernels operate on flat, contiguous float64 arrays.  The public wrappers
# below take care of scalars and n-d shapes.

@njit(cache=True, fastmath=True)
def _y_from_lstar_kernel(lstar: ArrayFloat) -> ArrayFloat:
    """
    Inverse CIE lightness: L* -> Y (0..100).

    The linear segment is evaluated from L* directly (116*ft - 16 == L*),
    so L* = 0 maps to exactly Y = 0.
    """
    out = np.empty_like(lstar)
    for i in range(lstar.size):
        lightness = lstar[i]
        ft = (lightness + 16.0) / 116.0
        if ft > _LAB_DELTA:
            out[i] = 100.0 * ft * ft * ft
        else:
            out[i] = 100.0 * lightness / LAB_KAPPA
    return out

@njit(cache=True, fastmath=True)
def _lstar_from_y_kernel(y: ArrayFloat) -> ArrayFloat:
    """CIE lightness: Y (0..100) -> L*."""
    out = np.empty_like(y)
    for i in range(y.size):
        t = y[i] / 100.0
        if t > LAB_EPSILON:
            out[i] = 116.0 * t ** (1.0 / 3.0) - 16.0
        else:
            out[i] = LAB_KAPPA * t
    return out


def _apply_elementwise(kernel: Callable[[ArrayFloat], ArrayFloat],
                       values: ScalarOrArray) -> ScalarOrArray:
    """
    Runs a flat kernel over a scalar or array, preserving the input shape.

    The kernels are compiled with ``fastmath=True``, which gives no NaN/inf
    guarantees, so non-finite input is rejected here.
    """
    arr = np.asarray(values, dtype=np.float64)
    flat = np.ascontiguousarray(arr.ravel())
    if not np.all(np.isfinite(flat)):
        raise ValueError(f"Expected finite input, got {values!r}")
    out = kernel(flat)
    if arr.ndim == 0:
        return float(out[0])
    return out.reshape(arr.shape)


# =============================================================================
# 2. PUBLIC API
# =============================================================================

def y_from_lstar(lstar: ScalarOrArray) -> ScalarOrArray:
    """
    Converts CIE L* to relative luminance Y.

    Monotonically increasing and continuous over L* in [0, 100]; L* = 100
    maps to Y = 100.

    Args:
        lstar: Lightness value(s).

    Returns:
        Y on the 0..100 scale; a float for scalar input, otherwise an array
        of the same shape.
    """
    return _apply_elementwise(_y_from_lstar_kernel, lstar)

def lstar_from_y(y: ScalarOrArray) -> ScalarOrArray:
    """
    Converts relative luminance Y (0..100) to CIE L*.

    Inverse of :func:`y_from_lstar`.
    """
    return _apply_elementwise(_lstar_from_y_kernel, y)

def lerp(start: float, stop: float, amount: float) -> float:
    """
    Linear interpolation ``start + amount * (stop - start)``.

    ``amount`` is not clamped; callers keep it in range.
    """
    return start + amount * (stop - start)

def xyz_to_cam16_rgb(xyz: Union[ArrayFloat, list, tuple]) -> ArrayFloat:
    """
    Projects XYZ tristimulus value(s) into the CAT16 cone-response basis.

    Args:
        xyz: Shape (3,) or (N, 3).

    Returns:
        Cone responses with the same shape as the input.
    """
    arr = np.asarray(xyz, dtype=np.float64)
    if arr.shape[-1:] != (3,):
        raise ValueError(f"Expected last dimension size 3, got shape {arr.shape}")
    return np.dot(arr, XYZ_TO_CAM16_RGB_T)

def cam16_rgb_to_xyz(rgb: Union[ArrayFloat, list, tuple]) -> ArrayFloat:
    """Inverse of :func:`xyz_to_cam16_rgb`; shape (3,) or (N, 3)."""
    arr = np.asarray(rgb, dtype=np.float64)
    if arr.shape[-1:] != (3,):
        raise ValueError(f"Expected last dimension size 3, got shape {arr.shape}")
    return np.dot(arr, CAM16_RGB_TO_XYZ_T)
