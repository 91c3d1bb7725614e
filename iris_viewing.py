# -*- coding: utf-8 -*-
"""
Iris: Viewing conditions for the CAM16 colour appearance model
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

CAM16 Viewing Conditions
========================
In traditional colour spaces a colour is identified solely by its measured
tristimulus value.  Colour appearance models such as CAM16 also take the
environment the colour is observed in into account: the white point, how
bright the room is, the lightness of the background and the surround.

Every coefficient that depends only on that environment is gathered here in
an immutable :class:`ViewingConditions` so that CAM16 forward and inverse
transforms can reuse it for any number of colours.

Input convention:
    ``white_point`` is CIE XYZ on the 0..100 scale (Y = 100 for a standard
    reference white), the same scale as ``WHITE_POINT_D65``.  The background
    ratio ``n = Y(background L*) / white_point[1]`` therefore depends on the
    absolute scale of the white point; uniformly rescaling the white changes
    ``n``, ``z``, ``nbb``/``ncb``, ``aw`` and ``rgb_d``, while ``fl``,
    ``fl_root``, ``c`` and ``nc`` are unaffected.

References:
    - Li, C. et al. (2017). "Comprehensive color solutions: CAM16, CAT16,
      and CAM16-UCS". Color Research & Application 42(6).
    - Fairchild, M. D. (2013). "Color Appearance Models", 3rd ed.
"""

from __future__ import annotations

import functools
import logging
import threading
from dataclasses import asdict, dataclass
from enum import IntEnum
from typing import Any, Dict, Final, Optional, Sequence, Tuple, Union

import numpy as np
from numba import njit

from iris_colorutils import (
    ArrayFloat,
    WHITE_POINT_D65,
    lerp,
    xyz_to_cam16_rgb,
    y_from_lstar,
)
from iris_errors import DomainError, InvalidParameterError

__all__ = [
    # --- Enums ---
    "Surround",

    # --- Configuration ---
    "DEFAULT_ADAPTING_LUMINANCE",
    "DEFAULT_BACKGROUND_LSTAR",
    "DEFAULT_SURROUND",
    "DEFAULT_DISCOUNTING_ILLUMINANT",

    # --- Classes ---
    "ViewingConditions",

    # --- Functions ---
    "make",
    "default_viewing_conditions",
    "default_with_background_lstar",
    "adapting_luminance_from_lux",
]

logger = logging.getLogger(__name__)

WhitePointLike = Union[ArrayFloat, Sequence[float]]


class Surround(IntEnum):
    """Conventional surround classes; ``make`` accepts any value in [0, 2]."""
    DARK = 0
    DIM = 1
    AVERAGE = 2


# --- Standard Environment ---
# Grey-world assumption: a 200 lux room reflected off an L* = 50 surface.
_DEFAULT_LUX: Final[float] = 200.0
_GREY_WORLD_LSTAR: Final[float] = 50.0


def adapting_luminance_from_lux(lux: float) -> float:
    """
    Converts ambient illuminance to the luminance of the adapting field.

    Assumes a Lambertian mid-grey (L* = 50) adapting field:
    ``La = lux / pi * Y(50) / 100`` (cd/m^2).

    Args:
        lux: Ambient illuminance, > 0.

    Raises:
        DomainError: If ``lux`` is not finite or not positive.
    """
    lux = _finite_scalar("lux", lux)
    if lux <= 0.0:
        raise DomainError("lux", f"must be positive, got {lux}", lux)
    return lux / np.pi * y_from_lstar(_GREY_WORLD_LSTAR) / 100.0


DEFAULT_ADAPTING_LUMINANCE: Final[float] = (
    _DEFAULT_LUX / np.pi * y_from_lstar(_GREY_WORLD_LSTAR) / 100.0
)
DEFAULT_BACKGROUND_LSTAR: Final[float] = 50.0
DEFAULT_SURROUND: Final[float] = float(Surround.AVERAGE)
DEFAULT_DISCOUNTING_ILLUMINANT: Final[bool] = False


# =============================================================================
# 1. VALUE OBJECT
# =============================================================================

_SCALAR_FIELDS: Final[Tuple[str, ...]] = (
    "n", "aw", "nbb", "ncb", "c", "nc", "fl", "fl_root", "z",
)


@dataclass(slots=True, frozen=True)
class ViewingConditions:
    """
    Intermediate values of the CAM16 conversion that depend only on the
    viewing environment.

    Field names follow the CAM16 literature (Fairchild, Li et al.):

    =========  ===========================================================
    n          background luminance relative to the white
    aw         achromatic response of the white
    nbb        background brightness induction factor
    ncb        background chromatic induction factor (== nbb)
    c          impact of surround
    nc         chromatic induction factor (== surround factor F)
    rgb_d      per-channel degree-of-adaptation gains
    fl         luminance-level adaptation factor
    fl_root    ``fl ** 0.25``
    z          base exponential nonlinearity
    =========  ===========================================================

    Instances are built by :func:`make`; the constructor only validates.
    """
    n:       float
    aw:      float
    nbb:     float
    ncb:     float
    c:       float
    nc:      float
    rgb_d:   Tuple[float, float, float]
    fl:      float
    fl_root: float
    z:       float

    def __post_init__(self) -> None:
        for name in _SCALAR_FIELDS:
            value = getattr(self, name)
            try:
                number = float(value)
            except (TypeError, ValueError) as exc:
                raise InvalidParameterError(
                    f"{name} must be a real number, got {value!r}"
                ) from exc
            if not np.isfinite(number):
                raise InvalidParameterError(f"{name} must be finite, got {number}")
            object.__setattr__(self, name, number)

        try:
            gains = tuple(float(g) for g in self.rgb_d)
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError(
                f"rgb_d must be a sequence of 3 real numbers, got {self.rgb_d!r}"
            ) from exc
        if len(gains) != 3:
            raise InvalidParameterError(
                f"rgb_d must have exactly 3 entries, got {len(gains)}"
            )
        if not all(np.isfinite(g) and g > 0.0 for g in gains):
            raise InvalidParameterError(
                f"rgb_d entries must be finite and positive, got {gains}"
            )
        object.__setattr__(self, "rgb_d", gains)

    @property
    def rgb_d_array(self) -> ArrayFloat:
        """Read-only float64 copy of ``rgb_d`` for vectorised consumers."""
        arr = np.array(self.rgb_d, dtype=np.float64)
        arr.setflags(write=False)
        return arr

    def as_dict(self) -> Dict[str, Any]:
        """Returns the ten coefficients as a plain dictionary."""
        return asdict(self)

    @classmethod
    def make(cls, *args: Any, **kwargs: Any) -> ViewingConditions:
        """Alias of :func:`make`."""
        return make(*args, **kwargs)

    @classmethod
    def default(cls) -> ViewingConditions:
        """Alias of :func:`default_viewing_conditions`."""
        return default_viewing_conditions()


# =============================================================================
# 2. INPUT VALIDATION
# =============================================================================

def _finite_scalar(name: str, value: Any) -> float:
    """Coerces *value* to float, rejecting non-numeric and non-finite input."""
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise DomainError(name, f"must be a real number, got {value!r}", value) from exc
    if not np.isfinite(number):
        raise DomainError(name, f"must be finite, got {number}", number)
    return number

def _validate_white_point(white_point: WhitePointLike) -> ArrayFloat:
    try:
        xyz = np.asarray(white_point, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(
            f"white_point must be a 3-vector of real numbers, got {white_point!r}"
        ) from exc
    if xyz.shape != (3,):
        raise InvalidParameterError(
            f"white_point must have shape (3,), got {xyz.shape}"
        )
    if not np.all(np.isfinite(xyz)):
        raise DomainError("white_point", f"components must be finite, got {xyz}", xyz)
    if np.any(xyz <= 0.0):
        raise DomainError("white_point", f"components must be positive, got {xyz}", xyz)
    return xyz

def _require_finite(parameter: str, label: str, values: Any, source: Any) -> None:
    """
    Fails fast when a derived quantity overflows, blaming the input
    *parameter* that feeds the stage producing *label*.
    """
    if not np.all(np.isfinite(values)):
        raise DomainError(
            parameter,
            f"drives {label} to a non-finite value ({values})",
            source,
        )


# =============================================================================
# 3. DERIVATION STAGES
# =============================================================================

@njit(cache=True, fastmath=False)
def _compress_kernel(scaled: ArrayFloat) -> ArrayFloat:
    """
    CAM16 post-adaptation nonlinearity ``400 x / (x + 27.13)`` with
    ``x = scaled ** 0.42``.

    Strict IEEE: a non-finite result must survive to the finiteness check.
    """
    out = np.empty_like(scaled)
    for i in range(scaled.size):
        x = scaled[i] ** 0.42
        out[i] = 400.0 * x / (x + 27.13)
    return out

def _white_cone_response(white_xyz: ArrayFloat) -> ArrayFloat:
    """Projects the white point into CAT16 cone space: (rW, gW, bW)."""
    rgb_w = xyz_to_cam16_rgb(white_xyz)
    if np.any(rgb_w <= 0.0):
        raise DomainError(
            "white_point",
            f"cone responses must be positive, got {rgb_w}",
            white_xyz,
        )
    return rgb_w

def _surround_factor(surround: float) -> float:
    """F: 0.8 (dark), 0.9 (dim), 1.0 (average)."""
    return 0.8 + surround / 10.0

def _chroma_induction(f: float) -> float:
    """
    Impact of surround ``c`` as a function of ``F``.

    Two linear segments joined at F = 0.9 (c = 0.59); the slope changes at
    the joint, the value does not.
    """
    if f >= 0.9:
        return lerp(0.59, 0.69, (f - 0.9) * 10.0)
    return lerp(0.525, 0.59, (f - 0.8) * 10.0)

def _degree_of_adaptation(f: float, adapting_luminance: float,
                          discounting_illuminant: bool) -> float:
    """Degree of adaptation D, clamped to [0, 1]."""
    if discounting_illuminant:
        return 1.0
    d = f * (1.0 - (1.0 / 3.6) * np.exp((-adapting_luminance - 42.0) / 92.0))
    return float(min(1.0, max(0.0, d)))

def _adaptation_gains(d: float, rgb_w: ArrayFloat) -> ArrayFloat:
    """Von Kries gains mapping the white to 100, blended by D."""
    # Overflow for a near-zero white is reported by the caller.
    with np.errstate(over="ignore", divide="ignore"):
        return d * (100.0 / rgb_w) + 1.0 - d

def _luminance_adaptation(adapting_luminance: float) -> Tuple[float, float]:
    """Returns ``(fl, fl_root)``."""
    k = 1.0 / (5.0 * adapting_luminance + 1.0)
    k4 = k * k * k * k
    k4f = 1.0 - k4
    fl = k4 * adapting_luminance + 0.1 * k4f * k4f * np.cbrt(5.0 * adapting_luminance)
    return float(fl), float(fl ** 0.25)

def _background_induction(background_lstar: float,
                          white_y: float) -> Tuple[float, float, float]:
    """Returns ``(n, z, nbb)`` for the background lightness."""
    background_y = y_from_lstar(background_lstar)
    if background_y <= 0.0:
        raise DomainError(
            "background_lstar",
            f"background luminance must be positive, got L* = {background_lstar}",
            background_lstar,
        )
    n = background_y / white_y
    if n <= 0.0 or not np.isfinite(n):
        # Y(background) is positive, so the white's scale under/overflowed n.
        raise DomainError(
            "white_point",
            f"Y = {white_y} leaves no representable background ratio (n = {n})",
            white_y,
        )
    z = 1.48 + np.sqrt(n)
    nbb = 0.725 / n ** 0.2
    _require_finite("white_point", "nbb", nbb, white_y)
    return float(n), float(z), float(nbb)

def _adapted_white(fl: float, rgb_d: ArrayFloat, rgb_w: ArrayFloat) -> ArrayFloat:
    """Post-adaptation cone responses of the white (rgbA)."""
    scaled = np.ascontiguousarray(fl * rgb_d * rgb_w / 100.0)
    return _compress_kernel(scaled)

def _achromatic_response(rgb_a: ArrayFloat, nbb: float) -> float:
    """Aw: achromatic signal of the adapted white."""
    return float((2.0 * rgb_a[0] + rgb_a[1] + 0.05 * rgb_a[2]) * nbb)


# =============================================================================
# 4. FACTORY
# =============================================================================

def make(white_point: WhitePointLike = WHITE_POINT_D65,
         adapting_luminance: float = DEFAULT_ADAPTING_LUMINANCE,
         background_lstar: float = DEFAULT_BACKGROUND_LSTAR,
         surround: float = DEFAULT_SURROUND,
         discounting_illuminant: bool = DEFAULT_DISCOUNTING_ILLUMINANT
         ) -> ViewingConditions:
    """
    Derives the CAM16 viewing conditions for an environment.

    Args:
        white_point: XYZ of the reference white (0..100 scale), all > 0.
        adapting_luminance: Luminance of the adapting field in cd/m^2, > 0.
            See :func:`adapting_luminance_from_lux`.
        background_lstar: CIE L* of the background, in (0, 100].
        surround: 0 (dark) .. 2 (average); see :class:`Surround`.
        discounting_illuminant: If True, assume complete adaptation (D = 1).

    Returns:
        A new immutable :class:`ViewingConditions`.

    Raises:
        InvalidParameterError: If ``white_point`` is not a 3-vector or
            ``discounting_illuminant`` is not a bool.
        DomainError: If a parameter is out of range, or is in range but
            drives a derived coefficient to a non-finite value.  The
            ``parameter`` attribute names the input, not the coefficient.
    """
    white_xyz = _validate_white_point(white_point)

    adapting_luminance = _finite_scalar("adapting_luminance", adapting_luminance)
    if adapting_luminance <= 0.0:
        raise DomainError(
            "adapting_luminance",
            f"must be positive, got {adapting_luminance}",
            adapting_luminance,
        )

    background_lstar = _finite_scalar("background_lstar", background_lstar)
    if not 0.0 <= background_lstar <= 100.0:
        raise DomainError(
            "background_lstar",
            f"must lie in [0, 100], got {background_lstar}",
            background_lstar,
        )

    surround = _finite_scalar("surround", surround)
    if not 0.0 <= surround <= 2.0:
        raise DomainError("surround", f"must lie in [0, 2], got {surround}", surround)

    if not isinstance(discounting_illuminant, (bool, np.bool_)):
        raise InvalidParameterError(
            f"discounting_illuminant must be a bool, got {discounting_illuminant!r}"
        )
    discounting_illuminant = bool(discounting_illuminant)

    # 1. White point -> cone responses
    rgb_w = _white_cone_response(white_xyz)

    # 2-4. Surround and adaptation state
    f = _surround_factor(surround)
    c = _chroma_induction(f)
    d = _degree_of_adaptation(f, adapting_luminance, discounting_illuminant)
    rgb_d = _adaptation_gains(d, rgb_w)
    _require_finite("white_point", "rgb_d", rgb_d, white_xyz)
    if np.any(rgb_d <= 0.0):
        raise DomainError(
            "white_point",
            f"drives rgb_d to non-positive gains ({rgb_d})",
            white_xyz,
        )

    # 5. Luminance level
    fl, fl_root = _luminance_adaptation(adapting_luminance)
    _require_finite("adapting_luminance", "fl", fl, adapting_luminance)

    # 6. Background
    n, z, nbb = _background_induction(background_lstar, float(white_xyz[1]))
    ncb = nbb

    # 7. Achromatic response of the white
    rgb_a = _adapted_white(fl, rgb_d, rgb_w)
    aw = _achromatic_response(rgb_a, nbb)
    _require_finite("adapting_luminance", "aw", aw, adapting_luminance)

    logger.debug(
        "Viewing conditions: La=%.4f cd/m2, L*b=%.2f, surround=%.2f, D=%.4f, "
        "Fl=%.4f, n=%.4f, Aw=%.4f",
        adapting_luminance, background_lstar, surround, d, fl, n, aw,
    )

    return ViewingConditions(
        n=n,
        aw=aw,
        nbb=nbb,
        ncb=ncb,
        c=c,
        nc=f,
        rgb_d=tuple(float(g) for g in rgb_d),
        fl=fl,
        fl_root=fl_root,
        z=z,
    )


# =============================================================================
# 5. DEFAULT ENVIRONMENT
# =============================================================================
# sRGB-like conditions: D65 white, 200 lux, L* = 50 background, average
# surround, illuminant not discounted.

_DEFAULT: Optional[ViewingConditions] = None
_DEFAULT_LOCK = threading.Lock()


def default_viewing_conditions() -> ViewingConditions:
    """
    Returns the process-wide sRGB-like viewing conditions.

    Computed once on first access (double-checked under a lock) and shared
    afterwards; the instance is immutable, so readers need no locking.
    """
    global _DEFAULT
    vc = _DEFAULT
    if vc is None:
        with _DEFAULT_LOCK:
            if _DEFAULT is None:
                _DEFAULT = make()
                logger.debug("Default viewing conditions initialised: %s", _DEFAULT)
            vc = _DEFAULT
    return vc


@functools.lru_cache(maxsize=16)
def _cached_with_background(background_lstar: float) -> ViewingConditions:
    return make(background_lstar=background_lstar)

def default_with_background_lstar(background_lstar: float) -> ViewingConditions:
    """
    Default viewing conditions with a custom background lightness.

    Useful for evaluating contrast against light or dark backgrounds.
    Results are memoised per L*.
    """
    return _cached_with_background(_finite_scalar("background_lstar", background_lstar))
