# -*- coding: utf-8 -*-
"""
Iris: Viewing conditions for the CAM16 colour appearance model
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Exception hierarchy.

All errors derive from ``ValueError`` so callers that already guard numeric
input with ``except ValueError`` keep working.  Nothing here is recoverable:
an error means the environment was described incorrectly.
"""

from typing import Optional

__all__ = [
    "IrisError",
    "DomainError",
    "InvalidParameterError",
]


class IrisError(ValueError):
    """Base class for all Iris errors."""


class DomainError(IrisError):
    """
    An environment parameter lies outside its physical range, or would drive
    the derivation to a non-finite value.

    Attributes:
        parameter: Name of the offending argument (or derived field).
        value: The rejected value, when one is available.
    """

    def __init__(self, parameter: str, message: str,
                 value: Optional[object] = None) -> None:
        self.parameter = parameter
        self.value = value
        super().__init__(f"{parameter}: {message}")


class InvalidParameterError(IrisError):
    """A constructor invariant was violated (wrong length, NaN field, ...)."""
