# -*- coding: utf-8 -*-
# Iris: Viewing conditions for the CAM16 colour appearance model.
#
# Copyright (c) 2026 opticsWolf
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Project metadata for Iris.
"""

from typing import Final

# Metadata Definitions
__title__: Final[str] = "Iris"
__description__: Final[str] = (
    "Cached CAM16 viewing conditions: the environment-dependent "
    "coefficients of the colour appearance model, computed once."
)
__version__: Final[str] = "0.1.0"
__author__: Final[str] = "opticsWolf"
__license__: Final[str] = "LGPL-3.0-or-later"
__copyright__: Final[str] = "Copyright (c) 2026 opticsWolf"

# Colour-science conventions the coefficients are derived under
__model__: Final[str] = "CAM16 / CAT16 (Li et al. 2017)"
__white_point_scale__: Final[str] = "CIE XYZ, Y = 100 for the reference white"

def metadata_summary() -> dict[str, str]:
    """Returns a dictionary of project metadata for introspection."""
    return {
        "title": __title__,
        "version": __version__,
        "license": __license__,
        "description": __description__,
        "copyright": __copyright__,
        "model": __model__,
        "white_point_scale": __white_point_scale__,
    }
