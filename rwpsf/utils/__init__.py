"""Coordinate and display utilities for PSF volumes."""

from .coords import axial_defocus, radial_distance
from .display import show_sections

__all__ = [
    # Coordinates
    "axial_defocus",
    "radial_distance",
    # Display (requires matplotlib)
    "show_sections",
]
