"""Oversampled radial intensity profile of one PSF plane."""

import math
import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .optics import Accuracy, Grid, Optics
from .simpson import simpson_integrate

__all__ = ["OVERSAMPLING", "RadialProfile", "max_radius", "radial_profile"]

OVERSAMPLING = 2


@dataclass(frozen=True)
class RadialProfile:
    """Radial lookup table of a PSF plane.

    Attributes:
        radius: Sample radii in pixels, radius[n] = n / oversampling.
        intensity: Intensity at each radius.
        oversampling: Number of samples per pixel.
        unconverged: Number of samples whose integration hit the
            iteration cap (their last estimate is kept).
    """

    radius: np.ndarray
    intensity: np.ndarray
    oversampling: int = OVERSAMPLING
    unconverged: int = 0

    def __len__(self) -> int:
        return len(self.radius)


def max_radius(nx: int, ny: int) -> int:
    """Largest radius (pixels) needed to cover an nx × ny plane.

    Distance from the plane center to beyond its farthest corner, rounded
    up, plus one pixel of margin for the interpolation lookups.
    """
    x0 = (nx - 1) / 2.0
    y0 = (ny - 1) / 2.0
    return int(math.ceil(math.sqrt((nx - x0) ** 2 + (ny - y0) ** 2))) + 1


def radial_profile(
    optics: Optics,
    grid: Grid,
    accuracy: int = Accuracy.GOOD,
    cancel: Optional[threading.Event] = None,
) -> Optional[RadialProfile]:
    """Sample the radial intensity of one plane.

    Args:
        optics: Optical parameters of the plane (defocus included).
        grid: Sampling grid; uses nx, ny and res_lateral.
        accuracy: Integration accuracy level.
        cancel: Optional event; when set, sampling stops.

    Returns:
        RadialProfile with max_radius(nx, ny) * OVERSAMPLING samples, or
        None if cancelled before completion.
    """
    n_samples = max_radius(grid.nx, grid.ny) * OVERSAMPLING
    radius = np.arange(n_samples) / OVERSAMPLING
    intensity = np.zeros(n_samples)
    unconverged = 0

    for n in range(n_samples):
        result = simpson_integrate(radius[n] * grid.res_lateral * 1e-9, optics, accuracy)
        intensity[n] = result.intensity
        if not result.converged:
            unconverged += 1
        if cancel is not None and cancel.is_set():
            return None

    return RadialProfile(radius=radius, intensity=intensity, unconverged=unconverged)
