"""Resampling of a radial profile onto the pixel grid of a plane."""

import threading
from typing import Optional

import numpy as np

from .profile import RadialProfile

__all__ = ["rasterize_profile"]


def rasterize_profile(
    profile: RadialProfile,
    nx: int,
    ny: int,
    out: Optional[np.ndarray] = None,
    cancel: Optional[threading.Event] = None,
) -> Optional[np.ndarray]:
    """Linearly interpolate a radial profile onto an (ny, nx) plane.

    The profile is centered at ((ny - 1) / 2, (nx - 1) / 2). Pixels whose
    radius falls exactly on a table node receive the node value.

    Args:
        profile: Radial lookup table (radii in pixels).
        nx: Plane width in pixels.
        ny: Plane height in pixels.
        out: Optional array of shape (ny, nx) to write into.
        cancel: Optional event checked before each row.

    Returns:
        The (ny, nx) plane, or None if cancelled. Values are not clipped.
    """
    if out is None:
        out = np.zeros((ny, nx), dtype=np.float64)
    elif out.shape != (ny, nx):
        raise ValueError(f"Output shape {out.shape} does not match ({ny}, {nx})")

    h = profile.intensity
    r = profile.radius
    factor = profile.oversampling
    last = len(h) - 2

    x0 = (nx - 1) / 2.0
    y0 = (ny - 1) / 2.0
    dx_sq = (np.arange(nx) - x0) ** 2

    for y in range(ny):
        if cancel is not None and cancel.is_set():
            return None
        r_pixel = np.sqrt(dx_sq + (y - y0) ** 2)
        index = np.minimum(np.floor(r_pixel * factor).astype(np.intp), last)
        out[y] = h[index] + (h[index + 1] - h[index]) * (r_pixel - r[index]) * factor

    return out
