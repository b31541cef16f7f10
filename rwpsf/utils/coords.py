"""Real-space coordinates of the PSF volume."""

import numpy as np

__all__ = ["axial_defocus", "radial_distance"]


def axial_defocus(nz: int, spacing: float = 1.0) -> np.ndarray:
    """Defocus of each plane relative to the central plane.

    Args:
        nz: Number of planes.
        spacing: Plane spacing.

    Returns:
        1D array spacing * (z - (nz - 1) / 2) for z = 0 .. nz - 1. For odd
        nz the central plane is exactly in focus.

    Example:
        ```python
        axial_defocus(5, spacing=200.0)
        # Returns: [-400., -200.,    0.,  200.,  400.]
        ```
    """
    return spacing * (np.arange(nz) - (nz - 1) / 2.0)


def radial_distance(nx: int, ny: int) -> np.ndarray:
    """Distance of each pixel from the plane center, in pixels.

    Args:
        nx: Plane width.
        ny: Plane height.

    Returns:
        Array of shape (ny, nx), centered at ((ny - 1) / 2, (nx - 1) / 2).
    """
    x = np.arange(nx) - (nx - 1) / 2.0
    y = np.arange(ny) - (ny - 1) / 2.0
    xx, yy = np.meshgrid(x, y, indexing="xy")
    return np.sqrt(xx**2 + yy**2)
