"""Visualization of PSF volumes (requires matplotlib)."""

from typing import Optional, Tuple

import numpy as np

__all__ = ["show_sections"]


def show_sections(
    psf: np.ndarray,
    spacing: Tuple[float, float] = (1.0, 1.0),
    gamma: float = 0.5,
    title: Optional[str] = None,
):
    """Plot the central xy, xz and yz sections of a PSF volume.

    Args:
        psf: Intensity PSF, shape (nz, ny, nx).
        spacing: (axial, lateral) sample spacing, used for the aspect ratio
            and axis extents.
        gamma: Display gamma applied to the normalized intensity. Values
            below 1 bring out the side lobes. Default 0.5.
        title: Optional figure title.

    Returns:
        The matplotlib Figure.

    Example:
        >>> psf = compute_richards_wolf_psf(optics, grid)
        >>> fig = show_sections(psf, spacing=(grid.res_axial, grid.res_lateral))
    """
    import matplotlib.pyplot as plt

    if psf.ndim != 3:
        raise ValueError(f"Expected a (nz, ny, nx) volume, got shape {psf.shape}")

    dz, dxy = spacing
    nz, ny, nx = psf.shape
    peak = psf.max()
    scaled = np.clip(psf / peak, 0.0, None) ** gamma if peak > 0 else psf

    xy = scaled[nz // 2]
    xz = scaled[:, ny // 2, :]
    yz = scaled[:, :, nx // 2]

    fig, axes = plt.subplots(1, 3, figsize=(12, 4))

    axes[0].imshow(xy, cmap="inferno", extent=(0, nx * dxy, ny * dxy, 0))
    axes[0].set_title("xy")
    axes[0].set_xlabel("x")
    axes[0].set_ylabel("y")

    axes[1].imshow(xz, cmap="inferno", extent=(0, nx * dxy, nz * dz, 0))
    axes[1].set_title("xz")
    axes[1].set_xlabel("x")
    axes[1].set_ylabel("z")

    axes[2].imshow(yz, cmap="inferno", extent=(0, ny * dxy, nz * dz, 0))
    axes[2].set_title("yz")
    axes[2].set_xlabel("y")
    axes[2].set_ylabel("z")

    if title is not None:
        fig.suptitle(title)
    fig.tight_layout()

    return fig
