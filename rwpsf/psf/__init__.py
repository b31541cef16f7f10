"""Richards & Wolf PSF computation for optical microscopy.

This module computes vectorial point spread functions of high-NA
widefield microscopes. Each plane is integrated as a radial profile with
an adaptive Simpson rule and interpolated onto the pixel grid.

Example:
    >>> from rwpsf.psf import Optics, Grid, Accuracy, compute_richards_wolf_psf
    >>>
    >>> optics = Optics(wavelength=600.0, na=1.4, ni=1.5)
    >>> grid = Grid(nx=32, ny=32, nz=11, res_lateral=100.0, res_axial=200.0)
    >>> psf = compute_richards_wolf_psf(optics, grid, Accuracy.BEST)
"""

# Core data structures
from .optics import (
    Accuracy,
    Optics,
    Grid,
    check_size,
    compute_airy_radius,
    stable_refinements_for,
)

# Numerical core
from .integrand import compute_transmission, diffraction_integrand
from .simpson import SimpsonResult, simpson_integrate, integrate_intensity
from .profile import OVERSAMPLING, RadialProfile, max_radius, radial_profile
from .raster import rasterize_profile

# Plane tasks and volume orchestration
from .slices import SliceState, SliceTask
from .richards_wolf import (
    make_slice_tasks,
    run_slice_tasks,
    assemble_volume,
    compute_richards_wolf_psf,
)

__all__ = [
    # Core data structures
    "Accuracy",
    "Optics",
    "Grid",
    "check_size",
    "compute_airy_radius",
    "stable_refinements_for",
    # Numerical core
    "compute_transmission",
    "diffraction_integrand",
    "SimpsonResult",
    "simpson_integrate",
    "integrate_intensity",
    "OVERSAMPLING",
    "RadialProfile",
    "max_radius",
    "radial_profile",
    "rasterize_profile",
    # Plane tasks and volume orchestration
    "SliceState",
    "SliceTask",
    "make_slice_tasks",
    "run_slice_tasks",
    "assemble_volume",
    "compute_richards_wolf_psf",
]
