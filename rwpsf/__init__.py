"""rwpsf - Richards & Wolf 3D PSF generator for optical microscopy.

A library for computing vectorial point spread functions (PSF) of
high-NA widefield microscopes, following the Richards & Wolf diffraction
model with the Török & Varga phase aberration of a stratified medium.

The library is organized into two modules:

- **psf**: NumPy/SciPy-based PSF computation (integrand, adaptive Simpson
  integration, radial profiles, plane tasks, volume assembly)
- **utils**: Coordinates and visualization helpers

Example:
    >>> from rwpsf import Optics, Grid, Accuracy, compute_richards_wolf_psf
    >>>
    >>> # Define optical system
    >>> optics = Optics(
    ...     wavelength=600.0,   # 600nm emission
    ...     na=1.4,             # 1.4 NA objective
    ...     ni=1.5,             # oil immersion
    ... )
    >>> grid = Grid(
    ...     nx=32, ny=32, nz=11,
    ...     res_lateral=100.0,  # 100nm pixels
    ...     res_axial=200.0,    # 200nm planes
    ... )
    >>>
    >>> psf = compute_richards_wolf_psf(optics, grid, Accuracy.BEST)

Reference:
    Kirshner, H. et al. "3-D PSF fitting for fluorescence microscopy:
    implementation and localization application." Journal of Microscopy
    249.1 (2013): 13-25.
"""

__version__ = "0.1.0"

# =============================================================================
# PSF Module - Core data structures and PSF computation
# =============================================================================
from .psf import (
    # Core data structures
    Accuracy,
    Optics,
    Grid,
    check_size,
    compute_airy_radius,
    # Numerical core
    diffraction_integrand,
    simpson_integrate,
    integrate_intensity,
    RadialProfile,
    radial_profile,
    rasterize_profile,
    # Plane tasks and volume orchestration
    SliceState,
    SliceTask,
    make_slice_tasks,
    run_slice_tasks,
    assemble_volume,
    compute_richards_wolf_psf,
)

# =============================================================================
# Utils Module - Coordinates and display
# =============================================================================
from .utils import axial_defocus, radial_distance, show_sections

__all__ = [
    # Version
    "__version__",
    # Core data structures (psf module)
    "Accuracy",
    "Optics",
    "Grid",
    "check_size",
    "compute_airy_radius",
    # Numerical core
    "diffraction_integrand",
    "simpson_integrate",
    "integrate_intensity",
    "RadialProfile",
    "radial_profile",
    "rasterize_profile",
    # Plane tasks and volume orchestration
    "SliceState",
    "SliceTask",
    "make_slice_tasks",
    "run_slice_tasks",
    "assemble_volume",
    "compute_richards_wolf_psf",
    # Utilities
    "axial_defocus",
    "radial_distance",
    "show_sections",
]
