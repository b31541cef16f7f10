"""Optical system and sampling grid data structures."""

import math
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Tuple

__all__ = [
    "Accuracy",
    "Optics",
    "Grid",
    "check_size",
    "compute_airy_radius",
    "stable_refinements_for",
]


class Accuracy(IntEnum):
    """Accuracy level of the Simpson integration.

    Each level sets how many consecutive grid refinements must agree
    (relative change below the tolerance) before the integral is accepted.
    """

    GOOD = 0
    BETTER = 1
    BEST = 2

    @property
    def stable_refinements(self) -> int:
        """Number of consecutive stable refinements required."""
        return stable_refinements_for(self)

    @classmethod
    def from_name(cls, name: str) -> "Accuracy":
        """Parse a level label such as "Good", "better" or "BEST"."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown accuracy level: {name!r}. Use 'good', 'better' or 'best'."
            ) from None


def stable_refinements_for(level: int) -> int:
    """Return the required number of stable refinements for a level.

    Levels outside the :class:`Accuracy` range fall back to 3.
    """
    return {0: 5, 1: 7, 2: 9}.get(int(level), 3)


@dataclass(frozen=True)
class Optics:
    """Immutable optical system parameters.

    All lengths are in nanometers. Derived wavenumbers are in rad/m.

    Attributes:
        wavelength: Emission wavelength (nm).
        na: Numerical aperture of the objective.
        ni: Refractive index of immersion medium (oil=1.5, water=1.333).
        ns: Refractive index of specimen medium. Defaults to ni.
        ng: Refractive index of the coverslip. Defaults to ni.
        ti0: Design working distance of the immersion layer (nm).
        ti: Actual working distance (nm). Defaults to ti0.
        tg0: Design coverslip thickness (nm).
        tg: Actual coverslip thickness (nm). Defaults to tg0.
        particle_z: Axial position of the point source (nm).

    Example:
        ```python
        optics = Optics(wavelength=600.0, na=1.4, ni=1.5)
        print(optics.alpha)  # maximal half-aperture angle -> ~1.20 rad
        ```
    """

    wavelength: float
    na: float
    ni: float = 1.5
    ns: float = None
    ng: float = None
    ti0: float = 150e3
    ti: float = None
    tg0: float = 170e3
    tg: float = None
    particle_z: float = 0.0

    def __post_init__(self) -> None:
        """Validate and set defaults."""
        if self.ns is None:
            object.__setattr__(self, "ns", self.ni)
        if self.ng is None:
            object.__setattr__(self, "ng", self.ni)
        if self.ti is None:
            object.__setattr__(self, "ti", self.ti0)
        if self.tg is None:
            object.__setattr__(self, "tg", self.tg0)
        if self.wavelength <= 0:
            raise ValueError(f"Wavelength must be positive, got {self.wavelength}")
        if self.na < 0:
            raise ValueError(f"NA must be non-negative, got {self.na}")
        if min(self.ni, self.ns, self.ng) <= 0:
            raise ValueError(
                f"Refractive indices must be positive, got "
                f"ni={self.ni}, ns={self.ns}, ng={self.ng}"
            )

    @property
    def k(self) -> float:
        """Vacuum wavenumber 2π/λ (rad/m)."""
        return 2.0 * math.pi / (self.wavelength * 1e-9)

    @property
    def kni(self) -> float:
        """Wavenumber in the immersion medium k·ni (rad/m)."""
        return self.k * self.ni

    @property
    def alpha(self) -> float:
        """Maximal half-aperture angle asin(NA/ni), clamped at π/2."""
        return math.asin(min(self.na / self.ni, 1.0))

    @property
    def upper_limit(self) -> float:
        """Upper integration angle: aperture or critical angle, whichever is smaller."""
        return min(self.alpha, math.asin(min(self.ns / self.ni, 1.0)))

    def with_defocus(self, defocus: float) -> "Optics":
        """Return a copy focused `defocus` nm away (ti = ti0 + defocus)."""
        return replace(self, ti=self.ti0 + defocus)


def check_size(nx: int, ny: int, nz: int) -> None:
    """Validate the dimensions of a PSF volume.

    Raises:
        ValueError: If nz < 3, nx < 4 or ny < 4.
    """
    if nz < 3:
        raise ValueError(f"nz should be at least 3, got {nz}")
    if nx < 4:
        raise ValueError(f"nx should be at least 4, got {nx}")
    if ny < 4:
        raise ValueError(f"ny should be at least 4, got {ny}")


@dataclass(frozen=True)
class Grid:
    """Sampling grid of the PSF volume.

    Attributes:
        nx: Number of pixels along x (columns).
        ny: Number of pixels along y (rows).
        nz: Number of axial planes.
        res_lateral: Lateral pixel pitch (nm).
        res_axial: Axial plane spacing (nm).
    """

    nx: int
    ny: int
    nz: int
    res_lateral: float
    res_axial: float

    def __post_init__(self) -> None:
        check_size(self.nx, self.ny, self.nz)
        if self.res_lateral <= 0 or self.res_axial <= 0:
            raise ValueError(
                f"Resolutions must be positive, got lateral={self.res_lateral}, "
                f"axial={self.res_axial}"
            )

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Return (nz, ny, nx) shape."""
        return (self.nz, self.ny, self.nx)

    @property
    def center(self) -> Tuple[float, float]:
        """Lateral center (y0, x0) in pixels."""
        return ((self.ny - 1) / 2.0, (self.nx - 1) / 2.0)


def compute_airy_radius(wavelength: float, na: float) -> float:
    """Compute the Airy disk radius.

    The Airy radius is the distance from the center to the first zero
    of the Airy pattern.

    Args:
        wavelength: Wavelength (any length unit).
        na: Numerical aperture.

    Returns:
        Airy disk radius in the unit of `wavelength` (0.61 * λ / NA).
    """
    return 0.61 * wavelength / na
