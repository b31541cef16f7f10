"""Tests for optical parameters, accuracy levels and grid validation."""

import dataclasses
import math

import numpy as np
import pytest

from rwpsf import Accuracy, Grid, Optics, check_size, compute_airy_radius
from rwpsf.psf.optics import stable_refinements_for


class TestOptics:
    """Tests for the Optics dataclass."""

    def test_defaults(self):
        """Unspecified indices and thicknesses default to their references."""
        optics = Optics(wavelength=600.0, na=1.4, ni=1.5)
        assert optics.ns == 1.5
        assert optics.ng == 1.5
        assert optics.ti == optics.ti0
        assert optics.tg == optics.tg0
        assert optics.particle_z == 0.0

    def test_wavenumbers(self):
        """k = 2π/λ in rad/m and kni = k·ni."""
        optics = Optics(wavelength=600.0, na=1.4, ni=1.5)
        assert np.isclose(optics.k, 2.0 * np.pi / 600e-9)
        assert np.isclose(optics.kni, optics.k * 1.5)

    def test_alpha(self):
        """Half-aperture angle is asin(NA/ni)."""
        optics = Optics(wavelength=600.0, na=1.4, ni=1.5)
        assert np.isclose(optics.alpha, math.asin(1.4 / 1.5))

    def test_na_above_ni_is_clamped(self):
        """NA > ni clamps the aperture angle to π/2 instead of failing."""
        optics = Optics(wavelength=600.0, na=1.6, ni=1.5)
        assert optics.alpha == pytest.approx(math.pi / 2)
        assert not math.isnan(optics.upper_limit)

    def test_upper_limit_critical_angle(self):
        """With ns < ni the integration stops at the critical angle."""
        optics = Optics(wavelength=600.0, na=1.4, ni=1.5, ns=1.33)
        assert np.isclose(optics.upper_limit, math.asin(1.33 / 1.5))
        assert optics.upper_limit < optics.alpha

    def test_upper_limit_aperture(self):
        """With ns >= ni the aperture angle is the limit."""
        optics = Optics(wavelength=600.0, na=1.4, ni=1.5, ns=1.6)
        assert optics.upper_limit == optics.alpha

    def test_with_defocus(self):
        """with_defocus shifts ti relative to ti0 and leaves the rest."""
        optics = Optics(wavelength=600.0, na=1.4, ni=1.5, ns=1.33)
        shifted = optics.with_defocus(250.0)
        assert shifted.ti == optics.ti0 + 250.0
        assert shifted.ti0 == optics.ti0
        assert shifted.ns == optics.ns
        assert optics.ti == optics.ti0

    def test_frozen(self):
        """Optics is immutable."""
        optics = Optics(wavelength=600.0, na=1.4)
        with pytest.raises(dataclasses.FrozenInstanceError):
            optics.na = 1.2

    def test_invalid_wavelength(self):
        """Non-positive wavelength raises ValueError."""
        with pytest.raises(ValueError, match="Wavelength"):
            Optics(wavelength=0.0, na=1.4)

    def test_invalid_index(self):
        """Non-positive refractive index raises ValueError."""
        with pytest.raises(ValueError, match="Refractive indices"):
            Optics(wavelength=600.0, na=1.4, ni=1.5, ns=-1.0)

    def test_invalid_na(self):
        """Negative NA raises ValueError."""
        with pytest.raises(ValueError, match="NA"):
            Optics(wavelength=600.0, na=-0.5)


class TestAccuracy:
    """Tests for accuracy levels."""

    def test_stable_refinements(self):
        """Good, Better, Best require 5, 7, 9 stable refinements."""
        assert Accuracy.GOOD.stable_refinements == 5
        assert Accuracy.BETTER.stable_refinements == 7
        assert Accuracy.BEST.stable_refinements == 9

    def test_levels_non_decreasing(self):
        """Higher levels never require fewer stable refinements."""
        counts = [level.stable_refinements for level in Accuracy]
        assert counts == sorted(counts)

    def test_fallback_level(self):
        """Unknown levels fall back to 3 stable refinements."""
        assert stable_refinements_for(3) == 3
        assert stable_refinements_for(-1) == 3

    def test_from_name(self):
        """Labels are parsed case-insensitively."""
        assert Accuracy.from_name("Good") is Accuracy.GOOD
        assert Accuracy.from_name("better") is Accuracy.BETTER
        assert Accuracy.from_name(" BEST ") is Accuracy.BEST

    def test_from_name_unknown(self):
        """Unknown labels raise ValueError."""
        with pytest.raises(ValueError, match="Unknown accuracy"):
            Accuracy.from_name("perfect")


class TestGrid:
    """Tests for volume size validation."""

    def test_check_size_accepts_minimum(self):
        """nx=4, ny=4, nz=3 is the smallest valid volume."""
        check_size(4, 4, 3)

    def test_check_size_rejects_nz(self):
        """nz=2 is rejected."""
        with pytest.raises(ValueError, match="nz"):
            check_size(4, 4, 2)

    def test_check_size_rejects_nx(self):
        """nx=3 is rejected."""
        with pytest.raises(ValueError, match="nx"):
            check_size(3, 4, 3)

    def test_check_size_rejects_ny(self):
        """ny=3 is rejected."""
        with pytest.raises(ValueError, match="ny"):
            check_size(4, 3, 3)

    def test_grid_validates_size(self):
        """Grid construction runs the size check."""
        with pytest.raises(ValueError, match="nz"):
            Grid(nx=32, ny=32, nz=2, res_lateral=100.0, res_axial=200.0)

    def test_grid_validates_resolution(self):
        """Non-positive sampling pitches are rejected."""
        with pytest.raises(ValueError, match="Resolutions"):
            Grid(nx=32, ny=32, nz=11, res_lateral=0.0, res_axial=200.0)

    def test_grid_shape_and_center(self):
        """Shape is (nz, ny, nx) and the center sits between pixels for even sizes."""
        grid = Grid(nx=32, ny=16, nz=11, res_lateral=100.0, res_axial=200.0)
        assert grid.shape == (11, 16, 32)
        assert grid.center == (7.5, 15.5)


def test_airy_radius():
    """Airy radius is 0.61 λ / NA."""
    assert np.isclose(compute_airy_radius(600.0, 1.4), 0.61 * 600.0 / 1.4)
