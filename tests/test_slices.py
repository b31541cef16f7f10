"""Tests for the per-plane SliceTask state machine."""

import threading

import numpy as np
import pytest

from rwpsf import (
    Accuracy,
    Grid,
    Optics,
    SliceState,
    SliceTask,
    radial_profile,
    rasterize_profile,
)


@pytest.fixture
def setup():
    """Small 8 × 8 × 3 volume at NA 1.4."""
    optics = Optics(wavelength=600.0, na=1.4, ni=1.5)
    grid = Grid(nx=8, ny=8, nz=3, res_lateral=100.0, res_axial=200.0)
    return optics, grid


class TestSliceTask:
    """Tests for SliceTask."""

    def test_initial_state(self, setup):
        """A new task is pending with a zero-filled plane."""
        optics, grid = setup
        task = SliceTask(1, 0.0, optics, grid)
        assert task.state is SliceState.PENDING
        assert not task.done
        assert task.plane.shape == (8, 8)
        assert np.all(task.plane == 0.0)

    def test_process_completes(self, setup):
        """Processing writes the interpolated profile of its defocus."""
        optics, grid = setup
        task = SliceTask(2, 200.0, optics, grid, Accuracy.GOOD)
        task.process()

        assert task.state is SliceState.COMPLETED
        assert task.done
        profile = radial_profile(optics.with_defocus(200.0), grid, Accuracy.GOOD)
        expected = rasterize_profile(profile, grid.nx, grid.ny)
        assert np.array_equal(task.plane, expected)

    def test_process_twice_raises(self, setup):
        """A finished task cannot be processed again."""
        optics, grid = setup
        task = SliceTask(1, 0.0, optics, grid)
        task.process()
        with pytest.raises(RuntimeError, match="COMPLETED"):
            task.process()

    def test_monitor_reports_share(self, setup):
        """Completion reports 90/nz percent with an 'index / nz' label."""
        optics, grid = setup
        reports = []
        task = SliceTask(1, 0.0, optics, grid, monitor=lambda p, label: reports.append((p, label)))
        task.process()
        assert reports == [(pytest.approx(30.0), "1 / 3")]

    def test_cancelled(self, setup):
        """A set cancel event ends the task in CANCELLED with an untouched plane."""
        optics, grid = setup
        cancel = threading.Event()
        cancel.set()
        reports = []
        task = SliceTask(
            0, -200.0, optics, grid, cancel=cancel, monitor=lambda p, label: reports.append(p)
        )
        task.process()

        assert task.state is SliceState.CANCELLED
        assert task.done
        assert np.all(task.plane == 0.0)
        assert reports == []

    def test_cancelled_cannot_restart(self, setup):
        """Cancelled tasks are final."""
        optics, grid = setup
        cancel = threading.Event()
        cancel.set()
        task = SliceTask(0, 0.0, optics, grid, cancel=cancel)
        task.process()
        cancel.clear()
        with pytest.raises(RuntimeError):
            task.process()

    def test_repr(self, setup):
        """repr names index and state."""
        optics, grid = setup
        task = SliceTask(4, 0.0, optics, grid)
        assert "index=4" in repr(task)
        assert "PENDING" in repr(task)
