"""Per-plane unit of work for the Richards & Wolf PSF."""

import threading
from enum import Enum
from typing import Callable, Optional

import numpy as np

from .optics import Accuracy, Grid, Optics
from .profile import radial_profile
from .raster import rasterize_profile

__all__ = ["SliceState", "SliceTask"]

# Share of the total progress budget covered by the slices; the remainder
# is left for post-processing of the assembled volume.
SLICE_PROGRESS = 90.0


class SliceState(Enum):
    """Lifecycle of a SliceTask: PENDING -> RUNNING -> COMPLETED | CANCELLED."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SliceTask:
    """Computation of one PSF plane at a given defocus.

    The task owns its `plane` buffer, zero-filled at creation. The buffer
    is written once, in full, when the computation completes; a cancelled
    task leaves it untouched. `unconverged` counts the radial samples whose
    integration hit the iteration cap.

    Args:
        index: Depth index of the plane in the volume.
        defocus: Defocus of the plane (nm).
        optics: Optical parameters at focus.
        grid: Sampling grid of the volume.
        accuracy: Integration accuracy level.
        cancel: Optional event; when set, the task stops at its next check.
        monitor: Optional progress callback called with
            (percent_delta, label) once the plane is written.

    Example:
        >>> task = SliceTask(5, 0.0, optics, grid)
        >>> task.process()
        >>> task.state
        <SliceState.COMPLETED: 'completed'>
    """

    def __init__(
        self,
        index: int,
        defocus: float,
        optics: Optics,
        grid: Grid,
        accuracy: int = Accuracy.GOOD,
        cancel: Optional[threading.Event] = None,
        monitor: Optional[Callable[[float, str], None]] = None,
    ):
        self.index = index
        self.defocus = defocus
        self.optics = optics
        self.grid = grid
        self.accuracy = accuracy
        self.cancel = cancel
        self.monitor = monitor
        self.state = SliceState.PENDING
        self.plane = np.zeros((grid.ny, grid.nx), dtype=np.float64)
        self.unconverged = 0

    def process(self) -> None:
        """Compute the plane; sets state to COMPLETED or CANCELLED."""
        if self.state is not SliceState.PENDING:
            raise RuntimeError(
                f"Slice {self.index} cannot be processed from state {self.state.name}"
            )
        self.state = SliceState.RUNNING

        grid = self.grid
        profile = radial_profile(
            self.optics.with_defocus(self.defocus),
            grid,
            self.accuracy,
            cancel=self.cancel,
        )
        if profile is None:
            self.state = SliceState.CANCELLED
            return
        self.unconverged = profile.unconverged

        plane = rasterize_profile(profile, grid.nx, grid.ny, cancel=self.cancel)
        if plane is None:
            self.state = SliceState.CANCELLED
            return

        self.plane[...] = plane
        self.state = SliceState.COMPLETED

        if self.monitor is not None:
            self.monitor(SLICE_PROGRESS / grid.nz, f"{self.index} / {grid.nz}")

    @property
    def done(self) -> bool:
        """True once the task reached a final state."""
        return self.state in (SliceState.COMPLETED, SliceState.CANCELLED)

    def __repr__(self) -> str:
        return (
            f"SliceTask(index={self.index}, defocus={self.defocus}, "
            f"state={self.state.name})"
        )
