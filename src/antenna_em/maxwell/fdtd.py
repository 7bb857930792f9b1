"""2D TMz finite-difference time-domain solver.

Fields live on flat row-major arrays of size² cells (index i·size + j) in
normalised units, so one Courant factor S = c·dt/dx scales both updates.
Cells on row 0 and column 0 are never updated and act as a PEC boundary.
"""
from typing import Callable, Optional
import logging
import numpy as np
from numba import jit

from ..config import COURANT_LIMIT_2D
from ..interfaces import MaxwellResult

logger = logging.getLogger(__name__)

MAX_FDTD_STEPS = 1000

# Free-space wave impedance
ETA0 = 376.730313668

# Source phase advance per step is 2π·f_GHz·SOURCE_TIME_SCALE
SOURCE_TIME_SCALE = 0.1

# Feed current DFT below this magnitude is treated as no current
MIN_FEED_CURRENT = 1e-12

# Steps between non-finite field checks
DIVERGENCE_CHECK_INTERVAL = 50

ProgressCallback = Callable[[float], None]


@jit(nopython=True, cache=True)
def _update_h(ez, hx, hy, size, s):
    """Advance Hx and Hy by one step from the Ez differences."""
    for i in range(size):
        for j in range(size - 1):
            idx = i * size + j
            hx[idx] = hx[idx] - s * (ez[idx + 1] - ez[idx])
    for i in range(size - 1):
        for j in range(size):
            idx = i * size + j
            hy[idx] = hy[idx] + s * (ez[idx + size] - ez[idx])


@jit(nopython=True, cache=True)
def _update_e(ez, hx, hy, size, s):
    """Advance Ez at interior points i, j >= 1 from the curl of H."""
    for i in range(1, size):
        for j in range(1, size):
            idx = i * size + j
            ez[idx] = ez[idx] + s * ((hy[idx] - hy[idx - size]) - (hx[idx] - hx[idx - 1]))


@jit(nopython=True, cache=True)
def _max_abs(values):
    peak = 0.0
    for v in values:
        a = abs(v)
        if a > peak or a != a:  # NaN propagates
            peak = a
    return peak


class FDTDSolver:
    """Yee-grid TMz solver with a soft sinusoidal source at the center cell.

    Attributes:
        size: Cells per side
        courant: Courant factor S
        ez, hx, hy: Field arrays (size²,), updated in place
        time_step: Steps taken since the last reset
    """

    def __init__(self, size: int, courant: float = 0.5):
        if size < 3:
            raise ValueError(f"FDTD grid needs at least 3 cells per side, got {size}")
        self.size = int(size)
        self.courant = float(courant)
        self.center = (self.size // 2) * self.size + self.size // 2

        n = self.size * self.size
        self.ez = np.zeros(n, dtype=np.float64)
        self.hx = np.zeros(n, dtype=np.float64)
        self.hy = np.zeros(n, dtype=np.float64)
        self.time_step = 0

        if self.courant > COURANT_LIMIT_2D:
            logger.warning(
                "Courant factor %.3f exceeds the 2D stability limit %.4f; the run will diverge",
                self.courant, COURANT_LIMIT_2D
            )

    def reset(self) -> None:
        """Zero all fields and the step counter."""
        self.ez.fill(0.0)
        self.hx.fill(0.0)
        self.hy.fill(0.0)
        self.time_step = 0

    def source_value(self, freq_ghz: float, t: int) -> float:
        return float(np.sin(2 * np.pi * freq_ghz * SOURCE_TIME_SCALE * t))

    def feed_current(self) -> float:
        """Circulation of H around the source cell (discrete Ampère law)."""
        c = self.center
        n = self.size
        return float((self.hy[c] - self.hy[c - n]) - (self.hx[c] - self.hx[c - 1]))

    def step(self, source: float = 0.0) -> None:
        """One leapfrog step: H, then E, then the soft source at the center."""
        _update_h(self.ez, self.hx, self.hy, self.size, self.courant)
        _update_e(self.ez, self.hx, self.hy, self.size, self.courant)
        self.ez[self.center] += source
        self.time_step += 1

    def run(
        self,
        iterations: int,
        freq_ghz: float,
        progress: Optional[ProgressCallback] = None
    ) -> MaxwellResult:
        """
        Reset and time-step the grid with the sinusoidal source.

        The feed impedance is taken from single-frequency DFTs of the feed
        voltage (Ez at the source) and feed current accumulated over the run.

        Args:
            iterations: Requested steps, capped at MAX_FDTD_STEPS
            freq_ghz: Source frequency in GHz
            progress: Optional callback receiving percent complete

        Returns:
            MaxwellResult with the Ez snapshot and probe history
        """
        steps = max(0, min(int(iterations), MAX_FDTD_STEPS))
        message = ""
        if iterations > MAX_FDTD_STEPS:
            message = f"Run truncated to {MAX_FDTD_STEPS} of {iterations} requested steps"
            logger.warning(message)

        self.reset()
        omega = 2 * np.pi * freq_ghz * SOURCE_TIME_SCALE
        history = np.zeros(steps, dtype=np.float64)
        v_dft = 0j
        i_dft = 0j
        report_every = max(1, steps // 20)
        reported = 0.0
        diverged = False

        for t in range(steps):
            self.step(self.source_value(freq_ghz, t))

            phasor = np.exp(-1j * omega * t)
            history[t] = self.ez[self.center]
            with np.errstate(over="ignore", invalid="ignore"):
                v_dft += history[t] * phasor
                i_dft += self.feed_current() * phasor

            if (t + 1) % DIVERGENCE_CHECK_INTERVAL == 0 and not np.isfinite(_max_abs(self.ez)):
                diverged = True
                logger.warning("FDTD field became non-finite at step %d", t + 1)
                history = history[:t + 1]
                break

            if progress is not None and ((t + 1) % report_every == 0 or t + 1 == steps):
                reported = 100.0 * (t + 1) / steps
                progress(reported)

        # early exits still finish the progress bar
        if progress is not None and reported < 100.0:
            progress(100.0)

        max_field = _max_abs(self.ez)
        if not np.isfinite(max_field):
            diverged = True

        if diverged:
            return MaxwellResult(
                converged=False,
                iterations_taken=self.time_step,
                input_impedance=None,
                field_map=self.ez.copy(),
                max_field_strength=float("inf"),
                message=f"Field diverged (Courant {self.courant:.3f})",
                probe_history=history
            )

        # above the limit the field grows without bound even while still finite
        if self.courant > COURANT_LIMIT_2D:
            return MaxwellResult(
                converged=False,
                iterations_taken=self.time_step,
                input_impedance=None,
                field_map=self.ez.copy(),
                max_field_strength=float(max_field),
                message=(f"Unstable Courant factor {self.courant:.3f} "
                         f"exceeds {COURANT_LIMIT_2D:.4f}"),
                probe_history=history
            )

        impedance = None
        if abs(i_dft) > MIN_FEED_CURRENT:
            impedance = complex(ETA0 * v_dft / i_dft)

        return MaxwellResult(
            converged=True,
            iterations_taken=self.time_step,
            input_impedance=impedance,
            field_map=self.ez.copy(),
            max_field_strength=float(max_field),
            message=message,
            probe_history=history
        )


def solve_fdtd(
    grid_size: int,
    iterations: int,
    freq_ghz: float,
    courant: float = 0.5,
    progress: Optional[ProgressCallback] = None
) -> MaxwellResult:
    """Convenience wrapper: fresh solver, one run."""
    return FDTDSolver(grid_size, courant).run(iterations, freq_ghz, progress)
