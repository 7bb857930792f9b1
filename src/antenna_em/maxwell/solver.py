"""Full-wave solver front end with background execution."""
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Sequence
import logging
import threading

from ..config import MaxwellConfig, MaxwellMethod
from ..geometry import GeometryPrimitive, create_default_geometry
from ..interfaces import AntennaType, MaxwellResult
from .fdtd import ProgressCallback, solve_fdtd
from .mom import solve_mom

logger = logging.getLogger(__name__)


class MaxwellSolver:
    """Dispatches runs to the FDTD or MoM solver and tracks the latest result.

    ``run`` solves on the calling thread. ``submit`` solves on a worker
    thread and returns a Future; only the most recent submission may update
    ``last_result``, older ones finish as stale.

    Attributes:
        config: Solver settings
        is_running: True while a submitted run is in flight
        progress: Percent complete of the current run
        last_result: Result of the latest non-stale run
    """

    def __init__(self, config: Optional[MaxwellConfig] = None, max_workers: int = 1):
        self.config = config or MaxwellConfig()
        self.is_running = False
        self.progress = 0.0
        self.last_result: Optional[MaxwellResult] = None
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._lock = threading.Lock()
        self._generation = 0

    def solve(
        self,
        geometry: Optional[Sequence[GeometryPrimitive]],
        freq_ghz: float,
        antenna_type: AntennaType = AntennaType.DIPOLE,
        progress: Optional[ProgressCallback] = None
    ) -> MaxwellResult:
        """
        Run the configured method without touching solver state.

        Args:
            geometry: Antenna primitives, default geometry when empty
            freq_ghz: Frequency in GHz
            antenna_type: Family used for the default geometry
            progress: Optional percent-complete callback

        Returns:
            MaxwellResult (FEM returns an empty converged result)
        """
        config = self.config
        if not geometry:
            geometry = create_default_geometry(AntennaType(antenna_type))

        # FDTD reports its own progress, ending at 100
        if config.method is MaxwellMethod.FDTD:
            return solve_fdtd(config.grid_size, config.iterations, freq_ghz,
                              config.courant, progress)

        if config.method is MaxwellMethod.MOM:
            result = solve_mom(geometry, freq_ghz, config.segments, config.impedance_model)
        else:
            result = MaxwellResult(converged=True, iterations_taken=0, max_field_strength=0.0,
                                   message="FEM solver not implemented")

        if progress is not None:
            progress(100.0)
        return result

    def run(
        self,
        geometry: Optional[Sequence[GeometryPrimitive]],
        freq_ghz: float,
        antenna_type: AntennaType = AntennaType.DIPOLE,
        progress: Optional[ProgressCallback] = None
    ) -> MaxwellResult:
        """Solve synchronously and store the result as ``last_result``.

        Any in-flight ``submit`` becomes stale, so ``is_running`` is cleared.
        """
        with self._lock:
            self._generation += 1
            self.is_running = False
        self.progress = 0.0
        result = self.solve(geometry, freq_ghz, antenna_type, self._track(progress))
        self.last_result = result
        return result

    def submit(
        self,
        geometry: Optional[Sequence[GeometryPrimitive]],
        freq_ghz: float,
        antenna_type: AntennaType = AntennaType.DIPOLE,
        progress: Optional[ProgressCallback] = None
    ) -> "Future[MaxwellResult]":
        """
        Solve on the worker pool.

        Returns:
            Future resolving to the MaxwellResult; the result is published to
            ``last_result`` only if no newer run was started meanwhile
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.is_running = True
            self.progress = 0.0

        def task() -> MaxwellResult:
            result = None
            try:
                result = self.solve(geometry, freq_ghz, antenna_type,
                                    self._track(progress, generation))
            finally:
                with self._lock:
                    if generation == self._generation:
                        self.is_running = False
                        if result is not None:
                            self.last_result = result
                    else:
                        logger.debug("Discarding stale Maxwell run %d", generation)
            return result

        return self._executor.submit(task)

    def _track(self, progress: Optional[ProgressCallback], generation: Optional[int] = None):
        def callback(percent: float) -> None:
            if generation is None or generation == self._generation:
                self.progress = percent
            if progress is not None:
                progress(percent)
        return callback

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "MaxwellSolver":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
