"""Tests for the figure helpers."""
import pytest
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from antenna_em import plotting
from antenna_em.interfaces import MaxwellResult, TerrainType
from antenna_em.maxwell.fdtd import solve_fdtd
from antenna_em.maxwell.mom import solve_mom
from antenna_em.propagation.multipath import compute_multipath


class TestPlots:
    """Each plot returns a Figure and writes a file when asked."""

    def test_polar_cut(self, sampled_dipole, tmp_path):
        """Pattern cut renders and saves."""
        out = tmp_path / "cut.png"
        fig = plotting.plot_polar_cut(sampled_dipole, output_path=out)
        assert isinstance(fig, Figure)
        assert out.exists()
        plt.close(fig)

    def test_s11_and_smith(self, dipole_sweep, tmp_path):
        """Sweep plots render."""
        fig = plotting.plot_s11(dipole_sweep, output_path=tmp_path / "s11.png")
        plt.close(fig)
        fig = plotting.plot_smith(dipole_sweep, output_path=tmp_path / "smith.png")
        plt.close(fig)
        assert (tmp_path / "s11.png").exists()
        assert (tmp_path / "smith.png").exists()

    def test_smith_empty(self):
        """An empty sweep still draws the chart."""
        fig = plotting.plot_smith([])
        assert isinstance(fig, Figure)
        plt.close(fig)

    def test_field_map(self):
        """FDTD snapshots render as an image."""
        fig = plotting.plot_field_map(solve_fdtd(16, 50, 2.4))
        assert len(fig.axes) == 2  # image and colorbar
        plt.close(fig)

    def test_field_map_missing(self):
        """Results without a snapshot are rejected."""
        with pytest.raises(ValueError):
            plotting.plot_field_map(MaxwellResult(converged=True, iterations_taken=0))

    def test_current_distribution(self, dipole_geometry):
        """MoM currents render; results without currents are rejected."""
        fig = plotting.plot_current_distribution(solve_mom(dipole_geometry, 2.4, 21))
        plt.close(fig)
        with pytest.raises(ValueError):
            plotting.plot_current_distribution(MaxwellResult(converged=False, iterations_taken=0))

    def test_rays(self, isotropic_pattern, metal_wall, rng):
        """Ray segments render in the x-z plane."""
        result = compute_multipath([metal_wall], TerrainType.FLAT, 2, isotropic_pattern, rng)
        fig = plotting.plot_rays(result.rays)
        assert len(fig.axes[0].lines) == len(result.rays) + 1
        plt.close(fig)
