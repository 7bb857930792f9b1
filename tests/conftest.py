"""Shared pytest fixtures for all test modules."""
import pytest
import numpy as np
import matplotlib

matplotlib.use("Agg")

from antenna_em.config import SimulationConfig, MaxwellConfig
from antenna_em.geometry import GeometryPrimitive, Dimensions, Obstacle, create_default_geometry
from antenna_em.interfaces import AntennaType, AntennaPattern
from antenna_em.materials import MaterialType
from antenna_em.antenna.patterns import get_pattern_function
from antenna_em.network.sparams import generate_s_parameters


# === Configuration Fixtures ===

@pytest.fixture
def default_config():
    """Default dipole at 2.4 GHz."""
    return SimulationConfig()


@pytest.fixture
def fast_maxwell_config():
    """Small grid and few steps for quick solver tests."""
    return MaxwellConfig(grid_size=24, iterations=200, segments=21)


# === Antenna Fixtures ===

@pytest.fixture
def dipole_geometry():
    """Half-wave dipole primitive list."""
    return create_default_geometry(AntennaType.DIPOLE)


@pytest.fixture
def long_dipole_geometry():
    """0.7λ wire, well off resonance."""
    return [GeometryPrimitive(
        shape="cylinder",
        dimensions=Dimensions(length_lambda=0.7, radius_lambda=0.005)
    )]


@pytest.fixture
def dipole_pattern():
    """Dipole pattern function |sin θ|."""
    return get_pattern_function(AntennaType.DIPOLE)


@pytest.fixture
def isotropic_pattern():
    """Isotropic pattern function."""
    return get_pattern_function(AntennaType.CUSTOM, "1")


@pytest.fixture
def sampled_dipole():
    """|sin θ| sampled on a 1° theta grid with a few phi cuts."""
    theta = np.linspace(0, 180, 181)
    phi = np.linspace(0, 360, 37)
    magnitude = np.abs(np.sin(np.deg2rad(theta)))[:, None] * np.ones((1, len(phi)))
    return AntennaPattern(
        frequency_ghz=2.4,
        theta_deg=theta,
        phi_deg=phi,
        magnitude=magnitude
    )


# === Network Fixtures ===

@pytest.fixture
def dipole_sweep():
    """Dipole S11 sweep 1-4 GHz centred at 2.4 GHz."""
    return generate_s_parameters(1.0, 4.0, 2.4, 100, AntennaType.DIPOLE)


# === Scene Fixtures ===

@pytest.fixture
def rng():
    """Seeded generator for reproducible scatter."""
    return np.random.default_rng(1234)


@pytest.fixture
def metal_wall():
    """Metal slab across the +z axis at z = 20."""
    return Obstacle(
        id="wall",
        position=(0.0, 0.0, 20.0),
        scale=(40.0, 10.0, 1.0),
        material=MaterialType.METAL
    )
