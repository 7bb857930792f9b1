#!/usr/bin/env python3
"""
Antenna EM walkthrough:
- Far-field pattern of a 4-element Yagi array
- S11 sweep, Smith chart and Touchstone export
- Link budget and maximum range
- Multipath rays in a small urban scene
- MoM current distribution and FDTD field snapshot

Usage: python antenna_demo.py [scenario.yaml]
"""
import sys
import time
import logging

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from antenna_em.config import SimulationConfig, MaxwellConfig, MaxwellMethod
from antenna_em.geometry import Obstacle, create_default_geometry
from antenna_em.interfaces import AntennaType, TerrainType
from antenna_em.materials import MaterialType
from antenna_em.antenna import (
    ANTENNA_PRESETS, get_pattern_function, sample_far_field, extract_beamwidths,
    calculate_antenna_metrics, prettify_formula,
)
from antenna_em.network import (
    generate_s_parameters, nearest_point, gamma_to_impedance, denormalize,
    s_params_to_smith, write_touchstone,
)
from antenna_em.propagation import (
    LinkBudgetParams, calculate_link_budget, calculate_max_range_km, compute_multipath,
)
from antenna_em.maxwell import MaxwellSolver
from antenna_em.signal import analyze_signal
from antenna_em import plotting


def create_scene():
    """Two buildings and a glass wall around the receiver."""
    return [
        Obstacle(id="north", position=(0.0, 0.0, 20.0), scale=(40.0, 10.0, 1.0),
                 material=MaterialType.CONCRETE),
        Obstacle(id="east", position=(25.0, 0.0, 5.0), scale=(1.0, 10.0, 30.0),
                 material=MaterialType.METAL),
        Obstacle(id="lobby", position=(-15.0, 0.0, 10.0), rotation=(0.0, np.pi / 6, 0.0),
                 scale=(12.0, 6.0, 0.5), material=MaterialType.GLASS),
    ]


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if len(sys.argv) > 1:
        config = SimulationConfig.from_yaml(sys.argv[1])
    else:
        config = SimulationConfig(
            antenna_type=AntennaType.YAGI,
            frequency_ghz=3.0,
            array_enabled=True,
            array_elements=4,
            tx_gain_dbi=10.0,
            sweep_start_ghz=2.0,
            sweep_end_ghz=5.0,
            terrain=TerrainType.CITY,
        )

    errors = config.validate()
    if errors:
        for e in errors:
            print(f"  config error: {e}")
        sys.exit(1)

    print("=" * 70)
    print("  ANTENNA EM WALKTHROUGH")
    print("=" * 70)
    preset = ANTENNA_PRESETS[config.antenna_type]
    print(f"\nAntenna: {config.antenna_type.value} at {config.frequency_ghz:.2f} GHz")
    print(f"  Pattern: {prettify_formula(preset.formula)}")
    if config.array_enabled:
        print(f"  Array: {config.array_elements} elements, d = {config.element_spacing_lambda}λ, "
              f"steer {config.steering_angle_deg:.0f} deg ({config.beamforming.value})")

    # Far field
    print(f"\n[1/5] Sampling far field...")
    pattern_fn = get_pattern_function(config.antenna_type, config.custom_formula)
    pattern = sample_far_field(pattern_fn, 181, array=config.array_config(),
                               frequency_ghz=config.frequency_ghz)
    bw = extract_beamwidths(pattern)
    metrics = calculate_antenna_metrics(preset.default_gain_dbi, 0.9, config.frequency_ghz)
    print(f"      Beamwidth: {bw['vertical_deg']:.1f} deg (theta), {bw['horizontal_deg']:.1f} deg (phi)")
    print(f"      Directivity: {metrics.directivity_dbi:.2f} dBi, "
          f"aperture {metrics.effective_area_m2 * 1e4:.2f} cm²")
    fig = plotting.plot_polar_cut(pattern, f"{config.antenna_type.value} E-plane",
                                  output_path="pattern_cut.png")
    plt.close(fig)
    print(f"      Saved: pattern_cut.png")

    # Network
    print(f"\n[2/5] S-parameter sweep {config.sweep_start_ghz}-{config.sweep_end_ghz} GHz...")
    points = generate_s_parameters(config.sweep_start_ghz, config.sweep_end_ghz,
                                   config.frequency_ghz, config.sweep_steps, config.antenna_type)
    readout = nearest_point(points, config.frequency_ghz)
    gamma = s_params_to_smith([readout])[0]
    z_in = denormalize(gamma_to_impedance(gamma))
    print(f"      S11 @ {readout.freq_ghz:.3f} GHz: {readout.s11_mag_db:.1f} dB, VSWR {readout.vswr:.3f}")
    print(f"      Zin ≈ {z_in.real:.1f} {z_in.imag:+.1f}j Ω")
    path = write_touchstone("antenna.s1p", points)
    plt.close(plotting.plot_s11(points, output_path="s11.png"))
    plt.close(plotting.plot_smith(points, output_path="smith.png"))
    print(f"      Saved: {path}, s11.png, smith.png")

    # Link budget
    print(f"\n[3/5] Link budget...")
    link = calculate_link_budget(LinkBudgetParams.from_config(config))
    max_range = calculate_max_range_km(config.frequency_ghz, config.tx_power_dbm,
                                       config.tx_gain_dbi + config.rx_gain_dbi,
                                       config.rx_sensitivity_dbm, config.losses_db)
    print(f"      FSPL @ {config.distance_km} km: {link.fspl_db:.1f} dB")
    print(f"      Rx power: {link.rx_power_dbm:.1f} dBm, margin {link.margin_db:.1f} dB, "
          f"SNR {link.snr_db:.1f} dB")
    print(f"      Link {'CLOSED' if link.is_linked else 'FAILED'}, max range {max_range:.2f} km")

    # Multipath
    print(f"\n[4/5] Tracing multipath ({config.max_reflections} reflections)...")
    start = time.time()
    result = compute_multipath(create_scene(), config.terrain, config.max_reflections,
                               pattern_fn, np.random.default_rng(0))
    m = result.metrics
    print(f"      {len(result.rays)} segments in {time.time() - start:.2f}s")
    print(f"      Paths: {m.num_paths}, delay spread {m.delay_spread_ns:.2f} ns, "
          f"coherence BW {m.coherence_bandwidth_mhz:.1f} MHz")
    plt.close(plotting.plot_rays(result.rays, output_path="rays.png"))
    print(f"      Saved: rays.png")

    # Full wave
    print(f"\n[5/5] Full-wave solvers...")
    geometry = create_default_geometry(AntennaType.DIPOLE)
    with MaxwellSolver(MaxwellConfig(method=MaxwellMethod.MOM, segments=41)) as solver:
        mom = solver.run(geometry, config.frequency_ghz)
    print(f"      MoM: converged={mom.converged}")
    if mom.input_impedance is not None:
        print(f"      MoM feed impedance: {mom.input_impedance:.3g}")
    plt.close(plotting.plot_current_distribution(mom, output_path="mom_current.png"))

    fdtd_config = MaxwellConfig(method=MaxwellMethod.FDTD, grid_size=config.maxwell.grid_size,
                                iterations=config.maxwell.iterations)
    start = time.time()
    with MaxwellSolver(fdtd_config) as solver:
        fdtd = solver.submit(geometry, config.frequency_ghz).result()
    stats = analyze_signal(fdtd.probe_history)
    print(f"      FDTD: {fdtd.iterations_taken} steps in {time.time() - start:.2f}s, "
          f"max |Ez| {fdtd.max_field_strength:.3f}, probe PAPR {stats.papr_db:.1f} dB")
    if fdtd.input_impedance is not None:
        print(f"      FDTD feed impedance: {fdtd.input_impedance:.3g}")
    plt.close(plotting.plot_field_map(fdtd, output_path="fdtd_field.png"))
    print(f"      Saved: mom_current.png, fdtd_field.png")

    print(f"\n" + "=" * 70)
    print(f"  DONE")
    print(f"=" * 70)


if __name__ == "__main__":
    main()
