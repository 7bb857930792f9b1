"""Matplotlib figures for solver and model outputs.

Each function returns the Figure and saves it when ``output_path`` is given.
Callers close figures they no longer need (``plt.close(fig)``).
"""
from pathlib import Path
from typing import Optional, Sequence, Union
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from .interfaces import AntennaPattern, MaxwellResult, RaySegment, SParameterPoint
from .antenna.patterns import extract_principal_cuts
from .network.smith import s_params_to_smith

BACKGROUND = '#101c2e'
FOREGROUND = '#cbd5e1'
ACCENT = '#f59e0b'

PathLike = Union[str, Path]


def _style(fig: Figure, ax, title: str) -> None:
    fig.patch.set_facecolor(BACKGROUND)
    ax.set_facecolor(BACKGROUND)
    ax.set_title(title, color=FOREGROUND, fontsize=12, pad=12)
    ax.tick_params(colors=FOREGROUND)
    for spine in ax.spines.values():
        spine.set_color(FOREGROUND)
    ax.grid(True, color=FOREGROUND, alpha=0.2, lw=0.5)


def _finish(fig: Figure, output_path: Optional[PathLike]) -> Figure:
    if output_path is not None:
        fig.savefig(output_path, dpi=150, facecolor=fig.get_facecolor(), bbox_inches='tight')
    return fig


def plot_polar_cut(
    pattern: AntennaPattern,
    title: str = "E-plane pattern",
    dynamic_range_db: float = 40.0,
    output_path: Optional[PathLike] = None
) -> Figure:
    """Polar plot of the phi = 0° cut, normalised to the peak."""
    cuts = extract_principal_cuts(pattern)
    e_plane = cuts['e_plane']
    mag_db = e_plane['magnitude_db'] - np.max(e_plane['magnitude_db'])
    radius = np.clip(mag_db + dynamic_range_db, 0, None)

    fig, ax = plt.subplots(figsize=(6, 6), subplot_kw={'projection': 'polar'})
    _style(fig, ax, title)
    ax.plot(np.deg2rad(e_plane['theta_deg']), radius, color=ACCENT, lw=1.5)
    ax.set_theta_zero_location('N')
    ax.set_theta_direction(-1)
    ax.set_rlim(0, dynamic_range_db)
    ticks = np.linspace(0, dynamic_range_db, 5)
    ax.set_yticks(ticks)
    ax.set_yticklabels([f"{t - dynamic_range_db:.0f}" for t in ticks], color=FOREGROUND)
    return _finish(fig, output_path)


def plot_s11(
    points: Sequence[SParameterPoint],
    title: str = "S11",
    output_path: Optional[PathLike] = None
) -> Figure:
    """Return loss over frequency with the -10 dB matching line."""
    freqs = [p.freq_ghz for p in points]
    s11 = [p.s11_mag_db for p in points]

    fig, ax = plt.subplots(figsize=(8, 4))
    _style(fig, ax, title)
    ax.plot(freqs, s11, color=ACCENT, lw=1.5)
    ax.axhline(-10, color=FOREGROUND, ls='--', lw=0.8, alpha=0.6)
    ax.set_ylim(-60, 0)
    ax.set_xlabel('Frequency (GHz)', color=FOREGROUND)
    ax.set_ylabel('S11 (dB)', color=FOREGROUND)
    return _finish(fig, output_path)


def plot_smith(
    points: Sequence[SParameterPoint],
    title: str = "Smith chart",
    output_path: Optional[PathLike] = None
) -> Figure:
    """Reflection coefficient locus on a bare Smith grid."""
    gammas = np.array(s_params_to_smith(points), dtype=np.complex128)

    fig, ax = plt.subplots(figsize=(6, 6))
    _style(fig, ax, title)
    ax.grid(False)

    t = np.linspace(0, 2 * np.pi, 361)
    ax.plot(np.cos(t), np.sin(t), color=FOREGROUND, lw=1.0)
    # Constant-resistance circles: center r/(1+r), radius 1/(1+r)
    for r in (0.2, 0.5, 1.0, 2.0, 5.0):
        c = r / (1 + r)
        rad = 1 / (1 + r)
        ax.plot(c + rad * np.cos(t), rad * np.sin(t), color=FOREGROUND, lw=0.5, alpha=0.4)
    ax.axhline(0, color=FOREGROUND, lw=0.5, alpha=0.4)

    if len(gammas):
        ax.plot(gammas.real, gammas.imag, color=ACCENT, lw=1.5)
    ax.set_xlim(-1.05, 1.05)
    ax.set_ylim(-1.05, 1.05)
    ax.set_aspect('equal')
    return _finish(fig, output_path)


def plot_field_map(
    result: MaxwellResult,
    title: str = "FDTD |Ez|",
    output_path: Optional[PathLike] = None
) -> Figure:
    """Image of the FDTD Ez snapshot."""
    if result.field_map is None:
        raise ValueError("Result carries no field map")
    size = int(round(np.sqrt(result.field_map.size)))
    field = np.abs(result.field_map.reshape(size, size))

    fig, ax = plt.subplots(figsize=(6, 6))
    _style(fig, ax, title)
    ax.grid(False)
    image = ax.imshow(np.nan_to_num(field), cmap='inferno', origin='lower')
    cbar = fig.colorbar(image, ax=ax, fraction=0.046, pad=0.04)
    cbar.ax.tick_params(colors=FOREGROUND)
    return _finish(fig, output_path)


def plot_current_distribution(
    result: MaxwellResult,
    title: str = "MoM current",
    output_path: Optional[PathLike] = None
) -> Figure:
    """|I| per segment along the wire, feed at the center."""
    if result.current_distribution is None:
        raise ValueError("Result carries no current distribution")
    current = result.current_distribution
    n = len(current)
    position = (np.arange(n) - n // 2) / max(n, 1)

    fig, ax = plt.subplots(figsize=(8, 4))
    _style(fig, ax, title)
    ax.plot(position, current, color=ACCENT, marker='o', ms=3, lw=1.5)
    ax.set_xlabel('Position along wire (fraction of length)', color=FOREGROUND)
    ax.set_ylabel('|I| (A)', color=FOREGROUND)
    return _finish(fig, output_path)


def plot_rays(
    rays: Sequence[RaySegment],
    receiver: Sequence[float] = (10.0, 0.0, 10.0),
    title: str = "Multipath rays",
    output_path: Optional[PathLike] = None
) -> Figure:
    """Top view (x-z plane) of traced segments coloured by bounce."""
    fig, ax = plt.subplots(figsize=(7, 7))
    _style(fig, ax, title)

    max_bounce = max((r.bounce for r in rays), default=0)
    cmap = plt.get_cmap('cool')
    for ray in rays:
        shade = ray.bounce / max_bounce if max_bounce else 0.0
        ax.plot([ray.start[0], ray.end[0]], [ray.start[2], ray.end[2]],
                color=cmap(shade), lw=0.8, alpha=0.6)

    ax.plot(receiver[0], receiver[2], 'o', color='cyan', ms=6)
    ax.text(receiver[0], receiver[2] + 1.0, 'Rx', color='cyan', ha='center')
    ax.set_xlabel('x', color=FOREGROUND)
    ax.set_ylabel('z', color=FOREGROUND)
    ax.set_aspect('equal')
    return _finish(fig, output_path)
