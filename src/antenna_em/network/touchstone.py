"""Touchstone (.s1p) export and import of S11 sweeps."""
import math
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from ..interfaces import SParameterPoint
from .smith import vswr_from_gamma

DEFAULT_COMMENT = "AntennaViz-AI Generated Data"

_FREQ_MULTIPLIERS = {
    "HZ": 1.0,
    "KHZ": 1.0e3,
    "MHZ": 1.0e6,
    "GHZ": 1.0e9,
}


def format_touchstone(
    points: Sequence[SParameterPoint],
    comment: str = DEFAULT_COMMENT
) -> str:
    """
    Render a one-port sweep as Touchstone text (GHz, dB/angle, 50 Ω).

    Rows are newline separated with no trailing newline.
    """
    header = f"! {comment}\n# GHz S DB R 50\n"
    rows = "\n".join(
        f"{p.freq_ghz:.6f} {p.s11_mag_db:.4f} {p.s11_phase_deg:.4f}"
        for p in points
    )
    return header + rows


def write_touchstone(
    path: Union[str, Path],
    points: Sequence[SParameterPoint],
    comment: str = DEFAULT_COMMENT
) -> Path:
    """Write a sweep to a .s1p file and return the path."""
    path = Path(path)
    path.write_text(format_touchstone(points, comment))
    return path


def _parse_option_line(line: str) -> Tuple[float, str, float]:
    """Parse '# <unit> S <format> R <z0>' into (multiplier, format, z0)."""
    tokens = line.lstrip("#").upper().split()

    # Touchstone defaults
    freq_unit = "GHZ"
    data_format = "MA"
    z0 = 50.0

    idx = 0
    while idx < len(tokens):
        tok = tokens[idx]
        if tok in _FREQ_MULTIPLIERS:
            freq_unit = tok
        elif tok in ("RI", "MA", "DB"):
            data_format = tok
        elif tok == "R":
            idx += 1
            if idx < len(tokens):
                z0 = float(tokens[idx])
        elif tok != "S":
            raise ValueError(f"Unsupported Touchstone option: {tok}")
        idx += 1

    return _FREQ_MULTIPLIERS[freq_unit], data_format, z0


def _to_db_phase(v1: float, v2: float, data_format: str) -> Tuple[float, float, float]:
    """Return (magnitude dB, phase deg, linear magnitude)."""
    if data_format == "DB":
        return v1, v2, 10.0 ** (v1 / 20.0)
    if data_format == "MA":
        mag = v1
        phase = v2
    else:
        mag = math.hypot(v1, v2)
        phase = math.degrees(math.atan2(v2, v1))
    db = 20 * math.log10(mag) if mag > 0 else -math.inf
    return db, phase, mag


def read_touchstone(path: Union[str, Path]) -> List[SParameterPoint]:
    """
    Parse a one-port Touchstone file.

    Args:
        path: .s1p file path

    Returns:
        SParameterPoint list with frequencies converted to GHz

    Raises:
        ValueError: On malformed data lines or an empty file
    """
    path = Path(path)

    freq_mult = 1.0e9
    data_format = "MA"
    points = []

    with open(path) as fh:
        for lineno, line in enumerate(fh, start=1):
            stripped = line.split("!", 1)[0].strip()
            if not stripped:
                continue
            if stripped.startswith("#"):
                freq_mult, data_format, _ = _parse_option_line(stripped)
                continue

            tokens = stripped.split()
            if len(tokens) != 3:
                raise ValueError(f"{path}:{lineno}: expected 3 values for a one-port row, got {len(tokens)}")
            try:
                freq, v1, v2 = (float(t) for t in tokens)
            except ValueError as e:
                raise ValueError(f"{path}:{lineno}: {e}") from e

            db, phase, mag = _to_db_phase(v1, v2, data_format)
            points.append(SParameterPoint(
                freq_ghz=freq * freq_mult / 1.0e9,
                s11_mag_db=db,
                s11_phase_deg=phase,
                vswr=vswr_from_gamma(complex(mag, 0.0))
            ))

    if not points:
        raise ValueError(f"No data points found in {path}")
    return points
