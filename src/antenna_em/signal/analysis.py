"""Statistics and test pulses for time-domain probe records."""
from dataclasses import dataclass
from typing import Tuple, Union
import numpy as np


@dataclass
class SignalStats:
    """Summary of a sampled signal.

    Attributes:
        peak: Largest absolute sample
        rms: Root mean square
        papr_db: Peak-to-average power ratio in dB (0 for a zero signal)
        average: Arithmetic mean
    """
    peak: float
    rms: float
    papr_db: float
    average: float


def analyze_signal(samples: np.ndarray) -> SignalStats:
    """
    Compute peak, RMS, PAPR and mean of a probe record.

    Args:
        samples: Real samples; an empty record gives all zeros

    Returns:
        SignalStats
    """
    samples = np.asarray(samples, dtype=np.float64)
    if samples.size == 0:
        return SignalStats(peak=0.0, rms=0.0, papr_db=0.0, average=0.0)

    peak = float(np.max(np.abs(samples)))
    rms = float(np.sqrt(np.mean(samples ** 2)))
    papr = (peak * peak) / (rms * rms) if rms > 0 else 0.0

    return SignalStats(
        peak=peak,
        rms=rms,
        papr_db=float(10 * np.log10(papr)) if papr > 0 else 0.0,
        average=float(np.mean(samples))
    )


def gaussian_pulse(
    t: Union[float, np.ndarray],
    center: float,
    width: float
) -> Union[float, np.ndarray]:
    """Unit-peak Gaussian exp(-(t - center)² / (2·width²))."""
    dt = np.asarray(t, dtype=np.float64) - center
    pulse = np.exp(-(dt * dt) / (2 * width * width))
    if np.ndim(pulse) == 0:
        return float(pulse)
    return pulse


def probe_spectrum(samples: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    One-sided magnitude spectrum of a probe record.

    Returns:
        freqs: Frequency in cycles per time step
        magnitude: |FFT| normalised by the record length
    """
    samples = np.asarray(samples, dtype=np.float64)
    if samples.size == 0:
        return np.zeros(0), np.zeros(0)
    spectrum = np.fft.rfft(samples)
    freqs = np.fft.rfftfreq(len(samples))
    return freqs, np.abs(spectrum) / len(samples)
