"""Time-domain signal statistics."""
from .analysis import SignalStats, analyze_signal, gaussian_pulse, probe_spectrum

__all__ = ['SignalStats', 'analyze_signal', 'gaussian_pulse', 'probe_spectrum']
