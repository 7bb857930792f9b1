"""Friis link budget and free-space path loss."""
from dataclasses import dataclass
import numpy as np

# FSPL constant for distance in km and frequency in GHz: 20·log10(4π·1e12/c)
FSPL_CONSTANT_DB = 92.45

# Thermal noise floor kTB at 290 K over a 20 MHz channel
NOISE_FLOOR_DBM = -101.0


@dataclass
class LinkBudgetParams:
    """Inputs of a point-to-point link.

    Attributes:
        freq_ghz: Carrier frequency
        tx_power_dbm: Transmit power
        tx_gain_dbi: Transmit antenna gain
        rx_gain_dbi: Receive antenna gain
        distance_km: Link distance
        rx_sensitivity_dbm: Receiver sensitivity
        losses_db: Cable, connector and other losses
    """
    freq_ghz: float
    tx_power_dbm: float
    tx_gain_dbi: float
    rx_gain_dbi: float
    distance_km: float
    rx_sensitivity_dbm: float
    losses_db: float = 0.0

    @classmethod
    def from_config(cls, config) -> "LinkBudgetParams":
        """Build from a SimulationConfig."""
        return cls(
            freq_ghz=config.frequency_ghz,
            tx_power_dbm=config.tx_power_dbm,
            tx_gain_dbi=config.tx_gain_dbi,
            rx_gain_dbi=config.rx_gain_dbi,
            distance_km=config.distance_km,
            rx_sensitivity_dbm=config.rx_sensitivity_dbm,
            losses_db=config.losses_db
        )


@dataclass
class LinkBudgetResult:
    """Link budget outcome (all dB / dBm)."""
    fspl_db: float
    rx_power_dbm: float
    margin_db: float
    snr_db: float
    is_linked: bool


def calculate_fspl(distance_km: float, freq_ghz: float) -> float:
    """
    Free-space path loss in dB.

    FSPL = 20·log10(d_km) + 20·log10(f_GHz) + 92.45

    Args:
        distance_km: Distance in km
        freq_ghz: Frequency in GHz

    Returns:
        Path loss in dB, 0 when either input is not positive
    """
    if distance_km <= 0 or freq_ghz <= 0:
        return 0.0
    return float(20 * np.log10(distance_km) + 20 * np.log10(freq_ghz) + FSPL_CONSTANT_DB)


def calculate_link_budget(params: LinkBudgetParams) -> LinkBudgetResult:
    """
    Evaluate Pr = Pt + Gt + Gr - FSPL - L against sensitivity and noise.

    Args:
        params: Link parameters

    Returns:
        LinkBudgetResult
    """
    fspl = calculate_fspl(params.distance_km, params.freq_ghz)
    rx_power = (params.tx_power_dbm + params.tx_gain_dbi + params.rx_gain_dbi
                - fspl - params.losses_db)
    margin = rx_power - params.rx_sensitivity_dbm

    return LinkBudgetResult(
        fspl_db=fspl,
        rx_power_dbm=rx_power,
        margin_db=margin,
        snr_db=rx_power - NOISE_FLOOR_DBM,
        is_linked=margin > 0
    )


def calculate_max_range_km(
    freq_ghz: float,
    tx_power_dbm: float,
    total_gain_dbi: float,
    rx_sensitivity_dbm: float,
    losses_db: float
) -> float:
    """
    Distance at which the link margin reaches zero.

    Inverts the FSPL formula for the available budget
    Pt + G - sensitivity - losses.

    Args:
        freq_ghz: Frequency in GHz
        tx_power_dbm: Transmit power
        total_gain_dbi: Sum of transmit and receive gains
        rx_sensitivity_dbm: Receiver sensitivity
        losses_db: System losses

    Returns:
        Maximum range in km, 0 for non-positive frequency
    """
    if freq_ghz <= 0:
        return 0.0
    budget = tx_power_dbm + total_gain_dbi - rx_sensitivity_dbm - losses_db
    log_dist = (budget - 20 * np.log10(freq_ghz) - FSPL_CONSTANT_DB) / 20
    return float(10 ** log_dist)
