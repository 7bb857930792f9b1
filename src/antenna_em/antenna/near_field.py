"""Hertzian dipole near-field magnitudes."""
from enum import Enum
from typing import Union
import numpy as np

# Regularisation of the 1/(kr)^n terms at the origin
TERM_EPS = 0.001


class FieldQuantity(str, Enum):
    E = "E"
    H = "H"
    POYNTING = "Poynting"


class FieldRegion(str, Enum):
    REACTIVE = "reactive"
    INTERMEDIATE = "intermediate"
    RADIATING = "radiating"


def _terms(r_lambda):
    kr = 2 * np.pi * np.asarray(r_lambda, dtype=np.float64)
    t1 = 1.0 / (kr ** 3 + TERM_EPS)
    t2 = 1.0 / (kr ** 2 + TERM_EPS)
    t3 = 1.0 / (kr + TERM_EPS)
    return t1, t2, t3


def dipole_near_field(
    r_lambda: Union[float, np.ndarray],
    theta: Union[float, np.ndarray],
    field: FieldQuantity = FieldQuantity.E
) -> Union[float, np.ndarray]:
    """
    Relative field magnitude around a short (Hertzian) dipole on the z axis.

    E keeps the reactive 1/(kr)³, intermediate 1/(kr)² and radiating 1/kr
    terms, H the 1/(kr)² and 1/kr terms. Poynting is the product |E|·|H|.

    Args:
        r_lambda: Distance from the dipole in wavelengths
        theta: Polar angle(s) in radians
        field: Quantity to evaluate

    Returns:
        Unnormalised magnitude, broadcast over r_lambda and theta
    """
    field = FieldQuantity(field)
    t1, t2, t3 = _terms(r_lambda)
    sin_t = np.abs(np.sin(theta))

    e_r = 2 * np.cos(theta) * (t1 + t2)
    e_theta = sin_t * (t1 + t2 + t3)
    e_mag = np.sqrt(e_r ** 2 + e_theta ** 2)
    h_mag = sin_t * (t2 + t3)

    if field is FieldQuantity.E:
        result = e_mag
    elif field is FieldQuantity.H:
        result = h_mag
    else:
        result = e_mag * h_mag

    if np.ndim(result) == 0:
        return float(result)
    return result


def field_region(r_lambda: float) -> FieldRegion:
    """
    Classify a distance from a small antenna.

    Reactive below kr = 1 (r < λ/2π), radiating from one wavelength out,
    intermediate in between.
    """
    if 2 * np.pi * r_lambda < 1.0:
        return FieldRegion.REACTIVE
    if r_lambda < 1.0:
        return FieldRegion.INTERMEDIATE
    return FieldRegion.RADIATING
