"""Richards & Wolf diffraction integrand with Török-Varga aberration.

The field near focus is described by three angular integrals I0, I1, I2
over the aperture angle θ. Their integrands combine Fresnel transmission
through the specimen/coverslip/immersion stratification, Bessel terms of
the lateral distance, and the phase of the optical path difference.

References:
    Richards, B. & Wolf, E. (1959). "Electromagnetic diffraction in optical
    systems II". Proc. R. Soc. London A 253: 358-379.

    Török, P. & Varga, P. (1997). "Electromagnetic diffraction of light
    focused through a stratified medium". Applied Optics 36(11): 2305-2312.

    Aguet, F. (2009). "Super-Resolution Fluorescence Microscopy Based on
    Physical Models". EPFL thesis, p. 52.
"""

from typing import Tuple, Union

import numpy as np
from scipy.special import j0

from .optics import Optics

__all__ = ["compute_transmission", "diffraction_integrand"]


def compute_transmission(
    sin_theta: np.ndarray, cos_theta: np.ndarray, optics: Optics
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Compute Fresnel transmission products through the stratified medium.

    Args:
        sin_theta: sin(θ) in the immersion medium.
        cos_theta: cos(θ) in the immersion medium.
        optics: Optical parameters with ni, ns and ng.

    Returns:
        Tuple of (ts1ts2, tp1tp2, const_ns, sqrt_ns):
        - ts1ts2: product of s-polarization transmission coefficients
        - tp1tp2: product of p-polarization transmission coefficients
        - const_ns: tp1tp2 * sqrt_ns / ns
        - sqrt_ns: sqrt(ns² - ni² sin²θ), zero beyond the critical angle
    """
    ni, ns, ng = optics.ni, optics.ns, optics.ng
    ni_sin_sq = ni * ni * sin_theta * sin_theta

    # Evanescent beyond total internal reflection
    sqrt_ns = np.sqrt(np.maximum(ns * ns - ni_sin_sq, 0.0))
    sqrt_ng = np.sqrt(np.maximum(ng * ng - ni_sin_sq, 0.0))

    numerator = 4.0 * ni * cos_theta * sqrt_ng
    denom_s = (ni * cos_theta + sqrt_ng) * (sqrt_ng + sqrt_ns)
    denom_p = (ng * cos_theta + ni / ng * sqrt_ng) * (
        ns / ng * sqrt_ng + ng / ns * sqrt_ns
    )

    with np.errstate(divide="ignore", invalid="ignore"):
        ts1ts2 = np.where(denom_s > 0, numerator / denom_s, 0.0)
        tp1tp2 = np.where(denom_p > 0, numerator / denom_p, 0.0)

    const_ns = tp1tp2 * sqrt_ns / ns

    return ts1ts2, tp1tp2, const_ns, sqrt_ns


def diffraction_integrand(
    theta: Union[float, np.ndarray],
    r: float,
    optics: Optics,
) -> np.ndarray:
    """Evaluate the three complex partial integrands at angles θ.

    Args:
        theta: Integration angle(s) in [0, optics.upper_limit], scalar or
            1D array.
        r: Radial distance of the detector from the optical axis (m).
        optics: Optical parameters (defocus carried by ti - ti0).

    Returns:
        Complex array of shape (3,) + theta.shape holding (I0, I1, I2).

    Physics:
        B0 = √cosθ sinθ J0(x) (ts + tp √(ns² - ni² sin²θ) / ns)
        B1 = √cosθ sinθ J1(x) tp ni sinθ / ns
        B2 = √cosθ sinθ J2(x) (ts - tp √(ns² - ni² sin²θ) / ns)
        Ik = Bk exp(i k OPD),  x = k ni r sinθ

    Note:
        J1 is evaluated as J0 and J2 through the recurrence 2 J1 / x + J0
        (zero on axis). The OPD keeps only the particle position and the
        immersion thickness terms; tg and tg0 do not enter.
    """
    theta = np.asarray(theta, dtype=np.float64)
    sin_theta = np.sin(theta)
    cos_theta = np.cos(theta)
    sqrt_cos_sin = np.sqrt(cos_theta) * sin_theta
    ni = optics.ni

    ts1ts2, tp1tp2, const_ns, sqrt_ns = compute_transmission(
        sin_theta, cos_theta, optics
    )

    x = optics.kni * r * sin_theta
    J0 = j0(x)
    J1 = J0
    with np.errstate(divide="ignore", invalid="ignore"):
        J2 = np.where(x == 0, 0.0, 2.0 * J1 / x + J0)

    # Amplitudes; the phase aberration is applied below
    B0 = sqrt_cos_sin * J0 * (ts1ts2 + const_ns)
    B1 = sqrt_cos_sin * J1 * tp1tp2 * ni * sin_theta / optics.ns
    B2 = sqrt_cos_sin * J2 * (ts1ts2 - const_ns)

    # Optical path difference (m)
    sqrt_ni = np.sqrt(np.maximum(ni * ni - ni * ni * sin_theta * sin_theta, 0.0))
    opd = optics.particle_z * 1e-9 * sqrt_ns + (optics.ti - optics.ti0) * 1e-9 * sqrt_ni
    phase = np.exp(1j * optics.k * opd)

    return np.stack([B0, B1, B2]) * phase
