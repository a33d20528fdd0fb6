import numpy as np
import constants as ct
from utilities import is_stable


# 5/0.35, recurring term of the stable branch of the ECMWF functions
_ZC = 5. / 0.35


def psi_m_ecmwf(zeta):
    """Universal profile stability function for momentum, ECMWF

    zeta = 0 takes the stable branch, which is exactly 0 there.

    Argument:
        zeta (:obj:`ndarray`): stability parameter z/L, clamped to <= 5

    Reference:
        IFS documentation Cy31r1, Part IV, Chap. 3, eq. 3.20 and 3.22
    """
    zzeta = np.minimum(zeta, ct.ZETA_MAX_ECMWF)

    with np.errstate(over='ignore', invalid='ignore'):
        # unstable (Paulson 1970)
        zx = np.sqrt(np.abs(1. - 16. * zzeta))
        ztmp = (1. + np.sqrt(zx))**2
        psi_unst = np.log(0.125 * ztmp * (1. + zx)) - 2. * np.arctan(np.sqrt(zx)) + 0.5 * np.pi

        # stable
        psi_stab = -2. / 3. * (zzeta - _ZC) * np.exp(-0.35 * zzeta) - zzeta - 2. / 3. * _ZC

    return np.where(is_stable(zzeta) > 0., psi_stab, psi_unst)


def psi_h_ecmwf(zeta):
    """Universal profile stability function for temperature and humidity, ECMWF

    Argument:
        zeta (:obj:`ndarray`): stability parameter z/L, clamped to <= 5

    Reference:
        IFS documentation Cy31r1, Part IV, Chap. 3, eq. 3.19, 3.20 and 3.22
    """
    zzeta = np.minimum(zeta, ct.ZETA_MAX_ECMWF)

    with np.errstate(over='ignore', invalid='ignore'):
        # unstable (Paulson 1970), zx**2 is (1/phi_m)**2
        zx = np.abs(1. - 16. * zzeta)**0.25
        psi_unst = 2. * np.log(0.5 * (1. + zx * zx))

        # stable, abs() keeps NaNs of the unused branch out when unstable
        psi_stab = -2. / 3. * (zzeta - _ZC) * np.exp(-0.35 * zzeta)\
            - np.abs(1. + 2. / 3. * zzeta)**1.5 - 2. / 3. * _ZC + 1.

    return np.where(is_stable(zzeta) > 0., psi_stab, psi_unst)


def psimhu(xd):
    """Unstable part of psi_m

    Argument:
        xd (:obj:`ndarray`): (1 - 16 z/L)**0.25
    """
    return np.log((1.0 + xd * (2.0 + xd)) * (1.0 + xd * xd) / 8.0)\
        - 2.0 * np.arctan(xd) + 0.5 * np.pi


def psixhu(xd):
    """Unstable part of psi_h

    Argument:
        xd (:obj:`ndarray`): (1 - 16 z/L)**0.25
    """
    return 2.0 * np.log((1.0 + xd * xd) / 2.0)


def psi_m_ncar(zeta):
    """Universal profile stability function for momentum, NCAR

    Argument:
        zeta (:obj:`ndarray`): stability parameter z/L

    Reference:
        Large, W. G., & Yeager, S. G. (2004). Diurnal to decadal global forcing
        for ocean and sea-ice models, NCAR Technical Note NCAR/TN-460+STR.
    """
    stable = is_stable(zeta)
    xqq = np.sqrt(np.maximum(np.sqrt(np.abs(1.0 - 16.0 * zeta)), 1.0))
    return -5.0 * zeta * stable + (1.0 - stable) * psimhu(xqq)


def psi_h_ncar(zeta):
    """Universal profile stability function for temperature and humidity, NCAR

    Argument:
        zeta (:obj:`ndarray`): stability parameter z/L
    """
    stable = is_stable(zeta)
    xqq = np.sqrt(np.maximum(np.sqrt(np.abs(1.0 - 16.0 * zeta)), 1.0))
    return -5.0 * zeta * stable + (1.0 - stable) * psixhu(xqq)


# names used by the public API
psi_momentum = psi_m_ecmwf
psi_heat = psi_h_ecmwf
