import logging

import numpy as np
import constants as ct
from psi import psi_h_ncar, psi_m_ncar
from utilities import TurbResult, as_fields, check_n_itt, heights_equal, is_stable, sign_floor

logger = logging.getLogger(__name__)


def cd_n10_ncar(u10n):
    """Neutral drag coefficient at 10m

    Argument:
        u10n (:obj:`ndarray`): neutral wind speed at 10m (m/s), floored at 0.5 m/s

    Returns:
        :obj:`ndarray`

    Reference:
        Large, W. G., & Yeager, S. G. (2009). The global climatology of an interannually
        varying air-sea flux data set, Climate Dynamics, 33, pp. 341-364, eq. 11a and 11b
    """
    zw = np.maximum(u10n, ct.UMIN_O)
    zw6 = zw**6
    zcd = 1.e-3 * (2.7 / zw + 0.142 + zw / 13.09 - 3.14807e-10 * zw6)
    # above 33 m/s Cd_n10 is constant
    zcd = np.where(zw > ct.UMAX_CDN, 2.34e-3, zcd)
    return np.maximum(zcd, 0.1e-3)


def ce_n10_ncar(sqrt_cdn10):
    return 1.e-3 * 34.6 * sqrt_cdn10


def ch_n10_ncar(sqrt_cdn10, stable):
    return 1.e-3 * sqrt_cdn10 * (18. * stable + 32.7 * (1. - stable))


def _stability(zu, t_zu, q_zu, ustar, tstar, qstar):
    # z/L, the virtual temperature flux uses the air values at zu
    thv = t_zu * (1.0 + ct.RCTV0 * q_zu)
    hol = ct.KARMAN * ct.G * zu *\
        (tstar / thv + qstar / (1.0 / ct.RCTV0 + q_zu)) / (ustar * ustar)
    return np.minimum(np.abs(hol), ct.ZETA_MAX_NCAR) * np.sign(hol)


def turb_ncar(zt, zu, t_s, t_zt, q_s, q_zt, u_zu, n_itt=ct.NB_ITT,
              skin=None, skin_state=None):
    """Turbulent transfer coefficients of surface fluxes according to Large & Yeager (2004, 2009)

    If zt /= zu, air temperature and humidity are adjusted from zt to zu.
    Neutral coefficients are shifted to measurement height and stability
    at each iteration. There is no cool-skin / warm-layer correction
    for this algorithm.

    Arguments:
        zt (float): height for temperature and specific humidity of air (m)
        zu (float): height for wind speed (usually 10m) (m)
        t_s (:obj:`ndarray`): sea surface temperature (K)
        t_zt (:obj:`ndarray`): potential air temperature at zt (K)
        q_s (:obj:`ndarray`): sea surface specific humidity (kg/kg)
        q_zt (:obj:`ndarray`): specific humidity of air at zt (kg/kg)
        u_zu (:obj:`ndarray`): scalar wind speed at zu (m/s)
        n_itt (int): number of iterations

    Returns:
        tuple(TurbResult, None)

    Reference:
        Large, W. G., & Yeager, S. G. (2004). Diurnal to decadal global forcing
        for ocean and sea-ice models: the data sets and flux climatologies,
        NCAR Technical Note NCAR/TN-460+STR.
    """
    if skin is not None or skin_state is not None:
        raise ValueError('the NCAR algorithm has no cool-skin/warm-layer correction')

    n_itt = check_n_itt(n_itt)
    (t_s, t_zt, q_s, q_zt, u_zu), shape = as_fields(t_s, t_zt, q_s, q_zt, u_zu)

    l_zt_equal_zu = heights_equal(zt, zu)

    logger.debug('turb_ncar: zt=%s zu=%s n_itt=%d shape=%s', zt, zu, n_itt, shape)

    u_blk = np.maximum(ct.UMIN_O, u_zu)

    # first guess: air values at zu are the ones at zt
    t_zu = np.maximum(t_zt, 180.)
    q_zu = np.maximum(q_zt, 1.e-6)

    delt = sign_floor(t_zu - t_s, ct.DT_MIN)
    delq = sign_floor(q_zu - q_s, ct.DQ_MIN)

    # neutral coefficients, z/L = 0.0
    stable = is_stable(delt)
    cd_n10 = cd_n10_ncar(u_blk)
    sqrt_cdn10 = np.sqrt(cd_n10)
    ce_n10 = ce_n10_ncar(sqrt_cdn10)
    ch_n10 = ch_n10_ncar(sqrt_cdn10, stable)

    # first guess of the transfer coefficients at zu
    cd = cd_n10
    ch = ch_n10
    ce = ce_n10

    alz = np.log(zu / ct.ZREF)

    for _ in range(n_itt):

        sqrt_cd = np.sqrt(cd)

        # turbulent scales from the current coefficients
        ustar = sqrt_cd * u_blk
        tstar = ch / sqrt_cd * delt
        qstar = ce / sqrt_cd * delq

        # compute stability & evaluate all stability functions
        hol = _stability(zu, t_zu, q_zu, ustar, tstar, qstar)
        psimh = psi_m_ncar(hol)
        psixh = psi_h_ncar(hol)

        if not l_zt_equal_zu:
            # theta and q at zu
            hol_t = np.minimum(np.abs(zt * hol / zu), ct.ZETA_MAX_NCAR) * np.sign(hol)
            ztmp1 = np.log(zt / zu) + psixh - psi_h_ncar(hol_t)
            t_zu = t_zt - tstar / ct.KARMAN * ztmp1
            q_zu = np.maximum(q_zt - qstar / ct.KARMAN * ztmp1, 0.)
            delt = sign_floor(t_zu - t_s, ct.DT_MIN)
            delq = sign_floor(q_zu - q_s, ct.DQ_MIN)

        # shift wind speed to 10m and neutral stability using old coefficient
        u10n = u_blk / (1.0 + sqrt_cdn10 / ct.KARMAN * (alz - psimh))

        # update transfer coeffs at 10m and neutral stability
        stable = is_stable(hol)
        cd_n10 = cd_n10_ncar(u10n)
        sqrt_cdn10 = np.sqrt(cd_n10)
        ce_n10 = ce_n10_ncar(sqrt_cdn10)
        ch_n10 = ch_n10_ncar(sqrt_cdn10, stable)

        # shift all coeffs to measurement height and stability
        ztmp0 = 1.0 + sqrt_cdn10 / ct.KARMAN * (alz - psimh)
        cd = cd_n10 / (ztmp0 * ztmp0)
        ztmp2 = np.sqrt(cd / cd_n10)

        xlogt = alz - psixh
        ch = ch_n10 * ztmp2 / (1.0 + ch_n10 * xlogt / (ct.KARMAN * sqrt_cdn10))
        ce = ce_n10 * ztmp2 / (1.0 + ce_n10 * xlogt / (ct.KARMAN * sqrt_cdn10))

    ustar = np.sqrt(cd) * u_blk
    z0 = ct.ZREF * np.exp(-ct.KARMAN / sqrt_cdn10)

    linv = hol / zu
    with np.errstate(divide='ignore'):
        obukhov_length = 1. / linv

    result = TurbResult(cd, ch, ce, t_zu, q_zu, u_blk, z0, ustar, linv, obukhov_length, u10n,
                        t_s, q_s)
    return result, None
