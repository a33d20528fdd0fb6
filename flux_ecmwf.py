import logging

import numpy as np
import constants as ct
from psi import psi_h_ecmwf, psi_m_ecmwf
from thermodynamics import one_on_l, ri_bulk, visc_air
from utilities import TurbResult, as_fields, check_n_itt, heights_equal, is_stable, sign_floor

logger = logging.getLogger(__name__)


def transfer_coefficients(func_m, func_h, func_q):
    """Bulk transfer coefficients from the converged log-profile functions

    Arguments:
        func_m (:obj:`ndarray`): log(zu/z0)  - psi_m(zu/L) + psi_m(z0/L)
        func_h (:obj:`ndarray`): log(zu/z0t) - psi_h(zu/L) + psi_h(z0t/L)
        func_q (:obj:`ndarray`): log(zu/z0q) - psi_h(zu/L) + psi_h(z0q/L)

    Returns:
        tuple(:obj:`ndarray`, :obj:`ndarray`, :obj:`ndarray`): Cd, Ch, Ce
    """
    k2 = ct.KARMAN * ct.KARMAN
    return (k2 / (func_m * func_m),
            k2 / (func_m * func_h),
            k2 / (func_m * func_q))


def roughness_lengths(ustar, nu_air):
    """Roughness lengths (m) for momentum, heat and humidity, all capped at 1 mm

    Arguments:
        ustar (:obj:`ndarray`): friction velocity (m/s)
        nu_air (:obj:`ndarray`): kinematic viscosity of air (m^2/s)

    Reference:
        IFS documentation Cy31r1, Part IV, Chap. 3, eq. 3.26
    """
    zvisc = nu_air / ustar
    z0 = np.minimum(np.abs(ct.ALPHA_M * zvisc + ct.CHARN0_ECMWF * ustar * ustar / ct.G), 0.001)
    z0t = np.minimum(np.abs(ct.ALPHA_H * zvisc), 0.001)
    z0q = np.minimum(np.abs(ct.ALPHA_Q * zvisc), 0.001)
    return z0, z0t, z0q


def _profile_functions(zu, z0, z0t, linv):
    zeta_u = zu * linv
    func_m = np.log(zu) - np.log(z0) - psi_m_ecmwf(zeta_u) + psi_m_ecmwf(z0 * linv)
    func_h = np.log(zu) - np.log(z0t) - psi_h_ecmwf(zeta_u) + psi_h_ecmwf(z0t * linv)
    return func_m, func_h


def turb_ecmwf(zt, zu, t_s, t_zt, q_s, q_zt, u_zu, n_itt=ct.NB_ITT,
               skin=None, skin_state=None):
    """Turbulent transfer coefficients of surface fluxes according to IFS doc. (cycle 45r1)

    If zt /= zu, air temperature and humidity are adjusted from zt to zu.
    Returns the effective bulk wind speed at zu to be used in the bulk formulas.

    The solver performs exactly ``n_itt`` sweeps, there is no convergence
    test. Implausible inputs (zero wind, masked cells filled with zeros)
    never raise: intermediate quantities are clamped to safe ranges.

    Arguments:
        zt (float): height for temperature and specific humidity of air (m)
        zu (float): height for wind speed (usually 10m) (m)
        t_s (:obj:`ndarray`): bulk sea surface temperature (K)
        t_zt (:obj:`ndarray`): potential air temperature at zt (K)
        q_s (:obj:`ndarray`): SSQ, saturation specific humidity at t_s (kg/kg),
            recomputed when a skin correction is used
        q_zt (:obj:`ndarray`): specific humidity of air at zt (kg/kg)
        u_zu (:obj:`ndarray`): scalar wind speed at zu (m/s)
        n_itt (int): number of iterations
        skin (:obj:`skin_ecmwf.SkinCorrection`): cool-skin / warm-layer correction,
            applied after each iteration (None: not used)
        skin_state (:obj:`skin_ecmwf.SkinState`): skin state at the beginning of
            the time step (None: initial state), only with ``skin``

    Returns:
        tuple(TurbResult, SkinState): SkinState is None when ``skin`` is None

    Reference:
        IFS Documentation - Cy45r1, Part IV: Physical Processes, Chap. 3, ECMWF (2018)
    """
    n_itt = check_n_itt(n_itt)
    (t_s, t_zt, q_s, q_zt, u_zu), shape = as_fields(t_s, t_zt, q_s, q_zt, u_zu)

    l_zt_equal_zu = heights_equal(zt, zu)

    if skin is not None:
        if skin.shape not in ((), shape):
            raise ValueError(f'skin correction fields of shape {skin.shape} '
                             f'do not match the input fields of shape {shape}')
        if skin_state is None:
            skin_state = skin.init_state(shape)
        elif skin_state.shape not in ((), shape):
            raise ValueError(f'skin state of shape {skin_state.shape} '
                             f'does not match the input fields of shape {shape}')
        # backing up the bulk SST
        sst = t_s
        t_s, q_s = skin.first_guess(sst)
    elif skin_state is not None:
        raise ValueError('a skin state is only used together with a skin correction')

    new_state = None

    logger.debug('turb_ecmwf: zt=%s zu=%s n_itt=%d shape=%s skin=%s',
                 zt, zu, n_itt, shape, skin is not None)

    # first guess of temperature and humidity at height zu,
    # whatever is given over masked regions
    t_zu = np.maximum(t_zt, 180.)
    q_zu = np.maximum(q_zt, 1.e-6)

    # pot. temp. difference (and we don't want it to be 0!)
    dt_zu = sign_floor(t_zu - t_s, ct.DT_MIN)
    dq_zu = sign_floor(q_zu - q_s, ct.DQ_MIN)

    znu_a = visc_air(t_zu)

    # initial guess for wind gustiness contribution
    u_blk = np.sqrt(u_zu * u_zu + ct.WGUST0 * ct.WGUST0)

    # first guess z0 == 0.0001
    ztmp0 = np.log(zu * 10000.)
    ztmp1 = np.log(10. * 10000.)
    u_star = 0.035 * u_blk * ztmp1 / ztmp0   # (u* = 0.035*Un10)

    z0 = ct.CHARN0_ECMWF * u_star * u_star / ct.G + ct.ALPHA_M * znu_a / u_star
    z0 = np.minimum(np.maximum(np.abs(z0), 1.e-9), 1.)

    z0t = 1. / (0.1 * np.exp(ct.KARMAN / (0.00115 / (ct.KARMAN / ztmp1))))
    z0t = np.minimum(np.maximum(np.abs(z0t), 1.e-9), 1.)
    z0q = z0t

    # first guess of Cd
    cd = (ct.KARMAN / ztmp0)**2

    ztmp0 = ct.KARMAN * ct.KARMAN / np.log(zt / z0t) / cd

    # bulk Richardson number
    ri = ri_bulk(zu, t_s, t_zu, q_s, q_zu, u_blk)

    # first estimate of zeta_u, depending on the sign of the bulk Richardson number
    with np.errstate(divide='ignore', invalid='ignore'):
        zeta_unst = ztmp0 * ri / (1. - ri * ct.ZI0 * 0.004 * ct.BETA0**3 / zu)
    zeta_u = np.where(is_stable(ri) > 0., ztmp0 * ri + 27. / 9. * ri, zeta_unst)

    # first guess M-O stability dependent scaling params (u*, t*, q*) to estimate z0 and z/L
    ztmp0 = ct.KARMAN / (np.log(zu / z0t) - psi_h_ecmwf(zeta_u))

    u_star = np.maximum(u_blk * ct.KARMAN / (np.log(zu) - np.log(z0) - psi_m_ecmwf(zeta_u)), 1.e-9)
    t_star = dt_zu * ztmp0
    q_star = dq_zu * ztmp0

    if not l_zt_equal_zu:
        # first update of values at zu, zt*zeta_u/zu == zeta_t
        ztmp1 = np.log(zt / zu) + psi_h_ecmwf(zeta_u) - psi_h_ecmwf(zt * zeta_u / zu)
        t_zu = t_zt - t_star / ct.KARMAN * ztmp1
        q_zu = np.maximum(q_zt - q_star / ct.KARMAN * ztmp1, 0.)

        dt_zu = sign_floor(t_zu - t_s, ct.DT_MIN)
        dq_zu = sign_floor(q_zu - q_s, ct.DQ_MIN)

    # first guess of inverse of Obukhov length
    linv = one_on_l(t_zu, q_zu, u_star, t_star, q_star)

    # functions such as u* = U_blk*vkarmn/func_m
    func_m, func_h = _profile_functions(zu, z0, z0t, linv)

    for _ in range(n_itt):

        # bulk Richardson number at z=zu (eq. 3.25)
        ri = ri_bulk(zu, t_s, t_zu, q_s, q_zu, u_blk)

        # new estimate of the inverse of the Obukhov length (eq. 3.23)
        linv = ri * func_m * func_m / func_h / zu
        linv = np.sign(linv) * np.minimum(np.abs(linv), ct.LINV_MAX)

        # update func_m with new linv (zu rather than zu + z0, z0 is tiny wrt zu)
        func_m = np.log(zu) - np.log(z0) - psi_m_ecmwf(zu * linv) + psi_m_ecmwf(z0 * linv)

        # roughness lengths
        u_star = u_blk * ct.KARMAN / func_m
        z0, z0t, z0q = roughness_lengths(u_star, znu_a)

        # wind gustiness in unstable conditions only (linv < 0), eq. 3.17, 3.18 and 3.8
        zgust2 = ct.BETA0 * ct.BETA0 * u_star * u_star\
            * np.maximum(-ct.ZI0 * linv / ct.KARMAN, 0.)**(2. / 3.)
        u_blk = np.maximum(np.sqrt(u_zu * u_zu + zgust2), ct.UBLK_MIN)

        if not l_zt_equal_zu:
            # "theta" and "q" at zu, and air-sea differences
            zpsi_h_u = psi_h_ecmwf(zu * linv)
            zpsi_h_t = psi_h_ecmwf(zt * linv)

            zpsi_h_0 = psi_h_ecmwf(z0t * linv)
            ztmp0 = zpsi_h_u - zpsi_h_0
            t_star = dt_zu * ct.KARMAN / (np.log(zu) - np.log(z0t) - ztmp0)
            ztmp1 = np.log(zt / zu) + ztmp0 - zpsi_h_t + zpsi_h_0
            t_zu = t_zt - t_star / ct.KARMAN * ztmp1

            zpsi_h_0 = psi_h_ecmwf(z0q * linv)
            ztmp0 = zpsi_h_u - zpsi_h_0
            q_star = dq_zu * ct.KARMAN / (np.log(zu) - np.log(z0q) - ztmp0)
            ztmp1 = np.log(zt / zu) + ztmp0 - zpsi_h_t + zpsi_h_0
            q_zu = q_zt - q_star / ct.KARMAN * ztmp1

        # updated z0, z0t and linv
        func_m, func_h = _profile_functions(zu, z0, z0t, linv)

        if skin is not None:
            t_s, q_s, new_state = skin(skin_state, zu, sst, t_s, q_s, t_zu, q_zu,
                                       u_star, t_star, q_star, u_zu, u_blk, latest=new_state)

        if skin is not None or not l_zt_equal_zu:
            dt_zu = sign_floor(t_zu - t_s, ct.DT_MIN)
            dq_zu = sign_floor(q_zu - q_s, ct.DQ_MIN)

    func_q = np.log(zu / z0q) - psi_h_ecmwf(zu * linv) + psi_h_ecmwf(z0q * linv)
    cd, ch, ce = transfer_coefficients(func_m, func_h, func_q)

    with np.errstate(divide='ignore'):
        obukhov_length = 1. / linv
    un10 = u_star / ct.KARMAN * np.log(10. / z0)

    result = TurbResult(cd, ch, ce, t_zu, q_zu, u_blk, z0, u_star, linv, obukhov_length, un10,
                        t_s, q_s)

    return result, new_state
