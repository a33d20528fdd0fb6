import logging

import numpy as np
import constants as ct
from bulk_formula import SurfaceFluxes, bulk_formula, net_solar, qlw_net
from flux_ecmwf import turb_ecmwf
from flux_ncar import turb_ncar
from skin_ecmwf import SkinCorrection
from thermodynamics import potential_temperature, q_air_dp, q_air_rh, q_sat

logger = logging.getLogger(__name__)


# bulk algorithms available by name, all share the signature of turb_ecmwf
ALGORITHMS = {
    'ecmwf': turb_ecmwf,
    'ncar': turb_ncar,
}


def get_algorithm(algo):
    try:
        return ALGORITHMS[algo.lower()]
    except (KeyError, AttributeError):
        raise ValueError(f'unknown bulk algorithm {algo!r}, '
                         f'choose among {sorted(ALGORITHMS)}') from None


def solve_similarity(zt, zu, t_s, q_s, t_zt, q_zt, u_zu, n_itt=ct.NB_ITT, algo='ecmwf',
                     skin=None, skin_state=None):
    """Transfer coefficients and air properties at zu from Monin-Obukhov similarity

    Arguments:
        zt (float): height of air temperature and humidity (m)
        zu (float): height of wind speed (m)
        t_s (:obj:`ndarray`): surface temperature (K)
        q_s (:obj:`ndarray`): surface specific humidity (kg/kg)
        t_zt (:obj:`ndarray`): pot. air temperature at zt (K)
        q_zt (:obj:`ndarray`): air specific humidity at zt (kg/kg)
        u_zu (:obj:`ndarray`): wind speed at zu (m/s)
        n_itt (int): number of iterations
        algo (str): name of the bulk algorithm, see ALGORITHMS
        skin (:obj:`skin_ecmwf.SkinCorrection`): skin correction (None: not used)
        skin_state (:obj:`skin_ecmwf.SkinState`): skin state at the beginning of the time step

    Returns:
        TurbResult, or tuple(TurbResult, SkinState) when ``skin`` is given
    """
    turb = get_algorithm(algo)
    result, state = turb(zt, zu, t_s, t_zt, q_s, q_zt, u_zu, n_itt=n_itt,
                         skin=skin, skin_state=skin_state)
    if skin is None:
        return result
    return result, state


def air_humidity(hum_zt, t_zt, slp, hum='q'):
    """Specific humidity of air (kg/kg)

    Arguments:
        hum_zt (:obj:`ndarray`): specific humidity (kg/kg), relative humidity
            (fraction) or dew-point temperature (K)
        t_zt (:obj:`ndarray`): absolute air temperature (K)
        slp (:obj:`ndarray`): sea-level pressure (Pa)
        hum (str): 'q', 'rh' or 'dp', kind of ``hum_zt``
    """
    if hum == 'q':
        return np.asarray(hum_zt, dtype=float)
    if hum == 'rh':
        return q_air_rh(hum_zt, t_zt, slp)
    if hum == 'dp':
        return q_air_dp(hum_zt, slp)
    raise ValueError(f"unknown kind of air humidity {hum!r}, choose among 'q', 'rh', 'dp'")


def turbulent_fluxes(algo, zt, zu, sst, t_zt, hum_zt, u_zu, slp=ct.PATM, n_itt=ct.NB_ITT,
                     hum='q', rad_sw=None, rad_lw=None, use_cs=False, use_wl=False, dt=3600.,
                     skin_state=None, ice=False):
    """Turbulent fluxes at the air-sea (or air-ice) interface

    Arguments:
        algo (str): name of the bulk algorithm ('ecmwf', 'ncar')
        zt (float): height of air temperature and humidity (m)
        zu (float): height of wind speed (m)
        sst (:obj:`ndarray`): bulk sea surface (or ice surface) temperature (K)
        t_zt (:obj:`ndarray`): absolute air temperature at zt (K)
        hum_zt (:obj:`ndarray`): air humidity at zt, see ``hum``
        u_zu (:obj:`ndarray`): wind speed module at zu (m/s)
        slp (:obj:`ndarray`): sea-level pressure (Pa)
        n_itt (int): number of iterations
        hum (str): 'q' specific humidity (kg/kg), 'rh' relative humidity,
            'dp' dew-point temperature (K)
        rad_sw (:obj:`ndarray`): downwelling shortwave flux (W/m^2)
        rad_lw (:obj:`ndarray`): downwelling longwave flux (W/m^2)
        use_cs (bool): apply the cool-skin correction
        use_wl (bool): apply the warm-layer correction
        dt (float): time step of the warm-layer (s)
        skin_state (:obj:`skin_ecmwf.SkinState`): skin state at the beginning of the time step
        ice (bool or :obj:`ndarray`): True over sea-ice

    Returns:
        tuple(SurfaceFluxes, TurbResult, SkinState): the net solar and longwave fluxes
            use the albedo and emissivity of ice or water, SkinState is None without
            skin correction
    """
    q_zt = air_humidity(hum_zt, t_zt, slp, hum=hum)

    # potential temperature at zt
    theta_zt = potential_temperature(t_zt, q_zt, zt)

    q_s = np.where(ice, q_sat(sst, slp, over_ice=True),
                   ct.RDCT_QSAT_SALT * q_sat(sst, slp))

    # net solar flux, absorbed by the ocean or the ice
    qsw = None if rad_sw is None else net_solar(rad_sw, ice)

    skin = None
    if use_cs or use_wl:
        skin = SkinCorrection(rad_sw=qsw, rad_lw=rad_lw, slp=slp,
                              use_cs=use_cs, use_wl=use_wl, dt=dt)

    turb = get_algorithm(algo)
    result, state = turb(zt, zu, sst, theta_zt, q_s, q_zt, u_zu, n_itt=n_itt,
                         skin=skin, skin_state=skin_state)

    fluxes = bulk_formula(zu, result.t_s, result.q_s, result.t_zu, result.q_zu,
                          result.cd, result.ch, result.ce, u_zu, result.u_blk, slp, ice=ice)
    qlw = None if rad_lw is None else qlw_net(rad_lw, result.t_s, ice)

    logger.debug('turbulent_fluxes (%s): mean Qsen=%.2f W/m2, mean Qlat=%.2f W/m2',
                 algo, np.mean(fluxes.qsen), np.mean(fluxes.qlat))

    return SurfaceFluxes(*fluxes, qsw=qsw, qlw=qlw), result, state
