from collections import namedtuple

import numpy as np
import constants as ct
from thermodynamics import absolute_temperature, cp_air, l_vap, rho_air
from utilities import sign_floor


BulkFluxes = namedtuple('BulkFluxes', ['tau', 'qsen', 'qlat', 'evap', 'rho_air'])

# turbulent fluxes plus net shortwave and longwave radiation (None when not given)
SurfaceFluxes = namedtuple('SurfaceFluxes', BulkFluxes._fields + ('qsw', 'qlw'))


def bulk_formula(zu, ts, qs, ta, qa, cd, ch, ce, wnd, ublk, slp, ice=False):
    """Calculate bulk formula fluxes over open ocean or sea-ice

        wind stress = Tau = rhoA * Cd * Ublk * Ws
        Sensib Heat flux = Qsen = rhoA * Ch * Ublk * del.T * CpAir
        Latent Heat flux = Qlat = rhoA * Ce * Ublk * del.Q * Lvap (or Lsub over ice)
                         = -Evap * Lvap
        with del.T = Tair - Tsurf ; del.Q = Qair - Qsurf

    Arguments:
        zu (float): height of the air temperature, humidity and wind (m)
        ts (:obj:`ndarray`): sea-ice or sea surface temperature (K)
        qs (:obj:`ndarray`): surface specific humidity (kg/kg)
        ta (:obj:`ndarray`): pot. air temperature at zu (K)
        qa (:obj:`ndarray`): air specific humidity at zu (kg/kg)
        cd, ch, ce (:obj:`ndarray`): transfer coefficients
        wnd (:obj:`ndarray`): wind speed module at zu (m/s)
        ublk (:obj:`ndarray`): bulk wind speed at zu, gustiness included (m/s)
        slp (:obj:`ndarray`): sea-level pressure (Pa)
        ice (bool or :obj:`ndarray`): True over sea-ice

    Returns:
        BulkFluxes: tau  wind stress module          (N/m^2)
                    qsen sensible heat flux (>0 downward) (W/m^2)
                    qlat latent heat flux   (>0 downward) (W/m^2)
                    evap evaporation rate (>0 upward)  (kg/m^2/s)
                    rho_air air density at zu       (kg/m^3)
    """
    # absolute temperature at zu, air density needs it rather than theta
    taa = absolute_temperature(ta, qa, zu, ts)

    # density at zu, slp is given at sea level
    rho = rho_air(taa, qa, slp)
    rho = rho_air(taa, qa, slp - rho * ct.G * zu)

    urho = ublk * np.maximum(rho, 1.)

    tau = urho * cd * wnd
    zevap = urho * ce * (qa - qs)
    qsen = urho * ch * (ta - ts) * cp_air(qa)

    lath = np.where(ice, ct.LATSUB, l_vap(ts))
    qlat = lath * zevap
    evap = np.where(ice, np.maximum(-zevap, 0.), -zevap)

    return BulkFluxes(tau, qsen, qlat, evap, rho)


def qlw_net(dwlw, ts, ice=False):
    """Net longwave radiation at the surface (W/m^2, >0 downward)

    The emissivity is used both as IR albedo and as IR emissivity.

    Arguments:
        dwlw (:obj:`ndarray`): downwelling longwave radiation (W/m^2)
        ts (:obj:`ndarray`): surface temperature (K)
        ice (bool or :obj:`ndarray`): True over sea-ice
    """
    emiss = np.where(ice, ct.EMISS_I, ct.EMISS_W)
    zt2 = ts * ts
    return emiss * (dwlw - ct.STEBOL * zt2 * zt2)


def net_solar(dwsw, ice=False):
    """Net shortwave radiation absorbed by the surface (W/m^2)"""
    return np.where(ice, dwsw * (1. - ct.ICE_ALBEDO), dwsw * (1. - ct.OCEAN_ALBEDO))


def update_qnsol_tau(zu, ts, qs, ta, qa, ustar, tstar, qstar, wnd, ublk, slp, rad_lw):
    """Non-solar heat flux to the ocean and wind stress from the current state of a bulk algorithm

    Transfer coefficients are rebuilt from the turbulent scales
    (Cd = (u*/Ublk)^2, Ch = u* t*/(Ublk dT), Ce = u* q*/(Ublk dq)).

    Arguments:
        zu (float): height (m)
        ts (:obj:`ndarray`): water temperature at the air-sea interface (K)
        qs (:obj:`ndarray`): saturation specific humidity at ts (kg/kg)
        ta (:obj:`ndarray`): pot. air temperature at zu (K)
        qa (:obj:`ndarray`): specific humidity at zu (kg/kg)
        ustar, tstar, qstar (:obj:`ndarray`): turbulent scales
        wnd (:obj:`ndarray`): wind speed module at zu (m/s)
        ublk (:obj:`ndarray`): bulk wind speed at zu (m/s)
        slp (:obj:`ndarray`): sea-level pressure (Pa)
        rad_lw (:obj:`ndarray`): downwelling longwave radiation (W/m^2)

    Returns:
        tuple(:obj:`ndarray`, :obj:`ndarray`): Qlat + Qsen + Qlw (W/m^2), Tau (N/m^2)
    """
    zdt = sign_floor(ta - ts, ct.DT_MIN)
    zdq = sign_floor(qa - qs, ct.DQ_MIN)

    zz0 = ustar / ublk
    zcd = zz0 * zz0
    zch = zz0 * tstar / zdt
    zce = zz0 * qstar / zdq

    fluxes = bulk_formula(zu, ts, qs, ta, qa, zcd, zch, zce, wnd, ublk, slp)
    qlw = qlw_net(rad_lw, ts)

    return fluxes.qlat + fluxes.qsen + qlw, fluxes.tau
