import numpy as np
import constants as ct


def virt_temp(ta, qa):
    """Virtual temperature (K)

    Absolute input temperature gives absolute virtual temperature,
    potential input gives potential virtual temperature.

    Arguments:
        ta (:obj:`ndarray`): absolute or potential air temperature (K)
        qa (:obj:`ndarray`): air specific humidity (kg/kg)
    """
    return np.asarray(ta) * (1. + ct.RCTV0 * np.asarray(qa))


def rho_air(tak, qa, slp):
    """Density of moist air (kg/m^3), floored at 0.8 kg/m^3

    Arguments:
        tak (:obj:`ndarray`): air temperature (K)
        qa (:obj:`ndarray`): air specific humidity (kg/kg)
        slp (:obj:`ndarray`): pressure (Pa)
    """
    return np.maximum(slp / (ct.RDAIR * virt_temp(tak, qa)), 0.8)


def visc_air(tak):
    """Kinematic viscosity of air (m^2/s)

    Argument:
        tak (:obj:`ndarray`): air temperature (K)
    """
    ztc = np.asarray(tak) - ct.RT0
    ztc2 = ztc * ztc
    return 1.326e-5 * (1. + 6.542e-3 * ztc + 8.301e-6 * ztc2 - 4.84e-9 * ztc2 * ztc)


def l_vap(tw):
    """Latent heat of vaporization of water (J/kg)

    Argument:
        tw (:obj:`ndarray`): water temperature (K)
    """
    return (2.501 - 0.00237 * (np.asarray(tw) - ct.RT0)) * 1.e6


def cp_air(qa):
    """Specific heat of moist air (J/K/kg)

    Argument:
        qa (:obj:`ndarray`): air specific humidity (kg/kg)
    """
    return ct.CPDAIR + ct.CPWV * np.asarray(qa)


def gamma_moist(tak, qa):
    """Moist adiabatic lapse-rate (K/m)

    Inputs are floored (T >= 180 K, q >= 1e-6) so that masked cells
    filled with zeros do not turn into NaNs.

    Arguments:
        tak (:obj:`ndarray`): air temperature (K)
        qa (:obj:`ndarray`): air specific humidity (kg/kg)

    Reference:
        http://glossary.ametsoc.org/wiki/Moist-adiabatic_lapse_rate
    """
    zta = np.maximum(tak, 180.)
    zqa = np.maximum(qa, 1.e-6)
    zwa = zqa / (1. - zqa)   # mixing ratio
    zirt = 1. / (ct.RDAIR * zta)
    zlvap = l_vap(tak)
    return ct.G * (1. + zlvap * zwa * zirt)\
        / (ct.CPDAIR + zlvap * zlvap * zwa * ct.REPS0 * zirt / zta)


def one_on_l(tha, qa, ustar, tstar, qstar):
    """Inverse of the Obukhov length (1/m), clamped to +-200

    The turbulent flux of virtual temperature is taken as
    -u* [ t* (1 + 0.61 q) + 0.61 theta q* ].

    Arguments:
        tha (:obj:`ndarray`): reference potential temperature of air (K)
        qa (:obj:`ndarray`): reference specific humidity of air (kg/kg)
        ustar (:obj:`ndarray`): friction velocity (m/s)
        tstar (:obj:`ndarray`): temperature scale (K)
        qstar (:obj:`ndarray`): humidity scale (kg/kg)
    """
    zqa = 1. + ct.RCTV0 * qa
    linv = ct.G * ct.KARMAN * (tstar * zqa + ct.RCTV0 * tha * qstar)\
        / np.maximum(ustar * ustar * tha * zqa, 1.e-9)
    return np.sign(linv) * np.minimum(np.abs(linv), ct.LINV_MAX)


def ri_bulk(dz, sst, tha, ssq, qa, ub):
    """Bulk Richardson number of the layer between the sea surface and dz

    The mean absolute temperature of the layer is estimated with two
    corrections of the moist lapse-rate, then the usual definition
    Ri = g dthv dz / (Tv U^2) is applied.

    There is no floor on ``ub``: a zero wind speed gives inf or NaN,
    callers have to pass a strictly positive wind (the bulk algorithms
    pass the floored bulk wind speed).

    Arguments:
        dz (float): height above the sea (m)
        sst (:obj:`ndarray`): sea surface temperature (K)
        tha (:obj:`ndarray`): pot. air temperature at dz (K)
        ssq (:obj:`ndarray`): sea surface specific humidity (kg/kg)
        qa (:obj:`ndarray`): air specific humidity at dz (kg/kg)
        ub (:obj:`ndarray`): bulk wind speed (m/s)

    Returns:
        :obj:`ndarray`
    """
    zqa = 0.5 * (qa + ssq)   # ~ mean q within the layer
    zta = 0.5 * (sst + tha - gamma_moist(tha, zqa) * dz)
    zta = 0.5 * (sst + tha - gamma_moist(zta, zqa) * dz)
    zgamma = gamma_moist(zta, zqa)

    # virtual SST (absolute == potential at z=0)
    zsstv = sst * (1. + ct.RCTV0 * ssq)

    # air-sea difference of virtual pot. temperature
    zdthv = tha * (1. + ct.RCTV0 * qa) - zsstv

    # ~ mean absolute virtual temperature within the layer
    ztv = 0.5 * (zsstv + (tha - zgamma * dz) * (1. + ct.RCTV0 * qa))

    return ct.G * zdthv * dz / (ztv * ub * ub)


def e_sat(tak):
    """Water vapor pressure at saturation over water (Pa)

    Argument:
        tak (:obj:`ndarray`): temperature (K), floored at 180 K

    Reference:
        Goff, J. A. (1957): Saturation pressure of water on the new Kelvin
        temperature scale, Transactions of the American Society of Heating
        and Ventilating Engineers, pp 347-354.
    """
    zta = np.maximum(tak, 180.)
    ztmp = ct.RT0 / zta
    return 100. * (10.**(10.79574 * (1. - ztmp) - 5.028 * np.log10(zta / ct.RT0)
                         + 1.50475e-4 * (1. - 10.**(-8.2969 * (zta / ct.RT0 - 1.)))
                         + 0.42873e-3 * (10.**(4.76955 * (1. - ztmp)) - 1.) + 0.78614))


def e_sat_ice(tak):
    """Water vapor pressure at saturation over ice (Pa)

    Argument:
        tak (:obj:`ndarray`): temperature (K), floored at 180 K
    """
    zta = np.maximum(tak, 180.)
    ztmp = ct.RT0_TRIPLE / zta
    zle = -9.09718 * (ztmp - 1.) - 3.56654 * np.log10(ztmp)\
        + 0.876793 * (1. - zta / ct.RT0_TRIPLE) + np.log10(6.1071)
    return 100. * 10.**zle


def saturation_vapor_pressure(tak, over_ice=False):
    """Vapor pressure at saturation (Pa), over water or over ice"""
    if over_ice:
        return e_sat_ice(tak)
    return e_sat(tak)


def q_sat(tak, ps, over_ice=False):
    """Saturation specific humidity (kg/kg)

    Arguments:
        tak (:obj:`ndarray`): temperature (K)
        ps (:obj:`ndarray`): atmospheric pressure (Pa)
        over_ice (bool): use the saturation vapor pressure over ice
    """
    zes = saturation_vapor_pressure(tak, over_ice=over_ice)
    return ct.REPS0 * zes / (ps - (1. - ct.REPS0) * zes)


def e_air(qa, slp):
    """Vapor pressure of air (Pa) from specific humidity and pressure

    Arguments:
        qa (:obj:`ndarray`): air specific humidity (kg/kg)
        slp (:obj:`ndarray`): pressure (Pa)
    """
    return qa * slp / (ct.REPS0 + qa * (1. - ct.REPS0))


def rh_air(qa, tak, slp):
    """Relative humidity of air (fraction, not %)"""
    return e_air(qa, slp) / e_sat(tak)


def q_air_rh(rha, tak, slp):
    """Specific humidity of air (kg/kg) from relative humidity

    Arguments:
        rha (:obj:`ndarray`): relative humidity (fraction, not %)
        tak (:obj:`ndarray`): air temperature (K)
        slp (:obj:`ndarray`): pressure (Pa)
    """
    ze = rha * e_sat(tak)
    return ze * ct.REPS0 / (slp - (1. - ct.REPS0) * ze)


def q_air_dp(tdew, slp):
    """Specific humidity of air (kg/kg) from dew-point temperature (K)"""
    return q_sat(tdew, slp)


def alpha_sw(sst):
    """Rough estimate of the thermal expansion coefficient of sea water at the surface (1/K)

    Argument:
        sst (:obj:`ndarray`): sea water temperature (K)
    """
    return 2.1e-5 * np.maximum(np.asarray(sst) - ct.RT0 + 3.2, 0.)**0.79


def absolute_temperature(tha, qa, z, ts):
    """Absolute air temperature (K) at height z from potential temperature

    Four corrections with the lapse-rate evaluated at the mean
    temperature of the layer between the surface and z.

    Arguments:
        tha (:obj:`ndarray`): pot. air temperature at z (K)
        qa (:obj:`ndarray`): air specific humidity at z (kg/kg)
        z (float): height above the surface (m)
        ts (:obj:`ndarray`): surface temperature (K)
    """
    ztaa = tha
    for _ in range(4):
        zgamma = gamma_moist(0.5 * (ztaa + ts), qa)
        ztaa = tha - zgamma * z
    return ztaa


def potential_temperature(tak, qa, z):
    """Potential temperature (K) of air at height z, referenced to the surface"""
    return tak + gamma_moist(tak, qa) * z


# names used by the public API
saturation_specific_humidity = q_sat
virtual_temperature = virt_temp
moist_adiabatic_lapse_rate = gamma_moist
air_density = rho_air
specific_heat_moist_air = cp_air
latent_heat_vaporization = l_vap
bulk_richardson_number = ri_bulk
