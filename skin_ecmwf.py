import logging
from dataclasses import dataclass, replace

import numpy as np
import constants as ct
from bulk_formula import update_qnsol_tau
from thermodynamics import alpha_sw, q_sat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkinState:
    """Cool-skin / warm-layer state carried from one time step to the next."""

    dt_cs: np.ndarray
    """SST increment of the cool-skin [K]."""
    dt_wl: np.ndarray
    """SST increment of the warm-layer [K]."""
    hz_wl: np.ndarray
    """Thickness of the warm-layer [m]."""

    @property
    def shape(self):
        return np.shape(self.dt_cs)


def init_skin_state(shape=(), use_cs=True, use_wl=False):
    """State before the first time step

    Arguments:
        shape (tuple): shape of the fields of the bulk algorithm
        use_cs (bool): the cool-skin is used
        use_wl (bool): the warm-layer is used
    """
    dt_cs = np.full(shape, ct.DT_CS0 if use_cs else 0.)
    dt_wl = np.zeros(shape)
    hz_wl = np.full(shape, ct.RD0)
    return SkinState(dt_cs, dt_wl, hz_wl)


def surface_humidity(ts, slp):
    """Sea surface specific humidity (kg/kg) at temperature ts (K), salinity reduction included"""
    return ct.RDCT_QSAT_SALT * q_sat(np.maximum(ts, 200.), slp)


def delta_skin_layer(alpha, qd, ustar):
    """Thickness of the viscous sublayer (m)

    Arguments:
        alpha (:obj:`ndarray`): thermal expansion coefficient of sea water (1/K)
        qd (:obj:`ndarray`): heat flux absorbed in the sublayer (W/m^2, >0 downward)
        ustar (:obj:`ndarray`): friction velocity in the air (m/s)

    Reference:
        Fairall, C. W., Bradley, E. F., Godfrey, J. S., Wick, G. A., Edson, J. B.,
        & Young, G. S. (1996). Cool-skin and warm-layer effects on sea surface
        temperature, JGR, 101(C1), 1295-1308, eq. 14.
    """
    zusw = np.maximum(ustar, 1.e-4) * np.sqrt(ct.RHO0_A / ct.RHO0_W)   # u* in the water
    zusw2 = zusw * zusw
    zcst = 16. * ct.G * ct.RHO0_W * ct.CP0_W * ct.NU0_W**3 / (ct.K0_W * ct.K0_W)
    zlamb = 6. / (1. + np.maximum(-qd * alpha * zcst / (zusw2 * zusw2), 0.)**0.75)**(1. / 3.)
    return np.minimum(zlamb * ct.NU0_W / zusw, ct.DELTA_SKIN_MAX)


def cs_ecmwf(qsw, qnsol, ustar, sst):
    """Cool-skin SST increment (K)

    Can be positive if the heat absorbed in the sublayer is positive.

    Arguments:
        qsw (:obj:`ndarray`): net solar flux at the surface (W/m^2, >0)
        qnsol (:obj:`ndarray`): non-solar heat flux to the ocean (W/m^2)
        ustar (:obj:`ndarray`): friction velocity (m/s)
        sst (:obj:`ndarray`): bulk SST (K)

    Reference:
        Zeng, X., & Beljaars, A. (2005). A prognostic scheme of sea surface skin
        temperature for modeling and data assimilation, GRL, 32, L14605.
    """
    zalpha = alpha_sw(sst)

    # first guess: no solar flux absorbed in the sublayer
    zqabs = qnsol
    zdelta = delta_skin_layer(zalpha, zqabs, ustar)

    for _ in range(4):
        # solar absorption in the sublayer, eq. 5 of Zeng & Beljaars (2005)
        zfs = 0.065 + 11. * zdelta - 6.6e-5 / zdelta * (1. - np.exp(-zdelta / 8.e-4))
        zfs = np.maximum(zfs, 0.01)
        zqabs = qnsol + zfs * qsw
        zdelta = delta_skin_layer(zalpha, zqabs, ustar)

    return zqabs * zdelta / ct.K0_W


def wl_ecmwf(qsw, qnsol, ustar, sst, dt_wl, hz_wl, dt):
    """Warm-layer SST increment (K) at the end of a time step of length dt (s)

    The prognostic equation of Zeng & Beljaars (2005) is integrated
    semi-implicitly from ``dt_wl``; the result is never negative.

    Arguments:
        qsw (:obj:`ndarray`): net solar flux at the surface (W/m^2, >0)
        qnsol (:obj:`ndarray`): non-solar heat flux to the ocean (W/m^2)
        ustar (:obj:`ndarray`): friction velocity (m/s)
        sst (:obj:`ndarray`): bulk SST (K)
        dt_wl (:obj:`ndarray`): warm-layer increment at the beginning of the step (K)
        hz_wl (:obj:`ndarray`): thickness of the warm-layer (m)
        dt (float): time step (s)
    """
    zusw = np.maximum(ustar, 1.e-4) * np.sqrt(ct.RHO0_A / ct.RHO0_W)
    zrhocp = ct.RHO0_W * ct.CP0_W

    # fraction of the solar flux absorbed within the layer (3-band profile)
    zfr = 1. - (0.28 * np.exp(-hz_wl / 0.014)
                + 0.27 * np.exp(-hz_wl / 0.357)
                + 0.45 * np.exp(-hz_wl / 12.82))
    zqabs = zfr * qsw + qnsol

    # stability of the water column
    zeta = hz_wl * ct.KARMAN * ct.G * alpha_sw(sst) * zqabs / (zrhocp * zusw**3)
    zphi = np.where(zeta >= 0., 1. + 5. * zeta, 1. / np.sqrt(np.abs(1. - 16. * zeta)))

    zheat = zqabs * (ct.NU_WL + 1.) / (hz_wl * zrhocp * ct.NU_WL)
    zdamp = (ct.NU_WL + 1.) * ct.KARMAN * zusw / (hz_wl * zphi)

    return np.maximum((dt_wl + dt * zheat) / (1. + dt * zdamp), 0.)


@dataclass
class SkinCorrection:
    """Cool-skin and/or warm-layer correction applied by a bulk algorithm between two iterations

    Radiative fluxes and pressure are needed; a missing one is reported
    as soon as the correction is created.
    """

    rad_sw: np.ndarray = None
    """Net solar flux at the surface [W/m2]."""
    rad_lw: np.ndarray = None
    """Downwelling longwave flux at the surface [W/m2]."""
    slp: np.ndarray = None
    """Sea-level pressure [Pa]."""
    use_cs: bool = True
    """Apply the cool-skin."""
    use_wl: bool = False
    """Apply the warm-layer."""
    dt: float = 3600.
    """Time step [s], used by the warm-layer."""

    def __post_init__(self):
        if not (self.use_cs or self.use_wl):
            raise ValueError('skin correction needs the cool-skin, the warm-layer or both')
        missing = [name for name in ('rad_sw', 'rad_lw', 'slp') if getattr(self, name) is None]
        if missing:
            raise ValueError('cool-skin/warm-layer correction needs '
                             f'{", ".join(missing)} to be provided')
        if self.use_wl and not self.dt > 0.:
            raise ValueError(f'warm-layer time step must be positive, got {self.dt!r}')
        self.rad_sw = np.asarray(self.rad_sw, dtype=float)
        self.rad_lw = np.asarray(self.rad_lw, dtype=float)
        self.slp = np.asarray(self.slp, dtype=float)

    @property
    def shape(self):
        return np.broadcast(self.rad_sw, self.rad_lw, self.slp).shape

    def init_state(self, shape):
        return init_skin_state(shape, use_cs=self.use_cs, use_wl=self.use_wl)

    def first_guess(self, sst):
        """Skin temperature and humidity before the first iteration"""
        ts = sst + ct.DT_CS0 if self.use_cs else sst
        return ts, surface_humidity(ts, self.slp)

    def __call__(self, state, zu, sst, ts, qs, ta, qa, ustar, tstar, qstar, wnd, ublk,
                 latest=None):
        """Updates the skin temperature and humidity from the current state of the bulk algorithm

        Arguments:
            state (SkinState): state at the beginning of the time step (not modified)
            zu (float): height (m)
            sst (:obj:`ndarray`): bulk SST (K)
            ts, qs (:obj:`ndarray`): current skin temperature (K) and humidity (kg/kg)
            ta, qa (:obj:`ndarray`): pot. air temperature (K) and humidity (kg/kg) at zu
            ustar, tstar, qstar (:obj:`ndarray`): current turbulent scales
            wnd (:obj:`ndarray`): wind speed module at zu (m/s)
            ublk (:obj:`ndarray`): bulk wind speed at zu (m/s)
            latest (SkinState): state returned by the previous iteration of the same
                time step, its warm-layer increment builds the skin temperature
                of the cool-skin (None: ``state``)

        Returns:
            tuple: skin temperature (K), skin humidity (kg/kg), updated SkinState
        """
        dt_cs = state.dt_cs
        dt_wl = state.dt_wl if latest is None else latest.dt_wl

        if self.use_cs:
            qnsol, _ = update_qnsol_tau(zu, ts, qs, ta, qa, ustar, tstar, qstar,
                                        wnd, ublk, self.slp, self.rad_lw)
            dt_cs = cs_ecmwf(self.rad_sw, qnsol, ustar, sst)
            ts = sst + dt_cs
            if self.use_wl:
                ts = ts + dt_wl
            qs = surface_humidity(ts, self.slp)

        if self.use_wl:
            qnsol, _ = update_qnsol_tau(zu, ts, qs, ta, qa, ustar, tstar, qstar,
                                        wnd, ublk, self.slp, self.rad_lw)
            dt_wl = wl_ecmwf(self.rad_sw, qnsol, ustar, sst, state.dt_wl, state.hz_wl, self.dt)
            ts = sst + dt_wl
            if self.use_cs:
                ts = ts + dt_cs
            qs = surface_humidity(ts, self.slp)

        logger.debug('skin correction: dT_cs in [%.3f, %.3f], dT_wl in [%.3f, %.3f]',
                     np.min(dt_cs), np.max(dt_cs), np.min(dt_wl), np.max(dt_wl))

        return ts, qs, replace(state, dt_cs=dt_cs, dt_wl=dt_wl)
