import os

import numpy as np
import constants as ct
import matplotlib.pyplot as plt
from aerobulk import solve_similarity, turbulent_fluxes
from psi import psi_h_ecmwf, psi_h_ncar, psi_m_ecmwf, psi_m_ncar
from skin_ecmwf import surface_humidity
from thermodynamics import q_air_rh


# (psi_m, psi_h) of each bulk algorithm
PSI_FUNCTIONS = {
    'ecmwf': (psi_m_ecmwf, psi_h_ecmwf),
    'ncar': (psi_m_ncar, psi_h_ncar),
}


def reference_height_values(z, zu, turb, algo='ecmwf'):
    """Wind speed, pot. temperature and specific humidity at height z from converged similarity profiles

    Arguments:
        z (float): reference height (m), e.g. 2m for air temperature
        zu (float): height at which ``turb`` was computed (m)
        turb (TurbResult): output of a bulk algorithm
        algo (str): bulk algorithm that produced ``turb``

    Returns:
        tuple(:obj:`ndarray`, :obj:`ndarray`, :obj:`ndarray`): U (m/s), theta (K), q (kg/kg)
    """
    if algo not in PSI_FUNCTIONS:
        raise ValueError(f'unknown bulk algorithm {algo!r}, choose among {sorted(PSI_FUNCTIONS)}')
    psi_m, psi_h = PSI_FUNCTIONS[algo]

    sqrt_cd = np.sqrt(turb.cd)
    tstar = turb.ch / sqrt_cd * (turb.t_zu - turb.t_s)
    qstar = turb.ce / sqrt_cd * (turb.q_zu - turb.q_s)

    ztmp_m = np.log(z / zu) - psi_m(z * turb.linv) + psi_m(zu * turb.linv)
    ztmp_h = np.log(z / zu) - psi_h(z * turb.linv) + psi_h(zu * turb.linv)

    u_z = np.maximum(turb.u_blk + turb.u_star / ct.KARMAN * ztmp_m, 0.)
    t_z = turb.t_zu + tstar / ct.KARMAN * ztmp_h
    q_z = np.maximum(turb.q_zu + qstar / ct.KARMAN * ztmp_h, 0.)
    return u_z, t_z, q_z


def cx_vs_wind(winds, t_s=ct.RT0 + 20., q_s=None, t_a=None, q_a=None, zt=ct.ZREF, zu=ct.ZREF,
               slp=ct.PATM, n_itt=ct.NB_ITT, algo='ecmwf'):
    """Transfer coefficients over a range of wind speeds

    Default air values are 1 K colder than the surface with a relative
    humidity of 80% (slightly unstable conditions).

    Arguments:
        winds (:obj:`ndarray`): wind speeds at zu (m/s)
        t_s (float): sea surface temperature (K)
        q_s (float): sea surface specific humidity (kg/kg)
        t_a (float): pot. air temperature at zt (K)
        q_a (float): air specific humidity at zt (kg/kg)

    Returns:
        tuple(:obj:`ndarray`, :obj:`ndarray`, :obj:`ndarray`): Cd, Ch, Ce
    """
    winds = np.asarray(winds, dtype=float)
    if t_a is None:
        t_a = t_s - 1.
    if q_s is None:
        q_s = surface_humidity(t_s, slp)
    if q_a is None:
        q_a = q_air_rh(0.8, t_a, slp)

    turb = solve_similarity(zt, zu,
                            np.full(winds.shape, t_s), np.full(winds.shape, q_s),
                            np.full(winds.shape, t_a), np.full(winds.shape, q_a),
                            winds, n_itt=n_itt, algo=algo)
    return turb.cd, turb.ch, turb.ce


def psi_curves(zeta):
    """Stability functions of every bulk algorithm over a range of z/L

    Returns:
        dict: algorithm name -> (psi_m, psi_h)
    """
    zeta = np.asarray(zeta, dtype=float)
    return {name: (psi_m(zeta), psi_h(zeta)) for name, (psi_m, psi_h) in PSI_FUNCTIONS.items()}


def plot_cx_vs_wind(winds, output_path, fname='cx_vs_wind', algos=('ecmwf', 'ncar'), **kwargs):
    plt.figure(figsize=(10, 5))
    for algo in algos:
        cd, ch, ce = cx_vs_wind(winds, algo=algo, **kwargs)
        plt.plot(winds, 1000. * cd, label=f'Cd {algo}')
        plt.plot(winds, 1000. * ch, '--', label=f'Ch {algo}')
        plt.plot(winds, 1000. * ce, ':', label=f'Ce {algo}')
    plt.xlabel('wind speed (m/s)')
    plt.ylabel('1000 x transfer coefficient')
    plt.legend()
    plt.savefig(f'{output_path}/{fname}.png')
    plt.close()
    return f'{output_path}/{fname}.png'


def plot_psi_curves(zeta, output_path, fname='psi'):
    plt.figure(figsize=(10, 5))
    for name, (psi_m, psi_h) in psi_curves(zeta).items():
        plt.plot(zeta, psi_m, label=f'psi_m {name}')
        plt.plot(zeta, psi_h, '--', label=f'psi_h {name}')
    plt.xlabel('zeta = z/L')
    plt.legend()
    plt.savefig(f'{output_path}/{fname}.png')
    plt.close()
    return f'{output_path}/{fname}.png'


def plot_field(ds, x, y, output_path, fname, cmap=None, vmin=None, vmax=None):
    plt.figure(figsize=(10, 5))
    cs = plt.pcolor(x, y, ds.T, cmap=cmap,
                    vmin=vmin, vmax=vmax,
                    shading='auto')
    plt.colorbar(cs)
    plt.savefig(f'{output_path}/{fname}.png')
    plt.close()
    return f'{output_path}/{fname}.png'


def main(output_path='./output', algo='ecmwf'):

    if not os.path.exists(output_path):
        os.mkdir(output_path)

    # idealised grid: SST along x, wind speed along y
    sst_1d = ct.RT0 + np.linspace(-1.8, 32., 35)
    wnd_1d = np.linspace(0., 25., 26)
    sst, wnd = np.meshgrid(sst_1d, wnd_1d, indexing='ij')

    # air 1 K colder than the sea, 80% relative humidity, at 2m; wind at 10m
    t2m = sst - 1.
    fluxes, turb, _ = turbulent_fluxes(algo, ct.ZTREF, ct.ZREF, sst, t2m, np.full(sst.shape, 0.8),
                                       wnd, hum='rh')

    plot_field(1000. * turb.cd, sst_1d - ct.RT0, wnd_1d, output_path, f'cd_{algo}', cmap='viridis')
    plot_field(1000. * turb.ce, sst_1d - ct.RT0, wnd_1d, output_path, f'ce_{algo}', cmap='viridis')
    plot_field(fluxes.qsen, sst_1d - ct.RT0, wnd_1d, output_path, f'sen_{algo}',
               cmap='viridis', vmin=-100, vmax=0)
    plot_field(fluxes.qlat, sst_1d - ct.RT0, wnd_1d, output_path, f'lat_{algo}',
               cmap='viridis', vmin=-600, vmax=0)
    plot_field(fluxes.tau, sst_1d - ct.RT0, wnd_1d, output_path, f'tau_{algo}',
               cmap='viridis', vmin=0, vmax=1.5)

    plot_cx_vs_wind(wnd_1d[1:], output_path)
    plot_psi_curves(np.linspace(-5., 5., 201), output_path)

    print(f"Mean Cd x 1000 ({algo}): {np.mean(1000. * turb.cd)}")
    print(f"Mean turbulent heat flux ({algo}): {np.mean(fluxes.qsen + fluxes.qlat)}")


if __name__ == "__main__":
    main()
