from collections import namedtuple

import numpy as np
import constants as ct


TurbResult = namedtuple('TurbResult', ['cd', 'ch', 'ce',
                                       't_zu', 'q_zu', 'u_blk',
                                       'z0', 'u_star', 'linv', 'obukhov_length', 'un10',
                                       't_s', 'q_s'])
TurbResult.__doc__ = """Output of a bulk algorithm, every field has the shape of the inputs

    cd, ch, ce: transfer coefficients for momentum, sensible heat and evaporation
    t_zu, q_zu: pot. air temperature (K) and specific humidity (kg/kg) adjusted at zu
    u_blk: bulk wind speed at zu including gustiness (m/s)
    z0: aerodynamic roughness length (m)
    u_star: friction velocity (m/s)
    linv: inverse of the Obukhov length (1/m)
    obukhov_length: Obukhov length (m), inf when neutral
    un10: neutral wind speed at 10m (m/s)
    t_s, q_s: surface temperature (K) and humidity (kg/kg) actually used
"""


def as_fields(*fields):
    """Converts inputs to float arrays and checks that they can be paired elementwise

    Scalars (0-d) may be mixed with arrays; all non-scalar inputs must
    share the same shape.

    Returns:
        tuple(:obj:`ndarray`, ...) and the common shape
    """
    arrays = tuple(np.asarray(fld, dtype=float) for fld in fields)
    shapes = {arr.shape for arr in arrays if arr.ndim > 0}
    if len(shapes) > 1:
        raise ValueError(f'input fields have mismatched shapes: {sorted(shapes)}')
    shape = shapes.pop() if shapes else ()
    return arrays, shape


def check_n_itt(n_itt):
    if int(n_itt) != n_itt or n_itt < 1:
        raise ValueError(f'number of iterations must be a positive integer, got {n_itt!r}')
    return int(n_itt)


def sign_floor(x, xmin):
    """Magnitude of x floored at xmin, keeping the sign of x (0 counts as positive)

    Arguments:
        x (:obj:`ndarray`): field
        xmin (float): smallest magnitude allowed
    """
    return np.where(x >= 0., 1., -1.) * np.maximum(np.abs(x), xmin)


def is_stable(zeta):
    """1 where zeta >= 0 (stable or neutral), 0 otherwise"""
    return np.where(zeta >= 0., 1., 0.)


def heights_equal(zt, zu):
    return abs(zu - zt) < ct.DZ_EQUAL
