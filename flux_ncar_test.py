import unittest

import numpy as np
from flux_ncar import cd_n10_ncar, turb_ncar
from skin_ecmwf import SkinCorrection, init_skin_state


class TestNeutralCoefficients(unittest.TestCase):

    def test_cd_n10(self):
        self.assertAlmostEqual(float(cd_n10_ncar(10.)),
                               1.e-3 * (0.27 + 0.142 + 10. / 13.09 - 3.14807e-4), places=12)
        # constant above 33 m/s
        self.assertEqual(float(cd_n10_ncar(40.)), 2.34e-3)
        # wind floored at 0.5 m/s
        self.assertEqual(cd_n10_ncar(0.), cd_n10_ncar(0.5))


class TestTurbNcar(unittest.TestCase):

    def test_reference_scenario(self):
        turb, state = turb_ncar(10., 10., 298.15, 297.15, 0.018, 0.016, 8., n_itt=10)
        self.assertIsNone(state)
        self.assertGreater(1000. * turb.cd, 0.8)
        self.assertLess(1000. * turb.cd, 2.0)
        self.assertGreater(turb.ch, 0.)
        self.assertGreater(turb.ce, 0.)
        self.assertLess(turb.linv, 0.)

    def test_stable_heat_transfer_is_weaker(self):
        unstable, _ = turb_ncar(10., 10., 298.15, 297.15, 0.018, 0.016, 8.)
        stable, _ = turb_ncar(10., 10., 290., 295., 0.012, 0.012, 8.)
        self.assertLess(stable.ch, unstable.ch)

    def test_heights_differ(self):
        turb, _ = turb_ncar(2., 10., np.array([298.15, 290.]), np.array([297.15, 293.]),
                            np.array([0.018, 0.012]), np.array([0.016, 0.011]), np.array([8., 4.]))
        self.assertEqual(turb.cd.shape, (2,))
        for fld in (turb.cd, turb.ch, turb.ce, turb.t_zu, turb.q_zu, turb.un10):
            self.assertTrue(np.all(np.isfinite(fld)))
        # unstable point cools with height, stable point warms
        self.assertLess(turb.t_zu[0], 297.15)
        self.assertGreater(turb.t_zu[1], 293.)

    def test_zero_wind(self):
        turb, _ = turb_ncar(10., 10., 298.15, 297.15, 0.018, 0.016, 0.)
        self.assertEqual(turb.u_blk, 0.5)
        for cx in (turb.cd, turb.ch, turb.ce):
            self.assertTrue(np.isfinite(cx))

    def test_masked_fields(self):
        # land points filled with zeros
        zeros = np.zeros((2, 3))
        for zt in (10., 2.):
            turb, _ = turb_ncar(zt, 10., zeros, zeros, zeros, zeros, zeros)
            for fld in (turb.cd, turb.ch, turb.ce, turb.u_blk, turb.t_zu, turb.q_zu):
                self.assertTrue(np.all(np.isfinite(fld)))

    def test_no_skin_correction(self):
        skin = SkinCorrection(rad_sw=0., rad_lw=350., slp=101000.)
        with self.assertRaises(ValueError):
            turb_ncar(10., 10., 298.15, 297.15, 0.018, 0.016, 8., skin=skin)
        with self.assertRaises(ValueError):
            turb_ncar(10., 10., 298.15, 297.15, 0.018, 0.016, 8., skin_state=init_skin_state())


if __name__ == '__main__':
    unittest.main()
