import os
import tempfile
import unittest

import numpy as np
from aerobulk import solve_similarity
from diagnostics import (PSI_FUNCTIONS, cx_vs_wind, main, plot_cx_vs_wind, plot_psi_curves,
                         psi_curves, reference_height_values)


class TestDiagnostics(unittest.TestCase):

    def test_reference_height_at_zu(self):
        for algo in PSI_FUNCTIONS:
            turb = solve_similarity(2., 10., 298.15, 0.018, 297.15, 0.016, 8., algo=algo)
            u_z, t_z, q_z = reference_height_values(10., 10., turb, algo=algo)
            np.testing.assert_allclose(u_z, turb.u_blk)
            np.testing.assert_allclose(t_z, turb.t_zu)
            np.testing.assert_allclose(q_z, turb.q_zu)

    def test_reference_height_back_to_zt(self):
        turb = solve_similarity(2., 10., 298.15, 0.018, 297.15, 0.016, 8., n_itt=10)
        u_2m, t_2m, q_2m = reference_height_values(2., 10., turb)
        self.assertLess(u_2m, turb.u_blk)
        self.assertAlmostEqual(float(t_2m), 297.15, delta=0.05)
        self.assertAlmostEqual(float(q_2m), 0.016, delta=2.e-4)

    def test_unknown_algorithm(self):
        turb = solve_similarity(10., 10., 298.15, 0.018, 297.15, 0.016, 8.)
        with self.assertRaises(ValueError):
            reference_height_values(2., 10., turb, algo='coare')

    def test_cx_vs_wind(self):
        winds = np.array([3., 6., 10., 15., 20.])
        cd, ch, ce = cx_vs_wind(winds)
        self.assertEqual(cd.shape, winds.shape)
        self.assertGreater(cd[-1], cd[1])
        self.assertTrue(np.all(ce > 0.))

    def test_psi_curves(self):
        zeta = np.linspace(-2., 2., 41)
        curves = psi_curves(zeta)
        self.assertEqual(set(curves), {'ecmwf', 'ncar'})
        for psi_m, psi_h in curves.values():
            self.assertEqual(psi_m.shape, zeta.shape)
            self.assertEqual(float(psi_h[20]), 0.)

    def test_plots(self):
        with tempfile.TemporaryDirectory() as output_path:
            fname = plot_cx_vs_wind(np.linspace(1., 25., 25), output_path)
            self.assertTrue(os.path.isfile(fname))
            fname = plot_psi_curves(np.linspace(-5., 5., 101), output_path, fname='psi_test')
            self.assertTrue(fname.endswith('psi_test.png'))
            self.assertTrue(os.path.isfile(fname))

    def test_main(self):
        with tempfile.TemporaryDirectory() as tmp:
            output_path = os.path.join(tmp, 'output')
            main(output_path)
            self.assertTrue(os.path.isfile(os.path.join(output_path, 'cd_ecmwf.png')))
            self.assertTrue(os.path.isfile(os.path.join(output_path, 'psi.png')))


if __name__ == '__main__':
    unittest.main()
