import unittest
from unittest import mock

import numpy as np
import constants as ct
import skin_ecmwf
from bulk_formula import update_qnsol_tau
from flux_ecmwf import turb_ecmwf
from skin_ecmwf import (SkinCorrection, SkinState, cs_ecmwf, delta_skin_layer, init_skin_state,
                        surface_humidity, wl_ecmwf)
from thermodynamics import q_sat


class TestSkinFormulas(unittest.TestCase):

    def test_init_skin_state(self):
        state = init_skin_state((2, 3))
        self.assertIsInstance(state, SkinState)
        self.assertEqual(state.shape, (2, 3))
        np.testing.assert_array_equal(state.dt_cs, ct.DT_CS0)
        np.testing.assert_array_equal(state.dt_wl, 0.)
        np.testing.assert_array_equal(state.hz_wl, ct.RD0)
        np.testing.assert_array_equal(init_skin_state((2,), use_cs=False).dt_cs, 0.)

    def test_delta_skin_layer_capped(self):
        delta = delta_skin_layer(3.e-4, np.array([-500., 0., 500.]), np.array([1.e-6, 0.1, 0.5]))
        self.assertTrue(np.all(delta > 0.))
        self.assertTrue(np.all(delta <= ct.DELTA_SKIN_MAX))

    def test_cool_skin_at_night(self):
        dt_cs = cs_ecmwf(0., np.array([-300., -100., -20.]), 0.2, 300.)
        self.assertTrue(np.all(dt_cs < 0.))
        # more cooling for a larger heat loss
        self.assertTrue(np.all(np.diff(dt_cs) > 0.))

    def test_warm_layer_never_negative(self):
        dt_wl = wl_ecmwf(0., -200., 0.2, 300., 0., ct.RD0, 3600.)
        self.assertEqual(float(dt_wl), 0.)

    def test_warm_layer_under_sun(self):
        dt_wl = wl_ecmwf(800., -80., 0.05, 300., 0., ct.RD0, 3600.)
        self.assertGreater(dt_wl, 0.)
        dt_wl2 = wl_ecmwf(800., -80., 0.05, 300., dt_wl, ct.RD0, 3600.)
        self.assertGreater(dt_wl2, dt_wl)

    def test_surface_humidity(self):
        self.assertAlmostEqual(float(surface_humidity(300., 101000.)),
                               float(ct.RDCT_QSAT_SALT * q_sat(300., 101000.)), places=12)
        self.assertLess(surface_humidity(290., 101000.), surface_humidity(300., 101000.))


class TestSkinCorrectionConfig(unittest.TestCase):

    def test_missing_radiation(self):
        with self.assertRaises(ValueError):
            SkinCorrection(rad_sw=0., rad_lw=None, slp=101000.)
        with self.assertRaises(ValueError):
            SkinCorrection(rad_sw=None, rad_lw=350., slp=101000., use_cs=False, use_wl=True)

    def test_nothing_to_correct(self):
        with self.assertRaises(ValueError):
            SkinCorrection(rad_sw=0., rad_lw=350., slp=101000., use_cs=False, use_wl=False)

    def test_bad_time_step(self):
        with self.assertRaises(ValueError):
            SkinCorrection(rad_sw=0., rad_lw=350., slp=101000., use_wl=True, dt=0.)

    def test_first_guess(self):
        skin = SkinCorrection(rad_sw=0., rad_lw=350., slp=101000.)
        ts, qs = skin.first_guess(300.)
        self.assertEqual(ts, 300. + ct.DT_CS0)
        self.assertEqual(qs, surface_humidity(ts, 101000.))


class TestSkinInBulkAlgorithm(unittest.TestCase):

    sst = np.array([300., 301.])
    t_a = np.array([298., 299.])
    q_a = np.array([0.015, 0.016])
    q_s = surface_humidity(sst, ct.PATM)

    def test_cool_skin_at_night(self):
        skin = SkinCorrection(rad_sw=0., rad_lw=350., slp=ct.PATM)
        state = init_skin_state(self.sst.shape)
        turb, new_state = turb_ecmwf(10., 10., self.sst, self.t_a, self.q_s, self.q_a, 5.,
                                     skin=skin, skin_state=state)
        self.assertTrue(np.all(turb.t_s < self.sst))
        self.assertTrue(np.all(turb.q_s < self.q_s))
        self.assertTrue(np.all(new_state.dt_cs < 0.))
        np.testing.assert_allclose(turb.t_s, self.sst + new_state.dt_cs)
        # input state is left untouched
        np.testing.assert_array_equal(state.dt_cs, ct.DT_CS0)
        self.assertIsNot(new_state, state)

    def test_default_state(self):
        skin = SkinCorrection(rad_sw=0., rad_lw=350., slp=ct.PATM)
        turb, new_state = turb_ecmwf(10., 10., self.sst, self.t_a, self.q_s, self.q_a, 5., skin=skin)
        self.assertEqual(new_state.shape, self.sst.shape)

    def test_warm_layer_grows(self):
        skin = SkinCorrection(rad_sw=800., rad_lw=400., slp=ct.PATM,
                              use_cs=False, use_wl=True, dt=3600.)
        turb1, state1 = turb_ecmwf(10., 10., self.sst, self.t_a, self.q_s, self.q_a, 1., skin=skin)
        self.assertTrue(np.all(state1.dt_wl > 0.))
        self.assertTrue(np.all(turb1.t_s > self.sst))
        turb2, state2 = turb_ecmwf(10., 10., self.sst, self.t_a, self.q_s, self.q_a, 1.,
                                   skin=skin, skin_state=state1)
        self.assertTrue(np.all(state2.dt_wl > state1.dt_wl))
        self.assertTrue(np.all(turb2.t_s > turb1.t_s))

    def test_cool_skin_and_warm_layer(self):
        skin = SkinCorrection(rad_sw=600., rad_lw=380., slp=ct.PATM, use_cs=True, use_wl=True)
        turb, state = turb_ecmwf(10., 10., self.sst, self.t_a, self.q_s, self.q_a, 3., skin=skin)
        np.testing.assert_allclose(turb.t_s, self.sst + state.dt_cs + state.dt_wl)
        for cx in (turb.cd, turb.ch, turb.ce):
            self.assertTrue(np.all(np.isfinite(cx)))

    def test_warm_layer_flux_sees_latest_skin_temperature(self):
        # every iteration: non-solar flux of the cool-skin, then of the warm-layer
        ts_flux, dt_cs, dt_wl = [], [], []

        def record_flux(zu, ts, *args):
            ts_flux.append(np.copy(ts))
            return update_qnsol_tau(zu, ts, *args)

        def record_cs(*args):
            dt_cs.append(cs_ecmwf(*args))
            return dt_cs[-1]

        def record_wl(*args):
            dt_wl.append(wl_ecmwf(*args))
            return dt_wl[-1]

        skin = SkinCorrection(rad_sw=800., rad_lw=380., slp=ct.PATM, use_cs=True, use_wl=True)
        with mock.patch.object(skin_ecmwf, 'update_qnsol_tau', side_effect=record_flux), \
                mock.patch.object(skin_ecmwf, 'cs_ecmwf', side_effect=record_cs), \
                mock.patch.object(skin_ecmwf, 'wl_ecmwf', side_effect=record_wl):
            turb, state = turb_ecmwf(10., 10., self.sst, self.t_a, self.q_s, self.q_a, 2.,
                                     n_itt=3, skin=skin)

        self.assertEqual(len(ts_flux), 6)
        self.assertTrue(np.all(dt_wl[0] > 0.))
        np.testing.assert_allclose(ts_flux[1], self.sst + dt_cs[0])
        for itt in (1, 2):
            # skin temperature of the previous iteration enters the cool-skin flux
            np.testing.assert_allclose(ts_flux[2 * itt], self.sst + dt_cs[itt - 1] + dt_wl[itt - 1])
            np.testing.assert_allclose(ts_flux[2 * itt + 1],
                                       self.sst + dt_cs[itt] + dt_wl[itt - 1])
        np.testing.assert_allclose(turb.t_s, self.sst + dt_cs[2] + dt_wl[2])
        np.testing.assert_allclose(state.dt_wl, dt_wl[2])

    def test_state_shape_mismatch(self):
        skin = SkinCorrection(rad_sw=0., rad_lw=350., slp=ct.PATM)
        with self.assertRaises(ValueError):
            turb_ecmwf(10., 10., self.sst, self.t_a, self.q_s, self.q_a, 5.,
                       skin=skin, skin_state=init_skin_state((3,)))

    def test_radiation_shape_mismatch(self):
        skin = SkinCorrection(rad_sw=np.zeros(3), rad_lw=350., slp=ct.PATM)
        with self.assertRaises(ValueError):
            turb_ecmwf(10., 10., self.sst, self.t_a, self.q_s, self.q_a, 5., skin=skin)


if __name__ == '__main__':
    unittest.main()
