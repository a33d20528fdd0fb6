import unittest

import numpy as np
from utilities import as_fields, check_n_itt, heights_equal, is_stable, sign_floor


class TestUtilities(unittest.TestCase):

    def test_as_fields(self):
        (a, b, c), shape = as_fields(1., np.ones((2, 3)), [[1, 2, 3], [4, 5, 6]])
        self.assertEqual(shape, (2, 3))
        self.assertEqual(a.shape, ())
        self.assertEqual(c.dtype, np.float64)
        _, shape = as_fields(1., 2.)
        self.assertEqual(shape, ())
        with self.assertRaises(ValueError):
            as_fields(np.ones(3), np.ones((3, 1)))

    def test_check_n_itt(self):
        self.assertEqual(check_n_itt(5), 5)
        self.assertEqual(check_n_itt(np.int64(3)), 3)
        for n_itt in (0, -2, 1.5):
            with self.assertRaises(ValueError):
                check_n_itt(n_itt)

    def test_sign_floor(self):
        np.testing.assert_array_equal(sign_floor(np.array([-1., -1.e-12, 0., 1.e-12, 2.]), 1.e-6),
                                      [-1., -1.e-6, 1.e-6, 1.e-6, 2.])

    def test_is_stable(self):
        np.testing.assert_array_equal(is_stable(np.array([-1., 0., 1.])), [0., 1., 1.])

    def test_heights_equal(self):
        self.assertTrue(heights_equal(10., 10.005))
        self.assertFalse(heights_equal(2., 10.))


if __name__ == '__main__':
    unittest.main()
