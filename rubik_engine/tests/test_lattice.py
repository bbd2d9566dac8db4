import math
import unittest

import numpy as np

from rubik_engine.core.lattice import (
    DIRECTED_AXES,
    DirectedAxis,
    directed_axis_of,
    is_facing_vector,
    is_lattice_point,
    rotation_matrix,
    round_to_lattice,
    vector_key,
)
from rubik_engine.core.topology import (
    CUBIE_POSITION_KEYS,
    CUBIE_POSITIONS,
    STICKER_LOCATION_KEYS,
    STICKER_LOCATIONS,
    StickerLocation,
    color_for_facing,
    sticker_center,
    sticker_locations_for,
)


class TestLattice(unittest.TestCase):
    def test_rotation_right_hand_rule(self):
        v = rotation_matrix("x", math.pi / 2) @ np.array([0.0, 1.0, 0.0])
        self.assertEqual(round_to_lattice(v), (0, 0, 1))
        v = rotation_matrix("y", math.pi / 2) @ np.array([0.0, 0.0, 1.0])
        self.assertEqual(round_to_lattice(v), (1, 0, 0))
        v = rotation_matrix("z", math.pi / 2) @ np.array([1.0, 0.0, 0.0])
        self.assertEqual(round_to_lattice(v), (0, 1, 0))

    def test_invalid_axis(self):
        with self.assertRaises(ValueError):
            rotation_matrix("w", 1.0)

    def test_round_has_no_negative_zero(self):
        self.assertEqual(vector_key((-1e-17, 1.0000001, -0.9999)), "01-1")
        self.assertEqual(str(round_to_lattice((-0.0, -0.2, 0.3))), "(0, 0, 0)")

    def test_is_lattice_point(self):
        self.assertTrue(is_lattice_point((1, 0, -1)))
        self.assertFalse(is_lattice_point((0, 0, 0)))
        self.assertFalse(is_lattice_point((2, 0, 0)))

    def test_is_facing_vector(self):
        self.assertTrue(is_facing_vector((0, -1, 0)))
        self.assertFalse(is_facing_vector((1, 1, 0)))

    def test_directed_axes_order(self):
        self.assertEqual([d.key() for d in DIRECTED_AXES], ["x1", "x-1", "y1", "y-1", "z1", "z-1"])
        self.assertEqual(DirectedAxis("y", -1).vector(), (0, -1, 0))
        self.assertEqual(DirectedAxis("z", 1).negate(), DirectedAxis("z", -1))

    def test_directed_axis_of(self):
        self.assertEqual(directed_axis_of((0.1, -0.9, 0.2)), DirectedAxis("y", -1))
        self.assertEqual(directed_axis_of((0.0, 0.0, 0.7)), DirectedAxis("z", 1))


class TestTopology(unittest.TestCase):
    def test_counts(self):
        self.assertEqual(len(CUBIE_POSITIONS), 26)
        self.assertEqual(len(set(CUBIE_POSITIONS)), 26)
        self.assertNotIn((0, 0, 0), CUBIE_POSITIONS)
        self.assertEqual(len(STICKER_LOCATIONS), 54)

    def test_keys_unique(self):
        self.assertEqual(len(set(CUBIE_POSITION_KEYS)), 26)
        self.assertEqual(len(set(STICKER_LOCATION_KEYS)), 54)

    def test_stickers_per_cubie(self):
        self.assertEqual(len(sticker_locations_for((1, 1, 1))), 3)
        self.assertEqual(len(sticker_locations_for((1, 0, -1))), 2)
        self.assertEqual(len(sticker_locations_for((0, 0, -1))), 1)

    def test_facing_matches_position(self):
        for loc in STICKER_LOCATIONS:
            i = next(k for k in range(3) if loc.facing_vector[k] != 0)
            self.assertEqual(loc.cubie_position[i], loc.facing_vector[i])

    def test_equality_by_coordinates(self):
        a = StickerLocation((1, 1, 0), (0, 1, 0))
        b = StickerLocation((1, 1, 0), (0, 1, 0))
        self.assertEqual(a, b)
        self.assertEqual(a.key(), "110010")
        self.assertEqual(len({a, b}), 1)

    def test_colors(self):
        self.assertEqual(color_for_facing((1, 0, 0)), "B")
        self.assertEqual(color_for_facing((0, -1, 0)), "Y")
        self.assertEqual(color_for_facing((0, 0, -1)), "O")
        with self.assertRaises(ValueError):
            color_for_facing((0, 0, 0))

    def test_sticker_center(self):
        x, y, z = sticker_center((1, 0, 0), (1, 0, 0))
        self.assertAlmostEqual(x, 1.51)
        self.assertEqual((y, z), (0.0, 0.0))


if __name__ == "__main__":
    unittest.main()
