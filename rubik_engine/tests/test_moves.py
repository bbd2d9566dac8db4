import itertools
import math
import unittest

import numpy as np

from rubik_engine.core.lattice import HALF_PI, as_vector, is_lattice_point, round_to_lattice
from rubik_engine.core.move import ALL_LAYERS, Move, exact_rotation, partial_rotation, targets
from rubik_engine.core.topology import CUBIE_POSITIONS
from rubik_engine.logic.moves import (
    normalize_token,
    parse_sequence,
    sequence_to_moves,
    token_to_moves,
)


def all_moves():
    layer_sets = [frozenset(s) for r in (1, 3) for s in itertools.combinations((-1, 0, 1), r)]
    for axis in "xyz":
        for layers in layer_sets:
            for direction in (1, -1):
                yield Move.of(axis, layers, direction)


class TestMove(unittest.TestCase):
    def test_rejects_invalid(self):
        with self.assertRaises(ValueError):
            Move("w", frozenset({1}), HALF_PI)
        with self.assertRaises(ValueError):
            Move("x", frozenset(), HALF_PI)
        with self.assertRaises(ValueError):
            Move("x", frozenset({2}), HALF_PI)
        with self.assertRaises(ValueError):
            Move("x", frozenset({1}), math.pi)

    def test_layers_are_frozen(self):
        m = Move("y", [1], -HALF_PI)
        self.assertEqual(m.layers, frozenset({1}))
        self.assertEqual(m, Move.of("y", (1,), -1))

    def test_targets(self):
        m = Move.of("x", (1,), -1)
        hits = [p for p in CUBIE_POSITIONS if targets(m, p)]
        self.assertEqual(len(hits), 9)
        self.assertTrue(all(p[0] == 1 for p in hits))

    def test_whole_cube_targets_everything(self):
        m = Move.of("y", ALL_LAYERS, 1)
        self.assertTrue(m.is_whole_cube())
        self.assertTrue(all(targets(m, p) for p in CUBIE_POSITIONS))

    def test_lattice_closure(self):
        for m in all_moves():
            for p in CUBIE_POSITIONS:
                q = round_to_lattice(exact_rotation(m) @ as_vector(p))
                self.assertTrue(is_lattice_point(q), (m, p, q))

    def test_four_rotations_are_identity(self):
        for m in all_moves():
            r = exact_rotation(m)
            for p in CUBIE_POSITIONS:
                q = p
                for _ in range(4):
                    q = round_to_lattice(r @ as_vector(q))
                self.assertEqual(q, p)

    def test_partial_rotation_keeps_direction(self):
        m = Move.of("z", (0,), -1)
        r = partial_rotation(m, -0.1)
        self.assertTrue(np.allclose(r @ r.T, np.identity(3)))
        with self.assertRaises(ValueError):
            partial_rotation(m, 0.1)

    def test_inverse(self):
        m = Move.of("z", (1,), 1)
        self.assertEqual(m.inverse().target_theta, -HALF_PI)
        self.assertEqual(m.inverse().layers, m.layers)


class TestNotation(unittest.TestCase):
    def test_normalize(self):
        self.assertEqual(normalize_token(" R’ "), "R'")
        self.assertEqual(normalize_token("D2'"), "D2")
        self.assertEqual(normalize_token("x'"), "X'")
        self.assertEqual(normalize_token(""), "")

    def test_normalize_invalid(self):
        with self.assertRaises(ValueError):
            normalize_token("Q")
        with self.assertRaises(ValueError):
            normalize_token("r")
        with self.assertRaises(ValueError):
            normalize_token("R3")

    def test_parse_sequence(self):
        self.assertEqual(parse_sequence("R U R' U'"), ["R", "U", "R'", "U'"])
        with self.assertRaises(ValueError):
            parse_sequence("R K")

    def test_token_to_moves(self):
        (r,) = token_to_moves("R")
        self.assertEqual((r.axis, r.layers, r.target_theta), ("x", frozenset({1}), -HALF_PI))
        (rp,) = token_to_moves("R'")
        self.assertEqual(rp, r.inverse())
        self.assertEqual(token_to_moves("U2"), token_to_moves("U") * 2)
        self.assertEqual(token_to_moves(""), [])

    def test_sequence_to_moves(self):
        self.assertEqual(len(sequence_to_moves("R U2 M'")), 4)


if __name__ == "__main__":
    unittest.main()
