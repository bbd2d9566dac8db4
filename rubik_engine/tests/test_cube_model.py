import unittest

from rubik_engine.core import CubeModel
from rubik_engine.core.move import Move
from rubik_engine.logic.moves import token_to_moves


def apply(c, seq):
    c.apply_sequence(seq)


class TestCubeModel(unittest.TestCase):
    def test_starts_solved(self):
        c = CubeModel()
        self.assertTrue(c.is_solved())

    def test_solved_repr(self):
        c = CubeModel()
        self.assertEqual(c.to_repr(), "W" * 9 + "Y" * 9 + "R" * 9 + "O" * 9 + "B" * 9 + "G" * 9)

    def test_U_then_Uprime_returns(self):
        c = CubeModel()
        before = c.to_hashable()
        apply(c, "U U'")
        self.assertEqual(before, c.to_hashable())

    def test_U2_equals_two_U(self):
        c1 = CubeModel()
        c2 = CubeModel()
        apply(c1, "U2")
        apply(c2, "U U")
        self.assertEqual(c1.to_hashable(), c2.to_hashable())
        self.assertFalse(c1.is_solved())

    def test_R_then_Rprime_returns(self):
        c = CubeModel()
        before = c.to_hashable()
        apply(c, "R R'")
        self.assertEqual(before, c.to_hashable())

    def test_four_quarter_turns_return(self):
        for base in "UDFBRLMESXYZ":
            c = CubeModel()
            before = c.to_hashable()
            apply(c, " ".join([base] * 4))
            self.assertEqual(before, c.to_hashable(), base)

    def test_R_moves_front_column_to_up(self):
        c = CubeModel()
        apply(c, "R")
        r = c.to_repr()
        # cara U: columna derecha (índices 2, 5, 8) ahora es roja (frente)
        self.assertEqual(r[2] + r[5] + r[8], "RRR")
        self.assertEqual(r[0] + r[3] + r[6], "WWW")

    def test_whole_cube_rotation_keeps_solved(self):
        c = CubeModel()
        apply(c, "Y X Z'")
        self.assertTrue(c.is_solved())
        self.assertNotEqual(c.to_repr(), CubeModel().to_repr())

    def test_color_counts_remain_constant(self):
        c = CubeModel()
        apply(c, "R U R' U' L D L' D' U2 R2 M E S x y'")

        for color in ["W", "Y", "O", "R", "G", "B"]:
            self.assertEqual(c.color_counts()[color], 9)
        self.assertEqual(sorted(c.to_repr()), sorted(CubeModel().to_repr()))

    def test_reset(self):
        c = CubeModel()
        c.apply_move(Move.of("z", (0,), 1))
        self.assertFalse(c.is_solved())
        c.reset()
        self.assertTrue(c.is_solved())

    def test_from_locations_requires_all_stickers(self):
        c = CubeModel()
        partial = dict(list(c.colors.items())[:10])
        with self.assertRaises(ValueError):
            CubeModel.from_locations(partial)

    def test_inverse_move_undoes(self):
        c = CubeModel()
        move = token_to_moves("F")[0]
        c.apply_move(move)
        c.apply_move(move.inverse())
        self.assertTrue(c.is_solved())


    def test_apply_token_and_sequence(self):
        c1 = CubeModel()
        c2 = CubeModel()
        self.assertEqual(len(c1.apply_token("R2")), 2)
        c2.apply_sequence("R R")
        self.assertEqual(c1.to_repr(), c2.to_repr())

    def test_invalid_sequence_applies_nothing(self):
        c = CubeModel()
        with self.assertRaises(ValueError):
            c.apply_sequence("R U Q")
        self.assertTrue(c.is_solved())


if __name__ == "__main__":
    unittest.main()
