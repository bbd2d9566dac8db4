import unittest

from rubik_engine.core.move import ALL_LAYERS, Move
from rubik_engine.core.topology import CUBIE_POSITIONS, STICKER_LOCATIONS
from rubik_engine.logic.dispatcher import MoveStore


def active(moves):
    return [k for k, m in moves.items() if m is not None]


class TestMoveStore(unittest.TestCase):
    def setUp(self):
        self.store = MoveStore()
        self.r = Move.of("x", (1,), -1)
        self.u = Move.of("y", (1,), -1)

    def dispatch(self):
        return self.store.dispatch_if_idle(CUBIE_POSITIONS, STICKER_LOCATIONS)

    def test_starts_idle(self):
        self.assertFalse(self.store.is_active_move())
        self.assertEqual(len(self.store.cubie_moves), 26)
        self.assertEqual(len(self.store.sticker_moves), 54)
        self.assertIsNone(self.dispatch())

    def test_queue_is_fifo(self):
        self.store.queue_move(self.r)
        self.store.queue_move(self.u)
        self.assertEqual(self.store.next_move(), self.r)
        self.assertEqual(self.store.dequeue_move(), self.r)
        self.assertEqual(self.store.dequeue_move(), self.u)
        self.assertIsNone(self.store.dequeue_move())

    def test_dispatch_assigns_targeted_pieces(self):
        self.store.queue_move(self.r)
        self.assertEqual(self.dispatch(), self.r)
        self.assertEqual(len(active(self.store.cubie_moves)), 9)
        self.assertEqual(len(active(self.store.sticker_moves)), 21)
        self.assertTrue(self.store.is_active_move())
        self.assertEqual(len(self.store.move_buffer), 0)

    def test_next_move_waits_while_active(self):
        self.store.queue_move(self.r)
        self.store.queue_move(self.u)
        self.dispatch()
        self.assertIsNone(self.dispatch())
        self.assertEqual(self.store.next_move(), self.u)

        for k in active(self.store.cubie_moves):
            self.store.clear_cubie_move(k)
        self.assertIsNone(self.dispatch())

        for k in active(self.store.sticker_moves):
            self.store.clear_sticker_move(k)
        self.assertEqual(self.dispatch(), self.u)

    def test_whole_cube_rotation_targets_all(self):
        self.store.queue_move(Move.of("y", ALL_LAYERS, 1))
        self.dispatch()
        self.assertEqual(len(active(self.store.cubie_moves)), 26)
        self.assertEqual(len(active(self.store.sticker_moves)), 54)

    def test_clear_all(self):
        self.store.queue_move(self.r)
        self.store.queue_move(self.u)
        self.dispatch()
        self.store.clear_all()
        self.assertFalse(self.store.is_active_move())
        self.assertIsNone(self.store.next_move())


if __name__ == "__main__":
    unittest.main()
