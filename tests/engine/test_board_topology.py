import unittest

import numpy as np

from ludo_race.board import BoardTopology, board
from ludo_race.token import Token
from ludo_race.types import Color


class TestBoardTopology(unittest.TestCase):
    def test_lane_landmarks(self):
        self.assertEqual(board.start_index(Color.RED), 0)
        self.assertEqual(board.start_index(Color.BLUE), 39)
        self.assertEqual(board.home_entry_index(Color.GREEN), 11)
        self.assertEqual(board.home_stretch_start(Color.YELLOW), 62)
        self.assertEqual(board.home_stretch_end(Color.RED), 56)
        self.assertEqual(board.home_stretch_end(Color.BLUE), 71)

    def test_safe_cells(self):
        self.assertEqual(board.safe_cells, frozenset({0, 8, 13, 21, 26, 34, 39, 47}))
        self.assertTrue(board.is_safe(21))
        self.assertFalse(board.is_safe(20))

    def test_next_cell_enters_own_stretch(self):
        self.assertEqual(board.next_cell(Color.RED, 50), 52)
        self.assertEqual(board.next_cell(Color.GREEN, 11), 57)

    def test_next_cell_passes_other_entries(self):
        # green walks past red's entry and wraps around the loop
        self.assertEqual(board.next_cell(Color.GREEN, 50), 51)
        self.assertEqual(board.next_cell(Color.GREEN, 51), 0)
        self.assertEqual(board.next_cell(Color.RED, 11), 12)

    def test_next_cell_inside_stretch_and_finish(self):
        self.assertEqual(board.next_cell(Color.RED, 53), 54)
        self.assertEqual(board.next_cell(Color.RED, 56), 72)
        self.assertEqual(board.next_cell(Color.YELLOW, 66), 72)

    def test_cell_classification(self):
        self.assertTrue(board.is_main_loop(0))
        self.assertTrue(board.is_main_loop(51))
        self.assertFalse(board.is_main_loop(52))
        self.assertTrue(board.is_home_stretch(60))
        self.assertTrue(board.is_home_stretch(60, Color.GREEN))
        self.assertFalse(board.is_home_stretch(60, Color.RED))
        self.assertEqual(board.stretch_owner(70), Color.BLUE)
        self.assertIsNone(board.stretch_owner(72))

    def test_valid_positions(self):
        self.assertTrue(board.is_valid_position(Color.GREEN, -1))
        self.assertTrue(board.is_valid_position(Color.GREEN, 72))
        self.assertTrue(board.is_valid_position(Color.GREEN, 61))
        self.assertFalse(board.is_valid_position(Color.GREEN, 52))
        self.assertFalse(board.is_valid_position(Color.RED, 73))
        self.assertFalse(board.is_valid_position(Color.RED, -2))

    def test_topology_is_frozen(self):
        other = BoardTopology()
        self.assertEqual(other.lanes, board.lanes)
        with self.assertRaises(AttributeError):
            other.lanes = {}


class TestOccupancy(unittest.TestCase):
    def test_counts_board_and_finished_tokens(self):
        tokens = [
            Token(0, Color.RED, -1),
            Token(1, Color.RED, 20),
            Token(2, Color.RED, 20),
            Token(0, Color.BLUE, 72),
            Token(1, Color.BLUE, 68),
        ]
        grid = board.occupancy(tokens)
        self.assertEqual(grid.shape, (4, 73))
        self.assertEqual(grid[Color.RED.seat, 20], 2)
        self.assertEqual(grid[Color.BLUE.seat, 72], 1)
        self.assertEqual(grid[Color.BLUE.seat, 68], 1)
        # yard tokens are not on the grid
        self.assertEqual(int(np.sum(grid)), 4)


if __name__ == "__main__":
    unittest.main()
