import unittest

from ludo_race.config import AIWeights, Config, config


class TestBoardConfig(unittest.TestCase):
    def test_default_values(self):
        cfg = Config()
        self.assertEqual(cfg.MAIN_LOOP_LENGTH, 52)
        self.assertEqual(cfg.FINISH_SENTINEL, 72)
        self.assertEqual(cfg.BOARD_CELLS, 73)
        self.assertEqual(cfg.SAFE_CELLS, frozenset({0, 8, 13, 21, 26, 34, 39, 47}))

    def test_shared_instance(self):
        self.assertEqual(config.START_INDICES, [0, 13, 26, 39])
        self.assertEqual(config.MAX_CONSECUTIVE_SIXES, 3)

    def test_rejects_uneven_starts(self):
        with self.assertRaises(ValueError):
            Config(START_INDICES=[0, 12, 26, 39])

    def test_rejects_finish_inside_stretch(self):
        with self.assertRaises(ValueError):
            Config(FINISH_SENTINEL=70)

    def test_rejects_bad_player_bounds(self):
        with self.assertRaises(ValueError):
            Config(MIN_PLAYERS=1)


class TestAIWeights(unittest.TestCase):
    def test_custom_values(self):
        weights = AIWeights(finish=10.0, capture=5.0)
        self.assertEqual(weights.finish, 10.0)
        self.assertEqual(weights.capture, 5.0)

    def test_finish_outranks_capture(self):
        weights = AIWeights()
        self.assertGreater(weights.finish, weights.capture + weights.tie_break)


if __name__ == "__main__":
    unittest.main()
