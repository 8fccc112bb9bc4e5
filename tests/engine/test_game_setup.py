import unittest

from ludo_race.errors import InvalidSetup
from ludo_race.player import Player
from ludo_race.state import GameSetup, GameState
from ludo_race.types import Color


class TestGameSetup(unittest.TestCase):
    def test_default_four_humans(self):
        players = GameSetup().build_players()
        self.assertEqual([p.color for p in players], [Color.RED, Color.GREEN, Color.YELLOW, Color.BLUE])
        self.assertEqual(players[3].name, "Blue Player")
        self.assertFalse(any(p.is_ai for p in players))

    def test_leading_seats_are_cpu(self):
        players = GameSetup(player_count=3, ai_count=2, names=["Zoe"]).build_players()
        self.assertEqual([p.is_ai for p in players], [True, True, False])
        self.assertEqual(players[0].name, "Red Player (CPU)")
        self.assertEqual(players[1].name, "Green Player (CPU)")
        self.assertEqual(players[2].name, "Zoe")

    def test_blank_names_fall_back(self):
        players = GameSetup(player_count=2, names=["  ", "Kim"]).build_players()
        self.assertEqual([p.name for p in players], ["Kim", "Green Player"])

    def test_custom_colors(self):
        players = GameSetup(player_count=2, colors=["blue", Color.GREEN]).build_players()
        self.assertEqual([p.color for p in players], [Color.BLUE, Color.GREEN])
        self.assertEqual(players[0].player_id, 0)

    def test_invalid_setups(self):
        bad = [
            GameSetup(player_count=1),
            GameSetup(player_count=5),
            GameSetup(player_count=2, ai_count=-1),
            GameSetup(player_count=2, ai_count=3),
            GameSetup(player_count=2, colors=["red"]),
            GameSetup(player_count=2, colors=["red", "pink"]),
            GameSetup(player_count=2, colors=["red", "red"]),
        ]
        for setup in bad:
            with self.assertRaises(InvalidSetup):
                setup.validate()


class TestGameState(unittest.TestCase):
    def setUp(self):
        self.state = GameState.from_setup(GameSetup(player_count=2))

    def test_fresh_state(self):
        self.assertTrue(self.state.started)
        self.assertFalse(self.state.finished)
        self.assertIsNone(self.state.winner)
        self.assertEqual(self.state.current_player.color, Color.RED)
        self.assertEqual(len(list(self.state.all_tokens())), 8)

    def test_tokens_on_ignores_finished(self):
        green = self.state.players[1]
        green.tokens[0].position = 20
        green.tokens[1].position = 72
        self.assertEqual(self.state.tokens_on(20), [green.tokens[0]])
        self.assertEqual(self.state.tokens_on(72), [])
        self.assertEqual(self.state.opponents_on(20, Color.GREEN), [])
        self.assertEqual(len(self.state.opponents_on(20, Color.RED)), 1)

    def test_dice_history_is_bounded(self):
        for value in range(1, 13):
            self.state.record_roll(value % 6 + 1)
        self.assertEqual(len(self.state.dice_history), 10)
        self.assertEqual(self.state.dice_rolls, 12)


class TestPlayer(unittest.TestCase):
    def test_player_owns_four_yard_tokens(self):
        player = Player(player_id=0, color=Color.YELLOW, name="Yellow Player")
        self.assertEqual([t.token_id for t in player.tokens], [0, 1, 2, 3])
        self.assertTrue(all(t.in_yard and t.color == Color.YELLOW for t in player.tokens))
        self.assertFalse(player.has_won)

    def test_win_requires_all_tokens_home(self):
        player = Player(player_id=0, color=Color.RED, name="Red Player")
        for t in player.tokens[:3]:
            t.move_to(72)
        self.assertEqual(player.finished_tokens, 3)
        self.assertFalse(player.has_won)
        player.tokens[3].move_to(72)
        self.assertTrue(player.has_won)

    def test_token_lookup(self):
        player = Player(player_id=0, color=Color.RED, name="Red Player")
        player.token(2).move_to(5)
        self.assertEqual(player.tokens[2].position, 5)
        player.token(2).send_home()
        self.assertTrue(player.tokens[2].in_yard)
        with self.assertRaises(KeyError):
            player.token(9)


if __name__ == "__main__":
    unittest.main()
