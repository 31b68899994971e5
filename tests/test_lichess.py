import unittest
from datetime import datetime, timezone
from unittest.mock import Mock

from chessfinder.api.base import EndpointNotImplementedError, UserGamesQuery
from chessfinder.api.lichess import LichessApi, parse_game, result_code
from chessfinder.http import HttpClient
from chessfinder.models import Provider

LICHESS_GAME = {
    "id": "q7ZvsdUF",
    "rated": True,
    "variant": "standard",
    "speed": "blitz",
    "createdAt": 1600000000000,
    "lastMoveAt": 1600000300000,
    "status": "resign",
    "winner": "black",
    "players": {
        "white": {"user": {"name": "Alice", "id": "alice"}, "rating": 1500},
        "black": {"user": {"name": "Bob", "id": "bob", "title": "IM"}, "rating": 2400},
    },
    "pgn": '[Event "Rated Blitz game"]\n\n1. e4 e5 0-1\n',
}


class LichessParsingTests(unittest.TestCase):
    def test_parse_game(self) -> None:
        game = parse_game(LICHESS_GAME)
        self.assertEqual(game.provider, Provider.LICHESS)
        self.assertEqual(game.url, "https://lichess.org/q7ZvsdUF")
        self.assertEqual(game.end_time, datetime(2020, 9, 13, 12, 31, 40, tzinfo=timezone.utc))
        self.assertEqual(game.white.name, "Alice")
        self.assertEqual(game.white.url, "https://lichess.org/@/alice")
        self.assertEqual(game.black.title, "IM")
        self.assertEqual(game.white.result, "resigned")
        self.assertEqual(game.black.result, "win")
        self.assertEqual(game.pgn(), LICHESS_GAME["pgn"])

    def test_computer_and_anonymous_players(self) -> None:
        raw = dict(LICHESS_GAME, players={"white": {"aiLevel": 3}, "black": {}})
        game = parse_game(raw)
        self.assertEqual(game.white.name, "Stockfish level 3")
        self.assertEqual(game.black.name, "Anonymous")
        self.assertIsNone(game.black.url)

    def test_result_codes(self) -> None:
        self.assertIsNone(result_code({"status": "started"}, "white"))
        self.assertEqual(result_code({"status": "mate", "winner": "white"}, "black"), "checkmated")
        self.assertEqual(result_code({"status": "outoftime", "winner": "white"}, "black"), "timeout")
        self.assertEqual(result_code({"status": "variantEnd", "winner": "white"}, "black"), "lose")
        self.assertEqual(result_code({"status": "stalemate"}, "white"), "stalemate")
        self.assertEqual(result_code({"status": "draw"}, "white"), "agreed")
        self.assertEqual(result_code({"status": "outoftime"}, "white"), "draw")


class LichessApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.http = Mock(spec=HttpClient)
        self.api = LichessApi(self.http)

    def test_user_games_params(self) -> None:
        query = UserGamesQuery(
            username="alice",
            since=datetime(2020, 9, 1, tzinfo=timezone.utc),
            until=datetime(2020, 10, 1, tzinfo=timezone.utc),
            color="white",
            opponent="bob",
            max_games=50,
        )
        params = self.api.user_games_params(query)
        self.assertEqual(params["since"], 1598918400000)
        self.assertEqual(params["until"], 1601510400000)
        self.assertEqual(params["color"], "white")
        self.assertEqual(params["vs"], "bob")
        self.assertEqual(params["max"], 50)
        self.assertIs(params["pgnInJson"], True)

    def test_unfiltered_query_sends_export_options_only(self) -> None:
        params = self.api.user_games_params(UserGamesQuery(username="alice"))
        self.assertEqual(set(params), {"evals", "pgnInJson", "clocks", "opening"})

    def test_fetch_user_games_reads_ndjson(self) -> None:
        self.http.get_ndjson.return_value = [LICHESS_GAME, LICHESS_GAME]
        games = self.api.fetch_user_games(UserGamesQuery(username="alice"))
        self.assertEqual(len(games), 2)
        url = self.http.get_ndjson.call_args.args[0]
        self.assertEqual(url, "https://lichess.org/api/games/user/alice")

    def test_fetch_game(self) -> None:
        self.http.get_json.return_value = LICHESS_GAME
        game = self.api.fetch_game("q7ZvsdUF")
        self.assertEqual(game.id, "q7ZvsdUF")
        url = self.http.get_json.call_args.args[0]
        self.assertEqual(url, "https://lichess.org/game/export/q7ZvsdUF")

    def test_archives_are_not_available(self) -> None:
        with self.assertRaises(EndpointNotImplementedError):
            self.api.fetch_archives("alice")


if __name__ == "__main__":
    unittest.main()
