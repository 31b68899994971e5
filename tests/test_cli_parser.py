import io
import unittest
from contextlib import redirect_stderr
from datetime import date

from chessfinder.cli.parser import finder_from_args, parse_args
from chessfinder.finder import GameFinder


def finder_for(*argv: str, default_api: str = "chess.com") -> GameFinder:
    return finder_from_args(parse_args(list(argv)), default_api)


class FinderFromArgsTests(unittest.TestCase):
    def test_single_game_id(self) -> None:
        self.assertEqual(finder_for("2345678"), GameFinder.by_id("2345678"))

    def test_single_player_username(self) -> None:
        self.assertEqual(finder_for("magnuscarlsen"), GameFinder.by_player("magnuscarlsen"))

    def test_numeric_player_username(self) -> None:
        self.assertEqual(finder_for("--player", "1234"), GameFinder.by_player("1234"))

    def test_api_choice(self) -> None:
        self.assertEqual(
            finder_for("-a", "chess.com", "hikaru"), GameFinder.by_player("hikaru", "chess.com")
        )
        self.assertEqual(
            finder_for("--api", "lichess.org", "drnykterstein"),
            GameFinder.by_player("drnykterstein", "lichess.org"),
        )

    def test_config_default_api(self) -> None:
        finder = finder_for("hikaru", default_api="lichess.org")
        self.assertEqual(finder.api, "lichess.org")

    def test_piece_colors(self) -> None:
        white = GameFinder.by_player("hikaru")
        white.pieces = "white"
        self.assertEqual(finder_for("--white", "hikaru"), white)
        self.assertEqual(finder_for("--black", "hikaru").pieces, "black")

    def test_opponent(self) -> None:
        self.assertEqual(finder_for("hikaru", "--vs", "magnuscarlsen").opponent, "magnuscarlsen")

    def test_year_month_day(self) -> None:
        finder = finder_for("hikaru", "-y", "2020", "-m", "9", "-d", "13")
        self.assertEqual((finder.year, finder.month, finder.day), (2020, 9, 13))

    def test_iso_date(self) -> None:
        expected = GameFinder.by_player("hikaru").on_date(date(2020, 9, 13))
        self.assertEqual(finder_for("hikaru", "--date", "2020-09-13"), expected)
        self.assertEqual(finder_for("hikaru", "--date", "2020-09-13T23:30:00Z"), expected)
        # 01:30 in UTC+02:00 is still the previous day in UTC.
        self.assertEqual(finder_for("hikaru", "--date", "2020-09-14T01:30:00+02:00"), expected)


class ParseArgsTests(unittest.TestCase):
    def _rejects(self, *argv: str) -> None:
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            parse_args(list(argv))

    def test_defaults(self) -> None:
        args = parse_args(["hikaru"])
        self.assertIsNone(args.output)
        self.assertIsNone(args.api)
        self.assertIsNone(args.config)
        self.assertEqual(args.verbose, 0)

    def test_output_and_verbosity(self) -> None:
        args = parse_args(["hikaru", "--pgn", "-vv"])
        self.assertEqual(args.output, "pgn")
        self.assertEqual(args.verbose, 2)

    def test_invalid_combinations(self) -> None:
        self._rejects("hikaru", "--white", "--black")
        self._rejects("hikaru", "--json", "--pgn")
        self._rejects("hikaru", "--date", "2020-09-13", "-y", "2020")

    def test_invalid_values(self) -> None:
        self._rejects("hikaru", "-m", "13")
        self._rejects("hikaru", "-d", "zero")
        self._rejects("hikaru", "--date", "13/09/2020")
        self._rejects("hikaru", "--api", "example.com")
        self._rejects()


if __name__ == "__main__":
    unittest.main()
