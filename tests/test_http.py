import io
import unittest
import urllib.error
from unittest.mock import MagicMock, patch

from chessfinder.http import HttpClient, HttpError, build_url


def fake_response(body: bytes) -> MagicMock:
    response = MagicMock()
    response.read.return_value = body
    response.__enter__.return_value = response
    return response


class BuildUrlTests(unittest.TestCase):
    def test_params(self) -> None:
        url = build_url("https://lichess.org/api/games/user/a", {
            "pgnInJson": True, "evals": False, "max": 5, "vs": None,
        })
        self.assertEqual(
            url, "https://lichess.org/api/games/user/a?pgnInJson=true&evals=false&max=5"
        )

    def test_no_params(self) -> None:
        self.assertEqual(build_url("https://x.test", None), "https://x.test")
        self.assertEqual(build_url("https://x.test", {"vs": None}), "https://x.test")


class HttpClientTests(unittest.TestCase):
    def test_get_json_sends_headers(self) -> None:
        client = HttpClient(timeout=3, user_agent="tester/1.0")
        with patch("urllib.request.urlopen", return_value=fake_response(b'{"a": 1}')) as urlopen:
            self.assertEqual(client.get_json("https://x.test/game"), {"a": 1})
        request = urlopen.call_args.args[0]
        self.assertEqual(request.full_url, "https://x.test/game")
        self.assertEqual(request.get_header("User-agent"), "tester/1.0")
        self.assertEqual(urlopen.call_args.kwargs["timeout"], 3)

    def test_get_ndjson_skips_blank_lines(self) -> None:
        body = b'{"id": "a"}\n\n{"id": "b"}\n'
        with patch("urllib.request.urlopen", return_value=fake_response(body)):
            items = HttpClient().get_ndjson("https://x.test/games")
        self.assertEqual(items, [{"id": "a"}, {"id": "b"}])

    def test_invalid_json(self) -> None:
        with patch("urllib.request.urlopen", return_value=fake_response(b"<html>")):
            with self.assertRaises(HttpError):
                HttpClient().get_json("https://x.test/game")

    def test_http_status_is_kept(self) -> None:
        error = urllib.error.HTTPError(
            "https://x.test/game", 404, "Not Found", {}, io.BytesIO(b"")
        )
        with patch("urllib.request.urlopen", side_effect=error):
            with self.assertRaises(HttpError) as ctx:
                HttpClient().get_json("https://x.test/game")
        self.assertEqual(ctx.exception.status, 404)
        self.assertIn("HTTP 404", str(ctx.exception))

    def test_network_failure(self) -> None:
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("no route")):
            with self.assertRaises(HttpError) as ctx:
                HttpClient().get_json("https://x.test/game")
        self.assertIsNone(ctx.exception.status)

    def test_timeout(self) -> None:
        with patch("urllib.request.urlopen", side_effect=TimeoutError()):
            with self.assertRaises(HttpError):
                HttpClient(timeout=1).get_json("https://x.test/game")


if __name__ == "__main__":
    unittest.main()
