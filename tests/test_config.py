import logging
import unittest
import uuid
from pathlib import Path
from unittest.mock import patch

from chessfinder import config
from chessfinder.config import load_config


class ConfigTests(unittest.TestCase):
    def _write_config(self, text: str) -> Path:
        path = Path(f".test_cgf_{uuid.uuid4().hex}.yaml")
        self.addCleanup(lambda: path.unlink(missing_ok=True))
        path.write_text(text, encoding="utf-8")
        return path

    def test_defaults_without_a_file(self) -> None:
        missing = Path(f".test_cgf_{uuid.uuid4().hex}.yaml")
        with patch.object(config, "DEFAULT_CONFIG_PATH", missing):
            cfg = load_config()
        self.assertEqual(cfg.defaults.api, "chess.com")
        self.assertEqual(cfg.defaults.output, "table")
        self.assertEqual(cfg.http.timeout, 10)
        self.assertEqual(cfg.logging.level_number, logging.WARNING)

    def test_default_path_is_used_when_present(self) -> None:
        path = self._write_config("defaults:\n  output: pgn\n")
        with patch.object(config, "DEFAULT_CONFIG_PATH", path):
            self.assertEqual(load_config().defaults.output, "pgn")

    def test_full_file(self) -> None:
        path = self._write_config(
            "http:\n"
            "  timeout: 2.5\n"
            "  user_agent: tester/1.0\n"
            "defaults:\n"
            "  api: lichess.org\n"
            "  output: json\n"
            "logging:\n"
            "  level: debug\n"
            "  file: logs/cgf.log\n"
        )
        cfg = load_config(path)
        self.assertEqual(cfg.http.timeout, 2.5)
        self.assertEqual(cfg.http.user_agent, "tester/1.0")
        self.assertEqual(cfg.defaults.api, "lichess.org")
        self.assertEqual(cfg.logging.level_number, logging.DEBUG)
        self.assertEqual(cfg.logging.file, "logs/cgf.log")

    def test_empty_file_gives_defaults(self) -> None:
        self.assertEqual(load_config(self._write_config("")), config.Config())

    def test_explicit_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config(f".test_cgf_{uuid.uuid4().hex}.yaml")

    def test_invalid_values(self) -> None:
        for text in (
            "defaults:\n  api: example.com\n",
            "defaults:\n  output: svg\n",
            "http:\n  timeout: 0\n",
            "http:\n  timeout: soon\n",
            "logging:\n  level: chatty\n",
            "- just\n- a list\n",
            "http: [unclosed\n",
        ):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    load_config(self._write_config(text))


if __name__ == "__main__":
    unittest.main()
