"""
Blocking JSON-over-HTTP helper built on stdlib urllib (no extra deps).

Both chess APIs are plain GET endpoints returning either a JSON document or
newline-delimited JSON, so this is all the transport the finder needs.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Mapping

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "chess-game-finder/0.4"


class HttpError(Exception):
    """Raised when a request fails or its body is not the JSON we expected."""

    def __init__(self, url: str, message: str, status: int | None = None) -> None:
        self.url = url
        self.status = status
        super().__init__(f"{message} [{url}]")


def build_url(url: str, params: Mapping[str, object] | None = None) -> str:
    if not params:
        return url
    query = urllib.parse.urlencode({k: _param(v) for k, v in params.items() if v is not None})
    return f"{url}?{query}" if query else url


def _param(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class HttpClient:
    def __init__(self, timeout: float = 10, user_agent: str = DEFAULT_USER_AGENT) -> None:
        self.timeout = timeout
        self.user_agent = user_agent

    def get_json(self, url: str, params: Mapping[str, object] | None = None) -> Any:
        full_url = build_url(url, params)
        body = self._get(full_url, accept="application/json")
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise HttpError(full_url, f"response is not valid JSON: {exc}") from exc

    def get_ndjson(self, url: str, params: Mapping[str, object] | None = None) -> list[Any]:
        full_url = build_url(url, params)
        body = self._get(full_url, accept="application/x-ndjson")
        items: list[Any] = []
        for line in body.decode("utf-8").splitlines():
            if not line.strip():
                continue
            try:
                items.append(json.loads(line))
            except json.JSONDecodeError as exc:
                raise HttpError(full_url, f"response line is not valid JSON: {exc}") from exc
        return items

    def _get(self, url: str, *, accept: str) -> bytes:
        headers = {
            "Accept": accept,
            "User-Agent": self.user_agent,
        }
        req = urllib.request.Request(url, headers=headers, method="GET")
        logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                body = resp.read()
        except urllib.error.HTTPError as exc:
            raise HttpError(url, f"HTTP {exc.code}: {exc.reason}", status=exc.code) from exc
        except urllib.error.URLError as exc:
            raise HttpError(url, f"request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise HttpError(url, f"request timed out after {self.timeout}s") from exc
        logger.debug("Response length: %d", len(body))
        return body
