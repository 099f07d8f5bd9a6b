"""Shared fixtures for tofuboi unit tests.

Provides an httpx client factory backed by MockTransport and a request
handler factory that plays the part of YouTube.
"""

from collections.abc import Callable

import httpx
import pytest


@pytest.fixture
def mock_client() -> Callable[..., httpx.AsyncClient]:
    """Factory: AsyncClient whose requests are answered by ``handler``."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def youtube_handler():
    """Factory: request handler serving a watch page plus per-language XML.

    Records the ``lang`` of every timed-text request in ``handler.requested``.
    """

    def _make(
        page: str,
        transcripts: dict[str, str] | None = None,
        *,
        timedtext_status: int = 200,
    ) -> Callable[[httpx.Request], httpx.Response]:
        transcripts = transcripts or {}
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/watch":
                return httpx.Response(200, text=page)
            if request.url.path == "/api/timedtext":
                lang = request.url.params.get("lang", "")
                requested.append(lang)
                if timedtext_status != 200:
                    return httpx.Response(timedtext_status, text="")
                return httpx.Response(200, text=transcripts.get(lang, ""))
            return httpx.Response(404)

        handler.requested = requested  # type: ignore[attr-defined]
        return handler

    return _make
