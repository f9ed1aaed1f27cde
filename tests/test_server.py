"""Tests for server.py -- composition root and lifespan."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from project_finder.analytics.engine import AnalyticsEngine
from project_finder.discovery.service import DiscoveryService
from project_finder.readme.fetcher import ReadmeFetcher
from project_finder.server import app_lifespan, build_context, configure_logging
from project_finder.settings import RateLimitSettings, Settings
from project_finder.suggestions.gemini import GeminiSuggester


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "PROJECT_FINDER_CONFIG",
        "PROJECT_FINDER_SOURCES",
        "PROJECT_FINDER_LOG_LEVEL",
        "GITHUB_TOKEN",
        "GEMINI_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


class TestBuildContext:
    def test_wires_services(self):
        http = AsyncMock(spec=httpx.AsyncClient)
        settings = Settings(
            sources=("gitlab", "github"),
            rate_limit=RateLimitSettings(capacity=7, refill_amount=3, refill_interval=5.0),
            gemini_api_key="k",
        )

        app = build_context(http, settings)

        assert app.http_client is http
        assert app.settings is settings
        assert app.limiter.capacity == 7
        assert isinstance(app.discovery, DiscoveryService)
        assert [a.info.id for a in app.discovery.adapters] == ["github", "gitlab"]
        assert isinstance(app.analytics, AnalyticsEngine)
        assert app.analytics.supports("Codeberg")
        assert isinstance(app.suggester, GeminiSuggester)
        assert app.suggester.api_key == "k"
        assert isinstance(app.readme, ReadmeFetcher)

    def test_request_timeout_reaches_analytics_and_readme(self):
        http = AsyncMock(spec=httpx.AsyncClient)
        settings = Settings(request_timeout=4.5, github_token="ghp_x")

        app = build_context(http, settings)

        assert [f.platform for f in app.analytics.fetchers] == ["GitHub", "GitLab", "Codeberg"]
        assert all(f.timeout == 4.5 for f in app.analytics.fetchers)
        assert app.readme.timeout == 4.5
        assert app.readme.github_token == "ghp_x"


class TestAppLifespan:
    """Tests for the app_lifespan context manager."""

    async def test_creates_http_client_with_retries_transport(self):
        async with app_lifespan(MagicMock()) as ctx:
            transport = ctx.http_client._transport
            assert isinstance(transport, httpx.AsyncHTTPTransport)
            assert transport._pool._retries == 2

    async def test_http_client_settings(self):
        async with app_lifespan(MagicMock()) as ctx:
            client = ctx.http_client
            assert client.timeout.read == 10.0
            assert client.follow_redirects is True
            assert client.headers["User-Agent"].startswith("project-finder/")

    async def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PROJECT_FINDER_SOURCES", "npm,crates-io")
        async with app_lifespan(MagicMock()) as ctx:
            assert [a.info.id for a in ctx.discovery.adapters] == ["npm", "crates-io"]

    async def test_client_closed_after_lifespan(self):
        async with app_lifespan(MagicMock()) as ctx:
            client = ctx.http_client
            assert not client.is_closed
        assert client.is_closed

    async def test_creates_http_client_with_pool_limits(self):
        original_init = httpx.AsyncClient.__init__
        captured_kwargs: dict[str, object] = {}

        def capture_init(self, **kwargs):
            captured_kwargs.update(kwargs)
            return original_init(self, **kwargs)

        with patch.object(httpx.AsyncClient, "__init__", capture_init):
            async with app_lifespan(MagicMock()) as ctx:
                assert ctx.http_client is not None

        limits = captured_kwargs["limits"]
        assert isinstance(limits, httpx.Limits)
        assert limits.max_connections == 20
        assert limits.max_keepalive_connections == 10


class TestConfigureLogging:
    def test_level_from_argument(self):
        with patch("project_finder.server.logging.basicConfig") as basic:
            configure_logging("debug")
        assert basic.call_args.kwargs["level"] == logging.DEBUG

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("PROJECT_FINDER_LOG_LEVEL", "info")
        with patch("project_finder.server.logging.basicConfig") as basic:
            configure_logging()
        assert basic.call_args.kwargs["level"] == logging.INFO

    def test_unknown_level_falls_back_to_warning(self):
        with patch("project_finder.server.logging.basicConfig") as basic:
            configure_logging("chatty")
        assert basic.call_args.kwargs["level"] == logging.WARNING
