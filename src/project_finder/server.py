"""MCP server that discovers open-source projects across registries."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from project_finder import __version__
from project_finder.analytics.codeberg import CodebergAnalytics
from project_finder.analytics.engine import AnalyticsEngine
from project_finder.analytics.github import GitHubAnalytics
from project_finder.analytics.gitlab import GitLabAnalytics
from project_finder.discovery.service import DiscoveryService
from project_finder.ratelimit import TokenBucket
from project_finder.readme.base import ReadmeFetcherPort
from project_finder.readme.fetcher import ReadmeFetcher
from project_finder.settings import LOG_LEVEL_ENV_VAR, Settings, load_settings
from project_finder.sources.catalog import build_adapters
from project_finder.suggestions.base import SuggestionProviderPort
from project_finder.suggestions.gemini import GeminiSuggester
from project_finder.tools.compare import compare_projects
from project_finder.tools.discover import discover_projects
from project_finder.tools.insights import project_insights
from project_finder.tools.readme import project_readme
from project_finder.tools.sources import list_sources
from project_finder.tools.suggest import suggest_projects

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Send log records to stderr; stdout carries the stdio transport."""
    name = (level or os.environ.get(LOG_LEVEL_ENV_VAR, "") or "WARNING").strip().upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(level=numeric, stream=sys.stderr, format=_LOG_FORMAT)


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared state across all tool invocations."""

    http_client: httpx.AsyncClient
    settings: Settings
    limiter: TokenBucket
    discovery: DiscoveryService
    analytics: AnalyticsEngine
    suggester: SuggestionProviderPort
    readme: ReadmeFetcherPort


def build_context(http_client: httpx.AsyncClient, settings: Settings) -> AppContext:
    """Wire adapters, services, and engines around one HTTP client."""
    rate = settings.rate_limit
    limiter = TokenBucket(
        capacity=rate.capacity,
        refill_amount=rate.refill_amount,
        refill_interval=rate.refill_interval,
    )
    adapters = build_adapters(settings.sources, http_client, limiter, settings)
    analytics = AnalyticsEngine(
        [
            GitHubAnalytics(
                http_client, token=settings.github_token, timeout=settings.request_timeout
            ),
            GitLabAnalytics(
                http_client, token=settings.gitlab_token, timeout=settings.request_timeout
            ),
            CodebergAnalytics(http_client, timeout=settings.request_timeout),
        ]
    )
    suggester = GeminiSuggester(api_key=settings.gemini_api_key, model=settings.gemini_model)
    readme = ReadmeFetcher(
        http_client, github_token=settings.github_token, timeout=settings.request_timeout
    )
    return AppContext(
        http_client=http_client,
        settings=settings,
        limiter=limiter,
        discovery=DiscoveryService(adapters),
        analytics=analytics,
        suggester=suggester,
        readme=readme,
    )


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Manage shared adapter lifecycle -- the composition root."""
    settings = load_settings()
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout),
        follow_redirects=True,
        headers={"User-Agent": f"project-finder/{__version__}"},
        limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
        transport=httpx.AsyncHTTPTransport(retries=2),
    ) as http_client:
        yield build_context(http_client, settings)


mcp = FastMCP(
    "project-finder",
    instructions=(
        "project-finder searches code hosts (GitHub, GitLab, Codeberg) and package "
        "registries (npm, Packagist, crates.io, Maven Central, NuGet) for open-source "
        "projects matching a user's languages, topics, and desired characteristics.\n\n"
        "## Workflow\n"
        "1. **discover_projects** -- search every enabled source at once. Results are "
        "deduplicated by URL and ranked by stars (or downloads), then recency. "
        "'partial_errors' lists sources that failed; the other results are still valid.\n"
        "2. **project_insights** -- for a project the user is interested in, load weekly "
        "commit activity, a 0-100 health score, and an up/down/stable trend. Only "
        "GitHub, GitLab, and Codeberg projects have real analytics; others return a "
        "placeholder marked is_placeholder=true.\n"
        "3. **compare_projects** -- put two discovered projects side by side.\n"
        "4. **project_readme** -- read a GitHub, GitLab, or Codeberg project's README.\n"
        "5. **suggest_projects** -- ask an AI model for extra ideas when discovery "
        "returns few results. Suggestions are not verified against any registry.\n"
        "6. **list_sources** -- show which sources exist and which are enabled.\n\n"
        "Valid characteristics: beginner-friendly, good-first-issues, actively-maintained, "
        "good-documentation, large-community, cutting-edge-tech, needs-contributors."
    ),
    lifespan=app_lifespan,
)

# ─── Read-only tools ──────────────────────────────────────────
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True))(discover_projects)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True))(project_insights)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True))(compare_projects)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True))(project_readme)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True))(suggest_projects)
mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))(list_sources)
