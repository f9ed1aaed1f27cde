"""Ordered catalog of every known source and the factory for enabled adapters.

Declaration order matters: the orchestrator reports outcomes in this order
and the deduplicator keeps the first record it sees for a URL.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import httpx

from project_finder.errors import ConfigurationError
from project_finder.models import SourceInfo
from project_finder.ratelimit import TokenBucket
from project_finder.settings import Settings
from project_finder.sources import codeberg, crates, github, gitlab, maven, npm, nuget, packagist
from project_finder.sources import placeholders as ph
from project_finder.sources.base import SourceAdapterPort
from project_finder.sources.codeberg import CodebergSource
from project_finder.sources.crates import CratesIoSource
from project_finder.sources.github import GitHubSource
from project_finder.sources.gitlab import GitLabSource
from project_finder.sources.maven import MavenCentralSource
from project_finder.sources.npm import NpmSource
from project_finder.sources.nuget import NuGetSource
from project_finder.sources.packagist import PackagistSource
from project_finder.sources.placeholders import NotImplementedSource

SOURCES: tuple[SourceInfo, ...] = (
    github.INFO,
    gitlab.INFO,
    ph.BITBUCKET,
    codeberg.INFO,
    ph.SOURCEFORGE,
    npm.INFO,
    ph.PYPI,
    packagist.INFO,
    ph.RUBYGEMS,
    crates.INFO,
    maven.INFO,
    nuget.INFO,
    ph.LIBRARIES_IO,
    ph.OPEN_HUB,
    ph.F_DROID,
)

_BY_ID: dict[str, SourceInfo] = {info.id: info for info in SOURCES}

DEFAULT_SOURCE_IDS: tuple[str, ...] = tuple(info.id for info in SOURCES if info.implemented)

_Factory = Callable[[httpx.AsyncClient, TokenBucket, Settings], SourceAdapterPort]

_FACTORIES: dict[str, _Factory] = {
    github.INFO.id: lambda http, limiter, s: GitHubSource(
        http, token=s.github_token, max_results=s.max_results, timeout=s.request_timeout
    ),
    gitlab.INFO.id: lambda http, limiter, s: GitLabSource(
        http, token=s.gitlab_token, max_results=s.max_results, timeout=s.request_timeout
    ),
    codeberg.INFO.id: lambda http, limiter, s: CodebergSource(
        http, max_results=s.max_results, timeout=s.request_timeout
    ),
    npm.INFO.id: lambda http, limiter, s: NpmSource(
        http, limiter, max_results=s.max_results, timeout=s.request_timeout
    ),
    packagist.INFO.id: lambda http, limiter, s: PackagistSource(
        http, limiter, max_results=s.max_results, timeout=s.request_timeout
    ),
    crates.INFO.id: lambda http, limiter, s: CratesIoSource(
        http, max_results=s.max_results, timeout=s.request_timeout
    ),
    maven.INFO.id: lambda http, limiter, s: MavenCentralSource(
        http, max_results=s.max_results, timeout=s.request_timeout
    ),
    nuget.INFO.id: lambda http, limiter, s: NuGetSource(
        http, max_results=s.max_results, timeout=s.request_timeout
    ),
}


def get_source(source_id: str) -> SourceInfo:
    """Look up a source by id.

    Raises:
        ConfigurationError: If the id is not in the catalog.
    """
    info = _BY_ID.get(source_id.strip().lower())
    if info is None:
        known = ", ".join(_BY_ID)
        raise ConfigurationError(f"Unknown source '{source_id}'. Known sources: {known}.")
    return info


def build_adapters(
    ids: Iterable[str] | None,
    http: httpx.AsyncClient,
    limiter: TokenBucket,
    settings: Settings,
) -> list[SourceAdapterPort]:
    """Build adapters for the enabled source ids, in catalog order.

    ``None`` enables every implemented source. Not-implemented sources can be
    enabled explicitly; they contribute nothing but a logged warning.

    Raises:
        ConfigurationError: If any id is not in the catalog.
    """
    enabled = DEFAULT_SOURCE_IDS if ids is None else tuple(ids)
    wanted = {get_source(source_id).id for source_id in enabled}

    adapters: list[SourceAdapterPort] = []
    for info in SOURCES:
        if info.id not in wanted:
            continue
        factory = _FACTORIES.get(info.id)
        if factory is None:
            adapters.append(NotImplementedSource(info, ph.REASONS[info.id]))
        else:
            adapters.append(factory(http, limiter, settings))
    return adapters
