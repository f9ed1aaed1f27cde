"""Fetch README files from GitHub, GitLab, and Codeberg repository URLs."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import quote as urlquote

import httpx

from project_finder.sources.base import REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com/repos"


@dataclass(frozen=True, slots=True)
class ReadmeRequest:
    url: str
    headers: dict[str, str]


def github_readme_request(repo_url: str, token: str = "") -> ReadmeRequest | None:
    """Build a GitHub ``/readme`` API request that answers with raw markdown.

    Handles:
    - https://github.com/owner/repo
    - https://github.com/owner/repo/tree/main/packages/server-foo
    """
    headers = {"Accept": "application/vnd.github.raw"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    # Monorepo path: /owner/repo/tree/branch/path
    m = re.match(r"https?://github\.com/([^/]+)/([^/]+)/tree/([^/]+)/(.+?)/?$", repo_url)
    if m:
        owner, repo, branch, subpath = m.groups()
        return ReadmeRequest(
            f"{_GITHUB_API}/{owner}/{repo}/readme/{subpath}?ref={urlquote(branch)}", headers
        )

    m = re.match(r"https?://(?:www\.)?github\.com/([^/]+)/([^/]+?)(?:\.git)?(?:/.*)?$", repo_url)
    if m:
        owner, repo = m.groups()
        return ReadmeRequest(f"{_GITHUB_API}/{owner}/{repo}/readme", headers)
    return None


def gitlab_raw_url(repo_url: str) -> str:
    """Convert a GitLab URL (groups may be nested) to a raw README URL."""
    m = re.match(r"https?://gitlab\.com/(.+?)(?:\.git)?/?$", repo_url)
    if not m:
        return ""
    path = m.group(1).split("/-/", 1)[0]
    if path.count("/") < 1:
        return ""
    return f"https://gitlab.com/{path}/-/raw/HEAD/README.md"


def codeberg_raw_url(repo_url: str) -> str:
    """Convert a Codeberg URL to the Gitea raw-file API for the default branch."""
    m = re.match(r"https?://codeberg\.org/([^/]+)/([^/]+?)(?:\.git)?(?:/.*)?$", repo_url)
    if m:
        owner, repo = m.groups()
        return f"https://codeberg.org/api/v1/repos/{owner}/{repo}/raw/README.md"
    return ""


def readme_request(repo_url: str, github_token: str = "") -> ReadmeRequest | None:
    url = repo_url.strip()
    if "github.com" in url:
        return github_readme_request(url, github_token)
    if "gitlab.com" in url:
        raw = gitlab_raw_url(url)
    elif "codeberg.org" in url:
        raw = codeberg_raw_url(url)
    else:
        return None
    return ReadmeRequest(raw, {}) if raw else None


@dataclass
class ReadmeFetcher:
    """Adapter for ReadmeFetcherPort -- holds the shared httpx client.

    Only code-host URLs are recognized; package registry pages have no
    README endpoint and yield None.
    """

    http: httpx.AsyncClient
    github_token: str = ""
    timeout: float = REQUEST_TIMEOUT

    async def fetch_readme(self, repository_url: str) -> str | None:
        """Return the README markdown, or None if not found or unreachable."""
        request = readme_request(repository_url, self.github_token)
        if request is None:
            return None

        try:
            resp = await self.http.get(request.url, headers=request.headers, timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.warning("README fetch failed for %s: %s", repository_url, exc)
            return None
        if resp.status_code != 200:
            logger.info("No README for %s (status %d)", repository_url, resp.status_code)
            return None
        return resp.text
