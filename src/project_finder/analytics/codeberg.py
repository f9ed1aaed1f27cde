"""Codeberg (Gitea/Forgejo) repository analytics.

Gitea has no contributor statistics endpoint; contributors are derived from
the authors of commits in the trailing window.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass

import httpx

from project_finder.analytics import activity
from project_finder.analytics.base import (
    TOP_CONTRIBUTORS,
    dict_items,
    language_percentages,
    optional_json,
    repo_path,
)
from project_finder.models import (
    CanonicalProject,
    CommunityProfile,
    Contributor,
    ProjectAnalytics,
)
from project_finder.sources.base import REQUEST_TIMEOUT, as_int, get_json, malformed

_API = "https://codeberg.org/api/v1"


@dataclass
class CodebergAnalytics:
    http: httpx.AsyncClient
    timeout: float = REQUEST_TIMEOUT
    platform: str = "Codeberg"

    async def fetch(self, project: CanonicalProject) -> ProjectAnalytics:
        full_name = repo_path(project.url, "codeberg.org")
        repo = await get_json(
            self.http, self.platform, f"{_API}/repos/{full_name}", timeout=self.timeout
        )
        if not isinstance(repo, dict):
            raise malformed(self.platform, "a repository object")

        since = activity.window_start().isoformat()
        commits, languages = await asyncio.gather(
            optional_json(
                self.http,
                self.platform,
                f"{_API}/repos/{full_name}/commits",
                params={"since": since, "limit": 100, "stat": "false"},
                timeout=self.timeout,
            ),
            optional_json(
                self.http,
                self.platform,
                f"{_API}/repos/{full_name}/languages",
                timeout=self.timeout,
            ),
        )

        commit_list = dict_items(commits)
        dates = [_commit_field(c, "date") for c in commit_list]
        weeks = activity.bucket_commits(dates)

        authors = Counter(name for c in commit_list if (name := _author(c)))
        people = [Contributor(name=n, contributions=count) for n, count in authors.most_common()]

        return ProjectAnalytics(
            stars=as_int(repo.get("stars_count")),
            forks=as_int(repo.get("forks_count")),
            open_issues=as_int(repo.get("open_issues_count")) or 0,
            pull_requests=as_int(repo.get("open_pr_counter")) or 0,
            contributors=len(people),
            top_contributors=tuple(people[:TOP_CONTRIBUTORS]),
            last_commit=dates[0] if dates and dates[0] else repo.get("updated_at"),
            commit_frequency=activity.commit_frequency(weeks),
            monthly_commits=activity.monthly_commits(weeks),
            total_commits=activity.total_commits(weeks),
            weekly_activity=weeks,
            language_distribution=language_percentages(languages),
            community_profile=CommunityProfile(
                has_license=bool(repo.get("licenses")),
            ),
            platform_specific={
                "default_branch": repo.get("default_branch"),
                "archived": bool(repo.get("archived", False)),
                "mirror": bool(repo.get("mirror", False)),
            },
        )


def _commit_field(commit: dict, name: str) -> str | None:
    author = (commit.get("commit") or {}).get("author") or {}
    value = author.get(name) if isinstance(author, dict) else None
    return value if isinstance(value, str) else None


def _author(commit: dict) -> str | None:
    account = commit.get("author")
    if isinstance(account, dict) and account.get("login"):
        return str(account["login"])
    return _commit_field(commit, "name")
