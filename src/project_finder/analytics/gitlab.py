"""GitLab project analytics.

API docs: https://docs.gitlab.com/ee/api/projects.html
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from project_finder.analytics import activity
from project_finder.analytics.base import (
    TOP_CONTRIBUTORS,
    dict_items,
    optional_json,
    repo_path,
)
from project_finder.models import (
    CanonicalProject,
    CiStatus,
    CommunityProfile,
    Contributor,
    ProjectAnalytics,
)
from project_finder.sources.base import REQUEST_TIMEOUT, as_int, get_json, malformed

_API = "https://gitlab.com/api/v4"

_PIPELINE_STATUS: dict[str, CiStatus] = {
    "success": CiStatus.PASSING,
    "failed": CiStatus.FAILING,
}


@dataclass
class GitLabAnalytics:
    """Loads project, commit, contributor, and language data from GitLab.com.

    Open merge requests are counted from one page of 100, so larger
    backlogs report 100.
    """

    http: httpx.AsyncClient
    token: str = ""
    timeout: float = REQUEST_TIMEOUT
    platform: str = "GitLab"

    def _headers(self) -> dict[str, str]:
        return {"PRIVATE-TOKEN": self.token} if self.token else {}

    async def _get(self, path: str, params: dict[str, object] | None = None) -> object | None:
        return await optional_json(
            self.http,
            self.platform,
            f"{_API}{path}",
            params=params,
            headers=self._headers(),
            timeout=self.timeout,
        )

    async def fetch(self, project: CanonicalProject) -> ProjectAnalytics:
        path = repo_path(project.url, "gitlab.com", nested=True)
        project_id = quote(path, safe="")
        data = await get_json(
            self.http,
            self.platform,
            f"{_API}/projects/{project_id}",
            headers=self._headers(),
            timeout=self.timeout,
        )
        if not isinstance(data, dict):
            raise malformed(self.platform, "a project object")

        base = f"/projects/{project_id}"
        since = activity.window_start().isoformat()
        commits, contributors, languages, merge_requests, pipelines = await asyncio.gather(
            self._get(f"{base}/repository/commits", {"since": since, "per_page": 100}),
            self._get(f"{base}/repository/contributors", {"per_page": 100}),
            self._get(f"{base}/languages"),
            self._get(f"{base}/merge_requests", {"state": "opened", "per_page": 100}),
            self._get(f"{base}/pipelines", {"per_page": 1}),
        )

        commit_list = dict_items(commits)
        weeks = activity.bucket_commits(
            c.get("committed_date") or c.get("created_at") for c in commit_list
        )
        people = _contributors(contributors)
        last_commit = (
            commit_list[0].get("committed_date") if commit_list else data.get("last_activity_at")
        )

        return ProjectAnalytics(
            stars=as_int(data.get("star_count")),
            forks=as_int(data.get("forks_count")),
            open_issues=as_int(data.get("open_issues_count")) or 0,
            pull_requests=len(merge_requests) if isinstance(merge_requests, list) else 0,
            contributors=len(people),
            top_contributors=tuple(people[:TOP_CONTRIBUTORS]),
            last_commit=last_commit,
            commit_frequency=activity.commit_frequency(weeks),
            monthly_commits=activity.monthly_commits(weeks),
            total_commits=max(
                activity.total_commits(weeks), sum(p.contributions for p in people)
            ),
            weekly_activity=weeks,
            language_distribution=_languages(languages),
            community_profile=CommunityProfile(
                has_readme=bool(data.get("readme_url")),
                has_license=bool(data.get("license_url") or data.get("license")),
                has_contributing=bool(data.get("contributing_url")),
            ),
            ci_status=_ci_status(pipelines),
            platform_specific={
                "default_branch": data.get("default_branch"),
                "archived": bool(data.get("archived", False)),
                "created_at": data.get("created_at"),
            },
        )


def _contributors(data: object) -> list[Contributor]:
    if not isinstance(data, list):
        return []
    people = [
        Contributor(name=str(c.get("name", "")), contributions=as_int(c.get("commits")) or 0)
        for c in data
        if isinstance(c, dict)
    ]
    return sorted(people, key=lambda c: c.contributions, reverse=True)


def _languages(data: object) -> dict[str, float]:
    """GitLab already reports percentages."""
    if not isinstance(data, dict):
        return {}
    return {
        str(lang): round(float(pct), 1)
        for lang, pct in data.items()
        if isinstance(pct, int | float) and not isinstance(pct, bool)
    }


def _ci_status(data: object) -> CiStatus:
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return CiStatus.UNKNOWN
    return _PIPELINE_STATUS.get(data[0].get("status") or "", CiStatus.UNKNOWN)
