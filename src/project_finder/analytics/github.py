"""GitHub repository analytics.

API docs: https://docs.github.com/en/rest/metrics
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime

import httpx

from project_finder.analytics import activity
from project_finder.analytics.activity import parse_timestamp
from project_finder.analytics.base import (
    TOP_CONTRIBUTORS,
    language_percentages,
    mean_hours,
    optional_json,
    repo_path,
)
from project_finder.models import (
    CanonicalProject,
    CiStatus,
    CommunityProfile,
    Contributor,
    ProjectAnalytics,
    WeeklyActivity,
)
from project_finder.sources.base import REQUEST_TIMEOUT, as_int, get_json, malformed

_API = "https://api.github.com"

_CONCLUSIONS: dict[str, CiStatus] = {
    "success": CiStatus.PASSING,
    "failure": CiStatus.FAILING,
    "timed_out": CiStatus.FAILING,
}


@dataclass
class GitHubAnalytics:
    """Loads repository, commit, contributor, language, and community data.

    ``/stats/commit_activity`` answers 202 while GitHub computes the
    statistics; the series is zero-filled until a later request succeeds.
    """

    http: httpx.AsyncClient
    token: str = ""
    timeout: float = REQUEST_TIMEOUT
    platform: str = "GitHub"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

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
        full_name = repo_path(project.url, "github.com")
        repo = await get_json(
            self.http,
            self.platform,
            f"{_API}/repos/{full_name}",
            headers=self._headers(),
            timeout=self.timeout,
        )
        if not isinstance(repo, dict):
            raise malformed(self.platform, "a repository object")

        base = f"/repos/{full_name}"
        weekly, contributors, languages, profile, open_prs, closed_prs, runs = await asyncio.gather(
            self._get(f"{base}/stats/commit_activity"),
            self._get(f"{base}/contributors", {"per_page": 100}),
            self._get(f"{base}/languages"),
            self._get(f"{base}/community/profile"),
            self._get(
                "/search/issues",
                {"q": f"repo:{full_name} type:pr state:open", "per_page": 1},
            ),
            self._get(f"{base}/pulls", {"state": "closed", "per_page": 30}),
            self._get(f"{base}/actions/runs", {"per_page": 1}),
        )

        weeks = activity.normalize_weeks(_weekly_points(weekly))
        top, contributor_count, contribution_total = _contributors(contributors)
        pull_requests = as_int(open_prs.get("total_count")) if isinstance(open_prs, dict) else None

        # GitHub counts open pull requests as open issues.
        open_issues = as_int(repo.get("open_issues_count")) or 0
        if pull_requests:
            open_issues = max(open_issues - pull_requests, 0)

        license_info = repo.get("license") or {}
        return ProjectAnalytics(
            stars=as_int(repo.get("stargazers_count")),
            forks=as_int(repo.get("forks_count")),
            open_issues=open_issues,
            pull_requests=pull_requests or 0,
            contributors=contributor_count,
            top_contributors=top,
            last_commit=repo.get("pushed_at"),
            commit_frequency=activity.commit_frequency(weeks),
            monthly_commits=activity.monthly_commits(weeks),
            total_commits=max(activity.total_commits(weeks), contribution_total),
            weekly_activity=weeks,
            language_distribution=language_percentages(languages),
            community_profile=_community_profile(profile),
            ci_status=_ci_status(runs),
            pr_merge_hours=_merge_hours(closed_prs),
            platform_specific={
                "default_branch": repo.get("default_branch"),
                "archived": bool(repo.get("archived", False)),
                "license": license_info.get("spdx_id") if isinstance(license_info, dict) else None,
                "watchers": as_int(repo.get("subscribers_count")),
                "homepage": repo.get("homepage") or None,
            },
        )


def _weekly_points(data: object) -> list[WeeklyActivity]:
    if not isinstance(data, list):
        return []
    points: list[WeeklyActivity] = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        week = as_int(entry.get("week"))
        if week is None:
            continue
        date = datetime.fromtimestamp(week, tz=UTC).date().isoformat()
        points.append(WeeklyActivity(date=date, commits=as_int(entry.get("total")) or 0))
    return points


def _contributors(data: object) -> tuple[tuple[Contributor, ...], int, int]:
    if not isinstance(data, list):
        return (), 0, 0
    people = [
        Contributor(name=str(c.get("login", "")), contributions=as_int(c.get("contributions")) or 0)
        for c in data
        if isinstance(c, dict)
    ]
    ranked = sorted(people, key=lambda c: c.contributions, reverse=True)
    return tuple(ranked[:TOP_CONTRIBUTORS]), len(people), sum(c.contributions for c in people)


def _community_profile(data: object) -> CommunityProfile:
    if not isinstance(data, dict):
        return CommunityProfile()
    files = data.get("files") or {}
    if not isinstance(files, dict):
        files = {}
    return CommunityProfile(
        has_readme=bool(files.get("readme")),
        has_license=bool(files.get("license")),
        has_contributing=bool(files.get("contributing")),
        has_code_of_conduct=bool(files.get("code_of_conduct") or files.get("code_of_conduct_file")),
        has_issue_templates=bool(files.get("issue_template")),
        health_percentage=as_int(data.get("health_percentage")) or 0,
    )


def _ci_status(data: object) -> CiStatus:
    if not isinstance(data, dict):
        return CiStatus.UNKNOWN
    runs = data.get("workflow_runs")
    if not isinstance(runs, list) or not runs or not isinstance(runs[0], dict):
        return CiStatus.UNKNOWN
    return _CONCLUSIONS.get(runs[0].get("conclusion") or "", CiStatus.UNKNOWN)


def _merge_hours(data: object) -> float | None:
    """Mean hours from opening to merge over recently closed pull requests."""
    if not isinstance(data, list):
        return None
    durations: list[float] = []
    for pr in data:
        if not isinstance(pr, dict):
            continue
        created = parse_timestamp(pr.get("created_at"))
        merged = parse_timestamp(pr.get("merged_at"))
        if created and merged:
            durations.append((merged - created).total_seconds())
    return mean_hours(durations)
