"""Side-by-side comparison of two discovered projects."""

from __future__ import annotations

from project_finder.models import CanonicalProject, ProjectAnalytics, ProjectComparison


def _ordered_difference(left: tuple[str, ...], right: tuple[str, ...]) -> tuple[str, ...]:
    exclude = set(right)
    return tuple(dict.fromkeys(tag for tag in left if tag not in exclude))


def compare_projects(
    first: CanonicalProject,
    second: CanonicalProject,
    first_analytics: ProjectAnalytics | None = None,
    second_analytics: ProjectAnalytics | None = None,
) -> ProjectComparison:
    """Compare tags, community figures, and (when analytics are given) activity.

    Unknown figures are reported as 0.
    """
    second_tags = set(second.tags)
    common = tuple(dict.fromkeys(tag for tag in first.tags if tag in second_tags))

    community = {
        "stars": (first.stars or 0, second.stars or 0),
        "forks": (first.forks or 0, second.forks or 0),
        "watchers": (first.watchers or 0, second.watchers or 0),
    }

    a = first_analytics or ProjectAnalytics()
    b = second_analytics or ProjectAnalytics()
    activity = {
        "monthly_commits": (a.monthly_commits, b.monthly_commits),
        "open_issues": (
            first.open_issues if first.open_issues is not None else a.open_issues,
            second.open_issues if second.open_issues is not None else b.open_issues,
        ),
        "pull_requests": (a.pull_requests, b.pull_requests),
    }

    return ProjectComparison(
        first=first.name,
        second=second.name,
        common_tags=common,
        only_first=_ordered_difference(first.tags, second.tags),
        only_second=_ordered_difference(second.tags, first.tags),
        community=community,
        activity=activity,
    )
