"""Domain models for project-finder. All frozen dataclasses -- no mutation after creation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

# ─── Enumerations ─────────────────────────────────────────────


class Characteristic(StrEnum):
    BEGINNER_FRIENDLY = "beginner-friendly"
    GOOD_FIRST_ISSUES = "good-first-issues"
    ACTIVELY_MAINTAINED = "actively-maintained"
    GOOD_DOCUMENTATION = "good-documentation"
    LARGE_COMMUNITY = "large-community"
    CUTTING_EDGE_TECH = "cutting-edge-tech"
    NEEDS_CONTRIBUTORS = "needs-contributors"

    @property
    def label(self) -> str:
        return _CHARACTERISTIC_LABELS[self]


_CHARACTERISTIC_LABELS: dict[Characteristic, str] = {
    Characteristic.BEGINNER_FRIENDLY: "Beginner-Friendly",
    Characteristic.GOOD_FIRST_ISSUES: "Good First Issues",
    Characteristic.ACTIVELY_MAINTAINED: "Actively Maintained",
    Characteristic.GOOD_DOCUMENTATION: "Good Documentation",
    Characteristic.LARGE_COMMUNITY: "Large Community",
    Characteristic.CUTTING_EDGE_TECH: "Cutting-Edge Tech",
    Characteristic.NEEDS_CONTRIBUTORS: "Needs Contributors",
}


class SortHint(StrEnum):
    RECENT = "recent"
    POPULAR = "popular"


class SourceKind(StrEnum):
    CODE_HOSTING = "code_hosting"
    PACKAGE_REGISTRY = "package_registry"
    AGGREGATOR = "aggregator"
    MOBILE_OPEN_SOURCE = "mobile_open_source"


class Trend(StrEnum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class CiStatus(StrEnum):
    PASSING = "passing"
    FAILING = "failing"
    UNKNOWN = "unknown"


# ─── Query Models ─────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Preference:
    """What the user is looking for. Immutable input to one discovery run.

    Entries may themselves be comma-separated; the query translator splits,
    trims, and lower-cases them.
    """

    languages: tuple[str, ...] = ()
    topics: tuple[str, ...] = ()
    characteristics: tuple[str, ...] = ()

    @classmethod
    def parse(
        cls,
        languages: str = "",
        topics: str = "",
        characteristics: Iterable[str] = (),
    ) -> Preference:
        """Build a Preference from comma-joined form strings."""
        return cls(
            languages=(languages,) if languages else (),
            topics=(topics,) if topics else (),
            characteristics=tuple(characteristics),
        )


@dataclass(frozen=True, slots=True)
class QueryParams:
    """Source-independent parameter bag produced by the query translator."""

    languages: tuple[str, ...] = ()
    topics: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    characteristics: frozenset[Characteristic] = frozenset()
    sort: SortHint | None = None

    @property
    def primary_language(self) -> str | None:
        return self.languages[0] if self.languages else None

    @property
    def text(self) -> str:
        """Topics followed by characteristic keywords, space separated."""
        return " ".join((*self.topics, *self.keywords))

    @property
    def is_empty(self) -> bool:
        return not (self.languages or self.topics or self.characteristics)

    def wants(self, characteristic: Characteristic) -> bool:
        return characteristic in self.characteristics


# ─── Source Models ────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class SourceInfo:
    """Static description of one external registry."""

    id: str
    label: str
    kind: SourceKind
    implemented: bool = True
    api_url: str = ""


@dataclass(frozen=True, slots=True)
class CanonicalProject:
    """A project normalized from any source.

    Numeric stats use ``None`` for "unknown" -- never coerce a missing value
    to zero unless the source itself defines the statistic.
    """

    name: str
    url: str
    platform: str
    description: str = ""
    language: str | None = None
    tags: tuple[str, ...] = ()
    stars: int | None = None
    forks: int | None = None
    watchers: int | None = None
    open_issues: int | None = None
    closed_issues: int | None = None
    downloads: int | None = None
    monthly_downloads: int | None = None
    recent_downloads: int | None = None
    owner: str | None = None
    version: str | None = None
    updated_at: str | None = None

    @property
    def dedup_key(self) -> str:
        return self.url.lower()

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> CanonicalProject:
        """Rebuild a record from ``to_dict`` output; unknown keys are ignored."""

        def _int(key: str) -> int | None:
            value = data.get(key)
            return value if isinstance(value, int) and not isinstance(value, bool) else None

        def _str(key: str) -> str | None:
            value = data.get(key)
            return value if isinstance(value, str) and value else None

        raw_tags = data.get("tags")
        tags = raw_tags if isinstance(raw_tags, list | tuple) else ()
        return cls(
            name=_str("name") or _str("url") or "",
            url=_str("url") or "",
            platform=_str("platform") or "",
            description=_str("description") or "",
            language=_str("language"),
            tags=tuple(t for t in tags if isinstance(t, str)),
            stars=_int("stars"),
            forks=_int("forks"),
            watchers=_int("watchers"),
            open_issues=_int("open_issues"),
            closed_issues=_int("closed_issues"),
            downloads=_int("downloads"),
            monthly_downloads=_int("monthly_downloads"),
            recent_downloads=_int("recent_downloads"),
            owner=_str("owner"),
            version=_str("version"),
            updated_at=_str("updated_at"),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "url": self.url,
            "platform": self.platform,
            "description": self.description,
            "language": self.language,
            "tags": list(self.tags),
            "stars": self.stars,
            "forks": self.forks,
            "watchers": self.watchers,
            "open_issues": self.open_issues,
            "closed_issues": self.closed_issues,
            "downloads": self.downloads,
            "monthly_downloads": self.monthly_downloads,
            "recent_downloads": self.recent_downloads,
            "owner": self.owner,
            "version": self.version,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True, slots=True)
class FetchSuccess:
    platform: str
    records: tuple[CanonicalProject, ...] = ()


@dataclass(frozen=True, slots=True)
class FetchFailure:
    platform: str
    message: str
    status_code: int | None = None

    def describe(self) -> str:
        """Render as ``"<Platform>: <message> (Status: <code>)"``."""
        if self.status_code is not None:
            return f"{self.platform}: {self.message} (Status: {self.status_code})"
        return f"{self.platform}: {self.message}"


FetchOutcome = FetchSuccess | FetchFailure


@dataclass(frozen=True, slots=True)
class DiscoveryResult:
    """Ranked unique records plus one human-readable string per failed source."""

    records: tuple[CanonicalProject, ...] = ()
    partial_errors: tuple[str, ...] = ()


# ─── Analytics Models ─────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class WeeklyActivity:
    date: str  # ISO date of the first day of the week
    commits: int = 0


@dataclass(frozen=True, slots=True)
class Contributor:
    name: str
    contributions: int = 0


@dataclass(frozen=True, slots=True)
class CommunityProfile:
    has_readme: bool = False
    has_license: bool = False
    has_contributing: bool = False
    has_code_of_conduct: bool = False
    has_issue_templates: bool = False
    health_percentage: int = 0


@dataclass(frozen=True, slots=True)
class ProjectAnalytics:
    """Activity and community data for one project.

    ``weekly_activity`` always holds exactly 12 points, oldest first.
    """

    stars: int | None = None
    forks: int | None = None
    open_issues: int = 0
    pull_requests: int = 0
    contributors: int = 0
    top_contributors: tuple[Contributor, ...] = ()
    last_commit: str | None = None
    commit_frequency: float = 0.0
    monthly_commits: int = 0
    total_commits: int = 0
    weekly_activity: tuple[WeeklyActivity, ...] = ()
    language_distribution: dict[str, float] = field(default_factory=dict)
    community_profile: CommunityProfile = field(default_factory=CommunityProfile)
    code_quality_score: float = 0.0
    test_coverage: float = 0.0
    ci_status: CiStatus = CiStatus.UNKNOWN
    issue_response_hours: float | None = None
    pr_merge_hours: float | None = None
    platform_specific: dict[str, object] = field(default_factory=dict)
    is_placeholder: bool = False


@dataclass(frozen=True, slots=True)
class TrendResult:
    trend: Trend
    confidence: float
    change_percent: float = 0.0


@dataclass(frozen=True, slots=True)
class ProjectComparison:
    """Side-by-side view of two projects."""

    first: str
    second: str
    common_tags: tuple[str, ...] = ()
    only_first: tuple[str, ...] = ()
    only_second: tuple[str, ...] = ()
    community: dict[str, tuple[int, int]] = field(default_factory=dict)
    activity: dict[str, tuple[int, int]] = field(default_factory=dict)
