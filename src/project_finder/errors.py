"""Exception hierarchy for project-finder.

All exceptions inherit from ProjectFinderError (single catch point).
Messages are written for end users -- short, actionable, no stack traces.
"""

from __future__ import annotations


class ProjectFinderError(Exception):
    """Base exception for all project-finder errors."""


class SourceError(ProjectFinderError):
    """A single source (registry or code host) failed to answer a search.

    Carries the source's display name and, when the failure came from an
    HTTP response, its status code.
    """

    def __init__(self, platform: str, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.platform = platform
        self.message = message
        self.status_code = status_code


class ConfigurationError(ProjectFinderError):
    """Missing credentials or invalid settings."""


class InvalidPreferenceError(ProjectFinderError):
    """The search preference has no languages, topics, or characteristics."""


class AnalyticsError(ProjectFinderError):
    """Error fetching analytics for a project on a supported platform."""


class SuggestionError(ProjectFinderError):
    """The suggestion provider failed or returned unusable output."""
