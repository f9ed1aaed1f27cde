"""Port: AI project suggestions."""

from __future__ import annotations

from typing import Protocol

from project_finder.models import CanonicalProject, Preference


class SuggestionProviderPort(Protocol):
    """Port for a generative provider that proposes projects for a preference.

    Returned records use the canonical shape with numeric statistics set to 0.
    """

    async def suggest(self, preference: Preference) -> list[CanonicalProject]:
        """Return suggested projects, or raise SuggestionError."""
        ...
