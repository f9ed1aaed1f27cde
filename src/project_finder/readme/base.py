"""Port: README fetching for discovered repositories."""

from __future__ import annotations

from typing import Protocol


class ReadmeFetcherPort(Protocol):
    """Port for fetching README files from repository URLs."""

    async def fetch_readme(
        self,
        repository_url: str,
    ) -> str | None:
        """Fetch README markdown for a repository URL, or None when unavailable."""
        ...
