"""Sources that are declared in the catalog but have no usable search API."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from project_finder.models import CanonicalProject, QueryParams, SourceInfo, SourceKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NotImplementedSource:
    """Always returns no records and logs why the source is not searched."""

    info: SourceInfo
    reason: str

    async def fetch(self, params: QueryParams) -> list[CanonicalProject]:
        logger.warning("%s is not implemented: %s", self.info.label, self.reason)
        return []


BITBUCKET = SourceInfo(
    id="bitbucket",
    label="Bitbucket",
    kind=SourceKind.CODE_HOSTING,
    implemented=False,
    api_url="https://api.bitbucket.org/2.0/repositories",
)
SOURCEFORGE = SourceInfo(
    id="sourceforge",
    label="SourceForge",
    kind=SourceKind.CODE_HOSTING,
    implemented=False,
    api_url="https://sourceforge.net/directory/",
)
PYPI = SourceInfo(
    id="pypi",
    label="PyPI",
    kind=SourceKind.PACKAGE_REGISTRY,
    implemented=False,
    api_url="https://pypi.org/search/",
)
RUBYGEMS = SourceInfo(
    id="rubygems",
    label="RubyGems",
    kind=SourceKind.PACKAGE_REGISTRY,
    implemented=False,
    api_url="https://rubygems.org/api/v1/search.json",
)
LIBRARIES_IO = SourceInfo(
    id="libraries-io",
    label="Libraries.io",
    kind=SourceKind.AGGREGATOR,
    implemented=False,
    api_url="https://libraries.io/api",
)
OPEN_HUB = SourceInfo(
    id="open-hub",
    label="Open Hub",
    kind=SourceKind.AGGREGATOR,
    implemented=False,
    api_url="https://www.openhub.net",
)
F_DROID = SourceInfo(
    id="f-droid",
    label="F-Droid",
    kind=SourceKind.MOBILE_OPEN_SOURCE,
    implemented=False,
    api_url="https://f-droid.org/repo/index.xml",
)

REASONS: dict[str, str] = {
    BITBUCKET.id: "public repository search was removed from the Bitbucket API",
    SOURCEFORGE.id: "no keyword search endpoint, only HTML directory pages",
    PYPI.id: "search is only available as HTML pages",
    RUBYGEMS.id: "search endpoint is unreliable",
    LIBRARIES_IO.id: "search requires an API key",
    OPEN_HUB.id: "search requires an API key and returns XML",
    F_DROID.id: "the index is an XML feed, not a search API",
}
