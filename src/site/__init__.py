"""Site assembly: index views and the build orchestrator."""

from quire.site.builder import BuildResult, SiteBuilder
from quire.site.index import IndexEntry, build_index, permalink_for

__all__ = [
    "BuildResult",
    "IndexEntry",
    "SiteBuilder",
    "build_index",
    "permalink_for",
]
