"""Port: where repository input comes from (implemented in infrastructure)."""

from __future__ import annotations

from typing import Protocol

from insight_engine.domain.entities import AnalysisMetadata
from insight_engine.domain.value_objects import GitHubUrl


class RepoFetcher(Protocol):
    """Supplies the README and metadata the engine analyses for a repository."""

    async def fetch_metadata(self, url: GitHubUrl) -> AnalysisMetadata: ...

    async def fetch_readme(self, url: GitHubUrl) -> str:
        """Decoded README text; empty when the repository has none."""
        ...
