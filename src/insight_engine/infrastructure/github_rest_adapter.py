"""GitHub REST adapter — repository metadata and README for the analysis input."""

from __future__ import annotations

import base64
import binascii
import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from insight_engine.domain.entities import AnalysisMetadata
from insight_engine.domain.exceptions import (
    ContentExtractionError,
    GitHubRateLimitError,
    RepositoryAccessDeniedError,
    RepositoryNotFoundError,
)
from insight_engine.domain.value_objects import GitHubUrl

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GitHubRestAdapter:
    """``RepoFetcher`` over the GitHub v3 REST API.

    Unauthenticated calls work for public repositories; a token only raises the
    rate limit.
    """

    def __init__(self, client: httpx.AsyncClient, token: str | None = None) -> None:
        self._client = client
        self._headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "insight-engine/1.0",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    async def fetch_metadata(self, url: GitHubUrl) -> AnalysisMetadata:
        data = await self._get_json(url, url.api_path)
        license_name = (data.get("license") or {}).get("name")
        return AnalysisMetadata(
            name=data.get("name") or url.repo,
            full_name=data.get("full_name") or url.full_name,
            language=data.get("language"),
            stars=_count(data.get("stargazers_count")),
            forks=_count(data.get("forks_count")),
            size=_count(data.get("size")),
            description=data.get("description"),
            topics=tuple(data.get("topics") or ()),
            license=license_name,
        )

    async def fetch_readme(self, url: GitHubUrl) -> str:
        """Return the decoded README, or ``""`` when the repository has none."""
        try:
            data = await self._get_json(url, f"{url.api_path}/readme")
        except RepositoryNotFoundError:
            logger.info("%s has no README; analysing metadata only", url.full_name)
            return ""

        body = data.get("content") or ""
        if data.get("encoding", "base64") != "base64":
            return body
        try:
            raw = base64.b64decode("".join(body.split()))
        except (binascii.Error, ValueError) as exc:
            raise ContentExtractionError(
                f"README of {url.full_name} is not valid base64"
            ) from exc
        return raw.decode("utf-8", errors="replace")

    async def _get_json(self, url: GitHubUrl, path: str) -> dict[str, Any]:
        endpoint = f"{GITHUB_API_URL}{path}"
        try:
            resp = await self._client.get(endpoint, headers=self._headers)
        except httpx.HTTPError as exc:
            raise ContentExtractionError(
                f"Could not reach GitHub for {url.full_name}: {type(exc).__name__}"
            ) from exc
        if resp.status_code != 200:
            _raise_for_status(resp, url)
        try:
            data = resp.json()
        except ValueError as exc:
            raise ContentExtractionError(
                f"GitHub sent a non-JSON body for {url.full_name}"
            ) from exc
        return data if isinstance(data, dict) else {}


def _raise_for_status(resp: httpx.Response, url: GitHubUrl) -> None:
    """Translate a non-200 GitHub answer into the matching domain error."""
    status = resp.status_code
    if status == 404:
        raise RepositoryNotFoundError(
            f"Repository {url.full_name} was not found. It must exist and be public."
        )
    if status == 429 or (status == 403 and resp.headers.get("x-ratelimit-remaining") == "0"):
        raise GitHubRateLimitError(
            f"GitHub API rate limit exceeded; it resets at {_reset_time(resp)}. "
            "Set GITHUB_TOKEN to raise the limit."
        )
    if status == 403:
        raise RepositoryAccessDeniedError(
            f"Access to {url.full_name} was denied. The repository may be private."
        )
    raise ContentExtractionError(f"GitHub returned HTTP {status} for {url.full_name}")


def _reset_time(resp: httpx.Response) -> str:
    raw = resp.headers.get("x-ratelimit-reset", "")
    try:
        moment = datetime.fromtimestamp(int(raw), tz=timezone.utc)
    except (ValueError, OSError):
        return raw or "an unknown time"
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


def _count(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0
