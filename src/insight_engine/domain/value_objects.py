"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from insight_engine.domain.exceptions import InvalidGitHubUrlError

# Scheme and "www." are optional; anything after owner/repo (``/tree/main``,
# ``#readme``, query strings) is ignored.
_GITHUB_URL_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/"
    r"(?P<owner>[A-Za-z0-9\-_.]+)/(?P<repo>[A-Za-z0-9\-_.]+?)"
    r"(?:\.git)?(?:[/?#].*)?$",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class GitHubUrl:
    """A repository reference parsed out of whatever link the user pasted.

    ``github.com/psf/requests``, ``https://www.github.com/psf/requests.git``
    and ``https://github.com/psf/requests/tree/main/docs`` all name the same
    repository.
    """

    owner: str
    repo: str

    @classmethod
    def from_string(cls, url: str) -> GitHubUrl:
        match = _GITHUB_URL_RE.match(url.strip())
        if not match:
            raise InvalidGitHubUrlError(
                f"'{url.strip()}' is not a GitHub repository link. "
                "Use https://github.com/<owner>/<repo>."
            )
        return cls(owner=match["owner"], repo=match["repo"])

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def api_path(self) -> str:
        """REST path of the repository resource."""
        return f"/repos/{self.owner}/{self.repo}"
