"""Repositories of GitHub organisations: fetching, filtering and sorting."""

from __future__ import annotations

import enum
import logging
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import requests

log = logging.getLogger("bptools.catalog")

GITHUB_TOKEN_ENV_VAR = "GITHUB_TOKEN"
GITHUB_API_URL = "https://api.github.com"

TF_MODULES_ORG = "terraform-google-modules"
GCP_ORG = "GoogleCloudPlatform"

# repos that match terraform-google-* but should not be included
REPO_IGNORE_LIST = frozenset({"terraform-google-conversion", "terraform-google-examples"})
# repos that do not match terraform-google-* but should be included
REPO_ALLOW_LIST = frozenset({"terraform-example-foundation"})

_PER_PAGE = 100
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _parse_time(value: Any) -> datetime | None:
    if not value:
        return None
    text = str(value)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass
class Repository:
    """The parts of a GitHub repository the catalog works with."""

    name: str = ""
    created_at: datetime | None = None
    stargazers_count: int = 0
    description: str = ""
    archived: bool = False
    html_url: str = ""
    topics: list[str] | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Repository":
        """Build a repository from a GitHub API JSON object."""
        topics = data.get("topics")
        return cls(
            name=data.get("name") or "",
            created_at=_parse_time(data.get("created_at")),
            stargazers_count=int(data.get("stargazers_count") or 0),
            description=data.get("description") or "",
            archived=bool(data.get("archived")),
            html_url=data.get("html_url") or "",
            topics=list(topics) if topics is not None else None,
        )

    @property
    def created(self) -> datetime:
        """Creation time, the zero time when unknown, always timezone aware."""
        if self.created_at is None:
            return _ZERO_TIME
        if self.created_at.tzinfo is None:
            return self.created_at.replace(tzinfo=timezone.utc)
        return self.created_at


def _options_text(options: Iterable[enum.Enum]) -> str:
    return "[" + " ".join(str(option.value) for option in options) + "]"


class SortOption(enum.Enum):
    """Orderings available for the catalog."""

    STARS = "stars"
    CREATED = "created"
    NAME = "name"

    @classmethod
    def parse(cls, value: "str | SortOption") -> "SortOption":
        """Return the option named by value, raising ValueError for unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"one of {_options_text(cls)} expected. unknown sort option: {value}"
            ) from None


class GitHubService:
    """Lists the public repositories of a set of organisations."""

    def __init__(
        self,
        orgs: Sequence[str] = (),
        session: Any = None,
        base_url: str = GITHUB_API_URL,
    ) -> None:
        self.orgs = list(orgs)
        self.session = session if session is not None else requests.Session()
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_environment(cls, orgs: Sequence[str]) -> "GitHubService":
        """Create a service authenticated with the token in GITHUB_TOKEN."""
        token = os.environ.get(GITHUB_TOKEN_ENV_VAR)
        if token is None:
            raise RuntimeError(f"GitHub token env var {GITHUB_TOKEN_ENV_VAR} is not set")
        session = requests.Session()
        session.headers["Authorization"] = f"Bearer {token}"
        return cls(orgs, session=session)

    def fetch_repos(self) -> list[Repository]:
        """Fetch every public repository of every organisation, following pagination."""
        repos: list[Repository] = []
        for org in self.orgs:
            url: str | None = f"{self.base_url}/orgs/{org}/repos"
            params: dict[str, Any] | None = {"per_page": _PER_PAGE, "type": "public"}
            while url:
                response = self.session.get(
                    url, params=params, headers={"Accept": "application/vnd.github+json"}
                )
                response.raise_for_status()
                repos.extend(Repository.from_api(item) for item in response.json())
                url = (response.links or {}).get("next", {}).get("url")
                params = None
        return repos


def sort_repos(repos: Iterable[Repository], option: "str | SortOption") -> list[Repository]:
    """Return the repositories stably sorted by the given option."""
    option = SortOption.parse(option)
    keys = {
        SortOption.CREATED: lambda repo: repo.created,
        SortOption.STARS: lambda repo: repo.stargazers_count,
        SortOption.NAME: lambda repo: repo.name,
    }
    return sorted(repos, key=keys[option])


def is_tf_repo(repo: Repository) -> bool:
    """Tell whether a repository belongs in the Terraform blueprint catalog."""
    if repo.archived:
        return False
    if repo.name in REPO_ALLOW_LIST:
        return True
    return repo.name.startswith("terraform-google") and repo.name not in REPO_IGNORE_LIST


def fetch_sorted_tf_repos(
    service: GitHubService, option: "str | SortOption"
) -> list[Repository]:
    """Fetch the catalog repositories of a service, sorted by option."""
    option = SortOption.parse(option)
    repos = service.fetch_repos()
    return sort_repos((repo for repo in repos if is_tf_repo(repo)), option)