from datetime import datetime, timedelta, timezone

import pytest
import requests

from bptools.github import (
    GitHubService,
    Repository,
    SortOption,
    fetch_sorted_tf_repos,
    is_tf_repo,
    sort_repos,
)

BASE = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class _FakeResponse:
    def __init__(self, items, next_url=None, status=200):
        self._items = items
        self.links = {"next": {"url": next_url}} if next_url else {}
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        return self._items


class _FakeSession:
    def __init__(self, pages):
        self.pages = pages
        self.headers = {}
        self.calls = []

    def get(self, url, params=None, headers=None):
        self.calls.append((url, params))
        return self.pages[url]


def _api(name, hours, stars=None, archived=None):
    data = {"name": name, "created_at": (BASE + timedelta(hours=hours)).isoformat()}
    if stars is not None:
        data["stargazers_count"] = stars
    if archived is not None:
        data["archived"] = archived
    return data


def _service(items):
    session = _FakeSession(
        {"https://api.example.com/orgs/foo/repos": _FakeResponse(items)}
    )
    return GitHubService(["foo"], session=session, base_url="https://api.example.com")


SIMPLE = [
    _api("terraform-google-bar", 3),
    _api("terraform-google-foo", 2),
    _api("foo", 2),
]


@pytest.mark.parametrize(
    "items, sort_by, want",
    [
        (SIMPLE, SortOption.CREATED, ["terraform-google-foo", "terraform-google-bar"]),
        (SIMPLE, SortOption.NAME, ["terraform-google-bar", "terraform-google-foo"]),
        (
            [
                _api("terraform-google-bar", 3, stars=5),
                _api("terraform-google-foo", 2, stars=10),
                _api("foo", 2, stars=12),
                _api("archived", 2, archived=True),
            ],
            SortOption.STARS,
            ["terraform-google-bar", "terraform-google-foo"],
        ),
        ([], "name", []),
    ],
)
def test_fetch_sorted_tf_repos(items, sort_by, want):
    got = fetch_sorted_tf_repos(_service(items), sort_by)
    assert [repo.name for repo in got] == want


def test_fetch_sorted_tf_repos_invalid_sort():
    items = [
        _api("terraform-google-bar", 3, stars=5),
        _api("terraform-google-foo", 2, stars=10),
        _api("foo", 2, stars=12),
    ]
    with pytest.raises(ValueError, match="unknown sort option: baz"):
        fetch_sorted_tf_repos(_service(items), "baz")


def test_sort_option_parse():
    assert SortOption.parse("stars") is SortOption.STARS
    assert SortOption.parse(SortOption.NAME) is SortOption.NAME
    with pytest.raises(ValueError, match=r"one of \[stars created name\] expected"):
        SortOption.parse("")


def test_sort_repos_is_stable():
    repos = [
        Repository(name="b", stargazers_count=1),
        Repository(name="a", stargazers_count=1),
        Repository(name="c", stargazers_count=0),
    ]
    assert [r.name for r in sort_repos(repos, SortOption.STARS)] == ["c", "b", "a"]


def test_sort_by_created_puts_unknown_first():
    repos = [Repository(name="x", created_at=BASE), Repository(name="y")]
    assert [r.name for r in sort_repos(repos, "created")] == ["y", "x"]


@pytest.mark.parametrize(
    "repo, want",
    [
        (Repository(name="terraform-google-bar"), True),
        (Repository(name="terraform-google-examples"), False),
        (Repository(name="terraform-google-conversion"), False),
        (Repository(name="terraform-example-foundation"), True),
        (Repository(name="terraform-google-bar", archived=True), False),
        (Repository(name="foo"), False),
    ],
)
def test_is_tf_repo(repo, want):
    assert is_tf_repo(repo) is want


def test_repository_from_api():
    repo = Repository.from_api(
        {
            "name": "terraform-google-bar",
            "created_at": "2021-01-03T04:03:00Z",
            "stargazers_count": 5,
            "description": "lorem ipsom",
            "html_url": "https://example.com/bar",
            "topics": ["containers"],
        }
    )
    assert repo.name == "terraform-google-bar"
    assert repo.created_at == datetime(2021, 1, 3, 4, 3, tzinfo=timezone.utc)
    assert repo.stargazers_count == 5
    assert repo.description == "lorem ipsom"
    assert repo.topics == ["containers"]
    assert repo.archived is False


def test_fetch_repos_follows_pagination_and_orgs():
    pages = {
        "https://api.example.com/orgs/a/repos": _FakeResponse(
            [{"name": "one"}], next_url="https://api.example.com/orgs/a/repos?page=2"
        ),
        "https://api.example.com/orgs/a/repos?page=2": _FakeResponse([{"name": "two"}]),
        "https://api.example.com/orgs/b/repos": _FakeResponse([{"name": "three"}]),
    }
    session = _FakeSession(pages)
    service = GitHubService(["a", "b"], session=session, base_url="https://api.example.com")
    assert [r.name for r in service.fetch_repos()] == ["one", "two", "three"]
    assert session.calls[0][1] == {"per_page": 100, "type": "public"}
    assert session.calls[1][1] is None


def test_fetch_repos_raises_on_http_error():
    session = _FakeSession(
        {"https://api.example.com/orgs/a/repos": _FakeResponse([], status=404)}
    )
    service = GitHubService(["a"], session=session, base_url="https://api.example.com")
    with pytest.raises(requests.HTTPError):
        service.fetch_repos()


def test_from_environment_requires_token(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    with pytest.raises(RuntimeError, match="GITHUB_TOKEN"):
        GitHubService.from_environment(["a"])


def test_from_environment_sets_authorization(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "token")
    service = GitHubService.from_environment(["a", "b"])
    assert service.session.headers["Authorization"] == "Bearer token"
    assert service.orgs == ["a", "b"]