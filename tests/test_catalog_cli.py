import pytest
import requests

from bptools.catalog_cli import build_parser, main

ORG_REPOS = {
    "terraform-google-modules": [
        {
            "name": "terraform-google-bar",
            "created_at": "2021-03-01T00:00:00Z",
            "stargazers_count": 5,
            "description": "lorem ipsom",
        },
        {"name": "unrelated", "created_at": "2020-01-01T00:00:00Z"},
    ],
    "GoogleCloudPlatform": [
        {"name": "terraform-google-foo", "created_at": "2020-06-01T00:00:00Z"},
        {
            "name": "terraform-google-old",
            "created_at": "2019-01-01T00:00:00Z",
            "archived": True,
        },
    ],
}


class _Response:
    def __init__(self, items, status=200):
        self._items = items
        self.status = status
        self.links = {}

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"status {self.status}")

    def json(self):
        return self._items


class _Session:
    requested = []
    status = 200

    def __init__(self):
        self.headers = {}

    def get(self, url, params=None, headers=None):
        org = url.split("/orgs/", 1)[1].split("/", 1)[0]
        _Session.requested.append(org)
        return _Response(ORG_REPOS.get(org, []), status=_Session.status)


@pytest.fixture
def fake_github(monkeypatch):
    _Session.requested = []
    _Session.status = 200
    monkeypatch.setattr(requests, "Session", _Session)
    monkeypatch.setenv("GITHUB_TOKEN", "token")
    monkeypatch.delenv("VERBOSE", raising=False)
    return _Session


def test_parser_reads_options():
    args = build_parser().parse_args(["list", "--format", "csv", "--sort", "name"])
    assert (args.command, args.format, args.sort) == ("list", "csv", "name")


def test_parser_rejects_unknown_format():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["list", "--format", "xml"])


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_main_without_token_fails(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    assert main(["list"]) == 1


def test_main_lists_sorted_catalog(fake_github, capsys):
    assert main(["list", "--format", "csv"]) == 0
    lines = capsys.readouterr().out.splitlines()
    names = [line.split(",")[0] for line in lines[1:]]
    assert names == ["terraform-google-foo", "terraform-google-bar"]
    assert fake_github.requested == ["terraform-google-modules", "GoogleCloudPlatform"]


def test_main_sort_by_name_and_verbose(fake_github, capsys):
    main(["list", "--format", "csv", "--sort", "name", "--verbose"])
    lines = capsys.readouterr().out.splitlines()
    assert [line.split(",")[0] for line in lines[1:]] == [
        "terraform-google-bar",
        "terraform-google-foo",
    ]
    assert lines[1].endswith("lorem ipsom")
    assert all(line.count(",") == lines[0].count(",") for line in lines)


def test_main_table_is_default(fake_github, capsys):
    main(["list"])
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0] == lines[2] == lines[-1]
    assert len({len(line) for line in lines}) == 1
    assert "terraform-google-bar" in out
    assert "unrelated" not in out


def test_main_reports_http_errors(fake_github, capsys):
    fake_github.status = 500
    assert main(["list"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "error fetching repos" in captured.err