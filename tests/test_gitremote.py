import pytest

from bptools.gitremote import DEFAULT_REMOTE, RepoNameError, repo_name


def bare_repo_with_remote(directory, url, remote):
    (directory / "config").write_text(
        "[core]\n"
        "\trepositoryformatversion = 0\n"
        "\tbare = true\n"
        f'[remote "{remote}"]\n'
        f"\turl = {url}\n"
        f"\tfetch = +refs/heads/*:refs/remotes/{remote}/*\n",
        encoding="utf-8",
    )
    return directory


@pytest.mark.parametrize(
    "url, want",
    [
        ("https://github.com/foo/bar", "bar"),
        ("https://gitlab.com/foo/bar/", "bar"),
        ("github.com/foo/bar", "bar"),
    ],
    ids=["simple", "simple trailing", "no scheme"],
)
def test_repo_name(tmp_path, url, want):
    directory = bare_repo_with_remote(tmp_path, url, DEFAULT_REMOTE)
    assert repo_name(directory) == want


def test_repo_name_invalid_path(tmp_path):
    directory = bare_repo_with_remote(tmp_path, "github.com/foo/bar/baz", DEFAULT_REMOTE)
    with pytest.raises(RepoNameError, match="expected owner/repo"):
        repo_name(directory)


def test_repo_name_invalid_remote(tmp_path):
    directory = bare_repo_with_remote(tmp_path, "github.com/foo/bar", "foo")
    with pytest.raises(RepoNameError, match="error finding remote origin"):
        repo_name(directory)


def test_repo_name_named_remote(tmp_path):
    directory = bare_repo_with_remote(tmp_path, "https://github.com/foo/baz", "upstream")
    assert repo_name(directory, "upstream") == "baz"


def test_repo_name_working_tree(tmp_path):
    git_dir = tmp_path / ".git"
    git_dir.mkdir()
    bare_repo_with_remote(git_dir, "https://github.com/owner/project", DEFAULT_REMOTE)
    assert repo_name(tmp_path) == "project"


def test_repo_name_not_a_repository(tmp_path):
    with pytest.raises(RepoNameError, match="error opening git dir"):
        repo_name(tmp_path)


def test_repo_name_remote_without_url(tmp_path):
    (tmp_path / "config").write_text('[remote "origin"]\n\tfetch = x\n', encoding="utf-8")
    with pytest.raises(RepoNameError):
        repo_name(tmp_path)