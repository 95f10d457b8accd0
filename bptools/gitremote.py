"""Look up a repository name from the remote URL of a local git checkout."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlsplit

DEFAULT_REMOTE = "origin"

_SECTION_RE = re.compile(r'\[\s*([^\s\]"]+)(?:\s+"((?:[^"\\]|\\.)*)")?\s*\]')
_KEY_RE = re.compile(r"([A-Za-z][A-Za-z0-9-]*)\s*(?:=\s*(.*))?")


class RepoNameError(Exception):
    """Raised when a repository name cannot be found."""


def _git_dir(directory: Path) -> Path:
    dot_git = directory / ".git"
    if dot_git.is_dir():
        return dot_git
    if dot_git.is_file():
        content = dot_git.read_text(encoding="utf-8").strip()
        if content.startswith("gitdir:"):
            target = Path(content[len("gitdir:"):].strip())
            return target if target.is_absolute() else directory / target
    return directory


def _strip_value(raw: str) -> str:
    value = []
    quoted = False
    chars = iter(raw.strip())
    for char in chars:
        if char == '"':
            quoted = not quoted
        elif char == "\\":
            value.append(next(chars, ""))
        elif char in "#;" and not quoted:
            break
        else:
            value.append(char)
    return "".join(value).strip()


def _remote_urls(config_text: str, remote: str) -> list[str] | None:
    """Return the URLs of a remote, or None when the remote is not defined."""
    urls: list[str] | None = None
    in_remote = False
    for line in config_text.splitlines():
        stripped = line.strip()
        if not stripped or stripped[0] in "#;":
            continue
        section = _SECTION_RE.match(stripped)
        if section:
            name, sub = section.groups()
            in_remote = name.lower() == "remote" and sub == remote
            if in_remote and urls is None:
                urls = []
            continue
        if not in_remote:
            continue
        key = _KEY_RE.match(stripped)
        if key and key.group(1).lower() == "url" and key.group(2) is not None:
            assert urls is not None
            urls.append(_strip_value(key.group(2)))
    return urls


def repo_name(directory: str | Path, remote: str = DEFAULT_REMOTE) -> str:
    """Return the repository name from the URL of a remote, expecting owner/repo."""
    directory = Path(directory)
    config = _git_dir(directory) / "config"
    try:
        config_text = config.read_text(encoding="utf-8")
    except OSError as exc:
        raise RepoNameError(f"error opening git dir {directory}: {exc}") from exc

    urls = _remote_urls(config_text, remote)
    if urls is None:
        raise RepoNameError(f"error finding remote {remote} in git dir {directory}")
    if not urls:
        raise RepoNameError(f"remote {remote} in git dir {directory} has no URL")

    try:
        remote_path = urlsplit(urls[0]).path
    except ValueError as exc:
        raise RepoNameError(f"error parsing remote URL: {exc}") from exc

    trimmed = remote_path[:-1] if remote_path.endswith("/") else remote_path
    parts = trimmed.split("/")
    if len(parts) != 3:
        raise RepoNameError(f"expected owner/repo, got {trimmed}")
    return parts[-1]