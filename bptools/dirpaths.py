"""Discovery of example and module directories that hold Terraform configs."""

from __future__ import annotations

import os
import re
import stat
from dataclasses import dataclass

EXAMPLES_PATTERN = r".*/(examples/.*)"
MODULES_PATTERN = r".*/(modules/.*)"

_EXAMPLES_RE = re.compile(EXAMPLES_PATTERN)
_MODULES_RE = re.compile(MODULES_PATTERN)


@dataclass
class MiscContent:
    """A directory with a Terraform config: its name and location in the repo."""

    name: str = ""
    location: str = ""


def file_exists(path: str | os.PathLike[str]) -> bool:
    """Return True for an existing regular file; raise for missing paths and directories."""
    try:
        info = os.stat(path)
    except OSError as exc:
        error = FileNotFoundError if isinstance(exc, FileNotFoundError) else OSError
        raise error(f"unable to read file at the provided path: {exc}") from exc
    if stat.S_ISDIR(info.st_mode):
        raise IsADirectoryError("provided path is a directory, need a valid file path.")
    return True


def _compile(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)


def trim_path(asset_path: str, pattern: str | re.Pattern[str]) -> str:
    """Return the first group the pattern captures in asset_path, or an empty string."""
    regex = _compile(pattern)
    match = regex.search(asset_path)
    if match is None or regex.groups < 1:
        return ""
    return match.group(1) or ""


def _record(directory: str, regex: re.Pattern[str], found: list[MiscContent]) -> None:
    location = trim_path(directory.replace(os.sep, "/"), regex)
    if location:
        found.append(MiscContent(name=os.path.basename(directory), location=location))


def _walk_dir(directory: str, regex: re.Pattern[str], found: list[MiscContent]) -> None:
    with os.scandir(directory) as entries:
        ordered = sorted(entries, key=lambda entry: entry.name)
    for entry in ordered:
        if entry.is_dir(follow_symlinks=False):
            if not entry.name.startswith(".terraform"):
                _walk_dir(entry.path, regex, found)
        elif entry.name.endswith(".tf"):
            # the first config found claims the directory; the rest of it is skipped
            _record(directory, regex, found)
            return


def get_dir_paths(
    config_path: str | os.PathLike[str], pattern: str | re.Pattern[str]
) -> list[MiscContent]:
    """Find directories with Terraform configs below config_path, sorted by name.

    Directories named .terraform* are skipped.
    """
    regex = _compile(pattern)
    root = os.fspath(config_path)
    found: list[MiscContent] = []
    try:
        start = os.path.normpath(root) if root else root
        info = os.lstat(start)
        if stat.S_ISDIR(info.st_mode):
            if not os.path.basename(start).startswith(".terraform"):
                _walk_dir(start, regex, found)
        elif start.endswith(".tf"):
            _record(os.path.dirname(start) or ".", regex, found)
    except OSError as exc:
        raise OSError(f"error accessing examples in the path {root!r}: {exc}") from exc
    found.sort(key=lambda item: item.name)
    return found


def get_examples(config_path: str | os.PathLike[str]) -> list[MiscContent]:
    """Find example directories below config_path."""
    return get_dir_paths(config_path, _EXAMPLES_RE)


def get_modules(config_path: str | os.PathLike[str]) -> list[MiscContent]:
    """Find sub-module directories below config_path."""
    return get_dir_paths(config_path, _MODULES_RE)