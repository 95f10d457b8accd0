"""Repository details of blueprints: root paths, names and root metadata."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from bptools.markdown_content import ContentNotFoundError, get_md_content

log = logging.getLogger("bptools.metadata")

NESTED_BP_PATH = "/modules"
METADATA_FILE_NAME = "metadata.yaml"


@dataclass
class RepoSource:
    """Where a blueprint's source lives."""

    url: str = ""
    blueprint_root_path: str = ""
    repo_root_path: str = ""
    source_type: str = ""


@dataclass
class RepoDetail:
    """Name of a blueprint's repository and module, with its source."""

    repo_name: str = ""
    module_name: str = ""
    source: RepoSource = field(default_factory=RepoSource)


def _is_upper(char: str) -> bool:
    return "A" <= char <= "Z"


def _is_lower(char: str) -> bool:
    return "a" <= char <= "z"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def to_kebab(text: str) -> str:
    """Convert text to kebab-case, splitting words at case and digit changes."""
    s = text.strip()
    out: list[str] = []
    for i, char in enumerate(s):
        is_cap, is_low, is_num = _is_upper(char), _is_lower(char), _is_digit(char)
        value = char.lower() if is_cap else char
        if i + 1 < len(s):
            nxt = s[i + 1]
            next_cap, next_low, next_num = _is_upper(nxt), _is_lower(nxt), _is_digit(nxt)
            if (
                (is_cap and (next_low or next_num))
                or (is_low and (next_cap or next_num))
                or (is_num and (next_cap or next_low))
            ):
                if is_cap and next_low and i > 0 and _is_upper(s[i - 1]):
                    out.append("-")
                out.append(value)
                if is_low or is_num or next_num:
                    out.append("-")
                continue
        out.append("-" if value in " _-." else value)
    return "".join(out)


def blueprint_root_path(bp_path: str) -> str:
    """Resolve a sub-module path to the path of its root blueprint."""
    index = bp_path.find(NESTED_BP_PATH)
    return bp_path[:index] if index >= 0 else bp_path


def submodule_name_kebab(bp_path: str) -> str:
    """Return the kebab-case name of a sub-module under /modules, or an empty string."""
    index = bp_path.find(NESTED_BP_PATH)
    if index == -1:
        return ""
    return to_kebab(bp_path[index + len(NESTED_BP_PATH) + 1:])


def repo_name_from_readme(readme: str | bytes) -> str:
    """Return the kebab-case first level-one heading of a README, or an empty string."""
    try:
        title = get_md_content(readme, 1, 1, "", False)
    except ContentNotFoundError:
        return ""
    return to_kebab(title.literal)


def _lookup(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def repo_details_from_root(bp_path: str) -> RepoDetail:
    """Read repository details from the metadata.yaml of the root blueprint."""
    root = blueprint_root_path(bp_path)
    basic = RepoDetail(source=RepoSource(blueprint_root_path=root))
    try:
        text = (Path(root) / METADATA_FILE_NAME).read_text(encoding="utf-8")
        data = yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as exc:
        log.debug("no usable root metadata at %s: %s", root, exc)
        return basic
    if not isinstance(data, dict):
        return basic

    name = _lookup(data, "metadata", "name") or ""
    source = _lookup(data, "spec", "info", "source")
    if not isinstance(source, dict):
        # root metadata without source info: a blueprint not hosted in git
        return RepoDetail(repo_name=str(name), source=RepoSource(blueprint_root_path=root))

    directory = str(source.get("dir") or "")
    return RepoDetail(
        repo_name=str(name),
        source=RepoSource(
            url=str(source.get("repo") or ""),
            source_type="git",
            blueprint_root_path=root,
            repo_root_path=root.replace(directory, "", 1),
        ),
    )