"""Cloud Build records: client side filters, step lookup and stage durations."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger("bptools.builds")

SUCCESS_STATUS = "SUCCESS"
FAILED_STATUS = "FAILURE"

_REAL_BUILD_SUBSTITUTIONS = ("COMMIT_SHA", "REPO_NAME", "TRIGGER_NAME")

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?"
    r"([Zz]|[+-]\d{2}:\d{2})"
)


@dataclass
class BuildStep:
    """One step of a build, with its timing as RFC 3339 strings."""

    id: str = ""
    status: str = ""
    start_time: str = ""
    end_time: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuildStep":
        timing = data.get("timing") or {}
        return cls(
            id=str(data.get("id") or ""),
            status=str(data.get("status") or ""),
            start_time=str(timing.get("startTime") or timing.get("starttime") or ""),
            end_time=str(timing.get("endTime") or timing.get("endtime") or ""),
        )


@dataclass
class Build:
    """A build with its substitutions and steps."""

    substitutions: dict[str, str] = field(default_factory=dict)
    steps: list[BuildStep] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Build":
        data = data or {}
        substitutions = data.get("substitutions") or {}
        steps = data.get("steps") or []
        return cls(
            substitutions={str(k): str(v) for k, v in substitutions.items()},
            steps=[BuildStep.from_dict(step or {}) for step in steps],
        )


BuildFilter = Callable[[Build], bool]


def filter_real_builds(build: Build) -> bool:
    """Keep only builds triggered from a source repository."""
    return all(name in build.substitutions for name in _REAL_BUILD_SUBSTITUTIONS)


def repo_filter(repo: str) -> BuildFilter:
    """Return a filter keeping builds triggered from the named repository."""

    def _matches(build: Build) -> bool:
        return build.substitutions.get("REPO_NAME") == repo

    return _matches


def _format_rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    base = moment.strftime("%Y-%m-%dT%H:%M:%S")
    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return base + "Z"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    hours, rest = divmod(abs(total), 3600)
    return f"{base}{sign}{hours:02d}:{rest // 60:02d}"


def success_builds_between_filter(start: datetime, end: datetime) -> str:
    """Return a filter expression for successful builds created in [start, end)."""
    return (
        f'create_time>="{_format_rfc3339(start)}" AND '
        f'create_time<"{_format_rfc3339(end)}" AND '
        f'status="{SUCCESS_STATUS}"'
    )


def load_build_file(path: str | Path) -> Build:
    """Read a Cloud Build YAML file."""
    with open(path, encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"build file {path} does not hold a mapping")
    return Build.from_dict(data)


def build_step_ids(build: Build) -> list[str]:
    """Return the ids of the steps of a build, in order."""
    return [step.id for step in build.steps]


def _parse_timestamp(text: str) -> tuple[datetime, int]:
    """Parse an RFC 3339 timestamp into whole seconds and a nanosecond part."""
    match = _RFC3339_RE.fullmatch(text)
    if not match:
        raise ValueError(f"cannot parse {text!r} as an RFC 3339 time")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    moment = datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), tzinfo=tz
    )
    nanos = int((fraction or "").ljust(9, "0"))
    return moment, nanos


def _elapsed_truncated(start: str, end: str) -> timedelta:
    start_at, start_ns = _parse_timestamp(start)
    end_at, end_ns = _parse_timestamp(end)
    whole = int((end_at - start_at).total_seconds())
    nanos = whole * 1_000_000_000 + (end_ns - start_ns)
    seconds = abs(nanos) // 1_000_000_000
    return timedelta(seconds=seconds if nanos >= 0 else -seconds)


def find_stage_durations(step_id: str, builds: Iterable[Build]) -> list[timedelta]:
    """Return the durations, truncated to seconds, of successful steps with this id."""
    return [
        _elapsed_truncated(step.start_time, step.end_time)
        for build in builds
        for step in build.steps
        if step.id == step_id and step.status == SUCCESS_STATUS
    ]