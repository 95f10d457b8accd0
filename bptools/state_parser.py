"""Output types read from the JSON form of a Terraform state."""

from __future__ import annotations

import json
import re
from typing import Any

_PRIMITIVE_TYPES = frozenset({"string", "number", "bool", "dynamic"})
_COLLECTION_KINDS = frozenset({"list", "map", "set"})
_VERSION_RE = re.compile(r"v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")
_MIN_FORMAT = (0, 1, 0)
_MAX_FORMAT = (2, 0, 0)


class StateParseError(ValueError):
    """Raised when state data cannot be read."""


def _canonical_type(spec: Any) -> Any:
    """Validate a type specification and return it in canonical JSON form."""
    if isinstance(spec, str):
        if spec in _PRIMITIVE_TYPES:
            return spec
        raise StateParseError(f"invalid primitive type name {spec!r}")
    if not isinstance(spec, list) or not spec or not isinstance(spec[0], str):
        raise StateParseError(f"invalid type specification {spec!r}")
    kind = spec[0]
    if kind in _COLLECTION_KINDS:
        if len(spec) != 2:
            raise StateParseError(f"{kind} type needs exactly one element type")
        return [kind, _canonical_type(spec[1])]
    if kind == "object":
        if len(spec) not in (2, 3) or not isinstance(spec[1], dict):
            raise StateParseError("object type needs an attribute mapping")
        attrs = {name: _canonical_type(attr) for name, attr in spec[1].items()}
        if len(spec) == 3:
            optional = spec[2]
            if not isinstance(optional, list) or not all(
                isinstance(name, str) and name in attrs for name in optional
            ):
                raise StateParseError("object optional attributes must name its attributes")
            if optional:
                return ["object", attrs, sorted(set(optional))]
        return ["object", attrs]
    if kind == "tuple":
        if len(spec) != 2 or not isinstance(spec[1], list):
            raise StateParseError("tuple type needs a list of element types")
        return ["tuple", [_canonical_type(element) for element in spec[1]]]
    raise StateParseError(f"invalid complex type kind {kind!r}")


def _check_format_version(version: Any) -> None:
    if not version:
        raise StateParseError("unexpected state input, format version is missing")
    if not isinstance(version, str):
        raise StateParseError(f"invalid state format version {version!r}")
    match = _VERSION_RE.fullmatch(version)
    if match is None:
        raise StateParseError(f"invalid state format version {version!r}")
    parts = tuple(int(group or 0) for group in match.groups())
    if not _MIN_FORMAT <= parts < _MAX_FORMAT:
        raise StateParseError(f"unsupported state format version: {version}")


def parse_output_types_from_state(state_data: str | bytes) -> dict[str, Any]:
    """Map each output in the state to its type, or None when it has no type or value."""
    try:
        state = json.loads(state_data)
    except (ValueError, TypeError) as exc:
        raise StateParseError(f"failed to unmarshal state data: {exc}") from exc
    if not isinstance(state, dict):
        raise StateParseError("failed to unmarshal state data: state is not an object")
    _check_format_version(state.get("format_version"))

    values = state.get("values")
    if not isinstance(values, dict):
        raise StateParseError("state has no values")
    outputs = values.get("outputs") or {}
    if not isinstance(outputs, dict):
        raise StateParseError("state outputs are not an object")

    types: dict[str, Any] = {}
    for name, output in outputs.items():
        if not isinstance(output, dict):
            raise StateParseError(f"output {name!r} is not an object")
        try:
            spec = output.get("type")
            canonical = None if spec is None else _canonical_type(spec)
        except StateParseError as exc:
            raise StateParseError(f"failed to convert output {name!r}: {exc}") from exc
        types[name] = None if output.get("value") is None else canonical
    return types