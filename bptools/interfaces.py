"""Blueprint variables, outputs and roles, and merging of hand-authored data into them."""

from __future__ import annotations

from collections.abc import MutableSequence
from dataclasses import dataclass, field
from typing import Any

from bptools.state_parser import parse_output_types_from_state


@dataclass
class BlueprintVariable:
    """An input variable of a blueprint."""

    name: str = ""
    description: str = ""
    var_type: str = ""
    default_value: Any = None
    required: bool = False
    connections: list[Any] | None = None


@dataclass
class BlueprintOutput:
    """An output of a blueprint; type is None when it is not known."""

    name: str = ""
    description: str = ""
    type: Any = None


@dataclass
class BlueprintInterface:
    """The variables and outputs of a blueprint."""

    variables: list[BlueprintVariable] = field(default_factory=list)
    outputs: list[BlueprintOutput] = field(default_factory=list)


@dataclass
class BlueprintRoles:
    """Roles needed at one level of the resource hierarchy."""

    level: str = ""
    roles: list[str] = field(default_factory=list)


def sort_blueprint_roles(roles: MutableSequence[BlueprintRoles]) -> None:
    """Sort roles in place by level, then number of roles, then first role."""
    roles[:] = sorted(
        roles,
        key=lambda entry: (
            entry.level,
            len(entry.roles),
            entry.roles[0] if entry.roles else "",
        ),
    )


def merge_existing_connections(
    new_interfaces: BlueprintInterface, existing_interfaces: BlueprintInterface | None
) -> None:
    """Copy hand-authored connections of existing variables onto the new variables."""
    if existing_interfaces is None:
        return
    for variable in new_interfaces.variables:
        for existing in existing_interfaces.variables:
            if variable.name == existing.name and existing.connections is not None:
                variable.connections = existing.connections


def merge_existing_output_types(
    new_interfaces: BlueprintInterface, existing_interfaces: BlueprintInterface | None
) -> None:
    """Give outputs without a type the type an existing output of that name has."""
    if existing_interfaces is None:
        return
    existing_outputs = {output.name: output for output in existing_interfaces.outputs}
    for output in new_interfaces.outputs:
        if output.type is not None:
            continue
        existing = existing_outputs.get(output.name)
        if existing is not None and existing.type is not None:
            output.type = existing.type


def update_output_types(interfaces: BlueprintInterface, state_data: str | bytes) -> None:
    """Set the type of every output found in the given Terraform state JSON."""
    output_types = parse_output_types_from_state(state_data)
    for output in interfaces.outputs:
        if output.name in output_types:
            output.type = output_types[output.name]