"""Display metadata for blueprint inputs: titles and preserved alternate defaults."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from bptools.interfaces import BlueprintVariable

_WORD_RE = re.compile(r"\w+(?:['\u2019]\w+)*")


@dataclass
class AlternateDefault:
    """An alternative default value for a display variable."""

    type: int = 0
    value: Any = None


@dataclass
class DisplayVariable:
    """How one input variable is presented in a UI."""

    name: str = ""
    title: str = ""
    alt_defaults: list[AlternateDefault] | None = None


@dataclass
class UIInput:
    """The display variables of a blueprint, keyed by variable name."""

    variables: dict[str, DisplayVariable] = field(default_factory=dict)


def create_title_from_name(name: str) -> str:
    """Turn a snake_case name into a title with each word capitalised."""

    def _capitalise(match: re.Match[str]) -> str:
        word = match.group(0)
        return word[0].upper() + word[1:]

    return " ".join(_WORD_RE.sub(_capitalise, part) for part in name.split("_"))


def build_ui_input_from_variables(
    variables: Iterable[BlueprintVariable], ui_input: UIInput
) -> None:
    """Add a display variable for every variable that does not have one yet."""
    if ui_input.variables is None:
        ui_input.variables = {}
    for variable in variables:
        if variable.name in ui_input.variables:
            continue
        ui_input.variables[variable.name] = DisplayVariable(
            name=variable.name, title=create_title_from_name(variable.name)
        )


def merge_existing_alt_defaults(new_input: UIInput, existing_input: UIInput | None) -> None:
    """Copy hand-authored alternate defaults from existing display variables."""
    if existing_input is None:
        return
    for variable in new_input.variables.values():
        for existing in existing_input.variables.values():
            if variable.name == existing.name and existing.alt_defaults is not None:
                variable.alt_defaults = existing.alt_defaults