"""Agent name normalisation."""

from __future__ import annotations

import re
from dataclasses import dataclass

AGENT_SUFFIX = "-agent"

_WORD_SEPARATORS = re.compile(r"[-_\s]+")


def to_pascal_case(value: str) -> str:
    """``my-chat_bot`` -> ``MyChatBot``."""
    return "".join(
        word[:1].upper() + word[1:].lower() for word in _WORD_SEPARATORS.split(value) if word
    )


def to_camel_case(value: str) -> str:
    """``my-chat_bot`` -> ``myChatBot``."""
    pascal = to_pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def ensure_agent_suffix(name: str) -> str:
    if name.endswith(AGENT_SUFFIX):
        return name
    return f"{name}{AGENT_SUFFIX}"


def get_base_name(name: str) -> str:
    """Strip a trailing ``-agent``."""
    if name.endswith(AGENT_SUFFIX):
        return name[: -len(AGENT_SUFFIX)]
    return name


@dataclass(frozen=True)
class ProjectNames:
    """Identifiers substituted into the project templates."""

    project_name: str
    agent_function: str
    prompt_name: str
    schema_name: str
    input_type: str
    input_field: str = "input"

    @classmethod
    def from_agent_name(cls, name: str) -> ProjectNames:
        base = get_base_name(name)
        camel = to_camel_case(base)
        return cls(
            project_name=ensure_agent_suffix(name),
            agent_function=camel,
            prompt_name=f"{camel}Prompt",
            schema_name=f"{camel}Schema",
            input_type=f"{to_pascal_case(base)}Request",
        )

    def placeholders(self) -> dict[str, str]:
        """Template placeholder -> value."""
        return {
            "agentFunction": self.agent_function,
            "promptName": self.prompt_name,
            "schemaName": self.schema_name,
            "InputType": self.input_type,
            "inputField": self.input_field,
        }


__all__ = [
    "ProjectNames",
    "ensure_agent_suffix",
    "get_base_name",
    "to_camel_case",
    "to_pascal_case",
]
