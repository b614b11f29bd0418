"""Diagnostic message catalog.

Analyzers reference message types by identity (``msg.SCHEMA_VALIDATION_ERROR``);
the wording lives here, in the type's template.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from confcheck.resource.instance import Origin


class Level(str, Enum):
    """Message severity, ordered info < warning < error."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self.value]

    def at_least(self, other: "Level | str") -> bool:
        return self.rank >= Level(other).rank


_LEVEL_RANK = {"info": 0, "warning": 1, "error": 2}


@dataclass(frozen=True)
class MessageType:
    """A kind of diagnostic: stable code, level and text template."""
    code: str
    name: str
    level: Level
    template: str

    def render(self, *parameters: Any) -> str:
        return self.template.format(*parameters)


SCHEMA_VALIDATION_ERROR = MessageType(
    "CC0106", "SchemaValidationError", Level.ERROR, "Schema validation error: {0}")
SCHEMA_VALIDATION_WARNING = MessageType(
    "CC0152", "SchemaValidationWarning", Level.WARNING, "Schema validation warning: {0}")
DEPRECATED_FIELD = MessageType(
    "CC0153", "DeprecatedField", Level.WARNING, "Field {0!r} is deprecated: {1}")
INVALID_RESOURCE_NAME = MessageType(
    "CC0154", "InvalidResourceName", Level.ERROR, "Resource name {0!r} is invalid: {1}")
UNKNOWN_KIND = MessageType(
    "CC0155", "UnknownKind", Level.INFO, "Kind {0} has no registered validator; resource was not validated")

CATALOG: dict[str, MessageType] = {
    t.code: t
    for t in (
        SCHEMA_VALIDATION_ERROR,
        SCHEMA_VALIDATION_WARNING,
        DEPRECATED_FIELD,
        INVALID_RESOURCE_NAME,
        UNKNOWN_KIND,
    )
}


@dataclass
class Message:
    """A single diagnostic attributed to a resource origin."""
    type: MessageType
    origin: Origin | None = None
    parameters: tuple[Any, ...] = ()
    line: int | None = None

    @property
    def code(self) -> str:
        return self.type.code

    @property
    def level(self) -> Level:
        return self.type.level

    @property
    def text(self) -> str:
        return self.type.render(*self.parameters)

    @property
    def location(self) -> str:
        if self.origin is None:
            return ""
        name = self.origin.friendly_name()
        reference = self.origin.reference()
        ref_text = str(reference) if reference is not None else ""
        if self.line is not None:
            # Point at the offending field rather than the document start.
            path = getattr(reference, "path", None)
            ref_text = f"{path}:{self.line}" if path else f"{ref_text} line {self.line}".strip()
        return f"{name} {ref_text}" if ref_text else name

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON/YAML output."""
        reference = self.origin.reference() if self.origin is not None else None
        return {
            "code": self.code,
            "level": self.level.value,
            "type": self.type.name,
            "origin": self.origin.friendly_name() if self.origin is not None else None,
            "reference": str(reference) if reference is not None else None,
            "line": self.line,
            "message": self.text,
        }

    def __str__(self) -> str:
        location = self.location
        prefix = f"{self.level.value.title()} [{self.code}]"
        if location:
            return f"{prefix} ({location}) {self.text}"
        return f"{prefix} {self.text}"


def new_message(message_type: MessageType, origin: Origin | None, *parameters: Any,
                line: int | None = None) -> Message:
    return Message(message_type, origin, parameters, line)


def schema_validation_error(origin: Origin | None, err: BaseException, line: int | None = None) -> Message:
    return new_message(SCHEMA_VALIDATION_ERROR, origin, err, line=line)


def schema_validation_warning(origin: Origin | None, warning: BaseException,
                              line: int | None = None) -> Message:
    return new_message(SCHEMA_VALIDATION_WARNING, origin, warning, line=line)


def sort_messages(messages: Iterable[Message]) -> list[Message]:
    """Group by origin; messages of one origin keep their report order."""
    return sorted(messages, key=lambda m: m.origin.comparator() if m.origin is not None else "")


def filter_messages(messages: Iterable[Message], min_level: Level | str = Level.INFO,
                    suppress: Iterable[str] = ()) -> list[Message]:
    """Drop messages below ``min_level`` or whose code is suppressed."""
    suppressed = set(suppress)
    return [
        m for m in messages
        if m.level.at_least(min_level) and m.code not in suppressed
    ]


def max_level(messages: Iterable[Message]) -> Level | None:
    highest = None
    for m in messages:
        if highest is None or m.level.rank > highest.rank:
            highest = m.level
    return highest
