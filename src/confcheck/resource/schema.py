"""Schema descriptors binding a resource kind to its validation function."""

import importlib
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from confcheck.exceptions import SchemaBuildError
from confcheck.resource.instance import GroupVersionKind

logger = logging.getLogger(__name__)

_KIND_PATTERN = re.compile(r"^[A-Z][A-Za-z0-9]*$")
_PLURAL_PATTERN = re.compile(r"^[a-z][a-z0-9]*$")
_VERSION_PATTERN = re.compile(r"^v[1-9][0-9]*((alpha|beta)[1-9][0-9]*)?$")
_GROUP_PATTERN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")


@dataclass(frozen=True)
class ResourceConfig:
    """What a validation function sees of a resource."""
    kind: GroupVersionKind | None
    namespace: str
    name: str
    spec: Any
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)


# Returns (warning, error); either may be None or a MultiError.
ValidateFn = Callable[[ResourceConfig], tuple[Exception | None, Exception | None]]


@dataclass(frozen=True)
class Schema:
    """Immutable descriptor of one resource kind."""
    group: str
    version: str
    kind: str
    plural: str
    cluster_scoped: bool
    message_type: type
    validate_fn: ValidateFn | None = field(default=None, compare=False, repr=False)

    @property
    def group_version_kind(self) -> GroupVersionKind:
        return GroupVersionKind(self.group, self.version, self.kind)

    @property
    def has_validator(self) -> bool:
        return self.validate_fn is not None

    def validate(self, config: ResourceConfig) -> tuple[Exception | None, Exception | None]:
        """Run the bound validation function.

        Kinds without a validator report nothing; use ``has_validator`` to tell
        that apart from a validator that found no problems.
        """
        if self.validate_fn is None:
            return None, None
        return self.validate_fn(config)

    def __str__(self) -> str:
        return str(self.group_version_kind)


def resolve_type(ref: Any) -> type | None:
    """Resolve a type or a dotted ``package.module.Name`` path to a type."""
    if isinstance(ref, type):
        return ref
    if not isinstance(ref, str) or not ref:
        return None

    module_name, _, attr = ref.rpartition(".")
    if not module_name:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None

    resolved = getattr(module, attr, None)
    return resolved if isinstance(resolved, type) else None


@dataclass
class SchemaBuilder:
    """Collects descriptor fields and checks them before building a Schema."""
    kind: str = ""
    plural: str = ""
    group: str = ""
    version: str = ""
    cluster_scoped: bool = False
    message_type: type | str | None = None
    validate_fn: ValidateFn | None = None

    def build(self) -> Schema:
        """Build the schema.

        Raises:
            SchemaBuildError: If any identity field is missing or malformed,
                or the message type cannot be resolved.
        """
        problems = []

        if not self.kind:
            problems.append("kind is required")
        elif not _KIND_PATTERN.match(self.kind):
            problems.append(f"kind must be CamelCase, got: {self.kind!r}")

        if not self.plural:
            problems.append("plural is required")
        elif not _PLURAL_PATTERN.match(self.plural):
            problems.append(f"plural must be lower case, got: {self.plural!r}")

        if not self.version:
            problems.append("version is required")
        elif not _VERSION_PATTERN.match(self.version):
            problems.append(f"version is malformed: {self.version!r}")

        if self.group and not _GROUP_PATTERN.match(self.group):
            problems.append(f"group is malformed: {self.group!r}")

        message_type = resolve_type(self.message_type)
        if message_type is None:
            problems.append(f"message type cannot be resolved: {self.message_type!r}")

        if self.validate_fn is not None and not callable(self.validate_fn):
            problems.append("validate_fn must be callable")

        if problems:
            name = self.kind or "<unnamed>"
            raise SchemaBuildError(f"invalid schema {name}: " + "; ".join(problems))

        schema = Schema(
            group=self.group,
            version=self.version,
            kind=self.kind,
            plural=self.plural,
            cluster_scoped=self.cluster_scoped,
            message_type=message_type,
            validate_fn=self.validate_fn,
        )
        logger.debug(f"Built schema {schema}")
        return schema
