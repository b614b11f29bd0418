"""Resource identity, provenance and instances."""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True, order=True)
class FullName:
    """Namespace-qualified resource name."""
    namespace: str
    name: str

    @classmethod
    def parse(cls, value: str) -> "FullName":
        """Parse ``namespace/name`` or a bare cluster-scoped ``name``."""
        namespace, _, name = value.rpartition("/")
        return cls(namespace, name)

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name


@dataclass(frozen=True, order=True)
class GroupVersionKind:
    """Identifies a resource kind."""
    group: str
    version: str
    kind: str

    @classmethod
    def from_api_version(cls, api_version: str, kind: str) -> "GroupVersionKind":
        group, _, version = api_version.rpartition("/")
        return cls(group, version, kind)

    @property
    def api_version(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version

    def __str__(self) -> str:
        return f"{self.api_version}/{self.kind}"


class Reference(Protocol):
    """Opaque pointer to where a resource was defined."""

    def __str__(self) -> str:
        ...


@runtime_checkable
class Origin(Protocol):
    """Provenance of a resource, used to attribute diagnostics."""

    def friendly_name(self) -> str:
        ...

    def comparator(self) -> str:
        ...

    def namespace(self) -> str:
        ...

    def reference(self) -> Reference:
        ...

    def field_map(self) -> dict[str, int]:
        ...


@dataclass
class Metadata:
    """Identity and bookkeeping metadata of a resource."""
    full_name: FullName = field(default_factory=lambda: FullName("", ""))
    schema: GroupVersionKind | None = None
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)


@dataclass
class Instance:
    """A configuration resource: metadata, payload and origin."""
    message: Any = None
    metadata: Metadata = field(default_factory=Metadata)
    origin: Origin | None = None
