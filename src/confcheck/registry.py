"""Registry of known resource kinds."""

import logging
from collections.abc import Iterable

from confcheck.exceptions import RegistryError
from confcheck.resource.instance import GroupVersionKind
from confcheck.resource.schema import Schema, SchemaBuilder
from confcheck.validation.models import DestinationRule, Gateway, ServiceEntry, VirtualService
from confcheck.validation.validators import pydantic_validator

logger = logging.getLogger(__name__)

NETWORKING_GROUP = "networking.confcheck.io"
NETWORKING_VERSION = "v1"


class SchemaRegistry:
    """Schemas keyed by group/version/kind, in registration order."""

    def __init__(self, schemas: Iterable[Schema] = ()):
        self._schemas: dict[GroupVersionKind, Schema] = {}
        for schema in schemas:
            self.register(schema)

    def register(self, schema: Schema) -> None:
        """Add a schema.

        Raises:
            RegistryError: If the group/version/kind is already registered
        """
        gvk = schema.group_version_kind
        if gvk in self._schemas:
            raise RegistryError(f"schema already registered: {gvk}")
        self._schemas[gvk] = schema
        logger.debug(f"Registered schema {gvk}")

    def find(self, name: str | GroupVersionKind) -> Schema | None:
        """Look up by GroupVersionKind, ``group/version/Kind`` or bare ``Kind``.

        Raises:
            RegistryError: If a bare kind matches schemas in several groups
        """
        if isinstance(name, GroupVersionKind):
            return self._schemas.get(name)

        if "/" in name:
            api_version, _, kind = name.rpartition("/")
            return self._schemas.get(GroupVersionKind.from_api_version(api_version, kind))

        matches = [s for s in self._schemas.values() if s.kind == name]
        if len(matches) > 1:
            raise RegistryError(
                f"kind {name} is ambiguous: " + ", ".join(str(s) for s in matches))
        return matches[0] if matches else None

    def all(self) -> list[Schema]:
        return list(self._schemas.values())

    def kinds(self) -> list[GroupVersionKind]:
        return list(self._schemas)

    def __contains__(self, gvk: GroupVersionKind) -> bool:
        return gvk in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)


def _networking_schema(kind: str, plural: str, model: type) -> Schema:
    return SchemaBuilder(
        group=NETWORKING_GROUP,
        version=NETWORKING_VERSION,
        kind=kind,
        plural=plural,
        cluster_scoped=False,
        message_type=f"{model.__module__}.{model.__qualname__}",
        validate_fn=pydantic_validator(model),
    ).build()


def builtin_registry() -> SchemaRegistry:
    """Registry holding the built-in networking kinds."""
    return SchemaRegistry([
        _networking_schema("VirtualService", "virtualservices", VirtualService),
        _networking_schema("DestinationRule", "destinationrules", DestinationRule),
        _networking_schema("Gateway", "gateways", Gateway),
        _networking_schema("ServiceEntry", "serviceentries", ServiceEntry),
    ])
