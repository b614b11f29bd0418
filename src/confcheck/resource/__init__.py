"""Resource model: instances, origins and schema descriptors."""

from .instance import FullName, GroupVersionKind, Instance, Metadata, Origin, Reference
from .schema import ResourceConfig, Schema, SchemaBuilder, ValidateFn, resolve_type

__all__ = [
    "FullName",
    "GroupVersionKind",
    "Instance",
    "Metadata",
    "Origin",
    "Reference",
    "ResourceConfig",
    "Schema",
    "SchemaBuilder",
    "ValidateFn",
    "resolve_type",
]
