"""Shared fixtures for confcheck tests."""

import pytest

from confcheck.resource import GroupVersionKind, SchemaBuilder

VIRTUAL_SERVICE = GroupVersionKind("networking.confcheck.io", "v1", "VirtualService")


class FakeReference:
    def __str__(self) -> str:
        return ""


class FakeOrigin:
    """Origin stub that attributes everything to one friendly name."""

    def __init__(self, name: str = "myFriendlyName", fields: dict[str, int] | None = None):
        self.name = name
        self.fields = fields or {}

    def friendly_name(self) -> str:
        return self.name

    def comparator(self) -> str:
        return self.name

    def namespace(self) -> str:
        return "myNamespace"

    def reference(self) -> FakeReference:
        return FakeReference()

    def field_map(self) -> dict[str, int]:
        return dict(self.fields)


def schema_with_validate_fn(validate_fn):
    """VirtualService schema with a custom validation function."""
    return SchemaBuilder(
        group=VIRTUAL_SERVICE.group,
        version=VIRTUAL_SERVICE.version,
        kind=VIRTUAL_SERVICE.kind,
        plural="virtualservices",
        cluster_scoped=False,
        message_type=dict,
        validate_fn=validate_fn,
    ).build()


@pytest.fixture
def fake_origin():
    return FakeOrigin()
