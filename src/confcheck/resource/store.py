"""In-memory store of resource instances indexed by kind."""

from collections.abc import Iterable, Iterator

from confcheck.resource.instance import GroupVersionKind, Instance


class ResourceStore:
    """Holds instances per kind, preserving insertion order."""

    def __init__(self, instances: Iterable[Instance] = ()):
        self._by_kind: dict[GroupVersionKind, list[Instance]] = {}
        for instance in instances:
            self.add(instance)

    def add(self, instance: Instance) -> None:
        kind = instance.metadata.schema
        if kind is None:
            raise ValueError(f"instance {instance.metadata.full_name} has no kind")
        self._by_kind.setdefault(kind, []).append(instance)

    def kinds(self) -> list[GroupVersionKind]:
        return list(self._by_kind)

    def instances(self, kind: GroupVersionKind) -> list[Instance]:
        return list(self._by_kind.get(kind, ()))

    def __iter__(self) -> Iterator[Instance]:
        for instances in self._by_kind.values():
            yield from instances

    def __len__(self) -> int:
        return sum(len(instances) for instances in self._by_kind.values())
