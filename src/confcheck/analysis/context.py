"""Analysis contexts: where analyzers read resources and write reports."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

from confcheck.analysis.msg import Message
from confcheck.resource.instance import GroupVersionKind, Instance
from confcheck.resource.store import ResourceStore

# Return False to stop iterating.
ForEachFn = Callable[[Instance], bool]


class AnalysisContext(ABC):
    """Resource provider and report sink for a single analysis run.

    Contexts are not synchronized; concurrent analyzers need their own.
    """

    @abstractmethod
    def for_each(self, kind: GroupVersionKind, fn: ForEachFn) -> None:
        """Call ``fn`` for every instance of ``kind``, in order."""
        pass

    @abstractmethod
    def report(self, kind: GroupVersionKind, message: Message) -> None:
        """Append a message. No filtering or deduplication happens here."""
        pass


class ListContext(AnalysisContext):
    """Context over an ordered list of instances already filtered to one kind."""

    def __init__(self, resources: Iterable[Instance] = ()):
        self.resources: list[Instance] = list(resources)
        self.reports: list[Message] = []

    def for_each(self, kind: GroupVersionKind, fn: ForEachFn) -> None:
        for instance in self.resources:
            if fn(instance) is False:
                break

    def report(self, kind: GroupVersionKind, message: Message) -> None:
        self.reports.append(message)


class StoreContext(AnalysisContext):
    """Context backed by a ResourceStore; only yields instances of the requested kind."""

    def __init__(self, store: ResourceStore):
        self.store = store
        self.reports: list[Message] = []
        self.reports_by_kind: dict[GroupVersionKind, list[Message]] = {}

    def for_each(self, kind: GroupVersionKind, fn: ForEachFn) -> None:
        for instance in self.store.instances(kind):
            if fn(instance) is False:
                break

    def report(self, kind: GroupVersionKind, message: Message) -> None:
        self.reports.append(message)
        self.reports_by_kind.setdefault(kind, []).append(message)
