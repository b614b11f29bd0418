"""Load resources from YAML and JSON files.

Each document becomes an ``Instance`` whose origin remembers the file, the
document's first line and the line of every field, so diagnostics can point
at the offending field.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from confcheck.exceptions import LoadError, RegistryError
from confcheck.registry import SchemaRegistry
from confcheck.resource.instance import FullName, GroupVersionKind, Instance, Metadata
from confcheck.resource.store import ResourceStore

logger = logging.getLogger(__name__)

RESOURCE_SUFFIXES = (".yaml", ".yml", ".json")


@dataclass(frozen=True)
class FileReference:
    """Position of a document inside a file."""
    path: str
    line: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


@dataclass(frozen=True)
class FileOrigin:
    """Origin of a resource read from a file."""
    kind: GroupVersionKind
    full_name: FullName
    ref: FileReference
    fields: dict[str, int] = field(default_factory=dict, compare=False, hash=False, repr=False)

    def friendly_name(self) -> str:
        return f"{self.kind.kind} {self.full_name}"

    def comparator(self) -> str:
        return f"{self.kind} {self.full_name}"

    def namespace(self) -> str:
        return self.full_name.namespace

    def reference(self) -> FileReference:
        return self.ref

    def field_map(self) -> dict[str, int]:
        return dict(self.fields)


def build_field_map(node: yaml.Node) -> dict[str, int]:
    """Map dotted field paths (``spec.http[0].route``) to 1-based lines."""
    field_map: dict[str, int] = {}

    def walk(current: yaml.Node, path: str) -> None:
        if isinstance(current, yaml.MappingNode):
            for key_node, value_node in current.value:
                key = getattr(key_node, "value", None)
                if key is None:
                    continue
                child = f"{path}.{key}" if path else str(key)
                field_map[child] = key_node.start_mark.line + 1
                walk(value_node, child)
        elif isinstance(current, yaml.SequenceNode):
            for i, item in enumerate(current.value):
                child = f"{path}[{i}]"
                field_map[child] = item.start_mark.line + 1
                walk(item, child)

    walk(node, "")
    return field_map


def iter_resource_files(path: Path) -> Iterator[Path]:
    """Yield resource files under ``path`` in a stable order."""
    if path.is_file():
        yield path
        return
    if not path.exists():
        raise LoadError(path, "no such file or directory")

    for candidate in sorted(path.rglob("*")):
        if candidate.is_file() and candidate.suffix.lower() in RESOURCE_SUFFIXES:
            yield candidate


def _iter_documents(path: Path, text: str) -> Iterator[tuple[Any, yaml.Node]]:
    loader = yaml.SafeLoader(text)
    try:
        while loader.check_node():
            node = loader.get_node()
            if node is None:
                continue
            yield loader.construct_document(node), node
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        problem = getattr(e, "problem", None) or str(e)
        raise LoadError(path, f"invalid YAML: {problem}", line=line) from e
    finally:
        loader.dispose()


def _to_instance(path: Path, data: Any, node: yaml.Node, registry: SchemaRegistry | None,
                 default_namespace: str) -> Instance:
    line = node.start_mark.line + 1
    if not isinstance(data, dict):
        raise LoadError(path, "document is not a mapping", line=line)

    api_version = data.get("apiVersion")
    kind = data.get("kind")
    metadata = data.get("metadata") or {}
    if not api_version or not kind:
        raise LoadError(path, "document must set apiVersion and kind", line=line)
    if not isinstance(metadata, dict) or not metadata.get("name"):
        raise LoadError(path, "document must set metadata.name", line=line)

    for key in ("labels", "annotations"):
        if not isinstance(metadata.get(key) or {}, dict):
            raise LoadError(path, f"metadata.{key} must be a mapping", line=line)

    gvk = GroupVersionKind.from_api_version(str(api_version), str(kind))

    cluster_scoped = False
    if registry is not None:
        try:
            schema = registry.find(gvk)
        except RegistryError:
            schema = None
        cluster_scoped = schema is not None and schema.cluster_scoped

    namespace = "" if cluster_scoped else str(metadata.get("namespace") or default_namespace)
    full_name = FullName(namespace, str(metadata["name"]))

    origin = FileOrigin(
        kind=gvk,
        full_name=full_name,
        ref=FileReference(str(path), line),
        fields=build_field_map(node),
    )
    return Instance(
        message=data.get("spec"),
        metadata=Metadata(
            full_name=full_name,
            schema=gvk,
            labels={str(k): str(v) for k, v in (metadata.get("labels") or {}).items()},
            annotations={str(k): str(v) for k, v in (metadata.get("annotations") or {}).items()},
        ),
        origin=origin,
    )


def load_file(path: Path, registry: SchemaRegistry | None = None,
              default_namespace: str = "default") -> list[Instance]:
    """Load every resource document in one file.

    Raises:
        LoadError: If the file cannot be read or a document is malformed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(path, f"cannot read file: {e}") from e

    if path.suffix.lower() == ".json":
        # YAML rejects tab indentation; valid JSON only has tabs as whitespace
        text = text.replace("\t", " ")

    instances = [
        _to_instance(path, data, node, registry, default_namespace)
        for data, node in _iter_documents(path, text)
        if data is not None
    ]
    logger.debug(f"Loaded {len(instances)} resources from {path}")
    return instances


def load_paths(paths: Iterable[Path], registry: SchemaRegistry | None = None,
               default_namespace: str = "default") -> ResourceStore:
    """Load files and directories into a ResourceStore."""
    store = ResourceStore()
    for path in paths:
        for file_path in iter_resource_files(Path(path)):
            for instance in load_file(file_path, registry, default_namespace):
                store.add(instance)
    logger.info(f"Loaded {len(store)} resources of {len(store.kinds())} kinds")
    return store
