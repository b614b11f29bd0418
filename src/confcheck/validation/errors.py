"""Error values returned by validation functions.

A validation function returns ``(warning, error)``. Either side may be a single
exception or a ``MultiError`` bundling several independent failures found in
one call. ``iter_errors`` flattens both shapes (and built-in exception groups)
into the individual failures that each deserve their own report.
"""

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from confcheck.analysis.msg import MessageType


class ValidationWarning(Exception):
    """A non-fatal observation about a resource."""
    pass


class FieldError(Exception):
    """A failure tied to a field of the resource payload.

    ``path`` is dotted with list indexes in brackets, e.g. ``http[0].route``.
    """

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}" if path else message)


class AnalysisAwareError(Exception):
    """An error that names its own catalog message instead of the generic one."""

    def __init__(self, message_type: "MessageType", *parameters: Any, path: str | None = None):
        self.message_type = message_type
        self.parameters = parameters
        self.path = path
        super().__init__(message_type.render(*parameters))


class MultiError(Exception):
    """Ordered collection of independent failures."""

    def __init__(self, errors: list[Exception] | None = None):
        self.errors: list[Exception] = list(errors or [])
        super().__init__(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[Exception]:
        return iter(self.errors)

    def __str__(self) -> str:
        if len(self.errors) == 1:
            return f"1 error occurred:\n\t* {self.errors[0]}\n"
        points = "\n".join(f"\t* {err}" for err in self.errors)
        return f"{len(self.errors)} errors occurred:\n{points}\n"

    def error_or_none(self) -> "MultiError | None":
        return self if self.errors else None


def append_error(err: Exception | None, *errs: Exception | None) -> MultiError | None:
    """Append errors into a MultiError.

    ``None`` values are skipped and nested MultiErrors are flattened. Returns
    None when nothing was collected.
    """
    collected: list[Exception] = []
    for candidate in (err, *errs):
        if candidate is None:
            continue
        if isinstance(candidate, MultiError):
            collected.extend(candidate.errors)
        else:
            collected.append(candidate)

    if not collected:
        return None
    return MultiError(collected)


def iter_errors(err: BaseException | None) -> Iterator[BaseException]:
    """Yield the individual failures held by ``err`` in aggregation order."""
    if err is None:
        return
    if isinstance(err, MultiError):
        for sub in err.errors:
            yield from iter_errors(sub)
    elif isinstance(err, BaseExceptionGroup):
        for sub in err.exceptions:
            yield from iter_errors(sub)
    else:
        yield err
