"""Validation functions built from Pydantic payload models."""

import logging
import re
import types
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError

from confcheck.analysis import msg
from confcheck.resource.schema import ResourceConfig, ValidateFn
from confcheck.validation.errors import AnalysisAwareError, FieldError, append_error

logger = logging.getLogger(__name__)

_DNS1123_SUBDOMAIN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")
_DNS1123_SUBDOMAIN_MAX = 253


def check_resource_name(name: str) -> AnalysisAwareError | None:
    """Resource names must be DNS-1123 subdomains."""
    if not name:
        return AnalysisAwareError(msg.INVALID_RESOURCE_NAME, name, "name is required")
    if len(name) > _DNS1123_SUBDOMAIN_MAX:
        return AnalysisAwareError(msg.INVALID_RESOURCE_NAME, name,
                                  f"must be no more than {_DNS1123_SUBDOMAIN_MAX} characters")
    if not _DNS1123_SUBDOMAIN.match(name):
        return AnalysisAwareError(msg.INVALID_RESOURCE_NAME, name,
                                  "must consist of lower case alphanumeric characters, '-' or '.'")
    return None


def format_loc(loc: tuple[Any, ...]) -> str:
    """Render a pydantic error location as ``http[0].route``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def deprecated_field_warnings(model: type[BaseModel], data: Any, prefix: str = "") -> list[AnalysisAwareError]:
    """Warnings for every deprecated field set in the raw payload ``data``.

    Works on the raw mapping so warnings are found even when the payload
    also fails validation.
    """
    if not isinstance(data, dict):
        return []

    warnings: list[AnalysisAwareError] = []
    for name, info in model.model_fields.items():
        key = info.alias or name
        if key in data:
            value = data[key]
        elif name in data:
            value = data[name]
        else:
            continue
        path = f"{prefix}.{key}" if prefix else key

        if info.deprecated:
            reason = info.deprecated if isinstance(info.deprecated, str) else getattr(
                info.deprecated, "message", "deprecated")
            warnings.append(AnalysisAwareError(msg.DEPRECATED_FIELD, path, reason, path=path))

        warnings.extend(_walk_annotation(info.annotation, value, path))

    return warnings


def _walk_annotation(annotation: Any, value: Any, path: str) -> list[AnalysisAwareError]:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return deprecated_field_warnings(annotation, value, path)

    origin = get_origin(annotation)
    args = get_args(annotation)
    found: list[AnalysisAwareError] = []

    if origin in (Union, types.UnionType):
        for arg in args:
            if arg is not type(None):
                found.extend(_walk_annotation(arg, value, path))
    elif origin is list and args and isinstance(value, list):
        for i, item in enumerate(value):
            found.extend(_walk_annotation(args[0], item, f"{path}[{i}]"))
    elif origin is dict and len(args) == 2 and isinstance(value, dict):
        for key, item in value.items():
            found.extend(_walk_annotation(args[1], item, f"{path}.{key}"))

    return found


def pydantic_validator(model: type[BaseModel], check_name: bool = True) -> ValidateFn:
    """Build a validation function that checks payloads against ``model``.

    Every pydantic error becomes a separate FieldError so each is reported
    on its own. Deprecated fields in use come back as warnings.

    Args:
        model: Pydantic model describing the payload
        check_name: Also require a DNS-1123 resource name

    Returns:
        A function returning (warnings, errors), each a MultiError or None
    """
    def validate(config: ResourceConfig) -> tuple[Exception | None, Exception | None]:
        errors: list[Exception] = []
        warnings: list[Exception] = []

        if check_name:
            name_error = check_resource_name(config.name)
            if name_error is not None:
                errors.append(name_error)

        if config.spec is None:
            errors.append(FieldError("", "spec is required"))
        else:
            try:
                model.model_validate(config.spec)
            except ValidationError as e:
                for detail in e.errors():
                    errors.append(FieldError(format_loc(detail["loc"]), detail["msg"]))
            warnings.extend(deprecated_field_warnings(model, config.spec))

        if errors:
            logger.debug(f"{model.__name__} {config.namespace}/{config.name}: {len(errors)} errors")
        return append_error(None, *warnings), append_error(None, *errors)

    validate.__name__ = f"validate_{model.__name__}"
    validate.__qualname__ = validate.__name__
    return validate
