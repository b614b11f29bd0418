"""Schema validation exposed as an analyzer.

``ValidationAnalyzer`` runs the validation function bound to a schema over
every resource of that kind and turns each warning and error it returns into
its own diagnostic message. Aggregated errors fan out, one message per
sub-error, in the order they were aggregated.

Exceptions raised by a validation function are not caught: a crashing
validator is a defect in that validator, not a finding about the resource.
"""

import logging

from confcheck.analysis import msg
from confcheck.analysis.analyzer import Analyzer, AnalyzerMetadata
from confcheck.analysis.context import AnalysisContext
from confcheck.resource.instance import Instance, Origin
from confcheck.resource.schema import ResourceConfig, Schema
from confcheck.validation.errors import AnalysisAwareError, iter_errors

logger = logging.getLogger(__name__)


class ValidationAnalyzer(Analyzer):
    """Runs schema validation for one kind and reports every violation."""

    def __init__(self, schema: Schema):
        self._schema = schema

    @property
    def schema(self) -> Schema:
        return self._schema

    def metadata(self) -> AnalyzerMetadata:
        return AnalyzerMetadata(
            name=f"schema.ValidationAnalyzer.{self._schema.kind}",
            description="Runs schema validation as an analyzer and reports any violations",
            inputs=(self._schema.group_version_kind,),
        )

    def analyze(self, context: AnalysisContext) -> None:
        kind = self._schema.group_version_kind

        def visit(instance: Instance) -> bool:
            full_name = instance.metadata.full_name
            config = ResourceConfig(
                kind=kind,
                namespace=full_name.namespace,
                name=full_name.name,
                spec=instance.message,
                labels=dict(instance.metadata.labels),
                annotations=dict(instance.metadata.annotations),
            )
            warning, error = self._schema.validate(config)

            for w in iter_errors(warning):
                context.report(kind, _precise_message(instance.origin, w, is_error=False))
            for e in iter_errors(error):
                context.report(kind, _precise_message(instance.origin, e, is_error=True))

            if warning is not None or error is not None:
                logger.debug(f"{kind.kind} {full_name} failed validation")
            return True

        context.for_each(kind, visit)


def all_validation_analyzers(registry) -> list[ValidationAnalyzer]:
    """One analyzer per registered schema that carries a validator."""
    return [ValidationAnalyzer(schema) for schema in registry.all() if schema.has_validator]


def _precise_message(origin: Origin | None, err: BaseException, is_error: bool) -> msg.Message:
    line = _field_line(origin, getattr(err, "path", None))

    if isinstance(err, AnalysisAwareError):
        return msg.new_message(err.message_type, origin, *err.parameters, line=line)
    if is_error:
        return msg.schema_validation_error(origin, err, line=line)
    return msg.schema_validation_warning(origin, err, line=line)


def _field_line(origin: Origin | None, path: str | None) -> int | None:
    """Line of the nearest payload field on ``path`` that the origin knows about."""
    if origin is None or not path:
        return None

    field_map = origin.field_map()
    candidate = f"spec.{path}"
    while candidate:
        if candidate in field_map:
            return field_map[candidate]
        cut = max(candidate.rfind("."), candidate.rfind("["))
        candidate = candidate[:cut] if cut > 0 else ""
    return None
