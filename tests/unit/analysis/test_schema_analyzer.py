"""Tests for the schema validation analyzer."""

import pytest

from conftest import VIRTUAL_SERVICE, FakeOrigin, schema_with_validate_fn

from confcheck.analysis import ListContext, ValidationAnalyzer, all_validation_analyzers, msg
from confcheck.registry import builtin_registry
from confcheck.resource import FullName, Instance, Metadata, SchemaBuilder
from confcheck.validation import AnalysisAwareError, FieldError, MultiError, ValidationWarning, append_error


class Spec:
    """Distinct payload objects compared by identity."""
    pass


class TestCorrectArgs:
    """The validation function sees the resource exactly as stored."""

    def test_identity_and_payload_passed_through(self, fake_origin):
        m1 = Spec()
        seen = []

        def validate(config):
            seen.append(config)
            return None, None

        ctx = ListContext([
            Instance(
                message=m1,
                metadata=Metadata(full_name=FullName("ns", "name")),
                origin=fake_origin,
            )
        ])
        ValidationAnalyzer(schema_with_validate_fn(validate)).analyze(ctx)

        assert len(seen) == 1
        assert seen[0].name == "name"
        assert seen[0].namespace == "ns"
        assert seen[0].spec is m1
        assert seen[0].kind == VIRTUAL_SERVICE

    def test_resources_not_mutated(self, fake_origin):
        payload = {"hosts": ["a"]}
        instance = Instance(
            message=payload,
            metadata=Metadata(full_name=FullName("ns", "name"), labels={"app": "a"}),
            origin=fake_origin,
        )

        def validate(config):
            config.labels["added"] = "x"
            return None, ValueError("bad")

        ValidationAnalyzer(schema_with_validate_fn(validate)).analyze(ListContext([instance]))

        assert instance.message is payload
        assert payload == {"hosts": ["a"]}
        assert instance.metadata.labels == {"app": "a"}


class TestSchemaValidationWrapper:
    """Warnings and errors become one message each."""

    @pytest.fixture
    def payloads(self):
        return Spec(), Spec(), Spec()

    @pytest.fixture
    def analyzer(self, payloads):
        m1, m2, m3 = payloads

        def validate(config):
            if config.spec is m1:
                return None, None
            if config.spec is m2:
                return None, ValueError("")
            if config.spec is m3:
                return None, append_error(ValueError(""), ValueError(""))
            return None, None

        return ValidationAnalyzer(schema_with_validate_fn(validate))

    def test_metadata_inputs(self, analyzer):
        assert analyzer.metadata().inputs == (VIRTUAL_SERVICE,)
        assert analyzer.metadata().name == "schema.ValidationAnalyzer.VirtualService"

    def test_no_errors(self, analyzer, payloads):
        ctx = ListContext([Instance(message=payloads[0])])
        analyzer.analyze(ctx)
        assert ctx.reports == []

    def test_single_error(self, analyzer, payloads, fake_origin):
        ctx = ListContext([Instance(message=payloads[1], origin=fake_origin)])
        analyzer.analyze(ctx)
        assert len(ctx.reports) == 1
        assert ctx.reports[0].type is msg.SCHEMA_VALIDATION_ERROR

    def test_multi_error(self, analyzer, payloads, fake_origin):
        ctx = ListContext([Instance(message=payloads[2], origin=fake_origin)])
        analyzer.analyze(ctx)
        assert len(ctx.reports) == 2
        assert ctx.reports[0].type is msg.SCHEMA_VALIDATION_ERROR
        assert ctx.reports[1].type is msg.SCHEMA_VALIDATION_ERROR

    def test_mixed_resources(self, analyzer, payloads):
        origins = [FakeOrigin("r1"), FakeOrigin("r2"), FakeOrigin("r3")]
        ctx = ListContext([
            Instance(message=payload, origin=origin)
            for payload, origin in zip(payloads, origins)
        ])
        analyzer.analyze(ctx)

        assert len(ctx.reports) == 3
        assert all(r.type is msg.SCHEMA_VALIDATION_ERROR for r in ctx.reports)
        assert [r.origin for r in ctx.reports] == [origins[1], origins[2], origins[2]]


class TestReportContents:
    """Message parameters, ordering and attribution."""

    def test_aggregate_order_preserved(self, fake_origin):
        first, second, third = ValueError("first"), ValueError("second"), ValueError("third")
        analyzer = ValidationAnalyzer(
            schema_with_validate_fn(lambda config: (None, MultiError([first, second, third]))))
        ctx = ListContext([Instance(message={}, origin=fake_origin)])

        analyzer.analyze(ctx)

        assert [r.parameters for r in ctx.reports] == [(first,), (second,), (third,)]
        assert [r.text for r in ctx.reports] == [
            "Schema validation error: first",
            "Schema validation error: second",
            "Schema validation error: third",
        ]

    def test_warning_reported(self, fake_origin):
        analyzer = ValidationAnalyzer(
            schema_with_validate_fn(lambda config: (ValidationWarning("heads up"), None)))
        ctx = ListContext([Instance(message={}, origin=fake_origin)])

        analyzer.analyze(ctx)

        assert len(ctx.reports) == 1
        assert ctx.reports[0].type is msg.SCHEMA_VALIDATION_WARNING
        assert ctx.reports[0].text == "Schema validation warning: heads up"
        assert ctx.reports[0].origin is fake_origin

    def test_warning_and_error_together(self, fake_origin):
        warnings = append_error(ValidationWarning("w1"), ValidationWarning("w2"))
        analyzer = ValidationAnalyzer(
            schema_with_validate_fn(lambda config: (warnings, ValueError("e1"))))
        ctx = ListContext([Instance(message={}, origin=fake_origin)])

        analyzer.analyze(ctx)

        assert [r.type for r in ctx.reports] == [
            msg.SCHEMA_VALIDATION_WARNING,
            msg.SCHEMA_VALIDATION_WARNING,
            msg.SCHEMA_VALIDATION_ERROR,
        ]

    def test_exception_group_fans_out(self, fake_origin):
        group = ExceptionGroup("two", [ValueError("a"), ValueError("b")])
        analyzer = ValidationAnalyzer(schema_with_validate_fn(lambda config: (None, group)))
        ctx = ListContext([Instance(message={}, origin=fake_origin)])

        analyzer.analyze(ctx)

        assert len(ctx.reports) == 2

    def test_analysis_aware_error_keeps_its_type(self, fake_origin):
        err = AnalysisAwareError(msg.INVALID_RESOURCE_NAME, "Bad_Name", "not DNS-1123")
        analyzer = ValidationAnalyzer(schema_with_validate_fn(lambda config: (None, err)))
        ctx = ListContext([Instance(message={}, origin=fake_origin)])

        analyzer.analyze(ctx)

        assert ctx.reports[0].type is msg.INVALID_RESOURCE_NAME
        assert ctx.reports[0].parameters == ("Bad_Name", "not DNS-1123")

    def test_field_error_line_from_origin(self):
        origin = FakeOrigin(fields={"spec": 5, "spec.http": 6, "spec.http[0]": 7})
        err = FieldError("http[0].route", "field required")
        analyzer = ValidationAnalyzer(schema_with_validate_fn(lambda config: (None, err)))
        ctx = ListContext([Instance(message={}, origin=origin)])

        analyzer.analyze(ctx)

        # route is missing, so the nearest known parent is used
        assert ctx.reports[0].line == 7

    def test_no_origin_line_for_plain_error(self, fake_origin):
        analyzer = ValidationAnalyzer(schema_with_validate_fn(lambda config: (None, ValueError("x"))))
        ctx = ListContext([Instance(message={}, origin=fake_origin)])

        analyzer.analyze(ctx)

        assert ctx.reports[0].line is None


class TestFailureSemantics:
    """The analyzer does not swallow validator crashes."""

    def test_validator_exception_propagates(self, fake_origin):
        def validate(config):
            raise RuntimeError("validator bug")

        analyzer = ValidationAnalyzer(schema_with_validate_fn(validate))
        with pytest.raises(RuntimeError, match="validator bug"):
            analyzer.analyze(ListContext([Instance(message={}, origin=fake_origin)]))

    def test_no_validator_reports_nothing(self, fake_origin):
        schema = SchemaBuilder(
            group="networking.confcheck.io", version="v1", kind="VirtualService",
            plural="virtualservices", message_type=dict,
        ).build()
        ctx = ListContext([Instance(message=None, origin=fake_origin)])

        ValidationAnalyzer(schema).analyze(ctx)

        assert ctx.reports == []

    def test_stateless_across_runs(self, fake_origin):
        analyzer = ValidationAnalyzer(schema_with_validate_fn(lambda config: (None, ValueError("x"))))
        first = ListContext([Instance(message={}, origin=fake_origin)])
        second = ListContext([Instance(message={}, origin=fake_origin)])

        analyzer.analyze(first)
        analyzer.analyze(second)

        assert len(first.reports) == 1
        assert len(second.reports) == 1


class TestAllValidationAnalyzers:
    def test_one_per_builtin_kind(self):
        registry = builtin_registry()
        analyzers = all_validation_analyzers(registry)
        assert [a.schema for a in analyzers] == registry.all()
