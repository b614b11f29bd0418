"""Tests for aggregate validation errors."""

from confcheck.analysis import msg
from confcheck.validation.errors import (
    AnalysisAwareError,
    FieldError,
    MultiError,
    append_error,
    iter_errors,
)


class TestAppendError:
    def test_nothing_collected(self):
        assert append_error(None) is None
        assert append_error(None, None, None) is None

    def test_single_error_wrapped(self):
        err = ValueError("a")
        result = append_error(None, err)
        assert isinstance(result, MultiError)
        assert result.errors == [err]

    def test_flattens_nested(self):
        a, b, c = ValueError("a"), ValueError("b"), ValueError("c")
        result = append_error(append_error(a, b), None, c)
        assert result.errors == [a, b, c]

    def test_error_or_none(self):
        assert MultiError().error_or_none() is None
        multi = MultiError([ValueError("a")])
        assert multi.error_or_none() is multi


class TestMultiError:
    def test_str_single(self):
        assert str(MultiError([ValueError("a")])) == "1 error occurred:\n\t* a\n"

    def test_str_many(self):
        text = str(MultiError([ValueError("a"), ValueError("b")]))
        assert text == "2 errors occurred:\n\t* a\n\t* b\n"

    def test_len_and_iter(self):
        errors = [ValueError("a"), ValueError("b")]
        multi = MultiError(errors)
        assert len(multi) == 2
        assert list(multi) == errors


class TestIterErrors:
    def test_none(self):
        assert list(iter_errors(None)) == []

    def test_single(self):
        err = ValueError("x")
        assert list(iter_errors(err)) == [err]

    def test_multi_in_order(self):
        a, b = ValueError("a"), ValueError("b")
        assert list(iter_errors(MultiError([a, b]))) == [a, b]

    def test_nested_groups(self):
        a, b, c = ValueError("a"), ValueError("b"), ValueError("c")
        nested = MultiError([a, ExceptionGroup("g", [b, c])])
        assert list(iter_errors(nested)) == [a, b, c]


class TestFieldErrors:
    def test_field_error_text(self):
        err = FieldError("http[0].route", "Field required")
        assert str(err) == "http[0].route: Field required"
        assert err.path == "http[0].route"

    def test_field_error_without_path(self):
        assert str(FieldError("", "spec is required")) == "spec is required"

    def test_analysis_aware_error_renders_template(self):
        err = AnalysisAwareError(msg.DEPRECATED_FIELD, "mirrorPercent", "use mirrorPercentage instead",
                                 path="http[0].mirrorPercent")
        assert str(err) == "Field 'mirrorPercent' is deprecated: use mirrorPercentage instead"
        assert err.path == "http[0].mirrorPercent"
