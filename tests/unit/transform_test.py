"""Unit tests for the per-file transform entry point."""

import logging
from collections.abc import Callable
from unittest.mock import patch

import pytest
from support import FakeSyntaxBackend, FakeSyntaxTree, arity_entry, span_of

from strict_type_args.core import diagnostics
from strict_type_args.core.cache import DEFAULT_REPORT_CACHE, ReportCache
from strict_type_args.core.transform import transform, transform_file
from strict_type_args.models import MatchStrategy, TransformOptions

SOURCE = "// @flow\nconst a = 1;\nlet x: Bar = make();\n"


def test_rewrites_with_report(write_report: Callable[..., str]) -> None:
    start, end = span_of(SOURCE, "Bar")
    options = TransformOptions(errors=write_report([arity_entry("Foo.js", start, end, 2)]))

    result = transform_file("Foo.js", SOURCE, options)

    assert result.rewritten == 1
    assert result.source == "// @flow\nconst a = 1;\nlet x: Bar<any, any> = make();\n"
    assert transform("Foo.js", SOURCE, options) == result.source


def test_second_pass_is_no_change(write_report: Callable[..., str]) -> None:
    start, end = span_of(SOURCE, "Bar")
    options = TransformOptions(errors=write_report([arity_entry("/repo/src/Foo.js", start, end, 2)]))
    cache = ReportCache()

    rewritten = transform("src/Foo.js", SOURCE, options, cache=cache)
    assert rewritten is not None

    assert transform("src/Foo.js", rewritten, options, cache=cache) is None


def test_generated_file_is_skipped(write_report: Callable[..., str]) -> None:
    source = "// @flow\n// @generated\nlet x: Bar = make();\n"
    start, end = span_of(source, "Bar")
    options = TransformOptions(errors=write_report([arity_entry("Foo.js", start, end, 2)]))

    assert transform("generated/Foo.js", source, options) is None


def test_without_report_every_file_is_unchanged() -> None:
    assert transform("Foo.js", SOURCE, TransformOptions()) is None


def test_unreadable_report_is_unchanged() -> None:
    options = TransformOptions(errors="/nonexistent/errors.json")
    assert transform("Foo.js", SOURCE, options) is None


def test_basename_matching_crosses_directories(write_report: Callable[..., str]) -> None:
    start, end = span_of(SOURCE, "Bar")
    options = TransformOptions(errors=write_report([arity_entry("/other/checkout/Foo.js", start, end, 1)]))

    assert transform("src/Foo.js", SOURCE, options) is not None
    assert transform("src/Foo.js", SOURCE, options.model_copy(update={"match": MatchStrategy.PATH})) is None


def test_cache_is_shared_between_files(write_report: Callable[..., str]) -> None:
    start, end = span_of(SOURCE, "Bar")
    options = TransformOptions(errors=write_report([arity_entry("Foo.js", start, end, 1)]))
    cache = ReportCache()

    with patch(
        "strict_type_args.core.cache.load_diagnostic_index", wraps=diagnostics.load_diagnostic_index
    ) as loader:
        transform("a/Foo.js", SOURCE, options, cache=cache)
        transform("b/Foo.js", SOURCE, options, cache=cache)
        transform("c/Other.js", SOURCE, options, cache=cache)

    assert loader.call_count == 1


def test_default_cache_is_shared_between_calls(write_report: Callable[..., str]) -> None:
    start, end = span_of(SOURCE, "Bar")
    options = TransformOptions(errors=write_report([arity_entry("Foo.js", start, end, 1)]))

    with patch(
        "strict_type_args.core.cache.load_diagnostic_index", wraps=diagnostics.load_diagnostic_index
    ) as loader:
        transform("a/Foo.js", SOURCE, options)
        transform("b/Foo.js", SOURCE, options)
        transform("c/Other.js", SOURCE, options)

    assert loader.call_count == 1
    assert options.errors in DEFAULT_REPORT_CACHE


def test_language_option_overrides_extension(write_report: Callable[..., str]) -> None:
    start, end = span_of(SOURCE, "Bar")
    options = TransformOptions(
        errors=write_report([arity_entry("Foo.es", start, end, 1)]),
        language="typescript",
    )

    assert transform("Foo.es", SOURCE, options) == "// @flow\nconst a = 1;\nlet x: Bar<any> = make();\n"


def test_unsupported_extension_is_a_warning(
    write_report: Callable[..., str], caplog: pytest.LogCaptureFixture
) -> None:
    start, end = span_of(SOURCE, "Bar")
    options = TransformOptions(errors=write_report([arity_entry("Foo.es", start, end, 1)]))
    caplog.set_level(logging.WARNING)

    assert transform("Foo.es", SOURCE, options) is None

    (record,) = caplog.records
    assert record.levelno == logging.WARNING
    assert record.exc_info is None
    assert "Skipping Foo.es: Unsupported file extension" in record.getMessage()


def test_backend_failure_is_contained(write_report: Callable[..., str], caplog: pytest.LogCaptureFixture) -> None:
    start, end = span_of(SOURCE, "Bar")
    options = TransformOptions(errors=write_report([arity_entry("Foo.js", start, end, 1)]))

    def explode(source: str) -> FakeSyntaxTree:
        raise RuntimeError("parser crashed")

    caplog.set_level(logging.ERROR)
    result = transform_file("Foo.js", SOURCE, options, backend=FakeSyntaxBackend(explode))

    assert result.source is None
    assert result.rewritten == 0
    assert "parser crashed" in caplog.text
