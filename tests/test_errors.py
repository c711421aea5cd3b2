from __future__ import annotations

from bento_menu.errors import Error, ErrorReport, ErrorType, Result


def test_result_carries_value_or_error() -> None:
    ok = Result.ok(3)
    err = Result.err(Error(ErrorType.PARSE_ERROR, "bad toml"))

    assert ok.is_ok() and ok.value == 3
    assert err.is_err() and err.error.message == "bad toml"


def test_describe_names_the_option() -> None:
    error = Error(ErrorType.VALIDATION_ERROR, "Invalid value", context={"option": "layout.mode"})

    assert error.describe() == "Invalid value [layout.mode]"
    assert Error(ErrorType.FILE_NOT_FOUND, "missing").describe() == "missing"


def test_report_groups_by_type() -> None:
    report = ErrorReport()
    report.add_warning(Error(ErrorType.LABELS_EXHAUSTED, "no label", context={"unlabeled": [4]}))
    report.add_warning(Error(ErrorType.CAPACITY_BLOCKED, "blocked"))
    report.add_error(Error(ErrorType.VALIDATION_ERROR, "broken"))

    assert report.has_errors() and report.has_warnings()
    assert [e.message for e in report.of_type(ErrorType.LABELS_EXHAUSTED)] == ["no label"]
    assert report.summary() == {
        "errors": 1,
        "warnings": 2,
        "types": ["capacity_blocked", "labels_exhausted", "validation_error"],
    }
