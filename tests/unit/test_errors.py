"""Error taxonomy: classification, severity, recovery policy and sanitization."""

import pytest

from pathsift.core.types import ParseError, Position
from pathsift.errors import (
    build_error_recovery_options,
    categorize_error,
    create_enhanced_error,
    create_error,
    create_parse_error,
    determine_recovery_action,
    determine_severity,
    error_from_exception,
    handle_error,
    is_error_recoverable,
    sanitize_error_message,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("message", "category"),
    [
        ("Failed to PARSE value", "parsing"),
        ("Syntax error at line 3", "parsing"),
        ("validation failed", "validation"),
        ("invalid path", "validation"),
        ("Permission denied", "file-system"),
        ("cannot access file", "file-system"),
        ("bad config value", "configuration"),
        ("unknown setting", "configuration"),
        ("safety limit", "safety"),
        ("threshold exceeded", "safety"),
        ("something broke", "operational"),
        # priority order: parse beats validation, validation beats config
        ("invalid syntax", "parsing"),
        ("invalid config", "validation"),
    ],
)
def test_categorize_error(message, category):
    assert categorize_error(message) == category
    assert categorize_error(RuntimeError(message)) == category


@pytest.mark.parametrize(
    ("message", "category", "severity"),
    [
        ("fatal crash", "operational", "critical"),
        ("critical failure", "validation", "critical"),
        ("an error occurred", "operational", "error"),
        ("disk unavailable", "file-system", "error"),
        ("warning: odd value", "operational", "warning"),
        ("bad shape", "validation", "warning"),
        ("something", "operational", "info"),
    ],
)
def test_determine_severity(message, category, severity):
    assert determine_severity(message, category) == severity


@pytest.mark.parametrize(
    ("category", "severity", "action"),
    [
        ("file-system", "error", "retry"),
        ("file-system", "warning", "fallback"),
        ("parsing", "info", "skip"),
        ("validation", "critical", "skip"),
        ("operational", "critical", "abort"),
        ("configuration", "info", "fallback"),
        ("safety", "error", "fallback"),
    ],
)
def test_determine_recovery_action(category, severity, action):
    assert determine_recovery_action(category, severity) == action


@pytest.mark.parametrize(
    ("message", "category", "recoverable"),
    [
        ("x", "parse", True),
        ("x", "parsing", True),
        ("x", "configuration", True),
        ("x", "validation", True),
        ("permission denied", "file-system", True),
        ("network unreachable", "file-system", True),
        ("disk gone", "file-system", False),
        ("worker failed", "operational", True),
        ("fatal: out of memory", "operational", False),
        ("too big", "safety", False),
        ("nope", "format", False),
    ],
)
def test_is_error_recoverable(message, category, recoverable):
    assert is_error_recoverable(message, category) is recoverable


class TestRecoveryOptions:
    def test_file_system_policy(self):
        opts = build_error_recovery_options(create_enhanced_error("x", "file-system"))
        assert (opts.retryable, opts.max_retries, opts.retry_delay) == (True, 3, 1000)

    def test_operational_policy(self):
        opts = build_error_recovery_options(create_enhanced_error("x", "operational"))
        assert (opts.retryable, opts.max_retries, opts.retry_delay) == (True, 2, 2000)

    def test_configuration_policy_has_fallback(self):
        opts = build_error_recovery_options(
            create_enhanced_error("x", "configuration")
        )
        assert opts.retryable is False
        assert opts.fallback_action is not None
        assert opts.user_action == "Reset to default settings"

    @pytest.mark.parametrize("category", ["safety", "validation", "parsing", "format"])
    def test_other_categories_have_no_policy(self, category):
        opts = build_error_recovery_options(create_enhanced_error("x", category))
        assert opts.retryable is False
        assert opts.max_retries == 0
        assert opts.fallback_action is None


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("password=secret123", "password=***"),
        ("Password: hunter2 rest", "password=*** rest"),
        ("token=abc.def", "token=***"),
        ("api_key=xyz", "api_key=***"),
        ("/Users/alice/project/a.ts", "/Users/***/project/a.ts"),
        ("/home/bob/.ssh/id_rsa", "/home/***/.ssh/id_rsa"),
        ("C:\\Users\\carol\\file.txt", "C:\\Users\\***\\file.txt"),
        ("nothing to hide", "nothing to hide"),
    ],
)
def test_sanitize_error_message(message, expected):
    assert sanitize_error_message(message) == expected


class TestBuilders:
    def test_create_error(self):
        error = create_error(
            category="format",
            severity="info",
            message="nope",
            recoverable=False,
            recovery_action="none",
            metadata={"a": 1},
        )
        assert isinstance(error, ParseError)
        assert error.metadata["a"] == 1
        with pytest.raises(TypeError):
            error.metadata["b"] = 2

    def test_create_error_rejects_unknown_category(self):
        with pytest.raises(ValueError, match="category"):
            create_error(
                category="cosmic-rays",
                severity="info",
                message="x",
                recoverable=True,
                recovery_action="skip",
            )

    def test_create_parse_error(self):
        error = create_parse_error("bad value", filepath="a.json", position=(3, 7))
        assert error.category == "parsing"
        assert error.recoverable is True
        assert error.recovery_action == "skip"
        assert error.position == Position(3, 7)

    def test_error_from_exception_is_classified_and_sanitized(self):
        error = error_from_exception(
            PermissionError("permission denied: /home/dave/notes")
        )
        assert error.category == "file-system"
        assert error.severity == "error"
        assert error.recovery_action == "retry"
        assert error.recoverable is True
        assert error.message == "permission denied: /home/***/notes"

    def test_enhanced_error_for_parse_failures_names_the_file(self):
        error = create_enhanced_error(
            ValueError("boom"), "parsing", {"filepath": "data.csv"}
        )
        assert error.user_message == "Failed to parse path values: data.csv"
        assert error.suggestion == "Check the path format and ensure values are valid"
        assert error.severity == "medium"
        assert error.recoverable is True

    def test_enhanced_error_overrides(self):
        error = create_enhanced_error(
            "too big", "safety", recoverable=True, severity="low", suggestion="Split it"
        )
        assert error.user_message == "Safety threshold exceeded: too big"
        assert error.recoverable is True
        assert error.severity == "low"
        assert error.suggestion == "Split it"

    def test_enhanced_error_context_is_read_only(self):
        error = create_enhanced_error("x", "operational", {"k": "v"})
        with pytest.raises(TypeError):
            error.context["k"] = "w"


def test_handle_error_logs_sanitized_message(caplog):
    recoverable = create_enhanced_error("token=abc", "validation")
    fatal = create_enhanced_error("token=abc", "safety")

    with caplog.at_level("WARNING", logger="pathsift"):
        handle_error(recoverable)
        handle_error(fatal)

    levels = [r.levelname for r in caplog.records]
    assert levels == ["WARNING", "ERROR"]
    assert "abc" not in caplog.text
    assert "token=***" in caplog.text
