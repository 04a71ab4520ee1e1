"""
Unit Tests for the Exception Hierarchy and Error Handling Helpers

Tests messages, codes, status codes and retryability of every error kind,
the normalized payload, and the normalization/severity helpers.
"""

import pytest

from design_system.core.config.constants import ErrorCode, Severity
from design_system.core.exceptions import (
    ConfigurationError,
    DesignSystemError,
    InternalError,
    InvalidDataError,
    ProtocolError,
    ResourceNotFoundError,
    ServiceTimeoutError,
    ServiceUnavailableError,
    ValidationError,
    error_response,
    get_severity,
    is_retryable,
    normalize_error,
    service_operation,
)


@pytest.mark.unit
class TestErrorKinds:
    def test_resource_not_found_message_and_status(self):
        error = ResourceNotFoundError("Design token", "primary-blu")

        assert error.message == 'Design token "primary-blu" not found'
        assert error.code is ErrorCode.RESOURCE_NOT_FOUND
        assert error.status_code == 404
        assert error.retryable is False
        assert error.context["resource"] == "Design token"
        assert error.context["identifier"] == "primary-blu"

    def test_resource_not_found_within_parent(self):
        error = ResourceNotFoundError("Variant", "ghost", within='component "Button"')
        assert error.message == 'Variant "ghost" not found for component "Button"'

    def test_service_unavailable_is_retryable(self):
        error = ServiceUnavailableError("design-tokens", "Circuit breaker is OPEN")

        assert error.message == "Service design-tokens is unavailable: Circuit breaker is OPEN"
        assert error.status_code == 503
        assert error.retryable is True
        assert len(error.suggestions) == 3

    def test_service_timeout_message(self):
        error = ServiceTimeoutError("design-tokens.get_token", 0.5)

        assert error.message == 'Operation "design-tokens.get_token" timed out after 0.5s'
        assert error.status_code == 408
        assert error.retryable is True
        assert error.context["timeout"] == 0.5

    def test_protocol_error_prefix_and_default_suggestions(self):
        error = ProtocolError("Unknown tool")

        assert error.message == "Protocol error: Unknown tool"
        assert error.code is ErrorCode.PROTOCOL_ERROR
        assert "Check client compatibility" in error.suggestions

    def test_configuration_error(self):
        error = ConfigurationError("DATA_PATH", "directory does not exist")

        assert error.message == 'Configuration error for "DATA_PATH": directory does not exist'
        assert error.context["setting"] == "DATA_PATH"
        assert error.status_code == 500

    def test_validation_and_invalid_data_are_client_errors(self):
        assert ValidationError("bad").status_code == 400
        assert ValidationError("bad").code is ErrorCode.DATA_VALIDATION_FAILED
        assert InvalidDataError("no data").code is ErrorCode.INVALID_DATA

    def test_explicit_suggestions_replace_defaults(self):
        error = ServiceUnavailableError("x", suggestions=["Only this"])
        assert error.suggestions == ["Only this"]


@pytest.mark.unit
class TestErrorPayload:
    def test_to_dict_has_exactly_the_normalized_fields(self):
        payload = ResourceNotFoundError("Component", "Buton", suggestions=["Check spelling"]).to_dict()

        assert set(payload) == {"code", "message", "suggestions", "retryable", "timestamp"}
        assert payload["code"] == "RESOURCE_NOT_FOUND"
        assert payload["suggestions"] == ["Check spelling"]
        assert payload["timestamp"].endswith("Z")

    def test_user_message_lists_suggestions(self):
        error = ValidationError("Search query must be a non-empty string", suggestions=["Provide a query"])
        text = error.user_message()

        assert text.startswith("Search query must be a non-empty string")
        assert "• Provide a query" in text

    def test_user_message_without_suggestions_is_the_message(self):
        assert InternalError("boom").user_message() == "boom"

    def test_chaining_helpers(self):
        error = InternalError("boom").with_suggestion("Retry later").with_context(tool="x")

        assert error.suggestions == ["Retry later"]
        assert error.context == {"tool": "x"}

    def test_from_exception_keeps_cause(self):
        original = KeyError("name")
        error = InvalidDataError.from_exception(original, file="components.json")

        assert error.cause is original
        assert error.context["original_error"] == "KeyError"
        assert error.context["file"] == "components.json"

    def test_context_is_copied(self):
        context = {"a": 1}
        error = InternalError("boom", context=context)
        error.with_context(b=2)
        assert context == {"a": 1}

    def test_error_response_envelope(self):
        error = ValidationError("bad")
        assert error_response(error) == {"success": False, "error": error.to_dict()}


@pytest.mark.unit
class TestErrorHandling:
    def test_normalize_passes_application_errors_through(self):
        error = ResourceNotFoundError("Component", "x", context={"service": "components"})
        normalized = normalize_error(error, service="other", tool="get-component-details")

        assert normalized is error
        assert normalized.context["service"] == "components"
        assert normalized.context["tool"] == "get-component-details"

    def test_normalize_wraps_unknown_exceptions(self):
        original = ValueError("unexpected")
        normalized = normalize_error(original, tool="x")

        assert isinstance(normalized, InternalError)
        assert normalized.code is ErrorCode.INTERNAL_ERROR
        assert normalized.cause is original
        assert normalized.message == "unexpected"
        assert normalized.context["original_error"] == "ValueError"

    @pytest.mark.parametrize(
        "error, severity",
        [
            (ResourceNotFoundError("Component", "x"), Severity.LOW),
            (ValidationError("bad"), Severity.MEDIUM),
            (InvalidDataError("no data"), Severity.MEDIUM),
            (ServiceUnavailableError("x"), Severity.HIGH),
            (ServiceTimeoutError("op", 1.0), Severity.HIGH),
            (ConfigurationError("X", "bad"), Severity.CRITICAL),
            (InternalError("boom"), Severity.CRITICAL),
        ],
    )
    def test_severity_by_code(self, error, severity):
        assert get_severity(error) is severity

    def test_is_retryable(self):
        assert is_retryable(ServiceUnavailableError("x"))
        assert not is_retryable(ValidationError("bad"))
        assert not is_retryable(RuntimeError("boom"))


@pytest.mark.unit
class TestServiceOperation:
    async def test_returns_result(self):
        @service_operation("tests")
        async def op(value):
            return value * 2

        assert await op(21) == 42

    async def test_application_errors_are_reraised_unchanged(self):
        error = ResourceNotFoundError("Component", "x")

        @service_operation("tests")
        async def op():
            raise error

        with pytest.raises(ResourceNotFoundError) as exc_info:
            await op()
        assert exc_info.value is error
        assert exc_info.value.context["service"] == "tests"
        assert exc_info.value.context["method"] == "op"

    async def test_unknown_errors_become_internal_errors(self):
        @service_operation("tests")
        async def op():
            raise KeyError("missing")

        with pytest.raises(InternalError) as exc_info:
            await op()
        assert isinstance(exc_info.value.__cause__, KeyError)
        assert isinstance(exc_info.value, DesignSystemError)
