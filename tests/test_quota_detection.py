"""Tests for is_quota_exceeded across the error shapes the service emits."""

from types import SimpleNamespace

import pytest

from agents.dream_analysis import is_quota_exceeded


class StatusError(Exception):
    def __init__(self, message, status=None, status_code=None, error=None):
        super().__init__(message)
        self.status = status
        self.status_code = status_code
        self.error = error


class TestIsQuotaExceeded:

    def test_bedrock_throttling(self, client_error):
        assert is_quota_exceeded(client_error("ThrottlingException", 429, "Too many requests"))

    def test_service_quota_code(self, client_error):
        assert is_quota_exceeded(client_error("ServiceQuotaExceededException", 400, "Limit hit"))

    def test_other_client_error(self, client_error):
        assert not is_quota_exceeded(client_error("ValidationException", 400, "Malformed input request"))

    def test_access_denied(self, client_error):
        assert not is_quota_exceeded(client_error("AccessDeniedException", 403, "Not authorized"))

    @pytest.mark.parametrize("status", [429, "429"])
    def test_status_attribute(self, status):
        assert is_quota_exceeded(StatusError("Resource exhausted", status=status))

    def test_status_code_attribute(self):
        assert is_quota_exceeded(StatusError("Slow down", status_code=429))

    def test_nested_error_dict(self):
        assert is_quota_exceeded(StatusError("Request failed", error={"code": 429}))

    def test_nested_error_object(self):
        assert is_quota_exceeded(StatusError("Request failed", error=SimpleNamespace(code=429)))

    def test_quota_in_message(self):
        assert is_quota_exceeded(RuntimeError("You exceeded your current quota, please check your plan"))

    @pytest.mark.parametrize("message", ["Quota exceeded for model", "QUOTA_EXHAUSTED"])
    def test_quota_marker_ignores_case(self, message):
        assert is_quota_exceeded(RuntimeError(message))

    def test_429_in_message(self):
        assert is_quota_exceeded(RuntimeError("got status 429 from upstream"))

    @pytest.mark.parametrize("error", [
        RuntimeError("Internal server error"),
        StatusError("Bad gateway", status=502),
        StatusError("Unavailable", status_code=503, error={"code": 503}),
        TimeoutError("read timed out"),
        ValueError(""),
    ])
    def test_other_errors(self, error):
        assert not is_quota_exceeded(error)
