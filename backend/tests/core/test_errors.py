"""Error Hierarchy — status codes and the response envelope.

Tests:
    - Every ChirpError subclass maps to its documented HTTP status and code
    - to_response() carries code, category, severity, timestamp, and context
"""

import pytest

from app.core.errors import (
    AuthenticationError, ChirpError, DatabaseError, DuplicateUserError,
    ErrorContext, InvalidCredentialsError, MalformedBodyError,
    PayloadTooLargeError, ResourceNotFoundError,
)


@pytest.mark.parametrize("error,status,code", [
    (MalformedBodyError("bad", "application/json"), 400, "MALFORMED_BODY"),
    (PayloadTooLargeError("big", 10), 413, "PAYLOAD_TOO_LARGE"),
    (AuthenticationError(), 401, "AUTHENTICATION_FAILED"),
    (InvalidCredentialsError(), 400, "INVALID_CREDENTIALS"),
    (DuplicateUserError("email"), 400, "USER_ALREADY_EXISTS"),
    (ResourceNotFoundError("Tweet", "t1"), 404, "RESOURCE_NOT_FOUND"),
    (DatabaseError("down", "connect"), 503, "DATABASE_ERROR"),
])
def test_error_status_and_code(error, status, code):
    assert isinstance(error, ChirpError)
    assert error.http_status == status
    assert error.code == code


def test_response_envelope_shape():
    err = ResourceNotFoundError(
        "Tweet", "t1", ErrorContext(path="/api/tweets/t1"),
    )
    body = err.to_response()["error"]
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["message"] == "Tweet 't1' not found"
    assert body["category"] == "resource_not_found"
    assert body["severity"] == "error"
    assert body["context"]["path"] == "/api/tweets/t1"
    assert "timestamp" in body


def test_duplicate_user_names_the_field():
    err = DuplicateUserError("handle")
    assert err.field == "handle"
    assert "handle" in err.message
