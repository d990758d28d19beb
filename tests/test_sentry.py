"""Tests for Sentry event redaction."""

from portfolai.core.sentry import REDACTED, redact_event


def test_credentials_and_body_are_redacted():
    event = {
        "request": {
            "headers": {"Authorization": "Bearer abc", "Accept": "application/json"},
            "data": {"notes": "Client is worried about retirement savings"},
        }
    }
    redacted = redact_event(event, {})
    assert redacted["request"]["headers"] == {"Authorization": REDACTED, "Accept": "application/json"}
    assert redacted["request"]["data"] == REDACTED


def test_event_without_request_passes_through():
    event = {"message": "boom"}
    assert redact_event(event, {}) == {"message": "boom"}
