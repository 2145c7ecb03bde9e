"""Tests for error sanitization utilities."""

from __future__ import annotations

from pubsub_channel_operator.utils.errors import (
    sanitize_dict,
    sanitize_error_message,
    sanitize_exception,
)


class TestSanitizeErrorMessage:
    """Test cases for sanitize_error_message function."""

    def test_sanitize_password(self):
        """Test that passwords are sanitized."""
        result = sanitize_error_message("Error: password: hunter2")
        assert "hunter2" not in result
        assert "[REDACTED]" in result

    def test_sanitize_token(self):
        """Test that tokens are sanitized."""
        result = sanitize_error_message("request failed, token: ya29.a0AfH6SMBx")
        assert "ya29.a0AfH6SMBx" not in result

    def test_sanitize_service_account_email(self):
        """Test that service account emails are sanitized."""
        result = sanitize_error_message("client_email: publisher@my-project.iam.gserviceaccount.com denied")
        assert "publisher@my-project.iam.gserviceaccount.com" not in result
        assert result.endswith("denied")

    def test_sanitize_secret_reference(self):
        """Test that secret names are sanitized."""
        result = sanitize_error_message("secret_name: google-cloud-key not found")
        assert "google-cloud-key" not in result

    def test_sanitize_case_insensitive(self):
        """Test that sanitization is case-insensitive."""
        result = sanitize_error_message("PASSWORD: hunter2")
        assert "hunter2" not in result

    def test_plain_message_untouched(self):
        """Test messages without credentials are returned as-is."""
        message = 'Failed to create Topic "cre-chan-my-channel-uid-1"'
        assert sanitize_error_message(message) == message


class TestSanitizeException:
    """Test cases for sanitize_exception function."""

    def test_sanitize_exception(self):
        """Test exception text is sanitized."""
        result = sanitize_exception(RuntimeError("auth failed, password: hunter2"))
        assert "hunter2" not in result
        assert "auth failed" in result


class TestSanitizeDict:
    """Test cases for sanitize_dict function."""

    def test_redacts_sensitive_keys(self):
        """Test sensitive keys are redacted recursively."""
        data = {
            "project": "my-project",
            "secret": {"name": "google-cloud-key", "key": "key.json"},
            "nested": {"token": "abc", "topic": "t"},
        }

        result = sanitize_dict(data)

        assert result["project"] == "my-project"
        assert result["secret"] == "[REDACTED]"
        assert result["nested"] == {"token": "[REDACTED]", "topic": "t"}

    def test_extra_sensitive_keys(self):
        """Test callers can add their own sensitive keys."""
        result = sanitize_dict({"sink": "http://internal"}, sensitive_keys={"sink"})
        assert result == {"sink": "[REDACTED]"}

    def test_input_not_modified(self):
        """Test the input dictionary is left unchanged."""
        data = {"password": "hunter2"}
        sanitize_dict(data)
        assert data == {"password": "hunter2"}
