"""
Tests for the error_handling module.

This module tests:
- Exception hierarchy and error context
- The with_error_handling decorator
- The signing_operation_context context manager
- safe_file_operation
"""

import logging
from pathlib import Path

import pytest

from sporesign.error_handling import (
    KeyGenerationError,
    KeyPersistenceError,
    KeyReadError,
    SignatureFieldCollisionError,
    SignerConfigurationError,
    SignerNotReadyError,
    SigningComputationError,
    SigningError,
    safe_file_operation,
    signing_operation_context,
    with_error_handling,
)


class TestSigningErrorHierarchy:
    """Test the signing error exception hierarchy."""

    def test_base_initialization(self):
        """Test SigningError stores message and context."""
        error = SigningError("Test message")
        assert str(error) == "Test message"
        assert error.context == {}

        context = {"key1": "value1", "key2": 42}
        error = SigningError("Test message", context)
        assert error.context == context

    def test_error_logging(self, caplog):
        """Test that SigningError logs itself with context."""
        with caplog.at_level(logging.ERROR):
            SigningError("Test error", {"operation": "test", "file": "key.der"})

        assert "Signing error: Test error" in caplog.text
        assert "operation=test" in caplog.text
        assert "file=key.der" in caplog.text

    def test_specific_error_types(self):
        """Test all specific error types inherit from SigningError."""
        error_types = [
            SignerConfigurationError,
            KeyReadError,
            KeyGenerationError,
            KeyPersistenceError,
            SignerNotReadyError,
            SigningComputationError,
            SignatureFieldCollisionError,
        ]

        for error_type in error_types:
            error = error_type("Test message", {"type": error_type.__name__})
            assert isinstance(error, SigningError)
            assert str(error) == "Test message"
            assert error.context["type"] == error_type.__name__

    def test_persistence_is_distinct_from_generation(self):
        """Test that callers can tell persistence and generation failures apart."""
        assert not issubclass(KeyPersistenceError, KeyGenerationError)
        assert not issubclass(KeyGenerationError, KeyPersistenceError)


class TestWithErrorHandlingDecorator:
    """Test the with_error_handling decorator."""

    def test_reraises_signing_errors(self):
        """Test that SigningError subclasses pass through unchanged."""
        @with_error_handling(KeyGenerationError)
        def failing_function():
            raise KeyReadError("Original error")

        with pytest.raises(KeyReadError) as exc_info:
            failing_function()

        assert str(exc_info.value) == "Original error"

    def test_converts_other_exceptions(self):
        """Test that other exceptions become the requested error type."""
        @with_error_handling(error_type=SigningComputationError)
        def failing_function():
            raise ValueError("Original error")

        with pytest.raises(SigningComputationError) as exc_info:
            failing_function()

        assert "Error in failing_function: Original error" in str(exc_info.value)
        assert exc_info.value.context["function"] == "failing_function"
        assert exc_info.value.context["original_error_type"] == "ValueError"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_with_context(self):
        """Test decorator with additional context."""
        @with_error_handling(context={"operation": "test_op"})
        def failing_function():
            raise RuntimeError("Test error")

        with pytest.raises(SigningError) as exc_info:
            failing_function()

        assert exc_info.value.context["operation"] == "test_op"

    def test_preserves_successful_returns(self):
        @with_error_handling()
        def successful_function(value):
            return value * 2

        assert successful_function(21) == 42


class TestSigningOperationContext:
    """Test the signing_operation_context context manager."""

    def test_successful_operation(self, caplog):
        with caplog.at_level(logging.DEBUG):
            with signing_operation_context("test_operation", key_id="k1"):
                pass

        assert "Starting signing operation: test_operation" in caplog.text
        assert "Signing operation completed: test_operation" in caplog.text

    def test_signing_error_propagation(self, caplog):
        with caplog.at_level(logging.ERROR):
            with pytest.raises(KeyPersistenceError):
                with signing_operation_context("test_operation"):
                    raise KeyPersistenceError("Test error")

        assert "Signing operation failed: test_operation" in caplog.text

    def test_recoverable_read_error_is_not_logged_as_error(self, caplog):
        """Test that key read failures stay below ERROR level."""
        with caplog.at_level(logging.DEBUG):
            with pytest.raises(KeyReadError):
                with signing_operation_context("test_operation"):
                    raise KeyReadError("Test error")

        assert "Signing operation failed: test_operation" in caplog.text
        assert "Signing error: Test error" in caplog.text
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_other_errors_are_not_converted(self, caplog):
        with caplog.at_level(logging.ERROR):
            with pytest.raises(ValueError):
                with signing_operation_context("test_operation"):
                    raise ValueError("Test error")

        assert "Unexpected error in signing operation: test_operation" in caplog.text


class TestSafeFileOperation:
    """Test safe_file_operation error conversion."""

    def test_returns_result(self, tmp_path):
        path = tmp_path / "file.bin"
        path.write_bytes(b"abc")

        assert safe_file_operation("read", path, path.read_bytes) == b"abc"

    def test_os_error_is_converted(self, tmp_path):
        path = tmp_path / "missing.bin"

        with pytest.raises(KeyReadError) as exc_info:
            safe_file_operation("read", path, path.read_bytes, error_type=KeyReadError)

        assert exc_info.value.context["file_path"] == str(path)

    def test_permission_error_is_converted(self):
        def deny():
            raise PermissionError("denied")

        with pytest.raises(KeyPersistenceError) as exc_info:
            safe_file_operation("write", Path("key.der"), deny, error_type=KeyPersistenceError)

        assert "Permission denied for write" in str(exc_info.value)
