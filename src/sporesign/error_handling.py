"""
Standardized Error Handling for Sporesign
=========================================

This module provides the exception hierarchy and the shared error handling
helpers used by key management and record signing.

Error taxonomy:
- KeyReadError: key file missing, unreadable or undecodable (recovered by load_keys)
- KeyGenerationError: key pair could not be generated
- KeyPersistenceError: a generated key could not be written to disk
- SignerNotReadyError: a signing operation was invoked before keys were loaded
- SigningComputationError: the signature primitive itself failed
"""

import functools
import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Type

logger = logging.getLogger(__name__)


class SigningError(Exception):
    """Base exception for all signing-related errors."""

    # Level used when the error is created and when an operation fails with it
    log_level = logging.ERROR

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        logger.log(
            self.log_level,
            f"Signing error: {message}" + (f" ({context_str})" if context_str else "")
        )


class SignerConfigurationError(SigningError, ValueError):
    """Raised when signer configuration is invalid."""

    pass


class KeyReadError(SigningError):
    """Raised when an existing key pair cannot be read from disk.

    load_keys recovers from it by generating a new pair, so it is logged at DEBUG.
    """

    log_level = logging.DEBUG


class KeyGenerationError(SigningError):
    """Raised when a new key pair cannot be generated."""

    pass


class KeyPersistenceError(SigningError):
    """Raised when a key cannot be written to its configured path."""

    pass


class SignerNotReadyError(SigningError):
    """Raised when signing is attempted before a private key is available."""

    pass


class SigningComputationError(SigningError):
    """Raised when computing a signature fails."""

    pass


class SignatureFieldCollisionError(SigningError):
    """Raised when a record already contains the signature field."""

    pass


def with_error_handling(
    error_type: Type[SigningError] = SigningError,
    context: Optional[Dict[str, Any]] = None,
):
    """
    Decorator converting unexpected exceptions into a SigningError subclass.

    SigningError instances raised inside the wrapped function pass through
    unchanged so the most specific error always reaches the caller.

    Args:
        error_type: Type of SigningError to raise
        context: Additional context to include in the error
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SigningError:
                raise
            except Exception as e:
                error_context = (context or {}).copy()
                error_context.update(
                    {
                        "function": func.__name__,
                        "original_error": str(e),
                        "original_error_type": type(e).__name__,
                    }
                )
                raise error_type(f"Error in {func.__name__}: {e}", error_context) from e

        return wrapper

    return decorator


@contextmanager
def signing_operation_context(operation: str, **context):
    """
    Context manager logging the start, duration and failure of an operation.

    Args:
        operation: Description of the operation
        **context: Additional context for logging
    """
    logger.debug(f"Starting signing operation: {operation}", extra=context)
    start_time = time.perf_counter()

    try:
        yield
    except SigningError as e:
        logger.log(e.log_level, f"Signing operation failed: {operation}", extra=context)
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error in signing operation: {operation} - {e}", extra=context
        )
        raise

    duration = time.perf_counter() - start_time
    logger.debug(
        f"Signing operation completed: {operation} ({duration:.3f}s)", extra=context
    )


def safe_file_operation(
    operation: str,
    file_path: Path,
    func: Callable,
    *args,
    error_type: Type[SigningError] = SigningError,
    **kwargs,
):
    """
    Perform a file operation, converting OS errors into ``error_type``.

    Args:
        operation: Description of the operation
        file_path: File being operated on
        func: Function to call
        error_type: SigningError subclass raised on failure
        *args, **kwargs: Arguments for the function

    Returns:
        Result of the function call
    """
    with signing_operation_context(operation, file_path=str(file_path)):
        try:
            return func(*args, **kwargs)
        except PermissionError as e:
            raise error_type(
                f"Permission denied for {operation}: {file_path}",
                {"operation": operation, "file_path": str(file_path)},
            ) from e
        except OSError as e:
            raise error_type(
                f"File system error during {operation}: {e}",
                {"operation": operation, "file_path": str(file_path)},
            ) from e
