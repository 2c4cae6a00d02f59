"""
Unified error handling for chainplan.

Every failure raised by the deployment core carries the failing logical or
controller name and the underlying cause, and maps to a CLI exit code.

Exit Codes:
- 0: Success
- 10: Configuration error
- 11: Provider error (network/RPC failure, deployment or reconciliation failed)
- 12: Validation error (invalid plan)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    PROVIDER_ERROR = 11
    VALIDATION_ERROR = 12
    UNKNOWN_ERROR = 127


class ChainPlanError(Exception):
    """Base exception for chainplan errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ChainPlanError):
    """Raised for configuration-related errors."""

    exit_code = ExitCode.CONFIG_ERROR


class NetworkError(ChainPlanError):
    """Raised when the network endpoint rejects or fails a request."""

    exit_code = ExitCode.PROVIDER_ERROR


class InvalidPlan(ChainPlanError):
    """Raised when a plan step references an output that is not produced before it."""

    exit_code = ExitCode.VALIDATION_ERROR


class DeploymentFailed(ChainPlanError):
    """Raised when a creation submission or its confirmation fails."""

    exit_code = ExitCode.PROVIDER_ERROR

    def __init__(self, logical_name: str, cause: BaseException):
        super().__init__(
            f"Deployment of {logical_name} failed: {cause}",
            details={"logical_name": logical_name, "cause": str(cause)},
        )
        self.logical_name = logical_name
        self.cause = cause


class ReconciliationFailed(ChainPlanError):
    """Raised when reading or updating a controller's linkage fails."""

    exit_code = ExitCode.PROVIDER_ERROR

    def __init__(self, controller_address: str, cause: BaseException):
        super().__init__(
            f"Reconciliation of {controller_address} failed: {cause}",
            details={"controller_address": controller_address, "cause": str(cause)},
        )
        self.controller_address = controller_address
        self.cause = cause


F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Exit codes:
        - ChainPlanError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except ChainPlanError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=e.exit_code,
                        **e.details,
                    )
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=ExitCode.UNKNOWN_ERROR,
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: ChainPlanError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
