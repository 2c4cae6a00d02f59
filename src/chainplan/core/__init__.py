"""Core modules for chainplan - centralized error definitions."""

from chainplan.core.errors import (
    ChainPlanError,
    ConfigurationError,
    DeploymentFailed,
    ExitCode,
    InvalidPlan,
    NetworkError,
    ReconciliationFailed,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "ChainPlanError",
    "ConfigurationError",
    "NetworkError",
    "InvalidPlan",
    "DeploymentFailed",
    "ReconciliationFailed",
    "main_with_error_handling",
    "format_error_message",
]
