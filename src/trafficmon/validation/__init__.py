"""
Validation and error handling for the trafficmon package.

This module provides input validation, the runtime error taxonomy and
error handling helpers with consistent error reporting across the
application.
"""

from .exceptions import (
    AlreadyRunningError,
    CollectorStateError,
    ErrorSeverity,
    NotRunningError,
    SourceUnavailableError,
    StorageIOError,
    TrafficMonitorError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_file_error,
)

from .validators import (
    validate_enum_choice,
    validate_iso_week,
    validate_positive_float,
    validate_positive_integer,
    validate_string_list,
    validate_year_month,
)

__all__ = [
    # Error taxonomy
    "TrafficMonitorError",
    "SourceUnavailableError",
    "StorageIOError",
    "CollectorStateError",
    "AlreadyRunningError",
    "NotRunningError",
    # Error handling
    "ErrorSeverity",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_file_error",
    "handle_cli_error",
    # Validators
    "validate_enum_choice",
    "validate_iso_week",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_string_list",
    "validate_year_month",
]
