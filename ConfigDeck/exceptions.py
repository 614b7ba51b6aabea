"""
Custom exceptions for the ConfigDeck package.

This module defines a hierarchical exception system that provides:
1. Specific, technical error information for debugging and logging
2. User-friendly error messages for end-users
3. Error codes for consistent error identification
4. Optional context information for additional debugging

Several exceptions also derive from the matching built-in exception
(KeyError, LookupError, TypeError) so callers can catch them either way.
"""

from typing import Optional, Dict, Any
import traceback
import sys


class ConfigDeckError(Exception):
    """Base exception for all ConfigDeck errors."""

    # Default values
    status_code = 500
    error_code = "CD-GENERIC-ERROR"
    user_message = "An unexpected error occurred."

    def __init__(
        self,
        message: str = None,
        user_message: str = None,
        error_code: str = None,
        status_code: int = None,
        context: Dict[str, Any] = None,
        cause: Exception = None,
        include_traceback: bool = True
    ):
        # Technical message for logs
        self.message = message or self.__class__.__doc__ or "An error occurred."
        super().__init__(self.message)

        # User-friendly message
        self.user_message = user_message or self.__class__.user_message

        # Error codes
        self.error_code = error_code or self.__class__.error_code
        self.status_code = status_code or self.__class__.status_code

        # Additional context
        self.context = context or {}
        self.cause = cause

        # Capture traceback if requested
        self.traceback = None
        if include_traceback:
            self.traceback = traceback.format_exc() if sys.exc_info()[0] else None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception to a dictionary for API responses."""
        error_dict = {
            "error_code": self.error_code,
            "message": self.user_message,
            "status_code": self.status_code,
        }

        # Include technical details only in debug mode or for logging
        if self.context.get('debug'):
            error_dict["technical_details"] = {
                "message": self.message,
                "context": {k: v for k, v in self.context.items() if k != 'debug'},
            }
            if self.traceback:
                error_dict["technical_details"]["traceback"] = self.traceback
            if self.cause:
                error_dict["technical_details"]["cause"] = str(self.cause)

        return error_dict


# Configuration Errors - 1000 range
class ConfigurationError(ConfigDeckError):
    """Exception raised when an item, storage or manager is incorrectly configured."""
    status_code = 500
    error_code = "CD-CONF-1000"
    user_message = "The system is incorrectly configured. Please contact support."


class ItemNotFoundError(ConfigDeckError, KeyError):
    """Exception raised when a config item id is not managed."""
    status_code = 404
    error_code = "CD-CONF-1001"
    user_message = "The requested config item could not be found."


# Path Errors - 2000 range
class PathError(ConfigDeckError):
    """Base exception for config path resolution errors."""
    status_code = 400
    error_code = "CD-PATH-2000"
    user_message = "The configuration path could not be resolved."


class PathLookupError(PathError, LookupError):
    """Exception raised when a path segment is absent from the config source."""
    error_code = "CD-PATH-2001"


class PathTypeError(PathError, TypeError):
    """Exception raised when a path descends into an unsupported source kind."""
    error_code = "CD-PATH-2002"


# Storage Errors - 3000 range
class StorageError(ConfigDeckError):
    """Base exception for all persistent storage errors."""
    status_code = 500
    error_code = "CD-STORE-3000"
    user_message = "The configuration storage is unavailable."


class DatabaseError(StorageError):
    """Base exception for all database-related errors."""
    error_code = "CD-STORE-3001"
    user_message = "A database error occurred."


class ConnectionError(DatabaseError):
    """Exception raised when there's an error connecting to the database."""
    error_code = "CD-STORE-3002"
    user_message = "Unable to connect to the database. Please try again later."


class QueryError(DatabaseError):
    """Exception raised when there's an error executing a database query."""
    error_code = "CD-STORE-3003"
    user_message = "An error occurred while processing your request."


# Validation Errors - 4000 range
class ValidationError(ConfigDeckError):
    """Exception raised when submitted config values fail validation."""
    status_code = 400
    error_code = "CD-DATA-4000"
    user_message = "The provided data is invalid. Please check your input."

    def __init__(self, message: str = None, errors: Optional[Dict[str, Any]] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.errors = errors or {}
