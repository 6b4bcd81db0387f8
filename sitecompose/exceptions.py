"""Exception classes for sitecompose.

This module defines custom exception classes used throughout the application
for proper error handling and user feedback.
"""

from pathlib import Path
from typing import Optional, Dict, Any, List


class SiteComposeError(Exception):
    """Base exception class for all sitecompose errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(SiteComposeError):
    """Exception raised for configuration-related errors."""
    pass


class ConfigLoadError(ConfigError):
    """Exception raised when a config file exists but cannot be loaded."""

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        **kwargs: Any
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            file_path: Config file that failed to load
            **kwargs: Additional arguments passed to parent class
        """
        super().__init__(message, **kwargs)
        self.file_path = file_path


class ConfigValidationError(ConfigError):
    """Exception raised when a site configuration fails validation."""

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        hint: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            errors: Individual validation failures
            hint: Suggested fix, if one is known
            **kwargs: Additional arguments passed to parent class
        """
        super().__init__(message, **kwargs)
        self.errors = errors or []
        self.hint = hint


class MalformedDeclarationError(SiteComposeError):
    """Exception raised for a theme declaration that is neither a name nor a record."""

    def __init__(
        self,
        message: str,
        list_key: Optional[str] = None,
        index: Optional[int] = None,
        declaration: Any = None,
        **kwargs: Any
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            list_key: Config key holding the offending list
            index: Position of the declaration within that list
            declaration: The raw declaration value
            **kwargs: Additional arguments passed to parent class
        """
        super().__init__(message, **kwargs)
        self.list_key = list_key
        self.index = index
        self.declaration = declaration


class CyclicThemeError(SiteComposeError):
    """Exception raised when a theme appears on its own ancestry path."""

    def __init__(self, cycle: List[str], **kwargs: Any) -> None:
        """Initialize the exception.

        Args:
            cycle: Theme names along the cycle, first and last being the same theme
            **kwargs: Additional arguments passed to parent class
        """
        super().__init__(f"Theme ancestry contains a cycle: {' -> '.join(cycle)}", **kwargs)
        self.cycle = cycle
