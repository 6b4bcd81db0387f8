"""Error formatting helpers for the sitecompose CLI."""

from ..exceptions import (
    ConfigLoadError,
    ConfigValidationError,
    CyclicThemeError,
    MalformedDeclarationError,
)


def format_error_for_user(error: Exception, debug: bool = False) -> str:
    """Format an error message for user display.

    Args:
        error: The exception to format
        debug: Whether to include debug information

    Returns:
        Formatted error message
    """
    if isinstance(error, ConfigValidationError):
        message = f"Validation error: {error.message}"
        for detail in error.errors:
            message += f"\n  - {detail}"
        if error.hint:
            message += f"\nHint: {error.hint}"
        return message

    if isinstance(error, ConfigLoadError):
        message = f"Config load error: {error.message}"
        if error.file_path:
            message += f"\nFile: {error.file_path}"
        if debug and error.__cause__ is not None:
            message += f"\nCause: {type(error.__cause__).__name__}: {error.__cause__}"
        return message

    if isinstance(error, MalformedDeclarationError):
        message = f"Invalid theme declaration: {error.message}"
        if debug and error.declaration is not None:
            message += f"\nDeclaration: {error.declaration!r}"
        return message

    if isinstance(error, CyclicThemeError):
        return f"Theme cycle: {' -> '.join(error.cycle)}"

    # Default formatting
    if debug:
        return f"Error: {str(error)}\nType: {type(error).__name__}"
    else:
        return f"Error: {str(error)}"
