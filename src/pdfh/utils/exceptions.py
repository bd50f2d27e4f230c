"""
pdfh - Custom Exceptions Module

This module defines custom exception classes for the error cases of the
page-tree operations.
"""


class PdfhError(Exception):
    """Base exception for all pdfh errors.

    All custom exceptions inherit from this class so callers can catch any
    pdfh-specific failure in one place.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional technical details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class LoadError(PdfhError):
    """Raised when a PDF file is missing, unreadable or structurally invalid."""

    def __init__(self, file_path: str, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            file_path: Path to the file that could not be loaded
            reason: Optional underlying cause, shown to the user verbatim
        """
        self.file_path = file_path
        self.reason = reason
        msg = f"Failed to load document: {file_path}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg, details=f"path={file_path}")


class SaveError(PdfhError):
    """Raised when the output file cannot be written."""

    def __init__(self, file_path: str, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            file_path: Destination that could not be written
            reason: Optional underlying cause
        """
        self.file_path = file_path
        self.reason = reason
        msg = f"Failed to write out file: {file_path}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg, details=f"path={file_path}")


class SelectionInputError(PdfhError):
    """Raised when a page selection or its parameters are contradictory."""

    def __init__(
        self,
        field: str,
        value: object | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            field: Name of the offending parameter (e.g. ``every``)
            value: Optional value that failed validation
            reason: Optional reason for the rejection
        """
        self.field = field
        self.value = value
        self.reason = reason

        msg = f"Invalid value for '{field}'"
        if value is not None:
            msg += f" ({value})"
        if reason:
            msg += f": {reason}"

        super().__init__(msg)


class StructuralAbsenceError(PdfhError):
    """Raised when merge inputs lack a Catalog or a Pages root."""

    def __init__(self, structure: str) -> None:
        """Initialize the exception.

        Args:
            structure: The missing node type (``Catalog`` or ``Pages``)
        """
        self.structure = structure
        super().__init__(f"{structure} root not found")


class EmptyResultError(PdfhError):
    """Raised when the resulting document would have no pages."""

    def __init__(self) -> None:
        super().__init__("Resulting document would have no pages")


class ObjectNotFoundError(PdfhError):
    """Raised when an object id is dereferenced but absent from the graph."""

    def __init__(self, object_id: object) -> None:
        self.object_id = object_id
        super().__init__(f"Object {object_id} not found")


class ConfigurationError(PdfhError):
    """Raised when there's a configuration-related error."""

    def __init__(self, setting_name: str | None = None, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            setting_name: Optional name of the problematic setting
            reason: Optional reason for the error
        """
        self.setting_name = setting_name
        self.reason = reason

        if setting_name:
            msg = f"Configuration error for '{setting_name}'"
        else:
            msg = "Configuration error"

        if reason:
            msg += f": {reason}"

        super().__init__(msg)


# Exception hierarchy summary:
# PdfhError (base)
# ├── LoadError
# ├── SaveError
# ├── SelectionInputError
# ├── StructuralAbsenceError
# ├── EmptyResultError
# ├── ObjectNotFoundError
# └── ConfigurationError
