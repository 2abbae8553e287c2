"""Custom exceptions for resume documents and the import/export boundary."""

from typing import Iterable, List, Optional


class InvalidDocumentError(ValueError):
    """
    Exception raised when a stored or imported dict cannot be read as an entity.

    Attributes:
        message: Error description
        document_kind: Entity being read (e.g., 'ResumeMaster', 'Variant')
        field_name: Offending field, if known
    """

    def __init__(
        self,
        message: str,
        document_kind: Optional[str] = None,
        field_name: Optional[str] = None,
    ):
        self.message = message
        self.document_kind = document_kind
        self.field_name = field_name

        parts = [message]
        if document_kind:
            parts.append(f"Document: {document_kind}")
        if field_name:
            parts.append(f"Field: {field_name}")

        super().__init__("\n".join(parts))


class UnknownSectionError(ValueError):
    """Exception raised when a section key is not one of the exportable sections."""

    def __init__(self, section: str, known_sections: Iterable[str] = ()):
        self.section = section
        self.known_sections = list(known_sections)

        message = f"Unknown section: {section}"
        if self.known_sections:
            message += f". Known sections: {', '.join(self.known_sections)}"

        super().__init__(message)


class ImportValidationError(ValueError):
    """
    Exception raised when an import document fails up-front validation.

    Carries every problem found so the caller can show them all at once.

    Attributes:
        errors: Human-readable validation messages
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)

        lines = [f"Import rejected ({len(self.errors)} problem(s)):"]
        lines.extend(f"  - {error}" for error in self.errors)

        super().__init__("\n".join(lines))


class SectionMismatchError(ValueError):
    """
    Exception raised when an import document holds a different section than requested.

    Attributes:
        expected: Section the caller asked to import
        actual: Section recorded in the import document
    """

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual

        super().__init__(
            f"Section mismatch: expected '{expected}' but import document contains '{actual}'"
        )


class BackupError(Exception):
    """
    Exception raised when a backup archive cannot be read or written.

    Attributes:
        message: Error description
        archive_path: Path of the archive involved
        original_error: Underlying exception (zip or JSON failure)
    """

    def __init__(self, message: str, archive_path=None, original_error: Optional[Exception] = None):
        self.message = message
        self.archive_path = archive_path
        self.original_error = original_error

        parts = [message]
        if archive_path:
            parts.append(f"Archive: {archive_path}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))
