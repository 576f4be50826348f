"""Custom exceptions for DOCX Composer."""

from typing import Optional


class DocxComposerError(Exception):
    """Base exception for DOCX Composer errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class PartNotFoundError(DocxComposerError):
    """Exception raised when a mandatory package part is missing."""

    def __init__(self, part_name: str, details: Optional[str] = None):
        super().__init__(f"Part not found: {part_name}", details)
        self.part_name = part_name


class MalformedPartError(DocxComposerError):
    """Exception raised when a package part cannot be parsed as XML."""

    def __init__(self, part_name: str, details: Optional[str] = None):
        super().__init__(f"Malformed part: {part_name}", details)
        self.part_name = part_name


class DanglingReferenceError(DocxComposerError):
    """
    Exception raised when a relationship reference does not resolve after reconciliation.

    Indicates an internal inconsistency of the composition engine rather than bad input.
    """

    def __init__(self, reference_id: str, scope: str, details: Optional[str] = None):
        super().__init__(f"Dangling {scope} relationship reference: {reference_id}", details)
        self.reference_id = reference_id
        self.scope = scope


class InvalidArgumentError(DocxComposerError, ValueError):
    """Exception raised when a required argument is missing or out of range."""

    pass
