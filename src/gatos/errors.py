"""Errors raised by the record store and surfaced by the HTTP layer."""

from __future__ import annotations


class GatosError(Exception):
    """Base error for this package."""


class ValidationError(GatosError):
    """Raised when required record fields are missing or empty."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = list(fields)
        super().__init__(f"missing or empty fields: {', '.join(self.fields)}")


class MalformedRowError(GatosError):
    """Raised when a persisted row cannot be decoded into a record."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class StorageError(GatosError):
    """Raised when the table file cannot be accessed."""


class StorageReadError(StorageError):
    """Reading the table file failed."""


class StorageWriteError(StorageError):
    """Appending to or rewriting the table file failed."""
