"""Exception taxonomy for fatal migration failures."""

from __future__ import annotations


class MigrationError(RuntimeError):
    """A fatal step failure carrying the step's ordered error messages."""

    def __init__(self, *messages: str) -> None:
        self.messages: list[str] = list(messages)
        super().__init__("; ".join(self.messages))


class FetchError(MigrationError):
    """A page or required sub-resource was unreachable or returned non-2xx."""


class ParseError(MigrationError):
    """A fetched body could not be parsed as HTML."""


class ExtractionError(MigrationError):
    """A required metadata field could not be determined."""


class UploadError(MigrationError):
    """A slide PDF could not be placed in the file store."""


class ValidationError(MigrationError):
    """A resource broke a provenance rule or the artifact failed a structural check."""
