"""Domain errors and failure typing."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class ContractError(PipelineError):
    """Raised when strict output contracts are broken."""

    error_code = "CONTRACT_ERROR"


class StageError(PipelineError):
    """Raised for stage failures that should halt in strict mode."""

    error_code = "STAGE_ERROR"


class MalformedRecord(PipelineError):
    """Raised when a raw ISD line cannot be decoded against the column schema.

    Fatal for that line only; callers record it and move on to the next line.
    """

    error_code = "MALFORMED_RECORD"

    def __init__(self, message: str, *, source: str | None = None, line_number: int | None = None) -> None:
        super().__init__(message)
        self.source = source
        self.line_number = line_number

    def __str__(self) -> str:
        message = super().__str__()
        if self.source is None and self.line_number is None:
            return message
        return f"{self.source or '<line>'}:{self.line_number or '?'}: {message}"


class EmptySequence(PipelineError):
    """Raised when a station summary is requested for zero observations."""

    error_code = "EMPTY_SEQUENCE"

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source
