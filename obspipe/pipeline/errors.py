from typing import Iterable


class PipelineError(Exception):
    """Base class for every error raised by the observation pipeline."""


class SchemaError(PipelineError, ValueError):
    """A source is missing a required column or holds an incompatible type."""


class DataQualityError(PipelineError, ValueError):
    """One or more raw labels have no entry in the lookup table."""

    def __init__(self, labels: Iterable, message: str | None = None):
        self.labels = sorted({str(x) for x in labels})
        super().__init__(message or f"No lookup entry for label(s): {', '.join(self.labels)}")


class PipelineIOError(PipelineError, OSError):
    """Reading the source or writing the sink failed."""

    def __init__(self, path, operation: str, reason: str = ""):
        self.path = str(path)
        self.operation = operation
        msg = f"Failed to {operation} {self.path}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
