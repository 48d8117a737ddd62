"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class SourceError(PipelineError):
    """Raised when a configured source cannot contribute records."""

    error_code = "SOURCE_ERROR"


class SourceFetchError(SourceError):
    """Raised when a source is unreachable or its payload is not valid JSON."""

    error_code = "SOURCE_FETCH_ERROR"


class SourceShapeError(SourceError):
    """Raised when a source parses but its top-level shape is not recognised."""

    error_code = "UNRECOGNIZED_SHAPE"
