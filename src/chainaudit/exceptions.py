"""chainaudit exception hierarchy.

All public exceptions inherit from ChainAuditError, giving callers a single
base class to catch when they want to handle any chainaudit-specific failure
without swallowing unrelated errors.

Only ``InputValidationError`` ever escapes an analysis run. Every other
error type is raised internally and absorbed by the component that owns the
recovery (extractor, analyzer, orchestrator), which degrades the report
instead of failing it.
"""


class ChainAuditError(Exception):
    """Base exception for all chainaudit errors."""


class InputValidationError(ChainAuditError):
    """Raised when an analysis request is rejected before any analysis runs.

    Covers empty contract source, unknown analysis facets, and unknown
    severity filters. Callers exposing an HTTP surface should map this to
    a client-error status.
    """


class ExtractionError(ChainAuditError):
    """Raised when structural extraction of a contract fails.

    Covers unparsable source and syntax trees containing error nodes. The
    extractors catch this themselves and report a best-effort result.
    """


class DetectorError(ChainAuditError):
    """Raised when a single detector's trigger predicate fails.

    The static analyzer isolates each detector, so this never aborts the
    remaining detectors of a pattern library.
    """


class EnhancementError(ChainAuditError):
    """Raised when the external AI collaborator cannot produce a result.

    Covers transport errors, timeouts, non-2xx responses, and undecodable
    payloads. The orchestrator keeps the pattern-derived finding text.
    """


class ConfigurationError(ChainAuditError):
    """Raised for invalid configuration values or unreadable config files."""
