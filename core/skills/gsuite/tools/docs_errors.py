"""Error types for Google Docs/Slides batch editing.

Every error carries a stable ``code`` so the CLI can render it as a
structured result (``{"error": ..., "code": ...}``) when ``--json`` is set.
"""
from __future__ import annotations


class DocsError(Exception):
    """Base class for all editing errors surfaced to the user."""

    code = "error"


class ValidationError(DocsError):
    """Bad flag combination or out-of-range value. Raised before any API call."""

    code = "validation_error"


class ConflictingFlags(ValidationError):
    code = "conflicting_flags"


class IndexOutOfRange(ValidationError):
    code = "index_out_of_range"


class AmbiguousSelector(ValidationError):
    """Both or neither of two mutually exclusive selectors were given."""

    code = "ambiguous_selector"


class UnknownFormat(ValidationError):
    code = "unknown_format"


class EmptyBatch(ValidationError):
    code = "empty_batch"


class NotFound(DocsError):
    code = "not_found"


class Ambiguous(DocsError):
    """A selector matched more than one target."""

    code = "ambiguous"


class Unsupported(DocsError):
    """The document state cannot support the requested operation."""

    code = "unsupported"


class NoTabs(Unsupported):
    code = "no_tabs"


class NoContent(Unsupported):
    code = "no_content"


class EmptyDocument(Unsupported):
    code = "empty_document"


class ParseError(DocsError):
    code = "parse_error"


class InvalidFormat(ParseError):
    """Malformed richformat input."""

    code = "invalid_format"


class RemoteError(DocsError):
    """The API call itself failed."""

    code = "remote_error"


class AuthError(DocsError):
    """No usable account or token."""

    code = "auth_error"
