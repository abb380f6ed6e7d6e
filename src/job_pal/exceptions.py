"""Error taxonomy for the generation and interview pipeline."""

from __future__ import annotations


class JobPalError(Exception):
    """Base class for every error surfaced to callers."""


class ModelUnavailable(JobPalError):
    """The model call itself failed (network, auth, rate limit).

    Attributes:
        original_error: The exception raised by the SDK.
    """

    def __init__(self, message: str, original_error: Exception | None = None):
        self.original_error = original_error
        if original_error is not None:
            message = f"{message}: {original_error}"
        super().__init__(message)


class ExtractionFailed(JobPalError):
    """The model answered but no JSON object could be parsed from it.

    Attributes:
        raw_text: The model output, verbatim, for manual recovery.
        reason: Short description of why parsing failed.
    """

    def __init__(self, raw_text: str, reason: str = "", context: str = "model response"):
        self.raw_text = raw_text
        self.reason = reason
        self.context = context
        message = f"Failed to parse {context}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ReferenceNotFound(JobPalError):
    """A job, session, artifact or template id is unknown.

    Attributes:
        kind: What was looked up, e.g. "job" or "interview session".
        ref_id: The identifier that was not found.
    """

    def __init__(self, kind: str, ref_id: str, message: str | None = None):
        self.kind = kind
        self.ref_id = ref_id
        super().__init__(message or f"{kind.capitalize()} not found: {ref_id}")


class ValidationFailed(JobPalError, ValueError):
    """Required input is missing or blank. Raised before any model call."""


class SessionAlreadyComplete(JobPalError):
    """An interview session in the terminal state received another transition."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"This interview session is already complete: {session_id}")
