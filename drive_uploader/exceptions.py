"""
Exception classes for the resumable upload client.

Every failure that aborts an upload derives from UploadError, so callers can
catch one type and still inspect the HTTP status and raw response body.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Optional


class UploadError(Exception):
    """
    Base exception for resumable upload failures.

    Attributes:
        message (str): Main message of the exception
        status_code (int): HTTP status code of the response, if any
        response_content (bytes): Body of the response, if any
    """

    def __init__(self, message=None, status_code=None, response_content=None):
        default_message = f"Upload request failed with status {status_code}"
        message = message or default_message
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_content = response_content


class CredentialLoadError(UploadError):
    """Raised when the credential file is missing or malformed."""


class SessionCreationError(UploadError):
    """Raised when the server refuses to open an upload session."""


class ProtocolError(UploadError):
    """Raised when a response does not have the shape the protocol requires."""


class AlreadyCompleteError(UploadError):
    """Raised when a resume query finds the object already fully received.

    Not a failure: the orchestrator treats it as "nothing left to send".
    """


class SessionExpiredError(UploadError):
    """Raised when the persisted session is no longer known to the server."""


class ChunkUploadError(UploadError):
    """Raised when the server rejects a chunk.

    The session usually survives this, so a later run can resume it.
    """


class TransportError(UploadError):
    """Raised when the request never produced an HTTP response."""


@dataclass
class ErrorEnvelope:
    """Server error body of the form ``{"error": {"message": ..., ...}}``."""

    message: str
    code: Optional[int] = None
    errors: list[dict[str, Any]] = field(default_factory=list)


def parse_error_envelope(body: bytes, status_code: Optional[int] = None) -> ErrorEnvelope:
    """
    Parse a JSON error body strictly.

    Args:
        body: Raw response body
        status_code: Status of the response, attached to any ProtocolError

    Returns:
        ErrorEnvelope with the server message

    Raises:
        ProtocolError: If the body is not JSON or lacks ``error.message``
    """
    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError(
            f"Error response is not valid JSON (status {status_code})",
            status_code=status_code,
            response_content=body,
        ) from e

    error = data.get("error") if isinstance(data, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    if not isinstance(message, str):
        raise ProtocolError(
            f"Error response has no error.message field (status {status_code})",
            status_code=status_code,
            response_content=body,
        )

    code = error.get("code")
    errors = error.get("errors")
    return ErrorEnvelope(
        message=message,
        code=code if isinstance(code, int) else None,
        errors=errors if isinstance(errors, list) else [],
    )
