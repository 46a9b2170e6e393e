"""Resumable session creation and progress queries."""

import json
import logging
import os
import re
from urllib.parse import urljoin

from drive_uploader.exceptions import (
    AlreadyCompleteError,
    ProtocolError,
    SessionCreationError,
    SessionExpiredError,
    parse_error_envelope,
)
from drive_uploader.transport import send_request

logger = logging.getLogger(__name__)

# Resume Incomplete: the server holds part of the object and wants the rest.
RESUME_INCOMPLETE = 308

_RANGE_PATTERN = re.compile(r"bytes\D\d+\D(\d+)")


class SessionManager:
    """Opens resumable sessions and asks them how far they got.

    Example:
        >>> manager = SessionManager("https://www.googleapis.com/upload/drive/v3/files")
        >>> url = manager.begin_session(token, "movie.mov", "video/quicktime")
        >>> offset = manager.resume_session(token, url, os.path.getsize("movie.mov"))
    """

    def __init__(self, upload_url: str, state_path: str = "uploadLocation.json"):
        """Initialize the session manager.

        Args:
            upload_url: Session-creation endpoint
            state_path: State file named in SessionExpiredError messages
        """
        self.upload_url = upload_url
        self.state_path = state_path

    def begin_session(self, token: str, file_name: str, mime_type: str) -> str:
        """Create a new resumable session for ``file_name``.

        Args:
            token: Bearer token
            file_name: Local file path; its base name becomes the object name
            mime_type: Content type of the object

        Returns:
            The session URL to upload chunks to

        Raises:
            SessionCreationError: If the server does not answer 200
            ProtocolError: If the Location header or error body is malformed
        """
        name = os.path.basename(file_name)
        logger.info(f"Requesting creation of {name} (MIME type: {mime_type})")

        response = send_request(
            "POST",
            f"{self.upload_url}?uploadType=resumable",
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            body=json.dumps({"mimeType": mime_type, "name": name}).encode("utf-8"),
        )

        if response.status != 200:
            envelope = parse_error_envelope(response.body, response.status)
            raise SessionCreationError(
                envelope.message,
                status_code=response.status,
                response_content=response.body,
            )

        location = response.header("Location")
        if not location:
            raise ProtocolError(
                "Server did not return Location header",
                status_code=response.status,
                response_content=response.body,
            )

        if not location.startswith("http"):
            location = urljoin(self.upload_url, location)

        logger.info(f"Upload location: '{location}'")
        return location

    def resume_session(self, token: str, session_url: str, file_size: int) -> int:
        """Ask an existing session for the next byte it expects.

        Args:
            token: Bearer token
            session_url: URL returned by begin_session
            file_size: Total size of the object

        Returns:
            Offset of the first byte not yet acknowledged

        Raises:
            AlreadyCompleteError: If the server already holds the whole object
            SessionExpiredError: If the session is gone (typically 404/410)
            ProtocolError: If the Range header cannot be parsed
        """
        logger.info(f"Resuming upload at '{session_url}'")
        response = send_request(
            "PUT",
            session_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Content-Range": f"bytes */{file_size}",
            },
            body=b"",
        )

        if response.status < RESUME_INCOMPLETE:
            raise AlreadyCompleteError(
                "Upload appears to have completed already",
                status_code=response.status,
                response_content=response.body,
            )
        if response.status > RESUME_INCOMPLETE:
            raise SessionExpiredError(
                f"Upload session has expired. Upload must be restarted "
                f"(delete {self.state_path}).",
                status_code=response.status,
                response_content=response.body,
            )

        range_header = response.header("Range")
        if not range_header:
            logger.info("Server has no bytes yet, resuming from byte 0")
            return 0

        match = _RANGE_PATTERN.search(range_header)
        if not match:
            raise ProtocolError(
                f"Unexpected Range header: {range_header!r}",
                status_code=response.status,
                response_content=response.body,
            )

        next_byte = int(match.group(1)) + 1
        logger.info(f"Uploaded range: '{range_header}' so resuming from byte {next_byte}")
        return next_byte
