"""HTTP round trips for the resumable upload protocol."""

import logging
from dataclasses import dataclass
from email.message import Message
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.request import HTTPRedirectHandler, Request, build_opener

from drive_uploader.exceptions import TransportError

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """Status, headers and body of a completed request."""

    status: int
    headers: Message
    body: bytes = b""

    def header(self, name: str) -> Optional[str]:
        """Return a response header, case-insensitively."""
        return self.headers.get(name)


class _NoRedirectHandler(HTTPRedirectHandler):
    """308 means "Resume Incomplete" here, so never follow redirects."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


_opener = build_opener(_NoRedirectHandler)


def send_request(
    method: str,
    url: str,
    headers: Optional[dict[str, str]] = None,
    body: Optional[bytes] = None,
) -> HttpResponse:
    """Send one request and return the response whatever its status.

    Args:
        method: HTTP method
        url: Absolute request URL
        headers: Request headers
        body: Request body, or None for no body

    Returns:
        HttpResponse for any status code, including 3xx/4xx/5xx

    Raises:
        TransportError: If no HTTP response was received
    """
    logger.debug(f"{method} {url}")
    req = Request(url, data=body, headers=headers or {}, method=method)
    try:
        with _opener.open(req) as response:
            result = HttpResponse(response.status, response.headers, response.read())
    except HTTPError as e:
        result = HttpResponse(e.code, e.headers, e.read())
    except (URLError, OSError) as e:
        raise TransportError(f"{method} {url} failed: {e}") from e

    logger.debug(f"{method} {url} -> {result.status}")
    return result
