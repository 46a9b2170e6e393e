"""Single-chunk transfers within a resumable session."""

import logging

from drive_uploader.client.session import RESUME_INCOMPLETE
from drive_uploader.exceptions import ChunkUploadError, parse_error_envelope
from drive_uploader.models import ChunkResult
from drive_uploader.transport import send_request

logger = logging.getLogger(__name__)


def read_chunk(file_name: str, start_offset: int, chunk_size: int) -> bytes:
    """Read exactly ``chunk_size`` bytes at ``start_offset``.

    Raises:
        OSError: If the file cannot be read or ends before the chunk does
    """
    with open(file_name, "rb") as f:
        f.seek(start_offset)
        data = f.read(chunk_size)

    if len(data) != chunk_size:
        raise OSError(
            f"Read {len(data)} bytes, expected {chunk_size} at offset {start_offset} "
            f"of {file_name}"
        )
    return data


class ChunkTransfer:
    """Sends one byte range of the source file as a single PUT."""

    def send_chunk(
        self,
        token: str,
        session_url: str,
        start_offset: int,
        chunk_size: int,
        file_name: str,
        file_size: int,
    ) -> ChunkResult:
        """Upload bytes ``[start_offset, start_offset + chunk_size)``.

        Args:
            token: Bearer token
            session_url: Session URL from SessionManager
            start_offset: First byte of the chunk
            chunk_size: Number of bytes in the chunk
            file_name: Source file path
            file_size: Total size of the object

        Returns:
            ChunkResult.completed(file_size) if the server stored the whole
            object, ChunkResult.proceed(next offset) if it wants more

        Raises:
            OSError: If the chunk cannot be read in full
            ChunkUploadError: If the server rejects the chunk
            ProtocolError: If the rejection carries no parseable error body
        """
        data = read_chunk(file_name, start_offset, chunk_size)
        end_offset = start_offset + chunk_size

        response = send_request(
            "PUT",
            session_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/octet-stream",
                "Content-Length": str(chunk_size),
                "Content-Range": f"bytes {start_offset}-{end_offset - 1}/{file_size}",
            },
            body=data,
        )

        if response.status < RESUME_INCOMPLETE:
            logger.info("Upload appears to have completed")
            return ChunkResult.completed(file_size)

        if response.status > RESUME_INCOMPLETE:
            envelope = parse_error_envelope(response.body, response.status)
            raise ChunkUploadError(
                f"Upload session has aborted with code {response.status} and message "
                f"{envelope.message}, but should be resumable",
                status_code=response.status,
                response_content=response.body,
            )

        return ChunkResult.proceed(end_offset)
