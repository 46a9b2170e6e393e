"""Drives a whole upload from session decision to cleanup."""

import logging
import os
from typing import Callable, Optional

from drive_uploader.client.session import SessionManager
from drive_uploader.client.stats import UploadStats
from drive_uploader.client.transfer import ChunkTransfer
from drive_uploader.config import UploadConfig
from drive_uploader.credentials import FileTokenProvider, TokenProvider
from drive_uploader.exceptions import AlreadyCompleteError, ProtocolError
from drive_uploader.models import ChunkResult, TransferPlan
from drive_uploader.session_store import FileSessionStore, SessionStore

logger = logging.getLogger(__name__)


class ResumableUploader:
    """Uploads one file through a resumable session, resuming across runs.

    The pending session URL is persisted before the first chunk is sent and
    removed only once the server confirms the whole object. A run that dies
    in between leaves the URL behind, and the next run asks the server where
    to continue.

    Chunks are sent strictly one after another; the protocol requires each
    chunk to start where the server's acknowledged range ends.

    Example:
        >>> uploader = ResumableUploader(UploadConfig(chunk_size=4 * 1024 * 1024))
        >>> stats = uploader.upload("holiday.mov")
        >>> print(f"{stats.uploaded_bytes} bytes in {stats.elapsed_time:.1f}s")
    """

    def __init__(
        self,
        config: Optional[UploadConfig] = None,
        token_provider: Optional[TokenProvider] = None,
        session_store: Optional[SessionStore] = None,
        session_manager: Optional[SessionManager] = None,
        chunk_transfer: Optional[ChunkTransfer] = None,
    ):
        """Initialize the uploader.

        Args:
            config: Upload settings (default: UploadConfig())
            token_provider: Bearer token source (default: reads config.token_path)
            session_store: Session persistence (default: file at config.state_path)
            session_manager: Session creation and queries (default: config.upload_url)
            chunk_transfer: Chunk sender
        """
        self.config = config or UploadConfig()
        self.token_provider = token_provider or FileTokenProvider(self.config.token_path)
        self.session_store = session_store or FileSessionStore(self.config.state_path)
        self.session_manager = session_manager or SessionManager(
            self.config.upload_url, state_path=self.config.state_path
        )
        self.chunk_transfer = chunk_transfer or ChunkTransfer()

    def upload(
        self,
        file_name: str,
        mime_type: Optional[str] = None,
        progress_callback: Optional[Callable[[UploadStats], None]] = None,
    ) -> UploadStats:
        """Upload ``file_name``, resuming a persisted session if there is one.

        Args:
            file_name: Path of the file to upload
            mime_type: Content type (default: config.default_mime_type)
            progress_callback: Called with UploadStats after every accepted chunk

        Returns:
            UploadStats of the run; ``completed`` is always True on return

        Raises:
            FileNotFoundError: If the file doesn't exist
            CredentialLoadError: If no token can be loaded
            SessionCreationError: If a new session is refused
            SessionExpiredError: If the persisted session is gone; the state
                file is kept for the operator to delete
            ChunkUploadError: If a chunk is rejected
            ProtocolError: If a response violates the protocol
            OSError: If the file cannot be read
        """
        if not os.path.exists(file_name):
            raise FileNotFoundError(f"File not found: {file_name}")

        file_size = os.path.getsize(file_name)
        token = self.token_provider.get_token()
        mime_type = mime_type or self.config.default_mime_type
        stats = UploadStats(total_bytes=file_size)

        session_url = self.session_store.load()
        if session_url is None:
            session_url = self.session_manager.begin_session(token, file_name, mime_type)
            self.session_store.save(session_url)
            cursor = 0
        else:
            try:
                cursor = self.session_manager.resume_session(token, session_url, file_size)
            except AlreadyCompleteError:
                logger.info("Remote object is already complete, nothing to upload")
                return self._finish(stats, file_size)

        stats.resumed_from = cursor
        stats.uploaded_bytes = cursor

        if file_size == 0:
            logger.info("Empty file, nothing to transfer")
            return self._finish(stats, file_size)

        plan = TransferPlan.for_file(file_size, self.config.chunk_size)
        self._log_plan(plan, cursor)

        result = self._transfer(
            token, session_url, file_name, plan, cursor, stats, progress_callback
        )

        if not result.complete or result.offset != file_size:
            raise ProtocolError(
                f"Sent all {file_size} bytes but the server did not confirm completion; "
                "re-run to query the session"
            )
        return self._finish(stats, file_size)

    def _transfer(
        self,
        token: str,
        session_url: str,
        file_name: str,
        plan: TransferPlan,
        cursor: int,
        stats: UploadStats,
        progress_callback: Optional[Callable[[UploadStats], None]],
    ) -> ChunkResult:
        """Send full chunks, then the final partial chunk, from ``cursor`` on."""
        result = ChunkResult.proceed(cursor)

        while cursor < plan.final_chunk_offset:
            size = min(plan.chunk_size, plan.file_size - cursor)
            result = self._send(token, session_url, file_name, plan, cursor, size)
            self._record(stats, result.offset, progress_callback)
            if result.complete:
                if cursor + size < plan.file_size:
                    logger.warning(f"Server reported completion early at byte {cursor + size}")
                return result
            cursor = result.offset

        if cursor < plan.file_size:
            size = plan.file_size - cursor
            result = self._send(token, session_url, file_name, plan, cursor, size)
            self._record(stats, result.offset, progress_callback)

        return result

    def _send(
        self,
        token: str,
        session_url: str,
        file_name: str,
        plan: TransferPlan,
        cursor: int,
        size: int,
    ) -> ChunkResult:
        percentage = cursor * 100 / plan.file_size
        logger.info(f"  Chunk: {cursor}\t({percentage:.1f}%)")
        return self.chunk_transfer.send_chunk(
            token, session_url, cursor, size, file_name, plan.file_size
        )

    def _record(
        self,
        stats: UploadStats,
        offset: int,
        progress_callback: Optional[Callable[[UploadStats], None]],
    ) -> None:
        stats.uploaded_bytes = offset
        stats.chunks_sent += 1
        if progress_callback:
            progress_callback(stats)

    def _finish(self, stats: UploadStats, file_size: int) -> UploadStats:
        """Mark the run complete and forget the session."""
        stats.uploaded_bytes = file_size
        stats.completed = True
        self.session_store.clear()
        logger.info(f"{file_size}b uploaded successfully, session state removed")
        return stats

    def _log_plan(self, plan: TransferPlan, cursor: int) -> None:
        logger.info(f"Will break the {plan.file_size}b file into {plan.total_chunks} chunks;")
        logger.info(f"{plan.full_chunk_count} chunk(s) of size {plan.chunk_size}b")
        logger.info(
            f"{1 if plan.remainder_size else 0} final chunk(s) of size {plan.remainder_size}b"
        )
        logger.info(f"Uploading from byte {cursor}")
