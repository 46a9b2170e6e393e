"""Drive Uploader

Uploads one large file per run to a resumable-upload HTTP endpoint in
sequential chunks, persisting the session so an interrupted run can resume.
"""

__version__ = "0.1.0"

from drive_uploader.client import ChunkTransfer, ResumableUploader, SessionManager, UploadStats
from drive_uploader.config import UploadConfig
from drive_uploader.credentials import FileTokenProvider, StaticTokenProvider, TokenProvider
from drive_uploader.exceptions import (
    AlreadyCompleteError,
    ChunkUploadError,
    CredentialLoadError,
    ProtocolError,
    SessionCreationError,
    SessionExpiredError,
    TransportError,
    UploadError,
)
from drive_uploader.models import ChunkResult, TransferPlan
from drive_uploader.session_store import FileSessionStore, SessionStore

__all__ = [
    "ResumableUploader",
    "SessionManager",
    "ChunkTransfer",
    "UploadStats",
    "UploadConfig",
    "TokenProvider",
    "FileTokenProvider",
    "StaticTokenProvider",
    "SessionStore",
    "FileSessionStore",
    "TransferPlan",
    "ChunkResult",
    "UploadError",
    "CredentialLoadError",
    "SessionCreationError",
    "ProtocolError",
    "AlreadyCompleteError",
    "SessionExpiredError",
    "ChunkUploadError",
    "TransportError",
]
