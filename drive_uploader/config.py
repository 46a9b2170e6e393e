"""Runtime configuration for the uploader."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
DEFAULT_CHUNK_SIZE = 256 * 1024
DEFAULT_MIME_TYPE = "video/quicktime"

# Resumable endpoints accept chunks in multiples of this size (except the last).
CHUNK_GRANULARITY = 256 * 1024

_ENV_PREFIX = "DRIVE_UPLOAD_"


@dataclass
class UploadConfig:
    """Settings for one uploader instance.

    Attributes:
        upload_url: Session-creation endpoint (``?uploadType=resumable`` is appended)
        token_path: JSON file holding the ``access_token``
        state_path: File that persists the pending session URL
        chunk_size: Bytes per chunk
        default_mime_type: MIME type used when the caller gives none
    """

    upload_url: str = DEFAULT_UPLOAD_URL
    token_path: str = "token.json"
    state_path: str = "uploadLocation.json"
    chunk_size: int = DEFAULT_CHUNK_SIZE
    default_mime_type: str = DEFAULT_MIME_TYPE

    def __post_init__(self):
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1 byte, got {self.chunk_size}")
        if self.chunk_size % CHUNK_GRANULARITY:
            logger.warning(
                f"Chunk size {self.chunk_size} is not a multiple of {CHUNK_GRANULARITY}; "
                "the server may reject intermediate chunks"
            )

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "UploadConfig":
        """Build a config from ``DRIVE_UPLOAD_*`` environment variables.

        A ``.env`` file is loaded first; variables already set in the
        environment take precedence over it.

        Args:
            env_file: Explicit .env path (default: search from the working directory)

        Raises:
            ValueError: If DRIVE_UPLOAD_CHUNK_SIZE is not a positive integer
        """
        load_dotenv(env_file or os.path.join(os.getcwd(), ".env"))

        chunk_size_raw = os.getenv(f"{_ENV_PREFIX}CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE))
        try:
            chunk_size = int(chunk_size_raw)
        except ValueError as e:
            raise ValueError(
                f"{_ENV_PREFIX}CHUNK_SIZE must be an integer, got {chunk_size_raw!r}"
            ) from e

        return cls(
            upload_url=os.getenv(f"{_ENV_PREFIX}URL", DEFAULT_UPLOAD_URL),
            token_path=os.getenv(f"{_ENV_PREFIX}TOKEN_PATH", "token.json"),
            state_path=os.getenv(f"{_ENV_PREFIX}STATE_PATH", "uploadLocation.json"),
            chunk_size=chunk_size,
            default_mime_type=os.getenv(f"{_ENV_PREFIX}MIME_TYPE", DEFAULT_MIME_TYPE),
        )
