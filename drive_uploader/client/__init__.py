"""Resumable upload protocol components."""

from drive_uploader.client.orchestrator import ResumableUploader
from drive_uploader.client.session import SessionManager
from drive_uploader.client.stats import UploadStats
from drive_uploader.client.transfer import ChunkTransfer

__all__ = ["ChunkTransfer", "ResumableUploader", "SessionManager", "UploadStats"]
