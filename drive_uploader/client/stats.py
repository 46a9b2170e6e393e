"""Upload statistics tracking."""

import time
from dataclasses import dataclass


@dataclass
class UploadStats:
    """Statistics for one upload run.

    Attributes:
        total_bytes: Size of the source file
        uploaded_bytes: Bytes the server has acknowledged so far
        resumed_from: Offset the run started at (0 for a fresh session)
        chunks_sent: Number of chunk requests accepted during this run
        completed: Whether the server confirmed the whole object
        start_time: Timestamp when the run started
    """

    total_bytes: int
    uploaded_bytes: int = 0
    resumed_from: int = 0
    chunks_sent: int = 0
    completed: bool = False
    start_time: float = 0.0

    def __post_init__(self):
        if self.start_time == 0.0:
            self.start_time = time.time()

    @property
    def elapsed_time(self) -> float:
        """Get elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def bytes_this_run(self) -> int:
        return self.uploaded_bytes - self.resumed_from

    @property
    def upload_speed(self) -> float:
        """Get upload speed of this run in bytes/second."""
        if self.elapsed_time > 0:
            return self.bytes_this_run / self.elapsed_time
        return 0.0

    @property
    def progress_percent(self) -> float:
        """Get progress as percentage (0-100)."""
        if self.total_bytes > 0:
            return (self.uploaded_bytes / self.total_bytes) * 100
        return 100.0 if self.completed else 0.0
