"""Value types shared by the upload components."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TransferPlan:
    """How a file of ``file_size`` bytes splits into chunks.

    Attributes:
        file_size: Total number of bytes in the source file
        chunk_size: Size of every full chunk
        full_chunk_count: Number of chunks of exactly ``chunk_size`` bytes
        remainder_size: Size of the final partial chunk (0 if none)
    """

    file_size: int
    chunk_size: int
    full_chunk_count: int
    remainder_size: int

    @classmethod
    def for_file(cls, file_size: int, chunk_size: int) -> "TransferPlan":
        if file_size < 0:
            raise ValueError(f"file_size must not be negative, got {file_size}")
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1 byte, got {chunk_size}")
        full_chunk_count, remainder_size = divmod(file_size, chunk_size)
        return cls(file_size, chunk_size, full_chunk_count, remainder_size)

    @property
    def final_chunk_offset(self) -> int:
        """Offset where the final partial chunk starts (``file_size`` if none)."""
        return self.full_chunk_count * self.chunk_size

    @property
    def total_chunks(self) -> int:
        return self.full_chunk_count + (1 if self.remainder_size else 0)


@dataclass(frozen=True)
class ChunkResult:
    """Outcome of sending one chunk.

    ``complete`` is True when the server reports the whole object stored; in
    that case ``offset`` is the total number of bytes. Otherwise ``offset`` is
    the next byte to send.
    """

    offset: int
    complete: bool = False

    @classmethod
    def proceed(cls, next_offset: int) -> "ChunkResult":
        return cls(offset=next_offset, complete=False)

    @classmethod
    def completed(cls, total_bytes: int) -> "ChunkResult":
        return cls(offset=total_bytes, complete=True)
