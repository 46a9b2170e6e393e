"""
Persistence of the pending upload session.

The presence of a stored session URL means "resume in progress"; its absence
means the next run starts a fresh session. Only one session is kept at a
time.
"""

import os
from abc import ABC, abstractmethod
from typing import Optional


class SessionStore(ABC):
    """Abstract interface for session URL storage."""

    @abstractmethod
    def load(self) -> Optional[str]:
        """
        Retrieve the pending session URL.

        Returns:
            Session URL if one is stored, None otherwise
        """
        pass

    @abstractmethod
    def save(self, session_url: str) -> None:
        """
        Store the session URL, replacing any previous one.

        Args:
            session_url: Resumable session URL returned by the server
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored session URL, if any."""
        pass


class FileSessionStore(SessionStore):
    """
    Session URL kept as the sole content of a text file.

    The file holds the URL verbatim on a single line and is deleted once the
    upload is confirmed complete.
    """

    def __init__(self, state_path: str = "uploadLocation.json"):
        """
        Initialize file-based session storage.

        Args:
            state_path: Path of the state file
        """
        self.state_path = state_path

    def load(self) -> Optional[str]:
        try:
            with open(self.state_path, encoding="utf-8") as f:
                session_url = f.read().strip()
        except FileNotFoundError:
            return None
        return session_url or None

    def save(self, session_url: str) -> None:
        with open(self.state_path, "w", encoding="utf-8") as f:
            f.write(session_url)

    def clear(self) -> None:
        if os.path.exists(self.state_path):
            os.remove(self.state_path)

    def exists(self) -> bool:
        """Check whether a state file is present."""
        return os.path.exists(self.state_path)
