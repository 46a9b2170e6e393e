"""
Bearer token providers.

Obtaining and refreshing the token is somebody else's job; these classes only
hand over a token string that is already valid.
"""

import json
from abc import ABC, abstractmethod

from drive_uploader.exceptions import CredentialLoadError


class TokenProvider(ABC):
    """Abstract source of a bearer token."""

    @abstractmethod
    def get_token(self) -> str:
        """
        Return the bearer token to send in the Authorization header.

        Raises:
            CredentialLoadError: If no usable token is available
        """
        pass


class StaticTokenProvider(TokenProvider):
    """Provider for a token known up front."""

    def __init__(self, token: str):
        if not token:
            raise CredentialLoadError("Access token must not be empty")
        self.token = token

    def get_token(self) -> str:
        return self.token


class FileTokenProvider(TokenProvider):
    """
    Token stored in a JSON file with an ``access_token`` field.

    The file is read on every call to get_token; the uploader calls it once
    per run.
    """

    def __init__(self, token_path: str = "token.json"):
        self.token_path = token_path

    def get_token(self) -> str:
        try:
            with open(self.token_path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CredentialLoadError(f"Credential file not found: {self.token_path}") from e
        except (OSError, ValueError) as e:
            raise CredentialLoadError(
                f"Credential file {self.token_path} is not readable JSON: {e}"
            ) from e

        token = data.get("access_token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise CredentialLoadError(
                f"Credential file {self.token_path} has no access_token string"
            )
        return token
