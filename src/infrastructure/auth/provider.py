"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class TokenCaller:
    """The calling identity extracted from an auth token."""

    identity: str
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenCaller]:
        """
        Validate an authentication token.

        Args:
            token: The bearer token to validate

        Returns:
            TokenCaller if valid, None if invalid
        """
        ...

    def create_token(self, caller: TokenCaller) -> str:
        """
        Create an authentication token for a caller.

        Args:
            caller: The caller to create a token for

        Returns:
            The generated token string
        """
        ...
