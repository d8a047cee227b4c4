"""JWT authentication provider implementation.

The hosting environment issues HS256 tokens whose ``sub`` claim is the
caller's account address:
    {
        "sub": "0x52908400098527886E0F7030069857D2E4169EE7",
        "role": "authenticated",
        "exp": 1234567890
    }
The address is trusted as-is; the registry does not verify wallet ownership.
"""

from datetime import UTC, datetime, timedelta
from typing import Optional

import structlog
from jose import JWTError, jwt

from core.config import settings
from domain.entities.profile import MAX_IDENTITY_LENGTH
from infrastructure.auth.provider import TokenCaller

logger = structlog.get_logger()


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenCaller]:
        """
        Validate a JWT token and extract the caller identity.

        Args:
            token: The JWT to validate

        Returns:
            TokenCaller if valid, None if invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except JWTError as e:
            logger.debug("token_rejected", reason=str(e))
            return None

        identity = payload.get("sub")
        if not identity:
            return None
        if len(identity) > MAX_IDENTITY_LENGTH:
            logger.debug("token_rejected", reason="subject too long")
            return None

        return TokenCaller(identity=identity, role=payload.get("role"))

    def create_token(self, caller: TokenCaller) -> str:
        """
        Create a JWT token for a caller (used for tests and local tooling).

        Args:
            caller: The caller to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.now(UTC) + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": caller.identity,
            "role": caller.role or "authenticated",
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
