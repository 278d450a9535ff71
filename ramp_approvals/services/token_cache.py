"""
OAuth 2.0 client-credentials token handling for the Ramp API.

The cache is owned by a RampContext (see ramp_client.py), not by the module,
so each application or test gets its own token lifetime.
"""

import time
from dataclasses import dataclass
from typing import Callable

import httpx
from loguru import logger

from ..core.exceptions import AuthenticationError

# Tokens are treated as expired this many seconds before Ramp says they are
EXPIRY_MARGIN_SECONDS = 300


@dataclass(frozen=True)
class Token:
    access_token: str
    expires_at: float  # unix seconds

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TokenCache:
    """
    Holds one bearer token and refreshes it when absent or expired.

    Concurrent callers that both see an expired token will both
    re-authenticate; the last response wins.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_url: str,
        scope: str,
        clock: Callable[[], float] = time.time,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self.token_url = token_url
        self.scope = scope
        self._clock = clock
        self._token: Token | None = None

    @property
    def cached(self) -> Token | None:
        return self._token

    def invalidate(self) -> None:
        self._token = None

    async def get_token(self, http: httpx.AsyncClient) -> Token:
        """
        Return the cached token, or exchange client credentials for a new one.

        Args:
            http: client used for the token exchange

        Returns:
            A token valid at the time of the call

        Raises:
            AuthenticationError: if Ramp rejects the exchange or is unreachable
        """
        if self._token is not None and self._token.is_valid(self._clock()):
            return self._token

        issued_at = self._clock()
        try:
            response = await http.post(
                self.token_url,
                auth=httpx.BasicAuth(self._client_id, self._client_secret),
                data={"grant_type": "client_credentials", "scope": self.scope},
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Ramp token request failed: {e}")
            raise AuthenticationError(f"Failed to authenticate with Ramp API: {e}") from e

        if not response.is_success:
            logger.error("Ramp authentication rejected", status_code=response.status_code)
            raise AuthenticationError(
                f"Authentication failed: {response.status_code}",
                status_code=response.status_code,
            )

        payload = response.json()
        expires_in = float(payload.get("expires_in", 0))
        self._token = Token(
            access_token=payload["access_token"],
            expires_at=issued_at + (expires_in - EXPIRY_MARGIN_SECONDS),
        )
        logger.info("Obtained Ramp access token", expires_in=expires_in, scope=self.scope)
        return self._token
