"""
Read-only Ramp Developer API client.

RampConfig is the credential/environment slice of settings; RampContext pairs
it with the token cache that outlives a single request. RampClient binds a
context to one httpx.AsyncClient for the duration of a request.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel

from ..core.exceptions import ApiRequestError, ConfigurationError
from .token_cache import TokenCache

BASE_URLS = {
    "sandbox": "https://demo-api.ramp.com/developer/v1",
    "production": "https://api.ramp.com/developer/v1",
}


@dataclass(frozen=True)
class RampConfig:
    client_id: str | None
    client_secret: str | None
    environment: str = "sandbox"
    scope: str = "transactions:read reimbursements:read"
    timeout_seconds: float = 30.0

    @classmethod
    def from_settings(cls, settings) -> "RampConfig":
        return cls(
            client_id=settings.ramp_client_id,
            client_secret=settings.ramp_client_secret,
            environment=settings.ramp_environment,
            scope=settings.ramp_scope,
            timeout_seconds=settings.ramp_http_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    @property
    def base_url(self) -> str:
        # Anything other than "production" talks to the sandbox
        return BASE_URLS["production"] if self.environment == "production" else BASE_URLS["sandbox"]

    def require_credentials(self) -> None:
        if not self.is_configured:
            raise ConfigurationError(
                "Ramp API credentials not configured",
                details={
                    "RAMP_CLIENT_ID": "set" if self.client_id else "not set",
                    "RAMP_CLIENT_SECRET": "set" if self.client_secret else "not set",
                },
            )


@dataclass
class RampContext:
    """Per-application state: config plus the token cache built from it"""
    config: RampConfig
    token_cache: TokenCache = field(init=False)

    def __post_init__(self):
        self.token_cache = TokenCache(
            client_id=self.config.client_id or "",
            client_secret=self.config.client_secret or "",
            token_url=f"{self.config.base_url}/token",
            scope=self.config.scope,
        )


class CollectionFilters(BaseModel):
    """Query filters accepted by the Ramp list endpoints"""
    min_amount: float | None = None  # dollars, sent as cents
    start_date: str | None = None
    end_date: str | None = None
    department_id: str | None = None
    status: str | None = None
    limit: int | None = None

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.min_amount:
            params["min_amount"] = str(round(self.min_amount * 100))
        if self.department_id:
            params["department_id"] = self.department_id
        if self.start_date:
            params["start"] = self.start_date
        if self.end_date:
            params["end"] = self.end_date
        if self.status:
            params["status"] = self.status
        if self.limit is not None:
            params["limit"] = str(self.limit)
        return params


class RampClient:
    def __init__(self, context: RampContext, http: httpx.AsyncClient):
        self.context = context
        self.http = http

    @property
    def base_url(self) -> str:
        return self.context.config.base_url

    async def fetch_collection(self, name: str, filters: CollectionFilters | None = None) -> dict[str, Any]:
        """
        GET one Ramp list endpoint.

        Args:
            name: collection path segment (transactions, reimbursements, users, departments)
            filters: optional query filters

        Returns:
            Parsed JSON page; list endpoints put records under "data"

        Raises:
            ConfigurationError: if credentials are missing
            AuthenticationError: if the token exchange fails
            ApiRequestError: on a non-2xx response
        """
        self.context.config.require_credentials()
        token = await self.context.token_cache.get_token(self.http)
        params = (filters or CollectionFilters()).to_params()

        response = await self.http.get(
            f"{self.base_url}/{name}",
            params=params,
            headers={
                "Authorization": f"Bearer {token.access_token}",
                "Accept": "application/json",
            },
        )

        if not response.is_success:
            logger.error("Ramp API request failed", collection=name, status_code=response.status_code)
            raise ApiRequestError(
                f"API request failed: {response.status_code}",
                status_code=response.status_code,
                collection=name,
            )

        page = response.json()
        logger.debug(
            "Fetched Ramp collection",
            collection=name,
            params=params,
            records=len(page.get("data") or []) if isinstance(page, dict) else None,
        )
        return page

    async def get_transactions(self, filters: CollectionFilters | None = None) -> dict[str, Any]:
        return await self.fetch_collection("transactions", filters)

    async def get_reimbursements(self, filters: CollectionFilters | None = None) -> dict[str, Any]:
        return await self.fetch_collection("reimbursements", filters)

    async def get_users(self) -> dict[str, Any]:
        return await self.fetch_collection("users")

    async def get_departments(self) -> dict[str, Any]:
        return await self.fetch_collection("departments")
