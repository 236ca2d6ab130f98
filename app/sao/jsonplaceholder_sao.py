from __future__ import annotations

import httpx
import structlog
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.core.exceptions import ThirdPartyError


class JsonPlaceholderSAO:
    """Service Access Object for the JSONPlaceholder REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        connect_timeout: Optional[float] = None,
        request_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = (base_url or settings.thirdparty_base_url).rstrip("/")
        self._timeout = httpx.Timeout(
            request_timeout if request_timeout is not None else settings.thirdparty_request_timeout,
            connect=connect_timeout if connect_timeout is not None else settings.thirdparty_connect_timeout,
        )
        self._transport = transport
        self._logger = structlog.get_logger().bind(component="JsonPlaceholderSAO")

    @property
    def base_url(self) -> str:
        return self._base_url

    async def get_users(self) -> List[Dict[str, Any]]:
        """Fetch the user list, returned exactly as the API sends it."""
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            response = await client.get("/users", headers={"Accept": "application/json"})

        if not response.is_success:
            self._logger.error(
                "Failed to fetch users",
                status_code=response.status_code,
                response_body=response.text[:200],
            )
            raise ThirdPartyError(f"Failed to fetch users. Status: {response.status_code}")

        try:
            users = response.json()
        except ValueError as exc:
            self._logger.error("Failed to parse users response", error=str(exc))
            raise ThirdPartyError("Failed to parse users response") from exc

        if not isinstance(users, list):
            self._logger.error("Unexpected users payload", payload_type=type(users).__name__)
            raise ThirdPartyError("Failed to parse users response")

        return users


jsonplaceholder_sao = JsonPlaceholderSAO()
