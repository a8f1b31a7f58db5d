"""
Client for the upstream provisioning API.

Each line item of a paid order is submitted as one ``action=add`` request.
The provider has no retry-safe semantics of its own, so every call is made
exactly once and any failure is surfaced as UpstreamFulfillmentException.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientTimeout

from app.core.config import get_settings
from app.core.logging_config import log_api_call
from app.utils.error_handler import ErrorCode, UpstreamFulfillmentException

logger = logging.getLogger(__name__)


class ProviderFulfillmentClient:
    """
    Async client submitting fulfillment requests to the provisioning API.

    The session must be opened with initialize() (or ``async with``) before
    calling submit(); the application lifespan owns that lifecycle.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        request_timeout: Optional[float] = None,
        connect_timeout: Optional[float] = None,
    ):
        """
        Initialize the client.

        Args:
            api_url: Provider endpoint (defaults to PROVIDER_API_URL)
            api_key: Shared API key (defaults to PROVIDER_API_KEY)
            request_timeout: Per-call deadline in seconds
            connect_timeout: Connection deadline in seconds
        """
        settings = get_settings()
        self.api_url = api_url or settings.PROVIDER_API_URL
        self.api_key = api_key or settings.PROVIDER_API_KEY
        self.request_timeout = request_timeout or settings.PROVIDER_REQUEST_TIMEOUT_SECONDS
        self.connect_timeout = connect_timeout or settings.PROVIDER_CONNECT_TIMEOUT_SECONDS
        self.user_agent = f"{settings.APP_NAME}/{settings.APP_VERSION}"

        self.session: Optional[aiohttp.ClientSession] = None

    async def initialize(self):
        """Open the HTTP session."""
        if self.session:
            return

        timeout = ClientTimeout(total=self.request_timeout, connect=self.connect_timeout)
        self.session = aiohttp.ClientSession(
            timeout=timeout,
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
        )
        logger.info(f"Provider client initialized for {self.api_url} (timeout {self.request_timeout}s)")

    async def close(self):
        """Close the HTTP session and clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None
            logger.info("Provider client closed")

    async def __aenter__(self) -> "ProviderFulfillmentClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def submit(
        self,
        provider_service_id: str,
        link: str,
        scaled_quantity: int,
        idempotency_key: Optional[str] = None,
    ) -> str:
        """
        Submit one line item to the provider.

        Args:
            provider_service_id: Upstream catalog entry
            link: Target resource for the service
            scaled_quantity: Quantity in provider units
            idempotency_key: Per-item key sent as the Idempotency-Key header

        Returns:
            str: Provider-assigned order id

        Raises:
            UpstreamFulfillmentException: On non-200 status, network error,
                timeout or malformed response body
        """
        if not self.session:
            raise UpstreamFulfillmentException(
                "Provider client not initialized. Call initialize() first.",
                provider_service_id=provider_service_id,
            )

        form_data = {
            "key": self.api_key,
            "action": "add",
            "service": str(provider_service_id),
            "link": link,
            "quantity": str(scaled_quantity),
        }
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else None

        start_time = time.monotonic()
        try:
            async with self.session.post(self.api_url, data=form_data, headers=headers) as response:
                status = response.status
                body = await response.text()

        except TimeoutError as e:
            logger.error(f"Provider request for service {provider_service_id} timed out after {self.request_timeout}s")
            raise UpstreamFulfillmentException(
                f"Provider request timed out after {self.request_timeout}s",
                provider_service_id=provider_service_id,
                timed_out=True,
            ) from e

        except aiohttp.ClientError as e:
            logger.error(f"Network error submitting service {provider_service_id}: {e}")
            raise UpstreamFulfillmentException(
                f"Network error: {str(e)}",
                provider_service_id=provider_service_id,
            ) from e

        log_api_call("POST", self.api_url, status, time.monotonic() - start_time, provider_service_id=provider_service_id)

        if status != 200:
            raise UpstreamFulfillmentException(
                f"HTTP error! status: {status}",
                api_response_code=status,
                provider_service_id=provider_service_id,
            )

        return self._extract_order_id(body, provider_service_id)

    def _extract_order_id(self, body: str, provider_service_id: str) -> str:
        """
        Extract the provider order id from a 200 response body.

        Raises:
            UpstreamFulfillmentException: If the body is not a JSON object
                with an ``order`` field
        """
        try:
            data: Any = json.loads(body)
        except ValueError as e:
            raise UpstreamFulfillmentException(
                "Provider returned a non-JSON body",
                api_response_code=200,
                provider_service_id=provider_service_id,
                error_code=ErrorCode.PROVIDER_INVALID_RESPONSE,
            ) from e

        if not isinstance(data, dict):
            raise UpstreamFulfillmentException(
                "Provider returned an unexpected body",
                api_response_code=200,
                provider_service_id=provider_service_id,
                error_code=ErrorCode.PROVIDER_INVALID_RESPONSE,
            )

        if data.get("error"):
            raise UpstreamFulfillmentException(
                f"Provider rejected order: {data['error']}",
                api_response_code=200,
                provider_service_id=provider_service_id,
            )

        order_id = data.get("order")
        if order_id is None or order_id == "":
            raise UpstreamFulfillmentException(
                "Provider response has no order id",
                api_response_code=200,
                provider_service_id=provider_service_id,
                error_code=ErrorCode.PROVIDER_INVALID_RESPONSE,
            )

        return str(order_id)

    def get_info(self) -> Dict[str, Any]:
        """Client info for health checks (never includes the key)."""
        return {
            "api_url": self.api_url,
            "initialized": self.session is not None,
            "request_timeout_seconds": self.request_timeout,
        }
