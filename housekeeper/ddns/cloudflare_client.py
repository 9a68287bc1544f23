"""Minimal Cloudflare DNS records client."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp

from housekeeper import logger
from housekeeper.__version__ import __version__
from housekeeper.ddns.public_ip import IPIFY_URL, get_public_ip
from housekeeper.ddns.resilience import (
    RETRYABLE_HTTP_STATUSES,
    CloudflareAPIError,
    cloudflare_result,
    run_with_retries,
)

CLOUDFLARE_API_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_USER_AGENT = f"Housekeeper/{__version__}"
DEFAULT_TTL = 120


@dataclass(frozen=True)
class DNSRecord:
    id: str
    name: str
    type: str
    content: str
    ttl: int = 1
    proxied: bool = False

    @classmethod
    def from_api(cls, result: Dict[str, Any]) -> "DNSRecord":
        return cls(
            id=str(result.get("id") or ""),
            name=str(result.get("name") or ""),
            type=str(result.get("type") or ""),
            content=str(result.get("content") or ""),
            ttl=int(result.get("ttl") or 1),
            proxied=bool(result.get("proxied", False)),
        )


class CloudflareDNSClient:
    """Read and update a single DNS record through the Cloudflare v4 API."""

    def __init__(
        self,
        api_token: str,
        timeout: int = 10,
        max_attempts: int = 3,
        base_url: str = CLOUDFLARE_API_URL,
    ):
        if not api_token:
            raise ValueError("Cloudflare API token is required.")

        self.api_token = api_token
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.base_url = base_url.rstrip("/")
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    async def get_record(self, zone_id: str, record_id: str) -> DNSRecord:
        result = await self._request("GET", self._record_path(zone_id, record_id))
        return DNSRecord.from_api(result)

    async def update_record(
        self,
        zone_id: str,
        record_id: str,
        *,
        content: str,
        name: str,
        ttl: int = DEFAULT_TTL,
        proxied: bool = False,
        record_type: str = "A",
    ) -> DNSRecord:
        payload = {
            "type": record_type,
            "name": name,
            "content": content,
            "ttl": ttl,
            "proxied": proxied,
        }
        result = await self._request("PUT", self._record_path(zone_id, record_id), payload)
        return DNSRecord.from_api(result)

    async def public_ip(self, url: str = IPIFY_URL) -> str:
        session = await self._ensure_session()
        return await run_with_retries(
            lambda: get_public_ip(session, url),
            max_attempts=self.max_attempts,
            on_retry=self._log_retry("IP lookup"),
        )

    @staticmethod
    def _record_path(zone_id: str, record_id: str) -> str:
        return f"/zones/{zone_id}/dns_records/{record_id}"

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        log = logger.get_logger()
        log.api_request(method, url, payload)
        session = await self._ensure_session()
        request_start = time.time()

        async def _attempt() -> tuple[int, Any]:
            async with session.request(method, url, json=payload, headers=self._auth_headers()) as response:
                if response.status >= 400:
                    await self._raise_for_response(response, f"{method} {path}")
                return response.status, await response.json()

        try:
            status, data = await run_with_retries(
                _attempt,
                max_attempts=self.max_attempts,
                on_retry=self._log_retry("Cloudflare"),
            )
        except (asyncio.TimeoutError, aiohttp.ClientConnectionError):
            log.api_failed("Cloudflare", self.max_attempts)
            raise
        log.api_response(status, data, (time.time() - request_start) * 1000)
        return cloudflare_result(data, f"{method} {path}")

    @staticmethod
    async def _raise_for_response(response: aiohttp.ClientResponse, context: str) -> None:
        text = await response.text()
        if response.status not in RETRYABLE_HTTP_STATUSES:
            try:
                data = await response.json(content_type=None)
            except ValueError:
                data = None
            if isinstance(data, dict) and isinstance(data.get("errors"), list) and data["errors"]:
                raise CloudflareAPIError(f"{context} (HTTP {response.status})", data["errors"])
        raise aiohttp.ClientResponseError(
            request_info=response.request_info,
            history=response.history,
            status=response.status,
            message=text,
            headers=response.headers,
        )

    @staticmethod
    def _log_retry(service: str):
        def _on_retry(attempt: int, max_attempts: int, delay: int, _exc: Exception) -> None:
            logger.get_logger().api_retry(service, attempt, max_attempts, delay)

        return _on_retry

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_token}"}

    async def _ensure_session(self) -> aiohttp.ClientSession:
        session = self._session
        if session is not None and not session.closed:
            return session

        async with self._session_lock:
            session = self._session
            if session is None or session.closed:
                timeout = aiohttp.ClientTimeout(total=self.timeout)
                self._session = aiohttp.ClientSession(
                    headers={"User-Agent": DEFAULT_USER_AGENT},
                    timeout=timeout,
                )
            return self._session

    async def close(self) -> None:
        """Close any open connections."""
        async with self._session_lock:
            session = self._session
            self._session = None
        if session is not None and not session.closed:
            await session.close()

    async def __aenter__(self) -> "CloudflareDNSClient":
        return self

    async def __aexit__(self, *_args) -> None:
        await self.close()
