"""Public IP lookup."""

from __future__ import annotations

import ipaddress

import aiohttp

IPIFY_URL = "https://api.ipify.org"


async def get_public_ip(session: aiohttp.ClientSession, url: str = IPIFY_URL) -> str:
    async with session.get(url) as response:
        response.raise_for_status()
        text = (await response.text()).strip()
    try:
        return str(ipaddress.ip_address(text))
    except ValueError as exc:
        raise ValueError(f"IP lookup at {url} returned an invalid address: {text[:60]!r}") from exc
