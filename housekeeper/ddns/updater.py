"""Point a Cloudflare A record at the current public IP."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Literal, Optional, Protocol

from housekeeper import logger
from housekeeper.ddns.cloudflare_client import DEFAULT_TTL, DNSRecord

UpdateStatus = Literal["unchanged", "would-update", "updated"]


class DNSRecordClient(Protocol):
    async def get_record(self, zone_id: str, record_id: str) -> DNSRecord: ...

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
    ) -> DNSRecord: ...


@dataclass(frozen=True)
class UpdateDNSOptions:
    zone_id: str
    record_id: str
    domain: Optional[str] = None
    debug: bool = False
    ttl: int = DEFAULT_TTL
    proxied: bool = False


@dataclass(frozen=True)
class DNSUpdateResult:
    status: UpdateStatus
    public_ip: str
    previous_ip: str
    record_name: str


async def update_dns_record(
    client: DNSRecordClient,
    options: UpdateDNSOptions,
    ip_lookup: Callable[[], Awaitable[str]],
) -> DNSUpdateResult:
    """
    Update the record only when the public IP differs from its content.

    In debug mode the comparison is reported but nothing is written.
    """
    log = logger.get_logger()
    current_ip = await ip_lookup()
    log.info(f"Current public IP: {current_ip}")

    record = await client.get_record(options.zone_id, options.record_id)
    log.info(f"Cloudflare DNS record IP: {record.content} ({record.name})")

    if current_ip == record.content:
        if options.debug:
            log.debug("Debug mode: current IP matches DNS record")
        log.info("IP unchanged; nothing to do.")
        return DNSUpdateResult("unchanged", current_ip, record.content, record.name)

    log.info(f"IP has changed from {record.content} to {current_ip}")
    if options.debug:
        log.info("Debug mode: DNS record left untouched.")
        return DNSUpdateResult("would-update", current_ip, record.content, record.name)

    name = options.domain or record.name
    updated = await client.update_record(
        options.zone_id,
        options.record_id,
        content=current_ip,
        name=name,
        ttl=options.ttl,
        proxied=options.proxied,
    )
    log.info(f"DNS record {updated.name or name} updated to {updated.content or current_ip}")
    return DNSUpdateResult("updated", current_ip, record.content, updated.name or name)
