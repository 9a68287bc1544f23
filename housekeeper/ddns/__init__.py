"""Dynamic DNS updates for a single Cloudflare record."""

from .cloudflare_client import CloudflareDNSClient, DNSRecord
from .resilience import CloudflareAPIError
from .updater import DNSUpdateResult, UpdateDNSOptions, update_dns_record

__all__ = [
    "CloudflareAPIError",
    "CloudflareDNSClient",
    "DNSRecord",
    "DNSUpdateResult",
    "UpdateDNSOptions",
    "update_dns_record",
]
