from __future__ import annotations

import pytest

from housekeeper import logger
from housekeeper.ddns.cloudflare_client import DNSRecord
from housekeeper.ddns.updater import UpdateDNSOptions, update_dns_record

_CURRENT = DNSRecord(id="rec-1", name="home.example.com", type="A", content="198.51.100.7", ttl=120)


class _FakeClient:
    def __init__(self, record: DNSRecord) -> None:
        self.record = record
        self.updates: list[dict] = []

    async def get_record(self, zone_id: str, record_id: str) -> DNSRecord:
        assert (zone_id, record_id) == ("zone-1", "rec-1")
        return self.record

    async def update_record(self, zone_id: str, record_id: str, **kwargs) -> DNSRecord:
        self.updates.append({"zone_id": zone_id, "record_id": record_id, **kwargs})
        return DNSRecord(
            id=record_id,
            name=kwargs["name"],
            type=kwargs.get("record_type", "A"),
            content=kwargs["content"],
            ttl=kwargs["ttl"],
        )


class _FakeLog:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def info(self, msg: str) -> None:
        self.lines.append(msg)

    def debug(self, msg: str) -> None:
        self.lines.append(msg)


@pytest.fixture
def fake_log(monkeypatch: pytest.MonkeyPatch) -> _FakeLog:
    log = _FakeLog()
    monkeypatch.setattr(logger, "get_logger", lambda: log)
    return log


def _ip(value: str):
    async def _lookup() -> str:
        return value

    return _lookup


@pytest.mark.asyncio
async def test_matching_ip_is_left_alone(fake_log: _FakeLog) -> None:
    client = _FakeClient(_CURRENT)

    result = await update_dns_record(client, UpdateDNSOptions("zone-1", "rec-1"), _ip("198.51.100.7"))

    assert result.status == "unchanged"
    assert client.updates == []
    assert "Current public IP: 198.51.100.7" in fake_log.lines


@pytest.mark.asyncio
async def test_changed_ip_updates_record_keeping_its_name(fake_log: _FakeLog) -> None:
    client = _FakeClient(_CURRENT)

    result = await update_dns_record(client, UpdateDNSOptions("zone-1", "rec-1"), _ip("203.0.113.9"))

    assert result.status == "updated"
    assert result.previous_ip == "198.51.100.7"
    assert result.record_name == "home.example.com"
    assert client.updates == [
        {
            "zone_id": "zone-1",
            "record_id": "rec-1",
            "content": "203.0.113.9",
            "name": "home.example.com",
            "ttl": 120,
            "proxied": False,
        }
    ]


@pytest.mark.asyncio
async def test_domain_option_renames_record(fake_log: _FakeLog) -> None:
    client = _FakeClient(_CURRENT)
    options = UpdateDNSOptions("zone-1", "rec-1", domain="vpn.example.com", ttl=300)

    result = await update_dns_record(client, options, _ip("203.0.113.9"))

    assert client.updates[0]["name"] == "vpn.example.com"
    assert client.updates[0]["ttl"] == 300
    assert result.record_name == "vpn.example.com"


@pytest.mark.asyncio
async def test_debug_mode_reports_without_updating(fake_log: _FakeLog) -> None:
    client = _FakeClient(_CURRENT)

    result = await update_dns_record(client, UpdateDNSOptions("zone-1", "rec-1", debug=True), _ip("203.0.113.9"))

    assert result.status == "would-update"
    assert client.updates == []
    assert any("changed from 198.51.100.7 to 203.0.113.9" in line for line in fake_log.lines)
