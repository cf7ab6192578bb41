"""Address resolution — turn an IP, hostname or URL into IP candidates.

The DNS capability is injected so tests can substitute a deterministic
stub. The default, `DnsPythonLookup`, queries A and CNAME records with
``dnspython``. AAAA is not queried: a host with only IPv6 records
resolves to nothing.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from dataclasses import dataclass
from typing import Protocol, Sequence
from urllib.parse import urlsplit

import dns.exception
import dns.resolver

from .config import DNS_RECORD_TYPES
from .defang import refang
from .models import ResolutionResult

logger = logging.getLogger(__name__)

_DNS_ERRORS = (OSError, dns.exception.DNSException)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(frozen=True)
class DnsRecord:
    """One DNS answer. Only address records carry ip/ipv6."""

    type: str
    ip: str | None = None
    ipv6: str | None = None
    target: str | None = None  # CNAME target


class DnsLookup(Protocol):
    def resolve_host(self, host: str, record_types: Sequence[str]) -> list[DnsRecord]:
        ...


class DnsPythonLookup:
    """DNS lookups through the system resolver configuration."""

    def resolve_host(self, host: str, record_types: Sequence[str]) -> list[DnsRecord]:
        """Query each record type once, in order.

        A failing record type is logged and skipped; it never hides the
        answers of the others.
        """
        try:
            resolver = dns.resolver.Resolver()
        except _DNS_ERRORS as e:
            logger.debug("dns_unavailable host=%s error=%s", host, e)
            return []

        records: list[DnsRecord] = []
        for record_type in record_types:
            try:
                answers = resolver.resolve(host, record_type)
            except _DNS_ERRORS as e:
                logger.debug(
                    "dns_error host=%s type=%s error=%s", host, record_type, e
                )
                continue
            for rdata in answers:
                records.append(_to_record(record_type, rdata))

        logger.debug("dns_resolved host=%s records=%d", host, len(records))
        return records


def _to_record(record_type: str, rdata) -> DnsRecord:
    if record_type == "A":
        return DnsRecord(type=record_type, ip=rdata.address)
    if record_type == "AAAA":
        return DnsRecord(type=record_type, ipv6=rdata.address)
    if record_type == "CNAME":
        return DnsRecord(type=record_type, target=str(rdata.target).rstrip("."))
    return DnsRecord(type=record_type)


def is_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def extract_host(address: str) -> str | None:
    """Pull the host out of ``[scheme://]host[:port][/path]``."""
    rest = _SCHEME_RE.sub("", address)
    try:
        return urlsplit(f"http://{rest}").hostname or None
    except ValueError:
        return None


class AddressResolver:
    """Resolve one address to a ResolutionResult.

    Never raises for malformed input or DNS failures; both degrade to an
    empty IP set.
    """

    def __init__(self, dns_lookup: DnsLookup | None = None):
        self.dns_lookup = dns_lookup if dns_lookup is not None else DnsPythonLookup()

    def resolve(self, address: str) -> ResolutionResult:
        address = refang(address.strip())
        if not address:
            return ResolutionResult()

        if is_ip(address):
            return ResolutionResult(ips=[address], canonical=address)

        host = extract_host(address)
        if host is None:
            logger.debug("no_host address=%s", address)
            return ResolutionResult()

        if is_ip(host):
            return ResolutionResult(ips=[host], canonical=host)

        ips = self._resolve_host(host)
        if not ips:
            return ResolutionResult()

        return ResolutionResult(ips=ips, canonical=address)

    def _resolve_host(self, host: str) -> list[str]:
        try:
            records = self.dns_lookup.resolve_host(host, DNS_RECORD_TYPES)
        except _DNS_ERRORS as e:
            logger.debug("resolution_failed host=%s error=%s", host, e)
            return []

        ips = []
        for record in records:
            ip = record.ip or record.ipv6
            if ip:
                ips.append(ip)
        return ips
