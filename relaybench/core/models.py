"""
Record types shared by the directory client, prober and report writer.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


def _text(data: Dict[str, Any], key: str) -> str:
    """Return a string field; absent or null becomes '', any other type is rejected."""
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class RelayRecord:
    """A single relay as published by the directory."""
    hostname: str
    country_code: str
    country_name: str
    city_code: str
    city_name: str
    ipv4_address: str

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.hostname, self.ipv4_address)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'RelayRecord':
        """Build a record from a directory object, absent fields become empty strings.

        Raises ValueError when a field holds something other than a string.
        """
        return cls(
            hostname=_text(data, 'hostname'),
            country_code=_text(data, 'country_code'),
            country_name=_text(data, 'country_name'),
            city_code=_text(data, 'city_code'),
            city_name=_text(data, 'city_name'),
            ipv4_address=_text(data, 'ipv4_addr_in')
        )


@dataclass(frozen=True)
class CountryRecord:
    """Country fields of a directory object."""
    country_code: str
    country_name: str

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'CountryRecord':
        return cls(
            country_code=_text(data, 'country_code'),
            country_name=_text(data, 'country_name')
        )


@dataclass(frozen=True)
class ProbeResult:
    """A relay that answered its probe, with the round-trip time in seconds."""
    relay: RelayRecord
    ping_duration: float
