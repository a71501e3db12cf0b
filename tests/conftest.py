# tests/conftest.py
import csv
import logging

import pytest

from relaybench.core.models import ProbeResult, RelayRecord


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def relay(hostname, country_code, ip, city_code="", city_name=None, country_name=None):
    return RelayRecord(
        hostname=hostname,
        country_code=country_code,
        country_name=country_name or country_code.upper(),
        city_code=city_code,
        city_name=city_name or f"{country_code}-city",
        ipv4_address=ip,
    )


@pytest.fixture
def make_relay():
    return relay


@pytest.fixture
def sample_relays():
    return [
        relay("us-nyc-wg-001", "us", "10.0.0.1", "nyc", "New York", "USA"),
        relay("de-fra-wg-001", "de", "10.0.0.2", "fra", "Frankfurt", "Germany"),
        relay("fr-par-wg-001", "fr", "10.0.0.3", "par", "Paris", "France"),
    ]


@pytest.fixture
def make_result():
    def _make(hostname, rtt, country_code="us"):
        return ProbeResult(relay=relay(hostname, country_code, "10.1.1.1"), ping_duration=rtt)
    return _make


@pytest.fixture
def report_rows():
    """Read a written report back as a list of row dicts keyed by header."""
    def _read(path):
        with open(path, "r", newline="", encoding="utf-8") as f:
            return list(csv.DictReader(f))
    return _read
