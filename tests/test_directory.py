# tests/test_directory.py
from unittest import mock

import pytest
import requests

from relaybench.core.config import DirectoryConfig
from relaybench.core.errors import DirectoryError
from relaybench.core.models import CountryRecord, RelayRecord
from relaybench.directory.client import DirectoryClient, country_table

RELAYS_JSON = [
    {
        "hostname": "us-nyc-wg-001",
        "country_code": "us",
        "country_name": "USA",
        "city_code": "nyc",
        "city_name": "New York",
        "ipv4_addr_in": "10.0.0.1",
        "active": True,
    },
    {
        "hostname": "de-fra-wg-001",
        "country_code": "de",
        "country_name": "Germany",
        "city_code": "fra",
        "city_name": "Frankfurt",
        "ipv4_addr_in": "10.0.0.2",
    },
    {
        "hostname": "us-lax-wg-101",
        "country_code": "us",
        "country_name": "USA",
        "city_code": "lax",
        "city_name": "Los Angeles",
        "ipv4_addr_in": "10.0.0.3",
    },
]


def make_client(payload=None, json_error=None, get_error=None, status_error=None):
    session = mock.MagicMock()
    response = mock.MagicMock()
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if get_error is not None:
        session.get.side_effect = get_error
    else:
        session.get.return_value = response
    config = DirectoryConfig(url="http://directory.test/relays", request_timeout=5.0)
    return DirectoryClient(config, session=session), session


def test_fetch_relays_decodes_records():
    client, session = make_client(RELAYS_JSON)
    relays = client.fetch_relays()

    session.get.assert_called_once_with(
        "http://directory.test/relays", headers={"Accept": "application/json"}, timeout=5.0
    )
    assert len(relays) == 3
    assert relays[0] == RelayRecord(
        hostname="us-nyc-wg-001",
        country_code="us",
        country_name="USA",
        city_code="nyc",
        city_name="New York",
        ipv4_address="10.0.0.1",
    )
    assert [r.hostname for r in relays] == ["us-nyc-wg-001", "de-fra-wg-001", "us-lax-wg-101"]
    assert relays[1].identity == ("de-fra-wg-001", "10.0.0.2")


def test_fetch_relays_missing_fields_become_empty():
    client, _ = make_client([{"hostname": "bare"}])
    relay = client.fetch_relays()[0]
    assert relay.hostname == "bare"
    assert relay.country_code == ""
    assert relay.ipv4_address == ""


def test_fetch_countries_keeps_duplicates():
    client, _ = make_client(RELAYS_JSON)
    countries = client.fetch_countries()
    assert countries == [
        CountryRecord("us", "USA"),
        CountryRecord("de", "Germany"),
        CountryRecord("us", "USA"),
    ]


def test_country_table_dedupes_and_sorts():
    countries = [
        CountryRecord("us", "USA"),
        CountryRecord("de", "Germany"),
        CountryRecord("us", "USA"),
        CountryRecord("at", "Austria"),
    ]
    table = country_table(countries)
    assert list(table.items()) == [("at", "Austria"), ("de", "Germany"), ("us", "USA")]


def test_country_table_is_stable_across_calls():
    client, _ = make_client(RELAYS_JSON)
    first = country_table(client.fetch_countries())
    second = country_table(client.fetch_countries())
    assert first == second


def test_network_error_is_fatal():
    client, _ = make_client(get_error=requests.ConnectionError("connection refused"))
    with pytest.raises(DirectoryError, match="connection refused"):
        client.fetch_relays()


def test_http_error_is_fatal():
    client, _ = make_client(RELAYS_JSON, status_error=requests.HTTPError("503 Server Error"))
    with pytest.raises(DirectoryError):
        client.fetch_countries()


def test_malformed_json_is_fatal():
    client, _ = make_client(json_error=ValueError("Expecting value"))
    with pytest.raises(DirectoryError, match="decode"):
        client.fetch_relays()


@pytest.mark.parametrize("payload", [
    {"relays": []},
    "text",
    [1, 2],
    [{"hostname": "a"}, None],
    [{"hostname": "a", "country_code": "us", "ipv4_addr_in": 167772161}],
    [{"hostname": ["a"], "ipv4_addr_in": "10.0.0.1"}],
])
def test_unexpected_shape_is_fatal(payload):
    client, _ = make_client(payload)
    with pytest.raises(DirectoryError):
        client.fetch_relays()


def test_null_fields_become_empty():
    client, _ = make_client([{"hostname": "a", "city_code": None, "ipv4_addr_in": "10.0.0.1"}])
    assert client.fetch_relays()[0].city_code == ""


def test_wrong_typed_country_is_fatal():
    client, _ = make_client([{"country_code": 49, "country_name": "Germany"}])
    with pytest.raises(DirectoryError, match="country_code"):
        client.fetch_countries()


def test_caller_session_is_left_alone():
    client, session = make_client(RELAYS_JSON)
    with client:
        client.fetch_relays()
    session.close.assert_not_called()
    session.headers.update.assert_not_called()


def test_own_session_is_closed(monkeypatch):
    created = mock.MagicMock()
    monkeypatch.setattr(requests, "Session", mock.MagicMock(return_value=created))
    with DirectoryClient(DirectoryConfig()) as client:
        assert client is not None
    created.close.assert_called_once_with()
