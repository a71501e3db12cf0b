"""
Relay directory client for RelayBench.
Fetches the provider's public relay list over HTTP.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from ..core.config import DirectoryConfig
from ..core.errors import DirectoryError
from ..core.models import CountryRecord, RelayRecord

T = TypeVar('T')

_HEADERS = {'Accept': 'application/json'}


class DirectoryClient:
    """Reads relay and country records from the relay directory endpoint.

    A session passed in stays the caller's to close; one created here is
    closed by close() or on leaving a with block.
    """

    def __init__(self, config: DirectoryConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    def __enter__(self) -> 'DirectoryClient':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def fetch_relays(self) -> List[RelayRecord]:
        """Fetch every relay published by the directory."""
        relays = self._decode(RelayRecord.from_json)
        self.logger.info(f"Fetched {len(relays)} relays from {self.config.url}")
        return relays

    def fetch_countries(self) -> List[CountryRecord]:
        """Fetch the country fields of every relay, duplicates included."""
        return self._decode(CountryRecord.from_json)

    def _decode(self, factory: Callable[[Dict[str, Any]], T]) -> List[T]:
        records = []
        for index, item in enumerate(self._get_objects()):
            try:
                records.append(factory(item))
            except ValueError as e:
                raise DirectoryError(f"Failed to decode relay directory: entry {index}: {e}")
        return records

    def _get_objects(self) -> List[Dict[str, Any]]:
        """GET the endpoint and return its body as a list of JSON objects."""
        try:
            response = self._session.get(self.config.url, headers=_HEADERS,
                                         timeout=self.config.request_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DirectoryError(f"Failed to fetch relay directory from {self.config.url}: {e}")

        try:
            payload = response.json()
        except ValueError as e:
            raise DirectoryError(f"Failed to decode relay directory: {e}")

        if not isinstance(payload, list):
            raise DirectoryError(
                f"Failed to decode relay directory: expected a JSON array, got {type(payload).__name__}"
            )

        for index, item in enumerate(payload):
            if not isinstance(item, dict):
                raise DirectoryError(
                    f"Failed to decode relay directory: entry {index} is not an object"
                )

        self.logger.debug(f"Directory returned {len(payload)} entries")
        return payload


def country_table(countries: List[CountryRecord]) -> Dict[str, str]:
    """Map country code to name, ordered by code."""
    table: Dict[str, str] = {}
    for country in countries:
        table[country.country_code] = country.country_name
    return dict(sorted(table.items()))
