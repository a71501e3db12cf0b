"""
Country scope filtering.
"""

from typing import Iterable, List, Optional, Sequence

from ..core.logger import get_logger
from ..core.models import RelayRecord

logger = get_logger('scope')


def parse_scope(raw: Optional[str]) -> List[str]:
    """Split a comma-separated list of country codes.

    Empty elements are reported and kept; they never match a relay.
    """
    if not raw:
        return []

    scope = [code.strip() for code in raw.split(',')]
    for position, code in enumerate(scope):
        if not code:
            logger.warning(f"Invalid country code at position {position}")
    return scope


def in_scope(record: RelayRecord, scope: Sequence[str]) -> bool:
    if not scope:
        return True
    return record.country_code in scope


def filter_relays(records: Iterable[RelayRecord], scope: Sequence[str]) -> List[RelayRecord]:
    return [record for record in records if in_scope(record, scope)]
