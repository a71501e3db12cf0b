"""
CSV report output for RelayBench.
"""

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Union

from ..core.durations import format_duration
from ..core.errors import ReportError
from ..core.models import ProbeResult

HEADER = ['Server', 'Country', 'City', 'Ping']

logger = logging.getLogger(__name__)


def sort_results(results: Iterable[ProbeResult]) -> List[ProbeResult]:
    """Order by ascending ping; equal pings keep their probe order."""
    return sorted(results, key=lambda result: result.ping_duration)


def write_report(path: Union[str, Path], results: Iterable[ProbeResult]) -> int:
    """Write the ranked report to a new file at path and return the row count.

    The file must not exist yet. If writing fails part way the file is removed
    again, so a failed run leaves no partial report behind.
    """
    ranked = sort_results(results)
    try:
        f = open(path, 'x', newline='', encoding='utf-8')
    except OSError as e:
        raise ReportError(f"Failed to write report {path}: {e}")

    try:
        with f:
            writer = csv.writer(f)
            writer.writerow(HEADER)
            for result in ranked:
                relay = result.relay
                writer.writerow([
                    relay.hostname,
                    relay.country_name,
                    relay.city_name,
                    format_duration(result.ping_duration)
                ])
    except OSError as e:
        _discard(path)
        raise ReportError(f"Failed to write report {path}: {e}")

    logger.info(f"Wrote {len(ranked)} rows to {path}")
    return len(ranked)


def _discard(path: Union[str, Path]) -> None:
    try:
        Path(path).unlink()
    except OSError as e:
        logger.warning(f"Could not remove partial report {path}: {e}")
