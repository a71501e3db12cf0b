"""
ICMP latency prober for RelayBench.
"""

import logging
from typing import Callable, Iterable, List, Optional

import ping3
from ping3 import errors as ping_errors

from ..core.errors import ProbeTransportError
from ..core.models import ProbeResult, RelayRecord

ProgressCallback = Callable[[int], None]


class LatencyProber:
    """Sends one ICMP echo per relay, one relay at a time."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)
        # Timeouts and resolution failures are told apart by exception type
        ping3.EXCEPTIONS = True

    def probe(self, record: RelayRecord) -> Optional[float]:
        """Return the round-trip time in seconds, or None if the relay did not answer."""
        target = "%s (%s)" % record.identity
        if not record.ipv4_address:
            raise ProbeTransportError(f"Relay {record.hostname} has no IPv4 address")

        try:
            rtt = ping3.ping(record.ipv4_address, timeout=self.timeout, unit='s')
        except ping_errors.HostUnknown as e:
            raise ProbeTransportError(f"Cannot probe {target}: {e}")
        except ping_errors.PingError as e:
            # Timeout, unreachable and TTL expiry all mean no reply
            self.logger.debug(f"No reply from {target}: {e}")
            return None
        except OSError as e:
            raise ProbeTransportError(f"Cannot probe {target}: {e}")

        if rtt is None or rtt is False:
            self.logger.debug(f"No reply from {target}")
            return None

        self.logger.debug(f"Reply from {target} in {rtt * 1000:.3f}ms")
        return float(rtt)

    def run(self, records: Iterable[RelayRecord],
            on_progress: Optional[ProgressCallback] = None) -> List[ProbeResult]:
        """Probe each relay in order and collect the ones that answered.

        on_progress is called after every probe with the number of replies so far.
        """
        results: List[ProbeResult] = []
        attempts = 0
        for record in records:
            attempts += 1
            rtt = self.probe(record)
            if rtt is not None:
                results.append(ProbeResult(relay=record, ping_duration=rtt))
            if on_progress is not None:
                on_progress(len(results))

        self.logger.info(f"{len(results)} of {attempts} relays answered")
        return results
