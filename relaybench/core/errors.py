"""
Error types for RelayBench.

Everything derived from RelayBenchError is fatal: the run stops and no report
is written. A relay that simply does not answer is not an error at all, the
prober reports it as a missing result.
"""


class RelayBenchError(Exception):
    """Base class for unrecoverable errors."""


class ConfigError(RelayBenchError):
    """Invalid command-line or file configuration."""


class DirectoryError(RelayBenchError):
    """The relay directory could not be fetched or decoded."""


class ProbeTransportError(RelayBenchError):
    """A probe could not be issued at all (resolution, socket or permission failure)."""


class ReportError(RelayBenchError):
    """The CSV report could not be created or written."""
