"""
RelayBench - VPN relay latency benchmark

Fetches a VPN provider's public relay directory, pings every relay in scope
once and writes a CSV report ranked by round-trip time.
"""

__version__ = "1.0.0"
__author__ = "RelayBench Authors"
__license__ = "MIT"

from .core.config import Config
from .core.logger import setup_logging

__all__ = ["Config", "setup_logging"]
