"""Access to on-chain module ABIs and published sources."""

from .client import AptosClient, NETWORK_URLS
from .source import decode_source, source_map_for

__all__ = ["AptosClient", "NETWORK_URLS", "decode_source", "source_map_for"]
