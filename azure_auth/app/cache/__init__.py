"""
Process-lifetime caching for discovery documents and signing certificates.

A ``TTLCache`` is constructed by the host and handed to the certificate
source, so independent verifiers (and tests) never share hidden state.
"""

from .ttl_cache import DEFAULT_TTL_MS, CacheEntry, TTLCache

__all__ = ["DEFAULT_TTL_MS", "CacheEntry", "TTLCache"]
