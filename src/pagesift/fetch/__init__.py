"""Resilient page fetching."""

from pagesift.fetch.fetcher import DocumentFetcher
from pagesift.fetch.strategies import (
    AllOriginsRelay,
    DirectFetch,
    RawRelay,
    default_chain,
    fallback_chain,
)

__all__ = [
    "DocumentFetcher",
    "AllOriginsRelay",
    "DirectFetch",
    "RawRelay",
    "default_chain",
    "fallback_chain",
]
