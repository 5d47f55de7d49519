"""Retrieval strategies: CORS relays and direct fetch."""

from urllib.parse import quote

import httpx

from pagesift.core.errors import MalformedResponseError
from pagesift.core.interfaces import FetchStrategy
from pagesift.core.models import StrategyName


class RawRelay(FetchStrategy):
    """Relay that returns the target page body unchanged."""

    def __init__(self, name: StrategyName, endpoint: str) -> None:
        """Initialize the relay.

        Args:
            name: Strategy name reported in logs and outcomes.
            endpoint: Relay URL prefix; the encoded target URL is appended.
        """
        self._name = name
        self._endpoint = endpoint

    @property
    def name(self) -> StrategyName:
        return self._name

    def request_url(self, url: str) -> str:
        return f"{self._endpoint}{quote(url, safe='')}"

    def read_body(self, response: httpx.Response) -> str:
        body = response.text
        if not body.strip():
            raise MalformedResponseError("relay returned an empty body")
        return body


class AllOriginsRelay(RawRelay):
    """AllOrigins relay, which wraps the page in a JSON envelope."""

    ENDPOINT = "https://api.allorigins.win/get?url="

    def __init__(self) -> None:
        super().__init__(StrategyName.PROXY_A, self.ENDPOINT)

    def read_body(self, response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"relay reply is not JSON: {e}") from e

        contents = data.get("contents") if isinstance(data, dict) else None
        if not isinstance(contents, str) or not contents.strip():
            raise MalformedResponseError("relay reply has no contents")
        return contents


class DirectFetch(FetchStrategy):
    """Plain GET of the target URL."""

    @property
    def name(self) -> StrategyName:
        return StrategyName.DIRECT

    def request_url(self, url: str) -> str:
        return url


def default_chain(use_relays: bool = True) -> list[FetchStrategy]:
    """Build the primary strategy chain.

    Args:
        use_relays: Include the relay strategies ahead of the direct fetch.

    Returns:
        Strategies in the order they are tried.
    """
    chain: list[FetchStrategy] = []
    if use_relays:
        chain.extend(
            [
                AllOriginsRelay(),
                RawRelay(StrategyName.PROXY_B, "https://corsproxy.io/?url="),
                RawRelay(StrategyName.PROXY_C, "https://api.codetabs.com/v1/proxy?quest="),
            ]
        )
    chain.append(DirectFetch())
    return chain


def fallback_chain() -> list[FetchStrategy]:
    """Strategies used by the fallback pipeline."""
    return [DirectFetch()]
