"""Document fetcher that walks an ordered chain of strategies.

Strategies are tried one after another with a bounded timeout each.
A failing strategy is logged and the chain moves on immediately; there
are no retries within a strategy.
"""

import asyncio
from typing import Optional

import httpx

from pagesift.core.errors import MalformedResponseError, RunCancelledError
from pagesift.core.interfaces import FetchStrategy
from pagesift.core.models import ErrorKind, FetchOutcome, RunConfig
from pagesift.engine.reporter import ProgressReporter
from pagesift.parsing.tree import MarkupTree


class DocumentFetcher:
    """Resolves a URL to markup through a strategy chain."""

    def __init__(
        self,
        strategies: list[FetchStrategy],
        reporter: ProgressReporter,
        config: Optional[RunConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        proxy: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            strategies: Strategies in the order they are tried.
            reporter: Receives one log line per attempt, failure and success.
            config: Run configuration (timeout, user agent).
            transport: Optional httpx transport, used in place of the network.
            proxy: Optional HTTP proxy for every request of this chain.
            cancel_event: When set, the chain stops before the next strategy.
        """
        self._strategies = strategies
        self._reporter = reporter
        self._config = config or RunConfig()
        self._transport = transport
        self._proxy = proxy
        self._cancel_event = cancel_event

    async def fetch(self, url: str) -> FetchOutcome:
        """Fetch ``url`` with the first strategy that succeeds.

        Args:
            url: Absolute URL of the page.

        Returns:
            FetchOutcome; ``succeeded`` is False when every strategy failed.

        Raises:
            RunCancelledError: If cancellation was requested between strategies.
        """
        last_kind: Optional[ErrorKind] = None
        last_message = "no fetch strategies configured"

        async with httpx.AsyncClient(
            timeout=self._config.timeout,
            follow_redirects=True,
            headers={"User-Agent": self._config.user_agent},
            transport=self._transport,
            proxy=self._proxy,
        ) as client:
            for strategy in self._strategies:
                if self._cancel_event is not None and self._cancel_event.is_set():
                    raise RunCancelledError("stopped during fetch")

                name = strategy.name.value
                self._reporter.set_active_strategy(strategy.name)
                self._reporter.log(f"Fetching via {name}...")
                request_url = strategy.request_url(url)
                if self._config.verbose:
                    self._reporter.log(f"  GET {request_url}")

                try:
                    response = await client.get(request_url)
                    response.raise_for_status()
                    body = strategy.read_body(response)
                except httpx.TimeoutException as e:
                    last_kind = ErrorKind.TIMEOUT
                    last_message = (
                        f"timed out after {self._config.timeout:g}s ({type(e).__name__})"
                    )
                except httpx.HTTPStatusError as e:
                    last_kind = ErrorKind.HTTP_STATUS
                    last_message = f"HTTP {e.response.status_code}"
                except httpx.RequestError as e:
                    last_kind = ErrorKind.NETWORK
                    last_message = str(e) or type(e).__name__
                except MalformedResponseError as e:
                    last_kind = ErrorKind.MALFORMED_BODY
                    last_message = str(e)
                else:
                    self._reporter.log(
                        f"Fetched {len(body)} characters via {name}"
                    )
                    return FetchOutcome(
                        succeeded=True,
                        body=body,
                        strategy_used=strategy.name,
                        page_title=MarkupTree.parse(body).title,
                    )

                self._reporter.log(f"Strategy {name} failed: {last_message}")

        self._reporter.set_active_strategy(None)
        return FetchOutcome(
            succeeded=False,
            error=last_kind,
            error_message=last_message,
        )
