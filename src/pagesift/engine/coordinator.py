"""Run coordinator: fetch, parse and extract for a single URL.

A run moves through IDLE -> FETCHING -> PARSING -> EXTRACTING -> COMPLETED.
When the primary strategy chain is exhausted the whole
fetch/parse/extract sequence is repeated once through the fallback
chain. STOPPED and FAILED end a run early; partial results of a stopped
run are discarded.
"""

import asyncio
from typing import Optional
from urllib.parse import urlparse

import httpx

from pagesift.core.errors import (
    FetchExhaustedError,
    InvalidInputError,
    PageSiftError,
    RunCancelledError,
    RunInProgressError,
)
from pagesift.core.models import (
    ErrorKind,
    ExtractionMode,
    FetchOutcome,
    ResultRecord,
    RunConfig,
    RunResult,
    RunState,
)
from pagesift.engine.reporter import LogSink, ProgressReporter
from pagesift.extractors.factory import ExtractorFactory
from pagesift.fetch.fetcher import DocumentFetcher
from pagesift.fetch.strategies import default_chain, fallback_chain
from pagesift.parsing.tree import MarkupTree
from pagesift.patterns.library import PatternLibrary


def validate_url(url: str) -> str:
    """Check that ``url`` is an absolute http(s) URL.

    Args:
        url: Candidate URL.

    Returns:
        The URL with surrounding whitespace removed.

    Raises:
        InvalidInputError: If the URL is not usable.
    """
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidInputError("no target URL given")
    try:
        parsed = urlparse(candidate)
    except ValueError as e:
        raise InvalidInputError(f"cannot parse URL {candidate!r}: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise InvalidInputError(f"not an absolute http(s) URL: {candidate!r}")
    return candidate


PROXY_SCHEMES = ("http", "https", "socks5", "socks5h")


def validate_proxy(proxy_url: Optional[str]) -> Optional[str]:
    """Check that an optional proxy URL names a scheme and a host.

    Raises:
        InvalidInputError: If the proxy URL is not usable.
    """
    if proxy_url is None or not proxy_url.strip():
        return None
    candidate = proxy_url.strip()
    try:
        parsed = urlparse(candidate)
    except ValueError as e:
        raise InvalidInputError(f"cannot parse proxy URL {candidate!r}: {e}") from e
    if parsed.scheme not in PROXY_SCHEMES or not parsed.hostname:
        raise InvalidInputError(
            f"proxy must look like http://host:port, got {candidate!r}"
        )
    return candidate


class RunCoordinator:
    """Orchestrates one run at a time and owns its progress state."""

    def __init__(
        self,
        config: Optional[RunConfig] = None,
        library: Optional[PatternLibrary] = None,
        sink: Optional[LogSink] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            config: Run configuration.
            library: Pattern library handed to extractors.
            sink: Receives every log line as it is written.
            transport: Optional httpx transport used by both fetch chains.
        """
        self._config = config or RunConfig()
        self._library = library
        self._transport = transport
        self._reporter = ProgressReporter(sink)
        self._state = RunState.IDLE
        self._history: list[RunState] = [RunState.IDLE]
        self._active = False
        self._cancel_event: Optional[asyncio.Event] = None
        self._ticker: Optional[asyncio.Task] = None

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def history(self) -> list[RunState]:
        """States visited by the current or last run."""
        return list(self._history)

    @property
    def reporter(self) -> ProgressReporter:
        return self._reporter

    @property
    def is_running(self) -> bool:
        return self._active

    def stop(self) -> None:
        """Request cancellation; honoured at the next phase boundary."""
        if self._cancel_event is not None:
            self._cancel_event.set()

    def clear(self) -> None:
        """Reset progress and state between runs."""
        if self._active:
            raise RunInProgressError("cannot clear while a run is active")
        self._reporter.reset()
        self._state = RunState.IDLE
        self._history = [RunState.IDLE]

    async def run(self, url: str, mode: ExtractionMode) -> RunResult:
        """Execute a run and return its terminal result.

        Args:
            url: Target page URL.
            mode: Extraction mode.

        Returns:
            RunResult in state COMPLETED, STOPPED or FAILED.

        Raises:
            RunInProgressError: If another run is active on this coordinator.
        """
        if self._active:
            raise RunInProgressError("a run is already active")

        self._active = True
        self._cancel_event = asyncio.Event()
        self._reporter.reset()
        self._state = RunState.IDLE
        self._history = [RunState.IDLE]
        result = RunResult(url=url, mode=mode, state=RunState.IDLE)
        result.progress = self._reporter.progress

        try:
            url = validate_url(url)
            result.url = url
            proxy_url = validate_proxy(self._config.proxy_url)
        except InvalidInputError as e:
            self._reporter.log(f"Error: {e}")
            self._active = False
            return self._finish(result, RunState.FAILED, e.kind, str(e))

        self._reporter.log(f"Starting run: {mode.label}")
        self._reporter.log(f"Target URL: {url}")
        self._reporter.log(f"Proxy: {proxy_url}" if proxy_url else "Proxy: off")
        self._ticker = asyncio.create_task(self._tick())

        try:
            try:
                outcome, records = await self._pipeline(url, mode, fallback=False)
            except FetchExhaustedError as e:
                if not self._config.enable_fallback:
                    raise
                self._reporter.log(
                    f"Primary fetch chain exhausted ({e}); switching to fallback pipeline"
                )
                result.used_fallback = True
                outcome, records = await self._pipeline(
                    url, mode, fallback=True, proxy_url=proxy_url
                )

            self._check_cancelled()
            result.outcome = outcome
            result.records = records
            self._reporter.log(f"Run complete: {len(records)} results")
            return self._finish(result, RunState.COMPLETED)

        except RunCancelledError as e:
            self._reporter.log("Run stopped by user")
            return self._finish(result, RunState.STOPPED, e.kind, str(e))
        except FetchExhaustedError as e:
            self._reporter.log(f"Run failed: {e}")
            return self._finish(result, RunState.FAILED, e.kind, str(e))
        except asyncio.CancelledError:
            self._reporter.log("Run stopped by user")
            self._finish(result, RunState.STOPPED, ErrorKind.CANCELLED, "task cancelled")
            raise
        except PageSiftError as e:
            self._reporter.log(f"Run failed: {e}")
            return self._finish(result, RunState.FAILED, e.kind, str(e))
        except Exception as e:
            self._reporter.log(f"Run failed with unexpected error: {e}")
            return self._finish(result, RunState.FAILED, ErrorKind.INTERNAL, str(e))
        finally:
            await self._stop_ticker()
            self._reporter.set_active_strategy(None)
            self._active = False

    async def _pipeline(
        self,
        url: str,
        mode: ExtractionMode,
        fallback: bool,
        proxy_url: Optional[str] = None,
    ) -> tuple[FetchOutcome, list[ResultRecord]]:
        """Fetch, parse and extract once through one strategy chain."""
        self._check_cancelled()
        if fallback:
            self._transition(RunState.FETCHING_FALLBACK)
            fetcher = DocumentFetcher(
                fallback_chain(),
                self._reporter,
                self._config,
                transport=self._transport,
                proxy=proxy_url,
                cancel_event=self._cancel_event,
            )
        else:
            self._transition(RunState.FETCHING)
            fetcher = DocumentFetcher(
                default_chain(self._config.use_relays),
                self._reporter,
                self._config,
                transport=self._transport,
                cancel_event=self._cancel_event,
            )

        outcome = await fetcher.fetch(url)
        if not outcome.succeeded:
            chain = "fallback" if fallback else "primary"
            raise FetchExhaustedError(
                f"all {chain} fetch strategies failed, last error: {outcome.error_message}",
                last_error=outcome.error,
            )
        if outcome.page_title:
            self._reporter.log(f"Page title: {outcome.page_title}")

        self._check_cancelled()
        self._transition(RunState.PARSING)
        tree = MarkupTree.parse(outcome.body)
        total = tree.count_content_elements()
        self._reporter.set_estimated_total(total)
        if total == 0:
            self._reporter.log("Warning: document contains no elements of interest")
        else:
            self._reporter.log(f"Parsed document: {total} content elements")

        self._check_cancelled()
        self._transition(RunState.EXTRACTING)
        extractor = ExtractorFactory.get_extractor(mode, self._library)
        records = extractor.extract(tree, outcome.body, url, self._reporter)
        return outcome, records

    def _check_cancelled(self) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise RunCancelledError("stopped on request")

    def _transition(self, state: RunState) -> None:
        self._state = state
        self._history.append(state)

    def _finish(
        self,
        result: RunResult,
        state: RunState,
        error: Optional[ErrorKind] = None,
        message: Optional[str] = None,
    ) -> RunResult:
        self._transition(state)
        result.state = state
        result.error = error
        result.error_message = message
        if state != RunState.COMPLETED:
            result.records = []
        return result

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self._config.tick_interval)
            self._reporter.tick()

    async def _stop_ticker(self) -> None:
        if self._ticker is None:
            return
        self._ticker.cancel()
        try:
            await self._ticker
        except asyncio.CancelledError:
            pass
        self._ticker = None
