"""Tests for the document fetcher and its strategies."""

import asyncio
import json

import httpx
import pytest

from conftest import make_transport, strategy_for
from pagesift.core.errors import MalformedResponseError, RunCancelledError
from pagesift.core.models import ErrorKind, RunConfig, StrategyName
from pagesift.fetch import (
    AllOriginsRelay,
    DirectFetch,
    DocumentFetcher,
    default_chain,
    fallback_chain,
)
from pagesift.parsing.tree import MarkupTree

PAGE = "<html><head><title>Hello &amp; welcome</title></head><body><p>Hi</p></body></html>"


def _failure_lines(reporter):
    return [line for line in reporter.progress.log_lines if "failed:" in line]


class TestStrategies:
    """Tests for the strategy definitions."""

    def test_default_chain_order(self):
        """Test relays come before the direct fetch."""
        names = [s.name for s in default_chain()]
        assert names == [
            StrategyName.PROXY_A,
            StrategyName.PROXY_B,
            StrategyName.PROXY_C,
            StrategyName.DIRECT,
        ]

    def test_chain_without_relays(self):
        """Test disabling relays leaves only the direct fetch."""
        assert [s.name for s in default_chain(use_relays=False)] == [StrategyName.DIRECT]
        assert [s.name for s in fallback_chain()] == [StrategyName.DIRECT]

    def test_relay_url_encodes_target(self):
        """Test the target URL is encoded into the relay URL."""
        url = AllOriginsRelay().request_url("https://example.com/a?b=1")
        assert url == "https://api.allorigins.win/get?url=https%3A%2F%2Fexample.com%2Fa%3Fb%3D1"
        assert DirectFetch().request_url("https://example.com") == "https://example.com"

    def test_allorigins_malformed_body(self):
        """Test that a non-JSON envelope is rejected."""
        response = httpx.Response(200, text="<html>not json</html>")
        with pytest.raises(MalformedResponseError):
            AllOriginsRelay().read_body(response)

    def test_allorigins_missing_contents(self):
        """Test that an envelope without contents is rejected."""
        response = httpx.Response(200, text=json.dumps({"status": {"http_code": 404}}))
        with pytest.raises(MalformedResponseError):
            AllOriginsRelay().read_body(response)

    def test_page_title_from_tree(self):
        """Test title capture and unescaping."""
        assert MarkupTree.parse(PAGE).title == "Hello & welcome"
        assert MarkupTree.parse("<p>no title</p>").title is None


class TestDocumentFetcher:
    """Tests for DocumentFetcher."""

    @pytest.mark.asyncio
    async def test_first_strategy_succeeds(self, reporter):
        """Test the relay envelope is unwrapped."""
        fetcher = DocumentFetcher(default_chain(), reporter, transport=make_transport(PAGE))
        outcome = await fetcher.fetch("https://example.com/")

        assert outcome.succeeded
        assert outcome.body == PAGE
        assert outcome.strategy_used == StrategyName.PROXY_A
        assert outcome.page_title == "Hello & welcome"
        assert reporter.progress.active_strategy == StrategyName.PROXY_A

    @pytest.mark.asyncio
    async def test_title_ignores_comments_and_scripts(self, reporter):
        """Test the title comes from the title element, not comment or script text."""
        body = (
            "<html><head><!-- <title>Stale draft</title> -->"
            "<script>var t = '<title>In script</title>';</script>"
            "<title>Real Title</title></head><body></body></html>"
        )
        fetcher = DocumentFetcher([DirectFetch()], reporter, transport=make_transport(body))
        outcome = await fetcher.fetch("https://example.com/")
        assert outcome.page_title == "Real Title"

    @pytest.mark.asyncio
    async def test_falls_through_to_third_strategy(self, reporter):
        """Test two failures are logged before the third strategy succeeds."""
        transport = make_transport(PAGE, failing=("proxyA", "proxyB"))
        fetcher = DocumentFetcher(default_chain(), reporter, transport=transport)
        outcome = await fetcher.fetch("https://example.com/")

        assert outcome.strategy_used == StrategyName.PROXY_C
        lines = reporter.progress.log_lines
        success_index = next(i for i, line in enumerate(lines) if line.startswith("Fetched"))
        failures = [line for line in lines[:success_index] if "failed:" in line]
        assert len(failures) == 2
        assert "proxyA" in failures[0] and "HTTP 500" in failures[0]
        assert "proxyB" in failures[1]

    @pytest.mark.asyncio
    async def test_all_strategies_fail(self, reporter):
        """Test the outcome when the whole chain fails."""
        transport = make_transport(PAGE, failing=("proxyA", "proxyB", "proxyC", "direct"))
        fetcher = DocumentFetcher(default_chain(), reporter, transport=transport)
        outcome = await fetcher.fetch("https://example.com/")

        assert not outcome.succeeded
        assert outcome.body == ""
        assert outcome.error == ErrorKind.HTTP_STATUS
        assert outcome.error_message == "HTTP 500"
        assert len(_failure_lines(reporter)) == 4
        assert reporter.progress.active_strategy is None

    @pytest.mark.asyncio
    async def test_timeout_and_empty_body(self, reporter):
        """Test timeouts and empty relay bodies move the chain on."""

        def handler(request):
            name = strategy_for(request)
            if name == "proxyA":
                raise httpx.ConnectTimeout("timed out", request=request)
            if name == "proxyB":
                return httpx.Response(200, text="   ")
            return httpx.Response(200, text=PAGE)

        fetcher = DocumentFetcher(
            default_chain(), reporter, transport=httpx.MockTransport(handler)
        )
        outcome = await fetcher.fetch("https://example.com/")

        assert outcome.strategy_used == StrategyName.PROXY_C
        failures = _failure_lines(reporter)
        assert "timed out" in failures[0]
        assert "empty body" in failures[1]

    @pytest.mark.asyncio
    async def test_network_error_kind(self, reporter):
        """Test connection errors are reported as network failures."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = DocumentFetcher(
            [DirectFetch()], reporter, transport=httpx.MockTransport(handler)
        )
        outcome = await fetcher.fetch("https://example.com/")
        assert outcome.error == ErrorKind.NETWORK

    @pytest.mark.asyncio
    async def test_sends_user_agent(self, reporter):
        """Test the configured user agent is sent."""
        seen = []
        transport = make_transport(PAGE, on_request=lambda r: seen.append(r.headers["User-Agent"]))
        config = RunConfig(user_agent="pagesift-test/1.0")
        fetcher = DocumentFetcher([DirectFetch()], reporter, config, transport=transport)
        await fetcher.fetch("https://example.com/")
        assert seen == ["pagesift-test/1.0"]

    @pytest.mark.asyncio
    async def test_cancel_between_strategies(self, reporter):
        """Test cancellation stops the chain before the next strategy."""
        event = asyncio.Event()
        transport = make_transport(PAGE, failing=("proxyA",), on_request=lambda r: event.set())
        fetcher = DocumentFetcher(
            default_chain(), reporter, transport=transport, cancel_event=event
        )
        with pytest.raises(RunCancelledError):
            await fetcher.fetch("https://example.com/")
        assert len(_failure_lines(reporter)) == 1
