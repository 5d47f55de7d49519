"""Pytest configuration and fixtures."""

import json
import tempfile
from pathlib import Path
from typing import Callable, Optional

import httpx
import pytest

from pagesift.engine.reporter import ProgressReporter
from pagesift.parsing.tree import MarkupTree

RELAY_HOSTS = {
    "api.allorigins.win": "proxyA",
    "corsproxy.io": "proxyB",
    "api.codetabs.com": "proxyC",
}


def strategy_for(request: httpx.Request) -> str:
    """Name of the strategy that issued ``request``."""
    return RELAY_HOSTS.get(request.url.host, "direct")


def make_transport(
    body: str,
    failing: tuple[str, ...] = (),
    on_request: Optional[Callable[[httpx.Request], None]] = None,
) -> httpx.MockTransport:
    """Mock network where the listed strategies answer HTTP 500.

    The AllOrigins relay answers with its JSON envelope, every other
    strategy with the raw body.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if on_request is not None:
            on_request(request)
        name = strategy_for(request)
        if name in failing:
            return httpx.Response(500, text="upstream error")
        if name == "proxyA":
            return httpx.Response(200, text=json.dumps({"contents": body}))
        return httpx.Response(200, text=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def reporter():
    return ProgressReporter()


@pytest.fixture
def sample_html():
    """Sample HTML content for testing."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Test Shop | Home</title>
        <meta name="description" content="A shop for tests">
        <meta name="contact" content="Write to sales@shop.example">
        <meta charset="utf-8">
        <script src="/static/app.js"></script>
    </head>
    <body>
        <h1>Welcome</h1>
        <p>Contact: JOHN@Example.com or jane@example.com for anything at all.</p>
        <a href="mailto:jane@example.com">Mail Jane</a>
        <a href="/about">About us</a>
        <a href="https://other.example.org/page">Partner</a>
        <h2>Login</h2>
        <form id="login" action="/session" method="post">
            <input type="email" name="email" id="email">
            <input type="password" name="pass" id="pass">
            <input type="submit" value="Sign in">
        </form>
        <img src="/img/logo.png" alt="Logo">
        <table><tr><td>a</td></tr><tr><td>b</td></tr></table>
        <script>var x = 1;</script>
    </body>
    </html>
    """


@pytest.fixture
def sample_tree(sample_html):
    return MarkupTree.parse(sample_html)
