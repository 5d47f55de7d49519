"""Exceptions raised by pagesift."""

from typing import Optional

from pagesift.core.models import ErrorKind


class PageSiftError(Exception):
    """Base class for pagesift errors."""

    kind: ErrorKind = ErrorKind.INTERNAL


class InvalidInputError(PageSiftError):
    """The target URL is not a parseable absolute http(s) URL."""

    kind = ErrorKind.INVALID_INPUT


class MalformedResponseError(PageSiftError):
    """A strategy answered but its body could not be used."""

    kind = ErrorKind.MALFORMED_BODY


class FetchExhaustedError(PageSiftError):
    """Every strategy in a fetch chain failed."""

    kind = ErrorKind.FETCH_EXHAUSTED

    def __init__(
        self,
        message: str,
        last_error: Optional[ErrorKind] = None,
    ) -> None:
        super().__init__(message)
        self.last_error = last_error


class RunCancelledError(PageSiftError):
    """The run was stopped on request."""

    kind = ErrorKind.CANCELLED


class RunInProgressError(PageSiftError):
    """A coordinator was asked to start a second concurrent run."""
