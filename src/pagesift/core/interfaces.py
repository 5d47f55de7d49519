"""Abstract interfaces for pagesift."""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from pagesift.core.models import (
    ExtractionMode,
    ResultRecord,
    StrategyName,
)
from pagesift.engine.reporter import ProgressReporter
from pagesift.parsing.tree import MarkupTree


class FetchStrategy(ABC):
    """One way of retrieving a page body."""

    @property
    @abstractmethod
    def name(self) -> StrategyName:
        """Return the name of this strategy."""
        ...

    @abstractmethod
    def request_url(self, url: str) -> str:
        """Build the URL actually requested for ``url``.

        Args:
            url: Target page URL.

        Returns:
            URL to GET.
        """
        ...

    def read_body(self, response: httpx.Response) -> str:
        """Extract the page markup from a successful response.

        Args:
            response: Response with a 2xx status.

        Returns:
            Page markup.

        Raises:
            MalformedResponseError: If the body is unusable.
        """
        return response.text


class Extractor(ABC):
    """Abstract base class for per-mode extractors."""

    @property
    @abstractmethod
    def mode(self) -> ExtractionMode:
        """Return the mode this extractor implements."""
        ...

    @abstractmethod
    def extract(
        self,
        tree: MarkupTree,
        raw_text: str,
        base_url: Optional[str] = None,
        reporter: Optional[ProgressReporter] = None,
    ) -> list[ResultRecord]:
        """Extract records from a parsed document.

        Args:
            tree: Parsed markup.
            raw_text: The fetched body as received.
            base_url: URL the body was fetched from.
            reporter: Receives log lines and found-count increments.

        Returns:
            Ordered records, deduplicated for identity-keyed modes.
        """
        ...


class RunStore(ABC):
    """Persistence contract used by embedding applications."""

    @abstractmethod
    async def create_run(self, url: str, mode: ExtractionMode) -> str:
        """Register a new run.

        Args:
            url: Target URL.
            mode: Extraction mode.

        Returns:
            Identifier of the stored run.
        """
        ...

    @abstractmethod
    async def append_results(
        self, run_id: str, records: list[ResultRecord]
    ) -> None:
        """Store records for a run.

        Args:
            run_id: Run identifier.
            records: Records to append.
        """
        ...

    @abstractmethod
    async def close_run(
        self, run_id: str, status: str, result_count: int
    ) -> None:
        """Mark a run as finished.

        Args:
            run_id: Run identifier.
            status: Terminal status (completed, failed or stopped).
            result_count: Number of records produced.
        """
        ...
