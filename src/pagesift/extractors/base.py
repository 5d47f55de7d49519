"""Shared plumbing for extractors."""

from abc import abstractmethod
from typing import Optional

from pagesift.core.interfaces import Extractor
from pagesift.core.models import ResultRecord
from pagesift.engine.reporter import ProgressReporter
from pagesift.parsing.tree import MarkupTree
from pagesift.patterns.library import DEFAULT_LIBRARY, PatternLibrary


class ResultCollector:
    """Ordered record sink with identity-key deduplication."""

    def __init__(
        self,
        deduplicate: bool = True,
        reporter: Optional[ProgressReporter] = None,
    ) -> None:
        self._deduplicate = deduplicate
        self._reporter = reporter
        self._seen: set[str] = set()
        self.records: list[ResultRecord] = []

    def add(self, record: ResultRecord) -> bool:
        """Append a record unless its identity key was already seen.

        Returns:
            True if the record was kept.
        """
        key = record.identity_key
        if self._deduplicate and key is not None:
            if key in self._seen:
                return False
            self._seen.add(key)

        self.records.append(record)
        if self._reporter is not None:
            self._reporter.increment_found()
        return True

    def log(self, line: str) -> None:
        if self._reporter is not None:
            self._reporter.log(line)

    def __len__(self) -> int:
        return len(self.records)


class BaseExtractor(Extractor):
    """Extractor that feeds a ResultCollector."""

    def __init__(self, library: Optional[PatternLibrary] = None) -> None:
        self._library = library or DEFAULT_LIBRARY

    def extract(
        self,
        tree: MarkupTree,
        raw_text: str,
        base_url: Optional[str] = None,
        reporter: Optional[ProgressReporter] = None,
    ) -> list[ResultRecord]:
        collector = ResultCollector(self.mode.deduplicated, reporter)
        self._collect(tree, raw_text or "", base_url, collector)
        return collector.records

    @abstractmethod
    def _collect(
        self,
        tree: MarkupTree,
        raw_text: str,
        base_url: Optional[str],
        collector: ResultCollector,
    ) -> None:
        """Add this mode's records to ``collector``."""
        ...
