"""Hyperlink extraction with relative URL resolution."""

from typing import Optional
from urllib.parse import urljoin, urlparse

from pagesift.core.models import ExtractionMode, LinkKind, LinkRecord, Provenance
from pagesift.extractors.base import BaseExtractor, ResultCollector
from pagesift.parsing.tree import MarkupTree

_SKIPPED_SCHEMES = ("#", "javascript:", "mailto:", "tel:", "data:")


def resolve_url(href: str, base_url: Optional[str]) -> Optional[str]:
    """Resolve ``href`` against ``base_url``.

    Returns:
        Absolute http(s) URL, or None when the link cannot be resolved.
    """
    try:
        resolved = urljoin(base_url, href) if base_url else href
        parsed = urlparse(resolved)
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return resolved


class LinkExtractor(BaseExtractor):
    """Collects anchors, classified as internal or external."""

    @property
    def mode(self) -> ExtractionMode:
        return ExtractionMode.LINK

    def _collect(
        self,
        tree: MarkupTree,
        raw_text: str,
        base_url: Optional[str],
        collector: ResultCollector,
    ) -> None:
        collector.log("Extracting links...")
        base_host = self._hostname(base_url)
        skipped = 0

        for anchor in tree.select("a"):
            href = tree.attr(anchor, "href").strip()
            if not href or href.lower().startswith(_SKIPPED_SCHEMES):
                continue

            url = resolve_url(href, base_url)
            if url is None:
                skipped += 1
                continue

            kind = (
                LinkKind.INTERNAL
                if base_host and self._hostname(url) == base_host
                else LinkKind.EXTERNAL
            )
            collector.add(
                LinkRecord(
                    url=url,
                    text=tree.inline_text(anchor),
                    kind=kind,
                    source=Provenance.LINK,
                )
            )

        if skipped:
            collector.log(f"Skipped {skipped} unresolvable links")
        collector.log(f"Found {len(collector)} links")

    @staticmethod
    def _hostname(url: Optional[str]) -> Optional[str]:
        if not url:
            return None
        try:
            return urlparse(url).hostname
        except ValueError:
            return None
