"""Structured content extraction (positional, not deduplicated)."""

from typing import Optional

from pagesift.core.models import ExtractionMode, Provenance, StructuredRecord
from pagesift.extractors.base import BaseExtractor, ResultCollector
from pagesift.parsing.tree import HEADING_TAGS, MarkupTree

MIN_PARAGRAPH_LENGTH = 20
MAX_CONTENT_LENGTH = 200


def truncate(text: str, limit: int = MAX_CONTENT_LENGTH) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class StructuredDataExtractor(BaseExtractor):
    """Headings, paragraphs, images, then phone numbers, prices and emails."""

    @property
    def mode(self) -> ExtractionMode:
        return ExtractionMode.STRUCTURED_DATA

    def _collect(
        self,
        tree: MarkupTree,
        raw_text: str,
        base_url: Optional[str],
        collector: ResultCollector,
    ) -> None:
        collector.log("Extracting headings, paragraphs and images...")

        for heading in tree.select(HEADING_TAGS):
            text = tree.inline_text(heading)
            if text:
                collector.add(
                    StructuredRecord(f"Heading {heading.name.upper()}", text)
                )

        for paragraph in tree.select("p"):
            text = tree.inline_text(paragraph)
            if len(text) > MIN_PARAGRAPH_LENGTH:
                collector.add(StructuredRecord("Paragraph", truncate(text)))

        for image in tree.select("img"):
            src = tree.attr(image, "src").strip()
            if src:
                alt = tree.attr(image, "alt").strip()
                title = f"Image: {alt}" if alt else "Image"
                collector.add(StructuredRecord(title, src, Provenance.IMAGE))

        page_text = tree.text()
        for rule in self._library.rules_for(ExtractionMode.STRUCTURED_DATA):
            matches = rule.values(page_text)
            for value in matches:
                collector.add(StructuredRecord(rule.label, value.strip()))
            if matches:
                collector.log(f"{rule.label}: {len(matches)} found")

        # Addresses are repeated here so a data run is complete on its own.
        email_rule = self._library.rules_for(ExtractionMode.EMAIL)[0]
        for email in email_rule.values(page_text):
            collector.add(StructuredRecord("Email", email))

        collector.log(f"Extracted {len(collector)} data items")
