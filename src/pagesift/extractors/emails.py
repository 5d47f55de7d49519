"""Email address extraction."""

from typing import Optional
from urllib.parse import unquote

from pagesift.core.models import EmailRecord, ExtractionMode, Provenance
from pagesift.extractors.base import BaseExtractor, ResultCollector
from pagesift.parsing.tree import MarkupTree


class EmailExtractor(BaseExtractor):
    """Finds addresses in the page text, mailto links and meta tags."""

    @property
    def mode(self) -> ExtractionMode:
        return ExtractionMode.EMAIL

    def _collect(
        self,
        tree: MarkupTree,
        raw_text: str,
        base_url: Optional[str],
        collector: ResultCollector,
    ) -> None:
        rule = self._library.rules_for(ExtractionMode.EMAIL)[0]

        collector.log("Searching page text for email addresses...")
        for email in rule.values(tree.text()):
            collector.add(EmailRecord(email.lower(), Provenance.TEXT))

        for anchor in tree.with_attr_prefix("a", "href", "mailto:"):
            href = tree.attr(anchor, "href").strip()
            addresses = unquote(href[len("mailto:"):].split("?")[0])
            for address in addresses.split(","):
                address = address.strip()
                if rule.regex.fullmatch(address):
                    collector.add(EmailRecord(address.lower(), Provenance.LINK))

        for meta in tree.select("meta"):
            for email in rule.values(tree.attr(meta, "content")):
                collector.add(EmailRecord(email.lower(), Provenance.META))

        collector.log(f"Found {len(collector)} email addresses")
