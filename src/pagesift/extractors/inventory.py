"""Raw tag inventory over a fixed allowlist."""

from typing import Optional

from bs4.element import Tag

from pagesift.core.models import ExtractionMode, InventoryRecord, Provenance
from pagesift.extractors.base import BaseExtractor, ResultCollector
from pagesift.parsing.tree import MarkupTree

INVENTORY_TAGS = ["title", "meta", "h1", "h2", "h3", "form", "table", "script"]

_SOURCES = {
    "meta": Provenance.META,
    "form": Provenance.FORM,
    "script": Provenance.SCRIPT,
}


class HtmlInventoryExtractor(BaseExtractor):
    """Lists allowlisted tags in document order."""

    @property
    def mode(self) -> ExtractionMode:
        return ExtractionMode.HTML_INVENTORY

    def _collect(
        self,
        tree: MarkupTree,
        raw_text: str,
        base_url: Optional[str],
        collector: ResultCollector,
    ) -> None:
        collector.log("Analysing HTML structure...")

        for element in tree.select(INVENTORY_TAGS):
            content = self._describe(tree, element)
            if not content:
                continue
            collector.add(
                InventoryRecord(
                    tag=f"<{element.name}>",
                    content=content,
                    source=_SOURCES.get(element.name, Provenance.TEXT),
                )
            )

        collector.log(f"Found {len(collector)} HTML elements")

    def _describe(self, tree: MarkupTree, element: Tag) -> str:
        name = element.name

        if name == "meta":
            key = (
                tree.attr(element, "name")
                or tree.attr(element, "property")
                or tree.attr(element, "http-equiv")
            )
            if tree.attr(element, "charset"):
                return f"charset: {tree.attr(element, 'charset')}"
            value = tree.attr(element, "content").strip()
            if not key and not value:
                return ""
            return f"{key or 'meta'}: {value}"

        if name == "script":
            src = tree.attr(element, "src").strip()
            return f"External: {src}" if src else "Inline script"

        if name == "form":
            action = tree.attr(element, "action") or "-"
            method = (tree.attr(element, "method") or "get").upper()
            fields = len(tree.select(["input", "select", "textarea"], element))
            return f"{method} {action} ({fields} fields)"

        if name == "table":
            rows = len(tree.select("tr", element))
            caption = element.find("caption")
            if caption is not None and tree.inline_text(caption):
                return f"{tree.inline_text(caption)} ({rows} rows)"
            return f"{rows} rows"

        return tree.inline_text(element)
