"""Gift card, promo code and voucher discovery."""

import re
from typing import Optional

from pagesift.core.models import ExtractionMode, GiftCodeRecord, Provenance
from pagesift.extractors.base import BaseExtractor, ResultCollector
from pagesift.parsing.tree import MarkupTree
from pagesift.patterns.library import SHAPE

MIN_CODE_LENGTH = 4
CODE_FIELD_HINTS = ("code", "gift", "promo", "coupon")
DATA_ATTRIBUTE_HINTS = CODE_FIELD_HINTS + ("voucher",)

_LABEL_PREFIX = re.compile(r"^[^:=#/]*[:=#](?!//)\s*")
_EDGE_NOISE = re.compile(r"^[^A-Za-z0-9]+|[^A-Za-z0-9]+$")


def clean_code(raw: str) -> str:
    """Strip a leading ``label:`` and non-alphanumeric edges from a code."""
    code = _LABEL_PREFIX.sub("", raw.strip())
    return _EDGE_NOISE.sub("", code)


class GiftCodeExtractor(BaseExtractor):
    """Scans text, code inputs, data attributes and QR code images."""

    @property
    def mode(self) -> ExtractionMode:
        return ExtractionMode.GIFT_CODE

    def _collect(
        self,
        tree: MarkupTree,
        raw_text: str,
        base_url: Optional[str],
        collector: ResultCollector,
    ) -> None:
        collector.log("Searching page text for gift cards and promo codes...")
        page_text = tree.text()
        for rule in self._library.rules_for(self.mode):
            kept = sum(
                self._add(collector, rule.label, value, Provenance.TEXT)
                for value in rule.values(page_text)
            )
            if kept:
                collector.log(f"{rule.label}: {kept} found")

        fields = tree.with_attr_containing("input", ("name", "id"), CODE_FIELD_HINTS)
        for field in fields:
            label = f"Input {tree.attr(field, 'name') or tree.attr(field, 'id')}"
            self._add(collector, label, tree.attr(field, "value"), Provenance.INPUT_FIELD)

        shape_rules = self._library.rules_for(self.mode, SHAPE)
        for element in tree.with_data_attributes():
            for name, value in tree.data_attributes(element):
                if any(hint in name.lower() for hint in DATA_ATTRIBUTE_HINTS):
                    self._add(collector, name, value, Provenance.DATA_ATTRIBUTE)
                    continue
                for rule in shape_rules:
                    for match in rule.values(value):
                        self._add(collector, rule.label, match, Provenance.DATA_ATTRIBUTE)

        images = tree.with_attr_containing("img", ("src", "alt"), ("qr",))
        if images:
            collector.log(f"Found {len(images)} QR code images")
        for image in images:
            src = tree.attr(image, "src").strip()
            if src:
                collector.add(GiftCodeRecord("QR code image", src, Provenance.IMAGE))
            for rule in shape_rules:
                for match in rule.values(tree.attr(image, "alt")):
                    self._add(collector, rule.label, match, Provenance.IMAGE)

        collector.log(f"Found {len(collector)} codes")

    @staticmethod
    def _add(
        collector: ResultCollector,
        label: str,
        raw: str,
        source: Provenance,
    ) -> bool:
        code = clean_code(raw or "")
        if len(code) < MIN_CODE_LENGTH:
            return False
        return collector.add(GiftCodeRecord(label, code, source))
