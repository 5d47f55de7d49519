"""Secret and key discovery across meta tags, inline scripts and the raw body."""

from typing import Optional

from pagesift.core.models import ExtractionMode, Provenance, SecretRecord
from pagesift.extractors.base import BaseExtractor, ResultCollector
from pagesift.parsing.tree import MarkupTree

META_HINTS = ("key", "token")
MIN_META_SECRET_LENGTH = 16


class SecretKeyExtractor(BaseExtractor):
    """Applies the secret rules to each source independently.

    Meta tags and inline scripts are scanned before the raw body so that
    a finding keeps its most specific provenance.
    """

    @property
    def mode(self) -> ExtractionMode:
        return ExtractionMode.SECRET_KEY

    def _collect(
        self,
        tree: MarkupTree,
        raw_text: str,
        base_url: Optional[str],
        collector: ResultCollector,
    ) -> None:
        for meta in tree.select("meta"):
            meta_name = tree.attr(meta, "name") or tree.attr(meta, "property")
            if not any(hint in meta_name.lower() for hint in META_HINTS):
                continue
            content = tree.attr(meta, "content").strip()
            if self._scan(content, Provenance.META, collector):
                continue
            if len(content) >= MIN_META_SECRET_LENGTH and " " not in content:
                collector.add(
                    SecretRecord(f"Meta {meta_name}", content, Provenance.META)
                )

        scripts = [s for s in tree.select("script") if not tree.attr(s, "src")]
        if scripts:
            collector.log(f"Scanning {len(scripts)} inline scripts...")
        for script in scripts:
            self._scan(tree.script_body(script), Provenance.SCRIPT, collector)

        collector.log("Scanning page source for keys and tokens...")
        self._scan(raw_text, Provenance.TEXT, collector)

        collector.log(f"Found {len(collector)} potential secrets")

    def _scan(self, text: str, source: Provenance, collector: ResultCollector) -> int:
        """Apply every rule to ``text``; return how many new records were kept."""
        kept = 0
        for rule in self._library.rules_for(self.mode):
            for match in rule.regex.finditer(text):
                if collector.add(SecretRecord(rule.label, match.group(0), source)):
                    kept += 1
                    collector.log(f"{rule.label} found in {source.value}")
        return kept
