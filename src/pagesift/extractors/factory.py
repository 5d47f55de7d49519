"""Factory for creating extractors."""

from typing import Optional

from pagesift.core.interfaces import Extractor
from pagesift.core.models import ExtractionMode
from pagesift.patterns.library import PatternLibrary


class ExtractorFactory:
    """Maps extraction modes to extractor classes."""

    # Registry of extractors (lazy-loaded to avoid circular imports)
    _EXTRACTORS: dict[ExtractionMode, type[Extractor]] | None = None

    @classmethod
    def _load_extractors(cls) -> dict[ExtractionMode, type[Extractor]]:
        """Lazy-load extractor classes."""
        if cls._EXTRACTORS is None:
            from pagesift.extractors.credentials import CredentialExtractor
            from pagesift.extractors.emails import EmailExtractor
            from pagesift.extractors.giftcodes import GiftCodeExtractor
            from pagesift.extractors.inventory import HtmlInventoryExtractor
            from pagesift.extractors.links import LinkExtractor
            from pagesift.extractors.secrets import SecretKeyExtractor
            from pagesift.extractors.structured import StructuredDataExtractor

            cls._EXTRACTORS = {
                ExtractionMode.EMAIL: EmailExtractor,
                ExtractionMode.LINK: LinkExtractor,
                ExtractionMode.STRUCTURED_DATA: StructuredDataExtractor,
                ExtractionMode.HTML_INVENTORY: HtmlInventoryExtractor,
                ExtractionMode.CREDENTIAL: CredentialExtractor,
                ExtractionMode.SECRET_KEY: SecretKeyExtractor,
                ExtractionMode.GIFT_CODE: GiftCodeExtractor,
            }
        return cls._EXTRACTORS

    @classmethod
    def get_extractor(
        cls,
        mode: ExtractionMode,
        library: Optional[PatternLibrary] = None,
    ) -> Extractor:
        """Get the extractor for a mode.

        Args:
            mode: Extraction mode.
            library: Pattern library to use (defaults to the shared one).

        Returns:
            Extractor instance.

        Raises:
            ValueError: If no extractor is registered for the mode.
        """
        extractors = cls._load_extractors()
        if mode not in extractors:
            raise ValueError(f"No extractor registered for mode {mode.value!r}")
        return extractors[mode](library)

    @classmethod
    def list_modes(cls) -> list[ExtractionMode]:
        """List all modes with a registered extractor."""
        return list(cls._load_extractors().keys())

    @classmethod
    def register_extractor(
        cls,
        mode: ExtractionMode,
        extractor_class: type[Extractor],
    ) -> None:
        """Register or replace the extractor for a mode."""
        cls._load_extractors()[mode] = extractor_class
