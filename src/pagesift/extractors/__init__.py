"""Per-mode extractors."""

from pagesift.extractors.base import BaseExtractor, ResultCollector
from pagesift.extractors.credentials import CredentialExtractor
from pagesift.extractors.emails import EmailExtractor
from pagesift.extractors.factory import ExtractorFactory
from pagesift.extractors.giftcodes import GiftCodeExtractor, clean_code
from pagesift.extractors.inventory import HtmlInventoryExtractor
from pagesift.extractors.links import LinkExtractor, resolve_url
from pagesift.extractors.secrets import SecretKeyExtractor
from pagesift.extractors.structured import StructuredDataExtractor

__all__ = [
    "BaseExtractor",
    "ResultCollector",
    "ExtractorFactory",
    "CredentialExtractor",
    "EmailExtractor",
    "GiftCodeExtractor",
    "HtmlInventoryExtractor",
    "LinkExtractor",
    "SecretKeyExtractor",
    "StructuredDataExtractor",
    "clean_code",
    "resolve_url",
]
