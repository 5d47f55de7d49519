"""
pagesift - Fetch a web page and extract findings from it.

Retrieves a page through a chain of relay and direct fetch strategies,
parses it, and extracts emails, links, structured content, a tag
inventory, credential fields, secrets/keys or gift-card codes.

Usage:
    pagesift https://example.com
    pagesift run https://example.com -m links -x links.txt
"""

__version__ = "0.1.0"

from pagesift.core.models import (
    ExtractionMode,
    FetchOutcome,
    Provenance,
    ResultRecord,
    RunConfig,
    RunProgress,
    RunResult,
    RunState,
    StrategyName,
)
from pagesift.core.interfaces import (
    Extractor,
    FetchStrategy,
    RunStore,
)

__all__ = [
    "__version__",
    # Models
    "ExtractionMode",
    "FetchOutcome",
    "Provenance",
    "ResultRecord",
    "RunConfig",
    "RunProgress",
    "RunResult",
    "RunState",
    "StrategyName",
    # Interfaces
    "Extractor",
    "FetchStrategy",
    "RunStore",
]
