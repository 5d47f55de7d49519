"""Core models, errors and interfaces for pagesift."""

from pagesift.core.models import (
    ErrorKind,
    ExtractionMode,
    FetchOutcome,
    PatternRule,
    Provenance,
    ResultRecord,
    RunConfig,
    RunProgress,
    RunResult,
    RunState,
    StrategyName,
)
from pagesift.core.errors import (
    FetchExhaustedError,
    InvalidInputError,
    MalformedResponseError,
    PageSiftError,
    RunCancelledError,
    RunInProgressError,
)
from pagesift.core.interfaces import (
    Extractor,
    FetchStrategy,
    RunStore,
)

__all__ = [
    "ErrorKind",
    "ExtractionMode",
    "FetchOutcome",
    "PatternRule",
    "Provenance",
    "ResultRecord",
    "RunConfig",
    "RunProgress",
    "RunResult",
    "RunState",
    "StrategyName",
    "FetchExhaustedError",
    "InvalidInputError",
    "MalformedResponseError",
    "PageSiftError",
    "RunCancelledError",
    "RunInProgressError",
    "Extractor",
    "FetchStrategy",
    "RunStore",
]
