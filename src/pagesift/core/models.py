"""Data models for pagesift."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

SECRET_DISPLAY_LIMIT = 100


class ExtractionMode(Enum):
    """Which extractor a run uses."""

    EMAIL = "email"
    LINK = "links"
    STRUCTURED_DATA = "data"
    HTML_INVENTORY = "html"
    CREDENTIAL = "credentials"
    SECRET_KEY = "keys"
    GIFT_CODE = "giftcodes"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @property
    def deduplicated(self) -> bool:
        """Positional modes keep every record."""
        return self not in (
            ExtractionMode.STRUCTURED_DATA,
            ExtractionMode.HTML_INVENTORY,
        )


_MODE_LABELS = {
    ExtractionMode.EMAIL: "Email extraction",
    ExtractionMode.LINK: "Link extraction",
    ExtractionMode.STRUCTURED_DATA: "Structured data",
    ExtractionMode.HTML_INVENTORY: "HTML inventory",
    ExtractionMode.CREDENTIAL: "Credential fields",
    ExtractionMode.SECRET_KEY: "Secrets and keys",
    ExtractionMode.GIFT_CODE: "Gift cards and vouchers",
}


class Provenance(Enum):
    """Where in the document a finding was located."""

    TEXT = "text"
    LINK = "link"
    META = "meta"
    SCRIPT = "script"
    INPUT_FIELD = "input"
    FORM = "form"
    IMAGE = "image"
    DATA_ATTRIBUTE = "data-attribute"


class StrategyName(Enum):
    """Retrieval strategies, in default chain order."""

    PROXY_A = "proxyA"
    PROXY_B = "proxyB"
    PROXY_C = "proxyC"
    DIRECT = "direct"


class RunState(Enum):
    """States of the run coordinator."""

    IDLE = "idle"
    FETCHING = "fetching"
    FETCHING_FALLBACK = "fetching_fallback"
    PARSING = "parsing"
    EXTRACTING = "extracting"
    COMPLETED = "completed"
    STOPPED = "stopped"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (RunState.COMPLETED, RunState.STOPPED, RunState.FAILED)


class ErrorKind(Enum):
    """Failure categories reported by the fetcher and the coordinator."""

    INVALID_INPUT = "invalid_input"
    HTTP_STATUS = "http_status"
    TIMEOUT = "timeout"
    NETWORK = "network"
    MALFORMED_BODY = "malformed_body"
    FETCH_EXHAUSTED = "fetch_exhausted"
    PARSE_DEGRADED = "parse_degraded"
    CANCELLED = "cancelled"
    INTERNAL = "internal"


class LinkKind(Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


class CredentialKind(Enum):
    LOGIN_FIELD = "login_field"
    PASSWORD_FIELD = "password_field"
    AUTH_FORM = "auth_form"
    TEXT_MATCH = "text_match"


class FormKind(Enum):
    """Classification of a form by the inputs it contains."""

    LOGIN_AND_PASSWORD = "login+password"
    PASSWORD_ONLY = "password only"
    LOGIN_ONLY = "login only"


@dataclass
class RunConfig:
    """Configuration for a run."""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    proxy_url: Optional[str] = None
    use_relays: bool = True
    enable_fallback: bool = True
    tick_interval: float = 1.0
    verbose: bool = False


@dataclass(frozen=True)
class FetchOutcome:
    """Result of resolving a URL through the strategy chain."""

    succeeded: bool
    body: str = ""
    strategy_used: Optional[StrategyName] = None
    page_title: Optional[str] = None
    error: Optional[ErrorKind] = None
    error_message: Optional[str] = None


@dataclass(frozen=True)
class PatternRule:
    """A named regular expression in the pattern library."""

    label: str
    regex: re.Pattern
    group: Optional[str] = None

    def values(self, text: str) -> list[str]:
        """Return every match in ``text``.

        The first capture group is returned when the pattern has one,
        otherwise the whole match.
        """
        if not text:
            return []
        found = []
        for match in self.regex.finditer(text):
            value = match.group(1) if self.regex.groups else match.group(0)
            if value:
                found.append(value)
        return found


class ResultRecord:
    """Base class for the per-mode result variants."""

    mode: ClassVar[ExtractionMode]
    record_type: ClassVar[str]

    @property
    def identity_key(self) -> Optional[str]:
        """Key used for deduplication, None for positional records."""
        return None

    def row(self) -> tuple[str, str]:
        """Return the (title, content) pair for this record."""
        raise NotImplementedError

    def display(self) -> str:
        """One-line text form used for copy and plain-text export."""
        return self.row()[1]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a flat row for JSON serialization."""
        title, content = self.row()
        source = getattr(self, "source", None)
        return {
            "type": self.record_type,
            "title": title,
            "content": content,
            "source": source.value if source else None,
        }


@dataclass(frozen=True)
class EmailRecord(ResultRecord):
    email: str
    source: Provenance = Provenance.TEXT

    mode: ClassVar[ExtractionMode] = ExtractionMode.EMAIL
    record_type: ClassVar[str] = "email"

    @property
    def identity_key(self) -> str:
        return self.email.lower()

    def row(self) -> tuple[str, str]:
        return "Email", self.email


@dataclass(frozen=True)
class LinkRecord(ResultRecord):
    url: str
    text: str = ""
    kind: LinkKind = LinkKind.INTERNAL
    source: Provenance = Provenance.LINK

    mode: ClassVar[ExtractionMode] = ExtractionMode.LINK
    record_type: ClassVar[str] = "link"

    @property
    def identity_key(self) -> str:
        return self.url

    def row(self) -> tuple[str, str]:
        return self.text or "Link", self.url


@dataclass(frozen=True)
class StructuredRecord(ResultRecord):
    title: str
    content: str
    source: Provenance = Provenance.TEXT

    mode: ClassVar[ExtractionMode] = ExtractionMode.STRUCTURED_DATA
    record_type: ClassVar[str] = "data"

    def row(self) -> tuple[str, str]:
        return self.title, self.content

    def display(self) -> str:
        return f"{self.title}: {self.content}"


@dataclass(frozen=True)
class InventoryRecord(ResultRecord):
    tag: str
    content: str
    source: Provenance = Provenance.TEXT

    mode: ClassVar[ExtractionMode] = ExtractionMode.HTML_INVENTORY
    record_type: ClassVar[str] = "html"

    def row(self) -> tuple[str, str]:
        return self.tag, self.content


@dataclass(frozen=True)
class CredentialRecord(ResultRecord):
    kind: CredentialKind
    key: str
    name: str = ""
    element_id: str = ""
    field_type: str = ""
    value: str = ""
    form_kind: Optional[FormKind] = None
    source: Provenance = Provenance.INPUT_FIELD

    mode: ClassVar[ExtractionMode] = ExtractionMode.CREDENTIAL
    record_type: ClassVar[str] = "credential"

    @property
    def identity_key(self) -> str:
        return self.key

    def row(self) -> tuple[str, str]:
        if self.kind == CredentialKind.AUTH_FORM:
            return "Auth form", f"{self.form_kind.value} ({self.value or '-'})"
        if self.kind == CredentialKind.TEXT_MATCH:
            return "Text match", self.value
        title = (
            "Login field"
            if self.kind == CredentialKind.LOGIN_FIELD
            else "Password field"
        )
        label = self.name or self.element_id or "(unnamed)"
        return title, f"{label} [type={self.field_type}]"


@dataclass(frozen=True)
class SecretRecord(ResultRecord):
    label: str
    full_value: str
    source: Provenance = Provenance.TEXT

    mode: ClassVar[ExtractionMode] = ExtractionMode.SECRET_KEY
    record_type: ClassVar[str] = "secret"

    @property
    def value(self) -> str:
        """Display form, truncated for long matches."""
        if len(self.full_value) > SECRET_DISPLAY_LIMIT:
            return self.full_value[:SECRET_DISPLAY_LIMIT] + "..."
        return self.full_value

    @property
    def truncated(self) -> bool:
        return len(self.full_value) > SECRET_DISPLAY_LIMIT

    @property
    def identity_key(self) -> str:
        return self.full_value

    def row(self) -> tuple[str, str]:
        return self.label, self.value

    def display(self) -> str:
        return self.full_value

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["full_value"] = self.full_value
        return data


@dataclass(frozen=True)
class GiftCodeRecord(ResultRecord):
    label: str
    code: str
    source: Provenance = Provenance.TEXT

    mode: ClassVar[ExtractionMode] = ExtractionMode.GIFT_CODE
    record_type: ClassVar[str] = "giftcode"

    @property
    def identity_key(self) -> str:
        return self.code

    def row(self) -> tuple[str, str]:
        return self.label, self.code


@dataclass
class RunProgress:
    """Mutable progress state of the active run."""

    elapsed_seconds: int = 0
    found_count: int = 0
    estimated_total: Optional[int] = None
    log_lines: list[str] = field(default_factory=list)
    active_strategy: Optional[StrategyName] = None

    @property
    def percentage(self) -> Optional[float]:
        """Fraction of the estimate reached, capped at 1.0."""
        if not self.estimated_total:
            return None
        return min(self.found_count / self.estimated_total, 1.0)


@dataclass
class RunResult:
    """Terminal outcome of a run, handed to the caller."""

    url: str
    mode: ExtractionMode
    state: RunState
    records: list[ResultRecord] = field(default_factory=list)
    progress: RunProgress = field(default_factory=RunProgress)
    outcome: Optional[FetchOutcome] = None
    used_fallback: bool = False
    error: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state == RunState.COMPLETED
