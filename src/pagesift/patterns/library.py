"""Catalog of named regular expressions, grouped by extraction mode.

Rules are compiled once at import time and shared read-only by every
run. Rule order is the order in which extractors apply them.
"""

import re
from typing import Optional

from pagesift.core.models import ExtractionMode, PatternRule

# Rule groups
FIELD_LOGIN = "field:login"
FIELD_PASSWORD = "field:password"
FREE_TEXT = "text"
PHRASE = "phrase"
TOKEN = "token"
PEM = "pem"
VENDOR = "vendor"
LABELED = "labeled"
SHAPE = "shape"

# A code token must contain at least one digit.
_CODE = r"((?=[A-Za-z0-9\-]*\d)[A-Za-z0-9][A-Za-z0-9\-]{3,})"
_SEP = r"\s*(?i:code|number|no\.?|код|номер)?\s*[:#=\-]?\s*"


def _rule(label: str, pattern: str, group: Optional[str] = None, flags: int = 0) -> PatternRule:
    return PatternRule(label=label, regex=re.compile(pattern, flags), group=group)


def _labeled(label: str, phrase: str) -> PatternRule:
    return _rule(label, rf"(?i:{phrase}){_SEP}{_CODE}", LABELED)


def _pem(label: str, kind: str) -> PatternRule:
    return _rule(
        label,
        rf"-----BEGIN {kind}-----[\s\S]+?-----END {kind}-----",
        PEM,
    )


EMAIL_RULES = (
    _rule("Email address", r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
)

STRUCTURED_RULES = (
    _rule(
        "Phone",
        r"(?:\+7|8)?[\s\-]?\(?[489][0-9]{2}\)?[\s\-]?[0-9]{3}[\s\-]?[0-9]{2}[\s\-]?[0-9]{2}",
    ),
    _rule("Price", r"\d+[\s,]?\d*\s?(?:руб(?:лей|ля|ль)?|₽)", flags=re.IGNORECASE),
)

CREDENTIAL_RULES = (
    _rule("Login field", r"login|user|email", FIELD_LOGIN, re.IGNORECASE),
    _rule("Password field", r"pass", FIELD_PASSWORD, re.IGNORECASE),
    _rule(
        "Login phrase",
        r"\b(?:username|login|user|email)\s*[:=]\s*([^\s,;<>\"']+)",
        FREE_TEXT,
        re.IGNORECASE,
    ),
    _rule(
        "Login phrase (ru)",
        r"(?:логин|имя пользователя|пользователь|эл\.?\s?почта|почта)\s*[:=]\s*([^\s,;<>\"']+)",
        FREE_TEXT,
        re.IGNORECASE,
    ),
)

SECRET_RULES = (
    _rule("API Key", r"api[_\-\s]?key[\"'\s]*[:=][\"'\s]*[A-Za-z0-9_\-]{16,}", PHRASE, re.IGNORECASE),
    _rule(
        "Access Token",
        r"access[_\-\s]?token[\"'\s]*[:=][\"'\s]*[A-Za-z0-9_\-\.]{16,}",
        PHRASE,
        re.IGNORECASE,
    ),
    _rule(
        "Secret Key",
        r"secret[_\-\s]?key[\"'\s]*[:=][\"'\s]*[A-Za-z0-9_\-]{16,}",
        PHRASE,
        re.IGNORECASE,
    ),
    _rule("JWT", r"\beyJ[A-Za-z0-9_\-]+\.eyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+", TOKEN),
    _rule("Bearer Token", r"Bearer\s+[A-Za-z0-9\-._~+/]{20,}=*", TOKEN),
    _pem("Private Key", r"(?:RSA |EC |DSA |OPENSSH |ENCRYPTED )?PRIVATE KEY"),
    _pem("Public Key", r"(?:RSA )?PUBLIC KEY"),
    _pem("Certificate", r"CERTIFICATE"),
    _rule("AWS Access Key", r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b", VENDOR),
    _rule("GitHub Token", r"\bghp_[A-Za-z0-9]{36}\b", VENDOR),
    _rule("Google API Key", r"\bAIza[0-9A-Za-z\-_]{35}\b", VENDOR),
)

GIFT_CODE_RULES = (
    _labeled("Gift card", r"gift\s*card|подарочн\w*\s+карт\w*|подарочный\s+сертификат"),
    _labeled("Promo code", r"promo\s*code|промо\s*код|промокод"),
    _labeled("Discount code", r"discount\s*code|код\s+скидки"),
    _labeled("Coupon", r"coupon(?:\s*code)?|купон"),
    _labeled("Voucher", r"voucher(?:\s*code)?|ваучер"),
    _labeled("Redeem code", r"redeem\s*code|redemption\s*code|код\s+активации"),
    _rule("5x5x5 code", r"\b[A-Z0-9]{5}-[A-Z0-9]{5}-[A-Z0-9]{5}\b", SHAPE),
    _rule("13-char code", r"\b(?=[A-Z]*\d)(?=\d*[A-Z])[A-Z0-9]{4}[A-Z0-9]{4}[A-Z0-9]{4}[A-Z0-9]\b", SHAPE),
    _rule("4x4x4x4 code", r"\b[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}\b", SHAPE),
    _rule("4-6-4 code", r"\b[A-Z0-9]{4}-[A-Z0-9]{6}-[A-Z0-9]{4}\b", SHAPE),
)


class PatternLibrary:
    """Read-only catalog of pattern rules."""

    _RULES: dict[ExtractionMode, tuple[PatternRule, ...]] = {
        ExtractionMode.EMAIL: EMAIL_RULES,
        ExtractionMode.STRUCTURED_DATA: STRUCTURED_RULES,
        ExtractionMode.CREDENTIAL: CREDENTIAL_RULES,
        ExtractionMode.SECRET_KEY: SECRET_RULES,
        ExtractionMode.GIFT_CODE: GIFT_CODE_RULES,
    }

    def rules_for(
        self, mode: ExtractionMode, group: Optional[str] = None
    ) -> tuple[PatternRule, ...]:
        """Return the ordered rules for a mode.

        Args:
            mode: Extraction mode.
            group: Only return rules of this group.

        Returns:
            Rules in application order; empty for modes without patterns.
        """
        rules = self._RULES.get(mode, ())
        if group is not None:
            rules = tuple(r for r in rules if r.group == group)
        return rules

    def rule(self, mode: ExtractionMode, label: str) -> PatternRule:
        for rule in self._RULES.get(mode, ()):
            if rule.label == label:
                return rule
        raise KeyError(f"No rule {label!r} for mode {mode.value}")

    def modes(self) -> list[ExtractionMode]:
        return list(self._RULES)


DEFAULT_LIBRARY = PatternLibrary()
