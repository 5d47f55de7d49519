"""Credential field discovery: login inputs, password inputs and auth forms."""

import re
from typing import Optional

from bs4.element import Tag

from pagesift.core.models import (
    CredentialKind,
    CredentialRecord,
    ExtractionMode,
    FormKind,
    Provenance,
)
from pagesift.extractors.base import BaseExtractor, ResultCollector
from pagesift.parsing.tree import MarkupTree
from pagesift.patterns.library import FIELD_LOGIN, FIELD_PASSWORD, FREE_TEXT

LOGIN_TYPES = ("text", "email")


class CredentialExtractor(BaseExtractor):
    """Finds login-like and password-like fields and the forms holding them."""

    @property
    def mode(self) -> ExtractionMode:
        return ExtractionMode.CREDENTIAL

    def _collect(
        self,
        tree: MarkupTree,
        raw_text: str,
        base_url: Optional[str],
        collector: ResultCollector,
    ) -> None:
        login_rule = self._library.rules_for(self.mode, FIELD_LOGIN)[0]
        password_rule = self._library.rules_for(self.mode, FIELD_PASSWORD)[0]

        collector.log("Searching for login and password fields...")
        for index, field in enumerate(tree.select("input")):
            kind = self._classify(tree, field, login_rule.regex, password_rule.regex)
            if kind is None:
                continue
            name = tree.attr(field, "name")
            element_id = tree.attr(field, "id")
            collector.add(
                CredentialRecord(
                    kind=kind,
                    key=f"{kind.value}:{name}:{element_id}:{index}",
                    name=name,
                    element_id=element_id,
                    field_type=self._field_type(tree, field),
                    value=tree.attr(field, "placeholder"),
                    source=Provenance.INPUT_FIELD,
                )
            )

        for index, form in enumerate(tree.select("form")):
            kinds = {
                self._classify(tree, field, login_rule.regex, password_rule.regex)
                for field in tree.select("input", form)
            }
            has_password = CredentialKind.PASSWORD_FIELD in kinds
            has_login = CredentialKind.LOGIN_FIELD in kinds
            if not (has_password or has_login):
                continue

            if has_password and has_login:
                form_kind = FormKind.LOGIN_AND_PASSWORD
            elif has_password:
                form_kind = FormKind.PASSWORD_ONLY
            else:
                form_kind = FormKind.LOGIN_ONLY

            action = tree.attr(form, "action")
            element_id = tree.attr(form, "id")
            collector.add(
                CredentialRecord(
                    kind=CredentialKind.AUTH_FORM,
                    key=f"form:{tree.attr(form, 'name')}:{element_id}:{index}",
                    name=tree.attr(form, "name"),
                    element_id=element_id,
                    value=action,
                    form_kind=form_kind,
                    source=Provenance.FORM,
                )
            )

        page_text = tree.text()
        for rule in self._library.rules_for(self.mode, FREE_TEXT):
            for match in rule.regex.finditer(page_text):
                literal = match.group(0)
                collector.add(
                    CredentialRecord(
                        kind=CredentialKind.TEXT_MATCH,
                        key=literal,
                        value=literal,
                        source=Provenance.TEXT,
                    )
                )

        collector.log(f"Found {len(collector)} credential findings")

    @staticmethod
    def _field_type(tree: MarkupTree, field: Tag) -> str:
        return (tree.attr(field, "type") or "text").strip().lower()

    def _classify(
        self,
        tree: MarkupTree,
        field: Tag,
        login_regex: re.Pattern,
        password_regex: re.Pattern,
    ) -> Optional[CredentialKind]:
        field_type = self._field_type(tree, field)
        names = f"{tree.attr(field, 'name')} {tree.attr(field, 'id')}"

        if field_type == "password":
            return CredentialKind.PASSWORD_FIELD
        if password_regex.search(names):
            return CredentialKind.PASSWORD_FIELD
        if field_type in LOGIN_TYPES or login_regex.search(names):
            return CredentialKind.LOGIN_FIELD
        return None
