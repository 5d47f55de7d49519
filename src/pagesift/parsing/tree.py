"""Markup tree built with BeautifulSoup.

Wraps a BeautifulSoup document with the handful of queries the
extractors need. The html.parser backend never raises on ill-formed
markup, so every body produces a tree.
"""

import re
from typing import Callable, Iterable, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

# Elements counted towards the estimated number of findings.
CONTENT_TAGS = [
    "a",
    "p",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "img",
    "input",
    "form",
    "script",
]

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

_WHITESPACE = re.compile(r"\s+")


class MarkupTree:
    """Navigable element tree over a fetched body."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    @classmethod
    def parse(cls, body: str) -> "MarkupTree":
        """Parse raw markup into a tree.

        Args:
            body: Raw markup, possibly malformed or empty.

        Returns:
            Best-effort tree.
        """
        return cls(BeautifulSoup(body or "", "html.parser"))

    @property
    def soup(self) -> BeautifulSoup:
        return self._soup

    @property
    def title(self) -> Optional[str]:
        """Document title with whitespace collapsed, if any."""
        if self._soup.title is None:
            return None
        return _WHITESPACE.sub(" ", self._soup.title.get_text()).strip() or None

    def select(self, tags: Union[str, list[str]], scope: Optional[Tag] = None) -> list[Tag]:
        """Return all elements with the given tag name(s) in document order."""
        root = scope if scope is not None else self._soup
        return list(root.find_all(tags))

    def select_where(
        self,
        predicate: Callable[[Tag], bool],
        tags: Union[str, list[str], bool] = True,
    ) -> list[Tag]:
        """Return elements matching ``predicate``, optionally limited by tag."""
        return [el for el in self._soup.find_all(tags) if predicate(el)]

    def with_attr_prefix(self, tag: str, attr: str, prefix: str) -> list[Tag]:
        """Elements whose attribute starts with ``prefix`` (case-insensitive)."""
        prefix = prefix.lower()
        return self.select_where(
            lambda el: self.attr(el, attr).lower().startswith(prefix), tag
        )

    def with_attr_containing(
        self, tag: str, attrs: Iterable[str], needles: Iterable[str]
    ) -> list[Tag]:
        """Elements where any of ``attrs`` contains any of ``needles``."""
        attrs = list(attrs)
        needles = [n.lower() for n in needles]

        def matches(el: Tag) -> bool:
            for name in attrs:
                value = self.attr(el, name).lower()
                if value and any(n in value for n in needles):
                    return True
            return False

        return self.select_where(matches, tag)

    def with_data_attributes(self) -> list[Tag]:
        """Elements carrying at least one ``data-*`` attribute."""
        return self.select_where(
            lambda el: any(name.startswith("data-") for name in el.attrs)
        )

    @staticmethod
    def attr(element: Tag, name: str) -> str:
        """Read an attribute as a string, empty when absent."""
        value = element.get(name)
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @staticmethod
    def data_attributes(element: Tag) -> list[tuple[str, str]]:
        return [
            (name, MarkupTree.attr(element, name))
            for name in element.attrs
            if name.startswith("data-")
        ]

    def text(self, element: Optional[Tag] = None) -> str:
        """Trimmed text content of an element or of the whole document.

        Script and style bodies are not part of the text.
        """
        root = element if element is not None else self._soup
        return root.get_text(" ", strip=True)

    @staticmethod
    def inline_text(element: Tag) -> str:
        """Text of an element with runs of whitespace collapsed."""
        return _WHITESPACE.sub(" ", element.get_text(" ", strip=True)).strip()

    @staticmethod
    def script_body(element: Tag) -> str:
        return element.string or ""

    def count_content_elements(self) -> int:
        """Number of links, paragraphs, headings, images, inputs, forms and scripts."""
        return len(self._soup.find_all(CONTENT_TAGS))
