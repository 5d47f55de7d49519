"""Markup parsing for pagesift."""

from pagesift.parsing.tree import MarkupTree

__all__ = ["MarkupTree"]
