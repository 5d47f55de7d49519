"""Pattern library for pagesift."""

from pagesift.patterns.library import DEFAULT_LIBRARY, PatternLibrary

__all__ = ["DEFAULT_LIBRARY", "PatternLibrary"]
