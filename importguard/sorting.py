"""Ordering of import directives: standard library first, then ordinal."""

from __future__ import annotations

from functools import cmp_to_key
from typing import TYPE_CHECKING

from .models import DirectiveSyntax

if TYPE_CHECKING:
    from .scanner import ImportDirective


def extract_reference_name(text: str, keyword: str = "using", terminator: str = ";") -> str:
    """In a directive like "using System.Threading.Tasks;", extract "System.Threading.Tasks".

    Returns an empty string when the text holds nothing but the keyword.
    """
    name = ""
    for token in text.split():
        if token == keyword:
            continue
        name = token
        break

    if terminator and name.endswith(terminator):
        name = name[: -len(terminator)]
    return name


def is_standard_library(name: str, root: str = "System") -> bool:
    return name == root or name.startswith(root + ".")


def compare(a: str, b: str, root: str = "System") -> int:
    a_std = is_standard_library(a, root)
    b_std = is_standard_library(b, root)
    if a_std and not b_std:
        return -1
    if b_std and not a_std:
        return 1
    return (a > b) - (a < b)


class DirectiveSorter:
    def __init__(self, syntax: DirectiveSyntax | None = None):
        self.syntax = syntax or DirectiveSyntax()

    def extract_reference_name(self, text: str) -> str:
        return extract_reference_name(text, self.syntax.keyword, self.syntax.terminator)

    def is_standard_library(self, name: str) -> bool:
        return is_standard_library(name, self.syntax.standard_library_root)

    def compare(self, a: str, b: str) -> int:
        return compare(a, b, self.syntax.standard_library_root)

    def sort(self, directives: list[ImportDirective]) -> list[ImportDirective]:
        """Return directives ordered by reference name; ties keep their input order."""
        names = {id(d): self.extract_reference_name(d.text) for d in directives}
        key = cmp_to_key(self.compare)
        return sorted(directives, key=lambda d: key(names[id(d)]))
