#!/usr/bin/env python3
"""rsync filter rules for filtered directory copies.

This module turns a base directory plus include/exclude sub-paths into the
ordered ``--filter`` rules that rsync evaluates first-match-wins:

- Excludes are emitted before includes, so an exclude always beats an include
  for the same tree, even a more specific include
- Every include is preceded by the directories leading to it, otherwise the
  trailing catch-all would reject those directories before rsync descends
- Each include covers both a file (``target``) and a directory (``target/**``)
- Allow-list mode ends with ``Exclude(base/**)``; deny-list mode has no catch-all

Example:
    >>> rules = build_rules("/src", ["app/config"], [])
    >>> [rule.render() for rule in rules]
    ['+/ /src', '+/ /src/app', '+/ /src/app/config', '+/ /src/app/config/**', '-/ /src/**']
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from stagecopy.core.constants import CATCH_ALL


class FilterSign(Enum):
    """Sign of a filter rule."""

    INCLUDE = "+"
    EXCLUDE = "-"


@dataclass(frozen=True)
class FilterRule:
    """A single anchored include/exclude rule."""

    sign: FilterSign
    pattern: str

    @classmethod
    def include(cls, pattern: str) -> "FilterRule":
        return cls(FilterSign.INCLUDE, pattern)

    @classmethod
    def exclude(cls, pattern: str) -> "FilterRule":
        return cls(FilterSign.EXCLUDE, pattern)

    def render(self) -> str:
        """Render as rsync filter text, e.g. ``+/ /src/app``.

        The ``/`` modifier makes rsync match the pattern against the absolute
        pathname of each file.
        """
        return f"{self.sign.value}/ {self.pattern}"

    def __str__(self) -> str:
        return self.render()


FilterRuleSet = Tuple[FilterRule, ...]


def _segments(path: str) -> List[str]:
    return [part for part in path.split("/") if part not in ("", ".")]


def join_path(base: str, *parts: str) -> str:
    """Join path parts onto base, collapsing separators at the junctions.

    Empty and ``.`` segments are dropped, so ``join_path("/src", ".")`` is
    ``"/src"``. A trailing ``/`` on the last part is kept, since rsync reads
    it as "directories only". Glob characters are kept verbatim.

    Args:
        base: Base directory (absolute or relative)
        *parts: Relative sub-paths or patterns

    Returns:
        Joined path
    """
    segments = [segment for part in parts for segment in _segments(part)]
    head = base.rstrip("/")
    trailing = "/" if segments and parts[-1].endswith("/") else ""

    if not head:
        # base is "/" (or empty)
        prefix = "/" if base.startswith("/") else ""
        return prefix + "/".join(segments) + trailing if segments else (prefix or ".")

    return "/".join([head] + segments) + trailing


def descend(base: str, path: str) -> List[str]:
    """Directories leading from base down to base/path, root to leaf.

    base itself comes first; base/path itself is not included. A path that
    addresses base (``""`` or ``"."``) has no ancestors.

    Args:
        base: Base directory
        path: Relative path under base

    Returns:
        Ancestor directories in descent order
    """
    segments = _segments(path)
    return [join_path(base, *segments[:depth]) for depth in range(len(segments))]


def build_rules(
    base: str, include_paths: Sequence[str], exclude_paths: Sequence[str]
) -> FilterRuleSet:
    """Build the ordered filter rules for copying base.

    Patterns are used as given: no deduplication, no reordering. Validation is
    the caller's job (see stagecopy.core.validators).

    Args:
        base: Directory being copied
        include_paths: Sub-paths to copy; empty means "everything"
        exclude_paths: Sub-paths to leave out

    Returns:
        Immutable ordered rule sequence (empty when both lists are empty)
    """
    rules: List[FilterRule] = [FilterRule.exclude(join_path(base, p)) for p in exclude_paths]

    if not include_paths:
        return tuple(rules)

    for p in include_paths:
        target = join_path(base, p)
        rules.extend(FilterRule.include(ancestor) for ancestor in descend(base, p))
        rules.append(FilterRule.include(target))
        rules.append(FilterRule.include(join_path(target, CATCH_ALL)))

    rules.append(FilterRule.exclude(join_path(base, CATCH_ALL)))
    return tuple(rules)


def render_rules(rules: Sequence[FilterRule]) -> List[str]:
    """Render rules as ``--filter=...`` command-line arguments."""
    return [f"--filter={rule.render()}" for rule in rules]
