"""stagecopy Rules System.

Builds the ordered rsync filter rules that select which files of a directory
are copied:
- FilterRule / FilterSign: a single anchored include or exclude rule
- build_rules: include/exclude paths to an ordered rule sequence
"""

from .filters import (
    FilterRule,
    FilterRuleSet,
    FilterSign,
    build_rules,
    descend,
    join_path,
    render_rules,
)

__all__ = [
    "FilterSign",
    "FilterRule",
    "FilterRuleSet",
    "build_rules",
    "descend",
    "join_path",
    "render_rules",
]
