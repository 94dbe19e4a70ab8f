# context_dumper/core/discovery/__init__.py
"""
Path discovery for context_dumper.

Walks a directory tree and returns the files that survive the cascading
ignore rules, in a stable depth-first order.
"""
from .rules import IgnoreRule, RuleSet, default_rule_set, derive_rule_set
from .walker import EntryKind, PathRecord, TreeWalker

__all__ = [
    "IgnoreRule",
    "RuleSet",
    "default_rule_set",
    "derive_rule_set",
    "EntryKind",
    "PathRecord",
    "TreeWalker",
]
