# context_dumper/core/discovery/rules.py
"""
Cascading ignore rules.

Each directory that carries an ignore file gets its own ``RuleSet`` whose
parent is the rule set of the enclosing directory. Matching always runs the
full root-to-leaf pattern list through pathspec, so the last matching pattern
wins and a deeper ``!pattern`` can re-include what an ancestor excluded.
"""
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pathspec
import structlog

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class IgnoreRule:
    """One pattern line from an ignore file."""

    pattern: str
    negated: bool = False
    directory_only: bool = False
    source: Optional[Path] = None

    @classmethod
    def parse(cls, line: str, source: Optional[Path] = None) -> Optional["IgnoreRule"]:
        # returns None for blank lines and comments.
        text = line.rstrip("\r\n")
        # trailing spaces are dropped unless escaped with a backslash.
        while text.endswith(" ") and not text.endswith("\\ "):
            text = text[:-1]
        if not text or text.startswith("#"):
            return None
        negated = text.startswith("!")
        body = text[1:] if negated else text
        directory_only = len(body) > 1 and body.endswith("/")
        return cls(pattern=text, negated=negated, directory_only=directory_only, source=source)


@dataclass(frozen=True)
class RuleSet:
    """Ignore rules active at one directory, linked to the rules above it."""

    rules: Tuple[IgnoreRule, ...] = ()
    parent: Optional["RuleSet"] = None

    def lineage(self) -> Tuple[IgnoreRule, ...]:
        # every rule from the root down to this level, in evaluation order.
        chain: List["RuleSet"] = []
        node: Optional[RuleSet] = self
        while node is not None:
            chain.append(node)
            node = node.parent
        ordered: List[IgnoreRule] = []
        for level in reversed(chain):
            ordered.extend(level.rules)
        return tuple(ordered)

    @property
    def patterns(self) -> List[str]:
        return [rule.pattern for rule in self.lineage()]

    @cached_property
    def spec(self) -> pathspec.PathSpec:
        return pathspec.PathSpec.from_lines("gitwildmatch", self.patterns)

    def extend(self, rules: Iterable[IgnoreRule]) -> "RuleSet":
        return RuleSet(rules=tuple(rules), parent=self)

    def matches(self, name: str, is_dir: bool = False) -> bool:
        """Check an entry name, relative to its containing directory.

        Directories are tested with a trailing slash so that directory-only
        patterns such as ``build/`` never exclude a file called ``build``.
        """
        candidate = f"{name}/" if is_dir else name
        return self.spec.match_file(candidate)


def parse_ignore_lines(lines: Iterable[str], source: Optional[Path] = None) -> List[IgnoreRule]:
    parsed = (IgnoreRule.parse(line, source) for line in lines)
    return [rule for rule in parsed if rule is not None]


def default_rule_set(default_excludes: Iterable[str]) -> RuleSet:
    # synthetic top-level rules layered beneath every ignore file.
    return RuleSet(rules=tuple(parse_ignore_lines(default_excludes)))


def derive_rule_set(parent: RuleSet, directory: Path, ignore_filename: str = ".gitignore") -> RuleSet:
    """Return the rule set in effect inside ``directory``.

    Without an ignore file the parent is returned as-is. An ignore file that
    cannot be read, decoded or compiled is logged and skipped.
    """
    ignore_file = directory / ignore_filename
    try:
        content = ignore_file.read_text(encoding="utf-8")
    except FileNotFoundError:
        return parent
    except (OSError, UnicodeDecodeError) as e:
        if ignore_file.is_dir():
            log.debug("ignore_path_is_a_directory", path=str(ignore_file))
        else:
            log.warning("failed_to_read_ignore_file", path=str(ignore_file), error=str(e))
        return parent

    rules = parse_ignore_lines(content.splitlines(), source=ignore_file)
    if not rules:
        log.debug("ignore_file_has_no_rules", path=str(ignore_file))
        return parent

    child = parent.extend(rules)
    try:
        # compile now so a bad pattern is attributed to the file that holds it.
        child.spec
    except ValueError as e:
        log.warning("failed_to_parse_ignore_file", path=str(ignore_file), error=str(e))
        return parent

    log.debug("ignore_file_loaded", path=str(ignore_file), rules_added=len(rules))
    return child
