# tests/test_rules.py
"""Tests for ignore-rule parsing and cascading rule sets."""

from pathlib import Path
from unittest.mock import patch

import pathspec
import pytest

from context_dumper.core.discovery.rules import (
    IgnoreRule,
    RuleSet,
    default_rule_set,
    derive_rule_set,
    parse_ignore_lines,
)


class TestIgnoreRuleParsing:
    def test_blank_and_comment_lines_are_dropped(self):
        assert IgnoreRule.parse("") is None
        assert IgnoreRule.parse("   ") is None
        assert IgnoreRule.parse("# a comment") is None

    def test_negation_and_directory_only_flags(self):
        rule = IgnoreRule.parse("!build/")
        assert rule.negated is True
        assert rule.directory_only is True
        assert rule.pattern == "!build/"

        plain = IgnoreRule.parse("*.log")
        assert plain.negated is False
        assert plain.directory_only is False

    def test_escaped_leading_characters_are_literal(self):
        assert IgnoreRule.parse("\\!important").negated is False
        assert IgnoreRule.parse("\\#hash") is not None

    def test_trailing_whitespace_is_stripped_unless_escaped(self):
        assert IgnoreRule.parse("*.tmp   \n").pattern == "*.tmp"
        assert IgnoreRule.parse("name\\ ").pattern == "name\\ "

    def test_parse_ignore_lines_keeps_order(self):
        rules = parse_ignore_lines(["a", "# skip", "", "!b", "c/"])
        assert [r.pattern for r in rules] == ["a", "!b", "c/"]


class TestRuleSetMatching:
    def test_default_rule_set_excludes_git_directory(self):
        rules = default_rule_set([".git"])
        assert rules.matches(".git", is_dir=True)
        assert not rules.matches(".github", is_dir=True)
        assert not rules.matches("src", is_dir=True)

    def test_last_matching_pattern_wins(self):
        rules = RuleSet(rules=tuple(parse_ignore_lines(["*.log", "!keep.log"])))
        assert rules.matches("debug.log")
        assert not rules.matches("keep.log")

    def test_directory_only_pattern_never_matches_files(self):
        rules = RuleSet(rules=tuple(parse_ignore_lines(["build/"])))
        assert rules.matches("build", is_dir=True)
        assert not rules.matches("build", is_dir=False)

    def test_plain_pattern_matches_files_and_directories(self):
        rules = RuleSet(rules=tuple(parse_ignore_lines(["node_modules"])))
        assert rules.matches("node_modules", is_dir=True)
        assert rules.matches("node_modules", is_dir=False)

    def test_child_patterns_are_evaluated_after_parent_patterns(self):
        parent = RuleSet(rules=tuple(parse_ignore_lines(["*.txt"])))
        child = parent.extend(parse_ignore_lines(["!notes.txt"]))

        assert child.patterns == ["*.txt", "!notes.txt"]
        assert parent.matches("notes.txt")
        assert not child.matches("notes.txt")
        assert child.matches("other.txt")

    def test_parent_can_not_override_child(self):
        parent = RuleSet(rules=tuple(parse_ignore_lines(["!*.md"])))
        child = parent.extend(parse_ignore_lines(["README.md"]))
        assert child.matches("README.md")
        assert not parent.matches("README.md")


class TestDeriveRuleSet:
    def test_without_ignore_file_returns_parent_object(self, tmp_path: Path):
        parent = default_rule_set([".git"])
        assert derive_rule_set(parent, tmp_path) is parent

    def test_loads_ignore_file_on_top_of_parent(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("# generated\n*.pyc\ndist/\n")
        parent = default_rule_set([".git"])

        child = derive_rule_set(parent, tmp_path)

        assert child.parent is parent
        assert child.patterns == [".git", "*.pyc", "dist/"]
        assert all(rule.source == tmp_path / ".gitignore" for rule in child.rules)
        assert child.matches("module.pyc")
        assert child.matches("dist", is_dir=True)

    def test_custom_ignore_filename(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("*.md\n")
        (tmp_path / ".dumpignore").write_text("*.txt\n")
        child = derive_rule_set(RuleSet(), tmp_path, ignore_filename=".dumpignore")
        assert child.matches("a.txt")
        assert not child.matches("a.md")

    def test_comment_only_file_returns_parent(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("# nothing here\n\n")
        parent = RuleSet()
        assert derive_rule_set(parent, tmp_path) is parent

    def test_undecodable_ignore_file_falls_back_to_parent(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_bytes(b"\xff\xfe\x00bad")
        parent = default_rule_set([".git"])
        assert derive_rule_set(parent, tmp_path) is parent

    def test_unreadable_ignore_file_falls_back_to_parent(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("*.txt\n")
        parent = default_rule_set([".git"])
        with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
            assert derive_rule_set(parent, tmp_path) is parent

    def test_ignore_path_that_is_a_directory_is_ignored(self, tmp_path: Path):
        (tmp_path / ".gitignore").mkdir()
        parent = RuleSet()
        assert derive_rule_set(parent, tmp_path) is parent

    def test_uncompilable_patterns_fall_back_to_parent(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("*.txt\n")
        parent = RuleSet()
        with patch.object(pathspec.PathSpec, "from_lines", side_effect=ValueError("invalid git pattern")):
            assert derive_rule_set(parent, tmp_path) is parent


@pytest.mark.parametrize("name,is_dir,expected", [
    (".git", True, True),
    ("app.log", False, True),
    ("keep.log", False, False),
    ("cache", True, True),
    ("cache", False, False),
])
def test_combined_rules(name, is_dir, expected):
    rules = default_rule_set([".git"]).extend(parse_ignore_lines(["*.log", "!keep.log", "cache/"]))
    assert rules.matches(name, is_dir=is_dir) is expected
