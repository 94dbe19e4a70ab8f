# context_dumper/core/discovery/walker.py
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

import structlog

from context_dumper.config.settings import DEFAULT_EXCLUDES, DEFAULT_IGNORE_FILENAME
from context_dumper.core.discovery.rules import RuleSet, default_rule_set, derive_rule_set
from context_dumper.util import posix_relative_path


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class PathRecord:
    absolute_path: Path
    relative_path: str
    kind: EntryKind = EntryKind.FILE


class TreeWalker:
    """Depth-first, pre-order walk that honours nested ignore files.

    Siblings are visited in name order so the output is reproducible for a
    fixed tree. An excluded directory is pruned with everything below it.
    """

    def __init__(
        self,
        ignore_filename: str = DEFAULT_IGNORE_FILENAME,
        default_excludes: Optional[Iterable[str]] = None,
        follow_symlinks: bool = False,
    ):
        self.ignore_filename = ignore_filename
        self.default_excludes = list(DEFAULT_EXCLUDES if default_excludes is None else default_excludes)
        self.follow_symlinks = follow_symlinks
        self.directories_skipped = 0
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")

    def walk(self, root: Path) -> List[PathRecord]:
        # a failure to list root itself propagates; subdirectory failures do not.
        self.directories_skipped = 0
        records: List[PathRecord] = []
        self._walk_directory(root, root, default_rule_set(self.default_excludes), records)
        self.log.info(
            "path_discovery_finished",
            root=str(root),
            files_found=len(records),
            directories_skipped=self.directories_skipped,
        )
        return records

    def _walk_directory(self, directory: Path, root: Path, parent_rules: RuleSet, records: List[PathRecord]):
        rules = derive_rule_set(parent_rules, directory, self.ignore_filename)

        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)

        for entry in entries:
            is_dir = self._is_directory(entry)
            if rules.matches(entry.name, is_dir=is_dir):
                self.log.debug("entry_ignored", path=entry.path, is_dir=is_dir)
                continue

            entry_path = Path(entry.path)
            if is_dir:
                try:
                    self._walk_directory(entry_path, root, rules, records)
                except OSError as e:
                    self.directories_skipped += 1
                    self.log.warning("directory_listing_failed_skipped", path=entry.path, error=str(e))
            else:
                records.append(PathRecord(entry_path, posix_relative_path(entry_path, root), EntryKind.FILE))

    def _is_directory(self, entry: os.DirEntry) -> bool:
        try:
            return entry.is_dir(follow_symlinks=self.follow_symlinks)
        except OSError:
            return False
