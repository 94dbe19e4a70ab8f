# context_dumper/core/rendering.py
"""
Reads one discovered file and wraps its text in start/end path markers.

The byte size of a rendered record is measured on the exact UTF-8 payload
that ends up in the dump, so chunk planning works on real output offsets.
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

import structlog

from context_dumper.core.binary import DEFAULT_SAMPLE_SIZE, is_binary_content
from context_dumper.core.discovery.walker import PathRecord

log = structlog.get_logger(__name__)

OUTPUT_ENCODING = "utf-8"

BinaryClassifier = Callable[[bytes], bool]


class SkipReason(Enum):
    BINARY = "binary"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class RenderedFile:
    relative_path: str
    text: str
    size: int

    @classmethod
    def from_content(cls, relative_path: str, content: str) -> "RenderedFile":
        text = format_file_block(relative_path, content)
        return cls(relative_path=relative_path, text=text, size=len(text.encode(OUTPUT_ENCODING)))


@dataclass(frozen=True)
class Skipped:
    relative_path: str
    reason: SkipReason
    detail: Optional[str] = None


RenderOutcome = Union[RenderedFile, Skipped]


def format_file_block(relative_path: str, content: str) -> str:
    # the trailing blank line belongs to the block.
    return f"--- START: {relative_path} ---\n{content}\n--- END: {relative_path} ---\n\n"


class FileRenderer:
    def __init__(self, is_binary: Optional[BinaryClassifier] = None, binary_sample_size: int = DEFAULT_SAMPLE_SIZE):
        if is_binary is None:
            def is_binary(data: bytes) -> bool:
                return is_binary_content(data, sample_size=binary_sample_size)
        self.is_binary = is_binary

    def render_path(self, absolute_path: Path, relative_path: str) -> RenderOutcome:
        try:
            data = absolute_path.read_bytes()
        except OSError as e:
            log.warning("file_read_error_skipped", path=str(absolute_path), error=str(e))
            return Skipped(relative_path, SkipReason.UNREADABLE, str(e))

        if self.is_binary(data):
            log.debug("skipping_binary_file", path=relative_path, raw_bytes=len(data))
            return Skipped(relative_path, SkipReason.BINARY)

        content = data.decode(OUTPUT_ENCODING, errors="replace")
        return RenderedFile.from_content(relative_path, content)

    def render(self, record: PathRecord) -> RenderOutcome:
        return self.render_path(record.absolute_path, record.relative_path)
