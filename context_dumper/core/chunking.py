# context_dumper/core/chunking.py
"""
Splits the ordered file blocks into ``total`` contiguous chunks.

The byte range of chunk ``index`` is ``[(index-1)*target, index*target)``
with ``target = ceil(total_bytes / total)``. A file belongs to the chunk in
which its first byte falls and is never split, so realised chunk sizes drift
from ``target``: one very large file can overfill its chunk and leave a later
chunk empty.
"""
import math
from dataclasses import dataclass
from typing import List, Sequence

import structlog

from context_dumper.core.rendering import RenderedFile
from context_dumper.exceptions import InvalidRequestError

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ChunkRequest:
    total: int = 1
    index: int = 1

    def __post_init__(self):
        for name in ("total", "index"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidRequestError(f"chunk {name} must be an integer, got {value!r}")
        if self.total < 1:
            raise InvalidRequestError(f"num_chunks must be at least 1, got {self.total}")
        if self.index < 1:
            raise InvalidRequestError(f"chunk_index must be at least 1, got {self.index}")
        if self.index > self.total:
            raise InvalidRequestError(
                f"chunk_index ({self.index}) cannot be greater than num_chunks ({self.total})"
            )

    @property
    def is_last(self) -> bool:
        return self.index == self.total


@dataclass(frozen=True)
class ChunkResult:
    text: str
    files_included: int
    bytes_included: int
    total_bytes: int
    target_chunk_bytes: int
    start_byte: int
    end_byte: int
    request: ChunkRequest


def plan_chunk(files: Sequence[RenderedFile], request: ChunkRequest) -> ChunkResult:
    total_bytes = sum(f.size for f in files)

    if request.total == 1:
        target, start_byte, end_byte = total_bytes, 0, total_bytes
        included: List[RenderedFile] = list(files)
        log.info("chunking_disabled", total_bytes=total_bytes)
    else:
        target = math.ceil(total_bytes / request.total)
        start_byte = (request.index - 1) * target
        end_byte = request.index * target
        log.info(
            "chunk_boundaries_computed",
            num_chunks=request.total,
            chunk_index=request.index,
            start_byte=start_byte,
            end_byte=min(end_byte, total_bytes),
            total_bytes=total_bytes,
        )

        included = []
        cursor = 0
        for rendered in files:
            if start_byte <= cursor < end_byte:
                included.append(rendered)
            cursor += rendered.size
            # everything further starts in a later chunk
            if cursor >= end_byte and not request.is_last:
                break

    return ChunkResult(
        text="".join(f.text for f in included),
        files_included=len(included),
        bytes_included=sum(f.size for f in included),
        total_bytes=total_bytes,
        target_chunk_bytes=target,
        start_byte=start_byte,
        end_byte=end_byte,
        request=request,
    )
