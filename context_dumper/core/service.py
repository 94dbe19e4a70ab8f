# context_dumper/core/service.py
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional

import structlog

from context_dumper.config.settings import DumperConfig
from context_dumper.core.chunking import ChunkRequest, ChunkResult, plan_chunk
from context_dumper.core.discovery.walker import TreeWalker
from context_dumper.core.rendering import BinaryClassifier, FileRenderer, RenderedFile, SkipReason
from context_dumper.exceptions import ContextDumperError, DumpInternalError, InvalidRequestError

# observer(event_name, **fields); purely informational.
ProgressObserver = Callable[..., None]


@dataclass(frozen=True)
class DumpResult:
    chunk: ChunkResult
    base_path: Path
    files_discovered: int
    files_skipped_binary: int
    files_skipped_unreadable: int
    directories_skipped: int

    @property
    def text(self) -> str:
        return self.chunk.text

    @property
    def files_skipped(self) -> int:
        return self.files_skipped_binary + self.files_skipped_unreadable

    def summary(self) -> str:
        request = self.chunk.request
        return (
            f"Processed {self.chunk.files_included} files for chunk {request.index}/{request.total}. "
            f"Skipped {self.files_skipped} binary/unreadable files. "
            f"Total chunk size: {self.chunk.bytes_included} bytes."
        )


class ContextDumpService:
    # orchestrates walk -> render -> plan for a single request.
    def __init__(
        self,
        config: Optional[DumperConfig] = None,
        observer: Optional[ProgressObserver] = None,
        is_binary: Optional[BinaryClassifier] = None,
    ):
        self.config = config or DumperConfig()
        self.observer = observer
        self.is_binary = is_binary
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")

    def _notify(self, event: str, **fields: Any):
        if self.observer is None:
            return
        try:
            self.observer(event, **fields)
        except Exception as e:
            # progress display must never change the dump.
            self.log.warning("progress_observer_failed", progress_event=event, error=str(e))

    def dump(self, base_path: Optional[str], num_chunks: int = 1, chunk_index: int = 1) -> DumpResult:
        request = ChunkRequest(total=num_chunks, index=chunk_index)
        root = self._resolve_base_path(base_path)

        try:
            return self._run(root, request)
        except ContextDumperError:
            raise
        except Exception as e:
            self.log.error("context_dump_failed", base_path=str(root), error=str(e), exc_info=True)
            raise DumpInternalError(f"Failed to get codebase context: {e}") from e

    def _resolve_base_path(self, base_path: Optional[str]) -> Path:
        if not isinstance(base_path, (str, Path)) or not str(base_path).strip():
            raise InvalidRequestError(
                "Missing or invalid required parameter: base_path (must be a non-empty string)"
            )
        try:
            root = Path(base_path).expanduser().resolve()
        except (OSError, RuntimeError, ValueError) as e:
            raise InvalidRequestError(f"Provided base_path cannot be resolved: {base_path} ({e})") from e
        if not root.exists():
            raise InvalidRequestError(f"Provided base_path does not exist: {root}")
        if not root.is_dir():
            raise InvalidRequestError(f"Provided base_path is not a directory: {root}")
        return root

    def _run(self, root: Path, request: ChunkRequest) -> DumpResult:
        walker = TreeWalker(
            ignore_filename=self.config.ignore_filename,
            default_excludes=self.config.default_excludes,
            follow_symlinks=self.config.follow_symlinks,
        )
        renderer = FileRenderer(is_binary=self.is_binary, binary_sample_size=self.config.binary_sample_size)

        self._notify("walk_started", base_path=str(root))
        records = walker.walk(root)
        self._notify("walk_finished", files_found=len(records))

        rendered: List[RenderedFile] = []
        skipped_binary = 0
        skipped_unreadable = 0
        for record in records:
            outcome = renderer.render(record)
            if isinstance(outcome, RenderedFile):
                rendered.append(outcome)
                self._notify("file_rendered", path=outcome.relative_path, size=outcome.size)
                continue
            if outcome.reason is SkipReason.BINARY:
                skipped_binary += 1
            else:
                skipped_unreadable += 1
            self._notify("file_skipped", path=outcome.relative_path, reason=outcome.reason.value)

        chunk = plan_chunk(rendered, request)
        self._notify("chunk_planned", files_included=chunk.files_included, bytes_included=chunk.bytes_included)

        result = DumpResult(
            chunk=chunk,
            base_path=root,
            files_discovered=len(records),
            files_skipped_binary=skipped_binary,
            files_skipped_unreadable=skipped_unreadable,
            directories_skipped=walker.directories_skipped,
        )
        self.log.info(
            "context_dump_complete",
            base_path=str(root),
            chunk_index=request.index,
            num_chunks=request.total,
            files_included=chunk.files_included,
            files_skipped_binary=skipped_binary,
            files_skipped_unreadable=skipped_unreadable,
            bytes_included=chunk.bytes_included,
        )
        return result
