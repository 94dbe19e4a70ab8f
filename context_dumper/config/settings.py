from dataclasses import dataclass, field
from typing import List


DEFAULT_IGNORE_FILENAME = ".gitignore"
# version-control metadata is never dumped, whatever the ignore files say.
DEFAULT_EXCLUDES: List[str] = [".git"]
DEFAULT_BINARY_SAMPLE_SIZE = 8192
DEFAULT_LOG_LEVEL = "warning"

@dataclass
class DumperConfig:
    # holds all configuration parameters shared by every dump request.
    ignore_filename: str = DEFAULT_IGNORE_FILENAME
    default_excludes: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDES))
    follow_symlinks: bool = False
    binary_sample_size: int = DEFAULT_BINARY_SAMPLE_SIZE
    log_level: str = DEFAULT_LOG_LEVEL
