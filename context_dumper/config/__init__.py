# context_dumper/config/__init__.py
"""Runtime configuration: dataclass defaults plus optional TOML overrides."""
from .settings import DumperConfig, DEFAULT_EXCLUDES, DEFAULT_IGNORE_FILENAME
from .loader import load_and_merge_configs, build_config

__all__ = [
    "DumperConfig",
    "DEFAULT_EXCLUDES",
    "DEFAULT_IGNORE_FILENAME",
    "load_and_merge_configs",
    "build_config",
]
