# context_dumper/config/loader.py
"""
Handles loading and merging of configuration from TOML files.
"""
import toml
from pathlib import Path
from typing import Dict, Any, Mapping, Optional
from dataclasses import fields as dataclass_fields, MISSING
import structlog

from context_dumper.exceptions import ConfigError

from .settings import DumperConfig

log = structlog.get_logger(__name__)

PYPROJECT_TABLE = "context-dumper"
PROJECT_CONFIG_FILENAMES = [".context-dumper.toml", "context-dumper.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "context-dumper"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

# expected python type for each DumperConfig field, used to reject bad TOML values.
_FIELD_TYPES: Dict[str, type] = {
    "ignore_filename": str,
    "default_excludes": list,
    "follow_symlinks": bool,
    "binary_sample_size": int,
    "log_level": str,
}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (OSError, toml.TomlDecodeError) as e:
        log.error("config_file_load_error", path=str(file_path), error=str(e))
        return {}
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get(PYPROJECT_TABLE, {})
    return data

def load_and_merge_configs(start_dir: Optional[Path] = None) -> Dict[str, Any]:
    # user-global settings first, then the first project-local file found in start_dir.
    merged: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged.update(_load_toml_file_data(USER_CONFIG_FILE))

    search_dir = start_dir or Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = search_dir / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if project_settings:
            log.info("loading_project_local_config", path=str(candidate))
            merged.update(project_settings)
            break

    if not merged:
        log.debug("no_configuration_files_loaded")
    return merged

def build_config(
    overrides: Optional[Mapping[str, Any]] = None,
    file_values: Optional[Mapping[str, Any]] = None,
) -> DumperConfig:
    """Layer dataclass defaults, config-file values and explicit overrides.

    ``None`` values in ``overrides`` mean "not given" and leave the lower
    layer in place. Unknown keys are logged and dropped.
    """
    effective: Dict[str, Any] = {}
    for fd in dataclass_fields(DumperConfig):
        effective[fd.name] = fd.default_factory() if fd.default_factory is not MISSING else fd.default

    for layer_name, layer in (("file", file_values or {}), ("override", overrides or {})):
        for key, value in layer.items():
            if key not in _FIELD_TYPES:
                log.warning("unknown_config_key_ignored", key=key, layer=layer_name)
                continue
            if value is None:
                continue
            expected = _FIELD_TYPES[key]
            # bool is a subclass of int; do not let `true` pass as a sample size.
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ConfigError(
                    f"config key '{key}' expects {expected.__name__}, got {type(value).__name__} ({value!r})"
                )
            effective[key] = value

    if not all(isinstance(p, str) for p in effective["default_excludes"]):
        raise ConfigError("config key 'default_excludes' must be a list of strings")
    if effective["binary_sample_size"] <= 0:
        raise ConfigError("config key 'binary_sample_size' must be positive")
    if not effective["ignore_filename"].strip():
        raise ConfigError("config key 'ignore_filename' must not be empty")

    return DumperConfig(**effective)
