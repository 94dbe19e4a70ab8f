from pathlib import Path


def posix_relative_path(path: Path, root: Path) -> str:
    # path relative to root with forward slashes, whatever the host os uses.
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
