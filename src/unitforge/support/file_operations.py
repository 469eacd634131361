"""
Safe file I/O operations.
"""
from pathlib import Path


def safe_write(path: Path, content: str, overwrite: bool = False) -> bool:
    """
    Write content to file, creating parent directories if needed.
    Returns True if written, False if skipped (exists and not overwrite).
    """
    if path.exists() and not overwrite:
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return True


def read_file(path: Path) -> str:
    """Read file content."""
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return path.read_text(encoding="utf-8")
