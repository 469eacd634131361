"""
Discovery of JavaScript and TypeScript source files to analyze.
"""

from pathlib import Path
from unitforge.support.config import UnitForgeConfig

SOURCE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")
TEST_FILE_MARKERS = (".test.", ".spec.")


def is_source_file(path: Path, project_root: Path, config: UnitForgeConfig) -> bool:
    """
    Check if a file is a valid source file for testing.
    Rules:
    - Must have a .js, .jsx, .ts or .tsx extension
    - Must not be a type declaration file (.d.ts)
    - Must not be a test file (*.test.* or *.spec.*)
    - Must not be in excluded directories
    """
    if path.suffix.lower() not in SOURCE_EXTENSIONS:
        return False

    if path.name.endswith(".d.ts"):
        return False

    if any(marker in path.name for marker in TEST_FILE_MARKERS):
        return False

    try:
        rel_path = path.relative_to(project_root)
    except ValueError:
        rel_path = path
    for part in rel_path.parts[:-1]:
        if part in config.exclude_dirs:
            return False

    return True


def discover_source_files(project_root: Path, config: UnitForgeConfig) -> list[Path]:
    """
    Find all source files under project_root matching the include patterns.
    Files inside the test output directory are skipped.
    """
    output_root = (project_root / config.output_dir).resolve()
    found: set[Path] = set()

    for pattern in config.include_patterns:
        for file_path in project_root.glob(pattern):
            if not file_path.is_file():
                continue
            if not is_source_file(file_path, project_root, config):
                continue
            try:
                file_path.resolve().relative_to(output_root)
                continue  # generated tests live here
            except ValueError:
                pass
            found.add(file_path)

    return sorted(found)
