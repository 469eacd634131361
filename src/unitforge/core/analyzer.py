"""
Orchestrator for analyzing JavaScript and TypeScript codebases.
"""
import logging
from pathlib import Path

from unitforge.core.classifier import needs_test
from unitforge.core.discovery import discover_source_files
from unitforge.core.extractor import extract_components
from unitforge.support.config import UnitForgeConfig
from unitforge.support.exceptions import UnitForgeError
from unitforge.support.models import AnalysisResult, FileFailure

logger = logging.getLogger(__name__)


def analyze_file(source_path: Path) -> AnalysisResult:
    """
    Extract and classify the components of one source file.

    Raises:
        FileNotFoundError: The file does not exist.
        UnsupportedFileError: Unknown extension.
        SourceParseError: The file does not parse.
    """
    try:
        source_code = source_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"Source file not found: {source_path}")

    components = extract_components(source_code, source_path)
    for component in components:
        component.needs_test = needs_test(component)

    return AnalysisResult(
        file_path=source_path,
        file_kind=source_path.suffix.lstrip("."),
        components=components,
    )


class CodebaseAnalyzer:
    """
    Runs analyze_file over many files, one at a time.

    A file that cannot be read or parsed is logged and recorded in
    ``failures``; analysis continues with the remaining files.
    """

    def __init__(self, config: UnitForgeConfig | None = None):
        self.config = config or UnitForgeConfig()
        self.results: list[AnalysisResult] = []
        self.failures: list[FileFailure] = []

    def analyze_codebase(self, codebase_path: Path) -> list[AnalysisResult]:
        files = discover_source_files(codebase_path, self.config)
        logger.info("Found %d source files under %s", len(files), codebase_path)
        for file_path in files:
            self.analyze_path(file_path)
        return self.results

    def analyze_path(self, file_path: Path) -> AnalysisResult | None:
        logger.debug("Analyzing %s", file_path)
        try:
            result = analyze_file(file_path)
        except (UnitForgeError, OSError, UnicodeDecodeError) as e:
            logger.error("Error analyzing file %s: %s", file_path, e)
            self.failures.append(FileFailure(file_path=file_path, error=str(e)))
            return None

        self.results.append(result)
        logger.debug(
            "%s: %d components, %d need tests",
            file_path,
            len(result.components),
            len(result.components_needing_tests),
        )
        return result

    def count_components_needing_tests(self) -> int:
        return sum(len(r.components_needing_tests) for r in self.results)
