"""
Generation pipeline: analysis results in, test files out.
"""
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from unitforge.generation.client import GenerationClient
from unitforge.generation.prompt_builder import build_prompt
from unitforge.generation.response_parser import extract_code
from unitforge.support.config import UnitForgeConfig
from unitforge.support.exceptions import GenerationError
from unitforge.support.file_operations import safe_write
from unitforge.support.models import AnalysisResult, Component, GeneratedTest

logger = logging.getLogger(__name__)

PREVIEW_LINES = 5


@dataclass
class GenerationSummary:
    """What one pipeline run produced."""
    generated: list[GeneratedTest] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)  # (component, reason)


def suffix_for_framework(framework: str) -> str:
    return ".spec" if framework == "mocha" else ".test"


class GenerationPipeline:
    """
    Prompts the model for every component that needs a test.

    Components are processed strictly one after another. A component whose
    generation fails is logged and skipped; only CredentialError escapes.
    """

    def __init__(
        self,
        config: UnitForgeConfig,
        client: GenerationClient,
        project_root: Path | None = None,
        sleep: Callable[[float], None] = time.sleep,
        source_root: Path | None = None,
    ):
        self.config = config
        self.client = client
        self.project_root = project_root or Path.cwd()
        self.source_root = source_root
        self._sleep = sleep

    def derive_test_path(self, source_path: Path) -> Path:
        """
        e.g. src/utils/math.ts -> <root>/tests/src/utils/math.test.ts

        Sources outside the project root keep their directory relative to
        ``source_root`` (the analyzed codebase), or their full directory when
        they sit outside that too.
        """
        if source_path.is_absolute():
            rel_dir = self._relative_dir(source_path.parent)
        else:
            rel_dir = source_path.parent

        filename = f"{source_path.stem}{suffix_for_framework(self.config.test_framework)}{source_path.suffix}"
        return self.project_root / self.config.output_dir / rel_dir / filename

    def _relative_dir(self, directory: Path) -> Path:
        for root in (self.project_root, self.source_root):
            if root is None:
                continue
            try:
                return directory.relative_to(root)
            except ValueError:
                continue
        return directory.relative_to(directory.anchor)

    def generate_test_for_component(
        self, component: Component, source_path: Path, summary: GenerationSummary | None = None
    ) -> GeneratedTest | None:
        prompt = build_prompt(
            component,
            source_path,
            test_framework=self.config.test_framework,
            test_style=self.config.test_style,
            coverage=self.config.coverage,
            include_snapshot=self.config.include_snapshot,
        )

        try:
            response = self.client.generate(prompt)
        except GenerationError as e:
            logger.error("Error generating test for %s: %s", component.name, e)
            if summary is not None:
                summary.failed.append((component.name, str(e)))
            return None

        content = extract_code(response)
        if not content:
            logger.warning("Failed to generate test for %s: empty response", component.name)
            if summary is not None:
                summary.failed.append((component.name, "empty response"))
            return None

        return GeneratedTest(
            file_path=self.derive_test_path(source_path),
            content=content,
            component=component,
        )

    def generate_tests(
        self, results: list[AnalysisResult], summary: GenerationSummary | None = None
    ) -> list[GeneratedTest]:
        generated = []
        sent = 0
        for result in results:
            for component in result.components_needing_tests:
                if sent:
                    self._pace(sent)
                sent += 1
                logger.info("Generating test for %s (%s)", component.name, component.kind.value)
                test = self.generate_test_for_component(component, result.file_path, summary)
                if test is not None:
                    generated.append(test)
        return generated

    def _pace(self, sent: int) -> None:
        if self.client.offline:
            return
        config = self.config
        if config.batch_size and sent % config.batch_size == 0 and config.batch_delay:
            logger.info("Batch of %d requests done, pausing %.0fs", config.batch_size, config.batch_delay)
            self._sleep(config.batch_delay)
        elif config.request_delay:
            self._sleep(config.request_delay)

    def save_tests(self, tests: list[GeneratedTest]) -> list[Path]:
        """
        Write generated tests; components of one source file share a file.
        Write failures are logged and skipped.
        """
        grouped: dict[Path, list[GeneratedTest]] = {}
        for test in tests:
            grouped.setdefault(test.file_path, []).append(test)

        written = []
        for path, group in grouped.items():
            content = "\n\n".join(test.content.rstrip() for test in group) + "\n"
            try:
                if safe_write(path, content, overwrite=self.config.overwrite):
                    logger.info("Test saved: %s", path)
                    written.append(path)
                else:
                    logger.info("Skipped existing test file: %s", path)
            except OSError as e:
                logger.warning("Error saving test %s: %s", path, e)
        return written

    def generate_from_analysis(
        self, results: list[AnalysisResult], dry_run: bool = False
    ) -> GenerationSummary:
        summary = GenerationSummary()
        summary.generated = self.generate_tests(results, summary)
        logger.info("Generated %d tests", len(summary.generated))

        if dry_run:
            logger.info("Dry run - not saving tests")
            for test in summary.generated:
                preview = "\n".join(test.content.splitlines()[:PREVIEW_LINES])
                logger.info(
                    "Test for %s (%s)\nFile: %s\n%s...",
                    test.component.name,
                    test.component.kind.value,
                    test.file_path,
                    preview,
                )
        elif summary.generated:
            summary.written = self.save_tests(summary.generated)

        return summary
