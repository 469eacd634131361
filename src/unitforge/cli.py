"""
UnitForge CLI Entry Point.
"""

import argparse
import logging
import sys
from pathlib import Path

from unitforge.core.analyzer import CodebaseAnalyzer
from unitforge.generation.client import GenerationClient
from unitforge.generation.pipeline import GenerationPipeline, GenerationSummary
from unitforge.support.config import (
    SUPPORTED_FRAMEWORKS,
    SUPPORTED_STYLES,
    UnitForgeConfig,
    load_config,
)
from unitforge.support.exceptions import CredentialError, UnitForgeError
from unitforge.watch import watch_project
from unitforge import __version__

# --quota-friendly preset: seconds between requests, batch size, seconds between batches
QUOTA_FRIENDLY_PACING = (5.0, 3, 30.0)
ULTRA_QUOTA_FRIENDLY_DELAY = 45.0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="UnitForge: AI-assisted unit test generator for JavaScript and TypeScript."
    )

    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Root of the codebase to analyze (default: current directory).",
    )
    parser.add_argument("--file", help="Generate tests for a single source file.")
    parser.add_argument("--config", help="Path to pyproject.toml configuration file.")
    parser.add_argument(
        "--version", action="version", version=f"unitforge {__version__}"
    )

    parser.add_argument(
        "--framework", choices=SUPPORTED_FRAMEWORKS, help="Test framework to target."
    )
    parser.add_argument("--output", help="Directory for generated tests (default: tests).")
    parser.add_argument("--style", choices=SUPPORTED_STYLES, help="Kind of tests to request.")
    parser.add_argument("--coverage", type=int, help="Coverage percentage to aim for.")
    parser.add_argument(
        "--snapshot", action="store_true", help="Ask for snapshot tests where appropriate."
    )
    parser.add_argument(
        "--overwrite", action="store_true", help="Replace existing test files."
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Generate tests without writing files."
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output."
    )

    parser.add_argument("--api-key", help="Anthropic API key.")
    parser.add_argument("--model", help="Model identifier.")
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Never prompt for an API key; fail if none is configured.",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Write placeholder tests without calling the model.",
    )
    parser.add_argument(
        "--quota-friendly",
        action="store_true",
        help="Pace requests: 5s apart, 30s pause after every 3.",
    )
    parser.add_argument(
        "--ultra-quota-friendly",
        action="store_true",
        help="Strict quota mode: long waits before every request and smaller prompts.",
    )
    parser.add_argument("--request-delay", type=float, help="Seconds between requests.")
    parser.add_argument("--batch-size", type=int, help="Requests per batch.")
    parser.add_argument("--batch-delay", type=float, help="Seconds between batches.")

    parser.add_argument(
        "--watch",
        action="store_true",
        help="Watch for file changes and regenerate tests automatically.",
    )

    return parser.parse_args(argv)


def apply_overrides(config: UnitForgeConfig, args: argparse.Namespace) -> UnitForgeConfig:
    """Fold command line flags into the loaded configuration."""
    if args.framework:
        config.test_framework = args.framework
    if args.output:
        config.output_dir = args.output
    if args.style:
        config.test_style = args.style
    if args.coverage is not None:
        config.coverage = args.coverage
    if args.snapshot:
        config.include_snapshot = True
    if args.overwrite:
        config.overwrite = True

    if args.model:
        config.llm.model = args.model
    if args.non_interactive:
        config.llm.interactive = False
    if args.offline:
        config.llm.offline = True

    if args.quota_friendly:
        config.request_delay, config.batch_size, config.batch_delay = QUOTA_FRIENDLY_PACING
    if args.ultra_quota_friendly:
        config.llm.strict_quota = True
        config.request_delay = ULTRA_QUOTA_FRIENDLY_DELAY
    if args.request_delay is not None:
        config.request_delay = args.request_delay
    if args.batch_size is not None:
        config.batch_size = args.batch_size
    if args.batch_delay is not None:
        config.batch_delay = args.batch_delay

    return config


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="[unitforge] %(message)s",
    )


def print_summary(analyzer: CodebaseAnalyzer, summary: GenerationSummary, dry_run: bool):
    """Print summary for a generation run."""
    print("\nUnitForge Summary")
    print("─────────────────")
    print(f"Analyzed:  {len(analyzer.results)} source files")
    print(f"Needing tests: {analyzer.count_components_needing_tests()} components")
    print(f"Generated: {len(summary.generated)} tests")
    if dry_run:
        print("Written:   0 files (dry run)")
    else:
        print(f"Written:   {len(summary.written)} files")

    if analyzer.failures:
        print("\nSkipped files:")
        for failure in analyzer.failures:
            print(f"  ✗ {failure.file_path}: {failure.error}")

    if summary.failed:
        print("\nFailed components:")
        for name, reason in summary.failed:
            print(f"  ✗ {name}: {reason}")


def run(args: argparse.Namespace) -> int:
    """Main command logic.
    Returns exit code (0 for success, non-zero for error).
    """
    configure_logging(args.verbose)

    config = load_config(Path(args.config) if args.config else None)
    apply_overrides(config, args)
    project_root = Path.cwd()

    try:
        client = GenerationClient.from_config(config.llm, api_key=args.api_key)
    except CredentialError as e:
        print(f"Error: {e}")
        return 1

    codebase_path = Path(args.path).resolve() if args.path else project_root
    pipeline = GenerationPipeline(
        config, client, project_root=project_root, source_root=codebase_path
    )

    if args.watch:
        def process_changed_file(file_path: Path):
            analyzer = CodebaseAnalyzer(config)
            if analyzer.analyze_path(file_path) is None:
                raise UnitForgeError(analyzer.failures[-1].error)
            pipeline.generate_from_analysis(analyzer.results, dry_run=args.dry_run)

        try:
            watch_project(codebase_path, config, process_changed_file)
            return 0
        except KeyboardInterrupt:
            return 0

    analyzer = CodebaseAnalyzer(config)

    if args.file:
        source_path = Path(args.file).resolve()
        if not source_path.exists():
            print(f"Error: Source file not found: {source_path}")
            return 1
        print(f"Analyzing file: {source_path}")
        analyzer.analyze_path(source_path)
    else:
        if not codebase_path.is_dir():
            print(f"Error: Path not found: {codebase_path}")
            return 1
        print(f"Analyzing codebase at: {codebase_path}")
        analyzer.analyze_codebase(codebase_path)

    print(f"Found {analyzer.count_components_needing_tests()} components that need tests")

    try:
        summary = pipeline.generate_from_analysis(analyzer.results, dry_run=args.dry_run)
    except CredentialError as e:
        print(f"Error: {e}")
        return 1

    print_summary(analyzer, summary, args.dry_run)
    return 0


def main():
    """Entry point for console script."""
    sys.exit(run(parse_args()))


if __name__ == "__main__":
    main()
