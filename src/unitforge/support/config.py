"""
Configuration management for UnitForge.
"""

from dataclasses import dataclass, field
from pathlib import Path
import logging
import sys
from unitforge.support.models import LLMConfig

# Compat for Python < 3.11
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

SUPPORTED_FRAMEWORKS = ("jest", "mocha", "vitest")
SUPPORTED_STYLES = ("unit", "integration", "both")


@dataclass
class UnitForgeConfig:
    """Configuration settings for UnitForge."""

    output_dir: str = "tests"
    test_framework: str = "jest"
    test_style: str = "unit"
    coverage: int | None = 80
    include_snapshot: bool = False
    overwrite: bool = False
    include_patterns: list[str] = field(
        default_factory=lambda: ["**/*.js", "**/*.jsx", "**/*.ts", "**/*.tsx"]
    )
    exclude_dirs: list[str] = field(
        default_factory=lambda: [
            "node_modules",
            ".git",
            "build",
            "dist",
            "coverage",
            ".next",
            ".venv",
            "venv",
        ]
    )
    # Pacing between model requests, in seconds.
    request_delay: float = 0.0
    batch_size: int = 0
    batch_delay: float = 0.0
    llm: LLMConfig = field(default_factory=LLMConfig)


def load_config(path: Path | None = None) -> UnitForgeConfig:
    """
    Load configuration.
    Args:
        path: Path to config file (pyproject.toml) OR project root directory.
              If None, the current working directory is used.
    """
    if path is None:
        path = Path.cwd()

    if path.is_dir():
        config_path = path / "pyproject.toml"
    else:
        config_path = path

    if not config_path.exists():
        return UnitForgeConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        config_data = dict(data.get("tool", {}).get("unitforge", {}))

        llm_data = config_data.pop("llm", {})
        valid_llm_keys = LLMConfig.__annotations__.keys()
        llm_config = LLMConfig(
            **{k: v for k, v in llm_data.items() if k in valid_llm_keys}
        )

        valid_keys = UnitForgeConfig.__annotations__.keys()
        filtered_data = {
            k: v for k, v in config_data.items() if k in valid_keys and k != "llm"
        }

        return UnitForgeConfig(llm=llm_config, **filtered_data)
    except (OSError, tomllib.TOMLDecodeError, TypeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return UnitForgeConfig()
