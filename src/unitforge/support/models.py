"""
Data models for UnitForge.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ComponentKind(str, Enum):
    """Kinds of testable units recognised by the extractor."""
    FUNCTION = "function"
    CLASS = "class"
    METHOD = "method"
    INTERFACE = "interface"
    OTHER = "other"


class LanguageVariant(str, Enum):
    """Grammar flavour of a source file."""
    LOOSE = "loose"  # JavaScript
    STRICT = "strict"  # TypeScript


@dataclass
class Component:
    """A named, boundaried unit of source code."""
    name: str
    kind: ComponentKind
    start_line: int
    end_line: int
    source_text: str
    complexity: int = 1
    needs_test: bool | None = None

    @property
    def line_count(self) -> int:
        if not self.source_text:
            return 0
        return len(self.source_text.split("\n"))


@dataclass
class AnalysisResult:
    """Components extracted from one source file."""
    file_path: Path
    file_kind: str
    components: list[Component] = field(default_factory=list)

    @property
    def components_needing_tests(self) -> list[Component]:
        return [c for c in self.components if c.needs_test]


@dataclass
class FileFailure:
    """A source file that was skipped during analysis."""
    file_path: Path
    error: str


@dataclass
class GeneratedTest:
    """Test code produced for one component, ready to be written."""
    file_path: Path
    content: str
    component: Component


@dataclass
class LLMConfig:
    """Configuration for the model client."""
    model: str = "claude-3-5-haiku-latest"
    timeout: float = 60.0
    max_retries: int | None = None  # None means the profile default
    api_key_env_var: str = "ANTHROPIC_API_KEY"
    interactive: bool = True
    strict_quota: bool = False
    offline: bool = False
