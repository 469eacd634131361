"""
Prompt construction for test generation.
"""
import logging
from pathlib import Path

from unitforge.support.file_operations import read_file
from unitforge.support.models import Component

logger = logging.getLogger(__name__)

TYPESCRIPT_EXTENSIONS = (".ts", ".tsx")


def extract_import_lines(source_code: str) -> str:
    """Keep ES module imports and CommonJS require lines."""
    lines = []
    for line in source_code.splitlines():
        stripped = line.strip()
        if stripped.startswith("import ") or (
            stripped.startswith("const ") and " = require(" in stripped
        ):
            lines.append(line)
    return "\n".join(lines)


def build_prompt(
    component: Component,
    source_path: Path,
    test_framework: str = "jest",
    test_style: str = "unit",
    coverage: int | None = None,
    include_snapshot: bool = False,
) -> str:
    """
    Construct the prompt for the model.

    The full source file is read for its import lines; if it cannot be read,
    the component's own text stands in for it.
    """
    try:
        source_context = read_file(source_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read source file %s for context: %s", source_path, e)
        source_context = component.source_text

    import_lines = extract_import_lines(source_context)
    is_typescript = source_path.suffix.lower() in TYPESCRIPT_EXTENSIONS
    language = "typescript" if is_typescript else "javascript"

    coverage_line = f"Aim for at least {coverage}% code coverage. " if coverage else ""
    snapshot_line = "Include snapshot tests where appropriate. " if include_snapshot else ""
    typescript_line = (
        "Use TypeScript for the tests and ensure proper type handling."
        if is_typescript
        else ""
    )

    return f"""
Generate a {test_style} test for the following {component.kind.value} using {test_framework}.
{coverage_line}
{snapshot_line}

Here's the component to test:

```{language}
{component.source_text}
```

Here are the imports from the source file that may be relevant:

```{language}
{import_lines}
```

The file path is: {source_path}

Guidelines:
1. Write tests that thoroughly verify the functionality
2. Include tests for error cases and edge conditions
3. Use proper mocking for external dependencies
4. Follow best practices for {test_framework}
5. Use descriptive test names that explain what is being tested
6. Include only the test code, no explanations or comments outside the code
7. Make the tests maintainable and readable

{typescript_line}
"""
