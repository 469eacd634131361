"""
Integration tests for UnitForge CLI.
"""
import pytest
from types import SimpleNamespace
from unittest.mock import patch

from unitforge.cli import main, parse_args, run

MATH_JS = """import { round } from './round';

export function add(a, b) {
  return round(a + b);
}

export class Calculator {
  constructor() {
    this.total = 0;
  }

  push(value) {
    if (value > 0 && Number.isFinite(value)) {
      this.total += value;
    } else {
      throw new Error('bad value');
    }
  }
}
"""

CART_TS = """export interface Item {
  price: number;
}

export const total = (items: Item[]): number =>
  items.length ? items.reduce((sum, item) => sum + item.price, 0) : 0;
"""


@pytest.fixture
def sample_project(tmp_path, monkeypatch):
    """
    project/
      src/
        math.js
        cart.ts
        broken.js
        math.test.js   (existing test, ignored)
      node_modules/dep/index.js
    """
    project_root = tmp_path / "sample_project"
    src = project_root / "src"
    src.mkdir(parents=True)
    (src / "math.js").write_text(MATH_JS, encoding="utf-8")
    (src / "cart.ts").write_text(CART_TS, encoding="utf-8")
    (src / "broken.js").write_text("function broken( {\n", encoding="utf-8")
    (src / "math.test.js").write_text("test('x', () => {});\n", encoding="utf-8")
    dep = project_root / "node_modules" / "dep"
    dep.mkdir(parents=True)
    (dep / "index.js").write_text("module.exports = function () {};\n", encoding="utf-8")

    monkeypatch.chdir(project_root)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    return project_root


def test_cli_offline_end_to_end(sample_project, capsys):
    """
    Analyze the project, generate placeholder tests offline and write them
    next to the sources under tests/.
    """
    exit_code = run(parse_args(["--offline", "--non-interactive"]))

    assert exit_code == 0

    math_test = sample_project / "tests" / "src" / "math.test.js"
    cart_test = sample_project / "tests" / "src" / "cart.test.ts"
    assert math_test.exists()
    assert cart_test.exists()

    math_content = math_test.read_text(encoding="utf-8")
    assert "describe('add'" in math_content
    assert "new Calculator()" in math_content
    assert "offline mode" in cart_test.read_text(encoding="utf-8")

    out = capsys.readouterr().out
    assert "Analyzing codebase at:" in out
    assert "Analyzed:  2 source files" in out
    assert "Written:   2 files" in out
    assert "broken.js" in out
    assert not (sample_project / "tests" / "node_modules").exists()


def test_cli_single_file_mocha_dry_run(sample_project, capsys):
    exit_code = run(
        parse_args(["--file", "src/math.js", "--offline", "--framework", "mocha", "--dry-run"])
    )

    assert exit_code == 0
    assert not (sample_project / "tests").exists()
    out = capsys.readouterr().out
    assert "Analyzing file:" in out
    assert "Written:   0 files (dry run)" in out


def test_cli_missing_file(sample_project, capsys):
    exit_code = run(parse_args(["--file", "src/nope.js", "--offline"]))

    assert exit_code == 1
    assert "Source file not found" in capsys.readouterr().out


def test_cli_missing_directory(sample_project, capsys):
    exit_code = run(parse_args(["does-not-exist", "--offline"]))

    assert exit_code == 1
    assert "Path not found" in capsys.readouterr().out


def test_cli_non_interactive_without_key_fails(sample_project, capsys):
    exit_code = run(parse_args(["--non-interactive"]))

    assert exit_code == 1
    assert "API key is required" in capsys.readouterr().out
    assert not (sample_project / "tests").exists()


def test_cli_existing_tests_not_overwritten(sample_project):
    target = sample_project / "tests" / "src" / "math.test.js"
    target.parent.mkdir(parents=True)
    target.write_text("// hand written\n", encoding="utf-8")

    assert run(parse_args(["--offline"])) == 0
    assert target.read_text(encoding="utf-8") == "// hand written\n"

    assert run(parse_args(["--offline", "--overwrite"])) == 0
    assert "describe('add'" in target.read_text(encoding="utf-8")


def test_cli_reads_pyproject_settings(sample_project):
    (sample_project / "pyproject.toml").write_text(
        '[tool.unitforge]\noutput_dir = "__tests__"\ntest_framework = "mocha"\n',
        encoding="utf-8",
    )

    assert run(parse_args(["--offline"])) == 0
    assert (sample_project / "__tests__" / "src" / "math.spec.js").exists()


def test_cli_generates_with_api_key_option(sample_project):
    """The --api-key option reaches the Anthropic client and its output is written."""
    with patch("unitforge.generation.transport.anthropic.Anthropic") as mock_anthropic:
        client = mock_anthropic.return_value
        client.messages.create.return_value = SimpleNamespace(
            content=[SimpleNamespace(type="text", text="```js\ntest('ok', () => {});\n```")]
        )

        exit_code = run(parse_args(["--file", "src/cart.ts", "--api-key", "sk-cli"]))

    assert exit_code == 0
    assert mock_anthropic.call_args.kwargs["api_key"] == "sk-cli"
    written = sample_project / "tests" / "src" / "cart.test.ts"
    assert written.read_text(encoding="utf-8") == "test('ok', () => {});\n"


def test_cli_quota_friendly_flags():
    from unitforge.cli import apply_overrides
    from unitforge.support.config import UnitForgeConfig

    config = apply_overrides(UnitForgeConfig(), parse_args(["--quota-friendly"]))
    assert (config.request_delay, config.batch_size, config.batch_delay) == (5.0, 3, 30.0)

    config = apply_overrides(UnitForgeConfig(), parse_args(["--ultra-quota-friendly"]))
    assert config.llm.strict_quota is True
    assert config.request_delay == 45.0

    config = apply_overrides(
        UnitForgeConfig(), parse_args(["--quota-friendly", "--request-delay", "1.5"])
    )
    assert config.request_delay == 1.5


def test_main_exit_code(sample_project):
    with patch("sys.argv", ["unitforge", "--offline", "--dry-run"]):
        with pytest.raises(SystemExit) as exc:
            main()
    assert exc.value.code == 0


def test_cli_codebase_outside_cwd_keeps_directories(sample_project, tmp_path, monkeypatch):
    other = sample_project / "src" / "other"
    other.mkdir()
    (other / "math.js").write_text(MATH_JS, encoding="utf-8")
    workdir = tmp_path / "workdir"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    assert run(parse_args([str(sample_project), "--offline"])) == 0

    assert (workdir / "tests" / "src" / "math.test.js").exists()
    assert (workdir / "tests" / "src" / "other" / "math.test.js").exists()
