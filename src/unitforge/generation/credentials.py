"""
API key resolution and persistence.

Lookup order: explicit option, environment variable, JSON config file,
interactive prompt. resolve_credential never touches the terminal; it only
reports whether an interactive prompt is still needed.
"""
import json
import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "unitforge.json"
API_KEY_FIELD = "apiKey"
DEFAULT_ENV_VAR = "ANTHROPIC_API_KEY"


def default_config_paths(base: Path | None = None) -> list[Path]:
    """Candidate credential files, in lookup order."""
    base = base or Path.cwd()
    return [
        base / f".{CONFIG_FILE_NAME}",
        base / "config" / CONFIG_FILE_NAME,
        base / ".config" / CONFIG_FILE_NAME,
    ]


class CredentialStore:
    """Reads and writes ``{"apiKey": ...}`` JSON files."""

    def __init__(self, paths: list[Path] | None = None):
        self.paths = paths if paths is not None else default_config_paths()

    def load(self) -> str | None:
        for path in self.paths:
            if not path.exists():
                continue
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Failed to load API key from %s: %s", path, e)
                continue
            if isinstance(data, dict) and data.get(API_KEY_FIELD):
                logger.debug("Using API key from %s", path)
                return str(data[API_KEY_FIELD])
        return None

    def save(self, api_key: str) -> Path:
        """
        Store the key in the first candidate path, keeping other fields.

        Raises:
            OSError: The file could not be written.
        """
        path = self.paths[0]
        data: dict = {}
        if path.exists():
            try:
                loaded = json.loads(path.read_text(encoding="utf-8"))
                if isinstance(loaded, dict):
                    data = loaded
            except json.JSONDecodeError:
                logger.debug("Replacing invalid JSON in %s", path)

        data[API_KEY_FIELD] = api_key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path


class CredentialStatus(str, Enum):
    RESOLVED = "resolved"
    NEEDS_INTERACTIVE = "needs_interactive"
    FATAL = "fatal"


@dataclass(frozen=True)
class CredentialOutcome:
    status: CredentialStatus
    api_key: str | None = None
    source: str | None = None


def resolve_credential(
    explicit_key: str | None = None,
    *,
    env: Mapping[str, str] | None = None,
    env_var: str = DEFAULT_ENV_VAR,
    store: CredentialStore | None = None,
    interactive: bool = True,
) -> CredentialOutcome:
    """Work out where the API key comes from without prompting."""
    if explicit_key:
        return CredentialOutcome(CredentialStatus.RESOLVED, explicit_key, "option")

    environ = os.environ if env is None else env
    env_key = environ.get(env_var)
    if env_key:
        return CredentialOutcome(CredentialStatus.RESOLVED, env_key, "environment")

    if store is not None:
        stored_key = store.load()
        if stored_key:
            return CredentialOutcome(CredentialStatus.RESOLVED, stored_key, "config")

    if interactive:
        return CredentialOutcome(CredentialStatus.NEEDS_INTERACTIVE)
    return CredentialOutcome(CredentialStatus.FATAL)


def prompt_for_api_key(input_func: Callable[[str], str] = input) -> str:
    """Ask for a key on the terminal. Returns "" when nothing was entered."""
    print("\nUnitForge needs an Anthropic API key to generate tests.")
    print("You can create one at https://console.anthropic.com/settings/keys\n")
    try:
        return input_func("Please enter your Anthropic API key: ").strip()
    except EOFError:
        return ""


def confirm(question: str, input_func: Callable[[str], str] = input) -> bool:
    try:
        answer = input_func(f"{question} (y/n): ").strip().lower()
    except EOFError:
        return False
    return answer in ("y", "yes")
