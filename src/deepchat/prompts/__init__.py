"""Canonical behaviour prompt.

The prompt ships as ``system.txt`` next to this module. A
``prompts/system.txt`` in the working directory takes precedence, so the
instructions can be changed without touching the installed package.
"""

from functools import lru_cache
from pathlib import Path

PACKAGE_PROMPTS_DIR = Path(__file__).parent
OVERRIDE_DIR_NAME = "prompts"


def prompt_candidates(name: str) -> list[Path]:
    """Locations searched for a prompt, highest precedence first."""
    filename = f"{name}.txt"
    return [
        Path.cwd() / OVERRIDE_DIR_NAME / filename,
        PACKAGE_PROMPTS_DIR / filename,
    ]


@lru_cache(maxsize=8)
def load_prompt(name: str) -> str:
    """Read a prompt by name, with surrounding whitespace removed.

    Raises:
        FileNotFoundError: If no candidate location holds the prompt
    """
    candidates = prompt_candidates(name)
    for path in candidates:
        if path.is_file():
            return path.read_text(encoding="utf-8").strip()

    searched = "\n".join(f"  - {path}" for path in candidates)
    raise FileNotFoundError(f"Prompt '{name}' not found. Searched:\n{searched}")


def get_system_prompt() -> str:
    """The instruction sent first with every request."""
    return load_prompt("system")


__all__ = [
    "get_system_prompt",
    "load_prompt",
    "prompt_candidates",
]
