"""System prompt for the Mapbox assistant.

The prompt text lives in ``system.txt`` next to this file; set SYSTEM_PROMPT
in the environment to replace it.
"""

from __future__ import annotations

from pathlib import Path


def _prompts_dir() -> Path:
    """Directory containing prompt .txt files (next to this __init__.py)."""
    return Path(__file__).resolve().parent


def load_system_prompt() -> str:
    return (_prompts_dir() / "system.txt").read_text(encoding="utf-8").strip()


DEFAULT_SYSTEM_PROMPT = load_system_prompt()
