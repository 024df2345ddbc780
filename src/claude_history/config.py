"""Path resolution for the Claude Code log directory."""

import os
from pathlib import Path


def get_claude_code_path() -> Path:
    """Return the path to Claude Code's projects directory."""
    env = os.environ.get("CLAUDE_HISTORY_PATH")
    if env:
        return Path(env).expanduser()

    return Path.home() / ".claude" / "projects"
