"""Provider registry."""

from pathlib import Path
from typing import Optional

from ..provider import ChatProvider
from .claude_code import ClaudeCodeProvider

PROVIDERS: dict[str, type[ChatProvider]] = {
    ClaudeCodeProvider.name: ClaudeCodeProvider,
}


def get_provider(name: str = "claude_code", base_path: Optional[Path] = None) -> ChatProvider:
    """Create the provider registered under ``name``, rooted at ``base_path``."""
    try:
        provider_class = PROVIDERS[name]
    except KeyError:
        raise ValueError(f"Unknown provider: {name}") from None
    return provider_class(base_path)
