"""Core data models for claude-history."""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .titles import collapse_backspaces


@dataclass
class ContentBlock:
    """One typed block of a message's content."""

    kind: str  # "text" | "tool_use" | "tool_result" | "thinking" | "unknown"
    text: Optional[str] = None
    tool_name: Optional[str] = None
    tool_input: Any = None
    tool_call_id: Optional[str] = None  # "id" on tool_use, "tool_use_id" on tool_result
    result_text: Optional[str] = None
    structured_result: Any = None
    thinking_text: Optional[str] = None


@dataclass
class PlainText:
    """Message content given as a single string."""

    text: str


@dataclass
class Blocks:
    """Message content given as an ordered list of blocks."""

    blocks: list[ContentBlock] = field(default_factory=list)


MessageContent = Union[PlainText, Blocks]


@dataclass
class ChatMessage:
    """A logical message reconstructed from one or more JSONL records."""

    id: str  # record uuid, plus "#<provider message id>" when present
    parent_id: Optional[str]
    timestamp: str
    role: str  # "user" | "assistant"
    content: MessageContent
    working_directory: Optional[str] = None
    agent_version: Optional[str] = None
    model: Optional[str] = None

    def extract_text(self) -> str:
        """Return the human-readable text of the message."""
        if isinstance(self.content, PlainText):
            raw_text = self.content.text
        else:
            raw_text = "\n".join(b.text for b in self.content.blocks if b.text is not None)
        return collapse_backspaces(raw_text)

    def has_tool_calls(self) -> bool:
        if isinstance(self.content, PlainText):
            return False
        return any(b.kind == "tool_use" for b in self.content.blocks)


@dataclass
class ChatSession:
    """A single conversation file."""

    id: str
    title: str
    created_at: str
    last_updated: str
    project_path: str
    message_count: int


@dataclass
class ProjectFolder:
    """A project directory holding one or more sessions."""

    name: str  # working directory reported inside the logs
    storage_path: str  # directory on disk
    sessions: list[ChatSession] = field(default_factory=list)


@dataclass
class SearchResult:
    """A single search hit."""

    session_id: str
    message_id: str
    snippet: str
    match_kind: str  # "content" | "thinking" | "tool_name" | "tool_input" | "tool_result" | "tool_structured_result"
