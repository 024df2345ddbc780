"""Abstract base class for chat history providers."""

from abc import ABC, abstractmethod
from pathlib import Path

from .core import ChatMessage, ChatSession, ProjectFolder, SearchResult


class ChatProvider(ABC):
    """Base class for chat log backends.

    A provider reads a tree of session logs rooted at ``get_base_path()``.
    Every operation re-reads from disk; nothing is cached between calls.
    """

    name: str

    @abstractmethod
    def get_base_path(self) -> Path:
        """Return the root directory holding the project folders."""
        ...

    def is_available(self) -> bool:
        """Return True if the log root exists on this machine."""
        return self.get_base_path().is_dir()

    @abstractmethod
    async def list_projects(self) -> list[ProjectFolder]:
        """Return all projects with at least one session, most recent first."""
        ...

    @abstractmethod
    async def list_sessions(self, storage_path: Path) -> list[ChatSession]:
        """Return the sessions stored in one project directory."""
        ...

    @abstractmethod
    async def list_messages(self, session_id: str) -> list[ChatMessage]:
        """Return the reconstructed messages of a session."""
        ...

    @abstractmethod
    async def search(self, query: str) -> list[SearchResult]:
        """Return every match for ``query`` across all sessions."""
        ...

    @abstractmethod
    async def resolve_session_file_path(self, session_id: str) -> str:
        """Return the path of the file backing a session."""
        ...
