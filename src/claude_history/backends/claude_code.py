"""Claude Code chat history backend.

Reads the ~/.claude/projects/ tree: one directory per project, one
``<session>.jsonl`` file per session. The directory name is a mangled path,
so the real project path is taken from the ``cwd`` recorded in the logs.

Sessions are listed from a single pass over each file; messages are only
reconstructed when a session is opened. Summary records can sit in any file
of a project, so their index is built once per project directory.
"""

import json
import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from ..config import get_claude_code_path
from ..core import ChatMessage, ChatSession, ProjectFolder, SearchResult
from ..errors import SessionNotFoundError
from ..fs import list_jsonl_files, list_subdirectories, read_lines
from ..provider import ChatProvider
from ..reconstruct import reconstruct_messages, to_chat_message
from ..records import iter_records
from ..search import rank_results, search_lines
from ..summaries import load_summary_index
from ..titles import UNTITLED, derive_title

logger = logging.getLogger(__name__)


class ClaudeCodeProvider(ChatProvider):
    """Provider for Claude Code chat history."""

    name = "claude_code"

    def __init__(self, base_path: Optional[Path] = None) -> None:
        self._base_path = Path(base_path) if base_path is not None else None

    def get_base_path(self) -> Path:
        if self._base_path is not None:
            return self._base_path
        return get_claude_code_path()

    async def list_projects(self) -> list[ProjectFolder]:
        projects = []
        for project_dir in await list_subdirectories(self.get_base_path()):
            sessions = await self.list_sessions(project_dir)
            if not sessions:
                continue

            projects.append(ProjectFolder(
                # Most recent session's cwd, not the mangled folder name
                name=sessions[0].project_path,
                storage_path=str(project_dir),
                sessions=sessions,
            ))

        projects.sort(key=_latest_update, reverse=True)
        return projects

    async def list_sessions(self, storage_path: Path) -> list[ChatSession]:
        project_dir = Path(storage_path)
        jsonl_files = await list_jsonl_files(project_dir)
        summary_index = await load_summary_index(project_dir)

        sessions = []
        for jsonl_file in jsonl_files:
            try:
                lines = await read_lines(jsonl_file)
            except OSError as e:
                logger.warning("Failed to read session %s: %s", jsonl_file, e)
                continue

            session = build_session(lines, summary_index, source=str(jsonl_file))
            if session is not None:
                sessions.append(session)

        sessions.sort(key=lambda s: s.last_updated, reverse=True)
        return sessions

    async def list_messages(self, session_id: str) -> list[ChatMessage]:
        path = await self._find_session_file(session_id)
        lines = await read_lines(path)
        return reconstruct_messages(iter_records(lines, source=str(path)))

    async def search(self, query: str) -> list[SearchResult]:
        if not query:
            return []
        query_lower = query.lower()

        results: list[SearchResult] = []
        for project_dir in await list_subdirectories(self.get_base_path()):
            for jsonl_file in await list_jsonl_files(project_dir):
                try:
                    lines = await read_lines(jsonl_file)
                except OSError as e:
                    logger.warning("Failed to search %s: %s", jsonl_file, e)
                    continue
                results.extend(search_lines(lines, query_lower))

        return rank_results(results)

    async def resolve_session_file_path(self, session_id: str) -> str:
        return str(await self._find_session_file(session_id))

    # ── Private helpers ──────────────────────────────────────────────

    async def _find_session_file(self, session_id: str) -> Path:
        """Locate the file holding a line with this session id."""
        pattern = re.compile(r'"sessionId"\s*:\s*"' + re.escape(session_id) + '"')

        for project_dir in await list_subdirectories(self.get_base_path()):
            for jsonl_file in await list_jsonl_files(project_dir):
                try:
                    lines = await read_lines(jsonl_file)
                except OSError as e:
                    logger.warning("Failed to read %s: %s", jsonl_file, e)
                    continue
                if any(pattern.search(line) and _names_session(line, session_id) for line in lines):
                    return jsonl_file

        raise SessionNotFoundError(session_id)


def build_session(
    lines: Iterable[str],
    summary_index: dict[str, str],
    source: str = "<lines>",
) -> Optional[ChatSession]:
    """Derive a session's metadata from its raw lines.

    Returns None when the file holds no user or assistant record.
    """
    session_id = ""
    project_path = ""
    created_at = ""
    first_user_message: Optional[ChatMessage] = None
    message_count = 0
    last_updated = ""
    last_uuid = ""

    for record in iter_records(lines, source=source):
        if record.record_kind == "summary":
            continue

        if not session_id:
            session_id = record.session_id
            project_path = record.working_directory

        message_count += 1
        last_updated = record.timestamp
        last_uuid = record.uuid
        if not created_at:
            created_at = record.timestamp

        if first_user_message is None and record.record_kind == "user":
            first_user_message = to_chat_message(record)

    if message_count == 0:
        return None

    if first_user_message is not None:
        created_at = first_user_message.timestamp

    title = summary_index.get(last_uuid)
    if title is None:
        if first_user_message is not None:
            title = derive_title(first_user_message.extract_text())
        else:
            title = UNTITLED

    return ChatSession(
        id=session_id,
        title=title,
        created_at=created_at,
        last_updated=last_updated,
        project_path=project_path,
        message_count=message_count,
    )


def _names_session(line: str, session_id: str) -> bool:
    """True when a non-summary record carries this top-level sessionId."""
    try:
        entry = json.loads(line)
    except json.JSONDecodeError:
        return False
    return (
        isinstance(entry, dict)
        and entry.get("type") != "summary"
        and entry.get("sessionId") == session_id
    )


def _latest_update(project: ProjectFolder) -> str:
    return max((s.last_updated for s in project.sessions), default="")
