"""Export engine results as JSON-serializable structures."""

import json
from dataclasses import asdict
from typing import Any

from .core import ChatMessage, ChatSession, PlainText, ProjectFolder, SearchResult


def session_to_dict(session: ChatSession) -> dict:
    return asdict(session)


def project_to_dict(project: ProjectFolder) -> dict:
    return {
        "name": project.name,
        "storage_path": project.storage_path,
        "sessions": [session_to_dict(s) for s in project.sessions],
    }


def message_to_dict(msg: ChatMessage) -> dict:
    """Convert a message; content is a string or a list of block objects."""
    if isinstance(msg.content, PlainText):
        content: Any = msg.content.text
    else:
        content = [asdict(b) for b in msg.content.blocks]

    return {
        "id": msg.id,
        "parent_id": msg.parent_id,
        "timestamp": msg.timestamp,
        "role": msg.role,
        "content": content,
        "working_directory": msg.working_directory,
        "agent_version": msg.agent_version,
        "model": msg.model,
    }


def search_result_to_dict(result: SearchResult) -> dict:
    return asdict(result)


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)
