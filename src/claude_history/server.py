"""FastAPI web server for claude-history."""

import logging
from pathlib import Path
from typing import NoReturn, Optional

from fastapi import FastAPI, HTTPException, Query

from .backends import get_provider
from .errors import DataSourceUnavailableError, SessionNotFoundError
from .export import message_to_dict, project_to_dict, search_result_to_dict
from .provider import ChatProvider

logger = logging.getLogger(__name__)

app = FastAPI(title="claude-history", version="0.1.0")

# Provider cache (populated on first request)
_provider: ChatProvider | None = None
_base_path: Optional[Path] = None


def configure(base_path: Optional[Path]) -> None:
    """Point the server at a log root other than the default."""
    global _provider, _base_path
    _base_path = base_path
    _provider = None


def _get_provider() -> ChatProvider:
    """Lazily initialize and cache the provider."""
    global _provider
    if _provider is None:
        _provider = get_provider(base_path=_base_path)
        logger.info("Reading chat logs from %s", _provider.get_base_path())
    return _provider


def _raise_for(operation: str, error: Exception) -> NoReturn:
    """Map an engine failure to an HTTP error with a plain message."""
    if isinstance(error, SessionNotFoundError):
        raise HTTPException(status_code=404, detail=str(error))
    if isinstance(error, DataSourceUnavailableError):
        logger.error("%s failed: %s", operation, error)
        raise HTTPException(status_code=503, detail=str(error))
    logger.error("%s failed: %s", operation, error)
    raise HTTPException(status_code=500, detail=f"Failed to {operation}")


# ── Routes ───────────────────────────────────────────────────────


@app.get("/api/projects")
async def get_projects():
    """Return all projects and their sessions, most recent first."""
    try:
        projects = await _get_provider().list_projects()
    except Exception as e:
        _raise_for("list projects", e)
    return [project_to_dict(p) for p in projects]


@app.get("/api/session/{session_id}/messages")
async def get_session_messages(session_id: str):
    """Return the reconstructed messages of a session."""
    try:
        messages = await _get_provider().list_messages(session_id)
    except Exception as e:
        _raise_for("load messages", e)
    return {
        "session_id": session_id,
        "messages": [message_to_dict(m) for m in messages],
    }


@app.get("/api/session/{session_id}/path")
async def get_session_path(session_id: str):
    """Return the path of the JSONL file backing a session."""
    try:
        path = await _get_provider().resolve_session_file_path(session_id)
    except Exception as e:
        _raise_for("resolve session file", e)
    return {"session_id": session_id, "path": path}


@app.get("/api/search")
async def search(q: str = Query(..., description="Case-insensitive search text")):
    """Search every session for the query."""
    try:
        results = await _get_provider().search(q)
    except Exception as e:
        _raise_for("search", e)
    return {
        "query": q,
        "total": len(results),
        "results": [search_result_to_dict(r) for r in results],
    }
