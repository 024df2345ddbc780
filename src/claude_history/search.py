"""Full-text search over raw JSONL lines.

Search does not reconstruct conversations. Each line is lower-cased and
checked for the query before any JSON decoding, so most lines are rejected
cheaply; only candidate lines are parsed and their fields examined one by
one.
"""

import json
import re
from typing import Iterable, Optional

from .core import ChatMessage, PlainText, SearchResult
from .errors import RecordParseError
from .reconstruct import to_chat_message
from .records import parse_record, to_compact_json

SNIPPET_CONTEXT = 30
SNIPPET_FALLBACK_LENGTH = 60

MATCH_PRIORITY = {
    "content": 0,
    "thinking": 1,
    "tool_name": 2,
    "tool_input": 3,
    "tool_result": 4,
}

_SESSION_ID_RE = re.compile(r'"sessionId"\s*:\s*"([^"]*)"')
_SUMMARY_TYPE_RE = re.compile(r'"type"\s*:\s*"summary"')


def extract_session_id_fast(line: str) -> Optional[str]:
    """Pull the session id out of a raw line without decoding it."""
    match = _SESSION_ID_RE.search(line)
    return match.group(1) if match else None


def is_summary_line(line: str) -> bool:
    """True when the line's top-level ``type`` is ``summary``.

    The regex rejects almost every line; only candidates are decoded, so a
    ``"type":"summary"`` nested inside a tool input does not count.
    """
    if _SUMMARY_TYPE_RE.search(line) is None:
        return False
    try:
        entry = json.loads(line)
    except json.JSONDecodeError:
        return False
    return isinstance(entry, dict) and entry.get("type") == "summary"


def search_lines(lines: Iterable[str], query_lower: str) -> list[SearchResult]:
    """Search one session file's lines for an already lower-cased query."""
    results: list[SearchResult] = []
    session_id: Optional[str] = None

    for line in lines:
        if not line.strip():
            continue
        if is_summary_line(line):
            continue

        if query_lower not in line.lower():
            if session_id is None:
                session_id = extract_session_id_fast(line)
            continue

        try:
            record = parse_record(line)
        except RecordParseError:
            continue
        if record.record_kind == "summary":
            continue
        if session_id is None:
            session_id = record.session_id

        results.extend(_match_record(to_chat_message(record), record.uuid, session_id, query_lower))

    return results


def rank_results(results: list[SearchResult]) -> list[SearchResult]:
    """Order results by match kind, keeping scan order within a kind."""
    return sorted(results, key=lambda r: MATCH_PRIORITY.get(r.match_kind, len(MATCH_PRIORITY)))


def create_snippet(text: str, query: str) -> str:
    """Cut a short window of ``text`` around the first match of ``query``."""
    # Matched on the original text; lower() can change its length
    match = re.search(re.escape(query), text, re.IGNORECASE)
    if match is None:
        snippet = text[:SNIPPET_FALLBACK_LENGTH]
        return snippet + "..." if len(text) > SNIPPET_FALLBACK_LENGTH else snippet

    start = max(0, match.start() - SNIPPET_CONTEXT)
    end = min(len(text), match.end() + SNIPPET_CONTEXT)
    snippet = text[start:end]

    if start > 0:
        snippet = "..." + snippet
    if end < len(text):
        snippet = snippet + "..."
    return snippet


def _match_record(message: ChatMessage, message_id: str, session_id: str, query_lower: str) -> list[SearchResult]:
    """Check every searchable field of one message."""
    found: list[SearchResult] = []

    def hit(text: str, kind: str, snippet: Optional[str] = None) -> None:
        if query_lower in text.lower():
            found.append(SearchResult(
                session_id=session_id,
                message_id=message_id,
                snippet=snippet if snippet is not None else create_snippet(text, query_lower),
                match_kind=kind,
            ))

    if isinstance(message.content, PlainText):
        hit(message.content.text, "content")
        return found

    # One toolUseResult is copied onto every tool_result block of the record
    structured_seen = False
    for block in message.content.blocks:
        if block.text is not None:
            hit(block.text, "content")
        if block.thinking_text is not None:
            hit(block.thinking_text, "thinking")
        if block.tool_name is not None:
            hit(block.tool_name, "tool_name", snippet=f"Tool: {block.tool_name}")
        if block.tool_input is not None:
            hit(to_compact_json(block.tool_input), "tool_input")
        if block.result_text is not None:
            hit(block.result_text, "tool_result")
        if block.structured_result is not None and not structured_seen:
            structured_seen = True
            hit(to_compact_json(block.structured_result), "tool_structured_result")

    return found
