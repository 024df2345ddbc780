"""Decoding of single JSONL lines into typed records.

Record types kept:
- "user": user prompts, and tool_result blocks returned to the agent.
- "assistant": agent output. One logical turn may span several lines that
  share the same ``message.id``.
- "summary": a title for the conversation ending at ``leafUuid``.

Everything else ("system", "progress", "file-history-snapshot", ...) is
rejected with RecordParseError and skipped by callers.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from .core import Blocks, ContentBlock, MessageContent, PlainText
from .errors import RecordParseError

logger = logging.getLogger(__name__)

RECORD_KINDS = ("user", "assistant", "summary")
BLOCK_KINDS = ("text", "tool_use", "tool_result", "thinking")


@dataclass
class RawRecord:
    """One physical JSONL line."""

    record_kind: str  # "user" | "assistant" | "summary"
    session_id: str = ""
    working_directory: str = ""
    uuid: str = ""
    timestamp: str = ""
    version: str = ""
    parent_id: Optional[str] = None
    message_id: Optional[str] = None  # provider message id
    model: Optional[str] = None
    content: MessageContent = field(default_factory=lambda: PlainText(""))
    tool_result_payload: Any = None
    leaf_id: str = ""
    summary_text: str = ""


def parse_record(line: str) -> RawRecord:
    """Decode one JSONL line.

    Raises RecordParseError for invalid JSON, unsupported record types and
    missing required fields.
    """
    try:
        entry = json.loads(line)
    except json.JSONDecodeError as e:
        raise RecordParseError(f"invalid JSON: {e}") from e

    if not isinstance(entry, dict):
        raise RecordParseError("record is not a JSON object")

    record_kind = entry.get("type")
    if record_kind not in RECORD_KINDS:
        raise RecordParseError(f"unsupported record type: {record_kind!r}")

    if record_kind == "summary":
        return RawRecord(
            record_kind="summary",
            leaf_id=_required_str(entry, "leafUuid"),
            summary_text=_required_str(entry, "summary"),
        )

    message = entry.get("message")
    if not isinstance(message, dict) or "content" not in message:
        raise RecordParseError("missing field: message.content")

    return RawRecord(
        record_kind=record_kind,
        session_id=_required_str(entry, "sessionId"),
        working_directory=_required_str(entry, "cwd"),
        uuid=_required_str(entry, "uuid"),
        timestamp=_required_str(entry, "timestamp"),
        version=_required_str(entry, "version"),
        parent_id=_optional_str(entry, "parentUuid"),
        message_id=_optional_str(message, "id"),
        model=_optional_str(message, "model"),
        content=parse_content(message["content"]),
        tool_result_payload=entry.get("toolUseResult"),
    )


def parse_content(value: Any) -> MessageContent:
    """Decide the content variant once: a string or a list of blocks."""
    if isinstance(value, str):
        return PlainText(value)

    if isinstance(value, list):
        blocks = []
        for item in value:
            try:
                blocks.append(parse_content_block(item))
            except RecordParseError as e:
                logger.debug("Dropping content block: %s", e)
        return Blocks(blocks)

    return PlainText(to_compact_json(value))


def parse_content_block(value: Any) -> ContentBlock:
    """Decode one element of a content array."""
    if not isinstance(value, dict):
        raise RecordParseError(f"content block is not an object: {type(value).__name__}")

    kind = value.get("type")
    if kind not in BLOCK_KINDS:
        kind = "unknown"

    # tool_use carries its own id; tool_result points back at it
    if kind == "tool_use":
        tool_call_id = _optional_str(value, "id")
    else:
        tool_call_id = _optional_str(value, "tool_use_id")

    return ContentBlock(
        kind=kind,
        text=_optional_str(value, "text"),
        tool_name=_optional_str(value, "name"),
        tool_input=value.get("input"),
        tool_call_id=tool_call_id,
        result_text=_result_text(value.get("content")),
        thinking_text=_optional_str(value, "thinking"),
    )


def iter_records(lines: Iterable[str], source: str = "<lines>") -> Iterator[RawRecord]:
    """Yield the records of a file, skipping blank and undecodable lines."""
    for line_num, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue
        try:
            yield parse_record(line)
        except RecordParseError as e:
            logger.debug("Skipping %s:%d: %s", source, line_num, e)


def to_compact_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _result_text(content: Any) -> Optional[str]:
    """Flatten a tool_result's content into text."""
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return None

    # Content can be array of blocks (text, image, etc.)
    parts = []
    for sub in content:
        if isinstance(sub, dict):
            sub_type = sub.get("type", "")
            if sub_type == "image":
                parts.append("[Image]")
            elif isinstance(sub.get("text"), str):
                parts.append(sub["text"])
        elif isinstance(sub, str):
            parts.append(sub)
    return "\n".join(parts)


def _required_str(entry: dict, key: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str):
        raise RecordParseError(f"missing field: {key}")
    return value


def _optional_str(entry: dict, key: str) -> Optional[str]:
    value = entry.get(key)
    return value if isinstance(value, str) else None
