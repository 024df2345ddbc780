"""Fold a session's record stream back into logical messages.

The agent writes one logical turn as several lines:
- streamed assistant output arrives as consecutive records that share a
  provider ``message.id``;
- each tool invocation's result comes back as a separate "user" record made
  of tool_result blocks.

Both are merged into the preceding assistant message so the output reads the
way the conversation happened.
"""

from dataclasses import replace
from typing import Iterable, Optional

from .core import Blocks, ChatMessage, ContentBlock, MessageContent, PlainText
from .records import RawRecord


def to_chat_message(record: RawRecord) -> ChatMessage:
    """Convert a user/assistant record into a candidate message."""
    content = record.content

    if record.record_kind == "user" and record.tool_result_payload is not None and isinstance(content, Blocks):
        content = Blocks([
            replace(b, structured_result=record.tool_result_payload) if b.kind == "tool_result" else b
            for b in content.blocks
        ])

    # Fragments of one turn share message_id; keep it in the id so they can be matched
    message_id = f"{record.uuid}#{record.message_id}" if record.message_id else record.uuid

    return ChatMessage(
        id=message_id,
        parent_id=record.parent_id,
        timestamp=record.timestamp,
        role=record.record_kind,
        content=content,
        working_directory=record.working_directory,
        agent_version=record.version,
        model=record.model,
    )


def reconstruct_messages(records: Iterable[RawRecord]) -> list[ChatMessage]:
    """Return the ordered messages of one session.

    Only the last output message is ever rewritten; merges replace it with a
    new value instead of mutating it.
    """
    messages: list[ChatMessage] = []

    for record in records:
        if record.record_kind not in ("user", "assistant"):
            continue

        candidate = to_chat_message(record)
        previous = messages[-1] if messages else None

        if previous is not None and _continues_previous(candidate, record.message_id, previous):
            messages[-1] = replace(previous, content=append_content(previous.content, candidate.content))
        elif previous is not None and _answers_previous(candidate, previous):
            messages[-1] = replace(previous, content=attach_tool_results(previous.content, candidate.content))
        else:
            messages.append(candidate)

    return messages


def append_content(previous: MessageContent, current: MessageContent) -> Blocks:
    """Concatenate two contents; the result is always Blocks."""
    return Blocks(_as_blocks(previous) + _as_blocks(current))


def attach_tool_results(assistant_content: MessageContent, results: MessageContent) -> MessageContent:
    """Write each tool_result into the tool_use block with the same call id.

    Results whose call id matches no tool_use block are dropped.
    """
    if not isinstance(assistant_content, Blocks) or not isinstance(results, Blocks):
        return assistant_content

    blocks = list(assistant_content.blocks)
    for result in results.blocks:
        if result.kind != "tool_result" or result.tool_call_id is None:
            continue
        for i, block in enumerate(blocks):
            if block.kind == "tool_use" and block.tool_call_id == result.tool_call_id:
                blocks[i] = replace(
                    block,
                    result_text=result.result_text,
                    structured_result=result.structured_result,
                )
                break

    return Blocks(blocks)


def _continues_previous(candidate: ChatMessage, message_id: Optional[str], previous: ChatMessage) -> bool:
    """Streamed fragment of the same assistant turn."""
    if not message_id:
        return False
    return (
        candidate.role == "assistant"
        and previous.role == "assistant"
        and previous.id.endswith(message_id)
    )


def _answers_previous(candidate: ChatMessage, previous: ChatMessage) -> bool:
    """A user record that only carries results for the previous tool calls."""
    if candidate.role != "user" or not isinstance(candidate.content, Blocks):
        return False
    blocks = candidate.content.blocks
    if not blocks or any(b.kind != "tool_result" for b in blocks):
        return False
    return previous.role == "assistant" and previous.has_tool_calls()


def _as_blocks(content: MessageContent) -> list[ContentBlock]:
    if isinstance(content, PlainText):
        return [ContentBlock(kind="text", text=content.text)]
    return list(content.blocks)
