"""Shared test fixtures for claude-history."""

import json

import pytest


def record(
    kind,
    uuid,
    content,
    timestamp,
    session_id="session-001",
    cwd="/Users/testuser/dev/myapp",
    message_id=None,
    parent=None,
    model=None,
    tool_use_result=None,
):
    """Build one user/assistant JSONL entry the way the agent writes it."""
    message = {"role": kind, "content": content}
    if message_id is not None:
        message["id"] = message_id
    if model is not None:
        message["model"] = model

    entry = {
        "parentUuid": parent,
        "cwd": cwd,
        "sessionId": session_id,
        "version": "1.0.51",
        "type": kind,
        "message": message,
        "uuid": uuid,
        "timestamp": timestamp,
    }
    if tool_use_result is not None:
        entry["toolUseResult"] = tool_use_result
    return entry


def summary(leaf_uuid, text):
    return {"type": "summary", "summary": text, "leafUuid": leaf_uuid}


def write_jsonl(path, entries):
    """Write entries compactly, one per line. Strings are written verbatim."""
    lines = [e if isinstance(e, str) else json.dumps(e, separators=(",", ":")) for e in entries]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


@pytest.fixture
def tmp_claude_code_dir(tmp_path):
    """Create a synthetic Claude Code projects directory with realistic JSONL.

    Includes:
    - Streamed assistant output split across lines sharing a message id
    - tool_use followed by a user tool_result entry (with toolUseResult)
    - Thinking blocks
    - Summary, system and file-history-snapshot entries
    - A corrupt line
    - A second project whose only session has no messages
    """
    projects = tmp_path / "projects"
    project_dir = projects / "-Users-testuser-dev-myapp"
    project_dir.mkdir(parents=True)

    session_001 = [
        # 1. User prompt
        record("user", "uuid-001", "Help me refactor the auth module", "2025-01-20T10:00:00Z"),
        # 2-3. Assistant turn streamed as two lines with the same message id
        record("assistant", "uuid-002", [
            {"type": "thinking", "thinking": "I should read the current authentication code first."},
        ], "2025-01-20T10:00:10Z", message_id="msg_01", parent="uuid-001", model="claude-sonnet-4"),
        record("assistant", "uuid-003", [
            {"type": "text", "text": "Let me start by reading the current code."},
            {"type": "tool_use", "id": "toolu_001", "name": "Read", "input": {"file_path": "/src/auth.ts"}},
        ], "2025-01-20T10:00:20Z", message_id="msg_01", parent="uuid-002", model="claude-sonnet-4"),
        # 4. Tool result comes back as a user entry
        record("user", "uuid-004", [
            {"type": "tool_result", "tool_use_id": "toolu_001",
             "content": "export function authenticate(token: string) {\n  return jwt.verify(token);\n}"},
        ], "2025-01-20T10:00:21Z", parent="uuid-003",
            tool_use_result={"type": "text", "file": {"filePath": "/src/auth.ts", "numLines": 3}}),
        # 5. Not a message record
        {"type": "file-history-snapshot", "files": [{"path": "/src/auth.ts"}]},
        # 6. Partially written line
        '{"type":"assistant","message":{"content":[{"type":"text","te',
        # 7. Assistant reply
        record("assistant", "uuid-005", [
            {"type": "text", "text": "The auth module mixes validation and token refresh."},
        ], "2025-01-20T10:01:00Z", message_id="msg_02", parent="uuid-004", model="claude-sonnet-4"),
        # 8. User follow-up
        record("user", "uuid-006", "Looks good, now split it into separate files", "2025-01-20T10:05:00Z",
               parent="uuid-005"),
        # 9. System entry
        {"type": "system", "content": "Compacting conversation", "timestamp": "2025-01-20T10:05:01Z"},
    ]
    write_jsonl(project_dir / "session-001.jsonl", session_001)

    session_002 = [
        summary("uuid-102", "API test suite"),
        record("user", "uuid-101", "Write tests for the API", "2025-03-01T09:00:00Z", session_id="session-002"),
        record("assistant", "uuid-102", [{"type": "text", "text": "Sure, starting with the users endpoint."}],
               "2025-03-01T09:00:30Z", session_id="session-002", message_id="msg_11"),
    ]
    write_jsonl(project_dir / "session-002.jsonl", session_002)

    other_dir = projects / "-Users-testuser-dev-empty"
    other_dir.mkdir()
    write_jsonl(other_dir / "session-003.jsonl", [
        summary("uuid-999", "Orphan summary"),
        {"type": "system", "content": "nothing here"},
    ])
    (other_dir / "notes.txt").write_text("not a session", encoding="utf-8")

    return projects
