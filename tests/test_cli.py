"""Tests for the command line interface."""

import json

from click.testing import CliRunner

from claude_history.cli import main


def _invoke(projects_dir, *args):
    return CliRunner().invoke(main, ["--projects-dir", str(projects_dir), *args])


def test_projects(tmp_claude_code_dir):
    result = _invoke(tmp_claude_code_dir, "projects")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [s["title"] for s in data[0]["sessions"]] == ["API test suite", "Help me refactor the auth module"]


def test_messages(tmp_claude_code_dir):
    result = _invoke(tmp_claude_code_dir, "messages", "session-002")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [m["role"] for m in data] == ["user", "assistant"]
    assert data[1]["id"] == "uuid-102#msg_11"


def test_search(tmp_claude_code_dir):
    result = _invoke(tmp_claude_code_dir, "search", "Read")
    assert result.exit_code == 0
    kinds = [r["match_kind"] for r in json.loads(result.output)]
    assert kinds[0] == "content"
    assert "tool_name" in kinds


def test_path(tmp_claude_code_dir):
    result = _invoke(tmp_claude_code_dir, "path", "session-001")
    assert result.exit_code == 0
    assert result.output.strip().endswith("session-001.jsonl")


def test_unknown_session_is_an_error(tmp_claude_code_dir):
    result = _invoke(tmp_claude_code_dir, "messages", "nope")
    assert result.exit_code == 1
    assert "Session file not found for ID: nope" in result.output


def test_missing_root_is_an_error(tmp_path):
    result = _invoke(tmp_path / "missing", "projects")
    assert result.exit_code == 1
    assert "Cannot read log directory" in result.output


def test_projects_dir_from_environment(tmp_claude_code_dir, monkeypatch):
    monkeypatch.setenv("CLAUDE_HISTORY_PATH", str(tmp_claude_code_dir))
    result = CliRunner().invoke(main, ["path", "session-002"])
    assert result.exit_code == 0
    assert result.output.strip().endswith("session-002.jsonl")
