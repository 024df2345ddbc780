"""CLI entry point for claude-history."""

import asyncio
import logging
from pathlib import Path

import click
import uvicorn

from .backends import get_provider
from .errors import ClaudeHistoryError
from .export import message_to_dict, project_to_dict, search_result_to_dict, to_json


@click.group()
@click.option(
    "--projects-dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Claude Code projects directory (default: $CLAUDE_HISTORY_PATH or ~/.claude/projects).",
)
@click.option("--verbose", is_flag=True, help="Log skipped files and lines.")
@click.pass_context
def main(ctx: click.Context, projects_dir: Path | None, verbose: bool):
    """Browse and search Claude Code chat history."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = projects_dir


@main.command()
@click.option("--port", default=8080, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
@click.pass_obj
def serve(projects_dir: Path | None, port: int, host: str):
    """Start the JSON API."""
    from . import server

    server.configure(projects_dir)
    click.echo(f"Starting claude-history on http://{host}:{port}")
    uvicorn.run(server.app, host=host, port=port, reload=False)


@main.command()
@click.pass_obj
def projects(projects_dir: Path | None):
    """List projects and their sessions."""
    result = _run(get_provider(base_path=projects_dir).list_projects())
    click.echo(to_json([project_to_dict(p) for p in result]))


@main.command()
@click.argument("session_id")
@click.pass_obj
def messages(projects_dir: Path | None, session_id: str):
    """Print the reconstructed messages of a session."""
    result = _run(get_provider(base_path=projects_dir).list_messages(session_id))
    click.echo(to_json([message_to_dict(m) for m in result]))


@main.command()
@click.argument("query")
@click.pass_obj
def search(projects_dir: Path | None, query: str):
    """Search every session for QUERY."""
    result = _run(get_provider(base_path=projects_dir).search(query))
    click.echo(to_json([search_result_to_dict(r) for r in result]))


@main.command()
@click.argument("session_id")
@click.pass_obj
def path(projects_dir: Path | None, session_id: str):
    """Print the file backing a session."""
    click.echo(_run(get_provider(base_path=projects_dir).resolve_session_file_path(session_id)))


def _run(coro):
    """Run one engine operation, reporting failures as a one-line error."""
    try:
        return asyncio.run(coro)
    except (ClaudeHistoryError, OSError) as e:
        raise click.ClickException(str(e)) from e
