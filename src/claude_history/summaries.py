"""Leaf-uuid to summary-title index for one project directory.

Summary records may live in any session file of the project, so the whole
directory is scanned once and the result shared by every session in it.
"""

import json
import logging
from pathlib import Path
from typing import Iterable

from .fs import list_jsonl_files, read_lines

logger = logging.getLogger(__name__)


def build_summary_index(lines: Iterable[str]) -> dict[str, str]:
    """Collect ``leafUuid -> summary`` pairs from JSONL lines.

    Only the fields a summary needs are looked at; any other line is ignored.
    """
    index: dict[str, str] = {}
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            continue
        if not isinstance(entry, dict) or entry.get("type") != "summary":
            continue
        leaf_id = entry.get("leafUuid")
        summary = entry.get("summary")
        if isinstance(leaf_id, str) and isinstance(summary, str):
            index[leaf_id] = summary
    return index


async def load_summary_index(project_dir: Path) -> dict[str, str]:
    """Scan every session file of a project for summary records."""
    index: dict[str, str] = {}
    for jsonl_file in await list_jsonl_files(project_dir):
        try:
            lines = await read_lines(jsonl_file)
        except OSError as e:
            logger.warning("Failed to read %s for summaries: %s", jsonl_file, e)
            continue
        index.update(build_summary_index(lines))
    return index
