"""Asynchronous filesystem helpers for the MCP sandbox demo."""

import asyncio
import os
from pathlib import Path


async def read_file(file_path="./pyproject.toml", encoding="utf-8"):
    """Read a file's contents."""
    path = Path(file_path).resolve()
    try:
        content = await asyncio.to_thread(path.read_text, encoding=encoding)
    except OSError as exc:
        raise RuntimeError(f"Failed to read file: {exc}") from exc
    return {"path": str(path), "size": len(content), "encoding": encoding, "content": content}


async def write_file(file_path, content, encoding="utf-8"):
    """Write content to a file."""
    path = Path(file_path).resolve()
    try:
        await asyncio.to_thread(path.write_text, content, encoding=encoding)
    except OSError as exc:
        raise RuntimeError(f"Failed to write file: {exc}") from exc
    return {"path": str(path), "size": path.stat().st_size, "encoding": encoding, "written": True}


async def list_directory(dir_path=".", include_hidden=False):
    """List the files and directories in a path."""
    path = Path(dir_path).resolve()
    entries = []
    for item in sorted(await asyncio.to_thread(os.listdir, path)):
        if not include_hidden and item.startswith("."):
            continue
        child = path / item
        entries.append({"name": item, "type": "directory" if child.is_dir() else "file"})
    return {"path": str(path), "count": len(entries), "items": entries}


async def file_info(file_path):
    """Get size and timestamps of a file."""
    stats = await asyncio.to_thread(os.stat, file_path)
    return {
        "path": str(Path(file_path).resolve()),
        "size": stats.st_size,
        "modified": stats.st_mtime,
        "isDirectory": os.path.isdir(file_path),
    }
