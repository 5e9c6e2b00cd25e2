"""Newline-delimited JSON-RPC over standard input/output.

Stdout carries nothing but response frames; logging goes to stderr.
"""

import json
import logging
import sys
from io import TextIOWrapper
from typing import Optional

import anyio
from anyio import AsyncFile

from mcp_server.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def _default_stdin() -> AsyncFile:
    # Raw bytes: each line is decoded by the dispatcher, so invalid UTF-8 is a parse error.
    return anyio.wrap_file(sys.stdin.buffer)


def _default_stdout() -> AsyncFile:
    return anyio.wrap_file(TextIOWrapper(sys.stdout.buffer, encoding="utf-8"))


async def serve_stdio(
    dispatcher: Dispatcher,
    stdin: Optional[AsyncFile] = None,
    stdout: Optional[AsyncFile] = None,
) -> int:
    """Serve requests line by line until stdin reaches EOF.

    Each response is fully written and flushed before the next line is read,
    so responses come out in request order, one per line.

    Args:
        dispatcher: Dispatcher handling every decoded message
        stdin: Async text or binary stream to read from (process stdin bytes by default)
        stdout: Async text stream to write to (process stdout by default)

    Returns:
        Number of lines processed
    """
    if stdin is None:
        stdin = _default_stdin()
    if stdout is None:
        stdout = _default_stdout()

    logger.info(f"Serving tools over stdio: {', '.join(dispatcher.tool_names())}")

    processed = 0
    async for line in stdin:
        if not line.strip():
            continue

        processed += 1
        response = await dispatcher.handle_raw(line)
        if response is None:
            continue

        await stdout.write(json.dumps(response) + "\n")
        await stdout.flush()

    logger.info("stdin closed, shutting down")
    return processed
