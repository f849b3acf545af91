"""Incremental scanner for transfer progress printed by an external process.

The process output is split into chunks ending with a ``%`` delimiter. A
chunk carries a progress update when it ends with ``<1-3 digits>[.<digit>]%``
(``45.2%``, ``100%``, ``100.0%``). Chunks without that shape are skipped.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import AsyncIterator, Optional

logger = logging.getLogger(__name__)

DELIMITER = b"%"
PROGRESS_PATTERN = re.compile(rb"(?<![\d.])(\d{1,3}(?:\.\d?)?)%\Z")
COMPLETE_PERCENT = 100.0


def parse_progress(chunk: bytes) -> Optional[float]:
    """Extract the trailing percentage of a chunk, or ``None`` if absent."""
    match = PROGRESS_PATTERN.search(chunk)
    if match is None:
        return None
    return float(match.group(1))


def is_complete(value: float) -> bool:
    """True once a progress value reports a finished transfer."""
    return value >= COMPLETE_PERCENT


async def iter_chunks(
    reader: asyncio.StreamReader,
    delimiter: bytes = DELIMITER,
) -> AsyncIterator[bytes]:
    """Yield ``reader`` content split after each ``delimiter``.

    The final chunk may lack the delimiter. Text longer than the reader's
    buffer limit without a delimiter is dropped.
    """
    while True:
        try:
            chunk = await reader.readuntil(delimiter)
        except asyncio.IncompleteReadError as e:
            if e.partial:
                yield e.partial
            return
        except asyncio.LimitOverrunError as e:
            await reader.readexactly(e.consumed)
            logger.debug(f"Discarded {e.consumed} bytes of output without a progress delimiter")
            continue
        yield chunk


async def scan_progress(reader: asyncio.StreamReader) -> AsyncIterator[float]:
    """Yield progress values parsed from ``reader`` in output order.

    Stops right after a value reporting completion, or when the stream is
    exhausted.
    """
    async for chunk in iter_chunks(reader):
        value = parse_progress(chunk)
        if value is None:
            continue

        yield value
        if is_complete(value):
            return
