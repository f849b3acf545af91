"""Response parsing helpers for plugins.

Catalog services often return JSON either as the whole body or embedded in
an HTML page. These helpers locate and decode that payload and map every
failure onto the :class:`~tunefetch.exceptions.ParseError` family, so a
plugin's ``parse`` can stay a short mapping from service fields to
:class:`~tunefetch.query.QueryResultData`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from tunefetch.exceptions import (
    InvalidResponseTextError,
    JsonUnparsableError,
    ParsableTextNotFoundError,
)

logger = logging.getLogger(__name__)


def extract_embedded_text(
    text: str,
    start_marker: str,
    end_marker: Optional[str] = None,
) -> str:
    """Return the text found between two markers.

    Args:
        text: Response body
        start_marker: Marker preceding the payload
        end_marker: Marker following the payload; the rest of the text
            is returned when omitted

    Raises:
        ParsableTextNotFoundError: If ``start_marker`` is not in ``text``
        InvalidResponseTextError: If the payload is not terminated by
            ``end_marker``
    """
    start = text.find(start_marker)
    if start == -1:
        raise ParsableTextNotFoundError()

    start += len(start_marker)
    if end_marker is None:
        return text[start:]

    end = text.find(end_marker, start)
    if end == -1:
        raise InvalidResponseTextError()

    return text[start:end]


def decode_json(text: str) -> Any:
    """Decode a JSON document, raising :class:`JsonUnparsableError` on failure."""
    if not text or not text.strip():
        raise ParsableTextNotFoundError()

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.debug(f"JSON decoding failed at position {e.pos}: {e.msg}")
        raise JsonUnparsableError(str(e)) from e


async def read_json(
    response: httpx.Response,
    start_marker: Optional[str] = None,
    end_marker: Optional[str] = None,
) -> Any:
    """Await a response body and decode the JSON it carries.

    When markers are given, only the text between them is decoded.

    Args:
        response: Response returned by the transport, possibly unread
        start_marker: Optional marker preceding the embedded JSON
        end_marker: Optional marker following the embedded JSON

    Returns:
        The decoded JSON value
    """
    await response.aread()
    text = response.text

    if start_marker is not None:
        text = extract_embedded_text(text, start_marker, end_marker)

    return decode_json(text)


def require(data: Any, *path: Any) -> Any:
    """Walk ``path`` into nested JSON, raising if any step is missing.

    Example:
        require(payload, "results", 0, "trackName")

    Raises:
        InvalidResponseTextError: If a key or index along ``path`` is missing
    """
    current = data
    for key in path:
        try:
            current = current[key]
        except (KeyError, IndexError, TypeError) as e:
            raise InvalidResponseTextError(
                f"The response text is missing the field {'/'.join(map(str, path))}"
            ) from e
    return current
