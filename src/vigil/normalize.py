"""
Input normalizer.

Turns an ActionRequest into one flat string for pattern search. Segments
are joined with single spaces in a fixed order:

    params, context, tool, agent, role

Structured params are serialized as compact JSON. Absent fields are
skipped; present-but-empty fields contribute an empty segment.
"""

import json
import logging
from typing import Any

from vigil.errors import NormalizationError
from vigil.schema import ActionRequest

logger = logging.getLogger(__name__)


def serialize_params(params: str | dict[Any, Any]) -> str:
    """
    Serialize tool parameters to searchable text.

    Text params are used verbatim. Mappings become compact JSON with
    non-ASCII kept as-is; leaf values JSON cannot represent are rendered
    with str().

    Raises:
        NormalizationError: If the structure is cyclic, nested too deeply,
            has keys with no text form or has a leaf whose str() fails
    """
    if isinstance(params, str):
        return params
    try:
        return json.dumps(
            params,
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        )
    except Exception as e:
        raise NormalizationError(field_name="params", underlying_error=str(e)) from e


def normalize_request(request: ActionRequest) -> str:
    """Build the searchable text for a request."""
    parts: list[str] = []

    if request.params is not None:
        parts.append(serialize_params(request.params))

    if request.context is not None:
        if isinstance(request.context, list):
            parts.append(" ".join(request.context))
        else:
            parts.append(request.context)

    for value in (request.tool, request.agent, request.role):
        if value is not None:
            parts.append(value)

    return " ".join(parts)


def bound_text(text: str, max_chars: int) -> str:
    """Truncate text to max_chars so unanchored patterns stay cheap."""
    if len(text) <= max_chars:
        return text
    logger.debug("Normalized input truncated from %d to %d chars", len(text), max_chars)
    return text[:max_chars]
