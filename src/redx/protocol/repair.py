"""Best-effort decoding of a possibly truncated structured payload.

The balance count is a plain character scan. Brace or bracket characters that
sit inside quoted string values are counted too, so such payloads may be
"repaired" into invalid JSON and stay undecodable until the stream completes.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from redx.protocol.schema import InteractiveStructure

logger = logging.getLogger(__name__)


def balance_closers(text: str) -> str:
    missing_braces = text.count("{") - text.count("}")
    missing_brackets = text.count("[") - text.count("]")
    return text + "}" * max(missing_braces, 0) + "]" * max(missing_brackets, 0)


def _decode(text: str) -> Any | None:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def _validate(data: Any) -> InteractiveStructure | None:
    try:
        return InteractiveStructure.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Structure payload has unexpected shape: {e.error_count()} errors")
        return None


def repair_structure(payload: str | None) -> InteractiveStructure | None:
    if not payload:
        return None

    text = payload.strip()
    data = _decode(text)
    if data is None:
        data = _decode(balance_closers(text))
    if data is None:
        return None
    return _validate(data)
