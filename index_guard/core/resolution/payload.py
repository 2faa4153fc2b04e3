"""Best-effort extraction of index names from a query body.

Some query shapes name their target indices inside the body rather than in
the request path::

    {"indices": {"index": "x"}}
    {"indices": {"indices": ["x", "y"], "query": {...}}}

Malformed or unexpected bodies yield an empty harvest.
"""

from __future__ import annotations

import json
import logging

logger = logging.getLogger(__name__)

__all__ = ["mine_payload_indices"]


class _UnexpectedShape(ValueError):
    pass


def mine_payload_indices(payload: bytes | str | None) -> set[str]:
    """Harvest index names from a nested ``indices`` object of a JSON body.

    Args:
        payload: Raw request body.

    Returns:
        Index names found, possibly empty. Never raises.
    """
    if not payload:
        return set()
    if not isinstance(payload, (bytes, bytearray, str)):
        logger.debug(
            "Cannot find any index in the payload",
            extra={"reason": f"unsupported payload type {type(payload).__name__}"},
        )
        return set()
    try:
        document = json.loads(payload)
        return _harvest(document)
    except (ValueError, RecursionError) as exc:
        logger.debug("Cannot find any index in the payload", extra={"reason": str(exc)})
        return set()


def _harvest(document: object) -> set[str]:
    if not isinstance(document, dict):
        return set()
    outer = document.get("indices")
    if outer is None:
        return set()
    if not isinstance(outer, dict):
        raise _UnexpectedShape("'indices' is not an object")

    harvested: set[str] = set()
    single = outer.get("index")
    if single is not None:
        if not isinstance(single, str):
            raise _UnexpectedShape("'indices.index' is not a string")
        if single:
            harvested.add(single)

    if "indices" in outer:
        many = outer["indices"]
        if not isinstance(many, list) or not all(isinstance(name, str) for name in many):
            raise _UnexpectedShape("'indices.indices' is not a list of strings")
        harvested.update(many)
    return harvested
