"""Translate proxied REST calls into action requests.

Only the shapes the resolution engine cares about are recognized:

    GET  /logs-*/_search          -> SingleRequest   indices:data/read/search
    GET  /_search                 -> SingleRequest   (no declared indices)
    GET  /a,b/_count              -> SingleRequest   indices:data/read/count
    POST /_msearch                -> CompositeRequest, one search per NDJSON header
    POST /a/_mget                 -> CompositeRequest, one get per doc
    GET  /a/_doc/1                -> SingleRequest   indices:data/read/get
    GET  /a                       -> SingleRequest   indices:admin/get
    GET  /_cluster/health         -> UnsupportedRequest

Malformed multi-request bodies fall back to the targets named in the path.
"""

from __future__ import annotations

import json
import logging
from urllib.parse import unquote

from index_guard.core.resolution import (
    ALL_INDICES,
    ActionRequest,
    CompositeRequest,
    SingleRequest,
    UnsupportedRequest,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ADMIN_GET_ACTION",
    "COUNT_ACTION",
    "GET_ACTION",
    "MGET_ACTION",
    "MSEARCH_ACTION",
    "SEARCH_ACTION",
    "action_request_from_rest",
    "split_targets",
]

SEARCH_ACTION = "indices:data/read/search"
COUNT_ACTION = "indices:data/read/count"
MSEARCH_ACTION = "indices:data/read/msearch"
MGET_ACTION = "indices:data/read/mget"
GET_ACTION = "indices:data/read/get"
INDEX_ACTION = "indices:data/write/index"
DELETE_ACTION = "indices:data/write/delete"
ADMIN_GET_ACTION = "indices:admin/get"

_READ_METHODS = frozenset({"GET", "HEAD"})


def split_targets(segment: str) -> list[str]:
    """Split a comma separated path segment into index names."""
    return [name for name in unquote(segment).split(",") if name]


def action_request_from_rest(method: str, path: str, body: bytes | None = None) -> ActionRequest:
    """Build the action request a REST call maps to.

    Args:
        method: HTTP method.
        path: Request path, e.g. ``/logs-*/_search``.
        body: Raw request body, if any.

    Returns:
        A SingleRequest, CompositeRequest or UnsupportedRequest.
    """
    method = method.upper()
    segments = [segment for segment in path.split("?", 1)[0].split("/") if segment]
    if not segments:
        return UnsupportedRequest("cluster:monitor/main", payload=body, description=f"{method} /")

    first = segments[0]
    if first.startswith("_") and first != ALL_INDICES:
        targets: list[str] = []
        endpoint: str | None = first
    else:
        targets = split_targets(first)
        endpoint = segments[1] if len(segments) > 1 else None

    if endpoint is None:
        return SingleRequest(ADMIN_GET_ACTION, payload=body, indices=targets)
    if endpoint == "_search":
        return SingleRequest(SEARCH_ACTION, payload=body, indices=targets)
    if endpoint == "_count":
        return SingleRequest(COUNT_ACTION, payload=body, indices=targets)
    if endpoint == "_msearch":
        return CompositeRequest(
            MSEARCH_ACTION, payload=body, sub_requests=_msearch_sub_requests(body, targets)
        )
    if endpoint == "_mget":
        return CompositeRequest(
            MGET_ACTION, payload=body, sub_requests=_mget_sub_requests(body, targets)
        )
    if endpoint == "_doc" and targets:
        if method in _READ_METHODS:
            action = GET_ACTION
        elif method == "DELETE":
            action = DELETE_ACTION
        else:
            action = INDEX_ACTION
        return SingleRequest(action, payload=body, indices=targets)

    name = endpoint.lstrip("_")
    if not targets:
        return UnsupportedRequest(f"cluster:{name}", payload=body, description=f"{method} {path}")
    return SingleRequest(f"indices:{name}", payload=body, indices=targets)


def _header_targets(value: object, default: list[str]) -> list[str]:
    if isinstance(value, str):
        return split_targets(value)
    if isinstance(value, list):
        return [name for name in value if isinstance(name, str)]
    return list(default)


def _msearch_sub_requests(body: bytes | None, default: list[str]) -> list[SingleRequest]:
    """One search per header line of an NDJSON multi-search body."""
    if not body:
        return []
    try:
        lines = [line for line in body.decode("utf-8").splitlines() if line.strip()]
    except UnicodeDecodeError:
        logger.debug("Multi-search body is not UTF-8")
        return [SingleRequest(SEARCH_ACTION, indices=list(default))]

    sub_requests = []
    # Header and query lines alternate
    for position in range(0, len(lines), 2):
        try:
            header = json.loads(lines[position])
        except (ValueError, RecursionError):
            logger.debug("Malformed multi-search header", extra={"line": position})
            header = {}
        if not isinstance(header, dict):
            header = {}
        query = lines[position + 1] if position + 1 < len(lines) else None
        sub_requests.append(
            SingleRequest(
                SEARCH_ACTION,
                payload=query.encode("utf-8") if query is not None else None,
                indices=_header_targets(header.get("index"), default),
            )
        )
    return sub_requests


def _mget_sub_requests(body: bytes | None, default: list[str]) -> list[SingleRequest]:
    """One get per entry of ``docs``, plus one for the path target when ``ids`` is used."""
    try:
        document = json.loads(body) if body else {}
    except (ValueError, RecursionError):
        logger.debug("Malformed multi-get body")
        document = {}
    if not isinstance(document, dict):
        document = {}

    sub_requests = []
    docs = document.get("docs")
    if isinstance(docs, list):
        for doc in docs:
            index = doc.get("_index") if isinstance(doc, dict) else None
            sub_requests.append(
                SingleRequest(GET_ACTION, indices=_header_targets(index, default))
            )
    if "ids" in document or not sub_requests:
        sub_requests.append(SingleRequest(GET_ACTION, indices=list(default)))
    return sub_requests
