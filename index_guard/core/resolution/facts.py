"""Read-only normalized view over one action request."""

from __future__ import annotations

import logging
from typing import Any

from index_guard.core.exceptions import IndexPermissionException
from index_guard.core.resolution.requests import (
    ActionRequest,
    CompositeRequest,
    SingleRequest,
)
from index_guard.core.resolution.types import RequestKind

logger = logging.getLogger(__name__)

__all__ = ["RequestFacts"]


class RequestFacts:
    """Present any request shape uniformly.

    Every failure degrades to an empty or absent result plus a debug
    diagnostic. The single exception is IndexPermissionException, which
    always reaches the caller.
    """

    def __init__(self, request: Any) -> None:
        self.request = request

    @property
    def action(self) -> str:
        return getattr(self.request, "action", "") if self.is_action_request else ""

    @property
    def is_action_request(self) -> bool:
        return isinstance(self.request, ActionRequest)

    def kind(self) -> RequestKind:
        """Classify the request as single, composite or unsupported."""
        if isinstance(self.request, CompositeRequest):
            return RequestKind.COMPOSITE
        if isinstance(self.request, SingleRequest):
            return RequestKind.SINGLE
        return RequestKind.UNSUPPORTED

    def declared_indices(self) -> list[str]:
        """Declared index names in encounter order, duplicates kept."""
        kind = self.kind()
        if kind is RequestKind.COMPOSITE:
            declared: list[str] = []
            for sub_request in self.request.sub_requests:
                declared.extend(self._single_indices(sub_request))
            return declared
        if kind is RequestKind.SINGLE:
            return self._single_indices(self.request)

        logger.debug(
            "Failed to discover indices associated to this request",
            extra={"action": self.action, "request_type": type(self.request).__name__},
        )
        return []

    def payload_bytes(self) -> bytes | None:
        """Raw body of the request, or None when unavailable or unreadable."""
        if not self.is_action_request:
            return None
        source = self.request.payload
        try:
            if callable(source):
                source = source()
            if isinstance(source, str):
                return source.encode("utf-8")
            if isinstance(source, bytearray):
                return bytes(source)
            if source is None or isinstance(source, bytes):
                return source
        except IndexPermissionException:
            raise
        except Exception:
            logger.debug(
                "Cannot read request payload", extra={"action": self.action}, exc_info=True
            )
            return None

        logger.debug(
            "Unsupported request payload type",
            extra={"action": self.action, "payload_type": type(source).__name__},
        )
        return None

    @staticmethod
    def _single_indices(request: SingleRequest) -> list[str]:
        indices = request.indices
        if indices is None:
            return []
        if isinstance(indices, str):
            return [indices]
        if not isinstance(indices, (list, tuple)):
            logger.debug(
                "Unsupported indices field type",
                extra={"action": request.action, "indices_type": type(indices).__name__},
            )
            return []
        return [name for name in indices if isinstance(name, str)]
