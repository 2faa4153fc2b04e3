"""Pydantic schemas for the resolution feature."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from index_guard.core.resolution import (
    ActionRequest,
    CompositeRequest,
    RequestKind,
    SingleRequest,
    UnsupportedRequest,
)
from index_guard.features.resolution.rest import SEARCH_ACTION


def _encode_payload(payload: Any) -> bytes | None:
    if payload is None:
        return None
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return json.dumps(payload).encode("utf-8")


class SubRequestSpec(BaseModel):
    """One sub-request of a composite request."""

    action: str = Field(default=SEARCH_ACTION, min_length=1, description="Transport action name")
    indices: list[str] | None = Field(
        default=None, description="Declared indices; null when the request has no index field"
    )
    payload: Any = Field(default=None, description="Query body (JSON value or raw string)")

    def to_action_request(self) -> SingleRequest:
        return SingleRequest(
            self.action, payload=_encode_payload(self.payload), indices=self.indices
        )


class ResolveRequest(BaseModel):
    """Description of an action request to resolve."""

    action: str = Field(default=SEARCH_ACTION, min_length=1, description="Transport action name")
    kind: RequestKind = Field(default=RequestKind.SINGLE, description="Request shape")
    indices: list[str] | None = Field(
        default=None, description="Declared indices of a single request"
    )
    sub_requests: list[SubRequestSpec] = Field(
        default_factory=list, description="Sub-requests of a composite request"
    )
    payload: Any = Field(default=None, description="Query body (JSON value or raw string)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "action": "indices:data/read/search",
                "kind": "single",
                "indices": ["logs-*"],
                "payload": {"query": {"match_all": {}}},
            }
        }
    )

    def to_action_request(self) -> ActionRequest:
        """Build the request variant this description stands for."""
        payload = _encode_payload(self.payload)
        if self.kind is RequestKind.COMPOSITE:
            return CompositeRequest(
                self.action,
                payload=payload,
                sub_requests=[sub.to_action_request() for sub in self.sub_requests],
            )
        if self.kind is RequestKind.SINGLE:
            return SingleRequest(self.action, payload=payload, indices=self.indices)
        return UnsupportedRequest(self.action, payload=payload)


class ResolveResponse(BaseModel):
    """Resolved index scope of a request."""

    action: str
    kind: RequestKind
    indices: list[str] = Field(description="Resolved names, sorted")
    all_indices: bool = Field(description="True when the request targets every index")
    description: str = Field(description="Audit rendering of the resolved names")


class ExplainResponse(ResolveResponse):
    """Resolution of a proxied REST call, with the full audit line."""

    method: str
    path: str
    audit: str = Field(description="One-line rendering of the whole request context")
