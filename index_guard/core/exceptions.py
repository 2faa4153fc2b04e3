"""Custom exception classes for the application."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.

    Example:
        raise AppException(
            status_code=400,
            detail="Unknown request kind",
            type="bad-request",
            extra={"kind": "stream"},
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code."""
        titles = {
            400: "Bad Request",
            403: "Forbidden",
            404: "Not Found",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
            503: "Service Unavailable",
        }
        return titles.get(status_code, "Error")


class BadRequestException(AppException):
    """Exception raised when a request cannot be translated into an action request.

    Example:
        raise BadRequestException(
            detail="Request file is not valid JSON",
            extra={"path": "request.json"},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "bad-request",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=400,
            detail=detail,
            type=type,
            title="Bad Request",
            instance=instance,
            extra=extra,
        )


class IndexPermissionException(AppException):
    """Raised when the index field of a request may not be introspected.

    Unlike discovery and payload failures, which degrade to an empty result,
    this aborts resolution for the request: continuing would let the policy
    layer evaluate an index set other than the one the request really targets.

    Example:
        raise IndexPermissionException(
            detail="Insufficient permissions to extract the indices",
            extra={"action": "indices:data/read/search"},
        )
    """

    def __init__(
        self,
        detail: str = "Insufficient permissions to extract the indices",
        type: str = "index-permission-denied",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize index permission exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error (action, request kind).
        """
        super().__init__(
            status_code=500,
            detail=detail,
            type=type,
            title="Index Permission Denied",
            instance=instance,
            extra=extra,
        )


class CatalogUnavailableException(AppException):
    """Raised when the catalog configured for the service cannot be loaded.

    Example:
        raise CatalogUnavailableException(
            detail="Cannot load catalog file: [Errno 2] No such file or directory",
            extra={"path": "/etc/index-guard/catalog.json"},
        )
    """

    def __init__(
        self,
        detail: str = "Index catalog is unavailable",
        type: str = "catalog-unavailable",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=503,
            detail=detail,
            type=type,
            title="Service Unavailable",
            instance=instance,
            extra=extra,
        )


__all__ = [
    "AppException",
    "BadRequestException",
    "CatalogUnavailableException",
    "IndexPermissionException",
]
