"""Cluster metadata access: which indices and aliases exist right now."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from index_guard.core.exceptions import BadRequestException

logger = logging.getLogger(__name__)

__all__ = ["CatalogSnapshot", "InMemoryCatalog", "ResourceCatalog"]


@runtime_checkable
class ResourceCatalog(Protocol):
    """Source of the live index list. Must be safe for concurrent reads."""

    def list_indices(self) -> Iterable[tuple[str, Iterable[str]]]:
        """Return (index name, alias names) pairs."""
        ...


class InMemoryCatalog:
    """Thread-safe in-memory catalog.

    Example:
        >>> catalog = InMemoryCatalog({"logs-2024": ["app-logs"], "logs-2023": []})
        >>> sorted(name for name, _ in catalog.list_indices())
        ['logs-2023', 'logs-2024']
    """

    def __init__(self, indices: Mapping[str, Iterable[str]] | None = None) -> None:
        self._lock = threading.Lock()
        self._indices: dict[str, frozenset[str]] = {}
        for name, aliases in (indices or {}).items():
            self._indices[name] = frozenset(aliases)

    @classmethod
    def from_file(cls, path: str | Path) -> InMemoryCatalog:
        """Load a catalog from a JSON object mapping index names to alias lists.

        Raises:
            BadRequestException: If the file is missing, not JSON, or not an object.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise BadRequestException(
                detail=f"Cannot load catalog file: {exc}",
                type="invalid-catalog",
                extra={"path": str(path)},
            ) from exc
        if not isinstance(data, dict) or not all(
            isinstance(aliases, list) for aliases in data.values()
        ):
            raise BadRequestException(
                detail="Catalog file must map index names to alias lists",
                type="invalid-catalog",
                extra={"path": str(path)},
            )
        logger.info("Catalog loaded", extra={"path": str(path), "index_count": len(data)})
        return cls({str(name): [str(a) for a in aliases] for name, aliases in data.items()})

    def put_index(self, name: str, aliases: Iterable[str] = ()) -> None:
        """Create or replace an index entry."""
        with self._lock:
            self._indices[name] = frozenset(aliases)

    def remove_index(self, name: str) -> None:
        with self._lock:
            self._indices.pop(name, None)

    def list_indices(self) -> list[tuple[str, frozenset[str]]]:
        with self._lock:
            return list(self._indices.items())

    def __len__(self) -> int:
        return len(self._indices)


@dataclass(frozen=True)
class CatalogSnapshot:
    """Point-in-time view of index names and their aliases."""

    aliases: Mapping[str, frozenset[str]] = field(default_factory=dict)

    @classmethod
    def take(cls, catalog: ResourceCatalog | None) -> CatalogSnapshot:
        """Read the catalog once. An unavailable catalog yields an empty snapshot."""
        if catalog is None:
            return cls()
        try:
            entries = {name: frozenset(aliases) for name, aliases in catalog.list_indices()}
        except Exception:
            logger.warning("Catalog unavailable, using empty snapshot", exc_info=True)
            return cls()
        return cls(MappingProxyType(entries))

    def names(self) -> frozenset[str]:
        """Every literal resource name: index names plus alias names."""
        universe = set(self.aliases)
        for aliases in self.aliases.values():
            universe.update(aliases)
        return frozenset(universe)
