"""
Host collaborators consumed by the adjuster, plus an in-memory host.

The protocols describe what the import hooks and the batch orchestrator need
from the host platform.  :class:`InMemoryWorld` implements them over a JSON
world export and is what the CLI and the tests run against.

World export layout::

    {
      "actors": [{"name": "...", "type": "character", "items": [<item>, ...]}, ...],
      "items":  [<item>, ...]
    }
"""
from __future__ import annotations

import copy
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Set

from pwl_dc_adjuster.models.entity import apply_updates

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class HostDocument(Protocol):
    name: str
    type: str
    source: Dict[str, Any]

    def update_source(self, updates: Mapping[str, Any]) -> None:
        """Apply *updates* to the unsaved snapshot in memory."""


class HostContainer(Protocol):
    name: str
    items: Iterable[HostDocument]


class WorldStore(Protocol):
    def containers(self) -> Iterable[HostContainer]:
        ...

    def documents(self) -> Iterable[HostDocument]:
        ...

    async def commit(self, document: HostDocument, updates: Mapping[str, Any]) -> None:
        """Persist *updates* for *document*.  May raise."""


class Notifier(Protocol):
    def info(self, message: str) -> None:
        ...

    def warn(self, message: str) -> None:
        ...


class Confirmer(Protocol):
    async def confirm(self, title: str, content: str) -> bool:
        ...


# ---------------------------------------------------------------------------
# In-memory host
# ---------------------------------------------------------------------------


class CommitError(RuntimeError):
    """Raised by :class:`InMemoryWorld` when a commit is rejected."""


@dataclass
class WorldDocument:
    """A host document backed by a plain source dict."""

    source: Dict[str, Any]

    @property
    def name(self) -> str:
        return str(self.source.get("name") or "")

    @property
    def type(self) -> str:
        return str(self.source.get("type") or "item")

    def update_source(self, updates: Mapping[str, Any]) -> None:
        apply_updates(self.source, updates)


@dataclass
class WorldContainer:
    """An actor owning embedded documents."""

    name: str
    type: str = "character"
    items: List[WorldDocument] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WorldContainer":
        extra = {k: v for k, v in d.items() if k not in ("name", "type", "items")}
        return cls(
            name=str(d.get("name") or ""),
            type=str(d.get("type") or "character"),
            items=[WorldDocument(item) for item in d.get("items") or []],
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.extra,
            "name": self.name,
            "type": self.type,
            "items": [doc.source for doc in self.items],
        }


class InMemoryWorld:
    """
    :class:`WorldStore` over in-memory documents.

    ``fail_on`` names documents whose commits are rejected with
    :class:`CommitError`, for exercising partial-failure handling.
    """

    def __init__(
        self,
        actors: Optional[List[WorldContainer]] = None,
        items: Optional[List[WorldDocument]] = None,
        fail_on: Optional[Set[str]] = None,
    ) -> None:
        self.actors: List[WorldContainer] = actors or []
        self.items: List[WorldDocument] = items or []
        self.fail_on: Set[str] = set(fail_on or ())
        self.commits: List[str] = []

    # ------------------------------------------------------------------
    # WorldStore
    # ------------------------------------------------------------------

    def containers(self) -> Iterable[WorldContainer]:
        return iter(self.actors)

    def documents(self) -> Iterable[WorldDocument]:
        return iter(self.items)

    async def commit(self, document: WorldDocument, updates: Mapping[str, Any]) -> None:
        self.commits.append(document.name)
        if document.name in self.fail_on:
            raise CommitError(f"commit rejected for {document.name!r}")
        document.update_source(updates)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, d: Dict[str, Any], fail_on: Optional[Set[str]] = None) -> "InMemoryWorld":
        d = copy.deepcopy(d)
        return cls(
            actors=[WorldContainer.from_dict(a) for a in d.get("actors") or []],
            items=[WorldDocument(i) for i in d.get("items") or []],
            fail_on=fail_on,
        )

    @classmethod
    def load(cls, path: Path) -> "InMemoryWorld":
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"{path}: world export must be a JSON object")
        world = cls.from_dict(raw)
        logger.info(
            "Loaded world export %s (%d actors, %d items)",
            path, len(world.actors), len(world.items),
        )
        return world

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actors": [a.to_dict() for a in self.actors],
            "items": [doc.source for doc in self.items],
        }

    def dump(self, path: Path) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)


class RecordingNotifier:
    """:class:`Notifier` that keeps messages and mirrors them to the log."""

    def __init__(self, echo: bool = False) -> None:
        self.messages: List[tuple] = []
        self._echo = echo

    def info(self, message: str) -> None:
        self.messages.append(("info", message))
        logger.info(message)
        if self._echo:
            print(message, file=sys.stderr)

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))
        logger.warning(message)
        if self._echo:
            print(f"WARNING: {message}", file=sys.stderr)
