"""An in-memory resource client holding its resources in a list."""

from __future__ import annotations

import re
import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Optional

from fnops.client import (
    AlreadyExistsError,
    Client,
    EventType,
    NotFoundError,
    Unstructured,
    WatchEvent,
)

_UNESCAPED_COMMA = re.compile(r"(?<!\\),")


def _unescape(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


def _parse_field_selector(selector: str) -> dict[str, str]:
    terms: dict[str, str] = {}
    for term in _UNESCAPED_COMMA.split(selector):
        if not term:
            continue
        key, _, value = term.partition("=")
        terms[key] = _unescape(value)
    return terms


@dataclass
class MapClient(Client):
    """Keeps resources in memory, scoped to one namespace, kind and API version."""

    data: list[Unstructured] = field(default_factory=list)
    namespace: str = ""
    api_version: str = ""
    kind: str = ""
    resource: str = ""
    group: str = ""

    @property
    def _group_resource(self) -> str:
        return f"{self.resource}.{self.group}" if self.group else self.resource

    def _in_scope(self, obj: Unstructured) -> bool:
        return (
            obj.namespace == self.namespace
            and obj.kind == self.kind
            and obj.api_version == self.api_version
        )

    def _find(self, name: str) -> Optional[int]:
        return next(
            (
                position
                for position, item in enumerate(self.data)
                if self._in_scope(item) and item.name == name
            ),
            None,
        )

    def create(self, obj: Unstructured, dry_run: Optional[list[str]] = None) -> Unstructured:
        """Store a copy of obj with a fresh uid; raise AlreadyExistsError on a name clash."""
        try:
            self.get(obj.name)
        except NotFoundError:
            pass
        else:
            raise AlreadyExistsError(obj.name, self._group_resource)
        stored = obj.deep_copy()
        stored.uid = str(uuid.uuid4())
        self.data.append(stored)
        return stored.deep_copy()

    def update(self, obj: Unstructured, dry_run: Optional[list[str]] = None) -> Unstructured:
        """Replace the stored resource of the same name, keeping its uid if obj has none."""
        position = self._find(obj.name)
        if position is None:
            raise NotFoundError(obj.name, self._group_resource)
        stored = obj.deep_copy()
        if not stored.uid:
            stored.uid = self.data[position].uid
        self.data[position] = stored
        return stored.deep_copy()

    def update_status(self, obj: Unstructured) -> Unstructured:
        """Copy the status of obj onto the stored resource of the same name."""
        position = self._find(obj.name)
        if position is None:
            raise NotFoundError(obj.name, self._group_resource)
        stored = self.data[position]
        status = obj.object.get("status")
        if status is not None:
            if not isinstance(status, dict):
                raise TypeError(f"status of {obj.name!r} is not a mapping")
            stored.object["status"] = dict(status)
        return stored.deep_copy()

    def delete(
        self,
        name: str,
        dry_run: Optional[list[str]] = None,
        propagation_policy: Optional[str] = None,
    ) -> None:
        """Remove the named resource; raise NotFoundError if it is not stored."""
        position = self._find(name)
        if position is None:
            raise NotFoundError(name, self._group_resource)
        del self.data[position]

    def delete_collection(self) -> None:
        """Remove every resource in scope."""
        self.data[:] = [item for item in self.data if not self._in_scope(item)]

    def get(self, name: str) -> Unstructured:
        """Return a copy of the named resource in scope."""
        found = next((item for item in self.list() if item.name == name), None)
        if found is None:
            raise NotFoundError(name, self._group_resource)
        return found.deep_copy()

    def list(self) -> list[Unstructured]:
        """Return the stored resources in scope."""
        return [item for item in self.data if self._in_scope(item)]

    def watch(
        self,
        kind: str = "",
        api_version: str = "",
        field_selector: str = "",
    ) -> Iterator[WatchEvent]:
        """Yield an ADDED event for each stored resource in scope matching the selector."""
        terms = _parse_field_selector(field_selector)
        for item in self.list():
            if kind and item.kind != kind:
                continue
            if api_version and item.api_version != api_version:
                continue
            if "metadata.name" in terms and item.name != terms["metadata.name"]:
                continue
            if "metadata.namespace" in terms and item.namespace != terms["metadata.namespace"]:
                continue
            yield WatchEvent(EventType.ADDED, item.deep_copy())