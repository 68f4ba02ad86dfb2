"""Resource objects, API errors and the client interface for one resource collection."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class OwnerReference:
    """A reference from a resource to the resource that owns it."""

    api_version: str = ""
    kind: str = ""
    name: str = ""
    uid: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "uid": self.uid,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OwnerReference":
        return cls(
            api_version=str(data.get("apiVersion", "")),
            kind=str(data.get("kind", "")),
            name=str(data.get("name", "")),
            uid=str(data.get("uid", "")),
        )


@dataclass(frozen=True)
class GroupVersionResource:
    """Identifies a resource collection by API group, version and plural name."""

    group: str
    version: str
    resource: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass
class Unstructured:
    """A resource held as a plain nested mapping."""

    object: dict[str, Any] = field(default_factory=dict)

    def _metadata(self, create: bool = False) -> Optional[dict[str, Any]]:
        metadata = self.object.get("metadata")
        if isinstance(metadata, dict):
            return metadata
        if not create:
            return None
        metadata = {}
        self.object["metadata"] = metadata
        return metadata

    def _get_meta(self, key: str) -> str:
        metadata = self._metadata()
        return _text(metadata.get(key)) if metadata is not None else ""

    def _set_meta(self, key: str, value: str) -> None:
        if not value:
            metadata = self._metadata()
            if metadata is not None:
                metadata.pop(key, None)
            return
        self._metadata(create=True)[key] = value

    @property
    def api_version(self) -> str:
        return _text(self.object.get("apiVersion"))

    @api_version.setter
    def api_version(self, value: str) -> None:
        self.object["apiVersion"] = value

    @property
    def kind(self) -> str:
        return _text(self.object.get("kind"))

    @kind.setter
    def kind(self, value: str) -> None:
        self.object["kind"] = value

    @property
    def name(self) -> str:
        return self._get_meta("name")

    @name.setter
    def name(self, value: str) -> None:
        self._set_meta("name", value)

    @property
    def namespace(self) -> str:
        return self._get_meta("namespace")

    @namespace.setter
    def namespace(self, value: str) -> None:
        self._set_meta("namespace", value)

    @property
    def uid(self) -> str:
        return self._get_meta("uid")

    @uid.setter
    def uid(self, value: str) -> None:
        self._set_meta("uid", value)

    @property
    def resource_version(self) -> str:
        return self._get_meta("resourceVersion")

    @resource_version.setter
    def resource_version(self, value: str) -> None:
        self._set_meta("resourceVersion", value)

    @property
    def owner_references(self) -> list[OwnerReference]:
        metadata = self._metadata()
        if metadata is None:
            return []
        raw = metadata.get("ownerReferences")
        if not isinstance(raw, list):
            return []
        return [OwnerReference.from_dict(item) for item in raw if isinstance(item, dict)]

    def set_owner_references(self, references: Optional[Iterable[OwnerReference]]) -> None:
        """Replace the owner references; None removes them altogether."""
        if references is None:
            metadata = self._metadata()
            if metadata is not None:
                metadata.pop("ownerReferences", None)
            return
        self._metadata(create=True)["ownerReferences"] = [ref.to_dict() for ref in references]

    def deep_copy(self) -> "Unstructured":
        return Unstructured(copy.deepcopy(self.object))


class ApiError(Exception):
    """Base class of errors reported by a resource client."""


class NotFoundError(ApiError):
    """The named resource does not exist."""

    def __init__(self, name: str, resource: str = "") -> None:
        self.name = name
        self.resource = resource
        prefix = f"{resource} " if resource else ""
        super().__init__(f'{prefix}"{name}" not found')


class AlreadyExistsError(ApiError):
    """A resource with the same name already exists."""

    def __init__(self, name: str, resource: str = "") -> None:
        self.name = name
        self.resource = resource
        prefix = f"{resource} " if resource else ""
        super().__init__(f'{prefix}"{name}" already exists')


class ConflictError(ApiError):
    """The resource changed since it was read; the write may be retried."""


class EventType(str, Enum):
    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    BOOKMARK = "BOOKMARK"
    ERROR = "ERROR"


@dataclass(frozen=True)
class WatchEvent:
    """A change to a watched resource."""

    type: EventType
    object: Unstructured


class Client(ABC):
    """Operations on one collection of resources in one namespace."""

    @abstractmethod
    def create(self, obj: Unstructured, dry_run: Optional[list[str]] = None) -> Unstructured:
        """Create obj and return the stored resource."""

    @abstractmethod
    def update(self, obj: Unstructured, dry_run: Optional[list[str]] = None) -> Unstructured:
        """Replace the stored resource with obj and return the result."""

    @abstractmethod
    def update_status(self, obj: Unstructured) -> Unstructured:
        """Replace the status of the stored resource with that of obj."""

    @abstractmethod
    def delete(
        self,
        name: str,
        dry_run: Optional[list[str]] = None,
        propagation_policy: Optional[str] = None,
    ) -> None:
        """Delete the named resource."""

    @abstractmethod
    def delete_collection(self) -> None:
        """Delete every resource in the collection."""

    @abstractmethod
    def get(self, name: str) -> Unstructured:
        """Return the named resource or raise NotFoundError."""

    @abstractmethod
    def list(self) -> list[Unstructured]:
        """Return every resource in the collection."""

    @abstractmethod
    def watch(
        self,
        kind: str = "",
        api_version: str = "",
        field_selector: str = "",
    ) -> Iterable[WatchEvent]:
        """Yield change events for resources that match the selector."""