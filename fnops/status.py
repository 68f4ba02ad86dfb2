"""Outcome of applying or deleting a single resource."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from fnops.client import OwnerReference, Unstructured


class StatusType(IntEnum):
    CREATED = 0
    UPDATED = 1
    SKIPPED = 2
    APPLY_FAILED = 3
    DELETE_FAILED = 4
    DELETED = 5
    UNKNOWN = -1

    @classmethod
    def _missing_(cls, value: object) -> "StatusType":
        return cls.UNKNOWN

    def __str__(self) -> str:
        return _NAMES.get(self, "unknown")

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


_NAMES = {
    StatusType.DELETED: "deleted",
    StatusType.SKIPPED: "skipped",
    StatusType.APPLY_FAILED: "applyFailed",
    StatusType.DELETE_FAILED: "deleteFailed",
    StatusType.CREATED: "created",
    StatusType.UPDATED: "updated",
}


@dataclass
class PostStatusEntry:
    """A resource together with what happened to it."""

    status_type: StatusType
    obj: Unstructured

    def to_owner_reference(self) -> OwnerReference:
        return OwnerReference(
            api_version=self.obj.api_version,
            kind=self.obj.kind,
            name=self.obj.name,
            uid=self.obj.uid,
        )


class Status(list):
    """A sequence of status entries."""

    def get_owner_references(self) -> list[OwnerReference]:
        return [entry.to_owner_reference() for entry in self]


def new_post_status_entry_apply_failed(obj: Unstructured) -> PostStatusEntry:
    return PostStatusEntry(StatusType.APPLY_FAILED, obj)


def new_post_status_entry_delete_failed(obj: Unstructured) -> PostStatusEntry:
    return PostStatusEntry(StatusType.DELETE_FAILED, obj)


def new_post_status_entry_skipped(obj: Unstructured) -> PostStatusEntry:
    return PostStatusEntry(StatusType.SKIPPED, obj)


def new_post_status_entry_updated(obj: Unstructured) -> PostStatusEntry:
    return PostStatusEntry(StatusType.UPDATED, obj)


def new_status_entry_created(obj: Unstructured) -> PostStatusEntry:
    return PostStatusEntry(StatusType.CREATED, obj)


def new_post_status_entry_deleted(obj: Unstructured) -> PostStatusEntry:
    return PostStatusEntry(StatusType.DELETED, obj)