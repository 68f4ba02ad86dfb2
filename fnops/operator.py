"""Applying and deleting resources through a client, with callbacks around each step."""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from fnops.client import (
    Client,
    ConflictError,
    EventType,
    GroupVersionResource,
    NotFoundError,
    OwnerReference,
    Unstructured,
)
from fnops.status import (
    PostStatusEntry,
    new_post_status_entry_apply_failed,
    new_post_status_entry_delete_failed,
    new_post_status_entry_deleted,
    new_post_status_entry_skipped,
    new_post_status_entry_updated,
    new_status_entry_created,
)

# A callback receives a value and the error of the step so far. It stops the
# operation by raising, or by returning an exception.
Callback = Callable[[Any, Optional[BaseException]], Optional[BaseException]]
Predicate = Callable[[dict[str, Any]], bool]

GVR_FUNCTION = GroupVersionResource("serverless.kyma-project.io", "v1alpha1", "functions")
GVR_GIT_REPOSITORY = GroupVersionResource(
    "serverless.kyma-project.io", "v1alpha1", "gitrepositories"
)
GVR_SUBSCRIPTION = GroupVersionResource("eventing.kyma-project.io", "v1alpha1", "subscriptions")

DRY_RUN_ALL = "All"

_RETRY_STEPS = 5
_RETRY_DELAY = 0.01
_RETRY_JITTER = 0.1


class DeletionPropagation(str, Enum):
    ORPHAN = "Orphan"
    BACKGROUND = "Background"
    FOREGROUND = "Foreground"

    def __str__(self) -> str:
        return self.value


@dataclass
class Callbacks:
    """Callbacks fired before and after each resource is handled."""

    pre: list[Callback] = field(default_factory=list)
    post: list[Callback] = field(default_factory=list)


@dataclass
class Options:
    """Settings shared by apply and delete operations."""

    callbacks: Callbacks = field(default_factory=Callbacks)
    dry_run: list[str] = field(default_factory=list)
    wait_for_apply: bool = False
    wait_timeout: Optional[float] = None

    @property
    def pre(self) -> list[Callback]:
        return self.callbacks.pre

    @property
    def post(self) -> list[Callback]:
        return self.callbacks.post


@dataclass
class ApplyOptions(Options):
    owner_references: Optional[list[OwnerReference]] = None


@dataclass
class DeleteOptions(Options):
    deletion_propagation: Optional[DeletionPropagation] = None


class Operator(ABC):
    """Applies or deletes a set of resources."""

    @abstractmethod
    def apply(self, opts: ApplyOptions) -> None:
        """Create or update the resources."""

    @abstractmethod
    def delete(self, opts: DeleteOptions) -> None:
        """Delete the resources."""


def fire_callbacks(
    value: Any, error: Optional[BaseException], callbacks: Iterable[Callback] = ()
) -> None:
    """Run callbacks in order; raise the first failure, else raise error if set."""
    for callback in callbacks:
        outcome = callback(value, error)
        if isinstance(outcome, BaseException):
            raise outcome
    if error is not None:
        raise error


def _is_derivative(expected: Any, actual: Any) -> bool:
    """True when every field set in expected holds the same value in actual."""
    if expected is None:
        return True
    if isinstance(expected, dict):
        if not isinstance(actual, dict):
            return False
        if not expected:
            return True
        if len(expected) > len(actual):
            return False
        return all(
            key in actual and _is_derivative(value, actual[key])
            for key, value in expected.items()
        )
    if isinstance(expected, list):
        return (
            isinstance(actual, list)
            and len(expected) == len(actual)
            and all(map(_is_derivative, expected, actual))
        )
    if type(expected) is not type(actual):
        return False
    if isinstance(expected, str) and not expected:
        return True
    return expected == actual


def _update_retrying_on_conflict(
    client: Client, obj: Unstructured, dry_run: Optional[Sequence[str]]
) -> Unstructured:
    attempt = 1
    while True:
        try:
            return client.update(obj, dry_run)
        except ConflictError:
            if attempt >= _RETRY_STEPS:
                raise
        time.sleep(_RETRY_DELAY * (1 + random.random() * _RETRY_JITTER))
        attempt += 1


def _apply_object(
    client: Client, obj: Unstructured, dry_run: Optional[Sequence[str]]
) -> tuple[Unstructured, PostStatusEntry, Optional[Exception]]:
    try:
        current: Optional[Unstructured] = client.get(obj.name)
    except NotFoundError:
        current = None
    except Exception as exc:
        return obj, new_post_status_entry_apply_failed(obj), exc

    if current is None:
        try:
            created = client.create(obj, dry_run)
        except Exception as exc:
            return obj, new_post_status_entry_apply_failed(obj), exc
        return created, new_status_entry_created(created), None

    if _is_derivative(obj.object.get("spec"), current.object.get("spec")):
        return current, new_post_status_entry_skipped(current), None

    current.object["spec"] = obj.object.get("spec")
    try:
        updated = _update_retrying_on_conflict(client, current, dry_run)
    except Exception as exc:
        return obj, new_post_status_entry_apply_failed(current), exc
    return updated, new_post_status_entry_updated(updated), None


def apply_object(
    client: Client, obj: Unstructured, dry_run: Optional[Sequence[str]] = None
) -> tuple[Unstructured, PostStatusEntry]:
    """Create, update or skip obj; return the stored resource and what happened to it."""
    applied, entry, error = _apply_object(client, obj, dry_run)
    if error is not None:
        raise error
    return applied, entry


def _escape_selector_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace(",", "\\,").replace("=", "\\=")


def wait_for_object(client: Client, obj: Unstructured, timeout: Optional[float] = None) -> None:
    """Block until the watch reports obj as added, the watch ends, or timeout passes."""
    selector = ",".join(
        f"{key}={_escape_selector_value(value)}"
        for key, value in (("metadata.name", obj.name), ("metadata.namespace", obj.namespace))
    )
    deadline = None if timeout is None else time.monotonic() + timeout
    events = client.watch(kind=obj.kind, api_version=obj.api_version, field_selector=selector)
    for event in events:
        if event.type == EventType.ADDED:
            return
        if deadline is not None and time.monotonic() > deadline:
            raise TimeoutError(f'timed out waiting for "{obj.name}" to be added')


def wipe_removed(client: Client, predicate: Predicate, opts: Options) -> None:
    """Delete every listed resource that predicate selects, firing callbacks around each."""
    for item in client.list():
        if not predicate(item.object):
            continue
        fire_callbacks(item, None, opts.pre)
        try:
            client.delete(
                item.name,
                dry_run=opts.dry_run,
                propagation_policy=DeletionPropagation.BACKGROUND,
            )
        except Exception as exc:
            fire_callbacks(new_post_status_entry_delete_failed(item), exc, opts.post)
        fire_callbacks(new_post_status_entry_deleted(item), None, opts.post)


def _delete_object(
    client: Client, obj: Unstructured, opts: DeleteOptions
) -> tuple[PostStatusEntry, Optional[Exception]]:
    try:
        client.delete(
            obj.name,
            dry_run=opts.dry_run,
            propagation_policy=opts.deletion_propagation,
        )
    except Exception as exc:
        return new_post_status_entry_delete_failed(obj), exc
    return new_post_status_entry_deleted(obj), None


def delete_object(client: Client, obj: Unstructured, opts: DeleteOptions) -> PostStatusEntry:
    """Delete obj and return the status entry describing it."""
    entry, error = _delete_object(client, obj, opts)
    if error is not None:
        raise error
    return entry


def _apply_each(client: Client, items: Iterable[Unstructured], opts: ApplyOptions) -> None:
    for item in items:
        item.set_owner_references(opts.owner_references)
        fire_callbacks(item, None, opts.pre)
        applied, entry, error = _apply_object(client, item, opts.dry_run)
        if error is None and opts.wait_for_apply:
            try:
                wait_for_object(client, applied, opts.wait_timeout)
            except Exception as exc:
                error = exc
        fire_callbacks(entry, error, opts.post)


def _delete_each(client: Client, items: Iterable[Unstructured], opts: DeleteOptions) -> None:
    for item in items:
        fire_callbacks(item, None, opts.pre)
        entry, error = _delete_object(client, item, opts)
        fire_callbacks(entry, error, opts.post)


class GenericOperator(Operator):
    """Applies or deletes a fixed list of resources one by one."""

    def __init__(self, client: Client, *items: Unstructured) -> None:
        self.client = client
        self.items = list(items)

    def apply(self, opts: ApplyOptions) -> None:
        _apply_each(self.client, self.items, opts)

    def delete(self, opts: DeleteOptions) -> None:
        _delete_each(self.client, self.items, opts)