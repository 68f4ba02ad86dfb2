"""Applying and deleting event subscriptions of a function."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from fnops.client import Client, Unstructured
from fnops.operator import (
    ApplyOptions,
    DeleteOptions,
    Predicate,
    _apply_each,
    _delete_each,
    wipe_removed,
)


def contains(items: Optional[Iterable[Unstructured]], name: str) -> bool:
    """True when one of items carries the given name."""
    return any(item.name == name for item in items or ())


def merge_map(
    left: Optional[dict[str, str]], right: Optional[dict[str, str]]
) -> Optional[dict[str, str]]:
    """Copy right into left, right winning on clashes; return right when left is None."""
    if left is None:
        return right
    left.update(right or {})
    return left


def apply_subscriptions(
    client: Client,
    predicate: Predicate,
    items: Iterable[Unstructured],
    opts: ApplyOptions,
) -> None:
    """Delete the stored subscriptions predicate selects, then apply items."""
    wipe_removed(client, predicate, opts)
    _apply_each(client, items, opts)


def delete_subscriptions(
    client: Client, items: Iterable[Unstructured], opts: DeleteOptions
) -> None:
    """Delete each subscription in items, firing callbacks around each."""
    _delete_each(client, items, opts)