"""Applying parent resources and their children in order, with optional purge on failure."""

from __future__ import annotations

import contextlib
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, NamedTuple, Optional

from fnops.client import OwnerReference
from fnops.operator import (
    DRY_RUN_ALL,
    ApplyOptions,
    Callbacks,
    DeleteOptions,
    DeletionPropagation,
    Operator,
)
from fnops.status import PostStatusEntry, StatusType


class OnError(IntEnum):
    """What the manager does once applying has failed."""

    NOTHING = 0
    PURGE = 1


@dataclass
class ManagerOptions:
    """Settings for one run of the manager."""

    callbacks: Callbacks = field(default_factory=Callbacks)
    on_error: OnError = OnError.NOTHING
    dry_run: bool = False
    set_owner_references: bool = False
    wait_for_apply: bool = False
    wait_timeout: Optional[float] = None


class _Parent(NamedTuple):
    obj: Optional[Operator]
    children: list[Optional[Operator]]


_FAILED = frozenset({StatusType.APPLY_FAILED, StatusType.DELETE_FAILED})


def dry_run_flags(dry_run: bool) -> list[str]:
    """The dry-run stages to send to the server."""
    return [DRY_RUN_ALL] if dry_run else []


def owner_reference_callback(
    callbacks: Callbacks, references: Optional[list[OwnerReference]]
) -> Callbacks:
    """Return callbacks extended with a post callback that records each applied resource.

    When references is None the callbacks are returned unchanged.
    """
    if references is None:
        return callbacks

    def record(value: Any, error: Optional[BaseException]) -> Optional[BaseException]:
        if not isinstance(value, PostStatusEntry):
            raise TypeError(f"expected a status entry, got {type(value).__name__}")
        if error is None and value.status_type not in _FAILED:
            references.append(value.to_owner_reference())
        return error

    return Callbacks(pre=list(callbacks.pre), post=[*callbacks.post, record])


class Manager:
    """Applies parent operators, each followed by its children."""

    def __init__(self) -> None:
        self.operators: list[_Parent] = []

    def add_parent(
        self, obj: Optional[Operator], children: Optional[Iterable[Optional[Operator]]] = None
    ) -> None:
        """Register a parent operator and the operators of its children."""
        self.operators.append(_Parent(obj, list(children) if children is not None else []))

    def do(self, options: Optional[ManagerOptions] = None) -> None:
        """Apply every parent and its children; purge parents on failure if asked to."""
        options = options if options is not None else ManagerOptions()
        try:
            self._manage_operators(options)
        except Exception:
            if options.on_error == OnError.PURGE:
                self._purge_parents(options)
            raise

    def _manage_operators(self, options: ManagerOptions) -> None:
        for parent in self.operators:
            references = self._use_operator(parent.obj, options, None)
            for child in parent.children:
                self._use_operator(child, options, references)

    def _use_operator(
        self,
        opr: Optional[Operator],
        options: ManagerOptions,
        references: Optional[list[OwnerReference]],
    ) -> list[OwnerReference]:
        new_references: list[OwnerReference] = []
        if opr is None:
            return new_references

        callbacks = options.callbacks
        if options.set_owner_references:
            callbacks = owner_reference_callback(options.callbacks, new_references)

        opr.apply(
            ApplyOptions(
                callbacks=callbacks,
                dry_run=dry_run_flags(options.dry_run),
                wait_for_apply=options.wait_for_apply,
                wait_timeout=options.wait_timeout,
                owner_references=references,
            )
        )
        return new_references

    def _purge_parents(self, options: ManagerOptions) -> None:
        delete_options = DeleteOptions(
            callbacks=options.callbacks,
            dry_run=dry_run_flags(options.dry_run),
            deletion_propagation=DeletionPropagation.FOREGROUND,
        )
        for parent in self.operators:
            if parent.obj is None:
                continue
            with contextlib.suppress(Exception):
                parent.obj.delete(delete_options)