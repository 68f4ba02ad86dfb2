"""Building sample resources and loading resources from YAML documents."""

from __future__ import annotations

import io
from typing import Any, TextIO

import yaml

from fnops.client import Unstructured

SAMPLE_API_VERSION = "test.me.plz/v1alpha1"
SAMPLE_KIND = "Sample"


def new_sample(name: str, namespace: str) -> Unstructured:
    """A minimal Sample resource with the given name and namespace."""
    return Unstructured(
        {
            "apiVersion": SAMPLE_API_VERSION,
            "kind": SAMPLE_KIND,
            "metadata": {"name": name, "namespace": namespace},
        }
    )


def load(stream: TextIO) -> list[Unstructured]:
    """Read every YAML document of stream as a resource; each must be a mapping."""
    items: list[Unstructured] = []
    for document in yaml.safe_load_all(stream):
        if document is None:
            continue
        if not isinstance(document, dict):
            raise ValueError(f"document is not a mapping: {document!r}")
        obj: dict[str, Any] = {str(key): value for key, value in document.items()}
        items.append(Unstructured(obj))
    return items


def from_string(text: str) -> list[Unstructured]:
    """Read every YAML document of text as a resource."""
    return load(io.StringIO(text))