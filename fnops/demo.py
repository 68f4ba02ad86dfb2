"""Applying a parent resource and its children to an in-memory client and printing them."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import Optional, TextIO

import yaml

from fnops.client import Unstructured
from fnops.loader import SAMPLE_API_VERSION, SAMPLE_KIND, new_sample
from fnops.manager import Manager, ManagerOptions
from fnops.map_client import MapClient
from fnops.operator import GenericOperator

logger = logging.getLogger(__name__)


def run_demo(out: TextIO) -> list[Unstructured]:
    """Apply a parent with three children, write every stored resource as YAML to out."""
    client = MapClient(
        api_version=SAMPLE_API_VERSION,
        kind=SAMPLE_KIND,
        group="test.me.pl",
        resource="samples",
    )

    parent = new_sample("parent", "test-ns")
    child1 = new_sample("child1", "test-ns")
    child2 = new_sample("child2", "test-ns")
    sibling = new_sample("sibling", "test-ns")

    manager = Manager()
    manager.add_parent(
        GenericOperator(client, parent),
        [GenericOperator(client, child1, child2), GenericOperator(client, sibling)],
    )
    manager.do(ManagerOptions(set_owner_references=True))

    for item in client.data:
        out.write(yaml.safe_dump(item.object, default_flow_style=False))
        out.write("---\n")
    return list(client.data)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Apply sample resources with owner references and print them as YAML."
    )
    parser.parse_args(argv)
    try:
        run_demo(sys.stdout)
    except Exception as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())