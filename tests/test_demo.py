import io

import yaml

from fnops.client import OwnerReference
from fnops.demo import main, run_demo


def test_run_demo_stores_all_resources_in_order():
    items = run_demo(io.StringIO())
    assert [item.name for item in items] == ["parent", "child1", "child2", "sibling"]
    assert all(item.uid for item in items)
    assert len({item.uid for item in items}) == 4


def test_children_reference_parent():
    items = run_demo(io.StringIO())
    parent = items[0]
    assert parent.owner_references == []
    expected = [
        OwnerReference(
            api_version=parent.api_version, kind=parent.kind, name="parent", uid=parent.uid
        )
    ]
    for child in items[1:]:
        assert child.owner_references == expected


def test_output_parses_back_to_stored_objects():
    out = io.StringIO()
    items = run_demo(out)
    documents = [doc for doc in yaml.safe_load_all(out.getvalue()) if doc is not None]
    assert documents == [item.object for item in items]
    assert out.getvalue().count("---\n") == len(items)


def test_main_succeeds(capsys):
    assert main([]) == 0
    printed = capsys.readouterr().out
    assert "name: sibling" in printed