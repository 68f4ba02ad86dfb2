import pytest

from fnops.client import (
    Client,
    EventType,
    OwnerReference,
    Unstructured,
    WatchEvent,
)
from fnops.operator import ApplyOptions, Callbacks, DeleteOptions, DeletionPropagation
from fnops.status import StatusType
from fnops.subscription_operator import (
    apply_subscriptions,
    contains,
    delete_subscriptions,
    merge_map,
)


class FakeClient(Client):
    def __init__(self, **responses):
        self.responses = {key: list(value) for key, value in responses.items()}
        self.calls = []

    def _next(self, method, *args):
        self.calls.append((method, *args))
        queue = self.responses.get(method)
        if not queue:
            raise AssertionError(f"unexpected call to {method}")
        result = queue.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def create(self, obj, dry_run=None):
        return self._next("create", obj, dry_run)

    def update(self, obj, dry_run=None):
        return self._next("update", obj, dry_run)

    def update_status(self, obj):
        return self._next("update_status", obj)

    def delete(self, name, dry_run=None, propagation_policy=None):
        self._next("delete", name, dry_run, propagation_policy)

    def delete_collection(self):
        self._next("delete_collection")

    def get(self, name):
        return self._next("get", name)

    def list(self):
        return self._next("list")

    def watch(self, kind="", api_version="", field_selector=""):
        return self._next("watch", kind, api_version, field_selector)


def fix_obj():
    return Unstructured(
        {
            "metadata": {"name": "test-obj", "namespace": "test-namespace"},
            "spec": {
                "test": "me",
                "subscriber": {
                    "ref": {
                        "kind": "Service",
                        "name": "test-function-name",
                        "namespace": "test-namespace",
                    }
                },
            },
        }
    )


def failing(message):
    def callback(value, error):
        raise RuntimeError(message)

    return callback


def never(obj):
    return False


def methods(client):
    return [call[0] for call in client.calls]


OWNERS = [OwnerReference(kind="Function", uid="123")]


def test_contains_none():
    assert contains(None, "test-name") is False


def test_contains_found():
    assert contains([fix_obj()], "test-obj") is True


def test_contains_missing():
    assert contains([fix_obj()], "other") is False


def test_merge_map_both_none():
    assert merge_map(None, None) is None


def test_merge_map_left_none_returns_right():
    assert merge_map(None, {"test": "me"}) == {"test": "me"}


def test_merge_map_right_overrides_left():
    left = {"a": "a1", "b": "b1"}
    result = merge_map(left, {"a": "a2", "c": "c2"})
    assert result == {"a": "a2", "b": "b1", "c": "c2"}
    assert result is left


def test_apply_subscriptions_wipe_error():
    client = FakeClient(list=[RuntimeError("list error")])
    with pytest.raises(RuntimeError, match="list error"):
        apply_subscriptions(client, never, [fix_obj()], ApplyOptions(owner_references=OWNERS))
    assert methods(client) == ["list"]


def test_apply_subscriptions_apply_error():
    client = FakeClient(list=[[]], get=[RuntimeError("get error")])
    with pytest.raises(RuntimeError, match="get error"):
        apply_subscriptions(client, never, [fix_obj()], ApplyOptions(owner_references=OWNERS))
    assert methods(client) == ["list", "get"]


def test_apply_subscriptions_post_callback_error():
    client = FakeClient(list=[[]], get=[fix_obj()])
    opts = ApplyOptions(
        owner_references=OWNERS,
        callbacks=Callbacks(post=[failing("test error")]),
    )
    with pytest.raises(RuntimeError, match="test error"):
        apply_subscriptions(client, never, [fix_obj()], opts)


def test_apply_subscriptions_pre_callback_error():
    client = FakeClient(list=[[]])
    opts = ApplyOptions(
        owner_references=OWNERS,
        callbacks=Callbacks(pre=[failing("pre callback error")]),
    )
    with pytest.raises(RuntimeError, match="pre callback error"):
        apply_subscriptions(client, never, [fix_obj()], opts)
    assert methods(client) == ["list"]


def test_apply_subscriptions_applies_and_waits():
    item = fix_obj()
    seen = []
    client = FakeClient(
        list=[[]],
        get=[fix_obj()],
        watch=[[WatchEvent(EventType.ADDED, fix_obj())]],
    )
    opts = ApplyOptions(
        wait_for_apply=True,
        owner_references=OWNERS,
        callbacks=Callbacks(post=[lambda value, error: seen.append(value.status_type)]),
    )
    apply_subscriptions(client, never, [item], opts)
    assert methods(client) == ["list", "get", "watch"]
    assert item.owner_references == OWNERS
    assert seen == [StatusType.SKIPPED]


def test_apply_subscriptions_wipes_stale_subscriptions_first():
    stale = Unstructured({"metadata": {"name": "stale", "namespace": "test-namespace"}})
    client = FakeClient(list=[[stale]], delete=[None], get=[fix_obj()])
    apply_subscriptions(
        client,
        lambda obj: obj["metadata"]["name"] == "stale",
        [fix_obj()],
        ApplyOptions(),
    )
    assert methods(client) == ["list", "delete", "get"]
    assert client.calls[1][1] == "stale"
    assert client.calls[1][3] == DeletionPropagation.BACKGROUND


def test_delete_subscriptions_delete_error():
    client = FakeClient(delete=[RuntimeError("delete error")])
    opts = DeleteOptions(deletion_propagation=DeletionPropagation.ORPHAN)
    with pytest.raises(RuntimeError, match="delete error"):
        delete_subscriptions(client, [fix_obj()], opts)


def test_delete_subscriptions_post_callback_error():
    client = FakeClient(delete=[None])
    opts = DeleteOptions(
        deletion_propagation=DeletionPropagation.ORPHAN,
        callbacks=Callbacks(post=[failing("test error")]),
    )
    with pytest.raises(RuntimeError, match="test error"):
        delete_subscriptions(client, [fix_obj()], opts)
    assert methods(client) == ["delete"]


def test_delete_subscriptions_pre_callback_error():
    client = FakeClient()
    opts = DeleteOptions(
        deletion_propagation=DeletionPropagation.ORPHAN,
        callbacks=Callbacks(pre=[failing("test error")]),
    )
    with pytest.raises(RuntimeError, match="test error"):
        delete_subscriptions(client, [fix_obj()], opts)
    assert client.calls == []


def test_delete_subscriptions_deletes_with_given_propagation():
    client = FakeClient(delete=[None])
    opts = DeleteOptions(deletion_propagation=DeletionPropagation.ORPHAN)
    delete_subscriptions(client, [fix_obj()], opts)
    assert client.calls == [("delete", "test-obj", [], DeletionPropagation.ORPHAN)]