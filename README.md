# fnops

Apply and delete serverless function resources through a resource client,
and build the settings for running a function in a local container.

## Contents

- `fnops.client`: the resource types. `Unstructured` is a resource held
  as a nested dict. It has properties for `api_version`, `kind`, `name`,
  `namespace`, `uid`, `resource_version` and `owner_references`, plus
  `set_owner_references()` and `deep_copy()`. The module also has
  `OwnerReference`, `GroupVersionResource`, the errors `NotFoundError`,
  `AlreadyExistsError` and `ConflictError`, and `WatchEvent` /
  `EventType`. `Client` is the abstract interface for one collection of
  resources.
- `fnops.status`: `StatusType` (`created`, `updated`, `skipped`,
  `applyFailed`, `deleteFailed`, `deleted`, or `unknown` for any other
  value). It also has `PostStatusEntry` with `to_owner_reference()`,
  `Status.get_owner_references()`, and one `new_*` constructor for each
  outcome.
- `fnops.operator`: `GenericOperator(client, *items)` works through its
  items one at a time.
  - `apply(ApplyOptions)` creates each item, updates it if its `spec`
    differs, or otherwise skips it. A `ConflictError` on update is retried
    up to five times. With `wait_for_apply` it waits for an `ADDED` watch
    event; `wait_timeout` sets a limit on that wait.
  - `delete(DeleteOptions)` deletes each item.
  - `Callbacks.pre` run before each item and `Callbacks.post` run after
    it. A callback stops the operation by raising or by returning an
    exception.
  - The lower-level functions are `apply_object`, `delete_object`,
    `wait_for_object`, `wipe_removed` and `fire_callbacks`.
- `fnops.subscription_operator`: `apply_subscriptions()` first deletes the
  stored resources that a predicate selects, then applies the given items.
  It also has `delete_subscriptions()`, `contains()` and `merge_map()`.
- `fnops.manager`: `Manager.add_parent(obj, children)` and
  `Manager.do(ManagerOptions)` apply each parent and then its children.
  With `set_owner_references=True` the children receive owner references
  to the resources their parent applied. With `on_error=OnError.PURGE`
  the parents are deleted (foreground propagation) when applying fails,
  and the error is then raised again. `dry_run=True` sends the `All`
  dry-run stage.
- `fnops.runtimes`: `Runtime` (`nodejs12`, `nodejs10`, `python38`). For a
  runtime, `container_envs`, `container_commands`, `container_image`,
  `container_user` and `runtime_debug_port` return the container
  environment, commands, image, user and debug port. An unknown runtime
  gets the Node.js defaults.
- `fnops.docker`: `run_container(client, RunOpts)` creates a container
  and starts it. If the client raises `ImageNotFoundError`, it pulls the
  image, prints the progress to standard output and creates the container
  again. `follow_run()` passes each complete output line to a log
  function. `stop()` returns a function that stops the container. Also
  here: `port_set()`, `port_map()` and `display_json_messages()`.
- `fnops.generator`: `generate_name(is_suffix=False)` returns names such
  as `clever-filip`. With `is_suffix=True` a single digit is appended.
- `fnops.map_client`: `MapClient` is an in-memory `Client`. It only sees
  resources whose namespace, kind and API version match its own. `watch`
  yields an `ADDED` event for each stored resource that matches.
- `fnops.loader`: `new_sample(name, namespace)` builds a minimal `Sample`
  resource. `load(stream)` and `from_string(text)` read multi-document
  YAML into `Unstructured` objects.

## Installation

```
pip install fnops
```

## Example

```python
from fnops.loader import new_sample
from fnops.manager import Manager, ManagerOptions
from fnops.map_client import MapClient
from fnops.operator import GenericOperator

client = MapClient(api_version="test.me.plz/v1alpha1", kind="Sample", namespace="test-ns")
manager = Manager()
manager.add_parent(
    GenericOperator(client, new_sample("parent", "test-ns")),
    [GenericOperator(client, new_sample("child", "test-ns"))],
)
manager.do(ManagerOptions(set_owner_references=True))
```

After this runs, the stored child's metadata holds an owner reference to
the parent, including the parent's uid.

## Command line

```
fnops-demo
```

This command applies a parent and three children to an in-memory client
with owner references turned on. It then prints every stored resource as
YAML, with `---` after each one. It exits with status 1 if applying
fails.

## What it does not do

- There is no client for a real cluster API. `Client` is only an
  interface, and `MapClient` is the only implementation included.
  `MapClient` ignores dry-run stages and propagation policies.
- There is no client for a real container engine. `DockerClient` is an
  interface that you must implement yourself before `run_container`,
  `follow_run` or `stop` can do anything.
- There is no command for initialising or synchronising a function
  workspace on disk.