"""Running a function's runtime container through a Docker engine client."""

from __future__ import annotations

import json
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Optional, TextIO

from fnops.runtimes import KUBELESS_PATH

Log = Callable[..., None]


class ImageNotFoundError(Exception):
    """The image a container is to be created from is not present locally."""


@dataclass
class RunOpts:
    """What to run and how to expose it."""

    ports: dict[str, str] = field(default_factory=dict)
    envs: list[str] = field(default_factory=list)
    container_name: str = ""
    image: str = ""
    work_dir: str = ""
    commands: list[str] = field(default_factory=list)
    user: str = ""


class DockerClient(ABC):
    """The engine operations needed to run a container."""

    @abstractmethod
    def container_create(
        self, config: dict[str, Any], host_config: dict[str, Any], name: str
    ) -> str:
        """Create a container and return its id; raise ImageNotFoundError if the image is missing."""

    @abstractmethod
    def container_start(self, container_id: str) -> None:
        """Start a created container."""

    @abstractmethod
    def container_attach(
        self, container_id: str, stdout: bool = True, stderr: bool = True, stream: bool = True
    ) -> BinaryIO:
        """Attach to a container and return a readable binary stream of its output."""

    @abstractmethod
    def container_stop(self, container_id: str, timeout: Optional[float] = None) -> None:
        """Stop a running container."""

    @abstractmethod
    def image_pull(self, image: str) -> BinaryIO:
        """Pull an image and return the stream of JSON progress messages."""


def port_set(ports: Mapping[str, str]) -> dict[str, dict[str, Any]]:
    """Container ports to expose."""
    return {port: {} for port in ports}


def port_map(ports: Mapping[str, str]) -> dict[str, list[dict[str, str]]]:
    """Bindings of container ports to host ports."""
    return {container: [{"HostPort": host}] for container, host in ports.items()}


def _display_message(message: dict[str, Any], out: TextIO) -> None:
    detail = message.get("errorDetail")
    if detail or message.get("error"):
        text = detail.get("message") if isinstance(detail, dict) else None
        raise RuntimeError(text or message.get("error") or "image pull failed")
    if message.get("id"):
        out.write(f"{message['id']}: ")
    if message.get("stream"):
        out.write(str(message["stream"]))
        return
    status = str(message.get("status", ""))
    progress = message.get("progress")
    out.write(f"{status} {progress}\n" if progress else f"{status}\n")


def display_json_messages(stream: BinaryIO, out: TextIO) -> None:
    """Write a stream of engine JSON messages to out; raise on bad JSON or a reported error."""
    raw = stream.read()
    text = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else str(raw)
    decoder = json.JSONDecoder()
    position = 0
    while True:
        while position < len(text) and text[position].isspace():
            position += 1
        if position >= len(text):
            return
        message, position = decoder.raw_decode(text, position)
        if not isinstance(message, dict):
            raise ValueError(f"unexpected message: {message!r}")
        _display_message(message, out)


def _pull_and_create(
    client: DockerClient,
    config: dict[str, Any],
    host_config: dict[str, Any],
    name: str,
    out: TextIO,
) -> str:
    try:
        return client.container_create(config, host_config, name)
    except ImageNotFoundError:
        pass
    stream = client.image_pull(config["Image"])
    try:
        display_json_messages(stream, out)
    finally:
        stream.close()
    return client.container_create(config, host_config, name)


def run_container(client: DockerClient, opts: RunOpts) -> str:
    """Create (pulling the image if needed) and start a container; return its id."""
    config = {
        "Env": list(opts.envs),
        "ExposedPorts": port_set(opts.ports),
        "Image": opts.image,
        "Cmd": ["/bin/sh", "-c", ";".join(opts.commands)],
        "User": opts.user,
    }
    host_config = {
        "PortBindings": port_map(opts.ports),
        "AutoRemove": True,
        "Mounts": [{"Type": "bind", "Source": opts.work_dir, "Target": KUBELESS_PATH}],
    }
    container_id = _pull_and_create(client, config, host_config, opts.container_name, sys.stdout)
    client.container_start(container_id)
    return container_id


def follow_run(client: DockerClient, container_id: str, log: Log) -> None:
    """Pass each complete output line of the container to log until the output ends."""
    reader = client.container_attach(container_id, stdout=True, stderr=True, stream=True)
    try:
        for line in iter(reader.readline, b""):
            if not line.endswith(b"\n"):
                break
            log(line.decode("utf-8", errors="replace"))
    finally:
        reader.close()


def stop(client: DockerClient, container_id: str, log: Log) -> Callable[[], None]:
    """Return a function that stops the container, logging what it does."""

    def remove() -> None:
        log(f"\r- Removing container {container_id}...\n")
        try:
            client.container_stop(container_id, None)
        except Exception as exc:
            log(exc)

    return remove