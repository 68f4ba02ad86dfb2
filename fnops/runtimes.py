"""Container settings for running a function locally in each runtime."""

from __future__ import annotations

from enum import Enum
from typing import Union

SERVER_PORT = "8080"
KUBELESS_PATH = "/kubeless"

NODEJS_PATH = "NODE_PATH=$(KUBELESS_INSTALL_VOLUME)/node_modules"
NODEJS_DEBUG_ENDPOINT = "9229"

PYTHON38_PATH = (
    "PYTHONPATH=$(KUBELESS_INSTALL_VOLUME)/lib.python3.8/site-packages:$(KUBELESS_INSTALL_VOLUME)"
)
PYTHON38_HOT_DEPLOY = "CHERRYPY_RELOADED=true"
PYTHON38_DEBUG_ENDPOINT = "5678"

_NPM_INSTALL = "/kubeless-npm-install.sh"
_PIP_INSTALL = "pip install -r $KUBELESS_INSTALL_VOLUME/requirements.txt"
_NODEMON = "npx nodemon --watch /kubeless/*.js /kubeless_rt/kubeless.js"


class Runtime(str, Enum):
    NODEJS12 = "nodejs12"
    NODEJS10 = "nodejs10"
    PYTHON38 = "python38"

    def __str__(self) -> str:
        return self.value


RuntimeLike = Union[Runtime, str]

_NODEJS = (Runtime.NODEJS12, Runtime.NODEJS10)


def _name(runtime: RuntimeLike) -> str:
    return runtime.value if isinstance(runtime, Runtime) else str(runtime)


def _known(runtime: RuntimeLike) -> Runtime | None:
    try:
        return Runtime(_name(runtime))
    except ValueError:
        return None


def _runtime_envs(runtime: RuntimeLike, hot_deploy: bool) -> list[str]:
    if runtime == Runtime.PYTHON38:
        envs = [PYTHON38_PATH]
        if hot_deploy:
            envs.append(PYTHON38_HOT_DEPLOY)
        return envs
    return [NODEJS_PATH]


def container_envs(runtime: RuntimeLike, hot_deploy: bool = False) -> list[str]:
    """Environment variables for the runtime container."""
    return [
        f"KUBELESS_INSTALL_VOLUME={KUBELESS_PATH}",
        f"FUNC_RUNTIME={_name(runtime)}",
        "FUNC_HANDLER=main",
        "MOD_NAME=handler",
        "FUNC_PORT=8080",
        *_runtime_envs(runtime, hot_deploy),
    ]


def runtime_debug_port(runtime: RuntimeLike) -> str:
    """Port the runtime's debugger listens on."""
    if runtime == Runtime.PYTHON38:
        return PYTHON38_DEBUG_ENDPOINT
    return NODEJS_DEBUG_ENDPOINT


def container_commands(
    runtime: RuntimeLike, debug: bool = False, hot_deploy: bool = False
) -> list[str]:
    """Shell commands that install dependencies and start the function."""
    if runtime in _NODEJS:
        if hot_deploy and debug:
            run = "npx nodemon --watch /kubeless/*.js --inspect=0.0.0.0 --exitcrash kubeless.js "
        elif hot_deploy:
            run = _NODEMON
        elif debug:
            run = "node --inspect=0.0.0.0 kubeless.js "
        else:
            run = "node kubeless.js"
        return [_NPM_INSTALL, run]
    if runtime == Runtime.PYTHON38:
        if debug:
            return [
                _PIP_INSTALL,
                "pip install debugpy",
                "python -m debugpy --listen 0.0.0.0:5678 kubeless.py",
            ]
        return [_PIP_INSTALL, "python kubeless.py"]
    if hot_deploy:
        return [_NPM_INSTALL, _NODEMON]
    return [_NPM_INSTALL, "node kubeless.js"]


_IMAGES = {
    Runtime.NODEJS12: "eu.gcr.io/kyma-project/function-runtime-nodejs12:4bed80da",
    Runtime.NODEJS10: "eu.gcr.io/kyma-project/function-runtime-nodejs10:4bed80da",
    Runtime.PYTHON38: "eu.gcr.io/kyma-project/function-runtime-python38:4bed80da",
}

_USERS = {
    Runtime.NODEJS12: "1000",
    Runtime.NODEJS10: "1000",
    Runtime.PYTHON38: "root",
}


def container_image(runtime: RuntimeLike) -> str:
    """Image that runs functions of the runtime."""
    known = _known(runtime)
    return _IMAGES[known if known is not None else Runtime.NODEJS12]


def container_user(runtime: RuntimeLike) -> str:
    """User the runtime container runs as."""
    known = _known(runtime)
    return _USERS[known if known is not None else Runtime.NODEJS12]