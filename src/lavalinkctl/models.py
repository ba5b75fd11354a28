"""Shared domain models for lavalinkctl."""

import shlex
from dataclasses import dataclass
from typing import List, Optional, Tuple

DEFAULT_CONTAINER_NAME = "musicbot2-lavalink"
DEFAULT_CONTAINER_IMAGE = "fredboat/lavalink:master"
DEFAULT_SERVER_PORT = "2223"
DEFAULT_SERVER_ADDRESS = "0.0.0.0"
DEFAULT_SERVER_PASSWORD = ""

SUPPORTED_RUNTIMES = ("podman", "docker")
FALLBACK_RUNTIME = "docker"


@dataclass(frozen=True)
class ResolvedConfig:
    """Sidecar settings after env files and process environment are layered."""

    project_root: str
    container_name: str = DEFAULT_CONTAINER_NAME
    container_image: str = DEFAULT_CONTAINER_IMAGE
    interactive_mode: Optional[str] = None
    server_port: str = DEFAULT_SERVER_PORT
    server_address: str = DEFAULT_SERVER_ADDRESS
    server_password: str = DEFAULT_SERVER_PASSWORD
    container_runtime_override: Optional[str] = None


@dataclass(frozen=True)
class RuntimeChoice:
    name: str
    source: str


@dataclass(frozen=True)
class Invocation:
    verb: str
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RuntimeCommand:
    """Final runtime argv, kept as discrete tokens."""

    tokens: Tuple[str, ...]

    @property
    def argv(self) -> List[str]:
        return list(self.tokens)

    @property
    def executable(self) -> str:
        return self.tokens[0]

    def shell_preview(self) -> str:
        return " ".join(shlex.quote(token) for token in self.tokens)
