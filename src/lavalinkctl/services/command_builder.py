"""Runtime command construction for the sidecar lifecycle verbs."""

import os
from typing import List, Sequence

from lavalinkctl.models import ResolvedConfig, RuntimeChoice, RuntimeCommand

CONFIG_FILE_RELATIVE_PATH = os.path.join("lavalink", "application.yml")
CONTAINER_CONFIG_PATH = "/opt/Lavalink/application.yml"

INTERACTIVE_FLAGS = ("--interactive", "--tty")
DETACHED_FLAGS = ("--detach",)


class CommandBuilder:
    """Builds runtime argv token lists for ``up``, ``down`` and ``logs``."""

    def __init__(self, config: ResolvedConfig, runtime: RuntimeChoice):
        self.config = config
        self.runtime = runtime

    def config_file_path(self) -> str:
        return os.path.join(self.config.project_root, CONFIG_FILE_RELATIVE_PATH)

    def interactivity_flags(self) -> List[str]:
        mode = self.config.interactive_mode
        if mode == "true":
            return list(INTERACTIVE_FLAGS)
        if mode == "false":
            return list(DETACHED_FLAGS)
        # Unset or unrecognized: leave it to the runtime default.
        return []

    def up(self, passthrough: Sequence[str] = ()) -> RuntimeCommand:
        config = self.config
        tokens = [
            self.runtime.name,
            "run",
            "--rm",
            "--env",
            f"SERVER_PORT={config.server_port}",
            "--env",
            f"SERVER_ADDRESS={config.server_address}",
            "--env",
            f"LAVALINK_SERVER_PASSWORD={config.server_password}",
            "--network",
            "host",
            "--volume",
            f"{self.config_file_path()}:{CONTAINER_CONFIG_PATH}",
            "--name",
            config.container_name,
        ]
        tokens.extend(self.interactivity_flags())
        tokens.extend(passthrough)
        tokens.append(config.container_image)
        return RuntimeCommand(tuple(tokens))

    def down(self, passthrough: Sequence[str] = ()) -> RuntimeCommand:
        tokens = [self.runtime.name, "rm", "-f", *passthrough, self.config.container_name]
        return RuntimeCommand(tuple(tokens))

    def logs(self, passthrough: Sequence[str] = ()) -> RuntimeCommand:
        tokens = [self.runtime.name, "logs", *passthrough, self.config.container_name]
        return RuntimeCommand(tuple(tokens))
