import logging
from typing import Optional

from .errors import SidecarError, UsageError
from .models import Invocation, ResolvedConfig, RuntimeChoice, RuntimeCommand
from .services.command_builder import CommandBuilder
from .services.config_loader import ConfigLoader
from .services.process_launcher import ProcessLauncher
from .services.runtime_selector import RuntimeSelector

logger = logging.getLogger("lavalinkctl")


class SidecarManager:
    VERBS = ("up", "down", "logs")

    def __init__(
        self,
        config: ResolvedConfig,
        runtime: RuntimeChoice,
        launcher: Optional[ProcessLauncher] = None,
    ):
        self.config = config
        self.runtime = runtime
        self.launcher = launcher or ProcessLauncher(logger=logger)
        self.command_builder = CommandBuilder(config=config, runtime=runtime)

    @classmethod
    def from_environment(
        cls,
        project_root: Optional[str] = None,
        launcher: Optional[ProcessLauncher] = None,
    ) -> "SidecarManager":
        config = ConfigLoader(project_root=project_root, logger=logger).resolve()
        runtime = RuntimeSelector(logger=logger).select(config.container_runtime_override)
        return cls(config=config, runtime=runtime, launcher=launcher)

    def build_command(self, invocation: Invocation) -> RuntimeCommand:
        if invocation.verb not in self.VERBS:
            raise UsageError(
                f"Unknown command '{invocation.verb}'. Expected one of: {', '.join(self.VERBS)}."
            )

        handler = getattr(self.command_builder, invocation.verb)
        return handler(invocation.args)

    def run(self, invocation: Invocation) -> int:
        command = self.build_command(invocation)
        logger.debug(
            "Dispatching '%s' via %s (%s)",
            invocation.verb,
            self.runtime.name,
            self.runtime.source,
        )
        return self.launcher.exec(command)


__all__ = ["SidecarManager", "SidecarError", "UsageError"]
