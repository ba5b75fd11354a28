"""Hands control of the process over to the container runtime."""

import os
import subprocess
import sys

from lavalinkctl.errors import RuntimeNotFoundError, SidecarError
from lavalinkctl.errors_catalog import actionable_error
from lavalinkctl.models import RuntimeCommand


class ProcessLauncher:
    """Replaces the current process with a runtime command.

    On POSIX the runtime takes over the process through ``os.execvp`` and
    this call never returns. Windows has no exec primitive that keeps the
    parent's identity, so the command is spawned with inherited stdio and its
    exit status is returned for the caller to exit with.
    """

    def __init__(self, logger, os_module=os, subprocess_module=subprocess):
        self.logger = logger
        self.os = os_module
        self.subprocess = subprocess_module

    def exec(self, command: RuntimeCommand) -> int:
        argv = command.argv
        self.logger.debug("Executing: %s", command.shell_preview())

        sys.stdout.flush()
        sys.stderr.flush()

        try:
            if self.os.name == "nt":
                return self.subprocess.run(argv, check=False).returncode
            self.os.execvp(argv[0], argv)
        except FileNotFoundError as exc:
            raise RuntimeNotFoundError(
                actionable_error("runtime_not_found", runtime=command.executable)
            ) from exc
        except OSError as exc:
            raise SidecarError(
                actionable_error("exec_failed", runtime=command.executable, reason=str(exc))
            ) from exc

        # Only reachable when execvp is stubbed out.
        return 0
